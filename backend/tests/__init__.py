# Ensure the `backend` directory is importable so `convertkit` resolves
from __future__ import annotations

import sys
from pathlib import Path

# Add the backend directory to PYTHONPATH so imports like `from convertkit.*` work
ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))

# Keep logs and staged files out of the working tree during tests unless overridden
import os
import tempfile

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "convertkit-test-logs"))
os.environ.setdefault("STAGING_DIR", os.path.join(tempfile.gettempdir(), "convertkit-test-staging"))
