"""Thin wrapper around the ``ffmpeg`` CLI ensuring safe argument handling."""

from __future__ import annotations

from pathlib import Path

from ..config import Settings
from .process import ProcessResult, run_process


def transcode_args(input_path: Path, output_path: Path, codec_args: list[str]) -> list[str]:
    """Build the argument list for a single-input, audio-only transcode.

    Order: overwrite flag, input, drop video, codec options, destination.
    """
    return ["-y", "-i", str(input_path), "-vn", *codec_args, str(output_path)]


async def run_ffmpeg(settings: Settings, *args: str) -> ProcessResult:
    """Execute ``ffmpeg`` with the given arguments.

    Parameters
    ----------
    settings:
        Supplies the binary location and the process timeout.
    *args:
        Arguments passed directly to ``ffmpeg``.

    Raises
    ------
    convertkit.utils.process.ProcessError
        The binary is missing, exited non-zero or timed out.
    """

    return await run_process(settings.FFMPEG_PATH, list(args), timeout=settings.process_timeout)
