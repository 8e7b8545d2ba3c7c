"""Request pipeline controller.

Every endpoint goes through :meth:`ConversionPipeline.run`::

    RECEIVED -> VALIDATED -> DISPATCHED -> SUCCEEDED | FAILED -> CLEANED

Validation happens before anything touches the staging directory.  Once a
file has been staged, the ``finally`` block releases it (and every output
path the strategy allocated) no matter how the job ended.  This is the
single place where non-domain exceptions are turned into
:class:`~convertkit.exceptions.ConversionFailed`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import UploadFile
from pydantic import BaseModel

from .exceptions import AppBaseException, ConversionFailed, InvalidInput
from .models.job import ConversionJob, JobState, StrategyName
from .services.registry import StrategyRegistry
from .utils.storage import TemporaryStorage

logger = logging.getLogger(__name__)


class ConversionPipeline:
    def __init__(self, registry: StrategyRegistry, storage: TemporaryStorage) -> None:
        self.registry = registry
        self.storage = storage

    def _transition(self, job: ConversionJob, state: JobState) -> None:
        logger.debug("Job %s [%s]: %s -> %s", job.id, job.strategy.value, job.state.value, state.value)
        job.state = state

    async def run(
        self,
        strategy_name: StrategyName,
        *,
        upload: Optional[UploadFile] = None,
        payload: Any = None,
    ) -> BaseModel:
        strategy = self.registry.get(strategy_name)
        job = ConversionJob(strategy=strategy_name, upload=upload, payload=payload)
        logger.info("Job %s received for strategy '%s'", job.id, strategy_name.value)

        if strategy.requires_upload and (upload is None or not upload.filename):
            logger.warning("Job %s rejected: no file uploaded", job.id)
            raise InvalidInput("No file uploaded")
        try:
            strategy.validate(job)
        except AppBaseException as exc:
            logger.warning("Job %s rejected: %s", job.id, exc.error)
            raise
        except Exception as exc:
            job.error = str(exc)
            self._transition(job, JobState.FAILED)
            logger.exception("Job %s failed during validation: %s", job.id, exc)
            raise ConversionFailed(strategy.failure_message, str(exc)) from exc
        self._transition(job, JobState.VALIDATED)

        try:
            if strategy.requires_upload:
                job.inputs.append(await self.storage.stage(upload, strategy.staging_suffix(job)))
            self._transition(job, JobState.DISPATCHED)
            result = await strategy.execute(job, self.storage)
        except AppBaseException as exc:
            job.error = str(exc)
            self._transition(job, JobState.FAILED)
            logger.error("Job %s failed: %s", job.id, exc)
            raise
        except Exception as exc:
            job.error = str(exc)
            self._transition(job, JobState.FAILED)
            logger.exception("Job %s failed with an unexpected error: %s", job.id, exc)
            raise ConversionFailed(strategy.failure_message, str(exc)) from exc
        else:
            self._transition(job, JobState.SUCCEEDED)
            logger.info("Job %s succeeded", job.id)
            return result
        finally:
            for path in job.staged_paths():
                self.storage.release(path)
            self._transition(job, JobState.CLEANED)
