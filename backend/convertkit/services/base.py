"""Common shape of a conversion strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from pydantic import BaseModel

from ..config import Settings
from ..models.job import ConversionJob, StrategyName
from ..utils.storage import TemporaryStorage


class ConversionStrategy(ABC):
    """Consume staged input + parameters, produce output + metadata.

    ``validate`` runs before anything is staged and must raise
    :class:`~convertkit.exceptions.InvalidInput` for bad requests.
    ``execute`` raises :class:`~convertkit.exceptions.ConversionFailed` when
    the collaborator fails; any other exception is translated by the
    pipeline using ``failure_message``.
    """

    name: ClassVar[StrategyName]
    requires_upload: ClassVar[bool] = True
    failure_message: ClassVar[str] = "Conversion failed"

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def staging_suffix(self, job: ConversionJob) -> str:
        """Suffix given to the staged copy of the upload."""
        return ""

    @abstractmethod
    def validate(self, job: ConversionJob) -> None:
        ...

    @abstractmethod
    async def execute(self, job: ConversionJob, storage: TemporaryStorage) -> BaseModel:
        ...
