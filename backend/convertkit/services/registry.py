"""Maps a strategy identifier to the object implementing it."""

from __future__ import annotations

from ..config import Settings
from ..models.job import StrategyName
from .audio_conversion import AudioTranscodeStrategy
from .base import ConversionStrategy
from .bmi import BmiStrategy
from .document_conversion import DocumentConversionStrategy
from .image_compression import ImageCompressionStrategy
from .qr_generation import QrGenerationStrategy


class StrategyRegistry:
    def __init__(self) -> None:
        self._strategies: dict[StrategyName, ConversionStrategy] = {}

    def register(self, strategy: ConversionStrategy) -> None:
        self._strategies[strategy.name] = strategy

    def get(self, name: StrategyName) -> ConversionStrategy:
        try:
            return self._strategies[name]
        except KeyError:
            raise LookupError(f"No strategy registered for '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._strategies


def build_default_registry(settings: Settings) -> StrategyRegistry:
    registry = StrategyRegistry()
    for strategy_cls in (
        DocumentConversionStrategy,
        ImageCompressionStrategy,
        QrGenerationStrategy,
        AudioTranscodeStrategy,
        BmiStrategy,
    ):
        registry.register(strategy_cls(settings))
    return registry
