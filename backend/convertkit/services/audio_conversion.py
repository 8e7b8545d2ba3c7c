"""Audio transcoding helpers using FFmpeg."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ..exceptions import ConversionFailed, InvalidInput
from ..models.job import ConversionJob, StrategyName
from ..models.requests import AudioConvertParams
from ..utils.envelope import encode
from ..utils.ffmpeg import run_ffmpeg, transcode_args
from ..utils.process import ProcessError
from ..utils.storage import TemporaryStorage
from .base import ConversionStrategy

# Get a logger for this module
logger = logging.getLogger(__name__)

ALLOWED_INPUT_TYPES = {
    "audio/flac",
    "audio/x-flac",
    "audio/aac",
    "audio/x-aac",
    "audio/wav",
    "audio/x-wav",
    "audio/ogg",
    "audio/x-ogg",
    "audio/alac",
}
ALLOWED_OUTPUT_FORMATS = ("mp3", "aac", "wav", "ogg")

LOSSY_CODECS = {
    "mp3": "libmp3lame",
    "aac": "aac",
    "ogg": "libvorbis",
}


def codec_args(target_format: str, bitrate: str) -> list[str]:
    """FFmpeg codec options for ``target_format``.

    Lossy formats take the bitrate as given; WAV is always 16-bit PCM.
    """
    if target_format == "wav":
        return ["-codec:a", "pcm_s16le"]
    return ["-codec:a", LOSSY_CODECS[target_format], "-b:a", bitrate]


def mime_type_for(target_format: str) -> str:
    return "audio/mpeg" if target_format == "mp3" else f"audio/{target_format}"


class AudioTranscodeStrategy(ConversionStrategy):
    name = StrategyName.AUDIO_TRANSCODE
    failure_message = "Audio conversion failed"

    def validate(self, job: ConversionJob) -> None:
        payload = job.payload or {}
        raw_format = payload.get("targetFormat")
        raw_bitrate = payload.get("bitrate")
        target_format = str("mp3" if raw_format is None else raw_format).lower()
        bitrate = str("192k" if raw_bitrate is None else raw_bitrate)

        if target_format not in ALLOWED_OUTPUT_FORMATS:
            logger.warning("Rejected audio conversion to unsupported format '%s'", target_format)
            raise InvalidInput("Invalid target format")
        if job.upload.content_type not in ALLOWED_INPUT_TYPES:
            logger.warning("Rejected audio input with MIME type '%s'", job.upload.content_type)
            raise InvalidInput("Unsupported input audio format")

        job.params = AudioConvertParams(target_format=target_format, bitrate=bitrate)

    async def execute(self, job: ConversionJob, storage: TemporaryStorage) -> BaseModel:
        params: AudioConvertParams = job.params
        staged = job.input

        output_path = storage.allocate_output_path(params.target_format)
        # Registered before ffmpeg runs so a partial file is released too.
        job.outputs.append(output_path)

        args = transcode_args(staged.path, output_path, codec_args(params.target_format, params.bitrate))
        logger.info(
            "Transcoding '%s' to %s (bitrate=%s)", staged.original_name, params.target_format, params.bitrate
        )
        try:
            await run_ffmpeg(self.settings, *args)
        except ProcessError as exc:
            raise ConversionFailed(self.failure_message, str(exc)) from exc

        converted = await run_in_threadpool(Path(output_path).read_bytes)
        logger.info("Transcoded '%s' into %d bytes", staged.original_name, len(converted))

        return encode(
            converted,
            mime_type_for(params.target_format),
            f"{Path(staged.original_name).stem}.{params.target_format}",
            targetFormat=params.target_format,
            bitrate=params.bitrate,
            size=len(converted),
        )
