"""DOCX <-> PDF conversion through a headless LibreOffice."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ..exceptions import ConversionFailed, InvalidInput
from ..models.job import ConversionJob, StrategyName
from ..models.requests import DocumentConvertParams, DocumentDirection
from ..utils.envelope import encode
from ..utils.process import ProcessError, run_process
from ..utils.storage import TemporaryStorage
from .base import ConversionStrategy

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# LibreOffice export filter per target extension.
EXPORT_FILTERS = {
    ".pdf": "pdf:writer_pdf_Export",
    ".docx": "docx:MS Word 2007 XML",
}


def soffice_args(input_path: Path, outdir: Path, profile_dir: Path, target_extension: str) -> list[str]:
    args = [
        f"-env:UserInstallation={profile_dir.resolve().as_uri()}",
        "--headless",
        "--norestore",
    ]
    if input_path.suffix.lower() == ".pdf":
        # Without this LibreOffice opens PDFs in Draw, which cannot export DOCX.
        args.append("--infilter=writer_pdf_import")
    args += ["--convert-to", EXPORT_FILTERS[target_extension], "--outdir", str(outdir), str(input_path)]
    return args


class DocumentConversionStrategy(ConversionStrategy):
    name = StrategyName.DOC_CONVERT

    def validate(self, job: ConversionJob) -> None:
        params = DocumentConvertParams(direction=DocumentDirection(job.payload["direction"]))
        extension = Path(job.upload.filename or "").suffix.lower()
        if extension != params.direction.source_extension:
            raise InvalidInput(f"Only {params.direction.source_extension} files are allowed")
        job.params = params

    def staging_suffix(self, job: ConversionJob) -> str:
        # LibreOffice names its output after the input stem and sniffs the suffix.
        return job.params.direction.source_extension

    async def execute(self, job: ConversionJob, storage: TemporaryStorage) -> BaseModel:
        direction: DocumentDirection = job.params.direction
        staged = job.input
        target = direction.target_extension

        output_path = staged.path.with_suffix(target)
        job.outputs.append(output_path)
        profile_dir = storage.allocate_directory("lo-profile")
        job.outputs.append(profile_dir)

        logger.info("Converting %s (%s) to %s", staged.original_name, direction.value, target)
        try:
            await run_process(
                self.settings.SOFFICE_PATH,
                soffice_args(staged.path, staged.path.parent, profile_dir, target),
                timeout=self.settings.process_timeout,
            )
        except ProcessError as exc:
            raise ConversionFailed(self.failure_message, exc.stderr.strip() or str(exc)) from exc

        if not output_path.exists():
            raise ConversionFailed(self.failure_message, f"LibreOffice produced no {target} output")

        data = await run_in_threadpool(output_path.read_bytes)
        file_name = f"{Path(staged.original_name).stem}{target}"
        return encode(data, MIME_TYPES[target], file_name)
