import io
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from convertkit.config import Settings
from convertkit.exceptions import ConversionFailed, InvalidInput
from convertkit.models.job import ConversionJob, StrategyName
from convertkit.models.requests import DocumentDirection
from convertkit.services.document_conversion import DocumentConversionStrategy, soffice_args
from convertkit.utils.process import ProcessError, ProcessResult
from convertkit.utils.storage import TemporaryStorage


def _job(filename: str, direction: DocumentDirection) -> ConversionJob:
    upload = UploadFile(
        file=io.BytesIO(b"PK\x03\x04 docx body"),
        filename=filename,
        headers=Headers({"content-type": "application/octet-stream"}),
    )
    return ConversionJob(strategy=StrategyName.DOC_CONVERT, upload=upload, payload={"direction": direction})


async def fake_soffice(executable, args, timeout=None):
    """Write the file LibreOffice would have produced."""
    outdir = Path(args[args.index("--outdir") + 1])
    source = Path(args[-1])
    target = ".pdf" if args[args.index("--convert-to") + 1].startswith("pdf") else ".docx"
    (outdir / f"{source.stem}{target}").write_bytes(b"%PDF-1.7 converted" if target == ".pdf" else b"PK docx")
    return ProcessResult(returncode=0, stderr="")


@pytest.fixture
def strategy(tmp_path: Path) -> DocumentConversionStrategy:
    return DocumentConversionStrategy(Settings(STAGING_DIR=tmp_path, SOFFICE_PATH="soffice"))


@pytest.fixture
def storage(tmp_path: Path) -> TemporaryStorage:
    return TemporaryStorage(tmp_path / "staging", max_upload_bytes=0)


@pytest.mark.parametrize("filename", ["Report.DOCX", "report.docx"])
def test_validate_accepts_source_extension_case_insensitively(strategy, filename):
    job = _job(filename, DocumentDirection.DOCX_TO_PDF)
    strategy.validate(job)
    assert job.params.direction is DocumentDirection.DOCX_TO_PDF


def test_validate_rejects_wrong_extension(strategy):
    with pytest.raises(InvalidInput, match=r"Only \.docx files are allowed"):
        strategy.validate(_job("notes.txt", DocumentDirection.DOCX_TO_PDF))


def test_validate_rejects_pdf_for_pdf_to_docx_mismatch(strategy):
    with pytest.raises(InvalidInput, match=r"Only \.pdf files are allowed"):
        strategy.validate(_job("letter.docx", DocumentDirection.PDF_TO_DOCX))


def test_soffice_args_use_private_profile_and_pdf_import(tmp_path):
    args = soffice_args(tmp_path / "abc.pdf", tmp_path, tmp_path / "profile", ".docx")

    assert args[0].startswith("-env:UserInstallation=file://")
    assert "--headless" in args
    assert "--infilter=writer_pdf_import" in args
    assert args[args.index("--outdir") + 1] == str(tmp_path)
    assert args[args.index("--convert-to") + 1] == "docx:MS Word 2007 XML"
    assert args[-1] == str(tmp_path / "abc.pdf")


def test_soffice_args_for_docx_source_skip_pdf_import(tmp_path):
    args = soffice_args(tmp_path / "abc.docx", tmp_path, tmp_path / "profile", ".pdf")
    assert not any(arg.startswith("--infilter") for arg in args)
    assert args[args.index("--convert-to") + 1] == "pdf:writer_pdf_Export"


@pytest.mark.asyncio
async def test_execute_docx_to_pdf(strategy, storage):
    job = _job("Quarterly Report.docx", DocumentDirection.DOCX_TO_PDF)
    strategy.validate(job)
    job.inputs.append(await storage.stage(job.upload, strategy.staging_suffix(job)))

    with patch("convertkit.services.document_conversion.run_process", side_effect=fake_soffice) as mock_run:
        envelope = await strategy.execute(job, storage)

    assert mock_run.await_args.args[0] == "soffice"
    body = envelope.model_dump()
    assert body["fileName"] == "Quarterly Report.pdf"
    assert body["mimeType"] == "application/pdf"
    # The output file and the profile directory are handed back for cleanup.
    assert job.input.path.with_suffix(".pdf") in job.outputs
    assert len(job.outputs) == 2


@pytest.mark.asyncio
async def test_execute_surfaces_engine_diagnostics(strategy, storage):
    job = _job("a.docx", DocumentDirection.DOCX_TO_PDF)
    strategy.validate(job)
    job.inputs.append(await storage.stage(job.upload, strategy.staging_suffix(job)))

    error = ProcessError("soffice exited with code 1: Error: source file could not be loaded", returncode=1,
                         stderr="Error: source file could not be loaded\n")
    with patch("convertkit.services.document_conversion.run_process", side_effect=error):
        with pytest.raises(ConversionFailed) as excinfo:
            await strategy.execute(job, storage)

    assert excinfo.value.error == "Conversion failed"
    assert excinfo.value.details == "Error: source file could not be loaded"


@pytest.mark.asyncio
async def test_execute_fails_when_engine_writes_nothing(strategy, storage):
    job = _job("a.pdf", DocumentDirection.PDF_TO_DOCX)
    strategy.validate(job)
    job.inputs.append(await storage.stage(job.upload, strategy.staging_suffix(job)))

    with patch(
        "convertkit.services.document_conversion.run_process",
        return_value=ProcessResult(returncode=0, stderr=""),
    ):
        with pytest.raises(ConversionFailed, match="produced no .docx output"):
            await strategy.execute(job, storage)
