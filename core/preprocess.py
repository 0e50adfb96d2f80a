import os

from pathlib import Path

from core.interfaces import ArtifactStore, Converter, TaskStore
from lib.doc_tools import get_page_count
from lib.errors import UnsupportedFileType
from type_defs.payloads import ExtractionPayload
from type_defs.shared import PreprocessResult
from utils.general import get_pdf_file_name, is_valid_file_type


def validate_file_type(input_location: str) -> str:
    """
    return -> the extension of input_location, if it is in the allow-list.
    """

    is_valid, detected_mime_type = is_valid_file_type(input_location)
    if not is_valid:
        raise UnsupportedFileType(f"Not a valid file type: {detected_mime_type}")

    return detected_mime_type.split("/")[1]


def get_pdf_location(
    bucket: str, extraction_item: ExtractionPayload, file_name: str | None
) -> str:
    pdf_file_name = get_pdf_file_name(file_name, extraction_item.input_location)

    return (
        f"s3://{bucket}/{extraction_item.user_id}/{extraction_item.task_id}/"
        f"{pdf_file_name}"
    )


def preprocess(
    extraction_item: ExtractionPayload,
    file_name: str | None,
    work_dir: str | Path,
    bucket: str,
    artifact_store: ArtifactStore,
    converter: Converter,
    task_store: TaskStore,
) -> PreprocessResult:
    """
    Normalizes the task's input into a pdf.

    Validates the extension before anything is downloaded, converts office
    documents, counts pages, uploads the normalized pdf and records its
    location, page count and input type on the task row in one update.

    Parameters
    ----------
    extraction_item : ExtractionPayload
        The task being processed.

    file_name : str or None
        Original file name stored on the task row.

    work_dir : str or Path
        Task-scoped temporary directory. Everything written here is
        removed by the caller.

    bucket : str
        Bucket for the normalized pdf.

    Returns
    -------
    PreprocessResult
        Local pdf path, its s3 location, page count and input extension.
    """

    extension = validate_file_type(extraction_item.input_location)

    work_dir = Path(work_dir)
    os.makedirs(work_dir, exist_ok=True)

    input_path = artifact_store.download(
        extraction_item.input_location, work_dir / f"input.{extension}"
    )

    if extension == "pdf":
        pdf_path = Path(input_path)
    else:
        pdf_path = converter.convert(Path(input_path), work_dir / "converted")

    page_count = get_page_count(pdf_path)
    pdf_location = get_pdf_location(bucket, extraction_item, file_name)

    artifact_store.upload(pdf_path, pdf_location)

    task_store.update_task(
        extraction_item.task_id,
        extraction_item.user_id,
        {
            "pdf_location": pdf_location,
            "page_count": page_count,
            "input_file_type": extension,
        },
    )

    return PreprocessResult(
        pdf_path=pdf_path,
        pdf_location=pdf_location,
        page_count=page_count,
        extension=extension,
    )
