import fitz
import os

from pathlib import Path

from lib.errors import CorruptDocument, SplitFailed
from utils.general import split_arr


def get_page_count(file_path: str | Path) -> int:
    try:
        doc = fitz.open(str(file_path))
    except Exception as e:
        raise CorruptDocument(f"Failed to get page count: {e}") from e

    try:
        if not doc.is_pdf:
            raise CorruptDocument(f"Failed to get page count: {file_path} is not a pdf")

        page_count = len(doc)
    finally:
        doc.close()

    if page_count == 0:
        raise CorruptDocument(f"Failed to get page count: {file_path} has no pages")

    return page_count


def page_ranges(page_count: int, batch_size: int) -> list[tuple[int, int]]:
    """
    page_count -> total pages of the document.
    batch_size -> max pages per range.

    return -> inclusive, 0-based (start_page, end_page) ranges, in order.
    """

    if batch_size < 1:
        raise SplitFailed(f"Batch size must be positive, got {batch_size}")

    return [
        (pages[0], pages[-1]) for pages in split_arr(list(range(page_count)), batch_size)
    ]


def create_sub_document(
    src_doc: fitz.Document, start_page: int, end_page: int, output_path: str
) -> str:
    """
    start_page -> first page, included in sub document.
    end_page -> last page, included in sub document.
    """

    sub_doc = fitz.open()

    try:
        sub_doc.insert_pdf(src_doc, from_page=start_page, to_page=end_page)
        sub_doc.save(output_path)
    finally:
        sub_doc.close()

    return output_path


def split_pdf(
    file_path: str | Path, batch_size: int | None, output_dir: str | Path
) -> list[Path]:
    """
    Splits a pdf into consecutive batches of at most batch_size pages.

    Without a batch size the document is returned as the single batch,
    untouched. Batch order is page order; batch i starts at page
    i * batch_size.
    """

    if batch_size is None:
        return [Path(file_path)]

    try:
        src_doc = fitz.open(str(file_path))
    except Exception as e:
        raise SplitFailed(f"Failed to open {file_path} for splitting: {e}") from e

    try:
        if len(src_doc) == 0:
            raise SplitFailed(f"Cannot split {file_path}: document has no pages")

        ranges = page_ranges(len(src_doc), batch_size)
        os.makedirs(output_dir, exist_ok=True)

        batches = []
        for i, (start_page, end_page) in enumerate(ranges):
            output_path = os.path.join(output_dir, f"batch_{i:04d}.pdf")
            create_sub_document(src_doc, start_page, end_page, output_path)
            batches.append(Path(output_path))

    except SplitFailed:
        raise
    except Exception as e:
        raise SplitFailed(f"Failed to split {file_path}: {e}") from e
    finally:
        src_doc.close()

    return batches
