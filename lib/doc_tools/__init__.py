from .documents import (
    get_page_count,
    page_ranges,
    create_sub_document,
    split_pdf,
)
from .conversion import convert_to_pdf, LibreOfficeConverter
