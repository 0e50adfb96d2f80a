from .general import (
    split_arr,
    get_file_extension,
    is_valid_file_type,
    get_pdf_file_name,
    remove_path,
)
