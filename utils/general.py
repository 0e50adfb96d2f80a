import os
import shutil

from config.settings import SUPPORTED_FILE_TYPES


def split_arr(arr, size):
    return [arr[i : i + size] for i in range(0, len(arr), size)]


def get_file_extension(location: str) -> str:
    """
    location -> file name, path or s3 location.

    return -> lowercased extension without the dot, "" if there is none.
    """

    base_name = os.path.basename(location.rstrip("/"))
    _, extension = os.path.splitext(base_name)

    return extension[1:].lower()


def is_valid_file_type(location: str) -> tuple[bool, str]:
    extension = get_file_extension(location)

    return extension in SUPPORTED_FILE_TYPES, f"application/{extension}"


def get_pdf_file_name(file_name: str | None, input_location: str) -> str:
    """
    Name of the normalized pdf: the stored file name when there is one,
    else the input's base name, with the extension swapped for .pdf.
    """

    name = os.path.basename((file_name or "").strip()) or os.path.basename(
        input_location.rstrip("/")
    )
    stem, _ = os.path.splitext(name)

    return f"{stem or 'document'}.pdf"


def remove_path(path: str) -> bool:
    """
    Best-effort removal of a temporary file or directory.

    return -> True if nothing is left at path.
    """

    try:
        if os.path.isdir(path):
            shutil.rmtree(path)
        elif os.path.exists(path):
            os.remove(path)

    except OSError as e:
        print(f"[cleanup] failed to delete {path}:", e)
        return False

    return True
