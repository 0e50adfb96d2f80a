import os
import subprocess

from pathlib import Path

from lib.errors import ConversionFailed


def convert_to_pdf(
    input_path: str | Path,
    output_dir: str | Path,
    libreoffice_bin: str = "soffice",
    timeout: int = 300,
) -> Path:
    """
    Converts an office document to pdf with a headless LibreOffice.

    input_path -> document with its real extension (docx, pptx, ...).
    output_dir -> directory the converted pdf is written into.

    return -> path of the converted pdf.
    """

    input_path = Path(input_path)
    os.makedirs(output_dir, exist_ok=True)
    output_path = Path(output_dir) / f"{input_path.stem}.pdf"
    # soffice locks its user profile; concurrent workers each need their own.
    profile_dir = (Path(output_dir) / "lo_profile").resolve()

    command = [
        libreoffice_bin,
        f"-env:UserInstallation={profile_dir.as_uri()}",
        "--headless",
        "--convert-to",
        "pdf",
        "--outdir",
        str(output_dir),
        str(input_path),
    ]

    print(f"[convert] {input_path.name} -> {output_path.name}")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise ConversionFailed(f"Converter not found: {libreoffice_bin}") from e
    except subprocess.TimeoutExpired as e:
        raise ConversionFailed(
            f"Conversion of {input_path.name} timed out after {timeout}s"
        ) from e

    if result.returncode != 0:
        raise ConversionFailed(
            f"Conversion of {input_path.name} failed ({result.returncode}): "
            f"{result.stderr.strip()}"
        )

    if not output_path.exists():
        raise ConversionFailed(f"Conversion of {input_path.name} produced no pdf")

    return output_path


class LibreOfficeConverter:
    def __init__(self, libreoffice_bin: str = "soffice", timeout: int = 300):
        self.libreoffice_bin = libreoffice_bin
        self.timeout = timeout

    def convert(self, input_path: Path, output_dir: Path) -> Path:
        return convert_to_pdf(
            input_path,
            output_dir,
            libreoffice_bin=self.libreoffice_bin,
            timeout=self.timeout,
        )
