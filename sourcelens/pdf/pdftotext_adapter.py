import shutil
import subprocess
from pathlib import Path

from sourcelens.pdf.base import BasePdfExtractor
from sourcelens.pdf.exceptions import PdfExtractionError, PdfToolUnavailableError


class PdfToTextAdapter(BasePdfExtractor):
    """Extracts text with poppler's ``pdftotext`` command-line tool."""

    name = "pdftotext"

    def __init__(self, *, binary: str = "pdftotext", timeout_seconds: int = 60) -> None:
        self._binary = binary
        self._timeout_seconds = timeout_seconds

    def extract(self, pdf_path: Path) -> str:
        executable = shutil.which(self._binary)
        if executable is None:
            raise PdfToolUnavailableError(f"'{self._binary}' is not installed")

        output_path = pdf_path.with_suffix(".txt")
        try:
            completed = subprocess.run(
                [executable, "-layout", "-enc", "UTF-8", str(pdf_path), str(output_path)],
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise PdfExtractionError(
                f"pdftotext timed out after {self._timeout_seconds}s"
            ) from exc
        except OSError as exc:
            raise PdfToolUnavailableError(f"pdftotext could not be started: {exc}") from exc

        if completed.returncode != 0:
            raise PdfExtractionError(
                f"pdftotext exited with code {completed.returncode}: "
                f"{completed.stderr.strip()}"
            )
        if not output_path.exists():
            raise PdfExtractionError("pdftotext produced no output file")
        text = output_path.read_text(encoding="utf-8", errors="replace")
        # pdftotext separates pages with form feeds
        return text.replace("\f", "\n\n").strip()
