import shutil
import subprocess
from pathlib import Path

from sourcelens.pdf.exceptions import PdfRenderError, PdfToolUnavailableError


class PdfToPpmRenderer:
    """Renders the first page of a PDF to PNG with poppler's ``pdftoppm``."""

    def __init__(
        self,
        *,
        binary: str = "pdftoppm",
        dpi: int = 200,
        timeout_seconds: int = 60,
    ) -> None:
        self._binary = binary
        self._dpi = dpi
        self._timeout_seconds = timeout_seconds

    def render_first_page(self, pdf_path: Path) -> Path:
        """Write ``<stem>-page1.png`` next to ``pdf_path`` and return its path.

        Raises:
            PdfToolUnavailableError: if ``pdftoppm`` is not installed.
            PdfRenderError: if rendering fails or times out.
        """
        executable = shutil.which(self._binary)
        if executable is None:
            raise PdfToolUnavailableError(f"'{self._binary}' is not installed")

        output_prefix = pdf_path.with_name(f"{pdf_path.stem}-page1")
        command = [
            executable,
            "-png",
            "-r",
            str(self._dpi),
            "-f",
            "1",
            "-l",
            "1",
            "-singlefile",
            str(pdf_path),
            str(output_prefix),
        ]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise PdfRenderError(f"pdftoppm timed out after {self._timeout_seconds}s") from exc
        except OSError as exc:
            raise PdfToolUnavailableError(f"pdftoppm could not be started: {exc}") from exc

        if completed.returncode != 0:
            raise PdfRenderError(
                f"pdftoppm exited with code {completed.returncode}: {completed.stderr.strip()}"
            )
        image_path = output_prefix.with_suffix(".png")
        if not image_path.exists():
            raise PdfRenderError("pdftoppm produced no image")
        return image_path
