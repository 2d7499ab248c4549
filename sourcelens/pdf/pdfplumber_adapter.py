from pathlib import Path
from typing import Any

import pdfplumber

from sourcelens.pdf.base import BasePdfExtractor
from sourcelens.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text in-process with pdfplumber, rebuilding the reading order.

    Words are grouped into lines by vertical position: a new line starts
    whenever ``top`` moves by more than ``line_break_threshold`` points.
    Words inside a line are ordered left to right.
    """

    name = "pdfplumber"

    def __init__(self, *, line_break_threshold: float = 3.0) -> None:
        self._line_break_threshold = line_break_threshold

    def extract(self, pdf_path: Path) -> str:
        try:
            with pdfplumber.open(str(pdf_path)) as pdf:
                pages = [self._page_text(page.extract_words()) for page in pdf.pages]
            return "\n\n".join(page for page in pages if page).strip()
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc

    def _page_text(self, words: list[dict[str, Any]]) -> str:
        lines = self.group_lines(words, self._line_break_threshold)
        return "\n".join(
            " ".join(word["text"] for word in line) for line in lines
        ).strip()

    @staticmethod
    def group_lines(
        words: list[dict[str, Any]], threshold: float
    ) -> list[list[dict[str, Any]]]:
        """Sort words top-to-bottom then left-to-right and split them into lines."""
        lines: list[list[dict[str, Any]]] = []
        line_top: float | None = None
        for word in sorted(words, key=lambda w: (float(w["top"]), float(w["x0"]))):
            top = float(word["top"])
            if line_top is None or abs(top - line_top) > threshold:
                lines.append([])
                line_top = top
            lines[-1].append(word)
        return [sorted(line, key=lambda w: float(w["x0"])) for line in lines]
