from abc import ABC, abstractmethod
from pathlib import Path


class BasePdfExtractor(ABC):
    """Contract for all local (no-network) PDF text extraction adapters."""

    name: str = ""

    @abstractmethod
    def extract(self, pdf_path: Path) -> str:
        """Extract plain text from a PDF stored inside a request workspace.

        Args:
            pdf_path: Path to the workspace copy of the uploaded PDF. Any
                intermediate files must be written next to it.

        Returns:
            Extracted text, stripped. May be empty for scanned documents.

        Raises:
            PdfToolUnavailableError: if the backing tool is not installed.
            PdfExtractionError: if extraction fails for any other reason.
        """
