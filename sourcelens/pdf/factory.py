from sourcelens.config.settings import Settings
from sourcelens.pdf.base import BasePdfExtractor
from sourcelens.pdf.pdfplumber_adapter import PdfPlumberAdapter
from sourcelens.pdf.pdftotext_adapter import PdfToTextAdapter


class PdfExtractorFactory:
    """Creates the ordered chain of local PDF extractors from settings."""

    ENGINES: tuple[str, ...] = ("pdftotext", "pdfplumber")

    @classmethod
    def create_chain(cls, settings: Settings) -> list[BasePdfExtractor]:
        names = [name.strip().lower() for name in settings.direct_extractors.split(",")]
        return [cls.create(name, settings) for name in names if name]

    @classmethod
    def create(cls, engine: str, settings: Settings) -> BasePdfExtractor:
        engine = engine.lower()
        if engine == "pdftotext":
            return PdfToTextAdapter(
                binary=settings.pdftotext_path,
                timeout_seconds=settings.tool_timeout_seconds,
            )
        if engine == "pdfplumber":
            return PdfPlumberAdapter(line_break_threshold=settings.line_break_threshold)
        raise ValueError(
            f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
