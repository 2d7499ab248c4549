import re
from dataclasses import dataclass
from typing import Literal

ContentKind = Literal["pdf", "image", "text"]

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


@dataclass(frozen=True, slots=True)
class ContentLimit:
    content: str
    limited: bool
    original_size: int
    limit_reason: str | None = None


def limit_content_size(
    content: str,
    kind: ContentKind,
    *,
    pdf_char_limit: int = 30000,
    image_char_limit: int = 20000,
    paragraph_limit: int = 100,
) -> ContentLimit:
    """Truncate extracted content to the ceiling for its kind.

    PDF text is cut at ``pdf_char_limit`` characters and OCR'd image text at
    ``image_char_limit``. Content that fits the character ceiling but has more
    than ``paragraph_limit`` paragraphs keeps only the first paragraphs.
    Plain text uploads are never limited.
    """
    original_size = len(content)
    if kind == "text":
        return ContentLimit(content=content, limited=False, original_size=original_size)

    char_limit = pdf_char_limit if kind == "pdf" else image_char_limit
    if original_size > char_limit:
        label = "PDF" if kind == "pdf" else "OCR content"
        return ContentLimit(
            content=content[:char_limit],
            limited=True,
            original_size=original_size,
            limit_reason=(
                f"{label} too large ({_thousands(original_size)}K chars). "
                f"Limited to first {_thousands(char_limit)}K chars."
            ),
        )

    paragraphs = [part for part in _PARAGRAPH_SPLIT_RE.split(content) if part.strip()]
    if len(paragraphs) > paragraph_limit:
        return ContentLimit(
            content="\n\n".join(paragraphs[:paragraph_limit]),
            limited=True,
            original_size=original_size,
            limit_reason=(
                f"Document too long ({len(paragraphs)} paragraphs). "
                f"Limited to first {paragraph_limit} paragraphs."
            ),
        )
    return ContentLimit(content=content, limited=False, original_size=original_size)


def _thousands(size: int) -> int:
    return int(size / 1000 + 0.5)
