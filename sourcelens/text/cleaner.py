"""Local text cleanup for extracted and OCR'd document text.

``clean_text`` is the full pass applied to PDF and image extraction output.
``basic_cleanup`` is the minimal pass used whenever the full pass (or an LLM
cleanup) removes too much of the input. Both are idempotent on their own
output.
"""

import re
from difflib import SequenceMatcher

_PUNCTUATION = str.maketrans(
    {
        "\u2018": "'",
        "\u2019": "'",
        "\u201a": "'",
        "\u201b": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u201e": '"',
        "\u00ab": '"',
        "\u00bb": '"',
        "\u2010": "-",
        "\u2011": "-",
        "\u2012": "-",
        "\u2013": "-",
        "\u2014": "-",
        "\u2015": "-",
        "\u2212": "-",
        "\u2026": "...",
        "\u00a0": " ",
        "\u2007": " ",
        "\u2009": " ",
        "\u200a": " ",
        "\u202f": " ",
        "\u3000": " ",
        "\u00ad": "",
        "\u200b": "",
        "\ufeff": "",
    }
)

_HYPHEN_BREAK_RE = re.compile(r"(?<=[A-Za-z])-[ \t]*\n[ \t]*(?=[a-z])")
_SENTENCE_END_RE = re.compile(r"[.!?:][\"')\]]?$")
_LIST_OR_HEADING_RE = re.compile(r"^(?:#{1,6}\s|[IVXLC]+\.\s|\d+[.)]\s|[-*\u2022]\s)")
_CAPS_HEADING_RE = re.compile(r"^[A-Z][A-Z0-9 ,:;'\-]{2,58}[A-Z0-9]$")
_CHAPTER_RE = re.compile(r"^chapter\s+([IVXLC]+|\d+)\.?$", re.IGNORECASE)

_MIN_PARAGRAPH_CHARS = 4
_DEDUPE_MIN_CHARS = 20
_PARTIAL_REPEAT_MIN_CHARS = 100
_PARTIAL_REPEAT_OVERLAP = 80
_MAX_PASSES = 4

_BASIC_CHAPTER_RE = re.compile(
    r"\b(CHAPTER|Chapter)[ \t]+([IVX0-9]+)\.?[ \t]*\n\s*([A-Z][A-Za-z .\-]*[A-Za-z.])"
)
_BASIC_CAPS_LINE_RE = re.compile(r"(?<=\n)[ \t]*([A-Z][A-Z .\-]{2,}[A-Z.\-])[ \t]*(?=\n)")
_BASIC_HYPHEN_RE = re.compile(r"(?<=[a-z])-[ \t]*\n[ \t]*(?=[a-z])")
_SPACED_CAPS_3_RE = re.compile(r"\b([A-Z])[ \t]+([A-Z])[ \t]+([A-Z])\b")
_SPACED_CAPS_2_RE = re.compile(r"\b([A-Z])[ \t]+([A-Z])\b")

_PAGE_NUMBER_LINE_RE = re.compile(
    r"^[ \t]*(?:page[ \t]+)?-?[ \t]*\d+[ \t]*-?[ \t]*$", re.IGNORECASE | re.MULTILINE
)
_SHORT_ARTIFACT_LINE_RE = re.compile(r"^[ \t]*[A-Z0-9\-]{1,3}[ \t]*$", re.MULTILINE)
_STRAY_LETTER_LINE_RE = re.compile(r"^[ \t]*[b-hj-z][ \t]*$", re.IGNORECASE | re.MULTILINE)


def normalize_punctuation(text: str) -> str:
    """Map typographic punctuation and exotic spaces to ASCII, unify line endings."""
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n\n")
    return text.translate(_PUNCTUATION)


def clean_text(raw: str, min_length_ratio: float = 0.5) -> str:
    """Clean extracted text into markdown-ish paragraphs.

    Steps, in order: punctuation normalisation, hyphenation rejoin, whitespace
    collapse, paragraph rebuilding, artifact removal, repetition removal and
    heading restructuring. When the result is shorter than
    ``min_length_ratio`` times the whitespace-normalised input, the cleanup
    is considered destructive and ``basic_cleanup(raw)`` is returned instead.

    Passes repeat until the output is stable, so a ``basic_cleanup`` result
    that the full pass would still change is never returned as final.
    """
    text = raw
    for _ in range(_MAX_PASSES):
        cleaned = _clean_once(text, min_length_ratio)
        if cleaned == text:
            break
        text = cleaned
    return text


def _clean_once(raw: str, min_length_ratio: float) -> str:
    if not raw.strip():
        return ""

    text = normalize_punctuation(raw)
    baseline = len(_collapse_whitespace(text))
    text = _HYPHEN_BREAK_RE.sub("", text)
    text = _collapse_whitespace(text)
    paragraphs = [
        paragraph
        for paragraph in _rebuild_paragraphs(text)
        if len(paragraph) >= _MIN_PARAGRAPH_CHARS
    ]
    paragraphs = _dedupe_paragraphs(paragraphs)
    cleaned = "\n\n".join(_format_heading(paragraph) for paragraph in paragraphs)

    if len(cleaned) < min_length_ratio * baseline:
        return basic_cleanup(raw)
    return cleaned


def basic_cleanup(text: str) -> str:
    """Minimal cleanup: headings, hyphen joins, spaced capitals and spacing."""
    text = text.replace("\r\n", "\n")
    text = _BASIC_CHAPTER_RE.sub(r"# CHAPTER \2\n\n## \3", text)
    text = _BASIC_CAPS_LINE_RE.sub(r"\n## \1\n", text)
    text = _BASIC_HYPHEN_RE.sub("", text)
    text = _SPACED_CAPS_3_RE.sub(r"\1\2\3", text)
    text = _SPACED_CAPS_2_RE.sub(r"\1\2", text)
    text = re.sub(r"\n[ \t]+", "\n", text)
    return re.sub(r"\n{3,}", "\n\n", text)


def remove_repetitions(text: str) -> str:
    """Drop repeated paragraphs from blank-line separated text."""
    paragraphs = [part.strip() for part in re.split(r"\n\s*\n", text)]
    return "\n\n".join(_dedupe_paragraphs([part for part in paragraphs if part]))


def longest_common_substring(first: str, second: str) -> int:
    """Length of the longest run of characters shared by both strings."""
    if not first or not second:
        return 0
    matcher = SequenceMatcher(None, first, second, autojunk=False)
    return matcher.find_longest_match(0, len(first), 0, len(second)).size


def pre_process_ocr_text(text: str) -> str:
    """Remove page numbers, stray letters and short artifact lines before cleanup."""
    if not text:
        return ""
    processed = re.sub(r"\n{3,}", "\n\n", text)
    processed = re.sub(r"[ \t]{2,}", " ", processed)
    processed = _PAGE_NUMBER_LINE_RE.sub("", processed)
    processed = _SHORT_ARTIFACT_LINE_RE.sub("", processed)
    return _STRAY_LETTER_LINE_RE.sub("", processed)


def is_likely_ocr_text(text: str) -> bool:
    """Heuristic: does ``text`` look like raw OCR or PDF line-wrapped output?"""
    if not text or not text.strip():
        return False
    artifact_patterns = (
        r"\b[A-Za-z] [A-Za-z] [A-Za-z]\b",
        r"\n[ \t]*\n[ \t]*\n",
        r"\n\w{1,2}\n",
        r"[a-z]-\n[a-z]",
    )
    if any(re.search(pattern, text) for pattern in artifact_patterns):
        return True
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    short_lines = [
        line for line in lines if len(line) < 40 and not re.search(r"[.!?:,;]$", line)
    ]
    return len(short_lines) / len(lines) > 0.2


def post_process_cleaned_text(
    cleaned: str, original: str, min_length_ratio: float = 0.5
) -> str:
    """Tidy LLM cleanup output and fall back to ``basic_cleanup`` if it lost content."""
    text = cleaned.replace("\r\n", "\n")
    text = re.sub(r"^(#{1,6})([^#\s])", r"\1 \2", text, flags=re.MULTILINE)
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r" +$", "", text, flags=re.MULTILINE)
    text = remove_repetitions(text)
    text = re.sub(r"([^\n])\n(#{1,2} )", r"\1\n\n\2", text)
    text = re.sub(r"(^|\n)(#{1,2} [^\n]+)\n([^#\n])", r"\1\2\n\n\3", text)

    if len(text) < min_length_ratio * len(original):
        return basic_cleanup(original)
    return text


def _collapse_whitespace(text: str) -> str:
    text = re.sub(r"[ \t\v]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return re.sub(r"\n{3,}", "\n\n", text)


def _is_structural(line: str) -> bool:
    return bool(_LIST_OR_HEADING_RE.match(line) or _CAPS_HEADING_RE.match(line))


def _rebuild_paragraphs(text: str) -> list[str]:
    paragraphs: list[str] = []
    current: list[str] = []
    for line in text.split("\n"):
        if not line:
            if current:
                paragraphs.append(" ".join(current))
                current = []
            continue
        continues = (
            bool(current)
            and not _is_structural(line)
            and not _is_structural(current[0])
            and not _SENTENCE_END_RE.search(current[-1])
        )
        if continues:
            current.append(line)
        else:
            if current:
                paragraphs.append(" ".join(current))
            current = [line]
    if current:
        paragraphs.append(" ".join(current))
    return paragraphs


def _comparison_key(paragraph: str) -> str:
    return re.sub(r"\s+", " ", paragraph.lstrip("#").strip()).lower()


def _is_partial_repeat(first_key: str, second_key: str) -> bool:
    return (
        len(first_key) > _PARTIAL_REPEAT_MIN_CHARS
        and len(second_key) > _PARTIAL_REPEAT_MIN_CHARS
        and longest_common_substring(first_key, second_key) > _PARTIAL_REPEAT_OVERLAP
    )


def _dedupe_paragraphs(paragraphs: list[str]) -> list[str]:
    kept: list[str] = []
    seen: set[str] = set()
    for paragraph in paragraphs:
        key = _comparison_key(paragraph)
        if len(key) >= _DEDUPE_MIN_CHARS:
            if key in seen:
                continue
            seen.add(key)
        kept.append(paragraph)
        # neighbours that overlap heavily collapse into the longer one
        while len(kept) > 1:
            previous_key = _comparison_key(kept[-2])
            last_key = _comparison_key(kept[-1])
            if not _is_partial_repeat(previous_key, last_key):
                break
            del kept[-2 if len(previous_key) < len(last_key) else -1]
    return kept


def _format_heading(paragraph: str) -> str:
    if paragraph.startswith("#"):
        return paragraph
    chapter = _CHAPTER_RE.match(paragraph)
    if chapter:
        return f"# CHAPTER {chapter.group(1).upper()}"
    if _CAPS_HEADING_RE.match(paragraph) and sum(c.isalpha() for c in paragraph) >= 4:
        return f"## {paragraph}"
    return paragraph
