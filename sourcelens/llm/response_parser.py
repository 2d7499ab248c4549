import re
from dataclasses import dataclass
from typing import Literal

_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n(?P<body>.*?)\n?```\s*$", re.DOTALL)
_PREAMBLE_RE = re.compile(
    r"^(?:sure[,!.]?\s*)?(?:here\s+is|here's|below\s+is)\b[^\n]{0,80}?"
    r"(?:text|transcription|content|document)[^\n]{0,40}:[ \t]*\n+",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class ParsedResponse:
    """Model output after tolerant cleanup.

    ``kind`` is ``"parsed"`` when the reply had the expected shape (optionally
    wrapped in a code fence or introduced by a preamble) and ``"fallback"``
    when stripping left nothing and the raw reply was kept.
    """

    kind: Literal["parsed", "fallback"]
    text: str


def parse_text_response(raw: str) -> ParsedResponse:
    text = raw.strip()
    text = _PREAMBLE_RE.sub("", text, count=1).strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group("body").strip()
    if not text:
        return ParsedResponse(kind="fallback", text=raw.strip())
    return ParsedResponse(kind="parsed", text=text)
