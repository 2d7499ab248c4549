from pathlib import Path

from sourcelens.llm.exceptions import LlmError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

NATIVE_EXTRACTION = "native_extraction.txt"
OCR_SYSTEM = "ocr_system.txt"
OCR_USER = "ocr_user.txt"
CLEANUP = "cleanup.txt"


def load_prompt(name: str, prompt_dir: Path | None = None) -> str:
    """Load a bundled prompt by file name.

    Args:
        name: File name inside the prompt directory, e.g. ``"ocr_system.txt"``.
        prompt_dir: Directory to read from. Defaults to the bundled prompts.

    Returns:
        The prompt text with surrounding whitespace removed.

    Raises:
        LlmError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise LlmError(f"Failed to load prompt '{name}': {exc}") from exc
