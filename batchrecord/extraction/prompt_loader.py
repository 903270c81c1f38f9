from pathlib import Path

from batchrecord.extraction.exceptions import ExtractionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_extraction_prompt(path: Path | None = None) -> str:
    """Load the fixed extraction instruction sent ahead of the recognized text.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled extraction_prompt.txt.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    return _read_prompt(path or _DEFAULT_PROMPT_DIR / "extraction_prompt.txt")


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system instruction. Defaults to the bundled system_prompt.txt."""
    return _read_prompt(path or _DEFAULT_PROMPT_DIR / "system_prompt.txt")


def _read_prompt(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ExtractionError(f"Failed to load prompt: {exc}") from exc
