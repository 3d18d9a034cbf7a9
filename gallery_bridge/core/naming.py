"""Storage key derivation from free-form prompt text."""
import re

MAX_KEY_LENGTH = 50

_non_alnum = re.compile(r"[^A-Za-z0-9]")
_separator_run = re.compile(r"_+")


def sanitize_file_name(text: str) -> str:
    """Map arbitrary text to a safe, bounded storage key.

    Non-alphanumerics become single underscores, the result is lowercased and
    cut to 50 characters. Text without any ASCII letter or digit yields "".
    """
    key = _non_alnum.sub("_", text)
    key = _separator_run.sub("_", key)
    key = key.strip("_").lower()
    # Truncation can end on a separator
    return key[:MAX_KEY_LENGTH].rstrip("_")
