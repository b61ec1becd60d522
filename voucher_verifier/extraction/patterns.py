import re
from collections.abc import Sequence

# Two letters, dash, three digits, dash, five digits. e.g. CP-143-00001
_CODE = r"[A-Z]{2}-\d{3}-\d{5}"

CODE_FORMAT_RE = re.compile(rf"^{_CODE}$")

# Text layer: "FOLIO CP-143-00001" first, then any bare code.
FOLIO_LABEL_RE = re.compile(rf"FOLIO\s+({_CODE})", re.IGNORECASE)
TEXT_BARE_CODE_RE = re.compile(rf"({_CODE})")

# QR payloads are URLs, so the bare fallback ignores case as well.
PAYLOAD_BARE_CODE_RE = re.compile(rf"({_CODE})", re.IGNORECASE)


def path_segment_pattern(path_fragment: str) -> re.Pattern[str]:
    """Match a code that directly follows ``path_fragment`` in a URL."""
    return re.compile(rf"{re.escape(path_fragment)}({_CODE})", re.IGNORECASE)


def find_code(text: str, patterns: Sequence[re.Pattern[str]]) -> str | None:
    """Return the first code captured by the patterns, tried in order."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).upper()
    return None


def normalize_code(raw: str) -> str | None:
    """Uppercase and trim a manually entered code; None if malformed."""
    candidate = raw.strip().upper()
    if CODE_FORMAT_RE.match(candidate) is None:
        return None
    return candidate
