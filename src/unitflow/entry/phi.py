"""PHI guard for free-text supply fields.

Supply notes are meant for stock, not patients. Text that looks like it
carries patient identifiers raises a warning for the submitter; the entry is
still stored exactly as typed.
"""

import re

PHI_PATTERNS = (
    re.compile(r"\b(MRN|medical record)\b", re.IGNORECASE),
    re.compile(r"\bDOB\b", re.IGNORECASE),
    re.compile(r"\b\d{2}/\d{2}/\d{4}\b"),
    re.compile(r"\broom\s?#?\d+\b", re.IGNORECASE),
    re.compile(r"\bbed\s?#?\d+\b", re.IGNORECASE),
)


def phi_likely(text) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in PHI_PATTERNS)


def supply_phi_warning(unit, notes) -> bool:
    """Whether a supply submission should show the PHI warning."""
    return phi_likely(notes) or phi_likely(unit)
