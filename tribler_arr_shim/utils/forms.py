"""
Parsing of qBittorrent form fields.
"""
import re
from typing import List, Optional

# qBittorrent documents "|" as the separator; older *arr releases send ","
_HASH_SEPARATORS = re.compile(r"[|,]")


def parse_hashes(value: Optional[str]) -> List[str]:
    """Split a hashes form field into individual infohashes, dropping blanks and duplicates."""
    if not value:
        return []
    seen = []
    for part in _HASH_SEPARATORS.split(value):
        part = part.strip().lower()
        if part and part not in seen:
            seen.append(part)
    return seen


def first_url(value: Optional[str]) -> Optional[str]:
    """First non-empty line of the urls form field. Batch add is not supported."""
    if not value:
        return None
    for line in value.splitlines():
        line = line.strip()
        if line:
            return line
    return None
