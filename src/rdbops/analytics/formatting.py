"""Display helpers shared by the detectors."""

from ..core.constants import KEY_DISPLAY_MAX_LENGTH, KEY_DISPLAY_TRUNCATED_LENGTH

_BYTE_UNIT = 1024
_UNIT_PREFIXES = "KMGTPE"


def format_bytes(num_bytes: int) -> str:
    """Human readable size in binary units: ``512 B``, ``1.5 KB``, ``60.0 MB``."""
    if num_bytes < _BYTE_UNIT:
        return f"{num_bytes} B"
    div, exp = _BYTE_UNIT, 0
    n = num_bytes // _BYTE_UNIT
    while n >= _BYTE_UNIT and exp < len(_UNIT_PREFIXES) - 1:
        div *= _BYTE_UNIT
        exp += 1
        n //= _BYTE_UNIT
    return f"{num_bytes / div:.1f} {_UNIT_PREFIXES[exp]}B"


def format_number(num: int) -> str:
    """Compact count: ``999``, ``1.5K``, ``11.0M``, ``2.0B``."""
    if num < 1000:
        return str(num)
    if num < 1_000_000:
        return f"{num / 1000:.1f}K"
    if num < 1_000_000_000:
        return f"{num / 1_000_000:.1f}M"
    return f"{num / 1_000_000_000:.1f}B"


def truncate_key(key: str) -> str:
    if len(key) <= KEY_DISPLAY_MAX_LENGTH:
        return key
    return key[:KEY_DISPLAY_TRUNCATED_LENGTH] + "..."


def percentage(part: float, total: float) -> float:
    """``part / total * 100``; 0 when there is no total."""
    if total <= 0:
        return 0.0
    return part / total * 100
