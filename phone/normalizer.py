from __future__ import annotations

import re
from typing import Optional

# Canonical wire format for both SMS vendors: 63 + 10-digit mobile number (639XXXXXXXXX).
# Accepted inputs: 639171234567, +63 917 123 4567, 09171234567, 9171234567.


def _digits(raw: Optional[str]) -> str:
    return re.sub(r"\D", "", raw or "")


def normalize_phone_number(raw: Optional[str]) -> Optional[str]:
    cleaned = _digits(raw)
    if cleaned.startswith("639") and len(cleaned) == 12:
        return cleaned
    if cleaned.startswith("09") and len(cleaned) == 11:
        return "63" + cleaned[1:]
    if cleaned.startswith("9") and len(cleaned) == 10:
        return "63" + cleaned
    return None


def is_valid_phone_number(raw: Optional[str]) -> bool:
    return normalize_phone_number(raw) is not None


def format_phone_display(raw: str) -> str:
    """
    639171234567 -> '+63 917 123 4567'
    09171234567  -> '0917 123 4567'
    Anything else is returned as given.
    """
    cleaned = _digits(raw)
    if cleaned.startswith("639") and len(cleaned) == 12:
        return f"+63 {cleaned[2:5]} {cleaned[5:8]} {cleaned[8:]}"
    if cleaned.startswith("09") and len(cleaned) == 11:
        return f"{cleaned[:4]} {cleaned[4:7]} {cleaned[7:]}"
    return raw
