"""MAC address generation."""

from __future__ import annotations

import secrets


def gen_mac(oui: str) -> str:
    """Return a random MAC address that starts with the given OUI."""
    a, b, c = secrets.token_bytes(3)
    return f"{oui}:{a:02x}:{b:02x}:{c:02x}"