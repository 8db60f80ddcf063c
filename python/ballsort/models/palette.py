"""Display palette; compact color codes are indices into it."""

from __future__ import annotations

PALETTE: tuple[str, ...] = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#F8C471", "#82E0AA", "#F1948A", "#D7BDE2", "#A9DFBF",
)


def hex_for(code: int) -> str:
    return PALETTE[code % len(PALETTE)]


def code_for(hex_color: str) -> int | None:
    """Palette index for a hex string (case-insensitive), or ``None``."""
    wanted = hex_color.strip().upper()
    for i, value in enumerate(PALETTE):
        if value == wanted:
            return i
    return None
