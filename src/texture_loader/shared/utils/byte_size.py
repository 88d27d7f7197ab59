# 📏 texture_loader/shared/utils/byte_size.py
"""📏 Людино-читабельне представлення кількості байтів."""

from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(num: int) -> str:
    """📏 Повертає рядок на кшталт `1.50 MB` (від'ємні значення зберігають знак)."""
    sign = "-" if num < 0 else ""
    value = float(abs(num))
    for unit in _UNITS:
        if value < 1024.0 or unit == _UNITS[-1]:
            return f"{sign}{value:.2f} {unit}"
        value /= 1024.0
    return f"{sign}{value:.2f} {_UNITS[-1]}"


__all__ = ["format_bytes"]
