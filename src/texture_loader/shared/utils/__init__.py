# 🧰 texture_loader/shared/utils/__init__.py
"""
🧰 Спільні утиліти пакета: логування та форматування розмірів.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# 📏 Розміри
from .byte_size import format_bytes

__all__ = [
    "LOG_NAME",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "format_bytes",
]
