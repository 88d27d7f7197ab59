# 🧠 texture_loader/infrastructure/memory/memory_probe.py
"""
🧠 Пробник пам'яті на базі `psutil`.

🔹 `total_memory_bytes()` — фізична пам'ять машини.
🔹 `used_memory_bytes()` — резидентна пам'ять поточного процесу (RSS).
🔹 `refresh_meminfo()` — свіже значення доступної пам'яті ОС.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import psutil															# 🧠 Системна статистика пам'яті

# 🔠 Системні імпорти
import logging
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.memory")


class PsutilMemoryProbe:
    """🧠 Реалізація `IMemoryProbe`; кожен виклик читає ОС заново."""

    def __init__(self, process: Optional[psutil.Process] = None) -> None:
        self._process = process or psutil.Process()

    def total_memory_bytes(self) -> int:
        return int(psutil.virtual_memory().total)

    def used_memory_bytes(self) -> int:
        return int(self._process.memory_info().rss)

    def refresh_meminfo(self) -> Optional[int]:
        try:
            return int(psutil.virtual_memory().available)
        except psutil.Error as exc:
            logger.debug("🧠 virtual_memory() unavailable: %s", exc)
            return None


__all__ = ["PsutilMemoryProbe"]
