# 🚦 texture_loader/infrastructure/memory/memory_gate.py
"""
🚦 Рішення «чи можна ще виділяти пам'ять під текстури».

🔹 Бюджет = total × (1 − safety_margin); доступно = бюджет − used.
🔹 Цифри пробника читаються заново при кожному виклику (без кешування).
🔹 `snapshot()` дає зведення для відображення (людино-читабельні байти).
🔹 Якщо увімкнено `tracemalloc`, знімок містить ще й купу Python: поточну та пікову.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
import tracemalloc
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from texture_loader.domain.textures.interfaces import IMemoryProbe
from texture_loader.shared.utils.byte_size import format_bytes
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.memory")

DEFAULT_SAFETY_MARGIN = 0.30


@dataclass(frozen=True)
class MemorySnapshot:
    """📊 Знімок пам'яті на момент виклику."""

    total: int
    in_use: int
    available: int
    os_available: Optional[int] = None
    heap_allocated: Optional[int] = None								# 🐍 tracemalloc: зараз
    heap_peak: Optional[int] = None									# 🐍 tracemalloc: пік

    def as_display(self) -> Dict[str, str]:
        """🖨️ Ті самі цифри у вигляді `1.50 GB`; відсутні — `n/a`."""
        return {
            "total": format_bytes(self.total),
            "in_use": format_bytes(self.in_use),
            "available": format_bytes(self.available),
            "os_available": _display(self.os_available),
            "heap_alloc": _display(self.heap_allocated),
            "heap_peak": _display(self.heap_peak),
        }


def _display(value: Optional[int]) -> str:
    return "n/a" if value is None else format_bytes(value)


def heap_usage() -> Tuple[Optional[int], Optional[int]]:
    """🐍 `(current, peak)` від `tracemalloc`; `(None, None)`, якщо трасування вимкнене."""
    if not tracemalloc.is_tracing():
        return None, None
    current, peak = tracemalloc.get_traced_memory()
    return current, peak


class MemoryGate:
    """🚦 Перевіряє бюджет пам'яті перед новими завантаженнями."""

    def __init__(self, probe: IMemoryProbe, *, safety_margin: float = DEFAULT_SAFETY_MARGIN) -> None:
        margin = float(safety_margin)
        if not 0.0 <= margin < 1.0:
            raise ValueError(f"safety_margin must be in [0, 1), got {safety_margin!r}")
        self.probe = probe
        self.safety_margin = margin

    def budget_bytes(self) -> int:
        """💰 Частина загальної пам'яті, яку дозволено використовувати."""
        total = max(0, int(self.probe.total_memory_bytes()))
        return int(total * (1.0 - self.safety_margin))

    def available_bytes(self) -> int:
        """📉 Бюджет мінус уже використане (може бути від'ємним)."""
        return self.budget_bytes() - int(self.probe.used_memory_bytes())

    def safe_to_allocate(self, required_bytes: int = 0) -> bool:
        """✅ True, якщо `used + required` вміщується в бюджет."""
        total = int(self.probe.total_memory_bytes())
        if total <= 0:
            logger.warning("🧠 Memory probe reported no total memory; refusing allocation")
            return False
        used = int(self.probe.used_memory_bytes())
        budget = total * (1.0 - self.safety_margin)
        safe = used + max(0, int(required_bytes)) < budget
        if not safe:
            logger.debug(
                "🚦 Not safe to allocate: used=%d required=%d budget=%d",
                used,
                required_bytes,
                int(budget),
            )
        return safe

    def recommended_concurrency(self, asset_bytes: int, cap: Optional[int] = None) -> int:
        """🔢 Скільки ресурсів розміру `asset_bytes` ще поміщається (мінімум 1)."""
        if asset_bytes <= 0:
            return max(1, cap or 1)
        fits = max(1, self.available_bytes() // int(asset_bytes))
        return min(fits, cap) if cap else fits

    def snapshot(self) -> MemorySnapshot:
        total = max(0, int(self.probe.total_memory_bytes()))
        used = int(self.probe.used_memory_bytes())
        heap_allocated, heap_peak = heap_usage()
        return MemorySnapshot(
            total=total,
            in_use=used,
            available=int(total * (1.0 - self.safety_margin)) - used,
            os_available=self.probe.refresh_meminfo(),
            heap_allocated=heap_allocated,
            heap_peak=heap_peak,
        )


__all__ = ["DEFAULT_SAFETY_MARGIN", "MemoryGate", "MemorySnapshot", "heap_usage"]
