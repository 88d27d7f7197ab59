"""🧠 Пам'ять: пробник psutil та шлюз бюджету."""

from __future__ import annotations

from .memory_gate import DEFAULT_SAFETY_MARGIN, MemoryGate, MemorySnapshot, heap_usage
from .memory_probe import PsutilMemoryProbe

__all__ = [
    "DEFAULT_SAFETY_MARGIN",
    "MemoryGate",
    "MemorySnapshot",
    "PsutilMemoryProbe",
    "heap_usage",
]
