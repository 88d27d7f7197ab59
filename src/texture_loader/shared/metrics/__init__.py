# 📊 texture_loader/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus для завантажувача текстур.

🔹 Лічильники завантажень, помилок та записів у кеш.
🔹 Легкий bootstrap експортер `/metrics`.
"""

from __future__ import annotations

# 🔢 Метрики текстур
from .textures import (
    TEXTURE_CACHE_WRITES_TOTAL,
    TEXTURE_FETCH_FAILURES_TOTAL,
    TEXTURE_FETCH_TOTAL,
    inc_cache_write,
    inc_fetch,
    inc_fetch_failure,
)

# 🚀 Експортер Prometheus
from .exporters import maybe_start_prometheus

# ================================
# 📦 ЕКСПОРТ ПАКЕТУ
# ================================
__all__ = [
    "TEXTURE_FETCH_TOTAL",
    "TEXTURE_FETCH_FAILURES_TOTAL",
    "TEXTURE_CACHE_WRITES_TOTAL",
    "inc_fetch",
    "inc_fetch_failure",
    "inc_cache_write",
    "maybe_start_prometheus",
]
