# 📊 texture_loader/shared/metrics/textures.py
"""
📊 Лічильники Prometheus для пайплайна завантаження текстур.

🔹 `TEXTURE_FETCH_TOTAL` — успішні завантаження за джерелом (cache/network).
🔹 `TEXTURE_FETCH_FAILURES_TOTAL` — невдалі завантаження за типом помилки.
🔹 `TEXTURE_CACHE_WRITES_TOTAL` — результати запису в локальний кеш.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter									# 📈 Метрики Prometheus

# 🔠 Системні імпорти
import logging															# 🧾 Логування збоїв метрик

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME				# 🏷️ Ім'я базового логера

logger = logging.getLogger(f"{LOG_NAME}.metrics")


# ================================
# 📊 ЛІЧИЛЬНИКИ
# ================================
TEXTURE_FETCH_TOTAL = Counter(
    "texture_fetch_total",
    "Успішні завантаження текстур за джерелом",
    ["source"],
)
TEXTURE_FETCH_FAILURES_TOTAL = Counter(
    "texture_fetch_failures_total",
    "Невдалі завантаження текстур за типом помилки",
    ["kind"],
)
TEXTURE_CACHE_WRITES_TOTAL = Counter(
    "texture_cache_writes_total",
    "Записи в локальний кеш текстур за результатом",
    ["result"],
)


def _safe_inc(counter: Counter, **labels: str) -> None:
    """🔢 Інкрементує лічильник; збій метрики не ламає пайплайн."""
    try:
        counter.labels(**labels).inc()
    except Exception:														# noqa: BLE001
        logger.debug("⚠️ Metric increment failed: %s %s", counter, labels, exc_info=True)


def inc_fetch(source: str) -> None:
    """📈 Фіксує успішне завантаження (`cache` або `network`)."""
    _safe_inc(TEXTURE_FETCH_TOTAL, source=source)


def inc_fetch_failure(kind: str) -> None:
    """📉 Фіксує невдале завантаження за типом помилки."""
    _safe_inc(TEXTURE_FETCH_FAILURES_TOTAL, kind=kind)


def inc_cache_write(result: str) -> None:
    """💾 Фіксує результат запису в кеш (`written`, `skipped`, `failed`)."""
    _safe_inc(TEXTURE_CACHE_WRITES_TOTAL, result=result)


__all__ = [
    "TEXTURE_FETCH_TOTAL",
    "TEXTURE_FETCH_FAILURES_TOTAL",
    "TEXTURE_CACHE_WRITES_TOTAL",
    "inc_fetch",
    "inc_fetch_failure",
    "inc_cache_write",
]
