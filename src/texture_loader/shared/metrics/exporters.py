# 🚀 texture_loader/shared/metrics/exporters.py
"""🚀 Легкий bootstrap HTTP-експортера `/metrics`."""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server						# 🌐 Вбудований HTTP-сервер метрик

# 🔠 Системні імпорти
import logging
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")

_started_port: Optional[int] = None										# 🔌 Порт уже запущеного експортера


def maybe_start_prometheus(port: Optional[int], addr: str = "127.0.0.1") -> bool:
    """
    Запускає експортер один раз на процес.

    Returns:
        bool: True, якщо експортер працює після виклику.
    """
    global _started_port
    if not port:
        logger.debug("📊 Prometheus exporter disabled (no port)")
        return False
    if _started_port is not None:
        logger.debug("📊 Prometheus exporter already running on %s", _started_port)
        return True
    try:
        start_http_server(int(port), addr=addr)
    except OSError:
        logger.exception("❌ Не вдалося запустити Prometheus exporter на %s:%s", addr, port)
        return False
    _started_port = int(port)
    logger.info("📊 Prometheus exporter listening on %s:%s", addr, port)
    return True


__all__ = ["maybe_start_prometheus"]
