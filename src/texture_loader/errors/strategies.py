# 📜 texture_loader/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `TextureLoaderError`.

🔹 Транспорт не знає деталей httpx-винятків — лише викликає стратегію.
🔹 Повідомлення лишається текстом самого транспорту (вже людино-читабельне).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)

# 🔠 Системні імпорти
import logging															# 🧾 Логування стратегій
from typing import Optional, Protocol									# 📐 Типи

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME
from .texture_errors import TextureLoaderError, TransportError


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.strategies")


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт, що визначає єдиний метод `handle`."""

    def handle(self, error: Exception) -> Optional[TextureLoaderError]:
        """Вертає доменну помилку, якщо виняток розпізнано, або None."""


def _first_line(error: Exception) -> str:
    """🧾 Перший рядок тексту винятку (httpx додає довідкові посилання нижче)."""
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


def _request_url(error: Exception) -> str:
    """🔗 Безпечно дістає URL запиту з httpx-винятку."""
    try:
        return str(error.request.url)									# type: ignore[attr-defined]
    except (AttributeError, RuntimeError):
        return "N/A"


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
class HttpxErrorStrategy(IErrorHandlingStrategy):
    """🌐 Перетворює httpx-помилки на `TransportError`."""

    def handle(self, error: Exception) -> Optional[TextureLoaderError]:
        if isinstance(error, httpx.HTTPStatusError):					# 🔢 Неочікуваний статус
            url = _request_url(error)
            status = error.response.status_code
            logger.debug("🔢 httpx status error", extra={"url": url, "status": status})
            return TransportError(_first_line(error), url=url, status_code=status)

        if isinstance(error, httpx.TimeoutException):					# ⏱️ Таймаути запиту
            url = _request_url(error)
            logger.debug("⏱️ httpx timeout", extra={"url": url})
            return TransportError(_first_line(error), url=url)

        if isinstance(error, httpx.HTTPError):							# 🌐 З'єднання, протокол, редіректи
            url = _request_url(error)
            logger.debug("🌐 httpx transport error", extra={"url": url, "exc_type": type(error).__name__})
            return TransportError(_first_line(error), url=url)

        return None


__all__ = [
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
]
