# 🚨 texture_loader/errors/texture_errors.py
"""
🚨 Ієрархія винятків пайплайна завантаження текстур.

🔹 Кожен виняток несе `FailureKind`, щоб оркестратор перетворив його на `FetchFailure`.
🔹 Винятки живуть лише всередині пакета: викликач отримує значення, а не raise.
🔹 `FetchCancelled` — службовий сигнал, він не породжує жодного результату.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування створення помилок
from typing import Dict, Optional										# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from texture_loader.domain.textures.interfaces import FailureKind, FetchFailure
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.errors")


# ================================
# 🧠 БАЗОВИЙ ВИНЯТОК
# ================================
class TextureLoaderError(Exception):
    """🧠 Базова помилка завантажувача з категорією та URL."""

    kind: FailureKind = FailureKind.DECODE

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message											# 🗒️ Людино-читабельний текст
        self.url = url													# 🔗 Ресурс, з яким стався збій

    def to_failure(self) -> FetchFailure:
        """🎯 Конвертує виняток у значення результату."""
        return FetchFailure(kind=self.kind, reason=self.message, url=self.url or "")

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.extra`."""
        extra: Dict[str, object] = {"failure_kind": self.kind.value}
        if self.url:
            extra["url"] = self.url
        return extra


class InputError(TextureLoaderError):
    """🕳️ Порожній або відсутній URL — помилка використання API."""

    kind = FailureKind.INPUT


class TransportError(TextureLoaderError):
    """🌐 Мережевий, HTTP- чи файловий збій під час читання ресурсу."""

    kind = FailureKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code									# 🔢 HTTP-код, якщо він був

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class CapabilityMissingError(TextureLoaderError):
    """🧩 Запитано KTX/Basis, але транскодер не підключено до збірки."""

    kind = FailureKind.CAPABILITY_MISSING


class DecodeError(TextureLoaderError):
    """🖼️ Байти отримано, але зображення з них не вийшло."""

    kind = FailureKind.DECODE

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        byte_length: int = 0,
        source_name: str = "",
    ) -> None:
        super().__init__(message, url=url)
        self.byte_length = byte_length									# 📏 Розмір вхідного буфера
        self.source_name = source_name									# 🏷️ Ім'я файлу-джерела

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["byte_length"] = self.byte_length
        extra["source_name"] = self.source_name
        return extra


class PersistenceError(TextureLoaderError):
    """💾 Запис у кеш не вдався; ніколи не доходить до викликача."""

    kind = FailureKind.PERSISTENCE

    def __init__(self, message: str, *, path: str, url: Optional[str] = None) -> None:
        super().__init__(message, url=url)
        self.path = path


class FetchCancelled(Exception):
    """🛑 Операція помітила скасування та припинила роботу без результату."""


__all__ = [
    "TextureLoaderError",
    "InputError",
    "TransportError",
    "CapabilityMissingError",
    "DecodeError",
    "PersistenceError",
    "FetchCancelled",
]
