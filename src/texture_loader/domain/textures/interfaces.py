# 🧱 texture_loader/domain/textures/interfaces.py
"""
🧱 Контракти та DTO пайплайна «локальний кеш або мережа → декодування».

🔹 Описує запит (`FetchRequest`), декодоване зображення (`DecodedImage`) та орієнтацію.
🔹 Визначає єдиний результат завантаження: `FetchSuccess` або `FetchFailure`.
🔹 Описує протоколи зовнішніх співпрацівників: транспорт, транскодер, пробник пам'яті.
🔹 Містить примітиви скасування (`CancellationToken`) і буфер для транскодера.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from PIL import Image													# 🖼️ Піксельний буфер декодованої текстури

# 🔠 Системні імпорти
import logging															# 🧾 Логування доменних подій
from dataclasses import dataclass, field								# 🧱 DTO
from enum import Enum													# 🏷️ Типи помилок
from typing import (													# 🧰 Типізація контрактів
    Callable,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)


# ================================
# 🪵 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(__name__)


# ================================
# 🏷️ ТИПИ ПОМИЛОК
# ================================
class FailureKind(str, Enum):
    """🏷️ Категорії невдалих завантажень (для UX, логів і метрик)."""

    INPUT = "input"														# 🕳️ Порожній URL, помилка використання API
    TRANSPORT = "transport"												# 🌐 Мережа або HTTP-статус
    CAPABILITY_MISSING = "capability_missing"							# 🧩 Транскодер не підключено
    DECODE = "decode"													# 🖼️ Байти не вдалося перетворити на зображення
    PERSISTENCE = "persistence"											# 💾 Запис у кеш (ніколи не доходить до викликача)


# ================================
# 📨 ЗАПИТ
# ================================
@dataclass(frozen=True)
class FetchRequest:
    """📨 Один логічний запит на зображення з кешу або мережі."""

    url: str															# 🌐 Джерело; останній сегмент дає ім'я файлу в кеші
    use_cache: bool = True												# 💾 Чи пробувати локальний кеш першим


# ================================
# 🔄 ОРІЄНТАЦІЯ
# ================================
@dataclass(frozen=True)
class Orientation:
    """🔄 Прапорці віддзеркалення буфера відносно верхнього лівого кута."""

    flipped_horizontally: bool = False									# ↔️ Рядки віддзеркалено по X
    flipped_vertically: bool = False									# ↕️ Рядки віддзеркалено по Y


# ================================
# 🖼️ ДЕКОДОВАНЕ ЗОБРАЖЕННЯ
# ================================
@dataclass
class DecodedImage:
    """
    🖼️ Результат успішного завантаження.

    Attributes:
        image: Піксельний буфер (Pillow), належить лише цьому значенню.
        source_path: URI, з якого реально прочитано байти (кеш або мережа).
        orientation: Прапорці віддзеркалення (транскодер може їх встановити).
        name: Ім'я файлу з URL.
        cache_path: Шлях у локальному кеші, пов'язаний із цим URL.
    """

    image: Image.Image
    source_path: str
    orientation: Orientation = field(default_factory=Orientation)
    name: str = ""
    cache_path: Optional[str] = None

    @property
    def pixel_width(self) -> int:
        return int(self.image.width)

    @property
    def pixel_height(self) -> int:
        return int(self.image.height)


# ================================
# 🎯 РЕЗУЛЬТАТ ЗАВАНТАЖЕННЯ
# ================================
@dataclass(frozen=True)
class FetchSuccess:
    """✅ Успіх: зображення та ознака, що воно прийшло з кешу."""

    image: DecodedImage
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    """❌ Невдача: тип помилки та людино-читабельна причина."""

    kind: FailureKind
    reason: str
    url: str = ""

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.reason


FetchOutcome = Union[FetchSuccess, FetchFailure]						# 🔀 Рівно один на кожен запит

ProgressFn = Callable[[float], None]									# 📶 Прогрес у межах [0.0, 1.0]
SuccessFn = Callable[[DecodedImage], None]								# ✅ Колбек успіху
ErrorFn = Callable[[FetchFailure], None]								# ❌ Колбек помилки


# ================================
# 🛑 СКАСУВАННЯ
# ================================
class CancellationToken:
    """🛑 Кооперативний прапорець скасування, що передається крізь усю операцію."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Ідемпотентно позначає операцію скасованою."""
        if not self._cancelled:
            logger.debug("🛑 Cancellation requested")
        self._cancelled = True


# ================================
# 📦 БУФЕР ДЛЯ ТРАНСКОДЕРА
# ================================
class TranscodeBuffer:
    """
    📦 Власний буфер байтів, який диспетчер передає транскодеру.

    Після `release()` дані звільняються, а повторний доступ підіймає `BufferError`.
    """

    def __init__(self, data: bytes) -> None:
        self._data: Optional[bytearray] = bytearray(data)
        self._length = len(data)

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise BufferError("transcode buffer already released")
        return bytes(self._data)

    def __len__(self) -> int:
        return self._length

    def release(self) -> None:
        """Повертає пам'ять системі; повторний виклик нічого не робить."""
        self._data = None


# ================================
# 🔌 ПРОТОКОЛИ СПІВПРАЦІВНИКІВ
# ================================
@runtime_checkable
class ITransport(Protocol):
    """🌐 Джерело байтів: мережеві URL та локальні шляхи/`file://` URI."""

    async def get(
        self,
        uri: str,
        *,
        on_progress: Optional[ProgressFn] = None,
        token: Optional[CancellationToken] = None,
    ) -> bytes:
        """
        Повертає повне тіло ресурсу.

        Raises:
            TransportError: Мережевий/HTTP/файловий збій.
            FetchCancelled: Операція помітила скасування і закрила з'єднання.
        """
        ...


TranscodeCallback = Callable[[Optional[Image.Image], Orientation], None]	# 📣 Подія "loaded"


@runtime_checkable
class ITranscoder(Protocol):
    """🧩 Опційний транскодер стиснених текстур (KTX/Basis)."""

    def load_from_bytes(self, buffer: TranscodeBuffer, on_loaded: TranscodeCallback) -> None:
        """
        Починає транскодування. Колбек отримує зображення або `None` при невдачі.

        Колбек може бути викликаний з іншого потоку — диспетчер сам повертає його в цикл подій.
        """
        ...


@runtime_checkable
class IMemoryProbe(Protocol):
    """🧠 Зовнішній пробник пам'яті пристрою."""

    def total_memory_bytes(self) -> int:
        """Загальний обсяг пам'яті пристрою."""
        ...

    def used_memory_bytes(self) -> int:
        """Пам'ять, яку вже використовує процес."""
        ...

    def refresh_meminfo(self) -> Optional[int]:
        """Свіже значення доступної пам'яті ОС або None, якщо платформа не підтримує."""
        ...


__all__ = [
    "FailureKind",
    "FetchRequest",
    "Orientation",
    "DecodedImage",
    "FetchSuccess",
    "FetchFailure",
    "FetchOutcome",
    "ProgressFn",
    "SuccessFn",
    "ErrorFn",
    "CancellationToken",
    "TranscodeBuffer",
    "TranscodeCallback",
    "ITransport",
    "ITranscoder",
    "IMemoryProbe",
]
