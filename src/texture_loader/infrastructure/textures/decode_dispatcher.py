# 🖼️ texture_loader/infrastructure/textures/decode_dispatcher.py
"""
🖼️ Вибір та виклик шляху декодування за оголошеним типом.

🔹 Стандартний растр (PNG/JPEG/...) — Pillow у пулі потоків, орієнтація завжди «без віддзеркалення».
🔹 Стиснені текстури (`image/ktx`, `image/ktx2`, `image/basis`) — опційний транскодер,
   що відповідає подією «loaded»; диспетчер повертає її у цикл подій.
🔹 Буфер для транскодера звільняє сам диспетчер на кожному виході, включно з винятками.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from PIL import Image, UnidentifiedImageError							# 🖼️ Декодування растру

# 🔠 Системні імпорти
import asyncio															# ⏳ Очікування події транскодера
import io																# 📦 BytesIO для Pillow
import logging															# 🧾 Логування декодування
from enum import Enum													# 🏷️ Класифікація типів
from typing import Dict, Mapping, Optional, Tuple						# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from texture_loader.domain.textures.interfaces import (
    DecodedImage,
    ITranscoder,
    Orientation,
    TranscodeBuffer,
)
from texture_loader.errors.texture_errors import (
    CapabilityMissingError,
    DecodeError,
    TextureLoaderError,
)
from texture_loader.shared.utils.logger import LOG_NAME
from .cache_key_resolver import file_name_from_url

logger = logging.getLogger(f"{LOG_NAME}.decode")


# ================================
# 🏷️ КЛАСИФІКАЦІЯ ТИПІВ
# ================================
class TextureKind(str, Enum):
    """🏷️ Шлях декодування."""

    STANDARD = "standard"												# 🖼️ Звичайний растр
    SPECIALIZED = "specialized"											# 🧩 KTX / Basis
    UNRECOGNIZED = "unrecognized"										# ❓ Без розширення


class SpecializedFormat(str, Enum):
    """🧩 Формати, що потребують транскодера."""

    KTX = "image/ktx"
    KTX2 = "image/ktx2"
    BASIS = "image/basis"


CAPABILITY_MISSING_MESSAGE = (
    "KTX and Basis texture support is not enabled: "
    "register a transcoder for {declared_type} to load {name}"
)


def classify(declared_type: str) -> Tuple[TextureKind, Optional[SpecializedFormat]]:
    """🏷️ Визначає шлях декодування для `image/<ext>` (порівняння точне, як у URL)."""
    for fmt in SpecializedFormat:
        if declared_type == fmt.value:
            return TextureKind.SPECIALIZED, fmt
    subtype = declared_type.split("/", 1)[-1] if "/" in declared_type else ""
    if not subtype:
        return TextureKind.UNRECOGNIZED, None
    return TextureKind.STANDARD, None


# ================================
# 🖼️ ДИСПЕТЧЕР
# ================================
class DecodeDispatcher:
    """🖼️ Обирає шлях декодування й повертає `DecodedImage` або підіймає `TextureLoaderError`."""

    def __init__(self, transcoders: Optional[Mapping[SpecializedFormat, ITranscoder]] = None) -> None:
        self._transcoders: Dict[SpecializedFormat, ITranscoder] = dict(transcoders or {})
        logger.debug(
            "⚙️ DecodeDispatcher init transcoders=%s",
            sorted(fmt.value for fmt in self._transcoders) or "none",
        )

    def has_capability(self, fmt: SpecializedFormat) -> bool:
        return fmt in self._transcoders

    def ensure_supported(self, declared_type: str, *, url: str = "") -> TextureKind:
        """
        🛡️ Перевірка до будь-якого I/O.

        Raises:
            CapabilityMissingError: Формат потребує транскодера, якого немає.
            DecodeError: URL не містить розширення.
        """
        kind, fmt = classify(declared_type)
        name = file_name_from_url(url)
        if kind is TextureKind.UNRECOGNIZED:
            raise DecodeError(
                f"Unrecognized texture type {declared_type!r} for {name or url!r}: URL has no file extension",
                url=url,
                source_name=name,
            )
        if fmt is not None and not self.has_capability(fmt):
            raise CapabilityMissingError(
                CAPABILITY_MISSING_MESSAGE.format(declared_type=declared_type, name=name or url),
                url=url,
            )
        return kind

    async def decode(self, data: bytes, declared_type: str, *, source: str) -> DecodedImage:
        """🎯 Декодує байти відповідно до типу."""
        kind = self.ensure_supported(declared_type, url=source)
        name = file_name_from_url(source)
        if kind is TextureKind.SPECIALIZED:
            return await self._transcode(SpecializedFormat(declared_type), data, source=source, name=name)

        image = await asyncio.to_thread(self._decode_raster, data, declared_type, source, name)
        logger.debug("🖼️ Raster decoded: %s (%dx%d)", name, image.width, image.height)
        return DecodedImage(image=image, source_path=source, orientation=Orientation(), name=name)

    # ================================
    # 🖼️ СТАНДАРТНИЙ РАСТР
    # ================================
    @staticmethod
    def _decode_raster(data: bytes, declared_type: str, source: str, name: str) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()												# 📥 Примусове декодування пікселів
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(
                f"Unable to decode {declared_type} texture[ {len(data)} ], from path = {name}: {exc}",
                url=source,
                byte_length=len(data),
                source_name=name,
            ) from exc
        return image

    # ================================
    # 🧩 ТРАНСКОДУВАННЯ
    # ================================
    async def _transcode(
        self,
        fmt: SpecializedFormat,
        data: bytes,
        *,
        source: str,
        name: str,
    ) -> DecodedImage:
        transcoder = self._transcoders[fmt]
        loop = asyncio.get_running_loop()
        loaded: asyncio.Future[Tuple[Optional[Image.Image], Orientation]] = loop.create_future()

        def _resolve(image: Optional[Image.Image], orientation: Orientation) -> None:
            if not loaded.done():
                loaded.set_result((image, orientation))

        def _on_loaded(image: Optional[Image.Image], orientation: Orientation) -> None:
            loop.call_soon_threadsafe(_resolve, image, orientation)		# 🔁 Маршалимо у цикл подій

        buffer = TranscodeBuffer(data)
        byte_length = len(buffer)
        try:
            transcoder.load_from_bytes(buffer, _on_loaded)
            image, orientation = await loaded
        except TextureLoaderError:
            raise
        except Exception as exc:										# noqa: BLE001
            logger.exception("❌ Transcoder raised for %s", name, extra={"byte_length": byte_length})
            raise DecodeError(
                f"Unable to transcode {fmt.value} texture[ {byte_length} ], from path = {name}: {exc}",
                url=source,
                byte_length=byte_length,
                source_name=name,
            ) from exc
        finally:
            buffer.release()											# 🧹 Звільняємо буфер на кожному виході

        if image is None:
            raise DecodeError(
                f"Unable to transcode {fmt.value} texture[ {byte_length} ], from path = {name}",
                url=source,
                byte_length=byte_length,
                source_name=name,
            )

        orientation = Orientation(
            flipped_horizontally=bool(orientation.flipped_horizontally),
            flipped_vertically=bool(orientation.flipped_vertically),
        )
        logger.debug("🧩 Transcoded %s (%dx%d, %s)", name, image.width, image.height, orientation)
        return DecodedImage(image=image, source_path=source, orientation=orientation, name=name)


__all__ = [
    "CAPABILITY_MISSING_MESSAGE",
    "DecodeDispatcher",
    "SpecializedFormat",
    "TextureKind",
    "classify",
]
