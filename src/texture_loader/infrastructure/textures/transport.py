# 📥 texture_loader/infrastructure/textures/transport.py
"""
📥 Єдиний транспорт байтів для мережевих URL та локального кешу.

🔹 Стримить HTTP(S) відповіді через `httpx` і рапортує прогрес за `Content-Length`.
🔹 Читає локальні шляхи та `file://` URI тим самим викликом `get()`.
🔹 Перевіряє прапорець скасування між шматками та закриває з'єднання при скасуванні.
🔹 Жодних власних заголовків і ретраїв: один GET на спробу.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio															# ⏳ Читання файлів поза циклом подій
import logging															# 🧾 Логування результатів
from pathlib import Path												# 🛤️ Шляхи до файлів
from typing import Optional												# 🧰 Допоміжні типи
from urllib.parse import urlsplit									# 🔗 Розбір URI
from urllib.request import url2pathname								# 📎 file:// → локальний шлях

# 🧩 Внутрішні модулі проєкту
from texture_loader.domain.textures.interfaces import CancellationToken, ProgressFn
from texture_loader.errors.strategies import HttpxErrorStrategy, IErrorHandlingStrategy
from texture_loader.errors.texture_errors import FetchCancelled, TransportError
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.transport")


# ================================
# 📦 КОНСТАНТИ
# ================================
NETWORK_SCHEMES = ("http", "https")									# 🌐 Схеми, що йдуть через httpx
FILE_SCHEME = "file"													# 📎 Локальний URI


# ================================
# 📥 ТРАНСПОРТ
# ================================
class AssetTransport:
    """📥 Повертає тіло ресурсу за URL або локальним шляхом."""

    def __init__(
        self,
        *,
        timeout_s: Optional[float] = None,
        chunk_size: int = 64 * 1024,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        error_strategy: Optional[IErrorHandlingStrategy] = None,
    ) -> None:
        self.timeout_s = None if timeout_s is None else float(timeout_s)	# ⏳ None: без таймауту
        self.chunk_size = max(1, int(chunk_size))						# 📦 Розмір шматків при стримінгу
        self._http_transport = http_transport							# 🔌 Підміна транспорту (тести/вбудовування)
        self._errors = error_strategy or HttpxErrorStrategy()			# 🧭 Мапінг httpx → TransportError
        logger.debug(
            "⚙️ AssetTransport init timeout=%s chunk=%d custom_transport=%s",
            self.timeout_s,
            self.chunk_size,
            http_transport is not None,
        )

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def get(
        self,
        uri: str,
        *,
        on_progress: Optional[ProgressFn] = None,
        token: Optional[CancellationToken] = None,
    ) -> bytes:
        """📦 Завантажує ресурс у пам'ять; збої підіймаються як `TransportError`."""
        scheme = urlsplit(uri).scheme.lower()
        if scheme in NETWORK_SCHEMES:
            return await self._get_http(uri, on_progress=on_progress, token=token)
        return await self._get_local(uri, token=token)

    # ================================
    # 🌐 МЕРЕЖА
    # ================================
    async def _get_http(
        self,
        url: str,
        *,
        on_progress: Optional[ProgressFn],
        token: Optional[CancellationToken],
    ) -> bytes:
        """🌐 Один GET зі стримінгом у буфер."""
        logger.debug("🌐 GET %s", url)
        try:
            async with self._make_client() as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    total = self._parse_length(response.headers.get("Content-Length"))
                    buffer = bytearray()
                    async for chunk in response.aiter_bytes(self.chunk_size):
                        if token is not None and token.cancelled:		# 🛑 Скасовано, закриваємо з'єднання
                            logger.debug("🛑 GET cancelled mid-stream: %s (%d B)", url, len(buffer))
                            raise FetchCancelled(url)
                        if not chunk:
                            continue
                        buffer += chunk
                        if total and on_progress is not None:
                            on_progress(min(1.0, len(buffer) / total))
        except httpx.HTTPError as exc:
            mapped = self._errors.handle(exc)
            if mapped is None:
                mapped = TransportError(str(exc) or type(exc).__name__, url=url)
            logger.warning(
                "⚠️ HTTP-помилка під час завантаження %s: %s",
                url,
                mapped.message,
                extra=mapped.to_log_extra(),
            )
            raise mapped from exc

        logger.debug("📥 GET done: %s (%d B)", url, len(buffer))
        return bytes(buffer)

    def _make_client(self) -> httpx.AsyncClient:
        """🔧 Клієнт без власних заголовків; редіректи — як їх дає httpx."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            follow_redirects=True,
            transport=self._http_transport,
        )

    @staticmethod
    def _parse_length(header_value: Optional[str]) -> Optional[int]:
        """📏 Перетворює заголовок `Content-Length` у int."""
        if not header_value or not header_value.isdigit():
            return None
        return int(header_value)

    # ================================
    # 📁 ЛОКАЛЬНІ ФАЙЛИ
    # ================================
    async def _get_local(self, uri: str, *, token: Optional[CancellationToken]) -> bytes:
        """📁 Читає файл за шляхом або `file://` URI."""
        path = self.local_path(uri)
        try:
            data = await asyncio.to_thread(path.read_bytes)				# 🧵 Не блокуємо цикл подій
        except OSError as exc:
            logger.debug("📁 Local read failed: %s (%s)", path, exc)
            raise TransportError(f"{exc.strerror or exc}: {path}", url=uri) from exc
        if token is not None and token.cancelled:
            raise FetchCancelled(uri)
        logger.debug("📁 Local read ok: %s (%d B)", path, len(data))
        return data

    @staticmethod
    def local_path(uri: str) -> Path:
        """📎 `file:///a/b.png` → `/a/b.png`; звичайний шлях лишається як є."""
        parts = urlsplit(uri)
        if parts.scheme.lower() == FILE_SCHEME:
            return Path(url2pathname(parts.path))
        return Path(uri)


__all__ = ["AssetTransport", "NETWORK_SCHEMES"]
