# 💾 texture_loader/infrastructure/textures/cache_persister.py
"""
💾 Запис завантажених байтів у локальний кеш текстур.

🔹 Дві політики: `skip_if_exists` (стандартний растр) та `always_overwrite` (KTX/Basis).
🔹 Запис атомарний: короткий тимчасовий `.tmp*.part` у тому ж каталозі + `os.replace`.
🔹 Збої запису логуються й поглинаються — вони не впливають на успіх завантаження.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# 🧵 Запис поза циклом подій
import logging															# 🧾 Логування кешу
import os																# 🔁 Атомарна заміна файлу
import tempfile														# 🧪 Тимчасові файли
from enum import Enum													# 🏷️ Політики запису
from pathlib import Path												# 🛤️ Шляхи

# 🧩 Внутрішні модулі проєкту
from texture_loader.errors.texture_errors import PersistenceError
from texture_loader.shared.metrics import inc_cache_write
from texture_loader.shared.utils.logger import LOG_NAME
from .decode_dispatcher import TextureKind

logger = logging.getLogger(f"{LOG_NAME}.cache")


class OverwritePolicy(str, Enum):
    """🏷️ Що робити, якщо файл у кеші вже є."""

    SKIP_IF_EXISTS = "skip_if_exists"
    ALWAYS_OVERWRITE = "always_overwrite"


def policy_for(kind: TextureKind) -> OverwritePolicy:
    """🧭 Політика, яку використовує кожен шлях декодування."""
    if kind is TextureKind.SPECIALIZED:
        return OverwritePolicy.ALWAYS_OVERWRITE
    return OverwritePolicy.SKIP_IF_EXISTS


class CachePersister:
    """💾 Зберігає сирі байти за шляхом з `CacheKeyResolver`."""

    async def persist(self, path: str, data: bytes, policy: OverwritePolicy) -> bool:
        """
        Записує байти відповідно до політики.

        Returns:
            bool: True, якщо файл записано; False — пропущено або збій (збій лише логується).
        """
        try:
            written = await asyncio.to_thread(self._write, Path(path), data, policy)
        except PersistenceError as exc:
            logger.error("❌ Cache write failed: %s", exc.message, extra={"cache_path": exc.path})
            inc_cache_write("failed")
            return False
        except (OSError, ValueError) as exc:
            logger.error("❌ Cache write failed for %s: %s", path, exc, extra={"cache_path": path})
            inc_cache_write("failed")
            return False
        inc_cache_write("written" if written else "skipped")
        return written

    @staticmethod
    def _write(path: Path, data: bytes, policy: OverwritePolicy) -> bool:
        tmp_name = None
        try:
            if policy is OverwritePolicy.SKIP_IF_EXISTS and path.exists():
                logger.debug("💾 Cache write skipped, already present: %s", path)
                return False
            fd, tmp_name = tempfile.mkstemp(prefix=".tmp", suffix=".part", dir=str(path.parent))
            with os.fdopen(fd, "wb") as file_handle:
                file_handle.write(data)
            os.replace(tmp_name, path)									# 🔁 Атомарно підміняємо файл
            tmp_name = None
        except OSError as exc:
            logger.debug("💾 Cache write OSError for %s", path, exc_info=True)
            raise PersistenceError(f"Unable to write cache file {path}: {exc}", path=str(path)) from exc
        finally:
            if tmp_name is not None:									# 🧹 Прибираємо тимчасовий файл
                try:
                    Path(tmp_name).unlink(missing_ok=True)
                except OSError:
                    logger.warning("🧹 Temp file left behind: %s", tmp_name)

        logger.info("💾 Cache update: %s (%d B, %s)", path, len(data), policy.value)
        return True


__all__ = ["CachePersister", "OverwritePolicy", "policy_for"]
