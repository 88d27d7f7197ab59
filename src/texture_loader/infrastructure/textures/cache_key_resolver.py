# 🗝️ texture_loader/infrastructure/textures/cache_key_resolver.py
"""
🗝️ Відображення URL → шлях у плоскому локальному кеші.

🔹 Ім'я файлу — останній сегмент URL без жодної нормалізації (query/fragment лишаються).
🔹 Кеш — одна пласка директорія `<root>/Textures`; наявність файлу і є індексом.
🔹 MIME-подібний тип будується як `image/<розширення>` дослівно з URL.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування кешу
import os																# 🛤️ Платформний роздільник шляхів
from pathlib import Path												# 📁 Створення каталогу кешу
from typing import Union

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cache")

CACHE_FOLDER_NAME = "Textures"											# 📂 Ім'я каталогу в persistent storage
MIME_PREFIX = "image/"


def file_name_from_url(url: str) -> str:
    """🏷️ Останній сегмент URL (після `/` або `\\`)."""
    return url.replace("\\", "/").rsplit("/", 1)[-1]


def extension_from_url(url: str) -> str:
    """🏷️ Розширення з крапкою (`.png`) або порожній рядок."""
    name = file_name_from_url(url)
    dot = name.rfind(".")
    if dot == -1 or dot == len(name) - 1:
        return ""
    return name[dot:]


def declared_type_for(url: str) -> str:
    """🏷️ `image/` + розширення без крапки, регістр не змінюється."""
    return MIME_PREFIX + extension_from_url(url)[1:]


def resolve(cache_root: Union[str, Path], url: str) -> str:
    """
    🗝️ Детермінований шлях у кеші для URL.

    URL без останнього сегмента дає сам `cache_root` — це відповідальність викликача.
    """
    root = os.fspath(cache_root)
    name = file_name_from_url(url)
    if not name:
        return root
    return os.path.join(root, name)


class CacheKeyResolver:
    """🗝️ Прив'язаний до конкретного кореня кешу резолвер."""

    def __init__(self, cache_root: Union[str, Path]) -> None:
        self.cache_root = os.fspath(cache_root)

    @classmethod
    def for_storage_root(cls, storage_root: Union[str, Path], folder: str = CACHE_FOLDER_NAME) -> "CacheKeyResolver":
        """📂 `<persistent-storage-root>/Textures`."""
        return cls(os.path.join(os.fspath(storage_root), folder))

    def ensure_root(self) -> Path:
        """🧱 Ідемпотентно створює каталог кешу."""
        root = Path(self.cache_root)
        root.mkdir(parents=True, exist_ok=True)
        logger.debug("📂 Cache root ready: %s", root)
        return root

    def resolve(self, url: str) -> str:
        return resolve(self.cache_root, url)

    def declared_type(self, url: str) -> str:
        return declared_type_for(url)


__all__ = [
    "CACHE_FOLDER_NAME",
    "CacheKeyResolver",
    "declared_type_for",
    "extension_from_url",
    "file_name_from_url",
    "resolve",
]
