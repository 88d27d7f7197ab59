# 🧭 texture_loader/infrastructure/textures/platform_profile.py
"""
🧭 Профілі цільових платформ замість умовної компіляції.

🔹 `desktop` — кеш дозволено, локальні шляхи читаються як є.
🔹 `mobile` — кеш дозволено, локальний шлях перетворюється на `file://` URI.
🔹 `web` — кеш примусово вимкнено незалежно від запиту.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from pathlib import Path
from typing import Dict, Type

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.platform")


class PlatformProfile:
    """🧭 Базовий профіль: поведінка кешу та побудова URI для локальних файлів."""

    name = "desktop"
    cache_allowed = True

    def effective_use_cache(self, requested: bool) -> bool:
        """💾 Чи пробувати кеш з урахуванням жорстких правил платформи."""
        return bool(requested) and self.cache_allowed

    def local_uri(self, path: str) -> str:
        """🛤️ Як локальний шлях подається транспорту."""
        return path

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} cache_allowed={self.cache_allowed}>"


class DesktopProfile(PlatformProfile):
    name = "desktop"


class MobileProfile(PlatformProfile):
    name = "mobile"

    def local_uri(self, path: str) -> str:
        if path.lower().startswith("file:"):
            return path
        return Path(path).resolve().as_uri()							# 📎 file:///abs/path


class WebProfile(PlatformProfile):
    name = "web"
    cache_allowed = False												# 🚫 Жорстке правило браузерного розгортання


_PROFILES: Dict[str, Type[PlatformProfile]] = {
    DesktopProfile.name: DesktopProfile,
    MobileProfile.name: MobileProfile,
    WebProfile.name: WebProfile,
}


def profile_for(name: str) -> PlatformProfile:
    """🏭 Повертає профіль за назвою з конфігурації."""
    key = (name or DesktopProfile.name).strip().lower()
    try:
        profile = _PROFILES[key]()
    except KeyError:
        raise ValueError(f"Unknown platform profile {name!r}; expected one of {sorted(_PROFILES)}") from None
    logger.debug("🧭 Platform profile selected: %r", profile)
    return profile


__all__ = [
    "PlatformProfile",
    "DesktopProfile",
    "MobileProfile",
    "WebProfile",
    "profile_for",
]
