# 🖼️ texture_loader/infrastructure/textures/__init__.py
"""
🖼️ Пайплайн завантаження текстур.

🔹 Резолвер кешу, профілі платформ, транспорт, декодування, запис у кеш.
🔹 Оркестратор одного запиту та пакетний завантажувач.
"""

from __future__ import annotations

from .batch_loader import BatchLoader, BatchReport
from .cache_key_resolver import CACHE_FOLDER_NAME, CacheKeyResolver, declared_type_for, file_name_from_url
from .cache_persister import CachePersister, OverwritePolicy, policy_for
from .decode_dispatcher import DecodeDispatcher, SpecializedFormat, TextureKind, classify
from .fetch_orchestrator import FetchHandle, FetchOrchestrator, ProgressReporter
from .platform_profile import DesktopProfile, MobileProfile, PlatformProfile, WebProfile, profile_for
from .transport import AssetTransport

# ================================
# 📦 ЕКСПОРТ ПАКЕТУ
# ================================
__all__ = [
    "AssetTransport",
    "BatchLoader",
    "BatchReport",
    "CACHE_FOLDER_NAME",
    "CacheKeyResolver",
    "CachePersister",
    "DecodeDispatcher",
    "DesktopProfile",
    "FetchHandle",
    "FetchOrchestrator",
    "MobileProfile",
    "OverwritePolicy",
    "PlatformProfile",
    "ProgressReporter",
    "SpecializedFormat",
    "TextureKind",
    "WebProfile",
    "classify",
    "declared_type_for",
    "file_name_from_url",
    "policy_for",
    "profile_for",
]
