# 📦 texture_loader/config/container.py
"""
📦 Контейнер залежностей завантажувача текстур.

🔹 Створює сервіси в правильному порядку DI
🔹 Інкапсулює налаштування транспорту, кешу, платформи та пам'яті
🔹 Приймає підміни (transport, transcoders, probe) для тестів і вбудовування
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Базові засоби логування
from typing import Any, Mapping, Optional								# 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from texture_loader.config.config_service import ConfigService
from texture_loader.domain.textures.interfaces import IMemoryProbe, ITranscoder, ITransport
from texture_loader.errors.strategies import HttpxErrorStrategy
from texture_loader.infrastructure.memory import MemoryGate, PsutilMemoryProbe
from texture_loader.infrastructure.textures import (
    CACHE_FOLDER_NAME,
    AssetTransport,
    BatchLoader,
    CacheKeyResolver,
    CachePersister,
    DecodeDispatcher,
    FetchOrchestrator,
    SpecializedFormat,
    profile_for,
)
from texture_loader.shared.metrics import maybe_start_prometheus
from texture_loader.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(f"{LOG_NAME}.container")


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _int_or_default(value: Any, default: int) -> int:
    """Повертає ціле число або запасне значення, якщо каст неможливий."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_or_default(value: Any, default: Optional[float]) -> Optional[float]:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def bootstrap_logging(config: ConfigService) -> logging.Logger:
    """Зчитує конфіг логування і запускає кореневий логер пакета."""
    node = config.get("logging", {}) or {}
    return init_logging_from_config(node)


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """Координує створення пайплайна завантаження та шлюзу пам'яті."""

    def __init__(
        self,
        config: ConfigService,
        *,
        transport: Optional[ITransport] = None,
        transcoders: Optional[Mapping[SpecializedFormat, ITranscoder]] = None,
        probe: Optional[IMemoryProbe] = None,
    ) -> None:
        self.config = config
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._bootstrap_metrics_if_enabled()
        self._setup_platform_and_cache()
        self._setup_transport(transport)
        self._setup_decoding(transcoders)
        self._setup_orchestrator()
        self._setup_memory(probe)
        logger.info("✅ Контейнер ініціалізовано успішно")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        """Стартує Prometheus-експортер, якщо це дозволено конфігурацією."""
        if not bool(self.config.get("metrics.enabled", False)):
            logger.debug("📉 Prometheus вимкнено конфігом")
            return
        exporter_name = (self.config.get("metrics.exporter", "prometheus") or "prometheus").lower()
        if exporter_name != "prometheus":
            logger.debug("📉 Експортер %s не підтримується", exporter_name)
            return
        port = _int_or_default(self.config.get("metrics.prometheus.port", 9108, cast=int), 9108)
        maybe_start_prometheus(port)

    # ================================
    # 🧭 ПЛАТФОРМА ТА КЕШ
    # ================================
    def _setup_platform_and_cache(self) -> None:
        self.platform = profile_for(str(self.config.get("platform", "desktop") or "desktop"))
        storage_root = self.config.get("cache.root", "var") or "var"
        folder = self.config.get("cache.folder", CACHE_FOLDER_NAME) or CACHE_FOLDER_NAME
        self.resolver = CacheKeyResolver.for_storage_root(storage_root, folder)
        self.persister = CachePersister()

    # ================================
    # 🌐 ТРАНСПОРТ
    # ================================
    def _setup_transport(self, transport: Optional[ITransport]) -> None:
        if transport is not None:
            self.transport: ITransport = transport
            return
        timeout = self.config.get("network.timeout_s")
        self.transport = AssetTransport(
            timeout_s=None if timeout is None else _float_or_default(timeout, None),
            chunk_size=_int_or_default(self.config.get("network.chunk_size"), 64 * 1024),
            error_strategy=HttpxErrorStrategy(),
        )

    # ================================
    # 🖼️ ДЕКОДУВАННЯ
    # ================================
    def _setup_decoding(self, transcoders: Optional[Mapping[SpecializedFormat, ITranscoder]]) -> None:
        enabled = bool(self.config.get("transcoder.enabled", False))
        if transcoders and not enabled:
            logger.warning("🧩 Transcoders supplied but transcoder.enabled=false; specialized formats stay disabled")
        self.dispatcher = DecodeDispatcher(transcoders if enabled else None)

    # ================================
    # 🧭 ОРКЕСТРАТОР
    # ================================
    def _setup_orchestrator(self) -> None:
        self.orchestrator = FetchOrchestrator(
            resolver=self.resolver,
            transport=self.transport,
            dispatcher=self.dispatcher,
            persister=self.persister,
            platform=self.platform,
        )

    # ================================
    # 🧠 ПАМ'ЯТЬ ТА ПАКЕТИ
    # ================================
    def _setup_memory(self, probe: Optional[IMemoryProbe]) -> None:
        self.probe: IMemoryProbe = probe or PsutilMemoryProbe()
        self.memory_gate = MemoryGate(
            self.probe,
            safety_margin=_float_or_default(self.config.get("memory.safety_margin"), 0.30),
        )
        self.batch_loader = BatchLoader(
            self.orchestrator,
            self.memory_gate,
            concurrency=max(1, _int_or_default(self.config.get("batch.concurrency"), 4)),
            asset_estimate_bytes=_int_or_default(self.config.get("memory.asset_estimate_bytes"), 0),
        )


__all__ = ["Container", "bootstrap_logging"]
