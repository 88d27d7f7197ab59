# 📚 texture_loader/infrastructure/textures/batch_loader.py
"""
📚 Пакетне завантаження однієї текстури N разів (стрес-сценарій).

🔹 Перед кожним запитом перевіряє `MemoryGate`; якщо пам'яті мало — запит пропускається.
🔹 Паралельність обмежена семафором: `concurrency` — стеля, а фактичну кількість
   слотів підказує `MemoryGate.recommended_concurrency` на момент запуску пакета.
🔹 Перше успішне зображення повертається окремо (його показують на екрані).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Семафор та gather
import logging															# 🧾 Логування пакетів
from dataclasses import dataclass, field								# 🧱 Звіт
from typing import Callable, List, Optional								# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from texture_loader.domain.textures.interfaces import (
    DecodedImage,
    FetchFailure,
    FetchRequest,
    FetchSuccess,
)
from texture_loader.infrastructure.memory.memory_gate import MemoryGate
from texture_loader.shared.utils.logger import LOG_NAME
from .fetch_orchestrator import FetchOrchestrator

logger = logging.getLogger(f"{LOG_NAME}.batch")


@dataclass
class BatchReport:
    """📊 Підсумок пакетного завантаження."""

    url: str
    requested: int
    issued: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped_by_memory: int = 0
    concurrency: int = 0
    first: Optional[DecodedImage] = None
    errors: List[FetchFailure] = field(default_factory=list)


class BatchLoader:
    """📚 Запускає `count` завантажень одного URL з контролем пам'яті."""

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        gate: Optional[MemoryGate] = None,
        *,
        concurrency: int = 4,
        asset_estimate_bytes: int = 0,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.orchestrator = orchestrator
        self.gate = gate
        self.concurrency = concurrency
        self.asset_estimate_bytes = max(0, int(asset_estimate_bytes))

    def effective_concurrency(self) -> int:
        """🔢 Кількість слотів семафора: стеля `concurrency`, звужена бюджетом пам'яті."""
        if self.gate is None or self.asset_estimate_bytes <= 0:
            return self.concurrency
        return self.gate.recommended_concurrency(self.asset_estimate_bytes, cap=self.concurrency)

    async def load_many(
        self,
        url: str,
        count: int,
        *,
        use_cache: bool = True,
        on_first: Optional[Callable[[DecodedImage], None]] = None,
    ) -> BatchReport:
        """🎯 Завантажує `url` `count` разів і повертає звіт."""
        if count <= 0:
            raise ValueError("count must be a positive integer")

        report = BatchReport(url=url, requested=count, concurrency=self.effective_concurrency())
        semaphore = asyncio.Semaphore(report.concurrency)
        request = FetchRequest(url=url, use_cache=use_cache)

        async def _one(index: int) -> None:
            async with semaphore:
                if self.gate is not None and not self.gate.safe_to_allocate(self.asset_estimate_bytes):
                    report.skipped_by_memory += 1
                    logger.warning("🧠 Batch item %d skipped: memory budget exhausted", index)
                    return
                report.issued += 1
                outcome = await self.orchestrator.load(request)
            if isinstance(outcome, FetchSuccess):
                report.succeeded += 1
                if report.first is None:
                    report.first = outcome.image
                    if on_first is not None:
                        try:
                            on_first(outcome.image)
                        except Exception:								# noqa: BLE001
                            logger.exception("⚠️ on_first callback raised for %s", url)
            elif outcome is not None:
                report.failed += 1
                report.errors.append(outcome)

        await asyncio.gather(*(_one(i) for i in range(count)))
        logger.info(
            "📚 Batch done: %s | requested=%d workers=%d issued=%d ok=%d failed=%d skipped=%d",
            url,
            report.requested,
            report.concurrency,
            report.issued,
            report.succeeded,
            report.failed,
            report.skipped_by_memory,
        )
        return report


__all__ = ["BatchLoader", "BatchReport"]
