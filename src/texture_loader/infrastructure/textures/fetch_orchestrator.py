# 🧭 texture_loader/infrastructure/textures/fetch_orchestrator.py
"""
🧭 Оркестратор «локальний кеш або мережа → декодування → запис у кеш».

🔹 `load()` — корутина, що повертає рівно один `FetchOutcome` (або None, якщо скасовано).
🔹 `fetch()` — колбек-обгортка над `load()` з `FetchHandle` для скасування.
🔹 Кеш пробується першим (якщо дозволено платформою) і мовчки поступається мережі.
🔹 Прогрес неспадний, завершується рівно одним `1.0` перед фінальним результатом.
🔹 Після скасування жоден колбек більше не викликається; вже доставлене не відкликається.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Кооперативні задачі
import logging															# 🧾 Логування пайплайна
from dataclasses import replace										# 🧱 Копія DTO з cache_path
from typing import Optional, Set										# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from texture_loader.domain.textures.interfaces import (
    CancellationToken,
    DecodedImage,
    ErrorFn,
    FailureKind,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    ITransport,
    ProgressFn,
    SuccessFn,
)
from texture_loader.errors.texture_errors import (
    FetchCancelled,
    InputError,
    TextureLoaderError,
)
from texture_loader.shared.metrics import inc_fetch, inc_fetch_failure
from texture_loader.shared.utils.logger import LOG_NAME
from .cache_key_resolver import CacheKeyResolver
from .cache_persister import CachePersister, policy_for
from .decode_dispatcher import DecodeDispatcher
from .platform_profile import DesktopProfile, PlatformProfile

logger = logging.getLogger(f"{LOG_NAME}.fetch")

EMPTY_URL_MESSAGE = "Texture fetch requested with an empty URL"


# ================================
# 📶 ПРОГРЕС
# ================================
class ProgressReporter:
    """
    📶 Нормалізує прогрес одного завантаження.

    Значення обрізаються до [0, 1), спадні відкидаються, а `1.0` надсилається
    рівно один раз через `finish()`.
    """

    def __init__(self, callback: Optional[ProgressFn], token: CancellationToken) -> None:
        self._callback = callback
        self._token = token
        self._last = 0.0
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def report(self, value: float) -> None:
        if self._finished or value >= 1.0:
            return
        value = max(0.0, float(value))
        if value < self._last:
            return
        self._last = value
        self._emit(value)

    def finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._last = 1.0
        self._emit(1.0)

    def _emit(self, value: float) -> None:
        if self._callback is None or self._token.cancelled:
            return
        try:
            self._callback(value)
        except Exception:												# noqa: BLE001
            logger.exception("⚠️ Progress callback raised (value=%.3f)", value)


# ================================
# 🎫 ХЕНДЛ ЗАВАНТАЖЕННЯ
# ================================
class FetchHandle:
    """🎫 Керування одним `fetch()`: скасування та очікування результату."""

    def __init__(self, token: CancellationToken, task: Optional["asyncio.Task[Optional[FetchOutcome]]"] = None,
                 outcome: Optional[FetchOutcome] = None) -> None:
        self._token = token
        self._task = task
        self._outcome = outcome

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    def cancel(self) -> None:
        """🛑 Зупиняє подальші колбеки; після доставленого результату — no-op."""
        self._token.cancel()

    async def wait(self) -> Optional[FetchOutcome]:
        """⏳ Чекає завершення; None — якщо результат не доставлено через скасування."""
        if self._task is not None:
            return await self._task
        return self._outcome


class _OutcomeLatch:
    """🔒 Гарантує, що фінальний колбек буде викликано не більше одного разу."""

    def __init__(self, on_success: Optional[SuccessFn], on_error: Optional[ErrorFn]) -> None:
        self._on_success = on_success
        self._on_error = on_error
        self.delivered = False

    def deliver(self, outcome: FetchOutcome) -> None:
        if self.delivered:
            logger.error("🚫 Second terminal outcome suppressed: %r", outcome)
            return
        self.delivered = True
        try:
            if isinstance(outcome, FetchSuccess):
                if self._on_success is not None:
                    self._on_success(outcome.image)
            elif self._on_error is not None:
                self._on_error(outcome)
        except Exception:												# noqa: BLE001
            logger.exception("⚠️ Outcome callback raised for %r", outcome)


# ================================
# 🧭 ОРКЕСТРАТОР
# ================================
class FetchOrchestrator:
    """🧭 Координує пробу кешу, мережевий GET, декодування та запис."""

    def __init__(
        self,
        resolver: CacheKeyResolver,
        transport: ITransport,
        dispatcher: DecodeDispatcher,
        persister: Optional[CachePersister] = None,
        platform: Optional[PlatformProfile] = None,
    ) -> None:
        self.resolver = resolver
        self.transport = transport
        self.dispatcher = dispatcher
        self.persister = persister or CachePersister()
        self.platform = platform or DesktopProfile()
        self._tasks: Set[asyncio.Task] = set()							# 📌 Сильні посилання на фонові задачі
        self.resolver.ensure_root()										# 🧱 Каталог кешу існує до першої проби
        logger.info(
            "🧭 FetchOrchestrator ready | cache_root=%s platform=%s",
            self.resolver.cache_root,
            self.platform.name,
        )

    # ================================
    # 📣 ПУБЛІЧНИЙ API
    # ================================
    def fetch(
        self,
        request: FetchRequest,
        on_progress: Optional[ProgressFn] = None,
        on_success: Optional[SuccessFn] = None,
        on_error: Optional[ErrorFn] = None,
    ) -> FetchHandle:
        """
        Запускає завантаження в поточному циклі подій і повертає хендл.

        Порожній URL відхиляється синхронно, ще до повернення хендла.
        """
        token = CancellationToken()
        latch = _OutcomeLatch(on_success, on_error)

        if not request.url:
            failure = self._input_failure(request)
            latch.deliver(failure)
            return FetchHandle(token, outcome=failure)

        async def _run() -> Optional[FetchOutcome]:
            outcome = await self.load(request, on_progress=on_progress, token=token)
            if outcome is None or token.cancelled:
                return None
            latch.deliver(outcome)
            return outcome

        task = asyncio.get_running_loop().create_task(_run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return FetchHandle(token, task=task)

    async def load(
        self,
        request: FetchRequest,
        *,
        on_progress: Optional[ProgressFn] = None,
        token: Optional[CancellationToken] = None,
    ) -> Optional[FetchOutcome]:
        """
        🎯 Повертає рівно один результат для запиту.

        Returns:
            FetchSuccess | FetchFailure, або None, якщо операцію скасовано до результату.
        """
        token = token or CancellationToken()
        url = request.url
        if not url:
            return self._input_failure(request)

        declared_type = self.resolver.declared_type(url)
        try:
            kind = self.dispatcher.ensure_supported(declared_type, url=url)
        except TextureLoaderError as exc:
            return self._failure(exc)

        cache_path = self.resolver.resolve(url)
        reporter = ProgressReporter(on_progress, token)

        # --- 1. Локальний кеш ---
        if self.platform.effective_use_cache(request.use_cache):
            cached = await self._try_cache(cache_path, declared_type, token)
            if token.cancelled:
                return None
            if cached is not None:
                reporter.finish()
                inc_fetch("cache")
                logger.info("💾 Cache hit: %s → %s", url, cache_path, extra={"url": url, "cache_path": cache_path})
                return FetchSuccess(image=cached, from_cache=True)
        elif request.use_cache:
            logger.debug("🚫 Cache disabled on platform %s for %s", self.platform.name, url)

        # --- 2. Мережа ---
        try:
            data = await self.transport.get(url, on_progress=reporter.report, token=token)
        except FetchCancelled:
            return None
        except TextureLoaderError as exc:
            if token.cancelled:
                return None
            reporter.finish()
            return self._failure(exc)
        except Exception as exc:										# noqa: BLE001
            logger.exception("❌ Unexpected transport failure for %s", url)
            if token.cancelled:
                return None
            reporter.finish()
            return self._unexpected(FailureKind.TRANSPORT, exc, url)

        if token.cancelled:
            return None
        reporter.finish()

        # --- 3. Декодування ---
        try:
            image = await self.dispatcher.decode(data, declared_type, source=url)
        except TextureLoaderError as exc:
            return None if token.cancelled else self._failure(exc)
        except Exception as exc:										# noqa: BLE001
            logger.exception("❌ Unexpected decode failure for %s", url)
            return None if token.cancelled else self._unexpected(FailureKind.DECODE, exc, url)

        if token.cancelled:
            return None

        # --- 4. Запис у кеш (збій не впливає на успіх) ---
        try:
            await self.persister.persist(cache_path, data, policy_for(kind))
        except Exception:												# noqa: BLE001
            logger.exception("💾 Unexpected cache write failure for %s", cache_path)

        inc_fetch("network")
        logger.info(
            "✅ Texture loaded: %s (%dx%d, %d B)",
            url,
            image.pixel_width,
            image.pixel_height,
            len(data),
            extra={"url": url, "cache_path": cache_path, "bytes": len(data)},
        )
        return FetchSuccess(image=replace(image, cache_path=cache_path), from_cache=False)

    # ================================
    # 💾 ПРОБА КЕШУ
    # ================================
    async def _try_cache(
        self,
        cache_path: str,
        declared_type: str,
        token: CancellationToken,
    ) -> Optional[DecodedImage]:
        """💾 Читає й декодує файл кешу; будь-який збій — тихий промах."""
        uri = self.platform.local_uri(cache_path)
        try:
            data = await self.transport.get(uri, token=token)
            image = await self.dispatcher.decode(data, declared_type, source=uri)
        except FetchCancelled:
            return None
        except TextureLoaderError as exc:
            logger.debug("💾 Cache miss: %s (%s)", cache_path, exc.message, extra={"cache_path": cache_path})
            return None
        except Exception:												# noqa: BLE001
            logger.debug("💾 Cache probe failed: %s", cache_path, exc_info=True)
            return None
        return replace(image, cache_path=cache_path)

    # ================================
    # 🧰 ДОПОМІЖНІ
    # ================================
    def _input_failure(self, request: FetchRequest) -> FetchFailure:
        return self._failure(InputError(EMPTY_URL_MESSAGE, url=request.url))

    def _failure(self, exc: TextureLoaderError) -> FetchFailure:
        level = logging.ERROR if exc.kind is FailureKind.INPUT else logging.WARNING
        logger.log(level, "❌ Texture fetch failed: %s", exc.message, extra=exc.to_log_extra())
        inc_fetch_failure(exc.kind.value)
        return exc.to_failure()

    @staticmethod
    def _unexpected(kind: FailureKind, exc: Exception, url: str) -> FetchFailure:
        inc_fetch_failure(kind.value)
        return FetchFailure(kind=kind, reason=str(exc) or type(exc).__name__, url=url)


__all__ = [
    "EMPTY_URL_MESSAGE",
    "FetchHandle",
    "FetchOrchestrator",
    "ProgressReporter",
]
