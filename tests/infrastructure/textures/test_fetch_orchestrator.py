import asyncio
from pathlib import Path

import pytest
from PIL import Image

from texture_loader.domain.textures.interfaces import (
    CancellationToken,
    FailureKind,
    FetchFailure,
    FetchRequest,
    FetchSuccess,
    Orientation,
)
from texture_loader.errors.texture_errors import PersistenceError, TransportError
from texture_loader.infrastructure.textures.cache_key_resolver import CacheKeyResolver
from texture_loader.infrastructure.textures.cache_persister import CachePersister
from texture_loader.infrastructure.textures.decode_dispatcher import DecodeDispatcher, SpecializedFormat
from texture_loader.infrastructure.textures.fetch_orchestrator import FetchOrchestrator, ProgressReporter
from texture_loader.infrastructure.textures.platform_profile import MobileProfile, WebProfile

URL = "https://x.test/img.png"


# ──────────────────────────────────────────────────────────────────────────────
#                               🧪 Вспомогалки
# ──────────────────────────────────────────────────────────────────────────────

def _build(tmp_path, transport, **kwargs) -> FetchOrchestrator:
    resolver = CacheKeyResolver.for_storage_root(tmp_path)
    return FetchOrchestrator(
        resolver=resolver,
        transport=transport,
        dispatcher=kwargs.pop("dispatcher", DecodeDispatcher()),
        **kwargs,
    )


class _Recorder:
    """Фіксує послідовність подій одного fetch()."""

    def __init__(self):
        self.events = []
        self.done = asyncio.Event()

    def progress(self, value):
        self.events.append(("progress", value))

    def success(self, image):
        self.events.append(("success", image))
        self.done.set()

    def error(self, failure):
        self.events.append(("error", failure))
        self.done.set()

    @property
    def terminal(self):
        return [e for e in self.events if e[0] in ("success", "error")]

    @property
    def progress_values(self):
        return [v for kind, v in self.events if kind == "progress"]


def _fetch(orchestrator, request, recorder):
    return orchestrator.fetch(request, recorder.progress, recorder.success, recorder.error)


class _FailingPersister(CachePersister):
    @staticmethod
    def _write(path, data, policy):
        raise PersistenceError(f"disk full: {path}", path=str(path))


class _CrashingPersister(CachePersister):
    async def persist(self, path, data, policy):
        raise RuntimeError("unexpected")


# ──────────────────────────────────────────────────────────────────────────────
#                              📶 ProgressReporter
# ──────────────────────────────────────────────────────────────────────────────

def test_progress_reporter_is_monotonic_and_finishes_once():
    values = []
    reporter = ProgressReporter(values.append, CancellationToken())

    for v in (0.1, 0.5, 0.3, -1.0, 1.0, 0.7):
        reporter.report(v)
    reporter.finish()
    reporter.finish()
    reporter.report(0.9)

    assert values == [0.1, 0.5, 0.7, 1.0]


def test_progress_reporter_silent_after_cancel():
    values = []
    token = CancellationToken()
    reporter = ProgressReporter(values.append, token)
    token.cancel()
    reporter.report(0.5)
    reporter.finish()
    assert values == []


# ──────────────────────────────────────────────────────────────────────────────
#                                💾 Кеш і мережа
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_use_cache_false_never_reads_cache_path(tmp_path, fake_transport, png_bytes):
    orchestrator = _build(tmp_path, fake_transport)
    Path(orchestrator.resolver.resolve(URL)).write_bytes(png_bytes)

    outcome = await orchestrator.load(FetchRequest(URL, use_cache=False))

    assert isinstance(outcome, FetchSuccess)
    assert outcome.from_cache is False
    assert fake_transport.local_calls == []
    assert fake_transport.network_calls == [URL]


@pytest.mark.asyncio
async def test_cache_hit_skips_network(tmp_path, transport_factory, png_factory):
    transport = transport_factory({})
    orchestrator = _build(tmp_path, transport)
    cache_path = orchestrator.resolver.resolve(URL)
    Path(cache_path).write_bytes(png_factory(2, 2))
    progress = []

    outcome = await orchestrator.load(FetchRequest(URL), on_progress=progress.append)

    assert isinstance(outcome, FetchSuccess)
    assert outcome.from_cache is True
    assert outcome.image.cache_path == cache_path
    assert outcome.image.source_path == cache_path
    assert transport.network_calls == []
    assert progress == [1.0]


@pytest.mark.asyncio
async def test_network_success_persists_to_cache(tmp_path, fake_transport, png_bytes):
    orchestrator = _build(tmp_path, fake_transport)

    outcome = await orchestrator.load(FetchRequest(URL))

    cache_path = orchestrator.resolver.resolve(URL)
    assert isinstance(outcome, FetchSuccess)
    assert outcome.image.source_path == URL
    assert outcome.image.cache_path == cache_path
    assert Path(cache_path).read_bytes() == png_bytes

    again = await orchestrator.load(FetchRequest(URL))
    assert again.from_cache is True
    assert fake_transport.network_calls == [URL]


@pytest.mark.asyncio
async def test_corrupt_cache_file_falls_back_to_network(tmp_path, fake_transport, png_bytes):
    orchestrator = _build(tmp_path, fake_transport)
    cache_path = Path(orchestrator.resolver.resolve(URL))
    cache_path.write_bytes(b"garbage")

    outcome = await orchestrator.load(FetchRequest(URL))

    assert isinstance(outcome, FetchSuccess)
    assert outcome.from_cache is False
    # растр не перезаписує наявний файл, навіть пошкоджений
    assert cache_path.read_bytes() == b"garbage"


@pytest.mark.asyncio
async def test_web_profile_ignores_cache_request(tmp_path, fake_transport, png_bytes):
    orchestrator = _build(tmp_path, fake_transport, platform=WebProfile())
    Path(orchestrator.resolver.resolve(URL)).write_bytes(png_bytes)

    outcome = await orchestrator.load(FetchRequest(URL, use_cache=True))

    assert outcome.from_cache is False
    assert fake_transport.local_calls == []


@pytest.mark.asyncio
async def test_mobile_profile_reads_cache_through_file_uri(tmp_path, transport_factory, png_bytes):
    transport = transport_factory({})
    orchestrator = _build(tmp_path, transport, platform=MobileProfile())
    Path(orchestrator.resolver.resolve(URL)).write_bytes(png_bytes)

    outcome = await orchestrator.load(FetchRequest(URL))

    assert outcome.from_cache is True
    assert len(transport.local_calls) == 1
    assert transport.local_calls[0].startswith("file://")


@pytest.mark.asyncio
async def test_persistence_failure_does_not_fail_fetch(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport, persister=_FailingPersister())

    outcome = await orchestrator.load(FetchRequest(URL))

    assert isinstance(outcome, FetchSuccess)
    assert not Path(orchestrator.resolver.resolve(URL)).exists()


@pytest.mark.asyncio
async def test_unexpected_persister_error_still_returns_success(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport, persister=_CrashingPersister())

    outcome = await orchestrator.load(FetchRequest(URL))

    assert isinstance(outcome, FetchSuccess)


@pytest.mark.asyncio
async def test_overlong_cache_name_still_delivers_one_success(tmp_path, transport_factory, png_bytes):
    url = "https://x.test/" + "a" * 300 + ".png"
    orchestrator = _build(tmp_path, transport_factory({url: png_bytes}))
    recorder = _Recorder()

    outcome = await _fetch(orchestrator, FetchRequest(url), recorder).wait()

    assert isinstance(outcome, FetchSuccess)
    assert [kind for kind, _ in recorder.terminal] == ["success"]
    assert outcome.image.pixel_width == 4


# ──────────────────────────────────────────────────────────────────────────────
#                                 ❌ Збої
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_transport_failure_surfaces_message_after_final_progress(tmp_path, transport_factory):
    transport = transport_factory({})
    transport.failures[URL] = TransportError("HTTP 500 Internal Server Error", url=URL, status_code=500)
    orchestrator = _build(tmp_path, transport)
    recorder = _Recorder()

    handle = _fetch(orchestrator, FetchRequest(URL, use_cache=False), recorder)
    await handle.wait()

    assert recorder.progress_values == [1.0]
    assert recorder.events[-1][0] == "error"
    failure = recorder.events[-1][1]
    assert failure.kind is FailureKind.TRANSPORT
    assert failure.reason == "HTTP 500 Internal Server Error"


@pytest.mark.asyncio
async def test_specialized_url_without_capability_makes_no_network_call(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport)
    progress = []

    outcome = await orchestrator.load(FetchRequest("https://x.test/tex.ktx2"), on_progress=progress.append)

    assert isinstance(outcome, FetchFailure)
    assert outcome.kind is FailureKind.CAPABILITY_MISSING
    assert fake_transport.network_calls == []
    assert fake_transport.local_calls == []
    assert progress == []


@pytest.mark.asyncio
async def test_url_without_extension_fails_before_io(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport)

    outcome = await orchestrator.load(FetchRequest("https://x.test/noext"))

    assert outcome.kind is FailureKind.DECODE
    assert fake_transport.network_calls == []


@pytest.mark.asyncio
async def test_undecodable_network_bytes_are_decode_failure(tmp_path, transport_factory):
    transport = transport_factory({URL: b"<html>not an image</html>"})
    orchestrator = _build(tmp_path, transport)

    outcome = await orchestrator.load(FetchRequest(URL, use_cache=False))

    assert outcome.kind is FailureKind.DECODE
    assert not Path(orchestrator.resolver.resolve(URL)).exists()


@pytest.mark.asyncio
async def test_empty_url_fails_synchronously(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport)
    recorder = _Recorder()

    handle = _fetch(orchestrator, FetchRequest(""), recorder)

    # доставлено ще до першого await
    assert [e[0] for e in recorder.events] == ["error"]
    assert recorder.events[0][1].kind is FailureKind.INPUT
    assert handle.done
    assert (await handle.wait()).kind is FailureKind.INPUT
    assert fake_transport.network_calls == []


# ──────────────────────────────────────────────────────────────────────────────
#                        🎯 Один результат, прогрес, скасування
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_progress_is_monotonic_with_single_final_one_before_success(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport)
    recorder = _Recorder()

    await _fetch(orchestrator, FetchRequest(URL), recorder).wait()

    values = recorder.progress_values
    assert values == sorted(values)
    assert values.count(1.0) == 1
    assert values[-1] == 1.0
    assert [e[0] for e in recorder.events][-2:] == ["progress", "success"]
    assert len(recorder.terminal) == 1


@pytest.mark.asyncio
async def test_many_fetches_deliver_exactly_one_outcome_each(tmp_path, transport_factory, png_bytes):
    urls = [f"https://x.test/{i}.png" for i in range(5)] + ["https://x.test/missing.png"]
    transport = transport_factory({u: png_bytes for u in urls[:-1]})
    orchestrator = _build(tmp_path, transport)
    recorders = [_Recorder() for _ in urls]

    handles = [_fetch(orchestrator, FetchRequest(u), r) for u, r in zip(urls, recorders)]
    await asyncio.gather(*(h.wait() for h in handles))

    assert [len(r.terminal) for r in recorders] == [1] * len(urls)
    assert recorders[-1].terminal[0][0] == "error"


@pytest.mark.asyncio
async def test_callback_exceptions_do_not_break_outcome(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport)
    delivered = []

    def bad_progress(value):
        raise RuntimeError("ui crashed")

    def bad_success(image):
        delivered.append(image)
        raise RuntimeError("ui crashed again")

    handle = orchestrator.fetch(FetchRequest(URL), bad_progress, bad_success, None)
    outcome = await handle.wait()

    assert isinstance(outcome, FetchSuccess)
    assert len(delivered) == 1


@pytest.mark.asyncio
async def test_cancel_before_completion_suppresses_callbacks(tmp_path, fake_transport):
    fake_transport.gate = asyncio.Event()
    orchestrator = _build(tmp_path, fake_transport)
    recorder = _Recorder()

    handle = _fetch(orchestrator, FetchRequest(URL, use_cache=False), recorder)
    await asyncio.sleep(0)
    handle.cancel()
    fake_transport.gate.set()

    assert await handle.wait() is None
    assert handle.cancelled
    assert recorder.events == []
    assert not Path(orchestrator.resolver.resolve(URL)).exists()


@pytest.mark.asyncio
async def test_cancel_after_success_is_noop(tmp_path, fake_transport):
    orchestrator = _build(tmp_path, fake_transport)
    recorder = _Recorder()

    handle = _fetch(orchestrator, FetchRequest(URL), recorder)
    outcome = await handle.wait()
    handle.cancel()
    handle.cancel()

    assert isinstance(outcome, FetchSuccess)
    assert len(recorder.terminal) == 1
    assert recorder.terminal[0][0] == "success"


@pytest.mark.asyncio
async def test_specialized_success_overwrites_cache_and_keeps_orientation(tmp_path, transport_factory):
    url = "https://x.test/tex.ktx2"

    class _Transcoder:
        def load_from_bytes(self, buffer, on_loaded):
            on_loaded(Image.new("RGBA", (4, 4)), Orientation(flipped_vertically=True))

    transport = transport_factory({url: b"fresh-ktx2"})
    dispatcher = DecodeDispatcher({SpecializedFormat.KTX2: _Transcoder()})
    orchestrator = _build(tmp_path, transport, dispatcher=dispatcher)
    cache_path = Path(orchestrator.resolver.resolve(url))
    cache_path.write_bytes(b"stale")

    outcome = await orchestrator.load(FetchRequest(url, use_cache=False))

    assert outcome.image.orientation.flipped_vertically is True
    assert cache_path.read_bytes() == b"fresh-ktx2"
