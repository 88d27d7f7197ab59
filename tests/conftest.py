# tests/conftest.py
import asyncio
import io
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Додаємо src у sys.path, щоб працював імпорт "texture_loader.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PIL import Image  # noqa: E402

from texture_loader.errors.texture_errors import FetchCancelled, TransportError  # noqa: E402


# ──────────────────────────────────────────────────────────────────────────────
#                               🧪 Вспомогалки
# ──────────────────────────────────────────────────────────────────────────────

def make_png(width: int = 4, height: int = 3, color=(200, 10, 10, 255)) -> bytes:
    """Справжній PNG, згенерований Pillow."""
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeTransport:
    """
    Транспорт у пам'яті: мережеві відповіді задаються словником,
    локальні шляхи читаються з диска (як у справжнього транспорту).
    """

    def __init__(self, responses: Optional[Dict[str, bytes]] = None, *, progress: Optional[List[float]] = None):
        self.responses = dict(responses or {})
        self.progress = progress if progress is not None else [0.25, 0.5, 1.0]
        self.network_calls: List[str] = []
        self.local_calls: List[str] = []
        self.failures: Dict[str, TransportError] = {}
        self.gate: Optional[asyncio.Event] = None

    def _is_network(self, uri: str) -> bool:
        return uri.startswith(("http://", "https://"))

    async def get(self, uri, *, on_progress=None, token=None):
        if not self._is_network(uri):
            self.local_calls.append(uri)
            path = Path(uri[len("file://"):]) if uri.startswith("file://") else Path(uri)
            try:
                return path.read_bytes()
            except OSError as exc:
                raise TransportError(f"{exc.strerror}: {path}", url=uri) from exc

        self.network_calls.append(uri)
        if self.gate is not None:
            await self.gate.wait()
        if token is not None and token.cancelled:
            raise FetchCancelled(uri)
        if uri in self.failures:
            raise self.failures[uri]
        if uri not in self.responses:
            raise TransportError(f"HTTP 404 Not Found for url {uri}", url=uri, status_code=404)
        for value in self.progress:
            if on_progress is not None:
                on_progress(value)
            await asyncio.sleep(0)
        return self.responses[uri]


class FakeProbe:
    """Синтетичні цифри пам'яті; лічильник викликів для перевірки перерахунку."""

    def __init__(self, total: int, used: int, os_available: Optional[int] = None):
        self.total = total
        self.used = used
        self.os_available = os_available
        self.total_calls = 0

    def total_memory_bytes(self) -> int:
        self.total_calls += 1
        return self.total

    def used_memory_bytes(self) -> int:
        return self.used

    def refresh_meminfo(self):
        return self.os_available


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_transport(png_bytes) -> FakeTransport:
    return FakeTransport({"https://x.test/img.png": png_bytes})


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def transport_factory():
    return FakeTransport


@pytest.fixture
def probe_factory():
    return FakeProbe
