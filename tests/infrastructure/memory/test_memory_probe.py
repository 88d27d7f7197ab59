from types import SimpleNamespace

import psutil

from texture_loader.infrastructure.memory.memory_probe import PsutilMemoryProbe


class _Process:
    def memory_info(self):
        return SimpleNamespace(rss=123)


def test_probe_reads_psutil(monkeypatch):
    monkeypatch.setattr(psutil, "virtual_memory", lambda: SimpleNamespace(total=4096, available=2048))
    probe = PsutilMemoryProbe(process=_Process())

    assert probe.total_memory_bytes() == 4096
    assert probe.used_memory_bytes() == 123
    assert probe.refresh_meminfo() == 2048


def test_refresh_meminfo_returns_none_on_psutil_error(monkeypatch):
    def boom():
        raise psutil.AccessDenied()

    monkeypatch.setattr(psutil, "virtual_memory", boom)
    assert PsutilMemoryProbe(process=_Process()).refresh_meminfo() is None


def test_real_probe_reports_positive_figures():
    probe = PsutilMemoryProbe()
    assert probe.total_memory_bytes() > 0
    assert probe.used_memory_bytes() > 0
