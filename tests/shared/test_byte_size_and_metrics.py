import pytest
from prometheus_client import REGISTRY

from texture_loader.shared.metrics import inc_cache_write, inc_fetch, inc_fetch_failure
from texture_loader.shared.utils import format_bytes


@pytest.mark.parametrize(
    "num, expected",
    [
        (0, "0.00 B"),
        (1023, "1023.00 B"),
        (1536, "1.50 KB"),
        (5 * 1024 ** 3, "5.00 GB"),
        (-2048, "-2.00 KB"),
        (3 * 1024 ** 5, "3072.00 TB"),
    ],
)
def test_format_bytes(num, expected):
    assert format_bytes(num) == expected


def _value(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_counters_increment():
    before = (
        _value("texture_fetch_total", source="cache"),
        _value("texture_fetch_failures_total", kind="decode"),
        _value("texture_cache_writes_total", result="skipped"),
    )

    inc_fetch("cache")
    inc_fetch_failure("decode")
    inc_cache_write("skipped")

    after = (
        _value("texture_fetch_total", source="cache"),
        _value("texture_fetch_failures_total", kind="decode"),
        _value("texture_cache_writes_total", result="skipped"),
    )
    assert [a - b for a, b in zip(after, before)] == [1.0, 1.0, 1.0]


def test_exporter_disabled_without_port():
    from texture_loader.shared.metrics import maybe_start_prometheus

    assert maybe_start_prometheus(None) is False
    assert maybe_start_prometheus(0) is False
