# 🧱 texture_loader/domain/textures/__init__.py
"""🧱 Доменні контракти завантаження текстур."""

from __future__ import annotations

from .interfaces import (
    CancellationToken,
    DecodedImage,
    ErrorFn,
    FailureKind,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    IMemoryProbe,
    ITranscoder,
    ITransport,
    Orientation,
    ProgressFn,
    SuccessFn,
    TranscodeBuffer,
    TranscodeCallback,
)

__all__ = [
    "CancellationToken",
    "DecodedImage",
    "ErrorFn",
    "FailureKind",
    "FetchFailure",
    "FetchOutcome",
    "FetchRequest",
    "FetchSuccess",
    "IMemoryProbe",
    "ITranscoder",
    "ITransport",
    "Orientation",
    "ProgressFn",
    "SuccessFn",
    "TranscodeBuffer",
    "TranscodeCallback",
]
