# 🚨 texture_loader/errors/__init__.py
"""
🚨 Помилки завантажувача текстур та стратегії їх мапінгу.
"""

from __future__ import annotations

from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy
from .texture_errors import (
    CapabilityMissingError,
    DecodeError,
    FetchCancelled,
    InputError,
    PersistenceError,
    TextureLoaderError,
    TransportError,
)

__all__ = [
    "TextureLoaderError",
    "InputError",
    "TransportError",
    "CapabilityMissingError",
    "DecodeError",
    "PersistenceError",
    "FetchCancelled",
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
]
