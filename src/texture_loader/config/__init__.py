# ⚙️ texture_loader/config/__init__.py
"""
⚙️ Пакет Config: конфігурація та DI-контейнер завантажувача.
"""

from .config_service import ConfigService, ENV_PREFIX
from .container import Container, bootstrap_logging

# ================================
# 📤 EXPORT
# ================================
__all__ = ["ConfigService", "Container", "ENV_PREFIX", "bootstrap_logging"]
