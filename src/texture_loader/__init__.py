# 🖼️ texture_loader/__init__.py
"""
🖼️ texture_loader — завантаження зображень з локального кешу або мережі.

🔹 Перевіряє плоский кеш на диску, інакше виконує GET і декодує байти.
🔹 Декодує растр через Pillow, стиснені текстури — через підключений транскодер.
🔹 Оцінює бюджет пам'яті перед пакетними завантаженнями.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
