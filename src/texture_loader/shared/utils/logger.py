# 📜 texture_loader/shared/utils/logger.py
"""
📜 Логування завантажувача текстур.

🔹 Один кореневий логер `texture_loader`: консоль + файл із добовою ротацією.
🔹 Файл може писатися як JSON; поля з `extra=` (url, cache_path, bytes…) потрапляють у запис.
🔹 Рівні шумних бібліотек (httpx, PIL) задаються з конфігу.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json									# 📦 JSON-записи
import logging									# 🪵 Логери
import sys									# 🖥️ stdout
import threading								# 🔒 Повторна ініціалізація
from logging.handlers import TimedRotatingFileHandler			# 📁 Ротація файлу
from pathlib import Path								# 📂 Каталог логів
from typing import Any, Dict, Mapping, Optional				# 🧰 Типи

LOG_NAME: str = "texture_loader"						# 🏷️ Префікс усіх логерів пакета
FILE_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT: str = "[%(levelname).1s] %(message)s"
DEFAULT_LOG_FILE: str = "logs/texture_loader.log"
ROTATE_WHEN: str = "midnight"							# ⏰ Раз на добу
ROTATE_BACKUPS: int = 7								# ♻️ Тиждень історії

# Атрибути, які LogRecord має завжди; усе інше прийшло з `extra=`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_lock = threading.Lock()


class JsonFormatter(logging.Formatter):
    """Один рядок JSON на запис; `extra=` поля додаються поруч із повідомленням."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            payload[key] = value if isinstance(value, (str, int, float, bool, type(None))) else repr(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _level(value: Any, default: int = logging.INFO) -> int:
    if isinstance(value, int):
        return value
    return getattr(logging, str(value or "").upper(), default)


def _file_handler(path: str, formatter: logging.Formatter) -> logging.Handler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        str(log_path), when=ROTATE_WHEN, backupCount=ROTATE_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler


def init_logging(
    *,
    level: Optional[str] = None,
    console: bool = True,
    json_mode: bool = False,
    file: Optional[str] = DEFAULT_LOG_FILE,
    suppress: Optional[Mapping[str, str]] = None,
) -> logging.Logger:
    """
    Налаштовує логер `texture_loader` заново (старі хендлери закриваються).

    Args:
        level: Рівень пакета, за замовчуванням INFO.
        console: Чи писати в stdout.
        json_mode: JSON замість текстового формату у файлі.
        file: Шлях до файлу; None — без файлу.
        suppress: `{"httpx": "WARNING"}` — рівні для сторонніх логерів.
    """
    with _lock:
        root = logging.getLogger(LOG_NAME)
        root.setLevel(_level(level))
        for handler in list(root.handlers):						# 🧹 Повторний виклик не дублює вивід
            root.removeHandler(handler)
            handler.close()

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            root.addHandler(console_handler)
        if file:
            root.addHandler(_file_handler(file, JsonFormatter() if json_mode else logging.Formatter(FILE_FORMAT)))

        for name, lib_level in (suppress or {}).items():
            logging.getLogger(name).setLevel(_level(lib_level, logging.WARNING))

        root.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            logging.getLevelName(root.level),
            console,
            json_mode,
            file or "OFF",
        )
        return root


def init_logging_from_config(config: Optional[Mapping[str, Any]]) -> logging.Logger:
    """Те саме, що `init_logging`, але з розділу `logging` конфігу."""
    node = config or {}
    file_enabled = bool(node.get("file_enabled", True))
    return init_logging(
        level=node.get("level"),
        console=bool(node.get("console", True)),
        json_mode=bool(node.get("json", False)),
        file=(node.get("file") or DEFAULT_LOG_FILE) if file_enabled else None,
        suppress=node.get("suppress"),
    )


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """`texture_loader` або `texture_loader.<suffix>`."""
    return logging.getLogger(f"{LOG_NAME}.{suffix}" if suffix else LOG_NAME)


__all__ = ["LOG_NAME", "JsonFormatter", "get_logger", "init_logging", "init_logging_from_config"]
