# ⚙️ texture_loader/config/config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з .env, пакетного config.yaml, опційного YAML користувача
  та змінних середовища `TEXTURE_LOADER_*`.
- Надає єдиний метод .get() для доступу до будь-якого параметра.
- Звичайний екземпляр: кожен контейнер/тест створює власний.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml																# 📦 YAML-парсинг
from dotenv import load_dotenv											# 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import copy																# 🧬 Незалежні копії overrides
import logging															# 🧾 Логування
import os																# 📁 Доступ до змінних середовища
from pathlib import Path												# 📁 Побудова шляху до файлів
from typing import Any, Callable, Dict, Mapping, Optional, Union		# 🧩 Типізація

# 🧩 Внутрішні модулі проєкту
from texture_loader.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.config")

ENV_PREFIX = "TEXTURE_LOADER_"											# 🔑 Префікс змінних середовища
DEFAULT_YAML = Path(__file__).parent / "config.yaml"					# 📘 Пакетний конфіг


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх конфігураційних параметрів завантажувача.

    Пріоритет (наступне перекриває попереднє):
    config.yaml → YAML користувача → `TEXTURE_LOADER_*` → явні overrides.
    """

    def __init__(
        self,
        user_yaml: Optional[Union[str, Path]] = None,
        *,
        overrides: Optional[Mapping[str, Any]] = None,
        load_env_file: bool = True,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._config: Dict[str, Any] = {}								# 📦 Обʼєднана конфігурація
        self._load_all_configs(user_yaml, load_env_file, os.environ if environ is None else environ)
        if overrides:
            self._deep_update(self._config, self._unflatten_dict(copy.deepcopy(dict(overrides))))

    def _load_all_configs(
        self,
        user_yaml: Optional[Union[str, Path]],
        load_env_file: bool,
        environ: Mapping[str, str],
    ) -> None:
        """📥 Завантажує всі джерела конфігурації в один словник."""

        # --- 1. .env змінні ---
        if load_env_file:
            logger.debug("🔐 Завантаження змінних з .env")
            load_dotenv()

        # --- 2. Пакетний YAML ---
        self._merge_yaml(DEFAULT_YAML, required=True)

        # --- 3. YAML користувача ---
        if user_yaml:
            self._merge_yaml(Path(user_yaml), required=False)

        # --- 4. Змінні середовища ---
        env_vars = {
            key[len(ENV_PREFIX):].lower().replace("__", "."): self._parse_scalar(value)
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX)
        }
        if env_vars:
            logger.debug("🔐 Env overrides: %s", sorted(env_vars))
            self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")

    def _merge_yaml(self, path: Path, *, required: bool) -> None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            if required:
                raise
            logger.warning("⚠️ YAML конфіг не знайдено: %s", path)
            return
        except yaml.YAMLError as e:
            logger.warning("⚠️ Не вдалося розібрати %s: %s", path, e)
            return
        if not isinstance(data, dict):
            logger.warning("⚠️ %s не містить словника, пропускаємо", path)
            return
        self._deep_update(self._config, data)

    def get(self, key: str, default: Any = None, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'network.timeout_s').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.
            cast: Необовʼязкове приведення типу; при помилці повертається default.
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                logger.debug("❓ Ключ '%s' не знайдено, повертаємо значення за замовчуванням", key)
                return default
        if cast is None or value is None:
            return value
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.warning("⚠️ Ключ '%s'=%r не приводиться до %s", key, value, getattr(cast, "__name__", cast))
            return default

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _parse_scalar(raw: str) -> Any:
        """🔤 `"0.5"` → 0.5, `"false"` → False; решта лишається рядком."""
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw

    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'network.timeout_s' → {'network': {'timeout_s': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict, overrides: Dict) -> None:
        """🔁 Рекурсивно обʼєднує два словники."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value


__all__ = ["ConfigService", "ENV_PREFIX"]
