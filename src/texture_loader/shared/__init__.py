"""🧰 Спільні модулі: логування, метрики, утиліти."""
