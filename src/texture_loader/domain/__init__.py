"""🧱 Доменний шар: контракти без залежностей від інфраструктури."""
