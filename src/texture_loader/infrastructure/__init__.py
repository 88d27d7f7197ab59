"""🏗️ Інфраструктурний шар: I/O, декодування, пам'ять."""
