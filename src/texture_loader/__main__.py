"""🖥️ `python -m texture_loader`."""

from texture_loader.cli import app

if __name__ == "__main__":
    app()
