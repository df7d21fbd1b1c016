"""Entry point for ``python -m facecrop``."""

from facecrop.cli import app

if __name__ == "__main__":
    app()
