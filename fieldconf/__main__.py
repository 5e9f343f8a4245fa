"""Allow running fieldconf as a module: python -m fieldconf."""

from fieldconf.cli import app

if __name__ == "__main__":
    app()
