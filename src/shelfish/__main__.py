"""Main entry point for the shelfish package."""

from shelfish.cli import app


if __name__ == "__main__":
    app()
