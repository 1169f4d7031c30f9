"""Entry point: python -m routegen

Reads a route list (file, URL or stdin) and writes the TypeScript client.
"""

from __future__ import annotations

from .cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
