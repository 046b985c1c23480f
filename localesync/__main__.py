"""Module entrypoint for running localesync as ``python -m localesync``."""

from __future__ import annotations

from localesync.cli import main


if __name__ == "__main__":
    main()
