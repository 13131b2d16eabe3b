"""Console module entry point for running with ``python -m api``."""

from __future__ import annotations

from api.cli import app

if __name__ == "__main__":
    app(prog_name="gevity-console")
