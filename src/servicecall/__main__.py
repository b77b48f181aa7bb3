"""Run the CLI with `python -m servicecall`."""

from __future__ import annotations

from servicecall.cli.main import run

if __name__ == "__main__":
    run()
