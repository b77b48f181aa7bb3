"""Run the `servicecall` CLI from a checkout, without installing it.

    python main.py --discovery-host https://discovery.example/ resolve sac claim get

Equivalent to the `servicecall` console script once the package is installed.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    from servicecall.cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
