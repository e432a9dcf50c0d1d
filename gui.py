# Launcher for the Math Snake player GUI.
from __future__ import annotations

import logging

try:
    from .snake_gui import run_player_gui
except ImportError:
    from snake_gui import run_player_gui


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    run_player_gui()


if __name__ == "__main__":
    main()
