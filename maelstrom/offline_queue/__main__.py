"""Capture CLI entry point

Usage:
    python -m maelstrom.offline_queue <command> [options]
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
