#!/usr/bin/env python3
"""HangTimer entry point.

Run with:
    python main.py
    python -m hangtimer
"""

from hangtimer.__main__ import main


if __name__ == "__main__":
    main()
