"""
Package entry point: ``python -m stockfeeds``.
"""

import asyncio

from .main import main


def run_main():
    asyncio.run(main())


if __name__ == "__main__":
    run_main()
