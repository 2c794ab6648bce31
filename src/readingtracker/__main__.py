"""Allow running as ``python -m readingtracker``."""

from .cli import main

if __name__ == "__main__":
    main()
