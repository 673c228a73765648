"""Support ``python -m trydir`` with the same behavior as the console script."""

from .cli import main

if __name__ == "__main__":
    main()
