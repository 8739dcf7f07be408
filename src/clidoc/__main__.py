"""Allow running clidoc as ``python -m clidoc``."""

from clidoc.cli import main

if __name__ == "__main__":
    main()
