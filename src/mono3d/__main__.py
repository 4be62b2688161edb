"""Allow running as ``python -m mono3d``."""

from mono3d.cli import main

if __name__ == "__main__":
    main()
