"""Allow ``python -m secroute``."""

from secroute.cli import main

if __name__ == "__main__":
    main()
