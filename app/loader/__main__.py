import sys

from app.loader.cli import main


if __name__ == "__main__":
    sys.exit(main())
