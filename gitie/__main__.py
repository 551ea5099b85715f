import sys

from gitie.cli import main

if __name__ == "__main__":
    sys.exit(main())
