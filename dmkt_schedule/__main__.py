import sys

from dmkt_schedule.cli import main

if __name__ == "__main__":
    sys.exit(main())
