import sys

from ksense_assessment.cli import main

if __name__ == "__main__":
    sys.exit(main())
