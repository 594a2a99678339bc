"""Allow ``python -m tensor_image_harness``."""

import sys

from tensor_image_harness.cli import main

if __name__ == "__main__":
    sys.exit(main())
