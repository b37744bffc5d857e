"""Allow ``python -m contentful_search``."""

import sys

from contentful_search.presentation.cli import main

if __name__ == "__main__":
    sys.exit(main())
