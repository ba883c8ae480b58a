"""Allows running the language server with: python -m activitywatch_ls"""

import sys

from .app import main

if __name__ == "__main__":
    sys.exit(main())
