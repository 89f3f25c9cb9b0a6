# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Entry point for running as a module: python -m file_dependencies"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
