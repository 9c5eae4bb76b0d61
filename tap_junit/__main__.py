"""
Allow running the harness as a module:
    python3 -m tap_junit -o junit.xml t/*.t
"""

import sys
from .app import main

if __name__ == "__main__":
    sys.exit(main())
