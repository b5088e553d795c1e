"""Allow ``python -m power_position``."""

import sys

from .app import main

sys.exit(main())
