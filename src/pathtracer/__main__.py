"""Allow ``python -m pathtracer``."""

import sys

from pathtracer.cli import main

sys.exit(main())
