"""Allow ``python -m gh_switch``."""
import sys

from .cli import main

sys.exit(main())
