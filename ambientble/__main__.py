"""Run ambientble with ``python -m ambientble``."""
import sys

from ambientble.cli import main

sys.exit(main())
