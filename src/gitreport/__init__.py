"""gitreport: run git safely and parse its porcelain v2 status output."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
