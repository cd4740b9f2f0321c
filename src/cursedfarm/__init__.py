"""Rules engine for the Cursed Farm text adventure."""
from __future__ import annotations

import logging

__version__ = "0.4.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["__version__"]
