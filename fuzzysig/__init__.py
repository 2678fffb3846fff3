"""
fuzzysig - fuzzy-logic trading signal engine.

Technical indicators are computed over windows of price bars, fuzzified into
linguistic terms and combined by a weighted fuzzy rule base into one score
and confidence per instrument.
"""

import os

from dotenv import load_dotenv

from fuzzysig.logging import (
    configure_logging,
    get_logger,
    is_debug_mode,
    log_entry_exit,
    log_error,
    log_performance,
    set_debug_mode,
)
from fuzzysig.version import __version__

# Load environment variables from .env file
load_dotenv()

configure_logging(log_dir=os.environ.get("FUZZYSIG_LOG_DIR") or None)

__all__ = [
    "__version__",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "log_entry_exit",
    "log_error",
    "log_performance",
    "set_debug_mode",
]
