## Logging setup for trigrameval
# trigrameval/src/trigrameval/utils/logger.py

import logging
import sys

# Chunk progress goes to stdout so long runs can be tailed or piped
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        # logging.FileHandler("trigrameval.log"),
    ],
)

PACKAGE_LOGGER = "trigrameval"


def get_logger(name: str) -> logging.Logger:
    """Return a logger instance for the given module/class."""
    return logging.getLogger(name)


def set_verbosity(verbose: bool = False, quiet: bool = False) -> None:
    """
    Adjust the package log level from the command line.

    --verbose shows per-trigram progress (DEBUG), --quiet keeps warnings only.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
