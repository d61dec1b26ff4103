"""
Logging configuration.
"""
import logging
import sys

logger = logging.getLogger("sapconf_saptune_check")
logger.setLevel(logging.WARNING)

# stdout is reserved for the report
console_handler = logging.StreamHandler(sys.stderr)

formatter = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
console_handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(console_handler)


def set_verbose(verbose: bool) -> None:
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
