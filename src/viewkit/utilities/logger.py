from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(levelname)s %(name)s - %(message)s"
PACKAGE_LOGGER = "viewkit"


def set_verbosity(verbose: bool) -> None:
    """Raise or lower the ``viewkit`` logger level for command line runs."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def configure_cli_logging(verbose: bool = False, format: str = DEFAULT_FORMAT) -> None:
    """Send viewkit records to stderr unless the host application owns logging.

    Root handlers are only installed when none exist; the package level is
    always applied so ``--verbose`` works under an embedding application too.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.WARNING, format=format)
    set_verbosity(verbose)
