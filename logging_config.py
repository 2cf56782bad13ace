"""Console logging setup using rich."""

import logging

from rich.logging import RichHandler

_HANDLER_NAME = "rentledger-console"


def configure_logging(level: str = "INFO") -> None:
    """Attach a RichHandler to the root logger.

    Safe to call more than once: the handler is installed a single time and
    later calls only change the level.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
