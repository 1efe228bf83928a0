from __future__ import annotations

import logging

from gogetajob.core.config import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_NAME = "gogetajob"


def configure_logging(settings: Settings) -> None:
    """
    Attach one stream handler to the `gogetajob` logger tree.

    Repeated calls (tests build several apps) replace the level but never stack handlers.
    """
    logger = logging.getLogger("gogetajob")
    logger.setLevel(settings.log_level or "INFO")

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
