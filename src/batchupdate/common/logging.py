"""Logging setup for batchupdate entry points and tests."""

from __future__ import annotations

import logging

BATCH_UPDATE_LOGGER = "batchupdate.domain.batch_update"


def configure_logging(
    *,
    level: int = logging.INFO,
    force: bool = False,
    statement_level: int | None = None,
) -> None:
    """Configure the root logger through ``logging.basicConfig``.

    The engine logs every synthesized statement at DEBUG. ``statement_level`` sets
    the batch update logger on its own, e.g. ``logging.DEBUG`` to see the SQL while
    the rest of the application stays at ``level``.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if statement_level is not None:
        logging.getLogger(BATCH_UPDATE_LOGGER).setLevel(statement_level)
