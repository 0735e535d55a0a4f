"""Logging utilities for the curator (thin wrappers).

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed once, by the CLI, through :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from typing import Union

ROOT_LOGGER = "modelcurator"
_FORMAT = "[curator] %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Attach a single stream handler to the package logger.

    Calling this repeatedly replaces the previously installed handler rather
    than stacking duplicates.

    Args:
        verbose: Emit DEBUG records (discards, promotions) when True.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_curator_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._curator_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def set_component_level(component: str, level: Union[str, int]) -> None:
    """Set log level for a specific component.

    Accepts either string levels (e.g., "INFO") or numeric constants. Bare
    component names such as ``"resolution"`` are qualified with the package
    name.
    """
    if isinstance(level, str):
        level_value = getattr(logging, level.upper(), logging.INFO)
    else:
        level_value = level
    name = component if component.startswith(ROOT_LOGGER) else f"{ROOT_LOGGER}.{component}"
    logging.getLogger(name).setLevel(level_value)


__all__ = ["ROOT_LOGGER", "configure_logging", "set_component_level"]
