"""
Logging setup for Portability Insight.

Engine modules only ever ask for a namespaced logger. Where the records end
up is decided once, by whoever embeds the engine; the CLI does it through
setup_logging().
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "portability_insight"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _level_for(verbose: bool, quiet: bool) -> int:
    # quiet wins so that --json stays parseable even with -v
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route engine logs to a rich handler on stderr.

    Args:
        verbose: Show debug records, with source paths and local variables
            in tracebacks
        quiet: Only show errors
        log_file: Also append plain-text records to this file

    Returns:
        The portability_insight root logger
    """
    level = _level_for(verbose, quiet)

    stderr_handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        show_path=verbose,
    )
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger under the portability_insight namespace.

    ``get_logger(__name__)`` from inside the package returns the module's
    own logger; foreign names are nested under the root.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
