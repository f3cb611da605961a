"""Log sink for the compilation pipeline.

Contract:
- Inputs: Trace lines and diagnostic text
- Outputs: Records on a stdlib logger
- Side Effects: Logging only; no pipeline behaviour depends on it
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "script_library"


def configure_logging(level: str = "info") -> None:
    """Apply a log level to the script_library loggers.

    Installs a root handler with LOG_FORMAT when the host has none.

    Args:
        level: Logging level name (e.g. "info", "debug")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)


class ScriptLogger:
    """Observational sink for dependency traces and compiler diagnostics.

    Verbose lines go to DEBUG and are dropped unless ``verbose`` is set;
    ``log`` lines (diagnostics on failure) always go to INFO.

    Example:
        >>> sink = ScriptLogger(verbose=True)
        >>> sink.verbose("Discovered runtime dependency for '/libs/a'")
        >>> sink.log("script.py(1,9): error SL1001: invalid syntax")
    """

    def __init__(self: "ScriptLogger", logger: logging.Logger | None = None, verbose: bool = False) -> None:
        """Initialize log sink.

        Args:
            logger: Target logger (default: the script_library logger)
            verbose: Whether verbose trace lines are emitted
        """
        self._logger = logger or logging.getLogger(PACKAGE_LOGGER)
        self._verbose = verbose

    @property
    def is_verbose(self: "ScriptLogger") -> bool:
        return self._verbose

    def verbose(self: "ScriptLogger", message: str) -> None:
        if self._verbose:
            self._logger.debug(message)

    def log(self: "ScriptLogger", message: str) -> None:
        self._logger.info(message)
