"""Resolve-or-reject-exactly-once helper shared by the bind and search steps."""

import logging
from concurrent.futures import Future
from typing import Any, Callable, Optional

from .constants import LOGGER_NAME


class Settlement:
    """
    A future that can be settled only once.

    Several failure sources may report on the same operation (an open that
    fails, a bind that fails, a timeout noticed during cleanup). The first
    report wins; every later one is logged and otherwise ignored, so it can
    never replace a result that was already delivered.

    Attributes:
        name: Label used in diagnostics (e.g. 'admin bind', 'search')

    Example:
        outcome = Settlement("search", on_reject=lambda exc: conn.unbind())
        outcome.resolve(entry)
        outcome.reject(error)   # ignored, returns False
        outcome.result()        # -> entry
    """

    def __init__(
        self,
        name: str,
        logger: Optional[logging.Logger] = None,
        on_reject: Optional[Callable[[BaseException], None]] = None,
    ):
        """
        Args:
            name: Label used in diagnostics
            logger: Diagnostic sink (defaults to the package logger)
            on_reject: Cleanup run before a rejection is stored
        """
        self.name = name
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._on_reject = on_reject
        self._future: Future = Future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def resolve(self, value: Any) -> bool:
        """Settle with a value. Returns False if already settled."""
        if self.settled:
            self.logger.debug("Caught (but ignored) a result after %s settled: %r", self.name, value)
            return False
        self._future.set_result(value)
        return True

    def reject(self, exc: BaseException) -> bool:
        """Settle with an exception. Returns False if already settled."""
        if self.settled:
            self.logger.debug("Caught (but ignored) an error after %s settled: %r", self.name, exc)
            return False
        if self._on_reject is not None:
            self._on_reject(exc)
        self._future.set_exception(exc)
        return True

    def result(self) -> Any:
        """Return the value, or raise the exception the settlement was rejected with."""
        if not self.settled:
            raise RuntimeError(f"{self.name} has not settled yet")
        return self._future.result()
