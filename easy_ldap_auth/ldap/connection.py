"""Open a connection to the directory and bind it to one identity."""

import logging
from typing import Any, Optional

from ldap3 import NONE, Connection, Server, Tls
from ldap3.core.exceptions import LDAPBindError, LDAPException

from ..constants import LOGGER_NAME
from ..models import BindOptions
from ..settlement import Settlement


def build_tls(tls_options: Any) -> Optional[Tls]:
    """Pass an ldap3 Tls through, build one from a mapping, or return None for plaintext."""
    if tls_options is None:
        return None
    if isinstance(tls_options, Tls):
        return tls_options
    return Tls(**tls_options)


class DirectorySession:
    """
    A bound connection owned by exactly one caller.

    The session is released (unbound) at most once; it cannot be used after
    that. Use it as a context manager so release happens on every exit path.

    Example:
        with bind_ldap(options, is_admin=True) as session:
            entry = search_user(session, base_dn, "uid", "gauss")
    """

    def __init__(self, connection: Connection, dn: str, logger: Optional[logging.Logger] = None):
        self._connection = connection
        self.dn = dn
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._released = False

    @property
    def connection(self) -> Connection:
        if self._released:
            raise RuntimeError(f"Session for {self.dn} was already released.")
        return self._connection

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Unbind and close the connection. Later calls do nothing."""
        if self._released:
            return
        self._released = True
        try:
            self._connection.unbind()
        except LDAPException as e:
            self.logger.debug("Caught (but ignored) an error while unbinding %s: %r", self.dn, e)

    def __enter__(self) -> "DirectorySession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release()
        return False


def bind_ldap(
    options: BindOptions,
    is_admin: bool = False,
    logger: Optional[logging.Logger] = None,
) -> DirectorySession:
    """
    Connect to the directory and bind as options.dn.

    The same timeout bounds connection establishment and every response,
    including the bind. Failures of either step are raised as the ldap3
    exception that reported them, after the connection has been closed.

    Args:
        options: Endpoint, identity and timeout
        is_admin: Only changes the wording of diagnostics
        logger: Diagnostic sink (defaults to the package logger)

    Returns:
        A bound DirectorySession; the caller must release it

    Raises:
        LDAPCommunicationError: Refused, unreachable or timed out
        LDAPInvalidCredentialsResult: Wrong DN or password
        LDAPOperationResult: Any other bind rejection
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    role = "Admin" if is_admin else "User"

    server = Server(
        options.url,
        connect_timeout=options.timeout_seconds,
        tls=build_tls(options.tls_options),
        get_info=NONE,
    )
    conn = Connection(
        server,
        user=options.dn,
        password=options.password,
        auto_bind=False,
        receive_timeout=options.timeout_seconds,
        raise_exceptions=True,
    )
    session = DirectorySession(conn, options.dn, logger)

    def close_after_failure(exc: BaseException) -> None:
        session.release()
        logger.debug("%s bind failed: %r", role, exc)

    outcome = Settlement(f"{role.lower()} bind", logger, on_reject=close_after_failure)
    try:
        conn.open()
        if conn.bind():
            outcome.resolve(session)
            logger.debug("%s bind successful!", role)
        else:
            description = (conn.result or {}).get("description") or "bind failed"
            outcome.reject(LDAPBindError(description))
    except Exception as e:
        outcome.reject(e)
    return outcome.result()
