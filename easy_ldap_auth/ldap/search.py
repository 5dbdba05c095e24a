"""Single-result user search over an already bound session."""

import logging
import re
from typing import Optional

from ldap3 import ALL_ATTRIBUTES, SUBTREE
from ldap3.utils.conv import escape_filter_chars

from ..constants import LOGGER_NAME, RESULT_SUCCESS, SEARCH_RESULT_ENTRY, SEARCH_SIZE_LIMIT
from ..models import UserEntry
from ..settlement import Settlement
from .connection import DirectorySession
from .errors import SearchFailedError


# RFC 4512 attribute description: descriptor (underscores tolerated) or numeric OID, then ;options
ATTRIBUTE_DESCRIPTION_RE = re.compile(
    r"(?:[A-Za-z][A-Za-z0-9_-]*|[0-9]+(?:\.[0-9]+)+)(?:;[A-Za-z0-9-]+)*"
)


def equality_filter(attribute: str, value: str) -> str:
    """
    Build '(attribute=value)' with the value escaped (e.g. 'a*b' -> 'a\\2ab').

    Raises:
        ValueError: attribute is not a valid attribute description
    """
    if not isinstance(attribute, str) or not ATTRIBUTE_DESCRIPTION_RE.fullmatch(attribute):
        raise ValueError(f"Invalid search attribute: {attribute!r}")
    return f"({attribute}={escape_filter_chars(value)})"


def search_user(
    session: DirectorySession,
    base_dn: str,
    attribute: str,
    value: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[UserEntry]:
    """
    Find the entry under base_dn whose attribute equals value.

    The server is asked for at most one entry. Errors the directory reports
    (e.g. LDAPNoSuchObjectResult for a missing base DN) are raised as-is; a
    search that completes with a non-zero result code raises
    SearchFailedError.

    Returns:
        The matching UserEntry, or None when nothing matched
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    outcome = Settlement(
        "search", logger, on_reject=lambda exc: logger.debug("Search failed: %r", exc)
    )
    conn = session.connection
    search_filter = equality_filter(attribute, value)

    try:
        conn.search(
            search_base=base_dn,
            search_filter=search_filter,
            search_scope=SUBTREE,
            attributes=ALL_ATTRIBUTES,
            size_limit=SEARCH_SIZE_LIMIT,
        )
    except Exception as e:
        outcome.reject(e)
        return outcome.result()

    user: Optional[UserEntry] = None
    for item in conn.response or []:
        if item.get("type") != SEARCH_RESULT_ENTRY:
            continue
        if user is None:
            user = UserEntry.from_response(item)
        else:
            logger.debug("Caught (but ignored) an extra search entry: %s", item.get("dn"))

    result = conn.result or {}
    code = result.get("result")
    if code != RESULT_SUCCESS:
        outcome.reject(SearchFailedError(code, result.get("description")))
    elif outcome.resolve(user):
        logger.debug("Search successful, %s", "user found." if user else "but no user found.")
    return outcome.result()
