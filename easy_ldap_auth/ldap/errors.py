"""Error types and outcome classification."""

from enum import Enum
from typing import Optional

from ldap3.core.exceptions import (
    LDAPCommunicationError,
    LDAPInvalidCredentialsResult,
)


class ErrorKind(Enum):
    """What a failed call means for the caller."""
    PRECONDITION = "precondition"                      # Bad options, nothing was sent
    CONNECTION = "connection"                          # Unreachable, refused or timed out
    INVALID_CREDENTIALS = "invalid_credentials"        # Administrative bind rejected
    INVALID_USER_CREDENTIALS = "invalid_user_credentials"  # Unknown user or wrong password
    PROTOCOL = "protocol"                              # Directory-reported or other failure


class EasyLdapAuthError(Exception):
    """Base class for errors raised by this package."""
    kind = ErrorKind.PROTOCOL


class MissingOptionError(EasyLdapAuthError, ValueError):
    """A required option was not supplied."""
    kind = ErrorKind.PRECONDITION

    def __init__(self, option: str):
        super().__init__(f"{option} is required")
        self.option = option


class SearchFailedError(EasyLdapAuthError):
    """The search ended with a non-zero result code."""

    def __init__(self, result_code: Optional[int], description: Optional[str] = None):
        message = "LDAP search status code not equals to 0."
        if description:
            message = f"{message} ({result_code}: {description})"
        super().__init__(message)
        self.result_code = result_code
        self.description = description


class InvalidUserCredentialsError(EasyLdapAuthError):
    """
    The end user could not be authenticated.

    Attributes:
        username: The username that was searched for
        user_found: False when no entry matched, True when the password was wrong
    """
    kind = ErrorKind.INVALID_USER_CREDENTIALS

    def __init__(self, username: str, user_found: bool):
        if user_found:
            message = f"Invalid password for user {username}."
        else:
            message = f"User {username} not found."
        super().__init__(message)
        self.username = username
        self.user_found = user_found


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by single_search/single_authentication to its kind."""
    if isinstance(exc, EasyLdapAuthError):
        return exc.kind
    if isinstance(exc, LDAPInvalidCredentialsResult):
        return ErrorKind.INVALID_CREDENTIALS
    if isinstance(exc, LDAPCommunicationError):
        return ErrorKind.CONNECTION
    return ErrorKind.PROTOCOL


def is_retryable(exc: BaseException) -> bool:
    """True when a later attempt could succeed without changing the inputs."""
    return classify_error(exc) is ErrorKind.CONNECTION
