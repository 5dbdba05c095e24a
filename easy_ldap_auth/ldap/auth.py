"""User lookup and authentication against the directory."""

import logging
from typing import Any, Mapping, Optional, Union

from ldap3.core.exceptions import LDAPInvalidCredentialsResult

from ..models import AuthenticationOptions, SearchOptions, UserEntry
from .connection import bind_ldap
from .errors import InvalidUserCredentialsError
from .search import search_user


def single_search(
    options: Union[SearchOptions, Mapping[str, Any]],
    logger: Optional[logging.Logger] = None,
) -> Optional[UserEntry]:
    """
    Search for a user with the administrative identity.

    Binds as options.admin_dn, looks up the entry whose
    options.user_search_attribute equals options.username under
    options.user_search_base_dn, and unbinds before returning or raising.
    Failures are raised unchanged.

    Args:
        options: SearchOptions, or a mapping accepted by SearchOptions.from_dict
        logger: Diagnostic sink (defaults to the package logger)

    Returns:
        The user's entry, or None if no entry matched

    Raises:
        MissingOptionError: A required option is empty (nothing was sent)
        LDAPInvalidCredentialsResult: The administrative bind was rejected
        LDAPCommunicationError: The server could not be reached in time
        LDAPNoSuchObjectResult: The search base does not exist
        SearchFailedError: The search ended with a non-zero result code
    """
    if not isinstance(options, SearchOptions):
        options = SearchOptions.from_dict(options)
    options.validate()

    with bind_ldap(options.admin_bind_options(), is_admin=True, logger=logger) as admin:
        return search_user(
            admin,
            options.user_search_base_dn,
            options.user_search_attribute,
            options.username,
            logger=logger,
        )


def single_authentication(
    options: Union[AuthenticationOptions, Mapping[str, Any]],
    logger: Optional[logging.Logger] = None,
) -> UserEntry:
    """
    Authenticate a user: look them up, then bind as their DN with options.password.

    Only a rejected password or a missing user becomes
    InvalidUserCredentialsError. Everything else (administrative bind
    failures, connection failures, directory errors) is raised unchanged, so
    callers can tell a bad login from a broken setup.

    Returns:
        The user's entry, the same one single_search would return

    Raises:
        InvalidUserCredentialsError: user_found=False if nobody matched,
            user_found=True if the password was wrong
    """
    if not isinstance(options, AuthenticationOptions):
        options = AuthenticationOptions.from_dict(options)
    options.validate()

    user = single_search(options, logger=logger)
    if user is None:
        raise InvalidUserCredentialsError(options.username, user_found=False)

    try:
        user_session = bind_ldap(options.bind_options(user.dn, options.password), logger=logger)
    except LDAPInvalidCredentialsResult as e:
        raise InvalidUserCredentialsError(options.username, user_found=True) from e
    user_session.release()
    return user
