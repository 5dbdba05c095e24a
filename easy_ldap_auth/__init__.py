"""
easy_ldap_auth - LDAP user lookup and password verification

Finds a user entry with a service account, then verifies the user's password
by binding as the entry's DN, without leaving any connection open.
"""

import logging

__version__ = "1.0.0"

from .constants import DEFAULT_TIMEOUT_MS, LOGGER_NAME
from .ldap import (
    ErrorKind,
    EasyLdapAuthError,
    MissingOptionError,
    SearchFailedError,
    InvalidUserCredentialsError,
    classify_error,
    is_retryable,
    DirectorySession,
    bind_ldap,
    search_user,
    single_search,
    single_authentication,
)
from .models import BindOptions, SearchOptions, AuthenticationOptions, UserEntry
from .settlement import Settlement
from .config import load_config, generate_config_file
from .aio import single_search_async, single_authentication_async

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Constants
    "DEFAULT_TIMEOUT_MS",
    "LOGGER_NAME",
    # Errors
    "ErrorKind",
    "EasyLdapAuthError",
    "MissingOptionError",
    "SearchFailedError",
    "InvalidUserCredentialsError",
    "classify_error",
    "is_retryable",
    # LDAP
    "DirectorySession",
    "bind_ldap",
    "search_user",
    "single_search",
    "single_authentication",
    # Async
    "single_search_async",
    "single_authentication_async",
    # Models
    "BindOptions",
    "SearchOptions",
    "AuthenticationOptions",
    "UserEntry",
    "Settlement",
    # Config
    "load_config",
    "generate_config_file",
]
