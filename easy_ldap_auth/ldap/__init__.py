"""LDAP bind, search and authentication."""

from .errors import (
    ErrorKind,
    EasyLdapAuthError,
    MissingOptionError,
    SearchFailedError,
    InvalidUserCredentialsError,
    classify_error,
    is_retryable,
)
from .connection import DirectorySession, bind_ldap, build_tls
from .search import search_user, equality_filter
from .auth import single_search, single_authentication

__all__ = [
    "ErrorKind",
    "EasyLdapAuthError",
    "MissingOptionError",
    "SearchFailedError",
    "InvalidUserCredentialsError",
    "classify_error",
    "is_retryable",
    "DirectorySession",
    "bind_ldap",
    "build_tls",
    "search_user",
    "equality_filter",
    "single_search",
    "single_authentication",
]
