"""Constants used throughout the package."""

# Name of the package logger; silent unless the application configures it.
LOGGER_NAME = "easy_ldap_auth"

# Connect and receive timeout applied when the caller gives none (milliseconds)
DEFAULT_TIMEOUT_MS = 5000

# Single-result search: never ask the server for more than one entry
SEARCH_SIZE_LIMIT = 1

# LDAP result code for success (RFC 4511, section 4.1.9)
RESULT_SUCCESS = 0

# Response item type of a search entry in ldap3 results
SEARCH_RESULT_ENTRY = "searchResEntry"

# camelCase option names accepted by the from_dict() loaders
CAMEL_CASE_OPTION_KEYS = {
    "adminDn": "admin_dn",
    "adminPassword": "admin_password",
    "userSearchBaseDn": "user_search_base_dn",
    "userSearchAttribute": "user_search_attribute",
    "tlsOptions": "tls_options",
}
