"""Configuration file handling."""

import configparser
import ssl
from typing import Any, Dict, Optional


DEFAULT_CONFIG_TEMPLATE = """\
# easy_ldap_auth Configuration File
# ---------------------------------
# Load with easy_ldap_auth.load_config() and pass the result, plus the
# username (and password for authentication), to single_search() or
# single_authentication().

[ldap]
# Directory URL (ldap:// for plaintext, ldaps:// for TLS)
url = ldap://ldap.example.com:389
# Service account used to search for users
admin_dn = cn=read-only-admin,dc=example,dc=com
admin_password = password
# Subtree searched for users
user_search_base_dn = dc=example,dc=com
# Attribute compared with the username (uid, sAMAccountName, mail, ...)
user_search_attribute = uid
# Connect/response timeout in milliseconds (leave empty for 5000)
timeout =

[tls]
# Certificate validation: required, optional or none
# Remove this section entirely to use the library defaults
validate = required
# CA bundle used to validate the server certificate (optional)
ca_certs_file =
"""

TLS_VALIDATE_MODES = {
    "required": ssl.CERT_REQUIRED,
    "optional": ssl.CERT_OPTIONAL,
    "none": ssl.CERT_NONE,
}


def load_config(config_path: str, section: str = "ldap") -> Dict[str, Any]:
    """
    Load connection settings from an INI file.

    Returns a dict accepted by SearchOptions.from_dict() and
    AuthenticationOptions.from_dict(), using None for unset values.

    Raises:
        FileNotFoundError: config_path could not be read
        ValueError: An option has an invalid value
    """
    config = configparser.ConfigParser()
    if not config.read(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    result: Dict[str, Any] = {}

    if config.has_section(section):
        for key in ["url", "admin_dn", "admin_password", "user_search_base_dn", "user_search_attribute"]:
            value = config.get(section, key, fallback="")
            result[key] = value if value.strip() else None
        timeout_str = config.get(section, "timeout", fallback="")
        result["timeout"] = int(timeout_str) if timeout_str.strip() else None

    # [tls] section - presence alone enables a custom Tls object
    if config.has_section("tls"):
        validate = config.get("tls", "validate", fallback="required").strip().lower()
        if validate not in TLS_VALIDATE_MODES:
            raise ValueError(f"Invalid tls.validate value: {validate!r} (expected required, optional or none)")
        tls_options: Dict[str, Any] = {"validate": TLS_VALIDATE_MODES[validate]}
        ca_file = config.get("tls", "ca_certs_file", fallback="")
        if ca_file.strip():
            tls_options["ca_certs_file"] = ca_file.strip()
        result["tls_options"] = tls_options

    return result


def generate_config_file(output_path: Optional[str] = None) -> str:
    """
    Produce a commented template that load_config() reads back.

    The template has an [ldap] section (url, admin_dn, admin_password,
    user_search_base_dn, user_search_attribute, timeout) and a [tls] section
    (validate, ca_certs_file) that can be deleted for library TLS defaults.

    Args:
        output_path: Where to write the template; None returns it instead

    Returns:
        The template text, or a message naming the file it was written to
    """
    if not output_path:
        return DEFAULT_CONFIG_TEMPLATE
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG_TEMPLATE)
    return f"LDAP configuration template written to: {output_path}"
