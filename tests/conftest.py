"""Shared fixtures: an in-memory directory behind fake ldap3 Server/Connection classes."""

import re
from typing import Any, Dict, List, Optional

import pytest
from ldap3.core.exceptions import (
    LDAPInvalidCredentialsResult,
    LDAPNoSuchObjectResult,
    LDAPSocketOpenError,
    LDAPSocketReceiveError,
)

ADMIN_DN = "cn=read-only-admin,dc=example,dc=com"
ADMIN_PASSWORD = "password"
BASE_DN = "dc=example,dc=com"
URL = "ldap://ldap.example.com:389"

FILTER_RE = re.compile(r"^\((?P<attr>[^=()]+)=(?P<value>[^()]*)\)$")


class FakeDirectory:
    """
    Scriptable stand-in for a directory server.

    Knobs:
        unreachable: open() raises LDAPSocketOpenError
        response_delay: seconds the server takes to answer a bind
        bind_returns_false: bind() returns False instead of raising
        forced_search_result: (code, description) ending every search
        unbind_error: exception raised by unbind()
    """

    def __init__(self):
        self.entries: Dict[str, Dict[str, Any]] = {}
        self.passwords: Dict[str, str] = {}
        self.unreachable = False
        self.response_delay = 0.0
        self.bind_returns_false = False
        self.forced_search_result: Optional[tuple] = None
        self.unbind_error: Optional[Exception] = None
        self.servers: List["FakeServer"] = []
        self.connections: List["FakeConnection"] = []
        self.searches: List[Dict[str, Any]] = []

    def add_entry(self, dn: str, attributes: Dict[str, Any], password: Optional[str] = None) -> None:
        self.entries[dn] = {k: v if isinstance(v, list) else [v] for k, v in attributes.items()}
        if password is not None:
            self.passwords[dn] = password

    @property
    def open_connections(self) -> List["FakeConnection"]:
        return [c for c in self.connections if c.opened and c.unbind_calls == 0]

    @property
    def bound_users(self) -> List[str]:
        return [c.user for c in self.connections if c.bound]

    def base_exists(self, base: str) -> bool:
        base = base.lower()
        return any(dn.lower() == base or dn.lower().endswith("," + base) for dn in self.entries)


class FakeServer:
    def __init__(self, host, connect_timeout=None, tls=None, get_info=None, **kwargs):
        self.host = host
        self.connect_timeout = connect_timeout
        self.tls = tls
        self.get_info = get_info
        FakeServer.directory.servers.append(self)


class FakeConnection:
    def __init__(self, server, user=None, password=None, auto_bind=None,
                 receive_timeout=None, raise_exceptions=False, **kwargs):
        self.server = server
        self.user = user
        self.password = password
        self.auto_bind = auto_bind
        self.receive_timeout = receive_timeout
        self.raise_exceptions = raise_exceptions
        self.directory: FakeDirectory = FakeServer.directory
        self.opened = False
        self.bound = False
        self.unbind_calls = 0
        self.result: Dict[str, Any] = {}
        self.response: List[Dict[str, Any]] = []
        self.directory.connections.append(self)

    def open(self):
        if self.directory.unreachable:
            raise LDAPSocketOpenError("socket connection error while opening: [Errno 111] Connection refused")
        self.opened = True

    def bind(self):
        if self.receive_timeout is not None and self.directory.response_delay > self.receive_timeout:
            raise LDAPSocketReceiveError("error receiving data: timed out")
        if self.directory.bind_returns_false:
            self.result = {"result": 53, "description": "unwillingToPerform"}
            return False
        if self.directory.passwords.get(self.user) != self.password:
            self.result = {"result": 49, "description": "invalidCredentials"}
            raise LDAPInvalidCredentialsResult(result=49, description="invalidCredentials", dn=self.user)
        self.bound = True
        self.result = {"result": 0, "description": "success"}
        return True

    def search(self, search_base, search_filter, search_scope=None, attributes=None, size_limit=0, **kwargs):
        self.directory.searches.append({
            "search_base": search_base,
            "search_filter": search_filter,
            "search_scope": search_scope,
            "attributes": attributes,
            "size_limit": size_limit,
        })
        if not self.directory.base_exists(search_base):
            self.result = {"result": 32, "description": "noSuchObject"}
            raise LDAPNoSuchObjectResult(result=32, description="noSuchObject", dn=search_base)

        match = FILTER_RE.match(search_filter)
        attr, value = match.group("attr").lower(), match.group("value")
        hits = []
        for dn, attrs in self.directory.entries.items():
            if not (dn.lower() == search_base.lower() or dn.lower().endswith("," + search_base.lower())):
                continue
            values = next((v for k, v in attrs.items() if k.lower() == attr), [])
            if value in values:
                hits.append({"type": "searchResEntry", "dn": dn, "attributes": dict(attrs)})

        self.result = {"result": 0, "description": "success"}
        if size_limit and len(hits) > size_limit:
            hits = hits[:size_limit]
            self.result = {"result": 4, "description": "sizeLimitExceeded"}
        if self.directory.forced_search_result:
            code, description = self.directory.forced_search_result
            self.result = {"result": code, "description": description}
        self.response = hits
        return self.result["result"] == 0

    def unbind(self):
        self.unbind_calls += 1
        self.bound = False
        if self.directory.unbind_error:
            raise self.directory.unbind_error
        return True


@pytest.fixture
def directory(monkeypatch):
    """A populated FakeDirectory wired in place of ldap3's Server and Connection."""
    d = FakeDirectory()
    d.add_entry(ADMIN_DN, {"cn": "read-only-admin"}, password=ADMIN_PASSWORD)
    d.add_entry(
        "uid=gauss,dc=example,dc=com",
        {"uid": "gauss", "cn": "Carl Friedrich Gauss", "mail": "gauss@ldap.example.com",
         "objectClass": ["inetOrgPerson", "person", "top"]},
        password="password",
    )
    d.add_entry(
        "uid=euler,dc=example,dc=com",
        {"uid": "euler", "cn": "Leonhard Euler", "mail": "euler@ldap.example.com"},
        password="password",
    )
    FakeServer.directory = d
    monkeypatch.setattr("easy_ldap_auth.ldap.connection.Server", FakeServer)
    monkeypatch.setattr("easy_ldap_auth.ldap.connection.Connection", FakeConnection)
    return d


@pytest.fixture
def search_options() -> Dict[str, Any]:
    return {
        "url": URL,
        "admin_dn": ADMIN_DN,
        "admin_password": ADMIN_PASSWORD,
        "user_search_base_dn": BASE_DN,
        "user_search_attribute": "uid",
        "username": "gauss",
    }


@pytest.fixture
def auth_options(search_options) -> Dict[str, Any]:
    return dict(search_options, password="password")
