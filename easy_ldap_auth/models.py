"""Data models for lookup and authentication calls."""

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, List, Mapping, Optional

from .constants import CAMEL_CASE_OPTION_KEYS, DEFAULT_TIMEOUT_MS
from .ldap.errors import MissingOptionError


def _normalize_keys(d: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase option names onto their snake_case field names."""
    return {CAMEL_CASE_OPTION_KEYS.get(key, key): value for key, value in d.items()}


@dataclass(frozen=True)
class BindOptions:
    """Where to connect and which identity to bind as."""
    url: str
    dn: str
    password: str = field(repr=False)
    timeout: int = DEFAULT_TIMEOUT_MS  # milliseconds
    tls_options: Any = None  # ldap3.Tls or a mapping of Tls() keyword arguments

    @property
    def timeout_seconds(self) -> float:
        """Timeout in the unit ldap3 expects; a falsy timeout means the default."""
        return (self.timeout or DEFAULT_TIMEOUT_MS) / 1000.0


@dataclass(frozen=True)
class SearchOptions:
    """Options for a single-user lookup."""
    url: Optional[str] = None
    admin_dn: Optional[str] = None
    admin_password: Optional[str] = field(default=None, repr=False)
    user_search_base_dn: Optional[str] = None
    user_search_attribute: Optional[str] = None
    username: Optional[str] = None
    timeout: Optional[int] = DEFAULT_TIMEOUT_MS  # milliseconds
    tls_options: Any = None

    REQUIRED = (
        "url",
        "admin_dn",
        "admin_password",
        "user_search_base_dn",
        "user_search_attribute",
        "username",
    )

    def validate(self) -> None:
        """Raise MissingOptionError for the first required option that is empty."""
        for name in self.REQUIRED:
            if not getattr(self, name):
                raise MissingOptionError(name)

    def admin_bind_options(self) -> BindOptions:
        return self.bind_options(self.admin_dn, self.admin_password)

    def bind_options(self, dn: str, password: str) -> BindOptions:
        """Connection parameters of this call combined with the given identity."""
        return BindOptions(
            url=self.url,
            dn=dn,
            password=password,
            timeout=self.timeout or DEFAULT_TIMEOUT_MS,
            tls_options=self.tls_options,
        )

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SearchOptions":
        """Build options from a mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in _normalize_keys(d).items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AuthenticationOptions(SearchOptions):
    """Options for a lookup followed by a bind as the located user."""
    password: Optional[str] = field(default=None, repr=False)

    def validate(self) -> None:
        if not self.password:
            raise MissingOptionError("password")
        super().validate()


@dataclass
class UserEntry:
    """
    A directory entry found by a search.

    Single-valued attributes hold a scalar, multi-valued ones a list.
    Attribute names are matched case-insensitively.
    """
    dn: str
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, item: Mapping[str, Any]) -> "UserEntry":
        """Build an entry from one 'searchResEntry' item of an ldap3 response."""
        attributes: Dict[str, Any] = {}
        for name, value in (item.get("attributes") or {}).items():
            if isinstance(value, list) and len(value) == 1:
                value = value[0]
            attributes[name] = value
        return cls(dn=item["dn"], attributes=attributes)

    def _key(self, name: str) -> Optional[str]:
        if name in self.attributes:
            return name
        lowered = name.lower()
        for key in self.attributes:
            if key.lower() == lowered:
                return key
        return None

    def get(self, name: str, default: Any = None) -> Any:
        key = self._key(name)
        return self.attributes[key] if key is not None else default

    def get_list(self, name: str) -> List[Any]:
        """Return an attribute as a list, whatever its arity."""
        value = self.get(name)
        if value is None:
            return []
        return value if isinstance(value, list) else [value]

    def __getitem__(self, name: str) -> Any:
        key = self._key(name)
        if key is None:
            raise KeyError(name)
        return self.attributes[key]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"dn": self.dn, **self.attributes}
