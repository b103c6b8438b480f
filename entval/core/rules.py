"""Validation rule library and rule references.

This module provides the named string rules that schemas can reference by
identifier (``"isURL"``, ``{"rule": "isIP", "args": [4]}``) and the two
rule reference types the engine evaluates: NamedRule, resolved against the
static registry below, and CustomRule, wrapping a caller-supplied predicate.

Email and URL checks go through pydantic's ``EmailStr`` and ``HttpUrl``;
the pattern rules below always match the whole string.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
import ipaddress
import json
import re
from typing import Any, Protocol

from pydantic import EmailStr, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import UnknownRuleError
from .values import DoubleValue, IntegerValue

FQDN_LABEL_PATTERN = re.compile(r"[a-zA-Z0-9\u00a1-\uffff-]{1,63}")
TLD_PATTERN = re.compile(r"[a-zA-Z\u00a1-\uffff]{2,63}|xn--[a-zA-Z0-9-]{2,59}")
SCHEME_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9+.-]*://")
HEX_COLOR_PATTERN = re.compile(
    r"#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})"
)
NUMERIC_PATTERN = re.compile(r"[+-]?(?:[0-9]*\.)?[0-9]+")
INT_PATTERN = re.compile(r"[+-]?[0-9]+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
ALPHA_PATTERN = re.compile(r"[A-Za-z]+")
ALPHANUMERIC_PATTERN = re.compile(r"[A-Za-z0-9]+")
UUID_PATTERNS: dict[int | None, re.Pattern[str]] = {
    None: re.compile(
        r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    ),
    3: re.compile(
        r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-3[0-9a-fA-F]{3}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    ),
    4: re.compile(
        r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-4[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}"
    ),
    5: re.compile(
        r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-5[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}"
    ),
}

email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)
url_adapter: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def is_fqdn(value: str, require_tld: bool = True) -> bool:
    """Check for a fully qualified domain name (``example.com``)."""
    if not value or len(value) > 253 or value.endswith("."):
        return False

    labels = value.split(".")
    if require_tld:
        if len(labels) < 2 or not TLD_PATTERN.fullmatch(labels[-1]):
            return False

    for label in labels:
        if not FQDN_LABEL_PATTERN.fullmatch(label):
            return False
        if label.startswith("-") or label.endswith("-"):
            return False
    return True


def is_ip(value: str, version: int | str | None = None) -> bool:
    """Check for an IP address, optionally restricted to version 4 or 6."""
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return False

    if version in (None, ""):
        return True
    return address.version == int(version)


def is_url(value: str, require_protocol: bool = False) -> bool:
    """Check for an http(s) URL; the scheme is optional by default.

    Hosts must be an IPv4 address written out as such, or a domain with a
    top-level domain of at least two letters.
    """
    if not value or any(char.isspace() for char in value):
        return False

    if not SCHEME_PATTERN.match(value):
        if require_protocol:
            return False
        value = f"http://{value}"

    try:
        url = url_adapter.validate_python(value)
    except PydanticValidationError:
        return False

    host = url.host or ""
    # "http://123" parses as 0.0.0.123; only literal addresses count
    if is_ip(host, 4):
        return host in value
    return is_fqdn(host)


def is_email(value: str) -> bool:
    """Check for an email address with a fully qualified domain."""
    # EmailStr also accepts the "Name <address>" form
    if "<" in value or any(char.isspace() for char in value):
        return False

    try:
        address = email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return is_fqdn(address.rsplit("@", 1)[1])


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_PATTERN.fullmatch(value))


def is_numeric(value: str) -> bool:
    return bool(NUMERIC_PATTERN.fullmatch(value))


def is_int(value: str) -> bool:
    return bool(INT_PATTERN.fullmatch(value))


def is_float(value: str) -> bool:
    return bool(FLOAT_PATTERN.fullmatch(value))


def is_alpha(value: str) -> bool:
    return bool(ALPHA_PATTERN.fullmatch(value))


def is_alphanumeric(value: str) -> bool:
    return bool(ALPHANUMERIC_PATTERN.fullmatch(value))


def is_lowercase(value: str) -> bool:
    return value == value.lower()


def is_uppercase(value: str) -> bool:
    return value == value.upper()


def is_length(value: str, min: int = 0, max: int | None = None) -> bool:  # noqa: A002
    """Check that the string length lies within ``[min, max]``."""
    return len(value) >= int(min) and (max is None or len(value) <= int(max))


def is_uuid(value: str, version: int | str | None = None) -> bool:
    """Check for a UUID, optionally of version 3, 4 or 5."""
    key = None if version in (None, "", "all") else int(version)
    pattern = UUID_PATTERNS.get(key)
    if pattern is None:
        return False
    return bool(pattern.fullmatch(value))


def is_in(value: str, options: Iterable[Any]) -> bool:
    return value in {str(option) for option in options}


def contains(value: str, seed: Any) -> bool:
    return str(seed) in value


def equals(value: str, comparison: Any) -> bool:
    return value == str(comparison)


def matches(value: str, pattern: str, flags: str = "") -> bool:
    """Search ``value`` for ``pattern``; ``flags`` may contain ``i``, ``m`` or ``s``."""
    re_flags = 0
    for flag in flags:
        re_flags |= {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}[flag]
    return re.search(pattern, value, re_flags) is not None


def is_json(value: str) -> bool:
    try:
        parsed = json.loads(value)
    except ValueError:
        return False
    return isinstance(parsed, dict | list)


def is_boolean(value: str) -> bool:
    return value in ("true", "false", "1", "0")


# Rule identifiers as they appear in schemas
RULES: dict[str, Callable[..., bool]] = {
    "isURL": is_url,
    "isEmail": is_email,
    "isIP": is_ip,
    "isFQDN": is_fqdn,
    "isHexColor": is_hex_color,
    "isNumeric": is_numeric,
    "isInt": is_int,
    "isFloat": is_float,
    "isAlpha": is_alpha,
    "isAlphanumeric": is_alphanumeric,
    "isLowercase": is_lowercase,
    "isUppercase": is_uppercase,
    "isLength": is_length,
    "isUUID": is_uuid,
    "isIn": is_in,
    "contains": contains,
    "equals": equals,
    "matches": matches,
    "isJSON": is_json,
    "isBoolean": is_boolean,
}


class RuleLibrary:
    """Lookup handle over the rule registry.

    Custom rules receive this object as their second argument, so they can
    call ``validator.is_numeric(text)`` (or ``validator.isNumeric(text)``).
    """

    def __init__(self, rules: dict[str, Callable[..., bool]]):
        self._rules = dict(rules)
        self._rules.update({func.__name__: func for func in rules.values()})
        self._names = sorted(rules)

    @property
    def names(self) -> list[str]:
        """Rule identifiers, sorted."""
        return list(self._names)

    def get(self, name: str) -> Callable[..., bool]:
        """Get a rule by identifier or snake_case name.

        Raises:
            UnknownRuleError: If no rule is registered under ``name``
        """
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRuleError(
                f"Unknown validation rule '{name}'",
                [f"Available rules: {', '.join(self._names)}"],
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __getattr__(self, name: str) -> Callable[..., bool]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._rules[name]
        except KeyError:
            raise AttributeError(f"No validation rule named '{name}'") from None


validator = RuleLibrary(RULES)


def coerce_to_string(value: Any) -> str | None:
    """Return the string form of a value, or None when it has none.

    Strings, numbers and numeric wrappers are coercible; booleans, None,
    containers and buffers are not.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float | IntegerValue | DoubleValue):
        return str(value)
    return None


class Rule(Protocol):
    """A property rule that decides whether a value passes."""

    args: tuple[Any, ...]

    @property
    def name(self) -> str: ...

    def evaluate(self, value: Any) -> bool: ...


@dataclass(frozen=True)
class NamedRule:
    """Reference to a rule of the library, resolved when created."""

    rule_id: str
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        # Fail fast on misspelled rule names
        validator.get(self.rule_id)

    @property
    def name(self) -> str:
        return self.rule_id

    def evaluate(self, value: Any) -> bool:
        """Run the rule against the string form of ``value``."""
        text = coerce_to_string(value)
        if text is None:
            return False
        return bool(validator.get(self.rule_id)(text, *self.args))


@dataclass(frozen=True)
class CustomRule:
    """Caller-supplied predicate ``(value, validator, *args) -> truthy``."""

    predicate: Callable[..., Any]
    args: tuple[Any, ...] = ()

    @property
    def name(self) -> str:
        return getattr(self.predicate, "__name__", "custom")

    def evaluate(self, value: Any) -> bool:
        return bool(self.predicate(value, validator, *self.args))
