"""ApiMethod — immutable descriptor of one remote call.

A descriptor names the verb, a URL template, the parameters, whether a
token is required, and the shape the response body decodes into. It does
no I/O; RequestExecutor turns it into an HTTP exchange.
"""

from __future__ import annotations

import string
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, urljoin, urlsplit

_FORMATTER = string.Formatter()


class Verb(str, Enum):
    """HTTP verbs used by the remote service."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


def _freeze(params: Mapping[str, Any] | None) -> Mapping[str, str]:
    return MappingProxyType({k: str(v) for k, v in (params or {}).items()})


def _segment(value: str) -> str:
    """Percent-encode one path segment, including "/" and dot segments."""
    if value in (".", ".."):
        return value.replace(".", "%2E")
    return quote(value, safe="")


@dataclass(frozen=True)
class ApiMethod:
    """Immutable remote call description.

    ``url_template`` may be relative to the configured base URL or fully
    qualified (pagination cursors). ``{name}`` placeholders are filled from
    ``params``, each value percent-encoded as one path segment; whatever
    is left goes to the query string or form body.
    ``result_shape`` of None means the response body is discarded.
    """

    verb: Verb
    url_template: str
    params: Mapping[str, str] = field(default_factory=lambda: _freeze(None))
    requires_auth: bool = False
    result_shape: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.params, MappingProxyType):
            object.__setattr__(self, "params", _freeze(self.params))

    def __hash__(self) -> int:
        # MappingProxyType is unhashable; hash a snapshot of the params
        return hash(
            (
                self.verb,
                self.url_template,
                frozenset(self.params.items()),
                self.requires_auth,
                self.result_shape,
            )
        )

    @classmethod
    def get(
        cls,
        url_template: str,
        *,
        params: Mapping[str, Any] | None = None,
        requires_auth: bool = False,
        result_shape: Any = None,
    ) -> ApiMethod:
        return cls(Verb.GET, url_template, _freeze(params), requires_auth, result_shape)

    @classmethod
    def post(
        cls,
        url_template: str,
        *,
        params: Mapping[str, Any] | None = None,
        requires_auth: bool = False,
        result_shape: Any = None,
    ) -> ApiMethod:
        return cls(Verb.POST, url_template, _freeze(params), requires_auth, result_shape)

    @classmethod
    def delete(
        cls,
        url_template: str,
        *,
        params: Mapping[str, Any] | None = None,
        requires_auth: bool = False,
        result_shape: Any = None,
    ) -> ApiMethod:
        return cls(Verb.DELETE, url_template, _freeze(params), requires_auth, result_shape)

    @property
    def path_fields(self) -> frozenset[str]:
        """Placeholder names referenced by the URL template."""
        return frozenset(
            name for _, name, _, _ in _FORMATTER.parse(self.url_template) if name
        )

    def resolve(self, base_url: str) -> tuple[str, dict[str, str]]:
        """Fill the template and return ``(absolute_url, remaining_params)``.

        Raises:
            ValueError: If a placeholder has no matching parameter.
        """
        fields = self.path_fields
        missing = fields - self.params.keys()
        if missing:
            raise ValueError(
                f"URL template {self.url_template!r} needs parameters: "
                f"{', '.join(sorted(missing))}"
            )
        path = self.url_template.format(**{k: _segment(self.params[k]) for k in fields})
        remaining = {k: v for k, v in self.params.items() if k not in fields}

        if urlsplit(path).scheme:
            return path, remaining
        return urljoin(base_url, path.lstrip("/")), remaining
