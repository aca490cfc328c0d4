"""View-state store backed by an externalized key/value string.

The view state is the single source of truth for what the diagram shows.
It is serialized into the page location (``#query=..&config=..&open=..``)
so any diagram can be reproduced from that string alone.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

from ..config.defaults import (
    DEFAULT_METRIC_KEY,
    PARAM_CONFIG,
    PARAM_OPEN,
    PARAM_QUERY,
)


class ViewState:
    """Ordered set of named string parameters.

    Mutating the state never triggers a render by itself; callers re-render
    after changing ``query`` or ``config``.
    """

    def __init__(self, params: dict[str, str] | None = None) -> None:
        self._params: dict[str, str] = dict(params or {})

    @classmethod
    def from_fragment(cls, fragment: str | None) -> ViewState:
        """Parse ``a=b&c=d`` with an optional leading ``#`` or ``?``.

        Pairs without ``=`` and pairs with an empty name are ignored. Later
        occurrences of a name override earlier ones.
        """
        params: dict[str, str] = {}
        text = (fragment or "").lstrip("#?")
        for pair in text.split("&"):
            if not pair or "=" not in pair:
                continue
            raw_name, raw_value = pair.split("=", 1)
            name = unquote(raw_name)
            if not name:
                continue
            params[name] = unquote(raw_value)
        return cls(params)

    def to_fragment(self) -> str:
        """Serialize to ``a=b&c=d`` (no leading ``#``), URL-encoded."""
        return "&".join(
            f"{quote(name, safe='')}={quote(value, safe='')}"
            for name, value in self._params.items()
        )

    def get(self, name: str) -> str | None:
        return self._params.get(name)

    def set(self, name: str, value: str | None) -> None:
        """Set a parameter; ``None`` removes it."""
        if value is None:
            self._params.pop(name, None)
        else:
            self._params[name] = value

    def copy(self) -> ViewState:
        return ViewState(self._params)

    def with_param(self, name: str, value: str | None) -> ViewState:
        """Return a copy with one parameter changed."""
        state = self.copy()
        state.set(name, value)
        return state

    @property
    def query(self) -> str | None:
        """Filter text; empty counts as no filtering."""
        return self.get(PARAM_QUERY) or None

    @property
    def active_key(self) -> str:
        return self.get(PARAM_CONFIG) or DEFAULT_METRIC_KEY

    @property
    def open_node(self) -> str | None:
        return self.get(PARAM_OPEN) or None

    def as_dict(self) -> dict[str, str]:
        return dict(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ViewState):
            return NotImplemented
        return self._params == other._params

    def __repr__(self) -> str:
        return f"ViewState({self._params!r})"
