"""Page result value and query-string links for paginated listings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from urllib.parse import urlencode

from .config import DEFAULT_CONFIG, QueryConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a paginated query, with the total row count."""

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1

    @property
    def has_more(self) -> bool:
        return self.page < self.last_page

    @property
    def previous_page(self) -> int | None:
        return self.page - 1 if self.page > 1 else None

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_more else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.items,
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.page,
            "last_page": self.last_page,
        }


class QueryStringBuilder:
    """Re-encode request parameters, e.g. for pagination links."""

    def __init__(self, config: QueryConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    def build(self, params: Mapping[str, Any], **overrides: Any) -> str:
        """Return ``params`` updated with ``overrides``; ``None`` removes a key."""
        merged: dict[str, Any] = {}
        for key, value in params.items():
            if isinstance(value, list | tuple):
                value = value[-1] if value else None
            if value is not None:
                merged[key] = value
        for key, value in overrides.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        return urlencode(merged)

    def page_links(
        self, params: Mapping[str, Any], page: Page[Any]
    ) -> dict[str, str | None]:
        """``first``/``last``/``prev``/``next`` query strings for ``page``."""
        key = self._config.page_key
        limit_key = self._config.limit_key

        def link(number: int | None) -> str | None:
            if number is None:
                return None
            return self.build(params, **{key: number, limit_key: page.per_page})

        return {
            "first": link(1),
            "last": link(page.last_page),
            "prev": link(page.previous_page),
            "next": link(page.next_page),
        }
