"""Parameter names, separators and the filter denylist."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_DENYLIST: frozenset[str] = frozenset(
    {"id", "password", "remember_token", "deleted_at"}
)


@dataclass(frozen=True)
class QueryConfig:
    """Configuration for query-string translation.

    Attributes:
        denylist: Columns that can never be used as filter keys.
        scope_key: Parameter listing named scopes to apply.
        strict_key: Parameter forcing exact match on string columns.
        not_key: Parameter holding exclusion directives.
        sort_key: Parameter holding sort directives.
        with_key: Parameter listing relations to eager-load.
        page_key: Page number for paginated results.
        limit_key: Page size for paginated results.
        take_key: Maximum number of records to return.
        return_key: Result mode (``count``, ``first``, ``unique:<column>``).
        range_separator: Separator between range bounds (``min..max``).
        list_separator: Separator between list items.
        exclusion_separator: Separator between exclusion directives.
        pair_separator: Separator between a name and its argument.
        count_suffix: Suffix turning a relation name into a count sort key.
        max_page_size: Optional upper bound for ``limit`` and ``take``.
        tie_break_on_primary_key: Append the primary key to every ordering.
    """

    denylist: frozenset[str] = field(default=DEFAULT_DENYLIST)

    # Parameter names
    scope_key: str = "scope"
    strict_key: str = "strict"
    not_key: str = "not"
    sort_key: str = "sort"
    with_key: str = "with"
    page_key: str = "page"
    limit_key: str = "limit"
    take_key: str = "take"
    return_key: str = "return"

    # Syntax
    range_separator: str = ".."
    list_separator: str = ","
    exclusion_separator: str = "|"
    pair_separator: str = ":"
    count_suffix: str = "_count"

    # Result shaping
    max_page_size: int | None = None
    tie_break_on_primary_key: bool = True

    def is_denied(self, column: str) -> bool:
        return column in self.denylist


DEFAULT_CONFIG = QueryConfig()
