"""Positional-parameter SQL clause construction from sparse optional fields."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Any

from operalog.errors import NoFieldsToUpdateError
from operalog.schemas.report import ReportFilters

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$")


class Operator(str, Enum):
    EQ = "="
    GTE = ">="
    LTE = "<="


@dataclass(frozen=True, slots=True)
class Condition:
    column: str
    operator: Operator
    value: Any


@dataclass(frozen=True, slots=True)
class Clause:
    """Rendered SQL fragment and the full positional parameter list."""

    text: str
    params: list[Any] = field(default_factory=list)


def _checked_column(column: str) -> str:
    if not _IDENTIFIER.match(column):
        raise ValueError(f"Invalid column identifier: {column!r}")
    return column


def build_filter_clause(conditions: Iterable[Condition], *, leading_params: Sequence[Any] = ()) -> Clause:
    """Render conditions with a ``None`` value skipped.

    ``leading_params`` occupy the first placeholder slots, so the first
    rendered predicate uses ``$len(leading_params) + 1``.
    """
    params = list(leading_params)
    predicates: list[str] = []
    for condition in conditions:
        if condition.value is None:
            continue
        params.append(condition.value)
        keyword = "AND" if predicates else "WHERE"
        predicates.append(f"{keyword} {_checked_column(condition.column)} {condition.operator.value} ${len(params)}")
    return Clause(text=" ".join(predicates), params=params)


def build_update_clause(
    values: Mapping[str, Any],
    *,
    leading_params: Sequence[Any] = (),
    touch_column: str | None = "updated_at",
    allow_empty: bool = False,
) -> Clause:
    """Render a ``SET`` list for every non-null value.

    The touch column is always appended. With no values supplied this
    raises ``NoFieldsToUpdateError`` unless ``allow_empty`` is set, in which
    case the clause only touches the timestamp.
    """
    params = list(leading_params)
    assignments: list[str] = []
    for column, value in values.items():
        if value is None:
            continue
        params.append(value)
        assignments.append(f"{_checked_column(column)} = ${len(params)}")

    if not assignments and not allow_empty:
        raise NoFieldsToUpdateError()

    if touch_column:
        assignments.append(f"{_checked_column(touch_column)} = CURRENT_TIMESTAMP")
    return Clause(text=", ".join(assignments), params=params)


def report_filter_conditions(filters: ReportFilters, *, table_alias: str = "dr") -> list[Condition]:
    prefix = f"{table_alias}." if table_alias else ""
    return [
        Condition(f"{prefix}ship_id", Operator.EQ, filters.ship_id),
        Condition(f"{prefix}report_date", Operator.GTE, filters.start_date),
        Condition(f"{prefix}report_date", Operator.LTE, filters.end_date),
    ]


def build_report_filter_clause(
    filters: ReportFilters,
    *,
    limit: int | None = None,
    offset: int | None = None,
    table_alias: str = "dr",
) -> Clause:
    """Filter clause for report listing; pagination takes ``$1``/``$2`` when given."""
    leading: list[Any] = []
    if limit is not None:
        leading = [limit, offset or 0]
    return build_filter_clause(report_filter_conditions(filters, table_alias=table_alias), leading_params=leading)


__all__ = [
    "Clause",
    "Condition",
    "Operator",
    "build_filter_clause",
    "build_report_filter_clause",
    "build_update_clause",
    "report_filter_conditions",
]
