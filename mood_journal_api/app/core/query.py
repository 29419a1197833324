"""
Composable WHERE clauses for parameterized SQLite queries.

Filters are small immutable objects that render to a SQL fragment and
a tuple of parameters::

    where = and_(eq("id", entry_id), eq("user_id", user_id))
    clause, params = where.render()
    # "(id = ? AND user_id = ?)", (entry_id, user_id)

Column names are always supplied by code, never by callers; only
values are bound as parameters.  ``eq(column, None)`` renders an
``IS NULL`` check because ``= NULL`` never matches in SQL.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple


class Filter(ABC):
    """Base class for renderable filters."""

    @abstractmethod
    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        """Return the SQL fragment and its bound parameters."""


@dataclass(frozen=True)
class Eq(Filter):
    column: str
    value: Any

    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        if self.value is None:
            return f"{self.column} IS NULL", ()
        return f"{self.column} = ?", (self.value,)


@dataclass(frozen=True)
class _Compound(Filter):
    operator: str
    parts: Tuple[Filter, ...]

    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        clauses = []
        params: Tuple[Any, ...] = ()
        for part in self.parts:
            clause, part_params = part.render()
            clauses.append(clause)
            params += part_params
        return "(" + f" {self.operator} ".join(clauses) + ")", params


def eq(column: str, value: Any) -> Filter:
    return Eq(column, value)


def and_(*parts: Filter) -> Filter:
    if not parts:
        raise ValueError("and_() needs at least one filter")
    if len(parts) == 1:
        return parts[0]
    return _Compound("AND", tuple(parts))


def or_(*parts: Filter) -> Filter:
    if not parts:
        raise ValueError("or_() needs at least one filter")
    if len(parts) == 1:
        return parts[0]
    return _Compound("OR", tuple(parts))


@dataclass(frozen=True)
class OrderBy:
    """``ORDER BY`` term; ``descending`` defaults to ``True``."""

    column: str
    descending: bool = True

    def render(self) -> str:
        return f"{self.column} {'DESC' if self.descending else 'ASC'}"


def desc(column: str) -> OrderBy:
    return OrderBy(column, True)
