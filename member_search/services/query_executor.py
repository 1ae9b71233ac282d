"""
Run joined, filtered, ordered and paged (or grouped) queries for one session.

A QueryExecutor wraps the Session of the current request and builds a
``select()`` from:

- a selection: an entity class, one column, a sequence of columns, or a
  Projection (rows are then mapped into its target type),
- a join mode towards the related entity,
- a composed filter (None means no WHERE clause),
- OrderSpecs, offset/limit, and optional GROUP BY / HAVING.

The executor holds no state besides the session; create one per unit of work.
"""
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import Float, Select, cast, func, select
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.attributes import InstrumentedAttribute
from sqlalchemy.sql.elements import ColumnElement

from ..core.errors import InvalidPageError, NonUniqueResultError
from ..models.member import Member
from .projections import Projection

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JoinMode(StrEnum):
    NONE = "none"
    INNER = "inner"    # JOIN team: drops members without a team
    LEFT = "left"      # LEFT OUTER JOIN team: keeps them, team columns NULL
    THETA = "theta"    # FROM member, team: cross product narrowed by WHERE


class Direction(StrEnum):
    ASC = "asc"
    DESC = "desc"


class NullsOrder(StrEnum):
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class OrderSpec:
    column: Any
    direction: Direction = Direction.ASC
    nulls: NullsOrder = NullsOrder.LAST

    def clause(self) -> ColumnElement:
        ordered = self.column.desc() if self.direction == Direction.DESC else self.column.asc()
        return ordered.nulls_first() if self.nulls == NullsOrder.FIRST else ordered.nulls_last()


def asc(column: Any, nulls: NullsOrder = NullsOrder.LAST) -> OrderSpec:
    return OrderSpec(column, Direction.ASC, nulls)


def desc(column: Any, nulls: NullsOrder = NullsOrder.LAST) -> OrderSpec:
    return OrderSpec(column, Direction.DESC, nulls)


class AggregateFunction(StrEnum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MAX = "max"
    MIN = "min"


def aggregate(fn: AggregateFunction | str, column: Any = None, label: str | None = None) -> ColumnElement:
    """
    Labelled aggregate over ``column``.

    COUNT without a column counts rows. AVG is cast to a float so integer
    columns still produce fractional means; the other functions keep the
    column's own type.
    """
    fn = AggregateFunction(fn)
    if fn == AggregateFunction.COUNT:
        expr = func.count(column) if column is not None else func.count()
    elif column is None:
        raise ValueError(f"{fn.value}() needs a column")
    elif fn == AggregateFunction.AVG:
        expr = cast(func.avg(column), Float)
    else:
        expr = getattr(func, fn.value)(column)
    if label is None:
        key = getattr(column, "key", None)
        label = f"{fn.value}_{key}" if key else fn.value
    return expr.label(label)


@dataclass
class QueryResults(Generic[T]):
    """One page of results plus the unpaged total of the same filter."""
    results: list[T] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: Optional[int] = None


def _check_page(offset: int | None, limit: int | None) -> None:
    if offset is not None and offset < 0:
        raise InvalidPageError(f"offset must be >= 0, got {offset}")
    if limit is not None and limit < 0:
        raise InvalidPageError(f"limit must be >= 0, got {limit}")


class QueryExecutor:
    def __init__(self, db: Session, relation: InstrumentedAttribute = Member.team):
        self.db = db
        self.relation = relation
        self.base = relation.class_
        self.related = relation.property.mapper.class_

    # -- statement building -------------------------------------------------

    @staticmethod
    def _columns(selection: Any) -> list[Any]:
        if isinstance(selection, Projection):
            return selection.columns
        if isinstance(selection, (list, tuple)):
            return list(selection)
        return [selection]

    def build(
        self,
        selection: Any,
        *,
        join: JoinMode = JoinMode.NONE,
        on: ColumnElement[bool] | None = None,
        where: ColumnElement[bool] | None = None,
        order_by: Sequence[OrderSpec] = (),
        group_by: Sequence[Any] = (),
        having: ColumnElement[bool] | None = None,
        fetch_join: bool = False,
    ) -> Select:
        stmt = select(*self._columns(selection))
        join = JoinMode(join)

        if join == JoinMode.THETA:
            stmt = stmt.select_from(self.base, self.related)
            if on is not None:
                stmt = stmt.where(on)
        else:
            stmt = stmt.select_from(self.base)
            target = (self.related, on) if on is not None else (self.relation,)
            if join == JoinMode.INNER:
                stmt = stmt.join(*target)
            elif join == JoinMode.LEFT:
                stmt = stmt.outerjoin(*target)

        if fetch_join:
            # populate the relation in the same statement instead of lazy loading it
            stmt = stmt.options(joinedload(self.relation))
        if where is not None:
            stmt = stmt.where(where)
        if group_by:
            stmt = stmt.group_by(*group_by)
        if having is not None:
            stmt = stmt.having(having)
        if order_by:
            stmt = stmt.order_by(*(spec.clause() for spec in order_by))
        return stmt

    # -- execution ------------------------------------------------------------

    def _run(self, selection: Any, stmt: Select):
        logger.debug(f"Executing: {stmt}")
        result = self.db.execute(stmt)
        if isinstance(selection, Projection) or isinstance(selection, (list, tuple)):
            return result
        if isinstance(selection, type):
            # entity rows; unique() is required once joinedload is applied
            return result.unique().scalars()
        return result.scalars()

    @staticmethod
    def _shape(selection: Any, rows: list) -> list:
        if isinstance(selection, Projection):
            return selection.map_all(rows)
        return rows

    def fetch(self, selection: Any, *, offset: int | None = None, limit: int | None = None, **kw) -> list:
        _check_page(offset, limit)
        stmt = self.build(selection, **kw)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._shape(selection, list(self._run(selection, stmt).all()))

    def fetch_one(self, selection: Any, **kw) -> Any | None:
        """The only matching row, None when nothing matches; several rows is an error."""
        stmt = self.build(selection, **kw)
        try:
            row = self._run(selection, stmt).one_or_none()
        except MultipleResultsFound as e:
            raise NonUniqueResultError(f"Expected at most one row for {selection!r}") from e
        if row is None:
            return None
        return self._shape(selection, [row])[0]

    def fetch_first(self, selection: Any, **kw) -> Any | None:
        rows = self.fetch(selection, limit=1, **kw)
        return rows[0] if rows else None

    def fetch_count(self, selection: Any, **kw) -> int:
        kw.pop("order_by", None)
        kw.pop("fetch_join", None)
        inner = self.build(selection, **kw).subquery()
        stmt = select(func.count()).select_from(inner)
        logger.debug(f"Counting: {stmt}")
        return int(self.db.execute(stmt).scalar_one())

    def fetch_results(self, selection: Any, *, offset: int = 0, limit: int | None = None, **kw) -> QueryResults:
        """
        Fetch one page and, separately, the total count for the same filter.

        The count ignores ordering, offset and limit. The page query is skipped
        when the offset is already past the total.
        """
        _check_page(offset, limit)
        total = self.fetch_count(selection, **kw)
        if offset >= total or limit == 0:
            results = []
        else:
            results = self.fetch(selection, offset=offset, limit=limit, **kw)
        return QueryResults(results=results, total=total, offset=offset, limit=limit)
