"""
Projections: map raw result rows into output shapes.

A projection pairs a target type with the ordered columns a query selects.
How each column reaches the target is resolved when the projection is built,
so a column without a matching field, or a constructor whose parameters do
not line up with the columns, fails before any SQL runs.

Three strategies produce the same output for the same row:

- ``bean``: default-construct the target, then ``setattr`` each column
  (pydantic targets validate every assignment).
- ``fields``: default-construct the target, then write straight into the
  instance ``__dict__`` (no assignment validation).
- ``constructor``: call the target with the row values in column order. A
  named column that matches a parameter at another position is rejected.

Column names come from the column key or its label. Use ``.label(name)`` to
bind a column to a differently named field, e.g.
``Member.username.label("name")`` for ``UserDto.name``.
"""
import dataclasses
import inspect
import logging
import typing
from enum import StrEnum
from typing import Any, Generic, Iterable, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import ProjectionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class Strategy(StrEnum):
    BEAN = "bean"
    FIELDS = "fields"
    CONSTRUCTOR = "constructor"


def _is_model(target: type) -> bool:
    return isinstance(target, type) and issubclass(target, BaseModel)


def _declared_fields(target: type) -> list[str]:
    if _is_model(target):
        return list(target.model_fields)
    if dataclasses.is_dataclass(target):
        return [f.name for f in dataclasses.fields(target)]
    return list(typing.get_type_hints(target))


def _has_setter(target: type, name: str) -> bool:
    attr = inspect.getattr_static(target, name, None)
    return isinstance(attr, property) and attr.fset is not None


def _is_default_constructible(target: type) -> bool:
    try:
        sig = inspect.signature(target)
    except (TypeError, ValueError):
        return False
    return all(p.default is not p.empty or p.kind in _VARIADIC for p in sig.parameters.values())


def _column_name(column: Any) -> str:
    name = getattr(column, "key", None)
    if not name or not isinstance(name, str):
        raise ProjectionError(
            f"Column {column!r} has no name; bind it to a target field with .label(<field>)"
        )
    return name


class Projection(Generic[T]):
    """Base projection; subclasses decide how a row becomes a target instance."""

    strategy: Strategy

    def __init__(self, target: type[T], columns: Sequence[Any]):
        if not columns:
            raise ProjectionError(f"Projection into {target.__name__} selects no columns")
        self.target = target
        self.columns = list(columns)
        self._bind()

    def _bind(self) -> None:
        raise NotImplementedError

    def _check_width(self, row: Sequence[Any]) -> None:
        if len(row) != len(self.columns):
            raise ProjectionError(
                f"{self.target.__name__} expects {len(self.columns)} values, row has {len(row)}"
            )

    def map_row(self, row: Sequence[Any]) -> T:
        raise NotImplementedError

    def map_all(self, rows: Iterable[Sequence[Any]]) -> list[T]:
        return [self.map_row(row) for row in rows]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target.__name__}, {len(self.columns)} columns)"


class _NamedProjection(Projection[T]):
    """Shared binding for the two strategies that match columns to fields by name."""

    def _bind(self) -> None:
        if not _is_default_constructible(self.target):
            raise ProjectionError(
                f"{self.target.__name__} cannot be created without arguments; use a constructor projection"
            )
        self.names = [_column_name(c) for c in self.columns]
        duplicates = {n for n in self.names if self.names.count(n) > 1}
        if duplicates:
            raise ProjectionError(
                f"Columns {sorted(duplicates)} are selected more than once for {self.target.__name__}; label them apart"
            )
        declared = set(_declared_fields(self.target))
        missing = [n for n in self.names if not self._accepts(n, declared)]
        if missing:
            raise ProjectionError(f"{self.target.__name__} has no field for column(s) {missing}")

    def _accepts(self, name: str, declared: set[str]) -> bool:
        return name in declared

    def _write(self, instance: T, name: str, value: Any) -> None:
        raise NotImplementedError

    def map_row(self, row: Sequence[Any]) -> T:
        self._check_width(row)
        instance = self.target()
        for name, value in zip(self.names, row):
            self._write(instance, name, value)
        return instance


class BeanProjection(_NamedProjection[T]):
    strategy = Strategy.BEAN

    def _accepts(self, name: str, declared: set[str]) -> bool:
        return name in declared or _has_setter(self.target, name)

    def _write(self, instance: T, name: str, value: Any) -> None:
        try:
            setattr(instance, name, value)
        except (ValueError, TypeError) as e:
            # pydantic ValidationError is a ValueError too
            raise ProjectionError(f"Value {value!r} rejected by {self.target.__name__}.{name}: {e}") from e


class FieldProjection(_NamedProjection[T]):
    strategy = Strategy.FIELDS

    def _write(self, instance: T, name: str, value: Any) -> None:
        # bypasses property setters and pydantic assignment validation
        vars(instance)[name] = value


class ConstructorProjection(Projection[T]):
    strategy = Strategy.CONSTRUCTOR

    def _bind(self) -> None:
        if _is_model(self.target):
            # pydantic signatures are keyword-only; field order is the parameter order
            self.params = list(self.target.model_fields)
            self._by_keyword = True
        else:
            try:
                sig = inspect.signature(self.target)
            except (TypeError, ValueError) as e:
                raise ProjectionError(f"Cannot read the constructor of {self.target.__name__}") from e
            self.params = [p.name for p in sig.parameters.values() if p.kind not in _VARIADIC]
            self._by_keyword = False
        if len(self.params) != len(self.columns):
            raise ProjectionError(
                f"{self.target.__name__}({', '.join(self.params)}) takes {len(self.params)} arguments, "
                f"{len(self.columns)} columns were given"
            )
        # a named column must sit at its own parameter's position; unnamed ones stay positional
        for position, (param, column) in enumerate(zip(self.params, self.columns)):
            name = getattr(column, "key", None)
            if isinstance(name, str) and name in self.params and name != param:
                raise ProjectionError(
                    f"Column {name!r} is at position {position} of {self.target.__name__}, "
                    f"which is parameter {param!r}; reorder the columns or relabel them"
                )

    def map_row(self, row: Sequence[Any]) -> T:
        self._check_width(row)
        try:
            if self._by_keyword:
                return self.target(**dict(zip(self.params, row)))
            return self.target(*row)
        except (ValidationError, TypeError) as e:
            raise ProjectionError(f"Row {tuple(row)!r} does not fit {self.target.__name__}: {e}") from e


_STRATEGIES: dict[Strategy, type[Projection]] = {
    Strategy.BEAN: BeanProjection,
    Strategy.FIELDS: FieldProjection,
    Strategy.CONSTRUCTOR: ConstructorProjection,
}


def project(strategy: Strategy | str, target: type[T], *columns: Any) -> Projection[T]:
    projection = _STRATEGIES[Strategy(strategy)](target, columns)
    logger.debug(f"Built {projection!r}")
    return projection


def bean(target: type[T], *columns: Any) -> Projection[T]:
    return project(Strategy.BEAN, target, *columns)


def fields(target: type[T], *columns: Any) -> Projection[T]:
    return project(Strategy.FIELDS, target, *columns)


def constructor(target: type[T], *columns: Any) -> Projection[T]:
    return project(Strategy.CONSTRUCTOR, target, *columns)
