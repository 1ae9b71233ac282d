"""
Optional predicates for member searches.

Each factory returns a boolean clause when its input is present and None
otherwise. None is the "no constraint" value: the composer drops it instead of
emitting a vacuous clause such as ``1 = 1``.
"""
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from ..models.member import Member
from ..models.team import Team
from ..schemas.search import MemberSearchCondition

Predicate = Optional[ColumnElement[bool]]


def _has_text(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def username_eq(value: str | None) -> Predicate:
    return Member.username == value if _has_text(value) else None


def team_name_eq(value: str | None) -> Predicate:
    # Only meaningful when the statement joins member -> team
    return Team.name == value if _has_text(value) else None


def age_goe(value: int | None) -> Predicate:
    return Member.age >= value if value is not None else None


def age_loe(value: int | None) -> Predicate:
    return Member.age <= value if value is not None else None


def compose_filter(*predicates: Predicate) -> Predicate:
    """AND together the present predicates, keeping their order. None means match all."""
    active = [p for p in predicates if p is not None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]
    return and_(*active)


def search_filter(condition: MemberSearchCondition) -> Predicate:
    return compose_filter(
        username_eq(condition.username),
        team_name_eq(condition.team_name),
        age_goe(condition.age_goe),
        age_loe(condition.age_loe),
    )


def requires_team_join(condition: MemberSearchCondition) -> bool:
    return team_name_eq(condition.team_name) is not None
