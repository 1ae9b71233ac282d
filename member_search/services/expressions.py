"""Derived column expressions: sub-queries, CASE labels and string concatenation."""
from sqlalchemy import String, case, cast, func, select
from sqlalchemy.orm import aliased

from ..models.member import Member


def _member_sub():
    # a second, independently aliased member so sub-queries don't collide with the outer one
    return aliased(Member, name="member_sub")


def max_age_subquery(correlate_team: bool = False):
    """
    Scalar sub-query returning the highest age.

    With ``correlate_team`` the maximum is taken over the outer row's team
    only, otherwise over every member.
    """
    sub = _member_sub()
    stmt = select(func.max(sub.age))
    if correlate_team:
        stmt = stmt.where(sub.team_id == Member.team_id).correlate(Member)
    return stmt.scalar_subquery()


def avg_age_subquery():
    sub = _member_sub()
    return select(func.avg(sub.age)).scalar_subquery()


def ages_above_subquery(bound: int):
    """Sub-select of member ages strictly greater than ``bound``, for use with ``IN``."""
    sub = _member_sub()
    return select(sub.age).where(sub.age > bound)


def age_band(label: str = "age_band"):
    return case(
        (Member.age.between(0, 20), "0-20"),
        (Member.age.between(21, 30), "21-30"),
        else_="other",
    ).label(label)


def username_age_label(label: str = "username_age"):
    # username || '_' || age
    return Member.username.concat("_").concat(cast(Member.age, String)).label(label)
