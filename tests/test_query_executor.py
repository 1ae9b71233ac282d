"""Tests for QueryExecutor: joins, ordering, paging, counts, aggregation."""

import pytest
from sqlalchemy.orm import Session

from member_search.core.errors import InvalidPageError, NonUniqueResultError
from member_search.models.member import Member
from member_search.models.team import Team
from member_search.services.predicates import age_goe, compose_filter, team_name_eq
from member_search.services.query_executor import (
    AggregateFunction,
    Direction,
    JoinMode,
    NullsOrder,
    OrderSpec,
    QueryExecutor,
    aggregate,
    asc,
    desc,
)


def _names(rows):
    return [m.username for m in rows]


def test_empty_filter_returns_every_row(session: Session, members):
    rows = QueryExecutor(session).fetch(Member, where=None)
    assert len(rows) == session.query(Member).count() == 4


def test_single_column_selection_returns_scalars(session: Session, members):
    ages = QueryExecutor(session).fetch(Member.age, order_by=(asc(Member.age),))
    assert ages == [10, 20, 30, 40]


def test_multi_column_selection_returns_rows(session: Session, members):
    rows = QueryExecutor(session).fetch((Member.username, Member.age), order_by=(desc(Member.age),))
    assert rows[0].username == "Member4"
    assert rows[0].age == 40
    assert tuple(rows[-1]) == ("Member1", 10)


def test_sort_desc_age_then_username_nulls_last(session: Session, members):
    session.add_all([Member(None, 100), Member("Member5", 100), Member("Member6", 100)])
    session.commit()

    rows = QueryExecutor(session).fetch(Member, order_by=(desc(Member.age), asc(Member.username)))

    assert _names(rows[:3]) == ["Member5", "Member6", None]
    assert [m.age for m in rows[3:]] == [40, 30, 20, 10]


def test_nulls_first_when_requested(session: Session, members):
    session.add(Member(None, 50))
    session.commit()

    rows = QueryExecutor(session).fetch(Member, order_by=(asc(Member.username, nulls=NullsOrder.FIRST),))
    assert rows[0].username is None


def test_nulls_last_also_applies_to_descending(session: Session, members):
    session.add(Member(None, 50))
    session.commit()

    rows = QueryExecutor(session).fetch(Member, order_by=(OrderSpec(Member.username, Direction.DESC),))
    assert _names(rows) == ["Member4", "Member3", "Member2", "Member1", None]


def test_offset_and_limit(session: Session, members):
    rows = QueryExecutor(session).fetch(Member, order_by=(desc(Member.username),), offset=1, limit=2)
    assert _names(rows) == ["Member3", "Member2"]


def test_fetch_results_returns_page_and_total(session: Session, members):
    page = QueryExecutor(session).fetch_results(Member, order_by=(desc(Member.username),), offset=1, limit=2)
    assert len(page.results) == 2
    assert page.total == 4
    assert page.offset == 1
    assert page.limit == 2


def test_total_respects_filter_but_not_paging(session: Session, members):
    page = QueryExecutor(session).fetch_results(
        Member,
        join=JoinMode.INNER,
        where=team_name_eq("TeamB"),
        order_by=(asc(Member.age),),
        offset=0,
        limit=1,
    )
    assert _names(page.results) == ["Member3"]
    assert page.total == 2


@pytest.mark.parametrize("offset,limit,expected", [(0, None, 4), (0, 10, 4), (2, 1, 1), (3, 5, 1), (4, 2, 0), (10, 2, 0), (1, 0, 0)])
def test_page_size_is_min_of_limit_and_remaining(session: Session, members, offset, limit, expected):
    executor = QueryExecutor(session)
    full = executor.fetch(Member, order_by=(asc(Member.age),))
    page = executor.fetch_results(Member, order_by=(asc(Member.age),), offset=offset, limit=limit)
    assert len(page.results) == expected
    # same relative order as the unpaged result
    assert page.results == full[offset:offset + expected]


def test_negative_paging_values_rejected(session: Session, members):
    executor = QueryExecutor(session)
    with pytest.raises(InvalidPageError):
        executor.fetch(Member, offset=-1)
    with pytest.raises(InvalidPageError):
        executor.fetch_results(Member, limit=-5)


def test_fetch_count(session: Session, members):
    executor = QueryExecutor(session)
    assert executor.fetch_count(Member) == 4
    assert executor.fetch_count(Member, where=age_goe(25)) == 2


def test_fetch_one_returns_single_match(session: Session, members):
    found = QueryExecutor(session).fetch_one(Member, where=Member.username == "Member1")
    assert found.username == "Member1"


def test_fetch_one_returns_none_when_nothing_matches(session: Session, members):
    assert QueryExecutor(session).fetch_one(Member, where=Member.username == "nobody") is None


def test_fetch_one_rejects_multiple_matches(session: Session, members):
    with pytest.raises(NonUniqueResultError):
        QueryExecutor(session).fetch_one(Member, where=Member.age >= 10)


def test_fetch_first_picks_first_in_order(session: Session, members):
    first = QueryExecutor(session).fetch_first(Member, order_by=(desc(Member.age),))
    assert first.username == "Member4"


def test_inner_join_filters_on_team(session: Session, members):
    rows = QueryExecutor(session).fetch(
        Member, join=JoinMode.INNER, where=team_name_eq("TeamA"), order_by=(asc(Member.username),)
    )
    assert _names(rows) == ["Member1", "Member2"]


def test_inner_join_drops_members_without_team(session: Session, members):
    session.add(Member("Loner", 50))
    session.commit()
    executor = QueryExecutor(session)
    assert executor.fetch_count(Member, join=JoinMode.INNER) == 4
    assert executor.fetch_count(Member, join=JoinMode.LEFT) == 5


def test_left_join_keeps_members_without_team(session: Session, members):
    session.add(Member("Loner", 50))
    session.commit()

    rows = QueryExecutor(session).fetch(
        (Member.username, Team.name), join=JoinMode.LEFT, order_by=(asc(Member.username),)
    )
    assert ("Loner", None) in [tuple(r) for r in rows]


def test_left_join_on_unrelated_columns(session: Session, members):
    session.add_all([Member("TeamA", 0), Member("TeamB", 0), Member("TeamC", 0)])
    session.commit()

    rows = QueryExecutor(session).fetch(
        (Member.username, Team.name),
        join=JoinMode.LEFT,
        on=Member.username == Team.name,
        order_by=(asc(Member.username),),
    )
    pairs = {tuple(r) for r in rows}
    assert ("TeamA", "TeamA") in pairs
    assert ("TeamB", "TeamB") in pairs
    assert ("TeamC", None) in pairs
    assert ("Member1", None) in pairs
    assert len(rows) == 7


def test_theta_join(session: Session, members):
    session.add_all([Member("TeamA", 0), Member("TeamB", 0)])
    session.commit()

    rows = QueryExecutor(session).fetch(
        Member, join=JoinMode.THETA, on=Member.username == Team.name, order_by=(asc(Member.username),)
    )
    assert _names(rows) == ["TeamA", "TeamB"]


def test_fetch_join_loads_team(session: Session, members):
    session.expunge_all()
    found = QueryExecutor(session).fetch_one(Member, where=Member.username == "Member1", fetch_join=True)
    assert "team" in found.__dict__
    assert found.team.name == "TeamA"


def test_aggregates_over_all_members(session: Session, members):
    row = QueryExecutor(session).fetch_one(
        (
            aggregate(AggregateFunction.COUNT, Member.id),
            aggregate(AggregateFunction.SUM, Member.age),
            aggregate(AggregateFunction.AVG, Member.age),
            aggregate(AggregateFunction.MAX, Member.age),
            aggregate(AggregateFunction.MIN, Member.age),
        )
    )
    assert row.count_id == 4
    assert row.sum_age == 100
    assert row.avg_age == 25.0
    assert isinstance(row.avg_age, float)
    assert row.max_age == 40
    assert row.min_age == 10


def test_avg_is_float_even_for_whole_means(session: Session, members):
    avg = QueryExecutor(session).fetch_one(aggregate("avg", Member.age, "a"), where=Member.username == "Member1")
    assert avg == 10.0
    assert isinstance(avg, float)


def test_count_without_column_counts_rows(session: Session, members):
    assert QueryExecutor(session).fetch_one(aggregate("count")) == 4


def test_aggregate_requires_column():
    with pytest.raises(ValueError):
        aggregate(AggregateFunction.SUM)


def test_group_by_team(session: Session, members):
    rows = QueryExecutor(session).fetch(
        (Team.name, aggregate(AggregateFunction.AVG, Member.age)),
        join=JoinMode.INNER,
        group_by=(Team.name,),
        order_by=(asc(Team.name),),
    )
    assert [tuple(r) for r in rows] == [("TeamA", 15.0), ("TeamB", 35.0)]


def test_group_by_with_having(session: Session, members):
    avg_age = aggregate(AggregateFunction.AVG, Member.age)
    rows = QueryExecutor(session).fetch(
        (Team.name, avg_age),
        join=JoinMode.INNER,
        group_by=(Team.name,),
        having=avg_age.element > 20,
    )
    assert [tuple(r) for r in rows] == [("TeamB", 35.0)]


def test_filter_applies_before_grouping(session: Session, members):
    rows = QueryExecutor(session).fetch(
        (Team.name, aggregate(AggregateFunction.COUNT, Member.id), aggregate(AggregateFunction.AVG, Member.age)),
        join=JoinMode.INNER,
        where=compose_filter(age_goe(20)),
        group_by=(Team.name,),
        order_by=(asc(Team.name),),
    )
    assert [tuple(r) for r in rows] == [("TeamA", 1, 20.0), ("TeamB", 2, 35.0)]
