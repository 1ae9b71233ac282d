from sqlalchemy.orm import Session
import logging

from ..models.member import Member
from ..models.team import Team
from ..schemas.member import MemberTeamDto, MemberDto, UserDto, MemberAgeStats
from ..schemas.search import MemberSearchCondition
from ..schemas.team import TeamAgeStats
from .expressions import max_age_subquery, avg_age_subquery, ages_above_subquery
from .predicates import requires_team_join, search_filter
from .projections import Strategy, constructor, project
from .query_executor import (
    AggregateFunction,
    JoinMode,
    OrderSpec,
    QueryExecutor,
    QueryResults,
    aggregate,
    asc,
)

logger = logging.getLogger(__name__)

# Stable order for search results: username (NULLs last), then id as a tiebreaker
SEARCH_ORDER = (asc(Member.username), asc(Member.id))


def _member_team_projection():
    return constructor(
        MemberTeamDto,
        Member.id.label("member_id"),
        Member.username,
        Member.age,
        Team.id.label("team_id"),
        Team.name.label("team_name"),
    )


def search(db: Session, condition: MemberSearchCondition) -> list[MemberTeamDto]:
    # Always a LEFT join: without a team filter, members with no team are kept;
    # with one, team.name = :value is never true for them.
    rows = QueryExecutor(db).fetch(
        _member_team_projection(),
        join=JoinMode.LEFT,
        where=search_filter(condition),
        order_by=SEARCH_ORDER,
    )
    logger.info(f"Member search {condition.model_dump(exclude_none=True)} matched {len(rows)} rows")
    return rows


def search_page(db: Session, condition: MemberSearchCondition, *, offset: int = 0, limit: int | None = None) -> QueryResults[MemberTeamDto]:
    page = QueryExecutor(db).fetch_results(
        _member_team_projection(),
        join=JoinMode.LEFT,
        where=search_filter(condition),
        order_by=SEARCH_ORDER,
        offset=offset,
        limit=limit,
    )
    logger.info(
        f"Member search page {condition.model_dump(exclude_none=True)} offset={offset} limit={limit}: "
        f"{len(page.results)} of {page.total}"
    )
    return page


def find_by_username(db: Session, username: str) -> Member | None:
    """Raises NonUniqueResultError when several members share the username."""
    return QueryExecutor(db).fetch_one(Member, where=Member.username == username, fetch_join=True)


def list_members(db: Session, order_by: tuple[OrderSpec, ...] = SEARCH_ORDER) -> list[Member]:
    return QueryExecutor(db).fetch(Member, order_by=order_by)


def member_age_stats(db: Session, condition: MemberSearchCondition | None = None) -> MemberAgeStats:
    condition = condition or MemberSearchCondition()
    stats = QueryExecutor(db).fetch_one(
        project(
            Strategy.CONSTRUCTOR,
            MemberAgeStats,
            aggregate(AggregateFunction.COUNT, Member.id, "count"),
            aggregate(AggregateFunction.SUM, Member.age, "sum"),
            aggregate(AggregateFunction.AVG, Member.age, "avg"),
            aggregate(AggregateFunction.MAX, Member.age, "max"),
            aggregate(AggregateFunction.MIN, Member.age, "min"),
        ),
        join=JoinMode.LEFT if requires_team_join(condition) else JoinMode.NONE,
        where=search_filter(condition),
    )
    return stats


def team_age_stats(db: Session, condition: MemberSearchCondition | None = None, *, min_avg_age: float | None = None) -> list[TeamAgeStats]:
    """
    Per-team member statistics, grouped by team name.

    Filters apply to members before grouping; ``min_avg_age`` keeps only teams
    whose average age is at least that value.
    """
    condition = condition or MemberSearchCondition()
    avg_age = aggregate(AggregateFunction.AVG, Member.age, "avg_age")
    having = avg_age.element >= min_avg_age if min_avg_age is not None else None
    return QueryExecutor(db).fetch(
        constructor(
            TeamAgeStats,
            Team.name.label("team_name"),
            aggregate(AggregateFunction.COUNT, Member.id, "member_count"),
            avg_age,
            aggregate(AggregateFunction.MAX, Member.age, "max_age"),
            aggregate(AggregateFunction.MIN, Member.age, "min_age"),
        ),
        join=JoinMode.INNER,
        where=search_filter(condition),
        group_by=(Team.name,),
        having=having,
        order_by=(asc(Team.name),),
    )


def list_member_dtos(db: Session, strategy: Strategy | str = Strategy.CONSTRUCTOR) -> list[MemberDto]:
    return QueryExecutor(db).fetch(
        project(strategy, MemberDto, Member.username, Member.age),
        order_by=SEARCH_ORDER,
    )


def list_user_dtos(db: Session, strategy: Strategy | str = Strategy.CONSTRUCTOR) -> list[UserDto]:
    """Every member's name paired with the oldest age across all members."""
    return QueryExecutor(db).fetch(
        project(
            strategy,
            UserDto,
            Member.username.label("name"),
            max_age_subquery().label("age"),
        ),
        order_by=SEARCH_ORDER,
    )


def find_oldest_members(db: Session) -> list[Member]:
    return QueryExecutor(db).fetch(Member, where=Member.age == max_age_subquery(), order_by=SEARCH_ORDER)


def find_members_at_or_above_average_age(db: Session) -> list[Member]:
    return QueryExecutor(db).fetch(
        Member,
        where=Member.age >= avg_age_subquery(),
        order_by=(asc(Member.age), *SEARCH_ORDER),
    )


def find_members_older_than(db: Session, bound: int) -> list[Member]:
    return QueryExecutor(db).fetch(
        Member,
        where=Member.age.in_(ages_above_subquery(bound)),
        order_by=(asc(Member.age), *SEARCH_ORDER),
    )


def find_members_named_after_teams(db: Session) -> list[Member]:
    # unrelated join: member.username = team.name over the cross product
    return QueryExecutor(db).fetch(
        Member,
        join=JoinMode.THETA,
        on=Member.username == Team.name,
        order_by=SEARCH_ORDER,
    )
