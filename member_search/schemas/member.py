from .common import ORMModel, DtoModel


class MemberOut(ORMModel):
    id: str
    username: str | None = None
    age: int
    team_id: str | None = None


class MemberTeamDto(DtoModel):
    """Flattened member + team row returned by the search endpoints."""
    member_id: str
    username: str | None = None
    age: int
    team_id: str | None = None
    team_name: str | None = None


class MemberDto(DtoModel):
    username: str | None = None
    age: int = 0


class UserDto(DtoModel):
    # same columns as MemberDto; name comes from an aliased username and age
    # may be a sub-query value rather than the row's own age
    name: str | None = None
    age: int = 0


class MemberTeamPage(DtoModel):
    content: list[MemberTeamDto] = []
    total: int
    offset: int
    limit: int | None = None


class MemberAgeStats(DtoModel):
    count: int = 0
    sum: int | None = None
    avg: float | None = None
    max: int | None = None
    min: int | None = None
