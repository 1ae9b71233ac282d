from .common import DtoModel


class TeamAgeStats(DtoModel):
    team_name: str | None = None
    member_count: int = 0
    avg_age: float | None = None
    max_age: int | None = None
    min_age: int | None = None
