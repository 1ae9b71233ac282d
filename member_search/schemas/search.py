from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..core.errors import InvalidFilterError


class MemberSearchCondition(BaseModel):
    """
    Optional filter inputs for a member search.

    Every field left as None means "no constraint" on that field; a condition
    with all four fields unset matches every member.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    username: str | None = None
    team_name: str | None = None
    age_goe: int | None = None
    age_loe: int | None = None

    @field_validator("username", "team_name")
    @classmethod
    def _blank_is_absent(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    @classmethod
    def from_params(cls, params: dict[str, str | None]) -> "MemberSearchCondition":
        """
        Build a condition from raw string parameters (camelCase keys).

        Missing keys and empty values become None; a non-integer age bound
        raises InvalidFilterError instead of being dropped.
        """
        values: dict[str, str | int | None] = {}
        for key in ("username", "teamName"):
            values[key] = params.get(key) or None
        for key in ("ageGoe", "ageLoe"):
            raw = params.get(key)
            if raw is None or str(raw).strip() == "":
                values[key] = None
                continue
            try:
                values[key] = int(str(raw).strip())
            except ValueError:
                raise InvalidFilterError(key, raw) from None
        return cls(**values)

    def is_empty(self) -> bool:
        return all(v is None for v in (self.username, self.team_name, self.age_goe, self.age_loe))
