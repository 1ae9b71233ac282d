from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db.base_class import Base
from . import new_id

if TYPE_CHECKING:
    from .team import Team

class Member(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    age: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    team_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("team.id", ondelete="SET NULL"), index=True)

    team: Mapped[Optional["Team"]] = relationship(back_populates="members")

    def __init__(self, username: str | None = None, age: int = 0, team: "Team | None" = None, **kw):
        super().__init__(username=username, age=age, **kw)
        if team is not None:
            self.change_team(team)

    def change_team(self, team: "Team | None") -> None:
        # back_populates keeps team.members in step with this assignment
        self.team = team

    def __repr__(self) -> str:
        return f"Member(id={self.id!r}, username={self.username!r}, age={self.age!r})"
