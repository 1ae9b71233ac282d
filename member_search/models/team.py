from typing import TYPE_CHECKING
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db.base_class import Base
from . import new_id

if TYPE_CHECKING:
    from .member import Member

class Team(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), index=True, nullable=False)

    # Back-reference only: Member owns the association, and deleting a team
    # detaches its members instead of deleting them.
    members: Mapped[list["Member"]] = relationship(back_populates="team")

    def __repr__(self) -> str:
        return f"Team(id={self.id!r}, name={self.name!r})"
