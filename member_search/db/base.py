from ..models.team import Team
from ..models.member import Member
from ..db.base_class import Base
