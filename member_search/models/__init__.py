from uuid import uuid4
def new_id() -> str:
    return str(uuid4())
from .team import Team
from .member import Member
