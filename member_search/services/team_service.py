from sqlalchemy.orm import Session
import logging
from ..models.team import Team
from ..models.member import Member

logger = logging.getLogger(__name__)

def create_team(db: Session, *, name: str) -> Team:
    try:
        team = Team(name=name)
        db.add(team)
        db.commit()
        db.refresh(team)
        logger.debug(f"Team created: id={team.id}, name={team.name}")
        return team
    except Exception as e:
        logger.error(f"Error creating team {name!r}: {str(e)}", exc_info=True)
        db.rollback()
        raise

def create_member(db: Session, *, username: str | None, age: int, team: Team | None = None) -> Member:
    try:
        member = Member(username=username, age=age, team=team)
        db.add(member)
        db.commit()
        db.refresh(member)
        logger.debug(f"Member created: id={member.id}, username={member.username}, team={team.name if team else None}")
        return member
    except Exception as e:
        logger.error(f"Error creating member {username!r}: {str(e)}", exc_info=True)
        db.rollback()
        raise

def delete_team(db: Session, team_id: str) -> bool:
    team = db.get(Team, team_id)
    if not team:
        return False
    try:
        # members stay; the relationship nulls their team_id on flush
        for member in list(team.members):
            member.change_team(None)
        db.delete(team)
        db.commit()
        logger.info(f"Team deleted: id={team_id}")
        return True
    except Exception as e:
        logger.error(f"Error deleting team {team_id}: {str(e)}", exc_info=True)
        db.rollback()
        raise

def seed_sample_data(db: Session) -> list[Member]:
    """TeamA with members aged 10 and 20, TeamB with members aged 30 and 40."""
    try:
        team_a = Team(name="TeamA")
        team_b = Team(name="TeamB")
        db.add_all([team_a, team_b])
        members = [
            Member("Member1", 10, team_a),
            Member("Member2", 20, team_a),
            Member("Member3", 30, team_b),
            Member("Member4", 40, team_b),
        ]
        db.add_all(members)
        db.commit()
    except Exception as e:
        logger.error(f"Error seeding sample data: {str(e)}", exc_info=True)
        db.rollback()
        raise
    logger.info(f"Seeded {len(members)} members in 2 teams")
    return members
