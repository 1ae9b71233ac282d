import sys
from member_search.db.session import engine, SessionLocal
from member_search.db.base import Base
from member_search.services.team_service import seed_sample_data
def init(seed: bool = False):
    Base.metadata.create_all(bind=engine)
    if seed:
        with SessionLocal() as db:
            seed_sample_data(db)
if __name__ == "__main__":
    init(seed="--seed" in sys.argv)
    print("Database schema created.")
