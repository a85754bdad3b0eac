from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class UserProgress(Base):
    __tablename__ = "users"

    username = Column(String, primary_key=True, index=True)
    points = Column(Float, nullable=False, default=0)
    solved_problem_ids = Column(JSON, nullable=False, default=list)
    submissions = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "points": self.points,
            "solvedProblemIds": list(self.solved_problem_ids or []),
            "submissions": list(self.submissions or []),
        }


def make_engine(database_url: str):
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases exist per connection; share one
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    """Create tables if they do not exist yet."""
    Base.metadata.create_all(bind=engine)
