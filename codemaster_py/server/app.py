"""Relay between practice clients and the durable progress store."""

import logging
import math
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .db import UserProgress, init_db, make_engine, make_session_factory

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def sanitize_record(username: str, body: dict) -> dict:
    """
    Coerce an incoming record instead of rejecting it: non-string solved ids
    are dropped and malformed fields, including points too large for a
    float, fall back to empty/zero.
    """
    solved = body.get("solvedProblemIds")
    points = body.get("points")
    submissions = body.get("submissions")

    number = 0.0
    if isinstance(points, (int, float)) and not isinstance(points, bool):
        try:
            number = float(points)
        except OverflowError:
            number = 0.0
        if not math.isfinite(number):
            number = 0.0
    return {
        "username": username,
        "solvedProblemIds": [x for x in solved if isinstance(x, str)]
        if isinstance(solved, list)
        else [],
        "points": number,
        "submissions": submissions if isinstance(submissions, list) else [],
    }


def create_app(database_url: Optional[str] = None) -> FastAPI:
    engine = make_engine(database_url or settings.DATABASE_URL)
    SessionLocal = make_session_factory(engine)

    # Non-fatal: endpoints fail until the database is reachable
    try:
        init_db(engine)
    except SQLAlchemyError:
        logger.exception("init_db_create_all_failed")

    app = FastAPI(
        title="CodeMaster Progress Store",
        description="Stores per-user practice progress",
        version="1.0.0",
    )

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if "*" in origins else origins,
        allow_credentials=False if "*" in origins else True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    @app.get("/api/health")
    def health():
        return {"ok": True}

    @app.get("/api/users/{username}")
    def get_user(username: str, db: Session = Depends(get_db)):
        name = username.strip()
        if not name:
            return _error(400, "Invalid username")

        row = db.get(UserProgress, name)
        return row.to_dict() if row else None

    @app.put("/api/users/{username}")
    async def put_user(username: str, request: Request, db: Session = Depends(get_db)):
        name = username.strip()
        if not name:
            return _error(400, "Invalid username")

        try:
            body: Any = await request.json()
        except ValueError:
            return _error(400, "Invalid JSON body")
        if not isinstance(body, dict):
            return _error(400, "Invalid JSON body")
        if body.get("username") != name:
            return _error(400, "Username in URL must match body.username")

        safe = sanitize_record(name, body)
        try:
            row = db.get(UserProgress, name)
            if row is None:
                row = UserProgress(username=name)
                db.add(row)
            row.points = safe["points"]
            row.solved_problem_ids = safe["solvedProblemIds"]
            row.submissions = safe["submissions"]
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("user_upsert_failed", extra={"username": name})
            return _error(500, "Internal server error")

        logger.info(
            "user_saved",
            extra={"username": name, "points": safe["points"], "submissions": len(safe["submissions"])},
        )
        return {"ok": True}

    return app
