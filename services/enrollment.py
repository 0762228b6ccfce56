from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from models.degree_program import DegreeProgram
from models.enrollment import Enrollment
from models.favorite_program import FavoriteProgram
from services.errors import AuthorizationError, ConflictError, ReferentialError
from services.transaction import atomic
from services.views import MyPrograms, ProgramView

logger = logging.getLogger(__name__)


def enrolled_program_ids(session: Session, user_id: str) -> List[str]:
    """Program ids in enrollment order (first one is the student's default program)."""
    rows = (
        session.query(Enrollment.degree_program_id)
        .filter(Enrollment.user_id == user_id)
        .order_by(Enrollment.created_at.asc(), Enrollment.degree_program_id.asc())
        .all()
    )
    return [pid for (pid,) in rows]


def require_enrollment(session: Session, user_id: str, program_id: str, lock: bool = False) -> Enrollment:
    """Membership check shared by the progress reader and writer.

    ``lock=True`` takes a row lock on the enrollment so concurrent syncs for
    the same (user, program) run one after the other.
    """
    query = session.query(Enrollment).filter_by(user_id=user_id, degree_program_id=program_id)
    if lock:
        query = query.with_for_update()
    enrollment = query.first()
    if enrollment is None:
        raise AuthorizationError("You are not registered in this program")
    return enrollment


def can_write_program(session: Session, user, program_id: str) -> bool:
    if user.is_staff:
        return True
    return session.query(Enrollment).filter_by(user_id=user.id, degree_program_id=program_id).first() is not None


def ensure_program_write_access(session: Session, user, program_id: str) -> None:
    if not can_write_program(session, user, program_id):
        raise AuthorizationError("Insufficient permissions")


def _programs_via(session: Session, link, user_id: str) -> List[ProgramView]:
    rows = (
        session.query(DegreeProgram)
        .join(link, link.degree_program_id == DegreeProgram.id)
        .filter(link.user_id == user_id)
        .order_by(link.created_at.asc(), DegreeProgram.id.asc())
        .all()
    )
    return [ProgramView.from_model(p) for p in rows]


def my_programs(session: Session, user_id: str) -> MyPrograms:
    return MyPrograms(
        enrolled_programs=_programs_via(session, Enrollment, user_id),
        favorite_programs=_programs_via(session, FavoriteProgram, user_id),
    )


def enroll(session: Session, user_id: str, program_id: str) -> None:
    with atomic(session, "enroll"):
        if session.get(DegreeProgram, program_id) is None:
            raise ReferentialError("Program not found")
        if session.get(Enrollment, (user_id, program_id)) is not None:
            raise ConflictError("Already enrolled")
        session.add(Enrollment(user_id=user_id, degree_program_id=program_id))
    logger.info("user %s enrolled in %s", user_id, program_id)


def unenroll(session: Session, user_id: str, program_id: str) -> None:
    """Drop the enrollment. Recorded progress stays so re-enrolling restores it."""
    with atomic(session, "unenroll"):
        if session.get(DegreeProgram, program_id) is None:
            raise ReferentialError("Program not found")
        enrollment = session.get(Enrollment, (user_id, program_id))
        if enrollment is None:
            raise ConflictError("Not enrolled")
        session.delete(enrollment)
    logger.info("user %s unenrolled from %s", user_id, program_id)


def favorite(session: Session, user_id: str, program_id: str) -> None:
    with atomic(session, "favorite program"):
        if session.get(DegreeProgram, program_id) is None:
            raise ReferentialError("Program not found")
        if session.get(FavoriteProgram, (user_id, program_id)) is not None:
            raise ConflictError("Already favorited")
        session.add(FavoriteProgram(user_id=user_id, degree_program_id=program_id))
    logger.info("user %s favorited %s", user_id, program_id)


def unfavorite(session: Session, user_id: str, program_id: str) -> None:
    with atomic(session, "remove favorite"):
        if session.get(DegreeProgram, program_id) is None:
            raise ReferentialError("Program not found")
        link = session.get(FavoriteProgram, (user_id, program_id))
        if link is None:
            raise ConflictError("Not favorited")
        session.delete(link)
    logger.info("user %s removed favorite %s", user_id, program_id)
