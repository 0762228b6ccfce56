"""Catalog: degree programs and their subjects.

Program CRUD is a thin administrative wrapper. Subject create/update is where
the requirement graph gets written: the subject row and its full edge set
succeed or fail together.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from models.degree_program import DegreeProgram
from models.enrollment import Enrollment
from models.subject import Subject, TERMS
from services.errors import ConflictError, ReferentialError, ValidationError
from services.requirements import (
    RequirementSpec,
    normalize_requirement_specs,
    replace_requirements,
    requirement_details,
)
from services.transaction import atomic
from services.validation import (
    validate_bool,
    validate_choice,
    validate_id,
    validate_number,
    validate_optional_int,
    validate_optional_string,
    validate_required_string,
)
from services.views import ProgramView, SubjectView

logger = logging.getLogger(__name__)


# -----------------------------
# Programs
# -----------------------------

def get_program(session: Session, program_id: str) -> DegreeProgram:
    program = session.get(DegreeProgram, program_id)
    if program is None:
        raise ReferentialError("Program not found")
    return program


def list_programs(session: Session) -> List[ProgramView]:
    programs = session.query(DegreeProgram).order_by(DegreeProgram.name.asc(), DegreeProgram.id.asc()).all()
    return [ProgramView.from_model(p) for p in programs]


def create_program(
    session: Session,
    *,
    name: Any,
    university: Any = None,
    program_id: Optional[str] = None,
    creator_id: Optional[str] = None,
) -> ProgramView:
    """Create a program; the creating user is enrolled in it right away."""
    name = validate_required_string(name, "name")
    university = validate_optional_string(university, "university") or ""

    with atomic(session, "create program"):
        if program_id is not None and session.get(DegreeProgram, program_id) is not None:
            raise ConflictError("Program already exists")
        program = DegreeProgram(name=name, university=university)
        if program_id is not None:
            program.id = program_id
        session.add(program)
        session.flush()
        if creator_id is not None:
            session.add(Enrollment(user_id=creator_id, degree_program_id=program.id))
        view = ProgramView.from_model(program)

    logger.info("degree program created id=%s", view.id)
    return view


def delete_program(session: Session, program_id: str) -> None:
    with atomic(session, "delete program"):
        session.delete(get_program(session, program_id))


# -----------------------------
# Subjects
# -----------------------------

def parse_subject_payload(payload: Any, *, partial: bool) -> Dict[str, Any]:
    """Validate a create/update body into keyword arguments.

    With ``partial`` only the keys present in the body are returned;
    ``requirements`` present (even ``[]``) means full replacement.
    """
    if not isinstance(payload, dict):
        raise ValidationError("invalid JSON")

    out: Dict[str, Any] = {}

    if not partial or "name" in payload:
        out["name"] = validate_required_string(payload.get("name"), "name")

    if "degreeProgramID" in payload or not partial:
        raw = payload.get("degreeProgramID")
        if partial and isinstance(raw, str) and not raw.strip():
            raise ValidationError("degreeProgramID cannot be empty")
        out["degree_program_id"] = validate_id(raw, "degreeProgramID")

    if "year" in payload:
        out["year"] = validate_optional_int(payload.get("year"), "year", minimum=1)

    if "term" in payload:
        out["term"] = validate_choice(payload.get("term"), "term", TERMS)

    if "credits" in payload:
        out["credits"] = validate_number(payload.get("credits"), "credits", minimum=0)

    if "hours" in payload:
        out["hours"] = validate_number(payload.get("hours"), "hours", minimum=0)

    if "isElective" in payload:
        out["is_elective"] = validate_bool(payload.get("isElective"), "isElective")

    if "requirements" in payload:
        out["requirements"] = normalize_requirement_specs(payload.get("requirements"))
    elif not partial:
        out["requirements"] = []

    return out


def get_subject(session: Session, subject_id: str) -> Subject:
    subject = session.get(Subject, subject_id)
    if subject is None:
        raise ReferentialError("Subject not found")
    return subject


def subject_view(session: Session, subject: Subject) -> SubjectView:
    details = requirement_details(session, [subject.id])
    return SubjectView.from_model(subject, details.get(subject.id, []))


def list_subjects(session: Session, program_id: str) -> List[SubjectView]:
    get_program(session, program_id)
    subjects = (
        session.query(Subject)
        .filter(Subject.degree_program_id == program_id)
        .order_by(Subject.year.is_(None), Subject.year, Subject.name, Subject.id)
        .all()
    )
    details = requirement_details(session, [s.id for s in subjects])
    return [SubjectView.from_model(s, details.get(s.id, [])) for s in subjects]


def create_subject(
    session: Session,
    *,
    name: str,
    degree_program_id: str,
    year: Optional[int] = None,
    term: str = "annual",
    credits: float = 0.0,
    hours: float = 0.0,
    is_elective: bool = False,
    requirements: Sequence[RequirementSpec] = (),
    subject_id: Optional[str] = None,
) -> SubjectView:
    with atomic(session, "create subject"):
        if session.get(DegreeProgram, degree_program_id) is None:
            raise ReferentialError("unknown program", status_code=400)
        if subject_id is not None and session.get(Subject, subject_id) is not None:
            raise ConflictError("Subject already exists")

        subject = Subject(
            name=name,
            degree_program_id=degree_program_id,
            year=year,
            term=term,
            credits=credits,
            hours=hours,
            is_elective=is_elective,
        )
        if subject_id is not None:
            subject.id = subject_id
        session.add(subject)
        session.flush()

        replace_requirements(session, subject, requirements)
        view = subject_view(session, subject)

    logger.info("subject created id=%s program=%s requirements=%d", view.id, degree_program_id, len(requirements))
    return view


def _check_program_move(subject: Subject, replacing_requirements: bool) -> None:
    # Links must stay inside one program; refuse a move that would strand them.
    stranded = bool(subject.required_by_edges) or bool(subject.pool_links)
    if not replacing_requirements and subject.requirement_edges:
        stranded = True
    if stranded:
        raise ValidationError(
            "subject has requirement links or elective pool memberships in its current program"
        )


def update_subject(session: Session, subject_id: str, changes: Dict[str, Any]) -> SubjectView:
    subject = get_subject(session, subject_id)

    with atomic(session, "update subject"):
        new_program_id = changes.get("degree_program_id")
        if new_program_id is not None and new_program_id != subject.degree_program_id:
            if session.get(DegreeProgram, new_program_id) is None:
                raise ReferentialError("unknown program", status_code=400)
            _check_program_move(subject, "requirements" in changes)
            subject.degree_program_id = new_program_id

        for attr in ("name", "year", "term", "credits", "hours", "is_elective"):
            if attr in changes:
                setattr(subject, attr, changes[attr])
        session.flush()

        if "requirements" in changes:
            replace_requirements(session, subject, changes["requirements"])

        view = subject_view(session, subject)

    logger.info("subject updated id=%s", subject_id)
    return view


def delete_subject(session: Session, subject_id: str) -> None:
    with atomic(session, "delete subject"):
        session.delete(get_subject(session, subject_id))
    logger.info("subject deleted id=%s", subject_id)
