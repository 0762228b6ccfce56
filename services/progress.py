"""Student progress: the bulk status sync and the merged per-program view.

A sync makes the student's rows for ONE program's subject set exactly match
the submitted list. Rows for subjects of other programs are never touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from extensions import utcnow
from models.subject import Subject
from models.subject_requirement import SubjectRequirement
from models.user_subject import DEFAULT_STATUS, MAX_GRADE, MIN_GRADE, STATUSES, UserSubject
from services.catalog import get_program
from services.enrollment import enrolled_program_ids, require_enrollment
from services.errors import ReferentialError, ValidationError
from services.transaction import atomic
from services.validation import validate_id, validate_number
from services.views import ProgramProgress, ProjectedSubject, RequirementRef, SyncResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500


@dataclass(frozen=True)
class ProgressEntry:
    subject_id: str
    status: Any
    final_grade: Any = None


def parse_progress_entries(payload: Any) -> List[ProgressEntry]:
    """Accept either a bare list or ``{"subjects": [...]}``.

    Only the shape is checked here; statuses and grades are validated in
    ``sync_progress`` so the checks run in a fixed order.
    """
    if isinstance(payload, dict):
        payload = payload.get("subjects")
    if not isinstance(payload, list):
        raise ValidationError("subjects must be a list")

    entries: List[ProgressEntry] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ValidationError("invalid subject entry")
        entries.append(
            ProgressEntry(
                subject_id=validate_id(item.get("subjectId"), "subjectId"),
                status=item.get("status"),
                final_grade=item.get("finalGrade"),
            )
        )
    return entries


def _program_subject_ids(session: Session, program_id: str) -> set:
    return {sid for (sid,) in session.query(Subject.id).filter(Subject.degree_program_id == program_id).all()}


def _validate_entries(entries: Sequence[ProgressEntry], program_subjects: set) -> None:
    seen = set()
    for entry in entries:
        if entry.subject_id not in program_subjects:
            raise ReferentialError("subject not in program", status_code=400)
        if entry.status not in STATUSES:
            raise ValidationError("invalid status")
        if entry.subject_id in seen:
            raise ValidationError("duplicate subject")
        seen.add(entry.subject_id)
        if entry.final_grade is not None:
            validate_number(entry.final_grade, "finalGrade", minimum=MIN_GRADE, maximum=MAX_GRADE)


def _stored_grades(session: Session, user_id: str, subject_ids: Sequence[str]) -> Dict[str, float]:
    if not subject_ids:
        return {}
    rows = (
        session.query(UserSubject.subject_id, UserSubject.final_grade)
        .filter(UserSubject.user_id == user_id, UserSubject.subject_id.in_(list(subject_ids)))
        .all()
    )
    return {sid: grade for sid, grade in rows if grade is not None}


def _upsert(session: Session, rows: List[Dict[str, Any]]) -> None:
    """Insert-or-update keyed on (user_id, subject_id) using the store's native upsert."""
    table = UserSubject.__table__
    dialect = session.get_bind(mapper=UserSubject).dialect.name

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id, table.c.subject_id],
            set_={
                "status": stmt.excluded.status,
                "final_grade": stmt.excluded.final_grade,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        session.execute(stmt)
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(table).values(rows)
        stmt = stmt.on_duplicate_key_update(
            status=stmt.inserted.status,
            final_grade=stmt.inserted.final_grade,
            updated_at=stmt.inserted.updated_at,
        )
        session.execute(stmt)
    else:
        # no native upsert; merge row by row inside the same transaction
        for row in rows:
            existing = session.get(UserSubject, (row["user_id"], row["subject_id"]))
            if existing is None:
                session.add(UserSubject(**row))
            else:
                existing.status = row["status"]
                existing.final_grade = row["final_grade"]
                existing.updated_at = row["updated_at"]
        session.flush()


def sync_progress(
    session: Session,
    user_id: str,
    program_id: str,
    entries: Sequence[ProgressEntry],
    max_entries: int = DEFAULT_MAX_ENTRIES,
) -> SyncResult:
    """Reconcile the student's progress for ``program_id`` with ``entries``.

    Subjects of the program missing from ``entries`` lose their row; every
    entry is upserted. An entry without ``finalGrade`` keeps the grade on
    record. Everything happens in one transaction, serialized per
    (user, program) through a lock on the enrollment row.
    """
    with atomic(session, "sync user subjects"):
        require_enrollment(session, user_id, program_id, lock=True)

        if len(entries) > max_entries:
            raise ValidationError(f"too many subjects (max {max_entries})")

        program_subjects = _program_subject_ids(session, program_id)
        _validate_entries(entries, program_subjects)

        missing_grade = [e.subject_id for e in entries if e.final_grade is None]
        carried = _stored_grades(session, user_id, missing_grade)

        submitted = {e.subject_id for e in entries}
        stale = program_subjects - submitted
        pruned = 0
        if stale:
            pruned = (
                session.query(UserSubject)
                .filter(UserSubject.user_id == user_id, UserSubject.subject_id.in_(sorted(stale)))
                .delete(synchronize_session=False)
            )

        if entries:
            now = utcnow()
            rows = [
                {
                    "user_id": user_id,
                    "subject_id": e.subject_id,
                    "status": e.status,
                    "final_grade": (
                        float(e.final_grade) if e.final_grade is not None else carried.get(e.subject_id)
                    ),
                    "created_at": now,
                    "updated_at": now,
                }
                for e in entries
            ]
            _upsert(session, rows)

    logger.info(
        "synced progress user=%s program=%s upserted=%d pruned=%d",
        user_id,
        program_id,
        len(entries),
        pruned,
    )
    return SyncResult(upserted=len(entries), pruned=pruned)


def project_progress(session: Session, user_id: str, program_id: Optional[str] = None) -> ProgramProgress:
    """Every subject of the program merged with the student's status.

    Without ``program_id`` the student's first program is used. Read-only.
    """
    if not program_id:
        program_ids = enrolled_program_ids(session, user_id)
        if not program_ids:
            raise ValidationError("User has no degree programs")
        program_id = program_ids[0]

    require_enrollment(session, user_id, program_id)
    program = get_program(session, program_id)

    subjects = (
        session.query(Subject)
        .filter(Subject.degree_program_id == program.id)
        .order_by(Subject.year.is_(None), Subject.year, Subject.name, Subject.id)
        .all()
    )
    if not subjects:
        return ProgramProgress(id=program.id, name=program.name, university=program.university)

    subject_ids = [s.id for s in subjects]

    progress = {
        row.subject_id: row
        for row in session.query(UserSubject)
        .filter(UserSubject.user_id == user_id, UserSubject.subject_id.in_(subject_ids))
        .all()
    }

    requirements: Dict[str, List[RequirementRef]] = {}
    for edge in (
        session.query(SubjectRequirement)
        .filter(SubjectRequirement.subject_id.in_(subject_ids))
        .order_by(SubjectRequirement.subject_id, SubjectRequirement.requirement_id)
        .all()
    ):
        requirements.setdefault(edge.subject_id, []).append(
            RequirementRef(id=edge.requirement_id, min_status=edge.min_status)
        )

    out = []
    for s in subjects:
        row = progress.get(s.id)
        out.append(
            ProjectedSubject(
                id=s.id,
                name=s.name,
                year=s.year,
                term=s.term,
                credits=s.credits,
                hours=s.hours,
                is_elective=s.is_elective,
                degree_program_id=s.degree_program_id,
                status=row.status if row is not None else DEFAULT_STATUS,
                requirements=requirements.get(s.id, []),
                final_grade=row.final_grade if row is not None else None,
            )
        )

    return ProgramProgress(id=program.id, name=program.name, university=program.university, subjects=out)
