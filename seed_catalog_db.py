import logging

from flask import current_app

from extensions import db
from models.degree_program import DegreeProgram
from models.subject import Subject
from services import catalog
from services.errors import CurriculumError
from services.requirements import normalize_requirement_specs
from utils.catalog_files import CatalogSubject, load_catalog

logger = logging.getLogger("seed_catalog")


def _ensure_program(item: CatalogSubject) -> None:
    if db.session.get(DegreeProgram, item.program_id) is not None:
        return
    catalog.create_program(
        db.session,
        name=item.program_name or item.program_id,
        university=item.university,
        program_id=item.program_id,
    )


def seed_catalog(directory=None):
    rows = load_catalog(directory or current_app.config["CATALOG_DIR"])

    inserted = 0
    skipped = 0
    failed = 0

    # Pass 1: programs and bare subjects, so requirements can point at any row
    for item in rows:
        if db.session.get(Subject, item.id) is not None:
            skipped += 1
            continue
        try:
            _ensure_program(item)
            fields = catalog.parse_subject_payload(
                {
                    "name": item.name,
                    "degreeProgramID": item.program_id,
                    "year": item.year,
                    "term": item.term,
                    "credits": item.credits,
                    "hours": item.hours,
                    "isElective": item.is_elective,
                },
                partial=False,
            )
            catalog.create_subject(db.session, subject_id=item.id, **fields)
            inserted += 1
        except CurriculumError as e:
            failed += 1
            logger.warning("subject %s not seeded: %s", item.id, e.message)

    # Pass 2: requirement edges
    linked = 0
    for item in rows:
        if not item.requirements or db.session.get(Subject, item.id) is None:
            continue
        try:
            specs = normalize_requirement_specs(item.requirements)
            catalog.update_subject(db.session, item.id, {"requirements": specs})
            linked += 1
        except CurriculumError as e:
            failed += 1
            logger.warning("requirements of %s not seeded: %s", item.id, e.message)

    logger.info(
        "catalog seed complete: %d inserted, %d skipped, %d with requirements, %d failed",
        inserted,
        skipped,
        linked,
        failed,
    )
    return inserted, skipped, failed


if __name__ == "__main__":
    from app import app

    with app.app_context():
        seed_catalog()
