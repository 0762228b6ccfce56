"""Elective pools, pool membership and elective rules.

Pure validation and referential-integrity gates. Whether a student satisfies
a rule is not computed anywhere.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.elective_pool import ElectivePool, ElectivePoolSubject
from models.elective_rule import ElectiveRule, REQUIREMENT_TYPES
from models.subject import Subject
from services.catalog import get_program
from services.errors import ConflictError, ReferentialError, ValidationError
from services.transaction import atomic
from services.validation import (
    MAX_DESCRIPTION_LEN,
    validate_choice,
    validate_id,
    validate_number,
    validate_optional_int,
    validate_optional_string,
    validate_required_string,
)
from services.views import PoolLinkView, PoolView, RuleView

logger = logging.getLogger(__name__)


def _body(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("invalid parameters")
    return payload


# -----------------------------
# Pools
# -----------------------------

def _get_pool(session: Session, program_id: str, pool_id: str) -> ElectivePool:
    pool = session.query(ElectivePool).filter_by(id=pool_id, degree_program_id=program_id).first()
    if pool is None:
        raise ReferentialError("Pool not found")
    return pool


def list_pools(session: Session, program_id: str) -> List[PoolView]:
    get_program(session, program_id)
    pools = (
        session.query(ElectivePool)
        .filter_by(degree_program_id=program_id)
        .order_by(ElectivePool.name.asc(), ElectivePool.id.asc())
        .all()
    )
    return [PoolView.from_model(p) for p in pools]


def get_pool(session: Session, program_id: str, pool_id: str) -> PoolView:
    return PoolView.from_model(_get_pool(session, program_id, pool_id))


def create_pool(session: Session, program_id: str, payload: Any) -> PoolView:
    program = get_program(session, program_id)
    payload = _body(payload)
    name = validate_required_string(payload.get("name"), "name")
    description = validate_optional_string(payload.get("description"), "description", MAX_DESCRIPTION_LEN)

    with atomic(session, "create elective pool"):
        pool = ElectivePool(degree_program_id=program.id, name=name, description=description or "")
        session.add(pool)
        session.flush()
        view = PoolView.from_model(pool)

    logger.info("elective pool created id=%s program=%s", view.id, program_id)
    return view


def update_pool(session: Session, program_id: str, pool_id: str, payload: Any) -> PoolView:
    pool = _get_pool(session, program_id, pool_id)
    payload = _body(payload)
    name = validate_optional_string(payload.get("name"), "name")
    description = validate_optional_string(payload.get("description"), "description", MAX_DESCRIPTION_LEN)

    with atomic(session, "update elective pool"):
        if name is not None:
            pool.name = name
        if description is not None:
            pool.description = description
        session.flush()
        view = PoolView.from_model(pool)
    return view


def delete_pool(session: Session, program_id: str, pool_id: str) -> None:
    pool = _get_pool(session, program_id, pool_id)
    # links and rules go with the pool (FK cascade)
    with atomic(session, "delete elective pool"):
        session.delete(pool)
    logger.info("elective pool deleted id=%s program=%s", pool_id, program_id)


def add_pool_subject(session: Session, program_id: str, pool_id: str, payload: Any) -> PoolLinkView:
    pool = _get_pool(session, program_id, pool_id)
    subject_id = validate_id(_body(payload).get("subject_id"), "subject_id")

    subject = session.get(Subject, subject_id)
    if subject is None:
        raise ReferentialError("Subject not found")
    if subject.degree_program_id != pool.degree_program_id:
        raise ReferentialError("Subject does not belong to the degree program", status_code=400)

    with atomic(session, "add subject to elective pool"):
        if session.get(ElectivePoolSubject, (pool.id, subject.id)) is not None:
            raise ConflictError("Subject is already in the pool")
        session.add(ElectivePoolSubject(elective_pool_id=pool.id, subject_id=subject.id))
        try:
            session.flush()
        except IntegrityError as exc:
            # lost a race against an identical insert
            raise ConflictError("Subject is already in the pool") from exc

    return PoolLinkView(elective_pool_id=pool.id, subject_id=subject.id)


def remove_pool_subject(session: Session, program_id: str, pool_id: str, subject_id: str) -> None:
    pool = _get_pool(session, program_id, pool_id)
    with atomic(session, "remove subject from elective pool"):
        link = session.get(ElectivePoolSubject, (pool.id, subject_id))
        if link is None:
            raise ReferentialError("Subject is not in the pool")
        session.delete(link)


# -----------------------------
# Rules
# -----------------------------

def _check_year_range(applies_from_year: int, applies_to_year) -> None:
    if applies_to_year is not None and applies_to_year < applies_from_year:
        raise ValidationError("applies_to_year cannot be lower than applies_from_year")


def _pool_for_rule(session: Session, pool_id: str, program_id: str) -> ElectivePool:
    pool = session.get(ElectivePool, pool_id)
    if pool is None:
        raise ReferentialError("Pool not found")
    if pool.degree_program_id != program_id:
        raise ReferentialError("Pool does not belong to the degree program", status_code=400)
    return pool


def _get_rule(session: Session, program_id: str, rule_id: str) -> ElectiveRule:
    rule = session.query(ElectiveRule).filter_by(id=rule_id, degree_program_id=program_id).first()
    if rule is None:
        raise ReferentialError("Rule not found")
    return rule


def list_rules(session: Session, program_id: str) -> List[RuleView]:
    get_program(session, program_id)
    rules = (
        session.query(ElectiveRule)
        .filter_by(degree_program_id=program_id)
        .order_by(ElectiveRule.applies_from_year.asc(), ElectiveRule.id.asc())
        .all()
    )
    return [RuleView.from_model(r) for r in rules]


def get_rule(session: Session, program_id: str, rule_id: str) -> RuleView:
    return RuleView.from_model(_get_rule(session, program_id, rule_id))


def create_rule(session: Session, program_id: str, payload: Any) -> RuleView:
    program = get_program(session, program_id)
    payload = _body(payload)

    pool_id = validate_id(payload.get("pool_id"), "pool_id")
    applies_from_year = validate_optional_int(payload.get("applies_from_year"), "applies_from_year")
    if applies_from_year is None or applies_from_year <= 0:
        raise ValidationError("applies_from_year must be greater than 0")
    applies_to_year = validate_optional_int(payload.get("applies_to_year"), "applies_to_year")
    _check_year_range(applies_from_year, applies_to_year)
    minimum_value = validate_number(payload.get("minimum_value"), "minimum_value", minimum=0, exclusive_minimum=True)
    requirement_type = validate_choice(payload.get("requirement_type"), "requirement_type", REQUIREMENT_TYPES)

    with atomic(session, "create elective rule"):
        _pool_for_rule(session, pool_id, program.id)
        rule = ElectiveRule(
            degree_program_id=program.id,
            pool_id=pool_id,
            applies_from_year=applies_from_year,
            applies_to_year=applies_to_year,
            requirement_type=requirement_type,
            minimum_value=minimum_value,
        )
        session.add(rule)
        session.flush()
        view = RuleView.from_model(rule)

    logger.info("elective rule created id=%s pool=%s", view.id, pool_id)
    return view


def update_rule(session: Session, program_id: str, rule_id: str, payload: Any) -> RuleView:
    rule = _get_rule(session, program_id, rule_id)
    payload = _body(payload)

    pool_id = None
    if payload.get("pool_id") is not None:
        pool_id = validate_id(payload.get("pool_id"), "pool_id")

    minimum_value = None
    if payload.get("minimum_value") is not None:
        minimum_value = validate_number(
            payload.get("minimum_value"), "minimum_value", minimum=0, exclusive_minimum=True
        )

    requirement_type = None
    if payload.get("requirement_type") is not None:
        requirement_type = validate_choice(payload.get("requirement_type"), "requirement_type", REQUIREMENT_TYPES)

    # the range is checked on the merged result, not on the patch alone
    next_from = rule.applies_from_year
    next_to = rule.applies_to_year
    if payload.get("applies_from_year") is not None:
        next_from = validate_optional_int(payload.get("applies_from_year"), "applies_from_year")
        if next_from <= 0:
            raise ValidationError("applies_from_year must be greater than 0")
    if payload.get("applies_to_year") is not None:
        next_to = validate_optional_int(payload.get("applies_to_year"), "applies_to_year")
    _check_year_range(next_from, next_to)

    with atomic(session, "update elective rule"):
        if pool_id is not None:
            _pool_for_rule(session, pool_id, rule.degree_program_id)
            rule.pool_id = pool_id
        rule.applies_from_year = next_from
        rule.applies_to_year = next_to
        if requirement_type is not None:
            rule.requirement_type = requirement_type
        if minimum_value is not None:
            rule.minimum_value = minimum_value
        session.flush()
        view = RuleView.from_model(rule)
    return view


def delete_rule(session: Session, program_id: str, rule_id: str) -> None:
    rule = _get_rule(session, program_id, rule_id)
    with atomic(session, "delete elective rule"):
        session.delete(rule)
