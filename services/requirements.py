"""Requirement graph: validation and wholesale replacement of prerequisite edges.

Edges are a plain directed relation (subject -> requirement). Acyclicity is not
a storage invariant; ``find_cycles`` is an optional report layered on top.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from sqlalchemy.orm import Session

from models.degree_program import DegreeProgram
from models.subject import Subject
from models.subject_requirement import SubjectRequirement, MIN_STATUSES
from services.errors import ReferentialError, ValidationError
from services.validation import validate_id
from services.views import RequirementDetail, RequirementGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequirementSpec:
    requirement_id: str
    min_status: str = "passed"


def normalize_requirement_specs(raw: Any) -> List[RequirementSpec]:
    """Parse ``[{id, minStatus?}]`` from a request body.

    ``minStatus`` defaults to ``passed``. Bare id strings are accepted too.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("requirements must be a list")

    specs: List[RequirementSpec] = []
    seen: set[str] = set()
    for item in raw:
        if isinstance(item, str):
            rid, min_status = item, None
        elif isinstance(item, dict):
            rid, min_status = item.get("id"), item.get("minStatus")
        else:
            raise ValidationError("invalid requirement entry")

        rid = validate_id(rid, "requirement id")
        if min_status in (None, ""):
            min_status = "passed"
        elif min_status not in MIN_STATUSES:
            raise ValidationError("invalid minStatus")

        if rid in seen:
            raise ValidationError("duplicate requirement subject")
        seen.add(rid)
        specs.append(RequirementSpec(requirement_id=rid, min_status=min_status))
    return specs


def resolve_requirements(
    session: Session,
    specs: Sequence[RequirementSpec],
    program_id: str,
) -> Dict[str, Subject]:
    """Every requirement id must be an existing subject of ``program_id``."""
    ids = [s.requirement_id for s in specs]
    if not ids:
        return {}

    found = {s.id: s for s in session.query(Subject).filter(Subject.id.in_(ids)).all()}
    if any(rid not in found for rid in ids):
        raise ValidationError("unknown requirement subject")

    if any(s.degree_program_id != program_id for s in found.values()):
        raise ValidationError("requirement subject belongs to another program")
    return found


def replace_requirements(session: Session, subject: Subject, specs: Sequence[RequirementSpec]) -> None:
    """Drop every edge of ``subject`` and insert ``specs``. Runs in the caller's transaction."""
    resolve_requirements(session, specs, subject.degree_program_id)

    session.query(SubjectRequirement).filter_by(subject_id=subject.id).delete(
        synchronize_session="fetch"
    )
    # deletes must hit the DB before re-inserting the same (subject, requirement) keys
    session.flush()

    for spec in specs:
        session.add(
            SubjectRequirement(
                subject_id=subject.id,
                requirement_id=spec.requirement_id,
                min_status=spec.min_status,
            )
        )
    session.flush()
    session.expire(subject, ["requirement_edges"])
    logger.debug("replaced requirements of %s with %d edges", subject.id, len(specs))


def requirement_details(session: Session, subject_ids: Iterable[str]) -> Dict[str, List[RequirementDetail]]:
    ids = list(subject_ids)
    out: Dict[str, List[RequirementDetail]] = defaultdict(list)
    if not ids:
        return out

    rows = (
        session.query(SubjectRequirement, Subject.name)
        .join(Subject, Subject.id == SubjectRequirement.requirement_id)
        .filter(SubjectRequirement.subject_id.in_(ids))
        .order_by(SubjectRequirement.subject_id, Subject.name, Subject.id)
        .all()
    )
    for edge, name in rows:
        out[edge.subject_id].append(
            RequirementDetail(id=edge.requirement_id, name=name, min_status=edge.min_status)
        )
    return out


def find_cycles(edges: Iterable[Tuple[str, str]]) -> List[List[str]]:
    """Cycles reachable by DFS over ``(subject, requirement)`` edges.

    A self-requirement shows up as a one-element cycle. Each back edge found
    yields one cycle, so this is a report, not an enumeration of every
    elementary cycle.
    """
    graph: Dict[str, List[str]] = defaultdict(list)
    for src, dst in edges:
        graph[src].append(dst)
        graph.setdefault(dst, [])

    visiting, done = 1, 2
    state: Dict[str, int] = {}
    cycles: List[List[str]] = []

    for root in sorted(graph):
        if root in state:
            continue
        state[root] = visiting
        path = [root]
        stack = [iter(sorted(graph[root]))]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                state[path.pop()] = done
                continue
            if state.get(child) == visiting:
                cycles.append(path[path.index(child):])
            elif child not in state:
                state[child] = visiting
                path.append(child)
                stack.append(iter(sorted(graph[child])))
    return cycles


def requirement_graph(session: Session, program_id: str) -> RequirementGraph:
    if session.get(DegreeProgram, program_id) is None:
        raise ReferentialError("Program not found")

    subject_ids = [
        sid
        for (sid,) in session.query(Subject.id)
        .filter(Subject.degree_program_id == program_id)
        .order_by(Subject.id)
        .all()
    ]
    edges: List[Tuple[str, str, str]] = []
    if subject_ids:
        edges = [
            (e.subject_id, e.requirement_id, e.min_status)
            for e in session.query(SubjectRequirement)
            .filter(SubjectRequirement.subject_id.in_(subject_ids))
            .order_by(SubjectRequirement.subject_id, SubjectRequirement.requirement_id)
            .all()
        ]

    cycles = find_cycles((s, r) for s, r, _ in edges)
    if cycles:
        logger.warning("program %s has %d requirement cycle(s)", program_id, len(cycles))
    return RequirementGraph(program_id=program_id, subject_ids=subject_ids, edges=edges, cycles=cycles)
