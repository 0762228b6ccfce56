"""Response records, one per endpoint shape.

Each record knows its JSON field names through ``to_dict``; routes only call
``jsonify(record.to_dict())``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class RequirementRef:
    id: str
    min_status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "minStatus": self.min_status}


@dataclass(frozen=True)
class RequirementDetail:
    id: str
    name: str
    min_status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "minStatus": self.min_status}


@dataclass(frozen=True)
class SubjectView:
    id: str
    name: str
    year: Optional[int]
    term: str
    credits: float
    hours: float
    is_elective: bool
    degree_program_id: str
    requirements: List[RequirementDetail] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, subject, requirements: List[RequirementDetail]) -> "SubjectView":
        return cls(
            id=subject.id,
            name=subject.name,
            year=subject.year,
            term=subject.term,
            credits=subject.credits,
            hours=subject.hours,
            is_elective=subject.is_elective,
            degree_program_id=subject.degree_program_id,
            requirements=requirements,
            created_at=subject.created_at,
            updated_at=subject.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "year": self.year,
            "term": self.term,
            "credits": self.credits,
            "hours": self.hours,
            "isElective": self.is_elective,
            "degreeProgramID": self.degree_program_id,
            "requirements": [r.to_dict() for r in self.requirements],
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class ProjectedSubject:
    id: str
    name: str
    year: Optional[int]
    term: str
    credits: float
    hours: float
    is_elective: bool
    degree_program_id: str
    status: str
    requirements: List[RequirementRef] = field(default_factory=list)
    final_grade: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "name": self.name,
            "year": self.year,
            "term": self.term,
            "credits": self.credits,
            "hours": self.hours,
            "isElective": self.is_elective,
            "degreeProgramID": self.degree_program_id,
            "status": self.status,
            "requirements": [r.to_dict() for r in self.requirements],
        }
        # grade only when one is on record
        if self.final_grade is not None:
            out["finalGrade"] = self.final_grade
        return out


@dataclass(frozen=True)
class ProgramView:
    id: str
    name: str
    university: str

    @classmethod
    def from_model(cls, program) -> "ProgramView":
        return cls(id=program.id, name=program.name, university=program.university)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "university": self.university}


@dataclass(frozen=True)
class ProgramProgress:
    id: str
    name: str
    university: str
    subjects: List[ProjectedSubject] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "university": self.university,
            "subjects": [s.to_dict() for s in self.subjects],
        }


@dataclass(frozen=True)
class MyPrograms:
    enrolled_programs: List[ProgramView] = field(default_factory=list)
    favorite_programs: List[ProgramView] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enrolledProgramIds": [p.id for p in self.enrolled_programs],
            "favoriteProgramIds": [p.id for p in self.favorite_programs],
            "enrolledPrograms": [p.to_dict() for p in self.enrolled_programs],
            "favoritePrograms": [p.to_dict() for p in self.favorite_programs],
        }


@dataclass(frozen=True)
class PoolSubjectRef:
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class PoolView:
    id: str
    degree_program_id: str
    name: str
    description: str
    subjects: List[PoolSubjectRef] = field(default_factory=list)

    @classmethod
    def from_model(cls, pool) -> "PoolView":
        subjects = sorted(
            (PoolSubjectRef(id=link.subject.id, name=link.subject.name) for link in pool.subject_links),
            key=lambda s: (s.name, s.id),
        )
        return cls(
            id=pool.id,
            degree_program_id=pool.degree_program_id,
            name=pool.name,
            description=pool.description or "",
            subjects=subjects,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "degree_program_id": self.degree_program_id,
            "name": self.name,
            "description": self.description,
            "subjects": [s.to_dict() for s in self.subjects],
        }


@dataclass(frozen=True)
class PoolLinkView:
    elective_pool_id: str
    subject_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"elective_pool_id": self.elective_pool_id, "subject_id": self.subject_id}


@dataclass(frozen=True)
class RuleView:
    id: str
    degree_program_id: str
    pool_id: str
    applies_from_year: int
    applies_to_year: Optional[int]
    requirement_type: str
    minimum_value: float

    @classmethod
    def from_model(cls, rule) -> "RuleView":
        return cls(
            id=rule.id,
            degree_program_id=rule.degree_program_id,
            pool_id=rule.pool_id,
            applies_from_year=rule.applies_from_year,
            applies_to_year=rule.applies_to_year,
            requirement_type=rule.requirement_type,
            minimum_value=rule.minimum_value,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "degree_program_id": self.degree_program_id,
            "pool_id": self.pool_id,
            "applies_from_year": self.applies_from_year,
            "applies_to_year": self.applies_to_year,
            "requirement_type": self.requirement_type,
            "minimum_value": self.minimum_value,
        }


@dataclass(frozen=True)
class SyncResult:
    upserted: int
    pruned: int

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True}


@dataclass(frozen=True)
class RequirementGraph:
    program_id: str
    subject_ids: List[str]
    edges: List[Tuple[str, str, str]]  # (subject, requirement, min_status)
    cycles: List[List[str]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "programId": self.program_id,
            "subjects": self.subject_ids,
            "edges": [
                {"subjectId": s, "requirementId": r, "minStatus": m} for s, r, m in self.edges
            ],
            "cycles": self.cycles,
            "acyclic": not self.cycles,
        }
