"""Database models. Importing the package registers every table on ``db.metadata``."""
from .user import User
from .degree_program import DegreeProgram
from .enrollment import Enrollment
from .favorite_program import FavoriteProgram
from .subject import Subject, TERMS
from .subject_requirement import SubjectRequirement, MIN_STATUSES
from .elective_pool import ElectivePool, ElectivePoolSubject
from .elective_rule import ElectiveRule, REQUIREMENT_TYPES
from .user_subject import UserSubject, STATUSES, DEFAULT_STATUS

__all__ = [
    "User",
    "DegreeProgram",
    "Enrollment",
    "FavoriteProgram",
    "Subject",
    "SubjectRequirement",
    "ElectivePool",
    "ElectivePoolSubject",
    "ElectiveRule",
    "UserSubject",
    "TERMS",
    "MIN_STATUSES",
    "REQUIREMENT_TYPES",
    "STATUSES",
    "DEFAULT_STATUS",
]
