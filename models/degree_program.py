import uuid

from extensions import db, utcnow


class DegreeProgram(db.Model):
    __tablename__ = "degree_programs"

    id = db.Column(db.String(191), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(191), nullable=False)
    university = db.Column(db.String(191), nullable=False, default="")
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Children: cascade so a program delete cleans its catalog
    subjects = db.relationship(
        "Subject",
        back_populates="program",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    elective_pools = db.relationship(
        "ElectivePool",
        back_populates="program",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    elective_rules = db.relationship(
        "ElectiveRule",
        back_populates="program",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<DegreeProgram {self.name}>"
