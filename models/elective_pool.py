import uuid

from extensions import db, utcnow


class ElectivePool(db.Model):
    __tablename__ = "elective_pools"

    id = db.Column(db.String(191), primary_key=True, default=lambda: str(uuid.uuid4()))

    degree_program_id = db.Column(
        db.String(191),
        db.ForeignKey("degree_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(191), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    program = db.relationship("DegreeProgram", back_populates="elective_pools", lazy=True)

    subject_links = db.relationship(
        "ElectivePoolSubject",
        back_populates="pool",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    rules = db.relationship(
        "ElectiveRule",
        back_populates="pool",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<ElectivePool {self.name}>"


# Pool P contains subject S. The subject must belong to the pool's program;
# that is checked in services/electives.py, not by a constraint.
class ElectivePoolSubject(db.Model):
    __tablename__ = "elective_pool_subjects"

    elective_pool_id = db.Column(
        db.String(191),
        db.ForeignKey("elective_pools.id", ondelete="CASCADE"),
        primary_key=True,
    )

    subject_id = db.Column(
        db.String(191),
        db.ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    pool = db.relationship("ElectivePool", back_populates="subject_links", lazy=True)
    subject = db.relationship("Subject", back_populates="pool_links", lazy=True)

    def __repr__(self) -> str:
        return f"<PoolSubject pool={self.elective_pool_id} subject={self.subject_id}>"
