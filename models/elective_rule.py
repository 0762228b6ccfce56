import uuid

from extensions import db, utcnow

REQUIREMENT_TYPES = ("hours", "credits", "subject_count")


# Students in years [applies_from_year, applies_to_year] must reach minimum_value
# (hours / credits / subject count) from the pool. Stored only, never evaluated.
class ElectiveRule(db.Model):
    __tablename__ = "elective_rules"

    id = db.Column(db.String(191), primary_key=True, default=lambda: str(uuid.uuid4()))

    degree_program_id = db.Column(
        db.String(191),
        db.ForeignKey("degree_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    pool_id = db.Column(
        db.String(191),
        db.ForeignKey("elective_pools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    applies_from_year = db.Column(db.Integer, nullable=False)
    applies_to_year = db.Column(db.Integer, nullable=True)  # NULL = open ended
    requirement_type = db.Column(db.String(20), nullable=False)
    minimum_value = db.Column(db.Float, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    program = db.relationship("DegreeProgram", back_populates="elective_rules", lazy=True)
    pool = db.relationship("ElectivePool", back_populates="rules", lazy=True)

    def __repr__(self) -> str:
        return f"<ElectiveRule pool={self.pool_id} {self.requirement_type}>={self.minimum_value}>"
