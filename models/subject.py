import uuid

from extensions import db, utcnow

TERMS = ("annual", "semester", "quarterly", "bimonthly")


class Subject(db.Model):
    __tablename__ = "subjects"

    # Opaque identifier, kept as string so seeded catalogs can use readable ids
    id = db.Column(db.String(191), primary_key=True, default=lambda: str(uuid.uuid4()))

    degree_program_id = db.Column(
        db.String(191),
        db.ForeignKey("degree_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(191), nullable=False)
    year = db.Column(db.Integer, nullable=True)
    term = db.Column(db.String(20), nullable=False, default="annual")
    credits = db.Column(db.Float, nullable=False, default=0.0)
    hours = db.Column(db.Float, nullable=False, default=0.0)
    is_elective = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    program = db.relationship("DegreeProgram", back_populates="subjects", lazy=True)

    # Edges where THIS subject is the dependent one (X requires Y)
    requirement_edges = db.relationship(
        "SubjectRequirement",
        foreign_keys="SubjectRequirement.subject_id",
        back_populates="subject",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    # Edges where THIS subject is the requirement of others
    required_by_edges = db.relationship(
        "SubjectRequirement",
        foreign_keys="SubjectRequirement.requirement_id",
        back_populates="requirement",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    pool_links = db.relationship(
        "ElectivePoolSubject",
        back_populates="subject",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<Subject {self.id} {self.name}>"
