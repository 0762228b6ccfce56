from extensions import db

# "passed" also accepts passed_with_distinction; "final_pending" means registered for the final
MIN_STATUSES = ("passed", "final_pending")


# Subject X requires subject Y to hold at least min_status
class SubjectRequirement(db.Model):
    __tablename__ = "subject_requirements"

    # the subject that HAS the requirement (X)
    subject_id = db.Column(
        db.String(191),
        db.ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # the required subject (Y)
    requirement_id = db.Column(
        db.String(191),
        db.ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    min_status = db.Column(db.String(20), nullable=False, default="passed")

    subject = db.relationship(
        "Subject",
        foreign_keys=[subject_id],
        back_populates="requirement_edges",
        lazy=True,
    )

    requirement = db.relationship(
        "Subject",
        foreign_keys=[requirement_id],
        back_populates="required_by_edges",
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<Requirement {self.requirement_id} -> {self.subject_id} ({self.min_status})>"
