from extensions import db, utcnow

STATUSES = (
    "available",
    "in_progress",
    "final_pending",
    "passed",
    "passed_with_distinction",
)

DEFAULT_STATUS = "available"

MIN_GRADE = 0.0
MAX_GRADE = 10.0


# Student progress for one subject. Rows only exist once the student submitted a status.
class UserSubject(db.Model):
    __tablename__ = "user_subjects"

    user_id = db.Column(
        db.String(191),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    subject_id = db.Column(
        db.String(191),
        db.ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    status = db.Column(db.String(32), nullable=False, default=DEFAULT_STATUS)
    final_grade = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = db.relationship("User", back_populates="progress", lazy=True)
    subject = db.relationship("Subject", lazy=True)

    def __repr__(self) -> str:
        return f"<UserSubject user={self.user_id} subject={self.subject_id} [{self.status}]>"
