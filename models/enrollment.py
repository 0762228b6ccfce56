from extensions import db, utcnow


# Student X is enrolled in program P. Earliest row is the student's default program.
class Enrollment(db.Model):
    __tablename__ = "user_degree_programs"

    user_id = db.Column(
        db.String(191),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    degree_program_id = db.Column(
        db.String(191),
        db.ForeignKey("degree_programs.id", ondelete="CASCADE"),
        primary_key=True,
    )

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship("User", back_populates="enrollments", lazy=True)
    program = db.relationship("DegreeProgram", lazy=True)

    def __repr__(self) -> str:
        return f"<Enrollment user={self.user_id} program={self.degree_program_id}>"
