from datetime import datetime
from sqlalchemy import text
from sogas_rh.extensions import db


class EmployeeAffectation(db.Model):
    """
    One placement period of an employee. `date_fin` NULL marks the current
    (open) record; at most one open record may exist per employee, enforced
    both by the service layer and by the partial unique index below.
    """
    __tablename__ = "employee_affectations"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date_debut = db.Column(db.Date, nullable=False)
    date_fin   = db.Column(db.Date, nullable=True)
    motif      = db.Column(db.String(255), nullable=False)
    commentaire = db.Column(db.Text, nullable=True)

    # snapshot before the change (empty for the hiring record)
    site_id_ancien       = db.Column(db.Integer, db.ForeignKey("sites.id", ondelete="RESTRICT"), nullable=True)
    department_id_ancien = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=True)
    service_id_ancien    = db.Column(db.Integer, db.ForeignKey("services.id", ondelete="RESTRICT"), nullable=True)
    team_id_ancien       = db.Column(db.Integer, db.ForeignKey("teams.id", ondelete="RESTRICT"), nullable=True)
    position_ancienne    = db.Column(db.String(255), nullable=True)
    fonction_ancienne    = db.Column(db.String(255), nullable=True)

    # snapshot after the change
    site_id_nouveau       = db.Column(db.Integer, db.ForeignKey("sites.id", ondelete="RESTRICT"), nullable=False)
    department_id_nouveau = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False)
    service_id_nouveau    = db.Column(db.Integer, db.ForeignKey("services.id", ondelete="RESTRICT"), nullable=False)
    team_id_nouveau       = db.Column(db.Integer, db.ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False)
    position_nouvelle     = db.Column(db.String(255), nullable=False)
    fonction_nouvelle     = db.Column(db.String(255), nullable=False)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.Index(
            "uq_affectation_open_per_employee",
            "employee_id",
            unique=True,
            postgresql_where=text("date_fin IS NULL"),
            sqlite_where=text("date_fin IS NULL"),
        ),
    )

    employee = db.relationship("Employee", backref=db.backref("affectations", lazy="dynamic"))
