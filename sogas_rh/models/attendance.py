from datetime import datetime
from sogas_rh.extensions import db

HOLIDAY_TYPES = ("Fixe", "Variable", "Religieux", "SOGAS")


class Holiday(db.Model):
    __tablename__ = "jours_feries"
    id = db.Column(db.Integer, primary_key=True)
    nom         = db.Column(db.String(120), nullable=False)
    date_feriee = db.Column(db.Date, nullable=False, unique=True)
    type        = db.Column(db.String(20), nullable=False, default="Fixe")
    recurrent   = db.Column(db.Boolean, nullable=False, default=False)   # same day every year
    majoration_pourcentage = db.Column(db.Numeric(5, 2), nullable=False, default=60)
    actif       = db.Column(db.Boolean, nullable=False, default=True)
    created_at  = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Attendance(db.Model):
    """
    Daily pointage. heure_sortie and every derived hour field stay NULL until
    checkout, which fills them in a single update.
    """
    __tablename__ = "attendances"
    id = db.Column(db.Integer, primary_key=True)
    employee_id   = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False, index=True)
    date_pointage = db.Column(db.Date, nullable=False)
    heure_entree  = db.Column(db.Time, nullable=False)
    heure_sortie  = db.Column(db.Time, nullable=True)
    source        = db.Column(db.String(50), nullable=False, default="Manuel")

    heures_normales            = db.Column(db.Numeric(5, 2), nullable=True)
    heures_sup_15              = db.Column(db.Numeric(5, 2), nullable=True)
    heures_sup_40              = db.Column(db.Numeric(5, 2), nullable=True)
    heures_sup_hors_majoration = db.Column(db.Numeric(5, 2), nullable=True)
    majoration_pourcentage     = db.Column(db.Numeric(5, 2), nullable=True)
    panier_repas_du            = db.Column(db.Boolean, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "date_pointage", name="uq_attendance_employee_date"),
    )

    employee = db.relationship("Employee")
