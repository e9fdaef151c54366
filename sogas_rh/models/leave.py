from datetime import datetime
from sogas_rh.extensions import db

LEAVE_STATUSES = ("Soumis", "En attente", "Approuvé", "Rejeté", "Annulé")
# statuses that block another request on overlapping dates
BLOCKING_STATUSES = ("Soumis", "En attente", "Approuvé")


class LeaveRequest(db.Model):
    __tablename__ = "leave_requests"
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    type_conge = db.Column(db.String(50), nullable=False)
    date_debut = db.Column(db.Date, nullable=False)
    date_fin = db.Column(db.Date, nullable=False)
    nb_jours = db.Column(db.Numeric(5, 2), nullable=False)
    motif_employe = db.Column(db.Text)
    statut_actuel = db.Column(db.String(20), nullable=False, default="Soumis")

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    employee = db.relationship("Employee", backref="leave_requests")
    validations = db.relationship(
        "LeaveValidation",
        order_by="LeaveValidation.id",
        back_populates="request",
        cascade="all, delete-orphan",
    )


class LeaveValidation(db.Model):
    """Append-only workflow step of a leave request."""
    __tablename__ = "leave_validations"
    id = db.Column(db.Integer, primary_key=True)
    request_id = db.Column(db.Integer, db.ForeignKey("leave_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    validateur_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))
    niveau_validation = db.Column(db.String(50), nullable=False)
    decision = db.Column(db.String(20), nullable=False)  # En attente|Approuvé|Rejeté
    commentaire = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    request = db.relationship("LeaveRequest", back_populates="validations")
