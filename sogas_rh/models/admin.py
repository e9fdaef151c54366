from datetime import datetime
from sogas_rh.extensions import db

DOCUMENT_ALERT_STATUSES = ("OK", "Expiration 30j", "Expiré")
ALERT_SEVERITIES = ("Basse", "Moyenne", "Haute", "Critique")
ALERT_STATUSES = ("Ouvert", "En cours", "Fermé")


class Document(db.Model):
    __tablename__ = "documents"
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    type_document = db.Column(db.String(100), nullable=False)
    nom_fichier = db.Column(db.String(255), nullable=False)
    chemin_stockage = db.Column(db.String(255), nullable=False)
    date_enregistrement = db.Column(db.Date, nullable=False)
    date_expiration = db.Column(db.Date, nullable=True)
    statut_alerte = db.Column(db.String(20), nullable=False, default="OK")
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Alert(db.Model):
    __tablename__ = "alerts"
    id = db.Column(db.Integer, primary_key=True)
    type_alerte = db.Column(db.String(50), nullable=False)
    message_detaille = db.Column(db.Text, nullable=False)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    date_echeance = db.Column(db.Date, nullable=True)
    gravite = db.Column(db.String(20), nullable=False, default="Moyenne")
    statut = db.Column(db.String(20), nullable=False, default="Ouvert")
    assignee_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
