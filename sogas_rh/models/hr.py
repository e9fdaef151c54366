# sogas_rh/models/hr.py
from datetime import datetime

from sogas_rh.extensions import db

CONTRACT_TYPES = ("CDI", "CDD", "Stage", "Consultant", "Saisonnier", "Apprentissage")
SANCTION_TYPES = (
    "Avertissement oral",
    "Avertissement écrit",
    "Blâme",
    "Mise à pied",
    "Rétrogradation",
    "Licenciement",
)
VISIT_TYPES = ("Embauche", "Périodique", "Reprise", "Spontanée")
VISIT_RESULTS = ("Apte", "Apte avec réserves", "Inapte temporaire", "Inapte définitif")
ACCIDENT_SEVERITIES = ("Bénin", "Moyen", "Grave", "Mortel")


class Contract(db.Model):
    __tablename__ = "contracts"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False, index=True)
    type_contrat = db.Column(db.String(20), nullable=False)
    date_debut = db.Column(db.Date, nullable=False)
    date_fin_prevue = db.Column(db.Date, nullable=True)     # always NULL for CDI
    date_fin_effective = db.Column(db.Date, nullable=True)
    position = db.Column(db.String(255), nullable=False)
    salaire_de_base = db.Column(db.Numeric(14, 2), nullable=False)
    notes_rh = db.Column(db.Text, nullable=True)
    document_url = db.Column(db.String(255), nullable=True)
    is_avenant = db.Column(db.Boolean, nullable=False, default=False)
    parent_contract_id = db.Column(db.Integer, db.ForeignKey("contracts.id", ondelete="RESTRICT"), nullable=True)
    statut = db.Column(db.String(20), nullable=False, default="Actif")  # Actif|Terminé
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_contract_emp_statut", "employee_id", "statut", "is_avenant"),
    )

    parent = db.relationship("Contract", remote_side=[id])


class Sanction(db.Model):
    __tablename__ = "sanctions"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False, index=True)
    type_sanction = db.Column(db.String(40), nullable=False)
    date_constatation = db.Column(db.Date, nullable=False)
    date_effet = db.Column(db.Date, nullable=False)
    jours_mise_a_pied = db.Column(db.Integer, nullable=False, default=0)
    motif_detaille = db.Column(db.Text, nullable=False)
    procedure_suivie = db.Column(db.String(255), nullable=True)
    document_url = db.Column(db.String(255), nullable=True)
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class MedicalVisit(db.Model):
    __tablename__ = "medical_visits"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False, index=True)
    type_visite = db.Column(db.String(20), nullable=False)
    date_visite = db.Column(db.Date, nullable=False)
    medecin = db.Column(db.String(255), nullable=True)
    resultat = db.Column(db.String(30), nullable=False)
    date_prochaine_visite = db.Column(db.Date, nullable=True)
    observations = db.Column(db.Text, nullable=True)
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class WorkAccident(db.Model):
    __tablename__ = "work_accidents"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False, index=True)
    date_accident = db.Column(db.Date, nullable=False)
    lieu = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=False)
    gravite = db.Column(db.String(20), nullable=False)
    arret_travail = db.Column(db.Boolean, nullable=False, default=False)
    date_debut_arret = db.Column(db.Date, nullable=True)
    date_fin_arret = db.Column(db.Date, nullable=True)
    jours_arret = db.Column(db.Integer, nullable=False, default=0)
    declared_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
