from datetime import datetime
from sogas_rh.extensions import db

EMPLOYEE_STATUSES = ("Actif", "Congé", "Maladie", "Suspendu", "Licencié")
GENRES = ("M", "F", "Autre")

# fields whose change opens a new affectation record
PLACEMENT_FIELDS = ("site_id", "department_id", "service_id", "team_id", "position", "fonction")


class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    matricule = db.Column(db.String(50), unique=True, nullable=False)
    nom    = db.Column(db.String(120), nullable=False)
    prenom = db.Column(db.String(120), nullable=False)
    statut = db.Column(db.String(16), default="Actif", nullable=False)

    # current placement
    site_id       = db.Column(db.Integer, db.ForeignKey("sites.id", ondelete="RESTRICT"), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False)
    service_id    = db.Column(db.Integer, db.ForeignKey("services.id", ondelete="RESTRICT"), nullable=False)
    team_id       = db.Column(db.Integer, db.ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False)
    position = db.Column(db.String(255), nullable=False)
    fonction = db.Column(db.String(255), nullable=False)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)
    date_fin_contrat = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_emp_site_id", "site_id"),
        db.Index("ix_emp_dept_id", "department_id"),
        db.Index("ix_emp_statut", "statut"),
    )

    site       = db.relationship("Site", lazy="joined")
    department = db.relationship("Department", lazy="joined")
    service    = db.relationship("Service", lazy="joined")
    team       = db.relationship("Team", lazy="joined")
    personal   = db.relationship("EmployeePersonal", uselist=False, lazy="joined",
                                 back_populates="employee", cascade="all, delete-orphan")
    contact    = db.relationship("EmployeeContact", uselist=False, lazy="joined",
                                 back_populates="employee", cascade="all, delete-orphan")

    def placement(self) -> dict:
        return {f: getattr(self, f) for f in PLACEMENT_FIELDS}


class EmployeePersonal(db.Model):
    __tablename__ = "employee_personal"

    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True)
    date_naissance = db.Column(db.Date, nullable=True)
    lieu_naissance = db.Column(db.String(120), nullable=True)
    nationalite = db.Column(db.String(80), nullable=True)
    genre = db.Column(db.String(8), nullable=True)
    nom_jeune_fille = db.Column(db.String(120), nullable=True)
    situation_familiale = db.Column(db.String(40), nullable=True)
    photo_url = db.Column(db.String(255), nullable=True)

    employee = db.relationship("Employee", back_populates="personal")


class EmployeeContact(db.Model):
    __tablename__ = "employee_contact"

    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True)
    adresse_complete = db.Column(db.Text, nullable=True)
    telephone_principal = db.Column(db.String(50), nullable=True)
    telephone_whatsapp = db.Column(db.String(50), nullable=True)
    email_personnel = db.Column(db.String(255), nullable=True)
    contact_urgence_nom = db.Column(db.String(255), nullable=True)
    contact_urgence_telephone = db.Column(db.String(50), nullable=True)

    employee = db.relationship("Employee", back_populates="contact")
