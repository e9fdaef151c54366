# sogas_rh/models/structure.py
"""
Organisation hierarchy: Site <- Department <- Service <- Team.

Every level carries a code that is unique at its level and a foreign key to
its parent. The hierarchy is append-only (no delete endpoints).
"""
from datetime import datetime

from sogas_rh.extensions import db


class Site(db.Model):
    __tablename__ = "sites"

    id = db.Column(db.Integer, primary_key=True)
    nom = db.Column(db.String(255), nullable=False)
    code_site = db.Column(db.String(50), unique=True, nullable=False)
    adresse = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Department(db.Model):
    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    site_id = db.Column(
        db.Integer,
        db.ForeignKey("sites.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    nom = db.Column(db.String(255), nullable=False)
    code_interne = db.Column(db.String(50), unique=True, nullable=False)
    budget_alloue = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    objectifs = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    site = db.relationship("Site", backref=db.backref("departments", lazy="dynamic"))


class Service(db.Model):
    __tablename__ = "services"

    id = db.Column(db.Integer, primary_key=True)
    department_id = db.Column(
        db.Integer,
        db.ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    nom = db.Column(db.String(255), nullable=False)
    code_metier = db.Column(db.String(50), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    department = db.relationship("Department", backref=db.backref("services", lazy="dynamic"))


class Team(db.Model):
    __tablename__ = "teams"

    id = db.Column(db.Integer, primary_key=True)
    service_id = db.Column(
        db.Integer,
        db.ForeignKey("services.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    nom = db.Column(db.String(255), nullable=False)
    # optional; unique when present (NULLs don't collide)
    code_equipe = db.Column(db.String(50), unique=True, nullable=True)
    specialite = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    service = db.relationship("Service", backref=db.backref("teams", lazy="dynamic"))
