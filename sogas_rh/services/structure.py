# sogas_rh/services/structure.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import select

from sogas_rh.common import validation as v
from sogas_rh.common.errors import ConflictError, NotFoundError
from sogas_rh.common.uow import unit_of_work
from sogas_rh.extensions import db
from sogas_rh.models.structure import Site, Department, Service, Team

log = logging.getLogger(__name__)


# ---------- schemas ----------
@dataclass(frozen=True)
class SiteInput:
    nom: str
    code_site: str
    adresse: Optional[str]


@dataclass(frozen=True)
class DepartmentInput:
    nom: str
    code_interne: str
    site_id: int
    budget_alloue: Decimal
    objectifs: Optional[str]


@dataclass(frozen=True)
class ServiceInput:
    nom: str
    code_metier: str
    department_id: int


@dataclass(frozen=True)
class TeamInput:
    nom: str
    service_id: int
    code_equipe: Optional[str]
    specialite: Optional[str]


def parse_site(payload) -> SiteInput:
    d = v.body(payload)
    v.reject_unknown(d, ("nom", "code_site", "adresse"))
    return SiteInput(
        nom=v.require(d, "nom"),
        code_site=v.require(d, "code_site", max_len=50),
        adresse=v.opt_str(d, "adresse"),
    )


def parse_department(payload) -> DepartmentInput:
    d = v.body(payload)
    v.reject_unknown(d, ("nom", "code_interne", "site_id", "budget_alloue", "objectifs"))
    return DepartmentInput(
        nom=v.require(d, "nom"),
        code_interne=v.require(d, "code_interne", max_len=50),
        site_id=v.as_int(d, "site_id", required=True, min_value=1),
        budget_alloue=v.as_decimal(d, "budget_alloue", min_value=0, default=0),
        objectifs=v.opt_str(d, "objectifs"),
    )


def parse_service(payload) -> ServiceInput:
    d = v.body(payload)
    v.reject_unknown(d, ("nom", "code_metier", "department_id"))
    return ServiceInput(
        nom=v.require(d, "nom"),
        code_metier=v.require(d, "code_metier", max_len=50),
        department_id=v.as_int(d, "department_id", required=True, min_value=1),
    )


def parse_team(payload) -> TeamInput:
    d = v.body(payload)
    v.reject_unknown(d, ("nom", "service_id", "code_equipe", "specialite"))
    return TeamInput(
        nom=v.require(d, "nom"),
        service_id=v.as_int(d, "service_id", required=True, min_value=1),
        code_equipe=v.opt_str(d, "code_equipe", max_len=50),
        specialite=v.opt_str(d, "specialite"),
    )


# ---------- helpers ----------
def _exists(model, **by) -> bool:
    return db.session.execute(select(model.id).filter_by(**by).limit(1)).first() is not None


def check_placement_refs(site_id=None, department_id=None, service_id=None, team_id=None):
    """Every given structure id must reference an existing row."""
    for val, model, label in (
        (site_id, Site, "Site"),
        (department_id, Department, "Département"),
        (service_id, Service, "Service"),
        (team_id, Team, "Équipe"),
    ):
        if val is not None and db.session.get(model, val) is None:
            raise NotFoundError(
                f"Erreur: L'affectation {label} (id={val}) n'existe pas."
            )


# ---------- operations ----------
def create_site(payload) -> int:
    data = parse_site(payload)
    with unit_of_work() as s:
        if _exists(Site, code_site=data.code_site):
            raise ConflictError("Un site avec ce code existe déjà.")
        obj = Site(nom=data.nom, code_site=data.code_site, adresse=data.adresse)
        s.add(obj)
        s.flush()
        log.info("site created id=%s code=%s", obj.id, obj.code_site)
        return obj.id


def create_department(payload) -> int:
    data = parse_department(payload)
    with unit_of_work() as s:
        if db.session.get(Site, data.site_id) is None:
            raise NotFoundError("Le site d'affectation spécifié (site_id) n'existe pas.")
        if _exists(Department, code_interne=data.code_interne):
            raise ConflictError("Un département avec ce code interne existe déjà.")
        obj = Department(
            nom=data.nom,
            code_interne=data.code_interne,
            site_id=data.site_id,
            budget_alloue=data.budget_alloue,
            objectifs=data.objectifs,
        )
        s.add(obj)
        s.flush()
        log.info("department created id=%s code=%s", obj.id, obj.code_interne)
        return obj.id


def create_service(payload) -> int:
    data = parse_service(payload)
    with unit_of_work() as s:
        if db.session.get(Department, data.department_id) is None:
            raise NotFoundError("Le département parent spécifié (department_id) n'existe pas.")
        if _exists(Service, code_metier=data.code_metier):
            raise ConflictError("Un service avec ce code métier existe déjà.")
        obj = Service(nom=data.nom, code_metier=data.code_metier, department_id=data.department_id)
        s.add(obj)
        s.flush()
        log.info("service created id=%s code=%s", obj.id, obj.code_metier)
        return obj.id


def create_team(payload) -> int:
    data = parse_team(payload)
    with unit_of_work() as s:
        if db.session.get(Service, data.service_id) is None:
            raise NotFoundError("Le service parent spécifié (service_id) n'existe pas.")
        if data.code_equipe and _exists(Team, code_equipe=data.code_equipe):
            raise ConflictError("Une équipe avec ce code existe déjà.")
        obj = Team(
            nom=data.nom,
            code_equipe=data.code_equipe,
            specialite=data.specialite,
            service_id=data.service_id,
        )
        s.add(obj)
        s.flush()
        log.info("team created id=%s service=%s", obj.id, obj.service_id)
        return obj.id


# ---------- listings (parent name joined in) ----------
def list_sites() -> list[dict]:
    rows = db.session.execute(select(Site).order_by(Site.id.desc())).scalars()
    return [{"id": x.id, "nom": x.nom, "code_site": x.code_site, "adresse": x.adresse} for x in rows]


def list_departments() -> list[dict]:
    stmt = (
        select(Department, Site)
        .join(Site, Department.site_id == Site.id)
        .order_by(Department.id.desc())
    )
    return [
        {
            "id": d.id,
            "nom": d.nom,
            "code_interne": d.code_interne,
            "budget_alloue": float(d.budget_alloue or 0),
            "objectifs": d.objectifs,
            "site_id": d.site_id,
            "nom_site": st.nom,
            "code_site": st.code_site,
        }
        for d, st in db.session.execute(stmt)
    ]


def list_services() -> list[dict]:
    stmt = (
        select(Service, Department)
        .join(Department, Service.department_id == Department.id)
        .order_by(Service.id.desc())
    )
    return [
        {
            "id": sv.id,
            "nom": sv.nom,
            "code_metier": sv.code_metier,
            "department_id": sv.department_id,
            "nom_departement": d.nom,
            "code_departement": d.code_interne,
        }
        for sv, d in db.session.execute(stmt)
    ]


def list_teams() -> list[dict]:
    stmt = (
        select(Team, Service)
        .join(Service, Team.service_id == Service.id)
        .order_by(Team.id.desc())
    )
    return [
        {
            "id": t.id,
            "nom": t.nom,
            "code_equipe": t.code_equipe,
            "specialite": t.specialite,
            "service_id": t.service_id,
            "nom_service": sv.nom,
            "code_service": sv.code_metier,
        }
        for t, sv in db.session.execute(stmt)
    ]
