# sogas_rh/services/employees.py
"""
Employee directory: hire, read, update, archive.

An employee spans three co-owned rows (employees, employee_personal,
employee_contact) plus the affectation history; every write touches them in
one unit of work.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import func, or_, select, update

from sogas_rh.common import validation as v
from sogas_rh.common.auth import Identity
from sogas_rh.common.errors import ConflictError, NotFoundError, ValidationError
from sogas_rh.common.updates import compile_update
from sogas_rh.common.uow import unit_of_work
from sogas_rh.extensions import db
from sogas_rh.models.employee import (
    Employee, EmployeePersonal, EmployeeContact, EMPLOYEE_STATUSES, GENRES,
)
from sogas_rh.models.user import User
from sogas_rh.services import affectations
from sogas_rh.services.structure import check_placement_refs

log = logging.getLogger(__name__)

ARCHIVED = "Licencié"

_STRUCTURE_FIELDS = ("site_id", "department_id", "service_id", "team_id")

# update schema: field -> reader; grouped by owning table only for readability,
# compile_update() routes each field to the table that maps it.
_CORE_UPDATE = {
    "matricule": lambda d, n: v.opt_str(d, n, max_len=50),
    "nom": lambda d, n: v.opt_str(d, n),
    "prenom": lambda d, n: v.opt_str(d, n),
    "site_id": lambda d, n: v.as_int(d, n, min_value=1),
    "department_id": lambda d, n: v.as_int(d, n, min_value=1),
    "service_id": lambda d, n: v.as_int(d, n, min_value=1),
    "team_id": lambda d, n: v.as_int(d, n, min_value=1),
    "position": lambda d, n: v.opt_str(d, n, max_len=255),
    "fonction": lambda d, n: v.opt_str(d, n, max_len=255),
    "statut": lambda d, n: v.one_of(d, n, EMPLOYEE_STATUSES),
}
_PERSONAL_UPDATE = {
    "date_naissance": lambda d, n: v.as_date(d, n),
    "lieu_naissance": lambda d, n: v.opt_str(d, n),
    "nationalite": lambda d, n: v.opt_str(d, n),
    "genre": lambda d, n: v.one_of(d, n, GENRES),
    "nom_jeune_fille": lambda d, n: v.opt_str(d, n),
    "situation_familiale": lambda d, n: v.opt_str(d, n),
    "photo_url": lambda d, n: v.opt_str(d, n, max_len=255),
}
_CONTACT_UPDATE = {
    "adresse_complete": lambda d, n: v.opt_str(d, n),
    "telephone_principal": lambda d, n: v.opt_str(d, n, max_len=50),
    "telephone_whatsapp": lambda d, n: v.opt_str(d, n, max_len=50),
    "email_personnel": lambda d, n: v.email(d, n),
    "contact_urgence_nom": lambda d, n: v.opt_str(d, n, max_len=255),
    "contact_urgence_telephone": lambda d, n: v.opt_str(d, n, max_len=50),
}
# may be cleared with null / ""
_NULLABLE = {
    "nom_jeune_fille", "situation_familiale", "adresse_complete",
    "telephone_whatsapp", "email_personnel", "photo_url",
}


# ---------- schemas ----------
@dataclass(frozen=True)
class EmployeeCreate:
    matricule: str
    nom: str
    prenom: str
    genre: str
    date_naissance: date
    site_id: int
    department_id: int
    service_id: int
    team_id: int
    position: str
    fonction: str
    telephone_principal: str
    contact_urgence_nom: str
    contact_urgence_telephone: str
    user_id: Optional[int] = None
    lieu_naissance: Optional[str] = None
    nationalite: Optional[str] = None
    adresse_complete: Optional[str] = None
    email_personnel: Optional[str] = None


@dataclass(frozen=True)
class EmployeeUpdate:
    changes: dict = field(default_factory=dict)
    motif_changement: Optional[str] = None
    commentaire_changement: Optional[str] = None


def parse_employee_create(payload) -> EmployeeCreate:
    d = v.body(payload)
    v.reject_unknown(d, EmployeeCreate.__dataclass_fields__.keys())
    return EmployeeCreate(
        matricule=v.require(d, "matricule", max_len=50),
        nom=v.require(d, "nom"),
        prenom=v.require(d, "prenom"),
        genre=v.one_of(d, "genre", GENRES, required=True),
        date_naissance=v.as_date(d, "date_naissance", required=True),
        site_id=v.as_int(d, "site_id", required=True, min_value=1),
        department_id=v.as_int(d, "department_id", required=True, min_value=1),
        service_id=v.as_int(d, "service_id", required=True, min_value=1),
        team_id=v.as_int(d, "team_id", required=True, min_value=1),
        position=v.require(d, "position", max_len=255),
        fonction=v.require(d, "fonction", max_len=255),
        telephone_principal=v.require(d, "telephone_principal", max_len=50),
        contact_urgence_nom=v.require(d, "contact_urgence_nom", max_len=255),
        contact_urgence_telephone=v.require(d, "contact_urgence_telephone", max_len=50),
        user_id=v.as_int(d, "user_id", min_value=1),
        lieu_naissance=v.opt_str(d, "lieu_naissance"),
        nationalite=v.opt_str(d, "nationalite"),
        adresse_complete=v.opt_str(d, "adresse_complete"),
        email_personnel=v.email(d, "email_personnel"),
    )


def parse_employee_update(payload) -> EmployeeUpdate:
    d = v.body(payload)
    readers = {**_CORE_UPDATE, **_PERSONAL_UPDATE, **_CONTACT_UPDATE}
    v.reject_unknown(d, (*readers, "user_id", "motif_changement", "commentaire_changement"))
    if not d:
        raise ValidationError("Aucun champ à modifier fourni.")

    changes = {}
    for name, read in readers.items():
        if name not in d:
            continue
        val = read(d, name)
        if val is None and name not in _NULLABLE:
            raise ValidationError(f'"{name}" ne peut pas être vide.')
        changes[name] = val
    if "user_id" in d:
        changes["user_id"] = v.as_int(d, "user_id", min_value=1)
    if changes.get("statut") == ARCHIVED:
        raise ValidationError("Le statut \"Licencié\" s'applique par archivage (DELETE /api/employee/:id).")

    return EmployeeUpdate(
        changes=changes,
        motif_changement=v.opt_str(d, "motif_changement", max_len=255),
        commentaire_changement=v.opt_str(d, "commentaire_changement"),
    )


# ---------- helpers ----------
def _check_user_link(user_id: Optional[int], employee_id: Optional[int] = None):
    if user_id is None:
        return
    if db.session.get(User, user_id) is None:
        raise NotFoundError("Compte utilisateur (user_id) non trouvé.")
    q = select(Employee.id).where(Employee.user_id == user_id)
    if employee_id is not None:
        q = q.where(Employee.id != employee_id)
    if db.session.execute(q).first() is not None:
        raise ConflictError("Ce compte utilisateur est déjà lié à un autre employé.")


def _matricule_taken(matricule: str, employee_id: Optional[int] = None) -> bool:
    q = select(Employee.id).where(Employee.matricule == matricule)
    if employee_id is not None:
        q = q.where(Employee.id != employee_id)
    return db.session.execute(q).first() is not None


def _iso(d):
    return d.isoformat() if d else None


def to_dict(x: Employee) -> dict:
    p, c = x.personal, x.contact
    return {
        "id": x.id,
        "matricule": x.matricule,
        "nom": x.nom,
        "prenom": x.prenom,
        "statut": x.statut,
        "site_id": x.site_id,
        "nom_site": x.site.nom if x.site else None,
        "department_id": x.department_id,
        "nom_departement": x.department.nom if x.department else None,
        "service_id": x.service_id,
        "nom_service": x.service.nom if x.service else None,
        "team_id": x.team_id,
        "nom_equipe": x.team.nom if x.team else None,
        "position": x.position,
        "fonction": x.fonction,
        "user_id": x.user_id,
        "date_fin_contrat": _iso(x.date_fin_contrat),
        # personal
        "date_naissance": _iso(p.date_naissance) if p else None,
        "lieu_naissance": p.lieu_naissance if p else None,
        "genre": p.genre if p else None,
        "nationalite": p.nationalite if p else None,
        "nom_jeune_fille": p.nom_jeune_fille if p else None,
        "situation_familiale": p.situation_familiale if p else None,
        "photo_url": p.photo_url if p else None,
        # contact
        "adresse_complete": c.adresse_complete if c else None,
        "telephone_principal": c.telephone_principal if c else None,
        "telephone_whatsapp": c.telephone_whatsapp if c else None,
        "email_personnel": c.email_personnel if c else None,
        "contact_urgence_nom": c.contact_urgence_nom if c else None,
        "contact_urgence_telephone": c.contact_urgence_telephone if c else None,
        "created_at": x.created_at.isoformat() if x.created_at else None,
    }


def require_employee(employee_id: int, active: bool = False) -> Employee:
    emp = db.session.get(Employee, employee_id)
    if emp is None or (active and emp.statut != "Actif"):
        raise NotFoundError("Employé actif non trouvé." if active else "Employé non trouvé.")
    return emp


# ---------- operations ----------
def create_employee(payload, actor: Identity, today: Optional[date] = None) -> int:
    data = parse_employee_create(payload)
    with unit_of_work() as s:
        if _matricule_taken(data.matricule):
            raise ConflictError("Ce matricule existe déjà. Unicité requise.")
        check_placement_refs(data.site_id, data.department_id, data.service_id, data.team_id)
        _check_user_link(data.user_id)

        emp = Employee(
            matricule=data.matricule,
            nom=data.nom,
            prenom=data.prenom,
            statut="Actif",
            site_id=data.site_id,
            department_id=data.department_id,
            service_id=data.service_id,
            team_id=data.team_id,
            position=data.position,
            fonction=data.fonction,
            user_id=data.user_id,
        )
        s.add(emp)
        s.flush()  # emp.id

        s.add(EmployeePersonal(
            employee_id=emp.id,
            date_naissance=data.date_naissance,
            genre=data.genre,
            lieu_naissance=data.lieu_naissance,
            nationalite=data.nationalite,
        ))
        s.add(EmployeeContact(
            employee_id=emp.id,
            telephone_principal=data.telephone_principal,
            contact_urgence_nom=data.contact_urgence_nom,
            contact_urgence_telephone=data.contact_urgence_telephone,
            adresse_complete=data.adresse_complete,
            email_personnel=data.email_personnel,
        ))
        affectations.open_initial(emp, actor.id, today)
        s.flush()
        log.info("employee hired id=%s matricule=%s by user=%s", emp.id, emp.matricule, actor.id)
        return emp.id


def get_employee(employee_id: int) -> dict:
    return to_dict(require_employee(employee_id))


def list_employees(statut=None, site_id=None, department_id=None, q=None, page=1, size=20):
    stmt = select(Employee)
    if statut:
        stmt = stmt.where(Employee.statut == statut)
    if site_id:
        stmt = stmt.where(Employee.site_id == site_id)
    if department_id:
        stmt = stmt.where(Employee.department_id == department_id)
    if q:
        like = f"%{q}%"
        stmt = stmt.where(or_(Employee.matricule.ilike(like),
                              Employee.nom.ilike(like),
                              Employee.prenom.ilike(like)))
    total = db.session.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    items = db.session.execute(
        stmt.order_by(Employee.id.desc()).offset((page - 1) * size).limit(size)
    ).unique().scalars().all()
    return [to_dict(x) for x in items], total


def update_employee(employee_id: int, payload, actor: Identity, today: Optional[date] = None) -> bool:
    """Apply a partial update; returns True when the affectation history moved."""
    data = parse_employee_update(payload)
    changes = data.changes
    with unit_of_work() as s:
        emp = affectations.lock_employee(employee_id)
        if emp is None:
            raise NotFoundError("Employé non trouvé.")
        # an archived employee keeps a closed history and no user link
        if emp.statut == ARCHIVED and (
            affectations.placement_changed(emp.placement(), changes)
            or "statut" in changes
            or changes.get("user_id") is not None
        ):
            raise ConflictError("Employé archivé: affectation, statut ou compte utilisateur non modifiables.")

        check_placement_refs(**{f: changes.get(f) for f in _STRUCTURE_FIELDS})
        if "matricule" in changes and _matricule_taken(changes["matricule"], emp.id):
            raise ConflictError("Ce matricule existe déjà. Unicité requise.")
        if "user_id" in changes:
            _check_user_link(changes["user_id"], emp.id)

        moved = affectations.record_change(
            emp, changes, data.motif_changement, data.commentaire_changement, actor.id, today
        )

        for model, key in ((Employee, "id"), (EmployeePersonal, "employee_id"), (EmployeeContact, "employee_id")):
            stmt = compile_update(model, key, emp.id, changes)
            if stmt is not None:
                s.execute(stmt)

        log.info("employee updated id=%s fields=%s affectation_changed=%s",
                 emp.id, sorted(changes), moved)
        return moved


def archive_employee(employee_id: int, actor: Identity, today: Optional[date] = None):
    """Soft delete: statut -> Licencié, history closed today, user link severed."""
    with unit_of_work() as s:
        affectations.lock_employee(employee_id)
        res = s.execute(
            update(Employee)
            .where(Employee.id == employee_id, Employee.statut != ARCHIVED)
            .values(statut=ARCHIVED, user_id=None)
            .execution_options(synchronize_session="evaluate")
        )
        if res.rowcount == 0:
            raise NotFoundError("Employé non trouvé.")
        affectations.close_on_archive(employee_id, actor.id, today or date.today())
        log.info("employee archived id=%s by user=%s", employee_id, actor.id)


def employee_history(employee_id: int) -> list[dict]:
    require_employee(employee_id)
    return [affectations.to_dict(r) for r in affectations.history(employee_id)]
