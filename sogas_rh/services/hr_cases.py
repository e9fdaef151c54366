# sogas_rh/services/hr_cases.py
"""
HR case files: contracts (and amendments), sanctions, medical visits and
work accidents. Each create is one validated insert plus its side effects
on the employee record, all in one unit of work.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update

from sogas_rh.common import validation as v
from sogas_rh.common.auth import Identity
from sogas_rh.common.errors import ConflictError, NotFoundError, ValidationError
from sogas_rh.common.updates import compile_update
from sogas_rh.common.uow import unit_of_work
from sogas_rh.extensions import db
from sogas_rh.models.employee import Employee
from sogas_rh.models.hr import (
    Contract, Sanction, MedicalVisit, WorkAccident,
    CONTRACT_TYPES, SANCTION_TYPES, VISIT_TYPES, VISIT_RESULTS, ACCIDENT_SEVERITIES,
)
from sogas_rh.services import affectations
from sogas_rh.services.employees import require_employee, ARCHIVED

log = logging.getLogger(__name__)

ACTIVE = "Actif"
ENDED = "Terminé"
TERMINATION = "Licenciement"
SUSPENSION = "Mise à pied"
SICK = "Maladie"


# ---------- schemas ----------
@dataclass(frozen=True)
class ContractInput:
    employee_id: int
    type_contrat: str
    date_debut: date
    date_fin_prevue: Optional[date]
    position: str
    salaire_de_base: Decimal
    notes_rh: Optional[str]
    document_url: Optional[str]
    is_avenant: bool
    parent_contract_id: Optional[int]


@dataclass(frozen=True)
class SanctionInput:
    employee_id: int
    type_sanction: str
    date_constatation: date
    date_effet: date
    jours_mise_a_pied: int
    motif_detaille: str
    procedure_suivie: Optional[str]
    document_url: Optional[str]


@dataclass(frozen=True)
class MedicalVisitInput:
    employee_id: int
    type_visite: str
    date_visite: date
    medecin: Optional[str]
    resultat: str
    date_prochaine_visite: Optional[date]
    observations: Optional[str]


@dataclass(frozen=True)
class AccidentInput:
    employee_id: int
    date_accident: date
    lieu: Optional[str]
    description: str
    gravite: str
    arret_travail: bool
    date_debut_arret: Optional[date]
    date_fin_arret: Optional[date]

    @property
    def jours_arret(self) -> int:
        if not self.arret_travail:
            return 0
        return (self.date_fin_arret - self.date_debut_arret).days + 1


def parse_contract(payload) -> ContractInput:
    d = v.body(payload)
    v.reject_unknown(d, ContractInput.__dataclass_fields__.keys())
    data = ContractInput(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        type_contrat=v.one_of(d, "type_contrat", CONTRACT_TYPES, required=True),
        date_debut=v.as_date(d, "date_debut", required=True),
        date_fin_prevue=v.as_date(d, "date_fin_prevue"),
        position=v.require(d, "position", max_len=255),
        salaire_de_base=v.as_decimal(d, "salaire_de_base", required=True, min_value=0),
        notes_rh=v.opt_str(d, "notes_rh"),
        document_url=v.opt_str(d, "document_url", max_len=255),
        is_avenant=v.as_bool(d, "is_avenant", default=False),
        parent_contract_id=v.as_int(d, "parent_contract_id", min_value=1),
    )
    if data.type_contrat == "CDI" and data.date_fin_prevue is not None:
        raise ValidationError('"date_fin_prevue" doit être vide pour un CDI.')
    if data.date_fin_prevue is not None and data.date_fin_prevue < data.date_debut:
        raise ValidationError('"date_fin_prevue" doit être postérieure ou égale à "date_debut".')
    if data.is_avenant and data.parent_contract_id is None:
        raise ValidationError('"parent_contract_id" est obligatoire pour un avenant.')
    if not data.is_avenant and data.parent_contract_id is not None:
        raise ValidationError('"parent_contract_id" n\'est autorisé que pour un avenant.')
    return data


def parse_sanction(payload) -> SanctionInput:
    d = v.body(payload)
    v.reject_unknown(d, SanctionInput.__dataclass_fields__.keys())
    data = SanctionInput(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        type_sanction=v.one_of(d, "type_sanction", SANCTION_TYPES, required=True),
        date_constatation=v.as_date(d, "date_constatation", required=True),
        date_effet=v.as_date(d, "date_effet", required=True),
        jours_mise_a_pied=v.as_int(d, "jours_mise_a_pied", min_value=0, max_value=30, default=0),
        motif_detaille=v.require(d, "motif_detaille", min_len=10),
        procedure_suivie=v.opt_str(d, "procedure_suivie", max_len=255),
        document_url=v.opt_str(d, "document_url", max_len=255),
    )
    if data.date_effet < data.date_constatation:
        raise ValidationError('"date_effet" doit être postérieure ou égale à "date_constatation".')
    if data.type_sanction == SUSPENSION and data.jours_mise_a_pied < 1:
        raise ValidationError('"jours_mise_a_pied" est obligatoire (au moins 1) pour une mise à pied.')
    return data


def parse_medical_visit(payload) -> MedicalVisitInput:
    d = v.body(payload)
    v.reject_unknown(d, MedicalVisitInput.__dataclass_fields__.keys())
    data = MedicalVisitInput(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        type_visite=v.one_of(d, "type_visite", VISIT_TYPES, required=True),
        date_visite=v.as_date(d, "date_visite", required=True),
        medecin=v.opt_str(d, "medecin", max_len=255),
        resultat=v.one_of(d, "resultat", VISIT_RESULTS, required=True),
        date_prochaine_visite=v.as_date(d, "date_prochaine_visite"),
        observations=v.opt_str(d, "observations"),
    )
    if data.date_prochaine_visite is not None and data.date_prochaine_visite < data.date_visite:
        raise ValidationError('"date_prochaine_visite" doit être postérieure ou égale à "date_visite".')
    return data


def parse_accident(payload) -> AccidentInput:
    d = v.body(payload)
    v.reject_unknown(d, AccidentInput.__dataclass_fields__.keys())
    data = AccidentInput(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        date_accident=v.as_date(d, "date_accident", required=True),
        lieu=v.opt_str(d, "lieu", max_len=255),
        description=v.require(d, "description"),
        gravite=v.one_of(d, "gravite", ACCIDENT_SEVERITIES, required=True),
        arret_travail=v.as_bool(d, "arret_travail", default=False),
        date_debut_arret=v.as_date(d, "date_debut_arret"),
        date_fin_arret=v.as_date(d, "date_fin_arret"),
    )
    if data.arret_travail:
        if data.date_debut_arret is None or data.date_fin_arret is None:
            raise ValidationError('"date_debut_arret" et "date_fin_arret" sont obligatoires en cas d\'arrêt de travail.')
        if data.date_fin_arret < data.date_debut_arret:
            raise ValidationError('"date_fin_arret" doit être postérieure ou égale à "date_debut_arret".')
    elif data.date_debut_arret is not None or data.date_fin_arret is not None:
        raise ValidationError("Les dates d'arrêt ne sont autorisées qu'avec un arrêt de travail.")
    return data


# ---------- contracts ----------
def _active_main_contract(employee_id: int) -> Optional[Contract]:
    return db.session.execute(
        select(Contract).where(
            Contract.employee_id == employee_id,
            Contract.statut == ACTIVE,
            Contract.is_avenant.is_(False),
        )
    ).scalars().first()


def create_contract(payload, actor: Identity, today: Optional[date] = None) -> int:
    data = parse_contract(payload)
    with unit_of_work() as s:
        emp = affectations.lock_employee(data.employee_id)
        if emp is None or emp.statut != ACTIVE:
            raise NotFoundError("Employé actif non trouvé.")

        if data.is_avenant:
            parent = s.get(Contract, data.parent_contract_id)
            if parent is None or parent.employee_id != emp.id:
                raise NotFoundError("Contrat parent non trouvé pour cet employé.")
        elif _active_main_contract(emp.id) is not None:
            raise ConflictError("Un contrat actif (non avenant) existe déjà pour cet employé.")

        c = Contract(
            employee_id=emp.id,
            type_contrat=data.type_contrat,
            date_debut=data.date_debut,
            date_fin_prevue=data.date_fin_prevue,
            position=data.position,
            salaire_de_base=data.salaire_de_base,
            notes_rh=data.notes_rh,
            document_url=data.document_url,
            is_avenant=data.is_avenant,
            parent_contract_id=data.parent_contract_id,
            statut=ACTIVE,
            created_by_user_id=actor.id,
        )
        s.add(c)
        s.flush()

        if not data.is_avenant:
            changes = {"position": data.position}
            moved = affectations.record_change(
                emp, changes, f"Nouveau contrat {data.type_contrat}", None, actor.id, today
            )
            if moved:
                s.execute(compile_update(Employee, "id", emp.id, changes))

        log.info("contract created id=%s employee=%s type=%s avenant=%s",
                 c.id, emp.id, c.type_contrat, c.is_avenant)
        return c.id


def contract_dict(c: Contract) -> dict:
    return {
        "id": c.id,
        "employee_id": c.employee_id,
        "type_contrat": c.type_contrat,
        "date_debut": c.date_debut.isoformat(),
        "date_fin_prevue": c.date_fin_prevue.isoformat() if c.date_fin_prevue else None,
        "date_fin_effective": c.date_fin_effective.isoformat() if c.date_fin_effective else None,
        "position": c.position,
        "salaire_de_base": float(c.salaire_de_base),
        "is_avenant": c.is_avenant,
        "parent_contract_id": c.parent_contract_id,
        "statut": c.statut,
        "document_url": c.document_url,
    }


def list_contracts(employee_id: Optional[int] = None) -> list[dict]:
    stmt = select(Contract)
    if employee_id:
        stmt = stmt.where(Contract.employee_id == employee_id)
    rows = db.session.execute(stmt.order_by(Contract.date_debut.desc(), Contract.id.desc())).scalars()
    return [contract_dict(c) for c in rows]


# ---------- sanctions ----------
def create_sanction(payload, actor: Identity) -> int:
    data = parse_sanction(payload)
    with unit_of_work() as s:
        emp = affectations.lock_employee(data.employee_id)
        if emp is None:
            raise NotFoundError("Employé non trouvé.")

        row = Sanction(
            employee_id=emp.id,
            type_sanction=data.type_sanction,
            date_constatation=data.date_constatation,
            date_effet=data.date_effet,
            jours_mise_a_pied=data.jours_mise_a_pied,
            motif_detaille=data.motif_detaille,
            procedure_suivie=data.procedure_suivie,
            document_url=data.document_url,
            created_by_user_id=actor.id,
        )
        s.add(row)
        s.flush()

        if data.type_sanction == TERMINATION:
            _terminate(emp.id, data.date_effet, actor)

        log.info("sanction created id=%s employee=%s type=%s", row.id, emp.id, row.type_sanction)
        return row.id


def _terminate(employee_id: int, effective: date, actor: Identity):
    s = db.session
    s.execute(
        update(Employee)
        .where(Employee.id == employee_id)
        .values(statut=ARCHIVED, date_fin_contrat=effective, user_id=None)
        .execution_options(synchronize_session="evaluate")
    )
    s.execute(
        update(Contract)
        .where(Contract.employee_id == employee_id,
               Contract.statut == ACTIVE,
               Contract.is_avenant.is_(False))
        .values(statut=ENDED, date_fin_effective=effective)
        .execution_options(synchronize_session="evaluate")
    )
    affectations.close_on_archive(employee_id, actor.id, effective, reason="Sanction Licenciement")
    log.warning("employee terminated by sanction employee=%s effective=%s", employee_id, effective)


# ---------- medical ----------
def create_medical_visit(payload, actor: Identity) -> int:
    data = parse_medical_visit(payload)
    with unit_of_work() as s:
        require_employee(data.employee_id)
        row = MedicalVisit(
            employee_id=data.employee_id,
            type_visite=data.type_visite,
            date_visite=data.date_visite,
            medecin=data.medecin,
            resultat=data.resultat,
            date_prochaine_visite=data.date_prochaine_visite,
            observations=data.observations,
            created_by_user_id=actor.id,
        )
        s.add(row)
        s.flush()
        log.info("medical visit id=%s employee=%s resultat=%s", row.id, row.employee_id, row.resultat)
        return row.id


# ---------- accidents ----------
def create_work_accident(payload, actor: Identity) -> int:
    data = parse_accident(payload)
    with unit_of_work() as s:
        require_employee(data.employee_id)
        row = WorkAccident(
            employee_id=data.employee_id,
            date_accident=data.date_accident,
            lieu=data.lieu,
            description=data.description,
            gravite=data.gravite,
            arret_travail=data.arret_travail,
            date_debut_arret=data.date_debut_arret,
            date_fin_arret=data.date_fin_arret,
            jours_arret=data.jours_arret,
            declared_by_user_id=actor.id,
        )
        s.add(row)
        s.flush()
        if data.arret_travail:
            s.execute(
                update(Employee)
                .where(Employee.id == data.employee_id, Employee.statut == ACTIVE)
                .values(statut=SICK)
                .execution_options(synchronize_session="evaluate")
            )
        log.info("work accident id=%s employee=%s gravite=%s jours_arret=%s",
                 row.id, row.employee_id, row.gravite, row.jours_arret)
        return row.id
