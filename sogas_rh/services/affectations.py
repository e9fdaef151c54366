# sogas_rh/services/affectations.py
"""
Affectation (placement) history.

Invariant: once hired, an employee has exactly one open record
(date_fin IS NULL) until archived. Every function here runs inside the
caller's unit of work, after the employee row has been locked with
lock_employee(), so the close-then-insert pair is atomic with the live
employee update and concurrent changes for the same employee serialise.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import lazyload

from sogas_rh.common.errors import ValidationError
from sogas_rh.extensions import db
from sogas_rh.models.affectation import EmployeeAffectation
from sogas_rh.models.employee import Employee, PLACEMENT_FIELDS

log = logging.getLogger(__name__)

HIRING_MOTIF = "Embauche initiale"

# placement field -> (old snapshot column, new snapshot column)
_SNAPSHOT_COLUMNS = {
    "site_id":       ("site_id_ancien", "site_id_nouveau"),
    "department_id": ("department_id_ancien", "department_id_nouveau"),
    "service_id":    ("service_id_ancien", "service_id_nouveau"),
    "team_id":       ("team_id_ancien", "team_id_nouveau"),
    "position":      ("position_ancienne", "position_nouvelle"),
    "fonction":      ("fonction_ancienne", "fonction_nouvelle"),
}


def lock_employee(employee_id: int) -> Optional[Employee]:
    """SELECT ... FOR UPDATE on the employee row; serialises history mutations per employee."""
    stmt = (
        select(Employee)
        .where(Employee.id == employee_id)
        .options(lazyload("*"))
        .with_for_update(of=Employee)
        .execution_options(populate_existing=True)
    )
    return db.session.execute(stmt).scalar_one_or_none()


def open_record(employee_id: int) -> Optional[EmployeeAffectation]:
    stmt = (
        select(EmployeeAffectation)
        .where(EmployeeAffectation.employee_id == employee_id, EmployeeAffectation.date_fin.is_(None))
        .order_by(EmployeeAffectation.date_debut.desc(), EmployeeAffectation.id.desc())
    )
    return db.session.execute(stmt).scalars().first()


def history(employee_id: int) -> list[EmployeeAffectation]:
    stmt = (
        select(EmployeeAffectation)
        .where(EmployeeAffectation.employee_id == employee_id)
        .order_by(EmployeeAffectation.date_debut.asc(), EmployeeAffectation.id.asc())
    )
    return list(db.session.execute(stmt).scalars())


def placement_changed(current: Mapping, changes: Mapping) -> bool:
    """True if any placement field in `changes` differs from `current`. Absent fields count as unchanged."""
    for f in PLACEMENT_FIELDS:
        if changes.get(f) is not None and changes[f] != current.get(f):
            return True
    return False


def _snapshot(record: EmployeeAffectation, old: Optional[Mapping], new: Mapping):
    for f, (old_col, new_col) in _SNAPSHOT_COLUMNS.items():
        setattr(record, old_col, old.get(f) if old else None)
        setattr(record, new_col, new[f])


def open_initial(emp: Employee, actor_id: Optional[int], start: Optional[date] = None) -> EmployeeAffectation:
    """Hiring record: empty old snapshot, new snapshot = initial placement, left open."""
    rec = EmployeeAffectation(
        employee_id=emp.id,
        date_debut=start or date.today(),
        date_fin=None,
        motif=HIRING_MOTIF,
        created_by_user_id=actor_id,
    )
    _snapshot(rec, None, emp.placement())
    db.session.add(rec)
    return rec


def record_change(
    emp: Employee,
    changes: Mapping,
    motif: Optional[str],
    commentaire: Optional[str],
    actor_id: Optional[int],
    start: Optional[date] = None,
) -> bool:
    """
    Close the open record and append a new one when the placement changes.

    Returns False (and writes nothing) when no placement field differs.
    Raises ValidationError before any write when a change has no motif.
    The caller applies `changes` to the live employee row in the same
    transaction.
    """
    current = emp.placement()
    if not placement_changed(current, changes):
        return False
    if not (motif or "").strip():
        raise ValidationError("Motif de changement obligatoire pour les modifications d'affectation/poste.")

    start = start or date.today()
    prev = open_record(emp.id)
    if prev is not None:
        prev.date_fin = start - timedelta(days=1)
        closing = f"Affectation terminée suite à: {motif}"
        prev.commentaire = f"{prev.commentaire} | {closing}" if prev.commentaire else closing
        # the partial unique index allows one open row: close before inserting
        db.session.flush()

    new = {f: (changes[f] if changes.get(f) is not None else current[f]) for f in PLACEMENT_FIELDS}
    rec = EmployeeAffectation(
        employee_id=emp.id,
        date_debut=start,
        date_fin=None,
        motif=motif,
        commentaire=commentaire or None,
        created_by_user_id=actor_id,
    )
    _snapshot(rec, current, new)
    db.session.add(rec)
    db.session.flush()
    log.info("affectation change employee=%s record=%s motif=%r", emp.id, rec.id, motif)
    return True


def close_on_archive(employee_id: int, actor_id: Optional[int], end: Optional[date] = None,
                     reason: str = "Procédure de départ") -> Optional[EmployeeAffectation]:
    rec = open_record(employee_id)
    if rec is None:
        return None
    end = end or date.today()
    if end < rec.date_debut:
        raise ValidationError(
            f"Date de fin {end.isoformat()} antérieure au début de l'affectation en cours ({rec.date_debut.isoformat()})."
        )
    rec.date_fin = end
    closing = f"Licenciement/Archivage par {reason} (utilisateur {actor_id})"
    rec.commentaire = f"{rec.commentaire} | {closing}" if rec.commentaire else closing
    return rec


def to_dict(r: EmployeeAffectation) -> dict:
    out = {
        "id": r.id,
        "employee_id": r.employee_id,
        "date_debut": r.date_debut.isoformat() if r.date_debut else None,
        "date_fin": r.date_fin.isoformat() if r.date_fin else None,
        "motif": r.motif,
        "commentaire": r.commentaire,
        "created_by_user_id": r.created_by_user_id,
    }
    for old_col, new_col in _SNAPSHOT_COLUMNS.values():
        out[old_col] = getattr(r, old_col)
        out[new_col] = getattr(r, new_col)
    return out
