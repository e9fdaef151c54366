# sogas_rh/services/time_tracking.py
"""Holiday calendar, daily pointage (check-in / check-out) and leave requests."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_, select, update

from sogas_rh.common import validation as v
from sogas_rh.common.auth import Identity
from sogas_rh.common.errors import ConflictError, NotFoundError, ValidationError
from sogas_rh.common.uow import unit_of_work
from sogas_rh.extensions import db
from sogas_rh.models.attendance import Attendance, Holiday, HOLIDAY_TYPES
from sogas_rh.models.leave import LeaveRequest, LeaveValidation, BLOCKING_STATUSES
from sogas_rh.services.employees import require_employee
from sogas_rh.services.hours import calculate_hours, HoursBreakdown, DEFAULT_HOLIDAY_SURCHARGE

log = logging.getLogger(__name__)

SUBMISSION_LEVEL = "Soumission Employé"
PENDING = "En attente"


# ---------- schemas ----------
@dataclass(frozen=True)
class HolidayInput:
    nom: str
    date_feriee: date
    type: str
    recurrent: bool
    majoration_pourcentage: Decimal
    actif: bool


@dataclass(frozen=True)
class CheckIn:
    employee_id: int
    heure_entree: time
    date_pointage: date
    source: str


@dataclass(frozen=True)
class CheckOut:
    heure_sortie: time
    date_pointage: date


@dataclass(frozen=True)
class LeaveInput:
    employee_id: int
    type_conge: str
    date_debut: date
    date_fin: date
    nb_jours: Decimal
    motif_employe: Optional[str]


def parse_holiday(payload) -> HolidayInput:
    d = v.body(payload)
    v.reject_unknown(d, HolidayInput.__dataclass_fields__.keys())
    return HolidayInput(
        nom=v.require(d, "nom"),
        date_feriee=v.as_date(d, "date_feriee", required=True),
        type=v.one_of(d, "type", HOLIDAY_TYPES, default="Fixe"),
        recurrent=v.as_bool(d, "recurrent", default=False),
        majoration_pourcentage=v.as_decimal(d, "majoration_pourcentage", min_value=0, max_value=100, default="60.00"),
        actif=v.as_bool(d, "actif", default=True),
    )


def parse_checkin(payload, today: date) -> CheckIn:
    d = v.body(payload)
    v.reject_unknown(d, CheckIn.__dataclass_fields__.keys())
    return CheckIn(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        heure_entree=v.as_hhmm(d, "heure_entree"),
        date_pointage=v.as_date(d, "date_pointage", default=today),
        source=v.opt_str(d, "source", max_len=50, default="Manuel"),
    )


def parse_checkout(payload, today: date) -> CheckOut:
    d = v.body(payload)
    v.reject_unknown(d, CheckOut.__dataclass_fields__.keys())
    return CheckOut(
        heure_sortie=v.as_hhmm(d, "heure_sortie"),
        date_pointage=v.as_date(d, "date_pointage", default=today),
    )


def parse_leave(payload, today: date) -> LeaveInput:
    d = v.body(payload)
    v.reject_unknown(d, LeaveInput.__dataclass_fields__.keys())
    data = LeaveInput(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        type_conge=v.require(d, "type_conge", max_len=50),
        date_debut=v.as_date(d, "date_debut", required=True),
        date_fin=v.as_date(d, "date_fin", required=True),
        nb_jours=v.as_decimal(d, "nb_jours", required=True, min_value="0.5"),
        motif_employe=v.opt_str(d, "motif_employe"),
    )
    if data.date_debut < today:
        raise ValidationError('"date_debut" ne peut pas être dans le passé.')
    if data.date_fin < data.date_debut:
        raise ValidationError('"date_fin" doit être postérieure ou égale à "date_debut".')
    return data


# ---------- holidays ----------
def _holiday_dict(h: Holiday) -> dict:
    return {
        "id": h.id,
        "nom": h.nom,
        "date_feriee": h.date_feriee.isoformat(),
        "type": h.type,
        "recurrent": h.recurrent,
        "majoration_pourcentage": float(h.majoration_pourcentage),
        "actif": h.actif,
    }


def add_holiday(payload) -> int:
    data = parse_holiday(payload)
    with unit_of_work() as s:
        dup = s.execute(select(Holiday.id).where(Holiday.date_feriee == data.date_feriee)).first()
        if dup:
            raise ConflictError("Un jour férié est déjà enregistré à cette date.")
        h = Holiday(
            nom=data.nom,
            date_feriee=data.date_feriee,
            type=data.type,
            recurrent=data.recurrent,
            majoration_pourcentage=data.majoration_pourcentage,
            actif=data.actif,
        )
        s.add(h)
        s.flush()
        log.info("holiday added id=%s date=%s", h.id, h.date_feriee)
        return h.id


def list_holidays() -> list[dict]:
    rows = db.session.execute(
        select(Holiday).where(Holiday.actif.is_(True)).order_by(Holiday.date_feriee.asc())
    ).scalars()
    return [_holiday_dict(h) for h in rows]


def holiday_for(day: date) -> Optional[Holiday]:
    """Active holiday on `day`: exact date first, else a recurrent one on the same month/day."""
    rows = db.session.execute(
        select(Holiday)
        .where(Holiday.actif.is_(True), or_(Holiday.date_feriee == day, Holiday.recurrent.is_(True)))
        .order_by(Holiday.date_feriee.desc())
    ).scalars().all()
    for h in rows:
        if h.date_feriee == day:
            return h
    for h in rows:
        if (h.date_feriee.month, h.date_feriee.day) == (day.month, day.day):
            return h
    return None


# ---------- pointage ----------
def check_in(payload, actor: Identity, today: Optional[date] = None) -> int:
    data = parse_checkin(payload, today or date.today())
    with unit_of_work() as s:
        require_employee(data.employee_id, active=True)
        existing = s.execute(
            select(Attendance.id).where(
                Attendance.employee_id == data.employee_id,
                Attendance.date_pointage == data.date_pointage,
            )
        ).first()
        if existing:
            raise ConflictError("Un pointage d'entrée est déjà enregistré pour cet employé à cette date.")
        row = Attendance(
            employee_id=data.employee_id,
            date_pointage=data.date_pointage,
            heure_entree=data.heure_entree,
            source=data.source,
        )
        s.add(row)
        s.flush()
        log.info("check-in employee=%s date=%s attendance=%s by user=%s",
                 data.employee_id, data.date_pointage, row.id, actor.id)
        return row.id


def check_out(employee_id: int, payload, actor: Identity, today: Optional[date] = None) -> HoursBreakdown:
    data = parse_checkout(payload, today or date.today())
    with unit_of_work() as s:
        att = s.execute(
            select(Attendance).where(
                Attendance.employee_id == employee_id,
                Attendance.date_pointage == data.date_pointage,
                Attendance.heure_sortie.is_(None),
            )
        ).scalars().first()
        if att is None:
            raise NotFoundError("Pointage d'entrée manquant ou déjà complété pour cette date.")

        day = att.date_pointage
        holiday = holiday_for(day)
        hours = calculate_hours(
            att.heure_entree,
            data.heure_sortie,
            is_holiday=holiday is not None,
            is_sunday=day.weekday() == 6,
            majoration_feriee=holiday.majoration_pourcentage if holiday else DEFAULT_HOLIDAY_SURCHARGE,
        )

        # conditional on heure_sortie IS NULL: a record is completed exactly once
        res = s.execute(
            update(Attendance)
            .where(Attendance.id == att.id, Attendance.heure_sortie.is_(None))
            .values(
                heure_sortie=data.heure_sortie,
                heures_normales=hours.heures_normales,
                heures_sup_15=hours.heures_sup_15,
                heures_sup_40=hours.heures_sup_40,
                heures_sup_hors_majoration=hours.heures_supplementaires,
                majoration_pourcentage=hours.majoration_pourcentage,
                panier_repas_du=hours.panier_repas_du,
            )
            .execution_options(synchronize_session="evaluate")
        )
        if res.rowcount == 0:
            raise NotFoundError("Pointage d'entrée manquant ou déjà complété pour cette date.")
        log.info("check-out employee=%s date=%s total=%s by user=%s",
                 employee_id, day, hours.total_hours, actor.id)
        return hours


def _attendance_dict(a: Attendance) -> dict:
    def f(x):
        return float(x) if x is not None else None
    return {
        "id": a.id,
        "employee_id": a.employee_id,
        "date_pointage": a.date_pointage.isoformat(),
        "heure_entree": a.heure_entree.strftime("%H:%M") if a.heure_entree else None,
        "heure_sortie": a.heure_sortie.strftime("%H:%M") if a.heure_sortie else None,
        "source": a.source,
        "heures_normales": f(a.heures_normales),
        "heures_sup_15": f(a.heures_sup_15),
        "heures_sup_40": f(a.heures_sup_40),
        "heures_sup_hors_majoration": f(a.heures_sup_hors_majoration),
        "majoration_pourcentage": f(a.majoration_pourcentage),
        "panier_repas_du": a.panier_repas_du,
    }


def list_attendances(employee_id: Optional[int] = None, date_from: Optional[date] = None,
                     date_to: Optional[date] = None) -> list[dict]:
    stmt = select(Attendance)
    if employee_id:
        stmt = stmt.where(Attendance.employee_id == employee_id)
    if date_from:
        stmt = stmt.where(Attendance.date_pointage >= date_from)
    if date_to:
        stmt = stmt.where(Attendance.date_pointage <= date_to)
    rows = db.session.execute(
        stmt.order_by(Attendance.date_pointage.desc(), Attendance.id.desc())
    ).scalars()
    return [_attendance_dict(a) for a in rows]


# ---------- leave ----------
def submit_leave(payload, actor: Identity, today: Optional[date] = None) -> int:
    data = parse_leave(payload, today or date.today())
    with unit_of_work() as s:
        require_employee(data.employee_id, active=True)

        # closed-interval overlap: catches containment both ways and partial overlap
        overlap = s.execute(
            select(LeaveRequest.id).where(
                LeaveRequest.employee_id == data.employee_id,
                LeaveRequest.statut_actuel.in_(BLOCKING_STATUSES),
                LeaveRequest.date_debut <= data.date_fin,
                LeaveRequest.date_fin >= data.date_debut,
            )
        ).first()
        if overlap:
            raise ConflictError("Une demande de congés (soumise ou approuvée) existe déjà sur cette période.")

        lr = LeaveRequest(
            employee_id=data.employee_id,
            type_conge=data.type_conge,
            date_debut=data.date_debut,
            date_fin=data.date_fin,
            nb_jours=data.nb_jours,
            motif_employe=data.motif_employe,
            statut_actuel="Soumis",
        )
        s.add(lr)
        s.flush()
        s.add(LeaveValidation(
            request_id=lr.id,
            validateur_id=actor.id,
            niveau_validation=SUBMISSION_LEVEL,
            decision=PENDING,
            commentaire="Demande soumise par l'employé.",
        ))
        s.flush()
        log.info("leave submitted id=%s employee=%s %s..%s", lr.id, lr.employee_id, lr.date_debut, lr.date_fin)
        return lr.id


def get_leave(request_id: int) -> dict:
    lr = db.session.get(LeaveRequest, request_id)
    if lr is None:
        raise NotFoundError("Demande de congés non trouvée.")
    return {
        "id": lr.id,
        "employee_id": lr.employee_id,
        "type_conge": lr.type_conge,
        "date_debut": lr.date_debut.isoformat(),
        "date_fin": lr.date_fin.isoformat(),
        "nb_jours": float(lr.nb_jours),
        "motif_employe": lr.motif_employe,
        "statut_actuel": lr.statut_actuel,
        "validations": [
            {
                "id": st.id,
                "validateur_id": st.validateur_id,
                "niveau_validation": st.niveau_validation,
                "decision": st.decision,
                "commentaire": st.commentaire,
                "created_at": st.created_at.isoformat() if st.created_at else None,
            }
            for st in lr.validations
        ],
    }
