# sogas_rh/services/admin.py
"""HR documents register and the alert queue."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import select

from sogas_rh.common import validation as v
from sogas_rh.common.auth import Identity
from sogas_rh.common.uow import unit_of_work
from sogas_rh.extensions import db
from sogas_rh.models.admin import (
    Alert, Document, ALERT_SEVERITIES, ALERT_STATUSES, DOCUMENT_ALERT_STATUSES,
)
from sogas_rh.services.employees import require_employee

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentInput:
    employee_id: int
    type_document: str
    nom_fichier: str
    chemin_stockage: str
    date_enregistrement: date
    date_expiration: Optional[date]
    statut_alerte: str


@dataclass(frozen=True)
class AlertInput:
    type_alerte: str
    message_detaille: str
    employee_id: Optional[int]
    date_echeance: Optional[date]
    gravite: str
    statut: str


def parse_document(payload, today: date) -> DocumentInput:
    d = v.body(payload)
    v.reject_unknown(d, DocumentInput.__dataclass_fields__.keys())
    return DocumentInput(
        employee_id=v.as_int(d, "employee_id", required=True, min_value=1),
        type_document=v.require(d, "type_document", max_len=100),
        nom_fichier=v.require(d, "nom_fichier", max_len=255),
        chemin_stockage=v.require(d, "chemin_stockage", max_len=255),
        date_enregistrement=v.as_date(d, "date_enregistrement", default=today),
        date_expiration=v.as_date(d, "date_expiration"),
        statut_alerte=v.one_of(d, "statut_alerte", DOCUMENT_ALERT_STATUSES, default="OK"),
    )


def parse_alert(payload) -> AlertInput:
    d = v.body(payload)
    v.reject_unknown(d, AlertInput.__dataclass_fields__.keys())
    return AlertInput(
        type_alerte=v.require(d, "type_alerte", max_len=50),
        message_detaille=v.require(d, "message_detaille"),
        employee_id=v.as_int(d, "employee_id", min_value=1),
        date_echeance=v.as_date(d, "date_echeance"),
        gravite=v.one_of(d, "gravite", ALERT_SEVERITIES, default="Moyenne"),
        statut=v.one_of(d, "statut", ALERT_STATUSES, default="Ouvert"),
    )


def create_document(payload, actor: Identity, today: Optional[date] = None) -> int:
    data = parse_document(payload, today or date.today())
    with unit_of_work() as s:
        require_employee(data.employee_id)
        doc = Document(
            employee_id=data.employee_id,
            type_document=data.type_document,
            nom_fichier=data.nom_fichier,
            chemin_stockage=data.chemin_stockage,
            date_enregistrement=data.date_enregistrement,
            date_expiration=data.date_expiration,
            statut_alerte=data.statut_alerte,
            created_by_user_id=actor.id,
        )
        s.add(doc)
        s.flush()
        log.info("document registered id=%s employee=%s type=%s", doc.id, doc.employee_id, doc.type_document)
        return doc.id


def list_documents(employee_id: Optional[int] = None) -> list[dict]:
    stmt = select(Document)
    if employee_id:
        stmt = stmt.where(Document.employee_id == employee_id)
    rows = db.session.execute(stmt.order_by(Document.id.desc())).scalars()
    return [
        {
            "id": x.id,
            "employee_id": x.employee_id,
            "type_document": x.type_document,
            "nom_fichier": x.nom_fichier,
            "chemin_stockage": x.chemin_stockage,
            "date_enregistrement": x.date_enregistrement.isoformat(),
            "date_expiration": x.date_expiration.isoformat() if x.date_expiration else None,
            "statut_alerte": x.statut_alerte,
        }
        for x in rows
    ]


def notify_alert(alert_id: int, gravite: str, assignee_id: Optional[int]):
    # delivery channel (mail/SMS) not wired yet; the log line is the notification
    log.warning("ALERT id=%s gravite=%s assignee=%s", alert_id, gravite, assignee_id)


def create_alert(payload, actor: Identity) -> int:
    data = parse_alert(payload)
    with unit_of_work() as s:
        if data.employee_id is not None:
            require_employee(data.employee_id)
        alert = Alert(
            type_alerte=data.type_alerte,
            message_detaille=data.message_detaille,
            employee_id=data.employee_id,
            date_echeance=data.date_echeance,
            gravite=data.gravite,
            statut=data.statut,
            assignee_user_id=actor.id,
        )
        s.add(alert)
        s.flush()
        alert_id = alert.id
    notify_alert(alert_id, data.gravite, actor.id)
    return alert_id
