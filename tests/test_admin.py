import logging

import pytest

from sogas_rh.common.errors import NotFoundError, ValidationError
from sogas_rh.extensions import db
from sogas_rh.models.admin import Alert, Document
from sogas_rh.services import admin as admin_svc


def test_document_registered(client, headers, employee_id, admin):
    r = client.post("/api/admin/documents", json={
        "employee_id": employee_id,
        "type_document": "Pièce d'identité",
        "nom_fichier": "cni.pdf",
        "chemin_stockage": "/docs/sog-001/cni.pdf",
        "date_expiration": "2030-01-01",
    }, headers=headers)
    assert r.status_code == 201
    doc = db.session.get(Document, r.get_json()["documentId"])
    assert doc.statut_alerte == "OK"
    assert doc.created_by_user_id == admin.id
    assert doc.date_enregistrement is not None

    rows = client.get(f"/api/admin/documents?employee_id={employee_id}", headers=headers).get_json()["data"]
    assert rows[0]["nom_fichier"] == "cni.pdf"


def test_document_bad_status(employee_id, actor):
    with pytest.raises(ValidationError):
        admin_svc.create_document({
            "employee_id": employee_id, "type_document": "CNI", "nom_fichier": "a.pdf",
            "chemin_stockage": "/a.pdf", "statut_alerte": "Perdu",
        }, actor)


def test_document_unknown_employee(actor):
    with pytest.raises(NotFoundError):
        admin_svc.create_document({
            "employee_id": 404, "type_document": "CNI", "nom_fichier": "a.pdf", "chemin_stockage": "/a.pdf",
        }, actor)


def test_alert_assigned_to_actor_and_notified(client, headers, employee_id, admin, caplog):
    with caplog.at_level(logging.WARNING, logger="sogas_rh.services.admin"):
        r = client.post("/api/admin/alerts", json={
            "type_alerte": "Fin de contrat",
            "message_detaille": "Le CDD arrive à échéance dans 30 jours.",
            "employee_id": employee_id,
            "gravite": "Haute",
        }, headers=headers)
    assert r.status_code == 201
    alert = db.session.get(Alert, r.get_json()["alertId"])
    assert alert.assignee_user_id == admin.id
    assert alert.statut == "Ouvert"
    assert any(f"ALERT id={alert.id}" in rec.getMessage() for rec in caplog.records)


def test_alert_without_employee(actor):
    aid = admin_svc.create_alert({"type_alerte": "Audit", "message_detaille": "Audit annuel des dossiers."}, actor)
    assert db.session.get(Alert, aid).gravite == "Moyenne"
