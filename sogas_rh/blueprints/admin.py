# sogas_rh/blueprints/admin.py
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from sogas_rh.common.auth import current_identity
from sogas_rh.common.http import ok
from sogas_rh.services import admin as svc

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@bp.post("/documents")
@jwt_required()
def create_document():
    new_id = svc.create_document(request.get_json(silent=True, force=True), current_identity())
    return ok({"documentId": new_id}, status=201, message="Document enregistré avec succès.")


@bp.get("/documents")
@jwt_required()
def list_documents():
    return ok(svc.list_documents(request.args.get("employee_id", type=int)))


@bp.post("/alerts")
@jwt_required()
def create_alert():
    new_id = svc.create_alert(request.get_json(silent=True, force=True), current_identity())
    return ok({"alertId": new_id}, status=201, message="Alerte créée avec succès.")
