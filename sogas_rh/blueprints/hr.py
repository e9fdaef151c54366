# sogas_rh/blueprints/hr.py
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from sogas_rh.common.auth import current_identity
from sogas_rh.common.http import ok
from sogas_rh.services import hr_cases as svc

bp = Blueprint("hr", __name__, url_prefix="/api/hr")


def _json():
    return request.get_json(silent=True, force=True)


@bp.post("/contracts")
@jwt_required()
def create_contract():
    new_id = svc.create_contract(_json(), current_identity())
    return ok({"contractId": new_id}, status=201, message="Contrat créé avec succès.")


@bp.get("/contracts")
@jwt_required()
def list_contracts():
    return ok(svc.list_contracts(request.args.get("employee_id", type=int)))


@bp.post("/sanctions")
@jwt_required()
def create_sanction():
    new_id = svc.create_sanction(_json(), current_identity())
    return ok({"sanctionId": new_id}, status=201, message="Sanction enregistrée avec succès.")


@bp.post("/medical-visits")
@jwt_required()
def create_medical_visit():
    new_id = svc.create_medical_visit(_json(), current_identity())
    return ok({"visitId": new_id}, status=201, message="Visite médicale enregistrée.")


@bp.post("/accidents")
@jwt_required()
def create_accident():
    new_id = svc.create_work_accident(_json(), current_identity())
    return ok({"accidentId": new_id}, status=201, message="Accident du travail déclaré.")
