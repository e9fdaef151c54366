# sogas_rh/blueprints/structure.py
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from sogas_rh.common.http import ok
from sogas_rh.services import structure as svc

bp = Blueprint("structure", __name__, url_prefix="/api/structure")


def _json():
    return request.get_json(silent=True, force=True)


# ---------- sites ----------
@bp.post("/sites")
@jwt_required()
def create_site():
    new_id = svc.create_site(_json())
    return ok({"siteId": new_id}, status=201, message="Site créé avec succès.")


@bp.get("/sites")
@jwt_required()
def list_sites():
    return ok(svc.list_sites())


# ---------- departments ----------
@bp.post("/departments")
@jwt_required()
def create_department():
    new_id = svc.create_department(_json())
    return ok({"departmentId": new_id}, status=201, message="Département créé avec succès.")


@bp.get("/departments")
@jwt_required()
def list_departments():
    return ok(svc.list_departments())


# ---------- services ----------
@bp.post("/services")
@jwt_required()
def create_service():
    new_id = svc.create_service(_json())
    return ok({"serviceId": new_id}, status=201, message="Service créé avec succès.")


@bp.get("/services")
@jwt_required()
def list_services():
    return ok(svc.list_services())


# ---------- teams ----------
@bp.post("/teams")
@jwt_required()
def create_team():
    new_id = svc.create_team(_json())
    return ok({"teamId": new_id}, status=201, message="Équipe créée avec succès.")


@bp.get("/teams")
@jwt_required()
def list_teams():
    return ok(svc.list_teams())
