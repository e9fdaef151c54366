# sogas_rh/blueprints/time.py
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from sogas_rh.common.auth import current_identity
from sogas_rh.common.http import ok
from sogas_rh.common.paging import date_range
from sogas_rh.services import time_tracking as svc

bp = Blueprint("time", __name__, url_prefix="/api/time")


def _json():
    return request.get_json(silent=True, force=True)


# ---------- holidays ----------
@bp.post("/feries")
@jwt_required()
def add_holiday():
    new_id = svc.add_holiday(_json())
    return ok({"holidayId": new_id}, status=201, message="Jour férié ajouté avec succès.")


@bp.get("/feries")
@jwt_required()
def list_holidays():
    return ok(svc.list_holidays())


# ---------- pointage ----------
@bp.post("/checkin")
@jwt_required()
def checkin():
    new_id = svc.check_in(_json(), current_identity())
    return ok({"attendanceId": new_id}, status=201, message="Pointage d'entrée enregistré.")


@bp.put("/checkout/<int:employee_id>")
@jwt_required()
def checkout(employee_id: int):
    hours = svc.check_out(employee_id, _json(), current_identity()).as_dict()
    hours["majoration_pourcentage_speciale"] = hours.pop("majoration_pourcentage")
    return ok(hours, message="Pointage de sortie enregistré et heures calculées.")


@bp.get("/attendances")
@jwt_required()
def attendances():
    date_from, date_to = date_range()
    rows = svc.list_attendances(
        employee_id=request.args.get("employee_id", type=int),
        date_from=date_from,
        date_to=date_to,
    )
    return ok(rows)


# ---------- leave ----------
@bp.post("/leaves")
@jwt_required()
def submit_leave():
    new_id = svc.submit_leave(_json(), current_identity())
    return ok({"requestId": new_id}, status=201, message="Demande de congés soumise avec succès.")


@bp.get("/leaves/<int:request_id>")
@jwt_required()
def get_leave(request_id: int):
    return ok(svc.get_leave(request_id))
