# sogas_rh/blueprints/employees.py
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from sogas_rh.common.auth import current_identity
from sogas_rh.common.http import ok
from sogas_rh.common.paging import page_size, text_q
from sogas_rh.services import employees as svc

bp = Blueprint("employees", __name__, url_prefix="/api/employee")


@bp.post("")
@jwt_required()
def create():
    new_id = svc.create_employee(request.get_json(silent=True, force=True), current_identity())
    return ok({"employeeId": new_id}, status=201, message="Employé créé avec succès.")


@bp.get("")
@jwt_required()
def list_():
    page, size = page_size()
    items, total = svc.list_employees(
        statut=request.args.get("statut") or None,
        site_id=request.args.get("site_id", type=int),
        department_id=request.args.get("department_id", type=int),
        q=text_q(),
        page=page,
        size=size,
    )
    return ok(items, page=page, size=size, total=total)


@bp.get("/<int:employee_id>")
@jwt_required()
def get(employee_id: int):
    return ok(svc.get_employee(employee_id))


@bp.put("/<int:employee_id>")
@jwt_required()
def update(employee_id: int):
    moved = svc.update_employee(employee_id, request.get_json(silent=True, force=True), current_identity())
    return ok({"affectationChanged": moved}, message="Employé mis à jour avec succès.")


@bp.delete("/<int:employee_id>")
@jwt_required()
def archive(employee_id: int):
    svc.archive_employee(employee_id, current_identity())
    return ok(message="Employé archivé (Licencié) avec succès.")


@bp.get("/<int:employee_id>/affectations")
@jwt_required()
def affectations(employee_id: int):
    return ok(svc.employee_history(employee_id))
