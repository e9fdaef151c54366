# sogas_rh/blueprints/users.py
from flask import Blueprint
from flask_jwt_extended import jwt_required

from sogas_rh.common.auth import current_identity
from sogas_rh.common.http import ok

bp = Blueprint("users", __name__, url_prefix="/api/user")


@bp.get("/profile")
@jwt_required()
def profile():
    ident = current_identity()
    return ok({"user": {"id": ident.id, "email": ident.email, "role": ident.role}},
              message="Accès au profil autorisé !")
