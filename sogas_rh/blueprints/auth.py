# sogas_rh/blueprints/auth.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import create_access_token

from sogas_rh.common import validation as v
from sogas_rh.common.auth import ROLES, current_identity, requires_roles
from sogas_rh.common.errors import AuthError, ConflictError, NotFoundError
from sogas_rh.common.http import ok
from sogas_rh.common.uow import unit_of_work
from sogas_rh.extensions import db
from sogas_rh.models.user import User

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/login")
def login():
    d = v.body(request.get_json(silent=True, force=True))
    email = v.email(d, "email", required=True)
    password = v.require(d, "password")

    u = db.session.execute(db.select(User).where(User.email == email)).scalar_one_or_none()
    if u is None:
        raise NotFoundError("Utilisateur non trouvé.")
    if not u.check_password(password):
        raise AuthError("Email ou mot de passe incorrect.", status_code=401)

    token = create_access_token(
        identity=str(u.id),
        additional_claims={"email": u.email, "role": u.role},
    )
    current_app.logger.info("login user=%s role=%s", u.id, u.role)
    return ok({"token": token, "user": u.payload()}, message="Connexion réussie !")


@bp.post("/register")
@requires_roles()  # admin only
def register():
    d = v.body(request.get_json(silent=True, force=True))
    v.reject_unknown(d, ("email", "password", "role"))
    email = v.email(d, "email", required=True)
    password = v.require(d, "password", min_len=6)
    role = v.one_of(d, "role", ROLES, default="employe")

    with unit_of_work() as s:
        if s.execute(db.select(User.id).where(User.email == email)).first():
            raise ConflictError("Cet email est déjà utilisé.")
        u = User(email=email, role=role)
        u.set_password(password)
        s.add(u)
        s.flush()
        user_id = u.id

    current_app.logger.info("user registered id=%s role=%s by user=%s", user_id, role, current_identity().id)
    return ok({"userId": user_id}, status=201, message="Utilisateur créé avec succès.")
