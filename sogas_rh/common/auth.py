# sogas_rh/common/auth.py
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity

from sogas_rh.common.errors import AuthError

ROLES = ("admin", "rh", "manager", "employe")


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, built once per request from the bearer token."""
    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def current_identity() -> Identity:
    """
    Read the verified token of the current request.
    Must be called from inside a @jwt_required() view.
    """
    uid = get_jwt_identity()
    try:
        user_id = int(uid)
    except (TypeError, ValueError):
        raise AuthError("Jeton invalide ou expiré.", status_code=403)
    claims = get_jwt() or {}
    return Identity(id=user_id, email=claims.get("email") or "", role=claims.get("role") or "")


def requires_roles(*codes: str):
    """
    Require that the current user has one of the given role codes.
    'admin' role always passes.
    """
    def outer(fn):
        @wraps(fn)
        @jwt_required()
        def inner(*args, **kwargs):
            ident = current_identity()
            if ident.is_admin or ident.role in codes:
                return fn(*args, **kwargs)
            raise AuthError("Accès refusé pour ce rôle.", status_code=403)
        return inner
    return outer
