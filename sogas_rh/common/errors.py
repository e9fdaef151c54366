# sogas_rh/common/errors.py
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from sogas_rh.common.http import fail
from sogas_rh.extensions import db, jwt


class APIError(Exception):
    """Base API error: carries the HTTP status and a machine code."""
    status_code = 400
    code = "API_ERROR"

    def __init__(self, message, status_code=None, code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.payload = payload


class ValidationError(APIError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthError(APIError):
    status_code = 401
    code = "AUTH_ERROR"


class NotFoundError(APIError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(APIError):
    status_code = 409
    code = "CONFLICT"


class InternalError(APIError):
    status_code = 500
    code = "INTERNAL_ERROR"


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        if e.status_code >= 500:
            app.logger.error("API error %s: %s", e.code, e.message)
        return fail(e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(IntegrityError)
    def _integrity(e: IntegrityError):
        # 409 for unique/FK violations
        db.session.rollback()
        app.logger.warning("Integrity error: %s", getattr(e, "orig", e))
        return fail("Conflit / contrainte d'intégrité violée.", status=409, code="CONSTRAINT_ERROR")

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _500(e: Exception):
        db.session.rollback()
        app.logger.exception(e)
        return fail("Erreur serveur interne.", status=500, code="INTERNAL_ERROR")


def register_jwt_handlers():
    # missing header -> 401, bad or expired token -> 403
    @jwt.unauthorized_loader
    def _missing(reason):
        return fail("Accès non autorisé. Jeton manquant.", status=401, code="AUTH_ERROR")

    @jwt.invalid_token_loader
    def _invalid(reason):
        return fail("Jeton invalide ou expiré.", status=403, code="AUTH_ERROR")

    @jwt.expired_token_loader
    def _expired(jwt_header, jwt_payload):
        return fail("Jeton invalide ou expiré.", status=403, code="AUTH_ERROR")
