"""Authentication endpoints: signup, login and refresh-token rotation."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from gallery.api.deps import get_auth_service, json_response, require_refresh, timing
from gallery.core.extensions import limiter
from gallery.schemas import AuthedUserSchema, LoginSchema, SignupSchema
from gallery.services._shared.ports.token_provider import JwtPayload
from gallery.services.auth.dto import LoginIn, SignupIn

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
login_schema = LoginSchema()
authed_user_schema = AuthedUserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/signup")
@timing
def signup():
    """Create an account and return tokens plus the public user."""

    data = signup_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().signup(SignupIn(**data))
    return json_response(authed_user_schema.dump(result), status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a new token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(LoginIn(**data))
    return json_response(authed_user_schema.dump(result))


@bp.post("/refresh-tokens")
@require_refresh
@timing
def refresh_tokens(*, principal: JwtPayload):
    """Rotate the presented refresh token."""

    result = get_auth_service().refresh_tokens(principal)
    return json_response(authed_user_schema.dump(result))
