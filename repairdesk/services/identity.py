from __future__ import annotations
from flask import current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError


def current_user_name() -> str:
    """Display name of the caller.

    A bearer token is optional; when one is present its ``name`` claim (or the
    identity) wins, otherwise the configured ``DEFAULT_USER_NAME`` is used.
    A malformed or expired token is logged and treated as no token.
    """
    default = current_app.config['DEFAULT_USER_NAME']
    try:
        if verify_jwt_in_request(optional=True) is None:
            return default
    except (JWTExtendedException, PyJWTError) as e:
        current_app.logger.warning('Ignoring unusable bearer token: %s', e)
        return default
    name = get_jwt().get('name') or get_jwt_identity()
    return str(name) if name else default
