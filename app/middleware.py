"""Middleware for tenant context."""
from functools import wraps
from flask import session, g, jsonify


def load_tenant():
    """
    Load the current tenant into g (Flask's per-request global).

    The tenant id is written to the session by the authentication service;
    every inventory operation is scoped to it.
    """
    g.tenant_id = None

    tenant_id = session.get('tenant_id')
    if tenant_id is None:
        return

    try:
        g.tenant_id = int(tenant_id)
    except (TypeError, ValueError):
        # Garbage in the cookie, drop it
        session.pop('tenant_id', None)


def require_tenant(f):
    """
    Decorator: Require tenant to be selected.

    Returns 401 JSON when there is no tenant in the session.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('tenant_id') is None:
            return jsonify({
                'status': 'error',
                'error': 'Unauthorized',
                'message': 'Debes seleccionar un negocio primero.'
            }), 401
        return f(*args, **kwargs)
    return decorated_function
