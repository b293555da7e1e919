"""Productions blueprint - raw materials in, finished products out (JSON, Multi-Tenant)."""
from flask import Blueprint, request, jsonify, g

from app.database import get_session
from app.exceptions import InvalidInputError, NotFoundError
from app.middleware import require_tenant
from app.services import production_service
from app.utils.serializers import production_to_dict

productions_bp = Blueprint('productions', __name__, url_prefix='/productions')


@productions_bp.route('/', methods=['GET'])
@require_tenant
def list_productions():
    productions = production_service.list_productions(get_session(), g.tenant_id)
    return jsonify({'items': [production_to_dict(p) for p in productions]})


@productions_bp.route('/', methods=['POST'])
@require_tenant
def create_production():
    """
    Register a completed production.

    Body:
        production_date: ISO-8601 date or datetime
        materials: [{raw_material_id, quantity, unit}]
        products: [{product_id, quantity, unit}] (at least one)
        batch_code, notes: optional
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError('Se esperaba un cuerpo JSON')

    materials = data.get('materials') or []
    products = data.get('products') or []
    if not isinstance(materials, list) or not isinstance(products, list):
        raise InvalidInputError('materials y products deben ser listas')

    production = production_service.create_production(
        get_session(),
        g.tenant_id,
        data.get('production_date'),
        materials,
        products,
        batch_code=data.get('batch_code'),
        notes=data.get('notes')
    )
    return jsonify(production_to_dict(production)), 201


@productions_bp.route('/<int:production_id>', methods=['GET'])
@require_tenant
def get_production(production_id):
    production = production_service.get_production(get_session(), production_id, g.tenant_id)
    if production is None:
        raise NotFoundError(f'Producción con ID {production_id} no encontrada')
    return jsonify(production_to_dict(production))
