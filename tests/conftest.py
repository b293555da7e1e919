import pytest
import os
import tempfile
import uuid

# Tests run against a throwaway SQLite file unless a database is provided (e.g. by Docker)
if 'DATABASE_URL' not in os.environ:
    _db_dir = tempfile.mkdtemp(prefix='manufacturing-tests-')
    os.environ['DATABASE_URL'] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ['CACHE_ENABLED'] = 'false'

from app import create_app
from app.database import Base, create_schema, get_session
from app.models import Tenant, RawMaterial, Product, StockItemKind


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.Config')
    app.config['TESTING'] = True
    app.config['DB_RETRY_BACKOFF'] = 0

    ctx = app.app_context()
    ctx.push()
    create_schema()
    yield app
    ctx.pop()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session; every table is emptied after the test."""
    session = get_session()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.remove()


@pytest.fixture(scope='function')
def tenant1(session):
    """Create first test tenant."""
    suffix = str(uuid.uuid4())[:8]
    tenant = Tenant(slug=f'test-tenant-1-{suffix}', name=f'Test Tenant 1 {suffix}', active=True)
    session.add(tenant)
    session.commit()
    return tenant


@pytest.fixture(scope='function')
def tenant2(session):
    """Create second test tenant for isolation tests."""
    suffix = str(uuid.uuid4())[:8]
    tenant = Tenant(slug=f'test-tenant-2-{suffix}', name=f'Test Tenant 2 {suffix}', active=True)
    session.add(tenant)
    session.commit()
    return tenant


@pytest.fixture(scope='function')
def raw_material(session, tenant1):
    """Raw material owned by tenant1."""
    material = RawMaterial(tenant_id=tenant1.id, name='Harina', code='MP-001', unit='kg', active=True)
    session.add(material)
    session.commit()
    return material


@pytest.fixture(scope='function')
def raw_material_tenant2(session, tenant2):
    material = RawMaterial(tenant_id=tenant2.id, name='Azúcar', code='MP-001', unit='kg', active=True)
    session.add(material)
    session.commit()
    return material


@pytest.fixture(scope='function')
def product(session, tenant1):
    """Finished product owned by tenant1."""
    product = Product(tenant_id=tenant1.id, name='Pan', sku='PT-001', unit='unidades', active=True)
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def product_tenant2(session, tenant2):
    product = Product(tenant_id=tenant2.id, name='Galletas', sku='PT-001', unit='unidades', active=True)
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def stock(session):
    """Seed stock through the ledger: stock(tenant_id, kind, item_id, qty, unit)."""
    from app.services.movement_service import record_movement

    def _seed(tenant_id, kind, stock_item_id, quantity, unit):
        entry_type = 'purchase' if kind == StockItemKind.RAW_MATERIAL else 'production_output'
        return record_movement(session, tenant_id, kind, stock_item_id, entry_type, quantity, unit)

    return _seed


@pytest.fixture(scope='function')
def authenticated_client(client, tenant1):
    """Test client with tenant1 selected in the session."""
    tenant_id = tenant1.id
    with client.session_transaction() as sess:
        sess['tenant_id'] = tenant_id
    return client
