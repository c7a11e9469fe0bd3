import pytest
from decimal import Decimal
import os
import tempfile
import uuid

# Use a throwaway SQLite file unless a database is provided (e.g. by Docker)
if 'DATABASE_URL' not in os.environ:
    _db_fd, _db_path = tempfile.mkstemp(prefix='bellavibe-test-', suffix='.db')
    os.close(_db_fd)
    os.environ['DATABASE_URL'] = f'sqlite:///{_db_path}'

from bellavibe import create_app
from bellavibe.database import get_session, get_session_factory, create_tables, drop_tables, Base
from bellavibe.models import Category, Product, User
from bellavibe.services.cart_service import CartStore


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.Config')
    app.config['TESTING'] = True
    app.config['CHECKOUT_TIMEOUT_MS'] = 5000
    drop_tables()
    create_tables()
    yield app
    drop_tables()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function', autouse=True)
def _clean_state(app):
    """Empty the cart and every table after each test."""
    yield
    app.extensions['cart_store'].clear()
    db = get_session()
    db.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()
    db.remove()


@pytest.fixture(scope='function')
def session(app):
    """
    Database session for fixtures and assertions.

    Separate from the request-scoped session so objects stay usable after
    the app removes its own session at the end of each request.
    """
    session = get_session_factory()(expire_on_commit=False)
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def session_factory(app):
    return get_session_factory()


@pytest.fixture(scope='function')
def cart_store(app):
    """The app's shared cart."""
    return app.extensions['cart_store']


@pytest.fixture(scope='function')
def fresh_cart():
    """A standalone cart not bound to any app."""
    return CartStore()


@pytest.fixture(scope='function')
def stock_of(app):
    """Read the committed stock level of a product through a new session."""
    def _stock_of(product_id):
        s = get_session_factory()()
        try:
            return s.query(Product.stock).filter(Product.id == product_id).scalar()
        finally:
            s.close()
    return _stock_of


@pytest.fixture(scope='function')
def beauty_session(session):
    """Top-level category (session)."""
    category = Category(name=f'Beauty {uuid.uuid4().hex[:6]}')
    session.add(category)
    session.commit()
    return category


@pytest.fixture(scope='function')
def skincare(session, beauty_session):
    """Category nested under a session."""
    category = Category(name='Skincare', parent_id=beauty_session.id)
    session.add(category)
    session.commit()
    return category


@pytest.fixture(scope='function')
def make_product(session, skincare):
    """Factory for products in the skincare category."""
    def _make_product(name='Product', price='10.00', stock=10):
        product = Product(
            name=name,
            description=f'{name} description',
            price=Decimal(price),
            stock=stock,
            category_id=skincare.id,
        )
        session.add(product)
        session.commit()
        return product
    return _make_product


@pytest.fixture(scope='function')
def product_a(make_product):
    """Moisturizer: price 19.99, stock 5."""
    return make_product(name='Moisturizer', price='19.99', stock=5)


@pytest.fixture(scope='function')
def product_b(make_product):
    """Sunscreen: price 24.90, stock 10."""
    return make_product(name='Sunscreen', price='24.90', stock=10)


@pytest.fixture(scope='function')
def user1(session):
    """Registered user with password 'password123'."""
    user = User(name='User One', email=f'user1-{uuid.uuid4().hex[:8]}@test.com')
    user.set_password('password123')
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def auth_headers(app, user1):
    """Authorization header carrying a valid token for user1."""
    from bellavibe.services.auth_service import issue_token
    with app.app_context():
        token = issue_token(user1)
    return {'Authorization': f'Bearer {token}'}
