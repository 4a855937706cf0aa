import pytest
from flask_jwt_extended import create_access_token

from jetsetgo import create_app
from jetsetgo.extensions import db as _db
from jetsetgo.models import User
from jetsetgo.models.enums import UserRole
from config import Config


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    # API Keys for testing
    AMADEUS_API_KEY = "test_key"
    AMADEUS_API_SECRET = "test_secret"
    AMADEUS_ENV = "test"
    AMADEUS_MAX_RETRIES = 0


@pytest.fixture
def app():
    app = create_app(TestConfig)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def db(app):
    return _db


def make_user(email, role=UserRole.USER, name='Test User', password='TestPass123'):
    user = User(name=name, email=email, role=role, preferences={}, is_active=True)
    user.set_password(password)
    _db.session.add(user)
    _db.session.commit()
    return user


def auth_headers_for(user):
    token = create_access_token(identity=user.id, additional_claims={'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def sample_user(app):
    return make_user('test@example.com')


@pytest.fixture
def other_user(app):
    return make_user('other@example.com', name='Other User')


@pytest.fixture
def admin_user(app):
    return make_user('admin@example.com', role=UserRole.ADMIN, name='Admin User')


@pytest.fixture
def editor_user(app):
    return make_user('editor@example.com', role=UserRole.EDITOR, name='Editor User')


@pytest.fixture
def auth_headers(sample_user):
    return auth_headers_for(sample_user)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers_for(admin_user)


@pytest.fixture
def editor_headers(editor_user):
    return auth_headers_for(editor_user)


@pytest.fixture
def flight_offer():
    """A trimmed Amadeus flight offer, one stop ICN -> JFK"""
    return {
        "type": "flight-offer",
        "id": "1",
        "itineraries": [{
            "duration": "PT15H30M",
            "segments": [
                {
                    "departure": {"iataCode": "ICN", "at": "2025-03-15T08:05:00"},
                    "arrival": {"iataCode": "NRT", "at": "2025-03-15T10:30:00"},
                    "carrierCode": "KE",
                    "number": "081",
                },
                {
                    "departure": {"iataCode": "NRT", "at": "2025-03-15T12:00:00"},
                    "arrival": {"iataCode": "JFK", "at": "2025-03-15T11:35:00"},
                    "carrierCode": "KE",
                    "number": "703",
                },
            ],
        }],
        "price": {"currency": "USD", "total": "1250.00", "grandTotal": "1250.00"},
    }
