"""
Pytest configuration and fixtures for testing.
Runs against an in-memory SQLite database with a low bcrypt cost.
"""
import os

import pytest

# Set test environment variables BEFORE importing the app package
os.environ['FLASK_ENV'] = 'testing'
os.environ['SECRET_KEY'] = 'test-secret-key-not-for-production'
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_LEVEL'] = 'DEBUG'
for name in ('DB_USER', 'DB_PASSWORD', 'DB_HOST', 'DB_NAME'):
    os.environ[name] = ''

from subtrack import create_app, db
from subtrack.auth.models import Account
from subtrack.auth.utils import prepare_for_persistence

TEST_PASSWORD = 'Password123'


@pytest.fixture
def app():
    """Create application for testing with a fresh schema."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'BCRYPT_ROUNDS': 4,
        'MAX_LOGIN_ATTEMPTS': 5,
        'LOCKOUT_DURATION_MINUTES': 120,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def runner(app):
    """Create CLI test runner."""
    return app.test_cli_runner()


@pytest.fixture
def make_account(app):
    """Factory that persists an account with a hashed password."""
    def _make(email='owner@example.com', name='Test Owner',
              password=TEST_PASSWORD, role='owner'):
        account = Account(name=name, email=email, role=role, password=password)
        prepare_for_persistence(account)
        db.session.add(account)
        db.session.commit()
        return account
    return _make


@pytest.fixture
def account(make_account):
    """A persisted owner account."""
    return make_account()
