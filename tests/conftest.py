import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from hrms import create_app
from hrms.extensions import db
from hrms.models.organization import Organization
from hrms.models.role import Permission, Role
from hrms.models.user import User

PASSWORD = "password123"


@pytest.fixture
def app():
    app = create_app('config.TestConfig')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def org(app):
    o = Organization(name="Acme")
    db.session.add(o)
    db.session.commit()
    return o


@pytest.fixture
def make_user(org):
    def _make(email, role="ROLE_EMPLOYEE", permissions=()):
        role_id = None
        if permissions:
            perms = []
            for name in permissions:
                p = Permission.query.filter_by(name=name).first() or Permission(name=name)
                perms.append(p)
            r = Role(org_id=org.id, name=f"custom-{email}", permissions=perms)
            db.session.add(r)
            db.session.flush()
            role_id = r.id
        u = User(org_id=org.id, email=email, full_name=email.split("@")[0], role=role, role_id=role_id)
        u.set_password(PASSWORD)
        db.session.add(u)
        db.session.commit()
        return u
    return _make


@pytest.fixture
def login(client):
    def _login(email):
        resp = client.post('/auth/login', json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()
    return _login
