from datetime import date

import pytest
from flask_jwt_extended import create_access_token

from sogas_rh import create_app
from sogas_rh.common.auth import Identity
from sogas_rh.extensions import db
from sogas_rh.models.structure import Site, Department, Service, Team
from sogas_rh.models.user import User
from sogas_rh.services import employees

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "JWT_SECRET_KEY": "test-secret-key-long-enough-for-hs256",
}

HIRE_DATE = date(2026, 1, 5)


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, role="employe", password="secret123"):
    u = User(email=email, role=role)
    u.set_password(password)
    db.session.add(u)
    db.session.commit()
    return u


def bearer(user):
    token = create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "role": user.role},
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(app):
    return make_user("admin@sogas.sn", role="admin")


@pytest.fixture
def actor(admin):
    return Identity(id=admin.id, email=admin.email, role=admin.role)


@pytest.fixture
def headers(admin):
    return bearer(admin)


@pytest.fixture
def structure(app):
    """Two full site -> department -> service -> team chains."""
    out = {}
    for n in (1, 2):
        site = Site(nom=f"Site {n}", code_site=f"S{n}")
        db.session.add(site)
        db.session.flush()
        dept = Department(site_id=site.id, nom=f"Dept {n}", code_interne=f"D{n}", budget_alloue=0)
        db.session.add(dept)
        db.session.flush()
        svc = Service(department_id=dept.id, nom=f"Service {n}", code_metier=f"SV{n}")
        db.session.add(svc)
        db.session.flush()
        team = Team(service_id=svc.id, nom=f"Team {n}", code_equipe=f"T{n}")
        db.session.add(team)
        db.session.flush()
        out[n] = {"site_id": site.id, "department_id": dept.id, "service_id": svc.id, "team_id": team.id}
    db.session.commit()
    return out


def employee_payload(placement, **over):
    data = {
        "matricule": "SOG-001",
        "nom": "Diop",
        "prenom": "Awa",
        "genre": "F",
        "date_naissance": "1990-05-12",
        "position": "Technicienne",
        "fonction": "Maintenance",
        "telephone_principal": "+221770000000",
        "contact_urgence_nom": "Moussa Diop",
        "contact_urgence_telephone": "+221770000001",
        **placement,
    }
    data.update(over)
    return data


@pytest.fixture
def employee_id(structure, actor):
    return employees.create_employee(employee_payload(structure[1]), actor, today=HIRE_DATE)
