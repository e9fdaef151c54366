from datetime import timedelta

from flask_jwt_extended import create_access_token

from conftest import bearer, make_user


def test_missing_token_is_401(client, employee_id):
    r = client.get(f"/api/employee/{employee_id}")
    assert r.status_code == 401
    assert r.get_json()["message"]


def test_garbage_token_is_403(client, employee_id):
    r = client.get(f"/api/employee/{employee_id}", headers={"Authorization": "Bearer not.a.token"})
    assert r.status_code == 403


def test_expired_token_is_403(client, admin, employee_id):
    token = create_access_token(
        identity=str(admin.id),
        additional_claims={"email": admin.email, "role": admin.role},
        expires_delta=timedelta(seconds=-10),
    )
    r = client.get(f"/api/employee/{employee_id}", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


def test_login_flow(client, admin):
    r = client.post("/api/auth/login", json={"email": "admin@sogas.sn", "password": "secret123"})
    assert r.status_code == 200
    body = r.get_json()
    assert body["user"] == {"id": admin.id, "email": "admin@sogas.sn", "role": "admin"}

    r = client.get("/api/user/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert r.status_code == 200
    assert r.get_json()["user"]["role"] == "admin"


def test_login_failures(client, admin):
    assert client.post("/api/auth/login", json={"email": "nobody@sogas.sn", "password": "x"}).status_code == 404
    assert client.post("/api/auth/login", json={"email": "admin@sogas.sn", "password": "wrong"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "admin@sogas.sn"}).status_code == 400
    assert client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"}).status_code == 400


def test_register_admin_only(client, headers, app):
    r = client.post("/api/auth/register",
                    json={"email": "rh@sogas.sn", "password": "motdepasse", "role": "rh"}, headers=headers)
    assert r.status_code == 201
    assert r.get_json()["userId"]

    r = client.post("/api/auth/register",
                    json={"email": "rh@sogas.sn", "password": "motdepasse"}, headers=headers)
    assert r.status_code == 409

    r = client.post("/api/auth/register",
                    json={"email": "x@sogas.sn", "password": "court"}, headers=headers)
    assert r.status_code == 400

    rh = make_user("manager@sogas.sn", role="manager")
    r = client.post("/api/auth/register",
                    json={"email": "y@sogas.sn", "password": "motdepasse"}, headers=bearer(rh))
    assert r.status_code == 403


def test_unknown_route_is_json_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert "message" in r.get_json()
