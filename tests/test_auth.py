from fastapi.testclient import TestClient

from conftest import make_settings
from main import create_app
from shared.security import limiter

USER = {"email": "meera@example.com", "password": "s3cret-pass", "full_name": "Meera Nair"}


def test_register_hides_password(client):
    resp = client.post("/api/auth/register", json=USER)
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["email"] == USER["email"]
    assert user["full_name"] == "Meera Nair"
    assert "password" not in user


def test_register_existing_user_is_rejected(client):
    client.post("/api/auth/register", json=USER)
    resp = client.post("/api/auth/register", json=USER)
    assert resp.status_code == 400
    assert resp.json() == {"error": "User already exists"}


def test_register_validates_input(client):
    resp = client.post("/api/auth/register", json={"email": "not-an-email", "password": "s3cret-pass"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/register", json={"email": "short@example.com", "password": "123"})
    assert resp.status_code == 400


def test_password_is_stored_hashed(client):
    client.post("/api/auth/register", json=USER)
    [stored] = client.app.state.stores.memory.rows("users")
    assert stored.password != USER["password"]
    assert stored.password.startswith("$2")


def test_login_against_database(sql_client):
    sql_client.post("/api/auth/register", json=USER)
    resp = sql_client.post("/api/auth/login", json={"email": USER["email"], "password": USER["password"]})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == USER["email"]


def test_login_with_wrong_password(client):
    client.post("/api/auth/register", json=USER)
    resp = client.post("/api/auth/login", json={"email": USER["email"], "password": "wrong-pass"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_login_unknown_user(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert resp.status_code == 401


def test_get_user(client):
    user_id = client.post("/api/auth/register", json=USER).json()["user"]["id"]
    resp = client.get(f"/api/auth/user/{user_id}")
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user_id

    assert client.get("/api/auth/user/missing").status_code == 404


def test_login_is_rate_limited_per_client():
    limiter.reset()
    limited_app = create_app(make_settings(rate_limit_enabled=True))
    # Building an app with rate limiting off must not change the first one
    unlimited_app = create_app(make_settings(rate_limit_enabled=False))
    login = {"email": "x@example.com", "password": "nope"}
    with TestClient(limited_app) as rate_limited, TestClient(unlimited_app) as unlimited:
        statuses = [rate_limited.post("/api/auth/login", json=login).status_code for _ in range(11)]
        unlimited_statuses = {unlimited.post("/api/auth/login", json=login).status_code for _ in range(11)}
    limiter.reset()
    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429
    assert unlimited_statuses == {401}

