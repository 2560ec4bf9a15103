from core.store import USERS
from routes.auth import create_user, find_user_by_email, seed_admin_user


def test_login_returns_token(client, store):
    create_user(store, "Staff@Example.com", "secret")

    response = client.post("/api/auth/login", json={"email": "staff@example.com", "password": "secret"})

    assert response.status_code == 200
    body = response.get_json()
    assert body["access_token"]
    assert body["user"]["email"] == "staff@example.com"
    assert "password" not in body["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["role"] == "user"


def test_login_rejects_bad_credentials(client, store):
    create_user(store, "staff@example.com", "secret")

    wrong = client.post("/api/auth/login", json={"email": "staff@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret"})
    missing = client.post("/api/auth/login", json={"email": "staff@example.com"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert missing.status_code == 400


def test_passwords_are_hashed(store):
    user = create_user(store, "staff@example.com", "secret")
    assert store.get(USERS, user["id"])["password"] != "secret"


def test_seed_admin_user_is_idempotent(app, store):
    first = seed_admin_user()
    second = seed_admin_user()

    assert first["id"] == second["id"]
    assert find_user_by_email(store, "admin@example.com")["role"] == "admin"
    assert len(store.list(USERS)) == 1
