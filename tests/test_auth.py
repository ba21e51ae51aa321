def test_register_and_login(client):
    res = client.post("/auth/register", json={
        "email": "Asha@Example.com",
        "password": "secret123",
        "role": "rider",
        "firstName": "Asha",
        "city": "Mumbai",
    })
    assert res.status_code == 201
    user = res.json()
    assert user["email"] == "asha@example.com"
    assert user["role"] == "rider"
    assert user["status"] == "active"
    assert "passwordHash" not in user and "password" not in user

    res = client.post("/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert res.status_code == 200
    body = res.json()
    assert body["token"]
    assert body["user"]["id"] == user["id"]


def test_driver_registers_pending_verification(client):
    res = client.post("/auth/register", json={
        "email": "d@example.com", "password": "secret123", "role": "driver", "firstName": "Ravi",
    })
    assert res.status_code == 201
    assert res.json()["status"] == "pending_verification"


def test_duplicate_email_rejected_without_second_record(client, signup, admin):
    signup("dup@example.com", "rider")

    res = client.post("/auth/register", json={
        "email": "DUP@example.com", "password": "other123", "role": "driver", "firstName": "X",
    })
    assert res.status_code == 409
    assert res.json()["message"] == "User already exists"

    res = client.get("/admin/users", params={"search": "dup@example.com"}, headers=admin["headers"])
    assert res.json()["total"] == 1


def test_register_validation(client):
    res = client.post("/auth/register", json={
        "email": "bad", "password": "secret123", "role": "rider", "firstName": "X",
    })
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"

    res = client.post("/auth/register", json={
        "email": "x@example.com", "password": "123", "role": "rider", "firstName": "X",
    })
    assert res.status_code == 400

    res = client.post("/auth/register", json={
        "email": "x@example.com", "password": "secret123", "role": "pilot", "firstName": "X",
    })
    assert res.status_code == 400


def test_bad_credentials(client, rider):
    res = client.post("/auth/login", json={"email": rider["email"], "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"

    res = client.post("/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert res.status_code == 401


def test_profile_and_alias_routes(client, rider):
    res = client.get("/auth/profile", headers=rider["headers"])
    assert res.status_code == 200
    assert res.json()["email"] == rider["email"]

    res = client.get("/api/auth/me", headers=rider["headers"])
    assert res.status_code == 200
    assert res.json()["id"] == rider["id"]


def test_update_profile(client, rider):
    res = client.put("/auth/profile", json={"city": "Pune", "phoneNumber": "9876543210"}, headers=rider["headers"])
    assert res.status_code == 200
    assert res.json()["city"] == "Pune"
    assert res.json()["phoneNumber"] == "9876543210"
    assert res.json()["firstName"] == "Test"


def test_missing_and_invalid_token(client):
    res = client.get("/auth/profile")
    assert res.status_code == 401
    assert res.json()["message"] == "Access token required"

    res = client.get("/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_suspended_user_is_locked_out(client, admin, rider):
    res = client.put(f"/admin/users/{rider['id']}/status", json={"status": "suspended"}, headers=admin["headers"])
    assert res.status_code == 200

    assert client.get("/auth/profile", headers=rider["headers"]).status_code == 403

    res = client.post("/auth/login", json={"email": rider["email"], "password": "secret123"})
    assert res.status_code == 403


def test_profile_rejects_null_first_name(client, rider):
    res = client.put("/auth/profile", json={"firstName": None}, headers=rider["headers"])
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"

    res = client.put("/auth/profile", json={"firstName": "   "}, headers=rider["headers"])
    assert res.status_code == 400

    assert client.get("/auth/profile", headers=rider["headers"]).json()["firstName"] == "Test"
