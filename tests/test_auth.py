# tests/test_auth.py
PASSWORD = "secret123"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_customer_signup_login_and_me(client):
    r = client.post(
        "/auth/signup",
        json={"email": "Dave@Example.com", "password": PASSWORD, "full_name": "  Dave  "},
    )
    assert r.status_code == 201
    data = r.json()
    assert data["email"] == "dave@example.com"
    assert data["full_name"] == "Dave"
    assert data["role"] == "customer"
    assert data["company_id"] is None

    r2 = client.post("/auth/login", json={"email": "dave@example.com", "password": PASSWORD})
    assert r2.status_code == 200
    token = r2.json()
    assert token["token_type"] == "bearer"
    assert token["expires_in"] > 0

    r3 = client.get("/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
    assert r3.status_code == 200
    assert r3.json()["id"] == data["id"]


def test_duplicate_email_is_conflict(client, customer):
    r = client.post(
        "/auth/signup",
        json={"email": "carol@example.com", "password": PASSWORD, "full_name": "Again"},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "This email is already registered. Please sign in instead."


def test_signup_validation(client):
    r = client.post("/auth/signup", json={"email": "x@example.com", "password": "123", "full_name": "X"})
    assert r.status_code == 422

    r2 = client.post("/auth/signup", json={"email": "x@example.com", "password": PASSWORD, "full_name": "   "})
    assert r2.status_code == 422

    r3 = client.post("/auth/signup", json={"email": "not-an-email", "password": PASSWORD, "full_name": "X"})
    assert r3.status_code == 422


def test_customer_signup_with_unknown_company(client):
    r = client.post(
        "/auth/signup",
        json={"email": "x@example.com", "password": PASSWORD, "full_name": "X", "company_id": 999},
    )
    assert r.status_code == 404


def test_login_with_wrong_password(client, customer):
    r = client.post("/auth/login", json={"email": "carol@example.com", "password": "wrong-one"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid login credentials"

    r2 = client.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert r2.status_code == 401


def test_staff_signup_requires_code(client, staff_code):
    body = {"email": "a@acme.com", "password": PASSWORD, "full_name": "A", "role": "agent"}
    r = client.post("/auth/signup", json=body)
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid verification code"

    # admin code does not unlock the agent role
    r2 = client.post("/auth/signup", json={**body, "verification_code": staff_code("admin")})
    assert r2.status_code == 400

    r3 = client.post("/auth/signup", json={**body, "verification_code": "NOPE1234"})
    assert r3.status_code == 400


def test_verification_code_is_single_use(client, staff_code):
    code = staff_code("admin")
    r = client.post(
        "/auth/signup",
        json={"email": "a1@acme.com", "password": PASSWORD, "full_name": "A1", "role": "admin",
              "verification_code": code, "company_name": "First"},
    )
    assert r.status_code == 201

    r2 = client.post(
        "/auth/signup",
        json={"email": "a2@acme.com", "password": PASSWORD, "full_name": "A2", "role": "admin",
              "verification_code": code, "company_name": "Second"},
    )
    assert r2.status_code == 400


def test_admin_signup_founds_company(client, admin):
    assert admin.profile["role"] == "admin"
    assert admin.profile["company_id"] is not None

    r = client.get(f"/companies/{admin.profile['company_id']}", headers=admin.headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Acme"


def test_admin_signup_needs_company_name(client, staff_code):
    r = client.post(
        "/auth/signup",
        json={"email": "a@acme.com", "password": PASSWORD, "full_name": "A", "role": "admin",
              "verification_code": staff_code("admin"), "company_name": "  "},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Company name is required for admins"


def test_admin_signup_with_taken_company_name(client, admin, staff_code):
    r = client.post(
        "/auth/signup",
        json={"email": "b@acme.com", "password": PASSWORD, "full_name": "B", "role": "admin",
              "verification_code": staff_code("admin"), "company_name": "Acme"},
    )
    assert r.status_code == 409

    # still a single company
    r2 = client.get("/companies/", headers=admin.headers)
    assert [c["name"] for c in r2.json()] == ["Acme"]


def test_agent_joins_company_of_code(admin, agent):
    assert agent.profile["role"] == "agent"
    assert agent.profile["company_id"] == admin.profile["company_id"]


def test_admin_issues_agent_code(client, admin, make_account):
    r = client.post("/auth/verification-codes", json={"role": "agent"}, headers=admin.headers)
    assert r.status_code == 201
    data = r.json()
    assert len(data["code"]) == 8
    assert data["role"] == "agent"
    assert data["company_id"] == admin.profile["company_id"]
    assert data["used"] is False

    joined = make_account("new@acme.com", role="agent", verification_code=data["code"])
    assert joined.profile["company_id"] == admin.profile["company_id"]


def test_only_admins_issue_codes(client, admin, customer):
    r = client.post("/auth/verification-codes", json={"role": "agent"}, headers=customer.headers)
    assert r.status_code == 403

    r2 = client.post("/auth/verification-codes", json={"role": "customer"}, headers=admin.headers)
    assert r2.status_code == 422


def test_me_requires_token(client):
    r = client.get("/auth/me")
    assert r.status_code == 401

    r2 = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert r2.status_code == 401


def test_update_profile(client, customer):
    r = client.patch("/auth/me", json={"full_name": "Carol C."}, headers=customer.headers)
    assert r.status_code == 200
    assert r.json()["full_name"] == "Carol C."


def test_logout_revokes_token(client, customer):
    r = client.post("/auth/logout", headers=customer.headers)
    assert r.status_code == 204

    r2 = client.get("/auth/me", headers=customer.headers)
    assert r2.status_code == 401


def test_refresh_rotates_token(client, customer):
    r = client.post("/auth/refresh", headers=customer.headers)
    assert r.status_code == 200
    fresh = r.json()["access_token"]
    assert fresh != customer.token

    assert client.get("/auth/me", headers={"Authorization": f"Bearer {fresh}"}).status_code == 200
    assert client.get("/auth/me", headers=customer.headers).status_code == 401
