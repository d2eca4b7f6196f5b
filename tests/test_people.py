# tests/test_people.py


def test_agents_with_their_tickets(client, admin, agent, assigned_ticket):
    r = client.get("/people/agents", headers=admin.headers)
    assert r.status_code == 200
    agents = r.json()
    assert [a["id"] for a in agents] == [agent.id]
    assert agents[0]["full_name"] == "Alan Agent"
    assert agents[0]["tickets"] == [
        {"id": assigned_ticket["id"], "title": "Printer on fire", "status": "open", "priority": "medium"}
    ]


def test_agents_scoped_to_company(client, admin, agent, make_account, staff_code):
    other_admin = make_account(
        "boss@globex.com", role="admin", verification_code=staff_code("admin"), company_name="Globex"
    )
    r = client.get("/people/agents", headers=other_admin.headers)
    assert r.status_code == 200
    assert r.json() == []


def test_customers_of_company(client, admin, customer, make_account):
    walk_in = make_account("walk@example.com", full_name="Walk In")
    make_account("elsewhere@example.com", full_name="Elsewhere")

    # filing against the company makes a company-less customer show up
    for title in ("First", "Second"):
        r = client.post(
            "/tickets/",
            json={"title": title, "description": "D", "company_id": admin.profile["company_id"]},
            headers=walk_in.headers,
        )
        assert r.status_code == 201

    r = client.get("/people/customers", headers=admin.headers)
    assert r.status_code == 200
    customers = r.json()
    assert [c["id"] for c in customers] == [customer.id, walk_in.id]
    assert customers[0]["company_name"] == "Acme"
    assert customers[1]["company_id"] is None
    assert customers[1]["company_name"] is None


def test_people_is_admin_only(client, agent, customer):
    assert client.get("/people/agents", headers=agent.headers).status_code == 403
    assert client.get("/people/customers", headers=customer.headers).status_code == 403
