# tests/test_feedback.py


def _close(client, admin, ticket_id):
    r = client.patch(f"/tickets/{ticket_id}", json={"status": "closed"}, headers=admin.headers)
    assert r.status_code == 200


def test_feedback_on_closed_ticket(client, admin, customer, ticket):
    url = f"/tickets/{ticket['id']}/feedback/"
    _close(client, admin, ticket["id"])

    r = client.post(url, json={"rating": 5, "comment": " Great help "}, headers=customer.headers)
    assert r.status_code == 201
    data = r.json()
    assert data["rating"] == 5
    assert data["comment"] == "Great help"
    assert data["user_id"] == customer.id

    r2 = client.get(url, headers=admin.headers)
    assert r2.status_code == 200
    assert [f["rating"] for f in r2.json()] == [5]


def test_feedback_needs_closed_ticket(client, customer, ticket):
    r = client.post(f"/tickets/{ticket['id']}/feedback/", json={"rating": 4}, headers=customer.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Feedback can only be left on closed tickets"


def test_feedback_only_once(client, admin, customer, ticket):
    url = f"/tickets/{ticket['id']}/feedback/"
    _close(client, admin, ticket["id"])
    assert client.post(url, json={"rating": 3}, headers=customer.headers).status_code == 201

    r = client.post(url, json={"rating": 1}, headers=customer.headers)
    assert r.status_code == 409


def test_only_filer_rates(client, admin, customer, ticket):
    _close(client, admin, ticket["id"])
    r = client.post(f"/tickets/{ticket['id']}/feedback/", json={"rating": 2}, headers=admin.headers)
    assert r.status_code == 403


def test_rating_bounds(client, admin, customer, ticket):
    url = f"/tickets/{ticket['id']}/feedback/"
    _close(client, admin, ticket["id"])
    assert client.post(url, json={"rating": 0}, headers=customer.headers).status_code == 422
    assert client.post(url, json={"rating": 6}, headers=customer.headers).status_code == 422


def test_feedback_hidden_from_strangers(client, make_account, ticket):
    stranger = make_account("sam@example.com")
    r = client.get(f"/tickets/{ticket['id']}/feedback/", headers=stranger.headers)
    assert r.status_code == 404
