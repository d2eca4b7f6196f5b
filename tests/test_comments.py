# tests/test_comments.py
from helpdesk.auth.models import Profile


def test_add_and_list_comments(client, customer, agent, assigned_ticket):
    url = f"/tickets/{assigned_ticket['id']}/comments/"
    r = client.post(url, json={"content": "  It is still smoking  "}, headers=customer.headers)
    assert r.status_code == 201
    data = r.json()
    assert data["content"] == "It is still smoking"
    assert data["ticket_id"] == assigned_ticket["id"]
    assert data["user"] == {
        "id": customer.id,
        "name": "Carol Customer",
        "email": "carol@example.com",
        "role": "customer",
    }

    r2 = client.post(url, json={"content": "On my way"}, headers=agent.headers)
    assert r2.status_code == 201

    r3 = client.get(url, headers=customer.headers)
    assert r3.status_code == 200
    thread = r3.json()
    assert [c["content"] for c in thread] == ["It is still smoking", "On my way"]
    assert thread[1]["user"]["role"] == "agent"


def test_blank_comment_rejected(client, customer, ticket):
    r = client.post(f"/tickets/{ticket['id']}/comments/", json={"content": "   "}, headers=customer.headers)
    assert r.status_code == 422


def test_comments_follow_ticket_visibility(client, agent, make_account, ticket):
    stranger = make_account("sam@example.com")
    url = f"/tickets/{ticket['id']}/comments/"

    assert client.get(url, headers=stranger.headers).status_code == 404
    assert client.post(url, json={"content": "hi"}, headers=stranger.headers).status_code == 404
    # not assigned yet
    assert client.get(url, headers=agent.headers).status_code == 404
    assert client.get("/tickets/999/comments/", headers=stranger.headers).status_code == 404


def test_author_without_name(client, db, customer, ticket):
    url = f"/tickets/{ticket['id']}/comments/"
    client.post(url, json={"content": "hello"}, headers=customer.headers)

    db.query(Profile).filter(Profile.id == customer.id).update({"full_name": None})
    db.commit()

    r = client.get(url, headers=customer.headers)
    assert r.json()[0]["user"]["name"] == "Unknown User"
