# tests/test_chat.py

import pytest

CUSTOMER = {"name": "Kofi Boateng", "phone": "0201112223", "email": "kofi@example.com"}


@pytest.fixture
def chat(client):
    response = client.post("/chat/", json={"customer": CUSTOMER})
    assert response.status_code == 201
    return response.json()


def test_first_contact_creates_customer_and_chat(client, admin_headers, chat):
    assert chat["status"] == "active"
    assert chat["messages"] == []
    assert chat["customer"]["phone"] == "0201112223"

    customers = client.get("/customer/", headers=admin_headers).json()
    assert [customer["id"] for customer in customers] == [chat["customer_id"]]


def test_returning_customer_gets_the_same_chat(client, admin_headers, chat):
    again = client.post("/chat/", json={"customer": {"name": "Kofi B.", "phone": "0201112223"}})
    assert again.status_code == 201
    assert again.json()["id"] == chat["id"]

    customers = client.get("/customer/", headers=admin_headers).json()
    assert len(customers) == 1
    assert customers[0]["name"] == "Kofi B."
    assert customers[0]["email"] == "kofi@example.com"


def test_chat_contact_and_order_share_customer(client, admin_headers, menu, place_order, chat):
    response = place_order(name="Kofi Boateng", phone="0201112223")
    assert response.status_code == 201

    customers = client.get("/customer/", headers=admin_headers).json()
    assert len(customers) == 1
    assert customers[0]["id"] == chat["customer_id"]


def test_name_and_phone_are_required(client, admin_headers):
    assert client.post("/chat/", json={"customer": {"name": "Kofi", "phone": " "}}).status_code == 400
    assert client.post("/chat/", json={"customer": {"name": "", "phone": "0201112223"}}).status_code == 400
    assert client.get("/customer/", headers=admin_headers).json() == []


def test_conversation_and_unread_count(client, admin_headers, chat):
    chat_id = chat["id"]

    sent = client.post(f"/chat/{chat_id}/messages", json={"message": "  Where is my order?  "})
    assert sent.status_code == 201
    assert sent.json()["message"] == "Where is my order?"
    assert sent.json()["sender_type"] == "customer"
    assert sent.json()["sender_id"] == chat["customer_id"]

    chats = client.get("/chat/", headers=admin_headers).json()
    assert chats[0]["id"] == chat_id
    assert chats[0]["unread_count"] == 1

    reply = client.post(f"/chat/{chat_id}/reply", json={"message": "On its way"}, headers=admin_headers)
    assert reply.status_code == 201
    assert reply.json()["sender_type"] == "admin"
    assert reply.json()["sender_id"] == "admin"

    marked = client.post(f"/chat/{chat_id}/read", headers=admin_headers)
    assert marked.json() == {"success": True, "marked": 1}
    assert client.post(f"/chat/{chat_id}/read", headers=admin_headers).json()["marked"] == 0

    current = client.get(f"/chat/{chat_id}").json()
    assert current["unread_count"] == 0
    assert [m["sender_type"] for m in current["messages"]] == ["customer", "admin"]
    assert all(m["is_read"] for m in current["messages"] if m["sender_type"] == "customer")


def test_empty_message_and_unknown_chat(client, chat):
    assert client.post(f"/chat/{chat['id']}/messages", json={"message": "   "}).status_code == 400
    assert client.post("/chat/missing/messages", json={"message": "hello"}).status_code == 404
    assert client.get("/chat/missing").status_code == 404


def test_admin_chat_endpoints_require_token(client, chat):
    assert client.get("/chat/").status_code == 401
    assert client.post(f"/chat/{chat['id']}/reply", json={"message": "hi"}).status_code == 401
    assert client.post(f"/chat/{chat['id']}/read").status_code == 401


def test_admin_opens_chat_with_existing_customer(client, admin_headers, place_order):
    place_order()
    customer = client.get("/customer/", headers=admin_headers).json()[0]

    opened = client.post(f"/chat/customer/{customer['id']}", headers=admin_headers)
    assert opened.status_code == 200
    assert opened.json()["customer_id"] == customer["id"]

    again = client.post(f"/chat/customer/{customer['id']}", headers=admin_headers)
    assert again.json()["id"] == opened.json()["id"]

    assert client.post("/chat/customer/missing", headers=admin_headers).status_code == 404


def test_customer_message_reopens_closed_chat(client, admin_headers, chat):
    closed = client.patch(f"/chat/{chat['id']}/status", json={"status": "closed"}, headers=admin_headers)
    assert closed.json()["status"] == "closed"

    active = client.get("/chat/", params={"chat_status": "active"}, headers=admin_headers).json()
    assert active == []

    client.post(f"/chat/{chat['id']}/messages", json={"message": "One more question"})
    assert client.get(f"/chat/{chat['id']}").json()["status"] == "active"


def test_deleting_customer_removes_chat(client, admin_headers, chat):
    client.post(f"/chat/{chat['id']}/messages", json={"message": "Hello"})

    response = client.delete(f"/customer/{chat['customer_id']}", headers=admin_headers)
    assert response.status_code == 204
    assert client.get(f"/chat/{chat['id']}").status_code == 404
