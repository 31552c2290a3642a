import uuid

import pytest
from fastapi.testclient import TestClient

from chaos_manager.main import create_app

ALICE = {"X-User-Email": "alice@example.com"}
BOB = {"X-User-Email": "bob@example.com"}


def test_todo_lifecycle(client):
    resp = client.post("/api/todos", json={"text": "Buy milk"})
    assert resp.status_code == 201
    todo = resp.json()
    assert todo["text"] == "Buy milk"
    assert todo["completed"] is False
    assert todo["userId"] is None
    assert {"id", "createdAt", "updatedAt"} <= set(todo)

    resp = client.patch(f"/api/todos/{todo['id']}", json={"completed": True})
    assert resp.status_code == 200
    assert resp.json()["completed"] is True

    client.post("/api/todos", json={"text": "Buy bread"})
    resp = client.get("/api/todos")
    assert resp.status_code == 200
    listed = resp.json()
    assert [t["text"] for t in listed] == ["Buy bread", "Buy milk"]
    assert listed[1]["completed"] is True

    resp = client.delete(f"/api/todos/{todo['id']}")
    assert resp.status_code == 204
    assert resp.content == b""

    assert todo["id"] not in [t["id"] for t in client.get("/api/todos").json()]


def test_created_todos_get_unique_ids(client):
    ids = {client.post("/api/todos", json={"text": f"task {n}"}).json()["id"] for n in range(3)}
    assert len(ids) == 3


@pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": "   "}, {"text": None}])
def test_create_without_text_is_rejected(client, body):
    resp = client.post("/api/todos", json=body)

    assert resp.status_code == 400
    assert "detail" in resp.json()
    assert client.get("/api/todos").json() == []


def test_malformed_body_is_a_400(client):
    resp = client.post("/api/todos", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_patch_validation(client):
    todo = client.post("/api/todos", json={"text": "Buy milk"}).json()

    assert client.patch(f"/api/todos/{todo['id']}", json={"text": ""}).status_code == 400
    assert client.patch(f"/api/todos/{todo['id']}", json={"completed": "maybe"}).status_code == 400

    # No coercion from strings or numbers
    for value in ("true", "false", 1, 0, "yes", "on"):
        resp = client.patch(f"/api/todos/{todo['id']}", json={"completed": value})
        assert resp.status_code == 400, value
    assert client.patch(f"/api/todos/{todo['id']}", json={"text": 5}).status_code == 400

    assert client.get("/api/todos").json()[0]["completed"] is False


def test_patch_and_delete_missing_todo(client):
    missing = uuid.uuid4()

    assert client.patch(f"/api/todos/{missing}", json={"completed": True}).status_code == 404
    assert client.delete(f"/api/todos/{missing}").status_code == 404


def test_delete_twice(client):
    todo = client.post("/api/todos", json={"text": "Buy milk"}).json()

    assert client.delete(f"/api/todos/{todo['id']}").status_code == 204
    resp = client.delete(f"/api/todos/{todo['id']}")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Task not found"}


def test_email_header_scopes_todos(client):
    alices = client.post("/api/todos", json={"text": "alice's"}, headers=ALICE).json()
    client.post("/api/todos", json={"text": "bob's"}, headers=BOB)
    client.post("/api/todos", json={"text": "anonymous"})

    assert [t["text"] for t in client.get("/api/todos", headers=ALICE).json()] == ["alice's"]
    assert [t["text"] for t in client.get("/api/todos", headers=BOB).json()] == ["bob's"]
    assert [t["text"] for t in client.get("/api/todos").json()] == ["anonymous"]

    # Header identity creates the user on first sight
    emails = {u["email"] for u in client.get("/api/users").json()}
    assert emails == {"alice@example.com", "bob@example.com"}
    alice = client.get("/api/users/alice@example.com").json()
    assert alices["userId"] == alice["id"]

    # Bob cannot touch Alice's task
    assert client.patch(f"/api/todos/{alices['id']}", json={"completed": True}, headers=BOB).status_code == 404
    assert client.delete(f"/api/todos/{alices['id']}", headers=BOB).status_code == 404
    assert client.patch(f"/api/todos/{alices['id']}", json={"completed": True}, headers=ALICE).status_code == 200


def test_invalid_email_header(client):
    resp = client.get("/api/todos", headers={"X-User-Email": "not-an-email"})
    assert resp.status_code == 400


def test_user_id_parameter(client):
    user = client.post("/api/users", json={"email": "carol@example.com"}).json()

    resp = client.post("/api/todos", json={"text": "carol's", "userId": user["id"]})
    assert resp.status_code == 201
    assert resp.json()["userId"] == user["id"]

    listed = client.get("/api/todos", params={"userId": user["id"]}).json()
    assert [t["text"] for t in listed] == ["carol's"]
    assert client.get("/api/todos").json() == []


def test_unknown_user_id(client):
    missing = str(uuid.uuid4())

    assert client.get("/api/todos", params={"userId": missing}).status_code == 404
    assert client.post("/api/todos", json={"text": "x", "userId": missing}).status_code == 404


def test_anonymous_scope_none(settings):
    settings.ANONYMOUS_TASK_SCOPE = "none"
    with TestClient(create_app(settings)) as client:
        client.post("/api/todos", json={"text": "anonymous"})
        assert client.get("/api/todos").json() == []
        assert client.get("/api/tasks").json() == []


def test_task_summaries(client):
    todo = client.post("/api/todos", json={"text": "Buy milk"}, headers=ALICE).json()

    resp = client.get("/api/tasks", headers=ALICE)
    assert resp.status_code == 200
    assert resp.json() == [{"id": todo["id"], "title": "Buy milk", "completed": False}]
    assert client.get("/api/tasks", headers=BOB).json() == []


def test_bearer_token_scopes_todos(client):
    client.post("/api/auth/register", json={"email": "dave@example.com", "password": "pw"})
    token = client.post("/api/auth/login", json={"email": "dave@example.com", "password": "pw"}).json()["accessToken"]
    auth = {"Authorization": f"Bearer {token}"}

    client.post("/api/todos", json={"text": "dave's"}, headers=auth)

    assert [t["text"] for t in client.get("/api/todos", headers=auth).json()] == ["dave's"]
    assert [t["text"] for t in client.get("/api/todos", headers={"X-User-Email": "dave@example.com"}).json()] == ["dave's"]


def test_bad_bearer_token(client):
    resp = client.get("/api/todos", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
