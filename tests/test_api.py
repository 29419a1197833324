import pytest

pytestmark = pytest.mark.api


def create_entry(client, headers, **body):
    response = client.post("/api/v1/entries/", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["entry"]


def create_prompt(client, headers, **body):
    body.setdefault("title", "Evening wind-down")
    body.setdefault("promptText", "What can you let go of tonight?")
    response = client.post("/api/v1/prompts/", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["prompt"]


def test_anonymous_requests_are_rejected(client):
    response = client.get("/api/v1/entries/")
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": {"code": "UNAUTHORIZED", "message": "You must be signed in to perform this action."},
    }


def test_authentication_is_checked_before_the_body(client):
    response = client.post("/api/v1/entries/", json={"moodScore": 99})
    assert response.status_code == 401


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/api/v1/entries/"),
        ("patch", "/api/v1/entries/abc"),
        ("post", "/api/v1/prompts/"),
        ("patch", "/api/v1/prompts/abc"),
    ],
)
def test_anonymous_request_without_body_is_unauthorized(client, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_anonymous_request_with_non_object_body_is_unauthorized(client):
    response = client.post("/api/v1/entries/", json=[1, 2])
    assert response.status_code == 401


def test_non_object_body_is_bad_request(client, alice_headers):
    response = client.post("/api/v1/entries/", json=[1, 2], headers=alice_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"


def test_invalid_token_counts_as_anonymous(client):
    response = client.get("/api/v1/prompts/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_entry_lifecycle(client, alice_headers):
    entry = create_entry(client, alice_headers, entryDate="2025-05-04", moodScore=8, moodLabel="happy", tags="sun")
    assert entry["userId"] == "user-alice"
    assert entry["moodScore"] == 8
    assert entry["entryDate"].startswith("2025-05-04T00:00:00")

    fetched = client.get(f"/api/v1/entries/{entry['id']}", headers=alice_headers)
    assert fetched.status_code == 200
    assert fetched.json() == {"success": True, "data": {"entry": entry}}

    updated = client.patch(f"/api/v1/entries/{entry['id']}", json={"tags": None}, headers=alice_headers)
    assert updated.json() == {"success": True, "data": {"id": entry["id"]}}
    after = client.get(f"/api/v1/entries/{entry['id']}", headers=alice_headers).json()["data"]["entry"]
    assert after["tags"] is None
    assert after["moodLabel"] == "happy"

    deleted = client.delete(f"/api/v1/entries/{entry['id']}", headers=alice_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}

    gone = client.get(f"/api/v1/entries/{entry['id']}", headers=alice_headers)
    assert gone.status_code == 404
    assert gone.json()["error"] == {"code": "NOT_FOUND", "message": "Entry not found."}


def test_foreign_entries_look_missing(client, alice_headers, bob_headers):
    entry = create_entry(client, alice_headers, title="Diary")
    for method in ("get", "delete"):
        response = getattr(client, method)(f"/api/v1/entries/{entry['id']}", headers=bob_headers)
        assert response.status_code == 404
    response = client.patch(f"/api/v1/entries/{entry['id']}", json={"title": "Mine"}, headers=bob_headers)
    assert response.status_code == 404
    assert client.get(f"/api/v1/entries/{entry['id']}", headers=alice_headers).json()["data"]["entry"] == entry


def test_invalid_entry_body_is_bad_request(client, alice_headers):
    response = client.post("/api/v1/entries/", json={"moodScore": 11}, headers=alice_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "BAD_REQUEST"
    assert "mood_score" in body["error"]["message"] or "moodScore" in body["error"]["message"]


@pytest.mark.parametrize("body", [{"moodScore": True}, {"moodScore": "7"}, {"entryDate": 1735689600}, {"entryDate": "2025-01-01T00:00:00"}])
def test_entry_fields_are_not_coerced(client, alice_headers, body):
    response = client.post("/api/v1/entries/", json=body, headers=alice_headers)
    assert response.status_code == 400


def test_list_entries_pagination(client, alice_headers):
    for day in range(1, 6):
        create_entry(client, alice_headers, entryDate=f"2025-06-{day:02d}", title=f"day {day}")

    response = client.get("/api/v1/entries/", params={"page": 2, "pageSize": 2}, headers=alice_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 5
    assert data["page"] == 2
    assert data["pageSize"] == 2
    assert [item["title"] for item in data["items"]] == ["day 3", "day 2"]


@pytest.mark.parametrize("params", [{"pageSize": 0}, {"pageSize": 101}, {"page": 0}, {"page": "abc"}, {"page": 10 ** 19}])
def test_list_entries_rejects_bad_pagination(client, alice_headers, params):
    response = client.get("/api/v1/entries/", params=params, headers=alice_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"


def test_prompts_flow(client, alice_headers, bob_headers):
    prompt = create_prompt(client, alice_headers, category="reflection", isSystem=True)
    assert prompt["isSystem"] is False
    assert prompt["isActive"] is True

    assert client.get("/api/v1/prompts/", headers=bob_headers).json()["data"] == {"items": [], "total": 0}

    response = client.patch(f"/api/v1/prompts/{prompt['id']}", json={"isActive": False}, headers=alice_headers)
    assert response.json() == {"success": True, "data": {"id": prompt["id"]}}

    assert client.get("/api/v1/prompts/", headers=alice_headers).json()["data"]["total"] == 0
    listed = client.get("/api/v1/prompts/", params={"includeInactive": "true"}, headers=alice_headers).json()
    assert [item["id"] for item in listed["data"]["items"]] == [prompt["id"]]
    assert listed["data"]["items"][0]["isActive"] is False


def test_prompt_of_another_user_cannot_be_updated(client, alice_headers, bob_headers):
    prompt = create_prompt(client, alice_headers)
    response = client.patch(f"/api/v1/prompts/{prompt['id']}", json={"title": "Taken"}, headers=bob_headers)
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Prompt not found."


def test_prompts_have_no_delete_route(client, alice_headers):
    prompt = create_prompt(client, alice_headers)
    response = client.delete(f"/api/v1/prompts/{prompt['id']}", headers=alice_headers)
    assert response.status_code == 405


def test_info_reports_the_caller(client, alice_headers):
    assert client.get("/api/v1/info/").json()["userId"] is None
    info = client.get("/api/v1/info/", headers=alice_headers).json()
    assert info["userId"] == "user-alice"
    assert info["name"]
