# File: tests/test_projects.py

import pytest


def _member_ids(project: dict) -> list:
    return [entry["user"]["id"] for entry in project["members"]]


def test_create_project(client, admin, member, project):
    assert project["name"] == "Website Redesign"
    assert project["description"] == "Q3 revamp"
    assert project["startDate"] == "2024-01-01"
    assert project["dueDate"] == "2024-03-01"
    assert project["status"] == "Not Started"
    assert project["creator"]["id"] == admin.id
    assert _member_ids(project) == [member.id]
    assert project["updates"] == []
    assert project["id"]


def test_create_project_keeps_member_order_and_drops_duplicates(client, admin_headers, make_user):
    u1, u2 = make_user("First"), make_user("Second")
    resp = client.post(
        "/api/projects",
        json={
            "name": "Ordered",
            "description": "members in order",
            "startDate": "2024-01-01",
            "dueDate": "2024-02-01",
            "members": [u2.id, u1.id, u2.id],
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert _member_ids(resp.json()) == [u2.id, u1.id]


def test_create_project_with_status(client, admin_headers, project_payload):
    project_payload["status"] = "In Progress"
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["status"] == "In Progress"


def test_create_project_accepts_timestamps(client, admin_headers, project_payload):
    project_payload["startDate"] = "2024-01-01T09:30:00.000Z"
    project_payload["dueDate"] = "2024-03-01T00:00:00Z"
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["startDate"] == "2024-01-01"
    assert resp.json()["dueDate"] == "2024-03-01"


def test_create_project_rejects_bad_timestamp(client, admin_headers, project_payload):
    project_payload["startDate"] = "2024-13-01T09:30:00Z"
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 400
    assert "startDate" in [err["field"] for err in resp.json()["errors"]]


@pytest.mark.parametrize("missing",["name", "description", "startDate", "dueDate"])
def test_create_project_requires_fields(client, admin_headers, project_payload, missing):
    project_payload.pop(missing)
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 400
    assert missing in [err["field"] for err in resp.json()["errors"]]


def test_create_project_rejects_empty_name(client, admin_headers, project_payload):
    project_payload["name"] = ""
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 400


def test_create_project_rejects_unknown_member(client, admin_headers, project_payload):
    project_payload["members"].append("f" * 32)
    resp = client.post("/api/projects", json=project_payload, headers=admin_headers)
    assert resp.status_code == 400
    assert client.get("/api/projects", headers=admin_headers).json() == []


def test_create_project_requires_admin(client, member_headers, project_payload):
    resp = client.post("/api/projects", json=project_payload, headers=member_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "Admin access required"


def test_list_projects_admin_sees_all(client, admin_headers, project_payload, project):
    project_payload["name"] = "Second"
    project_payload["members"] = []
    client.post("/api/projects", json=project_payload, headers=admin_headers)

    resp = client.get("/api/projects", headers=admin_headers)
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Website Redesign", "Second"]


def test_list_projects_member_sees_own(client, admin_headers, member_headers, outsider_headers, project_payload, project):
    project_payload["name"] = "Not yours"
    project_payload["members"] = []
    client.post("/api/projects", json=project_payload, headers=admin_headers)

    mine = client.get("/api/projects", headers=member_headers).json()
    assert [p["id"] for p in mine] == [project["id"]]
    assert client.get("/api/projects", headers=outsider_headers).json() == []


def test_list_user_projects(client, admin_headers, member_headers, project):
    assert [p["id"] for p in client.get("/api/projects/user", headers=member_headers).json()] == [project["id"]]
    # Admins only get projects they are actually members of here
    assert client.get("/api/projects/user", headers=admin_headers).json() == []


def test_expanded_users_hide_password_hash(client, member_headers, project):
    data = client.get(f"/api/projects/{project['id']}", headers=member_headers).json()
    assert set(data["creator"]) == {"id", "name", "email"}
    assert set(data["members"][0]["user"]) == {"id", "name", "email"}


def test_get_project_access(client, admin, outsider, admin_headers, outsider_headers, member_headers, project):
    url = f"/api/projects/{project['id']}"
    assert client.get(url, headers=member_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=outsider_headers).status_code == 403

    client.put(url, json={"members": [outsider.id]}, headers=admin_headers)
    resp = client.get(url, headers=outsider_headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == project["id"]


def test_get_missing_project(client, admin_headers, member_headers):
    assert client.get(f"/api/projects/{'a' * 32}", headers=admin_headers).status_code == 404
    # Non-members are refused before existence is checked
    assert client.get(f"/api/projects/{'a' * 32}", headers=member_headers).status_code == 403


def test_update_project_partial(client, admin_headers, member, project):
    url = f"/api/projects/{project['id']}"
    resp = client.put(url, json={"status": "On Hold", "dueDate": "2024-04-15"}, headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "On Hold"
    assert data["dueDate"] == "2024-04-15"
    assert data["name"] == "Website Redesign"
    assert data["description"] == "Q3 revamp"
    assert _member_ids(data) == [member.id]


def test_update_project_accepts_timestamp(client, admin_headers, project):
    resp = client.put(
        f"/api/projects/{project['id']}",
        json={"dueDate": "2024-04-15T17:45:12.345Z"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["dueDate"] == "2024-04-15"
    assert resp.json()["startDate"] == "2024-01-01"


def test_update_project_empty_string_overwrites(client, admin_headers, project):
    resp = client.put(f"/api/projects/{project['id']}", json={"description": ""}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["description"] == ""
    assert resp.json()["name"] == "Website Redesign"


def test_update_project_rejects_null(client, admin_headers, project):
    resp = client.put(f"/api/projects/{project['id']}", json={"name": None}, headers=admin_headers)
    assert resp.status_code == 400


def test_update_project_rejects_bad_status(client, admin_headers, project):
    resp = client.put(f"/api/projects/{project['id']}", json={"status": "Abandoned"}, headers=admin_headers)
    assert resp.status_code == 400


def test_update_project_replaces_members(client, admin_headers, auth_headers, member, make_user, project):
    newcomer = make_user("Nina Newcomer")
    url = f"/api/projects/{project['id']}"

    resp = client.put(url, json={"members": [newcomer.id, member.id]}, headers=admin_headers)
    assert resp.status_code == 200
    assert _member_ids(resp.json()) == [newcomer.id, member.id]

    resp = client.put(url, json={"members": [newcomer.id]}, headers=admin_headers)
    assert _member_ids(resp.json()) == [newcomer.id]

    me = client.get("/api/auth/me", headers=auth_headers(member)).json()
    assert me["projectIds"] == []
    me = client.get("/api/auth/me", headers=auth_headers(newcomer)).json()
    assert me["projectIds"] == [project["id"]]


def test_update_project_unknown_member_changes_nothing(client, admin_headers, member, project):
    url = f"/api/projects/{project['id']}"
    resp = client.put(url, json={"name": "Renamed", "members": ["f" * 32]}, headers=admin_headers)
    assert resp.status_code == 400

    data = client.get(url, headers=admin_headers).json()
    assert data["name"] == "Website Redesign"
    assert _member_ids(data) == [member.id]


def test_update_project_requires_admin(client, member_headers, project):
    resp = client.put(f"/api/projects/{project['id']}", json={"name": "Mine"}, headers=member_headers)
    assert resp.status_code == 403


def test_update_missing_project(client, admin_headers):
    resp = client.put(f"/api/projects/{'b' * 32}", json={"name": "x"}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "PROJECT_NOT_FOUND"


def test_delete_project_cascades(client, admin_headers, member_headers, project):
    url = f"/api/projects/{project['id']}"
    created = client.post(f"{url}/updates", data={"content": "Kickoff done"}, headers=member_headers).json()
    client.post(
        f"{url}/updates/{created['id']}/comments",
        json={"content": "Nice"},
        headers=member_headers,
    )

    resp = client.delete(url, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Project deleted"}

    assert client.get("/api/projects", headers=member_headers).json() == []
    assert client.get("/api/auth/me", headers=member_headers).json()["projectIds"] == []
    assert client.get(url, headers=admin_headers).status_code == 404


def test_delete_project_requires_admin(client, member_headers, project):
    assert client.delete(f"/api/projects/{project['id']}", headers=member_headers).status_code == 403


def test_delete_missing_project(client, admin_headers):
    assert client.delete(f"/api/projects/{'c' * 32}", headers=admin_headers).status_code == 404
