from fastapi.testclient import TestClient


def _setup_billing(client: TestClient) -> dict:
    project = client.post("/projects", json={"name": "Billing"}).json()
    client.post("/permissions", json={"projectId": project["id"], "key": "invoice.read"})
    client.post(f"/projects/{project['id']}/groups", json={"name": "Admins"})
    client.post("/groups/1/permissions", json={"permissionId": 1, "enabled": True})
    return project


def test_export_by_api_key_lists_enabled_permissions(client: TestClient) -> None:
    project = _setup_billing(client)

    response = client.get(f"/export/project/{project['apiKey']}")
    assert response.status_code == 200
    assert response.json() == {
        "id": 1,
        "name": "Billing",
        "description": None,
        "apiKey": project["apiKey"],
        "permissionGroups": [
            {"id": 1, "name": "Admins", "permissions": [{"key": "invoice.read", "description": None}]}
        ],
    }


def test_export_drops_disabled_links(client: TestClient) -> None:
    project = _setup_billing(client)
    client.post("/groups/1/permissions", json={"permissionId": 1, "enabled": False})

    exported = client.get(f"/export/project/{project['apiKey']}").json()
    assert exported["permissionGroups"] == [{"id": 1, "name": "Admins", "permissions": []}]


def test_export_only_includes_enabled_permissions_of_each_group(client: TestClient) -> None:
    project = _setup_billing(client)
    client.post("/permissions", json={"projectId": project["id"], "key": "invoice.void", "description": "Void"})
    client.post(f"/projects/{project['id']}/groups", json={"name": "Viewers"})
    client.post("/groups/1/permissions", json={"permissionId": 2, "enabled": True})
    client.post("/groups/2/permissions", json={"permissionId": 1, "enabled": True})
    client.post("/groups/2/permissions", json={"permissionId": 2, "enabled": False})

    groups = client.get(f"/export/project/{project['apiKey']}").json()["permissionGroups"]
    assert groups == [
        {
            "id": 1,
            "name": "Admins",
            "permissions": [
                {"key": "invoice.read", "description": None},
                {"key": "invoice.void", "description": "Void"},
            ],
        },
        {"id": 2, "name": "Viewers", "permissions": [{"key": "invoice.read", "description": None}]},
    ]


def test_export_after_permission_delete(client: TestClient) -> None:
    project = _setup_billing(client)
    client.delete("/permissions/1")

    exported = client.get(f"/export/project/{project['apiKey']}").json()
    assert exported["permissionGroups"] == [{"id": 1, "name": "Admins", "permissions": []}]
    assert client.get("/projects").json()[0]["permissions"] == []


def test_export_unknown_api_key(client: TestClient) -> None:
    _setup_billing(client)

    response = client.get("/export/project/not-a-key")
    assert response.status_code == 404
    assert response.json() == {"error": "Project not found"}


def test_export_all(client: TestClient) -> None:
    billing = _setup_billing(client)
    empty = client.post("/projects", json={"name": "Empty", "description": "Nothing here"}).json()

    response = client.get("/export/all")
    assert response.status_code == 200
    exported = response.json()

    assert [p["apiKey"] for p in exported] == [billing["apiKey"], empty["apiKey"]]
    assert exported[0]["permissionGroups"][0]["permissions"] == [{"key": "invoice.read", "description": None}]
    assert exported[1] == {
        "id": empty["id"],
        "name": "Empty",
        "description": "Nothing here",
        "apiKey": empty["apiKey"],
        "permissionGroups": [],
    }


def test_export_hides_link_metadata(client: TestClient) -> None:
    project = _setup_billing(client)

    group = client.get(f"/export/project/{project['apiKey']}").json()["permissionGroups"][0]
    assert set(group) == {"id", "name", "permissions"}
    assert set(group["permissions"][0]) == {"key", "description"}
