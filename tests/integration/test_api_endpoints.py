from docshare.infrastructure.database.repositories.profile_repository import ProfileRepository


def create_doc(client, auth_header, owner: str, content=None) -> str:
    body = {"content": content if content is not None else {"title": "notes"}}
    r = client.post("/documents", headers=auth_header(owner), json=body)
    assert r.status_code == 201, r.text
    return r.json()["id"]


def seed_profile(user_id: str, email: str, first: str = "", last: str = "") -> None:
    ProfileRepository(None).create(user_id, email, first, last)


def test_root_and_health(client):
    assert client.get("/").json()["service"] == "docshare-backend"
    assert client.get("/health").json() == {"status": "healthy"}


def test_auth_validate_creates_profile(client, auth_header):
    r = client.post("/auth/validate", headers=auth_header("user_A"))
    assert r.status_code == 200
    assert r.json()["user_id"] == "user_A"

    r2 = client.get("/profiles/me", headers=auth_header("user_A"))
    assert r2.status_code == 200
    assert r2.json()["id"] == "user_A"


def test_missing_token_is_unauthorized(client):
    r = client.get("/profiles/me")
    assert r.status_code == 401
    assert "detail" in r.json()

    r2 = client.get("/documents/doc_1/shares")
    assert r2.status_code == 401


def test_share_workflow(client, auth_header):
    doc_id = create_doc(client, auth_header, "user_A")

    r = client.put(
        f"/documents/{doc_id}/shares",
        headers=auth_header("user_B"),
        json={"shared_with": ["user_C"]},
    )
    assert r.status_code == 403

    r = client.put(
        f"/documents/{doc_id}/shares",
        headers=auth_header("user_A"),
        json={"shared_with": ["user_B", "user_C"]},
    )
    assert r.status_code == 204

    r = client.get(f"/documents/{doc_id}/shares", headers=auth_header("user_A"))
    assert r.status_code == 200
    assert set(r.json()["shared_with"]) == {"user_B", "user_C"}

    r = client.put(f"/documents/{doc_id}/shares/user_A", headers=auth_header("user_A"))
    assert r.status_code == 400
    assert r.json()["detail"] == "Cannot share document with the owner."

    r = client.delete(f"/documents/{doc_id}/shares/user_Z", headers=auth_header("user_A"))
    assert r.status_code == 204
    r = client.get(f"/documents/{doc_id}/shares", headers=auth_header("user_A"))
    assert set(r.json()["shared_with"]) == {"user_B", "user_C"}


def test_set_sharers_with_owner_leaves_set_unchanged(client, auth_header):
    doc_id = create_doc(client, auth_header, "user_A")
    client.put(f"/documents/{doc_id}/shares/user_B", headers=auth_header("user_A"))

    r = client.put(
        f"/documents/{doc_id}/shares",
        headers=auth_header("user_A"),
        json={"shared_with": ["user_C", "user_A"]},
    )
    assert r.status_code == 400

    r = client.get(f"/documents/{doc_id}/shares", headers=auth_header("user_A"))
    assert r.json()["shared_with"] == ["user_B"]


def test_set_sharers_trims_and_dedupes(client, auth_header):
    doc_id = create_doc(client, auth_header, "user_A")
    r = client.put(
        f"/documents/{doc_id}/shares",
        headers=auth_header("user_A"),
        json={"shared_with": [" user_B ", "", "user_B", "user_C"]},
    )
    assert r.status_code == 204
    r = client.get(f"/documents/{doc_id}/shares", headers=auth_header("user_A"))
    assert sorted(r.json()["shared_with"]) == ["user_B", "user_C"]


def test_add_and_remove_are_idempotent(client, auth_header):
    doc_id = create_doc(client, auth_header, "user_A")
    for _ in range(2):
        r = client.put(f"/documents/{doc_id}/shares/user_B", headers=auth_header("user_A"))
        assert r.status_code == 204
    r = client.get(f"/documents/{doc_id}/shares", headers=auth_header("user_A"))
    assert r.json()["shared_with"] == ["user_B"]

    for _ in range(2):
        r = client.delete(f"/documents/{doc_id}/shares/user_B", headers=auth_header("user_A"))
        assert r.status_code == 204
    r = client.get(f"/documents/{doc_id}/shares", headers=auth_header("user_A"))
    assert r.json()["shared_with"] == []


def test_shares_on_missing_document(client, auth_header):
    r = client.get("/documents/nope/shares", headers=auth_header("user_A"))
    assert r.status_code == 404
    r = client.put("/documents/nope/shares/user_B", headers=auth_header("user_A"))
    assert r.status_code == 404


def test_malformed_share_body_is_bad_request(client, auth_header):
    doc_id = create_doc(client, auth_header, "user_A")
    r = client.put(
        f"/documents/{doc_id}/shares",
        headers=auth_header("user_A"),
        json={"shared_with": "user_B"},
    )
    assert r.status_code == 400


def test_document_crud(client, auth_header):
    doc_id = create_doc(client, auth_header, "user_A", {"v": 1})

    r = client.get(f"/documents/{doc_id}", headers=auth_header("user_B"))
    assert r.status_code == 403

    client.put(f"/documents/{doc_id}/shares/user_B", headers=auth_header("user_A"))
    r = client.get(f"/documents/{doc_id}", headers=auth_header("user_B"))
    assert r.status_code == 200
    assert r.json()["content"] == {"v": 1}

    r = client.put(f"/documents/{doc_id}", headers=auth_header("user_B"), json={"content": {"v": 9}})
    assert r.status_code == 403

    r = client.put(f"/documents/{doc_id}", headers=auth_header("user_A"), json={"content": {"v": 2}})
    assert r.status_code == 200
    assert r.json()["content"] == {"v": 2}

    r = client.delete(f"/documents/{doc_id}", headers=auth_header("user_A"))
    assert r.status_code == 204
    r = client.get(f"/documents/{doc_id}", headers=auth_header("user_A"))
    assert r.status_code == 404
    r = client.delete(f"/documents/{doc_id}", headers=auth_header("user_A"))
    assert r.status_code == 204


def test_list_documents_scopes(client, auth_header):
    own = create_doc(client, auth_header, "user_A")
    other = create_doc(client, auth_header, "user_B")
    create_doc(client, auth_header, "user_C")
    client.put(f"/documents/{other}/shares/user_A", headers=auth_header("user_B"))

    r = client.get("/documents", headers=auth_header("user_A"), params={"scope": "owned"})
    assert [d["id"] for d in r.json()["data"]] == [own]
    r = client.get("/documents", headers=auth_header("user_A"), params={"scope": "shared"})
    assert [d["id"] for d in r.json()["data"]] == [other]
    r = client.get("/documents", headers=auth_header("user_A"))
    assert {d["id"] for d in r.json()["data"]} == {own, other}
    assert r.json()["total"] == 2

    r = client.get("/documents", headers=auth_header("user_A"), params={"scope": "everything"})
    assert r.status_code == 400


def test_profile_update_and_delete(client, auth_header):
    client.post("/auth/validate", headers=auth_header("user_A"))

    r = client.put(
        "/profiles/me",
        headers=auth_header("user_A"),
        json={"first_name": "Alice", "last_name": "Liddell", "extra": {"theme": "dark"}},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["first_name"] == "Alice"
    assert data["extra"] == {"theme": "dark"}
    assert "password_hash" not in data

    r = client.put("/profiles/me", headers=auth_header("user_A"), json={"first_name": "Alice"})
    assert r.status_code == 400

    assert client.delete("/profiles/me", headers=auth_header("user_A")).status_code == 204
    assert client.get("/profiles/me", headers=auth_header("user_A")).status_code == 404
    assert client.delete("/profiles/me", headers=auth_header("user_A")).status_code == 404


def test_profile_search_paging(client, auth_header):
    seed_profile("p1", "alice@x.com")
    seed_profile("p2", "bob@x.com")
    seed_profile("p3", "Alice2@x.com")

    r = client.get("/profiles", headers=auth_header("p2"), params={"email": "alice", "limit": 1, "page": 1})
    assert r.status_code == 200
    page1 = r.json()
    assert page1["total"] == 2
    assert [p["email"] for p in page1["data"]] == ["Alice2@x.com"]

    r = client.get("/profiles", headers=auth_header("p2"), params={"email": "alice", "limit": 1, "page": 2})
    page2 = r.json()
    assert page2["total"] == 2
    assert [p["email"] for p in page2["data"]] == ["alice@x.com"]

    r = client.get("/profiles", headers=auth_header("p2"), params={"page": 5})
    assert r.json()["data"] == []
    assert r.json()["total"] == 3


def test_profile_search_limits(client, auth_header):
    seed_profile("p1", "alice@x.com")

    r = client.get("/profiles", headers=auth_header("p1"), params={"limit": 1000})
    assert r.status_code == 200
    assert r.json()["limit"] == 100

    for bad in ({"page": 0}, {"page": "abc"}, {"limit": -5}):
        r = client.get("/profiles", headers=auth_header("p1"), params=bad)
        assert r.status_code == 400


def test_unconfigured_auth_backend_rejects_tokens(client, auth_header, monkeypatch):
    monkeypatch.setenv("SUPABASE_DISABLED", "0")
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

    r = client.get("/profiles/me", headers=auth_header("user_A"))
    assert r.status_code == 401
    assert r.json()["detail"] == "Authentication backend not configured"
    assert client.post("/auth/validate", headers=auth_header("user_A")).status_code == 401


def test_profile_names_are_stored_verbatim(client, auth_header):
    client.post("/auth/validate", headers=auth_header("user_A"))

    r = client.put(
        "/profiles/me",
        headers=auth_header("user_A"),
        json={"first_name": "  Al ", "last_name": "B"},
    )
    assert r.status_code == 200
    assert r.json()["first_name"] == "  Al "
    assert client.get("/profiles/me", headers=auth_header("user_A")).json()["first_name"] == "  Al "

    r = client.put("/profiles/me", headers=auth_header("user_A"), json={"first_name": "", "last_name": "B"})
    assert r.status_code == 400


def test_list_documents_content_query(client, auth_header):
    urgent = create_doc(client, auth_header, "user_A", {"status": "open", "priority": 1})
    create_doc(client, auth_header, "user_A", {"status": "open", "priority": 5})
    closed = create_doc(client, auth_header, "user_A", {"status": "closed", "priority": 1})
    create_doc(client, auth_header, "user_A", "plain text note")

    r = client.get(
        "/documents",
        headers=auth_header("user_A"),
        params={"content_query": ['status equals "open"', "and", "priority lessThan 3"]},
    )
    assert r.status_code == 200
    assert [d["id"] for d in r.json()["data"]] == [urgent]

    r = client.get(
        "/documents",
        headers=auth_header("user_A"),
        params={"content_query": ["priority equals 1"]},
    )
    assert {d["id"] for d in r.json()["data"]} == {urgent, closed}
    assert r.json()["total"] == 2

    r = client.get(
        "/documents",
        headers=auth_header("user_A"),
        params={"content_query": ['status equals "open"', "xor", "priority equals 1"]},
    )
    assert r.status_code == 400
    assert r.json()["detail"].startswith("Invalid content_query")


def test_openapi_documents_error_body(client):
    schema = client.get("/openapi.json").json()
    assert "ErrorResponse" in schema["components"]["schemas"]
    responses = schema["paths"]["/profiles/me"]["get"]["responses"]
    assert responses["401"]["content"]["application/json"]["schema"]["$ref"].endswith(
        "/ErrorResponse"
    )
