"""
Endpoint tests through FastAPI's TestClient on the in-memory database.
"""

import json


def create_movies(client):
    response = client.post("/category/create", json={"name": "Movies", "icon": "movie", "items": ["Story", "Acting"]})
    assert response.status_code == 200
    return response.json()


def create_review(client, category_id, **overrides):
    payload = {"name": "Dune", "category_id": category_id, "review": "Sand.", "item_score1": 4.5, "item_score2": 5.0}
    payload.update(overrides)
    return client.post("/review/create", json=payload)


def test_root(client):
    assert client.get("/").status_code == 200


def test_category_crud(client):
    category = create_movies(client)
    assert category["item1"] == "Story"
    assert category["item2"] == "Acting"
    assert category["item3"] is None
    assert category["review_count"] == 0

    response = client.put(
        f"/category/update/{category['id']}",
        json={"name": "Films", "items": ["Story", "Acting", "Music"]},
    )
    assert response.status_code == 200
    assert response.json()["item3"] == "Music"

    assert client.get(f"/category/{category['id']}").json()["name"] == "Films"
    assert client.get("/category/999").status_code == 404


def test_review_scores_must_match_category(client):
    category = create_movies(client)

    assert create_review(client, category["id"], item_score2=None).status_code == 400
    assert create_review(client, category["id"], item_score3=3.0).status_code == 400
    assert create_review(client, category["id"], item_score1=4.2).status_code == 422
    assert create_review(client, 999).status_code == 404

    response = create_review(client, category["id"])
    assert response.status_code == 200
    assert response.json()["average_score"] == 4.75

    listed = client.get("/category/list").json()
    assert listed[0]["review_count"] == 1


def test_review_listing_and_search(client):
    category = create_movies(client)
    create_review(client, category["id"], name="Dune", favorite=True)
    create_review(client, category["id"], name="Cats", item_score1=1.0, item_score2=1.5)

    highest = client.get("/review/list", params={"sort": "highest"}).json()
    assert [review["name"] for review in highest] == ["Dune", "Cats"]

    favorites = client.get("/review/list", params={"favorites_only": True}).json()
    assert [review["name"] for review in favorites] == ["Dune"]

    found = client.get("/review/search", params={"q": "cat"}).json()
    assert [review["name"] for review in found] == ["Cats"]


def test_review_update_and_image_upload(client, attachments):
    category = create_movies(client)
    review = create_review(client, category["id"]).json()

    response = client.put(
        f"/review/update/{review['id']}",
        json={"name": "Dune: Part Two", "category_id": category["id"], "item_score1": 5.0, "item_score2": 5.0},
    )
    assert response.status_code == 200
    assert response.json()["created_date"] == review["created_date"]

    response = client.post(
        f"/review/{review['id']}/image",
        files={"file": ("poster.jpg", b"poster-bytes", "image/jpeg")},
    )
    assert response.status_code == 200
    image = response.json()["image"]
    assert attachments.read(image) == b"poster-bytes"

    assert client.delete(f"/review/delete/{review['id']}").status_code == 200
    assert client.get(f"/review/{review['id']}").status_code == 404


def test_deleting_category_cascades_to_reviews(client):
    category = create_movies(client)
    review = create_review(client, category["id"]).json()

    assert client.delete(f"/category/delete/{category['id']}").status_code == 200
    assert client.get(f"/review/{review['id']}").status_code == 404
    assert client.get("/review/list").json() == []


def test_export_and_restore_endpoints(client):
    category = create_movies(client)
    create_review(client, category["id"])

    response = client.get("/backup/export")
    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]
    backup = response.content
    assert len(json.loads(backup)["reviews"]) == 1

    client.delete(f"/category/delete/{category['id']}")
    assert client.get("/category/list").json() == []

    response = client.post("/backup/restore", files={"file": ("backup.json", backup, "application/json")})
    assert response.status_code == 200
    assert response.json() == {"success": True, "error": None, "message": None, "categories": 1, "reviews": 1}
    assert [c["name"] for c in client.get("/category/list").json()] == ["Movies"]

    progress = client.get("/restore/progress").json()
    assert progress == {"progress": 1.0, "phase": "done"}
    assert client.get("/backup/progress").json()["phase"] == "done"


def test_restore_rejects_malformed_upload(client):
    create_movies(client)

    response = client.post("/backup/restore", files={"file": ("backup.json", b'{"categories": []}', "application/json")})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "malformed_document"
    assert len(client.get("/category/list").json()) == 1


def test_restored_image_path_outside_store_is_not_deleted(client, tmp_path):
    victim = tmp_path / "outside" / "secret.txt"
    victim.parent.mkdir()
    victim.write_bytes(b"server-secret")
    document = {
        "categories": [{"id": 1, "name": "Movies", "item1": "Story", "createdDate": "2024-01-01T00:00:00Z"}],
        "reviews": [
            {"id": 1, "name": "Dune", "image": str(victim), "categoryId": 1, "review": "",
             "itemScore1": 4.0, "createdDate": "2024-01-01T00:00:00Z"},
        ],
    }
    response = client.post(
        "/backup/restore",
        files={"file": ("backup.json", json.dumps(document).encode("utf-8"), "application/json")},
    )
    assert response.status_code == 200

    exported = json.loads(client.get("/backup/export").content)
    assert exported["reviews"][0]["imageBase64"] is None

    assert client.delete("/review/delete/1").status_code == 200
    assert victim.read_bytes() == b"server-secret"
