# =============================================================================
# tests/test_lists_items_api.py - List, item and comment endpoints
# =============================================================================
# Parent-chain checks (list in group, item in list, comment in item), the
# bought toggle, batch reorder over HTTP and list deletion cascade.
# =============================================================================

import pytest

from tests.conftest import MEMBER_TOKEN, OWNER_TOKEN, bearer


@pytest.fixture
def lists_url(group):
    return f"/api/groups/{group['id']}/lists"


@pytest.fixture
def gifts(client, lists_url, owner_headers):
    response = client.post(lists_url, json={"name": "Gifts"}, headers=owner_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def items_url(lists_url, gifts):
    return f"{lists_url}/{gifts['id']}/items"


@pytest.fixture
def socks(client, items_url, owner_headers):
    response = client.post(items_url, json={"content": "Socks"}, headers=owner_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def other_group_list(client, db):
    other = client.post("/api/groups", json={"name": "Other"}, headers=bearer(OWNER_TOKEN)).json()
    return db.insert("lists", group_id=other["id"], title="Theirs", position=0)


class TestListsApi:

    def test_end_to_end_ordering(self, client, lists_url, owner_headers):
        gifts = client.post(lists_url, json={"name": "Gifts"}, headers=owner_headers).json()
        food = client.post(lists_url, json={"name": "Food"}, headers=owner_headers).json()

        assert gifts["position"] == 0
        assert food["position"] == -1
        listed = client.get(lists_url, headers=owner_headers).json()
        assert [l["title"] for l in listed] == ["Food", "Gifts"]
        assert listed[0]["total_items"] == 0
        assert listed[0]["bought_items"] == 0

    def test_title_alias_accepted(self, client, lists_url, owner_headers):
        response = client.post(lists_url, json={"title": "Wishlist"}, headers=owner_headers)
        assert response.json()["title"] == "Wishlist"

    def test_member_can_create(self, client, lists_url, member):
        response = client.post(lists_url, json={"name": "Mine"}, headers=bearer(MEMBER_TOKEN))
        assert response.status_code == 201

    def test_reorder(self, client, db, lists_url, owner_headers):
        a = client.post(lists_url, json={"name": "A"}, headers=owner_headers).json()
        b = client.post(lists_url, json={"name": "B"}, headers=owner_headers).json()

        response = client.patch(
            lists_url,
            json={"lists": [{"id": a["id"], "position": 0}, {"id": b["id"], "position": 1}]},
            headers=owner_headers,
        )

        assert response.json() == {"success": True}
        assert [l["title"] for l in client.get(lists_url, headers=owner_headers).json()] == ["A", "B"]

    def test_reorder_with_foreign_list_is_forbidden(self, client, db, lists_url, gifts, other_group_list, owner_headers):
        response = client.patch(
            lists_url,
            json={"lists": [
                {"id": gifts["id"], "position": 1},
                {"id": other_group_list["id"], "position": 2},
            ]},
            headers=owner_headers,
        )
        assert response.status_code == 403
        positions = {row["id"]: row["position"] for row in db.rows("lists")}
        assert positions[gifts["id"]] == 0
        assert positions[other_group_list["id"]] == 0

    def test_reorder_rejects_non_integer_positions(self, client, lists_url, gifts, owner_headers):
        response = client.patch(
            lists_url,
            json={"lists": [{"id": gifts["id"], "position": "first"}]},
            headers=owner_headers,
        )
        assert response.status_code == 400

    def test_reorder_partial_failure_reports_failed_ids(self, client, db, lists_url, owner_headers):
        a = client.post(lists_url, json={"name": "A"}, headers=owner_headers).json()
        b = client.post(lists_url, json={"name": "B"}, headers=owner_headers).json()
        db.fail_on("lists", "update", when=lambda q: q.filter_value("id") == b["id"])

        response = client.patch(
            lists_url,
            json={"lists": [{"id": a["id"], "position": 5}, {"id": b["id"], "position": 6}]},
            headers=owner_headers,
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to update list positions"
        assert body["details"]["failed_ids"] == [b["id"]]
        assert {row["id"]: row["position"] for row in db.rows("lists")} == {a["id"]: 0, b["id"]: -1}

    def test_get_list_from_other_group_is_not_found(self, client, lists_url, other_group_list, owner_headers):
        response = client.get(f"{lists_url}/{other_group_list['id']}", headers=owner_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "List not found"}

    def test_rename_list(self, client, lists_url, gifts, owner_headers):
        response = client.patch(f"{lists_url}/{gifts['id']}", json={"title": "Presents"}, headers=owner_headers)
        assert response.json()["title"] == "Presents"

    def test_delete_list_cascades(self, client, db, lists_url, gifts, items_url, socks, owner_headers):
        response = client.delete(f"{lists_url}/{gifts['id']}", headers=owner_headers)

        assert response.json() == {"success": True}
        assert client.get(f"{lists_url}/{gifts['id']}", headers=owner_headers).status_code == 404
        assert client.get(items_url, headers=owner_headers).status_code == 404
        assert db.rows("items") == []


class TestItemsApi:

    def test_create_and_list(self, client, items_url, socks, owner_headers):
        client.post(items_url, json={"content": "  Scarf "}, headers=owner_headers)
        listed = client.get(items_url, headers=owner_headers).json()
        assert [i["content"] for i in listed] == ["Scarf", "Socks"]
        assert socks["bought"] is False

    def test_blank_content_rejected(self, client, items_url, owner_headers):
        response = client.post(items_url, json={"content": " "}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Item content cannot be empty"}

    def test_toggle_bought_twice_restores_original(self, client, items_url, socks, owner_headers):
        url = f"{items_url}/{socks['id']}"
        assert client.patch(url, json={"bought": True}, headers=owner_headers).json()["bought"] is True
        assert client.patch(url, json={"bought": False}, headers=owner_headers).json()["bought"] is False
        assert client.get(url, headers=owner_headers).json()["bought"] is False

    def test_counts_follow_bought(self, client, lists_url, items_url, socks, owner_headers):
        client.patch(f"{items_url}/{socks['id']}", json={"bought": True}, headers=owner_headers)
        listed = client.get(lists_url, headers=owner_headers).json()
        assert (listed[0]["total_items"], listed[0]["bought_items"]) == (1, 1)

    def test_edit_content(self, client, items_url, socks, owner_headers):
        response = client.patch(f"{items_url}/{socks['id']}", json={"content": "Wool socks"}, headers=owner_headers)
        assert response.json()["content"] == "Wool socks"
        assert response.json()["bought"] is False

    def test_empty_patch_rejected(self, client, items_url, socks, owner_headers):
        response = client.patch(f"{items_url}/{socks['id']}", json={}, headers=owner_headers)
        assert response.status_code == 400

    def test_item_under_wrong_list_is_not_found(self, client, lists_url, socks, owner_headers):
        food = client.post(lists_url, json={"name": "Food"}, headers=owner_headers).json()
        response = client.get(f"{lists_url}/{food['id']}/items/{socks['id']}", headers=owner_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Item not found"}

    def test_items_of_foreign_list_are_not_found(self, client, db, lists_url, other_group_list, owner_headers):
        db.insert("items", list_id=other_group_list["id"], content="secret")
        response = client.get(f"{lists_url}/{other_group_list['id']}/items", headers=owner_headers)
        assert response.status_code == 404

    def test_delete_item_removes_comments(self, client, db, items_url, socks, owner_headers):
        client.post(f"{items_url}/{socks['id']}/comments", json={"content": "blue"}, headers=owner_headers)
        response = client.delete(f"{items_url}/{socks['id']}", headers=owner_headers)
        assert response.json() == {"success": True}
        assert db.rows("items") == []
        assert db.rows("comments") == []

    def test_store_failure_is_reported(self, client, db, items_url, owner_headers):
        db.fail_on("items", "insert")
        response = client.post(items_url, json={"content": "Socks"}, headers=owner_headers)
        assert response.status_code == 502
        assert response.json() == {"error": "Failed to create item"}


class TestCommentsApi:

    @pytest.fixture
    def comments_url(self, items_url, socks):
        return f"{items_url}/{socks['id']}/comments"

    def test_create_and_list_newest_first(self, client, comments_url, owner_headers):
        client.post(comments_url, json={"content": "first"}, headers=owner_headers)
        client.post(comments_url, json={"content": "second"}, headers=owner_headers)
        listed = client.get(comments_url, headers=owner_headers).json()
        assert [c["content"] for c in listed] == ["second", "first"]

    def test_content_required(self, client, comments_url, owner_headers):
        response = client.post(comments_url, json={"content": ""}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Comment content is required"}

    def test_update_comment(self, client, comments_url, owner_headers):
        comment = client.post(comments_url, json={"content": "draft"}, headers=owner_headers).json()
        response = client.patch(
            comments_url, json={"commentId": comment["id"], "content": "final"}, headers=owner_headers
        )
        assert response.json()["content"] == "final"

    def test_update_requires_comment_id(self, client, comments_url, owner_headers):
        response = client.patch(comments_url, json={"content": "x"}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Comment ID is required"}

    def test_delete_comment(self, client, db, comments_url, owner_headers):
        comment = client.post(comments_url, json={"content": "bye"}, headers=owner_headers).json()
        response = client.delete(comments_url, params={"commentId": comment["id"]}, headers=owner_headers)
        assert response.json() == {"success": True}
        assert db.rows("comments") == []

    def test_comment_of_other_item_is_not_found(self, client, db, items_url, comments_url, owner_headers):
        scarf = client.post(items_url, json={"content": "Scarf"}, headers=owner_headers).json()
        foreign = db.insert("comments", item_id=scarf["id"], content="not yours")
        response = client.delete(comments_url, params={"commentId": foreign["id"]}, headers=owner_headers)
        assert response.status_code == 404
        assert len(db.rows("comments")) == 1
