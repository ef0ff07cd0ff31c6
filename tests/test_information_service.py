import pytest
from fastapi import HTTPException

from refugeeconnect.database.core.funcs import (
    delete_information,
    get_information,
    list_information,
    toggle_like,
    update_information,
)
from tests.helpers import new_information


class TestListInformation:
    def test_priority_then_newest(self, user):
        new_information(user, title={"en": "Old medium"}, priority="medium")
        new_information(user, title={"en": "Urgent"}, priority="urgent")
        new_information(user, title={"en": "Low"}, priority="low")
        new_information(user, title={"en": "New medium"}, priority="medium")
        new_information(user, title={"en": "High"}, priority="high")

        result = list_information(filters={}, page=1, limit=12)

        titles = [item["title"]["en"] for item in result["information"]]
        assert titles == ["Urgent", "High", "New medium", "Old medium", "Low"]

    def test_pagination(self, user):
        for i in range(5):
            new_information(user, title={"en": f"Item {i}"})

        first = list_information(filters={}, page=1, limit=2)
        last = list_information(filters={}, page=3, limit=2)

        assert first["pagination"] == {"current": 1, "total": 3, "hasNext": True, "hasPrev": False}
        assert len(last["information"]) == 1
        assert last["pagination"]["hasNext"] is False
        assert last["pagination"]["hasPrev"] is True

    def test_category_filter_and_inactive_hidden(self, user):
        kept = new_information(user, category="healthcare")
        retired = new_information(user, category="healthcare")
        new_information(user, category="education")
        delete_information(information_id=retired["id"], user=user)

        result = list_information(filters={"category": "healthcare"}, page=1, limit=12)

        assert [item["id"] for item in result["information"]] == [kept["id"]]

    def test_author_summary(self, user):
        new_information(user)
        item = list_information(filters={}, page=1, limit=12)["information"][0]
        assert item["createdBy"] == {"id": user["id"], "firstName": "Amina", "lastName": "Okello"}


class TestGetInformation:
    def test_each_read_counts_a_view(self, user):
        created = new_information(user)
        get_information(information_id=created["id"])
        assert get_information(information_id=created["id"])["views"] == 2

    @pytest.mark.parametrize("information_id", ["not-a-uuid", "0b7c5b59-4c5a-4b6e-9b1e-6c1f5d0c2a11"])
    def test_missing_is_404(self, information_id):
        with pytest.raises(HTTPException) as exc:
            get_information(information_id=information_id)
        assert exc.value.status_code == 404

    def test_retired_is_404(self, user):
        created = new_information(user)
        delete_information(information_id=created["id"], user=user)
        with pytest.raises(HTTPException) as exc:
            get_information(information_id=created["id"])
        assert exc.value.status_code == 404


class TestEditInformation:
    def test_creator_can_update(self, user):
        created = new_information(user)

        updated = update_information(
            information_id=created["id"],
            user=user,
            changes={"priority": "urgent", "districts": ["Isingiro"]},
            new_media=[{"type": "image", "url": "/uploads/a.png", "caption": "a.png", "language": "en"}],
        )

        assert updated["priority"] == "urgent"
        assert updated["location"]["districts"] == ["Isingiro"]
        assert updated["location"]["isNational"] is False
        assert len(updated["media"]) == 1
        assert updated["updatedBy"]["id"] == user["id"]
        assert updated["updatedAt"] is not None

    def test_other_user_is_forbidden(self, user, other_user):
        created = new_information(user)
        with pytest.raises(HTTPException) as exc:
            update_information(information_id=created["id"], user=other_user, changes={"priority": "low"})
        assert exc.value.status_code == 403
        with pytest.raises(HTTPException) as exc:
            delete_information(information_id=created["id"], user=other_user)
        assert exc.value.status_code == 403

    def test_admin_can_edit_anything(self, user, admin_user):
        created = new_information(user)
        updated = update_information(information_id=created["id"], user=admin_user, changes={"tags": ["food"]})
        assert updated["tags"] == ["food"]
        delete_information(information_id=created["id"], user=admin_user)

    def test_protected_fields_ignored(self, user):
        created = new_information(user)
        updated = update_information(
            information_id=created["id"], user=user, changes={"views": 999, "is_verified": True}
        )
        assert updated["views"] == 0
        assert updated["isVerified"] is False


class TestLikes:
    def test_toggle(self, user, other_user):
        created = new_information(user)

        assert toggle_like(information_id=created["id"], user_id=other_user["id"]) == {"liked": True, "likesCount": 1}
        assert toggle_like(information_id=created["id"], user_id=user["id"]) == {"liked": True, "likesCount": 2}
        assert toggle_like(information_id=created["id"], user_id=other_user["id"]) == {"liked": False, "likesCount": 1}

    def test_like_retired_is_404(self, user):
        created = new_information(user)
        delete_information(information_id=created["id"], user=user)
        with pytest.raises(HTTPException) as exc:
            toggle_like(information_id=created["id"], user_id=user["id"])
        assert exc.value.status_code == 404
