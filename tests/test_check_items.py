"""점검 항목 관리 API 테스트 — 생성, 정렬, 이동, 활성화, 삭제.

Check item catalog API tests. Sort orders stay dense (1..n) after every
change.
"""

from httpx import AsyncClient

from tests.conftest import auth_header, create_workcheck

ITEMS = "/api/v1/admin/check-items"


async def _codes(client: AsyncClient, token: str) -> list[tuple[str, int]]:
    res = await client.get(ITEMS, headers=auth_header(token))
    return [(i["code"], i["sort_order"]) for i in res.json()]


class TestCheckItemCreate:
    """점검 항목 생성 테스트."""

    async def test_create_appends(self, client: AsyncClient, admin_token, check_items):
        res = await client.post(ITEMS, json={"code": " chk04 ", "label": "Horn"}, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["code"] == "CHK04"
        assert res.json()["sort_order"] == 4

    async def test_create_inserts_at_position(self, client: AsyncClient, admin_token, check_items):
        res = await client.post(
            ITEMS, json={"code": "NEW", "label": "Brakes", "sort_order": 2}, headers=auth_header(admin_token)
        )
        assert res.status_code == 201
        assert await _codes(client, admin_token) == [("CHK01", 1), ("NEW", 2), ("CHK02", 3), ("CHK03", 4)]

    async def test_create_clamps_position(self, client: AsyncClient, admin_token, check_items):
        await client.post(ITEMS, json={"code": "LAST", "label": "X", "sort_order": 99}, headers=auth_header(admin_token))
        assert (await _codes(client, admin_token))[-1] == ("LAST", 4)

    async def test_duplicate_code_conflict(self, client: AsyncClient, admin_token, check_items):
        res = await client.post(ITEMS, json={"code": "chk01", "label": "Again"}, headers=auth_header(admin_token))
        assert res.status_code == 409
        assert res.json()["detail"] == "Check item code 'CHK01' already exists"

    async def test_blank_label_rejected(self, client: AsyncClient, admin_token):
        res = await client.post(ITEMS, json={"code": "A", "label": "  "}, headers=auth_header(admin_token))
        assert res.status_code == 400


class TestCheckItemOrdering:
    """정렬 순서 변경 테스트."""

    async def test_update_moves_item(self, client: AsyncClient, admin_token, check_items):
        res = await client.put(f"{ITEMS}/{check_items[2].id}", json={
            "code": "CHK03",
            "label": "Lights and indicators",
            "sort_order": 1,
        }, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["label"] == "Lights and indicators"
        assert await _codes(client, admin_token) == [("CHK03", 1), ("CHK01", 2), ("CHK02", 3)]

    async def test_update_code_conflict(self, client: AsyncClient, admin_token, check_items):
        res = await client.put(
            f"{ITEMS}/{check_items[0].id}", json={"code": "CHK02", "label": "X"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 409

    async def test_move_down(self, client: AsyncClient, admin_token, check_items):
        res = await client.post(
            f"{ITEMS}/{check_items[0].id}/move", json={"direction": "down"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert [(i["code"], i["sort_order"]) for i in res.json()] == [("CHK02", 1), ("CHK01", 2), ("CHK03", 3)]

    async def test_move_up_at_top_is_noop(self, client: AsyncClient, admin_token, check_items):
        res = await client.post(
            f"{ITEMS}/{check_items[0].id}/move", json={"direction": "up"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert [i["code"] for i in res.json()] == ["CHK01", "CHK02", "CHK03"]

    async def test_move_invalid_direction(self, client: AsyncClient, admin_token, check_items):
        res = await client.post(
            f"{ITEMS}/{check_items[0].id}/move", json={"direction": "left"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 422


class TestCheckItemActiveAndDelete:
    """활성 상태 및 삭제 테스트."""

    async def test_inactive_item_left_out_of_new_workchecks(
        self, client: AsyncClient, admin_token, staff_token, check_items, units
    ):
        res = await client.patch(
            f"{ITEMS}/{check_items[1].id}/active", json={"is_active": False}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert res.json()["is_active"] is False

        workcheck = await create_workcheck(client, staff_token, units[0])
        assert [i["code"] for i in workcheck["items"]] == ["CHK01", "CHK03"]
        assert workcheck["total_items"] == 2

    async def test_delete_unused_item_renumbers(self, client: AsyncClient, admin_token, check_items):
        res = await client.delete(f"{ITEMS}/{check_items[0].id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert await _codes(client, admin_token) == [("CHK02", 1), ("CHK03", 2)]

    async def test_delete_used_item_conflict(
        self, client: AsyncClient, admin_token, staff_token, check_items, units
    ):
        await create_workcheck(client, staff_token, units[0])
        res = await client.delete(f"{ITEMS}/{check_items[0].id}", headers=auth_header(admin_token))
        assert res.status_code == 409
        assert res.json()["detail"] == "Cannot delete check item. It is being used in 1 workcheck(s)"

    async def test_delete_missing_item(self, client: AsyncClient, admin_token):
        res = await client.delete(f"{ITEMS}/00000000-0000-0000-0000-000000000000", headers=auth_header(admin_token))
        assert res.status_code == 404
