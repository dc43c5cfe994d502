"""직원 점검 API 테스트 — 생성, 항목 기록, 아워미터, 제출, 재제출, 이력.

Staff workcheck API tests covering the daily lifecycle:
NEW → PENDING → APPROVED | REJECTED → PENDING.
"""

from datetime import timedelta
from uuid import UUID

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.workcheck import Approval, Workcheck
from app.repositories.workcheck_repository import workcheck_repository

from tests.conftest import (
    STAFF_WC,
    TODAY,
    auth_header,
    complete_workcheck,
    create_workcheck,
    decide,
    submit_workcheck,
)


async def _update_item(client: AsyncClient, token: str, item_id: str, field: str, value):
    return await client.put(
        f"{STAFF_WC}/update-item",
        json={"itemId": item_id, "field": field, "value": value},
        headers=auth_header(token),
    )


# ===== Today & create =====

class TestTodayAndCreate:
    """오늘의 점검 조회 및 생성 테스트."""

    async def test_today_without_workcheck_lists_units(self, client: AsyncClient, staff_token, units):
        res = await client.get(f"{STAFF_WC}/today", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["has_vehicle_selected"] is False
        assert [u["name"] for u in data["available_units"]] == ["DT-01", "EX-01"]

    async def test_create_workcheck(self, client: AsyncClient, staff_user, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        assert workcheck["has_vehicle_selected"] is True
        assert workcheck["status"] == "new"
        assert workcheck["work_date"] == TODAY.isoformat()
        assert workcheck["is_submitted"] is False
        assert workcheck["hours_meter"] is None
        assert workcheck["approval"] is None
        assert workcheck["checker"]["id"] == str(staff_user.id)
        assert workcheck["unit"]["name"] == "DT-01"
        assert [i["code"] for i in workcheck["items"]] == ["CHK01", "CHK02", "CHK03"]
        assert all(i["actions"] == [] and i["note"] == "" and i["images"] == [] for i in workcheck["items"])
        assert (workcheck["completed_items"], workcheck["total_items"]) == (0, 3)

        res = await client.get(f"{STAFF_WC}/today", headers=auth_header(staff_token))
        assert res.json()["id"] == workcheck["id"]

    async def test_second_workcheck_same_day_conflict(self, client: AsyncClient, staff_token, units, check_items):
        await create_workcheck(client, staff_token, units[0])
        res = await client.post(
            f"{STAFF_WC}/create", json={"unit_id": str(units[1].id)}, headers=auth_header(staff_token)
        )
        assert res.status_code == 409
        assert res.json()["detail"] == "You already have a workcheck for today"

    async def test_unit_claimed_by_other_staff(
        self, client: AsyncClient, staff_token, other_staff_token, units, check_items
    ):
        """다른 직원이 선점한 유닛은 선택 불가 및 목록에서 제외."""
        await create_workcheck(client, staff_token, units[0])

        res = await client.get(f"{STAFF_WC}/today", headers=auth_header(other_staff_token))
        assert [u["name"] for u in res.json()["available_units"]] == ["EX-01"]

        res = await client.post(
            f"{STAFF_WC}/create", json={"unit_id": str(units[0].id)}, headers=auth_header(other_staff_token)
        )
        assert res.status_code == 409

    async def test_unit_free_again_next_day(
        self, client: AsyncClient, set_today, staff_token, other_staff_token, units, check_items
    ):
        await create_workcheck(client, staff_token, units[0])
        set_today(TODAY + timedelta(days=1))
        workcheck = await create_workcheck(client, other_staff_token, units[0])
        assert workcheck["work_date"] == (TODAY + timedelta(days=1)).isoformat()

    async def test_unique_indexes_reject_lost_race(
        self, client: AsyncClient, db, monkeypatch, staff_token, other_staff_token, units, check_items
    ):
        """사전 확인을 통과한 동시 생성도 DB 고유 인덱스에서 409."""
        await create_workcheck(client, staff_token, units[0])

        async def _nothing_yet(*args, **kwargs):
            return None

        async def _unclaimed(*args, **kwargs):
            return False

        monkeypatch.setattr(workcheck_repository, "get_for_checker_on", _nothing_yet)
        monkeypatch.setattr(workcheck_repository, "unit_claimed_on", _unclaimed)

        # 같은 유닛, 다른 직원 — Same unit, another staff member
        res = await client.post(
            f"{STAFF_WC}/create", json={"unit_id": str(units[0].id)}, headers=auth_header(other_staff_token)
        )
        assert res.status_code == 409
        assert res.json()["detail"] == "A workcheck for you or this unit already exists today"

        # 같은 직원, 다른 유닛 — Same staff member, another unit
        res = await client.post(
            f"{STAFF_WC}/create", json={"unit_id": str(units[1].id)}, headers=auth_header(staff_token)
        )
        assert res.status_code == 409

        count = (await db.execute(select(func.count()).select_from(Workcheck))).scalar()
        assert count == 1

    async def test_create_unknown_unit(self, client: AsyncClient, staff_token, check_items):
        res = await client.post(
            f"{STAFF_WC}/create",
            json={"unit_id": "00000000-0000-0000-0000-000000000000"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 404

        res = await client.post(f"{STAFF_WC}/create", json={"unit_id": "nope"}, headers=auth_header(staff_token))
        assert res.status_code == 404


# ===== Items & hours meter =====

class TestItemUpdates:
    """점검 항목 및 아워미터 수정 테스트."""

    async def test_actions_are_normalized(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]

        res = await _update_item(client, staff_token, item_id, "actions", ["t", "P", "P"])
        assert res.status_code == 200
        assert res.json()["actions"] == ["P", "T"]
        assert res.json()["is_complete"] is False

        res = await _update_item(client, staff_token, item_id, "actions", '["L","B"]')
        assert res.json()["actions"] == ["B", "L"]

    async def test_invalid_actions_rejected(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][0]["id"]

        res = await _update_item(client, staff_token, item_id, "actions", ["X"])
        assert res.status_code == 400
        res = await _update_item(client, staff_token, item_id, "actions", "not json")
        assert res.status_code == 400
        res = await _update_item(client, staff_token, item_id, "actions", {"P": True})
        assert res.status_code == 400

    async def test_note_update(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        item_id = workcheck["items"][1]["id"]

        res = await _update_item(client, staff_token, item_id, "note", "Front left tyre worn")
        assert res.status_code == 200
        assert res.json()["note"] == "Front left tyre worn"

        res = await _update_item(client, staff_token, item_id, "note", 12)
        assert res.status_code == 400

    async def test_unknown_field_rejected(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        res = await _update_item(client, staff_token, workcheck["items"][0]["id"], "label", "x")
        assert res.status_code == 400

    async def test_other_staff_item_not_found(
        self, client: AsyncClient, staff_token, other_staff_token, units, check_items
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        res = await _update_item(client, other_staff_token, workcheck["items"][0]["id"], "actions", ["P"])
        assert res.status_code == 404

        res = await client.get(f"{STAFF_WC}/{workcheck['id']}", headers=auth_header(other_staff_token))
        assert res.status_code == 404

    async def test_hours_meter(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])

        res = await client.put(
            f"{STAFF_WC}/update-hours",
            json={"workcheckId": workcheck["id"], "value": 980.25},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 200
        assert res.json()["hours_meter"] == 980.25

        res = await client.put(
            f"{STAFF_WC}/update-hours",
            json={"workcheck_id": workcheck["id"], "hours_meter": -1},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400

    async def test_hours_meter_rejects_nan_and_infinity(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])

        for literal in ("NaN", "Infinity", "-Infinity"):
            res = await client.put(
                f"{STAFF_WC}/update-hours",
                content=f'{{"workcheck_id": "{workcheck["id"]}", "hours_meter": {literal}}}',
                headers={**auth_header(staff_token), "Content-Type": "application/json"},
            )
            assert res.status_code == 400, literal
            assert res.json()["detail"] == "Hours meter must be a non-negative number"

        res = await client.get(f"{STAFF_WC}/{workcheck['id']}", headers=auth_header(staff_token))
        assert res.json()["hours_meter"] is None


# ===== Submit & review cycle =====

class TestSubmit:
    """제출, 잠금, 반려 후 재제출 테스트."""

    async def test_submit_requires_complete_items(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 400
        assert res.json()["detail"] == "Please complete all 3 remaining items before submitting"

    async def test_zero_hours_meter_is_valid(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        await complete_workcheck(client, staff_token, workcheck)
        await client.put(
            f"{STAFF_WC}/update-hours",
            json={"workcheck_id": workcheck["id"], "hours_meter": 0},
            headers=auth_header(staff_token),
        )
        # 0은 유효한 값 — Zero is a valid reading
        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 200

    async def test_missing_hours_meter_rejected(self, client: AsyncClient, db, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        await complete_workcheck(client, staff_token, workcheck)

        from uuid import UUID
        from app.models.workcheck import Workcheck
        row = await db.get(Workcheck, UUID(workcheck["id"]))
        row.hours_meter = None
        await db.flush()

        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 400
        assert res.json()["detail"] == "Please enter hours meter reading"

    async def test_submit_locks_workcheck(self, client: AsyncClient, staff_token, units, check_items):
        workcheck = await create_workcheck(client, staff_token, units[0])
        await complete_workcheck(client, staff_token, workcheck)

        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "pending"
        assert data["is_submitted"] is True
        assert data["approval"]["status"] == "pending"
        assert data["completed_items"] == 3

        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 409

        res = await _update_item(client, staff_token, workcheck["items"][0]["id"], "note", "late edit")
        assert res.status_code == 409
        res = await client.put(
            f"{STAFF_WC}/update-hours",
            json={"workcheck_id": workcheck["id"], "hours_meter": 5},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 409

    async def test_rejected_workcheck_can_be_fixed_and_resubmitted(
        self, client: AsyncClient, db, staff_token, admin_token, units, check_items
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        await complete_workcheck(client, staff_token, workcheck)
        await submit_workcheck(client, staff_token, workcheck["id"])

        res = await decide(client, admin_token, workcheck["id"], False, "Photo of tyres is blurry")
        assert res.status_code == 200
        assert res.json()["approval"]["status"] == "rejected"

        res = await client.get(f"{STAFF_WC}/today", headers=auth_header(staff_token))
        data = res.json()
        assert data["status"] == "rejected"
        assert data["approval"]["comments"] == "Photo of tyres is blurry"
        assert data["approval"]["approver"]["username"] == "alexsmith"

        res = await _update_item(client, staff_token, workcheck["items"][1]["id"], "note", "Retaken")
        assert res.status_code == 200

        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 200
        approval = res.json()["approval"]
        assert approval["status"] == "pending"
        assert approval["id"] == data["approval"]["id"]
        assert "comments" not in approval

        # 이전 결정은 DB에서 초기화 — The stored decision is cleared, not just hidden
        row = (
            await db.execute(
                select(Approval)
                .where(Approval.workcheck_id == UUID(workcheck["id"]))
                .execution_options(populate_existing=True)
            )
        ).scalar_one()
        assert row.status == "pending"
        assert row.approver_id is None
        assert row.approved_at is None
        assert row.comments is None

        # 항목 기록은 유지 — Recorded actions and photos survive resubmission
        items = res.json()["items"]
        assert all(item["actions"] == ["P"] for item in items)
        assert all(len(item["images"]) == 1 for item in items)
        assert items[1]["note"] == "Retaken"

    async def test_approved_workcheck_is_final(
        self, client: AsyncClient, staff_token, admin_token, units, check_items
    ):
        workcheck = await create_workcheck(client, staff_token, units[0])
        await complete_workcheck(client, staff_token, workcheck)
        await submit_workcheck(client, staff_token, workcheck["id"])
        await decide(client, admin_token, workcheck["id"], True)

        res = await submit_workcheck(client, staff_token, workcheck["id"])
        assert res.status_code == 409
        assert res.json()["detail"] == "This workcheck has already been approved"

        res = await _update_item(client, staff_token, workcheck["items"][0]["id"], "actions", ["B"])
        assert res.status_code == 409


# ===== History =====

class TestHistory:
    """점검 이력 테스트."""

    async def test_history_newest_first_with_filters(
        self, client: AsyncClient, set_today, staff_token, admin_token, units, check_items
    ):
        ids = []
        for offset in (2, 1, 0):
            set_today(TODAY - timedelta(days=offset))
            workcheck = await create_workcheck(client, staff_token, units[0])
            ids.append(workcheck["id"])
        set_today(TODAY - timedelta(days=2))

        # 가장 오래된 점검만 제출 후 승인 — Submit and approve the oldest only
        oldest = (await client.get(f"{STAFF_WC}/{ids[0]}", headers=auth_header(staff_token))).json()
        await complete_workcheck(client, staff_token, oldest)
        await submit_workcheck(client, staff_token, ids[0])
        await decide(client, admin_token, ids[0], True)

        res = await client.get(f"{STAFF_WC}/history", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 3
        assert [w["id"] for w in data["items"]] == list(reversed(ids))

        res = await client.get(f"{STAFF_WC}/history", params={"status": "new"}, headers=auth_header(staff_token))
        assert res.json()["total"] == 2

        res = await client.get(f"{STAFF_WC}/history", params={"status": "approved"}, headers=auth_header(staff_token))
        assert [w["id"] for w in res.json()["items"]] == [ids[0]]

        res = await client.get(
            f"{STAFF_WC}/history",
            params={"date": (TODAY - timedelta(days=1)).isoformat()},
            headers=auth_header(staff_token),
        )
        assert [w["id"] for w in res.json()["items"]] == [ids[1]]

        res = await client.get(
            f"{STAFF_WC}/history", params={"page": 2, "per_page": 2}, headers=auth_header(staff_token)
        )
        page = res.json()
        assert page["pages"] == 2
        assert [w["id"] for w in page["items"]] == [ids[0]]

    async def test_history_invalid_status(self, client: AsyncClient, staff_token):
        res = await client.get(f"{STAFF_WC}/history", params={"status": "done"}, headers=auth_header(staff_token))
        assert res.status_code == 400

    async def test_history_only_own(
        self, client: AsyncClient, staff_token, other_staff_token, units, check_items
    ):
        await create_workcheck(client, staff_token, units[0])
        res = await client.get(f"{STAFF_WC}/history", headers=auth_header(other_staff_token))
        assert res.json()["total"] == 0
