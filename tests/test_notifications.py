import pytest

from qios.core.constants import NotificationType, Severity
from qios.crud.notification import add_notification, count_unread, get_notifications

from conftest import OTHER_STORE_ID, STORE_ID


@pytest.fixture
def seed_notifications(session, shop):
    async def _seed():
        for i in range(3):
            add_notification(session, STORE_ID, NotificationType.ORDER, f"Order {i}", "New order received")
        add_notification(
            session, OTHER_STORE_ID, NotificationType.SYSTEM, "Other", "Other store", Severity.WARNING
        )
        await session.commit()
    return _seed


@pytest.mark.asyncio
async def test_unread_count_is_scoped_to_store(session, seed_notifications):
    await seed_notifications()

    assert await count_unread(session, STORE_ID) == 3
    assert await count_unread(session, OTHER_STORE_ID) == 1

    latest = await get_notifications(session, STORE_ID, limit=2)
    assert len(latest) == 2
    assert all(n.store_id == STORE_ID for n in latest)


@pytest.mark.asyncio
async def test_list_endpoint(client, seed_notifications):
    await seed_notifications()

    resp = await client.get("/api/notifications", params={"storeId": STORE_ID, "limit": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert len(body["notifications"]) == 2
    # The count covers the whole store, not the returned page
    assert body["unreadCount"] == 3
    assert {n["storeId"] for n in body["notifications"]} == {STORE_ID}


@pytest.mark.asyncio
async def test_mark_one_read(client, seed_notifications):
    await seed_notifications()
    listed = (await client.get("/api/notifications", params={"storeId": STORE_ID})).json()
    target = listed["notifications"][0]["id"]

    resp = await client.patch("/api/notifications", json={"storeId": STORE_ID, "notificationId": target})
    assert resp.status_code == 200

    resp = await client.get("/api/notifications", params={"storeId": STORE_ID, "unreadOnly": "true"})
    body = resp.json()
    assert body["unreadCount"] == 2
    assert target not in [n["id"] for n in body["notifications"]]


@pytest.mark.asyncio
async def test_mark_read_in_another_store_is_404(client, seed_notifications):
    await seed_notifications()
    other = (await client.get("/api/notifications", params={"storeId": OTHER_STORE_ID})).json()
    target = other["notifications"][0]["id"]

    resp = await client.patch("/api/notifications", json={"storeId": STORE_ID, "notificationId": target})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Notification not found"


@pytest.mark.asyncio
async def test_mark_all_read_leaves_other_store(client, seed_notifications):
    await seed_notifications()

    resp = await client.patch("/api/notifications", json={"storeId": STORE_ID, "markAllRead": True})
    assert resp.json()["updated"] == 3

    mine = (await client.get("/api/notifications", params={"storeId": STORE_ID})).json()
    other = (await client.get("/api/notifications", params={"storeId": OTHER_STORE_ID})).json()
    assert mine["unreadCount"] == 0
    assert other["unreadCount"] == 1


@pytest.mark.asyncio
async def test_patch_without_target_is_400(client, seed_notifications):
    await seed_notifications()
    resp = await client.patch("/api/notifications", json={"storeId": STORE_ID})
    assert resp.status_code == 400
