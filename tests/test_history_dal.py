import asyncio

import pytest

from dal.history_dal import HistoryDAL
from models.history_record import HistoryChange, HistoryStatus
from services.history.change_feed import HistoryChangeFeed
from utils.database_init import AsyncDatabaseInitializer


@pytest.fixture
def feed():
    return HistoryChangeFeed(max_pending=2)


@pytest.fixture
def dal(tmp_path, feed):
    return HistoryDAL(AsyncDatabaseInitializer(tmp_path / "db"), feed)


def drain(queue):
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
    return [(e.event, e.record_id) for e in events]


class TestHistoryDAL:
    @pytest.mark.asyncio
    async def test_create_and_get_round_trip(self, dal):
        record = await dal.create_record("data:image/png;base64,AAAA", file_name="medicine_1.jpg")

        stored = await dal.get_record(record.id)

        assert stored == record
        assert stored.status is HistoryStatus.PENDING
        assert stored.analysis_result is None
        assert stored.timestamp > 0

    @pytest.mark.asyncio
    async def test_missing_record_is_none(self, dal):
        assert await dal.get_record("nope") is None
        assert await dal.update_record("nope", status=HistoryStatus.ERROR) is False
        assert await dal.delete_record("nope") is False

    @pytest.mark.asyncio
    async def test_update_stores_analysis_json(self, dal):
        record = await dal.create_record("data:image/png;base64,AAAA")

        changed = await dal.update_record(
            record.id,
            status=HistoryStatus.ANALYZED,
            analysis_result={"initial_analysis": "औषधिको नाम: सिटामोल"},
        )

        stored = await dal.get_record(record.id)
        assert changed is True
        assert stored.status is HistoryStatus.ANALYZED
        assert stored.initial_analysis == "औषधिको नाम: सिटामोल"

    @pytest.mark.asyncio
    async def test_update_without_fields_is_a_no_op(self, dal):
        record = await dal.create_record("data:image/png;base64,AAAA")
        assert await dal.update_record(record.id) is False

    @pytest.mark.asyncio
    async def test_list_is_newest_first_and_filters_by_status(self, dal):
        ids = []
        for _ in range(3):
            ids.append((await dal.create_record("data:image/png;base64,AAAA")).id)
            await asyncio.sleep(0.002)
        await dal.update_record(ids[1], status=HistoryStatus.ERROR)

        newest_first = [r.id for r in await dal.list_records()]
        oldest_first = [r.id for r in await dal.list_records(newest_first=False)]
        errors = [r.id for r in await dal.list_records(status=HistoryStatus.ERROR)]
        page = [r.id for r in await dal.list_records(limit=1, offset=1)]

        assert newest_first == list(reversed(ids))
        assert oldest_first == ids
        assert errors == [ids[1]]
        assert page == [ids[1]]

    @pytest.mark.asyncio
    async def test_history_survives_a_new_initializer(self, tmp_path):
        first = HistoryDAL(AsyncDatabaseInitializer(tmp_path / "db"))
        record = await first.create_record("data:image/png;base64,AAAA")

        second = HistoryDAL(AsyncDatabaseInitializer(tmp_path / "db"))
        assert (await second.get_record(record.id)).id == record.id


class TestChangeFeed:
    @pytest.mark.asyncio
    async def test_mutations_are_published_to_subscribers(self, tmp_path):
        feed = HistoryChangeFeed()
        dal = HistoryDAL(AsyncDatabaseInitializer(tmp_path / "db"), feed)

        async with feed.subscribe() as queue:
            assert feed.subscriber_count == 1
            record = await dal.create_record("data:image/png;base64,AAAA")
            await dal.update_record(record.id, status=HistoryStatus.ANALYZED)
            await dal.delete_record(record.id)
            events = drain(queue)

        assert events == [("insert", record.id), ("update", record.id), ("delete", record.id)]
        assert feed.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_lagging_subscriber_drops_oldest_event(self, dal, feed):
        async with feed.subscribe() as queue:
            records = [await dal.create_record("data:image/png;base64,AAAA") for _ in range(3)]
            events = drain(queue)

        assert events == [("insert", records[1].id), ("insert", records[2].id)]

    def test_publish_without_subscribers_is_harmless(self):
        HistoryChangeFeed().publish(HistoryChange(event="insert", record_id="x"))

    def test_change_serializes_for_the_socket(self):
        assert HistoryChange(event="delete", record_id="abc").to_dict() == {
            "type": "history.change",
            "event": "delete",
            "record_id": "abc",
        }
