"""Tests for the task, tag and sync link repositories."""

from datetime import datetime, timedelta

import pytest

from taskrestore.models.sync_link import SyncLink
from taskrestore.models.task import Importance, Task


@pytest.fixture
def sample_task():
    return Task(
        title="Buy milk",
        notes="2%",
        importance=Importance.MUST_DO,
        created_at=datetime(2009, 7, 28, 21, 22, 5),
        due_date=datetime(2009, 8, 1, 12, 0, 0),
        estimated_seconds=600,
        reminder_period=timedelta(hours=1),
        recurrence_rule="FREQ=DAILY",
    )


class TestTaskRepository:
    """Test TaskRepository operations."""

    def test_create_assigns_id(self, task_repository, sample_task):
        created = task_repository.create(sample_task)
        assert created.id is not None
        assert sample_task.id is None

    def test_round_trip_fields(self, task_repository, sample_task):
        created = task_repository.create(sample_task)
        retrieved = task_repository.get(created.id)
        assert retrieved.title == "Buy milk"
        assert retrieved.importance is Importance.MUST_DO
        assert retrieved.due_date == datetime(2009, 8, 1, 12, 0, 0)
        assert retrieved.reminder_period == timedelta(hours=1)
        assert retrieved.recurrence_rule == "FREQ=DAILY"

    def test_get_nonexistent_task(self, task_repository):
        assert task_repository.get("nonexistent-id") is None

    def test_get_all_sorted_by_creation_date(self, task_repository):
        now = datetime(2020, 1, 1)
        for title, offset in [("old", 2), ("new", 0), ("mid", 1)]:
            task_repository.create(Task(title=title, created_at=now - timedelta(minutes=offset)))
        assert [t.title for t in task_repository.get_all()] == ["new", "mid", "old"]

    def test_find_by_title_and_creation_second(self, task_repository, sample_task):
        created = task_repository.create(
            sample_task.model_copy(update={"created_at": datetime(2009, 7, 28, 21, 22, 5, 999000)})
        )
        found = task_repository.find_by_title_and_creation_second("Buy milk", datetime(2009, 7, 28, 21, 22, 5))
        assert found == [created.id]

    def test_find_requires_exact_title(self, task_repository, sample_task):
        task_repository.create(sample_task)
        assert task_repository.find_by_title_and_creation_second("buy milk", sample_task.created_at) == []

    def test_find_excludes_neighbouring_seconds(self, task_repository, sample_task):
        task_repository.create(sample_task)
        later = sample_task.created_at + timedelta(seconds=1)
        earlier = sample_task.created_at - timedelta(microseconds=1)
        assert task_repository.find_by_title_and_creation_second("Buy milk", later) == []
        assert task_repository.find_by_title_and_creation_second("Buy milk", earlier) == []


class TestTagRepository:
    """Test TagRepository operations."""

    def test_synchronize_creates_and_links(self, task_repository, tag_repository, sample_task):
        task = task_repository.create(sample_task)
        assert tag_repository.synchronize_tags(task.id, ["home", "errands", "home", " "]) == ["home", "errands"]
        assert tag_repository.get_names_for_task(task.id) == ["errands", "home"]

    def test_synchronize_is_idempotent(self, task_repository, tag_repository, sample_task):
        task = task_repository.create(sample_task)
        tag_repository.synchronize_tags(task.id, ["home"])
        tag_repository.synchronize_tags(task.id, ["home", "work"])
        assert tag_repository.get_names_for_task(task.id) == ["home", "work"]

    def test_tags_are_shared_between_tasks(self, db_session, task_repository, tag_repository):
        from taskrestore.database.models import TagDB

        first = task_repository.create(Task(title="a", created_at=datetime(2020, 1, 1)))
        second = task_repository.create(Task(title="b", created_at=datetime(2020, 1, 1)))
        tag_repository.synchronize_tags(first.id, ["home"])
        tag_repository.synchronize_tags(second.id, ["home"])
        assert db_session.query(TagDB).count() == 1


class TestSyncLinkRepository:
    """Test SyncLinkRepository operations."""

    def test_save_and_read_back(self, task_repository, sync_link_repository, sample_task):
        task = task_repository.create(sample_task)
        sync_link_repository.save(SyncLink(
            task_id=task.id, service="rtm", remote_task_id=111, remote_series_id=222, remote_list_id=333,
        ))
        links = sync_link_repository.get_for_task(task.id)
        assert len(links) == 1
        assert links[0].remote_list_id == 333
        assert links[0].repeating is False

    def test_save_updates_link_for_same_service(self, task_repository, sync_link_repository, sample_task):
        task = task_repository.create(sample_task)
        base = dict(task_id=task.id, service="rtm", remote_task_id=1, remote_series_id=2, remote_list_id=3)
        sync_link_repository.save(SyncLink(**base))
        sync_link_repository.save(SyncLink(**{**base, "remote_task_id": 9, "repeating": True}))

        assert sync_link_repository.count() == 1
        link = sync_link_repository.get_for_task(task.id)[0]
        assert link.remote_task_id == 9
        assert link.repeating is True

    def test_large_remote_ids(self, task_repository, sync_link_repository, sample_task):
        task = task_repository.create(sample_task)
        big = 2 ** 40
        sync_link_repository.save(SyncLink(
            task_id=task.id, service="rtm", remote_task_id=big, remote_series_id=big + 1, remote_list_id=big + 2,
        ))
        assert sync_link_repository.get_for_task(task.id)[0].remote_task_id == big
