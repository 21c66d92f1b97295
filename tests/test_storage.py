from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tasklist.infra.db import Base
from tasklist.infra.models import StorageItemModel
from tasklist.infra.storage import LocalStorage
from tasklist.services.task_store import TaskStore


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield factory
    engine.dispose()


def test_missing_key_reads_none(session_factory) -> None:
    storage = LocalStorage(session_factory)

    assert storage.get_item("tasks") is None


def test_set_item_inserts_then_overwrites(session_factory) -> None:
    storage = LocalStorage(session_factory)

    storage.set_item("theme", "dark")
    storage.set_item("theme", "light")

    assert storage.get_item("theme") == "light"
    with session_factory() as session:
        assert session.query(StorageItemModel).count() == 1


def test_remove_item(session_factory) -> None:
    storage = LocalStorage(session_factory)
    storage.set_item("tasks", "[]")

    storage.remove_item("tasks")
    storage.remove_item("tasks")

    assert storage.get_item("tasks") is None


def test_keys_are_independent(session_factory) -> None:
    storage = LocalStorage(session_factory)

    storage.set_item("tasks", "[]")
    storage.set_item("theme", "dark")

    assert storage.get_item("tasks") == "[]"
    assert storage.get_item("theme") == "dark"


def test_task_store_survives_restart(session_factory) -> None:
    store = TaskStore(LocalStorage(session_factory))
    milk = store.add_task({"text": "Buy milk", "due_date": "2026-01-10"})
    store.add_task({"text": "Walk dog", "priority": "high"})
    store.toggle_task(milk.id)

    reopened = TaskStore(LocalStorage(session_factory))
    reopened.load_tasks()

    assert reopened.get_all_tasks() == store.get_all_tasks()
    assert reopened.get_stats() == store.get_stats()
