"""Flat-file backend specifics: snapshots on disk survive a restart."""

from __future__ import annotations

import json
from datetime import date

import pytest

from reflections.domains.journal.schemas import JournalEntryData
from reflections.domains.journal.storage import FileStorageService
from reflections.domains.journal.storage.file import ENTRIES_FILE, TAGS_FILE

pytestmark = pytest.mark.integration


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "journal"


@pytest.fixture
def storage(app, data_dir):
    service = FileStorageService(data_dir, identity=app.extensions["storage"].identity)
    service.initialize()
    return service


@pytest.fixture
def user(storage):
    result = storage.identity.register("erin", "erin@example.com", "Erin", "Str0ng!Pass")
    return storage.identity.resolve_token(result.data)


def test_initialize_creates_snapshots(storage, data_dir):
    assert not (data_dir / ENTRIES_FILE).exists()
    tags = json.loads((data_dir / TAGS_FILE).read_text())
    assert len(tags) > 0
    assert all(tag["user_id"] is None for tag in tags)


def test_entries_survive_reload(storage, user, data_dir):
    saved = storage.save_entry(user, JournalEntryData(title="Kept", content="on disk", entry_date=date(2026, 4, 1))).data
    storage.add_tag(user, "Mine")

    reopened = FileStorageService(data_dir, identity=storage.identity)
    reopened.initialize()
    entry = reopened.get_entry(user, saved.id).data
    assert entry.title == "Kept"
    assert entry.created_at == saved.created_at
    assert "Mine" in {t.name for t in reopened.get_all_tags(user).data}


def test_reload_does_not_reseed_tags(storage, data_dir):
    before = len(json.loads((data_dir / TAGS_FILE).read_text()))
    FileStorageService(data_dir, identity=storage.identity).initialize()
    assert len(json.loads((data_dir / TAGS_FILE).read_text())) == before


def test_corrupt_snapshot_fails_initialize(app, data_dir):
    data_dir.mkdir(parents=True)
    (data_dir / ENTRIES_FILE).write_text("{not json")
    service = FileStorageService(data_dir, identity=app.extensions["storage"].identity)
    with pytest.raises(ValueError):
        service.initialize()


def test_failed_write_leaves_memory_untouched(storage, user, monkeypatch):
    storage.save_entry(user, JournalEntryData(content="safe", entry_date=date(2026, 4, 1)))

    def broken(*args, **kwargs):
        raise OSError("read-only file system")

    monkeypatch.setattr(FileStorageService, "_write", staticmethod(broken))
    result = storage.save_entry(user, JournalEntryData(content="lost", entry_date=date(2026, 4, 2)))
    assert not result.success
    assert "read-only file system" in result.error
    assert [e.content for e in storage.get_all_entries(user).data] == ["safe"]


def test_returned_entries_are_copies(storage, user):
    saved = storage.save_entry(user, JournalEntryData(content="original", entry_date=date(2026, 4, 1))).data
    saved.content = "changed outside"
    saved.tags.append("leak")
    stored = storage.get_entry(user, saved.id).data
    assert stored.content == "original"
    assert stored.tags == []
