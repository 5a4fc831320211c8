"""Repository contract, run against both backends (SQL on in-memory SQLite)."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from eco9.config import Settings
from eco9.errors import InvalidArgumentError
from eco9.repository import (
    InMemoryActivityRepository, SqlActivityRepository, build_repository,
)
from eco9.schemas import Activity, ImpactOut

T0 = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def make(id_, user="u1", category="transport", value=1.0, days=0):
    return Activity(
        id=id_, user_id=user, category=category, value=value, unit="miles",
        timestamp=T0 + timedelta(days=days),
        impact=ImpactOut(co2_saved=value * 0.4, water_conserved=value * 0.1),
    )


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    r = InMemoryActivityRepository() if request.param == "memory" else SqlActivityRepository("sqlite://")
    yield r
    r.close()


def test_add_then_get(repo):
    repo.add(make("a1", value=5.2))
    got = repo.get("a1")
    assert got.value == 5.2
    assert got.timestamp == T0
    assert got.impact.co2_saved == pytest.approx(2.08)


def test_get_missing_returns_none(repo):
    assert repo.get("nope") is None


def test_update(repo):
    repo.add(make("a1"))
    changed = make("a1", value=9.0)
    repo.update(changed)
    assert repo.get("a1").value == 9.0


def test_update_missing_returns_none(repo):
    assert repo.update(make("ghost")) is None


def test_delete(repo):
    repo.add(make("a1"))
    assert repo.delete("a1") is True
    assert repo.get("a1") is None
    assert repo.delete("a1") is False


def test_list_filters_by_user_and_category(repo):
    repo.add(make("a1"))
    repo.add(make("a2", category="energy"))
    repo.add(make("a3", user="u2"))
    assert [a.id for a in repo.list("u1")] == ["a1", "a2"]
    assert [a.id for a in repo.list("u1", category="energy")] == ["a2"]


def test_list_sorting(repo):
    repo.add(make("a1", value=3, days=0))
    repo.add(make("a2", value=1, days=2))
    repo.add(make("a3", value=2, days=1))
    assert [a.id for a in repo.list("u1")] == ["a2", "a3", "a1"]
    assert [a.id for a in repo.list("u1", sort_order="asc")] == ["a1", "a3", "a2"]
    assert [a.id for a in repo.list("u1", sort_by="value", sort_order="asc")] == ["a2", "a3", "a1"]


def test_unrecognised_sort_order_is_descending(repo):
    repo.add(make("a1", days=0))
    repo.add(make("a2", days=1))
    assert [a.id for a in repo.list("u1", sort_order="sideways")] == ["a2", "a1"]


def test_list_pagination(repo):
    for i in range(5):
        repo.add(make(f"a{i}", days=i))
    page = repo.list("u1", sort_order="asc", limit=2, offset=1)
    assert [a.id for a in page] == ["a1", "a2"]
    assert repo.list("u1", offset=10) == []


def test_list_rejects_unknown_sort_field(repo):
    with pytest.raises(InvalidArgumentError):
        repo.list("u1", sort_by="impact")


def test_list_rejects_negative_offset(repo):
    with pytest.raises(InvalidArgumentError):
        repo.list("u1", offset=-1)


def test_all_for_user_is_unpaginated(repo):
    for i in range(15):
        repo.add(make(f"a{i:02d}", days=i))
    assert len(repo.all_for_user("u1")) == 15


def test_memory_repo_returns_copies():
    repo = InMemoryActivityRepository()
    repo.add(make("a1"))
    got = repo.get("a1")
    got.value = 100
    assert repo.get("a1").value == 1.0


def test_memory_get_waits_for_writers():
    repo = InMemoryActivityRepository()
    repo.add(make("a1"))
    seen = []
    reader = threading.Thread(target=lambda: seen.append(repo.get("a1")))
    with repo._lock:
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        assert seen == []
    reader.join(timeout=5)
    assert seen[0].id == "a1"


def test_build_repository_from_settings():
    mem = build_repository(Settings(activity_store="memory"))
    assert isinstance(mem, InMemoryActivityRepository)
    sql = build_repository(Settings(activity_store="sql", database_url="sqlite://"))
    try:
        assert isinstance(sql, SqlActivityRepository)
    finally:
        sql.close()
