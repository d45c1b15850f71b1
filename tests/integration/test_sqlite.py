"""Integration tests: assemble → execute against a real SQLite database.

Covers every predicate family, templates, DML helpers, streaming reads,
ranked-window pagination with the page-then-count protocol, explicit row
mapping, and the SQLAlchemy executor over a file-backed SQLite database.
"""
from __future__ import annotations

import datetime as dt
import sqlite3

import pytest
from pydantic import BaseModel

from easysql.compile.builder import QueryAssembler
from easysql.compile.sqlite import SQLiteDialect
from easysql.errors import MalformedInputError
from easysql.execute.mapping import ModelRowMapper
from easysql.execute.sqlite import SQLiteExecutor
from tests.fixtures import ITEMS, TAGS, load_ddl


class Item(BaseModel):
    id: int
    name: str
    kind: str
    price: float


@pytest.fixture()
def db(sqlite_executor: SQLiteExecutor) -> QueryAssembler:
    return QueryAssembler(sqlite_executor, SQLiteDialect(), log_sql=True)


def _ids(rows) -> list[int]:
    return [r["id"] for r in rows]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_equal_and_order(db):
    rows = db.reset("SELECT * FROM item").and_equal("kind", "fruit").order_by_asc("name").execute()
    assert [r["name"] for r in rows] == ["Apple", "Banana", "Date", "Fig"]


@pytest.mark.integration
def test_like_substring(db):
    rows = db.reset("SELECT id FROM item").and_like("name", "an").order_by_asc("id").execute()
    assert _ids(rows) == [2, 5]


@pytest.mark.integration
def test_like_and_not_equal_on_same_column(db):
    rows = (
        db.reset("SELECT id FROM item")
        .and_like("name", "an")
        .and_not_equal("name", "Banana")
        .execute()
    )
    assert _ids(rows) == [5]


@pytest.mark.integration
def test_right_and_left_like(db):
    assert _ids(db.reset("SELECT id FROM item").right_like("name", "G").execute()) == [7]
    assert _ids(db.reset("SELECT id FROM item").left_like("name", "ic").execute()) == [7]


@pytest.mark.integration
def test_between_datetimes_is_inclusive(db):
    rows = (
        db.reset("SELECT id FROM item")
        .and_between("created_at", dt.datetime(2024, 2, 1), dt.datetime(2024, 3, 1))
        .order_by_asc("id")
        .execute()
    )
    assert _ids(rows) == [3, 4, 5]


@pytest.mark.integration
def test_not_removed(db):
    count = db.reset("SELECT COUNT(*) FROM item").and_not_removed("removed").execute_scalar_text()
    assert count == "7"


@pytest.mark.integration
def test_in_and_not_in(db):
    assert _ids(db.reset("SELECT id FROM item").and_in("id", "1,3,5").order_by_asc("id").execute()) == [1, 3, 5]
    rows = db.reset("SELECT id FROM item").and_not_in("id", [1, 2, 3, 4, 5, 6]).order_by_asc("id").execute()
    assert _ids(rows) == [7, 8]


@pytest.mark.integration
def test_malformed_in_never_reaches_database(db):
    db.reset("SELECT id FROM item")
    with pytest.raises(MalformedInputError):
        db.and_in("id", "1) OR (1=1")


@pytest.mark.integration
def test_grouped_or(db):
    rows = (
        db.reset("SELECT id FROM item")
        .and_equal("kind", "vegetable")
        .and_()
        .paren_left()
        .is_null("removed")
        .or_equal_true("removed")
        .paren_right()
        .order_by_asc("id")
    ).execute()
    assert _ids(rows) == [3, 7]


@pytest.mark.integration
def test_quick_search(db):
    assert _ids(db.reset("SELECT id FROM item").and_quick_search("name", "B").execute()) == [2]
    assert len(db.reset("SELECT id FROM item").quick_search("name", "All").execute()) == len(ITEMS)


@pytest.mark.integration
def test_where_template_with_join(db):
    rows = (
        db.reset(
            "SELECT i.id, t.label FROM item i JOIN tag t ON t.item_id = i.id WHERE {where}"
        )
        .equal("t.label", "sweet")
        .order_by_asc("i.id")
        .execute()
    )
    assert _ids(rows) == [1, 6]
    assert [p.name for p in db.parameters] == ["tdotlabel"]


@pytest.mark.integration
def test_where_template_without_predicates(db):
    rows = db.reset("SELECT id FROM tag WHERE {where}").execute()
    assert len(rows) == len(TAGS)


@pytest.mark.integration
def test_existing_where_is_continued(db):
    rows = db.reset("SELECT id FROM item WHERE kind = 'fruit'").and_less("price", 1.0).execute()
    assert _ids(rows) == [2]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_execute_as_model(db):
    items = db.reset("SELECT id, name, kind, price FROM item").and_equal("id", 4).execute_as(ModelRowMapper(Item))
    assert items == [Item(id=4, name="Date", kind="fruit", price=3.0)]


@pytest.mark.integration
def test_execute_reader(db):
    names: list[str] = []
    db.reset("SELECT name FROM item").and_equal("kind", "drink").execute_reader(
        lambda rows: names.extend(r["name"] for r in rows)
    )
    assert names == ["7Up"]


@pytest.mark.integration
def test_scalar_helpers(db):
    assert db.scalar_text("SELECT COUNT(*) FROM tag") == "4"
    assert db.scalar_text_by_id("SELECT name FROM item WHERE id = :id", "id", "6") == "Fig"
    assert db.scalar_text_by_string("SELECT id FROM item WHERE name = :name", "name", "Date") == "4"
    assert db.scalar_text_by_id("SELECT name FROM item WHERE id = :id", "id", 99) == ""


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_update(db):
    affected = db.reset().update("item", {"price": 9.5}).and_equal("id", 1).execute_non_query()
    assert affected == 1
    assert db.scalar_text_by_id("SELECT price FROM item WHERE id = :id", "id", 1) == "9.5"


@pytest.mark.integration
def test_update_same_column_in_set_and_where(db):
    affected = db.reset().update("item", {"name": "Green Apple"}).and_equal("name", "Apple").execute_non_query()
    assert affected == 1
    assert db.scalar_text_by_id("SELECT name FROM item WHERE id = :id", "id", 1) == "Green Apple"


@pytest.mark.integration
def test_insert_then_delete(db):
    db.reset()
    db.add_param("id", 9).add_param("name", "Kiwi").add_param("kind", "fruit")
    db.add_param("price", 0.9).add_param("created_at", dt.datetime(2024, 5, 1))
    assert db.execute_insert("item") == 1
    assert db.scalar_text_by_id("SELECT created_at FROM item WHERE id = :id", "id", 9) == "2024-05-01 00:00:00"

    assert db.reset().and_equal("kind", "fruit").and_greater_or_equal("id", 9).execute_delete("item") == 1
    assert db.scalar_text("SELECT COUNT(*) FROM item") == str(len(ITEMS))


@pytest.mark.integration
def test_non_query_literal(db):
    assert db.non_query("DELETE FROM tag WHERE label = :label", "label", "sweet") == 2


@pytest.mark.integration
def test_failed_write_rolls_back_and_propagates(db):
    db.reset().add_param("id", 1).add_param("name", "Dup").add_param("kind", "x")
    db.add_param("price", 1.0).add_param("created_at", "2024-01-01 00:00:00")
    with pytest.raises(sqlite3.IntegrityError):
        db.execute_insert("item")
    assert db.scalar_text("SELECT COUNT(*) FROM item") == str(len(ITEMS))


@pytest.mark.integration
def test_driver_error_propagates(db):
    with pytest.raises(sqlite3.OperationalError):
        db.reset("SELECT * FROM missing_table").execute()


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_page_data_with_filter(db):
    page = db.reset().and_equal("kind", "fruit").page_data(1, 2, "id", "id, name", "item", "name", "DESC")
    assert [r["name"] for r in page.rows] == ["Banana", "Apple"]
    assert page.total == 4
    assert page.page_count == 2


@pytest.mark.integration
def test_page_data_first_page_default_sort(db):
    page = db.reset().page_data(0, 3, "id", "*", "item")
    assert _ids(page.rows) == [1, 2, 3]
    assert page.total == len(ITEMS)


@pytest.mark.integration
def test_page_data_last_partial_page(db):
    page = db.reset().page_data(2, 3, "id", "*", "item")
    assert _ids(page.rows) == [7, 8]
    assert page.total == len(ITEMS)


@pytest.mark.integration
def test_page_past_the_end_reports_zero(db):
    page = db.reset().and_equal("kind", "fruit").page_data(5, 2, "id", "*", "item")
    assert page.rows == []
    assert page.total == 0


@pytest.mark.integration
def test_page_data_as_model(db):
    page = db.reset().and_equal("kind", "vegetable").page_data_as(
        ModelRowMapper(Item), 0, 10, "id", "id, name, kind, price", "item", "price", "ASC"
    )
    assert [i.name for i in page.rows] == ["Garlic", "Carrot", "Eggplant"]
    assert page.total == 3


@pytest.mark.integration
def test_page_over_join(db):
    page = db.reset().and_equal("t.label", "sweet").page_data(
        0, 10, "id", "t.id AS id, i.name", "item i JOIN tag t ON t.item_id = i.id"
    )
    assert [r["name"] for r in page.rows] == ["Apple", "Fig"]
    assert page.total == 2


# ---------------------------------------------------------------------------
# SQLAlchemy executor
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_sqlalchemy_executor_over_sqlite_file(tmp_path):
    pytest.importorskip("sqlalchemy")
    from easysql.execute.sqlalchemy import SQLAlchemyExecutor

    path = tmp_path / "items.db"
    with SQLiteExecutor(str(path)) as seed:
        conn = seed.connect()
        conn.executescript(load_ddl("sqlite"))
        conn.executemany("INSERT INTO item VALUES (?,?,?,?,?,?)", ITEMS)
        conn.commit()

    with QueryAssembler(SQLAlchemyExecutor.from_url(f"sqlite:///{path}"), SQLiteDialect(), log_sql=False) as qa:
        rows = qa.reset("SELECT id FROM item").and_like("name", "an").order_by_asc("id").execute()
        assert _ids(rows) == [2, 5]

        page = qa.reset().and_equal("kind", "fruit").page_data(0, 2, "id", "id, name", "item")
        assert _ids(page.rows) == [1, 2]
        assert page.total == 4

        assert qa.reset().delete("item").and_equal("kind", "drink").execute_non_query() == 1
        assert qa.scalar_text("SELECT COUNT(*) FROM item") == str(len(ITEMS) - 1)
