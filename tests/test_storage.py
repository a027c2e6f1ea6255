"""Mini README: Contract tests shared by every transaction store backend.

Each backend (memory, JSON file, SQLite through the SQL store) runs the same
checks: identifiers are assigned on create, deletes honour owner scope and
report missing records, users are unique by email, and writes are visible
to the next read. Backend-specific behaviour (durability across instances,
corrupt files) is tested separately.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from trackease.configuration import TrackEaseSettings
from trackease.finance import build_transaction
from trackease.storage import (
    REGISTRY,
    DuplicateUserError,
    JsonFileStore,
    MemoryTransactionStore,
    SqlTransactionStore,
    StorageError,
    TransactionNotFoundError,
    create_store,
)


@pytest.fixture(params=["memory", "file", "sql"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        backend = MemoryTransactionStore()
    elif request.param == "file":
        backend = JsonFileStore(tmp_path / "transactions.json")
    else:
        backend = SqlTransactionStore(f"sqlite:///{tmp_path / 'trackease.db'}")
        backend.initialise_schema()
    yield backend
    backend.close()


def new(kind: str = "expense", amount: str = "10.00", when: str = "2024-01-10", owner=None, **extra):
    payload = {"type": kind, "amount": amount, "date": when, **extra}
    return build_transaction(payload, owner=owner)


def test_create_assigns_identifier_and_is_listed(store) -> None:
    created = store.create_transaction(new(category="Food", note="lunch, with \"friends\""))

    assert created.transaction_id
    listed = store.list_transactions()
    assert listed == [created]
    assert listed[0].note == 'lunch, with "friends"'


def test_list_keeps_insertion_order(store) -> None:
    first = store.create_transaction(new(when="2024-03-01"))
    second = store.create_transaction(new(when="2024-01-01"))
    third = store.create_transaction(new(when="2024-02-01"))

    assert [t.transaction_id for t in store.list_transactions()] == [
        first.transaction_id,
        second.transaction_id,
        third.transaction_id,
    ]


def test_delete_removes_exactly_one_record(store) -> None:
    keep = store.create_transaction(new())
    drop = store.create_transaction(new())

    store.delete_transaction(drop.transaction_id)

    assert store.list_transactions() == [keep]


def test_delete_unknown_id_reports_not_found_and_changes_nothing(store) -> None:
    store.create_transaction(new())

    with pytest.raises(TransactionNotFoundError):
        store.delete_transaction("does-not-exist")
    assert len(store.list_transactions()) == 1


def test_owner_scope_limits_reads_and_deletes(store) -> None:
    alice = store.create_user("alice@example.com", "hash-a")
    bob = store.create_user("bob@example.com", "hash-b")
    alice_tx = store.create_transaction(new(owner=alice.user_id))
    bob_tx = store.create_transaction(new(owner=bob.user_id))

    assert store.list_transactions(alice.user_id) == [alice_tx]
    with pytest.raises(TransactionNotFoundError):
        store.delete_transaction(bob_tx.transaction_id, alice.user_id)
    store.delete_transaction(bob_tx.transaction_id, bob.user_id)
    assert store.list_transactions(bob.user_id) == []
    assert store.list_transactions() == [alice_tx]


def test_users_are_unique_by_email(store) -> None:
    user = store.create_user("carol@example.com", "hash")

    with pytest.raises(DuplicateUserError):
        store.create_user("carol@example.com", "other")
    assert store.get_user_by_email("carol@example.com") == user
    assert store.get_user_by_email("nobody@example.com") is None


def test_json_store_survives_reopening(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "transactions.json"
    created = JsonFileStore(path).create_transaction(new(kind="income", amount="1000"))

    reopened = JsonFileStore(path)

    assert reopened.list_transactions() == [created]
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["transactions"][0]["amount_cents"] == 100_000


def test_json_store_skips_unreadable_records(tmp_path: Path) -> None:
    path = tmp_path / "transactions.json"
    path.write_text(
        json.dumps(
            {
                "transactions": [
                    {"id": "ok", "type": "expense", "amount": 5, "date": "whenever"},
                    {"id": "bad", "type": "refund", "amount": 5, "date": "2024-01-01"},
                ]
            }
        ),
        encoding="utf-8",
    )

    listed = JsonFileStore(path).list_transactions()

    assert [t.transaction_id for t in listed] == ["ok"]
    assert listed[0].occurred_at is None


def test_json_store_skips_entries_that_are_not_objects(tmp_path: Path) -> None:
    path = tmp_path / "transactions.json"
    valid = {"id": "ok", "type": "income", "amount_cents": 500, "date": "2024-01-01T00:00:00"}
    path.write_text(json.dumps({"transactions": [1, "text", None, valid], "users": [7]}), encoding="utf-8")
    store = JsonFileStore(path)

    assert [t.transaction_id for t in store.list_transactions()] == ["ok"]
    assert store.get_user_by_email("a@b.c") is None
    store.delete_transaction("ok")
    assert store.list_transactions() == []


@pytest.mark.parametrize("document", [{"transactions": {}}, {"transactions": [], "users": "nobody"}])
def test_json_store_rejects_non_list_collections(tmp_path: Path, document) -> None:
    path = tmp_path / "transactions.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStore(path).list_transactions()


def test_json_store_reports_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "transactions.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStore(path).list_transactions()


def test_registry_lists_builtin_backends() -> None:
    assert list(REGISTRY.available_backends()) == ["file", "memory", "postgres", "sql"]
    with pytest.raises(KeyError):
        REGISTRY.create("mongo", TrackEaseSettings())


def test_create_store_follows_settings(tmp_path: Path) -> None:
    file_settings = TrackEaseSettings(storage_backend="file", data_directory=tmp_path)
    sql_settings = TrackEaseSettings(storage_backend="SQL", database_url=f"sqlite:///{tmp_path / 'x.db'}")

    file_store = create_store(file_settings)
    sql_store = create_store(sql_settings)

    assert isinstance(file_store, JsonFileStore)
    assert file_store.path == tmp_path.resolve() / "transactions.json"
    assert isinstance(sql_store, SqlTransactionStore)
    assert sql_store.list_transactions() == []
    sql_store.close()
