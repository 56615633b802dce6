"""
Unit tests for schema statement splitting and the initialization guard.

The store is replaced by a Mock so these tests only observe which
statements are issued, and in which order.
"""

import threading
from unittest.mock import Mock

import pytest

from pos_service.dal.schema import (
    SCHEMA_SQL,
    SERIAL_SEEDED_TABLES,
    SQLITE_SCHEMA_SQL,
    SchemaInitializer,
    SchemaState,
    split_statements,
)
from pos_service.handlers.utils.errors import StoreError


@pytest.fixture
def mock_dal():
    dal = Mock()
    dal.dialect_name = "sqlite"
    dal.execute.return_value = 1
    return dal


class TestSplitStatements:
    """Test cases for split_statements."""

    def test_drops_empty_and_whitespace_fragments(self):
        sql_text = "  ;CREATE TABLE a (id INT);;  \n\t ;CREATE TABLE b (id INT);\n"

        assert split_statements(sql_text) == [
            "CREATE TABLE a (id INT)",
            "CREATE TABLE b (id INT)",
        ]

    def test_statement_without_trailing_terminator_is_kept(self):
        assert split_statements("SELECT 1; SELECT 2") == ["SELECT 1", "SELECT 2"]

    def test_blank_text_yields_nothing(self):
        assert split_statements(" ;\n; ") == []

    def test_bundled_schema_is_idempotent_ddl(self):
        statements = split_statements(SCHEMA_SQL)

        assert len(statements) == 15
        assert all(statement.startswith("CREATE TABLE IF NOT EXISTS") for statement in statements)


class TestRenderSchema:
    """Test cases for the per-dialect DDL."""

    def test_postgresql_schema_generates_ids(self):
        assert "id SERIAL PRIMARY KEY" in SCHEMA_SQL
        assert "DEFAULT (gen_random_uuid()::text)" in SCHEMA_SQL
        assert "DEFAULT NOW()" in SCHEMA_SQL
        assert "{" not in SCHEMA_SQL

    def test_sqlite_schema_uses_rowid_aliases(self):
        assert "SERIAL" not in SQLITE_SCHEMA_SQL
        assert "gen_random_uuid" not in SQLITE_SCHEMA_SQL
        assert "id INTEGER PRIMARY KEY," in SQLITE_SCHEMA_SQL

    def test_dialects_define_the_same_tables(self):
        def tables(sql_text):
            return [statement.split("(")[0] for statement in split_statements(sql_text)]

        assert tables(SCHEMA_SQL) == tables(SQLITE_SCHEMA_SQL)

    @pytest.mark.parametrize("dialect, expected", [
        ("postgresql", SCHEMA_SQL),
        ("sqlite", SQLITE_SCHEMA_SQL),
    ])
    def test_initializer_picks_schema_for_store_dialect(self, mock_dal, dialect, expected):
        mock_dal.dialect_name = dialect

        assert SchemaInitializer(mock_dal).schema_sql == expected


class TestSeedSequences:
    """Test cases for SERIAL sequence alignment after seeding."""

    def test_postgresql_sequences_advanced_past_seeded_ids(self, mock_dal):
        mock_dal.dialect_name = "postgresql"

        SchemaInitializer(mock_dal).seed_initial_data()

        setval_calls = [call.args[0] for call in mock_dal.execute.call_args_list if "setval" in call.args[0]]
        assert len(setval_calls) == len(SERIAL_SEEDED_TABLES)
        assert "pg_get_serial_sequence('users', 'id')" in setval_calls[1]

    def test_sqlite_has_no_sequences(self, mock_dal):
        SchemaInitializer(mock_dal).seed_initial_data()

        assert not any("setval" in call.args[0] for call in mock_dal.execute.call_args_list)


class TestInitializeSchema:
    """Test cases for SchemaInitializer.initialize_schema."""

    def test_executes_only_non_empty_fragments_in_order(self, mock_dal):
        initializer = SchemaInitializer(mock_dal, schema_sql="CREATE A;\n\n;  ;CREATE B;CREATE C;")

        executed = initializer.initialize_schema()

        assert executed == 3
        assert [call.args[0] for call in mock_dal.execute.call_args_list] == [
            "CREATE A",
            "CREATE B",
            "CREATE C",
        ]

    def test_first_failure_aborts_remaining_statements(self, mock_dal):
        mock_dal.execute.side_effect = [1, StoreError(message="syntax error", operation="execute"), 1]
        initializer = SchemaInitializer(mock_dal, schema_sql="CREATE A; CREATE B; CREATE C;")

        with pytest.raises(StoreError, match="syntax error"):
            initializer.initialize_schema()

        assert mock_dal.execute.call_count == 2


class TestEnsureInitialized:
    """Test cases for the once-per-process guard."""

    def test_first_call_applies_schema_then_seed(self, mock_dal):
        initializer = SchemaInitializer(mock_dal, schema_sql="CREATE A;")

        assert initializer.state is SchemaState.UNINITIALIZED
        assert initializer.ensure_initialized() is True
        assert initializer.state is SchemaState.INITIALIZED

        statements = [call.args[0] for call in mock_dal.execute.call_args_list]
        assert statements[0] == "CREATE A"
        assert all("ON CONFLICT" in statement for statement in statements[1:])

    def test_later_calls_do_not_touch_the_store(self, mock_dal):
        initializer = SchemaInitializer(mock_dal, schema_sql="CREATE A;")
        initializer.ensure_initialized()
        calls_after_first = mock_dal.execute.call_count

        assert initializer.ensure_initialized() is False
        assert initializer.ensure_initialized() is False
        assert mock_dal.execute.call_count == calls_after_first

    def test_failure_leaves_state_uninitialized(self, mock_dal):
        mock_dal.execute.side_effect = StoreError(message="connection refused", operation="execute")
        initializer = SchemaInitializer(mock_dal, schema_sql="CREATE A;")

        with pytest.raises(StoreError):
            initializer.ensure_initialized()

        assert initializer.state is SchemaState.UNINITIALIZED

        mock_dal.execute.side_effect = None
        assert initializer.ensure_initialized() is True

    def test_concurrent_first_calls_initialize_once(self, mock_dal):
        initializer = SchemaInitializer(mock_dal, schema_sql="CREATE A;")
        results = []
        start = threading.Barrier(5)

        def worker():
            start.wait()
            results.append(initializer.ensure_initialized())

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
        ddl_calls = [call for call in mock_dal.execute.call_args_list if call.args[0] == "CREATE A"]
        assert len(ddl_calls) == 1
