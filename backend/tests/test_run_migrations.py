"""Tests for run_migrations.py."""

from unittest.mock import MagicMock, patch

import run_migrations
from run_migrations import (
    REQUIRED_TABLES,
    VERSIONED_WRITE_ARGS,
    Migration,
    changed,
    checksum_for,
    discover_migrations,
    main,
    pending,
    schema_problems,
    status_table,
)


def make_conn(tables, signatures):
    """Connection whose cursor returns the table rows, then the signature rows."""
    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    cur.fetchall.side_effect = [
        [(name,) for name in tables],
        [(sig,) for sig in signatures],
    ]
    return conn


def make_migrations(tmp_path, *names):
    for name in names:
        (tmp_path / name).write_text(f"-- {name}\n")
    return discover_migrations(tmp_path)


class TestDiscoverMigrations:
    def test_orders_by_name_and_skips_other_files(self, tmp_path):
        (tmp_path / "README.md").write_text("notes")
        migrations = make_migrations(tmp_path, "002_b.sql", "001_a.sql")

        assert [m.name for m in migrations] == ["001_a.sql", "002_b.sql"]
        assert migrations[0].checksum == checksum_for("-- 001_a.sql\n")

    def test_project_migrations_end_with_write_permission(self):
        migrations = discover_migrations()

        assert [m.name for m in migrations][-1] == "003_board_write_permission.sql"
        assert "p_requester_id UUID DEFAULT NULL" in migrations[-1].sql
        assert "p_required_level TEXT DEFAULT 'edit'" in migrations[-1].sql


class TestPendingAndChanged:
    def test_pending_skips_applied(self, tmp_path):
        migrations = make_migrations(tmp_path, "001_a.sql", "002_b.sql")
        applied = {"001_a.sql": migrations[0].checksum}

        assert [m.name for m in pending(migrations, applied)] == ["002_b.sql"]
        assert changed(migrations, applied) == []

    def test_edited_file_is_reported(self, tmp_path):
        migrations = make_migrations(tmp_path, "001_a.sql")
        applied = {"001_a.sql": "0000000000000000"}

        assert changed(migrations, applied) == migrations
        assert pending(migrations, applied) == []

    def test_status_table_has_one_row_per_file(self, tmp_path):
        migrations = make_migrations(tmp_path, "001_a.sql", "002_b.sql")

        table = status_table(migrations, {"001_a.sql": migrations[0].checksum})

        assert table.row_count == 2


class TestSchemaProblems:
    def test_current_schema_passes(self):
        conn = make_conn(REQUIRED_TABLES, [VERSIONED_WRITE_ARGS])

        assert schema_problems(conn) == []

    def test_missing_table(self):
        tables = [name for name in REQUIRED_TABLES if name != "postits"]
        conn = make_conn(tables, [VERSIONED_WRITE_ARGS])

        assert schema_problems(conn) == ["missing table postits"]

    def test_missing_function(self):
        conn = make_conn(REQUIRED_TABLES, [])

        assert schema_problems(conn) == ["missing function update_board_versioned"]

    def test_write_function_without_permission_arguments(self):
        """A database stuck before the permission migration is flagged."""
        old = "p_board_id uuid, p_changes jsonb, p_expected_version integer"
        conn = make_conn(REQUIRED_TABLES, [old])

        problems = schema_problems(conn)

        assert len(problems) == 1
        assert "expected (p_board_id uuid" in problems[0]

    def test_old_overload_left_behind(self):
        old = "p_board_id uuid, p_changes jsonb, p_expected_version integer"
        conn = make_conn(REQUIRED_TABLES, [old, VERSIONED_WRITE_ARGS])

        assert len(schema_problems(conn)) == 1


class TestMain:
    @patch.object(run_migrations, "connect")
    def test_verify_exit_codes(self, mock_connect):
        mock_connect.return_value = make_conn(REQUIRED_TABLES, [VERSIONED_WRITE_ARGS])
        assert main(["--verify"]) == 0

        mock_connect.return_value = make_conn(REQUIRED_TABLES, [])
        assert main(["--verify"]) == 1
        mock_connect.return_value.close.assert_called_once()

    @patch.object(run_migrations, "apply")
    @patch.object(run_migrations, "applied_checksums")
    @patch.object(run_migrations, "discover_migrations")
    @patch.object(run_migrations, "connect")
    def test_dry_run_applies_nothing(self, mock_connect, mock_discover, mock_applied, mock_apply, tmp_path):
        mock_discover.return_value = [Migration("001_a.sql", tmp_path / "001_a.sql", "abc")]
        mock_applied.return_value = {}

        assert main(["--dry-run"]) == 0
        mock_apply.assert_not_called()

    @patch.object(run_migrations, "apply")
    @patch.object(run_migrations, "applied_checksums")
    @patch.object(run_migrations, "discover_migrations")
    @patch.object(run_migrations, "connect")
    def test_applies_pending_in_order_then_verifies(
        self, mock_connect, mock_discover, mock_applied, mock_apply, tmp_path
    ):
        first = Migration("001_a.sql", tmp_path / "001_a.sql", "abc")
        second = Migration("002_b.sql", tmp_path / "002_b.sql", "def")
        mock_discover.return_value = [first, second]
        mock_applied.return_value = {"001_a.sql": "abc"}
        conn = make_conn(REQUIRED_TABLES, [VERSIONED_WRITE_ARGS])
        mock_connect.return_value = conn

        assert main([]) == 0
        mock_apply.assert_called_once_with(conn, second)
