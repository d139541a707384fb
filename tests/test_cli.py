"""Tests for the bumbledb command line."""

import json

import pytest
from click.testing import CliRunner

from bumbledb.cli import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("BUMBLEDB_DATA_DIR", raising=False)
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def _run(runner, data_dir, *args, **kwargs):
    return runner.invoke(cli, ["--dir", str(data_dir.parent), "--data-dir", str(data_dir), *args], **kwargs)


def _ndjson(output: str) -> list:
    return [json.loads(line) for line in output.splitlines() if line]


class TestCli:
    def test_init(self, runner, tmp_path):
        result = runner.invoke(cli, ["--dir", str(tmp_path), "init", "--data", "store"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "bumbledb.toml").exists()
        assert (tmp_path / "store").is_dir()

        again = runner.invoke(cli, ["--dir", str(tmp_path), "init"])
        assert again.exit_code == 0
        assert "already exists" in again.output

    def test_insert_and_find(self, runner, data_dir, addresses):
        docs = [json.dumps(a) for a in addresses]
        result = _run(runner, data_dir, "insert", "test", *docs)
        assert result.exit_code == 0, result.output
        assert "Inserted 4 document(s)" in result.output

        found = _run(runner, data_dir, "find", "test", '{"address.country": "Cayman Islands"}')
        assert found.exit_code == 0
        assert _ndjson(found.output) == [addresses[1], addresses[3]]

    def test_insert_from_stdin(self, runner, data_dir):
        result = _run(runner, data_dir, "insert", "test", input='{"id":1}\n\n{"id":2}\n')
        assert result.exit_code == 0, result.output
        assert _ndjson(_run(runner, data_dir, "find", "test").output) == [{"id": 1}, {"id": 2}]

    def test_find_one_and_limit(self, runner, data_dir):
        _run(runner, data_dir, "insert", "test", '{"id":1,"k":"a"}', '{"id":2,"k":"a"}', '{"id":3,"k":"a"}')
        one = _run(runner, data_dir, "find", "test", '{"k":"a"}', "--one")
        assert _ndjson(one.output) == [{"id": 1, "k": "a"}]
        limited = _run(runner, data_dir, "find", "test", "--limit", "2")
        assert [d["id"] for d in _ndjson(limited.output)] == [1, 2]

    def test_find_one_no_match(self, runner, data_dir):
        result = _run(runner, data_dir, "find", "test", '{"id":1}', "--one")
        assert result.exit_code == 1
        assert "No matching document" in result.output

    def test_update_and_delete(self, runner, data_dir):
        _run(runner, data_dir, "insert", "test", '{"id":1}', '{"id":2}', '{"id":1}')
        upd = _run(runner, data_dir, "update", "test", '{"id":1}', '{"id":1,"v":2}')
        assert upd.exit_code == 0
        assert json.loads(upd.output) == {"id": 1, "v": 2}

        deleted = _run(runner, data_dir, "delete", "test", '{"v":2}')
        assert "Deleted 2 document(s)" in deleted.output
        assert _ndjson(_run(runner, data_dir, "find", "test").output) == [{"id": 2}]

    def test_collections_and_drop(self, runner, data_dir):
        _run(runner, data_dir, "insert", "users", '{"id":1}')
        _run(runner, data_dir, "insert", "posts", '{"id":1}')
        assert _run(runner, data_dir, "collections").output.split() == ["posts", "users"]

        assert _run(runner, data_dir, "drop", "users").exit_code == 0
        assert _run(runner, data_dir, "drop", "users").exit_code == 0
        assert _run(runner, data_dir, "collections").output.split() == ["posts"]

    def test_drop_db(self, runner, data_dir):
        _run(runner, data_dir, "insert", "users", '{"id":1}')
        aborted = _run(runner, data_dir, "drop-db", input="n\n")
        assert aborted.exit_code == 1
        assert _run(runner, data_dir, "collections").output.split() == ["users"]

        result = _run(runner, data_dir, "drop-db", "--yes")
        assert result.exit_code == 0
        assert _run(runner, data_dir, "collections").output.split() == []
        assert data_dir.is_dir()

    def test_invalid_query(self, runner, data_dir):
        result = _run(runner, data_dir, "find", "test", "{nope")
        assert result.exit_code == 2
        assert "not valid JSON" in result.output

    def test_query_must_be_object(self, runner, data_dir):
        result = _run(runner, data_dir, "delete", "test", "[1]")
        assert result.exit_code == 2

    def test_corrupt_collection_reports_error(self, runner, data_dir):
        data_dir.mkdir()
        (data_dir / "test.ndjson").write_text("garbage\n")
        result = _run(runner, data_dir, "find", "test")
        assert result.exit_code == 1
        assert "invalid document line" in result.output

    def test_invalid_collection_name(self, runner, data_dir):
        result = _run(runner, data_dir, "find", "..")
        assert result.exit_code == 1
        assert "Invalid collection name" in result.output

    def test_negative_limit_is_usage_error(self, runner, data_dir):
        _run(runner, data_dir, "insert", "test", '{"id":1}')
        result = _run(runner, data_dir, "find", "test", "--limit", "-1")
        assert result.exit_code == 2
        assert "--limit" in result.output
