"""
CLI Tests

typer CliRunner over the chunk / cache-stats / init-db commands.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from codegraph_rca.cli import app, collect_files
from codegraph_rca.common.exceptions import DatabaseError

runner = CliRunner()


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.ts").write_text("export function main() {\n  return 1;\n}\n")
    (tmp_path / "svc.py").write_text("def handler():\n    return 2\n")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("module.exports = {};\n")
    (tmp_path / "README.md").write_text("# repo\n")
    return tmp_path


class TestCollectFiles:
    def test_directory(self, repo):
        assert [path for path, _ in collect_files(repo)] == ["src/app.ts", "svc.py"]

    def test_single_file(self, repo):
        files = collect_files(repo / "svc.py")
        assert files == [("svc.py", "def handler():\n    return 2\n")]


class TestChunkCommand:
    def test_table_output(self, repo):
        result = runner.invoke(app, ["chunk", str(repo)])

        assert result.exit_code == 0
        assert "app.ts" in result.stdout
        assert "svc.py" in result.stdout

    def test_json_output(self, repo):
        result = runner.invoke(app, ["chunk", str(repo), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert set(payload) == {"src/app.ts", "svc.py"}
        assert payload["src/app.ts"][0]["chunk_type"] == "module"
        assert payload["svc.py"][0]["language"] == "python"

    def test_invalid_options(self, repo):
        result = runner.invoke(app, ["chunk", str(repo), "--min-lines", "-1"])
        assert result.exit_code != 0

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["chunk", str(tmp_path / "nope")])
        assert result.exit_code != 0


class TestInfrastructureCommands:
    def test_cache_stats_unreachable(self):
        with patch("codegraph_rca.cli.RedisConnection.ping", AsyncMock(return_value=False)):
            result = runner.invoke(app, ["cache-stats"])

        assert result.exit_code == 1
        assert "unreachable" in result.stdout

    def test_cache_stats(self):
        with (
            patch("codegraph_rca.cli.RedisConnection.ping", AsyncMock(return_value=True)),
            patch("codegraph_rca.cli.RedisConnection.get_client", AsyncMock()),
            patch("codegraph_rca.cli.EmbeddingCache.get_size", AsyncMock(return_value=42)),
        ):
            result = runner.invoke(app, ["cache-stats"])

        assert result.exit_code == 0
        assert "42" in result.stdout

    def test_init_db(self):
        with patch("codegraph_rca.cli.PgVectorStore.ensure_schema", AsyncMock()) as ensure_schema:
            result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0
        ensure_schema.assert_awaited_once()
        assert "Schema ready" in result.stdout

    def test_init_db_failure(self):
        with patch(
            "codegraph_rca.cli.PgVectorStore.ensure_schema",
            AsyncMock(side_effect=DatabaseError("Failed to connect for schema script")),
        ):
            result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 1
        assert "Schema setup failed" in result.stdout
