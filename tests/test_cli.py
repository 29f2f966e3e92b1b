"""
Tests for the command-line interface.
"""
import json
from unittest.mock import patch

import pytest

from regwatch import main as cli
from regwatch.core.models import PipelineRun
from conftest import NOW


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def write_registry(path, regions):
    path.write_text(json.dumps(regions), encoding="utf-8")
    return str(path)


class TestRunCommand:

    def test_completed_run_exits_zero(self, capsys):
        run = PipelineRun(run_id="r1", start_time=NOW, status="completed", published=3, output_path="news.json")
        with patch.object(cli, "RegulatoryFeedPipeline") as pipeline_cls:
            pipeline_cls.return_value.run.return_value = run
            with pytest.raises(SystemExit) as exit_info:
                cli.main(["run", "--days", "7", "--output", "site/news.json"])

        assert exit_info.value.code == 0
        settings = pipeline_cls.call_args.args[0]
        assert settings.days_back == 7
        assert settings.output_path == "site/news.json"
        pipeline_cls.return_value.run.assert_called_once_with(publish=True)
        assert "Wrote 3 items to news.json" in capsys.readouterr().out

    def test_dry_run_flag(self):
        run = PipelineRun(run_id="r1", start_time=NOW, status="completed")
        with patch.object(cli, "RegulatoryFeedPipeline") as pipeline_cls:
            pipeline_cls.return_value.run.return_value = run
            with pytest.raises(SystemExit):
                cli.main(["run", "--dry-run"])
        pipeline_cls.return_value.run.assert_called_once_with(publish=False)

    def test_failed_run_exits_one(self):
        run = PipelineRun(run_id="r1", start_time=NOW, status="failed", error_message="boom")
        with patch.object(cli, "RegulatoryFeedPipeline") as pipeline_cls:
            pipeline_cls.return_value.run.return_value = run
            with pytest.raises(SystemExit) as exit_info:
                cli.main(["run"])
        assert exit_info.value.code == 1


class TestOtherCommands:

    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit) as exit_info:
            cli.main([])
        assert exit_info.value.code == 1

    def test_validate_registry_ok(self, tmp_path, capsys):
        feeds = write_registry(tmp_path / "feeds.json", {"UK": ["https://www.fca.org.uk/news/rss.xml"]})
        with pytest.raises(SystemExit) as exit_info:
            cli.main(["validate-registry", "--feeds", feeds])
        assert exit_info.value.code == 0
        assert "1 endpoints, 0 invalid" in capsys.readouterr().out

    def test_validate_registry_reports_bad_urls(self, tmp_path, capsys):
        feeds = write_registry(tmp_path / "feeds.json", {"UK": ["fca.org.uk/rss"]})
        with pytest.raises(SystemExit) as exit_info:
            cli.main(["validate-registry", "--feeds", feeds])
        assert exit_info.value.code == 1
        assert "fca.org.uk/rss" in capsys.readouterr().out

    def test_validate_registry_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exit_info:
            cli.main(["validate-registry", "--feeds", str(tmp_path / "missing.json")])
        assert exit_info.value.code == 1

    def test_tags_command(self, tmp_path, capsys):
        artifact = tmp_path / "news.json"
        artifact.write_text(json.dumps({
            "generatedAt": "2026-10-19T12:00:00.000Z",
            "items": [
                {"region": "UK", "tags": ["FCA", "UK"]},
                {"region": "Card Networks", "tags": ["Visa"]},
            ],
        }), encoding="utf-8")

        cli.main(["tags", "--artifact", str(artifact)])

        out = capsys.readouterr().out
        assert "UK (1 items): FCA, UK" in out
        assert "Card Networks (1 items): Visa, Mastercard" in out

    def test_tags_missing_artifact(self, tmp_path):
        with pytest.raises(SystemExit) as exit_info:
            cli.main(["tags", "--artifact", str(tmp_path / "none.json")])
        assert exit_info.value.code == 1

    def test_health_command(self, tmp_path, capsys):
        feeds = write_registry(tmp_path / "feeds.json", {"UK": ["https://www.fca.org.uk/news/rss.xml"]})
        with patch.dict("os.environ", {"FEEDS_PATH": feeds, "OUTPUT_PATH": str(tmp_path / "news.json")}):
            with pytest.raises(SystemExit) as exit_info:
                cli.main(["health"])
        assert exit_info.value.code == 0
        assert "HEALTHY" in capsys.readouterr().out
