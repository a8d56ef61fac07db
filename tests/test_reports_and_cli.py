"""Tests for the options report and the command-line entry point."""

import json

import pytest
import yaml

import main
from reports.options_report import build_options_report, write_options_report
from storage.option_rows import get_option
from options.schema import OptionEntry, OptionsConfig
from options.service import OptionsService
from storage.memory import MemoryOptionsBackend
from validation.helper import ValidationHelper


class TestOptionsReport:

    def test_reports_overridden_and_stale_keys(self, options_config, validator):
        backend = MemoryOptionsBackend({"seo_site_options": {"removed_option": 1}})
        service = OptionsService(options_config, backend, validator)
        service.set("lang", "fr")

        report = build_options_report(service)

        assert report["backend_key"] == "seo_site_options"
        assert report["overridden"] == ["lang"]
        assert report["stale_keys"] == ["removed_option"]
        assert report["defaults"]["lang"] == "en"
        assert report["values"]["lang"] == "fr"

    def test_writes_json_file(self, service, tmp_path):
        path = write_options_report(service, tmp_path / "out" / "report.json")

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["values"] == service.get_many()
        assert payload["overridden"] == []

    def test_default_location_is_outside_the_package(self, service, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        path = write_options_report(service)

        assert path.parent.name == "options_reports"
        assert path.name.startswith("seo_site_options-")
        assert not (tmp_path / "reports").exists()

    def test_nested_bool_counts_as_overridden(self, backend):
        config = OptionsConfig("seo_site_options", {"flags": OptionEntry("flags", [1], ("flag_list",))})
        service = OptionsService(config, backend, ValidationHelper({"flag_list": list}))
        service.set("flags", [True])

        assert build_options_report(service)["overridden"] == ["flags"]


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run the CLI in a temp dir with its own config and database."""
    monkeypatch.chdir(tmp_path)
    config = {
        "settings": {"backend_key": "seo_site_options", "secondary_backend_key": "seo_network_options"},
        "options": {
            "lang": {"default": "en", "validators": ["non_empty_string"]},
            "enable_xml_sitemap": {"default": True, "validators": ["boolean"]},
            "og_default_image": {
                "default": "",
                "validators": ["empty_string", "url"],
                "exclude_from_secondary_context": True,
            },
        },
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config), encoding="utf-8")

    db_path = str(tmp_path / "cli.db")
    monkeypatch.setattr("storage.db.DB_PATH", db_path)
    return {"config": str(config_path), "db": db_path}


class TestCli:

    def _run(self, cli_env, *args):
        return main.main(["--config", cli_env["config"], *args])

    def test_set_then_get(self, cli_env, capsys):
        assert self._run(cli_env, "--set", "enable_xml_sitemap", "no") == 0
        capsys.readouterr()

        assert self._run(cli_env, "--get", "enable_xml_sitemap") == 0
        assert json.loads(capsys.readouterr().out) is False
        assert get_option("seo_site_options", db_path=cli_env["db"])["enable_xml_sitemap"] is False

    def test_invalid_value_exits_nonzero(self, cli_env):
        assert self._run(cli_env, "--set", "og_default_image", "not a url") == 1
        assert get_option("seo_site_options", db_path=cli_env["db"]) is None

    def test_unknown_key_exits_nonzero(self, cli_env):
        assert self._run(cli_env, "--get", "nope") == 1

    def test_ensure_and_reset(self, cli_env):
        assert self._run(cli_env, "--ensure") == 0
        assert get_option("seo_site_options", db_path=cli_env["db"]) == {
            "lang": "en", "enable_xml_sitemap": True, "og_default_image": "",
        }

        self._run(cli_env, "--set", "lang", "fr")
        assert self._run(cli_env, "--reset") == 0
        assert get_option("seo_site_options", db_path=cli_env["db"])["lang"] == "en"

    def test_show_filters_keys(self, cli_env, capsys):
        assert self._run(cli_env, "--show", "lang", "missing") == 0
        assert json.loads(capsys.readouterr().out) == {"lang": "en"}

    def test_secondary_namespace_skips_excluded_options(self, cli_env, capsys):
        assert self._run(cli_env, "--secondary", "--defaults") == 0
        assert json.loads(capsys.readouterr().out) == {"lang": "en", "enable_xml_sitemap": True}

        assert self._run(cli_env, "--secondary", "--get", "og_default_image") == 1

    def test_report(self, cli_env, tmp_path, capsys):
        target = tmp_path / "report.json"
        assert self._run(cli_env, "--report", str(target)) == 0
        assert capsys.readouterr().out.strip() == str(target)
        assert json.loads(target.read_text(encoding="utf-8"))["backend_key"] == "seo_site_options"
