"""Unit tests for config.yaml loading and the first-run template."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
import yaml
from gatekeeper.config import load_settings, write_template, DEFAULT_DB_PORT
from gatekeeper.exceptions import ConfigMissingError, ConfigParseError

VALID_YAML = """
global:
  debug: true
database:
  user: "gatekeeperuser"
  password: "secret"
  host: "db"
  port: "3306"
  database: "gatekeeper"
"""


class TestLoadSettings:
    def test_missing_file_writes_template_and_refuses(self, tmp_path):
        path = tmp_path / "config.yaml"
        with pytest.raises(ConfigMissingError) as err:
            load_settings(str(path))

        assert path.exists()
        assert "fill in" in err.value.detail
        data = yaml.safe_load(path.read_text())
        assert data["global"] == {"debug": False}
        assert data["database"] == {"user": "", "password": "", "host": "", "port": "", "database": ""}

    def test_template_can_be_loaded_after_first_run(self, tmp_path):
        path = tmp_path / "config.yaml"
        write_template(str(path))
        settings = load_settings(str(path))
        assert settings.global_.debug is False
        assert settings.database.port == DEFAULT_DB_PORT

    def test_valid_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(VALID_YAML)
        settings = load_settings(str(path))

        assert settings.global_.debug is True
        assert settings.database.user == "gatekeeperuser"
        assert settings.database.port == 3306
        url = settings.database.url
        assert url.drivername == "mysql+pymysql"
        assert url.host == "db"
        assert url.database == "gatekeeper"
        assert url.password == "secret"

    def test_url_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("database:\n  url: sqlite:///visitors.db\n")
        settings = load_settings(str(path))
        assert settings.database.url.drivername == "sqlite"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        settings = load_settings(str(path))
        assert settings.server.port == 8080
        assert settings.global_.log_file == "trace.log"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("database: [unclosed\n")
        with pytest.raises(ConfigParseError):
            load_settings(str(path))

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigParseError):
            load_settings(str(path))

    def test_bad_type(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("database:\n  port: not-a-port\n")
        with pytest.raises(ConfigParseError):
            load_settings(str(path))

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(VALID_YAML)
        monkeypatch.setenv("GATEKEEPER_DATABASE__HOST", "other-db")
        settings = load_settings(str(path))
        assert settings.database.host == "other-db"
        assert settings.database.user == "gatekeeperuser"

    def test_environment_overrides_global_section(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("global:\n  debug: false\n  site_name: Test Park\n")
        monkeypatch.setenv("GATEKEEPER_GLOBAL__DEBUG", "true")
        settings = load_settings(str(path))
        assert settings.global_.debug is True
        assert settings.global_.site_name == "Test Park"

    def test_global_section_without_environment(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("global:\n  debug: true\n  log_dir: /var/log/gatekeeper\n")
        settings = load_settings(str(path))
        assert settings.global_.debug is True
        assert settings.global_.log_dir == "/var/log/gatekeeper"


class TestCommandLine:
    def test_first_run_exits_with_guidance(self, tmp_path, capsys):
        from gatekeeper.__main__ import main

        path = tmp_path / "config.yaml"
        with pytest.raises(SystemExit) as exit_info:
            main(["--config", str(path)])

        assert exit_info.value.code == 1
        assert path.exists()
        assert "restart the program" in capsys.readouterr().err

    def test_parse_error_exits(self, tmp_path):
        from gatekeeper.__main__ import main

        path = tmp_path / "config.yaml"
        path.write_text("database: [unclosed\n")
        with pytest.raises(SystemExit) as exit_info:
            main(["--config", str(path), "menu"])
        assert exit_info.value.code == 1
