"""
Tests for configuration loading (npm_dupes/config.py).
"""

import json

from click.testing import CliRunner

from npm_dupes.config import (
    AppConfig,
    find_config_file,
    load_config,
    load_config_file,
    validate_config_values,
)
from npm_dupes.main import cli


class TestConfigDefaults:
    """Test built-in defaults."""

    def test_defaults(self):
        """Defaults match the documented CLI behavior."""
        config = load_config()

        assert config.scan.output_format == "default"
        assert config.scan.silent is False
        assert config.scan.color is False
        assert config.scan.ignore_file_name == ".ndignore"
        assert "node_modules" in config.scan.excluded_dirs
        assert config.logging.log_level == "WARNING"

    def test_fresh_object_each_call(self):
        """Nothing is cached between loads."""
        first = load_config()
        first.scan.silent = True

        assert load_config().scan.silent is False

    def test_max_file_size_bytes(self):
        """The size limit converts megabytes to bytes."""
        config = AppConfig()
        config.scan.max_file_size_mb = 2

        assert config.scan.max_file_size_bytes == 2 * 1024 * 1024


class TestConfigFiles:
    """Test config file discovery and parsing."""

    def test_json_file_in_cwd(self, tmp_path, monkeypatch):
        """A .npm-dupes.json in the working directory is picked up."""
        (tmp_path / ".npm-dupes.json").write_text(
            json.dumps({"scan": {"output_format": "full", "excluded_dirs": ["dist"]}})
        )
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.scan.output_format == "full"
        assert config.scan.excluded_dirs == ["dist"]

    def test_yaml_file(self, tmp_path):
        """YAML config files are supported."""
        path = tmp_path / "settings.yaml"
        path.write_text("scan:\n  silent: true\nlogging:\n  log_level: info\n")

        config = load_config(path)

        assert config.scan.silent is True
        assert config.logging.log_level == "info"

    def test_find_config_file_order(self, tmp_path):
        """JSON wins over YAML in the same directory."""
        (tmp_path / ".npm-dupes.yaml").write_text("scan: {}\n")
        (tmp_path / ".npm-dupes.json").write_text("{}")

        assert find_config_file(tmp_path) == tmp_path / ".npm-dupes.json"

    def test_no_config_file(self, tmp_path):
        """Discovery returns None when nothing exists."""
        assert find_config_file(tmp_path) is None

    def test_broken_file_ignored(self, tmp_path):
        """An unparsable config file is reported and skipped."""
        path = tmp_path / "broken.json"
        path.write_text("{")

        assert load_config_file(path) is None
        assert load_config(path).scan.output_format == "default"

    def test_non_mapping_file_ignored(self, tmp_path):
        """A config file must contain a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        assert load_config_file(path) is None

    def test_unknown_keys_ignored(self, tmp_path):
        """Unknown keys do not break loading."""
        path = tmp_path / "extra.json"
        path.write_text(json.dumps({"scan": {"nonsense": 1, "max_file_size_bytes": 5}}))

        config = load_config(path)

        assert not hasattr(config.scan, "nonsense")
        assert config.scan.max_file_size_mb == 10

    def test_wrong_value_types_use_defaults(self, tmp_path, capsys):
        """Values of the wrong type are reported and replaced by defaults."""
        path = tmp_path / "types.yaml"
        path.write_text(
            "scan:\n"
            "  max_file_size_mb: '10'\n"
            "  silent: 'false'\n"
            "  excluded_dirs: node_modules\n"
            "  follow_symlinks: 1\n"
            "logging:\n"
            "  log_level: 20\n"
        )

        config = load_config(path)

        assert config.scan.max_file_size_mb == 10
        assert config.scan.silent is False
        assert config.scan.excluded_dirs == ["node_modules", ".git", ".venv"]
        assert config.scan.follow_symlinks is False
        assert config.logging.log_level == "WARNING"
        assert "Invalid type for scan.silent" in capsys.readouterr().err

    def test_non_mapping_section_skipped(self, tmp_path, capsys):
        """A section that is not a mapping is reported and ignored."""
        path = tmp_path / "sections.yaml"
        path.write_text("scan:\n  - short\nlogging:\n  log_level: debug\n")

        config = load_config(path)

        assert config.scan.output_format == "default"
        assert config.logging.log_level == "debug"
        assert "must contain a mapping" in capsys.readouterr().err


class TestEnvironmentOverrides:
    """Test NPM_DUPES_* variables."""

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Environment wins over the config file."""
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"scan": {"output_format": "full"}}))
        monkeypatch.setenv("NPM_DUPES_OUTPUT", "SHORT")
        monkeypatch.setenv("NPM_DUPES_EXCLUDED_DIRS", "node_modules, build ,")
        monkeypatch.setenv("NPM_DUPES_COLOR", "yes")

        config = load_config(path)

        assert config.scan.output_format == "short"
        assert config.scan.excluded_dirs == ["node_modules", "build"]
        assert config.scan.color is True

    def test_invalid_integer_uses_default(self, monkeypatch):
        """A malformed integer falls back to the default."""
        monkeypatch.setenv("NPM_DUPES_MAX_FILE_SIZE_MB", "lots")

        assert load_config().scan.max_file_size_mb == 10


class TestValidation:
    """Test validation and fallback of bad values."""

    def test_valid_defaults(self):
        """Defaults validate cleanly."""
        assert validate_config_values(AppConfig()) == []

    def test_errors_reported(self):
        """Each invalid value produces one error."""
        config = AppConfig()
        config.scan.output_format = "xml"
        config.scan.max_file_size_mb = 0
        config.logging.log_level = "LOUD"

        errors = validate_config_values(config)

        assert len(errors) == 3
        assert any(e.startswith("scan.output_format") for e in errors)

    def test_invalid_values_fall_back(self, monkeypatch):
        """Invalid settings are replaced by defaults."""
        monkeypatch.setenv("NPM_DUPES_OUTPUT", "xml")
        monkeypatch.setenv("NPM_DUPES_LOG_LEVEL", "loud")

        config = load_config()

        assert config.scan.output_format == "default"
        assert config.logging.log_level == "WARNING"


class TestCLIConfig:
    """Test that the CLI honors config files and lets flags win."""

    def test_config_option(self, lodash_split, tmp_path):
        """--config selects a file; flags still override it."""
        path = tmp_path / "dupes.yaml"
        path.write_text("scan:\n  output_format: short\n  silent: true\n")
        runner = CliRunner()

        result = runner.invoke(cli, ["--folder", str(lodash_split), "--config", str(path)])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["lodash"]

        result = runner.invoke(
            cli,
            ["--folder", str(lodash_split), "--config", str(path), "--output", "default"],
        )
        assert "lodash, Unique versions: 2" in result.output

    def test_string_boolean_does_not_silence(self, lodash_split, tmp_path):
        """silent: "false" in a config file is not treated as true."""
        path = tmp_path / "dupes.json"
        path.write_text(json.dumps({"scan": {"silent": "false", "max_file_size_mb": "1"}}))

        result = CliRunner().invoke(
            cli, ["--folder", str(lodash_split), "--config", str(path)]
        )

        assert result.exit_code == 1
        assert "lodash, Unique versions: 2" in result.stdout
