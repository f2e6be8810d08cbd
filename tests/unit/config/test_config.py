# pyright: reportAny=false
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from rqm.config import (
    Config,
    ConfigSourceName,
    DanglingPolicy,
    LogLevel,
    OwnerPolicy,
    safe_load_config,
)
from rqm.exceptions import ConfigLoadError, ConfigValidationError

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem
    from pytest_mock import MockerFixture


@pytest.fixture
def user_config_path(fs: "FakeFilesystem", mocker: "MockerFixture") -> Path:
    path = Path("/home/user/.config/rqm/config.toml")
    _ = mocker.patch("rqm.config._discovery.get_user_config_path", return_value=path)
    fs.create_dir("/project/.rqm")
    return path


class TestConfigDefaults:
    def test_default_sections(self) -> None:
        config = Config()

        assert config.logging.level is LogLevel.INFO
        assert config.validation.owner_policy is OwnerPolicy.ERROR
        assert config.validation.dangling_policy is DanglingPolicy.WARNING
        assert config.validation.strict_schema is False
        assert config.validation.max_depth is None


class TestConfigFromDict:
    def test_overrides_defaults(self) -> None:
        config = Config.from_dict(
            {"validation": {"owner_policy": "warning", "max_depth": 2}}
        )

        assert config.validation.owner_policy is OwnerPolicy.WARNING
        assert config.validation.max_depth == 2
        assert config.logging.level is LogLevel.INFO

    def test_rejects_unknown_policy(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"validation": {"owner_policy": "loud"}})

        assert exc_info.value.key == "validation.owner_policy"
        assert exc_info.value.value == "loud"

    def test_rejects_negative_max_depth(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"validation": {"max_depth": -1}})

        assert exc_info.value.key == "validation.max_depth"
        assert exc_info.value.expected == ">= 0"


class TestConfigFromFile:
    def test_loads_valid_toml_file(self, fs: "FakeFilesystem") -> None:
        path = Path("/test/rqm.toml")
        fs.create_file(
            path,
            contents='[validation]\ndangling_policy = "error"\n[logging]\nlevel = "debug"\n',
        )

        config = Config.from_file(path)

        assert config.validation.dangling_policy is DanglingPolicy.ERROR
        assert config.logging.level is LogLevel.DEBUG
        assert [s.name for s in config.sources] == [ConfigSourceName.PROJECT]

    def test_raises_config_load_error_for_invalid_toml(
        self, fs: "FakeFilesystem"
    ) -> None:
        path = Path("/test/invalid.toml")
        fs.create_file(path, contents="[section\nkey = 1\n")

        with pytest.raises(ConfigLoadError):
            _ = Config.from_file(path)

    def test_validation_error_names_the_file(self, fs: "FakeFilesystem") -> None:
        path = Path("/test/invalid.toml")
        fs.create_file(path, contents='[logging]\nlevel = "loud"\n')

        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_file(path)

        assert exc_info.value.source == str(path)


class TestConfigLoad:
    def test_precedence_order(
        self,
        fs: "FakeFilesystem",
        user_config_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        fs.create_file(
            user_config_path,
            contents='[validation]\nowner_policy = "ignore"\nstrict_schema = true\n',
        )
        fs.create_file(
            "/project/.rqm/rqm.toml",
            contents='[validation]\nowner_policy = "warning"\n[logging]\nlevel = "error"\n',
        )
        monkeypatch.setenv("RQM_LOGGING__LEVEL", "warning")

        config = Config.load(
            project_root=Path("/project"),
            cli_overrides={"logging": {"level": "debug"}},
        )

        assert config.validation.strict_schema is True
        assert config.validation.owner_policy is OwnerPolicy.WARNING
        assert config.logging.level is LogLevel.DEBUG

    def test_environment_overrides_files(
        self,
        fs: "FakeFilesystem",
        user_config_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        fs.create_file(
            "/project/.rqm/rqm.toml", contents='[validation]\nmax_depth = 1\n'
        )
        monkeypatch.setenv("RQM_VALIDATION__MAX_DEPTH", "5")

        config = Config.load(project_root=Path("/project"))

        assert config.validation.max_depth == 5

    def test_missing_files_use_defaults(self, user_config_path: Path) -> None:
        config = Config.load(project_root=Path("/project"), include_env=False)

        assert config.validation.owner_policy is OwnerPolicy.ERROR
        assert [s.name for s in config.sources] == [
            ConfigSourceName.PROJECT,
            ConfigSourceName.USER,
            ConfigSourceName.DEFAULT,
        ]


class TestConfigAccess:
    def test_get_by_dotted_key(self) -> None:
        config = Config.from_dict({"validation": {"owner_policy": "warning"}})

        assert config.get("validation.owner_policy") == "warning"
        assert config.get("validation.missing") is None
        assert config.get("nonexistent", "fallback") == "fallback"

    def test_to_dict_without_defaults(self) -> None:
        config = Config.from_dict({"validation": {"strict_schema": True}})

        assert config.to_dict(include_defaults=False) == {
            "validation": {"strict_schema": True}
        }

    def test_to_toml_only_contains_overrides(self) -> None:
        config = Config.from_dict({"validation": {"owner_policy": "warning"}})

        text = config.to_toml()

        assert 'owner_policy = "warning"' in text
        assert "[logging]" not in text

    def test_to_dict_returns_a_copy(self) -> None:
        config = Config()

        data = config.to_dict()
        data["validation"]["owner_policy"] = "ignore"

        assert config.get("validation.owner_policy") == "error"


class TestSafeLoadConfig:
    def test_returns_loaded_config(
        self, fs: "FakeFilesystem", user_config_path: Path
    ) -> None:
        fs.create_file(
            "/project/.rqm/rqm.toml", contents='[validation]\nstrict_schema = true\n'
        )

        config, error = safe_load_config(project_root=Path("/project"))

        assert error is None
        assert config.validation.strict_schema is True

    def test_falls_back_to_defaults_on_error(
        self,
        fs: "FakeFilesystem",
        user_config_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        fs.create_file("/project/.rqm/rqm.toml", contents="[broken\n")

        config, error = safe_load_config(project_root=Path("/project"))

        assert error is not None
        assert config.validation.owner_policy is OwnerPolicy.ERROR
        assert "Warning: Failed to load config" in capsys.readouterr().err

    def test_strict_mode_exits(
        self,
        fs: "FakeFilesystem",
        user_config_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        fs.create_file("/project/.rqm/rqm.toml", contents="[broken\n")
        monkeypatch.setenv("RQM_STRICT_CONFIG", "1")

        with pytest.raises(SystemExit) as exc_info:
            _ = safe_load_config(project_root=Path("/project"))

        assert exc_info.value.code == 2

    def test_missing_explicit_config_exits(self, fs: "FakeFilesystem") -> None:
        with pytest.raises(SystemExit) as exc_info:
            _ = safe_load_config(config_path=Path("/nowhere/rqm.toml"))

        assert exc_info.value.code == 2

    def test_explicit_config_is_used(self, fs: "FakeFilesystem") -> None:
        fs.create_file("/custom.toml", contents='[validation]\nowner_policy = "ignore"\n')

        config, error = safe_load_config(config_path=Path("/custom.toml"))

        assert error is None
        assert config.validation.owner_policy is OwnerPolicy.IGNORE
