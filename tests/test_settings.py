from pathlib import Path

import pytest

from project_puller import settings as settings_module


def test_flatten_config_maps_sections() -> None:
    data = settings_module._flatten_config(
        {
            "defaults": {"output_dir": "projects", "username": " ", "use_ssh": True},
            "github": {"api_root": "https://ghe.example.com/api/v3/", "token": ""},
            "http": {"request_timeout": "12"},
            "git": {"executable": "/usr/bin/git"},
        }
    )

    assert data == {
        "output_dir": "projects",
        "username": None,
        "use_ssh": True,
        "github_api_root": "https://ghe.example.com/api/v3",
        "github_token": None,
        "request_timeout": 12,
        "git_executable": "/usr/bin/git",
    }


def test_load_settings_reads_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "puller.toml"
    config.write_text('[defaults]\nusername = "alice"\nquiet = true\n')
    monkeypatch.setenv("PULLER_CONFIG_PATH", str(config))

    loaded = settings_module.load_settings()

    assert loaded.username == "alice"
    assert loaded.quiet is True
    assert loaded.output_dir is None


def test_load_settings_without_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PULLER_CONFIG_PATH", raising=False)
    monkeypatch.setenv("PULLER_USE_SSH", "true")

    loaded = settings_module.load_settings()

    assert loaded.use_ssh is True
    assert loaded.github_manifest_path == "security-insights.yml"


def test_environment_overrides_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "puller.toml"
    config.write_text('[defaults]\nusername = "alice"\nuse_ssh = true\n\n[http]\nrequest_timeout = 12\n')
    monkeypatch.setenv("PULLER_CONFIG_PATH", str(config))
    monkeypatch.setenv("PULLER_USERNAME", "bob")
    monkeypatch.setenv("PULLER_USE_SSH", "false")

    loaded = settings_module.load_settings()

    assert loaded.username == "bob"
    assert loaded.use_ssh is False
    assert loaded.request_timeout == 12
