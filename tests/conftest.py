"""Shared fixtures for syncret tests."""
import pytest

from syncret.secrets.domains import config_loader
from syncret.secrets.domains.models import LoaderConfig


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Isolate tests from the caller's SYNCRET_* environment and config file."""
    for env_var in list(config_loader.ENV_VARS) + [config_loader.CONFIG_ENV_VAR, "GCP_PROJECT"]:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(config_loader, "DEFAULT_CONFIG_PATH", tmp_path / "no-such-config.yml")


@pytest.fixture
def secrets_dir(tmp_path):
    """Directory to hold secret files for a test."""
    root = tmp_path / "secrets-root"
    root.mkdir()
    return root


@pytest.fixture
def write_files(secrets_dir):
    """Fixture returning a helper that writes {relative path: content} under secrets_dir."""
    def _write(files):
        for relative, content in files.items():
            path = secrets_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return secrets_dir
    return _write


@pytest.fixture
def loader_config(secrets_dir):
    """Default loader config rooted at secrets_dir."""
    return LoaderConfig(root_dir=str(secrets_dir))
