import pytest

from extool.config import Settings, reset_settings


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without child processes")
    config.addinivalue_line(
        "markers", "integration: tests that spawn real child processes"
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """
    Keep the user's config.ini and EXTOOL_* variables out of the tests.
    """
    for name in (
        "EXTOOL_LAST_RESORT_TIMEOUT",
        "EXTOOL_DEFAULT_TIMEOUT",
        "EXTOOL_ENCODING",
    ):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setenv("EXTOOL_CONFIG_PATH", str(tmp_path / "missing-config.ini"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(last_resort_timeout=5.0, default_timeout=30.0)
