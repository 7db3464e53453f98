from pathlib import Path
import textwrap

import pytest

from object_listeners import SettingsError
from object_listeners.settings import Settings, get_settings, set_settings


def test_defaults_without_sources(tmp_path: Path) -> None:
    s = Settings.from_sources(env={}, file_path=tmp_path / "missing.yaml")
    assert s.propagate_errors is True
    assert s.warn_on_unhandled is False
    assert s.log_level == "WARNING"


def test_env_overrides() -> None:
    env = {
        "OL_PROPAGATE_ERRORS": "off",
        "OL_WARN_ON_UNHANDLED": "yes",
        "OL_LOG_LEVEL": "debug",
    }
    s = Settings.from_sources(env=env)
    assert s.propagate_errors is False
    assert s.warn_on_unhandled is True
    assert s.log_level == "DEBUG"


def test_invalid_env_ignored_with_error(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("ERROR"):
        s = Settings.from_sources(env={"OL_PROPAGATE_ERRORS": "maybe", "OL_LOG_LEVEL": "loud"})
    assert s.propagate_errors is True
    assert s.log_level == "WARNING"
    assert sum("Invalid env" in rec.message for rec in caplog.records) == 2


def test_file_overrides_and_env_wins(tmp_path: Path) -> None:
    fp = tmp_path / "settings.yaml"
    fp.write_text(
        textwrap.dedent(
            """
            propagate_errors: false
            warn_on_unhandled: true
            log_level: info
            """
        ),
        encoding="utf-8",
    )

    from_file = Settings.from_sources(env={}, file_path=fp)
    assert from_file.propagate_errors is False
    assert from_file.warn_on_unhandled is True
    assert from_file.log_level == "INFO"

    layered = Settings.from_sources(env={"OL_WARN_ON_UNHANDLED": "0"}, file_path=fp)
    assert layered.warn_on_unhandled is False
    assert layered.propagate_errors is False


def test_settings_file_discovered_from_env(tmp_path: Path) -> None:
    fp = tmp_path / "custom.yaml"
    fp.write_text("warn_on_unhandled: true\n", encoding="utf-8")
    s = Settings.from_sources(env={"OL_SETTINGS_FILE": str(fp)})
    assert s.warn_on_unhandled is True


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    fp = tmp_path / "settings.yaml"
    fp.write_text("", encoding="utf-8")
    assert Settings.from_sources(env={}, file_path=fp) == Settings()


@pytest.mark.parametrize(
    "content",
    [
        "unknown_key: 1\n",
        "log_level: chatty\n",
        "propagate_errors: [1, 2]\n",
        "- just\n- a list\n",
        "propagate_errors: [unclosed\n",
    ],
)
def test_bad_file_raises(tmp_path: Path, content: str) -> None:
    fp = tmp_path / "settings.yaml"
    fp.write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError):
        Settings.from_sources(env={}, file_path=fp)


def test_process_settings_roundtrip() -> None:
    custom = Settings(propagate_errors=False)
    set_settings(custom)
    assert get_settings() is custom
