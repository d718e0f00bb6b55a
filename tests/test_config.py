from pathlib import Path

import pytest
from pydantic import ValidationError

from edge_session_harness.config import SessionConfig, load_config


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "EDGE_HARNESS_SESSION__HEADLESS=true",
                "EDGE_HARNESS_SESSION__ACCEPT_LANGUAGES=de",
                "EDGE_HARNESS_GRID__URL=http://grid.local:4444/wd/hub",
                "EDGE_HARNESS_GRID__PROBE=false",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.session.headless is True
    assert config.session.accept_languages == "de"
    assert config.grid.url == "http://grid.local:4444/wd/hub"
    assert config.grid.probe is False
    assert config.exclude_tags == ["legacy"]


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "EDGE_HARNESS_SESSION__HEADLESS=true",
                "EDGE_HARNESS_SESSION__PAGE_LOAD_TIMEOUT=12",
            ]
        )
    )

    config_path = tmp_path / "harness.yaml"
    config_path.write_text(
        "\n".join(
            [
                "session:",
                "  accept_languages: nl",
                "  arguments: ['--inprivate']",
                "pages:",
                "  example_url: http://localhost:8000/",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, session={"accept_languages": "de"})

    assert config.session.accept_languages == "de"
    assert config.session.arguments == ["--inprivate"]
    assert config.session.headless is True
    assert config.session.page_load_timeout == 12
    assert config.pages.example_url == "http://localhost:8000/"
    assert config.pages.example_title == "Example Domain"


def test_session_config_builders_do_not_share_state() -> None:
    first = SessionConfig()
    second = first.model_copy(deep=True)

    first.add_argument("headless").add_preference("download.prompt_for_download", False)

    assert first.arguments == ["headless"]
    assert first.preferences == {"download.prompt_for_download": False}
    assert second.arguments == []
    assert second.preferences == {}


def test_accept_languages_feeds_profile_preference() -> None:
    config = SessionConfig(accept_languages=" de ", preferences={"intl.accept_languages": "en"})

    assert config.accept_languages == "de"
    assert config.effective_preferences() == {"intl.accept_languages": "de"}
    assert SessionConfig(accept_languages="  ").effective_preferences() == {}


def test_timeouts_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        SessionConfig(page_load_timeout=0)


def test_load_config_rejects_unknown_top_level_keys(tmp_path: Path) -> None:
    config_path = tmp_path / "harness.yaml"
    config_path.write_text("sesion:\n  headless: true\ngrid:\n  probe: false\n")

    with pytest.raises(ValueError, match="unknown configuration keys: sesion"):
        load_config(config_path)


def test_load_config_requires_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / "harness.yaml"
    config_path.write_text("- headless\n")

    with pytest.raises(ValueError, match="expected a mapping"):
        load_config(config_path)


def test_overrides_merge_into_yaml_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "harness.yaml"
    config_path.write_text("grid:\n  url: http://grid:4444/wd/hub\n  probe_timeout: 2\n")
    overrides = {"grid": {"probe": False}}

    config = load_config(config_path, **overrides)

    assert config.grid.url == "http://grid:4444/wd/hub"
    assert config.grid.probe_timeout == 2
    assert config.grid.probe is False
    assert overrides == {"grid": {"probe": False}}
