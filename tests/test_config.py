import dataclasses
import textwrap

import pytest

from rss_author_filter.config import (
    AppConfig,
    load_app_config,
    parse_env_config,
    split_patterns,
)


def test_load_app_config_defaults():
    config = load_app_config({})

    assert config == AppConfig()
    assert config.feed_url == "https://example.com/feed.xml"
    assert config.whitelist == ()
    assert config.blacklist == ()
    assert config.timeout == 10.0


def test_load_app_config_reads_environment():
    config = load_app_config(
        {
            "RSS_FEED_URL": "http://instapundit.com/feed",
            "AUTHOR_WHITELIST": "Glenn Reynolds,Sarah Hoyt",
            "AUTHOR_BLACKLIST": "Ed",
            "FETCH_TIMEOUT": "2.5",
            "LOG_LEVEL": "DEBUG",
        }
    )

    assert config.feed_url == "http://instapundit.com/feed"
    assert config.whitelist == ("Glenn Reynolds", "Sarah Hoyt")
    assert config.blacklist == ("Ed",)
    assert config.timeout == 2.5
    assert config.log_level == "DEBUG"


def test_load_app_config_uses_process_environment(monkeypatch):
    monkeypatch.setenv("AUTHOR_BLACKLIST", "Reynolds")

    assert load_app_config().blacklist == ("Reynolds",)


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_load_app_config_rejects_bad_timeout(value):
    with pytest.raises(ValueError):
        load_app_config({"FETCH_TIMEOUT": value})


def test_app_config_is_immutable():
    config = AppConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.feed_url = "https://other.example.com"


def test_split_patterns_trims_and_drops_blanks():
    assert split_patterns("Glenn Reynolds, Ed ,,") == ("Glenn Reynolds", "Ed")
    assert split_patterns("") == ()
    assert split_patterns(None) == ()


def test_parse_env_config_reads_variables(tmp_path):
    env_xml = tmp_path / "env.xml"
    env_xml.write_text(
        textwrap.dedent(
            """\
            <environment>
                <variable name="RSS_FEED_URL"> http://instapundit.com/feed </variable>
                <variable name="AUTHOR_BLACKLIST">Ed Morrissey</variable>
                <variable name="EMPTY"></variable>
            </environment>
            """
        ),
        encoding="utf-8",
    )

    assert parse_env_config(str(env_xml)) == {
        "RSS_FEED_URL": "http://instapundit.com/feed",
        "AUTHOR_BLACKLIST": "Ed Morrissey",
    }


def test_parse_env_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_env_config(str(tmp_path / "missing.xml"))


def test_parse_env_config_invalid_xml_raises(tmp_path):
    env_xml = tmp_path / "env.xml"
    env_xml.write_text("<environment>", encoding="utf-8")

    with pytest.raises(ValueError):
        parse_env_config(str(env_xml))
