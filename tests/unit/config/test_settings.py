import pytest

from modelcurator._internal.configuration.settings import load_settings, resolve_env_vars
from modelcurator._internal.exceptions import ConfigError
from modelcurator.curation.types import Tunables


def test_defaults_match_engine_tunables(clean_env):
    settings = load_settings()

    assert settings.tunables() == Tunables()
    assert settings.sources().aa_models_url == "https://artificialanalysis.ai/api/v2/data/llms/models"


def test_environment_overrides_defaults(clean_env, monkeypatch):
    monkeypatch.setenv("MIN_FREE_AAII", "55")
    monkeypatch.setenv("CHEAP_OUT_MAX_USD_PER_1M", "4.5")
    monkeypatch.setenv("CURATOR_PRIORITY_PROVIDERS", "OpenAI, google")

    tunables = load_settings().tunables()

    assert tunables.min_free_quality == 55.0
    assert tunables.cheap_out_max == 4.5
    assert tunables.priority_providers == ("openai", "google")


def test_dotenv_file_is_read(clean_env):
    (clean_env / ".env").write_text("MIN_CONTEXT_LENGTH=16384\n", encoding="utf-8")

    assert load_settings().tunables().min_context_length == 16384


def test_yaml_file_overrides_environment_and_resolves_placeholders(clean_env, monkeypatch):
    monkeypatch.setenv("MIN_PAID_AAII", "70")
    monkeypatch.setenv("CAP", "2.5")
    config = clean_env / "curator.yaml"
    config.write_text(
        "curator:\n"
        "  min_paid_aaii: 62\n"
        "  cheap_in_max_usd_per_1m: ${CAP}\n"
        "  curator_priority_providers: [openai, x-ai]\n"
        "unrelated:\n"
        "  key: value\n",
        encoding="utf-8",
    )

    tunables = load_settings(config).tunables()

    assert tunables.min_paid_quality == 62.0
    assert tunables.cheap_in_max == 2.5
    assert tunables.priority_providers == ("openai", "x-ai")


def test_yaml_without_curator_section_uses_defaults(clean_env):
    config = clean_env / "curator.yaml"
    config.write_text("other: {}\n", encoding="utf-8")

    assert load_settings(config).tunables() == Tunables()


@pytest.mark.parametrize(
    "content",
    [
        "curator:\n  fuzzy_match_threshold: 1.5\n",
        "curator:\n  min_context_length: lots\n",
        "curator: [1, 2]\n",
        "- just\n- a list\n",
        "curator: {unclosed\n",
    ],
)
def test_invalid_config_raises_config_error(clean_env, content):
    config = clean_env / "curator.yaml"
    config.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(config)


def test_invalid_environment_value_raises_config_error(clean_env, monkeypatch):
    monkeypatch.setenv("CURATOR_FREE_TARGET", "0")

    with pytest.raises(ConfigError):
        load_settings()


def test_missing_config_file_raises_config_error(clean_env):
    with pytest.raises(ConfigError):
        load_settings(clean_env / "absent.yaml")


def test_resolve_env_vars_walks_nested_structures(monkeypatch):
    monkeypatch.setenv("CURATOR_TEST_URL", "https://example.test")
    monkeypatch.delenv("CURATOR_TEST_UNSET", raising=False)

    data = {"a": ["${CURATOR_TEST_URL}", 3], "b": {"c": "${CURATOR_TEST_UNSET}", "d": "plain"}}

    assert resolve_env_vars(data=data) == {
        "a": ["https://example.test", 3],
        "b": {"c": "", "d": "plain"},
    }
