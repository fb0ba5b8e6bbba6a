# =============================================================================
# Configuration Tests
# =============================================================================

import pytest

from bayespam.config import (
    ClassifierConfig,
    Config,
    ConfigError,
    ModelConfig,
    TokenizerConfig,
    get_xdg_config_home,
    get_xdg_data_home,
)


def test_xdg_paths_follow_environment(isolated_xdg):
    assert get_xdg_config_home() == isolated_xdg / "config" / "bayespam"
    assert get_xdg_data_home() == isolated_xdg / "data" / "bayespam"
    assert Config.config_file_path() == isolated_xdg / "config" / "bayespam" / "config.toml"
    assert Config.model_path() == isolated_xdg / "data" / "bayespam" / "model.json"


def test_xdg_paths_default_to_home(monkeypatch, temp_dir):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.setenv("HOME", str(temp_dir))

    assert get_xdg_config_home() == temp_dir / ".config" / "bayespam"
    assert get_xdg_data_home() == temp_dir / ".local" / "share" / "bayespam"


def test_missing_file_gives_defaults(isolated_xdg):
    config = Config.load()

    assert config.classifier == ClassifierConfig()
    assert config.classifier.threshold == 0.8
    assert config.classifier.neutral_score == 0.4
    assert config.classifier.max_interesting_tokens == 15
    assert config.tokenizer.min_token_length == 2
    assert config.model.path == ""


def test_save_and_load(isolated_xdg):
    config = Config(
        classifier=ClassifierConfig(threshold=0.9, max_interesting_tokens=20),
        tokenizer=TokenizerConfig(min_token_length=3),
        model=ModelConfig(path="/srv/models/spam.json"),
    )
    config.save()

    assert Config.config_file_path().exists()
    assert Config.load() == config


def test_partial_file_keeps_other_defaults(temp_dir):
    path = temp_dir / "config.toml"
    path.write_text("[classifier]\nthreshold = 0.95\n")

    config = Config.load(path)
    assert config.classifier.threshold == 0.95
    assert config.classifier.min_probability == 0.01
    assert config.tokenizer.min_token_length == 2


def test_integer_threshold_is_accepted(temp_dir):
    path = temp_dir / "config.toml"
    path.write_text("[classifier]\nthreshold = 1\n")

    assert Config.load(path).classifier.threshold == 1.0


def test_invalid_toml(temp_dir):
    path = temp_dir / "config.toml"
    path.write_text("[classifier\nthreshold = ")

    with pytest.raises(ConfigError):
        Config.load(path)


@pytest.mark.parametrize(
    "body",
    [
        "[classifier]\nthreshold = 1.5\n",
        "[classifier]\nthreshold = 'high'\n",
        "[classifier]\nneutral_score = 0.0\n",
        "[classifier]\nmin_probability = 0.6\nmax_probability = 0.4\n",
        "[classifier]\nmax_probability = 1.0\n",
        "[classifier]\nmax_interesting_tokens = 0\n",
        "[tokenizer]\nmin_token_length = 0\n",
        "[tokenizer]\nmin_token_length = inf\n",
        "[tokenizer]\nmin_token_length = 2.5\n",
        "[classifier]\nmax_interesting_tokens = inf\n",
        "[classifier]\nmax_interesting_tokens = 15.5\n",
        "[classifier]\nmax_interesting_tokens = true\n",
        "[classifier]\nthreshold = true\n",
        "[classifier]\nthreshold = nan\n",
        "[model]\npath = 3\n",
        "model = 'x'\n",
        "classifier = 3\n",
    ],
)
def test_invalid_values(temp_dir, body):
    path = temp_dir / "config.toml"
    path.write_text(body)

    with pytest.raises(ConfigError):
        Config.load(path)


def test_validate_accepts_defaults():
    ClassifierConfig().validate()
