# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating bayespam configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/bayespam/  (default: ~/.config/bayespam/)
#   - Data:    $XDG_DATA_HOME/bayespam/    (default: ~/.local/share/bayespam/)
#
# Files:
#   - config.toml: Classifier and tokenizer settings, default model location
#   - model.json: Suggested location for a user-trained model (in data directory)
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "bayespam"


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for bayespam.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/bayespam/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


def get_xdg_data_home() -> Path:
    """
    Returns the XDG data directory for bayespam.

    Respects $XDG_DATA_HOME if set, otherwise uses ~/.local/share/bayespam/
    This is where trained models live.
    """
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        base = Path(xdg_data)
    else:
        base = Path.home() / ".local" / "share"
    return base / APP_NAME


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class ClassifierConfig:
    """
    Configuration for spam scoring.

    Attributes:
        threshold: Score threshold for identifying spam (0.0-1.0).
                   Messages with score >= threshold are spam.
        neutral_score: Score of a message with no known tokens, and the
                       estimate for a known token with no usable counts.
        min_probability: Lower clamp for a single token's estimate.
        max_probability: Upper clamp for a single token's estimate.
        max_interesting_tokens: How many tokens (those farthest from 0.5)
                                take part in the combined score.
    """
    threshold: float = 0.8              # Scores >= this are spam
    neutral_score: float = 0.4          # Unseen text leans slightly to ham
    min_probability: float = 0.01
    max_probability: float = 0.99
    max_interesting_tokens: int = 15

    def validate(self) -> None:
        """
        Check that the values make sense together.

        Raises:
            ConfigError: If any value is out of range.
        """
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigError(f"classifier.threshold must be between 0 and 1, got {self.threshold}")

        # Estimates go through log(p) and log(1 - p), so 0 and 1 are out
        for name in ("neutral_score", "min_probability", "max_probability"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ConfigError(
                    f"classifier.{name} must be strictly between 0 and 1, got {value}"
                )

        if self.min_probability >= self.max_probability:
            raise ConfigError(
                f"classifier.min_probability ({self.min_probability}) must be lower "
                f"than classifier.max_probability ({self.max_probability})"
            )

        if self.max_interesting_tokens < 1:
            raise ConfigError(
                f"classifier.max_interesting_tokens must be positive, "
                f"got {self.max_interesting_tokens}"
            )


@dataclass
class TokenizerConfig:
    """
    Configuration for message tokenization.

    Attributes:
        min_token_length: Minimum length for a token to be included.
    """
    min_token_length: int = 2

    def validate(self) -> None:
        """
        Raises:
            ConfigError: If min_token_length isn't positive.
        """
        if self.min_token_length < 1:
            raise ConfigError(
                f"tokenizer.min_token_length must be positive, "
                f"got {self.min_token_length}"
            )


@dataclass
class ModelConfig:
    """
    Where the stateless API finds its model.

    Attributes:
        path: Path to a model file. Empty means the bundled pre-trained model.
    """
    path: str = ""


@dataclass
class Config:
    """
    Main configuration container for bayespam.

    Attributes:
        classifier: Scoring configuration.
        tokenizer: Tokenization configuration.
        model: Default model location.

    Usage:
        >>> config = Config.load()
        >>> config.classifier.threshold
        0.8
    """
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    model: ModelConfig = field(default_factory=ModelConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    @staticmethod
    def model_path() -> Path:
        """Returns the suggested path for a user-trained model."""
        return get_xdg_data_home() / "model.json"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from the config file.

        If the config file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Uses the XDG location if None.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            # No config file yet - return defaults
            return cls()

        # Load and parse the TOML file
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to the config file.

        Creates the config directory if it doesn't exist.

        Args:
            path: Config file to write. Uses the XDG location if None.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).

        Missing keys fall back to their defaults; the result is validated.
        """
        config = cls()

        try:
            # Classifier settings
            classifier = data.get("classifier", {})
            config.classifier = ClassifierConfig(
                threshold=_number(classifier, "classifier.threshold", 0.8),
                neutral_score=_number(classifier, "classifier.neutral_score", 0.4),
                min_probability=_number(classifier, "classifier.min_probability", 0.01),
                max_probability=_number(classifier, "classifier.max_probability", 0.99),
                max_interesting_tokens=_integer(
                    classifier, "classifier.max_interesting_tokens", 15
                ),
            )

            # Tokenizer settings
            tokenizer = data.get("tokenizer", {})
            config.tokenizer = TokenizerConfig(
                min_token_length=_integer(tokenizer, "tokenizer.min_token_length", 2),
            )

            # Model settings
            model = data.get("model", {})
            path = model.get("path", "")
        except AttributeError as e:
            raise ConfigError(f"Invalid config section: {e}") from e

        if not isinstance(path, str):
            raise ConfigError(f"model.path must be a string, got {path!r}")
        config.model = ModelConfig(path=path)

        config.classifier.validate()
        config.tokenizer.validate()

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        data: dict[str, Any] = {}

        data["classifier"] = {
            "threshold": self.classifier.threshold,
            "neutral_score": self.classifier.neutral_score,
            "min_probability": self.classifier.min_probability,
            "max_probability": self.classifier.max_probability,
            "max_interesting_tokens": self.classifier.max_interesting_tokens,
        }

        data["tokenizer"] = {
            "min_token_length": self.tokenizer.min_token_length,
        }

        data["model"] = {
            "path": self.model.path,
        }

        return data


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Value Parsing
# =============================================================================

def _number(section: dict[str, Any], key: str, default: float) -> float:
    """Read a float setting; TOML integers are accepted, bools are not."""
    value = section.get(key.rpartition(".")[2], default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    return float(value)


def _integer(section: dict[str, Any], key: str, default: int) -> int:
    """Read an integer setting; floats (including inf) and bools are rejected."""
    value = section.get(key.rpartition(".")[2], default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value
