# =============================================================================
# Default Model
# =============================================================================
# Stateless scoring against a pre-trained model.
#
# The model is loaded once per process, on first use, and never trained
# afterwards, so any number of threads can score against it. Which file is
# loaded depends on the user's config:
#   - [model] path = "..."  -> that file
#   - otherwise             -> the model bundled with the package
# =============================================================================

import logging
import threading
from importlib import resources
from pathlib import Path

from bayespam.classifier import SpamClassifier
from bayespam.config import Config
from bayespam.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

# Bundled model, relative to the package
BUNDLED_MODEL = "data/model.json"

_default: SpamClassifier | None = None
_lock = threading.Lock()


def _load_default() -> SpamClassifier:
    """Resolve and load the default model according to the config."""
    config = Config.load()
    tokenizer = Tokenizer(config.tokenizer)

    if config.model.path:
        return SpamClassifier.load_path(
            Path(config.model.path).expanduser(),
            tokenizer=tokenizer,
            config=config.classifier,
        )

    model = resources.files("bayespam").joinpath(BUNDLED_MODEL)
    with model.open("r", encoding="utf-8") as f:
        classifier = SpamClassifier.load(f, tokenizer=tokenizer, config=config.classifier)

    stats = classifier.stats
    logger.info(
        f"Loaded bundled spam model: {stats.token_count} tokens, "
        f"{stats.spam_count} spam, {stats.ham_count} ham"
    )
    return classifier


def default_classifier() -> SpamClassifier:
    """
    Get the process-wide default classifier, loading it on first call.

    Treat the result as read-only; training it would change what every
    other caller sees.

    Raises:
        OSError: If the model file can't be read.
        DeserializationError: If the model file is malformed.
        ConfigError: If the config file is invalid.
    """
    global _default

    with _lock:
        if _default is None:
            _default = _load_default()
        return _default


def score(text: str) -> float:
    """Spam probability of a message under the default model."""
    return default_classifier().score(text)


def identify(text: str) -> bool:
    """True if the default model considers the message spam."""
    return default_classifier().identify(text)
