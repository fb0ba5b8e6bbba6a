# =============================================================================
# bayespam: A Simple Bayesian Spam Classifier
# =============================================================================
#
# Messages are cut into words (tokens), which are compared against a corpus
# of known spam and ham to see how often each token shows up in either
# category. A combined-probability formula turns those frequencies into a
# spam score; at 0.8 or above (by default) the message is spam.
#
# Two ways to use it:
#   - bayespam.score(text) / bayespam.identify(text) with the bundled
#     pre-trained model
#   - SpamClassifier() to train, save and load your own model
#
# =============================================================================

__version__ = "0.2.0"
__app_name__ = "bayespam"

from bayespam.classifier import (
    ClassifierStats,
    DeserializationError,
    SpamClassifier,
    TokenCounts,
)
from bayespam.config import ClassifierConfig, Config, ConfigError, TokenizerConfig
from bayespam.default import default_classifier, identify, score
from bayespam.tokenizer import Tokenizer, tokenize

__all__ = [
    "ClassifierConfig",
    "ClassifierStats",
    "Config",
    "ConfigError",
    "DeserializationError",
    "SpamClassifier",
    "TokenCounts",
    "Tokenizer",
    "TokenizerConfig",
    "__version__",
    "default_classifier",
    "identify",
    "score",
    "tokenize",
]
