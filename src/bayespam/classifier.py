# =============================================================================
# Bayesian Spam Classifier
# =============================================================================
# A small spam classifier in the style of Paul Graham's "A Plan for Spam".
#
# How it works:
#   1. During training, we count in how many spam and ham messages each
#      token appears (once per message, however often it repeats)
#   2. For scoring, every known token gets its own spam estimate:
#      p = spam_rate / (spam_rate + ham_rate), clamped to [0.01, 0.99]
#   3. The most interesting estimates (farthest from 0.5) are combined:
#      P(spam) = ∏ p / (∏ p + ∏ (1 - p))
#
# The products are computed as sums of logs so long messages can't
# underflow. A message with no known tokens scores a fixed 0.4.
# =============================================================================

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

from bayespam.config import ClassifierConfig
from bayespam.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


@dataclass
class ClassifierStats:
    """
    Statistics about the classifier.

    Attributes:
        spam_count: Number of spam messages trained on.
        ham_count: Number of ham (non-spam) messages trained on.
        token_count: Number of unique tokens in vocabulary.
    """
    spam_count: int = 0
    ham_count: int = 0
    token_count: int = 0


@dataclass
class TokenCounts:
    """
    Per-token message counts.

    Attributes:
        spam: Number of spam messages this token appeared in.
        ham: Number of ham messages this token appeared in.
    """
    spam: int = 0
    ham: int = 0


class SpamClassifier:
    """
    Bayesian spam classifier.

    Usage:
        >>> classifier = SpamClassifier()
        >>> classifier.train_spam("Win money now")
        >>> classifier.train_ham("Meet me for coffee")
        >>> classifier.score("win money")
        0.9998...
        >>> with open("model.json", "w") as f:
        ...     classifier.save(f, pretty=True)

    Not thread-safe: training mutates the counts that scoring reads, so
    share an instance across threads only behind a lock.

    Attributes:
        tokenizer: Tokenizer for extracting tokens from messages.
        config: Scoring configuration (threshold and estimate bounds).
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        config: ClassifierConfig | None = None,
    ) -> None:
        """
        Initialize an empty spam classifier.

        Args:
            tokenizer: Tokenizer instance. Creates default if None.
            config: Scoring configuration. Uses defaults if None.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        self.tokenizer = tokenizer or Tokenizer()
        self.config = config or ClassifierConfig()
        self.config.validate()

        # Training data
        self._spam_count = 0        # Number of spam messages trained
        self._ham_count = 0         # Number of ham messages trained
        self._tokens: dict[str, TokenCounts] = {}  # Token frequencies

    @property
    def stats(self) -> ClassifierStats:
        """Get classifier statistics."""
        return ClassifierStats(
            spam_count=self._spam_count,
            ham_count=self._ham_count,
            token_count=len(self._tokens),
        )

    @property
    def is_trained(self) -> bool:
        """Returns True if the classifier has seen both spam and ham."""
        return self._spam_count > 0 and self._ham_count > 0

    def token_counts(self, token: str) -> TokenCounts | None:
        """
        Look up the counts of a token.

        Returns a copy, or None if the token was never trained.
        """
        counts = self._tokens.get(token)
        if counts is None:
            return None
        return TokenCounts(spam=counts.spam, ham=counts.ham)

    @property
    def token_table(self) -> dict[str, TokenCounts]:
        """A copy of the whole token table."""
        return {
            token: TokenCounts(spam=counts.spam, ham=counts.ham)
            for token, counts in self._tokens.items()
        }

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def train(self, text: str, *, is_spam: bool) -> None:
        """
        Train the classifier on a message.

        Args:
            text: Message text to learn from.
            is_spam: True if message is spam, False if ham.
        """
        tokens = self.tokenizer.unique_tokens(text)

        # Update counts
        if is_spam:
            self._spam_count += 1
        else:
            self._ham_count += 1

        # Update token frequencies, each token once per message
        for token in tokens:
            if token not in self._tokens:
                self._tokens[token] = TokenCounts()

            if is_spam:
                self._tokens[token].spam += 1
            else:
                self._tokens[token].ham += 1

        logger.debug(
            f"Trained {'spam' if is_spam else 'ham'} message with {len(tokens)} tokens "
            f"({self._spam_count} spam, {self._ham_count} ham so far)"
        )

    def train_spam(self, text: str) -> None:
        """Train the classifier with a spam message."""
        self.train(text, is_spam=True)

    def train_ham(self, text: str) -> None:
        """Train the classifier with a ham (legitimate) message."""
        self.train(text, is_spam=False)

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def score(self, text: str) -> float:
        """
        Calculate the spam probability of a message.

        Args:
            text: Message text to score.

        Returns:
            Spam probability (0.0 = definitely ham, 1.0 = definitely spam).
            Returns the neutral score (0.4 by default) if no token of the
            message has been seen in training.
        """
        estimates = [
            self._token_probability(self._tokens[token])
            for token in self.tokenizer.unique_tokens(text)
            if token in self._tokens
        ]

        if not estimates:
            return self.config.neutral_score

        # Only the most decisive tokens take part; sorted() is stable, so
        # ties keep message order.
        if len(estimates) > self.config.max_interesting_tokens:
            estimates = sorted(estimates, key=lambda p: abs(p - 0.5), reverse=True)
            estimates = estimates[:self.config.max_interesting_tokens]

        probability = self._combine(estimates)
        logger.debug(f"Scored message from {len(estimates)} tokens: {probability:.4f}")
        return probability

    def identify(self, text: str) -> bool:
        """
        Decide whether a message is spam.

        Returns:
            True if score(text) >= the configured threshold.
        """
        return self.score(text) >= self.config.threshold

    def _token_probability(self, counts: TokenCounts) -> float:
        """
        Estimate the spam probability carried by a single token.

        Rates are relative to the number of messages trained per category,
        so an unbalanced corpus doesn't skew the estimate.
        """
        spam_rate = counts.spam / self._spam_count if self._spam_count else 0.0
        ham_rate = counts.ham / self._ham_count if self._ham_count else 0.0

        if spam_rate + ham_rate == 0:
            return self.config.neutral_score

        probability = spam_rate / (spam_rate + ham_rate)
        return min(max(probability, self.config.min_probability), self.config.max_probability)

    @staticmethod
    def _combine(estimates: list[float]) -> float:
        """
        Combine token estimates into one probability.

        P = ∏ p / (∏ p + ∏ (1 - p)), evaluated with log sums.
        """
        log_spam = sum(math.log(p) for p in estimates)
        log_ham = sum(math.log(1.0 - p) for p in estimates)

        # For numerical stability, subtract the max
        max_log = max(log_spam, log_ham)
        prob_spam = math.exp(log_spam - max_log)
        prob_ham = math.exp(log_ham - max_log)

        return prob_spam / (prob_spam + prob_ham)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """The model as a JSON-ready dictionary."""
        return {
            "token_table": {
                token: {"ham": counts.ham, "spam": counts.spam}
                for token, counts in self._tokens.items()
            },
            "totals": {"ham": self._ham_count, "spam": self._spam_count},
        }

    def save(self, writer: IO[str], pretty: bool = False) -> None:
        """
        Write the model as JSON.

        Args:
            writer: Text stream to write to.
            pretty: Indent the output instead of writing it compactly.

        Raises:
            OSError: If the writer can't accept the data.
        """
        if pretty:
            json.dump(self.to_dict(), writer, indent=2, sort_keys=True)
        else:
            json.dump(self.to_dict(), writer, separators=(",", ":"))

    def save_path(self, path: Path, pretty: bool = False) -> None:
        """
        Save the model to a file, creating parent directories.

        Args:
            path: File to write.
            pretty: Indent the output.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            self.save(f, pretty=pretty)

        logger.info(
            f"Saved spam model to {path}: {len(self._tokens)} tokens, "
            f"{self._spam_count} spam, {self._ham_count} ham"
        )

    @classmethod
    def load(
        cls,
        reader: IO[str],
        *,
        tokenizer: Tokenizer | None = None,
        config: ClassifierConfig | None = None,
    ) -> "SpamClassifier":
        """
        Build a classifier from a model written by save().

        Every token key must already be in normalized form (lowercase, no
        whitespace, letters or digits at both ends) and must have been seen
        in at least one message. Keys shorter than the tokenizer's minimum
        length are kept but never match a message.

        Args:
            reader: Text stream holding the JSON model.
            tokenizer: Tokenizer for the new classifier.
            config: Scoring configuration for the new classifier.

        Returns:
            The loaded classifier.

        Raises:
            DeserializationError: If the data isn't a valid model.
            OSError: If the reader fails.
        """
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors; so is
        # an integer too long to convert. Deep nesting hits the recursion limit.
        try:
            data = json.load(reader)
        except (ValueError, RecursionError) as e:
            raise DeserializationError(f"Model is not valid JSON: {e}") from e

        classifier = cls(tokenizer=tokenizer, config=config)
        tokens, spam_count, ham_count = _parse_model(data, classifier.tokenizer)

        classifier._tokens = tokens
        classifier._spam_count = spam_count
        classifier._ham_count = ham_count
        return classifier

    @classmethod
    def load_path(
        cls,
        path: Path,
        *,
        tokenizer: Tokenizer | None = None,
        config: ClassifierConfig | None = None,
    ) -> "SpamClassifier":
        """
        Load a classifier from a model file.

        Raises:
            DeserializationError: If the file isn't a valid model.
            OSError: If the file can't be read.
        """
        with open(path, encoding="utf-8") as f:
            classifier = cls.load(f, tokenizer=tokenizer, config=config)

        stats = classifier.stats
        logger.info(
            f"Loaded spam model from {path}: {stats.token_count} tokens, "
            f"{stats.spam_count} spam, {stats.ham_count} ham"
        )
        return classifier


# =============================================================================
# Model Validation
# =============================================================================

def _count(value: Any, where: str) -> int:
    """Accept a non-negative integer (bools are rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeserializationError(f"{where} must be an integer, got {value!r}")
    if value < 0:
        raise DeserializationError(f"{where} must not be negative, got {value}")
    return value


def _parse_model(data: Any, tokenizer: Tokenizer) -> tuple[dict[str, TokenCounts], int, int]:
    """
    Validate a decoded model and return (tokens, spam_count, ham_count).

    Totals are optional. Without them each total is the largest per-token
    count of its category, the fewest messages that explain the table.
    """
    if not isinstance(data, dict):
        raise DeserializationError("Model must be a JSON object")
    if "token_table" not in data:
        raise DeserializationError("Model has no 'token_table'")

    table = data["token_table"]
    if not isinstance(table, dict):
        raise DeserializationError("'token_table' must be an object")

    tokens: dict[str, TokenCounts] = {}
    for token, counts in table.items():
        # A key must be something the tokenizer could have produced
        if not token or token.split() != [token] or tokenizer.normalize(token) != token:
            raise DeserializationError(f"Token {token!r} is not normalized")
        if not isinstance(counts, dict):
            raise DeserializationError(f"Counts for {token!r} must be an object")
        try:
            tokens[token] = TokenCounts(
                spam=_count(counts["spam"], f"token_table[{token!r}].spam"),
                ham=_count(counts["ham"], f"token_table[{token!r}].ham"),
            )
        except KeyError as e:
            raise DeserializationError(f"Counts for {token!r} are missing {e}") from e
        if tokens[token].spam == 0 and tokens[token].ham == 0:
            raise DeserializationError(f"Token {token!r} was never seen in a message")

    max_spam = max((c.spam for c in tokens.values()), default=0)
    max_ham = max((c.ham for c in tokens.values()), default=0)

    totals = data.get("totals")
    if totals is None:
        return tokens, max_spam, max_ham
    if not isinstance(totals, dict):
        raise DeserializationError("'totals' must be an object")

    try:
        spam_count = _count(totals["spam"], "totals.spam")
        ham_count = _count(totals["ham"], "totals.ham")
    except KeyError as e:
        raise DeserializationError(f"'totals' is missing {e}") from e

    # A token can't appear in more messages than were trained
    if spam_count < max_spam or ham_count < max_ham:
        raise DeserializationError(
            f"Totals ({spam_count} spam, {ham_count} ham) are smaller than the "
            f"token counts they cover ({max_spam} spam, {max_ham} ham)"
        )

    return tokens, spam_count, ham_count


# =============================================================================
# Exceptions
# =============================================================================

class DeserializationError(ValueError):
    """Raised when a persisted model is malformed or violates the schema."""
    pass
