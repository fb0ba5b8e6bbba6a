# =============================================================================
# Message Tokenizer
# =============================================================================
# Converts raw message text into tokens (features) for the spam classifier.
#
# Tokenization is deliberately plain:
#   - Split on whitespace
#   - Lowercase every fragment
#   - Strip punctuation from both ends ("Hello," -> "hello", "-30%" -> "30")
#   - Drop fragments that end up shorter than two characters
#
# Inner punctuation survives ("don't", "e-mail"), so a token is always a
# recognisable word. Duplicates are kept; the classifier de-duplicates per
# message because it counts messages, not occurrences.
# =============================================================================

import re

from bayespam.config import TokenizerConfig


class Tokenizer:
    """
    Converts message text into tokens for spam classification.

    Usage:
        >>> tokenizer = Tokenizer()
        >>> tokenizer.tokenize("Buy NOW, buy cheap!")
        ['buy', 'now', 'buy', 'cheap']
    """

    # Anything that isn't a letter or digit, at either end of a fragment
    BOUNDARY_PATTERN = re.compile(r'^[\W_]+|[\W_]+$')

    def __init__(self, config: TokenizerConfig | None = None) -> None:
        """
        Initialize the tokenizer.

        Args:
            config: Tokenizer configuration.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        self.config = config or TokenizerConfig()
        self.config.validate()

    def normalize(self, fragment: str) -> str:
        """Lowercase a fragment and strip non-alphanumerics from both ends."""
        return self.BOUNDARY_PATTERN.sub('', fragment.lower())

    def tokenize(self, text: str) -> list[str]:
        """
        Tokenize message text.

        Args:
            text: Raw message text.

        Returns:
            List of tokens in message order, duplicates included.
        """
        tokens = []

        for fragment in text.split():
            word = self.normalize(fragment)
            if len(word) < self.config.min_token_length:
                continue
            tokens.append(word)

        return tokens

    def unique_tokens(self, text: str) -> list[str]:
        """Tokens of the message, each once, in first-seen order."""
        return list(dict.fromkeys(self.tokenize(text)))


def tokenize(text: str) -> list[str]:
    """Tokenize text with the default configuration."""
    return Tokenizer().tokenize(text)
