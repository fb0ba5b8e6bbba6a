# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the bayespam test suite.
# =============================================================================

import pytest
import tempfile
from pathlib import Path

import bayespam.default
from bayespam import SpamClassifier


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_xdg(temp_dir, monkeypatch):
    """
    Point the XDG directories at a temp dir and forget any default model.

    Keeps the user's real config out of the tests.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(temp_dir / "data"))
    monkeypatch.setattr(bayespam.default, "_default", None)
    return temp_dir


@pytest.fixture
def sample_spam_text():
    """A typical spam message."""
    return "Lose up to 19% weight. Special promotion on our new weightloss."


@pytest.fixture
def sample_ham_text():
    """A typical ham message."""
    return "Hi Bob, can you send me your machine learning homework?"


@pytest.fixture
def trained_classifier():
    """A classifier trained on one spam and one ham message."""
    classifier = SpamClassifier()
    classifier.train_spam("Don't forget our special promotion: -30% on men shoes, only today!")
    classifier.train_ham("Hi Bob, don't forget our meeting today at 4pm.")
    return classifier


@pytest.fixture
def corpus_classifier():
    """A classifier trained on a handful of messages per category."""
    classifier = SpamClassifier()
    for text in [
        "WIN money now!!! Claim your prize today",
        "Cheap pills, free shipping, order now",
        "You have been selected to win a free cruise",
        "Earn money fast from home, click here",
    ]:
        classifier.train_spam(text)
    for text in [
        "Can we move the meeting to Thursday?",
        "Here are the notes from today's review",
        "Lunch tomorrow? The usual place at noon",
        "Please review the attached project report",
    ]:
        classifier.train_ham(text)
    return classifier
