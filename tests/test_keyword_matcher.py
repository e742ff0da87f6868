"""
Tests for trigger phrase matching
"""
import pytest
from autoreply.config import DEFAULT_KEYWORDS
from autoreply.keyword_matcher import KeywordMatcher


@pytest.fixture
def matcher():
    """Matcher with the default keyword list"""
    return KeywordMatcher(DEFAULT_KEYWORDS)


class TestKeywordMatcher:
    """Test KeywordMatcher"""

    def test_matches_keyword(self, matcher):
        assert matcher.matches("please respond soon") is True

    def test_no_keyword(self, matcher):
        assert matcher.matches("hello world") is False

    def test_case_insensitive_body(self, matcher):
        """Body case should not matter"""
        assert matcher.matches("We are AWAITING YOUR REPLY.") is True

    def test_case_insensitive_keywords(self):
        """Keyword case should not matter either"""
        matcher = KeywordMatcher(["Kindly Reply"])
        assert matcher.matches("could you kindly reply today") is True

    def test_substring_inside_longer_text(self, matcher):
        body = "Hi,\n\nLooking for your response. Thanks,\nBob"
        assert matcher.matches(body) is True

    def test_empty_body(self, matcher):
        assert matcher.matches("") is False

    def test_none_body(self, matcher):
        assert matcher.matches(None) is False

    def test_blank_keywords_ignored(self):
        """A blank keyword would otherwise match every body"""
        matcher = KeywordMatcher(["", "   ", "urgent"])
        assert matcher.keywords == ("urgent",)
        assert matcher.matches("nothing to see") is False

    def test_trailing_punctuation_is_part_of_phrase(self):
        matcher = KeywordMatcher(["looking for your response."])
        assert matcher.matches("looking for your response") is False
        assert matcher.matches("Looking for your response.") is True

    def test_empty_keyword_set(self):
        assert KeywordMatcher([]).matches("please respond") is False
