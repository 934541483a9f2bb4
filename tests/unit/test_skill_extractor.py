"""
Tests for talent_triage.core.matching.skill_extractor.
"""

import pytest

from talent_triage.core.matching import (
    ExactTokenSkillMatcher,
    SkillExtractor,
    SkillVocabulary,
)
from talent_triage.utils.constants import DEFAULT_SKILL_VOCABULARY_VERSION


@pytest.fixture
def vocabulary():
    return SkillVocabulary.load(DEFAULT_SKILL_VOCABULARY_VERSION)


@pytest.fixture
def extractor(vocabulary):
    return SkillExtractor(vocabulary)


# ── SkillVocabulary ──────────────────────────────────────────────────────────


class TestSkillVocabulary:
    def test_default_vocabulary_size(self, vocabulary):
        assert len(vocabulary) == 44
        assert "node.js" in vocabulary
        assert "power bi" in vocabulary

    def test_unknown_version_raises(self):
        with pytest.raises(ValueError, match="Unknown skill vocabulary version"):
            SkillVocabulary.load("1999.1")

    def test_max_phrase_length(self, vocabulary):
        assert vocabulary.max_phrase_length == 2

    def test_is_immutable(self, vocabulary):
        with pytest.raises(AttributeError):
            vocabulary.version = "other"


# ── SkillExtractor ───────────────────────────────────────────────────────────


class TestExtract:
    def test_exact_tokens(self, extractor):
        assert extractor.extract("Python, Docker and Kubernetes") == [
            "python", "docker", "kubernetes",
        ]

    def test_result_follows_vocabulary_order(self, extractor):
        assert extractor.extract("kubernetes docker python") == [
            "python", "docker", "kubernetes",
        ]

    def test_no_duplicates(self, extractor):
        assert extractor.extract("python python PYTHON") == ["python"]

    def test_dotless_spelling_matches_dotted_skill(self, extractor):
        assert extractor.extract("Built APIs in nodejs and nextjs") == ["next.js", "node.js"]

    def test_dotted_spelling(self, extractor):
        assert extractor.extract("Node.js services") == ["node.js"]

    def test_node_and_node_js_are_distinct(self, extractor):
        assert extractor.extract("node") == ["node"]

    def test_sentence_final_period_ignored(self, extractor):
        assert extractor.extract("I know AWS.") == ["aws"]

    def test_special_characters(self, extractor):
        assert extractor.extract("C# and CI/CD pipelines") == ["c#", "ci/cd"]

    def test_multi_word_skill(self, extractor):
        assert extractor.extract("Dashboards in Power BI and Tableau") == ["power bi", "tableau"]

    def test_multi_word_skill_needs_adjacent_tokens(self, extractor):
        assert extractor.extract("power users love BI") == []

    def test_substrings_do_not_match(self, extractor):
        # "going" contains "go", "javascripting" contains "javascript"
        assert extractor.extract("going javascripting restful") == []

    def test_hyphen_is_not_stripped(self, extractor):
        assert extractor.extract("cicd") == []

    @pytest.mark.parametrize("text", ["", None, "   "])
    def test_empty_text(self, extractor, text):
        assert extractor.extract(text) == []

    def test_custom_matcher_is_used(self, vocabulary):
        class EverythingMatcher:
            def find(self, tokens, vocabulary):
                return list(vocabulary.skills)

        extractor = SkillExtractor(vocabulary, matcher=EverythingMatcher())
        assert len(extractor.extract("anything")) == 44

    def test_custom_vocabulary(self):
        vocabulary = SkillVocabulary(version="test", skills=("elixir", "phoenix"))
        extractor = SkillExtractor(vocabulary, matcher=ExactTokenSkillMatcher())
        assert extractor.extract("Elixir, Phoenix and Python") == ["elixir", "phoenix"]
