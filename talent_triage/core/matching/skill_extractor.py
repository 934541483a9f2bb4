"""
Skill extraction against a fixed, versioned reference vocabulary.

The vocabulary is chosen once at startup; the token lookup is isolated
behind the SkillMatcher protocol so a stemming or synonym-aware matcher can
replace ExactTokenSkillMatcher without touching the scorer.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from talent_triage.core.matching.text_normalizer import normalize
from talent_triage.utils.config import get_settings
from talent_triage.utils.constants import SKILL_VOCABULARIES
from talent_triage.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SkillVocabulary:
    """An immutable, ordered list of canonical skill names."""

    version: str
    skills: tuple[str, ...]

    @classmethod
    def load(cls, version: str) -> "SkillVocabulary":
        """Load one of the vocabularies shipped in constants."""
        try:
            skills = SKILL_VOCABULARIES[version]
        except KeyError:
            raise ValueError(f"Unknown skill vocabulary version: {version}") from None
        return cls(version=version, skills=tuple(skills))

    @property
    def max_phrase_length(self) -> int:
        """Number of tokens in the longest multi-word skill."""
        return max((len(skill.split()) for skill in self.skills), default=1)

    def __len__(self) -> int:
        return len(self.skills)

    def __contains__(self, skill: object) -> bool:
        return skill in self.skills


class SkillMatcher(Protocol):
    """Strategy that decides which vocabulary skills occur in a token stream."""

    def find(self, tokens: Sequence[str], vocabulary: SkillVocabulary) -> list[str]:
        """Return matched skills in vocabulary order."""
        ...


class ExactTokenSkillMatcher:
    """
    Baseline matcher: exact token equality after normalization.

    A vocabulary entry also matches through its dot-less spelling
    ("nodejs" for "node.js"), and multi-word entries match a run of
    consecutive tokens. Sentence-final periods are ignored ("aws." is "aws").
    """

    def find(self, tokens: Sequence[str], vocabulary: SkillVocabulary) -> list[str]:
        lookup = self._build_lookup(tokens, vocabulary.max_phrase_length)
        return [
            skill
            for skill in vocabulary.skills
            if skill in lookup or skill.replace(".", "") in lookup
        ]

    @staticmethod
    def _build_lookup(tokens: Sequence[str], max_phrase_length: int) -> set[str]:
        trimmed = [t.rstrip(".") for t in tokens]
        trimmed = [t for t in trimmed if t]

        lookup = set(tokens)
        lookup.update(trimmed)

        for size in range(2, max_phrase_length + 1):
            for start in range(len(trimmed) - size + 1):
                lookup.add(" ".join(trimmed[start:start + size]))

        return lookup


class SkillExtractor:
    """Maps free text to the set of known skills it mentions."""

    def __init__(
        self,
        vocabulary: Optional[SkillVocabulary] = None,
        matcher: Optional[SkillMatcher] = None,
    ):
        """
        Initialize the extractor.

        Args:
            vocabulary: Reference vocabulary (defaults to the configured version)
            matcher: Token lookup strategy (defaults to exact token matching)
        """
        if vocabulary is None:
            vocabulary = SkillVocabulary.load(get_settings().matching.skill_vocabulary_version)
        self.vocabulary = vocabulary
        self.matcher = matcher or ExactTokenSkillMatcher()
        logger.debug(
            f"Skill extractor ready: vocabulary {vocabulary.version} "
            f"({len(vocabulary)} skills), matcher {type(self.matcher).__name__}"
        )

    def extract(self, text: Optional[str]) -> list[str]:
        """
        Extract known skills from text.

        Returns:
            Matched skills without duplicates, in vocabulary order
        """
        tokens = normalize(text)
        if not tokens:
            return []
        return self.matcher.find(tokens, self.vocabulary)


# Singleton instance
_skill_extractor: Optional[SkillExtractor] = None


def get_skill_extractor() -> SkillExtractor:
    """Get the skill extractor singleton instance."""
    global _skill_extractor
    if _skill_extractor is None:
        _skill_extractor = SkillExtractor()
    return _skill_extractor

