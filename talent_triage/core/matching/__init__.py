"""Resume-job matching: normalization, skill extraction and scoring."""

from .matching_engine import (
    MatchingEngine,
    get_matching_engine,
)
from .skill_extractor import (
    ExactTokenSkillMatcher,
    SkillExtractor,
    SkillMatcher,
    SkillVocabulary,
    get_skill_extractor,
)
from .text_normalizer import normalize

__all__ = [
    "MatchingEngine",
    "get_matching_engine",
    "ExactTokenSkillMatcher",
    "SkillExtractor",
    "SkillMatcher",
    "SkillVocabulary",
    "get_skill_extractor",
    "normalize",
]
