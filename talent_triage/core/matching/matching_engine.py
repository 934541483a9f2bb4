"""
Resume-job matching engine.

Scores a free-text resume against a free-text job description using three
heuristics: skill overlap, experience/seniority alignment and education
level, combined into a weighted overall score with advisory recommendations.
"""

import math
import re
from typing import Optional

from talent_triage.core.exceptions import InputError
from talent_triage.core.matching.skill_extractor import SkillExtractor, get_skill_extractor
from talent_triage.data.models.match import MatchResult, ScoreInput
from talent_triage.utils.config import get_settings
from talent_triage.utils.constants import (
    DEFAULT_EDUCATION_SCORE,
    DEFAULT_SCORING_WEIGHTS,
    EDUCATION_RECOMMENDATION_THRESHOLD,
    EDUCATION_TIERS,
    EXPERIENCE_BASELINE_SCORE,
    EXPERIENCE_RECOMMENDATION_THRESHOLD,
    EXPERIENCE_SCORE_BOUNDS,
    MAX_COUNTED_EXPERIENCE_YEARS,
    MAX_RECOMMENDED_SKILLS,
    NEUTRAL_SKILLS_SCORE,
    SENIORITY_SIGNALS,
    SKILLS_RECOMMENDATION_THRESHOLD,
)
from talent_triage.utils.logger import get_logger

logger = get_logger(__name__)

# "5 years", "10+ years", "3-year"
_YEARS_PATTERN = re.compile(r"(\d+)[+\s-]*year")

RECOMMEND_UPSKILL = "Consider upskilling on: {skills}"
RECOMMEND_IMPACT = (
    "Highlight measurable outcomes and leadership/impact to strengthen experience alignment"
)
RECOMMEND_CERTIFICATIONS = "Add relevant certifications or courses to bolster qualifications"
RECOMMEND_KEYWORDS = "Mirror key terms from the job description to pass ATS keyword screens"
RECOMMEND_PROCEED = "Strong match. Proceed to technical screening/interview"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def extract_experience_years(resume_text: str) -> int:
    """
    Find the largest "<n> year(s)" figure in a resume.

    Returns:
        Years of experience capped at MAX_COUNTED_EXPERIENCE_YEARS, 0 if none stated
    """
    years = [int(m.group(1)) for m in _YEARS_PATTERN.finditer(resume_text.lower())]
    if not years:
        return 0
    return min(max(years), MAX_COUNTED_EXPERIENCE_YEARS)


def detect_seniority(job_description_text: str) -> Optional[str]:
    """
    Detect the seniority a job description asks for.

    Signal words match anywhere in the text, so "leadership" counts as
    senior. Senior signals win over mid-level ones, which win over junior
    ones.

    Returns:
        "senior", "mid", "junior" or None when the text carries no signal
    """
    text = job_description_text.lower()
    for level, words in SENIORITY_SIGNALS.items():
        if any(word in text for word in words):
            return level
    return None


class MatchingEngine:
    """
    Engine for scoring a resume against a job description.

    Uses a multi-factor approach:
    - Skills overlap against a fixed vocabulary
    - Experience years versus requested seniority
    - Highest education level mentioned
    """

    def __init__(
        self,
        skill_extractor: Optional[SkillExtractor] = None,
        weights: Optional[dict[str, float]] = None,
        neutral_skills_score: int = NEUTRAL_SKILLS_SCORE,
        max_recommended_skills: int = MAX_RECOMMENDED_SKILLS,
    ):
        """
        Initialize the matching engine.

        Args:
            skill_extractor: Extractor used for both texts (defaults to the shared one)
            weights: Optional custom scoring weights
            neutral_skills_score: Skills score used when the job names no known skill
            max_recommended_skills: How many missing skills the upskilling advice lists
        """
        self.skill_extractor = skill_extractor or get_skill_extractor()
        self.weights = weights or DEFAULT_SCORING_WEIGHTS
        self.neutral_skills_score = neutral_skills_score
        self.max_recommended_skills = max_recommended_skills

    @classmethod
    def from_settings(cls) -> "MatchingEngine":
        """Build an engine from the application settings."""
        matching = get_settings().matching
        return cls(
            weights=matching.weights(),
            neutral_skills_score=matching.neutral_skills_score,
            max_recommended_skills=matching.max_recommended_skills,
        )

    def score(self, resume_text: str, job_description_text: str) -> MatchResult:
        """
        Score a resume against a job description.

        Args:
            resume_text: Candidate resume as plain text
            job_description_text: Job posting as plain text

        Returns:
            MatchResult with component scores and recommendations

        Raises:
            InputError: If either text is missing or blank
        """
        if not isinstance(resume_text, str) or not resume_text.strip():
            raise InputError("resumeText is required", field="resumeText")
        if not isinstance(job_description_text, str) or not job_description_text.strip():
            raise InputError("jobDescriptionText is required", field="jobDescriptionText")

        jd_skills = self.skill_extractor.extract(job_description_text)
        resume_skills = set(self.skill_extractor.extract(resume_text))

        matched = [s for s in jd_skills if s in resume_skills]
        missing = [s for s in jd_skills if s not in resume_skills]

        skills_match = self._score_skills(matched, jd_skills)
        experience_match = self._score_experience(resume_text, job_description_text)
        education_match = self._score_education(resume_text)

        overall_score = round_half_up(
            skills_match * self.weights["skills_match"]
            + experience_match * self.weights["experience_match"]
            + education_match * self.weights["education_match"]
        )
        overall_score = max(0, min(100, overall_score))

        result = MatchResult(
            overall_score=overall_score,
            skills_match=skills_match,
            experience_match=experience_match,
            education_match=education_match,
            matched_skills=tuple(matched),
            missing_skills=tuple(missing),
            recommendations=tuple(
                self._build_recommendations(
                    missing, skills_match, experience_match, education_match
                )
            ),
        )

        logger.debug(
            f"Scored match: overall={overall_score} skills={skills_match} "
            f"experience={experience_match} education={education_match} "
            f"matched={len(matched)}/{len(jd_skills)}"
        )
        return result

    def score_input(self, inputs: ScoreInput) -> MatchResult:
        """Score a ScoreInput record (see score)."""
        return self.score(inputs.resume_text, inputs.job_description_text)

    def _score_skills(self, matched: list[str], jd_skills: list[str]) -> int:
        """Percentage of the job's skills found in the resume."""
        if not jd_skills:
            return self.neutral_skills_score
        return round_half_up(100 * len(matched) / len(jd_skills))

    def _score_experience(self, resume_text: str, job_description_text: str) -> int:
        """Score how the resume's stated years fit the job's seniority."""
        years = extract_experience_years(resume_text)
        seniority = detect_seniority(job_description_text)

        if seniority == "senior":
            score = 85 if years >= 5 else 65 if years >= 3 else 40
        elif seniority == "mid":
            score = 85 if years >= 3 else 70 if years >= 1 else 45
        elif seniority == "junior":
            score = 85 if years <= 2 else 70 if years <= 4 else 55
        else:
            score = min(90, EXPERIENCE_BASELINE_SCORE + years * 6)

        low, high = EXPERIENCE_SCORE_BOUNDS
        return max(low, min(high, score))

    def _score_education(self, resume_text: str) -> int:
        """Score the highest education tier mentioned in the resume."""
        text = resume_text.lower()
        for tier_score, keywords in EDUCATION_TIERS:
            if any(keyword in text for keyword in keywords):
                return tier_score
        return DEFAULT_EDUCATION_SCORE

    def _build_recommendations(
        self,
        missing_skills: list[str],
        skills_match: int,
        experience_match: int,
        education_match: int,
    ) -> list[str]:
        """Advice for the candidate, most specific first."""
        recommendations = []

        if missing_skills:
            listed = ", ".join(missing_skills[: self.max_recommended_skills])
            recommendations.append(RECOMMEND_UPSKILL.format(skills=listed))
        if experience_match < EXPERIENCE_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMEND_IMPACT)
        if education_match < EDUCATION_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMEND_CERTIFICATIONS)
        if skills_match < SKILLS_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMEND_KEYWORDS)

        if not recommendations:
            recommendations.append(RECOMMEND_PROCEED)
        return recommendations

    def rank_results(self, results: list[MatchResult]) -> list[MatchResult]:
        """
        Rank match results by their overall score.

        Args:
            results: List of match results

        Returns:
            Sorted list with highest scores first
        """
        return sorted(results, key=lambda r: r.overall_score, reverse=True)


# Singleton instance
_matching_engine: Optional[MatchingEngine] = None


def get_matching_engine() -> MatchingEngine:
    """Get the matching engine singleton instance."""
    global _matching_engine
    if _matching_engine is None:
        _matching_engine = MatchingEngine.from_settings()
    return _matching_engine

