"""
Match scoring data models for Talent-Triage.

Defines the input and result records of the resume/job scorer. A
MatchResult is also what gets stored on an application as its AI analysis.
"""

from pydantic import Field, field_validator

from .base import ApiModel


class ScoreInput(ApiModel):
    """Texts to be compared; blank values are rejected by the engine."""

    resume_text: str = ""
    job_description_text: str = ""


class MatchResult(ApiModel):
    """
    Outcome of scoring a resume against a job description.

    Every score is an integer percentage. matched_skills and missing_skills
    partition the skills found in the job text and keep its skill order.
    """

    overall_score: int = Field(ge=0, le=100)
    skills_match: int = Field(ge=0, le=100)
    experience_match: int = Field(ge=0, le=100)
    education_match: int = Field(ge=0, le=100)
    matched_skills: tuple[str, ...] = ()
    missing_skills: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    @field_validator("matched_skills", "missing_skills")
    @classmethod
    def no_duplicate_skills(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Skill lists are ordered sets."""
        return tuple(dict.fromkeys(v))

    @property
    def job_skills(self) -> frozenset[str]:
        """All skills recognized in the job description."""
        return frozenset(self.matched_skills) | frozenset(self.missing_skills)
