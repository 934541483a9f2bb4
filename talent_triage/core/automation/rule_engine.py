"""
Automation rule engine.

Decides, from an application's overall match score and its job's automation
config, whether the application should be shortlisted or rejected without
human review. Rejection is evaluated first.
"""

from typing import Optional

from talent_triage.core.exceptions import InputError
from talent_triage.data.models.automation import AutomationConfig
from talent_triage.utils.constants import AutomationAction
from talent_triage.utils.logger import get_logger

logger = get_logger(__name__)

# Stand-in for jobs that never stored a config
_DISABLED = AutomationConfig.disabled(job_id="")


def decide(score: int, config: Optional[AutomationConfig] = None) -> AutomationAction:
    """
    Decide the automated action for one score.

    Args:
        score: Overall match score (0-100)
        config: The job's automation config; None means every rule is off

    Returns:
        AUTO_REJECT, AUTO_SHORTLIST or NONE

    Raises:
        InputError: If the score is not an integer between 0 and 100
    """
    if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
        raise InputError(f"Score must be an integer between 0 and 100, got {score!r}", field="score")

    config = config or _DISABLED

    if config.auto_reject_enabled and score <= config.auto_reject_threshold:
        return AutomationAction.AUTO_REJECT
    if config.auto_shortlist_enabled and score >= config.auto_shortlist_threshold:
        return AutomationAction.AUTO_SHORTLIST
    return AutomationAction.NONE


class AutomationRuleEngine:
    """Applies one job's automation config to many scores."""

    def __init__(self, config: Optional[AutomationConfig] = None):
        self.config = config

    def decide(self, score: int) -> AutomationAction:
        """Decide the automated action for one score."""
        return decide(score, self.config)

    def decide_many(self, scores: dict[str, int]) -> dict[str, AutomationAction]:
        """
        Decide actions for several applications.

        Args:
            scores: Overall score keyed by application id

        Returns:
            Action keyed by the same ids, in input order
        """
        decisions = {app_id: self.decide(score) for app_id, score in scores.items()}
        if decisions:
            counts: dict[str, int] = {}
            for action in decisions.values():
                counts[action.value] = counts.get(action.value, 0) + 1
            logger.info(f"Automation decided {len(decisions)} applications: {counts}")
        return decisions

    @staticmethod
    def group_by_action(
        decisions: dict[str, AutomationAction],
    ) -> dict[AutomationAction, list[str]]:
        """Ids per actionable decision; NONE is left out."""
        grouped: dict[AutomationAction, list[str]] = {}
        for app_id, action in decisions.items():
            if action is AutomationAction.NONE:
                continue
            grouped.setdefault(action, []).append(app_id)
        return grouped
