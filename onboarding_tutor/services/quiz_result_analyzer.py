"""
Scores a finished quiz and suggests a learner profile from the result.
"""

import logging
from collections import defaultdict

from onboarding_tutor.agents.models import (
    OverallLevel,
    ProficiencyLevel,
    Quiz,
    QuizAnswer,
    QuizResult,
    UserProfile,
)
from onboarding_tutor.agents.prompts.locale import (
    OVERALL_LEVEL_LABELS,
    PROFICIENCY_LABELS,
    Language,
)
from onboarding_tutor.core.workspace import Clock, local_now

logger = logging.getLogger(__name__)

EXPERIENCE_BY_LEVEL: dict[str, str] = {
    "advanced": "3_to_5_years",
    "intermediate": "1_to_3_years",
    "beginner": "less_than_1_year",
}

# Substring keywords matched against lower-cased technology names
ROLE_KEYWORDS: dict[str, list[str]] = {
    "frontend": ["react", "vue", "angular", "nextjs", "svelte", "css", "html"],
    "backend": ["node", "python", "go", "java", "rust", "django", "express", "spring"],
    "mobile": ["react native", "flutter", "swift", "kotlin", "ios", "android"],
    "devops": ["docker", "kubernetes", "aws", "gcp", "azure", "terraform", "ci/cd"],
}

SUGGESTED_LEARNING_GOAL = "overview"
SUGGESTED_LEARNING_STYLE = "hands_on"


def ratio_to_proficiency(ratio: float) -> ProficiencyLevel:
    if ratio >= 0.9:
        return "expert"
    if ratio >= 0.6:
        return "practical"
    if ratio >= 0.3:
        return "basic"
    return "no_experience"


def score_to_overall_level(score: float) -> OverallLevel:
    if score >= 0.7:
        return "advanced"
    if score >= 0.4:
        return "intermediate"
    return "beginner"


def infer_primary_role(technologies: list[str]) -> str:
    names = [t.lower() for t in technologies]

    def matches(role: str) -> bool:
        return any(keyword in name for keyword in ROLE_KEYWORDS[role] for name in names)

    has_frontend = matches("frontend")
    has_backend = matches("backend")
    if has_frontend and has_backend:
        return "fullstack"
    for role in ("frontend", "backend", "mobile", "devops"):
        if matches(role):
            return role
    return "other"


def proficiency_label(level: str, language: Language = "ja") -> str:
    labels = PROFICIENCY_LABELS[language]
    return labels.get(level, labels["no_experience"])


def overall_level_label(level: str, language: Language = "ja") -> str:
    labels = OVERALL_LEVEL_LABELS[language]
    return labels.get(level, labels["beginner"])


class QuizResultAnalyzer:
    def __init__(self, clock: Clock = local_now):
        self.clock = clock

    def analyze(self, quiz: Quiz, answers: list[QuizAnswer]) -> QuizResult:
        """
        Per-technology proficiency from each technology's correct ratio, and an
        overall score over all recorded answers.
        """
        answers_by_question = {a.question_id: a for a in answers}
        totals: dict[str, list[int]] = defaultdict(lambda: [0, 0])  # [correct, total]
        for question in quiz.questions:
            tally = totals[question.technology]
            tally[1] += 1
            answer = answers_by_question.get(question.id)
            if answer is not None and answer.is_correct:
                tally[0] += 1

        proficiency_levels = {
            tech: ratio_to_proficiency(correct / total) for tech, (correct, total) in totals.items()
        }
        overall_score = sum(1 for a in answers if a.is_correct) / len(answers) if answers else 0.0

        result = QuizResult(
            quiz_id=quiz.id,
            answers=list(answers),
            proficiency_levels=proficiency_levels,
            overall_level=score_to_overall_level(overall_score),
            overall_score=overall_score,
            completed_at=self.clock(),
        )
        logger.info(
            f"📊 Quiz {quiz.id}: score {overall_score:.2f} ({result.overall_level}), "
            f"levels {proficiency_levels}"
        )
        return result

    def generate_suggested_profile(self, result: QuizResult) -> UserProfile:
        return UserProfile(
            experience_level=EXPERIENCE_BY_LEVEL.get(result.overall_level, "less_than_1_year"),
            primary_role=infer_primary_role(list(result.proficiency_levels)),
            tech_stack_proficiency=dict(result.proficiency_levels),
            learning_goal=SUGGESTED_LEARNING_GOAL,
            learning_style=SUGGESTED_LEARNING_STYLE,
        )
