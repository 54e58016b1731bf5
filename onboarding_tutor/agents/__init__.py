"""
Content generation agents.
Curriculum and quiz generators stream progress events while the LLM answers.

Import generators from their modules:
    from onboarding_tutor.agents.curriculum_generator import CurriculumGenerator
    from onboarding_tutor.agents.quiz_generator import QuizGenerator
"""
