"""
Localized descriptor tables and user-facing messages.

Profile enumerations are translated into natural-language descriptors before
they are put into prompts. Unknown values fall back to a fixed default.
"""

from typing import Literal

Language = Literal["ja", "en"]

EXPERIENCE_LEVELS: dict[str, dict[str, str]] = {
    "ja": {
        "less_than_1_year": "1年未満",
        "1_to_3_years": "1〜3年",
        "3_to_5_years": "3〜5年",
        "more_than_5_years": "5年以上",
    },
    "en": {
        "less_than_1_year": "less than 1 year",
        "1_to_3_years": "1-3 years",
        "3_to_5_years": "3-5 years",
        "more_than_5_years": "more than 5 years",
    },
}

ROLES: dict[str, dict[str, str]] = {
    "ja": {
        "frontend": "フロントエンド",
        "backend": "バックエンド",
        "fullstack": "フルスタック",
        "mobile": "モバイル",
        "devops": "DevOps",
        "other": "その他",
    },
    "en": {
        "frontend": "Frontend",
        "backend": "Backend",
        "fullstack": "Full-stack",
        "mobile": "Mobile",
        "devops": "DevOps",
        "other": "Other",
    },
}

LEARNING_GOALS: dict[str, dict[str, str]] = {
    "ja": {
        "overview": "全体像の把握",
        "feature_development": "機能追加・修正が可能になる",
        "architecture": "アーキテクチャ理解",
        "code_review": "コードレビュー参加",
    },
    "en": {
        "overview": "Understand the big picture",
        "feature_development": "Be able to add and modify features",
        "architecture": "Understand the architecture",
        "code_review": "Take part in code reviews",
    },
}

LEARNING_STYLES: dict[str, dict[str, str]] = {
    "ja": {
        "theory": "理論重視",
        "hands_on": "実践（ハンズオン）重視",
        "sample_code": "サンプルコード重視",
    },
    "en": {
        "theory": "Theory first",
        "hands_on": "Hands-on practice",
        "sample_code": "Learning from sample code",
    },
}

# Fallbacks for missing or unknown profile values
UNKNOWN: dict[str, str] = {"ja": "不明", "en": "Unknown"}
DEFAULT_GOAL: dict[str, str] = {"ja": "全体像の把握", "en": "Understand the big picture"}
DEFAULT_STYLE: dict[str, str] = {"ja": "実践重視", "en": "Practice first"}

PROFICIENCY_LABELS: dict[str, dict[str, str]] = {
    "ja": {
        "expert": "エキスパート",
        "practical": "実践レベル",
        "basic": "基礎レベル",
        "no_experience": "未経験",
    },
    "en": {
        "expert": "Expert",
        "practical": "Practical",
        "basic": "Basic",
        "no_experience": "No experience",
    },
}

OVERALL_LEVEL_LABELS: dict[str, dict[str, str]] = {
    "ja": {"advanced": "上級者", "intermediate": "中級者", "beginner": "初級者"},
    "en": {"advanced": "Advanced", "intermediate": "Intermediate", "beginner": "Beginner"},
}

# Progress step messages shown while generating
STEPS: dict[str, dict[str, str]] = {
    "ja": {
        "analyzing_structure": "プロジェクト構造を分析中...",
        "detecting_stack": "技術スタックを検出中...",
        "loading_profile": "ユーザープロファイルを読み込み中...",
        "generating_curriculum": "カリキュラムを生成中...",
        "detecting_quiz_stack": "プロジェクトの技術スタックを検出中...",
        "quiz_targets": "対象技術: {technologies}",
        "loading_context": "プロジェクトコンテキストを取得中...",
        "generating_quiz": "クイズを生成中...",
        "parsing": "レスポンスを解析中...",
        "completed": "完了",
        "error": "エラーが発生しました",
        "existing_curriculum": "既存のカリキュラムを読み込みました",
    },
    "en": {
        "analyzing_structure": "Analyzing project structure...",
        "detecting_stack": "Detecting technology stack...",
        "loading_profile": "Loading user profile...",
        "generating_curriculum": "Generating curriculum...",
        "detecting_quiz_stack": "Detecting the project's technology stack...",
        "quiz_targets": "Target technologies: {technologies}",
        "loading_context": "Collecting project context...",
        "generating_quiz": "Generating quiz...",
        "parsing": "Parsing response...",
        "completed": "Completed",
        "error": "An error occurred",
        "existing_curriculum": "Loaded the existing curriculum",
    },
}

ERRORS: dict[str, dict[str, str]] = {
    "ja": {
        "no_profile": "ユーザープロファイルが見つかりません。先にプロファイルを設定してください。",
        "no_technologies": "診断する技術が見つかりませんでした。技術を選択してください。",
        "no_questions": "問題リストが見つかりません",
    },
    "en": {
        "no_profile": "No user profile found. Please set up your profile first.",
        "no_technologies": "No technologies to assess were found. Please select technologies.",
        "no_questions": "No question list found in the response",
    },
}


def describe_experience(level: str | None, language: Language = "ja") -> str:
    return EXPERIENCE_LEVELS[language].get(level or "", UNKNOWN[language])


def describe_role(role: str | None, language: Language = "ja") -> str:
    return ROLES[language].get(role or "", UNKNOWN[language])


def describe_learning_goal(goal: str | None, language: Language = "ja") -> str:
    return LEARNING_GOALS[language].get(goal or "", DEFAULT_GOAL[language])


def describe_learning_style(style: str | None, language: Language = "ja") -> str:
    return LEARNING_STYLES[language].get(style or "", DEFAULT_STYLE[language])


def step(key: str, language: Language = "ja", **kwargs) -> str:
    message = STEPS[language][key]
    return message.format(**kwargs) if kwargs else message


def error_message(key: str, language: Language = "ja") -> str:
    return ERRORS[language][key]
