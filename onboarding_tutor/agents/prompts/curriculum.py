"""
Curriculum generation prompt templates.
Generates chapters of hands-on tasks tailored to the project and the learner.
"""

from onboarding_tutor.agents.models import UserProfile
from onboarding_tutor.agents.prompts.locale import (
    Language,
    describe_experience,
    describe_learning_goal,
    describe_learning_style,
    describe_role,
)

CURRICULUM_SYSTEM_PROMPT = {
    "ja": """あなたは経験豊富なソフトウェアエンジニアで、新しいチームメンバーのオンボーディングを担当しています。
プロジェクトの構造と技術スタック、そしてユーザーの経験レベルに基づいて、効果的な学習カリキュラムを作成してください。
出力は必ず指定されたJSON形式で返してください。""",
    "en": """You are an experienced software engineer responsible for onboarding new team members.
Create an effective learning curriculum based on the project structure, its technology stack and the learner's experience level.
Always answer in the requested JSON format.""",
}

CURRICULUM_PROMPT = {
    "ja": """以下のプロジェクト情報とユーザープロファイルに基づいて、段階的な学習カリキュラムを日本語で作成してください。

## プロジェクト情報
{project_summary}

## 使用技術
{technologies}

## ユーザープロファイル
- エンジニア歴: {experience}
- 主な役割: {role}
- 学習ゴール: {learning_goal}
- 学習スタイル: {learning_style}

## 出力形式
以下のJSON形式で出力してください。JSONは必ず```json と ``` で囲んでください：

```json
{{
  "title": "カリキュラムタイトル",
  "description": "カリキュラムの概要説明（2-3文）",
  "chapters": [
    {{
      "title": "章タイトル",
      "description": "章の説明（1-2文）",
      "tasks": [
        {{
          "title": "タスクタイトル",
          "description": "具体的なタスク内容と学習ポイント（3-5文）",
          "targetFiles": ["関連するファイルパス"],
          "estimatedTime": "30分",
          "prerequisites": []
        }}
      ]
    }}
  ]
}}
```

## 要件
1. ユーザーの経験レベルに合わせた難易度設定
2. 3-5章程度、各章3-5タスク
3. プロジェクト固有のファイルやパターンを参照
4. 段階的に理解が深まる順序
5. 実際にコードを読む・動かすタスクを含める
6. 各タスクには具体的なファイルパスを含める（可能な場合）""",
    "en": """Create a step-by-step learning curriculum in English based on the project information and user profile below.

## Project Information
{project_summary}

## Technologies
{technologies}

## User Profile
- Engineering experience: {experience}
- Primary role: {role}
- Learning goal: {learning_goal}
- Learning style: {learning_style}

## Output Format
Answer with the following JSON. The JSON MUST be wrapped in ```json and ```:

```json
{{
  "title": "Curriculum title",
  "description": "Overview of the curriculum (2-3 sentences)",
  "chapters": [
    {{
      "title": "Chapter title",
      "description": "Chapter description (1-2 sentences)",
      "tasks": [
        {{
          "title": "Task title",
          "description": "Concrete task and learning points (3-5 sentences)",
          "targetFiles": ["related/file/path"],
          "estimatedTime": "30 min",
          "prerequisites": []
        }}
      ]
    }}
  ]
}}
```

## Requirements
1. Difficulty matched to the learner's experience level
2. About 3-5 chapters with 3-5 tasks each
3. Reference files and patterns specific to this project
4. Order tasks so understanding deepens step by step
5. Include tasks that read and run the actual code
6. Give every task concrete file paths where possible""",
}

NO_TECHNOLOGIES = {"ja": "検出されませんでした", "en": "None detected"}


def build_curriculum_prompt(
    project_summary: str,
    technologies: list[str],
    profile: UserProfile | None,
    language: Language = "ja",
) -> str:
    """Render the user prompt. Deterministic for identical inputs."""
    return CURRICULUM_PROMPT[language].format(
        project_summary=project_summary,
        technologies=", ".join(technologies) if technologies else NO_TECHNOLOGIES[language],
        experience=describe_experience(profile.experience_level if profile else None, language),
        role=describe_role(profile.primary_role if profile else None, language),
        learning_goal=describe_learning_goal(profile.learning_goal if profile else None, language),
        learning_style=describe_learning_style(
            profile.learning_style if profile else None, language
        ),
    )
