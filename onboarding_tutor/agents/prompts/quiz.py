"""
Skill-check quiz prompt templates.
"""

from onboarding_tutor.agents.prompts.locale import Language

QUIZ_SYSTEM_PROMPT = {
    "ja": """あなたは技術力診断の専門家です。
開発者の技術レベルを正確に測定するための診断クイズを作成してください。
問題は実務で本当に役立つ知識を問うものにしてください。
出力は必ず指定されたJSON形式で返してください。""",
    "en": """You are an expert in assessing technical skills.
Create a diagnostic quiz that accurately measures a developer's level.
Questions must test knowledge that is genuinely useful in practice.
Always answer in the requested JSON format.""",
}

PROJECT_CONTEXT_SECTION = {
    "ja": "\n## プロジェクトコンテキスト\n{project_context}\n",
    "en": "\n## Project Context\n{project_context}\n",
}

QUIZ_PROMPT = {
    "ja": """以下の技術に関する診断クイズを生成してください。

## 対象技術
{technologies}
{context_section}
## 要件
1. 合計{question_count}問を生成
2. 各技術から最低1問ずつ出題（技術数が{question_count}より多い場合は重要な技術を優先）
3. 難易度を段階的に上げる：
   - 1-2問目: beginner（基礎的な概念）
   - 3-4問目: intermediate（実践的な知識）
   - 5問目: advanced（応用・ベストプラクティス）
4. 各問題に4つの選択肢（A, B, C, D）を設定
5. 実務で役立つ知識を問う（トリビアは避ける）
6. 各問題に簡潔な解説を付ける

## 出力形式
以下のJSON形式で出力してください。JSONは必ず```json と ``` で囲んでください：

```json
{{
  "questions": [
    {{
      "technology": "React",
      "difficulty": "beginner",
      "questionText": "問題文をここに記載",
      "choices": [
        {{ "id": "A", "text": "選択肢Aのテキスト", "isCorrect": false }},
        {{ "id": "B", "text": "選択肢Bのテキスト", "isCorrect": true }},
        {{ "id": "C", "text": "選択肢Cのテキスト", "isCorrect": false }},
        {{ "id": "D", "text": "選択肢Dのテキスト", "isCorrect": false }}
      ],
      "explanation": "正解はBです。理由は..."
    }}
  ]
}}
```

## 注意事項
- 正解は1つだけ設定してください
- 選択肢は紛らわしすぎず、かつ明確な違いがあるものにしてください
- 解説は2-3文で簡潔に記載してください""",
    "en": """Generate a diagnostic quiz about the technologies below.

## Target Technologies
{technologies}
{context_section}
## Requirements
1. Generate {question_count} questions in total
2. At least one question per technology (prioritize the important ones if there are more than {question_count})
3. Increase difficulty step by step:
   - Questions 1-2: beginner (fundamental concepts)
   - Questions 3-4: intermediate (practical knowledge)
   - Question 5: advanced (applied knowledge and best practices)
4. Four choices (A, B, C, D) per question
5. Test practical knowledge, avoid trivia
6. Add a short explanation to every question

## Output Format
Answer with the following JSON. The JSON MUST be wrapped in ```json and ```:

```json
{{
  "questions": [
    {{
      "technology": "React",
      "difficulty": "beginner",
      "questionText": "Question text",
      "choices": [
        {{ "id": "A", "text": "Choice A", "isCorrect": false }},
        {{ "id": "B", "text": "Choice B", "isCorrect": true }},
        {{ "id": "C", "text": "Choice C", "isCorrect": false }},
        {{ "id": "D", "text": "Choice D", "isCorrect": false }}
      ],
      "explanation": "The answer is B because..."
    }}
  ]
}}
```

## Notes
- Exactly one choice may be correct
- Choices should be clearly distinct without being misleading
- Keep explanations to 2-3 sentences""",
}


def build_quiz_prompt(
    technologies: list[str],
    project_context: str = "",
    question_count: int = 5,
    language: Language = "ja",
) -> str:
    context_section = (
        PROJECT_CONTEXT_SECTION[language].format(project_context=project_context)
        if project_context
        else ""
    )
    return QUIZ_PROMPT[language].format(
        technologies=", ".join(technologies),
        context_section=context_section,
        question_count=question_count,
    )
