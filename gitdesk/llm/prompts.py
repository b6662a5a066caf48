"""Prompt construction and response cleanup for commit message generation."""

from gitdesk.constants import MAX_DIFF_CHARS

COMMIT_PROMPT = """Analyze the following git diff and generate a concise commit message.

Rules:
- Use conventional commit format: type(scope): description
- Types: feat, fix, docs, style, refactor, test, chore
- Keep the message under 72 characters
- Focus on WHAT changed and WHY, not HOW
- Write in English
- Return ONLY the commit message, nothing else

Git diff:
```
{diff}
```

Commit message:"""


def build_prompt(diff: str, max_chars: int = MAX_DIFF_CHARS) -> str:
    if len(diff) > max_chars:
        diff = f"{diff[:max_chars]}...(truncated)"
    return COMMIT_PROMPT.format(diff=diff)


def clean_response(response: str) -> str:
    """Reduce a model reply to a single bare commit message line."""
    text = response.strip().strip('"').strip("`")
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
