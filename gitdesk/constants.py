"""
Centralized constants for gitdesk.

Endpoints, default models and limits used across the codebase.
"""

APP_NAME = "gitdesk"
USER_AGENT = "gitdesk"

# Graph
DEFAULT_MAX_COUNT = 500

# AI providers
PROVIDERS = ("ollama", "openai", "anthropic")
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-haiku-latest"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
COMMIT_MESSAGE_MAX_TOKENS = 200
MAX_DIFF_CHARS = 8000

# GitHub
GITHUB_API_URL = "https://api.github.com"
GITHUB_REPOS_PER_PAGE = 100
GITHUB_MAX_PAGES = 10

# File watching
DEFAULT_DEBOUNCE_MS = 1000
