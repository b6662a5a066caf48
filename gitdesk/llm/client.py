"""
LLM client for generating commit messages with Ollama, OpenAI or Anthropic
"""

import logging
import time
from typing import Any

import requests

from gitdesk.config.settings import AiConfig, Settings
from gitdesk.constants import (
    ANTHROPIC_MESSAGES_URL,
    ANTHROPIC_VERSION,
    COMMIT_MESSAGE_MAX_TOKENS,
    OPENAI_CHAT_URL,
    PROVIDERS,
)
from gitdesk.git_backend.commands import GitCli
from gitdesk.llm.prompts import build_prompt, clean_response

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 60


def _http_error(response: requests.Response) -> requests.HTTPError:
    try:
        error_body = response.text
    except Exception:
        error_body = "(could not read response body)"
    return requests.HTTPError(
        f"{response.status_code} {response.reason} for {response.url}\n\nResponse body:\n{error_body}",
        response=response,
    )


class CommitMessageClient:
    """Generates a one-line commit message from a staged diff"""

    def __init__(self, config: AiConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    def generate(self, diff: str) -> str:
        """Ask the configured provider for a commit message describing diff"""
        if not diff.strip():
            raise ValueError("No staged changes to describe")

        provider = self.config.provider
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown AI provider: {provider}")

        logger.info("Generating commit message with %s", provider)
        if provider == "ollama":
            return self._generate_ollama(diff)
        if provider == "openai":
            return self._generate_openai(diff)
        return self._generate_anthropic(diff)

    def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        max_retries: int = 5,
    ) -> dict[str, Any]:
        """POST JSON with retry on rate limit"""
        response = None
        for attempt in range(max_retries):
            response = self.session.post(
                url, headers=headers, json=payload, timeout=REQUEST_TIMEOUT
            )

            if response.status_code == 429:
                # Exponential backoff: 1, 2, 4, 8, 16 seconds
                wait_time = 2**attempt
                logger.warning(
                    "Rate limited (429), waiting %ds before retry %d/%d",
                    wait_time,
                    attempt + 1,
                    max_retries,
                )
                time.sleep(wait_time)
                continue

            if not response.ok:
                raise _http_error(response)

            result: dict[str, Any] = response.json()
            return result

        # Exhausted all retries
        assert response is not None
        raise _http_error(response)

    def _generate_ollama(self, diff: str) -> str:
        url = f"{self.config.ollama_url.rstrip('/')}/api/generate"
        payload = {
            "model": self.config.ollama_model,
            "prompt": build_prompt(diff),
            "stream": False,
        }
        result = self._post(url, payload)
        return clean_response(str(result.get("response", "")))

    def _generate_openai(self, diff: str) -> str:
        if not self.config.openai_key:
            raise ValueError("OpenAI API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.config.openai_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.config.openai_model,
            "messages": [{"role": "user", "content": build_prompt(diff)}],
            "max_tokens": COMMIT_MESSAGE_MAX_TOKENS,
        }
        result = self._post(OPENAI_CHAT_URL, payload, headers)
        choices = result.get("choices") or []
        content = choices[0].get("message", {}).get("content", "") if choices else ""
        return clean_response(content or "")

    def _generate_anthropic(self, diff: str) -> str:
        if not self.config.anthropic_key:
            raise ValueError("Anthropic API key is not configured")

        headers = {
            "x-api-key": self.config.anthropic_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.config.anthropic_model,
            "max_tokens": COMMIT_MESSAGE_MAX_TOKENS,
            "messages": [{"role": "user", "content": build_prompt(diff)}],
        }
        result = self._post(ANTHROPIC_MESSAGES_URL, payload, headers)
        blocks = result.get("content") or []
        text = blocks[0].get("text", "") if blocks else ""
        return clean_response(text or "")


def generate_commit_message(repo_path: str, settings: Settings) -> str:
    """Describe the staged changes of repo_path using the configured provider"""
    diff = GitCli(repo_path).staged_diff()
    if not diff.strip():
        raise ValueError("No staged changes to describe")
    return CommitMessageClient(settings.get_ai_config()).generate(diff)
