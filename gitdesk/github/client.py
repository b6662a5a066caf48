"""
GitHub REST API client
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from gitdesk.constants import GITHUB_API_URL, GITHUB_MAX_PAGES, GITHUB_REPOS_PER_PAGE, USER_AGENT

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


@dataclass
class GitHubUser:
    login: str
    id: int
    avatar_url: str
    html_url: str
    name: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "GitHubUser":
        return cls(
            login=data["login"],
            id=data["id"],
            avatar_url=data.get("avatar_url", ""),
            html_url=data.get("html_url", ""),
            name=data.get("name"),
            bio=data.get("bio"),
            public_repos=data.get("public_repos", 0),
            followers=data.get("followers", 0),
            following=data.get("following", 0),
        )


@dataclass
class GitHubRepo:
    id: int
    name: str
    full_name: str
    html_url: str
    clone_url: str
    ssh_url: str
    default_branch: str
    updated_at: str
    description: str | None = None
    private: bool = False
    fork: bool = False
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    language: str | None = None
    pushed_at: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "GitHubRepo":
        return cls(
            id=data["id"],
            name=data["name"],
            full_name=data["full_name"],
            html_url=data.get("html_url", ""),
            clone_url=data.get("clone_url", ""),
            ssh_url=data.get("ssh_url", ""),
            default_branch=data.get("default_branch") or "main",
            updated_at=data.get("updated_at", ""),
            description=data.get("description"),
            private=data.get("private", False),
            fork=data.get("fork", False),
            stargazers_count=data.get("stargazers_count", 0),
            watchers_count=data.get("watchers_count", 0),
            forks_count=data.get("forks_count", 0),
            language=data.get("language"),
            pushed_at=data.get("pushed_at"),
        )


class GitHubClient:
    """Authenticated client for the endpoints the repository browser needs"""

    def __init__(self, token: str, session: requests.Session | None = None) -> None:
        self.token = token
        self.base_url = GITHUB_API_URL
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }

    def _check(self, response: requests.Response) -> None:
        if not response.ok:
            raise requests.HTTPError(
                f"GitHub API error ({response.status_code}): {response.text}",
                response=response,
            )

    def fetch_user(self) -> GitHubUser:
        response = self.session.get(
            f"{self.base_url}/user", headers=self._headers(), timeout=REQUEST_TIMEOUT
        )
        self._check(response)
        return GitHubUser.from_json(response.json())

    def fetch_repos(self) -> list[GitHubRepo]:
        """All repositories the user owns or collaborates on, most recently updated first"""
        repos: list[GitHubRepo] = []
        for page in range(1, GITHUB_MAX_PAGES + 1):
            response = self.session.get(
                f"{self.base_url}/user/repos",
                headers=self._headers(),
                params={
                    "per_page": GITHUB_REPOS_PER_PAGE,
                    "page": page,
                    "sort": "updated",
                    "affiliation": "owner,collaborator,organization_member",
                },
                timeout=REQUEST_TIMEOUT,
            )
            self._check(response)

            batch = response.json()
            repos.extend(GitHubRepo.from_json(item) for item in batch)
            if len(batch) < GITHUB_REPOS_PER_PAGE:
                break

        logger.debug("Fetched %d GitHub repositories", len(repos))
        return repos

    def create_repo(
        self, name: str, description: str | None = None, private: bool = False
    ) -> GitHubRepo:
        """Create an empty repository for an existing local one to push to"""
        payload = {
            "name": name,
            "description": description,
            "private": private,
            "auto_init": False,
        }
        response = self.session.post(
            f"{self.base_url}/user/repos",
            headers=self._headers(),
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )
        self._check(response)
        logger.info("Created GitHub repository %s", name)
        return GitHubRepo.from_json(response.json())
