from gitdesk.github.client import GitHubClient, GitHubRepo, GitHubUser

__all__ = ["GitHubClient", "GitHubRepo", "GitHubUser"]
