from gitdesk.llm.client import CommitMessageClient, generate_commit_message

__all__ = ["CommitMessageClient", "generate_commit_message"]
