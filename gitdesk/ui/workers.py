"""
Background workers for the main window.

These QObjects are moved onto a QThread so network and git calls do not
block the UI.
"""

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from gitdesk.llm.client import generate_commit_message

if TYPE_CHECKING:
    from gitdesk.config.settings import Settings

logger = logging.getLogger(__name__)


class CommitMessageWorker(QObject):
    """Worker for generating a commit message from the staged diff"""

    finished = Signal(str)  # Emitted with the generated message
    error = Signal(str)  # Emitted on error

    def __init__(self, repo_path: str, settings: "Settings") -> None:
        super().__init__()
        self.repo_path = repo_path
        self.settings = settings

    def run(self) -> None:
        """Generate the message"""
        try:
            message = generate_commit_message(self.repo_path, self.settings)
            self.finished.emit(message)
        except Exception as e:
            logger.exception("Commit message generation failed")
            self.error.emit(str(e))
