#!/usr/bin/env python3
"""
gitdesk - git desktop client with a commit graph
"""

import argparse
import json
import logging
import os
import sys

from gitdesk.config.settings import Settings
from gitdesk.constants import APP_NAME
from gitdesk.git_backend.errors import GitError
from gitdesk.git_backend.repository import GitRepository, init_repo
from gitdesk.graph.layout import build_graph_log

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"


def setup_logging() -> None:
    """DEBUG=1 turns on debug output, LOG_TO_FILE=1 also writes gitdesk.log"""
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("gitdesk.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="gitdesk - git desktop client with a commit graph",
    )
    parser.add_argument(
        "repo",
        nargs="?",
        default=None,
        help="Repository to open (defaults to the current directory)",
    )
    parser.add_argument(
        "--max-count",
        type=int,
        default=None,
        help="Maximum number of commits to lay out (defaults to the graph.max_count setting)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the graph layout as JSON instead of opening the window",
    )
    return parser.parse_args(argv)


def dump_graph(repo_path: str | None, max_count: int | None) -> str:
    """Lay out the graph of repo_path and return it as a JSON array"""
    repo = GitRepository(repo_path)
    commits = build_graph_log(repo, max_count)
    return json.dumps([c.to_dict() for c in commits], indent=2)


def run_gui(args: argparse.Namespace, settings: Settings, max_count: int) -> int:
    from PySide6.QtWidgets import QApplication, QMessageBox

    from gitdesk.ui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    try:
        window = MainWindow(args.repo, settings, max_count)
    except GitError as e:
        # Not a repository - offer to initialize one
        msg = QMessageBox()
        msg.setIcon(QMessageBox.Icon.Question)
        msg.setWindowTitle("Git Repository Required")
        msg.setText(str(e))
        msg.setInformativeText("Would you like to initialize a git repository here?")
        msg.setStandardButtons(QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
        msg.setDefaultButton(QMessageBox.StandardButton.Yes)
        if msg.exec() != QMessageBox.StandardButton.Yes:
            return 1

        target = args.repo or os.getcwd()
        try:
            init_repo(target)
            window = MainWindow(target, settings, max_count)
        except GitError as init_error:
            QMessageBox.critical(None, "Git Initialization Failed", str(init_error))
            return 1

    window.show()
    return app.exec()


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(argv)
    settings = Settings()
    max_count = args.max_count if args.max_count is not None else settings.get_max_count()

    if args.json:
        try:
            print(dump_graph(args.repo, max_count))
        except GitError as e:
            logger.error("%s", e)
            sys.exit(1)
        return

    sys.exit(run_gui(args, settings, max_count))


if __name__ == "__main__":
    main()
