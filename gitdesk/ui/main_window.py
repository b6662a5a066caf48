"""
Main window for gitdesk - commit graph plus a staging and commit panel
"""

import logging
from typing import Any

from PySide6.QtCore import QObject, Qt, QThread, Signal
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from gitdesk.config.settings import Settings
from gitdesk.git_backend.commands import GitCli
from gitdesk.git_backend.errors import GitError
from gitdesk.git_backend.repository import GitRepository
from gitdesk.ui.commit_actions import ACTIONS_BY_KEY, COPY_HASH, run_commit_action
from gitdesk.ui.git_graph import GitGraphView
from gitdesk.ui.workers import CommitMessageWorker
from gitdesk.watcher import RepoChangeEvent, RepoWatcher

logger = logging.getLogger(__name__)

# Item data role holding a FileStatus in the files list
FILE_ROLE = Qt.ItemDataRole.UserRole

STATUS_MARKERS = {"added": "A", "modified": "M", "deleted": "D", "renamed": "R", "untracked": "?"}


class RepoChangeBridge(QObject):
    """Carries watcher callbacks (observer thread) onto the GUI thread"""

    changed = Signal(str)  # change type

    def on_change(self, event: RepoChangeEvent) -> None:
        self.changed.emit(event.change_type)


class MainWindow(QMainWindow):
    """Main application window"""

    def __init__(
        self,
        repo_path: str | None = None,
        settings: Settings | None = None,
        max_count: int | None = None,
    ) -> None:
        super().__init__()
        self.setGeometry(100, 100, 1400, 900)

        self.settings = settings or Settings()
        self.repo = GitRepository(repo_path)
        self.cli = GitCli(self.repo.path)
        self.max_count = max_count if max_count is not None else self.settings.get_max_count()

        self.setWindowTitle(f"gitdesk - {self.repo.get_repo_info().name}")

        self._message_thread: QThread | None = None
        self._message_worker: CommitMessageWorker | None = None

        self._setup_ui()
        self._setup_menus()

        self._change_bridge = RepoChangeBridge()
        self._change_bridge.changed.connect(self._on_repo_changed)
        self.watcher = RepoWatcher(self.settings.get_debounce_ms())
        self.watcher.watch(self.repo.path, self._change_bridge.on_change)

        self.refresh()

    def _setup_ui(self) -> None:
        """Graph on the left, working tree and commit box on the right"""
        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        self.graph_view = GitGraphView(self.repo, self.max_count)
        self.graph_view.commit_selected.connect(self._on_commit_selected)
        self.graph_view.commit_action_requested.connect(self._on_commit_action)
        self.graph_view.error.connect(self._show_error)
        splitter.addWidget(self.graph_view)

        side = QWidget()
        side_layout = QVBoxLayout(side)
        side_layout.setContentsMargins(6, 6, 6, 6)

        side_layout.addWidget(QLabel("<b>Changes</b>"))
        self.files_list = QListWidget()
        self.files_list.itemDoubleClicked.connect(self._toggle_staged)
        side_layout.addWidget(self.files_list)

        stage_row = QHBoxLayout()
        stage_all_btn = QPushButton("Stage All")
        stage_all_btn.clicked.connect(self._stage_all)
        stage_row.addWidget(stage_all_btn)
        toggle_btn = QPushButton("Stage / Unstage")
        toggle_btn.clicked.connect(lambda: self._toggle_staged(self.files_list.currentItem()))
        stage_row.addWidget(toggle_btn)
        side_layout.addLayout(stage_row)

        side_layout.addWidget(QLabel("<b>Commit message</b>"))
        self.message_edit = QPlainTextEdit()
        self.message_edit.setPlaceholderText("Summary of the change")
        self.message_edit.setMaximumHeight(120)
        side_layout.addWidget(self.message_edit)

        commit_row = QHBoxLayout()
        self.generate_btn = QPushButton("Generate")
        self.generate_btn.setToolTip("Write a message for the staged diff with the configured AI")
        self.generate_btn.clicked.connect(self._generate_message)
        commit_row.addWidget(self.generate_btn)
        self.commit_btn = QPushButton("Commit")
        self.commit_btn.clicked.connect(self._commit)
        commit_row.addWidget(self.commit_btn)
        side_layout.addLayout(commit_row)

        splitter.addWidget(side)
        splitter.setSizes([950, 450])

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.branch_label = QLabel()
        self.status_bar.addPermanentWidget(self.branch_label)

    def _setup_menus(self) -> None:
        """Setup menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction("&Refresh", self.refresh).setShortcut("F5")
        file_menu.addSeparator()
        file_menu.addAction("E&xit", self.close)

        view_menu = menubar.addMenu("&View")
        view_menu.addAction("&Fit Graph", self.graph_view.fit_in_view)

        remote_menu = menubar.addMenu("&Remote")
        remote_menu.addAction("&Fetch All", lambda: self._run_remote("Fetch", self.cli.fetch_all))
        remote_menu.addAction("&Pull", lambda: self._run_remote("Pull", self.cli.pull))
        remote_menu.addAction("P&ush", lambda: self._run_remote("Push", self.cli.push))

    # -- Refreshing --

    def refresh(self) -> None:
        """Reload graph, file list and branch status"""
        self.graph_view.refresh()
        self._load_status()
        self._update_branch_label()
        self.status_bar.showMessage(f"{self.graph_view.commit_count} commits", 3000)

    def _load_status(self) -> None:
        self.files_list.clear()
        try:
            files = self.repo.get_status()
        except GitError as e:
            self._show_error(str(e))
            return

        for file in files:
            marker = STATUS_MARKERS.get(file.status, "?")
            prefix = "●" if file.staged else "○"
            item = QListWidgetItem(f"{prefix} {marker}  {file.path}")
            item.setData(FILE_ROLE, file)
            self.files_list.addItem(item)

    def _update_branch_label(self) -> None:
        try:
            branch = self.repo.current_branch()
            remote = self.repo.get_remote_status()
        except GitError as e:
            logger.warning("Could not read branch status: %s", e)
            return

        text = branch
        if remote.has_remote:
            text += f"  ↑{remote.ahead} ↓{remote.behind}"
        self.branch_label.setText(text)

    def _on_repo_changed(self, change_type: str) -> None:
        logger.debug("Refreshing after %s", change_type)
        self.refresh()

    def _on_commit_selected(self, commit_hash: str) -> None:
        self.status_bar.showMessage(commit_hash)

    def _on_commit_action(self, key: str, commit_hash: str) -> None:
        """Run a context-menu action from the graph on commit_hash"""
        if key == COPY_HASH:
            QApplication.clipboard().setText(commit_hash)
            self.status_bar.showMessage(f"Copied {commit_hash}", 3000)
            return

        action = ACTIONS_BY_KEY[key]
        name = None
        if action.prompt:
            name, ok = QInputDialog.getText(self, action.title, action.prompt)
            if not ok or not name.strip():
                return
        if action.confirm:
            reply = QMessageBox.question(
                self,
                action.title,
                action.confirm,
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return

        try:
            message = run_commit_action(self.cli, key, commit_hash, name)
        except GitError as e:
            self._show_error(f"{action.title} failed:\n{e}")
            return
        self.refresh()
        self.graph_view.select_commit(commit_hash)
        self.status_bar.showMessage(message, 3000)

    # -- Staging and committing --

    def _toggle_staged(self, item: QListWidgetItem | None) -> None:
        if item is None:
            return
        file = item.data(FILE_ROLE)
        try:
            if file.staged:
                self.repo.unstage_file(file.path)
            else:
                self.repo.stage_file(file.path)
        except GitError as e:
            self._show_error(str(e))
        self._load_status()

    def _stage_all(self) -> None:
        try:
            self.repo.stage_all()
        except GitError as e:
            self._show_error(str(e))
        self._load_status()

    def _commit(self) -> None:
        message = self.message_edit.toPlainText().strip()
        if not message:
            QMessageBox.warning(self, "Commit", "Enter a commit message first.")
            return
        try:
            short_hash = self.repo.commit(message)
        except GitError as e:
            self._show_error(str(e))
            return

        self.message_edit.clear()
        self.refresh()
        self.status_bar.showMessage(f"Committed {short_hash}", 5000)

    def _generate_message(self) -> None:
        """Generate a commit message in a background thread"""
        if self._message_thread is not None:
            return

        self.generate_btn.setEnabled(False)
        self.status_bar.showMessage("Generating commit message...")

        self._message_thread = QThread()
        self._message_worker = CommitMessageWorker(self.repo.path, self.settings)
        self._message_worker.moveToThread(self._message_thread)

        self._message_worker.finished.connect(self._on_message_generated)
        self._message_worker.error.connect(self._on_message_error)
        self._message_thread.started.connect(self._message_worker.run)

        self._message_thread.start()

    def _cleanup_message_thread(self) -> None:
        if self._message_thread:
            self._message_thread.quit()
            self._message_thread.wait()
            self._message_thread = None
            self._message_worker = None
        self.generate_btn.setEnabled(True)

    def _on_message_generated(self, message: str) -> None:
        self._cleanup_message_thread()
        self.message_edit.setPlainText(message)
        self.status_bar.showMessage("Commit message generated", 3000)

    def _on_message_error(self, error_msg: str) -> None:
        self._cleanup_message_thread()
        self._show_error(f"Failed to generate commit message:\n{error_msg}")

    # -- Remotes --

    def _run_remote(self, label: str, operation: Any) -> None:
        self.status_bar.showMessage(f"{label}...")
        try:
            operation()
        except GitError as e:
            self._show_error(f"{label} failed:\n{e}")
            return
        self.refresh()
        self.status_bar.showMessage(f"{label} complete", 3000)

    def _show_error(self, message: str) -> None:
        logger.error(message)
        QMessageBox.critical(self, "Error", message)

    def closeEvent(self, event: Any) -> None:  # noqa: N802
        """Stop watching before the window goes away"""
        self.watcher.unwatch_all()
        self._cleanup_message_thread()
        super().closeEvent(event)
