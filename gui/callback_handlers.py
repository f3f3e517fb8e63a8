# gui/callback_handlers.py
"""
Module containing the slots that handle signals emitted by the GitWorker and
by the FileListStore. These update the MainWindow state and UI based on the
results of background operations.

Responsibilities include:
- Storing a loaded workspace and refreshing both file lists.
- Keeping the selected file (and the diff view) in step with list changes.
- Moving a file between the lists once staging or unstaging succeeded.
- Displaying Git and unexpected worker errors.
"""

import logging
from typing import Optional, List, Tuple, TYPE_CHECKING

# Qt Imports
from PySide6.QtWidgets import QListWidget, QListWidgetItem

# Local Application Imports
from core.diff_model import DiffFile
from core.file_list_store import FileGroup, FileListState
from core.git_handler import WorkspaceDiff
from .gui_utils import formatFileListEntry

# Type hint for MainWindow to avoid circular import issues at runtime
if TYPE_CHECKING:
	from .main_window import MainWindow

# Logger for this module
logger: logging.Logger = logging.getLogger(__name__)


# --- Helper Functions ---

def _fillList(listWidget: QListWidget, files: List[DiffFile]) -> None:
	""" Replaces the list entries without emitting selection signals. """
	listWidget.blockSignals(True)
	listWidget.clear()
	for diffFile in files:
		item = QListWidgetItem(formatFileListEntry(diffFile))
		item.setToolTip(diffFile.displayPath or "")
		listWidget.addItem(item)
	listWidget.setCurrentRow(-1)
	listWidget.blockSignals(False)


def _findSelection(window: 'MainWindow', state: FileListState) -> Optional[Tuple[FileGroup, int]]:
	"""
	Locates the previously selected path, preferring its old group. A file
	that moved to the other group stays selected there.
	"""
	if window._selectedPath is None or window._selectedGroup is None:
		return None
	otherGroup: FileGroup = FileGroup.UNSTAGED if window._selectedGroup == FileGroup.STAGED else FileGroup.STAGED
	for group in (window._selectedGroup, otherGroup):
		for index, diffFile in enumerate(state.group(group)):
			if diffFile.displayPath == window._selectedPath:
				return group, index
	return None


# --- File List Store Listener ---

def on_file_lists_changed(window: 'MainWindow', state: FileListState) -> None:
	"""
	Repopulates both file lists from a store snapshot and restores the
	selection. The diff view is refreshed for the selected file, or cleared
	if the file is no longer listed.

	Args:
		window (MainWindow): The main application window instance.
		state (FileListState): Snapshot of the staged and unstaged files.
	"""
	_fillList(window._stagedListWidget, state.staged)
	_fillList(window._unstagedListWidget, state.unstaged)
	window._stagedLabel.setText(f"Staged Changes ({len(state.staged)})")
	window._unstagedLabel.setText(f"Changes ({len(state.unstaged)})")

	selection = _findSelection(window, state)
	if selection is None:
		window._showFile(None, None)
		return

	group, index = selection
	listWidget: QListWidget = window._stagedListWidget if group == FileGroup.STAGED else window._unstagedListWidget
	listWidget.blockSignals(True)
	listWidget.setCurrentRow(index)
	listWidget.blockSignals(False)
	window._showFile(group, state.group(group)[index])


# --- Git Worker Callbacks ---

def on_workspace_loaded(window: 'MainWindow', workspace: WorkspaceDiff) -> None:
	"""
	Handles the `workspaceLoaded` signal: stores the workspace, refreshes the
	lists and remembers the folder for the next start.

	Args:
		window (MainWindow): The main application window instance.
		workspace (WorkspaceDiff): Diff data read by the GitWorker.
	"""
	logger.info(f"Workspace loaded: {workspace.rootPath} ({len(workspace.staged)} staged, {len(workspace.unstaged)} unstaged).")
	window._applyWorkspace(workspace)
	window._rememberWorkspace(workspace.rootPath)
	window._resetTaskState()
	if not workspace.staged and not workspace.unstaged:
		window._updateStatusBar("Working tree clean. No changes to display.", 5000)
	else:
		window._updateStatusBar(f"{len(workspace.staged)} staged, {len(workspace.unstaged)} unstaged file(s).", 5000)


def on_stage_finished(window: 'MainWindow', filePath: str) -> None:
	""" Moves the staged file into the staged list until the reload arrives. """
	logger.info(f"Staged '{filePath}'.")
	if not window._fileListStore.moveFile(filePath, FileGroup.STAGED):
		logger.debug(f"'{filePath}' was not in the unstaged list.")


def on_unstage_finished(window: 'MainWindow', filePath: str) -> None:
	""" Moves the unstaged file into the unstaged list until the reload arrives. """
	logger.info(f"Unstaged '{filePath}'.")
	if not window._fileListStore.moveFile(filePath, FileGroup.UNSTAGED):
		logger.debug(f"'{filePath}' was not in the staged list.")


# --- Error Handlers ---

def handle_git_error(window: 'MainWindow', errorMessage: str) -> None:
	"""
	Handles the `gitError` signal from the GitWorker.

	Args:
		window (MainWindow): The main application window instance.
		errorMessage (str): The Git error message.
	"""
	logger.error(f"Git operation failed: {errorMessage}")
	window._resetTaskState()
	window._showError("Git Error", errorMessage)
	window._updateStatusBar("Git operation failed.", 5000)


def handle_worker_error(window: 'MainWindow', errorMessage: str, workerName: str = "Worker") -> None:
	"""
	Handles unexpected errors (`errorOccurred`) raised inside a worker thread.

	Args:
		window (MainWindow): The main application window instance.
		errorMessage (str): The error message from the worker.
		workerName (str): Name of the worker, used in the dialog title.
	"""
	logger.critical(f"Unexpected error in {workerName}: {errorMessage}")
	window._resetTaskState()
	window._showError(f"{workerName} Error", f"An unexpected error occurred:\n{errorMessage}")
