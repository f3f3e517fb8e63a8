# gui/event_handlers.py
"""
Module containing the primary event handling slots for user interactions
in the MainWindow (e.g., button clicks, selection changes).
These functions are typically connected to widget signals (like `clicked`).
"""

import logging
import os
from typing import Optional, Dict, List, TYPE_CHECKING

# Qt Imports
from PySide6.QtWidgets import QFileDialog, QListWidget

# Local Imports
from core.diff_model import DiffFile, DiffParseResult
from core.diff_parser import parseUnifiedDiff
from core.diff_sources import PatchFileDiffSource, TwoFileDiffSource, splitContentLines
from core.exceptions import FileProcessingError
from core.file_list_store import FileGroup
from core.git_handler import ContentsKey, FileContents
from .gui_utils import SOURCE_COMPARE, SOURCE_PATCH, SOURCE_WORKSPACE

# Type hint for MainWindow to avoid circular import issues at runtime
if TYPE_CHECKING:
	from .main_window import MainWindow

# Logger for this module
logger: logging.Logger = logging.getLogger(__name__)

PATCH_FILE_FILTER: str = "Patch files (*.diff *.patch);;All files (*)"


# --- Workspace Handlers ---

def handle_browse_workspace(window: 'MainWindow') -> None:
	"""
	Handles the 'Browse...' button click. Opens a directory selection dialog
	and puts the chosen folder into the workspace input field.

	Args:
		window (MainWindow): The main application window instance.
	"""
	startDir: str = window._workspaceInput.text().strip() or os.path.expanduser("~")
	directory: str = QFileDialog.getExistingDirectory(window, "Select Git Working Tree", startDir)
	if directory:
		window._workspaceInput.setText(directory)


def handle_open_workspace(window: 'MainWindow') -> None:
	"""
	Handles the 'Open' button (and Return in the workspace field).
	Validates the folder and starts the GitWorker to read its staged and
	unstaged changes.

	Args:
		window (MainWindow): The main application window instance.
	"""
	if window._isBusy:
		window._showWarning("Busy", "Another task is currently running. Please wait.")
		return

	workspacePath: str = window._workspaceInput.text().strip()
	if not workspacePath:
		window._showError("Workspace Missing", "Please enter or select the folder of a Git working tree.")
		return
	if not os.path.isdir(workspacePath):
		window._showError("Invalid Workspace", f"The folder does not exist:\n{workspacePath}")
		return

	workspacePath = os.path.abspath(workspacePath)
	logger.info(f"Opening workspace: {workspacePath}")
	window._workspacePath = workspacePath
	window._setBusy(True)
	window._updateStatusBar(f"Opening workspace '{workspacePath}'...")
	window._gitWorker.startLoadWorkspace(workspacePath)


def handle_reload_workspace(window: 'MainWindow') -> None:
	""" Reads the changes of the current workspace again. """
	if window._isBusy:
		window._showWarning("Busy", "Another task is currently running. Please wait.")
		return
	if not window._workspacePath:
		window._showWarning("No Workspace", "Open a workspace before reloading.")
		return
	logger.info(f"Reloading workspace: {window._workspacePath}")
	window._setBusy(True)
	window._gitWorker.startLoadWorkspace(window._workspacePath)


# --- Patch / File Comparison Handlers ---

def handle_open_patch(window: 'MainWindow') -> None:
	"""
	Handles the 'Open Patch...' button click. Parses the chosen unified diff
	file and lists its files. No full file contents are known for a patch, so
	only the hunks are shown.

	Args:
		window (MainWindow): The main application window instance.
	"""
	if window._isBusy:
		window._showWarning("Busy", "Another task is currently running. Please wait.")
		return
	startDir: str = window._workspacePath or os.path.expanduser("~")
	patchPath, _ = QFileDialog.getOpenFileName(window, "Open Patch File", startDir, PATCH_FILE_FILTER)
	if not patchPath:
		return

	try:
		source: PatchFileDiffSource = PatchFileDiffSource.fromFile(patchPath)
	except FileProcessingError as e:
		window._showError("Patch Error", str(e))
		return

	result: DiffParseResult = parseUnifiedDiff(source.getRawDiff())
	if not result.files:
		window._showWarning("Empty Patch", f"No file changes were found in:\n{patchPath}")
	window._setFileSource(SOURCE_PATCH, [], result.files, {})
	window._updateStatusBar(f"Loaded {len(result.files)} file(s) from '{os.path.basename(patchPath)}'.", 5000)


def handle_compare_files(window: 'MainWindow') -> None:
	"""
	Handles the 'Compare Files...' button click. Asks for an old and a new
	file and shows their differences with the full contents of both files.

	Args:
		window (MainWindow): The main application window instance.
	"""
	if window._isBusy:
		window._showWarning("Busy", "Another task is currently running. Please wait.")
		return
	startDir: str = window._workspacePath or os.path.expanduser("~")
	oldFilePath, _ = QFileDialog.getOpenFileName(window, "Select Old File (left)", startDir)
	if not oldFilePath:
		return
	newFilePath, _ = QFileDialog.getOpenFileName(window, "Select New File (right)", os.path.dirname(oldFilePath))
	if not newFilePath:
		return

	displayPath: str = os.path.basename(newFilePath)
	try:
		source: TwoFileDiffSource = TwoFileDiffSource.fromFiles(oldFilePath, newFilePath, displayPath=displayPath)
	except FileProcessingError as e:
		window._showError("Compare Error", str(e))
		return

	result: DiffParseResult = parseUnifiedDiff(source.getRawDiff())
	# Compared files are listed in the unstaged group
	contents: Dict[ContentsKey, FileContents] = {}
	for diffFile in result.files:
		contents[(FileGroup.UNSTAGED, diffFile.displayPath or displayPath)] = FileContents(
			splitContentLines(source.oldContent),
			splitContentLines(source.newContent),
		)
	logger.info(f"Comparing '{oldFilePath}' with '{newFilePath}'.")
	window._setFileSource(SOURCE_COMPARE, [], result.files, contents)
	if result.files:
		window._unstagedListWidget.setCurrentRow(0)


# --- File List Handlers ---

def _listFor(window: 'MainWindow', staged: bool) -> QListWidget:
	return window._stagedListWidget if staged else window._unstagedListWidget


def handle_file_selected(window: 'MainWindow', row: int, staged: bool) -> None:
	"""
	Handles a selection change in one of the file lists. Clears the selection
	of the other list and shows the selected file in the diff view.

	Args:
		window (MainWindow): The main application window instance.
		row (int): Selected row, or -1 when the selection was cleared.
		staged (bool): True for the staged list, False for the unstaged list.
	"""
	group: FileGroup = FileGroup.STAGED if staged else FileGroup.UNSTAGED
	files: List[DiffFile] = window._fileListStore.getState().group(group)
	if row < 0 or row >= len(files):
		if window._selectedGroup == group:
			window._showFile(None, None)
		return

	otherList: QListWidget = _listFor(window, not staged)
	otherList.blockSignals(True)
	otherList.setCurrentRow(-1)
	otherList.blockSignals(False)

	diffFile: DiffFile = files[row]
	logger.debug(f"Showing {group.value} file '{diffFile.displayPath}'.")
	window._showFile(group, diffFile)


def _selectedFile(window: 'MainWindow', staged: bool) -> Optional[DiffFile]:
	group: FileGroup = FileGroup.STAGED if staged else FileGroup.UNSTAGED
	row: int = _listFor(window, staged).currentRow()
	files: List[DiffFile] = window._fileListStore.getState().group(group)
	if row < 0 or row >= len(files):
		return None
	return files[row]


def handle_stage_selected(window: 'MainWindow') -> None:
	""" Runs `git add -- <path>` for the selected unstaged file. """
	_runIndexCommand(window, staged=False)


def handle_unstage_selected(window: 'MainWindow') -> None:
	""" Runs `git reset -- <path>` for the selected staged file. """
	_runIndexCommand(window, staged=True)


def _runIndexCommand(window: 'MainWindow', staged: bool) -> None:
	if window._isBusy:
		window._showWarning("Busy", "Another task is currently running. Please wait.")
		return
	if not window._workspacePath or window._sourceMode != SOURCE_WORKSPACE:
		window._showWarning("No Workspace", "Staging is only available for an open Git workspace.")
		return
	diffFile: Optional[DiffFile] = _selectedFile(window, staged)
	filePath: Optional[str] = diffFile.displayPath if diffFile is not None else None
	if not filePath:
		window._showWarning("No File Selected", "Select a file in the list first.")
		return

	# A rename touches the index entries of both paths
	oldPath: Optional[str] = diffFile.oldPath if diffFile.oldPath != filePath else None
	window._setBusy(True)
	if staged:
		logger.info(f"Unstaging '{filePath}' in '{window._workspacePath}'.")
		window._gitWorker.startUnstageFile(window._workspacePath, filePath, oldPath)
	else:
		logger.info(f"Staging '{filePath}' in '{window._workspacePath}'.")
		window._gitWorker.startStageFile(window._workspacePath, filePath, oldPath)
