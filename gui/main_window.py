# gui/main_window.py
"""
Main application window module for the GUI application.

Holds the application state (open workspace, file lists, file contents),
sets up GUI logging, and wires the widgets, the Git worker thread and the
handler modules together.
"""

# Standard library imports
import os
import logging
from typing import Optional, Dict, List, Any

# Qt imports
from PySide6.QtWidgets import QMainWindow, QWidget, QMessageBox
from PySide6.QtCore import Slot, Signal, QEvent, QTimer

# Local Core/Util imports
from core.config_manager import ConfigManager, DiffViewSettings, SECTION_LOGGING
from core.diff_model import DiffFile
from core.exceptions import ConfigurationError
from core.file_list_store import FileGroup, FileListStore
from core.git_handler import EMPTY_CONTENTS, ContentsKey, FileContents, WorkspaceDiff
from core.line_map import buildLineMap
from gui.gui_utils import QtLogHandler, SOURCE_NONE, SOURCE_WORKSPACE
from utils.logger_setup import parseLogLevel

# Local GUI module imports
from . import ui_setup
from . import signal_connections
from . import event_handlers
from .threads import GitWorker

# Initialise logging for this module
logger: logging.Logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
	"""
	Main application window class.

	Shows the staged and unstaged changes of a Git workspace (or the files of
	a patch, or a two-file comparison) and the side-by-side diff of the
	selected file.
	"""

	# Signal emitted to send log messages to the GUI's log area
	signalLogMessage: Signal = Signal(str)

	def __init__(self: 'MainWindow', configManager: ConfigManager, parent: Optional[QWidget] = None) -> None:
		"""
		Initialise the main window.

		Args:
			configManager (ConfigManager): Instance for managing application configuration.
			parent (Optional[QWidget]): Optional parent widget. Defaults to None.
		"""
		super().__init__(parent)
		logger.info("Initialising MainWindow...")
		self._configManager: ConfigManager = configManager

		# --- State Variables ---
		self._workspacePath: Optional[str] = None
		self._sourceMode: str = SOURCE_NONE
		self._fileContents: Dict[ContentsKey, FileContents] = {}
		self._fileListStore: FileListStore = FileListStore()
		self._selectedGroup: Optional[FileGroup] = None
		self._selectedPath: Optional[str] = None
		self._isBusy: bool = False

		try:
			self._diffViewSettings: DiffViewSettings = self._configManager.getDiffViewSettings()
		except ConfigurationError as e:
			logger.warning(f"Invalid [DiffView] settings, using defaults: {e}")
			self._diffViewSettings = DiffViewSettings()

		# --- Initialise UI Elements ---
		ui_setup.setup_ui(self)

		# --- Initialise Background Workers ---
		self._gitWorker: GitWorker = GitWorker(parent=self)

		# --- Connect Signals and Slots ---
		signal_connections.connect_signals(self)

		# --- Setup GUI Logging Handler ---
		self._setupGuiLogging()

		self._updateWidgetStates()
		self._loadInitialSettings()
		logger.info("MainWindow initialisation complete.")

	# --- Settings ---
	def _loadInitialSettings(self: 'MainWindow') -> None:
		""" Fills in the startup workspace and opens it once the event loop runs. """
		try:
			startupWorkspace: Optional[str] = self._configManager.getStartupWorkspace()
		except ConfigurationError as e:
			logger.warning(f"Could not determine startup workspace: {e}")
			return
		if startupWorkspace and startupWorkspace.strip():
			self._workspaceInput.setText(startupWorkspace.strip())
			logger.info(f"Startup workspace: {startupWorkspace}")
			if os.path.isdir(startupWorkspace.strip()):
				QTimer.singleShot(0, lambda: event_handlers.handle_open_workspace(self))

	def _rememberWorkspace(self: 'MainWindow', workspacePath: str) -> None:
		try:
			self._configManager.rememberWorkspace(workspacePath)
		except ConfigurationError as e:
			logger.error(f"Failed to save 'LastWorkspacePath' to configuration: {e}")

	# --- GUI Logging Setup ---
	def _setupGuiLogging(self: 'MainWindow') -> None:
		""" Configures and adds the custom QtLogHandler to the root logger. """
		try:
			guiHandler: QtLogHandler = QtLogHandler(signal_emitter=self.signalLogMessage.emit, parent=self)
			guiLogLevel: int = parseLogLevel(self._configManager.getConfigValue(SECTION_LOGGING, 'GuiLogLevel', fallback='INFO'))
			logFormat: str = self._configManager.getConfigValue(SECTION_LOGGING, 'GuiLogFormat', fallback='%(asctime)s - %(levelname)s - %(message)s')
			dateFormat: str = self._configManager.getConfigValue(SECTION_LOGGING, 'GuiLogDateFormat', fallback='%H:%M:%S')
			guiHandler.setLevel(guiLogLevel)
			guiHandler.setFormatter(logging.Formatter(logFormat, datefmt=dateFormat))
			logging.getLogger().addHandler(guiHandler)
			self._guiLogHandler = guiHandler
			logger.info(f"GUI logging handler added with level {logging.getLevelName(guiLogLevel)}.")
		except ConfigurationError as e:
			logger.error(f"Configuration error setting up GUI logging: {e}")

	# --- Core State and UI Update Methods ---
	def _updateWidgetStates(self: 'MainWindow') -> None:
		""" Enables or disables widgets based on the busy flag and the current source. """
		notBusy: bool = not self._isBusy
		isWorkspace: bool = self._sourceMode == SOURCE_WORKSPACE and bool(self._workspacePath)
		self._workspaceInput.setEnabled(notBusy)
		self._browseButton.setEnabled(notBusy)
		self._openWorkspaceButton.setEnabled(notBusy)
		self._reloadButton.setEnabled(notBusy and isWorkspace)
		self._openPatchButton.setEnabled(notBusy)
		self._compareFilesButton.setEnabled(notBusy)
		self._stageButton.setEnabled(notBusy and isWorkspace and self._unstagedListWidget.currentRow() >= 0)
		self._unstageButton.setEnabled(notBusy and isWorkspace and self._stagedListWidget.currentRow() >= 0)

	def _setBusy(self: 'MainWindow', busy: bool) -> None:
		self._isBusy = busy
		self._updateWidgetStates()

	def _resetTaskState(self: 'MainWindow') -> None:
		""" Resets the busy flag, progress and status after a task. """
		logger.debug("Resetting application task state (busy=False).")
		self._setBusy(False)
		self._updateProgress(101, "")
		self._updateStatusBar("Idle.")

	def _setFileSource(self: 'MainWindow', mode: str, staged: List[DiffFile], unstaged: List[DiffFile], contents: Dict[ContentsKey, FileContents]) -> None:
		"""
		Replaces the listed files and their contents. The store notifies the
		lists, which then restore the previous selection if it still exists.
		"""
		self._sourceMode = mode
		self._fileContents = contents
		if mode == SOURCE_WORKSPACE:
			self._fileListStore.setGroups(staged, unstaged)
		else:
			self._fileListStore.setFiles(unstaged)
		self._updateWidgetStates()

	def _applyWorkspace(self: 'MainWindow', workspace: WorkspaceDiff) -> None:
		self._workspacePath = workspace.rootPath
		self._setFileSource(SOURCE_WORKSPACE, workspace.staged, workspace.unstaged, workspace.fileContents)

	def _showFile(self: 'MainWindow', group: Optional[FileGroup], diffFile: Optional[DiffFile]) -> None:
		""" Shows one file in the diff view, or clears the view for None. """
		self._selectedGroup = group if diffFile is not None else None
		self._selectedPath = diffFile.displayPath if diffFile is not None else None
		if diffFile is None:
			self._diffHeaderLabel.setText("")
			self._diffView.clearDiff()
		else:
			contents: FileContents = self._fileContents.get((group, diffFile.displayPath or ""), EMPTY_CONTENTS)
			self._diffHeaderLabel.setText(f"{diffFile.displayPath}  [{diffFile.status.value}]  {buildLineMap(diffFile).summary()}")
			self._diffView.setDiff(diffFile, contents.oldLines, contents.newLines)
			self._diffView.setFocus()
		self._updateWidgetStates()

	@Slot(int, str)
	def _updateProgress(self: 'MainWindow', value: int, message: str) -> None:
		"""
		Updates the progress bar.

		Args:
			value (int): Progress percentage (0-100), -1 for indeterminate, >100 to hide.
			message (str): Text message to display alongside progress.
		"""
		if value == -1:
			self._progressBar.setVisible(True)
			self._progressBar.setRange(0, 0)
			self._progressBar.setFormat(message or "Working...")
		elif 0 <= value <= 100:
			self._progressBar.setVisible(True)
			self._progressBar.setRange(0, 100)
			self._progressBar.setValue(value)
			self._progressBar.setFormat(f"{message} (%p%)" if message else "%p%")
		else:
			self._progressBar.setVisible(False)
			self._progressBar.setRange(0, 100)
			self._progressBar.setValue(0)
			self._progressBar.setFormat("%p%")

	@Slot(str, int)
	def _updateStatusBar(self: 'MainWindow', message: str, timeout: int = 0) -> None:
		self._statusBar.showMessage(message, timeout)

	@Slot(str)
	def _appendLogMessage(self: 'MainWindow', message: str) -> None:
		self._appLogArea.append(message)

	# --- Message Box Convenience Methods ---
	def _showError(self: 'MainWindow', title: str, message: str) -> None:
		""" Displays a critical error message box. """
		logger.error(f"Displaying Error Dialog - Title: '{title}', Message: '{message}'")
		QMessageBox.critical(self, title, str(message))

	def _showWarning(self: 'MainWindow', title: str, message: str) -> None:
		logger.warning(f"Displaying Warning Dialog - Title: '{title}', Message: '{message}'")
		QMessageBox.warning(self, title, str(message))

	def _showInfo(self: 'MainWindow', title: str, message: str) -> None:
		logger.info(f"Displaying Info Dialog - Title: '{title}', Message: '{message}'")
		QMessageBox.information(self, title, str(message))

	# --- Window Close Event ---
	def closeEvent(self: 'MainWindow', event: QEvent) -> None:
		""" Handles the window close event, asking first if a Git task is running. """
		if self._isBusy:
			reply: QMessageBox.StandardButton = QMessageBox.question(
				self, 'Confirm Exit',
				"A Git task is currently running.\nAre you sure you want to exit?",
				QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
				QMessageBox.StandardButton.Cancel
			)
			if reply == QMessageBox.StandardButton.Cancel:
				event.ignore()
				return

		logger.info("Attempting graceful shutdown of worker threads...")
		self._stop_worker_threads()
		if getattr(self, '_guiLogHandler', None) is not None:
			logging.getLogger().removeHandler(self._guiLogHandler)
		super().closeEvent(event)

	def _stop_worker_threads(self: 'MainWindow') -> None:
		""" Waits briefly for running worker threads to finish. """
		workers: List[Any] = [self._gitWorker]
		for worker in workers:
			if worker.isRunning():
				workerName: str = worker.__class__.__name__
				logger.debug(f"Requesting stop for {workerName}...")
				worker.requestInterruption()
				if not worker.wait(2000):
					logger.warning(f"{workerName} did not finish after interruption request and wait.")
