# gui/signal_connections.py
"""
Module responsible for connecting signals to slots in the MainWindow.
"""

import logging

from . import event_handlers
from . import callback_handlers

logger = logging.getLogger(__name__)

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .main_window import MainWindow

def connect_signals(window: 'MainWindow') -> None:
	"""
	Connects all signals to their corresponding slots in the application.

	Args:
		window: The MainWindow instance whose signals/slots need connecting.
	"""
	logger.debug("Connecting signals to slots.")

	# --- Internal Window Signals ---
	window.signalLogMessage.connect(window._appendLogMessage)

	# --- Workspace controls ---
	window._browseButton.clicked.connect(lambda: event_handlers.handle_browse_workspace(window))
	window._openWorkspaceButton.clicked.connect(lambda: event_handlers.handle_open_workspace(window))
	window._workspaceInput.returnPressed.connect(lambda: event_handlers.handle_open_workspace(window))
	window._reloadButton.clicked.connect(lambda: event_handlers.handle_reload_workspace(window))
	window._openPatchButton.clicked.connect(lambda: event_handlers.handle_open_patch(window))
	window._compareFilesButton.clicked.connect(lambda: event_handlers.handle_compare_files(window))

	# --- File lists ---
	window._stagedListWidget.currentRowChanged.connect(lambda row: event_handlers.handle_file_selected(window, row, staged=True))
	window._unstagedListWidget.currentRowChanged.connect(lambda row: event_handlers.handle_file_selected(window, row, staged=False))
	window._stageButton.clicked.connect(lambda: event_handlers.handle_stage_selected(window))
	window._unstageButton.clicked.connect(lambda: event_handlers.handle_unstage_selected(window))
	window._fileListStore.onChange(lambda state: callback_handlers.on_file_lists_changed(window, state))

	# --- Diff view ---
	window._diffView.changeNavigated.connect(lambda index, total: window._updateStatusBar(f"Change {index} of {total}", 3000))

	# --- Git Worker ---
	window._gitWorker.statusUpdate.connect(window._updateStatusBar)
	window._gitWorker.progressUpdate.connect(window._updateProgress)
	window._gitWorker.errorOccurred.connect(lambda msg: callback_handlers.handle_worker_error(window, msg, "GitWorker"))
	window._gitWorker.gitError.connect(lambda msg: callback_handlers.handle_git_error(window, msg))
	window._gitWorker.workspaceLoaded.connect(lambda workspace: callback_handlers.on_workspace_loaded(window, workspace))
	window._gitWorker.stageFinished.connect(lambda path: callback_handlers.on_stage_finished(window, path))
	window._gitWorker.unstageFinished.connect(lambda path: callback_handlers.on_unstage_finished(window, path))

	logger.debug("Signal connections established.")
