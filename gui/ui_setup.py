# gui/ui_setup.py
"""
Module responsible for creating and laying out the UI widgets
for the MainWindow.
"""

import os
from PySide6.QtWidgets import (
	QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
	QLabel, QLineEdit, QPushButton, QTextEdit,
	QListWidget, QProgressBar, QStatusBar,
	QSplitter, QTabWidget
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QIcon
import logging

from .diff_view import SideBySideDiffView

logger = logging.getLogger(__name__)


def _buildFileGroup(title: str, buttonText: str, buttonTip: str) -> tuple:
	"""Creates a labelled file list with one action button underneath."""
	layout = QVBoxLayout()
	label = QLabel(title)
	listWidget = QListWidget()
	listWidget.setSelectionMode(QListWidget.SelectionMode.SingleSelection)
	button = QPushButton(buttonText)
	button.setToolTip(buttonTip)
	layout.addWidget(label)
	layout.addWidget(listWidget, 1)
	layout.addWidget(button)
	container = QWidget()
	container.setLayout(layout)
	return container, label, listWidget, button


def setup_ui(window: QMainWindow) -> None:
	"""
	Sets up the user interface layout and widgets for the main window.
	Expects `window._diffViewSettings` to be set before it is called.

	Args:
		window: The QMainWindow instance to set up.
	"""
	logger.debug("Setting up UI elements.")
	window.setWindowTitle("Best Diff")
	iconPath = os.path.join('resources', 'app_icon.png')
	if os.path.exists(iconPath):
		window.setWindowIcon(QIcon(iconPath))
	else:
		logger.debug(f"Application icon not found at: {iconPath}")

	window._centralWidget = QWidget()
	window.setCentralWidget(window._centralWidget)
	window._mainLayout = QVBoxLayout(window._centralWidget)

	# --- Top: Workspace Input and Controls ---
	workspaceLayout = QHBoxLayout()
	workspaceLabel = QLabel("Workspace:")
	window._workspaceInput = QLineEdit()
	window._workspaceInput.setPlaceholderText("/path/to/git/working/tree")
	window._workspaceInput.setToolTip("Root folder of the Git repository whose changes should be shown.")
	window._browseButton = QPushButton("Browse...")
	window._browseButton.setToolTip("Browse for a repository folder.")
	window._openWorkspaceButton = QPushButton("Open")
	window._openWorkspaceButton.setToolTip("Load staged and unstaged changes of the workspace.")
	window._reloadButton = QPushButton("Reload")
	window._reloadButton.setToolTip("Read the workspace changes again.")
	window._openPatchButton = QPushButton("Open Patch...")
	window._openPatchButton.setToolTip("Show the changes of a .diff or .patch file.")
	window._compareFilesButton = QPushButton("Compare Files...")
	window._compareFilesButton.setToolTip("Show the differences between two text files.")
	workspaceLayout.addWidget(workspaceLabel)
	workspaceLayout.addWidget(window._workspaceInput, 1)
	workspaceLayout.addWidget(window._browseButton)
	workspaceLayout.addWidget(window._openWorkspaceButton)
	workspaceLayout.addWidget(window._reloadButton)
	workspaceLayout.addWidget(window._openPatchButton)
	workspaceLayout.addWidget(window._compareFilesButton)
	window._mainLayout.addLayout(workspaceLayout)

	mainSplitter = QSplitter(Qt.Orientation.Horizontal)

	# --- Left: Staged / Unstaged file lists ---
	fileSplitter = QSplitter(Qt.Orientation.Vertical)
	stagedContainer, window._stagedLabel, window._stagedListWidget, window._unstageButton = _buildFileGroup(
		"Staged Changes", "Unstage", "Remove the selected file from the index (git reset -- <path>).")
	unstagedContainer, window._unstagedLabel, window._unstagedListWidget, window._stageButton = _buildFileGroup(
		"Changes", "Stage", "Add the selected file to the index (git add -- <path>).")
	fileSplitter.addWidget(stagedContainer)
	fileSplitter.addWidget(unstagedContainer)
	mainSplitter.addWidget(fileSplitter)

	# --- Right: Diff and Log tabs ---
	window._tabWidget = QTabWidget()

	diffWidget = QWidget()
	diffLayout = QVBoxLayout(diffWidget)
	diffLayout.setContentsMargins(0, 0, 0, 0)
	window._diffHeaderLabel = QLabel("")
	window._diffHeaderLabel.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
	window._diffView = SideBySideDiffView(settings=window._diffViewSettings)
	window._diffView.setToolTip("N / Alt+Down: next change. P / Alt+Up: previous change.")
	diffLayout.addWidget(window._diffHeaderLabel)
	diffLayout.addWidget(window._diffView, 1)
	window._tabWidget.addTab(diffWidget, "Side-by-Side Diff")

	window._appLogArea = QTextEdit()
	window._appLogArea.setReadOnly(True)
	window._appLogArea.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
	logFont = QFont("monospace")
	logFont.setPointSize(10)
	window._appLogArea.setFont(logFont)
	window._appLogArea.setToolTip("Shows detailed application logs, including errors and status updates.")
	window._tabWidget.addTab(window._appLogArea, "Application Log")

	mainSplitter.addWidget(window._tabWidget)
	mainSplitter.setSizes([280, 920])
	window._mainLayout.addWidget(mainSplitter, stretch=1)

	# --- Status Bar ---
	window._statusBar = QStatusBar()
	window.setStatusBar(window._statusBar)
	window._progressBar = QProgressBar()
	window._progressBar.setVisible(False)
	window._progressBar.setTextVisible(True)
	window._progressBar.setRange(0, 100)
	window._progressBar.setValue(0)
	window._progressBar.setFormat("%p%")
	window._statusBar.addPermanentWidget(window._progressBar)

	logger.debug("UI setup complete.")
