"""
Threading module for background Git operations in the GUI application.
Keeps `git diff` / `git show` / `git add` off the GUI thread so the event loop
never blocks on the repository.

Features:
- Base worker thread with common signal handling
- Git worker for loading a workspace diff and staging/unstaging files

Each worker emits signals to update the GUI about progress and completion status.
"""

# Standard library imports
import logging
from typing import Optional, Any

# Qt imports
from PySide6.QtCore import QThread, Signal, Slot

# Local imports
from core.git_handler import GitHandler
from core.exceptions import GitError

# Initialize logging
logger: logging.Logger = logging.getLogger(__name__)


class BaseWorker(QThread):
    """
    Base class for worker threads providing common functionality and signals.

    Only one task runs at a time; start requests while a task is running are
    ignored with a warning.

    Signals:
        progressUpdate (int, str): Emitted to update progress percentage and message
        statusUpdate (str): Emitted to update status message
        errorOccurred (str): Emitted when an unexpected error occurs
    """

    progressUpdate = Signal(int, str)
    statusUpdate = Signal(str)
    errorOccurred = Signal(str)

    def __init__(self: 'BaseWorker', parent: Optional[Any] = None) -> None:
        super().__init__(parent)
        self._task: Optional[str] = None
        self._args: list = []
        self._kwargs: dict = {}
        self._isRunning = False

    @property
    def isBusy(self: 'BaseWorker') -> bool:
        return self._isRunning

    def setTask(self: 'BaseWorker', taskName: str, args: list, kwargs: dict) -> None:
        self._task = taskName
        self._args = args
        self._kwargs = kwargs

    def start(self, priority=QThread.Priority.InheritPriority) -> None:
        if self._isRunning:
            logger.warning(f"{self.__class__.__name__} already running. Ignoring start request.")
            return
        self._isRunning = True
        super().start(priority)

    def run(self: 'BaseWorker') -> None:
        if not self._task:
            logger.warning(f"{self.__class__.__name__} started without a task.")
            self.errorOccurred.emit(f"{self.__class__.__name__} started without task.")
            self._isRunning = False
            return
        try:
            self._executeTask()
        except Exception as e:
            logger.critical(f"Unhandled exception in {self.__class__.__name__} task '{self._task}': {e}", exc_info=True)
            self.errorOccurred.emit(f"Critical internal error in {self.__class__.__name__}: {e}")
        finally:
            self._task = None
            self._isRunning = False
            try:
                self.progressUpdate.emit(101, "")
                self.statusUpdate.emit("Idle.")
            except RuntimeError as e:
                logger.error(f"Error emitting final signals in {self.__class__.__name__}: {e}")

    def _executeTask(self: 'BaseWorker') -> None:
        raise NotImplementedError("Subclasses must implement _executeTask.")


class GitWorker(BaseWorker):
    """
    Worker thread for Git operations on the open workspace.

    Staging and unstaging reload the workspace in the same task, so the file
    lists always reflect the repository after the change.

    Signals:
        workspaceLoaded (object): WorkspaceDiff of the loaded workspace
        stageFinished (str): Path that was staged
        unstageFinished (str): Path that was unstaged
        gitError (str): Git-specific error message
    """

    workspaceLoaded = Signal(object)
    stageFinished = Signal(str)
    unstageFinished = Signal(str)
    gitError = Signal(str)

    def __init__(self: 'GitWorker', parent: Optional[Any] = None, handler: Optional[GitHandler] = None) -> None:
        super().__init__(parent)
        self._handler: GitHandler = handler or GitHandler()

    @Slot(str)
    def startLoadWorkspace(self: 'GitWorker', rootPath: str) -> None:
        if self._isRunning:
            logger.warning("GitWorker busy. Ignoring workspace load request.")
            return
        self.setTask('loadWorkspace', [rootPath], {})
        self.start()

    @Slot(str, str)
    def startStageFile(self: 'GitWorker', rootPath: str, filePath: str, oldPath: Optional[str] = None) -> None:
        if self._isRunning:
            logger.warning("GitWorker busy. Ignoring stage request.")
            return
        self.setTask('stage', [rootPath, filePath, oldPath], {})
        self.start()

    @Slot(str, str)
    def startUnstageFile(self: 'GitWorker', rootPath: str, filePath: str, oldPath: Optional[str] = None) -> None:
        if self._isRunning:
            logger.warning("GitWorker busy. Ignoring unstage request.")
            return
        self.setTask('unstage', [rootPath, filePath, oldPath], {})
        self.start()

    def _executeTask(self: 'GitWorker') -> None:
        try:
            if self._task == 'loadWorkspace':
                self._loadWorkspace(self._args[0])
            elif self._task == 'stage':
                rootPath, filePath, oldPath = self._args
                self.statusUpdate.emit(f"Staging '{filePath}'...")
                self.progressUpdate.emit(-1, "Staging...")
                self._handler.stageFile(rootPath, filePath, oldPath)
                self.stageFinished.emit(filePath)
                self._loadWorkspace(rootPath)
            elif self._task == 'unstage':
                rootPath, filePath, oldPath = self._args
                self.statusUpdate.emit(f"Unstaging '{filePath}'...")
                self.progressUpdate.emit(-1, "Unstaging...")
                self._handler.unstageFile(rootPath, filePath, oldPath)
                self.unstageFinished.emit(filePath)
                self._loadWorkspace(rootPath)
            else:
                errMsg: str = f"Unknown GitWorker task: {self._task}"
                logger.error(errMsg)
                self.errorOccurred.emit(errMsg)
        except GitError as e:
            logger.error(f"Git task '{self._task}' failed: {e}", exc_info=False)
            self.gitError.emit(str(e))

    def _loadWorkspace(self: 'GitWorker', rootPath: str) -> None:
        self.statusUpdate.emit(f"Loading changes in '{rootPath}'...")
        self.progressUpdate.emit(-1, "Reading git diff...")
        workspace = self._handler.loadWorkspaceDiff(rootPath)
        self.workspaceLoaded.emit(workspace)
