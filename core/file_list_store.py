# core/file_list_store.py
"""
Keeps the staged and unstaged file groups shown in the file list and
notifies listeners whenever they change.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .diff_model import DiffFile

# Logger instance specific to this module
logger: logging.Logger = logging.getLogger(__name__)


class FileGroup(str, Enum):
	STAGED = "staged"
	UNSTAGED = "unstaged"


@dataclass
class FileListState:
	staged: List[DiffFile] = field(default_factory=list)
	unstaged: List[DiffFile] = field(default_factory=list)

	def copy(self: 'FileListState') -> 'FileListState':
		"""Shallow copy with fresh lists, so callers cannot alter the store."""
		return FileListState(staged=list(self.staged), unstaged=list(self.unstaged))

	def group(self: 'FileListState', fileGroup: FileGroup) -> List[DiffFile]:
		return self.staged if fileGroup == FileGroup.STAGED else self.unstaged


FileListListener = Callable[[FileListState], None]


class FileListStore:
	"""
	Observable container of the two file groups.

	Every mutation emits a snapshot of the new state to each registered
	listener. Snapshots are copies; mutating them has no effect on the store.
	"""

	def __init__(self: 'FileListStore', initial: Optional[FileListState] = None) -> None:
		self._state: FileListState = (initial or FileListState()).copy()
		self._listeners: List[FileListListener] = []

	def getState(self: 'FileListStore') -> FileListState:
		return self._state.copy()

	def setFiles(self: 'FileListStore', files: List[DiffFile]) -> None:
		"""Replaces the contents with `files` as unstaged and clears the staged group."""
		self._state = FileListState(staged=[], unstaged=list(files))
		self._emit()

	def setGroups(self: 'FileListStore', staged: List[DiffFile], unstaged: List[DiffFile]) -> None:
		"""Replaces both groups at once, e.g. after a workspace reload."""
		self._state = FileListState(staged=list(staged), unstaged=list(unstaged))
		self._emit()

	def moveFile(self: 'FileListStore', filePath: str, target: FileGroup) -> bool:
		"""
		Moves the file matching `filePath` into the `target` group.

		A file matches when either its new or old path equals `filePath`. It is
		not appended again if the target already holds a file with the same
		old and new paths.

		Args:
			filePath (str): Path of the file to move.
			target (FileGroup): Destination group.

		Returns:
			bool: True if a file was moved (and listeners notified), False if no
				  file with that path exists in the source group.
		"""
		source = self._state.group(FileGroup.UNSTAGED if target == FileGroup.STAGED else FileGroup.STAGED)
		destination = self._state.group(target)
		index = next((i for i, f in enumerate(source) if filePath in (f.newPath, f.oldPath)), -1)
		if index == -1:
			logger.debug(f"moveFile: '{filePath}' not found outside group '{target.value}'.")
			return False

		movedFile = source.pop(index)
		if not any(f.newPath == movedFile.newPath and f.oldPath == movedFile.oldPath for f in destination):
			destination.append(movedFile)
		logger.debug(f"Moved '{filePath}' to {target.value}.")
		self._emit()
		return True

	def onChange(self: 'FileListStore', listener: FileListListener) -> Callable[[], None]:
		"""
		Registers a listener called with a state snapshot after each change.

		Returns:
			Callable[[], None]: Function that unregisters the listener again.
		"""
		self._listeners.append(listener)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	def _emit(self: 'FileListStore') -> None:
		snapshot = self.getState()
		for listener in list(self._listeners):
			listener(snapshot)
