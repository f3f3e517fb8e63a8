# gui/gui_utils.py
"""
GUI helpers: the logging handler that feeds the "Application Log" tab and
the text shown for each file in the staged/unstaged lists.
"""

import logging
import sys
from typing import Callable, Optional
from PySide6.QtCore import QObject

from core.diff_model import DiffFile, FileStatus
from core.line_map import buildLineMap

STATUS_MARKERS = {
	FileStatus.ADDED: "A",
	FileStatus.MODIFIED: "M",
	FileStatus.DELETED: "D",
}

# Where the currently listed files came from
SOURCE_NONE: str = "none"
SOURCE_WORKSPACE: str = "workspace"
SOURCE_PATCH: str = "patch"
SOURCE_COMPARE: str = "compare"


class QtLogHandler(logging.Handler, QObject):
	"""
	Logging handler that passes formatted records to a callable, normally the
	`emit` of a Qt signal, so records reach the GUI thread through a queued
	connection.
	"""
	_signal_emitter: Optional[Callable[[str], None]] = None

	def __init__(self: 'QtLogHandler', signal_emitter: Optional[Callable[[str], None]] = None, parent: Optional[QObject] = None) -> None:
		"""
		Args:
			signal_emitter (Optional[Callable[[str], None]]): Called with each formatted message.
			parent (QObject, optional): Parent QObject. Defaults to None.
		"""
		logging.Handler.__init__(self)
		QObject.__init__(self, parent)
		self._signal_emitter = signal_emitter

	def emit(self: 'QtLogHandler', record: logging.LogRecord) -> None:
		if not self._signal_emitter:
			print(f"QtLogHandler Error: No signal emitter configured. Log Record: {record}", file=sys.stderr)
			return
		try:
			self._signal_emitter(self.format(record))
		except Exception:
			self.handleError(record)


def formatFileListEntry(diffFile: DiffFile) -> str:
	"""
	Text of one file list entry, e.g. `M  src/app.py  (+3 -1)`.
	Renames show as `old -> new`.
	"""
	marker = STATUS_MARKERS.get(diffFile.status, "?")
	path = diffFile.displayPath or "<unknown>"
	if diffFile.oldPath and diffFile.newPath and diffFile.oldPath != diffFile.newPath:
		path = f"{diffFile.oldPath} -> {diffFile.newPath}"
	return f"{marker}  {path}  ({buildLineMap(diffFile).summary()})"
