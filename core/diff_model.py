# core/diff_model.py
"""
Structured model of a unified diff: files, hunks and lines.

Produced by the unified diff parser and consumed by the visual row builder,
the line map and the file list. Instances are plain dataclasses; the parser
fills them while scanning and nothing mutates them afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LineType(str, Enum):
	"""Kind of a single line inside a hunk."""
	CONTEXT = "context"
	ADDED = "added"
	REMOVED = "removed"


class FileStatus(str, Enum):
	"""Change status of one file section."""
	ADDED = "added"
	MODIFIED = "modified"
	DELETED = "deleted"


@dataclass
class DiffLine:
	"""
	One line inside a hunk, without its leading diff marker.

	Added lines carry only `newLineNumber`, removed lines only `oldLineNumber`,
	context lines carry both.
	"""
	type: LineType
	content: str
	oldLineNumber: Optional[int] = None
	newLineNumber: Optional[int] = None


@dataclass
class DiffHunk:
	"""A contiguous change region introduced by an `@@ ... @@` header."""
	header: str
	oldStart: int
	oldLines: int
	newStart: int
	newLines: int
	lines: List[DiffLine] = field(default_factory=list)

	# A zero-length side (e.g. `-5,0`) means the hunk sits after line `oldStart`.
	@property
	def oldBefore(self: 'DiffHunk') -> int:
		"""Last old-side line before this hunk (end of the preceding gap)."""
		return self.oldStart - 1 if self.oldLines else self.oldStart

	@property
	def newBefore(self: 'DiffHunk') -> int:
		return self.newStart - 1 if self.newLines else self.newStart

	@property
	def oldEnd(self: 'DiffHunk') -> int:
		"""First old-side line after this hunk (start of the next gap)."""
		return self.oldBefore + self.oldLines + 1

	@property
	def newEnd(self: 'DiffHunk') -> int:
		"""First new-side line after this hunk."""
		return self.newBefore + self.newLines + 1


@dataclass
class DiffFile:
	"""
	One file's change set. A path of None means the file does not exist on
	that side (added files have no old path, deleted files no new path).
	"""
	oldPath: Optional[str]
	newPath: Optional[str]
	status: Optional[FileStatus] = FileStatus.MODIFIED
	hunks: List[DiffHunk] = field(default_factory=list)

	@property
	def displayPath(self: 'DiffFile') -> Optional[str]:
		"""Path shown to the user: the new path, or the old one for deletions."""
		return self.newPath if self.newPath is not None else self.oldPath


@dataclass
class DiffParseResult:
	"""Ordered file sections found in one piece of diff text."""
	files: List[DiffFile] = field(default_factory=list)
