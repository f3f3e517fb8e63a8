# core/line_map.py
"""
Flat old/new line-number map of a DiffFile, used for change summaries.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .diff_model import DiffFile, LineType


@dataclass(frozen=True)
class LineMapEntry:
	oldLineNumber: Optional[int]
	newLineNumber: Optional[int]
	lineType: LineType


@dataclass(frozen=True)
class LineMap:
	"""Hunk lines of one file in order, reduced to their line numbers."""
	entries: List[LineMapEntry] = field(default_factory=list)

	def countByType(self: 'LineMap', lineType: LineType) -> int:
		return sum(1 for entry in self.entries if entry.lineType == lineType)

	@property
	def addedCount(self: 'LineMap') -> int:
		return self.countByType(LineType.ADDED)

	@property
	def removedCount(self: 'LineMap') -> int:
		return self.countByType(LineType.REMOVED)

	def summary(self: 'LineMap') -> str:
		"""Short `+added -removed` label for file lists."""
		return f"+{self.addedCount} -{self.removedCount}"


def buildLineMap(diffFile: DiffFile) -> LineMap:
	"""
	Flattens every hunk line of the file into a LineMapEntry.

	Args:
		diffFile (DiffFile): Parsed file section.

	Returns:
		LineMap: Entries in hunk order; empty for a file without hunks.
	"""
	entries = [
		LineMapEntry(line.oldLineNumber, line.newLineNumber, line.type)
		for hunk in diffFile.hunks
		for line in hunk.lines
	]
	return LineMap(entries=entries)
