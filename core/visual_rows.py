# core/visual_rows.py
"""
Builds the unified visual row sequence for one DiffFile.

Each VisualRow pairs a left (old side) cell with a right (new side) cell.
When full old/new file contents are available the unchanged regions between
hunks are filled in, so the rows cover the whole file; otherwise only hunk
rows are produced. Alongside the rows a list of ConnectorMeta describes the
curved regions drawn between the two columns.

The running "last line seen" values used as connector anchors are threaded
explicitly through `buildGapRows` and `buildHunkRows`, which each return a
RowSegment carrying the updated values.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence

from .diff_model import DiffFile, DiffHunk, DiffLine, LineType

# Logger instance specific to this module
logger: logging.Logger = logging.getLogger(__name__)


class CellKind(str, Enum):
	"""What a cell shows. Every kind except SPACER carries a DiffLine."""
	CONTEXT = "context"
	REMOVED = "removed"
	ADDED = "added"
	CHANGE = "change"
	SPACER = "spacer"


class ConnectorKind(str, Enum):
	CHANGE = "change"
	ADDED = "added"
	REMOVED = "removed"


@dataclass(frozen=True)
class Cell:
	"""
	One side of a visual row.

	A spacer occupies the row height without any content; it exists so the
	opposite side of an insert/delete run keeps its vertical position.
	"""
	kind: CellKind
	line: Optional[DiffLine] = None

	def __post_init__(self: 'Cell') -> None:
		if self.kind == CellKind.SPACER and self.line is not None:
			raise ValueError("Spacer cells cannot carry a line.")
		if self.kind != CellKind.SPACER and self.line is None:
			raise ValueError(f"A '{self.kind.value}' cell requires a line.")

	@property
	def isSpacer(self: 'Cell') -> bool:
		return self.kind == CellKind.SPACER


SPACER: Cell = Cell(CellKind.SPACER)


@dataclass(frozen=True)
class VisualRow:
	"""One row of the unified scroll space. Never spacer on both sides."""
	rowId: str
	left: Cell
	right: Cell

	def __post_init__(self: 'VisualRow') -> None:
		if self.left.isSpacer and self.right.isSpacer:
			raise ValueError(f"Row '{self.rowId}' has no content on either side.")


@dataclass(frozen=True)
class ConnectorMeta:
	"""
	A connector spanning rows `startRowId`..`endRowId` (inclusive).

	`anchorLine` is the line on the other side where an added/removed
	connector terminates: an old-side line for ADDED, a new-side line for
	REMOVED. It is None for CHANGE connectors and when nothing had been seen
	yet on the other side.
	"""
	kind: ConnectorKind
	startRowId: str
	endRowId: str
	anchorLine: Optional[int] = None


class RowSegment(NamedTuple):
	"""Rows and connectors produced by one gap or hunk, plus the updated anchors."""
	rows: List[VisualRow]
	connectors: List[ConnectorMeta]
	lastOldLine: int
	lastNewLine: int


class VisualRowModel(NamedTuple):
	rows: List[VisualRow]
	connectors: List[ConnectorMeta]


def _anchorOrNone(lineNumber: int) -> Optional[int]:
	# 0 means no line seen yet on that side
	return lineNumber or None


def _lineAt(fileLines: Sequence[str], lineNumber: int) -> str:
	"""1-based lookup that yields an empty string past the end of the content."""
	index = lineNumber - 1
	return fileLines[index] if 0 <= index < len(fileLines) else ""


# --- Gap rows ---
def buildGapRows(
	oldStart: int,
	oldEnd: int,
	newStart: int,
	newEnd: int,
	oldFileLines: Sequence[str],
	newFileLines: Sequence[str],
	lastOldLine: int,
	lastNewLine: int,
) -> RowSegment:
	"""
	Emits the unchanged lines between two hunks (or before the first / after
	the last one) from the full file contents.

	Positions present on both sides become context rows. If the two ranges
	differ in length, which happens when the supplied contents disagree with
	the diff, the surplus lines become removed-only or added-only rows with
	connectors so every real line still appears exactly once.

	Args:
		oldStart (int): First old-side line of the gap (1-based, inclusive).
		oldEnd (int): Last old-side line of the gap (inclusive).
		newStart (int): First new-side line of the gap.
		newEnd (int): Last new-side line of the gap.
		oldFileLines (Sequence[str]): Full old file content, one entry per line.
		newFileLines (Sequence[str]): Full new file content.
		lastOldLine (int): Last old-side line emitted so far (0 if none).
		lastNewLine (int): Last new-side line emitted so far (0 if none).

	Returns:
		RowSegment: The gap rows, their connectors and the updated anchors.
	"""
	rows: List[VisualRow] = []
	connectors: List[ConnectorMeta] = []
	if oldEnd < oldStart and newEnd < newStart:
		return RowSegment(rows, connectors, lastOldLine, lastNewLine)

	oldCount: int = max(0, oldEnd - oldStart + 1)
	newCount: int = max(0, newEnd - newStart + 1)

	for offset in range(max(oldCount, newCount)):
		oldLineNumber = oldStart + offset
		newLineNumber = newStart + offset
		hasOld = offset < oldCount
		hasNew = offset < newCount

		if hasOld and hasNew:
			line = DiffLine(LineType.CONTEXT, _lineAt(oldFileLines, oldLineNumber), oldLineNumber, newLineNumber)
			cell = Cell(CellKind.CONTEXT, line)
			rows.append(VisualRow(f"context-full-{oldLineNumber}-{newLineNumber}", cell, cell))
			lastOldLine = oldLineNumber
			lastNewLine = newLineNumber
		elif hasOld:
			rowId = f"removed-full-{oldLineNumber}"
			line = DiffLine(LineType.REMOVED, _lineAt(oldFileLines, oldLineNumber), oldLineNumber=oldLineNumber)
			rows.append(VisualRow(rowId, Cell(CellKind.REMOVED, line), SPACER))
			connectors.append(ConnectorMeta(ConnectorKind.REMOVED, rowId, rowId, _anchorOrNone(lastNewLine)))
			lastOldLine = oldLineNumber
		else:
			rowId = f"added-full-{newLineNumber}"
			line = DiffLine(LineType.ADDED, _lineAt(newFileLines, newLineNumber), newLineNumber=newLineNumber)
			rows.append(VisualRow(rowId, SPACER, Cell(CellKind.ADDED, line)))
			connectors.append(ConnectorMeta(ConnectorKind.ADDED, rowId, rowId, _anchorOrNone(lastOldLine)))
			lastNewLine = newLineNumber

	return RowSegment(rows, connectors, lastOldLine, lastNewLine)


# --- Hunk rows ---
def buildHunkRows(hunk: DiffHunk, hunkIndex: int, lastOldLine: int, lastNewLine: int) -> RowSegment:
	"""
	Walks one hunk's lines and turns them into rows.

	A removed line directly followed by an added line (or the reverse) is
	paired into a single change row. Unpaired removed/added lines get a
	spacer opposite them and a connector anchored at the last line seen on
	the other side.

	Args:
		hunk (DiffHunk): The hunk to walk.
		hunkIndex (int): Position of the hunk in its file; part of every row id.
		lastOldLine (int): Last old-side line emitted before this hunk (0 if none).
		lastNewLine (int): Last new-side line emitted before this hunk (0 if none).

	Returns:
		RowSegment: The hunk rows, their connectors and the updated anchors.
	"""
	rows: List[VisualRow] = []
	connectors: List[ConnectorMeta] = []
	lines: List[DiffLine] = hunk.lines
	i: int = 0

	while i < len(lines):
		line = lines[i]
		following = lines[i + 1] if i + 1 < len(lines) else None

		if line.type == LineType.CONTEXT:
			cell = Cell(CellKind.CONTEXT, line)
			rows.append(VisualRow(f"context-{hunkIndex}-{i}", cell, cell))
			lastOldLine = line.oldLineNumber if line.oldLineNumber is not None else lastOldLine
			lastNewLine = line.newLineNumber if line.newLineNumber is not None else lastNewLine
			i += 1
			continue

		if following is not None and {line.type, following.type} == {LineType.REMOVED, LineType.ADDED}:
			oldSide, newSide = (line, following) if line.type == LineType.REMOVED else (following, line)
			rowId = f"change-{hunkIndex}-{i}"
			rows.append(VisualRow(rowId, Cell(CellKind.CHANGE, oldSide), Cell(CellKind.CHANGE, newSide)))
			connectors.append(ConnectorMeta(ConnectorKind.CHANGE, rowId, rowId))
			lastOldLine = oldSide.oldLineNumber if oldSide.oldLineNumber is not None else lastOldLine
			lastNewLine = newSide.newLineNumber if newSide.newLineNumber is not None else lastNewLine
			i += 2
			continue

		if line.type == LineType.REMOVED:
			rowId = f"removed-{hunkIndex}-{i}"
			rows.append(VisualRow(rowId, Cell(CellKind.REMOVED, line), SPACER))
			connectors.append(ConnectorMeta(ConnectorKind.REMOVED, rowId, rowId, _anchorOrNone(lastNewLine)))
			lastOldLine = line.oldLineNumber if line.oldLineNumber is not None else lastOldLine
		else:
			rowId = f"added-{hunkIndex}-{i}"
			rows.append(VisualRow(rowId, SPACER, Cell(CellKind.ADDED, line)))
			connectors.append(ConnectorMeta(ConnectorKind.ADDED, rowId, rowId, _anchorOrNone(lastOldLine)))
			lastNewLine = line.newLineNumber if line.newLineNumber is not None else lastNewLine
		i += 1

	return RowSegment(rows, connectors, lastOldLine, lastNewLine)


# --- Connector grouping ---
def groupConnectors(connectors: Sequence[ConnectorMeta], rows: Sequence[VisualRow]) -> List[ConnectorMeta]:
	"""
	Collapses runs of per-row connectors into one connector per run.

	A connector joins the previous one when it starts on the row right after
	the previous end row and has the same kind; added/removed connectors must
	also share the anchor line. The input is left untouched.

	Args:
		connectors (Sequence[ConnectorMeta]): Connectors in row order.
		rows (Sequence[VisualRow]): The rows the connectors refer to.

	Returns:
		List[ConnectorMeta]: The grouped connectors.
	"""
	rowIndexMap: Dict[str, int] = {row.rowId: index for index, row in enumerate(rows)}
	grouped: List[ConnectorMeta] = []

	for connector in connectors:
		if grouped:
			last = grouped[-1]
			lastIndex = rowIndexMap.get(last.endRowId, -1)
			currentIndex = rowIndexMap.get(connector.startRowId, -1)
			sameRun = (
				currentIndex == lastIndex + 1
				and connector.kind == last.kind
				and (connector.kind == ConnectorKind.CHANGE or connector.anchorLine == last.anchorLine)
			)
			if sameRun:
				grouped[-1] = replace(last, endRowId=connector.endRowId)
				continue
		grouped.append(connector)

	return grouped


class VisualRowBuilder:
	"""
	Turns a DiffFile, optionally with the full old/new file contents, into a
	VisualRowModel.
	"""

	def build(
		self: 'VisualRowBuilder',
		diffFile: DiffFile,
		oldFileLines: Optional[Sequence[str]] = None,
		newFileLines: Optional[Sequence[str]] = None,
	) -> VisualRowModel:
		"""
		Builds rows and grouped connectors for one file.

		Full-content mode (gap filling before, between and after hunks) is
		active when either line list is non-empty. A file without hunks yields
		no rows at all.

		Args:
			diffFile (DiffFile): The parsed file section.
			oldFileLines (Optional[Sequence[str]]): Full old content, one entry per line.
			newFileLines (Optional[Sequence[str]]): Full new content, one entry per line.

		Returns:
			VisualRowModel: Named tuple of (rows, connectors).
		"""
		oldLines: Sequence[str] = oldFileLines or []
		newLines: Sequence[str] = newFileLines or []
		hasFullFiles: bool = bool(oldLines or newLines)

		rows: List[VisualRow] = []
		connectors: List[ConnectorMeta] = []
		lastOldLine: int = 0
		lastNewLine: int = 0
		nextOldLine: int = 1
		nextNewLine: int = 1

		if not diffFile.hunks:
			logger.debug(f"No hunks for '{diffFile.displayPath}', nothing to build.")
			return VisualRowModel(rows, connectors)

		def collect(segment: RowSegment) -> None:
			rows.extend(segment.rows)
			connectors.extend(segment.connectors)

		for hunkIndex, hunk in enumerate(diffFile.hunks):
			if hasFullFiles:
				gap = buildGapRows(nextOldLine, hunk.oldBefore, nextNewLine, hunk.newBefore, oldLines, newLines, lastOldLine, lastNewLine)
				collect(gap)
				lastOldLine, lastNewLine = gap.lastOldLine, gap.lastNewLine

			segment = buildHunkRows(hunk, hunkIndex, lastOldLine, lastNewLine)
			collect(segment)
			lastOldLine, lastNewLine = segment.lastOldLine, segment.lastNewLine
			nextOldLine, nextNewLine = hunk.oldEnd, hunk.newEnd

		if hasFullFiles:
			collect(buildGapRows(nextOldLine, len(oldLines), nextNewLine, len(newLines), oldLines, newLines, lastOldLine, lastNewLine))

		grouped = groupConnectors(connectors, rows)
		logger.debug(f"Built {len(rows)} row(s) and {len(grouped)} connector(s) for '{diffFile.displayPath}' (full contents: {hasFullFiles}).")
		return VisualRowModel(rows, grouped)


def buildVisualRows(
	diffFile: DiffFile,
	oldFileLines: Optional[Sequence[str]] = None,
	newFileLines: Optional[Sequence[str]] = None,
) -> VisualRowModel:
	"""Convenience wrapper around VisualRowBuilder.build."""
	return VisualRowBuilder().build(diffFile, oldFileLines, newFileLines)
