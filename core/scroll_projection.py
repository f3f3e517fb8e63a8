# core/scroll_projection.py
"""
Analytical scroll synchronisation and connector geometry.

The two columns of the diff view each show only their real (non-spacer)
cells, packed one after another. A single unified scroll position, measured
over all visual rows at a fixed row height, is projected onto an independent
scroll offset for each column using precomputed running counts. Connector
endpoints are then derived from item indices and those offsets, without
measuring any widget geometry beyond the column x positions.
"""

import logging
import math
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .visual_rows import Cell, ConnectorKind, ConnectorMeta, VisualRow

# Logger instance specific to this module
logger: logging.Logger = logging.getLogger(__name__)

# --- Constants ---
ROW_HEIGHT: int = 24
CONNECTOR_INSET: int = 1
ANCHOR_HALF_BAND: int = 2
CONNECTOR_COLOURS: Dict[ConnectorKind, str] = {
	ConnectorKind.CHANGE: "#2563eb",
	ConnectorKind.REMOVED: "#dc2626",
	ConnectorKind.ADDED: "#16a34a",
}


class ContentItem(NamedTuple):
	"""A real cell on one side, with the cell it shares its row with."""
	rowId: str
	cell: Cell
	opposite: Cell


class SideOffsets(NamedTuple):
	leftScrollY: float
	rightScrollY: float


class ConnectorLayout(NamedTuple):
	"""
	Horizontal geometry of the connector area, in viewport coordinates.

	`fromX` is the right edge of the left column, `toX` the left edge of the
	right column; `curveStartX`/`curveEndX` bound the gutter the curves cross.
	"""
	fromX: float
	toX: float
	curveStartX: float
	curveEndX: float


class Point(NamedTuple):
	x: float
	y: float


class ConnectorGeometry(NamedTuple):
	connectorId: str
	kind: ConnectorKind
	fromTop: Point
	fromBottom: Point
	toTop: Point
	toBottom: Point
	curveStartX: float
	curveEndX: float
	color: str


class ScrollProjection:
	"""
	Maps a unified scroll position onto per-column offsets and connector shapes.

	Built once per row model; every query afterwards is a constant-time lookup
	(connector projection is linear in the number of connectors).
	"""

	def __init__(
		self: 'ScrollProjection',
		rows: Sequence[VisualRow],
		connectors: Sequence[ConnectorMeta],
		rowHeight: int = ROW_HEIGHT,
	) -> None:
		"""
		Precomputes running counts and lookup tables for both columns.

		Args:
			rows (Sequence[VisualRow]): Unified rows, in display order.
			connectors (Sequence[ConnectorMeta]): Grouped connectors for those rows.
			rowHeight (int): Height of every row in pixels. Must be positive.

		Raises:
			ValueError: If rowHeight is not positive.
		"""
		if rowHeight <= 0:
			raise ValueError(f"Row height must be positive, got {rowHeight}.")
		self.rows: List[VisualRow] = list(rows)
		self.connectors: List[ConnectorMeta] = list(connectors)
		self.rowHeight: int = rowHeight

		self.leftRunning: List[int] = []
		self.rightRunning: List[int] = []
		self.leftItems: List[ContentItem] = []
		self.rightItems: List[ContentItem] = []
		self.rowIdToLeftIndex: Dict[str, int] = {}
		self.rowIdToRightIndex: Dict[str, int] = {}
		self.rowIdToRowIndex: Dict[str, int] = {}
		self.oldLineToLeftIndex: Dict[int, int] = {}
		self.newLineToRightIndex: Dict[int, int] = {}

		for rowIndex, row in enumerate(self.rows):
			self.leftRunning.append(len(self.leftItems))
			self.rightRunning.append(len(self.rightItems))
			self.rowIdToRowIndex[row.rowId] = rowIndex
			if not row.left.isSpacer:
				self.rowIdToLeftIndex[row.rowId] = len(self.leftItems)
				if row.left.line.oldLineNumber is not None:
					self.oldLineToLeftIndex[row.left.line.oldLineNumber] = len(self.leftItems)
				self.leftItems.append(ContentItem(row.rowId, row.left, row.right))
			if not row.right.isSpacer:
				self.rowIdToRightIndex[row.rowId] = len(self.rightItems)
				if row.right.line.newLineNumber is not None:
					self.newLineToRightIndex[row.right.line.newLineNumber] = len(self.rightItems)
				self.rightItems.append(ContentItem(row.rowId, row.right, row.left))

	# --- Unified scroll space ---
	@property
	def totalHeight(self: 'ScrollProjection') -> int:
		"""Height of the unified scroll space."""
		return len(self.rows) * self.rowHeight

	def rowOffset(self: 'ScrollProjection', rowIndex: int) -> int:
		"""Unified offset of a row; the same value applies to both columns."""
		return rowIndex * self.rowHeight

	def computeOffsets(self: 'ScrollProjection', scrollTop: float) -> SideOffsets:
		"""
		Projects the unified scroll position onto each column.

		The whole-row part comes from the running count of real cells before
		the row under the cursor. The fractional part is added to a column
		only if that row is real there, so a column pauses while the other
		side scrolls through an insertion or deletion.

		Args:
			scrollTop (float): Unified scroll position in pixels.

		Returns:
			SideOffsets: Scroll offsets of the left and right column.
		"""
		if not self.rows:
			return SideOffsets(0, 0)
		unifiedRow = scrollTop / self.rowHeight
		index = max(0, min(math.floor(unifiedRow), len(self.rows) - 1))
		fraction = max(0.0, unifiedRow - index)
		row = self.rows[index]
		leftScrollY = self.leftRunning[index] * self.rowHeight
		rightScrollY = self.rightRunning[index] * self.rowHeight
		if not row.left.isSpacer:
			leftScrollY += fraction * self.rowHeight
		if not row.right.isSpacer:
			rightScrollY += fraction * self.rowHeight
		return SideOffsets(leftScrollY, rightScrollY)

	def leftItemY(self: 'ScrollProjection', index: int, offsets: SideOffsets) -> float:
		"""Viewport y of the top of a left-column item."""
		return index * self.rowHeight - offsets.leftScrollY

	def rightItemY(self: 'ScrollProjection', index: int, offsets: SideOffsets) -> float:
		return index * self.rowHeight - offsets.rightScrollY

	# --- Connectors ---
	def _sideRange(self: 'ScrollProjection', startIndex: int, endIndex: int, scrollY: float) -> Tuple[float, float]:
		"""Top and bottom y of an item range, inset from the row borders."""
		top = startIndex * self.rowHeight - scrollY + CONNECTOR_INSET
		bottom = (endIndex + 1) * self.rowHeight - scrollY - CONNECTOR_INSET
		return top, bottom

	def _anchorY(self: 'ScrollProjection', anchorLine: Optional[int], lineToIndex: Dict[int, int], scrollY: float) -> float:
		"""
		Bottom edge of the anchor line's item on the other column.

		Anchors that are missing or not shown on that side resolve to the top
		of the file.
		"""
		if anchorLine is not None:
			anchorIndex = lineToIndex.get(anchorLine)
			if anchorIndex is not None:
				return (anchorIndex + 1) * self.rowHeight - scrollY
			logger.debug(f"Anchor line {anchorLine} not present in column, using file top.")
		return -scrollY

	def projectConnectors(self: 'ScrollProjection', layout: Optional[ConnectorLayout], offsets: SideOffsets) -> List[ConnectorGeometry]:
		"""
		Converts the connectors into viewport geometry for the given offsets.

		Args:
			layout (Optional[ConnectorLayout]): Column x positions. None, or a
				layout whose `toX` is still 0, means the widget has not been
				measured yet and nothing is drawn for this pass.
			offsets (SideOffsets): Result of `computeOffsets` for the current scroll position.

		Returns:
			List[ConnectorGeometry]: One entry per connector whose rows could be resolved.
		"""
		if layout is None or layout.toX == 0:
			return []

		geometries: List[ConnectorGeometry] = []
		for index, meta in enumerate(self.connectors):
			if meta.kind == ConnectorKind.CHANGE:
				leftStart = self.rowIdToLeftIndex.get(meta.startRowId)
				leftEnd = self.rowIdToLeftIndex.get(meta.endRowId)
				rightStart = self.rowIdToRightIndex.get(meta.startRowId)
				rightEnd = self.rowIdToRightIndex.get(meta.endRowId)
				if None in (leftStart, leftEnd, rightStart, rightEnd):
					continue
				fromTop, fromBottom = self._sideRange(leftStart, leftEnd, offsets.leftScrollY)
				toTop, toBottom = self._sideRange(rightStart, rightEnd, offsets.rightScrollY)
			elif meta.kind == ConnectorKind.REMOVED:
				leftStart = self.rowIdToLeftIndex.get(meta.startRowId)
				leftEnd = self.rowIdToLeftIndex.get(meta.endRowId)
				if leftStart is None or leftEnd is None:
					continue
				fromTop, fromBottom = self._sideRange(leftStart, leftEnd, offsets.leftScrollY)
				anchorY = self._anchorY(meta.anchorLine, self.newLineToRightIndex, offsets.rightScrollY)
				toTop, toBottom = anchorY - ANCHOR_HALF_BAND, anchorY + ANCHOR_HALF_BAND
			elif meta.kind == ConnectorKind.ADDED:
				rightStart = self.rowIdToRightIndex.get(meta.startRowId)
				rightEnd = self.rowIdToRightIndex.get(meta.endRowId)
				if rightStart is None or rightEnd is None:
					continue
				toTop, toBottom = self._sideRange(rightStart, rightEnd, offsets.rightScrollY)
				anchorY = self._anchorY(meta.anchorLine, self.oldLineToLeftIndex, offsets.leftScrollY)
				fromTop, fromBottom = anchorY - ANCHOR_HALF_BAND, anchorY + ANCHOR_HALF_BAND
			else:
				raise ValueError(f"Unknown connector kind: {meta.kind}")

			geometries.append(ConnectorGeometry(
				connectorId=f"connector-{index}",
				kind=meta.kind,
				fromTop=Point(layout.fromX, fromTop),
				fromBottom=Point(layout.fromX, fromBottom),
				toTop=Point(layout.toX, toTop),
				toBottom=Point(layout.toX, toBottom),
				curveStartX=layout.curveStartX,
				curveEndX=layout.curveEndX,
				color=CONNECTOR_COLOURS[meta.kind],
			))
		return geometries

	# --- Change navigation ---
	def changeScrollTops(self: 'ScrollProjection') -> List[int]:
		"""Unified scroll positions of every connector's first row, ascending."""
		targets = {
			self.rowOffset(self.rowIdToRowIndex[meta.startRowId])
			for meta in self.connectors
			if meta.startRowId in self.rowIdToRowIndex
		}
		return sorted(targets)

	def nextChangeScrollTop(self: 'ScrollProjection', scrollTop: float) -> Optional[int]:
		"""First change strictly below the current position, or None."""
		for target in self.changeScrollTops():
			if target > scrollTop:
				return target
		return None

	def previousChangeScrollTop(self: 'ScrollProjection', scrollTop: float) -> Optional[int]:
		"""Last change strictly above the current position, or None."""
		previous: Optional[int] = None
		for target in self.changeScrollTops():
			if target >= scrollTop:
				break
			previous = target
		return previous


def _formatCoordinate(value: float) -> str:
	"""Formats a coordinate without a trailing `.0` for whole numbers."""
	text = f"{value:.3f}".rstrip("0").rstrip(".")
	return "0" if text == "-0" else text


def buildConnectorAreaPath(geometry: ConnectorGeometry) -> str:
	"""
	Builds the closed outline of a connector as SVG path data.

	The outline runs along the top edge from the left column across the
	gutter to the right column, down the right edge, back along the bottom
	edge and closes on the left. Both curves use control points at the
	gutter midpoint, each holding the y of its end.

	Args:
		geometry (ConnectorGeometry): Projected connector.

	Returns:
		str: Path data using only M, L, C and Z commands.
	"""
	f = _formatCoordinate
	midX = geometry.curveStartX + (geometry.curveEndX - geometry.curveStartX) * 0.5
	fromTop, fromBottom = geometry.fromTop, geometry.fromBottom
	toTop, toBottom = geometry.toTop, geometry.toBottom
	return " ".join([
		f"M {f(fromTop.x)} {f(fromTop.y)}",
		f"L {f(geometry.curveStartX)} {f(fromTop.y)}",
		f"C {f(midX)} {f(fromTop.y)}, {f(midX)} {f(toTop.y)}, {f(geometry.curveEndX)} {f(toTop.y)}",
		f"L {f(toTop.x)} {f(toTop.y)}",
		f"L {f(toBottom.x)} {f(toBottom.y)}",
		f"L {f(geometry.curveEndX)} {f(toBottom.y)}",
		f"C {f(midX)} {f(toBottom.y)}, {f(midX)} {f(fromBottom.y)}, {f(geometry.curveStartX)} {f(fromBottom.y)}",
		f"L {f(fromBottom.x)} {f(fromBottom.y)}",
		"Z",
	])
