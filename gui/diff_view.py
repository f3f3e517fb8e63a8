# gui/diff_view.py
"""
Side-by-side diff widget.

Paints the old file on the left and the new file on the right, each column
showing only its real lines packed one after another, with filled curved
connectors in the gutter between them. A single vertical scroll bar drives
the unified row space; ScrollProjection turns its value into the offset of
each column, so rows present on both sides stay level while insertions and
deletions scroll past on one side only. Offsets and connectors are recomputed
on every paint, which covers scrolling and resizing.

Keyboard: N or Alt+Down jumps to the next change, P or Alt+Up to the previous one.
"""
import logging
import math
from typing import Optional, Sequence, Tuple

from PySide6.QtWidgets import QAbstractScrollArea, QWidget
from PySide6.QtGui import QColor, QFont, QFontMetrics, QKeyEvent, QPainter, QPainterPath, QPaintEvent, QPen, QResizeEvent
from PySide6.QtCore import QPointF, QRectF, Qt, Signal

from core.config_manager import DiffViewSettings
from core.diff_model import DiffFile
from core.inline_diff import InlineSegments, diffPair
from core.scroll_projection import ConnectorGeometry, ConnectorLayout, ContentItem, ScrollProjection
from core.visual_rows import CellKind, VisualRowModel, buildVisualRows

# Logger for this module
logger: logging.Logger = logging.getLogger(__name__)

# --- Constants ---
EMPTY_MESSAGE: str = "No diff to display."
LINE_NUMBER_WIDTH: int = 48
TEXT_PADDING: int = 6
CURVE_INSET: int = 4
TAB_REPLACEMENT: str = "    "

CONNECTOR_FILL_ALPHA: float = 0.16
CONNECTOR_STROKE_ALPHA: float = 0.4
CONNECTOR_STROKE_WIDTH: float = 1.1

COLOR_BACKGROUND: str = "#ffffff"
COLOR_GUTTER: str = "#f8fafc"
COLOR_LINE_NUMBER: str = "#94a3b8"
COLOR_TEXT: str = "#0f172a"
COLOR_EMPTY_TEXT: str = "#94a3b8"
COLOR_REMOVED_BG: str = "#fef2f2"
COLOR_ADDED_BG: str = "#f0fdf4"
COLOR_REMOVED_HIGHLIGHT: str = "#fecaca"
COLOR_ADDED_HIGHLIGHT: str = "#bbf7d0"


class SideBySideDiffView(QAbstractScrollArea):
	"""
	Scroll area painting one DiffFile as two aligned columns.

	Signals:
		changeNavigated (int, int): 1-based index of the change scrolled to and the change count.
	"""

	changeNavigated = Signal(int, int)

	def __init__(self: 'SideBySideDiffView', settings: Optional[DiffViewSettings] = None, parent: Optional[QWidget] = None) -> None:
		super().__init__(parent)
		self._settings: DiffViewSettings = settings or DiffViewSettings()
		self._diffFile: Optional[DiffFile] = None
		self._model: Optional[VisualRowModel] = None
		self._projection: Optional[ScrollProjection] = None

		codeFont = QFont(self._settings.fontFamily)
		codeFont.setStyleHint(QFont.StyleHint.Monospace)
		codeFont.setPointSize(self._settings.fontSize)
		self.setFont(codeFont)

		self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
		self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
		self.verticalScrollBar().setSingleStep(self._settings.rowHeight)
		self.viewport().setAutoFillBackground(False)

	# --- Public API ---
	def setDiff(self: 'SideBySideDiffView', diffFile: Optional[DiffFile], oldLines: Optional[Sequence[str]] = None, newLines: Optional[Sequence[str]] = None) -> None:
		"""
		Shows `diffFile`, rebuilding rows and projection and scrolling to the top.

		Args:
			diffFile (Optional[DiffFile]): File to show; None clears the view.
			oldLines (Optional[Sequence[str]]): Full old content, enables gap filling.
			newLines (Optional[Sequence[str]]): Full new content.
		"""
		self._diffFile = diffFile
		if diffFile is None or not diffFile.hunks:
			self._model = None
			self._projection = None
		else:
			self._model = buildVisualRows(diffFile, oldLines, newLines)
			self._projection = ScrollProjection(self._model.rows, self._model.connectors, rowHeight=self._settings.rowHeight)
			logger.debug(f"Diff view showing '{diffFile.displayPath}': {len(self._model.rows)} rows, {len(self._model.connectors)} connectors.")
		self._updateScrollRange()
		self.verticalScrollBar().setValue(0)
		self.viewport().update()

	def clearDiff(self: 'SideBySideDiffView') -> None:
		self.setDiff(None)

	@property
	def projection(self: 'SideBySideDiffView') -> Optional[ScrollProjection]:
		return self._projection

	@property
	def currentFile(self: 'SideBySideDiffView') -> Optional[DiffFile]:
		return self._diffFile

	def goToNextChange(self: 'SideBySideDiffView') -> bool:
		"""Scrolls to the next change below the current position. Returns False if there is none."""
		if self._projection is None:
			return False
		return self._scrollToChange(self._projection.nextChangeScrollTop(self.verticalScrollBar().value()))

	def goToPreviousChange(self: 'SideBySideDiffView') -> bool:
		if self._projection is None:
			return False
		return self._scrollToChange(self._projection.previousChangeScrollTop(self.verticalScrollBar().value()))

	def _scrollToChange(self: 'SideBySideDiffView', target: Optional[int]) -> bool:
		if target is None:
			return False
		self.verticalScrollBar().setValue(target)
		targets = self._projection.changeScrollTops()
		self.changeNavigated.emit(targets.index(target) + 1, len(targets))
		return True

	# --- Geometry ---
	def _updateScrollRange(self: 'SideBySideDiffView') -> None:
		scrollBar = self.verticalScrollBar()
		viewportHeight = self.viewport().height()
		totalHeight = self._projection.totalHeight if self._projection else 0
		scrollBar.setRange(0, max(0, totalHeight - viewportHeight))
		scrollBar.setPageStep(max(1, viewportHeight))

	def _columnBounds(self: 'SideBySideDiffView') -> Tuple[float, float, float]:
		"""Width of each column, left edge of the gutter and left edge of the right column."""
		gutterWidth = self._settings.gutterWidth
		columnWidth = max(0.0, (self.viewport().width() - gutterWidth) / 2)
		return columnWidth, columnWidth, columnWidth + gutterWidth

	def connectorLayout(self: 'SideBySideDiffView') -> ConnectorLayout:
		columnWidth, gutterLeft, rightColumnLeft = self._columnBounds()
		if columnWidth <= 0:
			return ConnectorLayout(0, 0, 0, 0)
		return ConnectorLayout(
			fromX=gutterLeft,
			toX=rightColumnLeft,
			curveStartX=gutterLeft + CURVE_INSET,
			curveEndX=rightColumnLeft - CURVE_INSET,
		)

	# --- Qt event overrides ---
	def resizeEvent(self: 'SideBySideDiffView', event: QResizeEvent) -> None:
		super().resizeEvent(event)
		self._updateScrollRange()

	def scrollContentsBy(self: 'SideBySideDiffView', dx: int, dy: int) -> None:
		self.viewport().update()

	def keyPressEvent(self: 'SideBySideDiffView', event: QKeyEvent) -> None:
		key = event.key()
		alt = bool(event.modifiers() & Qt.KeyboardModifier.AltModifier)
		if key == Qt.Key.Key_N or (alt and key == Qt.Key.Key_Down):
			self.goToNextChange()
			event.accept()
			return
		if key == Qt.Key.Key_P or (alt and key == Qt.Key.Key_Up):
			self.goToPreviousChange()
			event.accept()
			return
		super().keyPressEvent(event)

	def paintEvent(self: 'SideBySideDiffView', event: QPaintEvent) -> None:
		painter = QPainter(self.viewport())
		try:
			painter.fillRect(self.viewport().rect(), QColor(COLOR_BACKGROUND))
			if self._projection is None or not self._projection.rows:
				painter.setPen(QColor(COLOR_EMPTY_TEXT))
				painter.drawText(self.viewport().rect(), Qt.AlignmentFlag.AlignCenter, EMPTY_MESSAGE)
				return

			columnWidth, gutterLeft, rightColumnLeft = self._columnBounds()
			offsets = self._projection.computeOffsets(self.verticalScrollBar().value())
			painter.fillRect(QRectF(gutterLeft, 0, self._settings.gutterWidth, self.viewport().height()), QColor(COLOR_GUTTER))

			self._paintColumn(painter, self._projection.leftItems, offsets.leftScrollY, 0.0, columnWidth, isLeft=True)
			self._paintColumn(painter, self._projection.rightItems, offsets.rightScrollY, rightColumnLeft, columnWidth, isLeft=False)

			painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
			painter.setClipRect(QRectF(gutterLeft, 0, self._settings.gutterWidth, self.viewport().height()))
			for geometry in self._projection.projectConnectors(self.connectorLayout(), offsets):
				self._paintConnector(painter, geometry)
		finally:
			painter.end()

	# --- Painting helpers ---
	def _paintColumn(self: 'SideBySideDiffView', painter: QPainter, items: Sequence[ContentItem], scrollY: float, left: float, width: float, isLeft: bool) -> None:
		rowHeight = self._settings.rowHeight
		viewportHeight = self.viewport().height()
		if not items or width <= 0:
			return
		first = max(0, math.floor(scrollY / rowHeight))
		last = min(len(items) - 1, math.ceil((scrollY + viewportHeight) / rowHeight))

		metrics = QFontMetrics(self.font())
		painter.save()
		painter.setClipRect(QRectF(left, 0, width, viewportHeight))
		for index in range(first, last + 1):
			item = items[index]
			top = index * rowHeight - scrollY
			rowRect = QRectF(left, top, width, rowHeight)
			kind = item.cell.kind

			background = self._backgroundFor(kind, isLeft)
			if background is not None:
				painter.fillRect(rowRect, QColor(background))

			line = item.cell.line
			lineNumber = line.oldLineNumber if isLeft else line.newLineNumber
			baseline = top + (rowHeight + metrics.ascent() - metrics.descent()) / 2
			painter.setPen(QColor(COLOR_LINE_NUMBER))
			painter.drawText(QRectF(left, top, LINE_NUMBER_WIDTH - TEXT_PADDING, rowHeight), Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter, "" if lineNumber is None else str(lineNumber))

			textX = left + LINE_NUMBER_WIDTH + TEXT_PADDING
			if kind == CellKind.CHANGE and not item.opposite.isSpacer:
				oldText, newText = (line.content, item.opposite.line.content) if isLeft else (item.opposite.line.content, line.content)
				inline = diffPair(oldText, newText)
				self._paintSegments(painter, metrics, inline.old if isLeft else inline.new, textX, top, baseline, isLeft)
			else:
				painter.setPen(QColor(COLOR_TEXT))
				painter.drawText(QPointF(textX, baseline), line.content.replace("\t", TAB_REPLACEMENT))
		painter.restore()

	def _paintSegments(self: 'SideBySideDiffView', painter: QPainter, metrics: QFontMetrics, segments: InlineSegments, x: float, top: float, baseline: float, isLeft: bool) -> None:
		"""Draws before/changed/after, with a tinted box behind the changed span."""
		rowHeight = self._settings.rowHeight
		painter.setPen(QColor(COLOR_TEXT))
		for index, text in enumerate(segments):
			text = text.replace("\t", TAB_REPLACEMENT)
			width = metrics.horizontalAdvance(text)
			if index == 1 and text:
				highlight = COLOR_REMOVED_HIGHLIGHT if isLeft else COLOR_ADDED_HIGHLIGHT
				painter.fillRect(QRectF(x, top + 2, width, rowHeight - 4), QColor(highlight))
			painter.drawText(QPointF(x, baseline), text)
			x += width

	def _backgroundFor(self: 'SideBySideDiffView', kind: CellKind, isLeft: bool) -> Optional[str]:
		if kind == CellKind.CONTEXT:
			return None
		if kind == CellKind.REMOVED:
			return COLOR_REMOVED_BG
		if kind == CellKind.ADDED:
			return COLOR_ADDED_BG
		if kind == CellKind.CHANGE:
			return COLOR_REMOVED_BG if isLeft else COLOR_ADDED_BG
		raise ValueError(f"Spacer cells are never painted: {kind}")

	def _paintConnector(self: 'SideBySideDiffView', painter: QPainter, geometry: ConnectorGeometry) -> None:
		path = buildConnectorPainterPath(geometry)
		fill = QColor(geometry.color)
		fill.setAlphaF(CONNECTOR_FILL_ALPHA)
		stroke = QColor(geometry.color)
		stroke.setAlphaF(CONNECTOR_STROKE_ALPHA)
		painter.fillPath(path, fill)
		painter.strokePath(path, QPen(stroke, CONNECTOR_STROKE_WIDTH))


def buildConnectorPainterPath(geometry: ConnectorGeometry) -> QPainterPath:
	"""QPainterPath counterpart of core.scroll_projection.buildConnectorAreaPath."""
	midX = geometry.curveStartX + (geometry.curveEndX - geometry.curveStartX) * 0.5
	fromTop, fromBottom = geometry.fromTop, geometry.fromBottom
	toTop, toBottom = geometry.toTop, geometry.toBottom

	path = QPainterPath()
	path.moveTo(fromTop.x, fromTop.y)
	path.lineTo(geometry.curveStartX, fromTop.y)
	path.cubicTo(midX, fromTop.y, midX, toTop.y, geometry.curveEndX, toTop.y)
	path.lineTo(toTop.x, toTop.y)
	path.lineTo(toBottom.x, toBottom.y)
	path.lineTo(geometry.curveEndX, toBottom.y)
	path.cubicTo(midX, toBottom.y, midX, fromBottom.y, geometry.curveStartX, fromBottom.y)
	path.lineTo(fromBottom.x, fromBottom.y)
	path.closeSubpath()
	return path
