import unittest
from unittest.mock import patch, MagicMock

# Ensure imports work correctly assuming tests are run from the project root
import sys
if '.' not in sys.path:
	sys.path.append('.')

from core.diff_parser import parseUnifiedDiff
from core.scroll_projection import (
	ANCHOR_HALF_BAND, CONNECTOR_COLOURS, ConnectorGeometry, ConnectorLayout, Point,
	ScrollProjection, SideOffsets, _formatCoordinate, buildConnectorAreaPath,
)
from core.visual_rows import ConnectorKind, ConnectorMeta, buildVisualRows

# Rows: context a | change b/B | added c2 (left spacer) | context d
SAMPLE_DIFF: str = "diff --git a/f.txt b/f.txt\n@@ -1,3 +1,4 @@\n a\n-b\n+B\n+c2\n d\n"
LAYOUT: ConnectorLayout = ConnectorLayout(fromX=10, toX=100, curveStartX=20, curveEndX=90)


class TestScrollProjection(unittest.TestCase):
	"""Unit tests for the analytical scroll sync and connector geometry."""

	def setUp(self: 'TestScrollProjection') -> None:
		self.patchers = [
			patch('core.scroll_projection.logger', MagicMock()),
			patch('core.visual_rows.logger', MagicMock()),
			patch('core.diff_parser.logger', MagicMock()),
		]
		for patcher in self.patchers:
			patcher.start()
		self.rows, self.connectors = buildVisualRows(parseUnifiedDiff(SAMPLE_DIFF).files[0])
		self.projection = ScrollProjection(self.rows, self.connectors, rowHeight=24)

	def tearDown(self: 'TestScrollProjection') -> None:
		for patcher in reversed(self.patchers):
			patcher.stop()

	def test_precomputedTables(self: 'TestScrollProjection') -> None:
		p = self.projection
		self.assertEqual(p.leftRunning, [0, 1, 2, 2])
		self.assertEqual(p.rightRunning, [0, 1, 2, 3])
		self.assertEqual([item.cell.line.content for item in p.leftItems], ["a", "b", "d"])
		self.assertEqual([item.cell.line.content for item in p.rightItems], ["a", "B", "c2", "d"])
		self.assertTrue(p.rightItems[2].opposite.isSpacer)
		self.assertEqual(p.oldLineToLeftIndex, {1: 0, 2: 1, 3: 2})
		self.assertEqual(p.newLineToRightIndex, {1: 0, 2: 1, 3: 2, 4: 3})
		self.assertEqual(p.totalHeight, 96)
		self.assertEqual(p.rowOffset(3), 72)

	def test_invalidRowHeight(self: 'TestScrollProjection') -> None:
		with self.assertRaises(ValueError):
			ScrollProjection(self.rows, self.connectors, rowHeight=0)

	def test_emptyRowsGiveZeroOffsets(self: 'TestScrollProjection') -> None:
		self.assertEqual(ScrollProjection([], []).computeOffsets(120), SideOffsets(0, 0))

	def test_computeOffsets_fractionOnlyOnRealSides(self: 'TestScrollProjection') -> None:
		self.assertEqual(self.projection.computeOffsets(0), SideOffsets(0, 0))
		self.assertEqual(self.projection.computeOffsets(36), SideOffsets(36, 36))
		# Row 2 is a spacer on the left: the left column holds still
		self.assertEqual(self.projection.computeOffsets(60), SideOffsets(48, 60))
		self.assertEqual(self.projection.computeOffsets(-10), SideOffsets(0, 0))

	def test_bothSidedRowsStayAligned(self: 'TestScrollProjection') -> None:
		p = self.projection
		for rowIndex, row in enumerate(p.rows):
			if row.left.isSpacer or row.right.isSpacer:
				continue
			# At the row's own unified position both columns show it at the top
			offsets = p.computeOffsets(p.rowOffset(rowIndex))
			self.assertEqual(p.leftItemY(p.rowIdToLeftIndex[row.rowId], offsets), p.rightItemY(p.rowIdToRightIndex[row.rowId], offsets))

	def test_projectConnectors_unmeasuredLayout(self: 'TestScrollProjection') -> None:
		offsets = self.projection.computeOffsets(0)
		self.assertEqual(self.projection.projectConnectors(None, offsets), [])
		self.assertEqual(self.projection.projectConnectors(ConnectorLayout(10, 0, 20, 90), offsets), [])

	def test_projectConnectors_geometry(self: 'TestScrollProjection') -> None:
		change, added = self.projection.projectConnectors(LAYOUT, SideOffsets(0, 0))

		self.assertEqual(change.connectorId, "connector-0")
		self.assertEqual(change.kind, ConnectorKind.CHANGE)
		self.assertEqual((change.fromTop, change.fromBottom), (Point(10, 25), Point(10, 47)))
		self.assertEqual((change.toTop, change.toBottom), (Point(100, 25), Point(100, 47)))
		self.assertEqual(change.color, CONNECTOR_COLOURS[ConnectorKind.CHANGE])

		# Added line anchored below old line 2 (left item 1)
		self.assertEqual(added.kind, ConnectorKind.ADDED)
		self.assertEqual((added.toTop.y, added.toBottom.y), (49, 71))
		self.assertEqual((added.fromTop.y, added.fromBottom.y), (48 - ANCHOR_HALF_BAND, 48 + ANCHOR_HALF_BAND))
		self.assertEqual((added.curveStartX, added.curveEndX), (20, 90))

	def test_projectConnectors_followsScroll(self: 'TestScrollProjection') -> None:
		_, added = self.projection.projectConnectors(LAYOUT, self.projection.computeOffsets(60))
		self.assertEqual((added.toTop.y, added.toBottom.y), (49 - 60, 71 - 60))
		self.assertEqual(added.fromTop.y, 48 - 48 - ANCHOR_HALF_BAND)

	def test_unresolvableAnchorFallsBackToFileTop(self: 'TestScrollProjection') -> None:
		connectors = [
			ConnectorMeta(ConnectorKind.ADDED, "added-0-3", "added-0-3", 99),
			ConnectorMeta(ConnectorKind.ADDED, "added-0-3", "added-0-3", None),
		]
		projection = ScrollProjection(self.rows, connectors, rowHeight=24)
		offsets = SideOffsets(24, 30)
		geometries = projection.projectConnectors(LAYOUT, offsets)
		self.assertEqual(len(geometries), 2)
		for geometry in geometries:
			self.assertEqual((geometry.fromTop.y, geometry.fromBottom.y), (-24 - ANCHOR_HALF_BAND, -24 + ANCHOR_HALF_BAND))

	def test_removedConnectorAnchorsOnRightColumn(self: 'TestScrollProjection') -> None:
		rawDiff = "diff --git a/g.txt b/g.txt\n@@ -1,3 +1,2 @@\n a\n-gone\n b\n"
		rows, connectors = buildVisualRows(parseUnifiedDiff(rawDiff).files[0])
		projection = ScrollProjection(rows, connectors, rowHeight=20)
		(removed,) = projection.projectConnectors(LAYOUT, SideOffsets(0, 0))
		self.assertEqual((removed.fromTop.y, removed.fromBottom.y), (21, 39))
		self.assertEqual((removed.toTop.y, removed.toBottom.y), (20 - ANCHOR_HALF_BAND, 20 + ANCHOR_HALF_BAND))
		self.assertEqual(removed.color, CONNECTOR_COLOURS[ConnectorKind.REMOVED])

	def test_changeNavigation(self: 'TestScrollProjection') -> None:
		p = self.projection
		self.assertEqual(p.changeScrollTops(), [24, 48])
		self.assertEqual(p.nextChangeScrollTop(0), 24)
		self.assertEqual(p.nextChangeScrollTop(24), 48)
		self.assertIsNone(p.nextChangeScrollTop(48))
		self.assertEqual(p.previousChangeScrollTop(100), 48)
		self.assertEqual(p.previousChangeScrollTop(48), 24)
		self.assertIsNone(p.previousChangeScrollTop(24))


class TestConnectorAreaPath(unittest.TestCase):
	"""Unit tests for the closed connector outline."""

	def test_pathCommandSequence(self: 'TestConnectorAreaPath') -> None:
		geometry = ConnectorGeometry(
			connectorId="connector-0",
			kind=ConnectorKind.CHANGE,
			fromTop=Point(10, 20),
			fromBottom=Point(10, 44),
			toTop=Point(100, 120),
			toBottom=Point(100, 144),
			curveStartX=20,
			curveEndX=90,
			color="#2563eb",
		)
		path = buildConnectorAreaPath(geometry)
		self.assertTrue(path.startswith("M 10 20 L 20 20 C 55 20, 55 120, 90 120"))
		self.assertEqual(
			path,
			"M 10 20 L 20 20 C 55 20, 55 120, 90 120 L 100 120 L 100 144 "
			"L 90 144 C 55 144, 55 44, 20 44 L 10 44 Z"
		)

	def test_formatCoordinate(self: 'TestConnectorAreaPath') -> None:
		self.assertEqual(_formatCoordinate(2.0), "2")
		self.assertEqual(_formatCoordinate(1.5), "1.5")
		self.assertEqual(_formatCoordinate(1 / 3), "0.333")
		self.assertEqual(_formatCoordinate(-0.0), "0")
		self.assertEqual(_formatCoordinate(-12.25), "-12.25")


if __name__ == '__main__':
	unittest.main()
