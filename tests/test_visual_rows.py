import unittest
from typing import List
from unittest.mock import patch, MagicMock

# Ensure imports work correctly assuming tests are run from the project root
import sys
if '.' not in sys.path:
	sys.path.append('.')

from core.diff_model import DiffFile, DiffLine, LineType
from core.diff_parser import parseUnifiedDiff
from core.visual_rows import (
	SPACER, Cell, CellKind, ConnectorKind, ConnectorMeta, VisualRow,
	VisualRowBuilder, buildGapRows, buildHunkRows, buildVisualRows, groupConnectors,
)


def _parseSingle(body: str, path: str = "f.txt") -> DiffFile:
	return parseUnifiedDiff(f"diff --git a/{path} b/{path}\n--- a/{path}\n+++ b/{path}\n{body}").files[0]


def _numbered(prefix: str, count: int) -> List[str]:
	return [f"{prefix} {i}" for i in range(1, count + 1)]


class TestVisualRowBuilder(unittest.TestCase):
	"""Unit tests for turning parsed files into aligned visual rows and connectors."""

	def setUp(self: 'TestVisualRowBuilder') -> None:
		self.patcher = patch('core.visual_rows.logger', MagicMock())
		self.mock_logger = self.patcher.start()
		self.parserPatcher = patch('core.diff_parser.logger', MagicMock())
		self.parserPatcher.start()

	def tearDown(self: 'TestVisualRowBuilder') -> None:
		self.parserPatcher.stop()
		self.patcher.stop()

	def _assertCompleteAndAligned(self: 'TestVisualRowBuilder', rows: List[VisualRow], oldLines: List[str], newLines: List[str]) -> None:
		leftReal = [row.left.line for row in rows if not row.left.isSpacer]
		rightReal = [row.right.line for row in rows if not row.right.isSpacer]
		self.assertEqual([l.oldLineNumber for l in leftReal], list(range(1, len(oldLines) + 1)))
		self.assertEqual([l.newLineNumber for l in rightReal], list(range(1, len(newLines) + 1)))
		self.assertEqual([l.content for l in leftReal], oldLines)
		self.assertEqual([l.content for l in rightReal], newLines)

	# --- Hunk-only mode ---

	def test_removedThenAddedFormsOneChangeRow(self: 'TestVisualRowBuilder') -> None:
		diffFile = _parseSingle("@@ -1,2 +1,2 @@\n-hello\n+hello world\n keep\n")
		rows, connectors = buildVisualRows(diffFile)
		self.assertEqual([row.rowId for row in rows], ["change-0-0", "context-0-2"])
		change = rows[0]
		self.assertEqual((change.left.kind, change.right.kind), (CellKind.CHANGE, CellKind.CHANGE))
		self.assertEqual(change.left.line.content, "hello")
		self.assertEqual(change.right.line.content, "hello world")
		self.assertEqual(connectors, [ConnectorMeta(ConnectorKind.CHANGE, "change-0-0", "change-0-0")])

	def test_addedThenRemovedAlsoPairs(self: 'TestVisualRowBuilder') -> None:
		diffFile = _parseSingle("@@ -1 +1 @@\n+new\n-old\n")
		rows, connectors = buildVisualRows(diffFile)
		self.assertEqual(len(rows), 1)
		self.assertEqual(rows[0].left.line.content, "old")
		self.assertEqual(rows[0].right.line.content, "new")
		self.assertEqual(connectors[0].kind, ConnectorKind.CHANGE)

	def test_consecutiveAddedLinesShareOneConnector(self: 'TestVisualRowBuilder') -> None:
		diffFile = _parseSingle("@@ -2 +2,6 @@\n a\n+1\n+2\n+3\n+4\n+5\n")
		rows, connectors = buildVisualRows(diffFile)
		self.assertEqual(len(rows), 6)
		self.assertTrue(all(row.left.isSpacer for row in rows[1:]))
		self.assertEqual(connectors, [ConnectorMeta(ConnectorKind.ADDED, "added-0-1", "added-0-5", 2)])

	def test_removedLinesAtFileStartHaveNoAnchor(self: 'TestVisualRowBuilder') -> None:
		diffFile = _parseSingle("@@ -1,2 +0,0 @@\n-first\n-second\n")
		rows, connectors = buildVisualRows(diffFile)
		self.assertEqual([row.right for row in rows], [SPACER, SPACER])
		self.assertEqual(connectors, [ConnectorMeta(ConnectorKind.REMOVED, "removed-0-0", "removed-0-1", None)])

	def test_changeRowsAreGroupedAcrossPairs(self: 'TestVisualRowBuilder') -> None:
		diffFile = _parseSingle("@@ -1,2 +1,2 @@\n-a\n+A\n-b\n+B\n")
		rows, connectors = buildVisualRows(diffFile)
		self.assertEqual([row.rowId for row in rows], ["change-0-0", "change-0-2"])
		self.assertEqual(connectors, [ConnectorMeta(ConnectorKind.CHANGE, "change-0-0", "change-0-2")])

	def test_fileWithoutHunksHasNoRows(self: 'TestVisualRowBuilder') -> None:
		model = VisualRowBuilder().build(DiffFile("a.txt", "b.txt"), ["x"], ["x"])
		self.assertEqual(model.rows, [])
		self.assertEqual(model.connectors, [])

	def test_hunkOnlyModeSkipsGaps(self: 'TestVisualRowBuilder') -> None:
		diffFile = _parseSingle("@@ -10 +10 @@\n-old\n+new\n")
		rows, _ = buildVisualRows(diffFile)
		self.assertEqual([row.rowId for row in rows], ["change-0-0"])

	# --- Full-content mode ---

	def test_gapRowsBeforeFirstHunk(self: 'TestVisualRowBuilder') -> None:
		oldLines = _numbered("line", 20)
		newLines = list(oldLines)
		newLines[9] = "changed 10"
		diffFile = _parseSingle("@@ -10 +10 @@\n-line 10\n+changed 10\n")
		rows, connectors = buildVisualRows(diffFile, oldLines, newLines)

		self.assertEqual([row.rowId for row in rows[:9]], [f"context-full-{i}-{i}" for i in range(1, 10)])
		self.assertTrue(all(row.left.kind == CellKind.CONTEXT for row in rows[:9]))
		self.assertEqual([row.left.line.content for row in rows[:9]], oldLines[:9])
		self.assertEqual(rows[9].rowId, "change-0-0")
		self.assertEqual(len(rows), 20)
		self.assertEqual(len(connectors), 1)
		self._assertCompleteAndAligned(rows, oldLines, newLines)

	def test_gapBetweenHunksAndTrailingToEndOfFile(self: 'TestVisualRowBuilder') -> None:
		oldLines = _numbered("L", 10)
		newLines = ["L 1", "N 2", "L 3", "L 4", "L 5", "L 6", "L 7", "L 9", "L 10"]
		diffFile = _parseSingle("@@ -2 +2 @@\n-L 2\n+N 2\n@@ -8 +7,0 @@\n-L 8\n")
		rows, connectors = buildVisualRows(diffFile, oldLines, newLines)

		self.assertEqual([row.rowId for row in rows], [
			"context-full-1-1", "change-0-0",
			"context-full-3-3", "context-full-4-4", "context-full-5-5", "context-full-6-6", "context-full-7-7",
			"removed-1-0",
			"context-full-9-8", "context-full-10-9",
		])
		self.assertEqual(connectors[-1], ConnectorMeta(ConnectorKind.REMOVED, "removed-1-0", "removed-1-0", 7))
		self._assertCompleteAndAligned(rows, oldLines, newLines)

	def test_insertionAfterLine(self: 'TestVisualRowBuilder') -> None:
		oldLines = _numbered("L", 10)
		newLines = oldLines[:5] + ["X", "Y"] + oldLines[5:]
		diffFile = _parseSingle("@@ -5,0 +6,2 @@\n+X\n+Y\n")
		rows, connectors = buildVisualRows(diffFile, oldLines, newLines)

		self.assertEqual(len(rows), 12)
		self.assertEqual(connectors, [ConnectorMeta(ConnectorKind.ADDED, "added-0-0", "added-0-1", 5)])
		self._assertCompleteAndAligned(rows, oldLines, newLines)
		for row in rows:
			if not row.left.isSpacer and not row.right.isSpacer:
				self.assertEqual(row.left.line.content, row.right.line.content)

	def test_addedFileWithContents(self: 'TestVisualRowBuilder') -> None:
		rawDiff = "diff --git a/n.txt b/n.txt\nnew file mode 100644\n--- /dev/null\n+++ b/n.txt\n@@ -0,0 +1,3 @@\n+a\n+b\n+c\n"
		diffFile = parseUnifiedDiff(rawDiff).files[0]
		rows, connectors = buildVisualRows(diffFile, [], ["a", "b", "c"])
		self.assertEqual([row.rowId for row in rows], ["added-0-0", "added-0-1", "added-0-2"])
		self.assertEqual(connectors, [ConnectorMeta(ConnectorKind.ADDED, "added-0-0", "added-0-2", None)])

	# --- Segment functions ---

	def test_buildGapRows_surplusLinesGetConnectors(self: 'TestVisualRowBuilder') -> None:
		segment = buildGapRows(1, 3, 1, 1, ["a", "b", "c"], ["a"], 0, 0)
		self.assertEqual([row.rowId for row in segment.rows], ["context-full-1-1", "removed-full-2", "removed-full-3"])
		self.assertEqual([c.anchorLine for c in segment.connectors], [1, 1])
		self.assertEqual((segment.lastOldLine, segment.lastNewLine), (3, 1))

	def test_buildGapRows_emptyRange(self: 'TestVisualRowBuilder') -> None:
		segment = buildGapRows(5, 4, 5, 4, ["x"] * 10, ["x"] * 10, 4, 4)
		self.assertEqual(segment.rows, [])
		self.assertEqual((segment.lastOldLine, segment.lastNewLine), (4, 4))

	def test_buildHunkRows_threadsAnchors(self: 'TestVisualRowBuilder') -> None:
		hunk = _parseSingle("@@ -3,2 +3,1 @@\n x\n-y\n").hunks[0]
		segment = buildHunkRows(hunk, 4, 2, 2)
		self.assertEqual([row.rowId for row in segment.rows], ["context-4-0", "removed-4-1"])
		self.assertEqual(segment.connectors[0].anchorLine, 3)
		self.assertEqual((segment.lastOldLine, segment.lastNewLine), (4, 3))

	def test_groupConnectors_requiresAdjacencyAndSameAnchor(self: 'TestVisualRowBuilder') -> None:
		line = DiffLine(LineType.ADDED, "x", newLineNumber=1)
		rows = [VisualRow(f"r{i}", SPACER, Cell(CellKind.ADDED, line)) for i in range(4)]
		connectors = [
			ConnectorMeta(ConnectorKind.ADDED, "r0", "r0", 1),
			ConnectorMeta(ConnectorKind.ADDED, "r1", "r1", 2),
			ConnectorMeta(ConnectorKind.ADDED, "r3", "r3", 2),
		]
		grouped = groupConnectors(connectors, rows)
		self.assertEqual(len(grouped), 3)
		self.assertIsNot(grouped, connectors)

		sameAnchor = [ConnectorMeta(ConnectorKind.ADDED, f"r{i}", f"r{i}", 1) for i in range(3)]
		grouped = groupConnectors(sameAnchor, rows)
		self.assertEqual(grouped, [ConnectorMeta(ConnectorKind.ADDED, "r0", "r2", 1)])
		self.assertEqual(sameAnchor[0].endRowId, "r0")

	# --- Cell invariants ---

	def test_cellInvariants(self: 'TestVisualRowBuilder') -> None:
		line = DiffLine(LineType.CONTEXT, "x", 1, 1)
		with self.assertRaises(ValueError):
			Cell(CellKind.SPACER, line)
		with self.assertRaises(ValueError):
			Cell(CellKind.CONTEXT)
		with self.assertRaises(ValueError):
			VisualRow("empty", SPACER, SPACER)


if __name__ == '__main__':
	unittest.main()
