import unittest
from unittest.mock import patch, MagicMock

# Ensure imports work correctly assuming tests are run from the project root
import sys
if '.' not in sys.path:
	sys.path.append('.')

from core.diff_model import DiffFile, LineType
from core.diff_parser import parseUnifiedDiff
from core.line_map import LineMapEntry, buildLineMap


class TestLineMap(unittest.TestCase):

	@patch('core.diff_parser.logger', MagicMock())
	def test_entriesFollowHunkOrder(self: 'TestLineMap') -> None:
		rawDiff = "diff --git a/a b/a\n@@ -1,2 +1,2 @@\n-x\n+y\n z\n@@ -9 +9,2 @@\n q\n+r\n"
		lineMap = buildLineMap(parseUnifiedDiff(rawDiff).files[0])
		self.assertEqual(lineMap.entries, [
			LineMapEntry(1, None, LineType.REMOVED),
			LineMapEntry(None, 1, LineType.ADDED),
			LineMapEntry(2, 2, LineType.CONTEXT),
			LineMapEntry(9, 9, LineType.CONTEXT),
			LineMapEntry(None, 10, LineType.ADDED),
		])
		self.assertEqual(lineMap.addedCount, 2)
		self.assertEqual(lineMap.removedCount, 1)
		self.assertEqual(lineMap.countByType(LineType.CONTEXT), 2)
		self.assertEqual(lineMap.summary(), "+2 -1")

	def test_fileWithoutHunks(self: 'TestLineMap') -> None:
		lineMap = buildLineMap(DiffFile("a", "b"))
		self.assertEqual(lineMap.entries, [])
		self.assertEqual(lineMap.summary(), "+0 -0")


if __name__ == '__main__':
	unittest.main()
