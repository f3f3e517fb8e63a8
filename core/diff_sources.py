# core/diff_sources.py
"""
Sources of unified diff text.

Each source returns diff text with normalised (`\\n`) line endings, ready for
the unified diff parser:

- GitDiffSource wraps text already produced by `git diff`.
- PatchFileDiffSource wraps the contents of a `.diff` / `.patch` file.
- TwoFileDiffSource generates a diff between two texts with difflib.
"""

import difflib
import logging
from typing import List, Optional

from .diff_parser import normalizeLineEndings
from .exceptions import FileProcessingError

# Logger instance specific to this module
logger: logging.Logger = logging.getLogger(__name__)


def splitContentLines(text: Optional[str]) -> List[str]:
	"""
	Splits file content into lines after normalising line endings.

	A single trailing newline ends the last line rather than starting an
	empty one, so `"a\\nb\\n"` gives `["a", "b"]`. Empty text gives `[]`.
	"""
	if not text:
		return []
	lines: List[str] = normalizeLineEndings(text).split("\n")
	if lines[-1] == "":
		lines.pop()
	return lines


def readTextFile(filePath: str) -> str:
	"""
	Reads a UTF-8 text file chosen by the user.

	Raises:
		FileProcessingError: If the file cannot be read or is not valid UTF-8.
	"""
	logger.debug(f"Reading text file: {filePath}")
	try:
		with open(filePath, 'r', encoding='utf-8', errors='strict', newline='') as fileHandle:
			return fileHandle.read()
	except UnicodeDecodeError as e:
		errMsg: str = f"Could not decode file '{filePath}' using UTF-8. It might be binary or use a different encoding. Error: {e}"
		logger.error(errMsg)
		raise FileProcessingError(errMsg) from e
	except OSError as e:
		errMsg: str = f"IO error reading file '{filePath}': {e}"
		logger.error(errMsg)
		raise FileProcessingError(errMsg) from e


class DiffSource:
	"""Base class of all diff sources."""

	def getRawDiff(self: 'DiffSource') -> str:
		raise NotImplementedError


class GitDiffSource(DiffSource):
	def __init__(self: 'GitDiffSource', rawDiff: str) -> None:
		self._rawDiff: str = rawDiff

	def getRawDiff(self: 'GitDiffSource') -> str:
		return normalizeLineEndings(self._rawDiff)


class PatchFileDiffSource(DiffSource):
	def __init__(self: 'PatchFileDiffSource', patchContents: str) -> None:
		self._patchContents: str = patchContents

	@classmethod
	def fromFile(cls: type, patchPath: str) -> 'PatchFileDiffSource':
		"""
		Creates a source from a patch file on disk.

		Raises:
			FileProcessingError: If the file cannot be read as UTF-8 text.
		"""
		return cls(readTextFile(patchPath))

	def getRawDiff(self: 'PatchFileDiffSource') -> str:
		return normalizeLineEndings(self._patchContents)


class TwoFileDiffSource(DiffSource):
	"""
	Generates a unified diff between an old and a new text.

	The output starts with a `diff --git a/<path> b/<path>` header so the
	parser treats it like a Git diff of `filePath`. Identical texts produce the
	header only, which parses to a file without hunks.
	"""

	def __init__(self: 'TwoFileDiffSource', filePath: str, oldContent: str, newContent: str, contextLines: int = 3) -> None:
		self.filePath: str = filePath
		self.oldContent: str = oldContent
		self.newContent: str = newContent
		self.contextLines: int = contextLines

	@classmethod
	def fromFiles(cls: type, oldFilePath: str, newFilePath: str, displayPath: Optional[str] = None) -> 'TwoFileDiffSource':
		"""
		Creates a source comparing two files on disk.

		Args:
			oldFilePath (str): File shown on the left.
			newFilePath (str): File shown on the right.
			displayPath (Optional[str]): Path used in the diff header; defaults to `newFilePath`.

		Raises:
			FileProcessingError: If either file cannot be read as UTF-8 text.
		"""
		return cls(displayPath or newFilePath, readTextFile(oldFilePath), readTextFile(newFilePath))

	def getRawDiff(self: 'TwoFileDiffSource') -> str:
		oldLines = splitContentLines(self.oldContent)
		newLines = splitContentLines(self.newContent)
		header: List[str] = [f"diff --git a/{self.filePath} b/{self.filePath}"]
		body: List[str] = list(difflib.unified_diff(
			oldLines,
			newLines,
			fromfile=f"a/{self.filePath}",
			tofile=f"b/{self.filePath}",
			n=self.contextLines,
			lineterm="",
		))
		logger.debug(f"Generated {len(body)} diff line(s) for '{self.filePath}'.")
		return "\n".join(header + body)
