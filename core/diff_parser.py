# core/diff_parser.py
"""
Parses unified diff text (as produced by `git diff` or a patch file) into the
structured file/hunk/line model defined in core.diff_model.

The parser is lenient: lines it does not recognise are skipped
and it never raises. Input without any `diff --git` header yields an empty
result.
"""

import logging
import re
from typing import List, Optional

from .diff_model import DiffFile, DiffHunk, DiffLine, DiffParseResult, FileStatus, LineType

# Logger instance specific to this module
logger: logging.Logger = logging.getLogger(__name__)

# --- Constants ---
DIFF_HEADER_REGEX: re.Pattern = re.compile(r'^diff --git a/(.+?) b/(.+)$')
HUNK_HEADER_REGEX: re.Pattern = re.compile(r'^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@')
LINE_ENDING_REGEX: re.Pattern = re.compile(r'\r\n?')
NO_NEWLINE_MARKER: str = "\\ No newline at end of file"
DEV_NULL: str = "/dev/null"


def normalizeLineEndings(text: str) -> str:
	"""Converts CRLF and bare CR line endings to LF."""
	return LINE_ENDING_REGEX.sub("\n", text)


def _stripSidePrefix(path: str, prefix: str) -> Optional[str]:
	"""Maps `/dev/null` to None and removes a leading `a/` or `b/`."""
	if path == DEV_NULL:
		return None
	return path[len(prefix):] if path.startswith(prefix) else path


def _finaliseStatus(diffFile: DiffFile) -> None:
	"""Infers added/deleted from missing paths, defaulting to modified."""
	if diffFile.oldPath is None and diffFile.newPath is not None:
		diffFile.status = FileStatus.ADDED
	elif diffFile.newPath is None and diffFile.oldPath is not None:
		diffFile.status = FileStatus.DELETED
	elif not diffFile.status:
		diffFile.status = FileStatus.MODIFIED


class UnifiedDiffParser:
	"""
	Sequential scanner over unified diff lines.

	Keeps the file and hunk currently being filled plus the running old/new
	line counters of the open hunk. A new instance state is used for each
	call to `parse`, so one parser may be reused.
	"""

	def parse(self: 'UnifiedDiffParser', rawDiff: str) -> DiffParseResult:
		"""
		Parses raw diff text into a DiffParseResult.

		Args:
			rawDiff (str): Unified diff text; `\\n`, `\\r\\n` and `\\r` line endings are accepted.

		Returns:
			DiffParseResult: One DiffFile per `diff --git` section, in input order.
		"""
		lines: List[str] = normalizeLineEndings(rawDiff or "").split("\n")
		files: List[DiffFile] = []
		currentFile: Optional[DiffFile] = None
		currentHunk: Optional[DiffHunk] = None
		oldLine: int = 0
		newLine: int = 0
		# Lines the open hunk header still announces on each side
		oldRemaining: int = 0
		newRemaining: int = 0

		for line in lines:
			# --- File header ---
			diffMatch = DIFF_HEADER_REGEX.match(line)
			if diffMatch:
				if currentFile is not None:
					_finaliseStatus(currentFile)
				currentFile = DiffFile(oldPath=diffMatch.group(1), newPath=diffMatch.group(2), status=FileStatus.MODIFIED)
				files.append(currentFile)
				currentHunk = None
				oldRemaining = newRemaining = 0
				continue

			if currentFile is None:
				continue

			# --- Extended header lines ---
			if line.startswith("new file mode"):
				currentFile.status = FileStatus.ADDED
				continue
			if line.startswith("deleted file mode"):
				currentFile.status = FileStatus.DELETED
				continue
			# Inside a hunk body, `--- x` is a removed line `-- x`
			inHunkBody: bool = currentHunk is not None and (oldRemaining > 0 or newRemaining > 0)
			if not inHunkBody and line.startswith("--- "):
				currentFile.oldPath = _stripSidePrefix(line[4:].strip(), "a/")
				continue
			if not inHunkBody and line.startswith("+++ "):
				currentFile.newPath = _stripSidePrefix(line[4:].strip(), "b/")
				continue

			# --- Hunk header ---
			hunkMatch = HUNK_HEADER_REGEX.match(line)
			if hunkMatch:
				oldStart = int(hunkMatch.group(1))
				newStart = int(hunkMatch.group(3))
				currentHunk = DiffHunk(
					header=line,
					oldStart=oldStart,
					oldLines=int(hunkMatch.group(2)) if hunkMatch.group(2) is not None else 1,
					newStart=newStart,
					newLines=int(hunkMatch.group(4)) if hunkMatch.group(4) is not None else 1,
				)
				currentFile.hunks.append(currentHunk)
				oldLine = oldStart
				newLine = newStart
				oldRemaining = currentHunk.oldLines
				newRemaining = currentHunk.newLines
				continue

			if currentHunk is None:
				continue

			# --- Hunk body ---
			if line.startswith(NO_NEWLINE_MARKER):
				continue
			if line.startswith("+"):
				currentHunk.lines.append(DiffLine(LineType.ADDED, line[1:], newLineNumber=newLine))
				newLine += 1
				newRemaining -= 1
			elif line.startswith("-"):
				currentHunk.lines.append(DiffLine(LineType.REMOVED, line[1:], oldLineNumber=oldLine))
				oldLine += 1
				oldRemaining -= 1
			elif line.startswith(" "):
				currentHunk.lines.append(DiffLine(LineType.CONTEXT, line[1:], oldLineNumber=oldLine, newLineNumber=newLine))
				oldLine += 1
				newLine += 1
				oldRemaining -= 1
				newRemaining -= 1

		for diffFile in files:
			_finaliseStatus(diffFile)

		logger.debug(f"Parsed unified diff: {len(files)} file(s), {sum(len(f.hunks) for f in files)} hunk(s).")
		return DiffParseResult(files=files)


def parseUnifiedDiff(rawDiff: str) -> DiffParseResult:
	"""Convenience wrapper around UnifiedDiffParser.parse."""
	return UnifiedDiffParser().parse(rawDiff)
