# core/inline_diff.py
"""
Character-level highlighting for a paired old/new line.

Only trims the common prefix and suffix; there is no word-level or fuzzy
matching. The middle span of each side is what the view highlights.
"""

from typing import NamedTuple


class InlineSegments(NamedTuple):
	"""One side of a paired line split into shared prefix, changed middle and shared suffix."""
	before: str
	changed: str
	after: str


class InlineDiff(NamedTuple):
	old: InlineSegments
	new: InlineSegments


EMPTY_SEGMENTS: InlineSegments = InlineSegments("", "", "")


def diffPair(oldText: str, newText: str) -> InlineDiff:
	"""
	Splits two corresponding lines around their longest common prefix and suffix.

	The suffix search stops before it would reach into the prefix, so
	`before + changed + after` always reconstructs each input.

	Args:
		oldText (str): Line content on the old side.
		newText (str): Line content on the new side.

	Returns:
		InlineDiff: Segments for the old and the new side. `before` and `after`
					are identical on both sides.
	"""
	if not oldText and not newText:
		return InlineDiff(EMPTY_SEGMENTS, EMPTY_SEGMENTS)

	oldLength: int = len(oldText)
	newLength: int = len(newText)

	prefix: int = 0
	while prefix < oldLength and prefix < newLength and oldText[prefix] == newText[prefix]:
		prefix += 1

	suffix: int = 0
	while (suffix < oldLength - prefix and suffix < newLength - prefix
			and oldText[oldLength - 1 - suffix] == newText[newLength - 1 - suffix]):
		suffix += 1

	return InlineDiff(
		old=InlineSegments(oldText[:prefix], oldText[prefix:oldLength - suffix], oldText[oldLength - suffix:]),
		new=InlineSegments(newText[:prefix], newText[prefix:newLength - suffix], newText[newLength - suffix:]),
	)
