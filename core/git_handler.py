# core/git_handler.py
"""
Reads working-tree changes from a local Git repository and stages or
unstages individual files. Uses the GitPython library.

Loading a workspace runs `git diff --cached` (staged changes) and `git diff`
(unstaged changes), parses both and collects the full old/new contents of
every changed file so the diff view can fill in the unchanged regions.
"""
import git # Import the git library
import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple

from .diff_model import DiffFile, FileStatus
from .diff_parser import parseUnifiedDiff
from .diff_sources import splitContentLines
from .exceptions import GitError
from .file_list_store import FileGroup

# Logger instance specific to this module for targeted logging
logger: logging.Logger = logging.getLogger(__name__)


class FileContents(NamedTuple):
	oldLines: List[str]
	newLines: List[str]


EMPTY_CONTENTS: FileContents = FileContents([], [])

# A path can be listed in both groups with different new sides
ContentsKey = Tuple[FileGroup, str]


@dataclass
class WorkspaceDiff:
	"""
	Everything the window needs to show one workspace.

	`fileContents` is keyed by (group, display path). A path that is both
	staged and unstaged has one entry per group: the staged entry ends at the
	index, the unstaged one at the working tree.
	"""
	rootPath: str
	staged: List[DiffFile] = field(default_factory=list)
	unstaged: List[DiffFile] = field(default_factory=list)
	fileContents: Dict[ContentsKey, FileContents] = field(default_factory=dict)

	def contentsFor(self: 'WorkspaceDiff', group: FileGroup, diffFile: DiffFile) -> FileContents:
		return self.fileContents.get((group, diffFile.displayPath or ""), EMPTY_CONTENTS)


class GitHandler:
	"""
	Provides methods to interact with a local Git working tree via GitPython.
	Every public method opens the repository afresh, so one handler can serve
	any number of workspaces.
	"""

	def _openRepo(self: 'GitHandler', repoPath: str) -> git.Repo:
		"""
		Opens the repository at `repoPath`.

		Raises:
			GitError: If the path does not exist or is not inside a Git repository.
		"""
		try:
			return git.Repo(repoPath, search_parent_directories=False)
		except git.NoSuchPathError:
			errMsg: str = f"Workspace path '{repoPath}' does not exist."
			logger.error(errMsg)
			raise GitError(errMsg) from None
		except git.InvalidGitRepositoryError:
			errMsg: str = f"'{repoPath}' is not a valid Git repository."
			logger.error(errMsg)
			raise GitError(errMsg) from None

	def loadWorkspaceDiff(self: 'GitHandler', rootPath: str) -> WorkspaceDiff:
		"""
		Loads staged and unstaged changes of the working tree at `rootPath`.

		Old contents come from `HEAD:<path>` unless the file was added. New
		contents come from the index (`:<path>`) for staged files and from the
		working tree for unstaged ones, unless the file was deleted. Content
		that cannot be read becomes an empty list.

		Args:
			rootPath (str): Root directory of the repository.

		Returns:
			WorkspaceDiff: Parsed staged/unstaged files plus their contents.

		Raises:
			GitError: If the path is not a repository or `git diff` fails.
		"""
		logger.info(f"Loading workspace diff for '{rootPath}'")
		repo: git.Repo = self._openRepo(rootPath)
		try:
			staged: List[DiffFile] = self._loadDiffFiles(repo, "--cached")
			unstaged: List[DiffFile] = self._loadDiffFiles(repo)
		except git.GitCommandError as e:
			stderrOutput: str = str(getattr(e, 'stderr', "No stderr output.")).strip()
			errMsg: str = f"Git command 'diff' failed in '{rootPath}': {stderrOutput}"
			logger.error(errMsg, exc_info=False)
			raise GitError(errMsg) from e

		workspace = WorkspaceDiff(rootPath=rootPath, staged=staged, unstaged=unstaged)
		for group, files in ((FileGroup.STAGED, staged), (FileGroup.UNSTAGED, unstaged)):
			for diffFile in files:
				displayPath: Optional[str] = diffFile.displayPath
				if not displayPath:
					continue
				workspace.fileContents[(group, displayPath)] = self._loadFileContents(repo, rootPath, diffFile, group)

		logger.info(f"Workspace '{rootPath}': {len(staged)} staged, {len(unstaged)} unstaged file(s).")
		return workspace

	def _loadDiffFiles(self: 'GitHandler', repo: git.Repo, *diffArgs: str) -> List[DiffFile]:
		# --no-color keeps user colour settings out of the parsed text
		diffText: str = repo.git.diff("--no-color", *diffArgs)
		if not diffText.strip():
			return []
		return parseUnifiedDiff(diffText).files

	def _loadFileContents(self: 'GitHandler', repo: git.Repo, rootPath: str, diffFile: DiffFile, group: FileGroup) -> FileContents:
		oldPath: str = diffFile.oldPath or diffFile.newPath or ""
		newPath: str = diffFile.newPath or diffFile.oldPath or ""

		oldContent: str = ""
		newContent: str = ""
		if diffFile.status != FileStatus.ADDED and oldPath:
			oldContent = self._gitShowSafe(repo, f"HEAD:{oldPath}")
		if diffFile.status != FileStatus.DELETED and newPath:
			if group == FileGroup.STAGED:
				newContent = self._gitShowSafe(repo, f":{newPath}")
			else:
				newContent = self._readWorkingTreeSafe(rootPath, newPath)

		return FileContents(splitContentLines(oldContent), splitContentLines(newContent))

	def _gitShowSafe(self: 'GitHandler', repo: git.Repo, objectSpec: str) -> str:
		"""Returns `git show <objectSpec>` output, or an empty string if the object does not exist."""
		try:
			return repo.git.show(objectSpec, strip_newline_in_stdout=False)
		except git.GitCommandError as e:
			logger.debug(f"git show '{objectSpec}' failed: {str(getattr(e, 'stderr', e)).strip()}")
			return ""

	def _readWorkingTreeSafe(self: 'GitHandler', rootPath: str, filePath: str) -> str:
		fullPath: str = os.path.normpath(os.path.join(rootPath, filePath))
		try:
			with open(fullPath, 'r', encoding='utf-8', errors='strict', newline='') as fileHandle:
				return fileHandle.read()
		except (OSError, UnicodeDecodeError) as e:
			logger.debug(f"Could not read working tree file '{fullPath}': {e}")
			return ""

	# --- Staging ---
	def stageFile(self: 'GitHandler', repoPath: str, filePath: str, oldPath: Optional[str] = None) -> None:
		"""
		Stages one path (`git add -- <path>`). Also works for deletions.
		For a rename pass the old path too, so both halves are staged.

		Raises:
			GitError: If the repository cannot be opened or git rejects the path.
		"""
		self._runPathCommand(repoPath, filePath, oldPath, "add")
		logger.info(f"Staged '{filePath}' in '{repoPath}'.")

	def unstageFile(self: 'GitHandler', repoPath: str, filePath: str, oldPath: Optional[str] = None) -> None:
		"""
		Removes one path from the index (`git reset -- <path>`), keeping the
		working tree untouched. For a rename the old path is reset as well.

		Raises:
			GitError: If the repository cannot be opened or git rejects the path.
		"""
		self._runPathCommand(repoPath, filePath, oldPath, "reset")
		logger.info(f"Unstaged '{filePath}' in '{repoPath}'.")

	def _runPathCommand(self: 'GitHandler', repoPath: str, filePath: str, oldPath: Optional[str], command: str) -> None:
		paths: List[str] = [filePath]
		if oldPath and oldPath != filePath:
			paths.append(oldPath)
		repo: git.Repo = self._openRepo(repoPath)
		try:
			getattr(repo.git, command)("--", *paths)
		except git.GitCommandError as e:
			stderrOutput: str = str(getattr(e, 'stderr', "No stderr output.")).strip()
			errMsg: str = f"Git command '{command}' failed for '{filePath}': {stderrOutput}"
			logger.error(errMsg, exc_info=False)
			raise GitError(errMsg) from e
