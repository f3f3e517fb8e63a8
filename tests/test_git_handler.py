import unittest
import os
import shutil
import tempfile
from typing import Dict, Optional
from unittest.mock import patch, MagicMock, call

# Ensure imports work correctly assuming tests are run from the project root
import sys
if '.' not in sys.path:
	sys.path.append('.')

import git

from core.diff_model import FileStatus
from core.exceptions import GitError
from core.file_list_store import FileGroup
from core.git_handler import FileContents, GitHandler, WorkspaceDiff

STAGED_DIFF: str = (
	"diff --git a/new.txt b/new.txt\n"
	"new file mode 100644\n"
	"--- /dev/null\n"
	"+++ b/new.txt\n"
	"@@ -0,0 +1,2 @@\n"
	"+first\n"
	"+second\n"
	"diff --git a/gone.txt b/gone.txt\n"
	"deleted file mode 100644\n"
	"--- a/gone.txt\n"
	"+++ /dev/null\n"
	"@@ -1 +0,0 @@\n"
	"-bye\n"
)

UNSTAGED_DIFF: str = (
	"diff --git a/app.py b/app.py\n"
	"--- a/app.py\n"
	"+++ b/app.py\n"
	"@@ -1,2 +1,2 @@\n"
	" import os\n"
	"-print(1)\n"
	"+print(2)\n"
)


class TestGitHandler(unittest.TestCase):
	"""
	Unit tests for GitHandler. git.Repo is mocked; GitPython's exception
	classes are the real ones.
	"""

	def setUp(self: 'TestGitHandler') -> None:
		self._tempDir: str = tempfile.mkdtemp()
		with open(os.path.join(self._tempDir, "app.py"), 'w', encoding='utf-8', newline='') as f:
			f.write("import os\r\nprint(2)\r\n")

		self.loggerPatcher = patch('core.git_handler.logger', MagicMock())
		self.mock_logger = self.loggerPatcher.start()
		self.parserPatcher = patch('core.diff_parser.logger', MagicMock())
		self.parserPatcher.start()
		self.repoPatcher = patch('core.git_handler.git.Repo')
		self.mock_repo_class = self.repoPatcher.start()

		self.mock_repo = MagicMock()
		self.mock_repo_class.return_value = self.mock_repo
		self.mock_repo.git.diff.side_effect = self._fakeDiff
		self.showOutputs: Dict[str, str] = {
			"HEAD:gone.txt": "bye\n",
			":new.txt": "first\nsecond\n",
			"HEAD:app.py": "import os\nprint(1)\n",
		}
		self.mock_repo.git.show.side_effect = self._fakeShow
		self.handler = GitHandler()

	def tearDown(self: 'TestGitHandler') -> None:
		self.repoPatcher.stop()
		self.parserPatcher.stop()
		self.loggerPatcher.stop()
		shutil.rmtree(self._tempDir, ignore_errors=True)

	def _fakeDiff(self: 'TestGitHandler', *args: str) -> str:
		return STAGED_DIFF if "--cached" in args else UNSTAGED_DIFF

	def _fakeShow(self: 'TestGitHandler', objectSpec: str, strip_newline_in_stdout: bool = True) -> str:
		if objectSpec not in self.showOutputs:
			raise git.GitCommandError(["git", "show", objectSpec], 128, stderr=f"fatal: path '{objectSpec}' does not exist")
		return self.showOutputs[objectSpec]

	# --- Workspace loading ---

	def test_loadWorkspaceDiff_groupsAndContents(self: 'TestGitHandler') -> None:
		workspace = self.handler.loadWorkspaceDiff(self._tempDir)

		self.assertIsInstance(workspace, WorkspaceDiff)
		self.mock_repo_class.assert_called_once_with(self._tempDir, search_parent_directories=False)
		self.mock_repo.git.diff.assert_has_calls([call("--no-color", "--cached"), call("--no-color")])
		self.assertEqual([f.displayPath for f in workspace.staged], ["new.txt", "gone.txt"])
		self.assertEqual([f.status for f in workspace.staged], [FileStatus.ADDED, FileStatus.DELETED])
		self.assertEqual([f.displayPath for f in workspace.unstaged], ["app.py"])

		self.assertEqual(workspace.fileContents[(FileGroup.STAGED, "new.txt")], FileContents([], ["first", "second"]))
		self.assertEqual(workspace.fileContents[(FileGroup.STAGED, "gone.txt")], FileContents(["bye"], []))
		# Working tree content, with its CRLF endings normalised
		self.assertEqual(workspace.fileContents[(FileGroup.UNSTAGED, "app.py")], FileContents(["import os", "print(1)"], ["import os", "print(2)"]))
		self.assertEqual(workspace.contentsFor(FileGroup.UNSTAGED, workspace.unstaged[0]).newLines, ["import os", "print(2)"])

	def test_loadWorkspaceDiff_addedFileNeverReadsHead(self: 'TestGitHandler') -> None:
		self.handler.loadWorkspaceDiff(self._tempDir)
		requested = [c.args[0] for c in self.mock_repo.git.show.call_args_list]
		self.assertNotIn("HEAD:new.txt", requested)
		self.assertNotIn(":gone.txt", requested)
		for c in self.mock_repo.git.show.call_args_list:
			self.assertEqual(c.kwargs, {"strip_newline_in_stdout": False})

	def test_loadWorkspaceDiff_missingContentBecomesEmpty(self: 'TestGitHandler') -> None:
		del self.showOutputs["HEAD:app.py"]
		os.remove(os.path.join(self._tempDir, "app.py"))
		workspace = self.handler.loadWorkspaceDiff(self._tempDir)
		self.assertEqual(workspace.fileContents[(FileGroup.UNSTAGED, "app.py")], FileContents([], []))

	def test_loadWorkspaceDiff_pathInBothGroupsKeepsIndexForStaged(self: 'TestGitHandler') -> None:
		stagedAppDiff = "diff --git a/app.py b/app.py\n--- a/app.py\n+++ b/app.py\n@@ -2 +2 @@\n-print(1)\n+print(3)\n"
		unstagedAppDiff = "diff --git a/app.py b/app.py\n--- a/app.py\n+++ b/app.py\n@@ -2 +2 @@\n-print(3)\n+print(2)\n"
		self.mock_repo.git.diff.side_effect = lambda *args: stagedAppDiff if "--cached" in args else unstagedAppDiff
		self.showOutputs[":app.py"] = "import os\nprint(3)\n"

		workspace = self.handler.loadWorkspaceDiff(self._tempDir)

		stagedContents = workspace.contentsFor(FileGroup.STAGED, workspace.staged[0])
		unstagedContents = workspace.contentsFor(FileGroup.UNSTAGED, workspace.unstaged[0])
		self.assertEqual(stagedContents.newLines, ["import os", "print(3)"])
		self.assertEqual(unstagedContents.newLines, ["import os", "print(2)"])
		self.assertEqual(set(workspace.fileContents), {(FileGroup.STAGED, "app.py"), (FileGroup.UNSTAGED, "app.py")})

	def test_loadWorkspaceDiff_cleanTree(self: 'TestGitHandler') -> None:
		self.mock_repo.git.diff.side_effect = None
		self.mock_repo.git.diff.return_value = ""
		workspace = self.handler.loadWorkspaceDiff(self._tempDir)
		self.assertEqual((workspace.staged, workspace.unstaged, workspace.fileContents), ([], [], {}))

	def test_loadWorkspaceDiff_diffFailure(self: 'TestGitHandler') -> None:
		self.mock_repo.git.diff.side_effect = git.GitCommandError(["git", "diff"], 129, stderr="fatal: bad revision")
		with self.assertRaisesRegex(GitError, "Git command 'diff' failed.*bad revision"):
			self.handler.loadWorkspaceDiff(self._tempDir)

	def test_openRepo_errorsAreWrapped(self: 'TestGitHandler') -> None:
		self.mock_repo_class.side_effect = git.InvalidGitRepositoryError(self._tempDir)
		with self.assertRaisesRegex(GitError, "not a valid Git repository"):
			self.handler.loadWorkspaceDiff(self._tempDir)

		self.mock_repo_class.side_effect = git.NoSuchPathError("/nowhere")
		with self.assertRaisesRegex(GitError, "does not exist"):
			self.handler.stageFile("/nowhere", "a.txt")

	# --- Staging ---

	def test_stageAndUnstage(self: 'TestGitHandler') -> None:
		self.handler.stageFile(self._tempDir, "app.py")
		self.mock_repo.git.add.assert_called_once_with("--", "app.py")
		self.handler.unstageFile(self._tempDir, "new.txt")
		self.mock_repo.git.reset.assert_called_once_with("--", "new.txt")

	def test_stageAndUnstageRenameCoverBothPaths(self: 'TestGitHandler') -> None:
		self.handler.stageFile(self._tempDir, "lib/new_name.py", "lib/old_name.py")
		self.mock_repo.git.add.assert_called_once_with("--", "lib/new_name.py", "lib/old_name.py")
		self.handler.unstageFile(self._tempDir, "lib/new_name.py", "lib/old_name.py")
		self.mock_repo.git.reset.assert_called_once_with("--", "lib/new_name.py", "lib/old_name.py")

	def test_stageSamePathTwiceIsPassedOnce(self: 'TestGitHandler') -> None:
		self.handler.stageFile(self._tempDir, "app.py", "app.py")
		self.mock_repo.git.add.assert_called_once_with("--", "app.py")

	def test_stageFailureRaisesGitError(self: 'TestGitHandler') -> None:
		self.mock_repo.git.add.side_effect = git.GitCommandError(["git", "add"], 128, stderr="fatal: pathspec 'x' did not match any files")
		with self.assertRaisesRegex(GitError, "Git command 'add' failed for 'x'.*pathspec"):
			self.handler.stageFile(self._tempDir, "x")


if __name__ == '__main__':
	unittest.main()
