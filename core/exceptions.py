# core/exceptions.py
"""
Defines custom exception classes for specific error conditions within the application.
The diff model itself never raises; these cover configuration, Git access and
reading user-selected files.
"""


class BaseApplicationError(Exception):
	"""
	Base class for all custom application-specific exceptions.
	Provides a common ancestor for catching application-related errors.
	"""
	def __init__(self: 'BaseApplicationError', message: str = "An application error occurred.") -> None:
		"""
		Initialises the BaseApplicationError.

		Args:
			message (str): A descriptive message for the error.
		"""
		super().__init__(message)


class ConfigurationError(BaseApplicationError):
	"""
	Raised for errors encountered during loading, parsing, or accessing
	configuration settings (e.g., missing keys, invalid formats).
	"""
	def __init__(self: 'ConfigurationError', message: str = "Configuration error.") -> None:
		super().__init__(message)


class GitError(BaseApplicationError):
	"""
	Raised when a workspace cannot be read through Git: the path is not a
	repository, a git command fails, or staging/unstaging a path is rejected.
	"""
	def __init__(self: 'GitError', message: str = "Git interaction error.") -> None:
		"""
		Initialises the GitError.

		Args:
			message (str): A descriptive message specific to the Git issue.
		"""
		super().__init__(message)


class FileProcessingError(BaseApplicationError):
	"""
	Raised when a patch file or a file chosen for comparison cannot be read
	or decoded as UTF-8 text.
	"""
	def __init__(self: 'FileProcessingError', message: str = "File processing error.") -> None:
		super().__init__(message)
