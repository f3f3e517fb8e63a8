# utils/logger_setup.py
"""
Central logging configuration for the viewer: a console handler on stderr and
a rotating log file, both attached to the root logger.
"""

import logging
import sys
import os
from logging.handlers import RotatingFileHandler
from typing import List, Optional

DEFAULT_LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'
DEFAULT_LOG_FILE_NAME: str = 'best_diff.log'
DEFAULT_LOG_DIR: str = 'logs'


def parseLogLevel(levelName: Optional[str], fallback: int = logging.INFO) -> int:
	"""
	Converts a level name such as 'debug' or 'WARNING' to its numeric value.

	Unknown or empty names return `fallback`.
	"""
	if not levelName:
		return fallback
	level = logging.getLevelName(levelName.strip().upper())
	return level if isinstance(level, int) else fallback


def setupLogging(
	logLevel: int = logging.DEBUG,
	logToConsole: bool = True,
	logToFile: bool = True,
	logFileName: str = DEFAULT_LOG_FILE_NAME,
	logFileLevel: int = logging.DEBUG,
	logDir: str = DEFAULT_LOG_DIR,
	maxBytes: int = 10*1024*1024, # 10 MB
	backupCount: int = 5,
	logFormat: str = DEFAULT_LOG_FORMAT,
	dateFormat: str = DEFAULT_DATE_FORMAT
) -> logging.Logger:
	"""
	Configures the root logger, replacing any handlers it already has.

	Args:
		logLevel (int): Minimum level of the root logger.
		logToConsole (bool): Whether to log to stderr.
		logToFile (bool): Whether to log to a rotating file.
		logFileName (str): Name of the log file inside `logDir`.
		logFileLevel (int): Minimum level written to the file.
		logDir (str): Directory of the log file; created if missing.
		maxBytes (int): Size at which the log file rotates.
		backupCount (int): Number of rotated files kept.
		logFormat (str): Format string for both handlers.
		dateFormat (str): Date format for both handlers.

	Returns:
		logging.Logger: The configured root logger.
	"""
	logHandlers: List[logging.Handler] = []
	formatter: logging.Formatter = logging.Formatter(logFormat, datefmt=dateFormat)

	if logToConsole:
		consoleHandler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
		consoleHandler.setFormatter(formatter)
		logHandlers.append(consoleHandler)

	logFilePath: str = os.path.join(os.path.abspath(logDir), logFileName)
	if logToFile:
		try:
			os.makedirs(os.path.dirname(logFilePath), exist_ok=True)
			fileHandler: RotatingFileHandler = RotatingFileHandler(
				logFilePath,
				maxBytes=maxBytes,
				backupCount=backupCount,
				encoding='utf-8'
			)
			fileHandler.setFormatter(formatter)
			fileHandler.setLevel(logFileLevel)
			logHandlers.append(fileHandler)
		except OSError as e:
			# Continue with console logging only
			print(f"ERROR: Failed to configure file logging to '{logFilePath}': {e}", file=sys.stderr)

	rootLogger: logging.Logger = logging.getLogger()
	rootLogger.setLevel(logLevel)
	for handler in rootLogger.handlers[:]:
		rootLogger.removeHandler(handler)
	for handler in logHandlers:
		rootLogger.addHandler(handler)

	if logHandlers:
		rootLogger.info(f"Logging initialised (Root Level: {logging.getLevelName(rootLogger.level)}). Console: {logToConsole}, File: {logToFile} ('{logFilePath}').")
	else:
		print("WARNING: Logging initialisation completed but no handlers were configured.", file=sys.stderr)

	return rootLogger
