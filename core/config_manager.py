# core/config_manager.py
"""
Loads and stores the viewer's configuration.

Environment variables (optionally loaded from a .env file) select a workspace
to open at startup; the config.ini file holds window, logging and diff view
settings plus the last opened workspace, which is written back on change.
"""

import os
import configparser
from dotenv import load_dotenv
from typing import Optional, Any, List, NamedTuple
import logging

from .exceptions import ConfigurationError

# Get a logger instance specific to this module
logger: logging.Logger = logging.getLogger(__name__)

# --- Keys ---
ENV_WORKSPACE: str = "BEST_DIFF_WORKSPACE"
SECTION_GENERAL: str = "General"
SECTION_GUI: str = "GUI"
SECTION_LOGGING: str = "Logging"
SECTION_DIFF_VIEW: str = "DiffView"

DEFAULT_ROW_HEIGHT: int = 24
DEFAULT_GUTTER_WIDTH: int = 56
DEFAULT_FONT_FAMILY: str = "Monospace"
DEFAULT_FONT_SIZE: int = 10


class DiffViewSettings(NamedTuple):
	rowHeight: int = DEFAULT_ROW_HEIGHT
	gutterWidth: int = DEFAULT_GUTTER_WIDTH
	fontFamily: str = DEFAULT_FONT_FAMILY
	fontSize: int = DEFAULT_FONT_SIZE


def _stripInlineComment(value: str) -> str:
	"""Removes a trailing `# ...` or `; ...` comment from a raw ini value."""
	for marker in ('#', ';'):
		if marker in value:
			value = value.split(marker, 1)[0]
	return value.strip()


class ConfigManager:
	"""
	Handles loading and providing access to configuration parameters.
	Loads from .env and .ini files and saves changes back to the .ini file.
	"""
	_config: configparser.ConfigParser
	_envLoaded: bool
	_configLoaded: bool
	_configLoadError: Optional[Exception] = None
	_envFilePath: Optional[str]
	_configFilePath: Optional[str]

	def __init__(self: 'ConfigManager', configFilePath: Optional[str] = 'config.ini', envFilePath: Optional[str] = '.env') -> None:
		"""
		Initialises the ConfigManager. Nothing is read until loadEnv/loadConfig.

		Args:
			configFilePath (Optional[str]): Path to the .ini configuration file.
			envFilePath (Optional[str]): Path to the .env file for environment variables.
		"""
		self._config = configparser.ConfigParser(interpolation=None)
		self._envLoaded = False
		self._configLoaded = False
		self._configLoadError = None
		self._envFilePath = envFilePath
		self._configFilePath = configFilePath
		logger.debug(f"ConfigManager initialised with config file: '{configFilePath}', env file: '{envFilePath}'")

	def loadEnv(self: 'ConfigManager', override: bool = False) -> bool:
		"""
		Loads environment variables from the .env file, if it exists.

		Args:
			override (bool): Whether values from the file replace variables that
							 are already set in the environment.

		Returns:
			bool: True if the file was found and loaded, False otherwise.

		Raises:
			ConfigurationError: If the file exists but cannot be processed.
		"""
		if not self._envFilePath:
			logger.info("No .env file path specified. Skipping loading from .env file.")
			return False
		if not os.path.exists(self._envFilePath):
			logger.debug(f".env file not found at: {self._envFilePath}. Skipping.")
			return False
		try:
			logger.info(f"Loading environment variables from: {self._envFilePath}")
			self._envLoaded = load_dotenv(dotenv_path=self._envFilePath, override=override, verbose=True)
			if not self._envLoaded:
				logger.warning(f".env file found at '{self._envFilePath}' but nothing was loaded. File might be empty.")
			return self._envLoaded
		except Exception as e:
			logger.error(f"Failed to load .env file from '{self._envFilePath}': {e}", exc_info=True)
			raise ConfigurationError(f"Error processing .env file '{self._envFilePath}': {e}") from e

	def loadConfig(self: 'ConfigManager') -> None:
		"""
		(Re)loads the .ini file. A missing file is not an error; defaults apply.

		Raises:
			ConfigurationError: If the file exists but cannot be read or parsed.
		"""
		self._config = configparser.ConfigParser(interpolation=None)
		self._configLoaded = False
		self._configLoadError = None

		if not self._configFilePath:
			logger.info("No configuration file path specified. Using defaults.")
			return
		if not os.path.exists(self._configFilePath):
			logger.warning(f"Configuration file not found: {self._configFilePath}. Using defaults.")
			return

		try:
			logger.info(f"Loading configuration from: {self._configFilePath}")
			readFiles: List[str] = self._config.read(self._configFilePath, encoding='utf-8')
		except configparser.Error as e:
			logger.error(f"Failed to parse configuration file '{self._configFilePath}': {e}")
			self._configLoadError = e
			raise ConfigurationError(f"Error parsing config file '{self._configFilePath}': {e}") from e
		except (OSError, UnicodeDecodeError) as e:
			logger.error(f"Failed to read configuration file '{self._configFilePath}': {e}")
			self._configLoadError = e
			raise ConfigurationError(f"Error reading config file '{self._configFilePath}': {e}") from e

		if not readFiles:
			errMsg = f"Config file exists at '{self._configFilePath}' but could not be read."
			logger.error(errMsg)
			self._configLoadError = ConfigurationError(errMsg)
			raise self._configLoadError
		self._configLoaded = True
		logger.debug(f"Loaded configuration sections: {self._config.sections()}")

	def getEnvVar(self: 'ConfigManager', varName: str, defaultValue: Optional[str] = None, required: bool = False) -> Optional[str]:
		"""
		Retrieves an environment variable.

		Raises:
			ConfigurationError: If required=True and the variable is not set.
		"""
		value = os.getenv(varName)
		if value is None:
			if required:
				errMsg = f"Required environment variable '{varName}' is not set."
				logger.error(errMsg)
				raise ConfigurationError(errMsg)
			return defaultValue
		return value

	def getConfigValue(self: 'ConfigManager', section: str, key: str, fallback: Optional[Any] = None, required: bool = False) -> Optional[Any]:
		"""
		Retrieves a raw string value from the .ini file, without interpolation
		and with any inline comment removed.

		Args:
			section (str): The section name in the .ini file.
			key (str): The key name within the section.
			fallback (Optional[Any]): Value returned if the key is missing.
			required (bool): If True, a missing key raises instead of falling back.

		Returns:
			Optional[Any]: The value as a string, or fallback.

		Raises:
			ConfigurationError: If the key is required but missing, or if the
								config file failed to load earlier.
		"""
		if self._configLoadError is not None:
			raise ConfigurationError(f"Cannot retrieve config value; configuration file '{self._configFilePath}' failed to load. Error: {self._configLoadError}") from self._configLoadError

		if not self._config.has_option(section, key):
			if required:
				errMsg = f"Required configuration value '{key}' not found in section '{section}'."
				logger.error(errMsg)
				raise ConfigurationError(errMsg)
			logger.debug(f"Config value '{section}/{key}' not found, using fallback: {fallback}")
			return fallback

		value = _stripInlineComment(self._config.get(section, key, raw=True))
		logger.debug(f"Accessed config value '{section}/{key}'. Value: '{value}'")
		return value

	def getConfigValueInt(self: 'ConfigManager', section: str, key: str, fallback: Optional[int] = None, required: bool = False) -> Optional[int]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None: return fallback
		try:
			return int(valueStr)
		except (ValueError, TypeError) as e:
			errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid integer."
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from e

	def getConfigValueBool(self: 'ConfigManager', section: str, key: str, fallback: Optional[bool] = None, required: bool = False) -> Optional[bool]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None: return fallback
		valueLower = valueStr.strip().lower()
		if valueLower in ['true', 'yes', 'on', '1']: return True
		if valueLower in ['false', 'no', 'off', '0']: return False
		errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid boolean (use 1/yes/true/on or 0/no/false/off)."
		logger.error(errMsg)
		raise ConfigurationError(errMsg)

	def getConfigValueFloat(self: 'ConfigManager', section: str, key: str, fallback: Optional[float] = None, required: bool = False) -> Optional[float]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None: return fallback
		try:
			return float(valueStr)
		except (ValueError, TypeError) as e:
			errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid float."
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from e

	# --- Domain settings ---
	def getDiffViewSettings(self: 'ConfigManager') -> DiffViewSettings:
		"""
		Reads the [DiffView] section, falling back to defaults per key.

		Raises:
			ConfigurationError: If a value has the wrong type or a size is not positive.
		"""
		settings = DiffViewSettings(
			rowHeight=self.getConfigValueInt(SECTION_DIFF_VIEW, 'RowHeight', fallback=DEFAULT_ROW_HEIGHT),
			gutterWidth=self.getConfigValueInt(SECTION_DIFF_VIEW, 'GutterWidth', fallback=DEFAULT_GUTTER_WIDTH),
			fontFamily=self.getConfigValue(SECTION_DIFF_VIEW, 'FontFamily', fallback=DEFAULT_FONT_FAMILY),
			fontSize=self.getConfigValueInt(SECTION_DIFF_VIEW, 'FontSize', fallback=DEFAULT_FONT_SIZE),
		)
		for name in ('rowHeight', 'gutterWidth', 'fontSize'):
			if getattr(settings, name) <= 0:
				errMsg = f"Configuration value '{SECTION_DIFF_VIEW}/{name}' must be positive, got {getattr(settings, name)}."
				logger.error(errMsg)
				raise ConfigurationError(errMsg)
		return settings

	def getStartupWorkspace(self: 'ConfigManager') -> Optional[str]:
		"""Workspace to open at startup: the environment first, then the last one used."""
		return self.getEnvVar(ENV_WORKSPACE) or self.getConfigValue(SECTION_GENERAL, 'LastWorkspacePath')

	def rememberWorkspace(self: 'ConfigManager', workspacePath: str) -> None:
		"""Stores `workspacePath` as LastWorkspacePath and saves the file."""
		if self.getConfigValue(SECTION_GENERAL, 'LastWorkspacePath') == workspacePath:
			return
		self.setConfigValue(SECTION_GENERAL, 'LastWorkspacePath', workspacePath)
		self.saveConfig()

	def setConfigValue(self: 'ConfigManager', section: str, key: str, value: str) -> None:
		"""
		Sets a value in memory only; call saveConfig() to persist it.

		Raises:
			ConfigurationError: If the config file failed to load earlier.
		"""
		if self._configLoadError is not None:
			errMsg = f"Cannot set configuration value: '{self._configFilePath}' failed to load. Error: {self._configLoadError}"
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from self._configLoadError
		if not self._config.has_section(section):
			logger.debug(f"Adding new section '{section}' to in-memory configuration.")
			self._config.add_section(section)
		logger.debug(f"Setting in-memory config value: [{section}] {key} = {value}")
		self._config.set(section, key, value)

	def saveConfig(self: 'ConfigManager') -> None:
		"""
		Writes the in-memory configuration to the .ini file, creating its
		directory if needed.

		Raises:
			ConfigurationError: If no file path is set or the file cannot be written.
		"""
		if not self._configFilePath:
			errMsg = "Cannot save configuration: No configuration file path was specified during initialisation."
			logger.error(errMsg)
			raise ConfigurationError(errMsg)

		try:
			configDir = os.path.dirname(self._configFilePath)
			if configDir:
				os.makedirs(configDir, exist_ok=True)
			with open(self._configFilePath, 'w', encoding='utf-8') as configFile:
				self._config.write(configFile)
		except OSError as e:
			errMsg = f"Failed to write configuration file '{self._configFilePath}': {e}"
			logger.error(errMsg, exc_info=True)
			raise ConfigurationError(errMsg) from e
		self._configLoaded = True
		logger.info(f"Saved configuration to: {self._configFilePath}")

	@property
	def isEnvLoaded(self: 'ConfigManager') -> bool:
		return self._envLoaded

	@property
	def isConfigLoaded(self: 'ConfigManager') -> bool:
		return self._configLoaded
