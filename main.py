# main.py
"""
Main application entry point.
Initialises logging, configuration, the GUI, and starts the Qt event loop.
"""
import sys
import logging
import os
from PySide6.QtWidgets import QApplication, QMessageBox
from PySide6.QtGui import QIcon
from core.config_manager import ConfigManager, SECTION_GUI, SECTION_LOGGING
from core.exceptions import ConfigurationError
from gui.main_window import MainWindow
from utils.logger_setup import setupLogging, parseLogLevel

# --- Constants ---
CONFIG_FILE_PATH: str = 'config.ini'
ENV_FILE_PATH: str = '.env'
DEFAULT_WINDOW_WIDTH: int = 1200
DEFAULT_WINDOW_HEIGHT: int = 800

def configure_logging(config_manager: ConfigManager) -> logging.Logger:
    """Configure logging based on loaded configuration settings."""
    console_log_level = parseLogLevel(config_manager.getConfigValue(SECTION_LOGGING, 'ConsoleLogLevel', fallback='INFO'))
    file_log_level = parseLogLevel(config_manager.getConfigValue(SECTION_LOGGING, 'FileLogLevel', fallback='DEBUG'), logging.DEBUG)
    log_dir = config_manager.getConfigValue(SECTION_LOGGING, 'LogDirectory', fallback='logs')
    log_filename = config_manager.getConfigValue(SECTION_LOGGING, 'LogFileName', fallback='best_diff.log')

    return setupLogging(
        logLevel=console_log_level,
        logToConsole=True,
        logToFile=True,
        logFileLevel=file_log_level,
        logDir=log_dir,
        logFileName=log_filename
    )

def _showFatalError(title: str, errorMessage: str) -> None:
	tempApp = QApplication.instance()
	if not tempApp:
		tempApp = QApplication(sys.argv)
	QMessageBox.critical(None, title, errorMessage)

def main() -> None:
	"""Main application entry point."""
	# Initial basic logging setup
	logger: logging.Logger = setupLogging(logToConsole=True, logToFile=True)
	logger.info("================ Application Starting ================")

	configManager: ConfigManager = ConfigManager(CONFIG_FILE_PATH, ENV_FILE_PATH)
	try:
		configManager.loadEnv()
		configManager.loadConfig()

		# Reconfigure logging with settings from config
		logger = configure_logging(configManager)
		logger.info("Configuration loaded. Logger reconfigured with settings from config.")
	except ConfigurationError as e:
		errorMessage = f"Fatal Configuration Error: {e}\nPlease check your '{ENV_FILE_PATH}' and '{CONFIG_FILE_PATH}' files.\nApplication cannot continue."
		logger.critical(errorMessage, exc_info=True)
		_showFatalError("Configuration Error", errorMessage)
		sys.exit(1)

	# --- GUI Initialisation ---
	app: QApplication = QApplication.instance()
	if not app:
		app = QApplication(sys.argv)

	iconPath: str = os.path.join('resources', 'app_icon.png')
	if os.path.exists(iconPath):
		app.setWindowIcon(QIcon(iconPath))

	try:
		mainWindow: MainWindow = MainWindow(configManager)

		# Set window geometry from config or use defaults
		width = configManager.getConfigValueInt(SECTION_GUI, 'WindowWidth', fallback=DEFAULT_WINDOW_WIDTH)
		height = configManager.getConfigValueInt(SECTION_GUI, 'WindowHeight', fallback=DEFAULT_WINDOW_HEIGHT)
		mainWindow.resize(width, height)

		# Center the window on screen
		screen = app.primaryScreen().geometry()
		mainWindow.setGeometry(
			(screen.width() - width) // 2,
			(screen.height() - height) // 2,
			width,
			height
		)

		mainWindow.show()
	except ConfigurationError as e:
		errorMessage = f"Invalid window settings in '{CONFIG_FILE_PATH}': {e}"
		logger.critical(errorMessage, exc_info=True)
		QMessageBox.critical(None, "Configuration Error", errorMessage)
		sys.exit(1)

	logger.info("Main window displayed. Starting Qt event loop.")
	exitCode: int = app.exec()
	logger.info(f"Application finished with exit code: {exitCode}")
	sys.exit(exitCode)

if __name__ == "__main__":
	main()
