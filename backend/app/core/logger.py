import logging
import os
from logging.handlers import RotatingFileHandler
from app.core.config import settings

class LoggerConfig:
    """
    Sets up the application logger: a rotating file under `log_directory`
    plus console output, both at the configured level.
    """
    def __init__(
        self, env=20, logger_name="RouteFinder", log_directory="logs", log_file="app.log"
    ):
        self.logger_name = logger_name
        self.log_directory = os.path.abspath(log_directory)
        self.log_file_path = os.path.join(self.log_directory, log_file)
        self.env = env
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

        self.logger = logging.getLogger(self.logger_name)
        self.setup_logger()

    def setup_logger(self):
        formatter = logging.Formatter(self.log_format)

        # Re-imports (uvicorn --reload, test collection) must not stack handlers
        if not self.logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(self.env)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            try:
                os.makedirs(self.log_directory, exist_ok=True)
                file_handler = RotatingFileHandler(
                    self.log_file_path, backupCount=5, maxBytes=1024 * 1024 * 10, encoding="utf-8"
                )
                file_handler.setLevel(self.env)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)
            except OSError as e:
                self.logger.warning(f"File logging disabled, cannot write to {self.log_file_path}: {str(e)}")

        self.logger.setLevel(self.env)

    def log(self, level: int, message: str, extra: dict = None):
        """Simple wrapper to log messages"""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message)

# Initialize Logger
logs = LoggerConfig(
    env=settings.LOGGER,
    logger_name="ROUTE-BE",
    log_directory="logs",
    log_file="app.log"
)
