# person_extractor/utils/logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config.settings import Config, load_config


def setup_logger(config_path=None):
    """
    Sets up a Unicode-safe logger based on the configuration file.
    Defaults to Config.CONFIG_PATH (PERSON_EXTRACTOR_CONFIG); LOG_LEVEL applies when the file sets no level.
    """

    log_config = load_config(config_path)["logging"]

    level = getattr(logging, str(log_config.get('level', Config.LOG_LEVEL)).upper(), logging.INFO)
    filename = log_config.get('log_file')

    logger = logging.getLogger("PersonExtractor")
    logger.setLevel(level)
    logger.propagate = False  # Prevent double logging

    # Clear existing handlers (important for re-runs)
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
    )

    # -----------------------------
    # Console Handler (UTF-8 SAFE)
    # -----------------------------
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # pytest and some IDEs replace stdout with objects lacking reconfigure()
    reconfigure = getattr(console_handler.stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8", errors="replace")

    logger.addHandler(console_handler)

    # -----------------------------
    # File Handler (UTF-8 SAFE)
    # -----------------------------
    if filename:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename,
            maxBytes=log_config.get('max_log_size_mb', 10) * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
            errors="replace"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Singleton instance
logger = setup_logger()
