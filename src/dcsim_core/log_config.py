# --- src/dcsim_core/log_config.py ---
import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "DCSIM_LOG_LEVEL"


def setup_logging(level=None):
    """ Configures basic logging to stdout. """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()

    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"
    )
    package_logger = logging.getLogger("dcsim_core")

    # Clear existing handlers
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    package_logger.setLevel(level)
    package_logger.addHandler(console_handler)
    package_logger.debug("Logging configured.")
