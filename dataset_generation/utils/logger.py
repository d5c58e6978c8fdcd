"""
logger.py

Timestamped logging shared by the dataset generation scripts.

"""

import logging
import os

from dataset_generation.utils.utils_misc import get_timestamp

LOGGER_NAME = "stormLogger"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logger(log_dir="logs", log_filename="storm_analysis", timestamp=None, verbose=True):
    """
    Initialize a logger writing to a timestamped file in log_dir.

    Parameters
    ----------
    log_dir : str
        Directory to save logs. Created if it does not exist.
    log_filename : str
        Base name of the log file. Timestamp will be appended.
    timestamp : str, optional
        Timestamp to append. Defaults to the current time (YYYYmmddHHMM).
    verbose : bool
        If True, also logs to console.

    Returns
    -------
    logger : logging.Logger
        Configured logger instance.
    log_filepath : str
        Full path to the log file. If the shared logger is already
        configured, this is the file it is already writing to.
    """
    logger = get_logger()
    existing_filepath = _current_log_filepath(logger)
    if existing_filepath is not None:
        logger.info(f"Reusing logger: {existing_filepath}")
        return logger, existing_filepath

    if timestamp is None:
        timestamp = get_timestamp()

    os.makedirs(log_dir, exist_ok=True)
    log_filepath = os.path.join(log_dir, f"{log_filename}_{timestamp}.log")

    logger = _configure_logger(log_filepath, verbose=verbose)
    logger.info(f"Logger initialized: {log_filepath}")

    return logger, log_filepath


def get_logger():
    """Return the shared logger, configured or not."""
    return logging.getLogger(LOGGER_NAME)


def close_logger(logger):
    """
    Closes all handlers associated with the given logger.

    Parameters
    ----------
    logger : logging.Logger
        The logger instance to close.
    """
    for handler in logger.handlers[:]:  # Copy the list to avoid modification issues
        handler.close()
        logger.removeHandler(handler)


def _current_log_filepath(logger):
    """Return the file the logger already writes to, or None."""
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return handler.baseFilename
    return None


def _configure_logger(log_file, verbose):
    """
    Attach a file handler (and optionally a console handler) to the shared logger.

    If the logger already has handlers, e.g. when run_pipeline.py chains several
    scripts, it is returned unchanged so every step writes to the same file.
    """
    logger = get_logger()
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(log_file, mode="w")  # Overwrite if file exists
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
