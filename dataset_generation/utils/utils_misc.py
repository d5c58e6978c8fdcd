"""
utils_misc.py

Miscellaneous, general utils functions used across scripts

"""

import os
from datetime import datetime


def get_timestamp():
    """Timestamp used in log and output filenames, e.g. 202410181420."""
    return datetime.now().strftime("%Y%m%d%H%M")


def check_dir_exists(dir):
    """
    Raise an error if a directory does not exist.

    Parameters
    ----------
    dir : str
        Path to the directory.

    Raises
    ------
    NotADirectoryError
        If the directory does not exist.
    """
    if not os.path.isdir(dir):
        raise NotADirectoryError(f"Directory does not exist: {dir}")


def check_file_exists(filepath):
    """
    Raise an error if a file does not exist.

    Parameters
    ----------
    filepath : str
        Path to the file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"File does not exist: {filepath}")


def check_required_columns(df, required_columns, df_name="DataFrame"):
    """
    Raise an error if any required column is missing from a DataFrame.

    Parameters
    ----------
    df : pd.DataFrame
    required_columns : list of str
    df_name : str, optional
        Name used in the error message.

    Raises
    ------
    ValueError
        If one or more columns are missing.
    """
    missing = [col for col in required_columns if col not in df.columns]
    if missing:
        raise ValueError(f"{df_name} is missing required columns: {missing}")


def make_parent_dir(filepath):
    """Create the parent directory of filepath if it doesn't already exist."""
    parent = os.path.dirname(filepath)
    if parent:
        os.makedirs(parent, exist_ok=True)
