"""
download_storm_data.py

Download the compressed NOAA storm events database (1950-2011).

The file is kept bz2-compressed on disk; pandas decompresses it on read.
Data is streamed to "<output>.part" and only renamed to the final filepath
once the transfer completes, so an interrupted download is never mistaken
for a complete one.

Example usage:
python -m dataset_generation.download_storm_data
python -m dataset_generation.download_storm_data --overwrite

"""

import argparse
import inspect
import os
import time

import requests
from tqdm import tqdm

from dataset_generation.utils.logger import setup_logger, close_logger, get_logger
from dataset_generation.utils.utils_misc import make_parent_dir

DATA_DIR = "data/"
STORM_DATA_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
RAW_FILEPATH = f"{DATA_DIR}raw/StormData.csv.bz2"
CHUNK_SIZE = 1024 * 1024
TIMEOUT = 120


def parse_args(argv=None):
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        description="Download the NOAA storm events database (bz2-compressed CSV)"
    )
    parser.add_argument("--url", type=str, default=STORM_DATA_URL, help="Source URL")
    parser.add_argument(
        "--output", type=str, default=RAW_FILEPATH, help="Where to save the file"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Download again even if the file already exists",
    )
    return parser.parse_args(argv)


def download_file(
    url, filepath, overwrite=False, chunk_size=CHUNK_SIZE, timeout=TIMEOUT, logger=None
):
    """
    Stream a remote file to disk.

    Parameters
    ----------
    url : str
        URL of the file to download.
    filepath : str
        Destination path. Parent directories are created as needed.
    overwrite : bool, optional
        If False (default) and filepath exists, skip the download.
    chunk_size : int, optional
        Bytes per streamed chunk.
    timeout : int, optional
        Seconds to wait for the server before giving up.
    logger : logging.Logger, optional

    Returns
    -------
    str
        Path to the downloaded file.

    Raises
    ------
    requests.HTTPError
        If the server responds with an error status.
    """
    logger = logger or get_logger()
    logger.info(f"{inspect.currentframe().f_code.co_name}: Starting...")

    if os.path.isfile(filepath) and not overwrite:
        logger.info(f"File already exists, skipping download: {filepath}")
        return filepath

    make_parent_dir(filepath)
    part_filepath = f"{filepath}.part"

    logger.info(f"Downloading {url}")
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        total_bytes = int(response.headers.get("content-length", 0)) or None

        try:
            with open(part_filepath, "wb") as f, tqdm(
                total=total_bytes,
                unit="B",
                unit_scale=True,
                desc=os.path.basename(filepath),
            ) as progress:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
                        progress.update(len(chunk))
        except BaseException:
            # Don't leave a partial file lying around
            if os.path.isfile(part_filepath):
                os.remove(part_filepath)
            raise

    os.replace(part_filepath, filepath)
    logger.info(f"Saved {os.path.getsize(filepath)} bytes to {filepath}")
    logger.info(f"{inspect.currentframe().f_code.co_name}: Completed successfully")

    return filepath


def main(argv=None):
    start_time = time.time()
    args = parse_args(argv)

    logger, _ = setup_logger(log_filename="download_storm_data")
    logger.info("Starting script download_storm_data.py")

    download_file(args.url, args.output, overwrite=args.overwrite, logger=logger)

    elapsed = time.time() - start_time
    logger.info(f"Script complete. Elapsed time: {elapsed:.1f}s")
    close_logger(logger)


if __name__ == "__main__":
    main()
