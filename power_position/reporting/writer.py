"""
CSV report writer with atomic replacement of the target file.

Reports are written to a temporary file in the target directory and then
renamed over the target with ``os.replace``. Readers therefore see either
the previous file, no file, or the complete new report.
"""

import csv
import os
import tempfile
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import structlog

from ..errors import MalformedDataError, PersistenceError
from ..utils.time import format_report_timestamp

logger = structlog.get_logger(__name__)

CSV_HEADER = ("Local Time", "Volume")
FILE_NAME_PREFIX = "PowerPosition_"
FILE_NAME_SUFFIX = ".csv"
TEMP_FILE_SUFFIX = ".tmp"

PathLike = Union[str, os.PathLike]


def _format_volume(volume: float) -> str:
    return f"{volume:.2f}"


def allocate_report_path(directory: PathLike, now: Optional[datetime] = None) -> Path:
    """
    Ensure the output directory exists and build the report file path.

    Args:
        directory: Output directory, created when missing
        now: Local time used for the file name, defaults to wall-clock now

    Returns:
        ``directory/PowerPosition_<YYYYmmdd_HHMM>.csv``

    Raises:
        ValueError: If ``directory`` is blank
        PersistenceError: If the directory cannot be created
    """
    if directory is None or not str(directory).strip():
        raise ValueError("Output directory must not be blank")

    folder = Path(directory)
    logger.debug("Ensuring output directory exists", directory=str(folder))
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Error creating output directory", directory=str(folder), error=str(e))
        raise PersistenceError(
            f"Cannot create output directory {folder}: {e}",
            operation="mkdir",
            target=str(folder)
        ) from e

    path = folder / f"{FILE_NAME_PREFIX}{format_report_timestamp(now)}{FILE_NAME_SUFFIX}"
    logger.info("Generated output file path", output_path=str(path))
    return path


def write_report(path: PathLike, data: Mapping[str, float]) -> Path:
    """
    Atomically write a local time series as a CSV report.

    Rows are sorted by label. Labels are zero-padded ``HH:MM`` so this is
    chronological order from 00:00 to 23:00. Volumes carry exactly two
    decimals with a ``.`` separator. An existing file at ``path`` is
    replaced.

    Args:
        path: Target report file
        data: Volume keyed by local time label

    Returns:
        The target path

    Raises:
        ValueError: If ``path`` is blank or ``data`` is None, or a label
            contains a delimiter, quote or line break
        PersistenceError: If the report cannot be written
    """
    if path is None or not str(path).strip():
        raise ValueError("Report path must not be blank")
    if data is None:
        raise ValueError("Report data must not be None")

    target = Path(path)
    logger.debug("Writing report", output_path=str(target), record_count=len(data))

    temp_path: Optional[str] = None
    try:
        # Same directory as the target so the rename stays on one filesystem
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{target.stem}_",
            suffix=TEMP_FILE_SUFFIX,
            dir=str(target.parent),
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n", quoting=csv.QUOTE_NONE)
            writer.writerow(CSV_HEADER)
            for label, volume in sorted(data.items()):
                writer.writerow((label, _format_volume(volume)))
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, target)
        temp_path = None

    except csv.Error as e:
        # Fields are never quoted; a label needing it is rejected
        raise ValueError(f"Report row cannot be written unquoted: {e}") from e

    except OSError as e:
        logger.error("Error writing report", output_path=str(target), error=str(e))
        raise PersistenceError(
            f"Cannot write report {target}: {e}",
            operation="write",
            target=str(target)
        ) from e

    finally:
        if temp_path is not None:
            _discard_temp_file(temp_path)

    logger.info("Report written", output_path=str(target), record_count=len(data))
    return target


def _discard_temp_file(temp_path: str) -> None:
    try:
        os.unlink(temp_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary report file",
                       temp_path=temp_path, error=str(e))


def read_report(path: PathLike) -> dict[str, float]:
    """
    Read a report back into a label to volume mapping.

    Args:
        path: Report file

    Returns:
        Volumes keyed by label, in file order

    Raises:
        MalformedDataError: If the header or a row is not in report format
    """
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None or tuple(header) != CSV_HEADER:
            raise MalformedDataError(
                "Report header is missing or invalid",
                raw_data=repr(header),
                expected_format=",".join(CSV_HEADER)
            )

        result: dict[str, float] = {}
        for line_number, row in enumerate(reader, start=2):
            if len(row) != 2:
                raise MalformedDataError(
                    f"Report row {line_number} must have two columns",
                    raw_data=repr(row),
                    expected_format="HH:MM,V.VV"
                )
            label, volume = row
            try:
                result[label] = float(volume)
            except ValueError as e:
                raise MalformedDataError(
                    f"Report row {line_number} has a non-numeric volume",
                    raw_data=repr(row),
                    expected_format="HH:MM,V.VV"
                ) from e

    return result
