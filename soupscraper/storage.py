"""
Storage Module

Writes scraped rows to CSV files or to a relational table. Every sink
is bound to a fixed list of columns and rejects rows that differ.
"""

import csv
import logging
import os
from datetime import datetime

import pandas as pd

from .exceptions import SchemaMismatchError, StorageError
from .url_utils import get_domain

logger = logging.getLogger(__name__)


def _check_row(fieldnames, row):
    if set(row.keys()) != set(fieldnames):
        raise SchemaMismatchError(fieldnames, row.keys())


def output_path(output_dir, url, stem=None):
    """
    Get the output CSV path for a scrape of url.

    Args:
        output_dir (str): Directory for output CSV files
        url (str): Start URL of the scrape
        stem (str): Optional name inserted between domain and date

    Returns:
        str: Path like data/quotes_toscrape_com_20250101.csv
    """
    domain = get_domain(url).replace('.', '_').replace(':', '_')
    date_str = datetime.now().strftime('%Y%m%d')
    parts = [domain, stem, date_str] if stem else [domain, date_str]
    return os.path.join(output_dir, '_'.join(parts) + '.csv')


class CSVWriter:
    """Appends rows to a CSV file with a single header row."""

    def __init__(self, path, fieldnames):
        """
        Initialize the CSVWriter.

        Args:
            path (str): CSV file to append to
            fieldnames (list): Column names, in output order

        Raises:
            SchemaMismatchError: If the file already has a different header
        """
        if not fieldnames:
            raise ValueError("fieldnames must not be empty")

        self.path = str(path)
        self.fieldnames = list(fieldnames)
        self.rows_written = 0
        self._ensure_directory()
        self._check_existing_header()

    def _ensure_directory(self):
        directory = os.path.dirname(self.path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
            logger.info(f"Created output directory: {directory}")

    def _file_exists(self):
        """Check if file exists and has content."""
        return os.path.isfile(self.path) and os.path.getsize(self.path) > 0

    def _check_existing_header(self):
        if not self._file_exists():
            return

        try:
            with open(self.path, newline='', encoding='utf-8') as f:
                header = next(csv.reader(f), [])
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read existing header of {self.path}: {e}") from e

        if header != self.fieldnames:
            raise SchemaMismatchError(self.fieldnames, header)

    def write_rows(self, rows):
        """
        Write rows to the CSV file.

        Args:
            rows (iterable): Dicts keyed by exactly the writer's fieldnames

        Returns:
            int: Number of rows written

        Raises:
            SchemaMismatchError: If a row's keys differ from the fieldnames
            StorageError: If the file cannot be written
        """
        rows = list(rows)
        for row in rows:
            _check_row(self.fieldnames, row)

        if not rows:
            return 0

        try:
            new_file = not self._file_exists()
            with open(self.path, 'a', newline='', encoding='utf-8', errors='replace') as f:
                writer = csv.DictWriter(f, fieldnames=self.fieldnames)

                if new_file:
                    writer.writeheader()
                    logger.info(f"Created new CSV file: {self.path}")

                writer.writerows(rows)
        except OSError as e:
            raise StorageError(f"Could not write to {self.path}: {e}") from e

        self.rows_written += len(rows)
        logger.debug(f"Wrote {len(rows)} rows to {self.path}")
        return len(rows)

    def write_row(self, row):
        """Write a single row."""
        return self.write_rows([row])


class SQLWriter:
    """Writes rows to a database table via pandas."""

    def __init__(self, connection, table, fieldnames, if_exists='append'):
        """
        Initialize the SQLWriter.

        Args:
            connection: sqlite3 connection or SQLAlchemy connectable
            table (str): Target table name
            fieldnames (list): Column names, in table order
            if_exists (str): 'append' to add to an existing table, 'replace'
                to recreate it on the first write, 'fail' to refuse an
                existing table
        """
        if if_exists not in ('append', 'replace', 'fail'):
            raise ValueError(f"Invalid if_exists value: {if_exists!r}")
        if not fieldnames:
            raise ValueError("fieldnames must not be empty")

        self.connection = connection
        self.table = table
        self.fieldnames = list(fieldnames)
        self.if_exists = if_exists
        self.rows_written = 0

    def write_rows(self, rows):
        """
        Write rows to the table.

        Args:
            rows (iterable): Dicts keyed by exactly the writer's fieldnames

        Returns:
            int: Number of rows written

        Raises:
            SchemaMismatchError: If a row's keys differ from the fieldnames
            StorageError: If the database rejects the write
        """
        rows = list(rows)
        for row in rows:
            _check_row(self.fieldnames, row)

        if not rows:
            return 0

        frame = pd.DataFrame(rows, columns=self.fieldnames)
        try:
            frame.to_sql(self.table, self.connection, if_exists=self.if_exists, index=False)
        except Exception as e:
            raise StorageError(f"Could not write to table {self.table}: {e}") from e

        # Later batches append to the table the first one created
        if self.if_exists in ('replace', 'fail'):
            self.if_exists = 'append'

        self.rows_written += len(rows)
        logger.info(f"Wrote {len(rows)} rows to table {self.table}")
        return len(rows)

    def write_row(self, row):
        """Write a single row."""
        return self.write_rows([row])
