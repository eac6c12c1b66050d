"""
Persistence for the master list, the locally held copy of the roster
that carries passwords between runs.

:class:`CsvMasterListStore` keeps the list as a CSV file whose columns
are `MASTER_LIST_HEADINGS`. Before each write, the previous file is
compressed with BZip2 into the archive directory under a name of the
form "{YYYY-mm-dd_HHMMSS}_{file name}.bz2" so the archives sort
lexicographically. The new file is written next to the old one and moved
into place in a single step.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Sequence, Union
import bz2
import csv
import logging
import os
import tempfile

from . import exceptions
from .data_models import MASTER_LIST_HEADINGS, StudentRecord

ARCHIVE_DT_FMT = '%Y-%m-%d_%H%M%S'


class MasterListStore(ABC):

    @abstractmethod
    def load(self) -> List[StudentRecord]:
        """
        Reads the previously saved master list. Returns an empty list,
        not an error, when none exists yet.

        :raises StoreError: when the list exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, records: Sequence[StudentRecord]) -> None:
        """
        Persists the reconciled master list.

        :raises StoreError: when the list cannot be written
        """
        pass

    def export_duplicates(self, records: Sequence[StudentRecord]) -> None:
        """Sets aside records dropped for having a duplicate username."""
        pass


class CsvMasterListStore(MasterListStore):

    def __init__(self, path: Union[str, os.PathLike],
                 archive_dir: Union[str, os.PathLike] = None,
                 duplicates_path: Union[str, os.PathLike] = None):
        self.logger = logging.getLogger(__name__)
        self.path = Path(path)
        if archive_dir is None:
            self.archive_dir = self.path.parent / 'archive'
        else:
            self.archive_dir = Path(archive_dir)
        self.duplicates_path = (Path(duplicates_path)
                                if duplicates_path is not None else None)

    def load(self) -> List[StudentRecord]:
        if not self.path.exists():
            self.logger.info(f'No master list found at "{self.path}". '
                             'Treating this as the initial run.')
            return []

        records = []
        try:
            with open(self.path, 'r', newline='', encoding='utf-8') as f:
                reader = csv.DictReader(f)
                for line_no, row in enumerate(reader, start=2):
                    try:
                        records.append(StudentRecord.from_row(row))
                    except exceptions.NoUsernameException:
                        self.logger.warning(f'{self.path}:{line_no}: row has '
                                            'no username. Skipping...')
        except (OSError, UnicodeError, csv.Error) as e:
            self.logger.exception('Could not read master list.')
            raise exceptions.StoreError(self.path, e) from e
        self.logger.info(f'Read {len(records)} students from the master '
                         'list.')
        return records

    def save(self, records: Sequence[StudentRecord]) -> None:
        rows = [r.to_row() for r in sorted(records, key=lambda r: r.username)]
        try:
            self.archive()
            self._write_atomic(self.path, rows)
        except OSError as e:
            self.logger.exception('Could not write master list.')
            raise exceptions.StoreError(self.path, e) from e
        self.logger.info(f'Wrote {len(rows)} students to "{self.path}".')

    def archive(self) -> Union[Path, None]:
        """
        Compresses the current master list into the archive directory.
        Returns the archive path, or `None` if there was nothing to
        archive.
        """
        if not self.path.exists() or not os.stat(self.path).st_size:
            return None

        os.makedirs(self.archive_dir, exist_ok=True)
        stamp = datetime.now().strftime(ARCHIVE_DT_FMT)
        output_path = self.archive_dir / f'{stamp}_{self.path.name}.bz2'
        with open(self.path, 'rb') as data:
            with bz2.open(output_path, 'wb') as bz_file:
                bz_file.write(data.read())
        self.logger.debug(f'Archived previous master list to "{output_path}".')
        return output_path

    def export_duplicates(self, records: Sequence[StudentRecord]) -> None:
        if self.duplicates_path is None or not records:
            return
        try:
            self._write_atomic(self.duplicates_path,
                               [r.to_row() for r in records])
        except OSError as e:
            raise exceptions.StoreError(self.duplicates_path, e) from e
        self.logger.info(f'Exported {len(records)} duplicate records to '
                         f'"{self.duplicates_path}".')

    @staticmethod
    def _write_atomic(path: Path, rows: List[dict]):
        directory = path.parent
        os.makedirs(directory, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix='.' + path.name,
                                        suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', newline='', encoding='utf-8') as f:
                writer = csv.DictWriter(f, fieldnames=MASTER_LIST_HEADINGS)
                writer.writeheader()
                writer.writerows(rows)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
