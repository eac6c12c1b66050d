from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set

from .base_delegate import SyncDelegate
from ...data_models import StudentRecord
from ...run_report import DUPLICATE_USERNAME, RunReport


@dataclass
class Classification(object):
    """
    The three-way split of a remote roster against the master list.
    `new` holds remote records, `departed` and `existing` hold master
    list records. `remote_index` maps every remote username to the
    record that won deduplication.
    """
    new: List[StudentRecord] = field(default_factory=list)
    departed: List[StudentRecord] = field(default_factory=list)
    existing: List[StudentRecord] = field(default_factory=list)
    duplicates: List[StudentRecord] = field(default_factory=list)
    remote_index: Dict[str, StudentRecord] = field(default_factory=dict)
    initial_run: bool = False

    @property
    def usernames(self) -> Set[str]:
        return {s.username for s in self.new + self.departed + self.existing}

    def summary(self) -> Dict[str, int]:
        return {
            'new': len(self.new),
            'departed': len(self.departed),
            'existing': len(self.existing),
            'duplicates': len(self.duplicates)
        }


class ReconcileDelegate(SyncDelegate):

    """
    Classifies every username seen in either the remote roster or the
    master list as new, departed, or existing.

    Duplicate usernames within one side are resolved by keeping the
    first occurrence. Each later occurrence is set aside in
    `Classification.duplicates` and reported as a warning; records are
    never merged.
    """

    def execute(self, remote: Sequence[StudentRecord],
                local: Sequence[StudentRecord]) -> Classification:
        duplicates = []
        remote_index = self.index(remote, 'remote roster', duplicates)
        local_index = self.index(local, 'master list', duplicates)

        if not local_index:
            self.logger.info('Master list is empty. Treating all '
                             f'{len(remote_index)} remote students as new.')
            return Classification(new=list(remote_index.values()),
                                  duplicates=duplicates,
                                  remote_index=remote_index,
                                  initial_run=True)

        self.logger.info('Comparing remote roster with master list.')
        remote_ids = remote_index.keys()
        local_ids = local_index.keys()
        new_ids = remote_ids - local_ids
        departed_ids = local_ids - remote_ids
        existing_ids = local_ids & remote_ids

        classification = Classification(
            new=_select(remote_index.values(), new_ids),
            departed=_select(local_index.values(), departed_ids),
            existing=_select(local_index.values(), existing_ids),
            duplicates=duplicates,
            remote_index=remote_index
        )
        self.logger.info('Classified roster: ' + str(classification.summary()))
        return classification

    def index(self, records: Iterable[StudentRecord], source: str,
              duplicates: List[StudentRecord]) -> Dict[str, StudentRecord]:
        """
        Indexes records by username, keeping the first occurrence of
        each. Later occurrences are appended to `duplicates`.
        """
        index = {}
        for student in records:
            if student.username in index:
                msg = (f'Duplicate username "{student.username}" in '
                       f'{source}. Keeping the first occurrence.')
                self.logger.warning(msg)
                self.report.warn(msg, kind=DUPLICATE_USERNAME,
                                 username=student.username)
                duplicates.append(student)
                continue
            index[student.username] = student
        return index


def _select(records: Iterable[StudentRecord],
            usernames: Set[str]) -> List[StudentRecord]:
    """Filters `records` down to `usernames`, preserving their order."""
    return [s for s in records if s.username in usernames]


def reconcile(remote: Sequence[StudentRecord], local: Sequence[StudentRecord],
              report: RunReport = None) -> Classification:
    return ReconcileDelegate(report)(remote, local)
