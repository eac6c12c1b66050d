"""
Structured record of a single roster sync.

A :class:`RunReport` is an ordered, append-only log of the entries
produced while a sync runs:

    - :class:`ChangeLogEntry`, one per tracked field that drifted on an
      existing record
    - :class:`ProvisioningOutcome`, one per directory call made (or
      simulated) while provisioning
    - :class:`RunWarning`, for data-quality problems that do not stop
      the run

The report is passed to each delegate rather than kept as module state.
Downstream summary rendering reads its fields and counters directly.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import List, Optional, Union
import json
import os

SUCCESS = 'success'
SUCCESS_WITH_WARNINGS = 'success_with_warnings'
FAILED = 'failed'

DUPLICATE_USERNAME = 'duplicate_username'
MISSING_REMOTE_MATCH = 'missing_remote_match'

SET_PASSWORD = 'set_password'
ENABLE_SERVICE = 'enable_service'

TIME_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass
class ChangeLogEntry(object):
    username: str
    field: str
    old_value: str
    new_value: str

    def __str__(self):
        return (f'{self.username}: {self.field} changed from '
                f'"{self.old_value}" to "{self.new_value}"')


@dataclass
class ProvisioningOutcome(object):
    """
    The result of one directory call. Deliberately has no slot for the
    secret itself.
    """
    username: str
    operation: str
    success: bool
    error: Optional[str] = None
    simulated: bool = False

    def __str__(self):
        if self.simulated:
            status = 'simulated'
        elif self.success:
            status = 'succeeded'
        else:
            status = f'failed: {self.error}'
        return f'{self.username}: {self.operation} {status}'


@dataclass
class RunWarning(object):
    message: str
    kind: str
    username: Optional[str] = None

    def __str__(self):
        return self.message


Entry = Union[ChangeLogEntry, ProvisioningOutcome, RunWarning]


@dataclass
class RunReport(object):

    org_id: Optional[str] = None
    mode: Optional[str] = None
    entries: List[Entry] = field(default_factory=list)
    n_remote: int = 0
    n_local: int = 0
    n_new: int = 0
    n_departed: int = 0
    n_existing: int = 0
    initial_run: bool = False
    persisted: bool = False
    status: Optional[str] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None
    started: str = field(
        default_factory=lambda: datetime.now().strftime(TIME_FORMAT)
    )
    finished: Optional[str] = None

    def add_change(self, entry: ChangeLogEntry) -> ChangeLogEntry:
        self.entries.append(entry)
        return entry

    def add_outcome(self, outcome: ProvisioningOutcome) -> ProvisioningOutcome:
        self.entries.append(outcome)
        return outcome

    def warn(self, message: str, kind: str,
             username: str = None) -> RunWarning:
        warning = RunWarning(message=message, kind=kind, username=username)
        self.entries.append(warning)
        return warning

    @property
    def changes(self) -> List[ChangeLogEntry]:
        return [e for e in self.entries if isinstance(e, ChangeLogEntry)]

    @property
    def outcomes(self) -> List[ProvisioningOutcome]:
        return [e for e in self.entries if isinstance(e, ProvisioningOutcome)]

    @property
    def warnings(self) -> List[RunWarning]:
        return [e for e in self.entries if isinstance(e, RunWarning)]

    @property
    def failures(self) -> List[ProvisioningOutcome]:
        return [o for o in self.outcomes if not o.success]

    def finish(self, error: Exception = None):
        """Stamps the finish time and settles the run status."""
        self.finished = datetime.now().strftime(TIME_FORMAT)
        if error is not None:
            self.status = FAILED
            self.error_kind = getattr(error, 'kind', type(error).__name__)
            self.error = str(error)
        elif self.warnings or self.failures:
            self.status = SUCCESS_WITH_WARNINGS
        else:
            self.status = SUCCESS

    def summary(self) -> dict:
        return {
            'remote': self.n_remote,
            'local': self.n_local,
            'new': self.n_new,
            'departed': self.n_departed,
            'existing': self.n_existing,
            'changes': len(self.changes),
            'provisioned': sum(1 for o in self.outcomes
                               if o.success and o.operation == SET_PASSWORD),
            'failures': len(self.failures),
            'warnings': len(self.warnings)
        }

    def to_dict(self) -> dict:
        as_dict = asdict(self)
        del as_dict['entries']
        as_dict['summary'] = self.summary()
        as_dict['changes'] = [asdict(e) for e in self.changes]
        as_dict['outcomes'] = [asdict(o) for o in self.outcomes]
        as_dict['warnings'] = [asdict(w) for w in self.warnings]
        return as_dict

    def save(self, path: Union[str, os.PathLike]):
        """Writes the report to a JSON file."""
        with open(path, 'w+') as f:
            json.dump(self.to_dict(), f, indent=2)
