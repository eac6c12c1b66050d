from typing import Iterable, List, Tuple

from roster_sync import AccountDirectory, MasterListStore, StudentRecord
from roster_sync.exceptions import DirectoryError

from .constants import EMAIL_DOMAIN


def make_student(username: str, year_level: str = '1',
                 class_name: str = '1A', email: str = None,
                 secret: str = None, **kwargs) -> StudentRecord:
    if email is None:
        email = f'{username}@{EMAIL_DOMAIN}'
    return StudentRecord(username=username,
                         first_name=kwargs.pop('first_name',
                                               username.capitalize()),
                         last_name=kwargs.pop('last_name', 'Student'),
                         year_level=year_level, class_name=class_name,
                         email=email, secret=secret, **kwargs)


class FakeDirectory(AccountDirectory):

    """
    An in-memory directory that records every call made to it. Calls
    for usernames in `fail_passwords` or `fail_services` raise
    :class:`DirectoryError`. `fetch_error`, when set, is raised by
    `fetch_roster`.
    """

    def __init__(self, roster: Iterable[StudentRecord] = (),
                 fail_passwords: Iterable[str] = (),
                 fail_services: Iterable[str] = (),
                 fetch_error: Exception = None):
        self.roster = list(roster)
        self.fail_passwords = set(fail_passwords)
        self.fail_services = set(fail_services)
        self.fetch_error = fetch_error
        self.calls: List[Tuple[str, ...]] = []
        self.passwords = {}

    def fetch_roster(self, org_id: str) -> List[StudentRecord]:
        self.calls.append(('fetch_roster', org_id))
        if self.fetch_error is not None:
            raise self.fetch_error
        return [s.copy() for s in self.roster]

    def set_password(self, username: str, secret: str) -> None:
        self.calls.append(('set_password', username))
        if username in self.fail_passwords:
            raise DirectoryError('password rejected', username=username,
                                 status_code=500)
        self.passwords[username] = secret

    def enable_service(self, username: str, service: str) -> None:
        self.calls.append(('enable_service', username, service))
        if username in self.fail_services:
            raise DirectoryError('service unavailable', username=username)

    @property
    def mutating_calls(self) -> List[Tuple[str, ...]]:
        return [c for c in self.calls if c[0] != 'fetch_roster']


class MemoryStore(MasterListStore):

    def __init__(self, records: Iterable[StudentRecord] = ()):
        self.records = [s.copy() for s in records]
        self.saves = []
        self.duplicates = []

    def load(self) -> List[StudentRecord]:
        return [s.copy() for s in self.records]

    def save(self, records) -> None:
        self.saves.append(list(records))
        self.records = [s.copy() for s in records]

    def export_duplicates(self, records) -> None:
        self.duplicates.extend(records)
