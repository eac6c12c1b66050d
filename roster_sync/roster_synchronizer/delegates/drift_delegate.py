from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from .base_delegate import SyncDelegate
from ... import exceptions
from ...data_models import (DEFAULT_EMAIL_DOMAIN, StudentRecord,
                            TRACKED_FIELDS, make_email)
from ...run_report import ChangeLogEntry, MISSING_REMOTE_MATCH, RunReport
from ...secret_generator import SecretGenerator


class DriftDelegate(SyncDelegate):

    """
    Brings existing master list records in line with the remote roster.
    The remote side wins for every tracked field. Email is not copied
    from the remote record but derived from its username.

    After the fields are synced, any record still lacking a password is
    given one. Those records are collected in `backfilled` so they can
    be provisioned; a backfill is not a change.
    """

    def __init__(self, report: RunReport = None,
                 secret_generator: Callable[[], str] = None,
                 email_domain: str = DEFAULT_EMAIL_DOMAIN):
        super().__init__(report)
        if secret_generator is None:
            raise exceptions.MissingCapabilityError('secret generator')
        self.secret_generator = secret_generator
        self.email_domain = email_domain
        self.backfilled: List[StudentRecord] = []

    def execute(self, existing: Sequence[StudentRecord],
                remote_by_username: Mapping[str, StudentRecord]) \
            -> Tuple[List[StudentRecord], List[ChangeLogEntry]]:
        """
        :param existing: master list records also present remotely
        :param remote_by_username: the remote roster indexed by username
        :return: updated copies of `existing`, in order, and the changes
            made to them
        """
        updated = []
        changes = []
        self.backfilled = []
        n_existing = len(existing)
        for i, local in enumerate(existing):
            progress = f'{i + 1}/{n_existing}:{local.username}'
            try:
                remote = remote_by_username[local.username]
            except KeyError:
                msg = (f'Student "{local.username}" is classified as '
                       'existing but has no remote match. Leaving the record '
                       'unchanged.')
                self.logger.warning(f'{progress}:{msg}')
                self.report.warn(msg, kind=MISSING_REMOTE_MATCH,
                                 username=local.username)
                updated.append(local.copy())
                continue

            student = local.copy()
            changes.extend(self.sync_fields(student, remote))
            if student.needs_secret:
                self.logger.info(f'{progress}:No password on record. '
                                 'Generating one.')
                student.secret = self.secret_generator()
                self.backfilled.append(student)
            updated.append(student)

        self.logger.info(f'Found {len(changes)} changes across '
                         f'{n_existing} existing students.')
        return updated, changes

    def expected_values(self, remote: StudentRecord) -> Dict[str, str]:
        return {
            'year_level': remote.year_level,
            'class_name': remote.class_name,
            'email': make_email(remote.username, self.email_domain)
        }

    def sync_fields(self, student: StudentRecord,
                    remote: StudentRecord) -> List[ChangeLogEntry]:
        """Overwrites drifted fields on `student` in place."""
        expected = self.expected_values(remote)
        changes = []
        for field_name in TRACKED_FIELDS:
            old_value = getattr(student, field_name)
            new_value = expected[field_name]
            if old_value == new_value:
                continue
            setattr(student, field_name, new_value)
            entry = self.report.add_change(ChangeLogEntry(
                username=student.username, field=field_name,
                old_value=old_value, new_value=new_value
            ))
            self.logger.info(str(entry))
            changes.append(entry)
        return changes


def merge_existing(existing: Sequence[StudentRecord],
                   remote_by_username: Mapping[str, StudentRecord],
                   email_domain: str = DEFAULT_EMAIL_DOMAIN,
                   secret_generator: Callable[[], str] = None,
                   report: RunReport = None) \
        -> Tuple[List[StudentRecord], List[ChangeLogEntry]]:
    if secret_generator is None:
        secret_generator = SecretGenerator()
    delegate = DriftDelegate(report, secret_generator=secret_generator,
                             email_domain=email_domain)
    return delegate(existing, remote_by_username)
