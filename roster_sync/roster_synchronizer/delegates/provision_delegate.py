from typing import Callable, List, Sequence

from .base_delegate import SyncDelegate
from ... import exceptions
from ...account_directory import AccountDirectory
from ...data_models import StudentRecord
from ...run_report import (ENABLE_SERVICE, ProvisioningOutcome, RunReport,
                           SET_PASSWORD)
from ...secret_generator import SecretGenerator
from ...sync_config import DEFAULT_SERVICES, ExecutionMode


class ProvisionDelegate(SyncDelegate):

    """
    Assigns passwords and pushes them to the account directory.

    New students get a fresh password, then have each configured
    service enabled. Existing students whose password was just
    backfilled only have the password set. Every directory call is
    caught on its own, so one failure never stops the batch.

    In dry-run mode no directory call is made; a simulated outcome is
    recorded for each call that would have been.

    Passwords are assigned onto the records passed in, which is how
    callers get them back; outcomes never carry them. Pass copies to
    keep the originals untouched. A password that the directory refused
    is cleared from the record, so the next run backfills it again.
    """

    def __init__(self, directory: AccountDirectory,
                 mode: ExecutionMode = ExecutionMode.LIVE,
                 secret_generator: Callable[[], str] = None,
                 services: Sequence[str] = DEFAULT_SERVICES,
                 report: RunReport = None):
        super().__init__(report)
        if directory is None:
            raise exceptions.MissingCapabilityError('account directory')
        if secret_generator is None:
            raise exceptions.MissingCapabilityError('secret generator')
        self.directory = directory
        self.mode = ExecutionMode(mode)
        self.secret_generator = secret_generator
        self.services = tuple(services)

    @property
    def dry_run(self) -> bool:
        return self.mode is ExecutionMode.DRY_RUN

    def execute(self, new_records: Sequence[StudentRecord],
                existing_needing_secret: Sequence[StudentRecord]) \
            -> List[ProvisioningOutcome]:
        outcomes = []
        n_new = len(new_records)
        if n_new:
            self.logger.info(f'Provisioning {n_new} new students.')
        for i, student in enumerate(new_records):
            progress = f'new {i + 1}/{n_new}:{student.username}'
            student.secret = self.secret_generator()
            outcomes.extend(self.provision_account(student, progress,
                                                   self.services))

        n_existing = len(existing_needing_secret)
        if n_existing:
            self.logger.info(f'Setting passwords for {n_existing} existing '
                             'students.')
        for i, student in enumerate(existing_needing_secret):
            progress = f'existing {i + 1}/{n_existing}:{student.username}'
            if student.needs_secret:
                student.secret = self.secret_generator()
            outcomes.extend(self.provision_account(student, progress, ()))

        n_failed = sum(1 for o in outcomes if not o.success)
        if n_failed:
            self.logger.warning(f'{n_failed}/{len(outcomes)} directory '
                                'calls failed.')
        return outcomes

    def provision_account(self, student: StudentRecord, progress: str,
                          services: Sequence[str]) \
            -> List[ProvisioningOutcome]:
        """
        Sets the student's password, then enables each of `services`.

        :return: one outcome per directory call
        """
        self.logger.info(f'{progress}:Assigned password.')
        outcome = self.call(student.username, SET_PASSWORD, progress,
                            self.directory.set_password,
                            student.username, student.secret)
        outcomes = [outcome]
        if not outcome.success:
            student.secret = None

        for service in services:
            outcomes.append(self.call(student.username,
                                      f'{ENABLE_SERVICE}:{service}', progress,
                                      self.directory.enable_service,
                                      student.username, service))
        return outcomes

    def call(self, username: str, operation: str, progress: str,
             method: Callable, *args) -> ProvisioningOutcome:
        """Makes, or simulates, a single directory call."""
        if self.dry_run:
            self.logger.info(f'{progress}:Dry run. Skipping {operation}.')
            return self.report.add_outcome(ProvisioningOutcome(
                username=username, operation=operation, success=True,
                simulated=True
            ))

        try:
            method(*args)
        except exceptions.DirectoryError as e:
            self.logger.error(f'{progress}:{operation} failed: {e}')
            return self.report.add_outcome(ProvisioningOutcome(
                username=username, operation=operation, success=False,
                error=str(e)
            ))

        self.logger.info(f'{progress}:{operation} succeeded.')
        return self.report.add_outcome(ProvisioningOutcome(
            username=username, operation=operation, success=True
        ))


def provision(new_records: Sequence[StudentRecord],
              existing_needing_secret: Sequence[StudentRecord],
              mode: ExecutionMode, directory: AccountDirectory,
              secret_generator: Callable[[], str] = None,
              services: Sequence[str] = DEFAULT_SERVICES,
              report: RunReport = None) -> List[ProvisioningOutcome]:
    """
    Provisions `new_records` and `existing_needing_secret` with a
    one-off :class:`ProvisionDelegate`. Both sequences are updated in
    place with the assigned passwords.
    """
    if secret_generator is None:
        secret_generator = SecretGenerator()
    delegate = ProvisionDelegate(directory, mode=mode,
                                 secret_generator=secret_generator,
                                 services=services, report=report)
    return delegate(new_records, existing_needing_secret)
