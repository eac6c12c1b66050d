from typing import Callable, List, Sequence
import json
import logging

from . import delegates
from .. import exceptions
from ..account_directory import AccountDirectory
from ..data_models import StudentRecord
from ..master_list import MasterListStore
from ..run_report import RunReport
from ..sync_config import ExecutionMode, SyncConfig


class RosterSynchronizer(object):

    """
    A driver class that reconciles the local master list with the
    account directory. The directory's roster is treated as the
    "master" copy that the master list should match.

    A run is a single linear pass: fetch the roster, load the master
    list, classify, merge existing students, provision, then hand the
    sorted result to the store.

    :ivar logging.Logger logger: a module-wide logger
    :ivar RunReport report: the report of the most recent run
    """

    def __init__(self, directory: AccountDirectory, store: MasterListStore,
                 config: SyncConfig, secret_generator: Callable[[], str]):
        for capability, obj in (('account directory', directory),
                                ('master list store', store),
                                ('sync config', config),
                                ('secret generator', secret_generator)):
            if obj is None:
                raise exceptions.MissingCapabilityError(capability)
        self.logger = logging.getLogger(__name__)
        self.directory = directory
        self.store = store
        self.config = config
        self.secret_generator = secret_generator
        self.mode = config.mode
        """Fixed for the lifetime of the synchronizer."""
        self.report = self._new_report()

    @property
    def dry_run(self) -> bool:
        return self.mode is ExecutionMode.DRY_RUN

    def run(self) -> RunReport:
        """
        Runs one sync.

        :raises SyncAbortedError: when the roster cannot be fetched.
            Nothing is persisted in that case.
        :raises RosterSyncError: when the master list cannot be loaded
            or saved
        :return: the report of the run
        """
        self.report = report = self._new_report()
        self.logger.info('Beginning roster synchronization with config\n'
                         + json.dumps(self.config.to_dict(), indent=2))

        try:
            remote = self.directory.fetch_roster(self.config.org_id)
        except (exceptions.DirectoryUnavailable,
                exceptions.AuthenticationFailed) as e:
            self.logger.exception('Could not fetch roster. Aborting sync.')
            report.finish(error=e)
            raise exceptions.SyncAbortedError(e) from e

        try:
            local = self.store.load()
            report.n_remote, report.n_local = len(remote), len(local)

            classification = delegates.ReconcileDelegate(report)(remote, local)
            report.initial_run = classification.initial_run
            report.n_new = len(classification.new)
            report.n_departed = len(classification.departed)
            report.n_existing = len(classification.existing)
            self.log_departures(classification.departed)

            merger = delegates.DriftDelegate(
                report, secret_generator=self.secret_generator,
                email_domain=self.config.email_domain
            )
            updated, _ = merger(classification.existing,
                                classification.remote_index)

            provisioner = delegates.ProvisionDelegate(
                self.directory, mode=self.mode,
                secret_generator=self.secret_generator,
                services=self.config.services, report=report
            )
            new = [s.copy() for s in classification.new]
            provisioner(new, merger.backfilled)

            master_list = self.normalize(new + updated)
            self.persist(master_list, classification.duplicates)
        except exceptions.RosterSyncError as e:
            self.logger.exception('Roster sync failed.')
            report.finish(error=e)
            raise

        report.finish()
        self.log_summary()
        return report

    @staticmethod
    def normalize(records: Sequence[StudentRecord]) -> List[StudentRecord]:
        """
        Sorts records by username and strips anything that is not part
        of the master list schema.
        """
        return [StudentRecord.from_row(s.to_row())
                for s in sorted(records, key=lambda s: s.username)]

    def persist(self, master_list: List[StudentRecord],
                duplicates: List[StudentRecord]):
        if self.dry_run:
            self.logger.info(f'Dry run. Master list of {len(master_list)} '
                             'students was not saved.')
            return

        self.store.save(master_list)
        self.report.persisted = True
        if duplicates:
            self.store.export_duplicates(duplicates)

    def log_departures(self, departed: Sequence[StudentRecord]):
        if not departed:
            return
        self.logger.info(f'{len(departed)} students are no longer on the '
                         'roster and will be dropped from the master list.')
        for s in departed:
            self.logger.debug(f'Dropping {s.username}.')

    def log_summary(self):
        self.logger.info(f'Roster sync finished with status '
                         f'"{self.report.status}":\n'
                         + json.dumps(self.report.summary(), indent=2))
        for warning in self.report.warnings:
            self.logger.warning(str(warning))

    def _new_report(self) -> RunReport:
        return RunReport(org_id=self.config.org_id, mode=self.mode.value)
