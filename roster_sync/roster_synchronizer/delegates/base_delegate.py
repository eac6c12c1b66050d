from abc import ABC, abstractmethod
import logging

from ...run_report import RunReport


class SyncDelegate(ABC):

    def __init__(self, report: RunReport = None):
        """
        Abstract base class that outlines behavior common to all the
        delegate classes.

        Stores a reference to the run's report, to which every change,
        outcome, and warning is appended. Requires definition of an
        `execute` method to be called with the `__call__` magic method
        such that each delegate behaves more or less as if it were a
        function.

        :param RunReport report: the report of the current run. A fresh
            one is created if none is given.
        """
        self.report = report if report is not None else RunReport()
        logger_name = '.'.join([__name__.rsplit('.', 1)[0],
                                self.__class__.__name__])
        self.logger = logging.getLogger(logger_name)

    @abstractmethod
    def execute(self, *args, **kwargs):
        """The main logic for this delegate's step of the sync."""
        pass

    def __call__(self, *args, **kwargs):
        """Calls the main sync function."""
        return self.execute(*args, **kwargs)
