from enum import Enum
from os import environ
from typing import IO, Union
import json

from .data_models import DEFAULT_EMAIL_DOMAIN


DEFAULT_SERVICES = ('service-a', 'service-b')


class ExecutionMode(Enum):
    """Whether directory mutations are issued or only simulated."""
    LIVE = 'live'
    DRY_RUN = 'dry_run'


class SyncConfig(object):

    """
    The settings for a single roster sync. Use :meth:`from_json` to
    build an object from a JSON file on the disk and :meth:`default` to
    build the object specified by the `_DEFAULT_CONFIG` class attribute.

    The `ROSTER_DRY_RUN` and `ROSTER_ORG_ID` environment variables, when
    set, take precedence over whatever the file says.
    """

    _DEFAULT_CONFIG = {
        'org_id': None,
        'dry_run': False,
        'email_domain': DEFAULT_EMAIL_DOMAIN,
        'services': list(DEFAULT_SERVICES),
        'master_list_path': 'master_list.csv',
        'archive_dir': 'archive',
        'duplicates_path': 'duplicates.csv',
        'report_path': 'last_sync_info.json'
    }

    def __init__(self, org_id, dry_run=False,
                 email_domain=DEFAULT_EMAIL_DOMAIN, services=None,
                 master_list_path='master_list.csv', archive_dir='archive',
                 duplicates_path='duplicates.csv',
                 report_path='last_sync_info.json'):
        self.org_id = environ.get('ROSTER_ORG_ID', org_id)
        if 'ROSTER_DRY_RUN' in environ:
            dry_run = bool(int(environ['ROSTER_DRY_RUN']))
        self.dry_run = bool(dry_run)
        self.email_domain = email_domain
        if services is None:
            services = DEFAULT_SERVICES
        self.services = list(services)
        self.master_list_path = master_list_path
        self.archive_dir = archive_dir
        self.duplicates_path = duplicates_path
        self.report_path = report_path

    def __getitem__(self, item):
        try:
            return getattr(self, item)
        except AttributeError:
            return None

    def __str__(self):
        return f'{self.__class__.__name__}({str(self.to_dict())})'

    __repr__ = __str__

    @property
    def mode(self) -> ExecutionMode:
        return ExecutionMode.DRY_RUN if self.dry_run else ExecutionMode.LIVE

    @classmethod
    def default(cls) -> 'SyncConfig':
        return cls(**cls._DEFAULT_CONFIG)

    @classmethod
    def from_json(cls, json_path: Union[str, IO]) -> 'SyncConfig':
        """Creates a config from a JSON file."""
        if isinstance(json_path, str):
            with open(json_path, 'r') as f:
                return cls(**json.load(f))
        with json_path:
            return cls(**json.load(json_path))

    def to_dict(self) -> dict:
        return dict(self.__dict__)
