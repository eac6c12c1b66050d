#!/usr/bin/env python3
from logging.config import dictConfig
from typing import Union
import logging
import os
import json

from roster_sync import (CsvMasterListStore, HttpAccountDirectory,
                         RosterSynchronizer, SecretGenerator, SyncConfig,
                         exceptions)


def setup_logging(config_file: Union[str, os.PathLike] = None,
                  log_dir: str = None,
                  log_level: Union[str, int] = None) -> dict:
    """
    Reads a :func:`dictConfig` file and fills in the deployment-specific
    parts. Loggers and handlers left at NOTSET take `log_level`, which
    defaults to $LOGLEVEL or INFO. File handlers are moved under
    `log_dir`, which is created if it does not exist.
    """
    if config_file is None:
        config_file = os.path.join(os.getcwd(), 'logging_config.json')
    if log_level is None:
        log_level = os.environ.get('LOGLEVEL', 'INFO')

    with open(config_file, 'r') as f:
        config = json.load(f)

    handlers = config.get('handlers', {})
    for obj in list(config.get('loggers', {}).values()) \
            + list(handlers.values()):
        if obj.get('level', 'NOTSET') in ('NOTSET', logging.NOTSET):
            obj['level'] = log_level

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        for handler in handlers.values():
            if 'filename' in handler:
                handler['filename'] = os.path.join(log_dir,
                                                   handler['filename'])

    return config


def main():
    logging_config = setup_logging(log_dir=os.environ.get('LOGDIR'))
    dictConfig(logging_config)

    logger = logging.getLogger(__name__)
    config_path = os.environ.get('SYNC_CONFIG_PATH', 'sync_config.json')
    try:
        config = SyncConfig.from_json(config_path)
    except FileNotFoundError:
        config = SyncConfig.default()

    store = CsvMasterListStore(config.master_list_path,
                               archive_dir=config.archive_dir,
                               duplicates_path=config.duplicates_path)
    try:
        directory = HttpAccountDirectory()
    except (exceptions.DirectoryError, EnvironmentError):
        logger.exception('Could not open a session with the account '
                         'directory.')
        return 1

    sync_agent = RosterSynchronizer(directory, store, config,
                                    secret_generator=SecretGenerator())
    status = 0
    try:
        sync_agent.run()
    except exceptions.RosterSyncError:
        logger.exception('Could not finish sync.')
        status = 1
    finally:
        if config.report_path:
            sync_agent.report.save(config.report_path)

    return status


if __name__ == '__main__':
    raise SystemExit(main())
