"""
This module coordinates the reconciliation of the local master list with
the account directory's roster. The main class is `RosterSynchronizer`,
found in the `roster_synchronizer` submodule. It runs three "delegate"
classes, found in the `delegates` submodule, each of which subclasses
the `SyncDelegate` interface:

    - `ReconcileDelegate` splits students into new, departed, and
        existing.
    - `DriftDelegate` brings existing students' year level, class, and
        email in line with the roster and backfills missing passwords.
    - `ProvisionDelegate` pushes passwords and services to the
        directory.
"""


from .delegates import (Classification, merge_existing, provision,
                        reconcile)
from .roster_synchronizer import RosterSynchronizer
