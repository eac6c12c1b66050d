"""
This module contains class definitions for the "delegate" classes for
use in the `roster_synchronizer` parent module. Each delegate carries
out one step of a roster sync and records what it did in the shared
:class:`RunReport`:

`ReconcileDelegate` classifies students as new, departed, or existing.

`DriftDelegate` updates existing students whose year level, class, or
email no longer match the remote roster and backfills missing
passwords.

`ProvisionDelegate` assigns passwords and pushes them, along with
service enablement for new accounts, to the account directory.

Each delegate also has a plain function counterpart (`reconcile`,
`merge_existing`, `provision`) for use outside the synchronizer.
"""
from .base_delegate import SyncDelegate
from .drift_delegate import DriftDelegate, merge_existing
from .provision_delegate import ProvisionDelegate, provision
from .reconcile_delegate import Classification, ReconcileDelegate, reconcile
