from .account_directory import AccountDirectory, HttpAccountDirectory
from .directory_session import DirectorySession
from .master_list import CsvMasterListStore, MasterListStore
from .roster_synchronizer import (Classification, RosterSynchronizer,
                                  merge_existing, provision, reconcile)
from .run_report import (ChangeLogEntry, ProvisioningOutcome, RunReport,
                         RunWarning)
from .secret_generator import SecretGenerator, generate_secret
from .sync_config import ExecutionMode, SyncConfig
from .data_models import StudentRecord
