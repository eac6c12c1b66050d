from typing import Union
import os


class RosterSyncError(Exception):

    kind = 'sync_error'

    def __init__(self, e=None):
        self.error = e

    def __str__(self):
        out = 'There was an error when synchronizing the student roster'
        if self.error is None:
            return out + '.'
        else:
            return f'{out}:\n{self.error}'


class DirectoryError(RosterSyncError):

    """
    Raised by an `AccountDirectory` when a single call fails. Errors
    from mutating calls are recoverable and isolated to the record that
    caused them.
    """

    kind = 'directory_error'

    def __init__(self, msg: str = None, username: str = None,
                 status_code: int = None):
        self.msg = msg
        self.username = username
        self.status_code = status_code

    def __str__(self):
        out = self.msg or 'The account directory rejected the request'
        if self.username is not None:
            out += f' (user "{self.username}")'
        if self.status_code is not None:
            out += f' [HTTP {self.status_code}]'
        return out


class DirectoryUnavailable(DirectoryError):

    kind = 'directory_unavailable'

    def __str__(self):
        if self.msg is None:
            return 'The account directory could not be reached.'
        return self.msg


class AuthenticationFailed(DirectoryError):

    kind = 'authentication_failed'

    def __str__(self):
        if self.msg is None:
            return 'Account directory credentials were rejected.'
        return self.msg


class MalformedPayloadException(DirectoryUnavailable):

    def __init__(self, json_obj):
        super().__init__()
        self.obj = json_obj

    def __str__(self):
        return 'Received bad JSON response: ' + str(self.obj)


class NoUsernameException(RosterSyncError):

    kind = 'no_username'

    def __init__(self, name: str = None):
        self.name = name

    def __str__(self):
        if self.name:
            return f'Student "{self.name}" does not have a username.'
        return 'Student record does not have a username.'


class MissingCapabilityError(RosterSyncError):

    """
    A required collaborator was never wired in. This is a programming
    error and is raised at construction time.
    """

    kind = 'missing_capability'

    def __init__(self, capability: str):
        self.capability = capability

    def __str__(self):
        return f'No implementation was provided for "{self.capability}".'


class StoreError(RosterSyncError):

    kind = 'store_error'

    def __init__(self, path: Union[str, os.PathLike] = None, e=None):
        self.path = path
        self.error = e

    def __str__(self):
        out = f'Could not access the master list at "{self.path}"'
        if self.error is None:
            return out + '.'
        return f'{out}:\n{self.error}'


class SyncAbortedError(RosterSyncError):

    """
    The single terminal failure signal raised by
    :meth:`RosterSynchronizer.run` when the roster cannot be fetched.
    Carries the `kind` of the underlying error.
    """

    def __init__(self, cause: RosterSyncError):
        self.cause = cause
        self.kind = cause.kind

    def __str__(self):
        return f'Roster sync aborted ({self.kind}): {self.cause}'
