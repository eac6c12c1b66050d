"""
The :mod:`data_models` package defines the records that flow through a
roster sync.

:class:`StudentRecord` is a single row of roster data. It knows how to
build itself from an account directory JSON object and how to convert
itself to and from the fixed master list schema given by
`MASTER_LIST_HEADINGS`.

:class:`PageWalker` walks the paginated responses returned by the
account directory when fetching a roster.
"""

from .page_walker import PageWalker
from .student_record import StudentRecord
from .utils import (DEFAULT_EMAIL_DOMAIN, MASTER_LIST_HEADINGS,
                    TRACKED_FIELDS, make_email)
