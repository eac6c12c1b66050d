from typing import Optional


DEFAULT_EMAIL_DOMAIN = 'students.example.edu'

# Column names and order of the persisted master list. Downstream
# report generation depends on both.
MASTER_LIST_HEADINGS = (
    'Username',
    'FirstName',
    'LastName',
    'YearLevel',
    'Class',
    'Email',
    'Password'
)

# Fields compared on existing records, in comparison order
TRACKED_FIELDS = ('year_level', 'class_name', 'email')


def make_email(username: str, domain: str = DEFAULT_EMAIL_DOMAIN) -> str:
    """Derives a student's email address from their username."""
    return f'{username}@{domain}'


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def clean(value) -> str:
    """Strips a display value, mapping `None` to the empty string."""
    if value is None:
        return ''
    return str(value).strip()
