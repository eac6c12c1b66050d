from typing import Dict, Optional

from .utils import MASTER_LIST_HEADINGS, clean, is_blank
from .. import exceptions, utils


class StudentRecord(object):

    """
    Represents a single row of roster data, either fetched from the
    account directory or read from the local master list.

    :param str username: the unique, case-sensitive key for the student
    :param str first_name: the student's first/given name
    :param str last_name: the student's last/surname
    :param str year_level: the student's year level, e.g. "Prep" or "7"
    :param str class_name: the student's home class
    :param str email: the student's school email address
    :param str secret: the student's account password, `None` when it
        still needs to be provisioned
    :param str remote_ref: the directory's own identifier for the
        student. Only present on freshly fetched records.
    """

    directory_field_map = {
        'Username': 'username',
        'FirstName': 'first_name',
        'LastName': 'last_name',
        'YearLevel': 'year_level',
        'ClassName': 'class_name',
        'Email': 'email',
        'Id': 'remote_ref'
    }
    master_list_field_map = dict(zip(
        MASTER_LIST_HEADINGS,
        ('username', 'first_name', 'last_name', 'year_level', 'class_name',
         'email', 'secret')
    ))

    def __init__(self, username: str, first_name: str = '',
                 last_name: str = '', year_level: str = '',
                 class_name: str = '', email: str = '',
                 secret: Optional[str] = None,
                 remote_ref: Optional[str] = None):
        self.first_name = clean(first_name)
        self.last_name = clean(last_name)
        if is_blank(username):
            raise exceptions.NoUsernameException(self.first_last.strip())
        self.username = str(username).strip()
        self.year_level = clean(year_level)
        self.class_name = clean(class_name)
        self.email = clean(email)
        self.secret = None if is_blank(secret) else str(secret).strip()
        self.remote_ref = None if is_blank(remote_ref) else str(remote_ref)

    @property
    def first_last(self) -> str:
        return self.first_name + ' ' + self.last_name

    @property
    def needs_secret(self) -> bool:
        return is_blank(self.secret)

    def copy(self) -> 'StudentRecord':
        return self.__class__(**self.to_dict())

    @classmethod
    def from_directory(cls, json_obj: dict) -> 'StudentRecord':
        """
        Creates a record from a JSON object returned by the account
        directory.

        :param dict json_obj: a single student object
        :raises MalformedPayloadException: when the object has no
            username
        """
        try:
            kwargs = {attr: json_obj.get(key)
                      for key, attr in cls.directory_field_map.items()}
        except AttributeError:
            raise exceptions.MalformedPayloadException(json_obj)
        if is_blank(kwargs['username']):
            raise exceptions.MalformedPayloadException(json_obj)
        return cls(**kwargs)

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> 'StudentRecord':
        """Creates a record from a master list row."""
        kwargs = {attr: row.get(heading)
                  for heading, attr in cls.master_list_field_map.items()}
        return cls(**kwargs)

    def to_row(self) -> Dict[str, str]:
        """
        Normalizes the record into the master list schema. `remote_ref`
        is never persisted.
        """
        as_dict = self.to_dict()
        return {heading: as_dict[attr] or ''
                for heading, attr in self.master_list_field_map.items()}

    def to_dict(self) -> dict:
        return {
            'username': self.username,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'year_level': self.year_level,
            'class_name': self.class_name,
            'email': self.email,
            'secret': self.secret,
            'remote_ref': self.remote_ref
        }

    def __eq__(self, other):
        if isinstance(other, StudentRecord):
            this_dict = self.to_dict()
            other_dict = other.to_dict()
            for obj in this_dict, other_dict:
                # Passwords and directory handles aren't part of identity
                del obj['secret']
                del obj['remote_ref']
            return this_dict == other_dict

        return False

    def __hash__(self):
        return hash((self.username, self.year_level, self.class_name))

    def __str__(self):
        as_dict = self.to_dict()
        as_dict['secret'] = utils.mask_secret(self.secret)
        return str(as_dict)

    def __repr__(self):
        return f'{self.__class__.__name__}({str(self)})'
