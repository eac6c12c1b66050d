from abc import ABC, abstractmethod
from typing import List
from urllib.parse import quote, urljoin
import logging

import requests

from . import exceptions
from .data_models import PageWalker, StudentRecord
from .directory_session import DirectorySession

DEFAULT_TIMEOUT = 30


class AccountDirectory(ABC):

    """
    The remote account directory a roster is reconciled against. The
    :class:`RosterSynchronizer` only ever talks to the directory through
    this interface.
    """

    @abstractmethod
    def fetch_roster(self, org_id: str) -> List[StudentRecord]:
        """
        Fetches the current roster for an organization.

        :param org_id: the organization (school) identifier
        :raises DirectoryUnavailable: when the directory cannot be
            reached or returns a malformed payload
        :raises AuthenticationFailed: when the credentials are rejected
        """
        pass

    @abstractmethod
    def set_password(self, username: str, secret: str) -> None:
        """
        Sets a student's password.

        :raises DirectoryError: when the call fails
        """
        pass

    @abstractmethod
    def enable_service(self, username: str, service: str) -> None:
        """
        Enables a service on a student's account.

        :raises DirectoryError: when the call fails
        """
        pass


class HttpAccountDirectory(AccountDirectory):

    """
    An :class:`AccountDirectory` backed by a REST API. Requests go
    through a :class:`DirectorySession` that keeps a valid bearer token
    in its headers.

    :ivar DirectorySession session: an open, authenticated session
    """

    def __init__(self, session: requests.Session = None,
                 base_url: str = None, timeout: float = DEFAULT_TIMEOUT):
        self.logger = logging.getLogger(__name__)
        self.session = session if session is not None \
            else DirectorySession(base_url=base_url)
        self.base_url = base_url if base_url is not None \
            else self.session.base_url
        if not self.base_url.endswith('/'):
            self.base_url += '/'
        self.timeout = timeout

    def roster_url(self, org_id: str) -> str:
        return urljoin(self.base_url, f'orgs/{quote(str(org_id))}/students')

    def student_url(self, username: str) -> str:
        return urljoin(self.base_url, f'students/{quote(username)}')

    def fetch_roster(self, org_id: str) -> List[StudentRecord]:
        url = self.roster_url(org_id)
        self.logger.info(f'Fetching roster for organization "{org_id}".')
        walker = PageWalker(session=self.session, logger=self.logger,
                            timeout=self.timeout)
        roster = []
        try:
            for page_number, r in enumerate(walker.walk(url)):
                self._check_fetch_response(r)
                try:
                    json_objs = r.json()
                except ValueError:
                    raise exceptions.MalformedPayloadException(r.text)
                self._parse_roster_page(json_objs, page_number, roster)
        except requests.exceptions.RequestException as e:
            self.logger.exception('Account directory could not be reached.')
            raise exceptions.DirectoryUnavailable(str(e))

        self.logger.info(f'Retrieved {len(roster)} students from the '
                         'account directory.')
        return roster

    def _check_fetch_response(self, r: requests.Response):
        if r.status_code in (401, 403):
            raise exceptions.AuthenticationFailed(
                status_code=r.status_code
            )
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError:
            raise exceptions.DirectoryUnavailable(
                'Roster request failed: ' + r.text,
                status_code=r.status_code
            )

    def _parse_roster_page(self, json_objs: List[dict], page_number: int,
                           roster: List[StudentRecord]):
        """
        Parses a single page of a roster response and appends the
        students it holds to `roster`. Archived students are skipped.
        """
        if not isinstance(json_objs, list):
            raise exceptions.MalformedPayloadException(json_objs)

        for i, obj in enumerate(json_objs):
            progress = f'page {page_number + 1}:{i + 1}/{len(json_objs)}' \
                       f':total {len(roster) + 1}'
            try:
                if obj.get('RoleStatus') == 'Archived':
                    continue
            except AttributeError:
                raise exceptions.MalformedPayloadException(obj)
            student = StudentRecord.from_directory(obj)
            self.logger.debug(f'{progress}:Read student {student.username}.')
            roster.append(student)

    def set_password(self, username: str, secret: str) -> None:
        url = urljoin(self.student_url(username) + '/', 'password')
        self._mutate('put', url, username, json={'Password': secret})

    def enable_service(self, username: str, service: str) -> None:
        url = urljoin(self.student_url(username) + '/',
                      f'services/{quote(service)}')
        self._mutate('post', url, username)

    def _mutate(self, method: str, url: str, username: str, **kwargs):
        """
        Issues a single mutating request. Every failure, whether the
        connection or the status, surfaces as a :class:`DirectoryError`.
        """
        try:
            r = self.session.request(method, url, timeout=self.timeout,
                                     **kwargs)
        except requests.exceptions.RequestException as e:
            raise exceptions.DirectoryError(str(e), username=username)

        if r.status_code in (401, 403):
            raise exceptions.AuthenticationFailed(
                'Directory rejected credentials.', username=username,
                status_code=r.status_code
            )
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError:
            raise exceptions.DirectoryError(r.text or None,
                                            username=username,
                                            status_code=r.status_code)
        self.logger.debug(f'{method.upper()} {url} returned status '
                          f'{r.status_code}.')
