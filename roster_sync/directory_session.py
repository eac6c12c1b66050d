from datetime import datetime, timedelta
from urllib.parse import urljoin
import logging
import os

from requests.auth import HTTPBasicAuth
import requests

from .exceptions import AuthenticationFailed, DirectoryUnavailable
from .utils import get_header


def get_base_url() -> str:
    try:
        base_url = os.environ['DIRECTORY_URL']
    except KeyError:
        raise EnvironmentError('DIRECTORY_URL is not in the environment.')
    return base_url if base_url.endswith('/') else base_url + '/'


class DirectorySession(requests.Session):

    """
    Extends the regular :class:`requests.Session` class to automatically
    generate an access token for the account directory based on
    credentials in the environment.

    :ivar logging.Logger logger: module-wide logger, accessed by
        __name__
    :ivar str base_url: root URL of the directory API
    """

    def __init__(self, base_url: str = None):
        """
        Initializes instance variables from `super` and creates
        an access token.
        """
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.base_url = base_url if base_url is not None else get_base_url()
        self.logger.debug('Session opened.')
        self._access_token = None
        self.update_token()

    @property
    def access_token(self) -> 'DirectoryAccessToken':
        """Automatically renews the access token when it expires."""
        if self._access_token.expired():
            self.update_token()
        return self._access_token

    def update_token(self):
        if self._access_token is not None:
            self.logger.debug('Old token expired. Generating new one.')
        self._access_token = DirectoryAccessToken.get_new_token(self.base_url)
        self.headers.update(get_header(self._access_token))

    def request(self, method, url, *args, **kwargs):
        # Touching the property renews an expired token first
        self.access_token
        return super().request(method, url, *args, **kwargs)


class DirectoryAccessToken(object):

    """
    Represents an access token for the account directory, which is
    generated with the following environment variables:

    - DIRECTORY_CLIENT_ID
    - DIRECTORY_CLIENT_SECRET

    :param datetime expiration: the time at which the token expires
    """
    # token will expire this many seconds before real expiration
    _PADDING = 10

    def __init__(self, token_response: requests.Response):
        as_json = token_response.json()
        self.token = as_json['access_token']

        expires_in = int(as_json.get('expires_in', 3600)) - self._PADDING
        self.expiration = datetime.now() + timedelta(seconds=expires_in)

    def expired(self) -> bool:
        return self.expiration < datetime.now()

    @classmethod
    def get_new_token(cls, base_url: str) -> 'DirectoryAccessToken':
        """Creates a new access token."""
        try:
            client_id = os.environ['DIRECTORY_CLIENT_ID']
            client_secret = os.environ['DIRECTORY_CLIENT_SECRET']
        except KeyError:
            raise EnvironmentError('Client ID or secret are not in '
                                   'the environment.')

        logger = logging.getLogger(__name__)
        url = urljoin(base_url, 'token')
        request_json = {
            'grant_type': 'client_credentials',
            'client_id': client_id,
            'client_secret': client_secret
        }

        headers = {'Accept': 'application/json'}
        auth = HTTPBasicAuth(client_id, client_secret)
        try:
            r = requests.post(url, json=request_json, headers=headers,
                              auth=auth)
        except requests.exceptions.RequestException as e:
            logger.exception('Account directory could not be reached.')
            raise DirectoryUnavailable(str(e))

        if r.status_code in (401, 403):
            raise AuthenticationFailed()
        try:
            r.raise_for_status()
            logger.debug('Successfully retrieved new token.')
            return cls(r)
        except requests.exceptions.HTTPError:
            logger.exception('Account directory refused to issue a token.')
            raise DirectoryUnavailable(status_code=r.status_code)
        except (KeyError, ValueError):
            raise DirectoryUnavailable('Token response was malformed.')

    def __str__(self):
        return self.token

    def __repr__(self):
        return f'{self.__class__.__name__}(********)'
