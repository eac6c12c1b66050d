from urllib.parse import urljoin
import json
import os
import unittest
from unittest import mock

import requests
import responses

from roster_sync import (HttpAccountDirectory, RosterSynchronizer,
                         SecretGenerator, SyncConfig, exceptions)
from roster_sync.directory_session import DirectorySession
from roster_sync.run_report import FAILED
from .constants import BASE_URL, DATA_DIR, ORG_ID
from .utils import MemoryStore


class TestDirectoryResources(unittest.TestCase):

    roster_url = urljoin(BASE_URL, f'orgs/{ORG_ID}/students')

    def setUp(self):
        self.responses = responses.RequestsMock()
        self.responses.start()
        self.addCleanup(self.responses.stop)
        self.addCleanup(self.responses.reset)
        with open(DATA_DIR / 'directory_roster.json', 'r') as f:
            self.fixtures = json.load(f)
        self.directory = HttpAccountDirectory(session=requests.Session(),
                                              base_url=BASE_URL)

    def add_page(self, page: str, status=200, total_pages=None, body=None):
        headers = {}
        if total_pages is not None:
            headers['total-pages'] = str(total_pages)
        if body is None:
            body = json.dumps(self.fixtures[page])
        self.responses.add(
            responses.Response(
                responses.GET, self.roster_url,
                status=status,
                content_type='application/json',
                headers=headers,
                body=body
            )
        )

    def test_fetch_single_page(self):
        self.add_page('page_1')
        roster = self.directory.fetch_roster(ORG_ID)
        self.assertEqual([s.username for s in roster], ['amy', 'bob'])
        self.assertEqual(roster[0].remote_ref, 'd-1001')

    def test_fetch_paged(self):
        self.add_page('page_1', total_pages=2)
        self.add_page('page_2', total_pages=2)
        roster = self.directory.fetch_roster(ORG_ID)
        self.assertEqual([s.username for s in roster],
                         ['amy', 'bob', 'cara'])
        self.assertEqual(roster[2].first_name, 'Cara')
        pages = [c.request.headers['page'] for c in self.responses.calls]
        self.assertEqual(pages, ['1', '2'])

    def test_fetch_unauthorized(self):
        self.add_page('page_1', status=401, body='{}')
        with self.assertRaises(exceptions.AuthenticationFailed):
            self.directory.fetch_roster(ORG_ID)

    def test_fetch_server_error(self):
        self.add_page('page_1', status=503, body='down for maintenance')
        with self.assertRaises(exceptions.DirectoryUnavailable) as cm:
            self.directory.fetch_roster(ORG_ID)
        self.assertEqual(cm.exception.status_code, 503)

    def test_fetch_second_page_fails(self):
        self.add_page('page_1', total_pages=2)
        self.add_page('page_2', status=500, body='oops')
        with self.assertRaises(exceptions.DirectoryUnavailable):
            self.directory.fetch_roster(ORG_ID)

    def test_fetch_malformed(self):
        self.add_page('malformed')
        with self.assertRaises(exceptions.MalformedPayloadException):
            self.directory.fetch_roster(ORG_ID)

    def test_fetch_not_json(self):
        self.add_page('page_1', body='<html>not json</html>')
        with self.assertRaises(exceptions.DirectoryUnavailable):
            self.directory.fetch_roster(ORG_ID)

    def test_fetch_not_a_list(self):
        self.add_page('page_1', body=json.dumps({'students': []}))
        with self.assertRaises(exceptions.MalformedPayloadException):
            self.directory.fetch_roster(ORG_ID)

    def test_fetch_connection_error(self):
        self.responses.add(
            responses.GET, self.roster_url,
            body=requests.exceptions.ConnectionError('refused')
        )
        with self.assertRaises(exceptions.DirectoryUnavailable):
            self.directory.fetch_roster(ORG_ID)

    def test_fetch_transport_error(self):
        self.responses.add(
            responses.GET, self.roster_url,
            body=requests.exceptions.ChunkedEncodingError('cut')
        )
        with self.assertRaises(exceptions.DirectoryUnavailable):
            self.directory.fetch_roster(ORG_ID)

    def test_transport_error_aborts_sync(self):
        self.responses.add(
            responses.GET, self.roster_url,
            body=requests.exceptions.TooManyRedirects('loop')
        )
        store = MemoryStore()
        sync = RosterSynchronizer(self.directory, store,
                                  SyncConfig(org_id=ORG_ID),
                                  secret_generator=SecretGenerator())
        with self.assertRaises(exceptions.SyncAbortedError) as cm:
            sync.run()
        self.assertEqual(cm.exception.kind, 'directory_unavailable')
        self.assertEqual(sync.report.status, FAILED)
        self.assertEqual(store.saves, [])

    def test_set_password(self):
        url = urljoin(BASE_URL, 'students/amy/password')
        self.responses.add(responses.PUT, url, status=204)
        self.directory.set_password('amy', 'Otter.0427')
        body = json.loads(self.responses.calls[0].request.body)
        self.assertEqual(body, {'Password': 'Otter.0427'})

    def test_set_password_error(self):
        url = urljoin(BASE_URL, 'students/amy/password')
        self.responses.add(responses.PUT, url, status=400,
                           body='Password does not meet policy')
        with self.assertRaises(exceptions.DirectoryError) as cm:
            self.directory.set_password('amy', 'Otter.0427')
        self.assertEqual(cm.exception.username, 'amy')
        self.assertEqual(cm.exception.status_code, 400)
        self.assertNotIn('Otter.0427', str(cm.exception))

    def test_enable_service(self):
        url = urljoin(BASE_URL, 'students/amy/services/service-a')
        self.responses.add(responses.POST, url, status=200)
        self.directory.enable_service('amy', 'service-a')
        self.assertEqual(len(self.responses.calls), 1)

    def test_enable_service_connection_error(self):
        url = urljoin(BASE_URL, 'students/amy/services/service-b')
        self.responses.add(
            responses.POST, url,
            body=requests.exceptions.ConnectionError('reset')
        )
        with self.assertRaises(exceptions.DirectoryError):
            self.directory.enable_service('amy', 'service-b')


class TestDirectorySession(unittest.TestCase):

    env = {
        'DIRECTORY_URL': BASE_URL,
        'DIRECTORY_CLIENT_ID': 'client',
        'DIRECTORY_CLIENT_SECRET': 'secret'
    }
    token_url = urljoin(BASE_URL, 'token')

    def setUp(self):
        self.responses = responses.RequestsMock()
        self.responses.start()
        self.addCleanup(self.responses.stop)
        self.addCleanup(self.responses.reset)
        patcher = mock.patch.dict(os.environ, self.env)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_token_in_headers(self):
        self.responses.add(responses.POST, self.token_url,
                           json={'access_token': 'abc', 'expires_in': 3600})
        session = DirectorySession()
        self.addCleanup(session.close)
        self.assertEqual(session.headers['Authorization'], 'Bearer abc')
        self.assertEqual(session.base_url, BASE_URL)

    def test_expired_token_renewed(self):
        self.responses.add(responses.POST, self.token_url,
                           json={'access_token': 'abc', 'expires_in': 0})
        self.responses.add(responses.POST, self.token_url,
                           json={'access_token': 'def', 'expires_in': 3600})
        self.responses.add(responses.POST,
                           urljoin(BASE_URL, 'students/amy/services/x'))
        session = DirectorySession()
        self.addCleanup(session.close)
        directory = HttpAccountDirectory(session=session)
        directory.enable_service('amy', 'x')
        self.assertEqual(self.responses.calls[-1].request.headers
                         ['Authorization'], 'Bearer def')

    def test_token_rejected(self):
        self.responses.add(responses.POST, self.token_url, status=401)
        with self.assertRaises(exceptions.AuthenticationFailed):
            DirectorySession()

    def test_token_server_error(self):
        self.responses.add(responses.POST, self.token_url, status=502)
        with self.assertRaises(exceptions.DirectoryUnavailable):
            DirectorySession()

    def test_token_transport_error(self):
        self.responses.add(responses.POST, self.token_url,
                           body=requests.exceptions.InvalidURL('bad url'))
        with self.assertRaises(exceptions.DirectoryUnavailable):
            DirectorySession()

    def test_missing_credentials(self):
        with mock.patch.dict(os.environ, {'DIRECTORY_CLIENT_ID': ''}):
            del os.environ['DIRECTORY_CLIENT_ID']
            with self.assertRaises(EnvironmentError):
                DirectorySession()


if __name__ == '__main__':
    unittest.main()
