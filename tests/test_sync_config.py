from unittest import mock
import io
import json
import os
import tempfile
import unittest

from roster_sync import ExecutionMode, SyncConfig
from roster_sync.data_models import DEFAULT_EMAIL_DOMAIN


class TestSyncConfig(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.dict(os.environ)
        patcher.start()
        self.addCleanup(patcher.stop)
        for var in 'ROSTER_DRY_RUN', 'ROSTER_ORG_ID':
            os.environ.pop(var, None)

    def test_default(self):
        config = SyncConfig.default()
        self.assertIsNone(config.org_id)
        self.assertIs(config.mode, ExecutionMode.LIVE)
        self.assertEqual(config.email_domain, DEFAULT_EMAIL_DOMAIN)
        self.assertEqual(config.services, ['service-a', 'service-b'])

    def test_from_json_path(self):
        with tempfile.NamedTemporaryFile('w', suffix='.json',
                                         delete=False) as f:
            json.dump({'org_id': '42', 'dry_run': True,
                       'services': ['mail']}, f)
        self.addCleanup(os.remove, f.name)
        config = SyncConfig.from_json(f.name)
        self.assertEqual(config.org_id, '42')
        self.assertIs(config.mode, ExecutionMode.DRY_RUN)
        self.assertEqual(config.services, ['mail'])
        self.assertEqual(config.master_list_path, 'master_list.csv')

    def test_from_json_file_object(self):
        config = SyncConfig.from_json(io.StringIO('{"org_id": "7"}'))
        self.assertEqual(config['org_id'], '7')
        self.assertIsNone(config['not_a_setting'])

    def test_environment_overrides(self):
        os.environ['ROSTER_DRY_RUN'] = '1'
        os.environ['ROSTER_ORG_ID'] = '99'
        config = SyncConfig(org_id='42', dry_run=False)
        self.assertTrue(config.dry_run)
        self.assertEqual(config.org_id, '99')

        os.environ['ROSTER_DRY_RUN'] = '0'
        self.assertFalse(SyncConfig(org_id='42', dry_run=True).dry_run)

    def test_to_dict(self):
        as_dict = SyncConfig(org_id='42').to_dict()
        self.assertEqual(as_dict['org_id'], '42')
        self.assertIn('report_path', as_dict)


if __name__ == '__main__':
    unittest.main()
