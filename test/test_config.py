import unittest
import sys
import os
from unittest.mock import patch

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from commons.config import (
    load_settings, parse_allowed_domains, resolve_store_settings, StoreSettings
)
from commons.lambda_utils import ErrorKind, Failure
from commons.url_utils import DEFAULT_TTL_SECONDS


class TestParseAllowedDomains(unittest.TestCase):

    def test_valid_array(self):
        self.assertEqual(parse_allowed_domains('["a.com", "b.com"]'), ('a.com', 'b.com'))

    def test_absent_or_malformed_means_no_restriction(self):
        for raw in [None, '', 'not json', '{"a.com": true}', '"a.com"', '[broken']:
            with self.subTest(raw=raw):
                self.assertEqual(parse_allowed_domains(raw), ())


class TestLoadSettings(unittest.TestCase):

    def test_defaults(self):
        """Test settings built from an empty environment"""
        settings = load_settings({})

        self.assertEqual(settings.api_key, '')
        self.assertEqual(settings.store, StoreSettings(table_name=''))
        self.assertEqual(settings.ttl_seconds, DEFAULT_TTL_SECONDS)
        self.assertEqual(settings.allowed_domains, ())
        self.assertFalse(settings.test_mode)

    def test_reads_every_variable(self):
        environ = {
            'API_KEY': 'secret',
            'AMAZON_DYNAMODB_TABLE': 'ShortLinks',
            'AMAZON_REGION': 'eu-west-1',
            'AMAZON_ACCESS_KEY_ID': 'AKIAEXAMPLE',
            'AMAZON_SECRET_ACCESS_KEY': 'shh',
            'AMAZON_DYNAMODB_TTL': '3600',
            'ALLOWED_DOMAINS': '["sho.rt"]',
            'APP_ENV': 'test',
        }

        settings = load_settings(environ)

        self.assertEqual(settings.api_key, 'secret')
        self.assertEqual(settings.store, StoreSettings('ShortLinks', 'eu-west-1', 'AKIAEXAMPLE', 'shh'))
        self.assertEqual(settings.ttl_seconds, 3600)
        self.assertEqual(settings.allowed_domains, ('sho.rt',))
        self.assertTrue(settings.test_mode)

    def test_test_mode_only_for_test_environment(self):
        for app_env in ['prod', 'dev', 'local', 'testing', '']:
            with self.subTest(app_env=app_env):
                self.assertFalse(load_settings({'APP_ENV': app_env}).test_mode)
        self.assertTrue(load_settings({'APP_ENV': 'TEST'}).test_mode)

    def test_reads_process_environment_by_default(self):
        with patch.dict(os.environ, {'API_KEY': 'from-env'}):
            self.assertEqual(load_settings().api_key, 'from-env')


class TestResolveStoreSettings(unittest.TestCase):

    def setUp(self):
        self.settings = load_settings({
            'AMAZON_DYNAMODB_TABLE': 'ShortLinks',
            'AMAZON_REGION': 'eu-west-1',
            'AMAZON_ACCESS_KEY_ID': 'AKIADEFAULT',
            'AMAZON_SECRET_ACCESS_KEY': 'default-secret',
        })

    def test_uses_configured_store_without_credentials(self):
        store = resolve_store_settings({}, self.settings)
        self.assertEqual(store, StoreSettings('ShortLinks', 'eu-west-1', 'AKIADEFAULT', 'default-secret'))

    def test_event_credentials_override_configuration(self):
        event = {'credentials': {
            'AMAZON_ACCESS_KEY_ID': 'AKIAEVENT',
            'AMAZON_SECRET_ACCESS_KEY': 'event-secret',
            'AMAZON_REGION': 'us-east-1',
            'AMAZON_DYNAMODB_TABLE': 'OtherLinks',
        }}

        store = resolve_store_settings(event, self.settings)
        self.assertEqual(store, StoreSettings('OtherLinks', 'us-east-1', 'AKIAEVENT', 'event-secret'))

    def test_camel_case_credentials_are_accepted(self):
        event = {'credentials': {'tableName': 'CamelLinks', 'region': 'ap-south-1'}}

        store = resolve_store_settings(event, self.settings)
        self.assertEqual(store.table_name, 'CamelLinks')
        self.assertEqual(store.region, 'ap-south-1')

    def test_partial_access_keys_are_dropped(self):
        settings = load_settings({'AMAZON_DYNAMODB_TABLE': 'ShortLinks'})
        event = {'credentials': {'AMAZON_ACCESS_KEY_ID': 'AKIAONLY'}}

        store = resolve_store_settings(event, settings)
        self.assertEqual(store.access_key_id, '')
        self.assertEqual(store.secret_access_key, '')

    def test_missing_table_is_configuration_failure(self):
        result = resolve_store_settings({}, load_settings({}))

        self.assertIsInstance(result, Failure)
        self.assertEqual(result.kind, ErrorKind.CONFIGURATION)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.message, "Missing DynamoDB table configuration.")

    def test_store_settings_are_hashable(self):
        store = resolve_store_settings({}, self.settings)
        self.assertEqual(hash(store), hash(StoreSettings('ShortLinks', 'eu-west-1', 'AKIADEFAULT', 'default-secret')))


if __name__ == '__main__':
    unittest.main()
