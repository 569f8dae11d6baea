"""
Configuration for the short-link service, read from environment variables.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from aws_lambda_powertools import Logger

from .lambda_utils import ErrorKind, Failure
from .url_utils import resolve_ttl

API_KEY_ENV = 'API_KEY'
TABLE_ENV = 'AMAZON_DYNAMODB_TABLE'
REGION_ENV = 'AMAZON_REGION'
ACCESS_KEY_ID_ENV = 'AMAZON_ACCESS_KEY_ID'
SECRET_ACCESS_KEY_ENV = 'AMAZON_SECRET_ACCESS_KEY'
TTL_ENV = 'AMAZON_DYNAMODB_TTL'
ALLOWED_DOMAINS_ENV = 'ALLOWED_DOMAINS'
APP_ENV_ENV = 'APP_ENV'

TEST_ENVIRONMENT = 'test'

# Per-invocation credential keys and the camelCase aliases accepted for them
CREDENTIAL_ALIASES = {
    ACCESS_KEY_ID_ENV: 'accessKeyId',
    SECRET_ACCESS_KEY_ENV: 'secretAccessKey',
    REGION_ENV: 'region',
    TABLE_ENV: 'tableName',
}

logger = Logger()


@dataclass(frozen=True)
class StoreSettings:
    """Where and as whom to write short-link records."""

    table_name: str
    region: str = ''
    access_key_id: str = ''
    secret_access_key: str = ''


@dataclass(frozen=True)
class Settings:
    api_key: str
    store: StoreSettings
    ttl_seconds: float
    allowed_domains: Tuple[str, ...]
    test_mode: bool


def parse_allowed_domains(raw_value: Optional[str]) -> Tuple[str, ...]:
    """
    Parse the JSON-encoded domain allow-list.

    Args:
        raw_value: JSON array of domain names, as configured

    Returns:
        Tuple of allowed domains; empty (no restriction) when the value is
        absent, malformed or not an array
    """
    try:
        parsed = json.loads(raw_value or '[]')
    except ValueError:
        logger.warning(f"Ignoring malformed {ALLOWED_DOMAINS_ENV} value")
        return ()

    if not isinstance(parsed, list):
        return ()
    return tuple(parsed)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the service settings from the environment.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Settings: The current configuration
    """
    if environ is None:
        environ = os.environ

    return Settings(
        api_key=environ.get(API_KEY_ENV, ''),
        store=StoreSettings(
            table_name=environ.get(TABLE_ENV, ''),
            region=environ.get(REGION_ENV, ''),
            access_key_id=environ.get(ACCESS_KEY_ID_ENV, ''),
            secret_access_key=environ.get(SECRET_ACCESS_KEY_ENV, ''),
        ),
        ttl_seconds=resolve_ttl(environ.get(TTL_ENV)),
        allowed_domains=parse_allowed_domains(environ.get(ALLOWED_DOMAINS_ENV)),
        test_mode=environ.get(APP_ENV_ENV, '').lower() == TEST_ENVIRONMENT,
    )


def _credential(credentials: Dict[str, Any], key: str) -> str:
    value = credentials.get(key) or credentials.get(CREDENTIAL_ALIASES[key])
    return value if isinstance(value, str) else ''


def resolve_store_settings(event: Dict[str, Any], settings: Settings) -> Union[StoreSettings, Failure]:
    """
    Merge per-invocation credentials from the event over the configured store.

    Static access keys are only used when both the id and the secret are set;
    otherwise the default boto3 credential chain applies.

    Args:
        event: Lambda event object, optionally carrying ``credentials``
        settings: Process-wide settings

    Returns:
        StoreSettings for this invocation, or a CONFIGURATION failure when
        no table name is available
    """
    credentials = event.get('credentials')
    if not isinstance(credentials, dict):
        credentials = {}

    defaults = settings.store
    table_name = _credential(credentials, TABLE_ENV) or defaults.table_name
    if not table_name:
        return Failure(ErrorKind.CONFIGURATION, "Missing DynamoDB table configuration.")

    access_key_id = _credential(credentials, ACCESS_KEY_ID_ENV) or defaults.access_key_id
    secret_access_key = _credential(credentials, SECRET_ACCESS_KEY_ENV) or defaults.secret_access_key
    if not (access_key_id and secret_access_key):
        access_key_id = secret_access_key = ''

    return StoreSettings(
        table_name=table_name,
        region=_credential(credentials, REGION_ENV) or defaults.region,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
    )
