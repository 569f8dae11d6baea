"""
Commons package for short-link utilities.
"""

from .url_utils import (
    generate_short_id,
    build_primary_key,
    build_short_url,
    resolve_ttl,
    calculate_expiry_ttl,
    SHORT_ID_LENGTH,
    DEFAULT_TTL_SECONDS,
    SAFE_ALPHABET
)

from .lambda_utils import (
    normalize_headers,
    parse_request_body,
    create_json_response,
    create_error_response,
    status_for,
    ErrorKind,
    Failure
)

from .config import (
    load_settings,
    parse_allowed_domains,
    resolve_store_settings,
    Settings,
    StoreSettings
)

from .dynamodb_utils import (
    get_table,
    put_short_link
)

from .request_validator import (
    validate_request,
    ValidatedInput
)

from .link_creator import (
    LinkCreator,
    ShortLinkRecord
)

__all__ = [
    # URL utilities
    'generate_short_id',
    'build_primary_key',
    'build_short_url',
    'resolve_ttl',
    'calculate_expiry_ttl',
    'SHORT_ID_LENGTH',
    'DEFAULT_TTL_SECONDS',
    'SAFE_ALPHABET',

    # Lambda utilities
    'normalize_headers',
    'parse_request_body',
    'create_json_response',
    'create_error_response',
    'status_for',
    'ErrorKind',
    'Failure',

    # Configuration
    'load_settings',
    'parse_allowed_domains',
    'resolve_store_settings',
    'Settings',
    'StoreSettings',

    # DynamoDB utilities
    'get_table',
    'put_short_link',

    # Workflow
    'validate_request',
    'ValidatedInput',
    'LinkCreator',
    'ShortLinkRecord',
]
