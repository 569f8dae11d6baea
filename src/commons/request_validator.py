"""
Validation of inbound short-link creation requests.
"""

import hmac
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .config import Settings
from .lambda_utils import ErrorKind, Failure, normalize_headers, parse_request_body

API_KEY_HEADER = 'x-api-key'


@dataclass(frozen=True)
class ValidatedInput:
    """
    A request that passed validation.

    Attributes:
        domain: Allowed short-link domain
        url: Destination URL, trimmed
        test_override_id: Caller-chosen id, only ever set in test mode
    """

    domain: str
    url: str
    test_override_id: Optional[str] = None


def _string_field(payload: Dict[str, Any], name: str) -> str:
    value = payload.get(name)
    return value.strip() if isinstance(value, str) else ''


def _api_key_matches(provided: Any, expected: str) -> bool:
    if not expected or not provided or not isinstance(provided, str):
        return False
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


def validate_request(event: Dict[str, Any], settings: Settings) -> Union[ValidatedInput, Failure]:
    """
    Validate a creation request.

    Checks run in order and the first failing one decides the outcome:
    API key, body parsing, required ``url`` and ``domain``, domain allow-list.
    ``testid`` is read only when ``settings.test_mode`` is set.

    Args:
        event: Lambda event object
        settings: Current service settings

    Returns:
        ValidatedInput on success, Failure otherwise
    """
    headers = normalize_headers(event)
    if not _api_key_matches(headers.get(API_KEY_HEADER), settings.api_key):
        return Failure(ErrorKind.UNAUTHORIZED, "Missing or invalid API key.")

    try:
        payload = parse_request_body(event)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return Failure(ErrorKind.BAD_REQUEST, "Invalid JSON body.")
    except ValueError:
        return Failure(ErrorKind.BAD_REQUEST, "Unsupported body format.")

    domain = _string_field(payload, 'domain')
    url = _string_field(payload, 'url')
    test_override_id = _string_field(payload, 'testid') if settings.test_mode else ''

    if not url:
        return Failure(ErrorKind.BAD_REQUEST, "Missing url in request body.")

    if not domain:
        return Failure(ErrorKind.BAD_REQUEST, "Missing domain in request.")

    if settings.allowed_domains and domain not in settings.allowed_domains:
        return Failure(ErrorKind.BAD_REQUEST, "Domain not allowed.")

    return ValidatedInput(domain=domain, url=url, test_override_id=test_override_id or None)
