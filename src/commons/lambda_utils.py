"""
Common utilities for Lambda functions: request parsing, response building and
the error result type shared by the short-link workflow.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any
from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.metrics import MetricUnit

# Constants
HTTP_STATUS_OK = 200
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_INTERNAL_ERROR = 500

# Common response headers
JSON_HEADERS = {
    'Content-Type': 'application/json'
}


class ErrorKind(Enum):
    """Failure categories a request can end in."""

    UNAUTHORIZED = 'Unauthorized'
    BAD_REQUEST = 'BadRequest'
    CONFIGURATION = 'ConfigurationError'
    PERSISTENCE = 'PersistenceError'
    INTERNAL = 'InternalError'


# Auth failures answer 400, not 401/403: existing clients depend on it.
STATUS_BY_KIND = {
    ErrorKind.UNAUTHORIZED: HTTP_STATUS_BAD_REQUEST,
    ErrorKind.BAD_REQUEST: HTTP_STATUS_BAD_REQUEST,
    ErrorKind.CONFIGURATION: HTTP_STATUS_INTERNAL_ERROR,
    ErrorKind.PERSISTENCE: HTTP_STATUS_INTERNAL_ERROR,
    ErrorKind.INTERNAL: HTTP_STATUS_INTERNAL_ERROR,
}


@dataclass(frozen=True)
class Failure:
    """
    Terminal outcome of a request that did not produce a short link.

    Attributes:
        kind: Category used to pick the HTTP status code
        message: Human-readable reason returned to the caller
    """

    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return status_for(self.kind)


def status_for(kind: ErrorKind) -> int:
    """Map an error kind to its HTTP status, defaulting to 500."""
    return STATUS_BY_KIND.get(kind, HTTP_STATUS_INTERNAL_ERROR)


def normalize_headers(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return the request headers with lower-cased names.

    Headers are read from ``event['headers']`` and, when that is missing,
    from ``event['rawEvent']['headers']``.

    Args:
        event: Lambda event object

    Returns:
        Dict mapping lower-cased header names to their values
    """
    headers = event.get('headers') or (event.get('rawEvent') or {}).get('headers') or {}
    return {str(name).lower(): value for name, value in headers.items()}


def parse_request_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse request body from Lambda event.

    An absent or empty body, or JSON text that is not an object, is treated
    as an empty object.

    Args:
        event: Lambda event object

    Returns:
        Dict containing parsed body

    Raises:
        json.JSONDecodeError: If body is text but not valid JSON
        UnicodeDecodeError: If a bytes body is not valid UTF-8
        ValueError: If body has an unsupported shape
    """
    body = event.get('body')
    if body is None:
        body = (event.get('rawEvent') or {}).get('body')

    if not body:
        return {}

    if isinstance(body, (str, bytes)):
        parsed = json.loads(body)
        return parsed if isinstance(parsed, dict) else {}
    elif isinstance(body, dict):
        return body
    else:
        raise ValueError(f"Invalid body type: {type(body).__name__}")


def create_json_response(
    status_code: int,
    body: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Create a standardized JSON response for Lambda.

    Args:
        status_code: HTTP status code
        body: Response body dictionary

    Returns:
        Dict: Lambda response object
    """
    return {
        'statusCode': status_code,
        'headers': JSON_HEADERS.copy(),
        'body': json.dumps(body, default=str)
    }


def create_error_response(
    failure: Failure,
    logger: Logger,
    metrics: Metrics,
    metric_name: str = "Errors"
) -> Dict[str, Any]:
    """
    Create an error response with logging and metrics.

    Args:
        failure: The failure to report
        logger: Lambda Powertools logger
        metrics: Lambda Powertools metrics
        metric_name: Metric name for error tracking

    Returns:
        Dict: Lambda response object carrying ``{"message": ...}``
    """
    status_code = failure.status_code
    if status_code >= HTTP_STATUS_INTERNAL_ERROR:
        logger.error(f"Error {status_code} ({failure.kind.value}): {failure.message}")
    else:
        logger.warning(f"Rejected {status_code} ({failure.kind.value}): {failure.message}")
    metrics.add_metric(name=metric_name, unit=MetricUnit.Count, value=1)

    return create_json_response(
        status_code=status_code,
        body={'message': failure.message}
    )

