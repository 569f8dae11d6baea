"""
Short-link creation: id selection, record construction and the conditional write.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError
from aws_lambda_powertools import Logger

from .dynamodb_utils import put_short_link, describe_client_error, is_conditional_check_failure
from .lambda_utils import ErrorKind, Failure
from .request_validator import ValidatedInput
from .url_utils import (
    DEFAULT_TTL_SECONDS, generate_short_id, build_primary_key,
    build_short_url, calculate_expiry_ttl
)

logger = Logger()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ShortLinkRecord:
    """
    The persisted mapping from a short id to its destination.

    Attributes:
        primary_key: ``"{domain}#{short_id}"``, the table's partition key
        domain: Short-link domain
        short_id: Identifier appearing in the short URL
        url: Destination URL
        clicks: Click counter, always 0 at creation
        created: ISO-8601 creation time
        expiry_ttl: Epoch seconds after which DynamoDB may expire the item
    """

    primary_key: str
    domain: str
    short_id: str
    url: str
    clicks: int
    created: str
    expiry_ttl: int

    def to_item(self) -> Dict[str, Any]:
        return {
            'PK': self.primary_key,
            'Clicks': self.clicks,
            'Created': self.created,
            'Domain': self.domain,
            'ShortId': self.short_id,
            'TTL': self.expiry_ttl,
            'Url': self.url,
        }


class LinkCreator:
    """
    Creates short links in a DynamoDB table.

    Uniqueness of generated ids relies entirely on the create-only condition
    of the write; a collision fails the request and is not retried. Override
    ids skip the condition and may overwrite an existing record.
    """

    def __init__(
        self,
        table,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        id_generator: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = _utc_now
    ):
        self.table = table
        self.ttl_seconds = ttl_seconds
        self.id_generator = id_generator or generate_short_id
        self.clock = clock

    def build_record(self, validated: ValidatedInput, short_id: str) -> ShortLinkRecord:
        created = self.clock()
        return ShortLinkRecord(
            primary_key=build_primary_key(validated.domain, short_id),
            domain=validated.domain,
            short_id=short_id,
            url=validated.url,
            clicks=0,
            created=created.isoformat(),
            expiry_ttl=calculate_expiry_ttl(created, self.ttl_seconds),
        )

    def create(self, validated: ValidatedInput) -> Union[Dict[str, str], Failure]:
        """
        Persist a new short link.

        Args:
            validated: Output of request validation

        Returns:
            ``{"shortUrl": ...}`` on success, a PERSISTENCE failure otherwise
        """
        override = validated.test_override_id
        short_id = override or self.id_generator()
        record = self.build_record(validated, short_id)

        try:
            put_short_link(self.table, record.to_item(), create_only=not override)
        except ClientError as e:
            error_code, error_message = describe_client_error(e)
            if is_conditional_check_failure(e):
                logger.error(f"Short id collision for {record.primary_key}",
                             extra={'url': validated.url, 'domain': validated.domain})
            else:
                logger.error(f"DynamoDB put_item failed: {error_code} - {error_message}",
                             extra={'url': validated.url, 'domain': validated.domain})
            return Failure(ErrorKind.PERSISTENCE, "Could not persist shortlink.")
        except BotoCoreError as e:
            logger.error(f"Error saving shortlink: {e}",
                         extra={'url': validated.url, 'domain': validated.domain})
            return Failure(ErrorKind.PERSISTENCE, "Could not persist shortlink.")

        short_url = build_short_url(validated.domain, short_id)
        logger.info("Created short link", extra={
            'short_url': short_url,
            'original_url': validated.url,
            'created_at': record.created,
        })
        return {'shortUrl': short_url}
