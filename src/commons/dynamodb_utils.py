"""
DynamoDB utilities for short-link persistence.
"""

import functools
import boto3
from typing import Any, Dict, Tuple
from botocore.exceptions import ClientError
from aws_lambda_powertools import Logger

from .config import StoreSettings

PARTITION_KEY = 'PK'
CREATE_ONLY_CONDITION = f'attribute_not_exists({PARTITION_KEY})'
CONDITIONAL_CHECK_FAILED = 'ConditionalCheckFailedException'
TABLE_CACHE_SIZE = 16

logger = Logger()


@functools.lru_cache(maxsize=TABLE_CACHE_SIZE)
def get_table(store: StoreSettings):
    """
    Return a DynamoDB Table handle for the given store settings.

    Handles are built once per process for each distinct settings value;
    the least recently used handle is dropped beyond TABLE_CACHE_SIZE.

    Args:
        store: Table name, region and optional static credentials

    Returns:
        boto3 DynamoDB Table resource
    """
    resource_options = {}
    if store.region:
        resource_options['region_name'] = store.region
    if store.access_key_id and store.secret_access_key:
        resource_options['aws_access_key_id'] = store.access_key_id
        resource_options['aws_secret_access_key'] = store.secret_access_key

    logger.debug(f"Initializing DynamoDB table handle for {store.table_name}")
    dynamodb = boto3.resource('dynamodb', **resource_options)
    return dynamodb.Table(store.table_name)


def put_short_link(table, item: Dict[str, Any], create_only: bool = True) -> None:
    """
    Write a short-link item.

    Args:
        table: DynamoDB Table resource
        item: Item to store, keyed by PK
        create_only: Fail instead of overwriting when PK already exists

    Raises:
        ClientError: If DynamoDB rejects the write, including a failed
            create-only condition
        BotoCoreError: If the request could not be sent
    """
    put_options = {'Item': item}
    if create_only:
        put_options['ConditionExpression'] = CREATE_ONLY_CONDITION

    table.put_item(**put_options)


def describe_client_error(error: ClientError) -> Tuple[str, str]:
    """Return the DynamoDB error code and message of a ClientError."""
    details = error.response.get('Error', {})
    return details.get('Code', 'Unknown'), details.get('Message', str(error))


def is_conditional_check_failure(error: ClientError) -> bool:
    return describe_client_error(error)[0] == CONDITIONAL_CHECK_FAILED
