from typing import Any, Dict, Union

from aws_lambda_powertools import Logger, Tracer, Metrics
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit

from commons.config import load_settings, resolve_store_settings
from commons.dynamodb_utils import get_table
from commons.lambda_utils import (
    create_json_response, create_error_response,
    ErrorKind, Failure, HTTP_STATUS_OK
)
from commons.link_creator import LinkCreator
from commons.request_validator import validate_request

# Initialize powertools
logger = Logger()
tracer = Tracer()
metrics = Metrics(namespace="ShortLinkService")

ERROR_METRICS = {
    ErrorKind.UNAUTHORIZED: "UnauthorizedRequests",
    ErrorKind.BAD_REQUEST: "ValidationErrors",
    ErrorKind.CONFIGURATION: "ConfigurationErrors",
    ErrorKind.PERSISTENCE: "PersistenceErrors",
    ErrorKind.INTERNAL: "UnexpectedErrors",
}


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event, context):
    """
    Lambda handler for creating short links.

    Expected input:
    headers: {"x-api-key": "<shared secret>"}
    body:
    {
        "url": "https://example.com/very/long/url",
        "domain": "sho.rt",
        "testid": "abc123"  // honoured only when APP_ENV=test
    }
    credentials: optional per-invocation store override

    Returns:
    200 {"shortUrl": "https://sho.rt/Ab3xYz"}
    400/500 {"message": "<reason>"}
    """
    try:
        outcome = create_short_link(event or {})
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        outcome = Failure(ErrorKind.INTERNAL, "Internal server error.")

    if isinstance(outcome, Failure):
        return create_error_response(
            failure=outcome,
            logger=logger,
            metrics=metrics,
            metric_name=ERROR_METRICS.get(outcome.kind, "UnexpectedErrors")
        )

    metrics.add_metric(name="ShortLinkCreated", unit=MetricUnit.Count, value=1)
    return create_json_response(status_code=HTTP_STATUS_OK, body=outcome)


def create_short_link(event: Dict[str, Any]) -> Union[Dict[str, str], Failure]:
    """Validate the request, then write the short link to the selected table."""
    settings = load_settings()

    validated = validate_request(event, settings)
    if isinstance(validated, Failure):
        return validated

    store = resolve_store_settings(event, settings)
    if isinstance(store, Failure):
        return store

    creator = LinkCreator(table=get_table(store), ttl_seconds=settings.ttl_seconds)
    return creator.create(validated)
