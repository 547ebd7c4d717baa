"""
API Key Verification

SECURITY BOUNDARY - check the apiKey query parameter against the configured
allow-list. No-op when authentication is disabled. No retries. No logic.
"""

import hmac
import logging
from typing import Any, Optional

from audio.errors import BadRequest, Forbidden
from audio.params import query_values
from infra.config import AudioConfig

logger = logging.getLogger(__name__)


def verify_api_key(query: Any, config: AudioConfig) -> Optional[str]:
    """
    Verify the apiKey query parameter.

    Raises:
        BadRequest(400): Missing key, or key given more than once
        Forbidden(403): Key not in the allow-list

    Args:
        query: Request query parameters
        config: Audio service configuration

    Returns:
        The accepted key (propagated into playback URLs), or None when
        authentication is disabled
    """
    if not config.authentication_enabled:
        return None

    values = query_values(query, "apiKey")
    if not values or not values[0]:
        raise BadRequest("Missing API key")

    if len(values) > 1:
        raise BadRequest("API key provided in unexpected format.")

    api_key = values[0]

    # Compare against every key (constant-time) so timing doesn't reveal which matched
    matched = False
    for valid_key in config.api_keys:
        if hmac.compare_digest(api_key.encode("utf-8"), valid_key.encode("utf-8")):
            matched = True

    if not matched:
        logger.warning("Rejected request with invalid API key")
        raise Forbidden("Invalid API key")

    return api_key
