import hashlib
import hmac
import logging

from fastapi import HTTPException, Request

from pr_describer.core.config import config
from pr_describer.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """
    Check an X-Hub-Signature-256 value against the raw request body.

    Args:
        payload: The exact bytes of the request body.
        signature: Header value in the form 'sha256=<hexdigest>'.
        secret: The shared webhook secret.

    Raises:
        ConfigurationError: If no secret is configured.

    Returns:
        True if the signature matches the HMAC-SHA256 of the payload.
    """
    if not secret:
        raise ConfigurationError("WEBHOOK_SECRET_GITHUB is not set")

    mac = hmac.new(secret.encode(), msg=payload, digestmod=hashlib.sha256)
    expected_signature = f"{SIGNATURE_PREFIX}{mac.hexdigest()}"

    # Constant-time comparison
    return hmac.compare_digest(signature.encode(), expected_signature.encode())


async def verify_github_signature(request: Request) -> bool:
    """
    FastAPI dependency that verifies the GitHub webhook signature.

    This function reads the 'X-Hub-Signature-256' header and compares it
    with a hash of the raw request body, using our configured webhook secret.

    Raises:
        HTTPException: 401 if the signature is missing or invalid, 500 if no
            webhook secret is configured.

    Returns:
        True if the signature is valid.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning("Rejected webhook: request has no X-Hub-Signature-256 header.")
        raise HTTPException(status_code=401, detail="No signature found")

    # Get the raw request payload as bytes
    payload = await request.body()

    try:
        is_valid = verify_signature(payload, signature, config.github.webhook_secret)
    except ConfigurationError as e:
        logger.error(f"Cannot verify webhook signature: {e}")
        raise HTTPException(status_code=500, detail="Webhook secret is not configured") from e

    if not is_valid:
        logger.error("Rejected webhook: invalid signature, the webhook secret may not match.")
        raise HTTPException(status_code=401, detail="Invalid signature")

    logger.debug("GitHub webhook signature verified successfully.")
    return True
