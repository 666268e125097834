"""
Webhook admission configuration.
"""

from dataclasses import dataclass

from pr_describer.core.constants import MAX_DELIVERY_IDS


@dataclass
class WebhookConfig:
    """Webhook admission configuration."""

    max_delivery_ids: int = MAX_DELIVERY_IDS
