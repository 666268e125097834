"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from pr_describer.core.config.github_config import GitHubConfig
from pr_describer.core.config.logging_config import LoggingConfig
from pr_describer.core.config.provider_config import AgentConfig, ProviderConfig
from pr_describer.core.config.summary_config import SummaryConfig
from pr_describer.core.config.webhook_config import WebhookConfig
from pr_describer.core.constants import MAX_DELIVERY_IDS, MAX_PATCH_PER_FILE, MAX_SUMMARY_CHARS
from pr_describer.core.errors import ConfigurationError

# Load environment variables from a .env file
load_dotenv()


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            app_id=os.getenv("APP_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
            api_base_url=os.getenv("GITHUB_API_BASE_URL", "https://api.github.com"),
        )

        self.ai = ProviderConfig(
            provider=os.getenv("AI_PROVIDER", "openai"),
            api_key=os.getenv("OPENAI_API_KEY", ""),
            max_tokens=int(os.getenv("AI_MAX_TOKENS", "256")),
            temperature=float(os.getenv("AI_TEMPERATURE", "0.7")),
            openai_model=os.getenv("OPENAI_MODEL"),
            description_agent=AgentConfig(
                max_tokens=int(os.getenv("AI_DESCRIPTION_MAX_TOKENS", "256")),
                temperature=float(os.getenv("AI_DESCRIPTION_TEMPERATURE", "0.7")),
            ),
        )

        self.summary = SummaryConfig(
            max_summary_chars=int(os.getenv("SUMMARY_MAX_CHARS", str(MAX_SUMMARY_CHARS))),
            max_patch_per_file=int(os.getenv("SUMMARY_MAX_PATCH_CHARS", str(MAX_PATCH_PER_FILE))),
        )

        self.webhook = WebhookConfig(
            max_delivery_ids=int(os.getenv("WEBHOOK_MAX_DELIVERY_IDS", str(MAX_DELIVERY_IDS))),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file_path=os.getenv("LOG_FILE_PATH"),
        )

        # Development settings
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET_GITHUB is required")

        if not self.github.app_id:
            errors.append("APP_ID_GITHUB is required")

        if not self.github.private_key:
            errors.append("PRIVATE_KEY_BASE64_GITHUB is required")

        if self.ai.provider == "openai" and not self.ai.api_key:
            errors.append("OPENAI_API_KEY is required for OpenAI provider")

        if errors:
            raise ConfigurationError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
