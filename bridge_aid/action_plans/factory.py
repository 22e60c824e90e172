"""Factory function for the configured action-plan generator."""

from bridge_aid.config.environment import EnvironmentConfig
from bridge_aid.config.models import AppConfig
from bridge_aid.logging import get_logger

from .base import ActionPlanGenerator
from .fallback import FallbackPlanGenerator
from .openai_client import OpenAIPlanGenerator
from .templates import TemplatePlanGenerator

logger = get_logger(__name__, component="action_plans")


def get_plan_generator(env_config: EnvironmentConfig, app_config: AppConfig) -> ActionPlanGenerator:
    """Template plans alone, or OpenAI plans with the template as fallback.

    The LLM is used only when OPENAI_API_KEY is set and ``action_plans.enabled``
    is true.
    """
    template = TemplatePlanGenerator()
    settings = app_config.action_plans

    if not env_config.openai_api_key or not settings.enabled:
        logger.info(
            "Using template action plans",
            extra={
                "event": "action_plans.generator.selected",
                "generator": template.name,
                "has_api_key": bool(env_config.openai_api_key),
            },
        )
        return template

    primary = OpenAIPlanGenerator(
        env_config.openai_api_key,
        model=settings.model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=app_config.advanced.http_request_timeout,
        user_agent=app_config.advanced.user_agent,
    )
    logger.info(
        "Using LLM action plans with template fallback",
        extra={
            "event": "action_plans.generator.selected",
            "generator": primary.name,
            "model": settings.model,
        },
    )
    return FallbackPlanGenerator(primary, template)
