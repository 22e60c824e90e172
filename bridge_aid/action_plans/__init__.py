"""Action-plan generation: LLM-backed, template-based and localized."""

from .attach import attach_action_plans
from .base import ActionPlanGenerator
from .exceptions import ActionPlanError
from .factory import get_plan_generator
from .fallback import FallbackPlanGenerator
from .localization import SPANISH_PHRASES, Localizer, PhraseTableLocalizer
from .openai_client import OpenAIPlanGenerator, build_prompt, parse_steps
from .templates import GENERIC_TEMPLATE, STEP_TEMPLATES, TemplatePlanGenerator

__all__ = [
    "ActionPlanGenerator",
    "ActionPlanError",
    "TemplatePlanGenerator",
    "OpenAIPlanGenerator",
    "FallbackPlanGenerator",
    "Localizer",
    "PhraseTableLocalizer",
    "SPANISH_PHRASES",
    "STEP_TEMPLATES",
    "GENERIC_TEMPLATE",
    "attach_action_plans",
    "build_prompt",
    "parse_steps",
    "get_plan_generator",
]
