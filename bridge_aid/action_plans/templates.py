"""Deterministic, template-based action plans."""

from typing import Dict, Optional, Tuple

from bridge_aid.domain.models import ActionPlan, Category, Resource, UserCriteria

from .base import ActionPlanGenerator
from .localization import Localizer, PhraseTableLocalizer

STEP_TEMPLATES: Dict[str, Tuple[str, ...]] = {
    Category.FOOD.value: (
        "Call {phone} during {hours} to check current availability.",
        "Visit {name} at {address} during their open hours.",
        "Bring a valid ID and proof of address (if required). No appointment needed for walk-ins.",
    ),
    Category.HOUSING.value: (
        "Call {phone} or visit {website} to learn about application requirements.",
        "Gather required documents: proof of income, ID, and household information.",
        "Schedule an appointment or submit your application online or in person.",
    ),
    Category.MENTAL_HEALTH.value: (
        "Call {phone} to speak with a counselor or schedule an appointment.",
        "If this is a crisis, call immediately - services are available 24/7.",
        "Be ready to provide basic information about your situation and insurance status (if applicable).",
    ),
    Category.LEGAL.value: (
        "Call {phone} during {hours} to request an intake appointment.",
        "Prepare a brief description of your legal issue and any relevant documents.",
        "Attend your appointment - free legal services are provided based on eligibility.",
    ),
    Category.JOBS.value: (
        "Visit {name} at {address} or call {phone} to learn about programs.",
        "Complete an intake form and assessment to determine which services fit your needs.",
        "Attend orientation and training sessions to build skills and connect with employers.",
    ),
}

GENERIC_TEMPLATE: Tuple[str, ...] = (
    "Contact {name} at {phone} during {hours}.",
    "Visit their website at {website} for more information.",
    "Prepare any required documents and schedule an appointment if needed.",
)

# Placeholders for fields a catalog entry left blank
_BLANK_FIELD_TEXT = {
    "phone": "the listed phone number",
    "website": "their website",
    "address": "their office",
}


def _template_values(resource: Resource) -> Dict[str, str]:
    values = {
        "name": resource.name,
        "phone": resource.phone,
        "hours": resource.hours,
        "address": resource.address,
        "website": resource.website,
    }
    for field_name, placeholder in _BLANK_FIELD_TEXT.items():
        if not values[field_name]:
            values[field_name] = placeholder
    return values


class TemplatePlanGenerator(ActionPlanGenerator):
    """Fills a per-category three-step template and localizes it.

    Never raises; categories without a template get the generic one.
    """

    name = "template"

    def __init__(self, localizer: Optional[Localizer] = None):
        self.localizer = localizer or PhraseTableLocalizer()

    def generate(self, resource: Resource, criteria: UserCriteria) -> ActionPlan:
        template = STEP_TEMPLATES.get(resource.category, GENERIC_TEMPLATE)
        values = _template_values(resource)
        steps = [step.format(**values) for step in template]
        return ActionPlan(steps=self.localizer.localize(steps, criteria.preferred_language))
