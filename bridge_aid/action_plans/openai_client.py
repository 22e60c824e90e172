"""LLM-backed action plans via the OpenAI chat-completions HTTP API."""

import json
import re
from typing import Any, Dict, List

import requests

from bridge_aid.domain.models import DEFAULT_LANGUAGE, ActionPlan, Resource, UserCriteria
from bridge_aid.logging import get_logger

from .base import ActionPlanGenerator
from .exceptions import ActionPlanError

logger = get_logger(__name__, component="action_plans")

CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"

SYSTEM_PROMPT = (
    "You are a helpful assistant that creates clear, simple action plans "
    "for accessing social services."
)

PROMPT_TEMPLATE = """Generate a simple 3-step action plan for someone to access this resource:

Resource: {name}
Category: {category}
Phone: {phone}
Website: {website}
Hours: {hours}
Eligibility: {eligibility}

User context:
- Age: {age}
- Income: {income}
- Household size: {household_size}

Write the steps in {language}.

Return ONLY a JSON object with this exact format:
{{
  "steps": [
    "Step 1 description (plain language, actionable)",
    "Step 2 description (plain language, actionable)",
    "Step 3 description (plain language, actionable)"
  ]
}}

Keep each step to one sentence. Use simple, clear language."""

# outermost {...} span of the reply, which may be wrapped in prose
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def build_prompt(resource: Resource, criteria: UserCriteria) -> str:
    """Render the user prompt for one resource and one user."""
    return PROMPT_TEMPLATE.format(
        name=resource.name,
        category=resource.category,
        phone=resource.phone or "not listed",
        website=resource.website or "not listed",
        hours=resource.hours,
        eligibility=resource.eligibility_notes or "not specified",
        age=criteria.age_range or "not provided",
        income=criteria.income_bracket.value if criteria.income_bracket else "not provided",
        household_size=criteria.household_size,
        language=criteria.preferred_language or DEFAULT_LANGUAGE,
    )


def parse_steps(content: str) -> List[str]:
    """Extract the ``steps`` list from a model reply.

    Raises:
        ActionPlanError: If no JSON object with a non-empty list of strings is found
    """
    match = _JSON_OBJECT.search(content or "")
    if not match:
        raise ActionPlanError("Invalid response format from model: no JSON object found")
    try:
        data = json.loads(match.group(0))
    except ValueError as e:
        raise ActionPlanError(f"Invalid JSON in model response: {e}") from e

    steps = data.get("steps") if isinstance(data, dict) else None
    if not isinstance(steps, list) or not steps:
        raise ActionPlanError("Model response has no 'steps' list")
    cleaned = [str(step).strip() for step in steps if str(step).strip()]
    if not cleaned:
        raise ActionPlanError("Model response has only empty steps")
    return cleaned


class OpenAIPlanGenerator(ActionPlanGenerator):
    """Asks an OpenAI chat model for the steps.

    API Details:
        Endpoint: https://api.openai.com/v1/chat/completions
        Method: POST
        Authentication: ``Authorization: Bearer <OPENAI_API_KEY>``
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 200,
        timeout: int = 30,
        user_agent: str = "BridgeAid/0.1",
        endpoint: str = CHAT_COMPLETIONS_URL,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ActionPlanError("OPENAI_API_KEY is empty")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.endpoint = endpoint

        self._session = requests.Session()
        self._session.headers.update(
            {
                "User-Agent": user_agent,
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key.strip()}",
            }
        )

    def close(self) -> None:
        self._session.close()

    def generate(self, resource: Resource, criteria: UserCriteria) -> ActionPlan:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(resource, criteria)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        data = self._post(payload)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ActionPlanError(f"Unexpected completion structure: {e}") from e

        steps = parse_steps(content)
        logger.debug(
            f"Generated plan for {resource.name}",
            extra={
                "event": "action_plans.llm.generated",
                "resource_id": str(resource.id),
                "model": self.model,
                "steps_count": len(steps),
            },
        )
        return ActionPlan(steps=tuple(steps))

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise ActionPlanError(
                f"Chat completion timed out after {self.timeout} seconds"
            ) from e
        except requests.exceptions.RequestException as e:
            raise ActionPlanError(f"Chat completion request failed: {e}") from e

        if response.status_code >= 400:
            raise ActionPlanError(
                f"OpenAI API error: HTTP {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ActionPlanError(f"Failed to parse chat completion response: {e}") from e
        if not isinstance(data, dict):
            raise ActionPlanError(
                f"Expected JSON object from chat completion, got {type(data).__name__}"
            )
        return data
