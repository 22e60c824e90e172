"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Look for settings that are valid but probably not what the operator meant.

    Args:
        config_dict: Raw YAML configuration dictionary

    Returns:
        List of warning messages
    """
    messages = []

    action_plans = config_dict.get("action_plans", {})
    if isinstance(action_plans, dict):
        workers = action_plans.get("max_workers")
        if isinstance(workers, int) and workers > 10:
            messages.append(
                f"action_plans.max_workers={workers} may exceed the LLM provider's rate limits"
            )
        if action_plans.get("enabled") is False:
            messages.append("LLM action plans are disabled; template plans will be used")

    catalog = config_dict.get("catalog", {})
    if isinstance(catalog, dict):
        path = catalog.get("path")
        if isinstance(path, str) and not path.lower().endswith(".json"):
            messages.append(f"catalog.path '{path}' does not look like a JSON file")

    advanced = config_dict.get("advanced", {})
    if isinstance(advanced, dict):
        timeout = advanced.get("http_request_timeout")
        if isinstance(timeout, int) and timeout > 60:
            messages.append(
                f"http_request_timeout={timeout}s will hold match requests while a remote call hangs"
            )

    return messages


def emit_warnings(messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in messages:
        warnings.warn(message, UserWarning, stacklevel=2)
