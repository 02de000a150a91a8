"""ghsteps Actions - one action per GitHub REST API endpoint."""

from ghsteps.actions import issues, labels, milestones, pulls, reactions, repositories, reviews
from ghsteps.actions.base import (
    ActionError,
    ActionResult,
    BaseAction,
    Outcome,
)

ACTIONS: dict[str, BaseAction] = {
    action.name: action
    for module in (issues, labels, milestones, pulls, reviews, reactions, repositories)
    for action in module.ACTIONS
}


def get_action(name: str) -> BaseAction:
    """Look up an action by name.

    The "github_" prefix used by other tools is accepted, so
    "github_create_label" and "create_label" are the same action.

    Raises:
        ActionError: If no action has that name
    """
    key = name.strip().lower().replace("-", "_")
    if key.startswith("github_"):
        key = key[len("github_"):]
    try:
        return ACTIONS[key]
    except KeyError:
        raise ActionError(f"Unknown action: {name}") from None


def list_actions() -> list[BaseAction]:
    """All registered actions sorted by name."""
    return [ACTIONS[name] for name in sorted(ACTIONS)]


__all__ = [
    "ACTIONS",
    "ActionError",
    "ActionResult",
    "BaseAction",
    "Outcome",
    "get_action",
    "list_actions",
]
