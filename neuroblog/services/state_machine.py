from neuroblog.services.errors import InvalidTransition
from neuroblog.utils.constants import SUGGESTION_STATES

ALLOWED_TRANSITIONS = {
    "pending": ["approved", "rejected", "published"],
    "approved": ["published"],   # manual publish after a plain approve
    "rejected": [],
    "published": [],
}

def ensure_transition(current: str, target: str) -> None:
    if current not in SUGGESTION_STATES:
        raise InvalidTransition(f"Unknown state: {current}")
    if target not in SUGGESTION_STATES:
        raise InvalidTransition(f"Unknown target state: {target}")

    allowed = ALLOWED_TRANSITIONS.get(current, [])
    if target not in allowed:
        raise InvalidTransition(f"Invalid transition: {current} -> {target}")
