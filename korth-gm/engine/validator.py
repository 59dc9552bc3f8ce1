import logging

logger = logging.getLogger(__name__)


class ContractError(ValueError):
    """
    Raised when a caller submits something the UI should never have offered:
    a gated choice with unmet requirements, a combat action outside combat,
    a skill that is cooling down, a potion that is not in the pack.
    """


def validate(condition, message: str) -> None:
    if not condition:
        logger.warning("Contract violation: %s", message)
        raise ContractError(message)
