"""Errors raised by the service layer.

Services stay independent of the HTTP layer; ``api.exceptions`` maps these
onto status codes and the CLI prints them.
"""

from typing import Any


class ServiceError(Exception):
    """Base class for service layer failures."""


class EntityNotFoundError(ServiceError, LookupError):
    """A referenced rule, artifact, suite, run or document does not exist."""

    def __init__(self, entity_type: str, identifier: Any):
        self.entity_type = entity_type
        self.identifier = str(identifier)
        super().__init__(f"{entity_type} not found: {identifier}")


class DuplicateRuleError(ServiceError, ValueError):
    """A governance rule with the same external rule code already exists."""

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Governance rule already exists: {rule_id}")


class GenerationFailedError(ServiceError):
    """The language model call failed or returned unusable content."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"{kind} generation failed: {reason}")


class RuleCatalogError(ServiceError, ValueError):
    """A YAML rule catalog could not be parsed or validated."""
