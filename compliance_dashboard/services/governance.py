"""Governance rule and context document management."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from uuid import UUID

import yaml
from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.models.audit_entry import AuditAction
from compliance_dashboard.models.context_document import ContextDocument, ContextDocumentType
from compliance_dashboard.models.governance_rule import GovernanceRule, RulePriority, RuleStatus
from compliance_dashboard.repositories.context_document import ContextDocumentRepository
from compliance_dashboard.repositories.governance_rule import GovernanceRuleRepository
from compliance_dashboard.services.audit import AuditRecorder
from compliance_dashboard.services.errors import (
    DuplicateRuleError,
    EntityNotFoundError,
    RuleCatalogError,
)

logger = get_logger(__name__)

RULE_UPDATABLE_FIELDS = ("title", "statement", "source_of_truth", "category", "priority", "status")
CATALOG_REQUIRED_FIELDS = ("rule_id", "title", "statement", "source_of_truth", "category", "priority")


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


@dataclass
class RuleDefinition:
    """A rule as read from a YAML catalog, before it is stored."""

    rule_id: str
    title: str
    statement: str
    source_of_truth: str
    category: str
    priority: str
    status: str = RuleStatus.DRAFT.value


@dataclass
class RuleImportResult:
    """Outcome of a catalog import."""

    created: list[GovernanceRule] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def parse_rule_catalog(yaml_content: str) -> list[RuleDefinition]:
    """Parse a YAML rule catalog.

    Expected format:

    ```yaml
    rules:
      - rule_id: CP-CDG-PII-001
        title: "Mask customer PII in logs"
        statement: "Customer PII must never be written to application logs."
        source_of_truth: "GDPR Art. 32"
        category: privacy
        priority: high      # critical, high, medium or low
        status: active      # draft, active, archived (default draft)
    ```

    Raises:
        RuleCatalogError: If the document or any rule in it is invalid
    """
    try:
        parsed = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise RuleCatalogError(f"Invalid YAML: {e}") from e

    if not isinstance(parsed, dict) or "rules" not in parsed:
        raise RuleCatalogError("Invalid YAML: must contain 'rules' key")

    rules_data = parsed["rules"]
    if not isinstance(rules_data, list):
        raise RuleCatalogError("Invalid YAML: 'rules' must be a list")

    definitions: list[RuleDefinition] = []
    seen: set[str] = set()
    for index, rule_data in enumerate(rules_data):
        if not isinstance(rule_data, dict):
            raise RuleCatalogError(f"Rule #{index + 1}: must be a mapping")
        label = rule_data.get("rule_id") or f"#{index + 1}"

        for required in CATALOG_REQUIRED_FIELDS:
            if not rule_data.get(required):
                raise RuleCatalogError(f"Rule {label}: missing required field '{required}'")

        priority = str(rule_data["priority"]).lower()
        try:
            RulePriority(priority)
        except ValueError:
            raise RuleCatalogError(
                f"Rule {label}: invalid priority '{priority}'. Must be one of: critical, high, medium, low"
            ) from None

        status = str(rule_data.get("status", RuleStatus.DRAFT.value)).lower()
        try:
            RuleStatus(status)
        except ValueError:
            raise RuleCatalogError(
                f"Rule {label}: invalid status '{status}'. Must be one of: draft, active, archived"
            ) from None

        rule_id = str(rule_data["rule_id"])
        if rule_id in seen:
            raise RuleCatalogError(f"Rule {rule_id}: duplicated in catalog")
        seen.add(rule_id)

        definitions.append(
            RuleDefinition(
                rule_id=rule_id,
                title=str(rule_data["title"]),
                statement=str(rule_data["statement"]),
                source_of_truth=str(rule_data["source_of_truth"]),
                category=str(rule_data["category"]),
                priority=priority,
                status=status,
            )
        )

    return definitions


class GovernanceRuleService:
    """Rule lifecycle operations; every mutation is audited."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = GovernanceRuleRepository(session)
        self.audit = AuditRecorder(session)

    async def get(self, id: UUID) -> GovernanceRule:
        rule = await self.repo.get_by_id(id)
        if not rule:
            raise EntityNotFoundError("GovernanceRule", id)
        return rule

    async def create(
        self,
        actor: int,
        rule_id: str,
        title: str,
        statement: str,
        source_of_truth: str,
        category: str,
        priority: RulePriority | str,
        status: RuleStatus | str = RuleStatus.DRAFT,
    ) -> GovernanceRule:
        """Create a rule and record ``rule_created``.

        Raises:
            DuplicateRuleError: If ``rule_id`` is already taken
        """
        if await self.repo.get_by_rule_id(rule_id):
            raise DuplicateRuleError(rule_id)

        rule = await self.repo.create(
            GovernanceRule(
                rule_id=rule_id,
                title=title,
                statement=statement,
                source_of_truth=source_of_truth,
                category=category,
                priority=_enum_value(priority),
                status=_enum_value(status),
                created_by=actor,
            )
        )
        await self.audit.record(
            governance_rule_id=rule.id,
            action=AuditAction.RULE_CREATED,
            actor=actor,
            details={"ruleId": rule.rule_id, "title": rule.title},
        )
        logger.info("Governance rule created", rule_id=rule.rule_id, id=str(rule.id))
        return rule

    async def update(self, id: UUID, actor: int, **changes: Any) -> GovernanceRule:
        """Apply a partial update and record ``rule_updated`` with the changes.

        Only title, statement, source_of_truth, category, priority and status
        can change; ``None`` values are ignored.
        """
        rule = await self.get(id)

        unknown = set(changes) - set(RULE_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        applied = {k: _enum_value(v) for k, v in changes.items() if v is not None}
        for key, value in applied.items():
            setattr(rule, key, value)
        rule = await self.repo.update(rule)

        await self.audit.record(
            governance_rule_id=rule.id,
            action=AuditAction.RULE_UPDATED,
            actor=actor,
            details=applied,
        )
        logger.info("Governance rule updated", rule_id=rule.rule_id, fields=sorted(applied))
        return rule

    async def delete(self, id: UUID, actor: int) -> None:
        """Delete a rule and record ``rule_deleted``.

        Dependent artifacts, suites, runs, metrics and audit entries are left
        untouched.
        """
        rule = await self.get(id)
        rule_code = rule.rule_id
        await self.repo.delete(rule)

        await self.audit.record(
            governance_rule_id=id,
            action=AuditAction.RULE_DELETED,
            actor=actor,
            details={"ruleId": rule_code},
        )
        logger.info("Governance rule deleted", rule_id=rule_code, id=str(id))

    async def import_catalog(self, yaml_content: str, actor: int) -> RuleImportResult:
        """Create every catalog rule whose ``rule_id`` is not yet stored."""
        result = RuleImportResult()
        for definition in parse_rule_catalog(yaml_content):
            if await self.repo.get_by_rule_id(definition.rule_id):
                result.skipped.append(definition.rule_id)
                continue
            rule = await self.create(
                actor=actor,
                rule_id=definition.rule_id,
                title=definition.title,
                statement=definition.statement,
                source_of_truth=definition.source_of_truth,
                category=definition.category,
                priority=definition.priority,
                status=definition.status,
            )
            result.created.append(rule)

        logger.info(
            "Rule catalog imported",
            created=len(result.created),
            skipped=len(result.skipped),
        )
        return result

    async def import_catalog_file(self, file_path: str, actor: int) -> RuleImportResult:
        """Import a YAML rule catalog from disk."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Rule catalog not found: {file_path}")
        return await self.import_catalog(path.read_text(), actor)


class ContextDocumentService:
    """Context document operations.

    Documents are not tied to a governance rule, so their changes are
    logged but not written to the audit trail.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = ContextDocumentRepository(session)

    async def get(self, id: UUID) -> ContextDocument:
        document = await self.repo.get_by_id(id)
        if not document:
            raise EntityNotFoundError("ContextDocument", id)
        return document

    async def create(
        self,
        actor: int,
        title: str,
        type: ContextDocumentType | str,
        content: str,
        tags: Optional[list[str]] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> ContextDocument:
        document = await self.repo.create(
            ContextDocument(
                title=title,
                type=_enum_value(type),
                content=content,
                tags=list(tags or []),
                meta=dict(metadata or {}),
                created_by=actor,
            )
        )
        logger.info("Context document created", id=str(document.id), type=document.type, actor=actor)
        return document

    async def update(
        self,
        id: UUID,
        actor: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> ContextDocument:
        """Partially update title, content, tags or metadata."""
        document = await self.get(id)
        if title is not None:
            document.title = title
        if content is not None:
            document.content = content
        if tags is not None:
            document.tags = list(tags)
        if metadata is not None:
            document.meta = dict(metadata)
        document = await self.repo.update(document)
        logger.info("Context document updated", id=str(document.id), actor=actor)
        return document

    async def delete(self, id: UUID, actor: int) -> None:
        document = await self.get(id)
        await self.repo.delete(document)
        logger.info("Context document deleted", id=str(id), actor=actor)
