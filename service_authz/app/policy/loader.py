"""
Load the policy table from declarative configuration.

Rules are plain data: a mapping (the built-in defaults) or a YAML document
with the same shape. Documents are validated with pydantic before any rule
object is built, so a bad file fails the service at startup rather than at
request time.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, model_validator

from shared.errors import PolicyConfigurationError
from shared.logging import get_logger
from .defaults import DEFAULT_POLICY
from .models import PolicyRule, ScopeKind, OperationKind
from .table import PolicyTable

logger = get_logger("authz.policy_loader")


class RuleDocument(BaseModel):
    """One rule as written in configuration."""
    scope: ScopeKind
    required_role: str = Field(..., min_length=1)
    resource_type: Optional[str] = None
    operation: Optional[OperationKind] = None
    pattern: Optional[str] = None
    http_method: Optional[str] = None
    rule_id: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_scope_fields(self) -> "RuleDocument":
        if self.scope == ScopeKind.METHOD:
            if not self.resource_type:
                raise ValueError("method rules need 'resource_type'")
            if self.pattern or self.http_method:
                raise ValueError("method rules do not take 'pattern' or 'http_method'")
        else:
            if not self.pattern:
                raise ValueError("route rules need 'pattern'")
            if self.resource_type or self.operation:
                raise ValueError("route rules do not take 'resource_type' or 'operation'")
        return self

    def to_rule(self) -> PolicyRule:
        extra: Dict[str, Any] = {"description": self.description}
        if self.rule_id:
            extra["rule_id"] = self.rule_id
        if self.scope == ScopeKind.METHOD:
            return PolicyRule.method(self.resource_type, self.required_role, self.operation, **extra)
        return PolicyRule.route(self.pattern, self.required_role, self.http_method, **extra)


class PolicyDocument(BaseModel):
    """Top-level policy configuration."""
    rules: List[RuleDocument] = Field(default_factory=list)
    role_hierarchy: Dict[str, List[str]] = Field(default_factory=dict)


def build_policy_table(document: Mapping[str, Any]) -> PolicyTable:
    """Validate ``document`` and build a read-only policy table from it."""
    try:
        parsed = PolicyDocument.model_validate(document)
        rules = [rule.to_rule() for rule in parsed.rules]
    except (PydanticValidationError, ValueError) as e:
        raise PolicyConfigurationError(f"Invalid policy configuration: {e}") from e

    return PolicyTable(rules, role_hierarchy=parsed.role_hierarchy)


def read_yaml_document(path: Union[str, Path]) -> Mapping[str, Any]:
    """Read a YAML mapping from ``path``."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as e:
        raise PolicyConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    if not isinstance(document, Mapping):
        raise PolicyConfigurationError(f"Configuration file {path} must contain a mapping")
    return document


def load_policy_table(policy_file: Optional[str] = None) -> PolicyTable:
    """Load the policy table from ``policy_file`` or the built-in defaults."""
    if policy_file:
        logger.info("Loading policy file", path=policy_file)
        return build_policy_table(read_yaml_document(policy_file))

    logger.info("Loading built-in policy")
    return build_policy_table(DEFAULT_POLICY)
