"""
Validation rule definitions for generated mazes.

Each rule has a code, a default severity, a message template and a
remediation template. All rules belong to the MAZE category.
"""

from dataclasses import dataclass
from typing import Optional

from .core import Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule.

    Attributes:
        code: Unique rule code (e.g., "MAZE-001")
        severity: Default severity for this rule
        message_template: Template for the issue message (use {placeholders})
        remediation_template: Template for the suggested fix
        description: Full description of the rule
    """
    code: str
    severity: Severity
    message_template: str
    remediation_template: Optional[str] = None
    description: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None

    def issue(self, cell: Optional[str] = None, connector: Optional[str] = None,
              **kwargs) -> ValidationIssue:
        """Build an issue from this rule's templates.

        `cell` and `connector` are also available as template placeholders.
        """
        values = dict(kwargs, cell=cell, connector=connector)
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=self.format_message(**values),
            remediation=self.format_remediation(**values),
            cell=cell,
            connector=connector,
        )


# =============================================================================
# MAZE STRUCTURE RULES (MAZE)
# =============================================================================

MAZE_001 = ValidationRule(
    code="MAZE-001",
    severity=Severity.FAIL,
    message_template="Cells {a} and {b} overlap",
    remediation_template="Regenerate; placement must reject colliding prototypes",
    description="Top-level cells that are not directly linked must not intersect"
)

MAZE_002 = ValidationRule(
    code="MAZE-002",
    severity=Severity.FAIL,
    message_template="Open connector on {cell} has no link",
    remediation_template="Seal unlinked connectors as SOLID",
    description="Every TRANSPARENT connector must be linked to a neighbouring cell"
)

MAZE_003 = ValidationRule(
    code="MAZE-003",
    severity=Severity.FAIL,
    message_template="Connector on {cell} links to {target}, which has no connector linking back",
    remediation_template="Link both connectors of a connection",
    description="Connections must be recorded on both sides"
)

MAZE_004 = ValidationRule(
    code="MAZE-004",
    severity=Severity.FAIL,
    message_template="Maze has {count} ROOT cells (expected 1)",
    remediation_template="Generate exactly one ROOT cell",
    description="A maze grows from exactly one ROOT cell"
)

MAZE_005 = ValidationRule(
    code="MAZE-005",
    severity=Severity.WARN,
    message_template="Linked connectors on {a} and {b} do not face each other (dot={dot:.3f})",
    remediation_template="Check connector alignment",
    description="Linked connectors should point in opposite directions"
)


# =============================================================================
# RULE REGISTRY
# =============================================================================

ALL_RULES = {
    'MAZE-001': MAZE_001,
    'MAZE-002': MAZE_002,
    'MAZE-003': MAZE_003,
    'MAZE-004': MAZE_004,
    'MAZE-005': MAZE_005,
}


def get_rule(code: str) -> Optional[ValidationRule]:
    return ALL_RULES.get(code)
