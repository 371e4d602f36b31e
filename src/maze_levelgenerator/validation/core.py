"""
Result types for maze validation.

A check returns a ValidationResult holding ValidationIssue entries. WARN
issues are reported but do not fail the maze; any FAIL issue does.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Severity(Enum):
    """Issue severity; FAIL marks a broken maze."""
    WARN = "warn"
    FAIL = "fail"

    def __str__(self) -> str:
        return self.name


@dataclass
class ValidationIssue:
    """A single finding.

    Attributes:
        severity: WARN or FAIL
        code: Rule code (e.g., "MAZE-001")
        message: Human-readable description
        remediation: Optional suggested fix
        cell: Offending cell, as "<kind>#<index>"
        connector: Offending connector, as "<cell>/<index>"
    """
    severity: Severity
    code: str
    message: str
    remediation: Optional[str] = None
    cell: Optional[str] = None
    connector: Optional[str] = None

    def format(self) -> str:
        where = self.connector or self.cell or "maze"
        text = f"[{self.severity}] {self.code} {where}: {self.message}"
        if self.remediation:
            text += f" (fix: {self.remediation})"
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)

    def by_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.FAIL)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.WARN)

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        self.issues.extend(other.issues)
        return self

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def counts(self) -> Dict[str, int]:
        """Number of issues per rule code."""
        totals: Dict[str, int] = {}
        for code in self.codes():
            totals[code] = totals.get(code, 0) + 1
        return totals

    def report(self) -> str:
        """Summary line followed by one line per issue, failures first."""
        if not self.issues:
            return "Validation passed: No issues found"

        status = "PASSED" if self.passed else "FAILED"
        lines = [
            f"Validation {status}: {len(self.errors)} failure(s), "
            f"{len(self.warnings)} warning(s)"
        ]
        lines.extend(issue.format() for issue in self.errors + self.warnings)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            'passed': self.passed,
            'fail_count': len(self.errors),
            'warn_count': len(self.warnings),
            'counts': self.counts(),
            'issues': [
                {
                    'severity': str(issue.severity),
                    'code': issue.code,
                    'message': issue.message,
                    'remediation': issue.remediation,
                    'cell': issue.cell,
                    'connector': issue.connector,
                }
                for issue in self.issues
            ],
        }


class ValidationError(Exception):
    """Raised by validate_maze(fail_fast=True) when any FAIL issue exists."""

    def __init__(self, result: ValidationResult):
        self.result = result
        codes = ", ".join(sorted(set(i.code for i in result.errors)))
        super().__init__(f"Maze validation failed ({codes})\n{result.report()}")
