"""
Validation package for generated mazes.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationRule, ALL_RULES: Rule definitions
    - ValidationError: Exception raised on FAIL issues when fail_fast=True
    - validate_maze(): Run all structural checks
"""

from .core import Severity, ValidationIssue, ValidationResult, ValidationError
from .rules import ValidationRule, ALL_RULES, get_rule
from .maze_checks import check_connectors, check_overlaps, check_root, validate_maze

__all__ = [
    # Core types
    'Severity',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    # Rules
    'ValidationRule',
    'ALL_RULES',
    'get_rule',
    # Checks
    'check_connectors',
    'check_overlaps',
    'check_root',
    'validate_maze',
]
