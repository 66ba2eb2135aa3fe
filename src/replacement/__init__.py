"""
Property replacement engine.

Rewrites string properties in place from declarative replacement rules:
literal or regex token substitution, optional expression evaluation of the
source value, and BEFORE/AFTER transformation actions around the
substitution.
"""

from .config import load_rules, rule_from_config, rules_from_config
from .evaluation import (
    CallableEvaluator,
    EvaluationResult,
    ExpressionEvaluator,
    evaluate_expression,
)
from .exceptions import ConfigurationError, InvalidPatternError, ReplacementError
from .executor import ReplacementExecutor
from .replacer import PropertiesReplacer
from .rules import (
    ACTIONS,
    ApplyPhase,
    ReplacementRule,
    TransformationRule,
    transformation_rules,
)

__version__ = "1.0.0"

__all__ = [
    "PropertiesReplacer",
    "ReplacementExecutor",
    "ReplacementRule",
    "TransformationRule",
    "ApplyPhase",
    "ACTIONS",
    "transformation_rules",
    "ExpressionEvaluator",
    "CallableEvaluator",
    "EvaluationResult",
    "evaluate_expression",
    "ReplacementError",
    "ConfigurationError",
    "InvalidPatternError",
    "load_rules",
    "rule_from_config",
    "rules_from_config",
]
