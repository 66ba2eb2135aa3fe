"""
Replacement rule model.

A ReplacementRule describes one token substitution over one or all
properties. TransformationRules wrap that substitution with string actions
applied before or after it.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ConfigurationError


class ApplyPhase(str, Enum):
    """When a transformation runs relative to the token substitution."""

    BEFORE = "BEFORE"
    AFTER = "AFTER"


# Named actions available from configuration files
ACTIONS: dict[str, Callable[[str], str]] = {
    "LOWER_CASE": str.lower,
    "UPPER_CASE": str.upper,
}


@dataclass(frozen=True)
class TransformationRule:
    """
    A string action bound to a phase of the replacement.

    Args:
        apply: Phase in which the action runs
        action: Pure function applied to the current value
    """

    apply: ApplyPhase
    action: Callable[[str], str]

    def perform(self, value: str) -> str:
        return self.action(value)

    @classmethod
    def from_names(cls, apply: str, action: str) -> "TransformationRule":
        """
        Build a rule from configuration names.

        Args:
            apply: "BEFORE" or "AFTER" (case-insensitive)
            action: Name of a built-in action, e.g. "LOWER_CASE"

        Raises:
            ConfigurationError: If either name is unknown
        """
        try:
            phase = ApplyPhase(apply.upper())
        except ValueError:
            raise ConfigurationError(
                f"Unknown transformation phase: {apply}. "
                f"Allowed phases: {', '.join(p.value for p in ApplyPhase)}"
            ) from None

        action_fn = ACTIONS.get(action.upper())
        if action_fn is None:
            raise ConfigurationError(
                f"Unknown transformation action: {action}. "
                f"Allowed actions: {', '.join(sorted(ACTIONS))}"
            )

        return cls(apply=phase, action=action_fn)


@dataclass(frozen=True)
class ReplacementRule:
    """
    One replacement action over the property store.

    Args:
        target_key: Key to rewrite; None applies the rule to every key
        token: Literal substring or regex pattern to replace
        value: Replacement text, also the evaluation input for empty content
        regex: Treat token as a regular expression
        force_value_evaluation: Always evaluate value instead of the content
        property_output_suffix: Write results to "<key>.<suffix>" instead
        transformation_rules: Actions run around the substitution, in order
    """

    target_key: str | None = None
    token: str | None = None
    value: str | None = None
    regex: bool = True
    force_value_evaluation: bool = False
    property_output_suffix: str | None = None
    transformation_rules: tuple[TransformationRule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any sequence from callers but store an immutable copy
        if not isinstance(self.transformation_rules, tuple):
            object.__setattr__(
                self, "transformation_rules", tuple(self.transformation_rules)
            )

    @property
    def output_suffix(self) -> str | None:
        """Suffix to write to, or None when the original key is overwritten."""
        if self.property_output_suffix is None or not self.property_output_suffix.strip():
            return None
        return self.property_output_suffix

    def destination_key(self, key: str) -> str:
        """Key that receives the result of replacing ``key``."""
        suffix = self.output_suffix
        return f"{key}.{suffix}" if suffix else key

    def rules_for(self, phase: ApplyPhase) -> list[TransformationRule]:
        """Transformation rules of one phase, in configured order."""
        return [rule for rule in self.transformation_rules if rule.apply == phase]


def transformation_rules(*pairs: Sequence[str]) -> tuple[TransformationRule, ...]:
    """
    Build transformation rules from (apply, action) name pairs.

    Example:
        >>> transformation_rules(("BEFORE", "LOWER_CASE"), ("AFTER", "UPPER_CASE"))
    """
    return tuple(TransformationRule.from_names(apply, action) for apply, action in pairs)
