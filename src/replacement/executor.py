"""
Single-value replacement.

Runs one ReplacementRule over one content string: evaluation, BEFORE
transformations, token substitution and AFTER transformations.
"""

import logging
import re

from utils.tracing import add_span_event

from .base import REPLACEMENT_ERRORS
from .evaluation import ExpressionEvaluator, evaluate_expression
from .exceptions import InvalidPatternError
from .rules import ApplyPhase, ReplacementRule

logger = logging.getLogger(__name__)


class ReplacementExecutor:
    """
    Apply a replacement rule to a single value.

    Stateless apart from logging; the same rule and content always produce
    the same result.
    """

    def __init__(self, evaluator: ExpressionEvaluator | None = None):
        """
        Initialize replacement executor.

        Args:
            evaluator: Expression evaluator for the evaluation input. When
                None, the input is used unchanged.
        """
        self.evaluator = evaluator

    def perform_replacement(self, rule: ReplacementRule, content: str | None) -> str:
        """
        Replace the rule's token in content.

        Args:
            rule: Replacement rule to apply
            content: Current property value, None if the property is missing

        Returns:
            Replaced value (may be empty)

        Raises:
            InvalidPatternError: If a regex-mode token does not compile
        """
        evaluation_content = content
        if not evaluation_content or rule.force_value_evaluation:
            evaluation_content = rule.value
        if evaluation_content is None:
            evaluation_content = ""

        evaluation = evaluate_expression(self.evaluator, evaluation_content)
        if evaluation.failed:
            REPLACEMENT_ERRORS.labels(error_type=type(evaluation.error).__name__).inc()
            add_span_event("evaluation_failed", error_type=type(evaluation.error).__name__)
            logger.error(
                "Something went wrong performing the replacement.",
                exc_info=evaluation.error,
            )
        result = evaluation.value

        result = self._perform_transformation_rules(rule, result, ApplyPhase.BEFORE)
        if rule.regex:
            result = self._replace_regex(result, rule.token, rule.value)
        else:
            result = self._replace_non_regex(result, rule.token, rule.value)
        result = self._perform_transformation_rules(rule, result, ApplyPhase.AFTER)

        return result

    def _perform_transformation_rules(
        self,
        rule: ReplacementRule,
        content: str,
        phase: ApplyPhase,
    ) -> str:
        result = content
        for transformation_rule in rule.rules_for(phase):
            result = transformation_rule.perform(result)
        return result

    def _replace_regex(self, content: str, token: str | None, value: str | None) -> str:
        """
        Replace all non-overlapping matches of token.

        ``value`` is inserted as-is; backslashes in it are not group references.
        """
        if token is None:
            self._missing_token()
            return content

        try:
            compiled_pattern = re.compile(token)
        except re.error as e:
            REPLACEMENT_ERRORS.labels(error_type=InvalidPatternError.__name__).inc()
            raise InvalidPatternError(token, str(e)) from e

        replacement = value or ""
        return compiled_pattern.sub(lambda _: replacement, content)

    def _replace_non_regex(self, content: str, token: str | None, value: str | None) -> str:
        if token is None:
            self._missing_token()
            return content

        return content.replace(token, value or "")

    def _missing_token(self) -> None:
        REPLACEMENT_ERRORS.labels(error_type="MissingToken").inc()
        add_span_event("missing_token")
        logger.error("found replacement rule without required token.")
