"""
Property replacement over a whole property store.

Drives a list of ReplacementRules across a mutable mapping of string
properties, rule by rule and key by key, writing each result back before
the next key is processed.
"""

import logging
from collections.abc import MutableMapping, Sequence

from opentelemetry import trace

from utils.tracing import trace_operation

from .base import REPLACEMENT_TIME, REPLACEMENTS_APPLIED
from .evaluation import ExpressionEvaluator
from .executor import ReplacementExecutor
from .rules import ReplacementRule

logger = logging.getLogger(__name__)


class PropertiesReplacer:
    """
    Apply replacement rules to a property store in place.

    Example:
        >>> properties = {"greeting": "hello world"}
        >>> rule = ReplacementRule(token="world", value="there", regex=False)
        >>> PropertiesReplacer().perform_replacement(properties, [rule])
        >>> properties["greeting"]
        'hello there'
    """

    def __init__(self, evaluator: ExpressionEvaluator | None = None):
        """
        Initialize properties replacer.

        Args:
            evaluator: Expression evaluator passed on to the executor
        """
        self.executor = ReplacementExecutor(evaluator)

    def perform_replacement(
        self,
        properties: MutableMapping[str, str] | None,
        rules: Sequence[ReplacementRule] | None,
    ) -> None:
        """
        Run every rule over the store, in order.

        Args:
            properties: Property store, mutated in place
            rules: Replacement rules; later rules see earlier results

        Raises:
            InvalidPatternError: If a regex-mode rule has an invalid token
        """
        if not properties or not rules:
            return

        with trace_operation(
            "perform_replacement",
            kind=trace.SpanKind.INTERNAL,
            rule_count=len(rules),
            property_count=len(properties),
        ), REPLACEMENT_TIME.time():
            for rule in rules:
                if rule.target_key is None:
                    self._perform_replacement_on_all_properties(properties, rule)
                else:
                    self._perform_replacement_on_single_property(
                        properties, rule, rule.target_key
                    )

    def _perform_replacement_on_all_properties(
        self,
        properties: MutableMapping[str, str],
        rule: ReplacementRule,
    ) -> None:
        # Keys written during this pass (suffixed outputs) are not revisited
        for property_key in list(properties):
            self._perform_replacement_on_single_property(properties, rule, property_key)

    def _perform_replacement_on_single_property(
        self,
        properties: MutableMapping[str, str],
        rule: ReplacementRule,
        property_key: str,
    ) -> None:
        content = properties.get(property_key)
        result = self.executor.perform_replacement(rule, content)
        destination_key = rule.destination_key(property_key)
        properties[destination_key] = result

        if destination_key != property_key:
            REPLACEMENTS_APPLIED.labels(destination="suffix").inc()
            logger.info(
                f"apply replace on property {property_key} and save to {destination_key}: "
                f"original value '{content}' with '{result}'",
                extra={"property_key": property_key, "destination_key": destination_key},
            )
        else:
            REPLACEMENTS_APPLIED.labels(destination="overwrite").inc()
            logger.info(
                f"apply replace on property {property_key}: "
                f"original value '{content}' with '{result}'",
                extra={"property_key": property_key, "destination_key": destination_key},
            )
