"""
Expression evaluation capability.

The replacement pipeline hands its evaluation input to an externally
supplied evaluator (for example a build tool resolving ``${...}``
expressions). Evaluation never aborts a replacement: failures come back as
an EvaluationResult carrying the fallback value and the error.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class ExpressionEvaluator(ABC):
    """Base class for expression evaluators."""

    @abstractmethod
    def evaluate(self, content: str) -> Any | None:
        """
        Evaluate raw content.

        Args:
            content: Evaluation input

        Returns:
            Evaluated object (stringified by the caller) or None when the
            content does not resolve to anything
        """
        pass


class CallableEvaluator(ExpressionEvaluator):
    """Adapter exposing a plain function as an ExpressionEvaluator."""

    def __init__(self, func: Callable[[str], Any | None]):
        self.func = func

    def evaluate(self, content: str) -> Any | None:
        return self.func(content)


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of evaluating one input.

    Attributes:
        value: Evaluated string, or the unchanged input on fallback
        error: Exception raised by the evaluator, if any
    """

    value: str
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def stringify(evaluated: Any) -> str:
    """String form of an evaluated object; booleans are spelled "true"/"false"."""
    if isinstance(evaluated, bool):
        return "true" if evaluated else "false"
    return str(evaluated)


def evaluate_expression(
    evaluator: ExpressionEvaluator | None,
    content: str,
) -> EvaluationResult:
    """
    Evaluate content, falling back to it unchanged.

    Args:
        evaluator: Evaluator to invoke; None skips evaluation
        content: Evaluation input

    Returns:
        EvaluationResult with the evaluated string, or with ``content`` and
        the raised error when evaluation fails
    """
    if evaluator is None:
        return EvaluationResult(content)

    try:
        evaluated = evaluator.evaluate(content)
    except Exception as e:
        return EvaluationResult(content, error=e)

    if evaluated is None:
        logger.debug("Evaluator returned nothing, keeping evaluation input")
        return EvaluationResult(content)

    return EvaluationResult(stringify(evaluated))
