"""
Pytest configuration and fixtures for property replacer tests.
"""

from pathlib import Path

import pytest

from replacement import CallableEvaluator


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def properties() -> dict[str, str]:
    """A small property store as generated by a build."""
    return {
        "git.branch": "feature/ABC-123",
        "git.commit.id": "4f1a9c2",
        "project.version": "1.0.0-SNAPSHOT",
    }


@pytest.fixture
def upper_evaluator() -> CallableEvaluator:
    """Evaluator that resolves ${upper:...} expressions and nothing else."""

    def evaluate(content: str):
        if content.startswith("${upper:") and content.endswith("}"):
            return content[len("${upper:"):-1].upper()
        return None

    return CallableEvaluator(evaluate)
