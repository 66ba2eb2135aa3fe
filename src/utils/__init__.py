"""
Shared infrastructure for the property replacer

Provides:
- logging: logging setup and formatters
- tracing: OpenTelemetry spans
"""

__version__ = "1.0.0"
__all__ = ["logging", "tracing"]
