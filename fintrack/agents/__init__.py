"""AI Agents package."""

from fintrack.agents.advisor import (
    FALLBACK_MESSAGE,
    InsightAdvisor,
    Summarizer,
    SummarizerError,
    SummarizerNotConfiguredError,
)

__all__ = [
    "FALLBACK_MESSAGE",
    "InsightAdvisor",
    "Summarizer",
    "SummarizerError",
    "SummarizerNotConfiguredError",
]
