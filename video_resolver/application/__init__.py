"""Request orchestration."""

from .orchestrator import ExtractionOrchestrator, ExtractionOutcome

__all__ = ["ExtractionOrchestrator", "ExtractionOutcome"]
