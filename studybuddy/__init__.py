"""
studybuddy: request understanding, orchestration and spaced repetition
core for a study assistant.

Usage:
    from studybuddy.services.orchestration import create_orchestrator
    from studybuddy.services.learning import init_srs, is_due, review
"""

__version__ = "0.1.0"
