"""
Phase handlers for the night stages, the day vote and the phase timer.
"""

from .night_phase import NightResolutionEngine, NightOutcome, StageResult
from .day_phase import VotingHandler
from .timer import PhaseTimer

__all__ = ['NightResolutionEngine', 'NightOutcome', 'StageResult', 'VotingHandler', 'PhaseTimer']
