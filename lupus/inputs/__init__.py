"""
Input sources for the moderator's decisions.
"""

from .base_input import BaseInput, ChoiceContext
from .random_input import RandomInput
from .console_input import ConsoleInput

__all__ = ['BaseInput', 'ChoiceContext', 'RandomInput', 'ConsoleInput']
