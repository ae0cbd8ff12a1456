"""
Single-device moderator for werewolf-style social deduction matches.
"""

__version__ = "0.1.0"
