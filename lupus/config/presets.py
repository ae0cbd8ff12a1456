"""
Built-in role presets.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class RolePreset:
    """A named, ready-made role selection for a fixed table size."""
    id: str
    name: str
    role_counts: Dict[str, int] = field(default_factory=dict)
    min_players: int = 4
    max_players: int = 4
    description: str = ""


DEFAULT_PRESETS: List[RolePreset] = [
    RolePreset(
        id="beginner_4", name="Beginner (4 players)",
        role_counts={"werewolf": 1, "villager": 3},
        min_players=4, max_players=4, description="Minimal setup for learning",
    ),
    RolePreset(
        id="classic_6", name="Classic (6 players)",
        role_counts={"werewolf": 2, "villager": 3, "seer": 1},
        min_players=6, max_players=6, description="Perfect for beginners",
    ),
    RolePreset(
        id="classic_8", name="Classic (8 players)",
        role_counts={"werewolf": 2, "villager": 4, "seer": 1, "doctor": 1},
        min_players=8, max_players=8, description="Balanced gameplay",
    ),
    RolePreset(
        id="advanced_10", name="Advanced (10 players)",
        role_counts={"werewolf": 2, "villager": 5, "seer": 1, "doctor": 1, "jester": 1},
        min_players=10, max_players=10, description="With the Jester who can win",
    ),
    RolePreset(
        id="expert_12", name="Expert (12 players)",
        role_counts={"werewolf": 3, "villager": 5, "seer": 1, "doctor": 1, "hunter": 1, "medium": 1},
        min_players=12, max_players=12, description="All special roles",
    ),
    RolePreset(
        id="mayor_10", name="Mayor's Village (10 players)",
        role_counts={"werewolf": 2, "villager": 5, "seer": 1, "doctor": 1, "mayor": 1},
        min_players=10, max_players=10, description="Features the Mayor role for village leadership",
    ),
    RolePreset(
        id="chaos_14", name="Chaos (14 players)",
        role_counts={"werewolf": 3, "villager": 5, "seer": 1, "doctor": 1, "hunter": 1,
                     "medium": 1, "mayor": 1, "jester": 1},
        min_players=14, max_players=14, description="Total chaos with all roles including Mayor",
    ),
]


def get_preset(preset_id: str, presets: Optional[List[RolePreset]] = None) -> Optional[RolePreset]:
    """Find a preset by id."""
    for preset in presets or DEFAULT_PRESETS:
        if preset.id == preset_id:
            return preset
    return None
