"""
Game configuration and house rules.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any

from ..exceptions import ValidationError

MIN_PHASE_TIMER = 0
MAX_PHASE_TIMER = 180  # seconds


@dataclass
class HouseRules:
    """Configurable toggles for skips, the phase timer and doctor saves."""
    allow_skip_werewolf_kill: bool = False
    allow_skip_day_voting: bool = False
    allow_skip_hunter_revenge: bool = False
    phase_timer_seconds: int = 0  # 0 disables the timer

    # Doctor house rules
    doctor_can_save_himself: bool = False  # Once per match
    doctor_can_save_same_person_twice: bool = False  # In consecutive nights

    id: str = "default"

    def __post_init__(self):
        if not MIN_PHASE_TIMER <= self.phase_timer_seconds <= MAX_PHASE_TIMER:
            raise ValidationError([
                f"phase_timer_seconds must be within [{MIN_PHASE_TIMER}, {MAX_PHASE_TIMER}], "
                f"got {self.phase_timer_seconds}"
            ])

    def reset_to_defaults(self) -> None:
        """Reset all rules to safe defaults."""
        defaults = HouseRules(id=self.id)
        for key, value in asdict(defaults).items():
            setattr(self, key, value)

    @property
    def timer_display_text(self) -> str:
        """Formatted timer length, empty when disabled."""
        if self.phase_timer_seconds == 0:
            return ""
        minutes, seconds = divmod(self.phase_timer_seconds, 60)
        if minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HouseRules":
        """Build house rules from a mapping, ignoring unknown keys."""
        known = {k: v for k, v in (data or {}).items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class GameConfig:
    """Configuration for a moderated match."""

    # Game settings
    default_player_count: int = 8
    include_jester: bool = False
    random_seed: Optional[int] = None  # Seed for reproducible role assignment and autoplay
    house_rules: HouseRules = field(default_factory=HouseRules)

    # Moderator announcements
    use_announcements: bool = True

    # Storage
    storage_dir: Optional[str] = None  # None keeps records in memory only

    log_level: str = "INFO"


# Default configuration instance
default_config = GameConfig()
