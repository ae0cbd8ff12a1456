"""
Night phase engine: ordered werewolf, seer, doctor and medium stages.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..exceptions import StateError
from ..core import (
    MatchSession, GamePhase, NightStage, EventType, EliminationMethod,
    EliminationService, Player, RoleID,
)

if TYPE_CHECKING:
    from ..config.game_config import HouseRules

logger = logging.getLogger(__name__)

STAGE_ROLES = {
    NightStage.WEREWOLF: RoleID.WEREWOLF,
    NightStage.SEER: RoleID.SEER,
    NightStage.DOCTOR: RoleID.DOCTOR,
    NightStage.MEDIUM: RoleID.MEDIUM,
}


@dataclass
class StageResult:
    """Outcome of one completed stage."""
    stage: NightStage
    target_id: Optional[str] = None
    is_werewolf: Optional[bool] = None  # Seer and medium readings
    skipped: bool = False


@dataclass
class NightOutcome:
    """Outcome of the end-of-night resolution."""
    eliminated_id: Optional[str] = None
    saved_id: Optional[str] = None


class NightResolutionEngine:
    """Runs the night stages of a round against a session."""

    def __init__(self, house_rules: 'HouseRules', elimination: EliminationService):
        self.house_rules = house_rules
        self.elimination = elimination

    def applicable_stages(self, session: MatchSession) -> List[NightStage]:
        """Stages whose role has a living holder, in resolution order."""
        stages = []
        for stage in NightStage:
            if session.find_living(STAGE_ROLES[stage]) is None:
                continue
            if stage == NightStage.MEDIUM and not session.get_eliminated_players():
                continue
            stages.append(stage)
        return stages

    def begin_night(self, session: MatchSession) -> List[NightStage]:
        """Queue this night's stages on the session."""
        if session.phase != GamePhase.NIGHT:
            raise StateError(f"Night stages cannot start during {session.phase.value}")
        session.night_stages = self.applicable_stages(session)
        logger.info("Night %d stages: %s", session.round, [s.value for s in session.night_stages])
        return list(session.night_stages)

    def stage_actor(self, session: MatchSession, stage: NightStage) -> Optional[Player]:
        """The living player acting in a stage (first werewolf for the pack)."""
        return session.find_living(STAGE_ROLES[stage])

    def eligible_targets(self, session: MatchSession, stage: NightStage) -> List[Player]:
        """Players that may be chosen in a stage."""
        alive = session.get_alive_players()
        actor = self.stage_actor(session, stage)

        if stage == NightStage.WEREWOLF:
            return [p for p in alive if not p.is_werewolf]

        if stage == NightStage.SEER:
            return [p for p in alive if actor is None or p.id != actor.id]

        if stage == NightStage.DOCTOR:
            targets = list(alive)
            if actor is not None and not self.can_doctor_save_himself(session):
                targets = [p for p in targets if p.id != actor.id]
            if not self.house_rules.doctor_can_save_same_person_twice and session.last_doctor_protection:
                targets = [p for p in targets if p.id != session.last_doctor_protection]
            return targets

        return session.get_eliminated_players()

    def can_doctor_save_himself(self, session: MatchSession) -> bool:
        return self.house_rules.doctor_can_save_himself and not session.doctor_self_save_used

    def can_skip(self, stage: NightStage) -> bool:
        """Only the werewolf kill may be skipped, and only if the house rules allow it."""
        return stage == NightStage.WEREWOLF and self.house_rules.allow_skip_werewolf_kill

    def _require_stage(self, session: MatchSession, stage: NightStage) -> None:
        if session.current_stage != stage:
            current = session.current_stage.value if session.current_stage else "none"
            raise StateError(f"{stage.value} action attempted during stage {current}")

    def _require_target(self, session: MatchSession, stage: NightStage, target_id: str) -> Player:
        target = session.get_player(target_id)
        if target is None or target not in self.eligible_targets(session, stage):
            raise StateError(f"Player {target_id} is not an eligible {stage.value} target")
        return target

    def submit(self, session: MatchSession, stage: NightStage, target_id: str) -> StageResult:
        """
        Complete a stage with a chosen target.

        Raises:
            StateError: If the stage is not current or the target is not eligible
        """
        self._require_stage(session, stage)
        target = self._require_target(session, stage, target_id)

        result = StageResult(stage=stage, target_id=target.id)
        if stage == NightStage.WEREWOLF:
            session.werewolf_target = target.id
            session.log_event(
                EventType.WEREWOLF_TARGET,
                f"Werewolves targeted {target.display_name}",
                target_id=target.id,
            )
        elif stage == NightStage.SEER:
            result.is_werewolf = target.is_werewolf
        elif stage == NightStage.DOCTOR:
            doctor = self.stage_actor(session, stage)
            if doctor is not None and doctor.id == target.id:
                session.doctor_self_save_used = True
            session.doctor_protection = target.id
            session.last_doctor_protection = target.id
            session.log_event(
                EventType.DOCTOR_PROTECTION,
                f"Doctor protected {target.display_name}",
                actor_id=doctor.id if doctor else None,
                target_id=target.id,
            )
        else:
            result.is_werewolf = target.is_werewolf
            verdict = "was a werewolf" if target.is_werewolf else "was not a werewolf"
            medium = self.stage_actor(session, stage)
            session.log_event(
                EventType.MEDIUM_CHECK,
                f"Medium checked {target.display_name}: {verdict}",
                actor_id=medium.id if medium else None,
                target_id=target.id,
            )

        logger.debug("Stage %s completed on %s", stage.value, target.display_name)
        self._advance(session)
        return result

    def skip(self, session: MatchSession, stage: NightStage) -> StageResult:
        """
        Skip a stage without a target.

        Raises:
            StateError: If the stage is not current or may not be skipped
        """
        self._require_stage(session, stage)
        if not self.can_skip(stage):
            raise StateError(f"The {stage.value} stage cannot be skipped")
        self._advance(session)
        return StageResult(stage=stage, skipped=True)

    def expire(self, session: MatchSession, stage: NightStage,
               selection: Optional[str] = None) -> Optional[StageResult]:
        """
        Complete a stage because its timer ran out.

        Uses the current selection when it is still eligible, otherwise no
        target. Returns None if the stage was already completed.
        """
        if session.current_stage != stage:
            return None
        if selection is not None:
            target = session.get_player(selection)
            if target is not None and target in self.eligible_targets(session, stage):
                return self.submit(session, stage, selection)
        logger.info("Timer expired on %s stage without a target", stage.value)
        self._advance(session)
        return StageResult(stage=stage, skipped=True)

    def _advance(self, session: MatchSession) -> None:
        session.night_stages.pop(0)

    def resolve_night(self, session: MatchSession) -> NightOutcome:
        """
        Apply the werewolf attack unless the doctor protected the target,
        then clear this night's targets.
        """
        if session.phase != GamePhase.NIGHT:
            raise StateError("Night actions can only be resolved at night")
        if session.night_stages:
            raise StateError(f"Stage {session.night_stages[0].value} has not been completed")

        outcome = NightOutcome()
        target_id = session.werewolf_target
        if target_id is not None:
            target = session.require_player(target_id)
            if session.doctor_protection == target_id:
                session.log_event(
                    EventType.PLAYER_SAVED,
                    f"{target.display_name} was saved by the doctor",
                    target_id=target.id,
                )
                outcome.saved_id = target.id
            else:
                self.elimination.eliminate(session, target.id, EliminationMethod.WEREWOLF)
                outcome.eliminated_id = target.id

        # last_doctor_protection is kept for the consecutive-save rule
        session.werewolf_target = None
        session.doctor_protection = None

        logger.info("Night %d resolved", session.round)
        return outcome
