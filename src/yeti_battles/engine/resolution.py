"""Battle resolution: winner, reward multiplier, penalty, ledger entry.

Outcomes:
  1. Normal win: player power >= yeti power (ties go to the player), 1x reward.
  2. Class advantage: one counter buff, instant win, 2x reward.
  3. Stacked class advantage: both counter buffs stacked, instant win, 3x reward.
  4. Loss: no reward, the yeti's class penalty is applied.

Yeti power was locked at spawn; player power and buffs are read now.
"""
from __future__ import annotations

import logging
import random
from typing import Mapping

from yeti_battles.config import BattleConfig
from yeti_battles.engine.player import PlayerGateway
from yeti_battles.mechanics import class_advantage
from yeti_battles.mechanics.penalties import PENALTY_TABLE, apply_penalty, build_penalty_table
from yeti_battles.models.encounter import (
    EngagementRecord,
    LedgerEntry,
    OpposingClass,
    PenaltyResult,
    ResolutionOutcome,
    ResourceKind,
    WinType,
)
from yeti_battles.models.penalty import PenaltyEffect
from yeti_battles.storage.encounter_ledger import EncounterLedger

logger = logging.getLogger(__name__)


class ResolutionEngine:
    def __init__(
        self,
        player: PlayerGateway,
        ledger: EncounterLedger,
        rng: random.Random | None = None,
        penalty_table: Mapping[OpposingClass, PenaltyEffect] | None = None,
        ability_belt_level: int = 0,
        config: BattleConfig | None = None,
    ) -> None:
        self.player = player
        self.ledger = ledger
        self.rng = rng or random.Random()
        self.penalty_table = penalty_table
        self.config = config
        # Cosmetic progression counter; reserved for future ability unlocks.
        self.ability_belt_level = ability_belt_level

    def resolve(self, record: EngagementRecord, player_power: int) -> ResolutionOutcome | None:
        """Resolve ``record`` once. A second call for the same record returns None."""
        if record.resolved:
            logger.debug(f"Resolution for {record.actor_id} already done")
            return None
        record.resolved = True

        actor = record.actor
        opponent_power = actor.power
        advantage = class_advantage.resolve(actor.opposing_class, self.player.get_player_buffs())

        if advantage.has_advantage:
            player_won = True
            win_type = WinType.CLASS_ADVANTAGE
            multiplier = 3 if advantage.upgrades_to_triple else 2
        else:
            player_won = player_power >= opponent_power
            win_type = WinType.NORMAL
            multiplier = 1

        outcome = ResolutionOutcome(
            actor_id=actor.id,
            opposing_class=actor.opposing_class,
            player_won=player_won,
            win_type=win_type,
            reward_multiplier=multiplier,
            player_power=player_power,
            opponent_power=opponent_power,
            advantage_source=advantage.advantage_source,
        )

        if player_won:
            outcome.snowball_reward = opponent_power * multiplier
            if outcome.snowball_reward > 0:
                self.player.mutate_resource(ResourceKind.SNOWBALLS, outcome.snowball_reward)
            self.ability_belt_level += 1
            logger.info(
                f"Victory over {actor.name} ({win_type.value}, x{multiplier}): "
                f"+{outcome.snowball_reward:,} snowballs"
            )
        else:
            outcome.penalty = self._apply_penalty(record)
            logger.info(
                f"Defeated by {actor.name}: {player_power:,} < {opponent_power:,}"
                + (f"; {outcome.penalty.description}" if outcome.penalty else "")
            )
        outcome.ability_belt_level = self.ability_belt_level

        self.ledger.record(LedgerEntry(
            actor_name=actor.name,
            actor_class=actor.opposing_class,
            player_won=player_won,
            result_kind=outcome.result_kind,
            resources=self.player.get_player_resources().model_copy(deep=True),
        ))
        return outcome

    def current_penalty_table(self) -> Mapping[OpposingClass, PenaltyEffect]:
        """An explicit table wins; otherwise the siphon fraction is read from config now."""
        if self.penalty_table is not None:
            return self.penalty_table
        if self.config is not None:
            return build_penalty_table(self.config.siphon_fraction)
        return PENALTY_TABLE

    def _apply_penalty(self, record: EngagementRecord) -> PenaltyResult | None:
        if record.penalty_applied:
            return None
        record.penalty_applied = True
        penalty = apply_penalty(
            record.opposing_class,
            self.player.get_player_resources(),
            rng=self.rng,
            table=self.current_penalty_table(),
        )
        if penalty.resource_kind == ResourceKind.ASSISTANTS and penalty.amount > 0:
            self.player.mark_production_stale()
        return penalty
