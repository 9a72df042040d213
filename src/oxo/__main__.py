"""Entry point for running a headless CPU-vs-CPU match via ``python -m oxo``."""

from __future__ import annotations

import logging
import os
import random
from typing import Dict, Optional

from .ai import AIPlayer, make_ai
from .match import Match, MatchConfig

logger = logging.getLogger("oxo")


def _seeded_rng(seed: Optional[int], offset: int) -> Optional[random.Random]:
    if seed is None:
        return None
    return random.Random(seed + offset)


def _env_int(name: str, default: Optional[str] = None) -> Optional[int]:
    raw = os.environ.get(name, default)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def main() -> int:
    """Play ``OXO_ROUNDS`` rounds between two CPU players and log the score."""

    level_name = os.environ.get("OXO_LOG_LEVEL", "INFO").strip().upper()
    log_level = logging.getLevelName(level_name)
    logging.basicConfig(
        level=log_level if isinstance(log_level, int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if not isinstance(log_level, int):
            raise ValueError(f"Unknown OXO_LOG_LEVEL {level_name!r}")
        seed = _env_int("OXO_SEED")
        rounds = _env_int("OXO_ROUNDS", "1")
        if rounds < 1:
            raise ValueError("OXO_ROUNDS must be at least 1")
        levels = {
            "X": os.environ.get("OXO_DIFFICULTY_X", "hard").strip().lower(),
            "O": os.environ.get("OXO_DIFFICULTY_O", "hard").strip().lower(),
        }
        players: Dict[str, AIPlayer] = {
            marker: make_ai(level, marker, _seeded_rng(seed, offset))
            for offset, (marker, level) in enumerate(levels.items())
        }
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    match = Match(
        MatchConfig(
            mode="multi",
            player1_name=f"CPU X ({levels['X']})",
            player2_name=f"CPU O ({levels['O']})",
        )
    )
    for round_no in range(1, rounds + 1):
        if round_no > 1:
            match.reset()
        while not match.outcome.is_over:
            ai = players[match.current_player]
            match.play(ai.choose(match.board))

    scores = match.scores
    logger.info(
        "Final score after %d round(s): X %d, O %d, draws %d",
        rounds,
        scores.player1,
        scores.player2,
        scores.draws,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
