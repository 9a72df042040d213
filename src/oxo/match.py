"""Headless match controller: turn order, CPU replies and the running score."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .ai import AIPlayer, make_ai
from .game import (
    EMPTY,
    PLAYERS,
    Board,
    Outcome,
    Player,
    apply_move,
    create_board,
    evaluate,
    other_player,
)

logger = logging.getLogger(__name__)

DEFAULT_NAMES: Dict[str, str] = {
    "player1_name": "Player 1",
    "player2_name": "Player 2",
}
CPU_NAME = "CPU"
CPU_PLAYER: Player = "O"


class MatchConfig(BaseModel):
    """Settings chosen before a match starts."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Literal["single", "multi"] = Field(
        default="single",
        description="'single' plays against the CPU, 'multi' is two humans",
    )
    difficulty: Literal["easy", "hard"] = Field(
        default="hard",
        description="CPU strength in single mode",
    )
    player1_name: str = Field(default="Player 1", alias="player1Name")
    player2_name: str = Field(default="Player 2", alias="player2Name")
    starting_player: Literal["X", "O"] = Field(default="X", alias="startingPlayer")

    @field_validator("mode", "difficulty", "starting_player", mode="before")
    @classmethod
    def normalize_choice(cls, value: object, info: ValidationInfo) -> object:
        if not isinstance(value, str):
            return value
        value = value.strip()
        return value.upper() if info.field_name == "starting_player" else value.lower()

    @field_validator("player1_name", "player2_name")
    @classmethod
    def default_blank_name(cls, value: str, info: ValidationInfo) -> str:
        return value.strip() or DEFAULT_NAMES[info.field_name]

    @model_validator(mode="after")
    def name_cpu_opponent(self) -> "MatchConfig":
        if self.mode == "single":
            self.player2_name = CPU_NAME
        return self

    @property
    def cpu_player(self) -> Optional[Player]:
        return CPU_PLAYER if self.mode == "single" else None


@dataclass
class Scoreboard:
    player1: int = 0
    player2: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome.winner == "X":
            self.player1 += 1
        elif outcome.winner == "O":
            self.player2 += 1
        elif outcome.is_draw:
            self.draws += 1

    def as_dict(self) -> Dict[str, int]:
        return {"player1": self.player1, "player2": self.player2, "draws": self.draws}


@dataclass
class Match:
    """A series of rounds under one configuration.

    Player 1 always plays X and player 2 always plays O; in single mode player 2
    is the CPU. With ``auto_cpu`` set the CPU answers inside ``play`` and
    ``reset``; otherwise the caller triggers it with ``play_cpu_turn``.
    """

    config: MatchConfig = field(default_factory=MatchConfig)
    auto_cpu: bool = True
    rng: Optional[random.Random] = field(default=None, repr=False)

    board: Board = field(default_factory=create_board, init=False)
    current_player: Player = field(default="X", init=False)
    outcome: Outcome = field(default_factory=Outcome, init=False)
    scores: Scoreboard = field(default_factory=Scoreboard, init=False)
    move_log: List[Dict[str, Union[int, str]]] = field(default_factory=list, init=False)
    ai: Optional[AIPlayer] = field(default=None, init=False, repr=False)
    lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        with self.lock:
            self._configure(self.config)

    # ---- API used by presentation layers ----

    @property
    def cpu_pending(self) -> bool:
        """True while the round is live and the CPU owns the turn."""
        return (
            self.ai is not None
            and not self.outcome.is_over
            and self.current_player == self.ai.player
        )

    def play(self, index: int) -> Outcome:
        """Place the current player's marker at ``index``."""
        with self.lock:
            if self.outcome.is_over:
                raise ValueError("Game already finished")
            if self.cpu_pending:
                raise ValueError("CPU is completing its move")
            self._apply(index)
            if self.auto_cpu and self.cpu_pending:
                self._cpu_move()
            return self.outcome

    def play_cpu_turn(self) -> int:
        """Let the CPU move; returns the cell it picked."""
        with self.lock:
            if not self.cpu_pending:
                raise ValueError("It is not the CPU's turn")
            return self._cpu_move()

    def reset(self, starting_player: Optional[Player] = None) -> None:
        """Start a new round, keeping the score."""
        with self.lock:
            player = self.config.starting_player if starting_player is None else starting_player
            if player not in PLAYERS:
                raise ValueError(f"Unknown player {player!r}")
            self._start_round(player)

    def new_match(self, config: MatchConfig) -> None:
        """Replace the configuration and clear the score."""
        with self.lock:
            self._configure(config)

    def player_name(self, player: Player) -> str:
        with self.lock:
            return self._player_name(player)

    def status_text(self) -> str:
        with self.lock:
            return self._status_text()

    def result_message(self) -> Optional[str]:
        with self.lock:
            return self._result_message()

    def snapshot(self) -> Dict[str, object]:
        with self.lock:
            state: Dict[str, object] = {
                "board": [c if c != EMPTY else "" for c in self.board],
                "currentPlayer": self.current_player,
                "winner": self.outcome.winner,
                "winningLine": list(self.outcome.line) if self.outcome.line else None,
                "isDraw": self.outcome.is_draw,
                "status": self._status_text(),
                "scores": self.scores.as_dict(),
                "moveLog": list(self.move_log),
                "cpuPending": self.cpu_pending,
            }
            if self.move_log:
                state["lastMove"] = self.move_log[-1]
            return state

    # ---- helpers (caller holds the lock) ----

    def _player_name(self, player: Player) -> str:
        return self.config.player1_name if player == "X" else self.config.player2_name

    def _status_text(self) -> str:
        if self.outcome.winner:
            return f"{self._player_name(self.outcome.winner)} Wins!"
        if self.outcome.is_draw:
            return "It's a Draw!"
        return f"{self._player_name(self.current_player)}'s Turn"

    def _result_message(self) -> Optional[str]:
        if self.outcome.winner:
            return f"{self._player_name(self.outcome.winner)} won the game of Tic-Tac-Toe!"
        if self.outcome.is_draw:
            return "It was a draw in Tic-Tac-Toe!"
        return None

    def _configure(self, config: MatchConfig) -> None:
        self.config = config
        cpu = config.cpu_player
        self.ai = make_ai(config.difficulty, cpu, self.rng) if cpu else None
        self.scores = Scoreboard()
        logger.info(
            "New %s match: %s (X) vs %s (O)%s",
            config.mode,
            config.player1_name,
            config.player2_name,
            f", difficulty {config.difficulty}" if cpu else "",
        )
        self._start_round(config.starting_player)

    def _start_round(self, starting_player: Player) -> None:
        self.board = create_board()
        self.current_player = starting_player
        self.outcome = Outcome()
        self.move_log = []
        logger.debug("Round started, %s to move", starting_player)
        if self.auto_cpu and self.cpu_pending:
            self._cpu_move()

    def _cpu_move(self) -> int:
        if self.ai is None:
            raise ValueError("It is not the CPU's turn")
        index = self.ai.choose(self.board)
        self._apply(index)
        return index

    def _apply(self, index: int) -> None:
        player = self.current_player
        self.board = apply_move(self.board, index, player)
        self.move_log.append({"player": player, "index": index})
        logger.debug("%s played %d", player, index)

        self.outcome = evaluate(self.board)
        if self.outcome.is_over:
            self.scores.record(self.outcome)
            logger.info("Round over: %s", self._result_message())
        else:
            self.current_player = other_player(player)
