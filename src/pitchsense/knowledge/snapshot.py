"""Per-agent knowledge snapshots.

A snapshot is split into field groups, each owned by one scheduling lane:

- ``predictions``: replaced by the per-tick lane
- ``captures``: replaced by the capture lane
- ``strategy``: replaced by the decision lane
- ``score``: replaced on goal events

Every group is an immutable value and is swapped as a whole, so a reader
always sees a consistent group even while other lanes are writing theirs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..analysis.interception import InterceptionAnalysis
from ..field_constants import TEAM_GOAL_SIDES, opponent_of
from ..simulation.types import BallTrajectory, TrajectoryPoint
from .game_knowledge import Role, initial_strategy


@dataclass(frozen=True)
class AgentIdentity:
    """Who an agent is; fixed for the agent's lifetime."""

    agent_id: str
    team: str
    role: Role

    @property
    def goal_side(self) -> str:
        return TEAM_GOAL_SIDES[self.team]

    @property
    def opponent_goal_side(self) -> str:
        return TEAM_GOAL_SIDES[opponent_of(self.team)]


@dataclass(frozen=True)
class Score:
    red: int = 0
    blue: int = 0

    def for_team(self, team: str) -> tuple[int, int]:
        """Return ``(ours, theirs)`` from the given team's point of view."""
        if team == "red":
            return self.red, self.blue
        return self.blue, self.red

    def situation(self, team: str) -> str:
        ours, theirs = self.for_team(team)
        if ours > theirs:
            return "winning"
        if ours < theirs:
            return "losing"
        return "tied"

    def with_goal(self, team: str) -> Score:
        if team == "red":
            return replace(self, red=self.red + 1)
        return replace(self, blue=self.blue + 1)


@dataclass(frozen=True)
class Capture:
    """One perceptual capture reference (image data URL, URL or opaque key)."""

    agent_id: str
    timestamp: float
    data: str


@dataclass(frozen=True)
class AgentPrediction:
    """An agent's short-horizon path and its interception of the ball."""

    agent_id: str
    team: str
    trajectory: tuple[TrajectoryPoint, ...]
    interception: InterceptionAnalysis

    @property
    def can_intercept(self) -> bool:
        return self.interception.is_possible


@dataclass(frozen=True)
class Predictions:
    """Everything the per-tick lane computed for one agent on one tick."""

    tick: int
    ball: BallTrajectory
    me: AgentPrediction
    teammates: tuple[AgentPrediction, ...]
    opponents: tuple[AgentPrediction, ...]

    @property
    def teammates_can_intercept(self) -> int:
        return sum(1 for p in self.teammates if p.can_intercept)

    @property
    def opponents_can_intercept(self) -> int:
        return sum(1 for p in self.opponents if p.can_intercept)


@dataclass(frozen=True)
class DecisionRecord:
    timestamp: float
    previous_strategy: str
    selected_strategy: str
    reasoning: str


@dataclass(frozen=True)
class StrategyState:
    """Own strategy, teammates' strategies and the decision log."""

    current: str
    teammate_strategies: tuple[tuple[str, str], ...] = ()
    decision_log: tuple[DecisionRecord, ...] = ()

    def teammate_strategy(self, agent_id: str) -> str | None:
        for teammate_id, label in self.teammate_strategies:
            if teammate_id == agent_id:
                return label
        return None

    def with_decision(self, record: DecisionRecord) -> StrategyState:
        return replace(
            self,
            current=record.selected_strategy,
            decision_log=self.decision_log + (record,),
        )

    def with_teammate_strategy(self, agent_id: str, label: str) -> StrategyState:
        return replace(
            self,
            teammate_strategies=tuple(
                (teammate_id, label if teammate_id == agent_id else current)
                for teammate_id, current in self.teammate_strategies
            ),
        )


class KnowledgeSnapshot:
    """Everything one agent knows about the match.

    Attributes:
        identity: Agent id, team and role
        capacity: Ring buffer size for captures
        score: Current match score
        captures: Most recent captures, oldest first
        predictions: Latest per-tick predictions (None before the first tick)
        strategy: Own strategy, teammates' strategies and the decision log
    """

    def __init__(
        self,
        identity: AgentIdentity,
        capacity: int,
        strategy: StrategyState,
        score: Score | None = None,
    ):
        if capacity <= 0:
            raise ValueError(f"Capture capacity must be > 0, got {capacity}")
        self.identity = identity
        self.capacity = capacity
        self.score = score or Score()
        self.captures: tuple[Capture, ...] = ()
        self.predictions: Predictions | None = None
        self.strategy = strategy

    @property
    def agent_id(self) -> str:
        return self.identity.agent_id

    @property
    def current_strategy(self) -> str:
        return self.strategy.current

    def add_capture(self, capture: Capture) -> None:
        """Append a capture, evicting the oldest once capacity is exceeded."""
        self.captures = (self.captures + (capture,))[-self.capacity:]

    def recent_captures(self, limit: int) -> list[Capture]:
        """Return up to ``limit`` captures, most recent first."""
        if limit <= 0:
            return []
        return list(reversed(self.captures[-limit:]))


def create_snapshots(
    identities: list[AgentIdentity],
    capacity: int,
    score: Score | None = None,
) -> dict[str, KnowledgeSnapshot]:
    """Build the match-start snapshot for every agent.

    Every agent starts on its role's initial strategy and sees its
    teammates' initial strategies.

    Raises:
        ValueError: On duplicate agent ids
    """
    ids = [identity.agent_id for identity in identities]
    duplicates = sorted({agent_id for agent_id in ids if ids.count(agent_id) > 1})
    if duplicates:
        raise ValueError(f"Duplicate agent ids: {', '.join(duplicates)}")

    snapshots = {}
    for identity in identities:
        teammates = tuple(
            (other.agent_id, initial_strategy(other.role))
            for other in identities
            if other.team == identity.team and other.agent_id != identity.agent_id
        )
        snapshots[identity.agent_id] = KnowledgeSnapshot(
            identity=identity,
            capacity=capacity,
            strategy=StrategyState(
                current=initial_strategy(identity.role),
                teammate_strategies=teammates,
            ),
            score=score,
        )
    return snapshots
