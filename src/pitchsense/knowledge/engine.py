"""Tactical engine: owns the snapshot map and runs the three lanes.

- Per-tick lane: ``on_tick`` is called synchronously by the host loop.
- Capture lane: an asyncio task capturing one agent per interval.
- Decision lane: an asyncio task dispatching one decision per interval.
  Each dispatch is its own task; results come back through a queue that a
  consumer task folds into the snapshots.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Callable, Sequence, Union

from ..config import PitchSenseConfig, default_config
from ..errors import CaptureFailure, CollaboratorFailure
from ..field_constants import opponent_of
from ..profiles.store import CachedProfileLoader
from ..profiles.types import DEFAULT_PROFILE, PhysicsProfile
from ..simulation.motion import DEFAULT_AGENT_MOTION, AgentMotionProfile
from .builder import WorldState, build_predictions
from .decisions import (
    DecisionCollaborator,
    DecisionRequest,
    DecisionResult,
    build_decision_request,
)
from .game_knowledge import available_strategies
from .scheduler import CaptureRotation, choose_decision_agent, normalize_capture
from .snapshot import (
    AgentIdentity,
    Capture,
    DecisionRecord,
    KnowledgeSnapshot,
    Score,
    create_snapshots,
)

logger = logging.getLogger(__name__)

CaptureSource = Callable[[str], Union[str, bytes, None]]


class TacticalEngine:
    """Keep every agent's knowledge snapshot current without blocking the host.

    Example:
        engine = TacticalEngine(AnthropicDecisionClient(config.collaborator), grab_view)
        engine.reset_match(agents)
        async with engine:
            while running:
                engine.on_tick(world)
                await asyncio.sleep(1 / 60)
    """

    def __init__(
        self,
        collaborator: DecisionCollaborator,
        capture_source: CaptureSource,
        config: PitchSenseConfig | None = None,
        profile_loader: CachedProfileLoader | None = None,
        motion: AgentMotionProfile = DEFAULT_AGENT_MOTION,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the engine.

        Args:
            collaborator: Answers decision requests
            capture_source: Returns a capture (data URL, URL or image bytes)
                for an agent id
            config: Scheduler, field and collaborator settings
            profile_loader: Source of the active physics profile; None means
                always use the default profile
            motion: Agent motion parameters for the per-tick lane
            rng: Random source for decision-agent selection
            clock: Wall clock used for capture timestamps
        """
        self.config = config or default_config()
        self.collaborator = collaborator
        self.capture_source = capture_source
        self.profile_loader = profile_loader
        self.motion = motion
        self.rng = rng or random.Random()
        self._clock = clock

        self.snapshots: dict[str, KnowledgeSnapshot] = {}
        self.match_epoch = 0
        self.rotation = CaptureRotation()

        self._results: asyncio.Queue[DecisionResult] = asyncio.Queue()
        self._lanes: list[asyncio.Task] = []
        self._inflight: set[asyncio.Task] = set()

    # Match lifecycle

    def reset_match(
        self, identities: Sequence[AgentIdentity], score: Score | None = None
    ) -> None:
        """Start a new match: rebuild every snapshot and bump the epoch.

        Decisions still in flight for the previous match are discarded when
        they resolve.
        """
        self.snapshots = create_snapshots(
            list(identities), self.config.scheduler.capture_capacity, score
        )
        self.match_epoch += 1
        self.rotation.reset()
        logger.info(
            f"Match {self.match_epoch} started with {len(self.snapshots)} agents"
        )

    def record_goal(self, team: str) -> None:
        """Credit a goal to ``team`` in every snapshot's score."""
        opponent_of(team)  # Validates the team name
        for snapshot in self.snapshots.values():
            snapshot.score = snapshot.score.with_goal(team)
        logger.info(f"Goal for {team}")

    # Active profile

    def active_profile(self) -> PhysicsProfile | None:
        if self.profile_loader is None:
            return None
        return self.profile_loader.get()

    def active_profile_name(self) -> str:
        return (self.active_profile() or DEFAULT_PROFILE).name

    def is_custom_profile_active(self) -> bool:
        return self.active_profile() is not None

    # Per-tick lane

    def on_tick(self, world: WorldState) -> None:
        """Replace every agent's predictions with this tick's values.

        Never raises; on an unexpected error the previous predictions stay.
        """
        if not self.snapshots:
            return

        try:
            predictions = build_predictions(
                world,
                self.active_profile(),
                self.config.pitch.bounds,
                self.motion,
            )
        except Exception:
            logger.exception(f"Prediction failed on tick {world.tick}")
            return

        for agent_id, agent_predictions in predictions.items():
            snapshot = self.snapshots.get(agent_id)
            if snapshot is None:
                logger.debug(f"Tick {world.tick} reported unknown agent {agent_id}")
                continue
            snapshot.predictions = agent_predictions

    # Capture lane

    def capture_once(self) -> str | None:
        """Capture the next agent in the rotation.

        Returns:
            The captured agent id, or None if the slot was skipped
        """
        agent_id = self.rotation.tick(list(self.snapshots))
        if agent_id is None:
            return None

        try:
            reference = normalize_capture(agent_id, self.capture_source(agent_id))
        except CaptureFailure as e:
            logger.warning(f"{e}; skipping rotation slot")
            return None
        except Exception as e:
            logger.warning(
                f"Capture source failed for {agent_id}: {e}; skipping rotation slot"
            )
            return None

        self.snapshots[agent_id].add_capture(
            Capture(agent_id=agent_id, timestamp=self._clock(), data=reference)
        )
        return agent_id

    # Decision lane

    def dispatch_decision(self) -> asyncio.Task | None:
        """Fire one decision request without waiting for it.

        Must be called with a running event loop.

        Returns:
            The dispatch task, or None when no agent has a capture yet
        """
        agent_id = choose_decision_agent(self.snapshots, self.rng)
        if agent_id is None:
            logger.debug("No agent has a capture yet; skipping decision cycle")
            return None

        request = build_decision_request(
            self.snapshots[agent_id],
            self.match_epoch,
            self.config.scheduler.max_capture_refs,
        )
        task = asyncio.create_task(self._request_decision(request))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        logger.debug(f"Dispatched decision request for {agent_id}")
        return task

    async def _request_decision(self, request: DecisionRequest) -> None:
        timeout = self.config.scheduler.decision_timeout_s
        try:
            result = await asyncio.wait_for(
                self.collaborator.select_strategy(request), timeout
            )
        except TimeoutError:
            failure = CollaboratorFailure(
                request.agent_id, f"no answer within {timeout}s"
            )
            logger.warning(f"{failure}; keeping previous strategy")
            return
        except CollaboratorFailure as e:
            logger.warning(f"{e}; keeping previous strategy")
            return
        except Exception:
            logger.exception(
                f"Decision request for {request.agent_id} raised; "
                "keeping previous strategy"
            )
            return

        await self._results.put(result)

    def apply_decision(self, result: DecisionResult) -> bool:
        """Fold a decision result into the snapshots.

        Replaces the agent's strategy, appends to its decision log and
        updates the label every teammate holds for it. Results from an
        earlier match, for unknown agents, or naming a label the agent's
        role cannot select are dropped.

        Returns:
            True if the result was applied
        """
        if result.match_epoch != self.match_epoch:
            logger.debug(
                f"Dropping decision for {result.agent_id} from match {result.match_epoch}"
            )
            return False

        snapshot = self.snapshots.get(result.agent_id)
        if snapshot is None:
            logger.debug(f"Dropping decision for unknown agent {result.agent_id}")
            return False

        if result.selected_strategy not in available_strategies(snapshot.identity.role):
            failure = CollaboratorFailure(
                result.agent_id, f"unknown strategy '{result.selected_strategy}'"
            )
            logger.warning(f"{failure}; keeping previous strategy")
            return False

        previous = snapshot.current_strategy
        snapshot.strategy = snapshot.strategy.with_decision(
            DecisionRecord(
                timestamp=result.timestamp,
                previous_strategy=previous,
                selected_strategy=result.selected_strategy,
                reasoning=result.reasoning,
            )
        )

        team = snapshot.identity.team
        for other in self.snapshots.values():
            if other is not snapshot and other.identity.team == team:
                other.strategy = other.strategy.with_teammate_strategy(
                    result.agent_id, result.selected_strategy
                )

        logger.info(
            f"{result.agent_id}: {previous} -> {result.selected_strategy}"
        )
        return True

    def drain_results(self) -> int:
        """Apply every queued result now; returns how many were applied."""
        applied = 0
        while not self._results.empty():
            if self.apply_decision(self._results.get_nowait()):
                applied += 1
            self._results.task_done()
        return applied

    # Background lanes

    @property
    def running(self) -> bool:
        return bool(self._lanes)

    @property
    def pending_decisions(self) -> int:
        return len(self._inflight)

    async def start(self) -> None:
        """Start the capture, decision and result-consumer tasks."""
        if self._lanes:
            return

        self._lanes = [
            asyncio.create_task(self._capture_loop()),
            asyncio.create_task(self._decision_loop()),
            asyncio.create_task(self._consume_results()),
        ]
        logger.info("Tactical engine started")

    async def stop(self) -> None:
        """Cancel the lanes and every in-flight decision request."""
        tasks = [*self._lanes, *self._inflight]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._lanes = []
        self._inflight.clear()
        logger.info("Tactical engine stopped")

    async def __aenter__(self) -> TacticalEngine:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def _capture_loop(self) -> None:
        interval = self.config.scheduler.capture_interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval)
            self.capture_once()

    async def _decision_loop(self) -> None:
        interval = self.config.scheduler.decision_interval_s
        while True:
            await asyncio.sleep(interval)
            try:
                self.dispatch_decision()
            except Exception as e:
                logger.error(f"Error during decision cycle: {e}")

    async def _consume_results(self) -> None:
        while True:
            result = await self._results.get()
            try:
                self.apply_decision(result)
            finally:
                self._results.task_done()
