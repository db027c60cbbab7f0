"""Knowledge snapshots, decision protocol and the scheduling engine."""

from .builder import AgentState, WorldState, build_predictions
from .decisions import (
    AnthropicDecisionClient,
    DecisionCollaborator,
    DecisionRequest,
    DecisionResult,
    build_decision_prompt,
)
from .engine import TacticalEngine
from .game_knowledge import Role, available_strategies, initial_strategy
from .scheduler import CaptureRotation, choose_decision_agent
from .snapshot import AgentIdentity, KnowledgeSnapshot, Score, create_snapshots

__all__ = [
    "AgentIdentity",
    "AgentState",
    "AnthropicDecisionClient",
    "CaptureRotation",
    "DecisionCollaborator",
    "DecisionRequest",
    "DecisionResult",
    "KnowledgeSnapshot",
    "Role",
    "Score",
    "TacticalEngine",
    "WorldState",
    "available_strategies",
    "build_decision_prompt",
    "build_predictions",
    "choose_decision_agent",
    "create_snapshots",
    "initial_strategy",
]
