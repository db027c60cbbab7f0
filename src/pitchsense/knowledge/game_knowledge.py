"""Static tactical knowledge shared by every agent: roles, strategies, advice."""

from __future__ import annotations

from enum import Enum

from ..field_constants import SECTOR_LABELS


class Role(Enum):
    GOALKEEPER = "GK"
    FIELD = "FIELD"


ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.GOALKEEPER: (
        "Goalkeeper - Primary defender of your goal. Stay near your goal and "
        "block shots."
    ),
    Role.FIELD: (
        "Field Player - Offensive and defensive duties. Chase ball, pass, shoot, "
        "and support teammates."
    ),
}

GOALKEEPER_STRATEGY = "Goalkeeper"
DEFAULT_FIELD_STRATEGY = "Balanced"

OFFENSIVE_STRATEGIES: dict[str, str] = {
    "Ball Pressure": "Aggressively chase and pressure the ball carrier",
    "Press Forward": "Push toward opponent goal for scoring opportunities",
    "Forward Support": "Stay upfield to receive passes and create chances",
    "Playmaker": "Position to create passing lanes and control tempo",
    "Counter Attack": "Quick transition from defense to attack",
    "Wing Play": "Position wide to stretch opponent defense",
}

DEFENSIVE_STRATEGIES: dict[str, str] = {
    "Defensive Cover": "Stay between ball and your goal to protect",
    "Mark Player": "Shadow and pressure specific opponent",
    "Hold Position": "Maintain defensive shape and position",
}

BALANCED_STRATEGIES: dict[str, str] = {
    "Box-to-Box": "Dynamically move between attack and defense",
    "Balanced": "Adapt role based on game flow",
    "Possession": "Focus on keeping the ball and controlling pace",
}

ZONE_LOCK_STRATEGIES: tuple[str, ...] = tuple(
    f"Zone Lock: {label}" for label in SECTOR_LABELS
)

SITUATIONAL_ADVICE: dict[str, str] = {
    "winning": (
        "When ahead: Use defensive strategies (Defensive Cover, Hold Position) to "
        "protect your lead. Maintain possession."
    ),
    "losing": (
        "When behind: Use offensive strategies (Press Forward, Ball Pressure, "
        "Forward Support) to create scoring chances."
    ),
    "tied": (
        "When tied: Use balanced strategies (Box-to-Box, Balanced) to adapt to "
        "game flow and exploit opportunities."
    ),
}

FIELD_STRATEGIES: tuple[str, ...] = (
    *OFFENSIVE_STRATEGIES,
    *DEFENSIVE_STRATEGIES,
    *BALANCED_STRATEGIES,
    *ZONE_LOCK_STRATEGIES,
)

GOALKEEPER_STRATEGIES: tuple[str, ...] = (
    GOALKEEPER_STRATEGY,
    "Defensive Cover",
    "Hold Position",
)


def initial_strategy(role: Role) -> str:
    return GOALKEEPER_STRATEGY if role is Role.GOALKEEPER else DEFAULT_FIELD_STRATEGY


def available_strategies(role: Role) -> tuple[str, ...]:
    """The labels an agent in this role may select."""
    return GOALKEEPER_STRATEGIES if role is Role.GOALKEEPER else FIELD_STRATEGIES


def strategy_guidelines() -> str:
    """Render the strategy catalogue as bullet lines grouped by style."""
    lines = []
    for heading, catalogue in (
        ("Offensive", OFFENSIVE_STRATEGIES),
        ("Defensive", DEFENSIVE_STRATEGIES),
        ("Balanced", BALANCED_STRATEGIES),
    ):
        lines.append(f"{heading}:")
        lines.extend(f"- {name} - {summary}" for name, summary in catalogue.items())
    lines.append("Zone:")
    lines.append("- Zone Lock: <sector> - Control one of the nine field sectors")
    return "\n".join(lines)
