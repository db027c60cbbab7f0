"""Capture rotation and decision-agent selection."""

from __future__ import annotations

import base64
import binascii
import random
from typing import Mapping, Sequence

from ..errors import CaptureFailure
from .snapshot import KnowledgeSnapshot

DATA_URL_PREFIX = "data:"


class CaptureRotation:
    """Round-robin over agents, one capture slot per interval.

    Example:
        rotation = CaptureRotation()
        rotation.tick(["red_1", "red_2"])  # "red_1"
        rotation.tick(["red_1", "red_2"])  # "red_2"
        rotation.tick(["red_1", "red_2"])  # "red_1"
    """

    def __init__(self) -> None:
        self.index = 0

    def tick(self, agent_ids: Sequence[str]) -> str | None:
        """Return the agent to capture now and advance the index."""
        if not agent_ids:
            return None
        # The agent list can shrink between ticks (match reset)
        agent_id = agent_ids[self.index % len(agent_ids)]
        self.index = (self.index + 1) % len(agent_ids)
        return agent_id

    def reset(self) -> None:
        self.index = 0


def normalize_capture(agent_id: str, data: str | bytes | None) -> str:
    """Turn a raw capture into a reference string.

    Bytes are treated as JPEG image data and wrapped into a base64 data URL.
    Data URLs must carry a non-empty, decodable base64 payload.

    Raises:
        CaptureFailure: If the capture is missing, blank or corrupt
    """
    if data is None:
        raise CaptureFailure(agent_id, "capture source returned nothing")

    if isinstance(data, (bytes, bytearray)):
        if not data:
            raise CaptureFailure(agent_id, "capture is empty")
        encoded = base64.b64encode(bytes(data)).decode("ascii")
        return f"data:image/jpeg;base64,{encoded}"

    if not isinstance(data, str):
        raise CaptureFailure(agent_id, f"unsupported capture type {type(data).__name__}")

    reference = data.strip()
    if not reference:
        raise CaptureFailure(agent_id, "capture is empty")

    if reference.startswith(DATA_URL_PREFIX):
        header, _, payload = reference.partition(",")
        if not header.endswith(";base64") or not payload:
            raise CaptureFailure(agent_id, "data URL has no base64 payload")
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CaptureFailure(agent_id, f"data URL payload is corrupt: {e}") from e

    return reference


def choose_decision_agent(
    snapshots: Mapping[str, KnowledgeSnapshot], rng: random.Random
) -> str | None:
    """Pick uniformly at random among agents holding at least one capture."""
    candidates = sorted(
        agent_id for agent_id, snapshot in snapshots.items() if snapshot.captures
    )
    if not candidates:
        return None
    return rng.choice(candidates)
