"""Initialization stages of a page target and execution context lookup."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cdpkit.frame import FrameManager
from cdpkit.world import DOMWorldKind


class TargetInitStage(Enum):
    """The stages a page target passes through until it is usable."""

    ATTACH_TO_TARGET = "attach_to_target"
    INITIALIZING_FRAME = "initializing_frame"
    INITIALIZING_NETWORK = "initializing_network"
    INITIALIZING_PAGE = "initializing_page"
    INITIALIZING_EMULATION = "initializing_emulation"
    INITIALIZED = "initialized"
    CLOSING = "closing"

    def has_commands(self) -> bool:
        """Whether this stage runs a chain of initialization commands."""
        return self in _COMMAND_STAGES


_COMMAND_STAGES = frozenset(
    {
        TargetInitStage.INITIALIZING_FRAME,
        TargetInitStage.INITIALIZING_NETWORK,
        TargetInitStage.INITIALIZING_PAGE,
        TargetInitStage.INITIALIZING_EMULATION,
    }
)


def next_stage(stage: TargetInitStage, has_viewport: bool) -> TargetInitStage:
    """The stage that follows ``stage`` once its commands are done.

    Emulation is only set up when the target is configured with a viewport.
    Raises ValueError for the terminal stages.
    """
    if stage is TargetInitStage.ATTACH_TO_TARGET:
        return TargetInitStage.INITIALIZING_FRAME
    if stage is TargetInitStage.INITIALIZING_FRAME:
        return TargetInitStage.INITIALIZING_NETWORK
    if stage is TargetInitStage.INITIALIZING_NETWORK:
        return TargetInitStage.INITIALIZING_PAGE
    if stage is TargetInitStage.INITIALIZING_PAGE:
        if has_viewport:
            return TargetInitStage.INITIALIZING_EMULATION
        return TargetInitStage.INITIALIZED
    if stage is TargetInitStage.INITIALIZING_EMULATION:
        return TargetInitStage.INITIALIZED
    raise ValueError(f"no stage follows {stage.value}")


@dataclass(frozen=True)
class GetExecutionContext:
    """A request for the execution context of a world of a frame.

    Without a frame id the main frame is used.
    """

    dom_world: DOMWorldKind = DOMWorldKind.MAIN
    frame_id: str | None = None


def execution_context_for(
    frame_manager: FrameManager, request: GetExecutionContext
) -> int | None:
    """The execution context the request asks for, or None if unknown."""
    if request.frame_id is not None:
        frame = frame_manager.frame(request.frame_id)
    else:
        frame = frame_manager.main_frame()
    if frame is None:
        return None
    if request.dom_world is DOMWorldKind.SECONDARY:
        return frame.secondary_world.execution_context
    return frame.main_world.execution_context