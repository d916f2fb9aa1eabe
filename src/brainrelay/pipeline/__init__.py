"""Assistant pipeline — brain dump → stage outputs → document store.

Components:
- ConversationGateway: thread creation and bounded assistant runs
- Orchestrator: stage sequencing and persistence
- STAGES: the fixed stage table
"""

from brainrelay.pipeline.conversation import ConversationGateway
from brainrelay.pipeline.orchestrator import Orchestrator, open_orchestrator
from brainrelay.pipeline.stages import STAGES, PipelineResult, Stage, StageResult

__all__ = [
    "ConversationGateway",
    "Orchestrator",
    "open_orchestrator",
    "STAGES",
    "PipelineResult",
    "Stage",
    "StageResult",
]
