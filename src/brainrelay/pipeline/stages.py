"""Pipeline stage table and result containers."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Stage:
    """One assistant step of the pipeline.

    Attributes:
        name: Stage name, also the key into the assistant id mapping
        collection: Document store collection for the stage output
        response_key: Field name in the HTTP response
        optional: Runs only when explicitly requested
    """

    name: str
    collection: str
    response_key: str
    optional: bool = False


# Execution order. Each stage consumes the previous stage's output.
STAGES: tuple[Stage, ...] = (
    Stage("master_file", "master_files", "masterFileUpdate"),
    Stage("core_messaging", "core_messaging", "coreMessagingUpdate"),
    Stage("identity_profile", "identity_profiles", "identityProfileUpdate"),
    Stage("social_content", "social_content", "socialContent"),
    Stage("content_feedback", "ai_feedback", "contentFeedback"),
    Stage("brand_analysis", "brand_analysis", "brandAnalysis", optional=True),
)

STAGES_BY_NAME: dict[str, Stage] = {stage.name: stage for stage in STAGES}


@dataclass
class StageResult:
    """Output of one completed stage."""

    stage: str
    content: str
    produced_at: datetime
    persisted: bool

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "stage": self.stage,
            "content": self.content,
            "produced_at": self.produced_at.isoformat(),
            "persisted": self.persisted,
        }


@dataclass
class PipelineResult:
    """Aggregate output of one pipeline execution."""

    thread_id: str
    user_id: str
    results: dict[str, StageResult] = field(default_factory=dict)

    def output(self, stage_name: str) -> str | None:
        """Content produced by a stage, or None if it did not run."""
        result = self.results.get(stage_name)
        return result.content if result else None

    def to_response(self) -> dict:
        """Render the HTTP response body.

        Every stage in STAGES gets its response key; skipped stages are None.
        """
        body: dict = {"thread_id": self.thread_id}
        for stage in STAGES:
            body[stage.response_key] = self.output(stage.name)
        return body
