import logging
import uuid
from enum import Enum
from typing import Any, AsyncIterator

from pydantic import BaseModel
from sqlmodel import Session

from app.agent.exceptions import ConfigurationError, GENERATION_UNCONFIGURED_MESSAGE, PipelineError
from app.agent.persistence import ReportRecorder
from app.agent.report_agent import ReportAgent
from app.agent.reports import ReportDefinition

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    GENERATING = "generating"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"
    # Valid result for a kind that is never stored.
    COMPLETED = "completed"
    INVALID = "invalid"
    GENERATION_FAILED = "generation_failed"


TERMINAL_STATES = {
    PipelineState.PERSISTED,
    PipelineState.PERSIST_FAILED,
    PipelineState.COMPLETED,
    PipelineState.INVALID,
    PipelineState.GENERATION_FAILED,
}


class PipelineOutcome(BaseModel):
    kind: str
    state: PipelineState
    result: dict[str, Any] | None = None
    error_kind: str | None = None
    message: str | None = None
    # Set when the result is usable but could not be saved.
    warning: str | None = None
    record_id: uuid.UUID | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


class PipelineEvent(BaseModel):
    state: PipelineState
    message: str
    outcome: PipelineOutcome | None = None


def _failure_message(prompt_label: str | None, error: Exception) -> str:
    if isinstance(error, ConfigurationError):
        return error.message
    detail = error.message if isinstance(error, PipelineError) else str(error)
    if not detail:
        return f"An unknown error occurred while trying to {prompt_label or 'generate the report'}."
    if prompt_label:
        return f"Failed to {prompt_label}: {detail}"
    return detail


async def iter_report_pipeline(
    definition: ReportDefinition,
    params: BaseModel,
    *,
    session: Session | None = None,
    owner_id: uuid.UUID | None = None,
    project_id: uuid.UUID | None = None,
    agent: ReportAgent | None = None,
) -> AsyncIterator[PipelineEvent]:
    """
    Runs one report end to end and yields an event on every state transition.
    Every failure is caught here and reported through the final event's outcome;
    the generator never raises.
    """
    agent = agent or ReportAgent(definition)

    def finish(state: PipelineState, event_message: str, **fields: Any) -> PipelineEvent:
        outcome = PipelineOutcome(kind=definition.kind, state=state, **fields)
        return PipelineEvent(state=state, message=event_message, outcome=outcome)

    if not agent.is_configured:
        logger.warning("Skipping %s: generation is not configured", definition.kind)
        yield finish(
            PipelineState.GENERATION_FAILED,
            GENERATION_UNCONFIGURED_MESSAGE,
            error_kind=ConfigurationError.kind,
            message=GENERATION_UNCONFIGURED_MESSAGE,
        )
        return

    yield PipelineEvent(state=PipelineState.COMPOSING, message="Composing prompt...")
    prompt_label: str | None = None
    try:
        prompt = agent.compose(params)
        prompt_label = prompt.failure_label

        yield PipelineEvent(state=PipelineState.GENERATING, message="Generating report...")
        raw_text = await agent.generate(prompt)
    except Exception as e:
        message = _failure_message(prompt_label, e)
        logger.error("Generation failed for %s: %s", definition.kind, message)
        yield finish(
            PipelineState.GENERATION_FAILED,
            message,
            error_kind=getattr(e, "kind", "unknown"),
            message=message,
        )
        return

    yield PipelineEvent(state=PipelineState.VALIDATING, message="Validating response...")
    try:
        result = agent.validate(raw_text)
    except Exception as e:
        logger.error("Invalid %s response: %s", definition.kind, e)
        yield finish(
            PipelineState.INVALID,
            getattr(e, "message", str(e)),
            error_kind=getattr(e, "kind", "validation"),
            message=_failure_message(prompt_label, e),
        )
        return

    result_data = result.model_dump()
    if definition.persist is None:
        yield finish(PipelineState.COMPLETED, f"{definition.label} ready.", result=result_data)
        return

    yield PipelineEvent(state=PipelineState.PERSISTING, message="Saving result...")
    try:
        if session is None or project_id is None:
            raise PipelineError("No record store or project was provided.")
        recorder = ReportRecorder(session)
        record = await recorder.save(
            definition.persist,
            result,
            params,
            owner_id=owner_id,
            project_id=project_id,
        )
    except PipelineError as e:
        warning = f"{definition.label} complete, but failed to save result: {e.message}"
        yield finish(
            PipelineState.PERSIST_FAILED,
            warning,
            result=result_data,
            error_kind=e.kind,
            warning=warning,
        )
        return

    yield finish(
        PipelineState.PERSISTED,
        f"{definition.label} saved.",
        result=result_data,
        record_id=getattr(record, "id", None),
    )


async def run_report_pipeline(
    definition: ReportDefinition,
    params: BaseModel,
    *,
    session: Session | None = None,
    owner_id: uuid.UUID | None = None,
    project_id: uuid.UUID | None = None,
    agent: ReportAgent | None = None,
) -> PipelineOutcome:
    """Run a report to completion and return only its terminal outcome."""
    outcome: PipelineOutcome | None = None
    async for event in iter_report_pipeline(
        definition,
        params,
        session=session,
        owner_id=owner_id,
        project_id=project_id,
        agent=agent,
    ):
        logger.debug("%s -> %s", definition.kind, event.state.value)
        if event.state in TERMINAL_STATES:
            outcome = event.outcome
    if outcome is None:
        raise RuntimeError(f"{definition.kind} pipeline ended without an outcome")
    return outcome
