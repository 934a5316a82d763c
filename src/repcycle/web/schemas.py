"""Request bodies for the JSON API."""

from pydantic import BaseModel, Field

from ..models.exercises import Equipment
from ..models.program import Focus, GenerationInput


class GenerateRequest(BaseModel):
    """Inputs for generating a plan."""

    frequency: int = Field(ge=1, le=7)
    equipment: list[Equipment] = Field(default_factory=list)
    focus: Focus = Focus.BALANCED
    exercise_ids: list[int] | None = Field(
        default=None,
        description="Hand-picked exercises; generated automatically when omitted",
    )

    def to_input(self) -> GenerationInput:
        return GenerationInput(
            frequency=self.frequency,
            equipment=list(self.equipment),
            focus=self.focus,
        )


class CreatePlanRequest(GenerateRequest):
    activate: bool = True


class StartSessionRequest(BaseModel):
    """Start either the plan's next template, a given template, or one exercise."""

    plan_id: int
    template_id: int | None = None
    exercise_id: int | None = None
    started_at: str | None = None


class LogSetRequest(BaseModel):
    exercise_id: int
    weight: float = Field(ge=0)
    reps: int = Field(ge=0)
    is_warmup: bool = False
    completed_at: str | None = None


class CompleteSessionRequest(BaseModel):
    notes: str | None = None
    completed_at: str | None = None


class EnableSyncRequest(BaseModel):
    enabled: bool
