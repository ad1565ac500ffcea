from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from app.agent.artifacts import ComposedPrompt
from app.agent.llm_client import LLMClient
from app.core.config import settings

InType = TypeVar("InType", bound=BaseModel)
OutType = TypeVar("OutType", bound=BaseModel)

class BaseAgent(ABC, Generic[InType, OutType]):
    """
    One generation step: turn typed params into a prompt, ask the model, check the answer.
    Subclasses supply `compose`, `generate` and `validate`; `run` chains them.
    """

    def __init__(self, model_setting: str = "MODEL_DEFAULT", model_name: str | None = None):
        # An empty per-kind setting (e.g. MODEL_OUTREACH="") falls back to the default model.
        model_to_use = model_name or getattr(settings, model_setting, "") or settings.MODEL_DEFAULT
        self.llm = LLMClient(model_name=model_to_use)

    @property
    def is_configured(self) -> bool:
        return self.llm.is_configured

    @abstractmethod
    def compose(self, params: InType) -> ComposedPrompt:
        ...

    @abstractmethod
    async def generate(self, prompt: ComposedPrompt) -> str:
        ...

    @abstractmethod
    def validate(self, raw_text: str) -> OutType:
        ...

    async def run(self, input_data: InType) -> OutType:
        prompt = self.compose(input_data)
        raw_text = await self.generate(prompt)
        return self.validate(raw_text)
