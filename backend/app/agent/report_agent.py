from app.agent.artifacts import ComposedPrompt
from app.agent.base import BaseAgent, InType, OutType
from app.agent.llm_client import schema_descriptor
from app.agent.reports import ReportDefinition


class ReportAgent(BaseAgent[InType, OutType]):
    """
    Runs compose -> generate -> validate for one report kind.
    The three steps are exposed separately so the pipeline can report state between them.
    """

    def __init__(self, definition: ReportDefinition, model_name: str | None = None):
        super().__init__(model_setting=definition.model_setting, model_name=model_name)
        self.definition = definition

    def compose(self, params: InType) -> ComposedPrompt:
        return self.definition.compose(params)

    async def generate(self, prompt: ComposedPrompt) -> str:
        if not self.definition.structured:
            return await self.llm.generate_text(prompt.system_instruction, prompt.contents)
        return await self.llm.generate(
            prompt.system_instruction,
            prompt.contents,
            response_schema=schema_descriptor(self.definition.response_model),
            schema_name=self.definition.kind,
        )

    def validate(self, raw_text: str) -> OutType:
        return self.definition.validate(raw_text)
