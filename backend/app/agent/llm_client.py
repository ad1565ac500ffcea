import json
import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from app.agent.exceptions import ConfigurationError, GENERATION_UNCONFIGURED_MESSAGE, TransportError
from app.core.config import settings

logger = logging.getLogger(__name__)

# Keys of pydantic's JSON schema that providers either reject or ignore.
_DROPPED_SCHEMA_KEYS = {"title", "$defs", "default"}


def _inline_refs(node: Any, defs: dict[str, Any]) -> Any:
    if isinstance(node, list):
        return [_inline_refs(item, defs) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str):
        target = defs.get(ref.rsplit("/", 1)[-1], {})
        merged = {**target, **{k: v for k, v in node.items() if k != "$ref"}}
        return _inline_refs(merged, defs)

    out: dict[str, Any] = {}
    for key, value in node.items():
        if key in _DROPPED_SCHEMA_KEYS:
            continue
        if key == "properties" and isinstance(value, dict):
            # Property names are field names, not schema keywords ("title" is a real field).
            out[key] = {name: _inline_refs(prop, defs) for name, prop in value.items()}
        else:
            out[key] = _inline_refs(value, defs)
    return out


def schema_descriptor(response_schema: type[BaseModel]) -> dict[str, Any]:
    """
    Render a pydantic model as a self-contained schema descriptor.
    Nested models are inlined so providers without `$ref` support see plain
    object/array/string/integer/enum nodes with their `required` lists.
    """
    raw = response_schema.model_json_schema()
    return _inline_refs(raw, raw.get("$defs", {}))


class LLMClient:
    """Schema-constrained generation over any OpenAI-compatible chat completions API."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT

        # Use LLM_API_KEY or fallback to GEMINI_API_KEY if they only provided the original one
        resolved_api_key = api_key or settings.LLM_API_KEY or settings.GEMINI_API_KEY
        resolved_base_url = base_url or settings.LLM_BASE_URL

        self.client: AsyncOpenAI | None = None
        if resolved_api_key:
            # Failed calls surface immediately; the SDK must not retry on its own.
            self.client = AsyncOpenAI(
                base_url=resolved_base_url,
                api_key=resolved_api_key,
                max_retries=0,
                timeout=settings.LLM_TIMEOUT_SECONDS,
            )

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def _chat_completion_kwargs(self, *, temperature: float | None) -> dict:
        """Build provider/model-compatible kwargs for chat completions."""
        model_name = (self.model_name or "").lower()
        # GPT-5 family rejects non-default temperature values in some OpenAI endpoints.
        if model_name.startswith("gpt-5"):
            return {}
        if temperature is None:
            return {}
        return {"temperature": temperature}

    @staticmethod
    def _response_format(schema: dict[str, Any], schema_name: str) -> dict | None:
        mode = settings.LLM_RESPONSE_FORMAT
        if mode == "json_schema":
            return {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema},
            }
        if mode == "json_object":
            return {"type": "json_object"}
        return None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        response_schema: dict[str, Any] | None = None,
        schema_name: str = "response",
        temperature: float | None = 0.2,
    ) -> str:
        """
        Issue exactly one chat completion and return the raw response text.
        When a schema descriptor is given, it is sent as the response format and
        injected into the system prompt. Parsing is left to the caller.
        """
        if self.client is None:
            raise ConfigurationError(GENERATION_UNCONFIGURED_MESSAGE)

        request_kwargs: dict[str, Any] = self._chat_completion_kwargs(temperature=temperature)
        system_content = system_prompt
        if response_schema is not None:
            system_content = (
                f"{system_prompt}\n\n"
                "CRITICAL: You must respond in ONLY valid JSON format matching the following JSON Schema. "
                "Do not include markdown code blocks (```json) or any conversational text around the JSON.\n\n"
                f"EXPECTED SCHEMA:\n{json.dumps(response_schema)}"
            )
            response_format = self._response_format(response_schema, schema_name)
            if response_format is not None:
                request_kwargs["response_format"] = response_format

        logger.info("Issuing %s request to model %s...", schema_name, self.model_name)
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": system_content},
                    {"role": "user", "content": user_prompt},
                ],
                **request_kwargs,
            )
        except OpenAIError as e:
            logger.error("Error calling LLM provider %s: %s", self.model_name, e)
            raise TransportError(str(e)) from e

        if not getattr(response, "choices", None):
            logger.error("Received no choices from %s: %s", self.model_name, response)
            raise TransportError(
                f"Provider {self.model_name} returned no output. Try again or change model."
            )

        logger.info("Received %s response from %s.", schema_name, self.model_name)
        return response.choices[0].message.content or ""

    async def generate_text(
        self, system_prompt: str, user_prompt: str, *, temperature: float = 0.7
    ) -> str:
        """Generate free-form text with no output schema."""
        return await self.generate(
            system_prompt,
            user_prompt,
            schema_name="text",
            temperature=temperature,
        )
