"""
LLM-based extraction of the required Dutch invoice fields.

The OCR text is sent to an OpenAI-compatible chat completions endpoint with a
system prompt generated from FIELD_REGISTRY. The reply is parsed and validated
against ExtractedFields; a malformed reply is retried once before giving up
with a user-facing error.
"""

import json
import re

from loguru import logger
from openai import AsyncOpenAI
from pydantic import ValidationError

from ..core.config import settings
from ..core.errors import FieldExtractionError, ReplyFormatError
from ..core.retry import call_with_retry
from ..models.fields import FIELD_REGISTRY, ExtractedFields

MAX_ATTEMPTS = 2
TIMEOUT_MESSAGE = "Analyse duurt te lang. Probeer het opnieuw."

_FENCE_START = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```\s*$")
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

_SIMPLE_SHAPE = '{ "found": true/false, "value": "waarde indien gevonden" }'
_ADDRESS_SHAPE = (
    '{ "found": true/false, "street": "straat", "houseNumber": "huisnummer", '
    '"postalCode": "postcode", "city": "plaats", "complete": true/false }'
)


def build_system_prompt() -> str:
    """Describe every registered field and the exact JSON reply shape."""
    descriptions = "\n".join(
        f"{i}. {spec.key} - {spec.description}" for i, spec in enumerate(FIELD_REGISTRY, start=1)
    )
    shape = ",\n".join(
        f'  "{spec.key}": {_ADDRESS_SHAPE if spec.kind == "address" else _SIMPLE_SHAPE}'
        for spec in FIELD_REGISTRY
    )
    return (
        "Je bent een Nederlandse factuur-analyzer. Je taak is om te controleren of de "
        "wettelijk verplichte velden aanwezig zijn in de factuur tekst.\n\n"
        "Analyseer de gegeven factuur tekst en bepaal of de volgende velden aanwezig zijn:\n"
        f"{descriptions}\n\n"
        "Geef je antwoord als JSON in exact dit formaat:\n"
        f"{{\n{shape}\n}}\n\n"
        "Voor adressen: zet \"complete\" alleen op true als straat, huisnummer, postcode "
        "en plaats alle vier aanwezig zijn. Een postbus of een gedeeltelijk adres is niet "
        "compleet. Laat ontbrekende onderdelen weg.\n"
        "Laat \"value\" weg als een veld niet gevonden is.\n\n"
        "Wees streng: markeer een veld alleen als \"found\": true als je er zeker van bent "
        "dat het veld daadwerkelijk aanwezig is. Antwoord uitsluitend met JSON."
    )


SYSTEM_PROMPT = build_system_prompt()


def strip_code_fence(reply: str) -> str:
    """Remove a surrounding ``` or ```json fence, if any."""
    return _FENCE_END.sub("", _FENCE_START.sub("", reply))


def parse_reply(reply: str) -> ExtractedFields:
    """
    Parse an LLM reply into ExtractedFields.

    Raises:
        ReplyFormatError: if the reply holds no JSON object, the JSON is
            invalid, or it does not match the field schema
    """
    match = _JSON_OBJECT.search(strip_code_fence(reply or ""))
    if not match:
        raise ReplyFormatError("No JSON object in reply")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ReplyFormatError(f"Invalid JSON in reply: {e}") from e

    try:
        return ExtractedFields.model_validate(data)
    except ValidationError as e:
        raise ReplyFormatError(f"Reply does not match field schema: {e.error_count()} errors") from e


class FieldExtractionClient:
    """Sends invoice text to the LLM and returns validated ExtractedFields."""

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        timeout_ms: int | None = None,
    ):
        self._client = client
        self.model = model or settings.llm_model
        self.timeout_ms = timeout_ms or settings.llm_timeout_ms

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.llm_api_key:
                raise FieldExtractionError("Factuuranalyse is niet geconfigureerd")
            self._client = AsyncOpenAI(api_key=settings.llm_api_key, base_url=settings.llm_base_url)
        return self._client

    async def _request_reply(self, text: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=2048,
            temperature=0,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f"Analyseer deze factuur tekst en geef aan welke verplichte velden aanwezig zijn:\n\n{text}",
                },
            ],
        )
        return response.choices[0].message.content or ""

    async def extract(self, text: str) -> ExtractedFields:
        """
        Extract the registered fields from invoice text.

        Raises:
            FieldExtractionError: both attempts returned an unusable reply
            OperationTimeoutError: an attempt exceeded the timeout
        """
        logger.info("Requesting field extraction", model=self.model, text_length=len(text))
        try:
            return await call_with_retry(
                lambda: self._request_reply(text),
                parse_reply,
                max_attempts=MAX_ATTEMPTS,
                timeout_ms=self.timeout_ms,
                timeout_message=TIMEOUT_MESSAGE,
            )
        except ReplyFormatError as e:
            logger.error("Field extraction failed after retry", attempts=MAX_ATTEMPTS, error=str(e))
            raise FieldExtractionError() from e
