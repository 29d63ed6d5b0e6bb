from typing import NamedTuple

from loguru import logger
from pydantic import ValidationError

from promptgen.errors import SchemaViolation
from promptgen.pipeline.envelopes import SchemaId, StageEnvelope, envelope_model


class DecodedEnvelope(NamedTuple):
    envelope: StageEnvelope
    text: str


def extract_json(raw: str) -> str:
    """Strip surrounding whitespace and a single Markdown code fence, if any."""
    s = (raw or "").strip()
    if s.startswith("```") and s.endswith("```") and len(s) >= 6:
        s = s[3:-3].strip()
        if s[:4].lower() == "json":
            s = s[4:].strip()
    return s


def decode(raw: str, schema_id: SchemaId) -> DecodedEnvelope:
    """Validate model output against the envelope registered for ``schema_id``.

    Unknown fields, missing fields, bad enum values and type mismatches all
    raise SchemaViolation carrying the raw text; nothing is defaulted.
    """
    model = envelope_model(schema_id)
    text = extract_json(raw)
    try:
        envelope = model.model_validate_json(text, strict=True)
    except ValidationError as e:
        logger.warning("envelope rejected", schema=str(schema_id), errors=e.error_count())
        raise SchemaViolation(model.__name__, raw, str(e)) from e

    if envelope.task_state == "needs_clarification" and not envelope.assumptions:
        logger.warning("needs_clarification without assumptions", schema=str(schema_id))
    if envelope.schema_version != schema_id.version:
        logger.warning("schema_version mismatch", expected=schema_id.version, got=envelope.schema_version)
    return DecodedEnvelope(envelope, text)


def encode(envelope: StageEnvelope) -> str:
    return envelope.model_dump_json()
