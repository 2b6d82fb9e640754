"""Pluggable payload transformation between AgentRequest/AgentResponse and a service schema.

An encoder turns the request text into whatever the destination service
expects; a decoder turns the raw service response back into an AgentResponse.
Encoders and decoders are supplied together or not at all.
"""

import math
from collections.abc import Callable, Mapping
from typing import Any

from ..errors import ConfigError, DecodingError, EncodingError
from .contracts import AgentContext, AgentIdentity, AgentResponse

Encoder = Callable[[AgentIdentity, str, AgentContext], Any]
Decoder = Callable[[Mapping[str, Any]], AgentResponse]

PAYLOAD_TYPES: tuple[type, ...] = (str, int, float, bool, dict, list)
MAX_PAYLOAD_DEPTH = 100


def validate_payload(value: Any, accepted: tuple[type, ...] = PAYLOAD_TYPES) -> None:
    """Raise EncodingError unless value is a JSON-representable payload of an accepted top-level type."""

    if value is None or not isinstance(value, PAYLOAD_TYPES):
        raise EncodingError(
            f"payload must be one of string, number, boolean, object or array, got {type(value).__name__}"
        )
    if not isinstance(value, accepted):
        names = ", ".join(t.__name__ for t in accepted)
        raise EncodingError(f"payload of type {type(value).__name__} not accepted here (expected {names})")
    _check_json(value, "payload", set(), 0)


def _check_json(value: Any, path: str, active: set[int], depth: int) -> None:
    if depth > MAX_PAYLOAD_DEPTH:
        raise EncodingError(f"{path}: nested deeper than {MAX_PAYLOAD_DEPTH} levels")
    if value is None or isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"{path}: non-finite number {value!r}")
        return
    if isinstance(value, (dict, list)):
        if id(value) in active:
            raise EncodingError(f"{path}: payload contains itself")
        active.add(id(value))
        if isinstance(value, dict):
            for key, item in value.items():
                if not isinstance(key, str):
                    raise EncodingError(f"{path}: object key {key!r} is not a string")
                _check_json(item, f"{path}.{key}", active, depth + 1)
        else:
            for index, item in enumerate(value):
                _check_json(item, f"{path}[{index}]", active, depth + 1)
        active.discard(id(value))
        return
    raise EncodingError(f"{path}: {type(value).__name__} is not JSON-representable")


def decode_text_field(raw: Any, text_field: str) -> AgentResponse:
    """Take raw[text_field] verbatim as the response text; other keys become metadata."""

    if not isinstance(raw, Mapping):
        raise DecodingError(f"expected a mapping response, got {type(raw).__name__}")
    if text_field not in raw:
        raise DecodingError(f"response is missing required field '{text_field}'")
    text = raw[text_field]
    if not isinstance(text, str):
        raise DecodingError(f"field '{text_field}' must be a string, got {type(text).__name__}")
    metadata = {key: value for key, value in raw.items() if key != text_field}
    return AgentResponse(text=text, metadata=metadata)


class PayloadCodec:
    """Minimal interface implemented by all encoder/decoder pairs."""

    def encode(self, identity: AgentIdentity, text: str, context: AgentContext) -> Any:
        raise NotImplementedError

    def decode(self, raw: Mapping[str, Any]) -> AgentResponse:
        raise NotImplementedError


class PassthroughCodec(PayloadCodec):
    """Sends the request text unchanged and reads one top-level text field back."""

    def __init__(self, text_field: str = "text") -> None:
        self.text_field = text_field

    def encode(self, identity: AgentIdentity, text: str, context: AgentContext) -> Any:
        return text

    def decode(self, raw: Mapping[str, Any]) -> AgentResponse:
        return decode_text_field(raw, self.text_field)


class FunctionCodec(PayloadCodec):
    """Codec built from a user-supplied encoder and decoder function."""

    def __init__(self, encoder: Encoder, decoder: Decoder) -> None:
        if not callable(encoder) or not callable(decoder):
            raise ConfigError("encoder and decoder must both be callables")
        self._encoder = encoder
        self._decoder = decoder

    def encode(self, identity: AgentIdentity, text: str, context: AgentContext) -> Any:
        return self._encoder(identity, text, context)

    def decode(self, raw: Mapping[str, Any]) -> AgentResponse:
        try:
            response = self._decoder(raw)
        except (LookupError, TypeError, ValueError, AttributeError) as exc:
            raise DecodingError(f"decoder rejected response: {exc!r}") from exc
        if not isinstance(response, AgentResponse):
            raise DecodingError(f"decoder must return AgentResponse, got {type(response).__name__}")
        return response


def build_codec(
    encoder: Encoder | None = None,
    decoder: Decoder | None = None,
    default: PayloadCodec | None = None,
) -> PayloadCodec:
    """Return a FunctionCodec for a full pair, the default for neither, and fail for half a pair."""

    if encoder is None and decoder is None:
        return default if default is not None else PassthroughCodec()
    if encoder is None or decoder is None:
        missing = "decoder" if decoder is None else "encoder"
        raise ConfigError(f"custom encoder and decoder must be supplied together ({missing} missing)")
    return FunctionCodec(encoder, decoder)
