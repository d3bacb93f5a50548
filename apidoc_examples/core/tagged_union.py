"""Tagged Unions: one encoder for closed sets of value kinds under four tagging policies.

Invariants:
    - UNTAGGED emits the bare payload; decoding infers the kind from the JSON type
    - EXTERNAL emits {"<tag>": payload}
    - ADJACENT emits {tag_field: "<tag>", content_field: payload}
    - INTERNAL emits the record's fields plus tag_field at the same level, so
      every variant of an INTERNAL union must carry a record payload
    - Booleans are never accepted as integers (JSON keeps them apart)
    - Serialized tags are unique within a union; Variant.rename changes only
      the serialized tag, never the kind used by callers

Design Decisions:
    - Records are pydantic models: model_dump(mode="json") to encode,
      model_validate() to decode, model_json_schema() to document
    - Untagged decoding picks the first declared variant that accepts the value,
      so round-trips hold only for mutually distinguishable payload types
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ValidationError

from apidoc_examples.core.errors import (
    InvalidPayloadError, UnknownVariantError, VariantDecodeError,
)


class TaggingPolicy(str, Enum):
    """How the variant kind is represented in JSON."""
    UNTAGGED = "untagged"
    EXTERNAL = "external"
    ADJACENT = "adjacent"
    INTERNAL = "internal"


_SCALAR_SCHEMAS: dict[type, dict[str, Any]] = {
    bool: {"type": "boolean"},
    int: {"type": "integer", "format": "int64"},
    float: {"type": "number", "format": "double"},
    str: {"type": "string"},
}


def _is_record_type(payload_type: type) -> bool:
    return isinstance(payload_type, type) and issubclass(payload_type, BaseModel)


def _scalar_matches(payload_type: type, value: Any) -> bool:
    if payload_type is bool:
        return isinstance(value, bool)
    if payload_type is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if payload_type is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if payload_type is str:
        return isinstance(value, str)
    return False


def payload_to_json(payload: Any) -> Any:
    """JSON-ready form of a payload: records become dicts, scalars pass through."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    if isinstance(payload, Mapping):
        return dict(payload)
    return payload


def encode_variant(
    kind: str,
    payload: Any,
    policy: TaggingPolicy | str,
    *,
    tag_field: str = "type",
    content_field: str = "value",
) -> Any:
    """Encode one (kind, payload) pair under a tagging policy.

    `kind` is the serialized tag. Raises InvalidPayloadError when an INTERNAL
    encoding gets a non-record payload or a record field named like the tag.
    """
    value = payload_to_json(payload)
    policy = TaggingPolicy(policy)
    if policy is TaggingPolicy.UNTAGGED:
        return value
    if policy is TaggingPolicy.EXTERNAL:
        return {kind: value}
    if policy is TaggingPolicy.ADJACENT:
        return {tag_field: kind, content_field: value}
    if not isinstance(value, dict):
        raise InvalidPayloadError(
            f"Variant '{kind}' needs a record payload to be internally tagged",
            kind,
        )
    if tag_field in value:
        raise InvalidPayloadError(
            f"Field '{tag_field}' of variant '{kind}' collides with the tag field",
            kind,
        )
    return {tag_field: kind, **value}


@dataclass(frozen=True)
class Variant:
    """One alternative of a union: a kind name and its payload type."""
    kind: str
    payload_type: type
    rename: str | None = None

    @property
    def tag(self) -> str:
        return self.rename or self.kind

    @property
    def is_record(self) -> bool:
        return _is_record_type(self.payload_type)

    def accepts(self, payload: Any) -> bool:
        if self.is_record:
            return isinstance(payload, self.payload_type)
        return _scalar_matches(self.payload_type, payload)

    def load(self, union: str, raw: Any) -> Any:
        """Rebuild a payload from its JSON form."""
        if self.is_record:
            try:
                return self.payload_type.model_validate(raw)
            except ValidationError as exc:
                raise VariantDecodeError(
                    union, f"invalid '{self.kind}' record: {exc.error_count()} error(s)",
                ) from exc
        if not _scalar_matches(self.payload_type, raw):
            raise VariantDecodeError(
                union, f"'{self.kind}' expects {self.payload_type.__name__}",
            )
        return raw

    def payload_schema(self) -> dict[str, Any]:
        if self.is_record:
            return self.payload_type.model_json_schema()
        return dict(_SCALAR_SCHEMAS[self.payload_type])


@dataclass(frozen=True)
class TaggedUnion:
    """A closed set of variants bound to one tagging policy."""
    name: str
    variants: tuple[Variant, ...]
    policy: TaggingPolicy = TaggingPolicy.EXTERNAL
    tag_field: str = "type"
    content_field: str = "value"
    description: str = ""

    def __post_init__(self):
        kinds = [v.kind for v in self.variants]
        tags = [v.tag for v in self.variants]
        if not self.variants:
            raise ValueError(f"Union '{self.name}' declares no variants")
        if len(set(kinds)) != len(kinds) or len(set(tags)) != len(tags):
            raise ValueError(f"Union '{self.name}' repeats a variant kind or tag")
        for variant in self.variants:
            if not variant.is_record and variant.payload_type not in _SCALAR_SCHEMAS:
                raise ValueError(
                    f"Variant '{variant.kind}' has unsupported payload type "
                    f"{variant.payload_type!r}",
                )
            if self.policy is TaggingPolicy.INTERNAL and not variant.is_record:
                raise ValueError(
                    f"Internally tagged union '{self.name}' needs record payloads "
                    f"('{variant.kind}' is {variant.payload_type.__name__})",
                )

    def variant(self, kind: str) -> Variant:
        for candidate in self.variants:
            if candidate.kind == kind:
                return candidate
        raise UnknownVariantError(self.name, kind)

    def variant_by_tag(self, tag: str) -> Variant:
        for candidate in self.variants:
            if candidate.tag == tag:
                return candidate
        raise UnknownVariantError(self.name, tag)

    # ─── Encoding ────────────────────────────────────────────────

    def encode(self, kind: str, payload: Any) -> Any:
        variant = self.variant(kind)
        if not variant.accepts(payload):
            raise InvalidPayloadError(
                f"Variant '{kind}' of '{self.name}' expects "
                f"{variant.payload_type.__name__}, got {type(payload).__name__}",
                kind,
            )
        return encode_variant(
            variant.tag, payload, self.policy,
            tag_field=self.tag_field, content_field=self.content_field,
        )

    def encode_all(self, values: Iterable[tuple[str, Any]]) -> list[Any]:
        return [self.encode(kind, payload) for kind, payload in values]

    # ─── Decoding ────────────────────────────────────────────────

    def decode(self, data: Any) -> tuple[str, Any]:
        """Recover (kind, payload) from an encoded value."""
        if self.policy is TaggingPolicy.UNTAGGED:
            return self._decode_untagged(data)
        if not isinstance(data, dict):
            raise VariantDecodeError(self.name, "expected a JSON object")
        if self.policy is TaggingPolicy.EXTERNAL:
            if len(data) != 1:
                raise VariantDecodeError(self.name, "expected exactly one key")
            (tag, raw), = data.items()
            variant = self.variant_by_tag(tag)
            return variant.kind, variant.load(self.name, raw)
        if self.tag_field not in data:
            raise VariantDecodeError(self.name, f"missing '{self.tag_field}' field")
        variant = self.variant_by_tag(data[self.tag_field])
        if self.policy is TaggingPolicy.ADJACENT:
            if self.content_field not in data:
                raise VariantDecodeError(
                    self.name, f"missing '{self.content_field}' field",
                )
            return variant.kind, variant.load(self.name, data[self.content_field])
        fields = {k: v for k, v in data.items() if k != self.tag_field}
        return variant.kind, variant.load(self.name, fields)

    def _decode_untagged(self, data: Any) -> tuple[str, Any]:
        for variant in self.variants:
            try:
                return variant.kind, variant.load(self.name, data)
            except VariantDecodeError:
                continue
        raise VariantDecodeError(
            self.name, f"no variant accepts {type(data).__name__} value",
        )

    # ─── Documentation ───────────────────────────────────────────

    def json_schema(self) -> dict[str, Any]:
        """JSON schema of one encoded value, derived from the variants."""
        schema: dict[str, Any] = {
            "title": self.name,
            "oneOf": [self._variant_schema(v) for v in self.variants],
        }
        if self.description:
            schema["description"] = self.description
        return schema

    def list_schema(self) -> dict[str, Any]:
        return {"type": "array", "items": self.json_schema()}

    def _variant_schema(self, variant: Variant) -> dict[str, Any]:
        payload = variant.payload_schema()
        if self.policy is TaggingPolicy.UNTAGGED:
            return payload
        if self.policy is TaggingPolicy.EXTERNAL:
            return {
                "type": "object",
                "title": variant.tag,
                "required": [variant.tag],
                "properties": {variant.tag: payload},
            }
        tag_schema = {"type": "string", "enum": [variant.tag]}
        if self.policy is TaggingPolicy.ADJACENT:
            return {
                "type": "object",
                "title": variant.tag,
                "required": [self.tag_field, self.content_field],
                "properties": {
                    self.tag_field: tag_schema,
                    self.content_field: payload,
                },
            }
        return {
            "title": variant.tag,
            "allOf": [
                payload,
                {
                    "type": "object",
                    "required": [self.tag_field],
                    "properties": {self.tag_field: tag_schema},
                },
            ],
        }
