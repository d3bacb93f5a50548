"""Enums: the same closed set of values rendered under each tagging policy.

Invariants:
    - Response bodies and their documented schemas come from the same
      TaggedUnion declarations
    - Every request builds a fresh body from the constants below
"""

from pydantic import BaseModel

from apidoc_examples.core.openapi_document import object_schema
from apidoc_examples.core.route_tree import Operation, RouteTable
from apidoc_examples.core.tagged_union import TaggedUnion, TaggingPolicy, Variant


class FooRecord(BaseModel):
    value: int


class BarRecord(BaseModel):
    value: int


# ─── Simple JS types (enum-of-js-simple-types) ───────────────────

_SIMPLE_VARIANTS = (
    Variant("Int", int),
    Variant("Boolean", bool),
    Variant("String", str),
)

TAGGED_VALUE = TaggedUnion(
    "TaggedValue", _SIMPLE_VARIANTS, TaggingPolicy.EXTERNAL,
    description="A value as a single-key object naming its kind.",
)
UNTAGGED_VALUE = TaggedUnion(
    "UntaggedValue", _SIMPLE_VARIANTS, TaggingPolicy.UNTAGGED,
    description="A value as a bare JSON number, boolean or string.",
)

SIMPLE_VALUES = (("Int", 123), ("Boolean", True), ("String", "Hello"))

# ─── Enum mapping (four policies side by side) ───────────────────

_MAPPING_VARIANTS = (
    Variant("Int", int),
    Variant("Bool", bool),
    Variant("Str", str),
)

UNTAGGED_ENUM = TaggedUnion(
    "UntaggedEnum", _MAPPING_VARIANTS, TaggingPolicy.UNTAGGED,
    description="The kind is implied by the JSON type of the value.",
)
TAGGED_ENUM = TaggedUnion("TaggedEnum", _MAPPING_VARIANTS, TaggingPolicy.EXTERNAL)
DISCRIMINATOR_ENUM = TaggedUnion(
    "DiscriminatorEnum",
    (
        Variant("Int", int, rename="number"),
        Variant("Bool", bool, rename="Boolean"),
        Variant("Str", str, rename="String"),
    ),
    TaggingPolicy.ADJACENT,
    tag_field="type",
    content_field="value",
    description="A map with a `type` tag and the payload under `value`.",
)
DISCRIMINATOR_ADD_TYPE_FIELD_ENUM = TaggedUnion(
    "DiscriminatorAddTypeFieldEnum",
    (Variant("Foo", FooRecord), Variant("Bar", BarRecord)),
    TaggingPolicy.INTERNAL,
    tag_field="_tag",
    description="The record's own fields plus a `_tag` field.",
)

MAPPING_VALUES = (("Int", 123), ("Bool", False), ("Str", "foo"))
RECORD_VALUES = (("Foo", FooRecord(value=1)), ("Bar", BarRecord(value=2)))


def simple_types_table() -> RouteTable:
    """GET /enums-tagged and GET /enums-untagged."""

    async def get_enums_tagged():
        """Return values with the default "tagged" serialization: the kind is the key."""
        return {"values": TAGGED_VALUE.encode_all(SIMPLE_VALUES)}

    async def get_enums_untagged():
        """Return values as bare JSON primitives, without their kinds."""
        return {"values": UNTAGGED_VALUE.encode_all(SIMPLE_VALUES)}

    return (
        RouteTable(
            description="Enum values as JavaScript simple types.",
            tags=("enums",),
        )
        .route(Operation(
            path="/enums-tagged",
            endpoint=get_enums_tagged,
            summary="Tagged enum values",
            response_description="Enums found",
            response_schema=object_schema(
                "EnumsTaggedResponse", {"values": TAGGED_VALUE.list_schema()},
            ),
        ))
        .route(Operation(
            path="/enums-untagged",
            endpoint=get_enums_untagged,
            summary="Untagged enum values",
            response_description="Enums found",
            response_schema=object_schema(
                "EnumsUntaggedResponse", {"values": UNTAGGED_VALUE.list_schema()},
            ),
        ))
    )


def enum_mapping_table() -> RouteTable:
    """GET /enums with one array per tagging policy."""

    async def get_enums():
        """Return the same values under each tagging policy."""
        return {
            "untagged": UNTAGGED_ENUM.encode_all(MAPPING_VALUES),
            "tagged": TAGGED_ENUM.encode_all(MAPPING_VALUES),
            "discriminator": DISCRIMINATOR_ENUM.encode_all(MAPPING_VALUES),
            "discriminator_add_type_field":
                DISCRIMINATOR_ADD_TYPE_FIELD_ENUM.encode_all(RECORD_VALUES),
        }

    return RouteTable(
        description="Enum values under every tagging policy.",
        tags=("enums",),
    ).route(Operation(
        path="/enums",
        endpoint=get_enums,
        summary="Enum values under every tagging policy",
        response_description="Enum values retrieved",
        response_schema=object_schema("EnumResponse", {
            "untagged": UNTAGGED_ENUM.list_schema(),
            "tagged": TAGGED_ENUM.list_schema(),
            "discriminator": DISCRIMINATOR_ENUM.list_schema(),
            "discriminator_add_type_field":
                DISCRIMINATOR_ADD_TYPE_FIELD_ENUM.list_schema(),
        }),
    ))
