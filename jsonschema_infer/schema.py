import copy

import attr

from .node import (ARRAY, BOOLEAN, INTEGER, NUMBER, OBJECT, STRING)
from .formats import DATE_TIME


# JSON schema follows:
# https://json-schema.org/
DRAFT_06 = "http://json-schema.org/draft-06/schema#"
DRAFT_07 = "http://json-schema.org/draft-07/schema#"
SCHEMA_VERSIONS = {
    "draft-06": DRAFT_06,
    "draft-07": DRAFT_07,
}

# Predefined types
DATETIME = "datetime"
PREDEFINED_TYPES = (DATETIME, STRING, BOOLEAN, NUMBER, INTEGER, ARRAY, OBJECT)


@attr.s
class Schema(object):
    """
    Output document. Unset fields are left out of the serialized form.
    """
    schema = attr.ib(default=None)
    type = attr.ib(default=None)
    properties = attr.ib(default=None)
    items = attr.ib(default=None)
    required = attr.ib(default=None)
    format = attr.ib(default=None)
    const = attr.ib(default=None)
    example = attr.ib(default=None)
    additional_properties = attr.ib(default=None)

    def to_dict(self):
        d = dict()
        if self.schema:
            d["$schema"] = self.schema
        if self.type is not None:
            d["type"] = copy.copy(self.type)
        if self.properties:
            d["properties"] = dict(
                (key, self.properties[key].to_dict())
                for key in sorted(self.properties.keys()))
        if self.items is not None:
            d["items"] = self.items.to_dict()
        if self.required:
            d["required"] = list(self.required)
        if self.format:
            d["format"] = self.format
        if self.const is not None:
            d["const"] = self.const
        if self.example is not None:
            d["example"] = copy.deepcopy(self.example)
        if self.additional_properties is not None:
            d["additionalProperties"] = copy.deepcopy(
                self.additional_properties)
        return d

    @classmethod
    def from_dict(cls, d):
        properties = d.get("properties")
        if properties is not None:
            properties = dict((key, cls.from_dict(value))
                              for key, value in properties.items())
        items = d.get("items")
        if items is not None:
            items = cls.from_dict(items)
        required = d.get("required")
        return cls(
            schema=d.get("$schema"),
            type=copy.copy(d.get("type")),
            properties=properties,
            items=items,
            required=list(required) if isinstance(required, list) and required
            else None,
            format=d.get("format"),
            const=d.get("const"),
            example=copy.deepcopy(d.get("example")),
            additional_properties=copy.deepcopy(d.get("additionalProperties")),
        )


def _assemble_predefined(node):
    override = node.predefined_override
    if override == DATETIME:
        return Schema(type=STRING, format=DATE_TIME)
    if override == ARRAY:
        schema = Schema(type=ARRAY)
        if node.array_item is not None:
            schema.items = assemble(node.array_item)
        return schema
    if override == OBJECT:
        schema = Schema(type=OBJECT)
        if node.object_properties:
            schema.properties = dict(
                (key, assemble(child))
                for key, child in node.object_properties.items())
        return schema
    return Schema(type=override)


def assemble(node, version=None):
    """
    Build the output document for the tree rooted at `node`.

    The result shares nothing with the tree, so it stays valid while more
    samples are observed.
    """
    if node.predefined_override:
        schema = _assemble_predefined(node)
        schema.schema = version
        return schema

    schema = Schema(schema=version)
    primary_type = node.primary_type

    types = node.observed_types
    if len(node.type_counts) > 1:
        if len(types) == 1:
            schema.type = types[0]
        elif types:
            schema.type = types
    else:
        schema.type = primary_type

    if node.has_const:
        schema.const = node.const_value

    if node.example_value is not None:
        schema.example = copy.deepcopy(node.example_value)

    if primary_type == STRING:
        schema.format = node.format
    elif primary_type == ARRAY:
        if node.array_item is not None:
            schema.items = assemble(node.array_item)
    elif primary_type == OBJECT:
        if node.object_properties:
            schema.properties = dict(
                (key, assemble(child))
                for key, child in node.object_properties.items())
            schema.required = node.required or None

    return schema
