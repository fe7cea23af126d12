"""
Tests for the schema analyzer: registries, unions, references and violations.
"""

from __future__ import annotations

import json
import unittest
from pathlib import Path

import pytest

from json_schema_to_ir.pipeline import ParserConfig, SchemaParseError, UnsupportedFeatureError, parse_schema
from json_schema_to_ir.pipeline.analyzer import (
    CIRCULAR_REFERENCE,
    DUPLICATE_NAME,
    MISCONFIGURED_DISCRIMINATOR,
    UNRESOLVED_REFERENCE,
    UNSUPPORTED_FEATURE,
    ComplexValue,
    Primitive,
    PrimitiveValue,
    Severity,
    UnionKind,
)
from json_schema_to_ir.validation_rules import (
    ArrayMinItemsRule,
    ArrayUniqueItemsRule,
    NumberGTERule,
    NumberLTERule,
    ObjectMinPropertiesRule,
    StringFormatRule,
    StringMaxLengthRule,
    StringMinLengthRule,
)

TEST_DATA = Path(__file__).parent / "test_data"


def parse(schema: dict, **config):
    return parse_schema(json.dumps(schema), "test.json", ParserConfig.from_dict(config))


def find(entries, name):
    return next(e for e in entries if e.name.value == name)


def prop(type_def, name):
    return next(p for p in type_def.properties if p.name.value == name)


def codes(result):
    return [v.code for v in result.violations]


def complex_references(service):
    """All names referenced by complex values in properties and union members."""
    names = []
    for type_def in service.types:
        names.extend(p.value.type_name.value for p in type_def.properties if p.value.is_complex)
    for union in service.unions:
        names.extend(m.type_name.value for m in union.members if m.is_complex)
    return names


class TestObjects(unittest.TestCase):
    def test_widget_definition(self):
        result = parse(
            {
                "definitions": {
                    "Widget": {
                        "type": "object",
                        "properties": {"id": {"type": "string"}},
                        "required": ["id"],
                    }
                }
            }
        )
        self.assertEqual(result.violations, [])
        widget = find(result.service.types, "Widget")
        self.assertEqual(len(widget.properties), 1)

        id_prop = widget.properties[0]
        self.assertEqual(id_prop.name.value, "id")
        self.assertIsInstance(id_prop.value, PrimitiveValue)
        self.assertEqual(id_prop.value.type_name, Primitive.STRING)
        self.assertFalse(id_prop.value.is_optional)
        self.assertEqual(id_prop.value.rules, [])
        self.assertEqual(widget.rules, [])

    def test_string_length_property_rules(self):
        result = parse(
            {
                "type": "object",
                "properties": {"code": {"type": "string", "minLength": 1, "maxLength": 10}},
            }
        )
        rules = result.service.types[0].properties[0].value.rules
        self.assertEqual(len(rules), 2)
        self.assertEqual({type(r) for r in rules}, {StringMinLengthRule, StringMaxLengthRule})
        self.assertEqual(sorted(r.length for r in rules), [1, 10])

    def test_optional_properties(self):
        result = parse(
            {
                "type": "object",
                "required": ["a"],
                "properties": {"a": {"type": "integer"}, "b": {"type": "integer"}},
            }
        )
        root = result.service.types[0]
        self.assertFalse(prop(root, "a").value.is_optional)
        self.assertTrue(prop(root, "b").value.is_optional)

    def test_dollar_keys_are_skipped(self):
        result = parse({"type": "object", "properties": {"$schema": {"type": "string"}, "x": {"type": "string"}}})
        self.assertEqual([p.name.value for p in result.service.types[0].properties], ["x"])

    def test_nested_objects_are_named_by_position(self):
        result = parse(
            {
                "title": "Outer",
                "type": "object",
                "properties": {"inner": {"type": "object", "properties": {"deep": {"type": "object"}}}},
            }
        )
        self.assertEqual([t.name.value for t in result.service.types], ["Outer", "Outer_inner", "Outer_inner_deep"])
        self.assertEqual(prop(result.service.types[0], "inner").value.type_name.value, "Outer_inner")

    def test_object_reached_twice_is_registered_once(self):
        result = parse(
            {
                "type": "object",
                "properties": {
                    "a": {"$ref": "#/definitions/Thing"},
                    "b": {"$ref": "#/definitions/Thing"},
                },
                "definitions": {"Thing": {"type": "object"}},
            }
        )
        self.assertEqual([t.name.value for t in result.service.types].count("Thing"), 1)
        self.assertEqual(result.violations, [])

    def test_recursive_object_terminates(self):
        result = parse(
            {
                "definitions": {
                    "Node": {
                        "type": "object",
                        "properties": {
                            "children": {"type": "array", "items": {"$ref": "#/definitions/Node"}},
                            "parent": {"$ref": "#/definitions/Node"},
                        },
                    }
                }
            }
        )
        node = find(result.service.types, "Node")
        children = prop(node, "children").value
        self.assertIsInstance(children, ComplexValue)
        self.assertTrue(children.is_array)
        self.assertEqual(children.type_name.value, "Node")
        self.assertEqual(result.violations, [])

    def test_object_rules(self):
        result = parse({"type": "object", "minProperties": 2})
        self.assertEqual([type(r) for r in result.service.types[0].rules], [ObjectMinPropertiesRule])

    def test_description_paragraphs(self):
        result = parse({"type": "object", "description": "First.\n\nSecond."})
        self.assertEqual([d.value for d in result.service.types[0].description], ["First.", "Second."])

    def test_constant(self):
        result = parse({"type": "object", "properties": {"kind": {"type": "string", "const": "cat"}}})
        constant = result.service.types[0].properties[0].value.constant
        self.assertEqual((constant.kind, constant.value), ("StringLiteral", "cat"))


class TestReferences(unittest.TestCase):
    def test_dangling_ref(self):
        result = parse({"type": "object", "properties": {"a": {"$ref": "#/definitions/Nope"}}})
        self.assertEqual(len(result.violations), 1)
        violation = result.violations[0]
        self.assertEqual(violation.code, UNRESOLVED_REFERENCE)
        self.assertEqual(violation.severity, Severity.ERROR)
        self.assertEqual(violation.source_path, "test.json")
        self.assertIsNotNone(violation.range)

        value = result.service.types[0].properties[0].value
        self.assertIsInstance(value, PrimitiveValue)
        self.assertTrue(value.is_untyped)

    def test_dangling_ref_reached_twice_reports_once(self):
        result = parse(
            {
                "type": "object",
                "properties": {"a": {"$ref": "#/definitions/Alias"}, "b": {"$ref": "#/definitions/Alias"}},
                "definitions": {"Alias": {"$ref": "#/definitions/Nope"}},
            }
        )
        self.assertEqual(codes(result), [UNRESOLVED_REFERENCE])

    def test_cross_document_ref_is_unresolved(self):
        result = parse({"type": "object", "properties": {"a": {"$ref": "other.json#/definitions/A"}}})
        self.assertEqual(codes(result), [UNRESOLVED_REFERENCE])

    def test_ref_cycle_through_refs(self):
        result = parse({"definitions": {"A": {"$ref": "#/definitions/B"}, "B": {"$ref": "#/definitions/A"}}})
        self.assertEqual(codes(result), [CIRCULAR_REFERENCE, CIRCULAR_REFERENCE])
        self.assertTrue(all(v.severity == Severity.ERROR for v in result.violations))

    def test_ref_cycle_through_array(self):
        result = parse({"definitions": {"List": {"type": "array", "items": {"$ref": "#/definitions/List"}}}})
        self.assertEqual(codes(result), [CIRCULAR_REFERENCE])

    def test_ref_cycle_aborts_when_strict(self):
        with self.assertRaises(SchemaParseError):
            parse(
                {"definitions": {"A": {"$ref": "#/definitions/B"}, "B": {"$ref": "#/definitions/A"}}},
                strict_reference_cycles=True,
            )

    def test_ref_to_primitive_inherits_description_and_rules(self):
        result = parse(
            {
                "type": "object",
                "properties": {"name": {"$ref": "#/definitions/Name"}},
                "definitions": {"Name": {"type": "string", "description": "A name.", "minLength": 1}},
            }
        )
        name = result.service.types[0].properties[0]
        self.assertEqual([d.value for d in name.description], ["A name."])
        self.assertEqual(name.value.type_name, Primitive.STRING)
        self.assertEqual([type(r) for r in name.value.rules], [StringMinLengthRule])

    def test_ref_to_object_does_not_inherit_description(self):
        result = parse(
            {
                "type": "object",
                "properties": {"thing": {"$ref": "#/definitions/Thing"}},
                "definitions": {"Thing": {"type": "object", "description": "A thing."}},
            }
        )
        root = find(result.service.types, "test")
        self.assertIsNone(prop(root, "thing").description)

    def test_ref_keeps_target_name(self):
        result = parse(
            {
                "type": "object",
                "properties": {"thing": {"$ref": "#/definitions/Thing", "title": "Ignored"}},
                "definitions": {"Thing": {"type": "object"}},
            }
        )
        names = [t.name.value for t in result.service.types]
        self.assertIn("Thing", names)
        self.assertNotIn("Ignored", names)


class TestUnions(unittest.TestCase):
    def shapes(self, members, discriminator=None):
        union = {"oneOf": members}
        if discriminator is not None:
            union["discriminator"] = discriminator
        return parse(
            {
                "definitions": {
                    "Shape": union,
                    "Circle": {"type": "object", "properties": {"kind": {"type": "string"}}},
                    "Square": {"type": "object", "properties": {"kind": {"type": "string"}}},
                }
            }
        )

    def test_discriminated_union(self):
        result = self.shapes(
            [{"$ref": "#/definitions/Circle"}, {"$ref": "#/definitions/Square"}],
            {"propertyName": "kind"},
        )
        self.assertEqual(result.violations, [])
        shape = find(result.service.unions, "Shape")
        self.assertEqual(shape.kind, UnionKind.DISCRIMINATED)
        self.assertEqual(shape.discriminator.value, "kind")
        self.assertEqual([m.type_name.value for m in shape.members], ["Circle", "Square"])

    def test_discriminated_union_rejects_primitive_member(self):
        result = self.shapes(
            [{"$ref": "#/definitions/Circle"}, {"type": "string"}],
            {"propertyName": "kind"},
        )
        self.assertEqual(codes(result), [MISCONFIGURED_DISCRIMINATOR])
        self.assertEqual(result.violations[0].severity, Severity.ERROR)
        shape = find(result.service.unions, "Shape")
        self.assertEqual([m.type_name.value for m in shape.members], ["Circle"])

    def test_discriminator_mapping_is_reported(self):
        result = self.shapes(
            [{"$ref": "#/definitions/Circle"}],
            {"propertyName": "kind", "mapping": {"circle": "#/definitions/Circle"}},
        )
        self.assertEqual(codes(result), [UNSUPPORTED_FEATURE])
        self.assertEqual(result.violations[0].severity, Severity.INFO)

    def test_complex_union(self):
        result = self.shapes([{"$ref": "#/definitions/Circle"}, {"$ref": "#/definitions/Square"}])
        shape = find(result.service.unions, "Shape")
        self.assertEqual(shape.kind, UnionKind.COMPLEX)
        self.assertIsNone(shape.discriminator)

    def test_primitive_union(self):
        result = self.shapes([{"type": "string"}, {"type": "integer", "format": "int64"}])
        shape = find(result.service.unions, "Shape")
        self.assertEqual(shape.kind, UnionKind.PRIMITIVE)
        self.assertEqual([m.type_name for m in shape.members], [Primitive.STRING, Primitive.LONG])

    def test_mixed_union_excludes_other_kind(self):
        result = self.shapes([{"type": "string"}, {"$ref": "#/definitions/Circle"}, {"type": "boolean"}])
        shape = find(result.service.unions, "Shape")
        self.assertEqual(shape.kind, UnionKind.PRIMITIVE)
        self.assertEqual([m.type_name for m in shape.members], [Primitive.STRING, Primitive.BOOLEAN])
        self.assertEqual(codes(result), [UNSUPPORTED_FEATURE])
        self.assertEqual(result.violations[0].severity, Severity.INFO)

    def test_empty_union(self):
        result = self.shapes([])
        shape = find(result.service.unions, "Shape")
        self.assertEqual(shape.kind, UnionKind.SIMPLE)
        self.assertEqual(shape.members, [])

    def test_inline_members_are_named_by_index(self):
        result = self.shapes([{"type": "object"}, {"type": "object", "title": "Named"}])
        self.assertEqual([m.type_name.value for m in find(result.service.unions, "Shape").members], ["Shape_0", "Named"])

    def test_recursive_union_terminates(self):
        result = parse(
            {
                "definitions": {
                    "Expr": {
                        "oneOf": [
                            {"type": "object", "title": "Literal"},
                            {
                                "type": "object",
                                "title": "Not",
                                "properties": {"operand": {"$ref": "#/definitions/Expr"}},
                            },
                        ]
                    }
                }
            }
        )
        self.assertEqual(result.violations, [])
        self.assertEqual(prop(find(result.service.types, "Not"), "operand").value.type_name.value, "Expr")


class TestIntersections(unittest.TestCase):
    def test_all_of_flattens_object_members(self):
        result = parse(
            {
                "definitions": {
                    "Base": {
                        "type": "object",
                        "minProperties": 1,
                        "properties": {"id": {"type": "string"}, "size": {"type": "integer"}},
                    },
                    "Derived": {
                        "allOf": [
                            {"$ref": "#/definitions/Base"},
                            {"type": "object", "properties": {"size": {"type": "number"}, "label": {"type": "string"}}},
                            {"type": "string"},
                        ]
                    },
                }
            }
        )
        derived = find(result.service.types, "Derived")
        self.assertEqual([p.name.value for p in derived.properties], ["id", "size", "label"])
        self.assertEqual(prop(derived, "size").value.type_name, Primitive.NUMBER)
        self.assertEqual([type(r) for r in derived.rules], [ObjectMinPropertiesRule])
        self.assertEqual(result.violations, [])

    def test_all_of_with_dangling_member(self):
        result = parse({"definitions": {"D": {"allOf": [{"$ref": "#/definitions/Gone"}]}}})
        self.assertEqual(codes(result), [UNRESOLVED_REFERENCE])
        self.assertEqual(find(result.service.types, "D").properties, [])


class TestEnums(unittest.TestCase):
    def test_string_enum(self):
        result = parse({"definitions": {"Color": {"enum": ["red", "green", 3, None]}}})
        color = find(result.service.enums, "Color")
        self.assertEqual([m.content.value for m in color.members], ["red", "green"])
        self.assertEqual(result.violations, [])

    def test_typed_string_enum(self):
        result = parse({"definitions": {"Color": {"type": "string", "enum": ["red"]}}})
        self.assertEqual([e.name.value for e in result.service.enums], ["Color"])

    def test_non_string_enum_is_reported(self):
        result = parse({"type": "object", "properties": {"level": {"type": "integer", "enum": [1, 2]}}})
        self.assertEqual(result.service.enums, [])
        self.assertEqual(codes(result), [UNSUPPORTED_FEATURE])
        self.assertEqual(result.service.types[0].properties[0].value.type_name, Primitive.INTEGER)

    def test_enum_property_references_enum(self):
        result = parse({"type": "object", "properties": {"color": {"enum": ["red"]}}})
        self.assertEqual(result.service.types[0].properties[0].value.type_name.value, "test_color")
        self.assertEqual(result.service.enums[0].name.value, "test_color")


class TestPlaceholders(unittest.TestCase):
    def test_any_of_is_untyped(self):
        result = parse({"type": "object", "properties": {"a": {"anyOf": [{"type": "string"}]}}})
        self.assertTrue(result.service.types[0].properties[0].value.is_untyped)
        self.assertEqual(codes(result), [UNSUPPORTED_FEATURE])
        self.assertEqual(result.violations[0].severity, Severity.INFO)

    def test_type_array_is_untyped(self):
        result = parse({"type": "object", "properties": {"a": {"type": ["string", "null"]}}})
        self.assertTrue(result.service.types[0].properties[0].value.is_untyped)
        self.assertEqual(codes(result), [UNSUPPORTED_FEATURE])

    def test_placeholders_can_be_silenced(self):
        result = parse(
            {"type": "object", "properties": {"a": {"anyOf": []}, "b": {"type": ["string"]}}},
            report_unsupported_features=False,
        )
        self.assertEqual(result.violations, [])

    def test_tuple_items_abort(self):
        with self.assertRaises(UnsupportedFeatureError) as ctx:
            parse({"type": "array", "items": [{"type": "string"}]})
        self.assertEqual(ctx.exception.pointer, "#")

    def test_tuple_items_degrade_when_not_strict(self):
        result = parse(
            {"type": "object", "properties": {"pair": {"type": "array", "items": [{"type": "string"}]}}},
            strict_tuple_items=False,
        )
        value = result.service.types[0].properties[0].value
        self.assertTrue(value.is_untyped)
        self.assertTrue(value.is_array)
        self.assertEqual(codes(result), [UNSUPPORTED_FEATURE])
        self.assertEqual(result.violations[0].severity, Severity.ERROR)


@pytest.mark.parametrize(
    "schema,primitive",
    [
        ({"type": "boolean"}, Primitive.BOOLEAN),
        ({"type": "integer"}, Primitive.INTEGER),
        ({"type": "integer", "format": "int32"}, Primitive.INTEGER),
        ({"type": "integer", "format": "int64"}, Primitive.LONG),
        ({"type": "number"}, Primitive.NUMBER),
        ({"type": "number", "format": "float"}, Primitive.FLOAT),
        ({"type": "number", "format": "double"}, Primitive.DOUBLE),
        ({"type": "string"}, Primitive.STRING),
        ({"type": "string", "format": "uuid"}, Primitive.STRING),
        ({"type": "string", "format": "date"}, Primitive.DATE),
        ({"type": "string", "format": "date-time"}, Primitive.DATE_TIME),
        ({"type": "null"}, Primitive.UNTYPED),
        ({"type": "file"}, Primitive.UNTYPED),
        ({}, Primitive.UNTYPED),
    ],
)
def test_primitive_mapping(schema, primitive):
    result = parse({"type": "object", "properties": {"value": schema}})
    assert result.service.types[0].properties[0].value.type_name == primitive


class TestNames(unittest.TestCase):
    def test_duplicate_names_keep_first(self):
        result = parse(
            {
                "definitions": {
                    "A": {"title": "Thing", "type": "object", "properties": {"a": {"type": "string"}}},
                    "B": {"title": "Thing", "type": "object", "properties": {"b": {"type": "string"}}},
                }
            }
        )
        thing = find(result.service.types, "Thing")
        self.assertEqual([p.name.value for p in thing.properties], ["a"])
        self.assertEqual(codes(result), [DUPLICATE_NAME])

    def test_duplicate_names_across_registries(self):
        result = parse({"definitions": {"A": {"title": "Thing", "type": "object"}, "B": {"title": "Thing", "enum": ["x"]}}})
        self.assertEqual(result.service.enums, [])
        self.assertEqual(codes(result), [DUPLICATE_NAME])

    def test_duplicate_names_can_be_silenced(self):
        result = parse(
            {"definitions": {"A": {"title": "Thing", "type": "object"}, "B": {"title": "Thing", "type": "object"}}},
            report_duplicate_names=False,
        )
        self.assertEqual(result.violations, [])

    def test_service_title(self):
        self.assertEqual(parse({"title": "Titled"}).service.title.value, "Titled")
        self.assertEqual(parse({}).service.title.value, "test")
        self.assertEqual(parse({}, root_name="Config").service.title.value, "Config")

    def test_untitled_root_object(self):
        result = parse({"type": "object"}, root_name="Config")
        self.assertEqual(result.service.types[0].name.value, "Config")

    def test_ignored_definitions(self):
        result = parse({"definitions": {"Unused": {"type": "object"}, "Used": {"type": "object"}}}, ignore_definitions=["Unused"])
        self.assertEqual([t.name.value for t in result.service.types], ["Used"])

    def test_ignored_definition_still_resolves(self):
        result = parse(
            {
                "type": "object",
                "properties": {"x": {"$ref": "#/definitions/Skipped"}},
                "definitions": {"Skipped": {"type": "object"}},
            },
            ignore_definitions=["Skipped"],
        )
        self.assertIn("Skipped", [t.name.value for t in result.service.types])


class TestPetstore(unittest.TestCase):
    """End-to-end conversion of a realistic schema"""

    def setUp(self):
        path = TEST_DATA / "petstore.schema.json"
        self.result = parse_schema(path.read_text(), str(path))
        self.service = self.result.service

    def test_no_violations(self):
        self.assertEqual(self.result.violations, [])

    def test_registries(self):
        self.assertEqual(self.service.title.value, "Petstore")
        self.assertEqual([t.name.value for t in self.service.types], ["Cat", "Dog", "Dog_collar", "Owner", "Petstore"])
        self.assertEqual([e.name.value for e in self.service.enums], ["Dog_collar_color", "Status"])
        self.assertEqual([u.name.value for u in self.service.unions], ["Pet", "Owner_id"])
        self.assertEqual(self.service.interfaces, [])

    def test_referential_closure(self):
        registered = {e.name.value for e in self.service.types + self.service.enums + self.service.unions}
        self.assertTrue(set(complex_references(self.service)) <= registered)

    def test_names_are_unique(self):
        names = [e.name.value for e in self.service.types + self.service.enums]
        self.assertEqual(len(names), len(set(names)))

    def test_root_properties(self):
        root = find(self.service.types, "Petstore")
        self.assertEqual([p.name.value for p in root.properties], ["pets", "owner", "status", "opened"])

        pets = prop(root, "pets").value
        self.assertEqual((pets.type_name.value, pets.is_array, pets.is_optional), ("Pet", True, False))
        self.assertEqual([type(r) for r in pets.rules], [ArrayMinItemsRule])

        self.assertFalse(prop(root, "owner").value.is_optional)
        self.assertTrue(prop(root, "status").value.is_optional)
        self.assertEqual(prop(root, "opened").value.type_name, Primitive.DATE)

    def test_union_member_properties(self):
        cat = find(self.service.types, "Cat")
        self.assertEqual(prop(cat, "kind").value.constant.value, "cat")
        self.assertEqual([d.value for d in prop(cat, "name").description], ["A display name."])
        lives = prop(cat, "lives").value
        self.assertEqual([type(r) for r in lives.rules], [NumberGTERule, NumberLTERule])

    def test_owner(self):
        owner = find(self.service.types, "Owner")
        self.assertEqual([d.value for d in owner.description], ["The person responsible for the store."])
        self.assertEqual([type(r) for r in owner.rules], [ObjectMinPropertiesRule])
        self.assertEqual([type(r) for r in prop(owner, "email").value.rules], [StringMaxLengthRule, StringFormatRule])

        phones = prop(owner, "phones").value
        self.assertEqual((phones.type_name, phones.is_array), (Primitive.STRING, True))
        self.assertEqual([type(r) for r in phones.rules], [ArrayUniqueItemsRule])

        self.assertEqual(find(self.service.unions, "Owner_id").kind, UnionKind.PRIMITIVE)
        self.assertEqual(prop(owner, "best_friend").value.type_name.value, "Pet")

    def test_pet_union(self):
        pet = find(self.service.unions, "Pet")
        self.assertEqual(pet.kind, UnionKind.DISCRIMINATED)
        self.assertEqual([m.type_name.value for m in pet.members], ["Cat", "Dog"])

    def test_source_paths(self):
        self.assertEqual(self.service.source_paths, [str(TEST_DATA / "petstore.schema.json")])
        self.assertTrue(self.service.loc.startswith("1;1;"))

    def test_to_dict(self):
        d = self.result.to_dict()
        self.assertEqual(d["violations"], [])
        service = d["service"]
        self.assertEqual(service["title"]["value"], "Petstore")
        self.assertEqual(service["interfaces"], [])

        cat = next(t for t in service["types"] if t["name"]["value"] == "Cat")
        self.assertNotIn("source_pointer", cat)
        kind = cat["properties"][0]["value"]
        self.assertEqual(kind["kind"], "PrimitiveValue")
        self.assertEqual(kind["type_name"], "string")
        self.assertEqual(kind["constant"]["kind"], "StringLiteral")

        pet = next(u for u in service["unions"] if u["name"]["value"] == "Pet")
        self.assertEqual(pet["kind"], "DiscriminatedUnion")
        self.assertEqual(pet["members"][0]["kind"], "ComplexValue")

        # The result serializes to plain JSON
        self.assertEqual(json.loads(json.dumps(d)), d)


if __name__ == "__main__":
    unittest.main()
