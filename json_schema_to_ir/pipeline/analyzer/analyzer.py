"""
Schema analyzer that transforms the schema views into IR.

Walks the document from the root, classifies every schema by shape,
resolves references and compositions, and accumulates Types, Enums and
Unions in name-keyed registries. Recoverable problems are recorded as
Violations and the walk continues with an untyped placeholder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from ...utils import to_constant, to_description, to_string_literal
from ...validator import parse_object_validation_rules, parse_validation_rules
from ..config import ParserConfig
from ..json_ast import AstNode, encode_range
from ..schema_ast import (
    REGISTERING_KINDS,
    ROOT_POINTER,
    AbstractSchemaNode,
    DocumentNode,
    SchemaKind,
    SchemaNode,
    SchemaRecordItem,
)
from ..schema_ast.nodes import is_array_type, is_object_type, is_string_type
from .ir_nodes import (
    ComplexValue,
    EnumDef,
    EnumMember,
    MemberValue,
    Primitive,
    PrimitiveValue,
    Property,
    Severity,
    StringLiteral,
    Type,
    Union,
    UnionKind,
    Violation,
)
from .name_resolver import NameResolver
from .reference_resolver import ReferenceResolver

logger = logging.getLogger(__name__)

UNRESOLVED_REFERENCE = "json-schema/unresolved-reference"
UNSUPPORTED_FEATURE = "json-schema/unsupported-feature"
MISCONFIGURED_DISCRIMINATOR = "json-schema/misconfigured-discriminator"
CIRCULAR_REFERENCE = "json-schema/circular-reference"
DUPLICATE_NAME = "json-schema/duplicate-name"

# (type, format) -> primitive; a None format is the type's default
_PRIMITIVES: dict[tuple[str, str | None], Primitive] = {
    ("boolean", None): Primitive.BOOLEAN,
    ("integer", None): Primitive.INTEGER,
    ("integer", "int32"): Primitive.INTEGER,
    ("integer", "int64"): Primitive.LONG,
    ("number", None): Primitive.NUMBER,
    ("number", "float"): Primitive.FLOAT,
    ("number", "double"): Primitive.DOUBLE,
    ("string", None): Primitive.STRING,
    ("string", "date"): Primitive.DATE,
    ("string", "date-time"): Primitive.DATE_TIME,
}


class SchemaParseError(Exception):
    """Raised when a schema cannot be converted at all."""


class UnsupportedFeatureError(SchemaParseError):
    """Raised for schema shapes that have no IR representation."""

    def __init__(self, message: str, pointer: str):
        super().__init__(f"{message} (at {pointer})")
        self.pointer = pointer


@dataclass
class ParsedType:
    """Result of converting one schema: its value shape and inherited docs."""

    value: MemberValue
    inherited_description: list[StringLiteral] = field(default_factory=list)


@dataclass
class BuildContext:
    """Mutable state of one parse invocation."""

    types: dict[str, Type] = field(default_factory=dict)
    enums: dict[str, EnumDef] = field(default_factory=dict)
    unions: dict[str, Union] = field(default_factory=dict)
    violations: list[Violation] = field(default_factory=list)

    # Pointers of the schemas on the current descent, outermost first
    chain: list[str] = field(default_factory=list)

    # Definition pointers already visited eagerly
    visited_definitions: set[str] = field(default_factory=set)

    def lookup(self, name: str) -> Type | EnumDef | Union | None:
        """Find a registered entry by name across all three registries."""
        return self.types.get(name) or self.enums.get(name) or self.unions.get(name)


def untyped(is_array: bool = False) -> PrimitiveValue:
    return PrimitiveValue(type_name=Primitive.UNTYPED, is_array=is_array)


def _is_string_enum(schema: AbstractSchemaNode) -> bool:
    return schema.type is None or is_string_type(schema.type)


def dispatch_kind(schema: AbstractSchemaNode) -> SchemaKind:
    """
    The shape a schema is converted as.

    Same as `schema.kind`, except that an enum with a declared non-string
    type is converted as that type.
    """
    kind = schema.kind
    if kind is SchemaKind.ENUM and not _is_string_enum(schema):
        if is_object_type(schema.type):
            return SchemaKind.OBJECT
        if is_array_type(schema.type):
            return SchemaKind.ARRAY
        return SchemaKind.PRIMITIVE
    return kind


class SchemaAnalyzer:
    """Analyzes a parsed schema document and builds the IR registries."""

    def __init__(self, document: AstNode, source_path: str = "", config: ParserConfig | None = None):
        """
        Initialize the analyzer.

        Args:
            document: Root node of the parsed schema document
            source_path: Path reported on violations
            config: Parser configuration
        """
        self.config = config or ParserConfig()
        self.source_path = source_path
        self.root = DocumentNode(document, ROOT_POINTER)
        self.references = ReferenceResolver(document)
        self.names = NameResolver(document, self.references, root_name=self._default_root_name())

    def _default_root_name(self) -> str:
        if self.config.root_name:
            return self.config.root_name
        return Path(self.source_path).stem if self.source_path else "root"

    def analyze(self) -> BuildContext:
        """
        Walk the whole document.

        Returns:
            The filled registries and violations

        Raises:
            UnsupportedFeatureError: On tuple-style `items` when
                `strict_tuple_items` is set
            SchemaParseError: On a $ref cycle when `strict_reference_cycles`
                is set
        """
        ctx = BuildContext()
        self.parse_type(self.root, encode_range(0, self.root.loc), ctx)
        logger.debug(
            "Built %d types, %d enums, %d unions with %d violations",
            len(ctx.types),
            len(ctx.enums),
            len(ctx.unions),
            len(ctx.violations),
        )
        return ctx

    def title(self) -> StringLiteral:
        """Title of the service: the root's inferred name."""
        return self.names.infer_type_name(self.root) or StringLiteral(value=self._default_root_name())

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def parse_type(self, schema: AbstractSchemaNode | None, loc: str | None, ctx: BuildContext) -> ParsedType:
        """
        Convert one schema to a value shape.

        Args:
            schema: The schema to convert (None yields an untyped shape)
            loc: Encoded range used for entries registered by this call
            ctx: Build context

        Returns:
            The value shape plus the description inherited through $ref
        """
        if schema is None:
            return ParsedType(untyped())

        self._visit_definitions(schema, ctx)

        ctx.chain.append(schema.pointer)
        try:
            return self._dispatch(schema, loc, ctx)
        finally:
            ctx.chain.pop()

    def _visit_definitions(self, schema: AbstractSchemaNode, ctx: BuildContext) -> None:
        for record in schema.all_definitions:
            for item in record.children:
                if item.key.value in self.config.ignore_definitions:
                    continue
                if item.value.pointer in ctx.visited_definitions:
                    continue
                ctx.visited_definitions.add(item.value.pointer)
                self.parse_type(item.value, encode_range(0, item.loc), ctx)

    def _dispatch(self, schema: AbstractSchemaNode, loc: str | None, ctx: BuildContext) -> ParsedType:
        own_description = to_description(schema.description) or []
        kind = schema.kind
        logger.debug("Parsing %s as %s", schema.pointer, kind.value)

        if kind is SchemaKind.REF:
            return self._parse_ref(schema, loc, ctx)

        if kind is SchemaKind.INTERSECTION:
            value = self._parse_intersection(schema, loc, ctx)
        elif kind is SchemaKind.ANY_OF:
            value = self._parse_placeholder(schema, "anyOf", "anyOf is not yet supported and will be untyped.", ctx)
        elif kind is SchemaKind.UNION:
            value = self._parse_one_of(schema, loc, ctx)
        elif kind is SchemaKind.TYPE_ARRAY:
            value = self._parse_placeholder(
                schema, "type", "Arrays of types are not yet supported and will be untyped.", ctx
            )
        elif kind is SchemaKind.ENUM:
            value = self._parse_enum(schema, loc, ctx)
        elif kind is SchemaKind.OBJECT:
            value = self._parse_object(schema, loc, ctx)
        elif kind is SchemaKind.ARRAY:
            value = self._parse_array(schema, ctx)
        else:
            value = self._parse_primitive(schema, loc)

        return ParsedType(value, own_description)

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def _parse_ref(self, schema: AbstractSchemaNode, loc: str | None, ctx: BuildContext) -> ParsedType:
        ref = schema.ref
        ref_range = encode_range(0, ref.loc)
        target = self._dereference(schema, ctx)
        if target is None:
            return ParsedType(untyped())

        # Registering shapes end at their registry entry on a revisit
        if target.pointer in ctx.chain and dispatch_kind(target) not in REGISTERING_KINDS:
            message = f"Reference '{ref.value}' is circular and cannot be resolved to a type."
            if self.config.strict_reference_cycles:
                logger.warning("%s (at %s)", message, schema.pointer)
                raise SchemaParseError(f"{message} (at {schema.pointer})")
            self._report(
                ctx,
                CIRCULAR_REFERENCE,
                message,
                Severity.ERROR,
                ref_range,
            )
            return ParsedType(untyped())

        parsed = self.parse_type(target, loc, ctx)
        inherited = (to_description(schema.description) or []) + parsed.inherited_description
        return ParsedType(parsed.value, inherited)

    def _dereference(self, schema: AbstractSchemaNode, ctx: BuildContext) -> SchemaNode | None:
        """Resolve a schema's $ref, reporting a violation when it dangles."""
        ref = schema.ref
        target = None
        if ref.is_literal and isinstance(ref.value, str):
            target = self.references.resolve(ref.value)

        if target is None:
            self._report(
                ctx,
                UNRESOLVED_REFERENCE,
                f"Cannot resolve ref '{ref.value if ref.is_literal else ref.pointer}'",
                Severity.ERROR,
                encode_range(0, ref.loc),
            )
        return target

    # ------------------------------------------------------------------
    # Compositions
    # ------------------------------------------------------------------

    def _parse_intersection(self, schema: AbstractSchemaNode, loc: str | None, ctx: BuildContext) -> MemberValue:
        name = self.names.infer_type_name(schema)
        if name is None:
            return untyped()
        if not self._claim(name, schema, ctx):
            return ComplexValue(type_name=name)

        entry = Type(
            name=name,
            description=to_description(schema.description),
            loc=loc,
            source_pointer=schema.pointer,
        )
        ctx.types[name.value] = entry
        logger.debug("Registered intersection type %s from %s", name.value, schema.pointer)

        objects = []
        for member in schema.all_of:
            resolved = self._dereference(member, ctx) if member.ref is not None else member
            if resolved is not None and is_object_type(resolved.type):
                objects.append(resolved)

        # Later members replace earlier properties of the same name
        properties: dict[str, Property] = {}
        for obj in objects:
            for prop in self._parse_properties(obj, ctx):
                properties[prop.name.value] = prop

        entry.properties = list(properties.values())
        entry.rules = [rule for obj in objects for rule in parse_object_validation_rules(obj)]
        return ComplexValue(type_name=name)

    def _parse_one_of(self, schema: AbstractSchemaNode, loc: str | None, ctx: BuildContext) -> MemberValue:
        name = self.names.infer_type_name(schema)
        if name is None:
            return untyped()
        if not self._claim(name, schema, ctx):
            return ComplexValue(type_name=name)

        union = Union(
            name=name,
            description=to_description(schema.description),
            loc=loc,
            source_pointer=schema.pointer,
        )
        ctx.unions[name.value] = union
        logger.debug("Registered union %s from %s", name.value, schema.pointer)

        members = [(m, self.parse_type(m, encode_range(0, m.loc), ctx).value) for m in schema.one_of]

        discriminator = schema.discriminator
        property_name = discriminator.property_name if discriminator is not None else None
        if property_name is not None and property_name.is_literal and property_name.value:
            mapping = discriminator.mapping
            if mapping is not None:
                self._report(
                    ctx,
                    UNSUPPORTED_FEATURE,
                    "Discriminator mapping is not yet supported and will have no effect.",
                    Severity.INFO,
                    encode_range(0, mapping.loc),
                )

            for member, value in members:
                if value.is_primitive:
                    self._report(
                        ctx,
                        MISCONFIGURED_DISCRIMINATOR,
                        "Discriminators may not reference primitive types.",
                        Severity.ERROR,
                        encode_range(0, member.loc),
                    )
                else:
                    union.members.append(value)

            union.kind = UnionKind.DISCRIMINATED
            union.discriminator = to_string_literal(property_name)
        elif not members:
            union.kind = UnionKind.SIMPLE
        else:
            primitive = members[0][1].is_primitive
            for member, value in members:
                if value.is_primitive == primitive:
                    union.members.append(value)
                else:
                    self._report(
                        ctx,
                        UNSUPPORTED_FEATURE,
                        "Unions may not mix primitive and complex members; this member will be excluded.",
                        Severity.INFO,
                        encode_range(0, member.loc),
                    )
            union.kind = UnionKind.PRIMITIVE if primitive else UnionKind.COMPLEX

        return ComplexValue(type_name=name)

    def _parse_placeholder(self, schema: AbstractSchemaNode, keyword: str, message: str, ctx: BuildContext) -> MemberValue:
        if self.config.report_unsupported_features:
            self._report(ctx, UNSUPPORTED_FEATURE, message, Severity.INFO, schema.property_range(keyword))
        return untyped()

    # ------------------------------------------------------------------
    # Named shapes
    # ------------------------------------------------------------------

    def _parse_enum(self, schema: AbstractSchemaNode, loc: str | None, ctx: BuildContext) -> MemberValue:
        if not _is_string_enum(schema):
            if self.config.report_unsupported_features:
                self._report(
                    ctx,
                    UNSUPPORTED_FEATURE,
                    "Only string enums are supported; the enum values will be ignored.",
                    Severity.INFO,
                    schema.property_range("enum"),
                )
            kind = dispatch_kind(schema)
            if kind is SchemaKind.OBJECT:
                return self._parse_object(schema, loc, ctx)
            if kind is SchemaKind.ARRAY:
                return self._parse_array(schema, ctx)
            return self._parse_primitive(schema, loc)

        name = self.names.infer_type_name(schema)
        if name is None:
            return untyped()
        if not self._claim(name, schema, ctx):
            return ComplexValue(type_name=name)

        members = [
            EnumMember(content=to_string_literal(value))
            for value in schema.enum
            if value.is_literal and isinstance(value.value, str)
        ]
        ctx.enums[name.value] = EnumDef(
            name=name,
            description=to_description(schema.description),
            members=members,
            loc=loc,
            source_pointer=schema.pointer,
        )
        logger.debug("Registered enum %s from %s", name.value, schema.pointer)
        return ComplexValue(type_name=name)

    def _parse_object(self, schema: AbstractSchemaNode, loc: str | None, ctx: BuildContext) -> MemberValue:
        name = self.names.infer_type_name(schema)
        if name is None:
            return untyped()
        if not self._claim(name, schema, ctx):
            return ComplexValue(type_name=name)

        # Registered before the properties are walked so recursive references terminate
        entry = Type(
            name=name,
            description=to_description(schema.description),
            loc=loc,
            source_pointer=schema.pointer,
        )
        ctx.types[name.value] = entry
        logger.debug("Registered type %s from %s", name.value, schema.pointer)

        entry.properties = self._parse_properties(schema, ctx)
        entry.rules = list(parse_object_validation_rules(schema))
        return ComplexValue(type_name=name)

    def _parse_properties(self, schema: AbstractSchemaNode, ctx: BuildContext) -> list[Property]:
        if schema.properties is None:
            return []
        return [
            self.parse_property(item, ctx)
            for item in schema.properties.children
            if not str(item.key.value).startswith("$")
        ]

    def parse_property(self, item: SchemaRecordItem, ctx: BuildContext) -> Property:
        """
        Convert one entry of a `properties` map.

        Optionality comes from the owning object's `required` list. Rules
        come from the property schema itself, or from the referenced schema
        when the property is a bare $ref.
        """
        schema = item.value
        parsed = self.parse_type(schema, encode_range(0, item.loc), ctx)
        value = parsed.value

        description = to_description(schema.description)
        if not description and value.is_primitive and parsed.inherited_description:
            description = parsed.inherited_description

        rules = list(parse_validation_rules(schema))
        if not rules and schema.kind is SchemaKind.REF:
            rules = list(value.rules)

        changes = {"is_optional": not self.references.is_required(schema), "rules": rules}
        if value.is_primitive:
            changes["constant"] = to_constant(schema.const)

        return Property(
            name=to_string_literal(item.key),
            description=description,
            value=replace(value, **changes),
            loc=encode_range(0, item.loc),
        )

    # ------------------------------------------------------------------
    # Inline shapes
    # ------------------------------------------------------------------

    def _parse_array(self, schema: AbstractSchemaNode, ctx: BuildContext) -> MemberValue:
        items = schema.items
        if isinstance(items, list):
            if self.config.strict_tuple_items:
                logger.warning("Tuple-style items at %s are not supported", schema.pointer)
                raise UnsupportedFeatureError("Tuple-style items are not supported", schema.pointer)
            self._report(
                ctx,
                UNSUPPORTED_FEATURE,
                "Tuple-style items are not supported; the array will be untyped.",
                Severity.ERROR,
                schema.property_range("items"),
            )
            return untyped(is_array=True)

        parsed = self.parse_type(items, encode_range(0, items.loc) if items is not None else None, ctx)
        return replace(parsed.value, is_array=True)

    def _parse_primitive(self, schema: AbstractSchemaNode, loc: str | None) -> MemberValue:
        schema_type = schema.type
        if schema_type is None or isinstance(schema_type, list) or not schema_type.is_literal:
            return untyped()

        string_format = schema.format.value if schema.format is not None and schema.format.is_literal else None
        primitive = _PRIMITIVES.get((schema_type.value, string_format)) or _PRIMITIVES.get((schema_type.value, None))
        if primitive is None:
            return untyped()

        return PrimitiveValue(
            type_name=primitive,
            loc=loc,
            is_optional=not self.references.is_required(schema),
            rules=list(parse_validation_rules(schema)),
        )

    # ------------------------------------------------------------------
    # Registries and violations
    # ------------------------------------------------------------------

    def _claim(self, name: StringLiteral, schema: AbstractSchemaNode, ctx: BuildContext) -> bool:
        """
        Decide whether schema may register an entry under name.

        The first schema to claim a name keeps it. A different schema
        claiming the same name is reported and refers to the existing entry.
        """
        existing = ctx.lookup(name.value)
        if existing is None:
            return True

        if existing.source_pointer != schema.pointer and self.config.report_duplicate_names:
            self._report(
                ctx,
                DUPLICATE_NAME,
                f"Name '{name.value}' at {schema.pointer} is already used by {existing.source_pointer}.",
                Severity.ERROR,
                name.loc or schema.property_range("title") or encode_range(0, schema.loc),
            )
        return False

    def _report(self, ctx: BuildContext, code: str, message: str, severity: Severity, loc: str | None) -> None:
        violation = Violation(code=code, message=message, severity=severity, range=loc, source_path=self.source_path)
        if violation in ctx.violations:
            return
        logger.debug("%s: %s", code, message)
        ctx.violations.append(violation)
