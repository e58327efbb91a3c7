"""Data models for the metadata manifest.

The manifest is produced by an external extractor as camelCase JSON. Every
entity is addressed by a kind-prefixed UID (``ns:``, ``type:``, ``member:``
...) and every cross-reference is a UID, never a nested object.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UID = str


class ManifestModel(BaseModel):
    """Base for manifest entities: camelCase on the wire, immutable once loaded."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ExceptionDoc(ManifestModel):
    uid: UID
    description: str = ""


class XmlDocumentation(ManifestModel):
    """Text extracted from ``///`` doc comments."""

    summary: Optional[str] = None
    remarks: Optional[str] = None
    returns: Optional[str] = None
    value: Optional[str] = None
    examples: list[str] = Field(default_factory=list)
    parameters: dict[str, str] = Field(default_factory=dict)
    type_parameters: dict[str, str] = Field(default_factory=dict)
    exceptions: list[ExceptionDoc] = Field(default_factory=list)
    see_also: list[UID] = Field(default_factory=list)


class AttributeData(ManifestModel):
    """One applied attribute. Arguments are kept as opaque JSON values."""

    uid: UID
    attribute_type: UID
    constructor_arguments: list[Any] = Field(default_factory=list)
    named_arguments: list[Any] = Field(default_factory=list)


class Documented(ManifestModel):
    """Fields shared by every named entity."""

    uid: UID
    name: str
    attributes: list[UID] = Field(default_factory=list)
    xml_documentation: Optional[XmlDocumentation] = None

    @property
    def summary(self) -> Optional[str]:
        if self.xml_documentation is None:
            return None
        return self.xml_documentation.summary


class AssemblyInfo(Documented):
    version: str = ""
    culture: Optional[str] = None
    public_key_token: Optional[str] = None
    namespaces: list[UID] = Field(default_factory=list)
    types: list[UID] = Field(default_factory=list)


class Namespace(Documented):
    parent: Optional[UID] = None
    children: list[UID] = Field(default_factory=list)
    types: list[UID] = Field(default_factory=list)


class GenericConstraint(ManifestModel):
    # class, struct, new(), notnull, unmanaged or type
    kind: str
    type_reference: Optional[UID] = None


class GenericParameter(ManifestModel):
    uid: UID
    name: str
    variance: str = "none"
    constraints: list[GenericConstraint] = Field(default_factory=list)
    attributes: list[UID] = Field(default_factory=list)


class ParameterDefault(ManifestModel):
    # "value" carries a literal, "default" is default(T), "none" has no default
    kind: str = "none"
    value: Any = None


class Parameter(ManifestModel):
    name: str
    type: UID
    default_value: Optional[ParameterDefault] = None
    is_params: bool = False
    is_ref: bool = False
    is_out: bool = False
    is_in: bool = False
    is_this: bool = False
    is_optional: bool = False
    attributes: list[UID] = Field(default_factory=list)


class MethodSignature(ManifestModel):
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: Optional[UID] = None
    generic_parameters: list[UID] = Field(default_factory=list)


# Types


class TypeBase(Documented):
    namespace: Optional[UID] = None
    assembly: Optional[UID] = None
    enclosing_type: Optional[UID] = None
    nested_types: list[UID] = Field(default_factory=list)
    members: list[UID] = Field(default_factory=list)
    access_modifiers: str = "public"
    is_compiler_generated: bool = False
    is_unsafe: bool = False


class ClassType(TypeBase):
    typekind: Literal["class"]
    generic_parameters: list[UID] = Field(default_factory=list)
    base_class: Optional[UID] = None
    implemented_interfaces: list[UID] = Field(default_factory=list)
    is_static: bool = False
    is_sealed: bool = False
    is_abstract: bool = False
    is_partial: bool = False
    is_record: bool = False
    static_constructor: Optional[UID] = None


class StructType(TypeBase):
    typekind: Literal["struct"]
    generic_parameters: list[UID] = Field(default_factory=list)
    implemented_interfaces: list[UID] = Field(default_factory=list)
    is_readonly: bool = False
    is_partial: bool = False
    is_record: bool = False
    static_constructor: Optional[UID] = None


class EnumType(TypeBase):
    typekind: Literal["enum"]
    underlying_type: Optional[UID] = None
    is_flags: bool = False


class InterfaceType(TypeBase):
    typekind: Literal["interface"]
    generic_parameters: list[UID] = Field(default_factory=list)
    implemented_interfaces: list[UID] = Field(default_factory=list)
    is_partial: bool = False


class DelegateType(TypeBase):
    typekind: Literal["delegate"]
    generic_parameters: list[UID] = Field(default_factory=list)
    signature: MethodSignature = Field(default_factory=MethodSignature)


AnyType = Annotated[
    Union[ClassType, StructType, EnumType, InterfaceType, DelegateType],
    Field(discriminator="typekind"),
]
TYPE_MODELS = (ClassType, StructType, EnumType, InterfaceType, DelegateType)


# Members


class MemberBase(Documented):
    declaring_type: Optional[UID] = None
    inherited_from: Optional[UID] = None
    access_modifiers: str = "public"
    is_compiler_generated: bool = False
    is_static: bool = False


class Constructor(MemberBase):
    member_kind: Literal["constructor"]
    parameters: list[Parameter] = Field(default_factory=list)


class StaticConstructor(MemberBase):
    """Type initializer. Listed in ``staticConstructors`` without a kind tag."""

    member_kind: Literal["static-constructor"] = "static-constructor"
    name: str = ".cctor"
    is_static: bool = True


class Finalizer(MemberBase):
    member_kind: Literal["finalizer"]


class Method(MemberBase):
    member_kind: Literal["method", "interface-method"]
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: Optional[UID] = None
    generic_parameters: list[UID] = Field(default_factory=list)
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False
    is_sealed: bool = False
    is_async: bool = False
    is_extern: bool = False
    is_new: bool = False
    explicit_interface_implementation: Optional[UID] = None

    @property
    def is_extension(self) -> bool:
        return self.is_static and bool(self.parameters) and self.parameters[0].is_this


class Property(MemberBase):
    member_kind: Literal["property", "interface-property"]
    property_type: Optional[UID] = None
    has_getter: bool = True
    has_setter: bool = False
    is_init_only: bool = False
    index_parameters: list[Parameter] = Field(default_factory=list)
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False


class FieldMember(MemberBase):
    member_kind: Literal["field"]
    field_type: Optional[UID] = None
    is_readonly: bool = False
    is_const: bool = False
    is_volatile: bool = False
    constant_value: Any = None


class Event(MemberBase):
    member_kind: Literal["event", "interface-event"]
    event_type: Optional[UID] = None
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False


class EnumValue(MemberBase):
    member_kind: Literal["enum-field", "enum-value"]
    value: Union[int, str, None] = None
    is_static: bool = True


class Operator(MemberBase):
    member_kind: Literal["operator"]
    # C# symbol (``+``, ``==``) or CLR name (``op_Addition``)
    operator_type: str = ""
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: Optional[UID] = None
    is_static: bool = True


class Conversion(MemberBase):
    member_kind: Literal["conversion"]
    # implicit or explicit
    conversion_type: str = "explicit"
    source_type: Optional[UID] = None
    target_type: Optional[UID] = None
    is_static: bool = True


AnyMember = Annotated[
    Union[
        Constructor,
        StaticConstructor,
        Finalizer,
        Method,
        Property,
        FieldMember,
        Event,
        EnumValue,
        Operator,
        Conversion,
    ],
    Field(discriminator="member_kind"),
]
MEMBER_MODELS = (
    Constructor,
    StaticConstructor,
    Finalizer,
    Method,
    Property,
    FieldMember,
    Event,
    EnumValue,
    Operator,
    Conversion,
)


class ManifestMetadata(ManifestModel):
    author: str = ""
    # Milliseconds since the epoch
    generated_on: Optional[float] = None
    tool_version: str = ""
    other_info: dict[str, Any] = Field(default_factory=dict)


class Manifest(ManifestModel):
    """The whole extracted graph, one UID-keyed map per entity kind."""

    assemblies: dict[UID, AssemblyInfo] = Field(default_factory=dict)
    namespaces: dict[UID, Namespace] = Field(default_factory=dict)
    types: dict[UID, AnyType] = Field(default_factory=dict)
    members: dict[UID, AnyMember] = Field(default_factory=dict)
    generic_parameters: dict[UID, GenericParameter] = Field(default_factory=dict)
    attributes: dict[UID, AttributeData] = Field(default_factory=dict)
    static_constructors: dict[UID, StaticConstructor] = Field(default_factory=dict)
    root_namespaces: Optional[list[UID]] = None
    primary_assembly: Optional[UID] = None
    metadata: ManifestMetadata = Field(default_factory=ManifestMetadata)


Entity = Union[
    AssemblyInfo,
    Namespace,
    ClassType,
    StructType,
    EnumType,
    InterfaceType,
    DelegateType,
    Constructor,
    StaticConstructor,
    Finalizer,
    Method,
    Property,
    FieldMember,
    Event,
    EnumValue,
    Operator,
    Conversion,
    GenericParameter,
    AttributeData,
]
