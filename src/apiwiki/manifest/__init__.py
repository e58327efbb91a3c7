"""Metadata manifest: models, loading and UID resolution."""

from apiwiki.manifest.analysis import (
    build_containment_graph,
    build_parent_graph,
    find_cycles,
    report_containment_cycles,
)
from apiwiki.manifest.index import (
    ManifestIndex,
    MemberGroups,
    group_methods_by_name,
    uid_text,
)
from apiwiki.manifest.loader import ManifestError, load_manifest, parse_manifest
from apiwiki.manifest.models import (
    AnyMember,
    AnyType,
    AssemblyInfo,
    AttributeData,
    ClassType,
    Constructor,
    Conversion,
    DelegateType,
    EnumType,
    EnumValue,
    Event,
    FieldMember,
    Finalizer,
    GenericParameter,
    InterfaceType,
    Manifest,
    Method,
    Namespace,
    Operator,
    Parameter,
    Property,
    StaticConstructor,
    StructType,
)

__all__ = [
    # Models
    "AnyMember",
    "AnyType",
    "AssemblyInfo",
    "AttributeData",
    "ClassType",
    "Constructor",
    "Conversion",
    "DelegateType",
    "EnumType",
    "EnumValue",
    "Event",
    "FieldMember",
    "Finalizer",
    "GenericParameter",
    "InterfaceType",
    "Manifest",
    "Method",
    "Namespace",
    "Operator",
    "Parameter",
    "Property",
    "StaticConstructor",
    "StructType",
    # Loading
    "ManifestError",
    "load_manifest",
    "parse_manifest",
    # Index
    "ManifestIndex",
    "MemberGroups",
    "group_methods_by_name",
    "uid_text",
    # Analysis
    "build_containment_graph",
    "build_parent_graph",
    "find_cycles",
    "report_containment_cycles",
]
