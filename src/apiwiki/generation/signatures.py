"""C#-style declarations rendered from manifest entities.

Output is plain text meant for a ```csharp fence, so nothing here is
MDX-escaped. Referenced types render by display name; well-known System
types use their C# keyword.
"""

import re
from typing import Any, Optional

from apiwiki.manifest import (
    AnyMember,
    AnyType,
    ClassType,
    Constructor,
    Conversion,
    DelegateType,
    EnumType,
    EnumValue,
    Event,
    FieldMember,
    Finalizer,
    InterfaceType,
    ManifestIndex,
    Method,
    Operator,
    Parameter,
    Property,
    StaticConstructor,
    StructType,
    uid_text,
)

_ARITY = re.compile(r"`\d+")

CSHARP_KEYWORDS = {
    "System.Void": "void",
    "System.Object": "object",
    "System.String": "string",
    "System.Boolean": "bool",
    "System.Char": "char",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Int16": "short",
    "System.UInt16": "ushort",
    "System.Int32": "int",
    "System.UInt32": "uint",
    "System.Int64": "long",
    "System.UInt64": "ulong",
    "System.Single": "float",
    "System.Double": "double",
    "System.Decimal": "decimal",
}


def strip_arity(name: str) -> str:
    return _ARITY.sub("", name)


def type_name(uid: Optional[str], index: ManifestIndex) -> str:
    """Short C# name for a type reference."""
    if not uid:
        return "void"
    type_ = index.type(uid)
    if type_ is not None:
        return strip_arity(type_.name) + generic_list(getattr(type_, "generic_parameters", []), index)
    generic = index.generic_parameter(uid)
    if generic is not None:
        return generic.name
    text = uid_text(uid)
    if text in CSHARP_KEYWORDS:
        return CSHARP_KEYWORDS[text]
    if "<" in text or "{" in text or "[" in text:
        return strip_arity(text)
    return strip_arity(text.rsplit(".", 1)[-1])


def generic_list(uids: list[str], index: ManifestIndex) -> str:
    if not uids:
        return ""
    names = []
    for uid in uids:
        generic = index.generic_parameter(uid)
        names.append(generic.name if generic is not None else uid_text(uid))
    return "<" + ", ".join(names) + ">"


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


def parameter(param: Parameter, index: ManifestIndex) -> str:
    parts = []
    if param.is_this:
        parts.append("this")
    if param.is_ref:
        parts.append("ref")
    elif param.is_out:
        parts.append("out")
    elif param.is_in:
        parts.append("in")
    if param.is_params:
        parts.append("params")
    parts.append(type_name(param.type, index))
    parts.append(param.name)
    text = " ".join(parts)

    default = param.default_value
    if default is not None and default.kind == "value":
        text += f" = {_literal(default.value)}"
    elif default is not None and default.kind == "default":
        text += " = default"
    return text


def parameter_list(params: list[Parameter], index: ManifestIndex) -> str:
    return ", ".join(parameter(p, index) for p in params)


def _declaring_name(member: AnyMember, index: ManifestIndex) -> str:
    declaring = index.type(member.declaring_type)
    if declaring is not None:
        return strip_arity(declaring.name)
    if member.declaring_type:
        return strip_arity(uid_text(member.declaring_type).rsplit(".", 1)[-1])
    return strip_arity(member.name)


def _join(*parts: Optional[str]) -> str:
    return " ".join(part for part in parts if part)


def type_signature(type_: AnyType, index: ManifestIndex) -> str:
    """Declaration line of a type."""
    name = strip_arity(type_.name)
    access = type_.access_modifiers

    if isinstance(type_, DelegateType):
        signature = type_.signature
        return (
            f"{_join(access, 'delegate', type_name(signature.return_type, index))} "
            f"{name}{generic_list(type_.generic_parameters, index)}"
            f"({parameter_list(signature.parameters, index)});"
        )

    if isinstance(type_, EnumType):
        base = ""
        if type_.underlying_type and uid_text(type_.underlying_type) != "System.Int32":
            base = f" : {type_name(type_.underlying_type, index)}"
        return f"{_join(access, 'enum')} {name}{base}"

    bases: list[str] = []
    if isinstance(type_, ClassType):
        modifiers = _join(
            "static" if type_.is_static else None,
            "abstract" if type_.is_abstract and not type_.is_static else None,
            "sealed" if type_.is_sealed and not type_.is_static else None,
            "partial" if type_.is_partial else None,
        )
        keyword = "record" if type_.is_record else "class"
        if type_.base_class and uid_text(type_.base_class) != "System.Object":
            bases.append(type_name(type_.base_class, index))
    elif isinstance(type_, StructType):
        modifiers = _join(
            "readonly" if type_.is_readonly else None,
            "partial" if type_.is_partial else None,
        )
        keyword = "record struct" if type_.is_record else "struct"
    elif isinstance(type_, InterfaceType):
        modifiers = "partial" if type_.is_partial else ""
        keyword = "interface"
    else:
        modifiers = ""
        keyword = type_.typekind

    bases.extend(type_name(uid, index) for uid in type_.implemented_interfaces)
    declaration = (
        f"{_join(access, modifiers, keyword)} {name}"
        f"{generic_list(type_.generic_parameters, index)}"
    )
    if bases:
        declaration += " : " + ", ".join(bases)
    return declaration


def member_signature(member: AnyMember, index: ManifestIndex) -> str:
    """Declaration line of a member."""
    access = member.access_modifiers

    if isinstance(member, StaticConstructor):
        return f"static {_declaring_name(member, index)}()"

    if isinstance(member, Finalizer):
        return f"~{_declaring_name(member, index)}()"

    if isinstance(member, Constructor):
        return f"{access} {_declaring_name(member, index)}({parameter_list(member.parameters, index)})"

    if isinstance(member, Method):
        modifiers = _join(
            "static" if member.is_static else None,
            "abstract" if member.is_abstract else None,
            "virtual" if member.is_virtual and not member.is_override else None,
            "override" if member.is_override else None,
            "sealed" if member.is_sealed and member.is_override else None,
            "new" if member.is_new else None,
            "extern" if member.is_extern else None,
            "async" if member.is_async else None,
        )
        access = None if member.member_kind == "interface-method" else access
        return (
            f"{_join(access, modifiers, type_name(member.return_type, index))} "
            f"{strip_arity(member.name)}{generic_list(member.generic_parameters, index)}"
            f"({parameter_list(member.parameters, index)})"
        )

    if isinstance(member, Property):
        accessors = []
        if member.has_getter:
            accessors.append("get;")
        if member.has_setter:
            accessors.append("init;" if member.is_init_only else "set;")
        modifiers = _join(
            "static" if member.is_static else None,
            "abstract" if member.is_abstract else None,
            "virtual" if member.is_virtual and not member.is_override else None,
            "override" if member.is_override else None,
        )
        if member.index_parameters:
            name = f"this[{parameter_list(member.index_parameters, index)}]"
        else:
            name = member.name
        access = None if member.member_kind == "interface-property" else access
        return (
            f"{_join(access, modifiers, type_name(member.property_type, index))} {name} "
            f"{{ {' '.join(accessors)} }}"
        )

    if isinstance(member, FieldMember):
        modifiers = _join(
            "const" if member.is_const else None,
            "static" if member.is_static and not member.is_const else None,
            "readonly" if member.is_readonly else None,
            "volatile" if member.is_volatile else None,
        )
        text = f"{_join(access, modifiers, type_name(member.field_type, index))} {member.name}"
        if member.is_const:
            text += f" = {_literal(member.constant_value)}"
        return text + ";"

    if isinstance(member, Event):
        modifiers = _join(
            "static" if member.is_static else None,
            "abstract" if member.is_abstract else None,
            "virtual" if member.is_virtual and not member.is_override else None,
            "override" if member.is_override else None,
        )
        access = None if member.member_kind == "interface-event" else access
        return f"{_join(access, modifiers, 'event', type_name(member.event_type, index))} {member.name};"

    if isinstance(member, EnumValue):
        if member.value is None:
            return member.name
        return f"{member.name} = {member.value}"

    if isinstance(member, Operator):
        symbol = member.operator_type or member.name
        return (
            f"{_join(access, 'static', type_name(member.return_type, index))} "
            f"operator {symbol}({parameter_list(member.parameters, index)})"
        )

    if isinstance(member, Conversion):
        return (
            f"{_join(access, 'static', member.conversion_type)} operator "
            f"{type_name(member.target_type, index)}"
            f"({type_name(member.source_type, index)} value)"
        )

    return member.name
