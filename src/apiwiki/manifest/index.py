"""UID-indexed lookup over a loaded manifest.

Every cross-reference in the manifest is a UID that may or may not resolve.
ManifestIndex is the single place UIDs are turned back into entities; its
lookups never raise and return None for anything unresolved.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from apiwiki.constants import GLOBAL_NAMESPACE_UID
from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.manifest.models import (
    MEMBER_MODELS,
    TYPE_MODELS,
    AnyMember,
    AnyType,
    AssemblyInfo,
    AttributeData,
    ClassType,
    Constructor,
    Conversion,
    Entity,
    EnumValue,
    Event,
    FieldMember,
    Finalizer,
    GenericParameter,
    Manifest,
    Method,
    Namespace,
    Operator,
    Property,
    StaticConstructor,
)

logger = logging.getLogger(__name__)

MemberFilter = Callable[[AnyMember], bool]


@dataclass
class MemberGroups:
    """A type's members bucketed by kind, each in declaration order."""

    constructors: list[Constructor] = field(default_factory=list)
    static_constructors: list[StaticConstructor] = field(default_factory=list)
    finalizers: list[Finalizer] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    fields: list[FieldMember] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    enum_values: list[EnumValue] = field(default_factory=list)
    operators: list[Operator] = field(default_factory=list)
    conversions: list[Conversion] = field(default_factory=list)
    # Member UIDs listed by the type that did not resolve
    unresolved: list[str] = field(default_factory=list)


def group_methods_by_name(methods: list[Method]) -> dict[str, list[Method]]:
    """Aggregate overloads by name, keeping first-seen order."""
    groups: dict[str, list[Method]] = {}
    for method in methods:
        groups.setdefault(method.name, []).append(method)
    return groups


def uid_text(uid: str) -> str:
    """The UID with its kind prefix removed (``type:Foo.Bar`` -> ``Foo.Bar``)."""
    _, sep, rest = uid.partition(":")
    return rest if sep and rest else uid


def _signature_key(member: AnyMember) -> tuple[str, ...]:
    if isinstance(member, Method):
        return tuple(p.type for p in member.parameters)
    if isinstance(member, Property):
        return tuple(p.type for p in member.index_parameters)
    return ()


class ManifestIndex:
    """Flat UID map over every entity collection of a manifest."""

    def __init__(self, manifest: Manifest, diagnostics: Optional[DiagnosticLog] = None):
        self.manifest = manifest
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self._entities: dict[str, Entity] = {}
        self._rejected: set[str] = set()
        self._build()

    def _build(self) -> None:
        static_owner: dict[str, str] = {}
        for type_ in self.manifest.types.values():
            ctor = getattr(type_, "static_constructor", None)
            if ctor:
                static_owner.setdefault(ctor, type_.uid)

        collections = (
            self.manifest.assemblies,
            self.manifest.namespaces,
            self.manifest.types,
            self.manifest.members,
            self.manifest.static_constructors,
            self.manifest.generic_parameters,
            self.manifest.attributes,
        )
        for collection in collections:
            for key, entity in collection.items():
                if entity.uid != key:
                    self.diagnostics.warn(
                        DiagnosticCode.UID_MISMATCH,
                        f"entity stored under {key!r} declares uid {entity.uid!r}",
                        uid=key,
                    )
                    self._reject(key)
                    continue
                if isinstance(entity, StaticConstructor) and entity.declaring_type is None:
                    owner = static_owner.get(key)
                    if owner is not None:
                        entity = entity.model_copy(update={"declaring_type": owner})
                self._add(sys.intern(key), entity)

        logger.info(f"Indexed {len(self._entities)} entities")

    def _add(self, uid: str, entity: Entity) -> None:
        if uid in self._rejected:
            return
        existing = self._entities.get(uid)
        if existing is None:
            self._entities[uid] = entity
            return
        # The same static constructor may be listed both as a member and
        # in staticConstructors.
        if existing == entity or (
            isinstance(existing, StaticConstructor)
            and isinstance(entity, StaticConstructor)
            and existing.model_copy(update={"declaring_type": None})
            == entity.model_copy(update={"declaring_type": None})
        ):
            return
        self.diagnostics.warn(
            DiagnosticCode.DUPLICATE_UID,
            f"uid appears as both {type(existing).__name__} and {type(entity).__name__}",
            uid=uid,
        )
        self._reject(uid)

    def _reject(self, uid: str) -> None:
        self._entities.pop(uid, None)
        self._rejected.add(uid)

    # Lookup

    def resolve(self, uid: Optional[str]) -> Optional[Entity]:
        """Return the entity for uid, or None when it does not resolve."""
        if not uid:
            return None
        return self._entities.get(uid)

    def __contains__(self, uid: object) -> bool:
        return isinstance(uid, str) and uid in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def namespace(self, uid: Optional[str]) -> Optional[Namespace]:
        entity = self.resolve(uid)
        return entity if isinstance(entity, Namespace) else None

    def type(self, uid: Optional[str]) -> Optional[AnyType]:
        entity = self.resolve(uid)
        return entity if isinstance(entity, TYPE_MODELS) else None

    def member(self, uid: Optional[str]) -> Optional[AnyMember]:
        entity = self.resolve(uid)
        return entity if isinstance(entity, MEMBER_MODELS) else None

    def assembly(self, uid: Optional[str]) -> Optional[AssemblyInfo]:
        entity = self.resolve(uid)
        return entity if isinstance(entity, AssemblyInfo) else None

    def attribute(self, uid: Optional[str]) -> Optional[AttributeData]:
        entity = self.resolve(uid)
        return entity if isinstance(entity, AttributeData) else None

    def generic_parameter(self, uid: Optional[str]) -> Optional[GenericParameter]:
        entity = self.resolve(uid)
        return entity if isinstance(entity, GenericParameter) else None

    def display_name(self, uid: str) -> str:
        """Entity name, or the UID text after its kind prefix when unresolved."""
        entity = self.resolve(uid)
        name = getattr(entity, "name", None)
        if name:
            return name
        return uid_text(uid)

    # Derived views

    def global_namespace(self) -> Optional[Namespace]:
        return self.namespace(GLOBAL_NAMESPACE_UID)

    def root_namespaces(self) -> list[str]:
        """UIDs of the namespaces generated at the top of the tree.

        The manifest's explicit rootNamespaces win. Otherwise every namespace
        whose parent is the global namespace, absent, or unresolvable is a
        root, in manifest order.
        """
        if self.manifest.root_namespaces is not None:
            return [uid for uid in self.manifest.root_namespaces if uid != GLOBAL_NAMESPACE_UID]

        roots = []
        for uid, namespace in self.manifest.namespaces.items():
            if uid == GLOBAL_NAMESPACE_UID or uid not in self._entities:
                continue
            parent = namespace.parent
            if parent is None or parent == GLOBAL_NAMESPACE_UID or self.namespace(parent) is None:
                roots.append(uid)
        return roots

    def nested_types(self, type_: AnyType) -> list[AnyType]:
        """Resolvable nested types, in declaration order."""
        return [t for t in (self.type(uid) for uid in type_.nested_types) if t is not None]

    def members_by_kind(self, type_: AnyType, keep: Optional[MemberFilter] = None) -> MemberGroups:
        """Bucket a type's members by kind.

        Args:
            type_: The declaring type.
            keep: Optional predicate; members it rejects are left out.
        """
        groups = MemberGroups()
        member_uids = list(type_.members)
        static_ctor = getattr(type_, "static_constructor", None)
        if static_ctor and static_ctor not in member_uids:
            member_uids.append(static_ctor)

        for uid in member_uids:
            member = self.member(uid)
            if member is None:
                groups.unresolved.append(uid)
                continue
            if keep is not None and not keep(member):
                continue
            if isinstance(member, Constructor):
                groups.constructors.append(member)
            elif isinstance(member, StaticConstructor):
                groups.static_constructors.append(member)
            elif isinstance(member, Finalizer):
                groups.finalizers.append(member)
            elif isinstance(member, Method):
                groups.methods.append(member)
            elif isinstance(member, Property):
                groups.properties.append(member)
            elif isinstance(member, FieldMember):
                groups.fields.append(member)
            elif isinstance(member, Event):
                groups.events.append(member)
            elif isinstance(member, EnumValue):
                groups.enum_values.append(member)
            elif isinstance(member, Operator):
                groups.operators.append(member)
            elif isinstance(member, Conversion):
                groups.conversions.append(member)
        return groups

    def base_chain(self, type_: AnyType) -> list[AnyType]:
        """The type followed by its resolvable base classes, nearest first."""
        chain = [type_]
        seen = {type_.uid}
        current: Optional[AnyType] = type_
        while isinstance(current, ClassType) and current.base_class:
            base = self.type(current.base_class)
            if base is None or base.uid in seen:
                break
            chain.append(base)
            seen.add(base.uid)
            current = base
        return chain

    def overridden_members(self, member: AnyMember) -> list[AnyMember]:
        """Documentation ancestors of an inherited or overriding member.

        Ancestors share the member's kind, name and parameter types and are
        found in the origin type (for inherited members) or the base chain
        of the declaring type (for overrides).

        Returns:
            Ancestors ordered least specific first; empty when there are none.
        """
        if not isinstance(member, (Method, Property, Event)):
            return []

        if member.inherited_from:
            origin = self.type(member.inherited_from)
            if origin is None:
                return []
            search = self.base_chain(origin)
        elif member.is_override:
            declaring = self.type(member.declaring_type)
            if declaring is None:
                return []
            search = self.base_chain(declaring)[1:]
        else:
            return []

        key = _signature_key(member)
        ancestors: list[AnyMember] = []
        for type_ in search:
            for uid in type_.members:
                candidate = self.member(uid)
                if (
                    candidate is not None
                    and candidate.uid != member.uid
                    and type(candidate) is type(member)
                    and candidate.name == member.name
                    and _signature_key(candidate) == key
                    and not candidate.inherited_from
                ):
                    ancestors.append(candidate)
                    break
        ancestors.reverse()
        return ancestors


