"""Plan the documentation tree for a manifest.

The planner walks the manifest top-down (namespace before its child
namespaces and types, type before its members and nested types) and
assigns every visible namespace, type and member a page path. It touches
no files: the result is a TreePlan that the writer materialises. The same
manifest and settings always give the same plan.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable, Optional, Union

from apiwiki.constants import (
    CONSTRUCTOR_FILE,
    CONSTRUCTOR_STEM,
    CONSTRUCTORS_FOLDER,
    DEFAULT_GLOBAL_NAMESPACE_NAME,
    EVENTS_FOLDER,
    FIELDS_FOLDER,
    INDEX_FILE,
    METHODS_FOLDER,
    NAME_SEPARATOR,
    NAMESPACES_FOLDER,
    NESTED_TYPES_FOLDER,
    PAGE_SUFFIX,
    PROPERTIES_FOLDER,
    STATIC_CONSTRUCTOR_FILE,
    TYPES_FOLDER,
)
from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.generation.naming import is_ignored, sanitize_name
from apiwiki.manifest import (
    AnyMember,
    AnyType,
    ClassType,
    DelegateType,
    EnumType,
    ManifestIndex,
    Namespace,
    group_methods_by_name,
)

logger = logging.getLogger(__name__)

ROOT = PurePosixPath(".")


class NodeKind(str, Enum):
    """Kinds of generated pages."""

    NAMESPACE = "namespace"
    TYPE = "type"
    CONSTRUCTOR = "constructor"
    STATIC_CONSTRUCTOR = "static-constructor"
    METHOD_GROUP = "method-group"
    PROPERTY = "property"
    FIELD = "field"
    EVENT = "event"
    ENUM_VALUE = "enum-value"

    @property
    def page_type(self) -> str:
        """Coarse page type written to frontmatter: namespace, type or member."""
        if self in (NodeKind.NAMESPACE, NodeKind.TYPE):
            return self.value
        return "member"


@dataclass(frozen=True)
class GeneratedNode:
    """One page of the generated tree.

    A method group is addressed by its first overload's UID and lists every
    overload in member_uids. Other nodes have member_uids == (uid,).
    """

    uid: str
    kind: NodeKind
    path: PurePosixPath
    title: str
    parent_uid: Optional[str] = None
    member_uids: tuple[str, ...] = ()

    @property
    def folder(self) -> PurePosixPath:
        return self.path.parent


@dataclass
class TreePlan:
    """The full tree: directories in creation order and pages in traversal order."""

    directories: list[PurePosixPath] = field(default_factory=list)
    nodes: list[GeneratedNode] = field(default_factory=list)
    addresses: dict[str, GeneratedNode] = field(default_factory=dict)
    children: dict[str, list[GeneratedNode]] = field(default_factory=dict)
    # UIDs hidden by the ignore policy, including members of ignored types
    ignored: set[str] = field(default_factory=set)

    def node_for(self, uid: Optional[str]) -> Optional[GeneratedNode]:
        if not uid:
            return None
        return self.addresses.get(uid)

    def children_of(self, uid: str, *kinds: NodeKind) -> list[GeneratedNode]:
        nodes = self.children.get(uid, [])
        if not kinds:
            return list(nodes)
        return [node for node in nodes if node.kind in kinds]

    def is_ignored(self, uid: str) -> bool:
        return uid in self.ignored


class LayoutPlanner:
    """Single top-down traversal producing a TreePlan.

    Args:
        index: The indexed manifest.
        ignore_attributes: Attribute type UIDs that hide a type or member.
        global_namespace_name: Display name of the implicit global namespace.
        diagnostics: Collector for skipped UIDs and renamed collisions.
    """

    def __init__(
        self,
        index: ManifestIndex,
        ignore_attributes: Iterable[str] = (),
        global_namespace_name: str = DEFAULT_GLOBAL_NAMESPACE_NAME,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> None:
        self.index = index
        self.ignore_attributes = tuple(ignore_attributes)
        self.global_namespace_name = global_namespace_name
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self._plan = TreePlan()
        self._placed: set[str] = set()
        self._active: set[str] = set()
        self._claimed: dict[PurePosixPath, set[str]] = {}
        self._known_dirs: set[PurePosixPath] = set()

    def plan(self) -> TreePlan:
        """Walk the manifest once and return the plan."""
        self._plan = TreePlan()
        self._placed.clear()
        self._active.clear()
        self._claimed.clear()
        self._known_dirs.clear()

        for uid in self.index.root_namespaces():
            namespace = self.index.namespace(uid)
            if namespace is None:
                self._unresolved(uid, "root namespace")
                continue
            self._namespace(namespace, ROOT, parent_uid=None)

        global_namespace = self.index.global_namespace()
        if global_namespace is not None:
            self._global_namespace(global_namespace)

        logger.info(
            f"Planned {len(self._plan.nodes)} pages in {len(self._plan.directories)} folders "
            f"({len(self._plan.ignored)} UIDs ignored)"
        )
        return self._plan

    # Bookkeeping

    def _unresolved(self, uid: str, what: str, owner: Optional[str] = None) -> None:
        where = f" of {owner}" if owner else ""
        self.diagnostics.warn(
            DiagnosticCode.UNRESOLVED_UID, f"{what}{where} does not resolve; skipped", uid=uid
        )

    def _enter(self, uid: str) -> bool:
        """Claim uid for placement; False if it is already placed or being placed."""
        if uid in self._active:
            self.diagnostics.warn(
                DiagnosticCode.CONTAINMENT_CYCLE, "contains itself; traversal stopped", uid=uid
            )
            return False
        if uid in self._placed:
            self.diagnostics.warn(
                DiagnosticCode.DUPLICATE_PLACEMENT, "already placed; skipped", uid=uid
            )
            return False
        self._placed.add(uid)
        self._active.add(uid)
        return True

    def _leave(self, uid: str) -> None:
        self._active.discard(uid)

    def _claim(self, folder: PurePosixPath, name: str, uid: str) -> str:
        """Reserve a unique name in folder, suffixing -2, -3 ... on collision.

        Names are compared case-insensitively and without the page suffix, so
        ``Bar/`` and ``bar.mdx`` collide.
        """
        taken = self._claimed.setdefault(folder, set())
        candidate = name
        counter = 2
        while candidate.casefold() in taken:
            candidate = f"{name}{NAME_SEPARATOR}{counter}"
            counter += 1
        if candidate != name:
            self.diagnostics.warn(
                DiagnosticCode.NAME_COLLISION,
                f"name {name!r} already used in {folder.as_posix()}; using {candidate!r}",
                uid=uid,
                path=(folder / candidate).as_posix(),
            )
        taken.add(candidate.casefold())
        return candidate

    def _dir(self, path: PurePosixPath) -> PurePosixPath:
        if path not in self._known_dirs:
            self._known_dirs.add(path)
            self._plan.directories.append(path)
        return path

    def _add_node(
        self,
        uid: str,
        kind: NodeKind,
        path: PurePosixPath,
        title: str,
        parent_uid: Optional[str],
        member_uids: tuple[str, ...] = (),
    ) -> GeneratedNode:
        node = GeneratedNode(
            uid=uid,
            kind=kind,
            path=path,
            title=title,
            parent_uid=parent_uid,
            member_uids=member_uids or (uid,),
        )
        self._plan.nodes.append(node)
        for address in node.member_uids:
            self._plan.addresses[address] = node
        if parent_uid is not None:
            self._plan.children.setdefault(parent_uid, []).append(node)
        return node

    def _ignored(self, entity: Union[AnyType, AnyMember]) -> bool:
        return is_ignored(entity, self.index, self.ignore_attributes)

    def _ignore_type(self, type_: AnyType) -> None:
        """Hide a type together with everything it contains."""
        pending = [type_]
        while pending:
            current = pending.pop()
            if current.uid in self._plan.ignored:
                continue
            self._plan.ignored.add(current.uid)
            self._plan.ignored.update(current.members)
            static_ctor = getattr(current, "static_constructor", None)
            if static_ctor:
                self._plan.ignored.add(static_ctor)
            pending.extend(self.index.nested_types(current))

    # Namespaces

    def _visible_types(self, namespace: Namespace) -> list[AnyType]:
        types = []
        for uid in namespace.types:
            type_ = self.index.type(uid)
            if type_ is None:
                self._unresolved(uid, "type", owner=namespace.uid)
                continue
            enclosing = self.index.type(type_.enclosing_type)
            if enclosing is not None:
                # Placed under its enclosing type's Nested-Types
                if type_.uid not in enclosing.nested_types and not self._ignored(type_):
                    self.diagnostics.warn(
                        DiagnosticCode.ORPHANED_TYPE,
                        f"enclosing type {enclosing.uid} does not list it as nested; not placed",
                        uid=type_.uid,
                    )
                continue
            if self._ignored(type_):
                self._ignore_type(type_)
                continue
            types.append(type_)
        return types

    def _namespace(
        self, namespace: Namespace, parent_dir: PurePosixPath, parent_uid: Optional[str]
    ) -> None:
        if not self._enter(namespace.uid):
            return

        name = self._claim(parent_dir, sanitize_name(namespace.name), namespace.uid)
        folder = self._dir(parent_dir / name)
        self._add_node(namespace.uid, NodeKind.NAMESPACE, folder / INDEX_FILE, namespace.name, parent_uid)

        for child_uid in namespace.children:
            child = self.index.namespace(child_uid)
            if child is None:
                self._unresolved(child_uid, "child namespace", owner=namespace.uid)
                continue
            self._namespace(child, self._dir(folder / NAMESPACES_FOLDER), namespace.uid)

        types = self._visible_types(namespace)
        for type_ in types:
            self._type(type_, self._dir(folder / TYPES_FOLDER), namespace.uid)

        self._leave(namespace.uid)

    def _global_namespace(self, namespace: Namespace) -> None:
        types = self._visible_types(namespace)
        if not types:
            logger.debug("Global namespace has no visible types; omitted")
            return
        if not self._enter(namespace.uid):
            return

        name = self._claim(ROOT, sanitize_name(self.global_namespace_name), namespace.uid)
        folder = self._dir(ROOT / name)
        self._add_node(
            namespace.uid, NodeKind.NAMESPACE, folder / INDEX_FILE, self.global_namespace_name, None
        )
        for type_ in types:
            self._type(type_, self._dir(folder / TYPES_FOLDER), namespace.uid)

        self._leave(namespace.uid)

    # Types

    def _type(self, type_: AnyType, parent_dir: PurePosixPath, parent_uid: str) -> None:
        if not self._enter(type_.uid):
            return

        name = sanitize_name(type_.name)
        if isinstance(type_, DelegateType):
            stem = self._claim(parent_dir, name, type_.uid)
            self._add_node(
                type_.uid, NodeKind.TYPE, parent_dir / f"{stem}{PAGE_SUFFIX}", type_.name, parent_uid
            )
            self._leave(type_.uid)
            return

        folder = self._dir(parent_dir / self._claim(parent_dir, name, type_.uid))
        self._add_node(type_.uid, NodeKind.TYPE, folder / INDEX_FILE, type_.name, parent_uid)

        groups = self.index.members_by_kind(type_)
        for uid in groups.unresolved:
            self._unresolved(uid, "member", owner=type_.uid)

        if isinstance(type_, EnumType):
            self._member_files(
                type_, folder / FIELDS_FOLDER, groups.enum_values + groups.fields, NodeKind.ENUM_VALUE
            )
        else:
            if not (isinstance(type_, ClassType) and type_.is_static):
                self._constructors(type_, folder, groups.constructors)
            else:
                self._ignored_members(groups.constructors)
            self._static_constructor(type_, folder, groups.static_constructors)
            self._methods(type_, folder, groups.methods)
            self._member_files(type_, folder / PROPERTIES_FOLDER, groups.properties, NodeKind.PROPERTY)
            self._member_files(type_, folder / FIELDS_FOLDER, groups.fields, NodeKind.FIELD)
            self._member_files(type_, folder / EVENTS_FOLDER, groups.events, NodeKind.EVENT)

        # Operators, conversions and finalizers are listed on the type page only
        self._ignored_members(groups.operators + groups.conversions + groups.finalizers)

        for nested_uid in type_.nested_types:
            nested = self.index.type(nested_uid)
            if nested is None:
                self._unresolved(nested_uid, "nested type", owner=type_.uid)
                continue
            if self._ignored(nested):
                self._ignore_type(nested)
                continue
            self._type(nested, self._dir(folder / NESTED_TYPES_FOLDER), type_.uid)

        self._leave(type_.uid)

    def _visible_members(self, members: list) -> list:
        visible = []
        for member in members:
            if self._ignored(member):
                self._plan.ignored.add(member.uid)
            else:
                visible.append(member)
        return visible

    def _ignored_members(self, members: list) -> None:
        for member in members:
            if self._ignored(member):
                self._plan.ignored.add(member.uid)

    def _constructors(self, type_: AnyType, folder: PurePosixPath, constructors: list) -> None:
        visible = [c for c in self._visible_members(constructors) if self._enter(c.uid)]
        if not visible:
            return
        ctor_dir = self._dir(folder / CONSTRUCTORS_FOLDER)
        for number, ctor in enumerate(visible, start=1):
            filename = CONSTRUCTOR_FILE if len(visible) == 1 else f"{CONSTRUCTOR_STEM}{number}{PAGE_SUFFIX}"
            self._add_node(ctor.uid, NodeKind.CONSTRUCTOR, ctor_dir / filename, type_.name, type_.uid)
            self._leave(ctor.uid)

    def _static_constructor(self, type_: AnyType, folder: PurePosixPath, ctors: list) -> None:
        for ctor in self._visible_members(ctors):
            if not self._enter(ctor.uid):
                continue
            self._add_node(
                ctor.uid, NodeKind.STATIC_CONSTRUCTOR, folder / STATIC_CONSTRUCTOR_FILE, type_.name, type_.uid
            )
            self._leave(ctor.uid)
            # A type has at most one type initializer
            return

    def _methods(self, type_: AnyType, folder: PurePosixPath, methods: list) -> None:
        visible = [m for m in self._visible_members(methods) if self._enter(m.uid)]
        if not visible:
            return
        methods_dir = self._dir(folder / METHODS_FOLDER)
        for name, overloads in group_methods_by_name(visible).items():
            stem = self._claim(methods_dir, sanitize_name(name), overloads[0].uid)
            self._add_node(
                overloads[0].uid,
                NodeKind.METHOD_GROUP,
                methods_dir / f"{stem}{PAGE_SUFFIX}",
                name,
                type_.uid,
                member_uids=tuple(m.uid for m in overloads),
            )
            for overload in overloads:
                self._leave(overload.uid)

    def _member_files(
        self, type_: AnyType, kind_dir: PurePosixPath, members: list, kind: NodeKind
    ) -> None:
        visible = [m for m in self._visible_members(members) if self._enter(m.uid)]
        if not visible:
            return
        self._dir(kind_dir)
        for member in visible:
            stem = self._claim(kind_dir, sanitize_name(member.name), member.uid)
            self._add_node(member.uid, kind, kind_dir / f"{stem}{PAGE_SUFFIX}", member.name, type_.uid)
            self._leave(member.uid)


def plan_tree(
    index: ManifestIndex,
    ignore_attributes: Iterable[str] = (),
    global_namespace_name: str = DEFAULT_GLOBAL_NAMESPACE_NAME,
    diagnostics: Optional[DiagnosticLog] = None,
) -> TreePlan:
    """Plan the documentation tree for an indexed manifest."""
    return LayoutPlanner(
        index,
        ignore_attributes=ignore_attributes,
        global_namespace_name=global_namespace_name,
        diagnostics=diagnostics,
    ).plan()
