"""Page content: generated skeleton merged with the node's sidecar.

Injection rules:
- namespace pages: sidecar content comes before the listing tables
- type and member pages: sidecar content comes after the signature and
  summary block and before any detailed sub-listing
- "See Also" is always the last section of every page
"""

import logging
from typing import Optional

from apiwiki.constants import DEFAULT_DESCRIPTION_PLACEHOLDER, SEE_ALSO_HEADING, UNRESOLVED_MARKER
from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.generation.frontmatter import build_frontmatter
from apiwiki.generation.layout import GeneratedNode, NodeKind, TreePlan
from apiwiki.generation.markdown import (
    PageBuilder,
    bullet_list,
    code_block,
    escape_mdx,
    escape_table_cell,
    inline_code,
    link,
    relative_link,
    table,
)
from apiwiki.generation.signatures import member_signature, type_name, type_signature
from apiwiki.manifest import (
    AnyMember,
    AnyType,
    ClassType,
    DelegateType,
    ManifestIndex,
    Method,
    Namespace,
)
from apiwiki.manifest.models import Documented, MemberBase
from apiwiki.sidecars import SeeAlsoRef, SidecarEntry, SidecarStore, merge_entries, merge_see_also
from apiwiki.sidecars.merge import sections_in_order

logger = logging.getLogger(__name__)

TYPE_TITLES = {
    "class": "Class",
    "struct": "Struct",
    "enum": "Enum",
    "interface": "Interface",
    "delegate": "Delegate",
}

MEMBER_TITLES = {
    NodeKind.CONSTRUCTOR: "Constructor",
    NodeKind.STATIC_CONSTRUCTOR: "Static Constructor",
    NodeKind.METHOD_GROUP: "Method",
    NodeKind.PROPERTY: "Property",
    NodeKind.FIELD: "Field",
    NodeKind.EVENT: "Event",
    NodeKind.ENUM_VALUE: "Field",
}

# Member listings on a type page: heading and node kinds, in page order
MEMBER_LISTINGS = (
    ("Constructors", (NodeKind.CONSTRUCTOR, NodeKind.STATIC_CONSTRUCTOR)),
    ("Properties", (NodeKind.PROPERTY,)),
    ("Methods", (NodeKind.METHOD_GROUP,)),
    ("Events", (NodeKind.EVENT,)),
    ("Fields", (NodeKind.FIELD, NodeKind.ENUM_VALUE)),
)


def _one_line(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    flattened = " ".join(text.split())
    return flattened or None


class PageRenderer:
    """Render final MDX for the nodes of one plan.

    Args:
        index: The indexed manifest.
        plan: The planned tree; only nodes in it are linked.
        sidecars: Sidecars of the version being generated.
        version: Version tag written to frontmatter.
        diagnostics: Collector for unresolved and ignored references.
        description_placeholder: Listing text for entities without a description.
    """

    def __init__(
        self,
        index: ManifestIndex,
        plan: TreePlan,
        sidecars: SidecarStore,
        version: str,
        diagnostics: Optional[DiagnosticLog] = None,
        description_placeholder: str = DEFAULT_DESCRIPTION_PLACEHOLDER,
    ) -> None:
        self.index = index
        self.plan = plan
        self.sidecars = sidecars
        self.version = version
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.description_placeholder = description_placeholder
        self._entries: dict[str, Optional[SidecarEntry]] = {}

    # Sidecar resolution

    def entry_for(self, uid: str) -> Optional[SidecarEntry]:
        """Effective sidecar entry of uid.

        Members that inherit or override documentation get the merge of
        their ancestors' sidecars (least specific first) and their own.
        """
        if uid in self._entries:
            return self._entries[uid]

        entries = []
        member = self.index.member(uid)
        if member is not None:
            for ancestor in self.index.overridden_members(member):
                ancestor_entry = self.sidecars.get(ancestor.uid)
                # Untouched skeletons add nothing to the merge
                if ancestor_entry is not None and ancestor_entry.has_content:
                    entries.append(ancestor_entry)
        own = self.sidecars.get(uid)
        if own is not None:
            entries.append(own)

        merged = merge_entries(entries)
        self._entries[uid] = merged
        return merged

    def description(self, uid: str) -> Optional[str]:
        entry = self.entry_for(uid)
        if entry is None:
            return None
        return _one_line(entry.description)

    # Shared pieces

    def title(self, node: GeneratedNode) -> str:
        entity = self.index.resolve(node.uid)
        if node.kind == NodeKind.NAMESPACE:
            return f"{node.title} Namespace"
        if node.kind == NodeKind.TYPE:
            kind = getattr(entity, "typekind", "")
            return f"{node.title} {TYPE_TITLES.get(kind, 'Type')}".strip()
        declaring = self.index.type(getattr(entity, "declaring_type", None))
        suffix = MEMBER_TITLES[node.kind]
        if node.kind in (NodeKind.CONSTRUCTOR, NodeKind.STATIC_CONSTRUCTOR) or declaring is None:
            return f"{node.title} {suffix}"
        return f"{declaring.name}.{node.title} {suffix}"

    def frontmatter(self, node: GeneratedNode) -> str:
        entity = self.index.resolve(node.uid)
        if node.kind == NodeKind.NAMESPACE:
            kind = "namespace"
        elif node.kind == NodeKind.TYPE:
            kind = getattr(entity, "typekind", None)
        else:
            kind = getattr(entity, "member_kind", None)

        description = self.description(node.uid)
        if description is None and isinstance(entity, Documented):
            description = _one_line(entity.summary)

        return build_frontmatter(
            {
                "uid": node.uid,
                "title": self.title(node),
                "sidebar_label": node.title,
                "description": description,
                "type": node.kind.page_type,
                "kind": kind,
                "version": self.version,
            }
        )

    def _node_link(self, page: GeneratedNode, target: GeneratedNode, text: Optional[str] = None) -> str:
        return link(text or target.title, relative_link(page.path, target.path))

    def _listing(self, page: GeneratedNode, nodes: list[GeneratedNode], header: str) -> str:
        rows = []
        for node in nodes:
            name_cell = self._node_link(page, node).replace("|", "\\|")
            description = self.description(node.uid) or self.description_placeholder
            rows.append([name_cell, escape_table_cell(description)])
        return table([header, "Description"], rows)

    def reference(self, page: GeneratedNode, ref: SeeAlsoRef) -> str:
        """Render one see-also reference as a link, inline code or a marker."""
        if ref.is_external:
            return link(ref.title or ref.url or "", ref.url or "")

        uid = ref.uid or ""
        target = self.plan.node_for(uid)
        if target is not None:
            text = ref.title or self.index.display_name(uid)
            return self._node_link(page, target, text)

        if self.plan.is_ignored(uid):
            self.diagnostics.warn(
                DiagnosticCode.IGNORED_REFERENCE,
                "reference to an ignored entity",
                uid=uid,
                path=page.path.as_posix(),
            )
            return UNRESOLVED_MARKER.format(uid=uid)

        if self.index.resolve(uid) is None:
            self.diagnostics.warn(
                DiagnosticCode.UNRESOLVED_UID,
                "see also reference does not resolve",
                uid=uid,
                path=page.path.as_posix(),
            )
            return UNRESOLVED_MARKER.format(uid=uid)

        return inline_code(self.index.display_name(uid))

    def _type_ref(self, page: GeneratedNode, uid: Optional[str]) -> str:
        """Type reference inside prose: linked when it has a page."""
        target = self.plan.node_for(uid)
        if target is not None:
            return self._node_link(page, target, type_name(uid, self.index))
        return inline_code(type_name(uid, self.index))

    def _add_sidecar_body(self, builder: PageBuilder, entry: Optional[SidecarEntry]) -> None:
        if entry is None:
            return
        if entry.description:
            builder.text(entry.description)
        builder.text(entry.preamble)
        sections, _ = sections_in_order(entry)
        for section in sections:
            builder.section(section.heading, section.content)

    def _add_see_also(self, builder: PageBuilder, page: GeneratedNode, entry: Optional[SidecarEntry]) -> None:
        refs: list[SeeAlsoRef] = list(entry.see_also) if entry is not None else []
        entity = self.index.resolve(page.uid)
        xml_docs = getattr(entity, "xml_documentation", None)
        if xml_docs is not None and xml_docs.see_also:
            refs = merge_see_also(refs, [SeeAlsoRef(uid=uid) for uid in xml_docs.see_also])

        prose = ""
        if entry is not None:
            _, see_also_section = sections_in_order(entry)
            if see_also_section is not None:
                prose = see_also_section.content.strip("\n")

        items = bullet_list(self.reference(page, ref) for ref in refs) if refs else ""
        body = "\n\n".join(part for part in (prose, items) if part.strip())
        builder.section(SEE_ALSO_HEADING, body)

    def _summary(self, builder: PageBuilder, entity: object) -> None:
        docs = getattr(entity, "xml_documentation", None)
        if docs is not None and docs.summary:
            builder.text(escape_mdx(docs.summary.strip()))

    def _parameter_docs(self, builder: PageBuilder, page: GeneratedNode, entity: object) -> None:
        params = getattr(entity, "parameters", None)
        if params is None and isinstance(entity, DelegateType):
            params = entity.signature.parameters
        docs = getattr(entity, "xml_documentation", None)
        described = docs.parameters if docs is not None else {}

        if params:
            lines = []
            for param in params:
                line = f"`{param.name}` {self._type_ref(page, param.type)}"
                if described.get(param.name):
                    line += f": {escape_mdx(_one_line(described[param.name]) or '')}"
                lines.append(line)
            builder.text("**Parameters**")
            builder.text(bullet_list(lines))

        if docs is not None and docs.returns:
            builder.text(f"**Returns**: {escape_mdx(_one_line(docs.returns) or '')}")

        if docs is not None and docs.exceptions:
            lines = []
            for exception in docs.exceptions:
                line = self._type_ref(page, exception.uid)
                if exception.description:
                    line += f": {escape_mdx(_one_line(exception.description) or '')}"
                lines.append(line)
            builder.text("**Exceptions**")
            builder.text(bullet_list(lines))

    # Page kinds

    def render(self, node: GeneratedNode) -> str:
        """Final MDX content of one node."""
        entity = self.index.resolve(node.uid)
        entry = self.entry_for(node.uid)
        builder = PageBuilder()
        builder.heading(escape_mdx(self.title(node)), level=1)

        if node.kind == NodeKind.NAMESPACE:
            self._namespace_body(builder, node, entity, entry)
        elif node.kind == NodeKind.TYPE:
            self._type_body(builder, node, entity, entry)
        elif node.kind == NodeKind.METHOD_GROUP:
            self._method_group_body(builder, node, entry)
        else:
            self._member_body(builder, node, entity, entry)

        self._add_see_also(builder, node, entry)
        return self.frontmatter(node) + builder.build()

    def _namespace_body(
        self,
        builder: PageBuilder,
        node: GeneratedNode,
        namespace: Optional[Namespace],
        entry: Optional[SidecarEntry],
    ) -> None:
        self._summary(builder, namespace)
        self._add_sidecar_body(builder, entry)

        namespaces = self.plan.children_of(node.uid, NodeKind.NAMESPACE)
        if namespaces:
            builder.section("Namespaces", self._listing(node, namespaces, "Namespace"))
        types = self.plan.children_of(node.uid, NodeKind.TYPE)
        if types:
            builder.section("Types", self._listing(node, types, "Type"))

    def _type_body(
        self,
        builder: PageBuilder,
        node: GeneratedNode,
        type_: Optional[AnyType],
        entry: Optional[SidecarEntry],
    ) -> None:
        if type_ is None:
            return
        self._summary(builder, type_)

        facts = []
        parent = self.plan.node_for(node.parent_uid)
        if parent is not None:
            label = "Namespace" if parent.kind == NodeKind.NAMESPACE else "Declaring type"
            facts.append(f"**{label}:** {self._node_link(node, parent)}")
        if type_.assembly:
            facts.append(f"**Assembly:** {escape_mdx(self.index.display_name(type_.assembly))}")
        if isinstance(type_, ClassType):
            chain = self.index.base_chain(type_)
            if type_.base_class and len(chain) == 1:
                facts.append(f"**Inheritance:** {self._type_ref(node, type_.base_class)} → {escape_mdx(type_.name)}")
            elif len(chain) > 1:
                steps = [self._type_ref(node, t.uid) for t in reversed(chain[1:])]
                facts.append(f"**Inheritance:** {' → '.join(steps)} → {escape_mdx(type_.name)}")
        builder.text("  \n".join(facts))

        builder.text(code_block(type_signature(type_, self.index)))
        if isinstance(type_, DelegateType):
            self._parameter_docs(builder, node, type_)

        self._add_sidecar_body(builder, entry)

        for heading, kinds in MEMBER_LISTINGS:
            nodes = self.plan.children_of(node.uid, *kinds)
            if nodes:
                builder.section(heading, self._listing(node, nodes, "Member"))

        groups = self.index.members_by_kind(type_, keep=lambda m: not self.plan.is_ignored(m.uid))
        for heading, members in (
            ("Operators", groups.operators),
            ("Conversions", groups.conversions),
            ("Finalizer", groups.finalizers),
        ):
            if members:
                builder.section(
                    heading,
                    bullet_list(inline_code(member_signature(m, self.index)) for m in members),
                )

        nested = self.plan.children_of(node.uid, NodeKind.TYPE)
        if nested:
            builder.section("Nested Types", self._listing(node, nested, "Type"))

    def _member_facts(self, builder: PageBuilder, node: GeneratedNode, member: AnyMember) -> None:
        facts = []
        declaring = self.plan.node_for(member.declaring_type)
        if declaring is not None:
            facts.append(f"**Declaring type:** {self._node_link(node, declaring)}")
        if isinstance(member, MemberBase) and member.inherited_from:
            facts.append(f"**Inherited from:** {self._type_ref(node, member.inherited_from)}")
        builder.text("  \n".join(facts))

    def _member_body(
        self,
        builder: PageBuilder,
        node: GeneratedNode,
        member: Optional[AnyMember],
        entry: Optional[SidecarEntry],
    ) -> None:
        if member is None:
            return
        self._summary(builder, member)
        self._member_facts(builder, node, member)
        builder.text(code_block(member_signature(member, self.index)))
        self._parameter_docs(builder, node, member)
        self._add_sidecar_body(builder, entry)

    def _method_group_body(
        self, builder: PageBuilder, node: GeneratedNode, entry: Optional[SidecarEntry]
    ) -> None:
        overloads = [m for m in (self.index.member(uid) for uid in node.member_uids) if isinstance(m, Method)]
        if not overloads:
            return
        first = overloads[0]
        self._summary(builder, first)
        self._member_facts(builder, node, first)
        builder.text(code_block("\n".join(member_signature(m, self.index) for m in overloads)))

        if len(overloads) == 1:
            self._parameter_docs(builder, node, first)
            self._add_sidecar_body(builder, entry)
            return

        self._add_sidecar_body(builder, entry)

        details = PageBuilder()
        for overload in overloads:
            details.heading(inline_code(member_signature(overload, self.index)), level=3)
            if overload.uid != first.uid:
                self._summary(details, overload)
                description = self.description(overload.uid)
                if description:
                    details.text(description)
            self._parameter_docs(details, node, overload)
        builder.section("Overloads", details.build())
