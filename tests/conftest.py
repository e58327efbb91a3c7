"""Shared pytest fixtures for all tests.

The sample manifest describes a small library:

    ns:Foo
      ns:Foo.Sub
        Util            static class with one method
      Bar               class: constructor, static constructor, two Do
                        overloads, a Name property, an Inner nested struct
      Color             enum with Red and Green
      Callback          delegate
      <>c               compiler-generated, never documented
      Hidden            carries an attribute from IGNORED_ATTRIBUTE
"""

import copy
import json
from pathlib import Path

import pytest

from apiwiki.config import Config, load_config
from apiwiki.diagnostics import DiagnosticLog
from apiwiki.manifest import ManifestIndex, parse_manifest

IGNORED_ATTRIBUTE = "type:System.ComponentModel.EditorBrowsableAttribute"

DO_INT = "member:Foo.Bar.Do(System.Int32)"
DO_STRING = "member:Foo.Bar.Do(System.String)"


def _method(uid: str, name: str, declaring: str, params=(), returns="type:System.Void", **extra):
    data = {
        "uid": uid,
        "name": name,
        "memberKind": "method",
        "declaringType": declaring,
        "parameters": [{"name": p_name, "type": p_type} for p_name, p_type in params],
        "returnType": returns,
    }
    data.update(extra)
    return data


SAMPLE_MANIFEST = {
    "assemblies": {
        "asm:Foo": {
            "uid": "asm:Foo",
            "name": "Foo",
            "version": "1.0.0.0",
            "namespaces": ["ns:Foo", "ns:Foo.Sub"],
        }
    },
    "namespaces": {
        "ns:<global>": {"uid": "ns:<global>", "name": "", "children": ["ns:Foo"]},
        "ns:Foo": {
            "uid": "ns:Foo",
            "name": "Foo",
            "parent": "ns:<global>",
            "children": ["ns:Foo.Sub"],
            "types": [
                "type:Foo.Bar",
                "type:Foo.Bar.Inner",
                "type:Foo.Color",
                "type:Foo.Callback",
                "type:Foo.<>c",
                "type:Foo.Hidden",
            ],
            "xmlDocumentation": {"summary": "Root namespace of the sample."},
        },
        "ns:Foo.Sub": {
            "uid": "ns:Foo.Sub",
            "name": "Sub",
            "parent": "ns:Foo",
            "types": ["type:Foo.Sub.Util"],
        },
    },
    "types": {
        "type:Foo.Bar": {
            "uid": "type:Foo.Bar",
            "name": "Bar",
            "typekind": "class",
            "namespace": "ns:Foo",
            "assembly": "asm:Foo",
            "members": [
                "member:Foo.Bar.#ctor",
                DO_INT,
                DO_STRING,
                "member:Foo.Bar.Name",
            ],
            "nestedTypes": ["type:Foo.Bar.Inner"],
            "staticConstructor": "member:Foo.Bar.#cctor",
            "xmlDocumentation": {"summary": "A bar.", "seeAlso": ["type:Foo.Color"]},
        },
        "type:Foo.Bar.Inner": {
            "uid": "type:Foo.Bar.Inner",
            "name": "Inner",
            "typekind": "struct",
            "namespace": "ns:Foo",
            "enclosingType": "type:Foo.Bar",
        },
        "type:Foo.Color": {
            "uid": "type:Foo.Color",
            "name": "Color",
            "typekind": "enum",
            "namespace": "ns:Foo",
            "members": ["member:Foo.Color.Red", "member:Foo.Color.Green"],
        },
        "type:Foo.Callback": {
            "uid": "type:Foo.Callback",
            "name": "Callback",
            "typekind": "delegate",
            "namespace": "ns:Foo",
            "signature": {
                "parameters": [{"name": "value", "type": "type:System.Int32"}],
                "returnType": "type:System.Boolean",
            },
        },
        "type:Foo.<>c": {
            "uid": "type:Foo.<>c",
            "name": "<>c",
            "typekind": "class",
            "namespace": "ns:Foo",
            "isCompilerGenerated": True,
            "members": ["member:Foo.<>c.Lambda"],
        },
        "type:Foo.Hidden": {
            "uid": "type:Foo.Hidden",
            "name": "Hidden",
            "typekind": "class",
            "namespace": "ns:Foo",
            "attributes": ["attr:Foo.Hidden.0"],
        },
        "type:Foo.Sub.Util": {
            "uid": "type:Foo.Sub.Util",
            "name": "Util",
            "typekind": "class",
            "namespace": "ns:Foo.Sub",
            "isStatic": True,
            "members": ["member:Foo.Sub.Util.#ctor", "member:Foo.Sub.Util.Run"],
        },
    },
    "members": {
        "member:Foo.Bar.#ctor": {
            "uid": "member:Foo.Bar.#ctor",
            "name": ".ctor",
            "memberKind": "constructor",
            "declaringType": "type:Foo.Bar",
        },
        DO_INT: _method(
            DO_INT,
            "Do",
            "type:Foo.Bar",
            params=[("value", "type:System.Int32")],
            xmlDocumentation={"summary": "Does it with a number."},
        ),
        DO_STRING: _method(DO_STRING, "Do", "type:Foo.Bar", params=[("text", "type:System.String")]),
        "member:Foo.Bar.Name": {
            "uid": "member:Foo.Bar.Name",
            "name": "Name",
            "memberKind": "property",
            "declaringType": "type:Foo.Bar",
            "propertyType": "type:System.String",
            "hasSetter": True,
        },
        "member:Foo.Color.Red": {
            "uid": "member:Foo.Color.Red",
            "name": "Red",
            "memberKind": "enum-field",
            "declaringType": "type:Foo.Color",
            "value": 0,
        },
        "member:Foo.Color.Green": {
            "uid": "member:Foo.Color.Green",
            "name": "Green",
            "memberKind": "enum-field",
            "declaringType": "type:Foo.Color",
            "value": 1,
        },
        "member:Foo.<>c.Lambda": _method("member:Foo.<>c.Lambda", "Lambda", "type:Foo.<>c"),
        "member:Foo.Sub.Util.#ctor": {
            "uid": "member:Foo.Sub.Util.#ctor",
            "name": ".ctor",
            "memberKind": "constructor",
            "declaringType": "type:Foo.Sub.Util",
        },
        "member:Foo.Sub.Util.Run": _method(
            "member:Foo.Sub.Util.Run", "Run", "type:Foo.Sub.Util", isStatic=True
        ),
    },
    "staticConstructors": {
        "member:Foo.Bar.#cctor": {"uid": "member:Foo.Bar.#cctor", "name": ".cctor"},
    },
    "attributes": {
        "attr:Foo.Hidden.0": {"uid": "attr:Foo.Hidden.0", "attributeType": IGNORED_ATTRIBUTE},
    },
    "metadata": {"author": "extractor", "toolVersion": "2.3.0"},
}

# Relative paths of every page generated for SAMPLE_MANIFEST
SAMPLE_PAGES = {
    "Foo/index.mdx",
    "Foo/Namespaces/Sub/index.mdx",
    "Foo/Namespaces/Sub/Types/Util/index.mdx",
    "Foo/Namespaces/Sub/Types/Util/Methods/Run.mdx",
    "Foo/Types/Bar/index.mdx",
    "Foo/Types/Bar/Constructors/Constructor.mdx",
    "Foo/Types/Bar/static-constructor.mdx",
    "Foo/Types/Bar/Methods/Do.mdx",
    "Foo/Types/Bar/Properties/Name.mdx",
    "Foo/Types/Bar/Nested-Types/Inner/index.mdx",
    "Foo/Types/Color/index.mdx",
    "Foo/Types/Color/Fields/Red.mdx",
    "Foo/Types/Color/Fields/Green.mdx",
    "Foo/Types/Callback.mdx",
}


@pytest.fixture
def manifest_data():
    """A fresh, mutable copy of the sample manifest JSON."""
    return copy.deepcopy(SAMPLE_MANIFEST)


@pytest.fixture
def diagnostics():
    return DiagnosticLog()


@pytest.fixture
def index(manifest_data, diagnostics):
    """ManifestIndex over the sample manifest."""
    return ManifestIndex(parse_manifest(manifest_data), diagnostics)


@pytest.fixture
def write_manifest(tmp_path):
    """Write manifest JSON into the workspace and return its path."""

    def _write(data, name: str = "manifest.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config(tmp_path, manifest_data, write_manifest):
    """Build a validated Config for a version of the sample workspace.

    The sample manifest is written to the workspace unless the test already
    wrote one. Extra keyword arguments become [generation] settings.
    """

    def _make(version: str = "1.0.0", **generation) -> Config:
        if not (tmp_path / "manifest.json").exists():
            write_manifest(manifest_data)
        settings = {"ignore_attributes": IGNORED_ATTRIBUTE}
        settings.update(generation)
        lines = ["[generation]"]
        lines.extend(f"{key} = {value}" for key, value in settings.items())
        config_path = tmp_path / "apiwiki.ini"
        config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return load_config(config_path, workspace_path=tmp_path, version=version)

    return _make


def read_tree(root: Path) -> dict[str, bytes]:
    """Every file under root keyed by its relative POSIX path."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def tree_reader():
    return read_tree
