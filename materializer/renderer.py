"""TSX rendering of RenderSpecs and of the job manifest."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import replace

from .render_spec import Child, Expr, Node, RenderSpec, StyleValue, Text

INDENT = "  "


def js_string(value: object) -> str:
    text = str(value).replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{text}'"


def ts_literal(value: object) -> str:
    """TypeScript source for a JSON-compatible default value."""
    return json.dumps(value, ensure_ascii=False, default=str)


def _value(value: StyleValue) -> str:
    if isinstance(value, Expr):
        return value.code
    return js_string(value)


def _attribute(name: str, value: StyleValue) -> str:
    if isinstance(value, Expr):
        return f"{name}={{{value.code}}}"
    return f"{name}={json.dumps(value, ensure_ascii=False)}"


def _render_child(child: Child, depth: int) -> list[str]:
    pad = INDENT * depth
    if isinstance(child, Text):
        return [f"{pad}{{{json.dumps(child.value, ensure_ascii=False)}}}"]
    if isinstance(child, Expr):
        return [f"{pad}{{{child.code}}}"]
    return _render_node(child, depth)


def _render_node(node: Node, depth: int) -> list[str]:
    pad = INDENT * depth
    if node.each is not None:
        inner = _render_node(replace(node, each=None), depth + 1)
        return [f"{pad}{{{node.each}.map(({node.item}, {node.index}) => ("] + inner + [f"{pad}))}}"]
    if node.when is not None:
        inner = _render_node(replace(node, when=None), depth + 1)
        return [f"{pad}{{{node.when} && ("] + inner + [f"{pad})}}"]

    attributes: list[str] = []
    if node.class_name:
        attributes.append(f"{pad}{INDENT}className={{`{node.class_name} ${{className}}`}}")
    for name, value in node.attrs.items():
        attributes.append(f"{pad}{INDENT}{_attribute(name, value)}")
    if node.style:
        attributes.append(f"{pad}{INDENT}style={{{{")
        attributes.extend(
            f"{pad}{INDENT * 2}{key}: {_value(value)}{',' if i < len(node.style) - 1 else ''}"
            for i, (key, value) in enumerate(node.style.items())
        )
        attributes.append(f"{pad}{INDENT}}}}}")

    if not attributes:
        if not node.children:
            return [f"{pad}<{node.tag} />"]
        lines = [f"{pad}<{node.tag}>"]
    else:
        lines = [f"{pad}<{node.tag}", *attributes]
        if not node.children:
            lines.append(f"{pad}/>")
            return lines
        lines.append(f"{pad}>")
    for child in node.children:
        lines.extend(_render_child(child, depth + 1))
    lines.append(f"{pad}</{node.tag}>")
    return lines


def render_component(spec: RenderSpec) -> str:
    react_import = "React"
    if spec.hooks:
        react_import = f"React, {{ {', '.join(spec.hooks)} }}"
    lines = [f"import {react_import} from 'react';"]
    lines.extend(f"import {name} from './{name}';" for name in spec.imports)
    lines.append("")

    lines.append(f"interface {spec.name}Props {{")
    lines.extend(f"{INDENT}{prop.name}?: {prop.ts_type};" for prop in spec.props)
    lines.append("}")
    lines.append("")

    lines.append(f"const {spec.name}: React.FC<{spec.name}Props> = ({{")
    params = [
        prop.name if prop.default is None else f"{prop.name} = {prop.default}"
        for prop in spec.props
    ]
    lines.append(",\n".join(f"{INDENT}{param}" for param in params))
    lines.append("}) => {")
    for statement in spec.statements:
        lines.extend(f"{INDENT}{line}" if line else "" for line in statement.splitlines())
        lines.append("")
    lines.append(f"{INDENT}return (")
    lines.extend(_render_node(spec.root, 2))
    lines.append(f"{INDENT});")
    lines.append("};")
    lines.append("")
    lines.append(f"export default {spec.name};")
    return "\n".join(lines) + "\n"


def render_manifest(component_names: Sequence[str], main_name: str | None = None) -> str:
    lines = ["// Generated component index"]
    lines.extend(
        f"export {{ default as {name} }} from './{name}';" for name in component_names
    )
    if main_name is not None:
        lines.append(f"export {{ default as MainComponent }} from './{main_name}';")
    return "\n".join(lines) + "\n"
