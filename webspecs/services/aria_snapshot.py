"""Parsing and diffing of textual accessibility-tree snapshots.

A snapshot is an indentation-delimited outline, one node per line::

    - main:
      - heading "Title" [level=1]
      - link "Home":
        - /url: /
      - checkbox "Remember me" [checked]

The leading ``- `` and trailing ``:`` of Playwright's YAML flavour are
optional.  Each indent unit (two spaces) nests a node one level deeper.
Property lines such as ``/url: /`` become attributes of the enclosing node.

Snapshots come from a browser, so parsing is forgiving: an indent that jumps
more than one level is attached to the deepest open node, and unparseable
lines become ``unknown`` nodes instead of errors.
"""

import re
from collections import Counter
from typing import Dict, List, Optional

from webspecs.models.aria import AriaNode, AriaSnapshotAnalysis, RoleCountChange, SnapshotDiff

_INDENT_UNIT = 2

_NODE_RE = re.compile(
    r"^(?P<role>[\w-]+)"
    r'(?:\s+"(?P<name>(?:[^"\\]|\\.)*)")?'
    r"(?P<attrs>(?:\s*\[[^\]]*\])*)"
    r"\s*(?::\s*(?P<text>.*))?$"
)
_PROPERTY_RE = re.compile(r"^/(?P<key>[\w-]+)\s*:?\s*(?P<value>.*)$")
_QUOTED_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')
_BRACKET_RE = re.compile(r"\[([^\]]*)\]")
_ROLE_RE = re.compile(r"^([\w-]+)")


def _unescape(value: str) -> str:
    return value.replace('\\"', '"').replace("\\\\", "\\")


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _parse_attributes(raw: str) -> Dict[str, object]:
    attributes: Dict[str, object] = {}
    for group in _BRACKET_RE.findall(raw):
        for token in group.split():
            if "=" in token:
                key, value = token.split("=", 1)
                attributes[key] = value
            else:
                # Presence-only flag such as [checked] or [disabled]
                attributes[token] = True
    return attributes


def _parse_node(content: str) -> dict:
    """Parse one node line like ``heading "Title" [level=1]`` into a draft node."""
    match = _NODE_RE.match(content)
    if match:
        name = match.group("name")
        if name is not None:
            name = _unescape(name)
        else:
            text = (match.group("text") or "").strip()
            if len(text) >= 2 and text[0] == text[-1] == '"':
                text = _unescape(text[1:-1])
            name = text or None
        return {
            "role": match.group("role"),
            "name": name,
            "attributes": _parse_attributes(match.group("attrs") or ""),
            "children": [],
        }

    role_match = _ROLE_RE.match(content)
    name_match = _QUOTED_RE.search(content)
    return {
        "role": role_match.group(1) if role_match else "unknown",
        "name": _unescape(name_match.group(1)) if name_match else None,
        "attributes": _parse_attributes(content),
        "children": [],
    }


def _freeze(draft: dict) -> AriaNode:
    return AriaNode(
        role=draft["role"],
        name=draft["name"],
        attributes=draft["attributes"],
        children=[_freeze(child) for child in draft["children"]],
    )


def parse_aria_snapshot(snapshot: Optional[str]) -> List[AriaNode]:
    """Parse snapshot text into a forest of :class:`AriaNode`."""
    roots: List[dict] = []
    # stack[i] is the open node at depth i
    stack: List[dict] = []

    for raw_line in (snapshot or "").splitlines():
        line = raw_line.expandtabs(_INDENT_UNIT).rstrip()
        content = line.lstrip(" ")
        if not content:
            continue
        indent = len(line) - len(content)

        if content == "-":
            continue
        if content.startswith("- "):
            content = content[2:].strip()

        depth = min(indent // _INDENT_UNIT, len(stack))
        del stack[depth:]

        property_match = _PROPERTY_RE.match(content)
        if property_match:
            if stack:
                stack[-1]["attributes"][property_match.group("key")] = property_match.group("value").strip()
            continue

        node = _parse_node(content)
        (stack[-1]["children"] if stack else roots).append(node)
        stack.append(node)

    return [_freeze(root) for root in roots]


def count_by_role(nodes: List[AriaNode]) -> Dict[str, int]:
    """Tally every node of the forest by its exact role string."""
    counts: Dict[str, int] = {}

    def traverse(node: AriaNode) -> None:
        counts[node.role] = counts.get(node.role, 0) + 1
        for child in node.children:
            traverse(child)

    for node in nodes:
        traverse(node)
    return counts


def analyze_aria_snapshot(snapshot: Optional[str]) -> AriaSnapshotAnalysis:
    nodes = parse_aria_snapshot(snapshot)
    return AriaSnapshotAnalysis(nodes=nodes, counts=count_by_role(nodes))


def _label(node: AriaNode) -> str:
    parts = [node.role]
    if node.name is not None:
        parts.append(f'"{_escape(node.name)}"')
    for key, value in node.attributes.items():
        if value is True:
            parts.append(f"[{key}]")
        elif value is not False:
            parts.append(f"[{key}={value}]")
    return " ".join(parts)


def serialize_aria_nodes(nodes: List[AriaNode], depth: int = 0) -> List[str]:
    """Flatten a forest back into normalized snapshot lines."""
    lines: List[str] = []
    for node in nodes:
        suffix = ":" if node.children else ""
        lines.append(f"{' ' * (_INDENT_UNIT * depth)}- {_label(node)}{suffix}")
        lines.extend(serialize_aria_nodes(node.children, depth + 1))
    return lines


def _multiset_difference(left: List[str], right: List[str]) -> List[str]:
    """Lines of *left* not matched by an occurrence in *right*, in *left* order."""
    available = Counter(right)
    missing: List[str] = []
    for line in left:
        if available[line] > 0:
            available[line] -= 1
        else:
            missing.append(line)
    return missing


def compare_snapshots(static_snapshot: Optional[str], hydrated_snapshot: Optional[str]) -> SnapshotDiff:
    """Diff the accessibility tree before and after JavaScript execution."""
    static = analyze_aria_snapshot(static_snapshot)
    hydrated = analyze_aria_snapshot(hydrated_snapshot)

    static_lines = serialize_aria_nodes(static.nodes)
    hydrated_lines = serialize_aria_nodes(hydrated.nodes)

    roles = list(static.counts)
    roles.extend(role for role in hydrated.counts if role not in static.counts)

    count_changes = [
        RoleCountChange(
            role=role,
            static=static.counts.get(role, 0),
            hydrated=hydrated.counts.get(role, 0),
        )
        for role in roles
        if static.counts.get(role, 0) != hydrated.counts.get(role, 0)
    ]
    count_changes.sort(key=lambda change: abs(change.hydrated - change.static), reverse=True)

    return SnapshotDiff(
        added=_multiset_difference(hydrated_lines, static_lines),
        removed=_multiset_difference(static_lines, hydrated_lines),
        count_changes=count_changes,
    )


def snapshot_has_differences(diff: SnapshotDiff) -> bool:
    return bool(diff.added or diff.removed or diff.count_changes)
