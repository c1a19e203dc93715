from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union


# ---------------- AST Nodes ----------------
@dataclass
class Sequence:
    children: List["Node"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self):
        return iter(self.children)

@dataclass(frozen=True)
class MovePointer:
    offset: int  # net >/<

@dataclass(frozen=True)
class ModifyCell:
    delta: int  # net +/- on current cell

@dataclass(frozen=True)
class Output:
    pass

@dataclass(frozen=True)
class Input:
    pass

@dataclass
class Loop:
    body: Sequence = field(default_factory=Sequence)

Node = Union[Sequence, MovePointer, ModifyCell, Output, Input, Loop]


# ---------------- Emit + dumps ----------------
def emit(node: Node) -> str:
    """Render a tree back into command text."""
    if isinstance(node, Sequence):
        return "".join(emit(n) for n in node.children)
    if isinstance(node, ModifyCell):
        return ("+" * node.delta) if node.delta > 0 else ("-" * (-node.delta))
    if isinstance(node, MovePointer):
        return (">" * node.offset) if node.offset > 0 else ("<" * (-node.offset))
    if isinstance(node, Output):
        return "."
    if isinstance(node, Input):
        return ","
    if isinstance(node, Loop):
        return "[" + emit(node.body) + "]"
    raise TypeError(f"not an AST node: {node!r}")

def count_nodes(node: Node) -> int:
    """Number of nodes in the tree, the root included."""
    if isinstance(node, Sequence):
        return 1 + sum(count_nodes(n) for n in node.children)
    if isinstance(node, Loop):
        return 1 + count_nodes(node.body)
    return 1

def dump_ast(node: Node, indent: str = "  ") -> str:
    lines: List[str] = []
    _dump(node, 0, indent, lines)
    return "\n".join(lines)

def _dump(node: Node, depth: int, indent: str, out: List[str]) -> None:
    pad = indent * depth
    if isinstance(node, MovePointer):
        out.append(f"{pad}MOVE_PTR({node.offset})")
    elif isinstance(node, ModifyCell):
        out.append(f"{pad}MODIFY_CELL({node.delta})")
    elif isinstance(node, Output):
        out.append(f"{pad}OUTPUT")
    elif isinstance(node, Input):
        out.append(f"{pad}INPUT")
    elif isinstance(node, Sequence):
        out.append(f"{pad}SEQUENCE({len(node.children)} children)")
        for child in node.children:
            _dump(child, depth + 1, indent, out)
    elif isinstance(node, Loop):
        out.append(f"{pad}LOOP")
        _dump(node.body, depth + 1, indent, out)
    else:
        raise TypeError(f"not an AST node: {node!r}")
