from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from rogue.errors import ImmutableAssignment, TypeMismatch, UndefinedVariable
from rogue.tokens import Token
from rogue.types import check_annotation


@dataclass
class Binding:
    """A name's declared type, current value and mutability in one frame."""
    declared_type: Optional[Token]
    value: Optional[Any]  # None until a value has been stored
    mutable: bool


@dataclass
class Frame:
    values: Dict[str, Binding] = field(default_factory=dict)
    parent: Optional[int] = None


class Environment:
    """Scope frames kept in an arena and addressed by index.

    Frame 0 is the global frame. Entering a scope appends a frame whose parent
    is the current one; leaving restores the previous index and drops the
    frames above it.
    """
    def __init__(self):
        self.frames: List[Frame] = [Frame()]
        self.current = 0

    @property
    def depth(self) -> int:
        return len(self.frames)

    def define(self, name: str, binding: Binding):
        self.frames[self.current].values[name] = binding

    def lookup(self, name: str) -> Optional[Binding]:
        index: Optional[int] = self.current
        while index is not None:
            frame = self.frames[index]
            if name in frame.values:
                return frame.values[name]
            index = frame.parent
        return None

    def get(self, name: Token) -> Binding:
        binding = self.lookup(name.lexeme)
        if binding is None:
            raise UndefinedVariable(name)
        return binding

    def assign(self, name: Token, value: Any):
        binding = self.get(name)
        if not binding.mutable:
            raise ImmutableAssignment(name)
        if binding.declared_type is not None:
            mismatch = check_annotation(binding.declared_type.lexeme, value)
            if mismatch is not None:
                raise TypeMismatch(name, *mismatch)
        binding.value = value

    def child_scope(self) -> int:
        """Push a frame enclosed by the current one, make it current and return its index."""
        self.frames.append(Frame(parent=self.current))
        self.current = len(self.frames) - 1
        return self.current

    def restore(self, index: int):
        self.current = index
        del self.frames[index + 1:]

    @contextmanager
    def scope(self) -> Iterator[int]:
        parent = self.current
        try:
            yield self.child_scope()
        finally:
            self.restore(parent)

    def snapshot(self) -> Dict[str, Any]:
        """Visible names and their values, innermost binding winning."""
        names: Dict[str, Any] = {}
        index: Optional[int] = self.current
        while index is not None:
            frame = self.frames[index]
            for name, binding in frame.values.items():
                names.setdefault(name, binding.value)
            index = frame.parent
        return names
