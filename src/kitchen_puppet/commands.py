from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CommandBuilder:
    """Ordered list of optional shell fragments joined by a separator.

    Fragments that are ``None`` or empty are dropped at render time, so
    callers can append conditional pieces without branching.
    """

    separator: str = " "
    fragments: list[str | None] = field(default_factory=list)

    def add(self, *fragments: str | None) -> "CommandBuilder":
        self.fragments.extend(fragments)
        return self

    def add_if(self, condition: object, *fragments: str | None) -> "CommandBuilder":
        if condition:
            self.fragments.extend(fragments)
        return self

    def present(self) -> list[str]:
        return [f for f in self.fragments if f]

    def render(self) -> str:
        return self.separator.join(self.present())

    def __str__(self) -> str:
        return self.render()

    def __bool__(self) -> bool:
        return bool(self.present())
