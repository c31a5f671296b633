from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class CustomContent:
    """Content references supplied from outside (e.g. uploaded images) for the next board."""

    refs: List[str] = field(default_factory=list)

    def add(self, refs) -> int:
        added = 0
        for ref in refs:
            if not ref:
                continue
            ref = str(ref)
            if ref in self.refs:
                continue
            self.refs.append(ref)
            added += 1
        return added

    def clear(self) -> None:
        self.refs.clear()
