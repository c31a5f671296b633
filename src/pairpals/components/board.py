from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    pair_count: int
    columns: int

    @property
    def tile_count(self) -> int:
        return self.pair_count * 2
