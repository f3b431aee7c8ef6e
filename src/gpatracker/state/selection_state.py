from dataclasses import dataclass
from typing import Optional


@dataclass
class SelectionState:
    """
    Current (batch, semester) choice plus a generation counter. Callers take a
    token before a store round-trip and drop the result if the token is no
    longer current by the time it returns.
    """

    batch: Optional[str] = None
    semester: Optional[int] = None
    generation: int = 0

    def select(self, batch: Optional[str], semester: Optional[int]) -> int:
        self.batch = batch
        self.semester = semester
        self.generation += 1
        return self.generation

    def is_current(self, token: int) -> bool:
        return token == self.generation

    def clear(self) -> None:
        self.select(None, None)
