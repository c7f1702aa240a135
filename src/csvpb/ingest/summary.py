from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoadSummary:
    """Counts for one decoded input."""
    message_type: str
    source: str
    total: int
    loaded: int
    rejected: int

    def render_one_line(self) -> str:
        """How a summary is formatted for logs."""
        return f"{self.message_type}: total={self.total} loaded={self.loaded} rejected={self.rejected} source={self.source}"
