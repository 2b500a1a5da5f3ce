from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ala_data.domain.entities.pool import PoolDescriptor
from ala_data.domain.services.normalization import Table


@dataclass(frozen=True)
class AggregatePoolHistoryInput:
    token_address: str
    days: int | str = 1


@dataclass(frozen=True)
class ExportPoolHistoryOutput:
    pool: PoolDescriptor
    window_days: int
    generated_at: datetime
    tables: list[Table]

    def table(self, name: str) -> Table:
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(name)
