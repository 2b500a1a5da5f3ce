from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ala_data.api.schemas.pool_info import PoolInfoResponse


class ProcessedDataRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token_address: str | None = Field(None, alias="tokenAddress", description="Token contract address.")
    query: str | None = Field(None, description="Natural language description of the data wanted.")


class ProcessedDataMetadataResponse(BaseModel):
    timestamp: str
    model_used: str
    amp_url: str
    max_rows: int
    note: str


class ProcessedDataResponse(BaseModel):
    success: bool
    token_address: str
    token_symbol: str
    pool_address: str
    pool_info: PoolInfoResponse
    user_query: str
    generated_sql: str
    row_count: int
    truncated: bool
    data: list[dict[str, Any]]
    metadata: ProcessedDataMetadataResponse
