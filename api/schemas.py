from pydantic import BaseModel, ConfigDict, Field
from typing import Dict


class OptimizationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_size: int = Field(alias="originalSize")
    optimized_size: int = Field(alias="optimizedSize")
    original_url: str = Field(alias="originalUrl")
    optimized_url: str = Field(alias="optimizedUrl")
    reduction: str


class ErrorResponse(BaseModel):
    error: str


class HealthStatus(BaseModel):
    status: str
    encoders: Dict[str, bool]
    pending_cleanups: int
