from pydantic import BaseModel


class CacheStats(BaseModel):
    entries: int
    max_entries: int
    ttl_seconds: float
    hits: int
    misses: int
    renders: int
    evictions: int


class HealthResponse(BaseModel):
    status: str
    renderer: bool
    cache: CacheStats


class ErrorResponse(BaseModel):
    detail: str
