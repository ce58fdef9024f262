from enum import Enum
from typing import List, Optional, Any, Dict
from pydantic import BaseModel, Field

class ProbeState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    QUERYING_STATS = "querying_stats"
    DONE = "done"
    FAILED = "failed"
    RELEASED = "released"

class FailureKind(str, Enum):
    CONNECTION = "connection"
    QUERY = "query"

class ProbeReport(BaseModel):
    """Outcome of a single probe run"""
    endpoint: str  # redacted
    database: str
    state: ProbeState = ProbeState.IDLE
    states: List[ProbeState] = Field(default_factory=list)
    connected: bool = False
    latency_ms: Optional[float] = None
    stats: Optional[Dict[str, Any]] = None
    failure: Optional[FailureKind] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None
