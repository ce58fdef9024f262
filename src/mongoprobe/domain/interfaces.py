from typing import Any, Dict, Protocol, runtime_checkable

@runtime_checkable
class DatabaseConnector(Protocol):
    """
    What the prober needs from a database handle.
    close() must be safe to call when connect() never succeeded, and more than once.
    """
    def connect(self) -> None:
        ...

    def fetch_stats(self, database_name: str) -> Dict[str, Any]:
        ...

    def close(self) -> None:
        ...
