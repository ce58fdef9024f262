import logging
import time
from typing import Callable, Optional
from ..config import ProbeSettings, redact_url
from ..connectors.mongo import MongoConnector
from ..domain.interfaces import DatabaseConnector
from ..domain.models import FailureKind, ProbeReport, ProbeState
from ..exceptions import ConnectionError, QueryError

logger = logging.getLogger(__name__)

class ConnectivityProber:
    """
    Runs one probe against a connector:
    Idle -> Connecting -> Connected -> QueryingStats -> Done, any step -> Failed,
    then Released. The connector is closed on every path.
    """
    def __init__(self, connector: DatabaseConnector, database_name: str, endpoint: str = ""):
        self.connector = connector
        self.database_name = database_name
        self._report = ProbeReport(endpoint=redact_url(endpoint), database=database_name)
        self._report.states.append(ProbeState.IDLE)

    @property
    def state(self) -> ProbeState:
        return self._report.state

    def _transition(self, state: ProbeState) -> None:
        logger.debug("%s -> %s", self._report.state.value, state.value)
        self._report.state = state
        self._report.states.append(state)

    def _fail(self, kind: FailureKind, error: Exception) -> None:
        self._report.failure = kind
        self._report.error_message = str(error)
        self._transition(ProbeState.FAILED)

    def run(self) -> ProbeReport:
        if self.state != ProbeState.IDLE:
            raise RuntimeError("ConnectivityProber can only be run once")

        report = self._report
        logger.info("Probing %s (database '%s')", report.endpoint or "<endpoint>", self.database_name)
        try:
            self._transition(ProbeState.CONNECTING)
            start_time = time.time()
            self.connector.connect()
            report.latency_ms = round((time.time() - start_time) * 1000, 2)
            report.connected = True
            logger.info("Connected in %.2f ms", report.latency_ms)
            self._transition(ProbeState.CONNECTED)

            self._transition(ProbeState.QUERYING_STATS)
            report.stats = self.connector.fetch_stats(self.database_name)
            self._transition(ProbeState.DONE)
        except ConnectionError as e:
            logger.info("Connection failed: %s", e)
            self._fail(FailureKind.CONNECTION, e)
        except QueryError as e:
            logger.info("Stats query failed: %s", e)
            self._fail(FailureKind.QUERY, e)
        finally:
            self.connector.close()
            self._transition(ProbeState.RELEASED)
        return report

def probe(
    settings: Optional[ProbeSettings] = None,
    connector_factory: Callable[[str], DatabaseConnector] = MongoConnector,
) -> ProbeReport:
    """
    Probe the configured endpoint with a freshly created connector.
    Settings default to the environment (DATABASE_URL).
    """
    if settings is None:
        settings = ProbeSettings.load()
    connector = connector_factory(settings.database_url)
    prober = ConnectivityProber(connector, settings.database_name, endpoint=settings.database_url)
    return prober.run()
