import pytest

from diaggate.catalog import MessageCatalog, MessageTemplate
from diaggate.engine_core import DispatchEngine


class RecordingSink:
    def __init__(self):
        self.calls = []

    def log_at(self, severity, text):
        self.calls.append((severity, text))


class CountingCatalog:
    """Wraps a catalog and records every lookup."""

    def __init__(self, inner):
        self.inner = inner
        self.lookups = []

    def resolve(self, message_id, parameters):
        self.lookups.append((message_id, dict(parameters)))
        return self.inner.resolve(message_id, parameters)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("DIAGGATE_CATALOG_PATH", raising=False)
    monkeypatch.delenv("DIAGGATE_UNRESOLVED_PLACEHOLDERS", raising=False)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def catalog():
    return CountingCatalog(
        MessageCatalog(
            [
                MessageTemplate(id="E001", severity="ERROR", text="Strict mode violation"),
                MessageTemplate(id="W001", severity="WARN", text="Deprecated argument %1"),
                MessageTemplate(id="I001", severity="INFO", text="Step %step done"),
                MessageTemplate(id="D001", severity="DEBUG", text="Resolved %1"),
                MessageTemplate(id="F099", severity="FATAL", text="Unrecoverable: missing asset"),
                MessageTemplate(id="F100", severity="FATAL", text="Cannot find '%1'"),
            ]
        )
    )


@pytest.fixture
def engine(catalog, sink):
    return DispatchEngine(catalog, sink)
