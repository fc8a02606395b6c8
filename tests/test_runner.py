import io

from pymongo.errors import ServerSelectionTimeoutError

from mocks.fake_mongo import FakeMongoClient
from opsdesk.error_handler import ErrorHandler
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.settings import OpsSettings


def test_task_result_is_returned_and_connection_closed_once(mongo_client, settings, capsys):
    seen = []

    def task(db):
        seen.append(db.name)
        return 0

    code = run_database_task("Demo", task, settings, client_factory=mongo_client.factory)

    assert code == 0
    assert seen == ["infinity-weekends"]
    assert mongo_client.close_count == 1
    out = capsys.readouterr().out
    assert "✅ Connected to MongoDB" in out
    assert out.count("Database connection closed") == 1


def test_task_exception_is_reported_and_connection_closed(mongo_client, settings, capsys):
    def task(db):
        raise RuntimeError("write conflict")

    err = io.StringIO()
    code = run_database_task(
        "Demo", task, settings, client_factory=mongo_client.factory, error_handler=ErrorHandler(stream=err)
    )

    assert code == 1
    assert mongo_client.close_count == 1
    assert "write conflict" in err.getvalue()


def test_connect_failure_is_reported_and_closed_once(settings):
    client = FakeMongoClient(ping_error=ServerSelectionTimeoutError("No servers found"))
    err = io.StringIO()

    code = run_database_task(
        "Demo", lambda db: 0, settings, client_factory=client.factory, error_handler=ErrorHandler(stream=err)
    )

    assert code == 1
    assert client.close_count == 1
    assert "No servers found" in err.getvalue()


def test_missing_uri_fails_before_connecting(mongo_client):
    err = io.StringIO()
    code = run_database_task(
        "Demo", lambda db: 0, OpsSettings(), client_factory=mongo_client.factory, error_handler=ErrorHandler(stream=err)
    )
    assert code == 1
    assert mongo_client.calls == []
    assert "MONGODB_URI" in err.getvalue()
