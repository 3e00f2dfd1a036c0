"""Unit tests for the Lambda handlers, with in-memory backends patched in."""

import csv
import io
import json
from unittest.mock import MagicMock, patch

import pytest

from handlers import (
    event_history,
    export_events,
    list_events,
    list_stops,
    search_references,
    stopped_items,
    submit_event,
    tracking_stats,
)
from tracklog.config import _reset_config
from tracklog.errors import ReferenceLookupError

from conftest import ORG_ID

REQUEST_CONTEXT = {"authorizer": {"organizationId": str(ORG_ID)}}


@pytest.fixture(autouse=True)
def _clear_config_cache():
    _reset_config()
    yield
    _reset_config()


@pytest.fixture
def backends(store, trips, shipments, stops):
    """Patch every handler module's client factories with in-memory backends."""
    modules = [
        submit_event,
        list_events,
        event_history,
        tracking_stats,
        stopped_items,
        search_references,
        export_events,
        list_stops,
    ]
    factories = {
        "get_event_store": store,
        "get_trip_registry": trips,
        "get_shipment_registry": shipments,
        "get_stops_directory": stops,
    }
    patchers = [
        patch.object(module, name, return_value=backend)
        for module in modules
        for name, backend in factories.items()
        if hasattr(module, name)
    ]
    for p in patchers:
        p.start()
    yield store
    for p in patchers:
        p.stop()


def _post(body):
    return {"body": json.dumps(body), "requestContext": REQUEST_CONTEXT}


def _get(**params):
    return {"queryStringParameters": params or None, "requestContext": REQUEST_CONTEXT}


def _submit(body):
    response = submit_event.handler(_post(body), None)
    return response["statusCode"], json.loads(response["body"])


def test_submit_event_created(backends):
    status, body = _submit(
        {"reference_type": "trip", "reference_id": "trip-1", "event_type": "departed", "stop_id": "stop-bog"}
    )
    assert status == 201
    assert body["sequence"] == 1
    assert body["actor_type"] == "system"
    assert body["source"] == "manual"


def test_submit_event_duplicate_is_conflict(backends):
    payload = {"reference_type": "trip", "reference_id": "trip-1", "event_type": "departed", "external_event_id": "gps-1"}
    assert _submit(payload)[0] == 201

    status, body = _submit(payload)
    assert status == 409
    assert body["error"] == "DUPLICATE_EVENT"
    assert backends.count_events() == 1


def test_submit_event_invalid_is_bad_request(backends):
    status, body = _submit({"reference_type": "vehicle", "reference_id": "v-1", "event_type": "departed"})
    assert status == 400
    assert body["error"] == "VALIDATION_ERROR"


def test_list_events_enriched(backends):
    _submit({"reference_type": "trip", "reference_id": "trip-1", "event_type": "departed", "stop_id": "stop-bog"})
    _submit({"reference_type": "shipment", "reference_id": "shp-1", "event_type": "received"})

    response = list_events.handler(_get(reference_type="trip"), None)
    body = json.loads(response["body"])

    assert response["statusCode"] == 200
    assert len(body) == 1
    assert body[0]["reference_data"]["code"] == "VJ-20261018-001"
    assert body[0]["stop"]["name"] == "Bogotá Terminal"


def test_list_events_without_organization(backends):
    response = list_events.handler({"queryStringParameters": None}, None)
    assert response["statusCode"] == 400


def test_list_events_lookup_failure(backends):
    _submit({"reference_type": "trip", "reference_id": "trip-1", "event_type": "departed"})
    failing = MagicMock()
    failing.get_many.side_effect = ReferenceLookupError("trips lookup failed")

    with patch.object(list_events, "get_trip_registry", return_value=failing):
        response = list_events.handler(_get(), None)

    assert response["statusCode"] == 502


def test_event_history(backends):
    _submit({"reference_type": "trip", "reference_id": "trip-1", "event_type": "departed", "stop_id": "stop-bog"})
    for event_type in ("checkpoint", "arrived"):
        _submit({"reference_type": "trip", "reference_id": "trip-1", "event_type": event_type})

    response = event_history.handler(
        {"pathParameters": {"reference_type": "trip", "reference_id": "trip-1"}, "requestContext": REQUEST_CONTEXT},
        None,
    )
    body = json.loads(response["body"])
    assert body[0]["stop"]["name"] == "Bogotá Terminal"
    assert body[1]["stop"] is None
    assert [e["sequence"] for e in body] == [1, 2, 3]


@pytest.mark.parametrize(
    "params",
    [None, {"reference_type": "vehicle", "reference_id": "v-1"}, {"reference_type": "trip", "reference_id": " "}],
)
def test_event_history_bad_reference(backends, params):
    assert event_history.handler({"pathParameters": params, "requestContext": REQUEST_CONTEXT}, None)["statusCode"] == 400


def test_tracking_stats(backends):
    _submit({"reference_type": "trip", "reference_id": "trip-1", "event_type": "departed"})
    body = json.loads(tracking_stats.handler(_get(), None)["body"])
    assert body["total_events"] == 1
    assert body["trip_events"] == 1
    assert body["stopped_items"] == 3


def test_stopped_items(backends):
    body = json.loads(stopped_items.handler(_get(), None)["body"])
    assert [item["code"] for item in body] == ["VJ-20261018-002", "SHP48213", "VJ-20261017-014"]


def test_search_references(backends):
    body = json.loads(search_references.handler(_get(q="shp"), None)["body"])
    assert [m["code"] for m in body] == ["SHP48213", "SHP90177"]


def test_search_references_blank_query(backends):
    assert json.loads(search_references.handler(_get(), None)["body"]) == []


def test_export_events_csv(backends):
    _submit({"reference_type": "shipment", "reference_id": "shp-1", "event_type": "received", "description": 'Box "B"'})

    response = export_events.handler(_get(), None)
    rows = list(csv.reader(io.StringIO(response["body"])))

    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"].startswith("text/csv")
    assert rows[0][0] == "Date/Time"
    assert rows[1][2] == "SHP48213"
    assert rows[1][5] == 'Box "B"'


def test_list_stops_only_active(backends):
    body = json.loads(list_stops.handler(_get(), None)["body"])
    assert {s["id"] for s in body} == {"stop-bog", "stop-med"}
