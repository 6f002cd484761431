"""Integration tests for host data endpoints."""

import pytest

from oralicense_engine.alerts.client import CollectingAlertEmitter


class StubFleet:
    def __init__(self, databases=None):
        self.databases = databases or []

    def get_primary_open_databases(self):
        return self.databases


class StubCatalog:
    def get_license_types(self, environment):
        return []


@pytest.fixture
def emitter(client):
    from oralicense_engine.deps import set_reconciler
    from oralicense_engine.reconciliation.engine import Reconciler

    emitter = CollectingAlertEmitter()
    set_reconciler(Reconciler(StubFleet(), StubCatalog(), emitter))
    return emitter


def _snapshot(hostname="ora01", environment="PRD", cores=4, databases=None, **extra):
    return {
        "hostname": hostname,
        "environment": environment,
        "info": {"cpu_cores": cores, "cpu_sockets": 1, "hardware_abstraction_technology": "PH"},
        "databases": databases or [],
        **extra,
    }


def _db(name, db_id=1, **licenses):
    return {
        "name": name, "db_id": db_id, "status": "OPEN", "role": "PRIMARY",
        "licenses": [{"name": n.replace("_", " "), "count": c} for n, c in licenses.items()],
    }


class TestIngest:
    async def test_insert_hostdata(self, client, admin_headers, emitter):
        resp = await client.post("/hosts", json=_snapshot(databases=[_db("D1")]), headers=admin_headers)
        assert resp.status_code == 201
        data = resp.json()
        assert data["hostname"] == "ora01"
        assert data["archived_previous"] is False
        assert data["alert_codes"] == ["NEW_DATABASE"]
        assert data["failed_alerts"] == 0
        assert data["degraded_checks"] == []

    async def test_second_ingest_archives_previous(self, client, admin_headers, emitter):
        await client.post("/hosts", json=_snapshot(databases=[_db("D1")]), headers=admin_headers)
        resp = await client.post(
            "/hosts",
            json=_snapshot(cores=8, databases=[_db("D1", Oracle_ENT=4, Diagnostics_Pack=4)]),
            headers=admin_headers,
        )
        data = resp.json()
        assert data["archived_previous"] is True
        assert data["alert_codes"] == ["NEW_LICENSE", "NEW_OPTION"]
        assert emitter.alerts[-1].other_info["features"] == ["Diagnostics Pack"]

    async def test_unlisted_running_database(self, client, admin_headers, emitter):
        resp = await client.post(
            "/hosts", json=_snapshot(unlisted_running_databases=["ORPHAN"]), headers=admin_headers,
        )
        assert resp.json()["alert_codes"] == ["UNLISTED_RUNNING_DATABASE"]

    async def test_empty_hostname_rejected(self, client, admin_headers, emitter):
        resp = await client.post("/hosts", json=_snapshot(hostname=""), headers=admin_headers)
        assert resp.status_code == 422

    async def test_requires_api_key(self, client, emitter):
        resp = await client.post("/hosts", json=_snapshot())
        assert resp.status_code == 401

    async def test_wrong_api_key(self, client, emitter):
        resp = await client.post(
            "/hosts", json=_snapshot(), headers={"X-OraLicense-Api-Key": "wrong"},
        )
        assert resp.status_code == 403


class TestHostQueries:
    async def test_get_host(self, client, admin_headers, emitter):
        await client.post(
            "/hosts", json=_snapshot(databases=[_db("D1")], agent_version="2.1.0"),
            headers=admin_headers,
        )
        resp = await client.get("/hosts/ora01", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["archived"] is False
        assert data["environment"] == "PRD"
        assert data["snapshot"]["agent_version"] == "2.1.0"
        assert data["snapshot"]["databases"][0]["name"] == "D1"

    async def test_get_unknown_host(self, client, admin_headers, emitter):
        resp = await client.get("/hosts/nope", headers=admin_headers)
        assert resp.status_code == 404

    async def test_archive_host(self, client, admin_headers, emitter):
        await client.post("/hosts", json=_snapshot(), headers=admin_headers)
        resp = await client.delete("/hosts/ora01", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["archived"] is True
        resp = await client.get("/hosts/ora01", headers=admin_headers)
        assert resp.status_code == 404

    async def test_archive_unknown_host(self, client, admin_headers, emitter):
        resp = await client.delete("/hosts/nope", headers=admin_headers)
        assert resp.status_code == 404

    async def test_list_oracle_databases(self, client, admin_headers, emitter):
        await client.post(
            "/hosts", json=_snapshot("ora01", "PRD", databases=[_db("D1", Oracle_ENT=2)]),
            headers=admin_headers,
        )
        await client.post(
            "/hosts", json=_snapshot("ora02", "TST", databases=[_db("T1", db_id=7)]),
            headers=admin_headers,
        )

        resp = await client.get("/hosts/technologies/oracle/databases", headers=admin_headers)
        assert resp.status_code == 200
        assert [(d["hostname"], d["name"]) for d in resp.json()] == [("ora01", "D1"), ("ora02", "T1")]

        resp = await client.get(
            "/hosts/technologies/oracle/databases",
            params={"environment": "TST"},
            headers=admin_headers,
        )
        assert [d["name"] for d in resp.json()] == ["T1"]


    async def test_locations_and_environments(self, client, admin_headers, emitter):
        await client.post("/hosts", json=_snapshot("ora01", "PRD", location="Italy"), headers=admin_headers)
        await client.post("/hosts", json=_snapshot("ora02", "TST", location="Germany"), headers=admin_headers)

        resp = await client.get("/hosts/locations", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == ["Germany", "Italy"]

        resp = await client.get(
            "/hosts/environments", params={"location": "Italy"}, headers=admin_headers,
        )
        assert resp.json() == ["PRD"]

    async def test_get_host_older_than(self, client, admin_headers, emitter):
        await client.post("/hosts", json=_snapshot(), headers=admin_headers)

        resp = await client.get(
            "/hosts/ora01", params={"older_than": "2000-01-01T00:00:00Z"}, headers=admin_headers,
        )
        assert resp.status_code == 404

        resp = await client.get(
            "/hosts/ora01", params={"older_than": "2999-01-01T00:00:00Z"}, headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["archived"] is False

class TestHealth:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["service"] == "oralicense-engine"
        assert data["status"] == "ok"
        assert data["database"] == "ok"
