"""Tests for the module-level command functions."""

import json
import logging

import pytest
import requests
import responses
import lmaccess
from fixtures import ACCESS_ID, ACCESS_KEY, ACCOUNT, BASE_URL, legacy, paged_collection, query_of
from lmaccess import Portal, Settings
from lmaccess.exceptions import (
    AuthenticationError,
    LoginStrategyUnavailable,
    NotFoundError,
    TransportError,
)


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Isolate every test from the environment and from the default portal."""
    for name in (
        "LM_ACCOUNT",
        "LM_BASE_URL",
        "LM_ACCESS_ID",
        "LM_ACCESS_KEY",
        "LM_REQUEST_TIMEOUT",
        "LM_RATE_LIMIT_WAIT",
        "LM_MAX_RATE_LIMIT_RETRIES",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(lmaccess, "_auth", lmaccess.Auth())
    monkeypatch.setattr(lmaccess, "_portal", None)


@pytest.fixture
def logged_in():
    return lmaccess.login(
        "explicit", account=ACCOUNT, access_id=ACCESS_ID, access_key=ACCESS_KEY
    )


class TestLogin:
    def test_sets_the_default_portal(self, logged_in):
        assert isinstance(logged_in, Portal)
        assert lmaccess.__portal__ is logged_in
        assert lmaccess.__auth__.authenticated
        assert logged_in.settings.rest_url == BASE_URL

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("LM_ACCOUNT", ACCOUNT)
        monkeypatch.setenv("LM_ACCESS_ID", ACCESS_ID)
        monkeypatch.setenv("LM_ACCESS_KEY", ACCESS_KEY)

        portal = lmaccess.login("environment")

        assert portal.auth.get_credential().access_id == ACCESS_ID

    def test_explicit_settings(self):
        portal = lmaccess.login(
            "explicit",
            access_id=ACCESS_ID,
            access_key=ACCESS_KEY,
            settings=Settings(base_url="http://localhost:9000/santaba/rest"),
        )

        assert portal.settings.rest_url == "http://localhost:9000/santaba/rest"

    def test_missing_account(self):
        with pytest.raises(LoginStrategyUnavailable, match="account"):
            lmaccess.login("explicit", access_id=ACCESS_ID, access_key=ACCESS_KEY)

        assert lmaccess.__portal__ is None

    def test_logout(self, logged_in):
        lmaccess.logout()

        assert lmaccess.__portal__ is None
        assert not lmaccess.__auth__.authenticated

    def test_commands_log_in_from_the_environment(self, mocked, monkeypatch):
        monkeypatch.setenv("LM_ACCOUNT", ACCOUNT)
        monkeypatch.setenv("LM_ACCESS_ID", ACCESS_ID)
        monkeypatch.setenv("LM_ACCESS_KEY", ACCESS_KEY)
        mocked.add_callback(
            responses.GET, BASE_URL + "/device/devices", callback=paged_collection([])
        )

        assert lmaccess.get_devices() == []
        assert lmaccess.__portal__ is not None

    def test_commands_without_credentials(self):
        with pytest.raises(LoginStrategyUnavailable):
            lmaccess.get_devices()

    def test_unknown_module_attribute(self):
        with pytest.raises(AttributeError):
            lmaccess.__nothing__


class TestStatus:
    URL = BASE_URL + "/device/devices"

    def test_ok(self, mocked, logged_in):
        mocked.add(responses.GET, self.URL, json=legacy({"total": 1, "items": [{"id": 1}]}))

        assert lmaccess.status() == {"Portal API": "OK"}
        assert query_of(mocked.calls[0].request) == {"size": "1", "fields": "id"}

    def test_success_is_not_logged_at_info(self, mocked, logged_in, caplog):
        mocked.add(responses.GET, self.URL, json=legacy({"total": 1, "items": [{"id": 1}]}))

        with caplog.at_level(logging.INFO, logger="lmaccess"):
            lmaccess.status()

        assert not [r for r in caplog.records if "succeeded" in r.getMessage()]

    def test_unauthorized(self, mocked, logged_in):
        mocked.add(responses.GET, self.URL, status=401, json={"errorMessage": "denied"})

        assert lmaccess.status() == {"Portal API": "Unauthorized"}

    def test_unreachable(self, mocked, logged_in):
        mocked.add(responses.GET, self.URL, body=requests.ConnectionError("no route"))

        assert lmaccess.status() == {"Portal API": "Unreachable"}

    def test_other_failure(self, mocked, logged_in):
        mocked.add(responses.GET, self.URL, status=500, body="boom")

        assert lmaccess.status() == {"Portal API": "Error"}

    def test_raise_on_error(self, mocked, logged_in):
        mocked.add(responses.GET, self.URL, status=403)

        with pytest.raises(AuthenticationError):
            lmaccess.status(raise_on_error=True)

    def test_raise_on_transport_error(self, mocked, logged_in):
        mocked.add(responses.GET, self.URL, body=requests.ConnectionError("no route"))

        with pytest.raises(TransportError):
            lmaccess.status(raise_on_error=True)


class TestCommands:
    def test_get_device_not_found_versus_empty_filter(self, mocked, logged_in):
        mocked.add(responses.GET, BASE_URL + "/device/devices/404", status=404)
        mocked.add_callback(
            responses.GET, BASE_URL + "/device/devices", callback=paged_collection([])
        )

        with pytest.raises(NotFoundError):
            lmaccess.get_device(404)
        assert lmaccess.get_devices(name="missing") == []

    def test_fetch_any_collection(self, mocked, logged_in):
        mocked.add_callback(
            responses.GET,
            BASE_URL + "/setting/escalation/chains",
            callback=paged_collection([{"id": 1}]),
        )

        assert lmaccess.fetch("/setting/escalation/chains") == [{"id": 1}]

    def test_add_device(self, mocked, logged_in, caplog):
        caplog.set_level(logging.INFO, logger="lmaccess")
        mocked.add(responses.POST, BASE_URL + "/device/devices", json=legacy({"id": 5}))

        created = lmaccess.add_device(
            "10.0.0.5", "db01", 3, properties={"owner": "dba"}, disable_alerting=True
        )

        assert created == {"id": 5}
        assert "POST /device/devices succeeded" in caplog.text
        assert json.loads(mocked.calls[0].request.body) == {
            "name": "10.0.0.5",
            "displayName": "db01",
            "preferredCollectorId": 3,
            "disableAlerting": True,
            "customProperties": [{"name": "owner", "value": "dba"}],
        }

    def test_update_device_keyword_changes(self, mocked, logged_in):
        mocked.add(responses.PATCH, BASE_URL + "/device/devices/5", json=legacy({"id": 5}))

        lmaccess.update_device(5, description="primary db")

        assert query_of(mocked.calls[0].request)["patchFields"] == "description"

    def test_update_device_camel_cases_keywords(self, mocked, logged_in):
        mocked.add(responses.PATCH, BASE_URL + "/device/devices/5", json=legacy({"id": 5}))

        lmaccess.update_device(5, display_name="db01-primary")

        assert query_of(mocked.calls[0].request)["patchFields"] == "displayName"
        assert json.loads(mocked.calls[0].request.body) == {"displayName": "db01-primary"}

    def test_remove_device_group_with_children(self, mocked, logged_in):
        mocked.add(responses.DELETE, BASE_URL + "/device/groups/7", json=legacy(None))

        lmaccess.remove_device_group(7, delete_children=True)

        assert query_of(mocked.calls[0].request)["deleteChildren"] == "true"

    def test_update_collector_version(self, mocked, logged_in):
        mocked.add(
            responses.PATCH, BASE_URL + "/setting/collector/collectors/3", json={"id": 3}
        )

        lmaccess.update_collector_version(3, 35, 200, start=1700000000)

        body = json.loads(mocked.calls[0].request.body)
        assert body["onetimeUpgradeInfo"] == {
            "majorVersion": 35,
            "minorVersion": 200,
            "startEpoch": 1700000000,
        }

    def test_update_collector_version_starts_now(self, mocked, logged_in):
        mocked.add(
            responses.PATCH, BASE_URL + "/setting/collector/collectors/3", json={"id": 3}
        )
        logged_in.clock = lambda: 1700000000123

        lmaccess.update_collector_version(3, 35, 200)

        body = json.loads(mocked.calls[0].request.body)
        assert body["onetimeUpgradeInfo"]["startEpoch"] == 1700000000

    def test_add_alert_rule_options(self, mocked, logged_in):
        mocked.add(responses.POST, BASE_URL + "/setting/alert/rules", json=legacy({"id": 2}))

        lmaccess.add_alert_rule("DB errors", 20, 4, level_str="Error", datasource="MySQL*")

        body = json.loads(mocked.calls[0].request.body)
        assert body["levelStr"] == "Error"
        assert body["datasource"] == "MySQL*"

    def test_start_sdt_defaults_to_one_hour(self, mocked, logged_in):
        mocked.add(responses.POST, BASE_URL + "/sdt/sdts", json=legacy({"id": "G_1"}))

        lmaccess.start_sdt("device_group", 7, start=1700000000000)

        body = json.loads(mocked.calls[0].request.body)
        assert body["type"] == "DeviceGroupSDT"
        assert body["deviceGroupId"] == 7
        assert body["endDateTime"] - body["startDateTime"] == 60 * 60 * 1000
