"""Mock-portal helpers and JSON fixtures for unit tests.

- `devices/` - device records as returned by a portal (ids and names anonymized)
- `collectors/` - collector records

Usage:
    from fixtures import BASE_URL, paged_collection

    def test_list(mocked, portal):
        mocked.add_callback(
            responses.GET, BASE_URL + "/device/devices", callback=paged_collection(items)
        )
"""

import json
from pathlib import Path
from urllib.parse import parse_qs, urlparse

FIXTURES_DIR = Path(__file__).parent

ACCOUNT = "acme"
BASE_URL = f"https://{ACCOUNT}.logicmonitor.com/santaba/rest"
ACCESS_ID = "id-0123456789"
ACCESS_KEY = "testkey"
FIXED_EPOCH = 1700000000000


def load_fixture(kind: str, name: str) -> dict:
    """Load a JSON record fixture, e.g. ``load_fixture("devices", "web01")``.

    Raises:
        FileNotFoundError: If the fixture doesn't exist.
    """
    path = FIXTURES_DIR / kind / f"{Path(name).stem}.json"
    if not path.exists():
        available = sorted(p.stem for p in (FIXTURES_DIR / kind).glob("*.json"))
        raise FileNotFoundError(
            f"Fixture {name!r} not found in {kind}/. Available: {available}"
        )
    with open(path) as f:
        return json.load(f)


def query_of(request) -> dict:
    """Return the query string of a recorded request as a flat dict."""
    return {k: v[0] for k, v in parse_qs(urlparse(request.url).query).items()}


def legacy(data, status=200, errmsg="OK") -> dict:
    """Wrap *data* in the legacy ``{status, errmsg, data}`` envelope."""
    return {"status": status, "errmsg": errmsg, "data": data}


def paged_collection(items, envelope=True, total=None):
    """Build a ``responses`` callback serving *items* by ``offset``/``size``.

    Each page holds ``min(size, remaining)`` items and reports ``total``
    (``len(items)`` unless overridden).
    """

    def callback(request):
        query = query_of(request)
        offset = int(query.get("offset", 0))
        size = int(query.get("size", 50))
        data = {
            "total": len(items) if total is None else total,
            "items": items[offset : offset + size],
        }
        body = legacy(data) if envelope else data
        return 200, {"Content-Type": "application/json"}, json.dumps(body)

    return callback


def make_items(count, start=1) -> list:
    return [{"id": i, "name": f"item-{i}"} for i in range(start, start + count)]
