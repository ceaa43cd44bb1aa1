"""Shared test fixtures for instapaper tests."""

import json
import sys
from pathlib import Path
from urllib.parse import parse_qsl

import pytest
import requests

# Add the python/ directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from instapaper.client import Client


def make_response(status_code: int, body="", content_type: str = "application/json"):
    """Build a requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    if not isinstance(body, str):
        body = json.dumps(body)
    resp._content = body.encode("utf-8")
    resp.headers["Content-Type"] = content_type
    resp.encoding = "utf-8"
    return resp


class FakeInstapaper:
    """
    Stand-in for requests.Session that answers like the Instapaper API.

    Each post() is prepared through requests so the auth hook runs and
    the signed request is kept in ``requests`` for inspection.
    """

    def __init__(self, username="reader@example.com", password="secret"):
        self.username = username
        self.password = password
        self.stored = []
        self.requests = []
        self.headers = {}
        self.next_id = 1000

    def post(self, url, data=None, auth=None, timeout=None):
        prepared = requests.Request("POST", url, data=data, auth=auth).prepare()
        if isinstance(prepared.body, bytes):
            prepared.body = prepared.body.decode("utf-8")
        for name, value in list(prepared.headers.items()):
            if isinstance(value, bytes):
                prepared.headers[name] = value.decode("utf-8")
        self.requests.append(prepared)
        params = dict(parse_qsl(prepared.body or "", keep_blank_values=True))
        action = url.split("/api/1.1/", 1)[-1]
        handler = getattr(self, "_" + action.replace("/", "_"), None)
        if handler is None:
            return make_response(404, [{"type": "error", "error_code": 404,
                                        "message": "Not found"}])
        return handler(params)

    def _oauth_access_token(self, params):
        if (params.get("x_auth_username") != self.username
                or params.get("x_auth_password") != self.password):
            return make_response(401, "Invalid xAuth credentials.", "text/plain")
        return make_response(200, "oauth_token=tok123&oauth_token_secret=sec456",
                             "text/plain")

    def _bookmarks_add(self, params):
        url = params.get("url", "")
        if not url.startswith("http"):
            return make_response(400, [{"type": "error", "error_code": 1240,
                                        "message": "Invalid URL specified"}])
        self.next_id += 1
        bookmark = {
            "type": "bookmark",
            "bookmark_id": self.next_id,
            "url": url,
            "title": params.get("title", url),
            "description": params.get("description", ""),
            "time": 1700000000,
            "starred": "0",
            "private_source": "",
            "hash": f"h{self.next_id}",
            "progress": 0,
            "progress_timestamp": 0,
        }
        self.stored.append(bookmark)
        return make_response(200, [bookmark])

    def _bookmarks_list(self, params):
        limit = int(params.get("limit", 25))
        return make_response(200, {
            "user": {"type": "user", "user_id": 42, "username": self.username,
                     "subscription_is_active": "1"},
            "bookmarks": self.stored[:limit],
            "highlights": [],
            "delete_ids": [],
        })

    def _account_verify_credentials(self, params):
        return make_response(200, [{"type": "user", "user_id": 42,
                                    "username": self.username,
                                    "subscription_is_active": "1"}])


@pytest.fixture
def fake_api():
    """An in-memory Instapaper."""
    return FakeInstapaper()


@pytest.fixture
def client(fake_api):
    """An authenticated client talking to the fake API."""
    return Client("consumer_key", "consumer_secret",
                  oauth_token="tok123", oauth_token_secret="sec456",
                  session=fake_api)


@pytest.fixture
def anonymous_client(fake_api):
    """A client without an OAuth token."""
    return Client("consumer_key", "consumer_secret", session=fake_api)


@pytest.fixture
def bookmark_data():
    """A bookmark object as returned by the API."""
    return {
        "type": "bookmark",
        "bookmark_id": 1234,
        "url": "https://sirupsen.com/read",
        "title": "How I Read",
        "description": "",
        "time": 1394118750,
        "starred": "1",
        "private_source": "",
        "hash": "rs8hmKuN",
        "progress": 0.5,
        "progress_timestamp": 1394118800,
    }
