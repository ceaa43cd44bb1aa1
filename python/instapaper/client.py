"""Instapaper API client."""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional
from urllib.parse import parse_qs

import requests
from requests_oauthlib import OAuth1

from .config import validate_config
from .errors import ApiError, AuthenticationError
from .models import Bookmark, BookmarkList, User

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Credentials:
    """Consumer credentials plus the user's OAuth token, once obtained."""
    consumer_key: str
    consumer_secret: str = field(repr=False)
    oauth_token: Optional[str] = None
    oauth_token_secret: Optional[str] = field(default=None, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.oauth_token and self.oauth_token_secret)

    def with_token(self, oauth_token: str, oauth_token_secret: str) -> "Credentials":
        return replace(self, oauth_token=oauth_token,
                       oauth_token_secret=oauth_token_secret)


class Client:
    """Client for the Instapaper full API."""

    BASE_URL = "https://www.instapaper.com/api/1.1"
    USER_AGENT = "instapaper-python/1.0"

    def __init__(self, consumer_key: str, consumer_secret: str,
                 oauth_token: Optional[str] = None,
                 oauth_token_secret: Optional[str] = None,
                 base_url: Optional[str] = None,
                 session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize Instapaper client.

        Args:
            consumer_key: Application consumer key
            consumer_secret: Application consumer secret
            oauth_token: Stored user token (None until authenticated)
            oauth_token_secret: Stored user token secret
            base_url: API root, defaults to the public 1.1 API
            session: requests session to reuse
            timeout: Seconds to wait for each response
        """
        self.credentials = Credentials(
            consumer_key, consumer_secret, oauth_token, oauth_token_secret
        )
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": self.USER_AGENT})
        self.session = session

    def __repr__(self):
        return f"Client({self.credentials!r}, base_url={self.base_url!r})"

    @classmethod
    def from_config(cls, config: dict, **kwargs) -> "Client":
        """
        Build a client from the dict returned by load_config().

        Raises:
            ValueError: If consumer credentials are missing
        """
        missing = validate_config(config)
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return cls(
            config["consumer_key"],
            config["consumer_secret"],
            oauth_token=config.get("oauth_token"),
            oauth_token_secret=config.get("oauth_token_secret"),
            **kwargs
        )

    @property
    def consumer_key(self) -> str:
        return self.credentials.consumer_key

    @property
    def consumer_secret(self) -> str:
        return self.credentials.consumer_secret

    @property
    def oauth_token(self) -> Optional[str]:
        return self.credentials.oauth_token

    @property
    def oauth_token_secret(self) -> Optional[str]:
        return self.credentials.oauth_token_secret

    @property
    def is_authenticated(self) -> bool:
        return self.credentials.is_authenticated

    def _auth(self) -> OAuth1:
        """HMAC-SHA1 signer; the token is only included once authenticated."""
        creds = self.credentials
        if not creds.is_authenticated:
            return OAuth1(creds.consumer_key, client_secret=creds.consumer_secret,
                          signature_method="HMAC-SHA1")
        return OAuth1(
            creds.consumer_key,
            client_secret=creds.consumer_secret,
            resource_owner_key=creds.oauth_token,
            resource_owner_secret=creds.oauth_token_secret,
            signature_method="HMAC-SHA1",
        )

    def _send(self, action: str, params: dict) -> requests.Response:
        """POST a signed, form-encoded request. Transport errors propagate."""
        url = f"{self.base_url}/{action}"
        logger.debug("POST %s", url)
        return self.session.post(url, data=params, auth=self._auth(),
                                 timeout=self.timeout)

    def _require_auth(self, action: str):
        if not self.is_authenticated:
            raise AuthenticationError(
                f"{action} requires an OAuth token; call authenticate() first"
            )

    def _call(self, action: str, params: Optional[dict] = None):
        """
        Make an authenticated API call and decode its JSON body.

        Args:
            action: Endpoint path below the API root, e.g. ``bookmarks/add``
            params: Form parameters

        Returns:
            Decoded JSON (a list or a dict)

        Raises:
            AuthenticationError: If the client holds no OAuth token
            ApiError: On transport failure, non-2xx status, malformed JSON
                or an Instapaper error payload
        """
        self._require_auth(action)

        try:
            resp = self._send(action, params or {})
        except requests.exceptions.RequestException as e:
            logger.warning("Instapaper %s request failed: %s", action, e)
            raise ApiError(f"Request to {action} failed: {e}") from e

        if not resp.ok:
            raise self._error_from_response(action, resp)

        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(f"Malformed JSON from {action}: {e}",
                           status_code=resp.status_code) from e

        error = self._find_error(data)
        if error is not None:
            raise ApiError(error.get("message", f"{action} failed"),
                           status_code=resp.status_code,
                           error_code=error.get("error_code"))
        return data

    @staticmethod
    def _find_error(data) -> Optional[dict]:
        """Return the first ``{"type": "error"}`` item of a response, if any."""
        if isinstance(data, list):
            for item in data:
                if isinstance(item, dict) and item.get("type") == "error":
                    return item
        return None

    def _error_from_response(self, action: str, resp: requests.Response) -> ApiError:
        message = f"{action} failed"
        error_code = None
        try:
            error = self._find_error(resp.json())
        except ValueError:
            error = None
        if error is not None:
            if error.get("message"):
                message = f"{action} failed: {error['message']}"
            error_code = error.get("error_code")
        elif resp.text:
            message = f"{action} failed: {resp.text[:200]}"
        logger.warning("Instapaper %s returned HTTP %s", action, resp.status_code)
        return ApiError(message, status_code=resp.status_code, error_code=error_code)

    def authenticate(self, username: str, password: str) -> "Client":
        """
        Exchange a username and password for an OAuth token (xAuth).

        The request is signed with the consumer credentials only. Store the
        resulting token and secret instead of the password; they can be
        passed straight back into Client().

        Args:
            username: Instapaper username or email
            password: Instapaper password (may be empty for password-less accounts)

        Returns:
            A new, authenticated Client sharing this client's session

        Raises:
            AuthenticationError: On rejected credentials, network failure,
                or a response that lacks either token
        """
        params = {
            "x_auth_username": username,
            "x_auth_password": password,
            "x_auth_mode": "client_auth",
        }

        unauthenticated = Client(
            self.consumer_key, self.consumer_secret,
            base_url=self.base_url, session=self.session, timeout=self.timeout
        )
        try:
            resp = unauthenticated._send("oauth/access_token", params)
        except requests.exceptions.RequestException as e:
            logger.warning("Instapaper authentication request failed: %s", e)
            raise AuthenticationError(f"Could not reach Instapaper: {e}") from e

        if resp.status_code in (401, 403):
            raise AuthenticationError(
                "Invalid username, password or consumer credentials "
                f"(HTTP {resp.status_code})"
            )
        if not resp.ok:
            raise AuthenticationError(
                f"Authentication failed with HTTP {resp.status_code}: {resp.text[:200]}"
            )

        query = parse_qs(resp.text.strip())
        token = query.get("oauth_token", [None])[0]
        token_secret = query.get("oauth_token_secret", [None])[0]
        if not token or not token_secret:
            raise AuthenticationError(
                f"oauth tokens not both in response: {resp.text}"
            )

        logger.debug("Obtained OAuth token for %s", username)
        return Client(
            self.consumer_key, self.consumer_secret,
            oauth_token=token, oauth_token_secret=token_secret,
            base_url=self.base_url, session=self.session, timeout=self.timeout
        )

    @staticmethod
    def _parse(action: str, parser, data):
        """Run a model parser, turning a wrongly shaped payload into ApiError."""
        try:
            return parser(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise ApiError(f"Unexpected payload from {action}: {e}") from e

    def verify_credentials(self) -> User:
        """Return the user the stored token belongs to."""
        data = self._call("account/verify_credentials")
        return self._parse("account/verify_credentials", self._first_user, data)

    @staticmethod
    def _first_user(data) -> User:
        users = []
        if isinstance(data, list):
            users = [u for u in data if u.get("type", "user") == "user"]
        elif isinstance(data, dict):
            users = [data]
        if not users:
            raise ApiError("account/verify_credentials returned no user")
        return User.from_dict(users[0])

    def add(self, url: str, title: str = "", description: str = "") -> Bookmark:
        """
        Add a bookmark.

        Leave title and description blank to get Instapaper's defaults.

        Returns:
            The created Bookmark
        """
        params = {"url": url}
        if title:
            params["title"] = title
        if description:
            params["description"] = description

        data = self._call("bookmarks/add", params)
        return self._parse(
            "bookmarks/add", lambda d: self._first_bookmark("bookmarks/add", d), data
        )

    def archive(self, bookmark_id: int) -> Bookmark:
        """Move a bookmark to the archive folder."""
        data = self._call("bookmarks/archive", {"bookmark_id": str(bookmark_id)})
        return self._parse(
            "bookmarks/archive", lambda d: self._first_bookmark("bookmarks/archive", d), data
        )

    @staticmethod
    def _first_bookmark(action: str, data) -> Bookmark:
        items = data if isinstance(data, list) else [data]
        for item in items:
            if isinstance(item, dict) and item.get("type", "bookmark") == "bookmark":
                return Bookmark.from_dict(item)
        raise ApiError(f"{action} returned no bookmark")

    def bookmarks_in(self, folder_id: str = "unread", limit: int = 500,
                     have: Optional[str] = None,
                     highlights: Optional[str] = None) -> BookmarkList:
        """
        List bookmarks and highlights in a folder.

        Args:
            folder_id: ``unread``, ``starred``, ``archive`` or a numeric folder id
            limit: Maximum bookmarks to return (the API caps this at 500)
            have: Passed through: bookmark ids (and hashes) the caller already has
            highlights: Passed through: highlight ids the caller already has

        Returns:
            BookmarkList with bookmarks in server order
        """
        params = {"folder_id": str(folder_id), "limit": str(limit)}
        if have:
            params["have"] = have
        if highlights:
            params["highlights"] = highlights

        data = self._call("bookmarks/list", params)
        if not isinstance(data, (list, dict)):
            raise ApiError("bookmarks/list returned an unexpected payload")
        return self._parse("bookmarks/list", BookmarkList.from_response, data)

    def bookmarks(self, folder_id: str = "unread", limit: int = 500) -> List[Bookmark]:
        """List the bookmarks in a folder, ``unread`` by default."""
        return self.bookmarks_in(folder_id, limit=limit).bookmarks


def authenticate(username: str, password: str, consumer_key: str,
                 consumer_secret: str, **kwargs) -> Client:
    """
    Obtain an authenticated Client.

    Once you have the token and secret you don't need to call this again:
    store them and build the Client directly.

    Args:
        username: Instapaper username or email
        password: Instapaper password
        consumer_key: Application consumer key
        consumer_secret: Application consumer secret
        **kwargs: base_url, session or timeout, passed to Client

    Returns:
        Client with oauth_token and oauth_token_secret populated
    """
    return Client(consumer_key, consumer_secret, **kwargs).authenticate(
        username, password
    )
