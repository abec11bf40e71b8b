"""TokenGate client implementation"""
from typing import Any, Dict, Optional

import requests

DEFAULT_USER_AGENT = "TokenGateClient/0.1"


class TokenGateError(Exception):
    """Raised when the server rejects a request."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class TokenGateClient:
    """Client for a TokenGate server.

    Session handling mirrors what a desktop or browser client does:

    - ``login`` stores the returned bearer token.
    - Every protected call sends ``Authorization: Bearer <token>``.
    - When the server answers 401, or ``validate`` reports the token invalid,
      the cached token is discarded and the caller must log in again.

    A ``User-Agent`` header is always sent; the server refuses data
    requests without one.
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize TokenGate client.

        Args:
            base_url:   Base URL of the server (e.g. ``http://localhost:8000``).
            user_agent: Value of the ``User-Agent`` header.
            timeout:    Per-request timeout in seconds.
            session:    Optional pre-configured ``requests.Session``.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

        self.token: Optional[str] = None
        self.username: Optional[str] = None
        self.role: Optional[str] = None
        self.expires_at: Optional[str] = None

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    @property
    def is_logged_in(self) -> bool:
        return self.token is not None

    def _forget_token(self) -> None:
        self.token = None
        self.username = None
        self.role = None
        self.expires_at = None

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason
        if isinstance(body, dict):
            return str(body.get("detail") or body.get("message") or body)
        return str(body)

    def _request(
        self,
        method: str,
        endpoint: str,
        authenticated: bool = False,
        **kwargs: Any,
    ) -> requests.Response:
        """Make an HTTP request, attaching the bearer token when required.

        Raises:
            TokenGateError: On non-2xx responses. A 401 on an authenticated
                request also clears the cached token.
        """
        headers = kwargs.pop("headers", {})
        if authenticated:
            if not self.token:
                raise TokenGateError(401, "Not logged in")
            headers["Authorization"] = f"Bearer {self.token}"

        url = f"{self.base_url}{endpoint}"
        response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)

        if response.status_code == 401 and authenticated:
            self._forget_token()
        if not response.ok:
            raise TokenGateError(response.status_code, self._error_message(response))
        return response

    # ========== Authentication ==========

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Log in and cache the returned token.

        Returns:
            ``{token, expiresAt, username, role}``.

        Raises:
            TokenGateError: 401 on bad credentials.
        """
        response = self._request(
            "POST",
            "/api/auth/login",
            json={"username": username, "password": password},
        )
        data = response.json()

        self.token = data["token"]
        self.username = data["username"]
        self.role = data["role"]
        self.expires_at = data["expiresAt"]
        return data

    def validate(self) -> bool:
        """Ask the server whether the cached token is still good.

        Discards the token when it is not.
        """
        if not self.token:
            return False

        try:
            data = self._request("GET", "/api/auth/validate", authenticated=True).json()
        except TokenGateError as exc:
            if exc.status_code == 401:
                return False
            raise

        if not data.get("isValid"):
            self._forget_token()
            return False
        return True

    def logout(self) -> None:
        """Revoke the cached token on the server and forget it locally."""
        if not self.token:
            return  # nothing to revoke

        try:
            self._request("POST", "/api/auth/logout", authenticated=True)
        finally:
            self._forget_token()

    # ========== Protected data ==========

    def get_user_info(self) -> Dict[str, Any]:
        return self._request("GET", "/api/data/user-info", authenticated=True).json()

    def get_admin_data(self) -> Dict[str, Any]:
        """Admin-only data. Raises ``TokenGateError`` (403) for other roles."""
        return self._request("GET", "/api/data/admin-data", authenticated=True).json()

    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/api/data/stats", authenticated=True).json()

    # ========== Public ==========

    def get_public_info(self) -> Dict[str, Any]:
        return self._request("GET", "/api/public/info").json()

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/public/health").json()
