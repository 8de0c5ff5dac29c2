"""HTTP client for the FortiOS REST API using token authentication."""

import json
import ssl
from urllib.parse import urlsplit, urlunsplit

import requests
from requests.adapters import HTTPAdapter


class FortiClientError(Exception):
    """Raised when a request to a FortiGate cannot be completed."""


class TokenClient:
    """Issues authenticated GET requests against one FortiGate target."""

    def __init__(self, target, session, token, timeout=None):
        self.target = target
        self.session = session
        self.token = token
        self.timeout = timeout

    def _url(self, path, query):
        parts = urlsplit(self.target)
        if not path.startswith("/"):
            path = "/" + path
        return urlunsplit((parts.scheme, parts.netloc, path, query, ""))

    def get(self, path, query=""):
        """Fetch ``path`` with ``query`` and return the decoded JSON body."""
        url = self._url(path, query)
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FortiClientError(str(exc)) from exc
        if resp.status_code != 200:
            raise FortiClientError(
                f"Response code was {resp.status_code}, expected 200 (path: {path!r})"
            )
        try:
            return json.loads(resp.content)
        except ValueError as exc:
            raise FortiClientError(f"invalid JSON in response (path: {path!r}): {exc}") from exc

    def __str__(self):
        return self.target


def new_forti_client(target, session, config):
    """Return a client for ``target`` using the credentials in ``config``."""
    auth = config.auth_keys.get(target)
    if auth is None:
        raise FortiClientError(f"no API authentication registered for {target!r}")
    if auth.token:
        if urlsplit(target).scheme != "https":
            raise FortiClientError("FortiOS only supports token for HTTPS connections")
        return TokenClient(target, session, auth.token, timeout=config.scrape_timeout)
    raise FortiClientError(f"invalid authentication data for {target!r}")


class _TLSAdapter(HTTPAdapter):
    def __init__(self, ssl_context, handshake_timeout, **kwargs):
        self._ssl_context = ssl_context
        self._handshake_timeout = handshake_timeout
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().proxy_manager_for(*args, **kwargs)

    def send(self, request, **kwargs):
        timeout = kwargs.get("timeout")
        if timeout is None or isinstance(timeout, (int, float)):
            kwargs["timeout"] = (self._handshake_timeout, timeout)
        return super().send(request, **kwargs)


def configure_session(session, config):
    """Apply the TLS settings of ``config`` to ``session``; return the SSL context."""
    ctx = ssl.create_default_context()
    for cert in config.tls_extra_cas:
        try:
            ctx.load_verify_locations(cadata=cert.content.decode("latin-1"))
        except (ssl.SSLError, ValueError) as exc:
            raise FortiClientError(
                f"failed to append certs from PEM {cert.path!r}, unknown error"
            ) from exc
    if config.tls_insecure:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        session.verify = False
    session.mount("https://", _TLSAdapter(ctx, config.tls_timeout))
    return ctx