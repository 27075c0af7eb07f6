"""An activity that invokes a REST operation over HTTP."""

from __future__ import annotations

import json
import ssl
from contextlib import closing
from dataclasses import dataclass, field
from typing import Any
from urllib.error import HTTPError
from urllib.parse import urlencode, urlsplit
from urllib.request import HTTPSHandler, OpenerDirector, ProxyHandler, Request, build_opener
import re

from flowcontrib.activity import Activity, ActivityContext, ActivityError, InitContext
from flowcontrib.coerce import to_bool, to_int, to_object, to_params, to_string

__all__ = ["RestActivity", "RestSettings", "build_uri", "content_type_for"]

_ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
_JSON_CONTENT = "application/json; charset=UTF-8"
_TEXT_CONTENT = "text/plain; charset=UTF-8"
_PATH_PARAM = re.compile(r":([^/]+)(/|$)")


@dataclass
class RestSettings:
    """Settings of the REST activity."""

    method: str
    uri: str
    headers: dict[str, str] = field(default_factory=dict)
    proxy: str = ""
    timeout: int = 0
    skip_ssl_verify: bool = False
    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""
    ssl_config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.method:
            raise ValueError("required setting 'method' not set")
        self.method = self.method.upper()
        if self.method not in _ALLOWED_METHODS:
            raise ValueError(
                f"value '{self.method}' not allowed for setting 'method', "
                f"must be one of {_ALLOWED_METHODS}"
            )
        if not self.uri:
            raise ValueError("required setting 'uri' not set")

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> RestSettings:
        """Build settings from their configuration names."""
        return cls(
            method=to_string(values.get("method")),
            uri=to_string(values.get("uri")),
            headers=to_params(values.get("headers")),
            proxy=to_string(values.get("proxy")),
            timeout=to_int(values.get("timeout")),
            skip_ssl_verify=to_bool(values.get("skipSSLVerify")),
            cert_file=to_string(values.get("certFile")),
            key_file=to_string(values.get("keyFile")),
            ca_file=to_string(values.get("CAFile")),
            ssl_config=to_object(values.get("sslConfig")),
        )


def build_uri(uri: str, values: dict[str, str]) -> str:
    """Fill the `:name` path parameters after the host part of a URI."""
    host_start = uri.find("://") + 3
    slash = uri.find("/", host_start)
    split_at = slash if slash >= 0 else len(uri)
    prefix, path = uri[:split_at], uri[split_at:]
    return prefix + _PATH_PARAM.sub(lambda m: values.get(m[1], "") + m[2], path)


def content_type_for(content: Any) -> str:
    """Guess the Content-Type of a request body from its content."""
    if isinstance(content, str):
        return _JSON_CONTENT if content.startswith(("{", "[")) else _TEXT_CONTENT
    if isinstance(content, (bool, int, float)):
        return _TEXT_CONTENT
    return _JSON_CONTENT


def _ssl_context(config: dict[str, Any]) -> ssl.SSLContext:
    skip_verify = to_bool(config.get("skipVerify", True))
    use_system_cert = to_bool(config.get("useSystemCert", True))
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    if skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if use_system_cert:
        context.load_default_certs()
    ca_file = to_string(config.get("caFile"))
    if ca_file:
        context.load_verify_locations(cafile=ca_file)
    cert_file = to_string(config.get("certFile"))
    if cert_file:
        key_file = to_string(config.get("keyFile")) or None
        context.load_cert_chain(cert_file, key_file)
    return context


def _encode_body(content: Any) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return json.dumps(content, separators=(",", ":")).encode("utf-8")


class RestActivity(Activity):
    """Invokes a REST operation and outputs the status and response data."""

    def __init__(self, settings: RestSettings) -> None:
        self.settings = settings
        self._contains_param = "/:" in settings.uri
        self._timeout = settings.timeout if settings.timeout > 0 else None
        self._opener = self._build_opener()

    def _build_opener(self) -> OpenerDirector:
        proxies: dict[str, str] = {}
        if self.settings.proxy:
            urlsplit(self.settings.proxy)
            proxies = {"http": self.settings.proxy, "https": self.settings.proxy}
        handlers: list[Any] = [ProxyHandler(proxies)]
        if self.settings.uri.startswith("https"):
            handlers.append(HTTPSHandler(context=_ssl_context(self.settings.ssl_config)))
        return build_opener(*handlers)

    @classmethod
    def from_context(cls, ctx: InitContext) -> RestActivity:
        settings = ctx.settings
        if not isinstance(settings, RestSettings):
            settings = RestSettings.from_dict(settings)
        if settings.proxy:
            ctx.logger.debug("Setting proxy server: %s", settings.proxy)
        return cls(settings)

    def eval(self, ctx: ActivityContext) -> bool:
        path_params = to_params(ctx.get_input("pathParams"))
        query_params = to_params(ctx.get_input("queryParams"))
        headers = to_params(ctx.get_input("headers"))
        content = ctx.get_input("content")

        uri = self.settings.uri
        if self._contains_param:
            if not path_params:
                raise ActivityError("Path Params not specified, required for URI: " + uri)
            uri = build_uri(uri, path_params)
        if query_params:
            uri = uri + "?" + urlencode(sorted(query_params.items()))

        method = self.settings.method
        ctx.logger.debug("REST Call: [%s] %s", method, uri)

        body = None
        content_type = _JSON_CONTENT
        if method in _BODY_METHODS and content is not None:
            content_type = content_type_for(content)
            body = _encode_body(content)

        request = Request(uri, data=body, method=method)
        if body is not None:
            request.add_header("Content-Type", content_type)
        for key, value in (headers or self.settings.headers).items():
            request.add_header(key, value)

        try:
            response = self._opener.open(request, timeout=self._timeout)
        except HTTPError as exc:
            response = exc

        with closing(response):
            status = response.code if isinstance(response, HTTPError) else response.status
            response_type = response.headers.get("Content-Type", "")
            raw = response.read()
        ctx.logger.debug("Response status: %s", status)

        if response_type == "application/json":
            result = json.loads(raw) if raw.strip() else None
        else:
            result = raw.decode("utf-8", errors="replace")

        ctx.set_output("status", status)
        ctx.set_output("data", result)
        return True