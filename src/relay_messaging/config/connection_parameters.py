"""Connection parameters derived from settings and handed to pika."""

from __future__ import annotations

import ssl
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pika

DEFAULT_HEARTBEAT = 60

# Versions that only request protocol negotiation; no minimum is pinned.
_NEGOTIATED_VERSIONS = {"SSLV23", "SSLV3", "TLS"}


@dataclass(frozen=True)
class TLSOptions:
    """TLS material for the broker connection.

    ``cert_chain_file`` must hold the complete certificate chain, from the client
    certificate up to the root, in PEM format.
    """

    cert_chain_file: Optional[str] = None
    private_key_file: Optional[str] = None
    verify_peer: Optional[bool] = None
    ssl_version: Optional[str] = None

    def as_options(self) -> Dict[str, Any]:
        options = {
            "cert_chain_file": self.cert_chain_file,
            "private_key_file": self.private_key_file,
            "verify_peer": self.verify_peer,
            "ssl_version": self.ssl_version,
        }
        return {key: value for key, value in options.items() if value is not None}

    def create_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)
        if self.cert_chain_file:
            context.load_cert_chain(self.cert_chain_file, self.private_key_file)
        if self.verify_peer is False:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        if self.ssl_version and self.ssl_version.upper() not in _NEGOTIATED_VERSIONS:
            version_name = self.ssl_version.replace(".", "_")
            try:
                context.minimum_version = ssl.TLSVersion[version_name]
            except KeyError as exc:
                raise ValueError(f"Unsupported TLS version: {self.ssl_version}") from exc
        return context


@dataclass(frozen=True)
class ConnectionParameters:
    """Immutable record of everything needed to open a broker connection."""

    host: Optional[str] = None
    port: Optional[int] = None
    vhost: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    heartbeat: Optional[int] = DEFAULT_HEARTBEAT
    tls: Optional[TLSOptions] = None

    @property
    def uses_tls(self) -> bool:
        return self.tls is not None and bool(self.tls.as_options())

    def as_options(self) -> Dict[str, Any]:
        """Return the parameters as a dict with unset fields omitted."""
        options: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "vhost": self.vhost,
            "user": self.user,
            "password": self.password,
            "heartbeat": self.heartbeat,
        }
        if self.uses_tls and self.tls is not None:
            options["tls"] = self.tls.as_options()
        return {key: value for key, value in options.items() if value is not None}

    def to_pika(self) -> pika.ConnectionParameters:
        kwargs: Dict[str, Any] = {}
        if self.host is not None:
            kwargs["host"] = self.host
        if self.port is not None:
            kwargs["port"] = self.port
        if self.vhost is not None:
            kwargs["virtual_host"] = self.vhost
        if self.heartbeat is not None:
            kwargs["heartbeat"] = self.heartbeat
        if self.user is not None:
            kwargs["credentials"] = pika.PlainCredentials(self.user, self.password or "")
        if self.uses_tls and self.tls is not None:
            kwargs["ssl_options"] = pika.SSLOptions(
                self.tls.create_context(),
                server_hostname=self.host,
            )
        return pika.ConnectionParameters(**kwargs)
