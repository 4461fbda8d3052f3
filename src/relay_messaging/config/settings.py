"""Settings resolver backed by a YAML file."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .connection_parameters import DEFAULT_HEARTBEAT, ConnectionParameters, TLSOptions

DEFAULT_HOST = "localhost"

logger = logging.getLogger(__name__)


def _parse_host_list(value: Any) -> List[str]:
    hosts = [host.strip() for host in str(value).split(",")]
    return [host for host in hosts if host] or [DEFAULT_HOST]


def _parse_flag(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class Settings:
    """Typed broker settings.

    Keys that do not map to a typed field are kept verbatim in ``extras`` under
    their uppercased name, so ``settings.get("queue_prefix")`` returns whatever
    the settings file provided for ``QUEUE_PREFIX``.

    Example settings file::

        RABBIT_HOST: host1,host2,host3
        RABBIT_VHOST: relay
        RABBIT_USER: relay
        RABBIT_PASS: password
        EXCHANGE: relay.in
        EXCHANGE_OUT: relay.out
    """

    host: Optional[str] = None
    host_list: List[str] = field(default_factory=list)
    port: Optional[int] = None
    vhost: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    heartbeat: int = DEFAULT_HEARTBEAT
    ssl_cert: Optional[str] = None
    ssl_key: Optional[str] = None
    verify_peer: Optional[bool] = None
    ssl_version: Optional[str] = None
    exchange: Optional[str] = None
    exchange_out: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Settings":
        settings = cls()
        settings.merge(mapping)
        return settings

    def _typed_names(self) -> List[str]:
        return [f.name for f in fields(self) if f.name != "extras"]

    def get(self, name: str, default: Any = None) -> Any:
        attribute = name.lower()
        if attribute in self._typed_names():
            value = getattr(self, attribute)
            return default if value is None else value
        return self.extras.get(name.upper(), default)

    def set(self, name: str, value: Any) -> None:
        attribute = name.lower()
        if attribute in self._typed_names():
            setattr(self, attribute, value)
        else:
            self.extras[name.upper()] = value

    def load(self, path: Union[str, Path]) -> None:
        """Merge the YAML file at ``path`` into these settings.

        A missing file is not fatal: the host falls back to ``localhost`` and
        the problem is logged. Raises ValueError if the file does not hold a
        mapping.
        """
        try:
            with open(path, encoding="utf-8") as settings_file:
                source = yaml.safe_load(settings_file) or {}
        except FileNotFoundError:
            self.host = DEFAULT_HOST
            self.host_list = [DEFAULT_HOST]
            logger.error("Could not find a settings file at %s", path)
            return

        if not isinstance(source, Mapping):
            raise ValueError(f"Settings file {path} must contain a mapping of keys to values.")

        self.merge(source)

    def merge(self, source: Mapping[str, Any]) -> None:
        self.extras.update({str(key).upper(): value for key, value in source.items()})
        self._derive_connection_fields()

    def _derive_connection_fields(self) -> None:
        config = self.extras

        self.host_list = _parse_host_list(config.get("RABBIT_HOST", DEFAULT_HOST))
        # One host from the pool is used for the whole lifetime of the process.
        self.host = random.choice(self.host_list)
        self.port = _parse_int(config.get("RABBIT_PORT"))

        self.vhost = config.get("RABBIT_VHOST")
        self.user = config.get("RABBIT_USER")
        self.password = config.get("RABBIT_PASS")
        heartbeat = _parse_int(config.get("RABBIT_HEARTBEAT"))
        self.heartbeat = DEFAULT_HEARTBEAT if heartbeat is None else heartbeat

        self.ssl_cert = config.get("SSL_CERTIFICATE_CHAIN")
        self.ssl_key = config.get("SSL_KEY")
        self.verify_peer = _parse_flag(config.get("VERIFY_PEER"))
        self.ssl_version = config.get("SSL_VERSION")

        self.exchange = config.get("EXCHANGE", self.exchange)
        self.exchange_out = config.get("EXCHANGE_OUT", self.exchange_out)

    def connection_parameters(self) -> ConnectionParameters:
        tls = TLSOptions(
            cert_chain_file=self.ssl_cert,
            private_key_file=self.ssl_key,
            verify_peer=self.verify_peer,
            ssl_version=self.ssl_version,
        )
        return ConnectionParameters(
            host=self.host,
            port=self.port,
            vhost=self.vhost,
            user=self.user,
            password=self.password,
            heartbeat=self.heartbeat,
            tls=tls if tls.as_options() else None,
        )
