"""mDNS browsing for advertised services, one complete batch per call."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from zeroconf import (
    IPVersion,
    ServiceBrowser,
    ServiceInfo,
    ServiceListener,
    Zeroconf,
)
from zeroconf import Error as ZeroconfError
from zeroconf.const import _CLASS_IN, _TYPE_SRV

logger = logging.getLogger(__name__)

LOCAL_DOMAIN = ".local."
# Browse window per cycle; the loop itself never sleeps
BROWSE_TIMEOUT = 2.0


@dataclass
class DiscoveredService:
    port: int
    ttl: int
    # None when the advertisement carries no TXT property set at all
    properties: dict[str, str] | None = None


@dataclass
class DiscoveredHost:
    """A host answering for the browsed service type."""

    display_name: str
    ip_address: str
    services: list[DiscoveredService] = field(default_factory=list)


Resolver = Callable[[str], Awaitable[list[DiscoveredHost]]]


def normalize_service_type(service_type: str) -> str:
    """Return a fully qualified service type, e.g. ``_haptics._udp.local.``."""
    cleaned = service_type.strip()
    if cleaned.endswith(LOCAL_DOMAIN):
        return cleaned
    if cleaned.endswith(".local"):
        return f"{cleaned}."
    return f"{cleaned.rstrip('.')}{LOCAL_DOMAIN}"


def _decode_txt_properties(
    properties: dict[bytes, bytes | None],
) -> dict[str, str] | None:
    decoded: dict[str, str] = {}
    for key, value in properties.items():
        if not key:
            continue
        key_text = key.decode("utf-8", errors="replace")
        if value is None:
            value_text = ""
        elif isinstance(value, bytes):
            value_text = value.decode("utf-8", errors="replace")
        else:
            value_text = str(value)
        decoded[key_text] = value_text
    return decoded or None


def _pick_ip(info: ServiceInfo, ipv6: bool = False) -> str:
    addresses = info.parsed_addresses()
    for address in addresses:
        if ipv6 or ":" not in address:
            return address
    return addresses[0] if addresses else ""


def _strip_service_suffix(name: str, service_type: str) -> str:
    suffix = f".{service_type}"
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name.rstrip(".")


def _host_key(info: ServiceInfo, name: str) -> str:
    return (info.server or name).rstrip(".").lower()


def _advertised_ttl(zc: Zeroconf, name: str) -> int:
    record = zc.cache.get_by_details(name, _TYPE_SRV, _CLASS_IN)
    return int(record.ttl) if record is not None else 0


def hosts_from_service_infos(
    infos: dict[str, tuple[ServiceInfo, int]], service_type: str, ipv6: bool = False
) -> list[DiscoveredHost]:
    """Group resolved service instances by the host that serves them.

    ``infos`` maps instance names to the resolved info and the TTL of its
    SRV record.
    """
    hosts: dict[str, DiscoveredHost] = {}
    for name, (info, ttl) in infos.items():
        key = _host_key(info, name)
        host = hosts.get(key)
        if host is None:
            host = DiscoveredHost(
                display_name=_strip_service_suffix(name, service_type),
                ip_address=_pick_ip(info, ipv6),
            )
            hosts[key] = host
        host.services.append(
            DiscoveredService(
                port=info.port or 0,
                ttl=ttl,
                properties=_decode_txt_properties(info.properties),
            )
        )
    return list(hosts.values())


class BatchListener(ServiceListener):
    def __init__(self, info_timeout: float) -> None:
        self._info_timeout_ms = max(int(info_timeout * 1000), 1)
        self._lock = threading.Lock()
        self._found: dict[str, tuple[ServiceInfo, int]] = {}

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        info = zc.get_service_info(type_, name, timeout=self._info_timeout_ms)
        if not info:
            logger.debug("Could not resolve %s", name)
            return
        ttl = _advertised_ttl(zc, name)
        with self._lock:
            self._found[name] = (info, ttl)
        logger.debug(
            "Resolved %s at %s (ttl=%d)", name, info.parsed_addresses(), ttl
        )

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, _zc: Zeroconf, _type_: str, name: str) -> None:
        with self._lock:
            self._found.pop(name, None)

    def infos(self) -> dict[str, tuple[ServiceInfo, int]]:
        with self._lock:
            return dict(self._found)


async def resolve_hosts(
    service_type: str, ipv6: bool = False, timeout: float = BROWSE_TIMEOUT
) -> list[DiscoveredHost]:
    """Browse ``service_type`` for one scan window and return every host seen.

    Network failures are logged and reported as an empty batch.
    """
    logger.debug("Browsing %s (timeout=%.2fs)", service_type, timeout)
    ip_version = IPVersion.All if ipv6 else IPVersion.V4Only
    try:
        zeroconf = Zeroconf(ip_version=ip_version)
    except (OSError, ZeroconfError) as exc:
        logger.warning("Could not start mDNS browser: %s", exc)
        return []

    listener = BatchListener(timeout)
    try:
        browser = ServiceBrowser(zeroconf, service_type, listener)
    except (OSError, ZeroconfError) as exc:
        logger.warning("mDNS browse for %s failed: %s", service_type, exc)
        await asyncio.to_thread(zeroconf.close)
        return []

    try:
        await asyncio.sleep(timeout)
    finally:
        # cancel() joins the browser thread, which may be waiting on the loop
        await asyncio.to_thread(browser.cancel)
        await asyncio.to_thread(zeroconf.close)

    hosts = hosts_from_service_infos(listener.infos(), service_type, ipv6)
    logger.debug("Browse complete: %d hosts", len(hosts))
    return hosts


def make_resolver(ipv6: bool = False) -> Resolver:
    async def _resolve(service_type: str) -> list[DiscoveredHost]:
        return await resolve_hosts(service_type, ipv6=ipv6)

    return _resolve
