"""Requests on routing table entries."""

from __future__ import annotations

import ipaddress
import warnings
from typing import Iterator

from .message import (
    AF_INET,
    AF_INET6,
    RT_SCOPE_UNIVERSE,
    RT_TABLE_MAIN,
    RT_TABLE_UNSPEC,
    RTN_UNICAST,
    RTN_UNSPEC,
    RTPROT_STATIC,
    RTPROT_UNSPEC,
    Handle,
    IpVersion,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RouteMessage,
    RtnlKind,
    acknowledge,
    dump,
)


class RouteAddRequest:
    """A request to create a route, like ``ip route add``."""

    def __init__(self, handle: Handle) -> None:
        self.handle = handle
        self.message = RouteMessage()
        header = self.message.header
        header.table = RT_TABLE_MAIN
        header.protocol = RTPROT_STATIC
        header.scope = RT_SCOPE_UNIVERSE
        header.kind = RTN_UNICAST
        self._replace = False

    def input_interface(self, index: int) -> "RouteAddRequest":
        self.message.nlas.append(Nla("iif", index))
        return self

    def output_interface(self, index: int) -> "RouteAddRequest":
        self.message.nlas.append(Nla("oif", index))
        return self

    def table(self, table: int) -> "RouteAddRequest":
        """Set the route table in the header; prefer ``table_id``."""
        warnings.warn("use table_id instead", DeprecationWarning, stacklevel=2)
        self.message.header.table = table
        return self

    def table_id(self, table: int) -> "RouteAddRequest":
        """Set the route table; ids above 255 go into an attribute."""
        if table > 255:
            self.message.nlas.append(Nla("table", table))
        else:
            self.message.header.table = table
        return self

    def protocol(self, protocol: int) -> "RouteAddRequest":
        self.message.header.protocol = protocol
        return self

    def scope(self, scope: int) -> "RouteAddRequest":
        self.message.header.scope = scope
        return self

    def kind(self, kind: int) -> "RouteAddRequest":
        self.message.header.kind = kind
        return self

    def v4(self) -> "RouteAddRequest":
        """Make this an IPv4 route request."""
        self.message.header.address_family = AF_INET
        self._replace = False
        return self

    def v6(self) -> "RouteAddRequest":
        """Make this an IPv6 route request."""
        self.message.header.address_family = AF_INET6
        self._replace = False
        return self

    def replace(self) -> "RouteAddRequest":
        """Replace an existing matching route."""
        self._replace = True
        return self

    def _octets(self, addr) -> bytes:
        family = self.message.header.address_family
        if family not in (AF_INET, AF_INET6):
            raise TypeError("choose v4() or v6() before setting addresses")
        ip = ipaddress.ip_address(addr)
        if (ip.version == 4) != (family == AF_INET):
            raise TypeError(f"address {ip} does not match the request's IP version")
        return ip.packed

    def source_prefix(self, addr, prefix_length: int) -> "RouteAddRequest":
        src = self._octets(addr)
        self.message.header.source_prefix_length = prefix_length
        self.message.nlas.append(Nla("source", src))
        return self

    def pref_source(self, addr) -> "RouteAddRequest":
        self.message.nlas.append(Nla("pref_source", self._octets(addr)))
        return self

    def destination_prefix(self, addr, prefix_length: int) -> "RouteAddRequest":
        dst = self._octets(addr)
        self.message.header.destination_prefix_length = prefix_length
        self.message.nlas.append(Nla("destination", dst))
        return self

    def gateway(self, addr) -> "RouteAddRequest":
        self.message.nlas.append(Nla("gateway", self._octets(addr)))
        return self

    def execute(self) -> None:
        mode = NetlinkFlag.REPLACE if self._replace else NetlinkFlag.EXCL
        flags = NetlinkFlag.REQUEST | NetlinkFlag.ACK | mode | NetlinkFlag.CREATE
        acknowledge(self.handle, NetlinkMessage(RtnlKind.NEW_ROUTE, self.message, flags))


class RouteDelRequest:
    """A request to delete a route, like ``ip route del``."""

    def __init__(self, handle: Handle, message: RouteMessage) -> None:
        self.handle = handle
        self.message = message

    def execute(self) -> None:
        flags = NetlinkFlag.REQUEST | NetlinkFlag.ACK
        acknowledge(self.handle, NetlinkMessage(RtnlKind.DEL_ROUTE, self.message, flags))


class RouteGetRequest:
    """A request listing routes of all tables, like ``ip route show``."""

    def __init__(self, handle: Handle, ip_version: IpVersion) -> None:
        self.handle = handle
        self.message = RouteMessage()
        header = self.message.header
        header.address_family = ip_version.family()
        header.destination_prefix_length = 0
        header.source_prefix_length = 0
        header.scope = RT_SCOPE_UNIVERSE
        header.kind = RTN_UNSPEC
        header.table = RT_TABLE_UNSPEC
        header.protocol = RTPROT_UNSPEC

    def execute(self) -> Iterator[RouteMessage]:
        flags = NetlinkFlag.REQUEST | NetlinkFlag.DUMP
        request = NetlinkMessage(RtnlKind.GET_ROUTE, self.message, flags)
        return dump(self.handle, request, RtnlKind.NEW_ROUTE)


class RouteHandle:
    """Entry point for route requests."""

    def __init__(self, handle: Handle) -> None:
        self._handle = handle

    def get(self, ip_version: IpVersion) -> RouteGetRequest:
        return RouteGetRequest(self._handle, ip_version)

    def add(self) -> RouteAddRequest:
        return RouteAddRequest(self._handle)

    def delete(self, route: RouteMessage) -> RouteDelRequest:
        return RouteDelRequest(self._handle, route)