"""Requests on neighbour cache and bridge forwarding entries."""

from __future__ import annotations

import ipaddress
from typing import Iterator

from .message import (
    AF_BRIDGE,
    AF_INET,
    AF_INET6,
    IFA_F_PERMANENT,
    NDA_UNSPEC,
    NTF_PROXY,
    NUD_PERMANENT,
    Handle,
    IpVersion,
    NeighbourHeader,
    NeighbourMessage,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RtnlKind,
    acknowledge,
    dump,
)


def _set_nla(message: NeighbourMessage, kind: str, value) -> None:
    for nla in message.nlas:
        if nla.kind == kind:
            nla.value = value
            return
    message.nlas.append(Nla(kind, value))


class NeighbourAddRequest:
    """A request to add a neighbour entry, like ``ip neighbour add``."""

    def __init__(self, handle: Handle, index: int, destination) -> None:
        ip = ipaddress.ip_address(destination)
        header = NeighbourHeader(
            family=AF_INET if ip.version == 4 else AF_INET6,
            ifindex=index,
            state=IFA_F_PERMANENT,
            ntype=NDA_UNSPEC,
        )
        self.handle = handle
        self.message = NeighbourMessage(header, [Nla("destination", ip.packed)])
        self._replace = False

    @classmethod
    def bridge(cls, handle: Handle, index: int, lla) -> "NeighbourAddRequest":
        """A request to add a bridge forwarding entry, like ``bridge fdb add``."""
        request = cls.__new__(cls)
        header = NeighbourHeader(
            family=AF_BRIDGE, ifindex=index, state=NUD_PERMANENT, ntype=NDA_UNSPEC
        )
        request.handle = handle
        request.message = NeighbourMessage(header, [Nla("link_local_address", bytes(lla))])
        request._replace = False
        return request

    def state(self, state: int) -> "NeighbourAddRequest":
        """Set the bitmask of NUD_* states."""
        self.message.header.state = state
        return self

    def flags(self, flags: int) -> "NeighbourAddRequest":
        """Set the NTF_* flags."""
        self.message.header.flags = flags
        return self

    def ntype(self, ntype: int) -> "NeighbourAddRequest":
        self.message.header.ntype = ntype
        return self

    def link_local_address(self, addr) -> "NeighbourAddRequest":
        """Set the link layer address, replacing any earlier one."""
        _set_nla(self.message, "link_local_address", bytes(addr))
        return self

    def destination(self, addr) -> "NeighbourAddRequest":
        """Set the destination address, replacing any earlier one."""
        _set_nla(self.message, "destination", ipaddress.ip_address(addr).packed)
        return self

    def replace(self) -> "NeighbourAddRequest":
        """Replace an existing matching neighbour."""
        self._replace = True
        return self

    def execute(self) -> None:
        mode = NetlinkFlag.REPLACE if self._replace else NetlinkFlag.EXCL
        flags = NetlinkFlag.REQUEST | NetlinkFlag.ACK | mode | NetlinkFlag.CREATE
        acknowledge(self.handle, NetlinkMessage(RtnlKind.NEW_NEIGHBOUR, self.message, flags))


class NeighbourDelRequest:
    """A request to delete a neighbour entry, like ``ip neighbour delete``."""

    def __init__(self, handle: Handle, message: NeighbourMessage) -> None:
        self.handle = handle
        self.message = message

    def execute(self) -> None:
        flags = NetlinkFlag.REQUEST | NetlinkFlag.ACK
        acknowledge(self.handle, NetlinkMessage(RtnlKind.DEL_NEIGHBOUR, self.message, flags))


class NeighbourGetRequest:
    """A request listing neighbour entries, like ``ip neighbour show``."""

    def __init__(self, handle: Handle) -> None:
        self.handle = handle
        self.message = NeighbourMessage()

    def proxies(self) -> "NeighbourGetRequest":
        """List neighbour proxies instead."""
        self.message.header.flags |= NTF_PROXY
        return self

    def set_family(self, ip_version: IpVersion) -> "NeighbourGetRequest":
        self.message.header.family = ip_version.family()
        return self

    def execute(self) -> Iterator[NeighbourMessage]:
        flags = NetlinkFlag.REQUEST | NetlinkFlag.DUMP
        request = NetlinkMessage(RtnlKind.GET_NEIGHBOUR, self.message, flags)
        return dump(self.handle, request, RtnlKind.NEW_NEIGHBOUR)


class NeighbourHandle:
    """Entry point for neighbour requests."""

    def __init__(self, handle: Handle) -> None:
        self._handle = handle

    def get(self) -> NeighbourGetRequest:
        return NeighbourGetRequest(self._handle)

    def add(self, index: int, destination) -> NeighbourAddRequest:
        return NeighbourAddRequest(self._handle, index, destination)

    def add_bridge(self, index: int, lla) -> NeighbourAddRequest:
        return NeighbourAddRequest.bridge(self._handle, index, lla)

    def delete(self, message: NeighbourMessage) -> NeighbourDelRequest:
        return NeighbourDelRequest(self._handle, message)