"""Requests on routing policy rules."""

from __future__ import annotations

import ipaddress
import warnings
from typing import Iterator

from .message import (
    AF_INET,
    AF_INET6,
    FR_ACT_UNSPEC,
    RT_TABLE_MAIN,
    RT_TABLE_UNSPEC,
    Handle,
    IpVersion,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RtnlKind,
    RuleMessage,
    acknowledge,
    dump,
)


class RuleAddRequest:
    """A request to create a rule, like ``ip rule add``."""

    def __init__(self, handle: Handle) -> None:
        self.handle = handle
        self.message = RuleMessage()
        self.message.header.table = RT_TABLE_MAIN
        self.message.header.action = FR_ACT_UNSPEC
        self._replace = False

    def input_interface(self, ifname: str) -> "RuleAddRequest":
        """Match packets arriving on the named interface."""
        self.message.nlas.append(Nla("iifname", ifname))
        return self

    def output_interface(self, ifname: str) -> "RuleAddRequest":
        """Match packets leaving through the named interface."""
        self.message.nlas.append(Nla("oifname", ifname))
        return self

    def table(self, table: int) -> "RuleAddRequest":
        """Set the rule table in the header; prefer ``table_id``."""
        warnings.warn("use table_id instead", DeprecationWarning, stacklevel=2)
        self.message.header.table = table
        return self

    def table_id(self, table: int) -> "RuleAddRequest":
        """Set the rule table; ids above 255 go into an attribute."""
        if table > 255:
            self.message.nlas.append(Nla("table", table))
        else:
            self.message.header.table = table
        return self

    def tos(self, tos: int) -> "RuleAddRequest":
        self.message.header.tos = tos
        return self

    def action(self, action: int) -> "RuleAddRequest":
        self.message.header.action = action
        return self

    def priority(self, priority: int) -> "RuleAddRequest":
        self.message.nlas.append(Nla("priority", priority))
        return self

    def v4(self) -> "RuleAddRequest":
        """Make this an IPv4 rule."""
        self.message.header.family = AF_INET
        self._replace = False
        return self

    def v6(self) -> "RuleAddRequest":
        """Make this an IPv6 rule."""
        self.message.header.family = AF_INET6
        self._replace = False
        return self

    def replace(self) -> "RuleAddRequest":
        """Replace an existing matching rule."""
        self._replace = True
        return self

    def _octets(self, addr) -> bytes:
        family = self.message.header.family
        if family not in (AF_INET, AF_INET6):
            raise TypeError("choose v4() or v6() before setting addresses")
        ip = ipaddress.ip_address(addr)
        if (ip.version == 4) != (family == AF_INET):
            raise TypeError(f"address {ip} does not match the rule's IP version")
        return ip.packed

    def source_prefix(self, addr, prefix_length: int) -> "RuleAddRequest":
        src = self._octets(addr)
        self.message.header.src_len = prefix_length
        self.message.nlas.append(Nla("source", src))
        return self

    def destination_prefix(self, addr, prefix_length: int) -> "RuleAddRequest":
        dst = self._octets(addr)
        self.message.header.dst_len = prefix_length
        self.message.nlas.append(Nla("destination", dst))
        return self

    def execute(self) -> None:
        mode = NetlinkFlag.REPLACE if self._replace else NetlinkFlag.EXCL
        flags = NetlinkFlag.REQUEST | NetlinkFlag.ACK | mode | NetlinkFlag.CREATE
        acknowledge(self.handle, NetlinkMessage(RtnlKind.NEW_RULE, self.message, flags))


class RuleDelRequest:
    """A request to delete a rule, like ``ip rule del``."""

    def __init__(self, handle: Handle, message: RuleMessage) -> None:
        self.handle = handle
        self.message = message

    def execute(self) -> None:
        flags = NetlinkFlag.REQUEST | NetlinkFlag.ACK
        acknowledge(self.handle, NetlinkMessage(RtnlKind.DEL_RULE, self.message, flags))


class RuleGetRequest:
    """A request listing rules, like ``ip rule show``."""

    def __init__(self, handle: Handle, ip_version: IpVersion) -> None:
        self.handle = handle
        self.message = RuleMessage()
        header = self.message.header
        header.family = ip_version.family()
        header.dst_len = 0
        header.src_len = 0
        header.tos = 0
        header.action = FR_ACT_UNSPEC
        header.table = RT_TABLE_UNSPEC

    def execute(self) -> Iterator[RuleMessage]:
        flags = NetlinkFlag.REQUEST | NetlinkFlag.DUMP
        request = NetlinkMessage(RtnlKind.GET_RULE, self.message, flags)
        return dump(self.handle, request, RtnlKind.NEW_RULE)


class RuleHandle:
    """Entry point for rule requests."""

    def __init__(self, handle: Handle) -> None:
        self._handle = handle

    def get(self, ip_version: IpVersion) -> RuleGetRequest:
        return RuleGetRequest(self._handle, ip_version)

    def add(self) -> RuleAddRequest:
        return RuleAddRequest(self._handle)

    def delete(self, rule: RuleMessage) -> RuleDelRequest:
        return RuleDelRequest(self._handle, rule)