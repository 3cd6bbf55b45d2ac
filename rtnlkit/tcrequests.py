"""Requests on queueing disciplines, traffic classes, filters and chains."""

from __future__ import annotations

from typing import Iterator

from .message import (
    Handle,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RtnlKind,
    TcMessage,
    acknowledge,
    dump,
)

TC_H_UNSPEC = 0
TC_H_ROOT = 0xFFFFFFFF
TC_H_INGRESS = 0xFFFFFFF1
TC_H_CLSACT = TC_H_INGRESS
TC_H_MIN_INGRESS = 0xFFF2
TC_H_MIN_EGRESS = 0xFFF3
TC_H_MAJ_MASK = 0xFFFF0000
TC_H_MIN_MASK = 0x0000FFFF

INGRESS_HANDLE = 0xFFFF0000


def tc_h_make(major: int, minor: int) -> int:
    """Combine the major part of ``major`` with the minor part of ``minor``."""
    return (major & TC_H_MAJ_MASK) | (minor & TC_H_MIN_MASK)


def _require_unset_parent(message: TcMessage) -> None:
    if message.header.parent != TC_H_UNSPEC:
        raise ValueError(
            f"parent is already set to {message.header.parent:#x}; "
            "root, ingress, egress and parent are mutually exclusive"
        )


def _set_parent(message: TcMessage, parent: int) -> None:
    _require_unset_parent(message)
    message.header.parent = parent


def _send_acknowledged(
    handle: Handle, kind: RtnlKind, message: TcMessage, flags: int
) -> None:
    request = NetlinkMessage(kind, message, NetlinkFlag.ACK | NetlinkFlag(flags))
    acknowledge(handle, request)


def _send_dump(
    handle: Handle, kind: RtnlKind, message: TcMessage, reply_kind: RtnlKind
) -> Iterator[TcMessage]:
    flags = NetlinkFlag.REQUEST | NetlinkFlag.DUMP
    return dump(handle, NetlinkMessage(kind, message, flags), reply_kind)


class QDiscNewRequest:
    """A request to create or change a queueing discipline."""

    def __init__(self, handle: Handle, message: TcMessage, flags: int) -> None:
        self._handle = handle
        self.message = message
        self.flags = NetlinkFlag.REQUEST | NetlinkFlag(flags)

    def execute(self) -> None:
        """Send the request and wait for the kernel to acknowledge it."""
        _send_acknowledged(
            self._handle, RtnlKind.NEW_QUEUE_DISCIPLINE, self.message, self.flags
        )

    def handle(self, major: int, minor: int) -> "QDiscNewRequest":
        """Set the qdisc handle ``major:minor``."""
        self.message.header.handle = tc_h_make(major << 16, minor)
        return self

    def root(self) -> "QDiscNewRequest":
        """Attach the qdisc at the root."""
        _set_parent(self.message, TC_H_ROOT)
        return self

    def parent(self, parent: int) -> "QDiscNewRequest":
        _set_parent(self.message, parent)
        return self

    def ingress(self) -> "QDiscNewRequest":
        """Make this an ingress qdisc."""
        _set_parent(self.message, TC_H_INGRESS)
        self.message.header.handle = INGRESS_HANDLE
        self.message.nlas.append(Nla("kind", "ingress"))
        return self


class QDiscDelRequest:
    """A request to delete a queueing discipline."""

    def __init__(self, handle: Handle, message: TcMessage) -> None:
        self._handle = handle
        self.message = message

    def execute(self) -> None:
        """Send the request and wait for the kernel to acknowledge it."""
        _send_acknowledged(
            self._handle,
            RtnlKind.DEL_QUEUE_DISCIPLINE,
            self.message,
            NetlinkFlag.REQUEST,
        )


class QDiscGetRequest:
    """A request listing queueing disciplines, like ``tc qdisc show``."""

    def __init__(self, handle: Handle) -> None:
        self._handle = handle
        self.message = TcMessage()

    def execute(self) -> Iterator[TcMessage]:
        """Send the request and yield every qdisc of the dump."""
        return _send_dump(
            self._handle,
            RtnlKind.GET_QUEUE_DISCIPLINE,
            self.message,
            RtnlKind.NEW_QUEUE_DISCIPLINE,
        )

    def index(self, index: int) -> "QDiscGetRequest":
        self.message.header.index = index
        return self

    def ingress(self) -> "QDiscGetRequest":
        """Ask for the ingress qdisc."""
        _set_parent(self.message, TC_H_INGRESS)
        return self


class TrafficClassGetRequest:
    """A request listing traffic classes of an interface."""

    def __init__(self, handle: Handle, ifindex: int) -> None:
        self._handle = handle
        self.message = TcMessage.with_index(ifindex)

    def execute(self) -> Iterator[TcMessage]:
        """Send the request and yield every traffic class of the dump."""
        return _send_dump(
            self._handle,
            RtnlKind.GET_TRAFFIC_CLASS,
            self.message,
            RtnlKind.NEW_TRAFFIC_CLASS,
        )


class TrafficFilterGetRequest:
    """A request listing traffic filters of an interface."""

    def __init__(self, handle: Handle, ifindex: int) -> None:
        self._handle = handle
        self.message = TcMessage.with_index(ifindex)

    def execute(self) -> Iterator[TcMessage]:
        """Send the request and yield every filter of the dump."""
        return _send_dump(
            self._handle,
            RtnlKind.GET_TRAFFIC_FILTER,
            self.message,
            RtnlKind.NEW_TRAFFIC_FILTER,
        )

    def root(self) -> "TrafficFilterGetRequest":
        """Ask for filters attached at the root."""
        _set_parent(self.message, TC_H_ROOT)
        return self


class TrafficChainGetRequest:
    """A request listing traffic chains of an interface."""

    def __init__(self, handle: Handle, ifindex: int) -> None:
        self._handle = handle
        self.message = TcMessage.with_index(ifindex)

    def execute(self) -> Iterator[TcMessage]:
        """Send the request and yield every chain of the dump."""
        return _send_dump(
            self._handle,
            RtnlKind.GET_TRAFFIC_CHAIN,
            self.message,
            RtnlKind.NEW_TRAFFIC_CHAIN,
        )