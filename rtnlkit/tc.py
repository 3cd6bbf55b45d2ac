"""Entry points for traffic control requests."""

from __future__ import annotations

from .filter import TrafficFilterNewRequest
from .message import Handle, NetlinkFlag, TcMessage
from .tcrequests import (
    QDiscDelRequest,
    QDiscGetRequest,
    QDiscNewRequest,
    TrafficChainGetRequest,
    TrafficClassGetRequest,
    TrafficFilterGetRequest,
)


class QDiscHandle:
    """Requests on queueing disciplines, like ``tc qdisc``."""

    def __init__(self, handle: Handle) -> None:
        self._handle = handle

    def get(self) -> QDiscGetRequest:
        """List qdiscs, like ``tc qdisc show``."""
        return QDiscGetRequest(self._handle)

    def add(self, index: int) -> QDiscNewRequest:
        """Create a qdisc without replacing one, like ``tc qdisc add``."""
        return QDiscNewRequest(
            self._handle,
            TcMessage.with_index(index),
            NetlinkFlag.EXCL | NetlinkFlag.CREATE,
        )

    def change(self, index: int) -> QDiscNewRequest:
        """Change a qdisc in place, like ``tc qdisc change``."""
        return QDiscNewRequest(self._handle, TcMessage.with_index(index), 0)

    def replace(self, index: int) -> QDiscNewRequest:
        """Replace or create a qdisc, like ``tc qdisc replace``."""
        return QDiscNewRequest(
            self._handle,
            TcMessage.with_index(index),
            NetlinkFlag.CREATE | NetlinkFlag.REPLACE,
        )

    def link(self, index: int) -> QDiscNewRequest:
        """Replace a qdisc that must already exist, like ``tc qdisc link``."""
        return QDiscNewRequest(
            self._handle, TcMessage.with_index(index), NetlinkFlag.REPLACE
        )

    def delete(self, index: int) -> QDiscDelRequest:
        """Delete a qdisc, like ``tc qdisc del``."""
        return QDiscDelRequest(self._handle, TcMessage.with_index(index))


class TrafficClassHandle:
    """Requests on the traffic classes of one interface."""

    def __init__(self, handle: Handle, ifindex: int) -> None:
        self._handle = handle
        self.ifindex = ifindex

    def get(self) -> TrafficClassGetRequest:
        """List classes, like ``tc class show dev IFACE``."""
        return TrafficClassGetRequest(self._handle, self.ifindex)


class TrafficFilterHandle:
    """Requests on the traffic filters of one interface."""

    def __init__(self, handle: Handle, ifindex: int) -> None:
        self._handle = handle
        self.ifindex = ifindex

    def get(self) -> TrafficFilterGetRequest:
        """List filters, like ``tc filter show dev IFACE``."""
        return TrafficFilterGetRequest(self._handle, self.ifindex)

    def add(self) -> TrafficFilterNewRequest:
        """Add a filter without replacing one, like ``tc filter add``."""
        return TrafficFilterNewRequest(
            self._handle, self.ifindex, NetlinkFlag.EXCL | NetlinkFlag.CREATE
        )

    def change(self) -> TrafficFilterNewRequest:
        """Change a filter in place, like ``tc filter change``."""
        return TrafficFilterNewRequest(self._handle, self.ifindex, 0)

    def replace(self) -> TrafficFilterNewRequest:
        """Replace or create a filter, like ``tc filter replace``."""
        return TrafficFilterNewRequest(self._handle, self.ifindex, NetlinkFlag.CREATE)


class TrafficChainHandle:
    """Requests on the traffic chains of one interface."""

    def __init__(self, handle: Handle, ifindex: int) -> None:
        self._handle = handle
        self.ifindex = ifindex

    def get(self) -> TrafficChainGetRequest:
        """List chains, like ``tc chain show dev IFACE``."""
        return TrafficChainGetRequest(self._handle, self.ifindex)