"""Route netlink messages, flags, errors and the request handle."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional

AF_UNSPEC = 0
AF_INET = 2
AF_BRIDGE = 7
AF_INET6 = 10

RT_TABLE_UNSPEC = 0
RT_TABLE_MAIN = 254
RTPROT_UNSPEC = 0
RTPROT_STATIC = 4
RT_SCOPE_UNIVERSE = 0
RTN_UNSPEC = 0
RTN_UNICAST = 1

NUD_PERMANENT = 0x80
IFA_F_PERMANENT = 0x80
NDA_UNSPEC = 0
NTF_PROXY = 0x08

FR_ACT_UNSPEC = 0


class IpVersion(enum.Enum):
    """Internet Protocol version."""

    V4 = "v4"
    V6 = "v6"

    def family(self) -> int:
        """Address family number for this version."""
        return AF_INET if self is IpVersion.V4 else AF_INET6


class NetlinkFlag(enum.IntFlag):
    """Flags of the netlink message header."""

    REQUEST = 0x01
    MULTI = 0x02
    ACK = 0x04
    ECHO = 0x08
    REPLACE = 0x100
    EXCL = 0x200
    CREATE = 0x400
    APPEND = 0x800
    DUMP = 0x300


class RtnlKind(enum.IntEnum):
    """Route netlink message types."""

    NEW_ROUTE = 24
    DEL_ROUTE = 25
    GET_ROUTE = 26
    NEW_NEIGHBOUR = 28
    DEL_NEIGHBOUR = 29
    GET_NEIGHBOUR = 30
    NEW_RULE = 32
    DEL_RULE = 33
    GET_RULE = 34
    NEW_QUEUE_DISCIPLINE = 36
    DEL_QUEUE_DISCIPLINE = 37
    GET_QUEUE_DISCIPLINE = 38
    NEW_TRAFFIC_CLASS = 40
    DEL_TRAFFIC_CLASS = 41
    GET_TRAFFIC_CLASS = 42
    NEW_TRAFFIC_FILTER = 44
    DEL_TRAFFIC_FILTER = 45
    GET_TRAFFIC_FILTER = 46
    NEW_TRAFFIC_CHAIN = 100
    DEL_TRAFFIC_CHAIN = 101
    GET_TRAFFIC_CHAIN = 102


@dataclass
class Nla:
    """A netlink attribute: a named kind and its value."""

    kind: str
    value: Any


@dataclass
class RouteHeader:
    address_family: int = 0
    destination_prefix_length: int = 0
    source_prefix_length: int = 0
    tos: int = 0
    table: int = 0
    protocol: int = 0
    scope: int = 0
    kind: int = 0
    flags: int = 0


@dataclass
class RouteMessage:
    header: RouteHeader = field(default_factory=RouteHeader)
    nlas: list = field(default_factory=list)


@dataclass
class NeighbourHeader:
    family: int = 0
    ifindex: int = 0
    state: int = 0
    flags: int = 0
    ntype: int = 0


@dataclass
class NeighbourMessage:
    header: NeighbourHeader = field(default_factory=NeighbourHeader)
    nlas: list = field(default_factory=list)


@dataclass
class RuleHeader:
    family: int = 0
    dst_len: int = 0
    src_len: int = 0
    tos: int = 0
    table: int = 0
    action: int = 0
    flags: int = 0


@dataclass
class RuleMessage:
    header: RuleHeader = field(default_factory=RuleHeader)
    nlas: list = field(default_factory=list)


@dataclass
class TcHeader:
    family: int = 0
    index: int = 0
    handle: int = 0
    parent: int = 0
    info: int = 0


@dataclass
class TcMessage:
    header: TcHeader = field(default_factory=TcHeader)
    nlas: list = field(default_factory=list)

    @classmethod
    def with_index(cls, index: int) -> "TcMessage":
        """A traffic control message for the given interface index."""
        return cls(TcHeader(index=index))


@dataclass
class ErrorMessage:
    """An error reported by the kernel; ``code`` is a negative errno."""

    code: int
    header: bytes = b""


@dataclass
class NetlinkMessage:
    """A netlink message: its type, flags and payload.

    A payload of ``None`` stands for an acknowledgement or end of dump.
    """

    kind: Optional[RtnlKind] = None
    payload: Any = None
    flags: NetlinkFlag = NetlinkFlag(0)


class RtnetlinkError(Exception):
    """Base error of route netlink requests."""


class NetlinkError(RtnetlinkError):
    """The kernel answered a request with an error."""

    def __init__(self, error: ErrorMessage) -> None:
        super().__init__(f"netlink error, code {error.code}")
        self.error = error
        self.code = error.code


class UnexpectedMessageError(RtnetlinkError):
    """A response did not have the expected type."""

    def __init__(self, message: NetlinkMessage) -> None:
        super().__init__(f"unexpected message: {message!r}")
        self.message = message


Transport = Callable[[NetlinkMessage], Iterable[NetlinkMessage]]


class Handle:
    """Sends requests through a transport and returns their responses."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def request(self, message: NetlinkMessage) -> Iterator[NetlinkMessage]:
        try:
            responses = self._transport(message)
        except OSError as exc:
            raise RtnetlinkError(f"request failed: {exc}") from exc
        return iter(responses)


def acknowledge(handle: Handle, message: NetlinkMessage) -> None:
    """Send a request and raise NetlinkError if any response is an error."""
    for response in handle.request(message):
        if isinstance(response.payload, ErrorMessage):
            raise NetlinkError(response.payload)


def dump(handle: Handle, message: NetlinkMessage, expected: RtnlKind) -> Iterator[Any]:
    """Send a dump request and yield the payloads of the expected kind."""
    for response in handle.request(message):
        if isinstance(response.payload, ErrorMessage):
            raise NetlinkError(response.payload)
        if response.kind is not expected:
            raise UnexpectedMessageError(response)
        yield response.payload