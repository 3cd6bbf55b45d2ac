"""Requests creating traffic filters."""

from __future__ import annotations

from dataclasses import dataclass, field

from .message import (
    Handle,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RtnlKind,
    TcMessage,
    acknowledge,
)
from .tcrequests import (
    TC_H_CLSACT,
    TC_H_MAJ_MASK,
    TC_H_MIN_EGRESS,
    TC_H_MIN_INGRESS,
    TC_H_MIN_MASK,
    TC_H_ROOT,
    TC_H_UNSPEC,
    tc_h_make,
)

TCM_IFINDEX_MAGIC_BLOCK = 0xFFFFFFFF
TCA_ACT_TAB = 1
TCA_EGRESS_REDIR = 1
TC_ACT_STOLEN = 4
TC_U32_TERMINAL = 1

U32_KIND = "u32"
MIRRED_KIND = "mirred"

# The interface index field is signed; the magic block value reads as -1.
_BLOCK_INDEX = TCM_IFINDEX_MAGIC_BLOCK - (1 << 32)


@dataclass
class U32Key:
    """One match key of a u32 selector."""

    mask: int = 0
    val: int = 0
    off: int = 0
    offmask: int = 0


@dataclass
class U32Selector:
    """The selector of a u32 filter."""

    flags: int = 0
    offshift: int = 0
    nkeys: int = 0
    offmask: int = 0
    off: int = 0
    offoff: int = 0
    hoff: int = 0
    hmask: int = 0
    keys: list = field(default_factory=list)


@dataclass
class Mirred:
    """Parameters of a mirred (mirror/redirect) action."""

    index: int = 0
    capab: int = 0
    action: int = 0
    refcnt: int = 0
    bindcnt: int = 0
    eaction: int = 0
    ifindex: int = 0


@dataclass
class TcAction:
    """A traffic control action and its attributes."""

    tab: int = 0
    nlas: list = field(default_factory=list)


class TrafficFilterNewRequest:
    """A request to add, change or replace a traffic filter."""

    def __init__(self, handle: Handle, ifindex: int, flags: int) -> None:
        self._handle = handle
        self.message = TcMessage.with_index(ifindex)
        self.flags = NetlinkFlag.REQUEST | NetlinkFlag(flags)

    def execute(self) -> None:
        flags = NetlinkFlag.ACK | self.flags
        request = NetlinkMessage(RtnlKind.NEW_TRAFFIC_FILTER, self.message, flags)
        acknowledge(self._handle, request)

    def _require_no_index(self) -> None:
        if self.message.header.index != 0:
            raise ValueError("dev and block are mutually exclusive")

    def _require_unset_parent(self) -> None:
        if self.message.header.parent != TC_H_UNSPEC:
            raise ValueError("root, ingress, egress and parent are mutually exclusive")

    def index(self, index: int) -> "TrafficFilterNewRequest":
        """Set the interface index, like ``dev``."""
        self._require_no_index()
        self.message.header.index = index
        return self

    def block(self, block_index: int) -> "TrafficFilterNewRequest":
        """Attach to a shared block, like ``block BLOCK_INDEX``."""
        self._require_no_index()
        self.message.header.index = _BLOCK_INDEX
        self.message.header.parent = block_index
        return self

    def parent(self, parent: int) -> "TrafficFilterNewRequest":
        self._require_unset_parent()
        self.message.header.parent = parent
        return self

    def root(self) -> "TrafficFilterNewRequest":
        self._require_unset_parent()
        self.message.header.parent = TC_H_ROOT
        return self

    def ingress(self) -> "TrafficFilterNewRequest":
        self._require_unset_parent()
        self.message.header.parent = tc_h_make(TC_H_CLSACT, TC_H_MIN_INGRESS)
        return self

    def egress(self) -> "TrafficFilterNewRequest":
        self._require_unset_parent()
        self.message.header.parent = tc_h_make(TC_H_CLSACT, TC_H_MIN_EGRESS)
        return self

    def priority(self, priority: int) -> "TrafficFilterNewRequest":
        """Set the priority, like ``pref PRIO``."""
        info = self.message.header.info
        if info & TC_H_MAJ_MASK:
            raise ValueError("priority is already set")
        self.message.header.info = tc_h_make(priority << 16, info)
        return self

    def protocol(self, protocol: int) -> "TrafficFilterNewRequest":
        """Set the protocol, like ``protocol PROT``."""
        info = self.message.header.info
        if info & TC_H_MIN_MASK:
            raise ValueError("protocol is already set")
        self.message.header.info = tc_h_make(info, protocol)
        return self

    def u32(self, data) -> "TrafficFilterNewRequest":
        """Make this a u32 filter with the given u32 attributes."""
        if any(nla.kind == "kind" for nla in self.message.nlas):
            raise ValueError("filter kind is already set")
        self.message.nlas.append(Nla("kind", U32_KIND))
        self.message.nlas.append(Nla("options", list(data)))
        return self

    def redirect(self, dst_index: int) -> "TrafficFilterNewRequest":
        """Redirect all matching traffic to the egress of ``dst_index``."""
        if self.message.nlas:
            raise ValueError("redirect needs a filter without attributes")
        selector = U32Selector(flags=TC_U32_TERMINAL, nkeys=1, keys=[U32Key()])
        mirred = Mirred(
            action=TC_ACT_STOLEN, eaction=TCA_EGRESS_REDIR, ifindex=dst_index
        )
        action = TcAction(
            tab=TCA_ACT_TAB,
            nlas=[
                Nla("kind", MIRRED_KIND),
                Nla("options", [Nla("parms", mirred)]),
            ],
        )
        return self.u32([Nla("sel", selector), Nla("act", [action])])