from unittest.mock import Mock

import pytest

from rtnlkit.filter import (
    TC_ACT_STOLEN,
    TC_U32_TERMINAL,
    TCA_ACT_TAB,
    TCA_EGRESS_REDIR,
    Mirred,
    TcAction,
    TrafficFilterNewRequest,
    U32Key,
    U32Selector,
)
from rtnlkit.message import (
    ErrorMessage,
    Handle,
    NetlinkError,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RtnlKind,
)
from rtnlkit.tcrequests import (
    TC_H_CLSACT,
    TC_H_MAJ_MASK,
    TC_H_MIN_EGRESS,
    TC_H_MIN_INGRESS,
    TC_H_MIN_MASK,
    TC_H_ROOT,
)

CREATE_NEW = NetlinkFlag.EXCL | NetlinkFlag.CREATE


def new_request(ifindex=2, transport=None):
    transport = transport or Mock(return_value=[])
    return TrafficFilterNewRequest(Handle(transport), ifindex, CREATE_NEW)


def test_redirect_builds_u32_mirred_filter():
    req = new_request().parent(0xFFFF0000).protocol(0x0003).redirect(7)
    kind, options = req.message.nlas
    assert kind == Nla("kind", "u32")
    assert options.kind == "options"
    sel, act = options.value
    assert sel.kind == "sel"
    assert (sel.value.flags, sel.value.nkeys) == (TC_U32_TERMINAL, 1)
    assert sel.value.keys == [U32Key()]
    assert act.kind == "act"
    (action,) = act.value
    assert action.tab == TCA_ACT_TAB
    assert action.nlas[0] == Nla("kind", "mirred")
    (parms,) = action.nlas[1].value
    assert parms == Nla(
        "parms", Mirred(action=TC_ACT_STOLEN, eaction=TCA_EGRESS_REDIR, ifindex=7)
    )


def test_parent_and_protocol_from_source_case():
    header = new_request().parent(0xFFFF0000).protocol(0x0003).message.header
    assert header.parent == 0xFFFF0000
    assert header.info & TC_H_MIN_MASK == 0x0003


@pytest.mark.parametrize(
    "build",
    [
        lambda: new_request().u32([Nla("sel", U32Selector())]).redirect(3),
        lambda: new_request().u32([]).u32([]),
        lambda: new_request(ifindex=0).index(3).block(1),
        lambda: new_request(ifindex=5).index(6),
        lambda: new_request().priority(1).protocol(3).priority(2),
        lambda: new_request().priority(1).protocol(3).protocol(4),
        lambda: new_request().ingress().egress(),
        lambda: new_request().ingress().root(),
        lambda: new_request().ingress().parent(1),
    ],
)
def test_conflicting_settings_are_rejected(build):
    with pytest.raises(ValueError):
        build()


def test_execute_sends_flags_and_payload():
    transport = Mock(return_value=[])
    new_request(ifindex=4, transport=transport).root().execute()
    sent = transport.call_args.args[0]
    assert sent.kind is RtnlKind.NEW_TRAFFIC_FILTER
    assert sent.flags == NetlinkFlag.ACK | NetlinkFlag.REQUEST | CREATE_NEW
    assert (sent.payload.header.index, sent.payload.header.parent) == (4, TC_H_ROOT)


def test_execute_raises_netlink_error():
    transport = Mock(return_value=[NetlinkMessage(payload=ErrorMessage(code=-22))])
    with pytest.raises(NetlinkError) as info:
        new_request(transport=transport).execute()
    assert info.value.code == -22


@pytest.mark.parametrize(
    "direction, minor",
    [("ingress", TC_H_MIN_INGRESS), ("egress", TC_H_MIN_EGRESS)],
)
def test_ingress_and_egress_parents(direction, minor):
    parent = getattr(new_request(), direction)().message.header.parent
    assert parent & TC_H_MAJ_MASK == TC_H_CLSACT & TC_H_MAJ_MASK
    assert parent & TC_H_MIN_MASK == minor


def test_block_sets_magic_index_and_parent():
    header = new_request(ifindex=0).block(12).message.header
    assert (header.index, header.parent) == (-1, 12)


def test_index_sets_interface():
    assert new_request(ifindex=0).index(3).message.header.index == 3


def test_priority_and_protocol_combine():
    info = new_request().priority(10).protocol(0x0800).message.header.info
    assert (info >> 16, info & TC_H_MIN_MASK) == (10, 0x0800)


def test_action_defaults():
    assert TcAction() == TcAction(tab=0, nlas=[])
    assert U32Selector().keys == []