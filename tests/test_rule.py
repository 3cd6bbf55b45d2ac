import ipaddress

import pytest

from rtnlkit.message import (
    AF_INET,
    AF_INET6,
    FR_ACT_UNSPEC,
    RT_TABLE_MAIN,
    RT_TABLE_UNSPEC,
    ErrorMessage,
    Handle,
    IpVersion,
    NetlinkError,
    NetlinkFlag,
    NetlinkMessage,
    Nla,
    RtnlKind,
    RuleHeader,
    RuleMessage,
    UnexpectedMessageError,
)
from rtnlkit.rule import RuleHandle


class FakeTransport:
    def __init__(self, responses=()):
        self.responses = list(responses)
        self.sent = []

    def __call__(self, message):
        self.sent.append(message)
        return list(self.responses)


def make_handle(responses=()):
    transport = FakeTransport(responses)
    return RuleHandle(Handle(transport)), transport


def test_add_defaults():
    rules, _ = make_handle()
    request = rules.add()
    assert request.message.header.table == RT_TABLE_MAIN
    assert request.message.header.action == FR_ACT_UNSPEC
    assert request.message.nlas == []


def test_interfaces_and_priority_are_attributes():
    rules, _ = make_handle()
    request = rules.add().input_interface("eth0").output_interface("eth1").priority(100)
    assert request.message.nlas == [
        Nla("iifname", "eth0"),
        Nla("oifname", "eth1"),
        Nla("priority", 100),
    ]


def test_table_id_small_goes_in_header():
    rules, _ = make_handle()
    request = rules.add().table_id(10)
    assert request.message.header.table == 10
    assert request.message.nlas == []


def test_table_id_large_goes_in_attribute():
    rules, _ = make_handle()
    request = rules.add().table_id(1000)
    assert request.message.header.table == RT_TABLE_MAIN
    assert request.message.nlas == [Nla("table", 1000)]


def test_table_is_deprecated():
    rules, _ = make_handle()
    with pytest.warns(DeprecationWarning):
        request = rules.add().table(7)
    assert request.message.header.table == 7


def test_tos_and_action():
    rules, _ = make_handle()
    request = rules.add().tos(16).action(2)
    assert request.message.header.tos == 16
    assert request.message.header.action == 2


def test_v4_prefixes():
    rules, _ = make_handle()
    request = (
        rules.add()
        .v4()
        .source_prefix("10.0.0.0", 8)
        .destination_prefix(ipaddress.IPv4Address("192.168.1.0"), 24)
    )
    header = request.message.header
    assert header.family == AF_INET
    assert header.src_len == 8
    assert header.dst_len == 24
    assert request.message.nlas == [
        Nla("source", ipaddress.ip_address("10.0.0.0").packed),
        Nla("destination", ipaddress.ip_address("192.168.1.0").packed),
    ]


def test_v6_prefix():
    rules, _ = make_handle()
    request = rules.add().v6().destination_prefix("2001:db8::", 32)
    assert request.message.header.family == AF_INET6
    assert request.message.header.dst_len == 32
    assert request.message.nlas[0].value == ipaddress.ip_address("2001:db8::").packed


def test_prefix_needs_ip_version():
    rules, _ = make_handle()
    with pytest.raises(TypeError):
        rules.add().source_prefix("10.0.0.0", 8)


def test_prefix_version_mismatch():
    rules, _ = make_handle()
    with pytest.raises(TypeError):
        rules.add().v4().destination_prefix("2001:db8::", 32)


def test_execute_sends_create_exclusive():
    rules, transport = make_handle()
    rules.add().v4().execute()
    (sent,) = transport.sent
    assert sent.kind is RtnlKind.NEW_RULE
    assert sent.flags == (
        NetlinkFlag.REQUEST | NetlinkFlag.ACK | NetlinkFlag.EXCL | NetlinkFlag.CREATE
    )


def test_execute_replace():
    rules, transport = make_handle()
    rules.add().v4().replace().execute()
    assert transport.sent[0].flags == (
        NetlinkFlag.REQUEST | NetlinkFlag.ACK | NetlinkFlag.REPLACE | NetlinkFlag.CREATE
    )


def test_v4_resets_replace():
    rules, transport = make_handle()
    rules.add().replace().v4().execute()
    assert transport.sent[0].flags == (
        NetlinkFlag.REQUEST | NetlinkFlag.ACK | NetlinkFlag.EXCL | NetlinkFlag.CREATE
    )


def test_execute_raises_netlink_error():
    rules, _ = make_handle([NetlinkMessage(payload=ErrorMessage(-17))])
    with pytest.raises(NetlinkError) as info:
        rules.add().v4().execute()
    assert info.value.code == -17


def test_delete_sends_message():
    rules, transport = make_handle()
    rule = RuleMessage(RuleHeader(family=AF_INET))
    rules.delete(rule).execute()
    (sent,) = transport.sent
    assert sent.kind is RtnlKind.DEL_RULE
    assert sent.payload is rule
    assert sent.flags == NetlinkFlag.REQUEST | NetlinkFlag.ACK


def test_delete_raises_netlink_error():
    rules, _ = make_handle([NetlinkMessage(payload=ErrorMessage(-2))])
    with pytest.raises(NetlinkError):
        rules.delete(RuleMessage()).execute()


def test_get_header():
    rules, _ = make_handle()
    header = rules.get(IpVersion.V6).message.header
    assert header.family == AF_INET6
    assert header.table == RT_TABLE_UNSPEC
    assert header.action == FR_ACT_UNSPEC
    assert (header.dst_len, header.src_len, header.tos) == (0, 0, 0)


def test_get_yields_rules():
    first = RuleMessage(RuleHeader(family=AF_INET, table=RT_TABLE_MAIN))
    second = RuleMessage(RuleHeader(family=AF_INET))
    responses = [
        NetlinkMessage(RtnlKind.NEW_RULE, first),
        NetlinkMessage(RtnlKind.NEW_RULE, second),
    ]
    rules, transport = make_handle(responses)
    assert list(rules.get(IpVersion.V4).execute()) == [first, second]
    assert transport.sent[0].kind is RtnlKind.GET_RULE
    assert transport.sent[0].flags == NetlinkFlag.REQUEST | NetlinkFlag.DUMP


def test_get_unexpected_message():
    rules, _ = make_handle([NetlinkMessage(RtnlKind.NEW_ROUTE, RuleMessage())])
    with pytest.raises(UnexpectedMessageError):
        list(rules.get(IpVersion.V4).execute())