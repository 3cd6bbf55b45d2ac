# rtnlkit

Request builders for the Linux rtnetlink interface. It covers routes,
neighbour entries, routing rules and traffic control: qdiscs, classes,
filters and chains.

You build a request by chaining setter calls on a builder that a handle
returns. Calling `execute()` sends the request:

* Add, change and delete requests read every reply. They raise
  `NetlinkError` if any reply is an error message.
* Get requests return an iterator over the payloads of the dump.

## Installation

```
pip install rtnlkit
```

## Transports

`rtnlkit.message.Handle` takes a transport. A transport is a callable that
receives a `NetlinkMessage` and returns an iterable of reply
`NetlinkMessage` objects.

* An `OSError` raised by the transport is re-raised as `RtnetlinkError`.
* A reply whose payload is an `ErrorMessage` becomes a `NetlinkError`. The
  kernel's negative errno is in its `code`.
* For get requests, every other reply must carry the matching "new" kind,
  for example `RtnlKind.NEW_ROUTE` for a route dump. A reply of any other
  kind raises `UnexpectedMessageError`. The transport should therefore
  leave out end-of-dump markers.

A transport that records requests and answers every one with an
acknowledgement looks like this:

```python
from rtnlkit.message import Handle

sent = []

def transport(message):
    sent.append(message)
    return []

handle = Handle(transport)
```

## Usage

Addresses may be given as strings or as `ipaddress` objects.

```python
from rtnlkit.message import IpVersion
from rtnlkit.route import RouteHandle
from rtnlkit.neighbour import NeighbourHandle
from rtnlkit.rule import RuleHandle
from rtnlkit.tc import QDiscHandle, TrafficFilterHandle

# ip route add 10.0.0.0/24 via 192.168.1.1 dev <index 2>
(
    RouteHandle(handle)
    .add()
    .v4()
    .destination_prefix("10.0.0.0", 24)
    .gateway("192.168.1.1")
    .output_interface(2)
    .execute()
)

# ip route show
for route in RouteHandle(handle).get(IpVersion.V4).execute():
    print(route.header)

# ip neighbour add / bridge fdb add
NeighbourHandle(handle).add(2, "192.168.1.10").execute()
NeighbourHandle(handle).add_bridge(2, bytes(6)).execute()

# ip rule add
RuleHandle(handle).add().v4().table_id(100).priority(1000).execute()

# tc qdisc add dev <index 3> ingress
QDiscHandle(handle).add(3).ingress().execute()

# tc filter add dev <index 3> parent ffff: protocol all u32 ... mirred redirect dev <index 4>
TrafficFilterHandle(handle, 3).add().parent(0xFFFF0000).protocol(0x0003).redirect(4).execute()
```

## Modules

| Module | Contents |
| --- | --- |
| `rtnlkit.message` | Messages, headers, `Nla`, `NetlinkFlag`, `RtnlKind`, `IpVersion`, errors, `Handle`, and the `acknowledge` and `dump` helpers |
| `rtnlkit.route` | `RouteHandle` with add, get and delete requests |
| `rtnlkit.neighbour` | `NeighbourHandle` with add, add_bridge, get and delete requests |
| `rtnlkit.rule` | `RuleHandle` with add, get and delete requests |
| `rtnlkit.tcrequests` | Qdisc new, delete and get requests; class, filter and chain get requests; `tc_h_make` |
| `rtnlkit.filter` | `TrafficFilterNewRequest`, plus the u32 and mirred data classes |
| `rtnlkit.tc` | `QDiscHandle`, `TrafficClassHandle`, `TrafficFilterHandle` and `TrafficChainHandle` |

## Errors

* `RtnetlinkError`: the base class of the errors raised while sending or
  reading replies.
* `NetlinkError`: a reply was a kernel error message.
* `UnexpectedMessageError`: a dump returned a message of the wrong kind.

Builder misuse raises an error as soon as the setter is called:

* `ValueError` for conflicting traffic-control settings. Examples are
  setting a parent twice, setting both `index` and `block`, setting the
  filter priority or protocol twice, or calling `redirect` after other
  attributes have been added.
* `TypeError` when a route or rule address is set before `v4()` or `v6()`,
  or when the address does not match the chosen IP version.

The `table()` setters still work but raise a `DeprecationWarning`. Use
`table_id()` instead.

## What this package does not do

The package has no netlink socket of its own and no binary encoding of
messages. Sending and receiving is left to the transport you supply.

It also does not manage links, addresses or network namespaces, and it
provides no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```