"""Request builders for Linux rtnetlink: routes, neighbours, rules and traffic control."""

__version__ = "0.12.0"

__all__ = ["message", "route", "neighbour", "rule", "tcrequests", "filter", "tc"]