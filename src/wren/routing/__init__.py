"""Routing: an ordered route table with first-match-wins lookup.

Registration order is priority: put static and specific patterns before
parametric and catch-all ones.
"""

from wren.routing.route import Route, RouteKind
from wren.routing.table import RouteTable

__all__ = ["Route", "RouteKind", "RouteTable"]
