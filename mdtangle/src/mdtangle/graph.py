"""Reference graph between fragments and the acyclicity check run before expansion."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

import networkx as nx

from mdtangle.errors import CyclicInclusion, UndefinedFragment
from mdtangle.fragments import NAME_PATTERN
from mdtangle.table import MacroTable

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def invocation_pattern(comment: str) -> re.Pattern[str]:
    """Match a whole line ``<indent><comment> <<name>>`` including its line break."""
    return re.compile(
        rf"^(?P<indent>[ \t]*){re.escape(comment)}[ \t]*<<(?P<name>{NAME_PATTERN})>>[ \t]*\r?(?:\n|\Z)",
        re.MULTILINE,
    )


@dataclass(frozen=True)
class Invocation:
    name: str
    indent: str
    start: int
    end: int


def iter_invocations(body: str, comment: str = "//") -> Iterator[Invocation]:
    for match in invocation_pattern(comment).finditer(body):
        yield Invocation(match.group("name"), match.group("indent"), match.start(), match.end())


def build_graph(table: MacroTable, comment: str = "//") -> nx.DiGraph:
    """Build the graph of fragment ordinals, with an edge per invocation."""
    graph = nx.DiGraph()
    for fragment in table:
        graph.add_node(fragment.ordinal, name=fragment.name)
    for fragment in table:
        for invocation in iter_invocations(fragment.body, comment):
            invoked = table.get(invocation.name)
            if invoked is None:
                raise UndefinedFragment(fragment.name, invocation.name)
            graph.add_edge(fragment.ordinal, invoked.ordinal)
    logger.debug(
        "Reference graph has %d fragments and %d invocations",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def check_acyclic(graph: nx.DiGraph) -> None:
    """Raise CyclicInclusion naming the fragments of a cycle, if there is one."""
    try:
        edges = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return
    raise CyclicInclusion([graph.nodes[source]["name"] for source, _ in edges])
