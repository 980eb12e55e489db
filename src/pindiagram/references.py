"""
Reference checking for emitted markup.

TikZ has no forward declarations: a node positioned ``left = 0.1 of P7`` only
works if ``P7`` was defined earlier in the document. This module builds a
networkx graph of the names each fragment defines and references, and checks
that every reference points backwards in emission order.

Uses networkx for:
- Graph representation (edge from referenced name to defining name)
- Cycle detection
- Longest anchor chain length
"""

from typing import Dict, Sequence

import networkx as nx

from .errors import ForwardReferenceError
from .tikz import Fragment


class ReferenceGraph:
    """
    Graph of named coordinates, colors and labels in a document.

    Each node is a name, with the index of the fragment that defined it. An
    edge ``a -> b`` means the fragment defining ``b`` references ``a``.
    Fragments that reference names without defining any are checked but add
    no edges.
    """

    def __init__(self):
        self.graph: nx.DiGraph = nx.DiGraph()
        self.defined_at: Dict[str, int] = {}

    @classmethod
    def from_fragments(cls, fragments: Sequence[Fragment]) -> "ReferenceGraph":
        """Build and check the graph for fragments in emission order."""
        graph = cls()
        for index, fragment in enumerate(fragments):
            graph.add(index, fragment)
        return graph

    def add(self, index: int, fragment: Fragment) -> None:
        """
        Add a fragment emitted at ``index``.

        Raises:
            ForwardReferenceError: If the fragment references a name no
                earlier fragment defined, or redefines an existing name.
        """
        for reference in fragment.references:
            if reference not in self.defined_at:
                source = fragment.source or fragment.section.name
                raise ForwardReferenceError(
                    f"Fragment {index} ({source}) "
                    f"references {reference!r} before it is defined"
                )
        for name in fragment.defines:
            if name in self.defined_at:
                raise ForwardReferenceError(
                    f"Fragment {index} redefines {name!r}, first defined by "
                    f"fragment {self.defined_at[name]}"
                )
            self.defined_at[name] = index
            self.graph.add_node(name, index=index)
            for reference in fragment.references:
                self.graph.add_edge(reference, name)

    def is_consistent(self) -> bool:
        """True if the graph is acyclic and every edge points forward."""
        if not nx.is_directed_acyclic_graph(self.graph):
            return False
        return all(
            self.defined_at[source] < self.defined_at[target]
            for source, target in self.graph.edges
        )

    def longest_chain(self) -> int:
        """Length, in edges, of the longest chain of positioning references."""
        if self.graph.number_of_nodes() == 0:
            return 0
        return nx.dag_longest_path_length(self.graph)

    def dependents(self, name: str) -> int:
        """Number of names positioned directly or indirectly against ``name``."""
        return len(nx.descendants(self.graph, name))
