# route_engine/core/errors.py


class RoutingError(Exception):
    """
    Base class for every failure raised by the routing engine.
    """


class NearestNodeNotFoundError(RoutingError):
    """
    No graph node could be snapped to (empty graph or unusable node records).
    """


class NoPathFoundError(RoutingError):
    """
    The search exhausted its frontier without reaching the goal node.
    """

    def __init__(self, start_node: int, end_node: int) -> None:
        self.start_node = start_node
        self.end_node = end_node
        super().__init__(f"No path found from node {start_node} to node {end_node}")


class SearchCancelledError(RoutingError):
    """
    The cancellation check asked the search to stop.
    """

    def __init__(self, start_node: int, end_node: int, expanded: int) -> None:
        self.start_node = start_node
        self.end_node = end_node
        self.expanded = expanded
        super().__init__(
            f"Search from node {start_node} to node {end_node} cancelled "
            f"after {expanded} expansions"
        )


class GraphLoadError(RoutingError):
    """
    The serialized graph dataset is missing or cannot be parsed.
    """
