"""Structural checks for an extracted flow.

check_flow_invariants() lists everything wrong with a flow instead of
stopping at the first problem, so it can back both tests and diagnostics.
"""

from collections import deque

from contractflow.models.flow_graph import ContractFlow, NodeKind


def _find_cycle_nodes(node_ids: set[str], children: dict[str, list[str]]) -> set[str]:
    """Nodes that cannot be topologically ordered (on or behind a cycle)."""
    indegree = {node_id: 0 for node_id in node_ids}
    for targets in children.values():
        for target in targets:
            if target in indegree:
                indegree[target] += 1

    queue = deque(node_id for node_id, deg in indegree.items() if deg == 0)
    ordered: set[str] = set()
    while queue:
        node_id = queue.popleft()
        ordered.add(node_id)
        for target in children.get(node_id, []):
            if target not in indegree:
                continue
            indegree[target] -= 1
            if indegree[target] == 0:
                queue.append(target)

    return node_ids - ordered


def check_flow_invariants(flow: ContractFlow) -> list[str]:
    """Return human-readable invariant violations; empty means well-formed.

    Checked:
    - exactly one contract node, and unique node ids
    - every edge endpoint is a known node
    - every node reachable from the root, no cycles
    - step orders are 1..N without gaps, one step per node
    """
    if flow.is_empty():
        if flow.edges or flow.ordered_steps:
            return ["flow has edges or steps but no nodes"]
        return []

    problems: list[str] = []

    roots = [n for n in flow.nodes if n.type == NodeKind.contract]
    if len(roots) != 1:
        problems.append(f"expected exactly one contract node, found {len(roots)}")

    node_ids = [n.id for n in flow.nodes]
    known = set(node_ids)
    if len(known) != len(node_ids):
        dupes = sorted({i for i in node_ids if node_ids.count(i) > 1})
        problems.append(f"duplicate node ids: {', '.join(dupes)}")

    children: dict[str, list[str]] = {}
    for edge in flow.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in known:
                problems.append(f"edge {edge.id} references unknown node {endpoint}")
        children.setdefault(edge.source, []).append(edge.target)

    if roots:
        seen = {roots[0].id}
        queue = deque([roots[0].id])
        while queue:
            for target in children.get(queue.popleft(), []):
                if target not in seen:
                    seen.add(target)
                    queue.append(target)
        orphans = [i for i in node_ids if i not in seen]
        if orphans:
            problems.append(f"nodes unreachable from root: {', '.join(orphans)}")

    cyclic = _find_cycle_nodes(known, children)
    if cyclic:
        problems.append(f"cycle through nodes: {', '.join(sorted(cyclic))}")

    orders = [s.order for s in flow.ordered_steps]
    if orders != list(range(1, len(orders) + 1)):
        problems.append("step orders are not a contiguous ascending range starting at 1")

    if len(flow.ordered_steps) != len(flow.nodes):
        problems.append(
            f"{len(flow.ordered_steps)} steps for {len(flow.nodes)} nodes"
        )
    else:
        for step, node in zip(flow.ordered_steps, flow.nodes):
            if step.type != node.type or step.label != node.label:
                problems.append(f"step {step.order} does not match node {node.id}")

    return problems
