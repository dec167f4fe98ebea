import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import networkx as nx
from automaton import Automaton


class AutomatonVisualizer:
    def __init__(self, automaton: Automaton):
        self.automaton = automaton

    def build_graph(self):
        G = nx.DiGraph()
        for state in self.automaton.states:
            G.add_node(state)

        edge_labels = {}

        for t in self.automaton.transitions:
            edge_key = (t.from_state, t.to_state)
            if edge_key in edge_labels:
                existing_label = edge_labels[edge_key]
                if t.symbol not in existing_label.split(","):
                    edge_labels[edge_key] = f"{existing_label},{t.symbol}"
            else:
                G.add_edge(t.from_state, t.to_state)
                edge_labels[edge_key] = t.symbol

        return G, edge_labels

    def node_color(self, node, active_states=()):
        if node in active_states:
            return "gold"
        if node == self.automaton.start_state:
            if self.automaton.is_accepting(node):
                return "lightgreen"
            return "lightblue"
        if self.automaton.is_accepting(node):
            return "lightcoral"
        return "lightgray"

    def plot(self, ax, title="Automaton", use_readable_names=True, active_states=()):
        G, edge_labels = self.build_graph()

        if len(G.nodes) == 0:
            ax.text(
                0.5,
                0.5,
                "Empty Automaton",
                ha="center",
                va="center",
                transform=ax.transAxes,
            )
            ax.set_title(title)
            return

        if len(G.nodes) <= 6:
            pos = nx.spring_layout(G, k=2.5, iterations=100, seed=42)
        else:
            pos = nx.spring_layout(G, k=1.5, iterations=50, seed=42)

        node_colors = [self.node_color(node, active_states) for node in G.nodes()]
        node_labels = {
            node: (
                self.automaton.get_readable_state_name(node)
                if use_readable_names
                else node
            )
            for node in G.nodes()
        }

        node_size = min(2000, max(800, 15000 // max(len(G.nodes), 1)))
        nx.draw_networkx_nodes(
            G, pos, node_color=node_colors, node_size=node_size, ax=ax, alpha=0.9
        )

        for node, (x, y) in pos.items():
            ax.text(
                x,
                y,
                node_labels[node],
                ha="center",
                va="center",
                fontsize=8,
                fontweight="bold",
                bbox=dict(
                    boxstyle="round,pad=0.3",
                    facecolor="white",
                    edgecolor="black",
                    alpha=0.9,
                ),
            )

        nx.draw_networkx_edges(
            G,
            pos,
            edge_color="gray",
            arrows=True,
            arrowsize=15,
            arrowstyle="->",
            width=1.2,
            ax=ax,
            alpha=0.7,
        )

        self._draw_edge_labels_smart(ax, pos, edge_labels)
        ax.set_title(title, fontsize=12, fontweight="bold")
        ax.axis("off")

    def _draw_edge_labels_smart(self, ax, pos, edge_labels):
        for (from_node, to_node), label in edge_labels.items():
            x1, y1 = pos[from_node]
            x2, y2 = pos[to_node]

            if from_node == to_node:
                ax.text(
                    x1,
                    y1 + 0.15,
                    label,
                    ha="center",
                    va="center",
                    fontsize=7,
                    fontweight="bold",
                    bbox=dict(
                        boxstyle="round,pad=0.2",
                        facecolor="yellow",
                        alpha=0.8,
                        edgecolor="orange",
                    ),
                )
                continue

            mid_x, mid_y = (x1 + x2) / 2, (y1 + y2) / 2
            dx, dy = x2 - x1, y2 - y1
            length = (dx**2 + dy**2) ** 0.5

            if length > 0:
                # shift off the edge so labels of opposite edges do not overlap
                perp_x, perp_y = -dy / length, dx / length
                label_x = mid_x + perp_x * 0.08
                label_y = mid_y + perp_y * 0.08
            else:
                label_x, label_y = mid_x, mid_y
            if "," in label:
                bbox_color = "lightcyan"
                edge_color = "blue"
            else:
                bbox_color = "lightyellow"
                edge_color = "orange"
            ax.text(
                label_x,
                label_y,
                label,
                ha="center",
                va="center",
                fontsize=7,
                fontweight="bold",
                bbox=dict(
                    boxstyle="round,pad=0.2",
                    facecolor=bbox_color,
                    alpha=0.9,
                    edgecolor=edge_color,
                ),
            )


def save_diagram(automaton: Automaton, path: str, title=None, active_states=()) -> None:
    fig, ax = plt.subplots(figsize=(8, 6))
    try:
        AutomatonVisualizer(automaton).plot(
            ax, title or f"{automaton.kind}: {automaton.name}", active_states=active_states
        )
        fig.tight_layout()
        fig.savefig(path)
    finally:
        plt.close(fig)
