import numpy as np

from pyearcut.topology import Node, ring_nodes


def plot_ring(
    start: Node,
    title: str = "Ring",
    show: bool = False,
    fontsize: int = 7,
) -> None:
    """
    Visualize a linked vertex ring, e.g. the part of a polygon the ear slicer
    could not triangulate.

    Parameters
    ----------
    start : Node
        Any node of the ring
    title : str
        Title of the plot
    show : bool
        Whether to call plt.show() after plotting
    fontsize : int
        Font size for the vertex labels
    """
    import matplotlib.pyplot as plt

    nodes = ring_nodes(start)
    coords = np.array([(p.x, p.y) for p in nodes])
    closed = np.vstack([coords, coords[0]])

    fig, ax = plt.subplots()
    ax.plot(closed[:, 0], closed[:, 1], "k-", linewidth=1.0)
    ax.scatter(coords[:, 0], coords[:, 1], c="red", s=8, zorder=3)

    # Label each node with its vertex index; bridge duplicates share a label
    for p in nodes:
        ax.text(p.x, p.y, str(p.i), fontsize=fontsize, color="purple")

    # Mark the start so the ring direction can be read off
    ax.scatter(start.x, start.y, c="blue", s=20, zorder=4)

    ax.set_aspect("equal")
    ax.set_title(f"{title} ({len(nodes)} nodes)")

    if show:
        plt.show()
    plt.close(fig)
