import logging
from typing import Dict, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from bokeh.io import output_file, save
from bokeh.models import Circle, HoverTool, MultiLine
from bokeh.palettes import Spectral4
from bokeh.plotting import figure, from_networkx

logger = logging.getLogger(__name__)


def cooccurrence(binary: np.ndarray) -> np.ndarray:
    """
    Product-product cooccurrence: number of countries exporting both
    products with advantage.
    """
    return binary.T @ binary


def proximity(binary: np.ndarray) -> np.ndarray:
    """
    Compute the proximity between products from a binary country-product
    matrix, as introduced by Hidalgo et al. (2007):

        phi[p, q] = min( P(q | p), P(p | q) ) = C[p, q] / max(u[p], u[q])

    where C is the cooccurrence matrix and u the ubiquity of each product.

    A product exported by no country has undefined conditional
    probabilities: its row and column are NaN wherever the other product
    is also absent. No cleanup happens here.

    Parameters
    ----------
      - binary : np.ndarray
          0/1 matrix (countries x products).

    Returns
    -------
      - np.ndarray
          Symmetric (products x products) matrix, diagonal 1.0 for
          products present in at least one country.

    Reference
    ---------
      - Hidalgo C. A. et al., *The Product Space Conditions the Development of Nations*, Science 317 (2007)
    """
    cooc = cooccurrence(binary)
    ubiquity = binary.sum(axis=0)

    ubi_max = np.maximum(ubiquity[:, np.newaxis], ubiquity[np.newaxis, :])
    with np.errstate(divide="ignore", invalid="ignore"):
        return cooc / ubi_max


def density(
        presence: np.ndarray,
        proximity: np.ndarray,
        exclude_self: bool = True
        ) -> np.ndarray:
    """
    Density of each product around each country: the proximity-weighted
    share of related products the country already exports with advantage.

        density[c, p] = sum_k phi[p, k] M[c, k] / sum_k phi[p, k]

    Parameters
    ----------
      - presence : np.ndarray
          0/1 matrix (countries x products).
      - proximity : np.ndarray
          (products x products) proximity matrix without NaN.
      - exclude_self : bool
          If True (default) the product itself (phi[p, p]) is left out of
          both sums.

    Returns
    -------
      - np.ndarray
          (countries x products) matrix with values in [0, 1]. Products with
          no proximity to any other product get density 0.
    """
    phi = np.array(proximity, dtype=float, copy=True)
    if exclude_self:
        np.fill_diagonal(phi, 0.0)

    weighted = presence @ phi.T
    phi_sum = phi.sum(axis=1)
    phi_sum[phi_sum == 0] = 1  # avoid division by zero
    return weighted / phi_sum[np.newaxis, :]


def distance(
        presence: np.ndarray,
        proximity: np.ndarray,
        exclude_self: bool = True
        ) -> np.ndarray:
    """
    Distance of each country from each product (Hausmann & Klinger, 2006):
    one minus the density.
    """
    return 1.0 - density(presence, proximity, exclude_self=exclude_self)


def proximity_network(
        proximity: np.ndarray,
        labels: Sequence[str],
        threshold: float = 0.0,
        backbone: bool = False
        ) -> nx.Graph:
    """
    Convert a proximity matrix into an undirected weighted graph.

    Parameters
    ----------
      - proximity : np.ndarray
          Symmetric (products x products) matrix.
      - labels : sequence of str
          Product names, in matrix order.
      - threshold : float
          Only links with proximity strictly above this value are kept.
      - backbone : bool
          If True, return the maximum spanning tree of the full network
          plus every link above the threshold, the usual way of drawing
          the product space.

    Returns
    -------
      - nx.Graph
          Nodes are product names, edges carry a 'weight' attribute.
    """
    if proximity.shape[0] != proximity.shape[1] or proximity.shape[0] != len(labels):
        raise ValueError("Proximity must be square and match the number of labels.")

    full = nx.Graph()
    full.add_nodes_from(labels)
    n = len(labels)
    for i in range(n):
        for j in range(i + 1, n):
            weight = proximity[i, j]
            if weight > 0:
                full.add_edge(labels[i], labels[j], weight=float(weight))

    if not backbone:
        if threshold <= 0:
            return full
        G = nx.Graph()
        G.add_nodes_from(labels)
        G.add_edges_from((u, v, d) for u, v, d in full.edges(data=True) if d["weight"] > threshold)
        return G

    G = nx.maximum_spanning_tree(full, weight="weight")
    G.add_edges_from((u, v, d) for u, v, d in full.edges(data=True) if d["weight"] > threshold)
    return G


def plot_network(
        G: nx.Graph,
        node_size: int = 5,
        layout: str = "spring",
        filename: Optional[str] = None,
        color: Optional[Dict[str, str]] = None,
        title: str = "Product Space"
        ):
    """
    Draw a product space network with Bokeh.

    Parameters
    ----------
      - G : nx.Graph
          Network from proximity_network().
      - node_size : int
          Radius of the nodes, in hundredths of the layout unit.
      - layout : str
          Name of a networkx layout function without the '_layout' suffix.
      - filename : str, optional
          If given, the plot is saved to this HTML file.
      - color : dict, optional
          Node name -> color. Nodes missing from it use the default color.
      - title : str
          Plot title.

    Returns
    -------
      - bokeh.plotting.figure
    """
    if not isinstance(G, nx.Graph):
        raise ValueError("Input G must be a NetworkX Graph object. Use proximity_network() first.")

    layout_pos = getattr(nx, f"{layout}_layout")(G)
    x_range, y_range = _padded_ranges(layout_pos)

    plot = figure(
        title=title,
        x_range=x_range,
        y_range=y_range,
        tools="pan,wheel_zoom,tap,reset",
        toolbar_location="above"
    )

    graph_renderer = from_networkx(G, layout_pos)

    color = color or {}
    graph_renderer.node_renderer.data_source.data["fill_color"] = [
        color.get(node, Spectral4[0]) for node in graph_renderer.node_renderer.data_source.data["index"]
    ]
    graph_renderer.node_renderer.glyph = Circle(
        radius=node_size / 100,
        fill_color="fill_color",
        line_color="dimgrey",
        line_width=1,
        fill_alpha=0.9,
    )
    graph_renderer.edge_renderer.glyph = MultiLine(line_color="#CCCCCC", line_alpha=0.95, line_width=1)

    plot.renderers.append(graph_renderer)
    plot.add_tools(HoverTool(tooltips=[("product", "@index")], renderers=[graph_renderer.node_renderer]))

    if filename:
        output_file(filename, title=title)
        save(plot)
        logger.info("product space plot saved to %s", filename)

    return plot


def _padded_ranges(layout_pos) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    x_coords = [pos[0] for pos in layout_pos.values()]
    y_coords = [pos[1] for pos in layout_pos.values()]
    if not x_coords:
        return (-1, 1), (-1, 1)
    x_margin = (max(x_coords) - min(x_coords)) * 0.2 or 1
    y_margin = (max(y_coords) - min(y_coords)) * 0.2 or 1
    return ((min(x_coords) - x_margin, max(x_coords) + x_margin),
            (min(y_coords) - y_margin, max(y_coords) + y_margin))
