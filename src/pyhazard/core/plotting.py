"""
Plotting module for PyHazard.

Visualization of simulation results using matplotlib and optionally
plotly:
- Population trajectories with hurricane markers
- Hurricane damage timeline
- Bipartite plant-animal network (requires networkx)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

import matplotlib.pyplot as plt

# Try to import networkx for network graphs
try:
    import networkx as nx
    HAS_NETWORKX = True
except ImportError:
    HAS_NETWORKX = False

# Try to import plotly for interactive plots
try:
    import plotly.graph_objects as go
    HAS_PLOTLY = True
except ImportError:
    HAS_PLOTLY = False

from pyhazard.config import COLORS, PLOTS
from pyhazard.core.engine import HurricaneEvent, SimulationEngine
from pyhazard.core.network import BipartiteNetwork, species_labels

History = Tuple[np.ndarray, np.ndarray]


def category_color(label: str) -> str:
    """Colour for a hurricane category label."""
    return COLORS.categories.get(label, COLORS.category_fallback)


def _unpack(source: Union[SimulationEngine, History]):
    if isinstance(source, SimulationEngine):
        times, pops = source.history
        return times, pops, source.hurricanes, source.extinct_species
    times, pops = source
    return np.asarray(times), np.asarray(pops), [], frozenset()


# =============================================================================
# TIME SERIES
# =============================================================================

def plot_populations(
    source: Union[SimulationEngine, History],
    species: Optional[List[int]] = None,
    labels: Optional[Sequence[str]] = None,
    show_hurricanes: bool = True,
    hurricanes: Optional[Iterable[HurricaneEvent]] = None,
    extinct: Optional[Iterable[int]] = None,
    title: str = "Population Dynamics",
    figsize: Tuple[int, int] = (PLOTS.default_width, PLOTS.default_height),
    ax: Optional[plt.Axes] = None,
) -> plt.Figure:
    """Plot population trajectories.

    Parameters
    ----------
    source : SimulationEngine or (times, populations)
        Engine (history, hurricanes and extinctions are taken from it) or a
        raw history tuple
    species : list of int, optional
        Species indices to plot (default: all)
    labels : sequence of str, optional
        Legend labels indexed by species
    show_hurricanes : bool
        Draw a vertical line at each hurricane, coloured by category
    hurricanes : iterable of HurricaneEvent, optional
        Overrides the engine's hurricane log
    extinct : iterable of int, optional
        Overrides the engine's extinct set; extinct species are dashed
    title : str
        Plot title
    figsize : tuple
        Figure size
    ax : Axes, optional
        Matplotlib axes to plot on

    Returns
    -------
    matplotlib.Figure
    """
    times, pops, events, extinct_set = _unpack(source)
    if hurricanes is not None:
        events = list(hurricanes)
    if extinct is not None:
        extinct_set = frozenset(extinct)

    n_species = pops.shape[1] if pops.ndim == 2 else 0
    if species is None:
        species = list(range(n_species))
    if labels is None:
        labels = [f"Species {i + 1}" for i in range(n_species)]

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize, dpi=PLOTS.dpi)
    else:
        fig = ax.figure

    for i in species:
        is_extinct = i in extinct_set
        ax.plot(
            times,
            pops[:, i],
            label=f"{labels[i]} (extinct)" if is_extinct else labels[i],
            linewidth=PLOTS.line_width,
            linestyle='--' if is_extinct else '-',
            alpha=0.6 if is_extinct else 1.0,
        )

    if show_hurricanes:
        seen = set()
        for ev in events:
            ax.axvline(
                ev.time,
                color=category_color(ev.category),
                linestyle=':',
                alpha=0.8,
                label=ev.category if ev.category not in seen else None,
            )
            seen.add(ev.category)

    ax.set_xlabel('Time (years)', fontsize=11)
    ax.set_ylabel('Population', fontsize=11)
    ax.set_title(title, fontsize=12)
    if species:
        ax.legend(loc='best', fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_hurricane_damage(
    hurricanes: Iterable[HurricaneEvent],
    title: str = "Hurricane Damage",
    figsize: Tuple[int, int] = (PLOTS.default_width, 4),
    ax: Optional[plt.Axes] = None,
) -> plt.Figure:
    """Stem plot of damage fraction against hurricane time."""
    events = list(hurricanes)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize, dpi=PLOTS.dpi)
    else:
        fig = ax.figure

    if events:
        t = [ev.time for ev in events]
        dmg = [ev.damage for ev in events]
        ax.vlines(t, 0, dmg, colors=[category_color(ev.category) for ev in events])
        ax.scatter(t, dmg, c=[category_color(ev.category) for ev in events], zorder=3)
    else:
        ax.text(0.5, 0.5, 'No hurricanes', ha='center', va='center',
                transform=ax.transAxes, color='gray')

    ax.set_ylim(0, 1.05)
    ax.set_xlabel('Time (years)', fontsize=11)
    ax.set_ylabel('Damage fraction', fontsize=11)
    ax.set_title(title, fontsize=12)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


# =============================================================================
# NETWORK
# =============================================================================

def bipartite_positions(n_plants: int, n_animals: int) -> Dict[int, Tuple[float, float]]:
    """Plants in a column at x=0, animals at x=1, both vertically centred."""
    pos = {}
    for i in range(n_plants):
        pos[i] = (0.0, (n_plants - 1) / 2 - i)
    for j in range(n_animals):
        pos[n_plants + j] = (1.0, (n_animals - 1) / 2 - j)
    return pos


def plot_network(
    network: BipartiteNetwork,
    extinct: Optional[Iterable[int]] = None,
    labels: Optional[Sequence[str]] = None,
    title: str = "Mutualistic Network",
    figsize: Tuple[int, int] = (8, 8),
    ax: Optional[plt.Axes] = None,
) -> plt.Figure:
    """Draw the bipartite network.

    Plants on the left, animals on the right. Pollination links are solid,
    seed dispersal links dashed. Links touching an extinct species are
    faded and extinct nodes greyed out.

    Parameters
    ----------
    network : BipartiteNetwork
        Network to draw
    extinct : iterable of int, optional
        Extinct species indices (flattened plant-then-animal index)
    labels : sequence of str, optional
        Node labels (default P1.., A1..)
    title : str
        Plot title
    figsize : tuple
        Figure size
    ax : Axes, optional
        Matplotlib axes

    Returns
    -------
    matplotlib.Figure
    """
    if not HAS_NETWORKX:
        raise ImportError("networkx is required for network plots. Install with: pip install networkx")

    n_plants = network.n_plants
    n_animals = network.n_animals
    extinct_set = frozenset(extinct or ())
    if labels is None:
        labels = species_labels(n_plants, n_animals)

    G = nx.Graph()
    for i in range(n_plants + n_animals):
        G.add_node(i, kind='plant' if i < n_plants else 'animal')

    for layer_name, matrix in (('pollination', network.B), ('dispersal', network.S)):
        if matrix is None:
            continue
        for p, a in zip(*np.nonzero(matrix > 0)):
            G.add_edge(int(p), n_plants + int(a), layer=layer_name, weight=float(matrix[p, a]))

    pos = bipartite_positions(n_plants, n_animals)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize, dpi=PLOTS.dpi)
    else:
        fig = ax.figure

    for layer_name, style in (('pollination', 'solid'), ('dispersal', 'dashed')):
        edges = [(u, v) for u, v, d in G.edges(data=True) if d['layer'] == layer_name]
        alive = [e for e in edges if e[0] not in extinct_set and e[1] not in extinct_set]
        dead = [e for e in edges if e not in alive]
        if alive:
            nx.draw_networkx_edges(G, pos, edgelist=alive, style=style,
                                   edge_color=COLORS.link, width=1.5, ax=ax)
        if dead:
            nx.draw_networkx_edges(G, pos, edgelist=dead, style=style,
                                   edge_color=COLORS.extinct, width=1.0, alpha=0.3, ax=ax)

    node_colors = []
    for n in G.nodes():
        if n in extinct_set:
            node_colors.append(COLORS.extinct)
        elif G.nodes[n]['kind'] == 'plant':
            node_colors.append(COLORS.plant)
        else:
            node_colors.append(COLORS.animal)

    nx.draw_networkx_nodes(G, pos, node_color=node_colors, node_size=600, ax=ax)
    nx.draw_networkx_labels(G, pos, labels={i: labels[i] for i in G.nodes()},
                            font_size=9, font_color='white', ax=ax)

    ax.set_title(title, fontsize=12)
    ax.axis('off')

    plt.tight_layout()
    return fig


# =============================================================================
# INTERACTIVE
# =============================================================================

def plot_populations_interactive(
    engine: SimulationEngine,
    labels: Optional[Sequence[str]] = None,
    title: str = "Population Dynamics",
) -> Any:
    """Create interactive population plot with Plotly.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    if not HAS_PLOTLY:
        raise ImportError("plotly is required for interactive plots. Install with: pip install plotly")

    times, pops = engine.history
    extinct_set = engine.extinct_species
    if labels is None:
        labels = [f"Species {i + 1}" for i in range(engine.n_species)]

    fig = go.Figure()
    for i in range(engine.n_species):
        fig.add_trace(go.Scatter(
            x=times,
            y=pops[:, i],
            mode='lines',
            name=labels[i],
            line=dict(dash='dash' if i in extinct_set else 'solid'),
            hovertemplate='t: %{x:.2f}<br>N: %{y:.4f}<extra></extra>'
        ))

    for ev in engine.hurricanes:
        fig.add_vline(
            x=ev.time,
            line_dash='dot',
            line_color=category_color(ev.category),
            annotation_text=ev.category,
        )

    fig.update_layout(
        title=title,
        xaxis_title='Time (years)',
        yaxis_title='Population',
        hovermode='x unified',
        template='plotly_white'
    )
    return fig


def plot_simulation_summary(
    engine: SimulationEngine,
    labels: Optional[Sequence[str]] = None,
    figsize: Tuple[int, int] = (PLOTS.default_width, 9),
) -> plt.Figure:
    """Two panels: trajectories on top, hurricane damage below."""
    fig, axes = plt.subplots(
        2, 1, figsize=figsize, sharex=True, gridspec_kw={'height_ratios': [3, 1]}
    )

    plot_populations(engine, labels=labels, ax=axes[0])
    plot_hurricane_damage(engine.hurricanes, ax=axes[1])
    s = engine.summary()
    axes[0].set_title(
        f"t = {s.time:.1f}   hurricanes: {s.n_hurricanes}   "
        f"extinct: {s.n_extinct}/{s.n_species}"
    )

    plt.tight_layout()
    return fig


def save_plot(fig: plt.Figure, filename: str, dpi: int = 150) -> None:
    """Save a matplotlib figure."""
    fig.savefig(filename, dpi=dpi, bbox_inches='tight')
