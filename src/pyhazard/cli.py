"""
Command-line driver for PyHazard.

Runs a hurricane-perturbed simulation headlessly and writes the history,
the hurricane log and an optional figure.

    pyhazard --b-matrix B.csv --rate 0.1 --duration 100 --seed 1 --plot out.png
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import numpy as np

from pyhazard.config import DEFAULTS, HURRICANES, SIMULATION
from pyhazard.core.ecology import create_ecology_params
from pyhazard.core.engine import SimulationEngine
from pyhazard.core.hurricanes import default_categories, normalize_categories
from pyhazard.core.network import (
    build_interaction_matrix,
    default_network,
    generate_interaction_matrices,
    network_stats,
    species_labels,
)
from pyhazard.core.params import (
    ConfigurationError,
    ModelConfig,
    NetworkParams,
    SimulationConfig,
)
from pyhazard.io.network_csv import FormatError, read_network
from pyhazard.logger import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pyhazard',
        description='Simulate a mutualistic community under hurricane disturbance.',
    )
    net = parser.add_argument_group('network')
    net.add_argument('--b-matrix', help='pollination biadjacency CSV (plants x animals)')
    net.add_argument('--s-matrix', help='seed dispersal biadjacency CSV (plants x animals)')
    net.add_argument('--ring', type=int, metavar='N',
                     help='use a synthetic ring network of N species instead')
    net.add_argument('-m', '--mutualism', type=float, default=DEFAULTS.mutualistic_strength)
    net.add_argument('-d', '--dispersal', type=float, default=DEFAULTS.dispersal_strength)
    net.add_argument('-c', '--competition', type=float, default=DEFAULTS.competition_strength)
    net.add_argument('--half-saturation', type=float, default=DEFAULTS.half_saturation)

    sim = parser.add_argument_group('simulation')
    sim.add_argument('--rate', type=float, default=HURRICANES.rate,
                     help='hurricanes per year')
    sim.add_argument('--duration', type=float, default=SIMULATION.duration)
    sim.add_argument('--frame-step', type=float, default=SIMULATION.frame_step,
                     help='time advanced per engine step')
    sim.add_argument('--time-step', type=float, default=SIMULATION.time_step,
                     help='RK4 step size')
    sim.add_argument('--extinction-threshold', type=float,
                     default=SIMULATION.extinction_threshold,
                     help='fraction of initial population')
    sim.add_argument('--seed', type=int, default=None)

    out = parser.add_argument_group('output')
    out.add_argument('--history-out', help='write population history CSV')
    out.add_argument('--events-out', help='write hurricane log CSV')
    out.add_argument('--plot', help='write summary figure (PNG)')
    out.add_argument('-v', '--verbose', action='store_true')
    return parser


def build_engine(args: argparse.Namespace):
    """Create the engine and species labels described by ``args``."""
    rng = np.random.default_rng(args.seed)

    if args.ring is not None:
        config = ModelConfig(
            n_species=args.ring,
            mutualistic_strength=args.mutualism,
            competition_strength=args.competition,
            half_saturation=args.half_saturation,
        )
        interactions = generate_interaction_matrices(
            args.ring, args.mutualism, args.competition
        )
        labels = [f"Species {i + 1}" for i in range(args.ring)]
    else:
        if args.b_matrix or args.s_matrix:
            network = read_network(args.b_matrix, args.s_matrix)
        else:
            network = default_network()
        stats = network_stats(network)
        logger.info(
            f"Network: {stats.n_plants} plants, {stats.n_animals} animals, "
            f"{stats.n_pollination_links} pollination and "
            f"{stats.n_dispersal_links} dispersal links"
        )
        interactions = build_interaction_matrix(
            network, NetworkParams(m=args.mutualism, d=args.dispersal, c=args.competition)
        )
        config = ModelConfig(
            n_species=interactions.n_species,
            mutualistic_strength=args.mutualism,
            dispersal_strength=args.dispersal,
            competition_strength=args.competition,
            half_saturation=args.half_saturation,
        )
        labels = species_labels(interactions.n_plants, interactions.n_animals)

    params, initial = create_ecology_params(config, rng, interactions=interactions)
    sim_config = SimulationConfig(
        hurricane_rate=args.rate,
        hurricane_categories=normalize_categories(default_categories()),
        extinction_threshold=args.extinction_threshold,
        time_step=args.time_step,
    )
    engine = SimulationEngine(params, initial, sim_config, rng=rng)
    return engine, labels


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging('DEBUG' if args.verbose else 'INFO')

    try:
        engine, labels = build_engine(args)
        engine.run(args.duration, step_size=args.frame_step)
    except (FormatError, ConfigurationError) as e:
        print(f"pyhazard: error: {e}", file=sys.stderr)
        return 2

    s = engine.summary()
    logger.info(
        f"Finished at t={s.time:.2f}: {s.n_hurricanes} hurricanes, "
        f"{s.n_extinct}/{s.n_species} species extinct"
    )

    if args.history_out:
        engine.history_frame(labels).to_csv(args.history_out, index=False)
    if args.events_out:
        engine.hurricane_frame().to_csv(args.events_out, index=False)
    if args.plot:
        import matplotlib
        matplotlib.use('Agg')
        from pyhazard.core.plotting import plot_simulation_summary, save_plot

        fig = plot_simulation_summary(engine, labels=labels)
        save_plot(fig, args.plot)

    return 0


if __name__ == '__main__':
    sys.exit(main())
