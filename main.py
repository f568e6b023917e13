"""
Grove - Tree Growth Game Demo

Plays a game from the command line:
1. Plant a seedling of the chosen species
2. Play N turns with a scripted policy
3. Print the game summary and, optionally, save a preview image

With --showcase, every species is instead grown straight to maturity and
rendered side by side.
"""

import argparse
import logging

from grove import policies
from grove.config import EconomyConfig
from grove.rollout import compare_policies, run_game
from grove.seasons import month_name
from grove.species import SPECIES_CATALOG, get_species, species_names
from grove.visualization import save_world
from grove.world import World

logger = logging.getLogger(__name__)

SHOWCASE_SPACING = 250.0


def setup_logging(verbosity: int = 0) -> None:
    """Configure logging: warnings by default, -v for info, -vv for debug."""
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
    }
    logging.basicConfig(
        level=level_map.get(verbosity, logging.DEBUG),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grow procedurally generated trees.")
    parser.add_argument("--turns", type=int, default=24, help="Turns (months) to play")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--species",
        default="DefaultTree",
        choices=species_names(),
        help="Species of the first tree",
    )
    parser.add_argument(
        "--policy",
        default="baseline",
        choices=sorted(policies.POLICIES),
        help="Scripted policy that plans each turn",
    )
    parser.add_argument("--sandbox", action="store_true", help="Effectively unlimited nutrients")
    parser.add_argument("--compare", action="store_true", help="Compare every policy instead of playing")
    parser.add_argument("--showcase", action="store_true", help="Grow every species to maturity")
    parser.add_argument("--output", help="Save a preview image of the final world here")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return parser


def run_showcase(seed: int, output: str | None) -> None:
    """Plant one mature tree of every species in a row."""
    world = World(SPECIES_CATALOG[0], economy=EconomyConfig.sandbox(), seed=seed)
    world.grow_to_maturity(world.trees[0])
    for index, species in enumerate(SPECIES_CATALOG[1:], start=1):
        tree = world.plant_tree(world.trees[0].x + index * SHOWCASE_SPACING, species)
        world.grow_to_maturity(tree)

    print(f"\n{'Species':12s} {'Height':>8s} {'Branches':>9s} {'Leaves':>7s} {'Fruit':>6s} {'Score':>7s}")
    for tree in world.trees:
        print(
            f"{tree.species.name:12s} {tree.height:8.0f} {len(tree.get_all_branches()):9d} "
            f"{tree.get_total_leaves():7d} {len(tree.fruits):6d} {tree.get_score():7d}"
        )
    if output:
        save_world(output, world.state, figsize=(24, 8), title="Species showcase")


def main() -> None:
    args = build_parser().parse_args()
    setup_logging(args.verbose)

    print("\n" + "=" * 60)
    print("  GROVE: Procedural Tree Growth")
    print("=" * 60)

    if args.showcase:
        run_showcase(args.seed, args.output)
        return

    species = get_species(args.species)
    if args.compare:
        results = compare_policies(policies.POLICIES, species, num_turns=args.turns)
        for name, metrics in results.items():
            print(f"\n{name}:")
            for key, value in metrics.items():
                print(f"  {key}: {value:.2f}")
        return

    economy = EconomyConfig.sandbox() if args.sandbox else EconomyConfig()
    world = World(species, economy=economy, seed=args.seed)
    logger.info("Playing %d turns of %s with the %s policy", args.turns, species.name, args.policy)

    trajectory = run_game(world, policies.POLICIES[args.policy], args.turns)
    trajectory.print_summary()
    print(f"Month: {month_name(world.state.month_index, world.calendar)}")

    if args.output:
        save_world(args.output, world.state, title=f"{species.name} after {args.turns} turns")


if __name__ == "__main__":
    main()
