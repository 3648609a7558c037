#!/usr/bin/env python3
"""
Genetic TSP Command Line Interface
Solve a TSPLIB instance repeatedly and report summary statistics
"""

import argparse
import logging
import sys

from tsp_genetic import (
    GAConfig, ConfigurationError, TSPLIBFormatError,
    ExperimentRunner, load_problem, load_config, setup_logging,
    format_summary, write_report
)


def build_config(args: argparse.Namespace) -> GAConfig:
    """Merge a config file (if any) with command line overrides"""
    config = load_config(args.config) if args.config else GAConfig()
    data = config.to_dict()

    overrides = {
        'population_size': args.population_size,
        'max_generations': args.max_generations,
        'mutation_rate': args.mutation_rate,
        'culling_fraction': args.culling,
        'start_offset': args.start_offset,
        'max_workers': args.workers,
        'seed': args.seed,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    if args.verbose:
        data['verbose'] = True

    return GAConfig.from_dict(data)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Genetic algorithm solver for TSPLIB ATT / EUC_2D instances',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tsp_cli.py data/att48.tsp --iterations 10
  python tsp_cli.py data/wi29.tsp --optimal 27603 --report data/wi29.tsp.data
  python tsp_cli.py data/eil101.tsp --config ga.yaml --plot-dir plots
        """
    )

    parser.add_argument('problem', help='Path to a TSPLIB .tsp file')
    parser.add_argument('--iterations', '-i', type=int, default=1,
                        help='Number of independent runs (default: 1)')
    parser.add_argument('--optimal', type=float,
                        help='Known optimal tour length (default: looked up by problem name)')
    parser.add_argument('--config', help='JSON or YAML file with GA configuration')
    parser.add_argument('--population-size', type=int,
                        help='Population size (default: size estimate for the city count)')
    parser.add_argument('--max-generations', type=int,
                        help='Generation budget (default: size estimate for the city count)')
    parser.add_argument('--mutation-rate', type=int,
                        help='Inverse mutation probability m; 1 in m tours mutate (default: 3)')
    parser.add_argument('--culling', type=float,
                        help='Fraction of each generation kept by selection (default: 0.75)')
    parser.add_argument('--start-offset', type=int,
                        help='Number of leading cities pinned in place (default: 1)')
    parser.add_argument('--workers', type=int,
                        help='Worker threads per generation (default: 1)')
    parser.add_argument('--seed', type=int, help='Random seed')
    parser.add_argument('--report', help='Write per-run results and the summary to this file')
    parser.add_argument('--plot-dir', help='Save best tour and convergence plots here')
    parser.add_argument('--verbose', '-v', action='store_true', help='Print generation progress')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')
    return parser


def main(argv=None) -> int:
    """Command line entry point"""
    args = create_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    try:
        problem = load_problem(args.problem)
        config = build_config(args)
        runner = ExperimentRunner(problem, config, optimal=args.optimal)
        summary = runner.run(args.iterations)
    except (FileNotFoundError, ConfigurationError, TSPLIBFormatError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    for record in summary.records:
        print(f"Run {record.iteration}: length {record.best_fitness:.0f} "
              f"({record.termination_reason.value}, {record.generations} generations, "
              f"{record.running_time:.2f}s)")
    print(f"\nSolution: {summary.best_tour}")
    print(format_summary(summary))

    if args.report:
        path = write_report(summary, args.report)
        print(f"\n📂 Report saved to {path}")

    if args.plot_dir:
        from tsp_genetic.visualization import TSPVisualizer, VisualizationConfig

        visualizer = TSPVisualizer(VisualizationConfig(output_dir=args.plot_dir))
        tour_file = visualizer.save_tour_plot(
            problem.coordinates, summary.best_tour,
            title=f"{problem.name}: best tour ({summary.best_fitness:.0f})",
            filename=f"{problem.name}_best_tour")
        convergence_file = visualizer.save_convergence_plot(
            runner.handle.last_results, title=f"{problem.name}: last run",
            filename=f"{problem.name}_convergence", optimal=summary.optimal)
        print(f"📊 Plots saved: {tour_file}, {convergence_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
