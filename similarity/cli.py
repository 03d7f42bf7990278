"""Command-line interface for the compressible similarity solver.

Usage:
    similarity run config.yaml [--output-dir DIR] [--log-level LEVEL]
    similarity example [--mach 1.0] [--t-inf 300] [--plot]
"""

import argparse
import json
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from loguru import logger

from similarity.analysis import profile_summary
from similarity.config import load_config, build_parameters
from similarity.equations import SimilarityParameters
from similarity.errors import SimilarityError
from similarity.log import setup_logging
from similarity.plots import plot_similarity_profiles, plot_convergence
from similarity.shooting import shoot


def main(args=None):
    parser = argparse.ArgumentParser(
        prog='similarity',
        description='Compressible laminar boundary-layer similarity solver',
    )
    parser.add_argument('--log-level', default='INFO',
                        help='Logging level (default: INFO)')
    subparsers = parser.add_subparsers(dest='command')

    # --- run command ---
    run_parser = subparsers.add_parser('run', help='Run from config file')
    run_parser.add_argument('config', type=str, help='YAML config file')
    run_parser.add_argument('--output-dir', '-o', default=None,
                            help='Output directory (default: ./output)')

    # --- example command ---
    example_parser = subparsers.add_parser('example', help='Quick example')
    example_parser.add_argument('--mach', type=float, default=1.0,
                                help='Freestream Mach number')
    example_parser.add_argument('--t-inf', type=float, default=300.0,
                                help='Freestream temperature [K]')
    example_parser.add_argument('--eta-max', type=float, default=10.0,
                                help='Outer edge of the similarity coordinate')
    example_parser.add_argument('--n', type=int, default=50,
                                help='Number of grid segments')
    example_parser.add_argument('--plot', action='store_true',
                                help='Show plots interactively')

    parsed = parser.parse_args(args)
    setup_logging(parsed.log_level, show_time=False)

    if parsed.command == 'run':
        return cmd_run(parsed)
    elif parsed.command == 'example':
        return cmd_example(parsed)
    else:
        parser.print_help()
        return 1


def cmd_run(args):
    """Solve every case of a YAML config file."""
    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else Path('output')
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        run_cfg = load_config(config_path)
        cases = {name: build_parameters(cfg)
                 for name, cfg in run_cfg['configs'].items()}
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1
    outputs = run_cfg['outputs']

    summary = {}
    failed = False
    for name, params in cases.items():
        logger.info(f"Case '{name}': M={params.mach:g}, T={params.t_inf:g} K, "
                    f"eta_max={params.eta_max:g}, N={params.n}")
        try:
            result = shoot(params)
        except SimilarityError as exc:
            logger.error(f"Case '{name}' failed: {exc}")
            summary[name] = {'status': 'failed', 'error': str(exc)}
            failed = True
            continue

        summary[name] = _summary_entry(result)

        if 'profile' in outputs:
            csv_path = output_dir / f'{name}_profile.csv'
            _write_profile_csv(csv_path, result, name)
            print(f"Saved profile to {csv_path}")

        if 'plot' in outputs:
            fig, _ = plot_similarity_profiles(result)
            fig.savefig(output_dir / f'{name}_profiles.png', dpi=150,
                        bbox_inches='tight')
            plt.close(fig)
            fig, _ = plot_convergence(result.history)
            fig.savefig(output_dir / f'{name}_convergence.png', dpi=150,
                        bbox_inches='tight')
            plt.close(fig)

    _print_summary_table(summary)

    if 'summary' in outputs:
        json_path = output_dir / 'summary.json'
        with open(json_path, 'w') as f:
            json.dump(summary, f, indent=2)
        print(f"Saved summary to {json_path}")

    return 1 if failed else 0


def _summary_entry(result):
    params = result.params
    entry = {
        'status': result.status.value,
        'mach': params.mach,
        't_inf': params.t_inf,
        'eta_max': params.eta_max,
        'n': params.n,
        'iterations': result.iterations,
        'alpha': float(result.alpha),
        'beta': float(result.beta),
        'error_profile': result.error_profile,
        'error_bc': result.error_bc,
        'profile_converged': result.profile_converged,
        'bc_converged': result.bc_converged,
    }
    entry.update(profile_summary(result))
    return entry


def _print_summary_table(summary):
    """Print an aligned summary table."""
    rows = [(name, e) for name, e in summary.items() if e['status'] != 'failed']
    if not rows:
        return

    w_name = max(max(len(name) for name, _ in rows), 4)
    shear = "f''(0)"

    print(f"\n{'Case':<{w_name}}   {'M':>6}   {shear:>9}   {'T(0)':>8}   "
          f"{'delta*':>8}   {'iter':>4}   Status")
    print(f"{'-' * w_name}   {'------':>6}   {'---------':>9}   {'--------':>8}   "
          f"{'--------':>8}   {'----':>4}   ------")
    for name, e in rows:
        print(f"{name:<{w_name}}   {e['mach']:>6.2f}   {e['wall_shear']:>9.5f}   "
              f"{e['wall_temperature']:>8.5f}   "
              f"{e['displacement_thickness']:>8.4f}   {e['iterations']:>4d}   "
              f"{e['status']}")
    print()


def _write_profile_csv(path, result, name):
    """Write eta, y, U, T columns to CSV."""
    params = result.params
    with open(path, 'w') as f:
        f.write(f"# {name} similarity profile\n")
        f.write(f"# mach={params.mach:g} t_inf={params.t_inf:g}"
                f" eta_max={params.eta_max:g} n={params.n}"
                f" status={result.status.value}\n")
        f.write("# eta,y,U,T\n")
        for e, y, u, t in zip(result.eta, result.y, result.U, result.T):
            f.write(f"{e:.8f},{y:.8f},{u:.10f},{t:.10f}\n")


def cmd_example(args):
    """Solve a single case and print the profile summary."""
    try:
        params = SimilarityParameters(mach=args.mach, t_inf=args.t_inf,
                                      eta_max=args.eta_max, n=args.n)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1

    print("Compressible Similarity Solution")
    print(f"  M      = {params.mach:.2f}")
    print(f"  T      = {params.t_inf:.1f} K")
    print(f"  η_max  = {params.eta_max:g}  (N = {params.n})")

    try:
        result = shoot(params)
    except SimilarityError as exc:
        print(f"Error: {exc}")
        return 1

    info = profile_summary(result)
    print(f"\nResult ({result.status.value}, {result.iterations} iterations):")
    print(f"   f''(0)      = {info['wall_shear']:.6f}")
    print(f"   T(0)/Te     = {info['wall_temperature']:.6f}"
          f"  (recovery estimate {info['recovery_temperature_ratio']:.4f})")
    print(f"   δ*          = {info['displacement_thickness']:.4f}")
    print(f"   θ           = {info['momentum_thickness']:.4f}")
    print(f"   H           = {info['shape_factor']:.4f}")
    print(f"   |f'(∞) - 1| = {result.error_bc:.3e}")

    if args.plot:
        try:
            matplotlib.use('TkAgg')
        except ImportError as exc:
            print(f"Error: cannot open a plot window: {exc}")
            return 1
        fig, _ = plot_similarity_profiles(result)
        plt.show()

    return 0
