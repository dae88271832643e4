"""Command-line interface for TrialForge.

This module provides CLI commands for generating trial plans, validating
block configurations, inspecting single-trial timelines and listing the
available components.

Example:
    $ trialforge generate session.yml --seed 7 --output plan.json
    $ trialforge validate session.yml
    $ trialforge visualize session.yml --block 4 --trial 1 --save trial.png
    $ trialforge preset hirsch --output hirsch_session.yml
    $ trialforge list-components
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from trialforge.config.schema import SessionConfig
from trialforge.constants import CONGRUENCY_LABELS, PARADIGMS, RSO_MODES
from trialforge.core.params import absolute_schedule
from trialforge.core.sampling import DISTRIBUTION_REGISTRY, make_rng
from trialforge.core.sequences import SEQUENCE_REGISTRY
from trialforge.core.session import generate_session
from trialforge.errors import TrialForgeError
from trialforge.presets import get_preset, list_presets
from trialforge.utils.export import plan_rows, write_plan_json, write_trials_csv


def load_session(config_path: str) -> SessionConfig:
    """Load a session (or single-block) YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is empty, has duplicate keys or lacks
            required fields.
    """
    return SessionConfig.from_file(config_path)


def report_problems(problems: List[str]) -> None:
    for problem in problems:
        print(f"Validation error: {problem}", file=sys.stderr)


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate a session plan and write or summarize it.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        session = load_session(args.config)
        problems = session.validate()
        if problems:
            report_problems(problems)
            print("Configuration validation failed", file=sys.stderr)
            return 1

        seed = args.seed if args.seed is not None else session.seed
        plans = generate_session(session, rng=make_rng(seed))
        total = sum(len(p.trials) for p in plans)

        if args.output:
            output_path = Path(args.output)
            if output_path.suffix.lower() == ".csv":
                write_trials_csv(plan_rows(plans), output_path)
            else:
                metadata = dict(session.metadata)
                metadata["seed"] = seed
                write_plan_json(plans, output_path, metadata=metadata)
            print(f"Wrote {total} trials in {len(plans)} blocks to {output_path}")
            return 0

        print(f"Generated {total} trials in {len(plans)} blocks")
        for plan in plans:
            cfg = plan.config
            transitions = [t.meta.transition_type for t in plan.trials]
            print(
                f"  {plan.block_order}. {cfg.block_id} ({cfg.paradigm}, {cfg.block_type}): "
                f"{len(plan.trials)} trials, "
                f"{transitions.count('Switch')} switches, "
                f"{transitions.count('Repeat')} repeats"
            )
        return 0

    except (TrialForgeError, ValueError, FileNotFoundError) as e:
        print(f"Error generating trials: {e}", file=sys.stderr)
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a configuration file without generating trials.

    Returns:
        Exit code (0 for valid, 1 for invalid).
    """
    try:
        session = load_session(args.config)
    except FileNotFoundError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ Error reading config: {e}", file=sys.stderr)
        return 1

    problems = session.validate()
    if problems:
        report_problems(problems)
        print(f"❌ Configuration validation failed: {args.config}", file=sys.stderr)
        return 1

    print("✓ Configuration is valid!")
    for order, entry in enumerate(session.blocks, start=1):
        block = entry.block
        print(f"  {order}. {block.block_id}: {block.paradigm}, {entry.num_trials} trials")
    return 0


def cmd_list_components(args: argparse.Namespace) -> int:
    """List registered distribution and sequence types and the known labels."""
    print("Available TrialForge Components:")
    print("=" * 50)
    print("\nDistribution types:")
    for name in DISTRIBUTION_REGISTRY.list_registered():
        print(f"  - {name}")
    print("\nSequence types:")
    for name in SEQUENCE_REGISTRY.list_registered():
        print(f"  - {name}")
    print("\nParadigms:")
    for name in PARADIGMS:
        print(f"  - {name}")
    print("\nCongruency conditions:")
    for name in CONGRUENCY_LABELS:
        print(f"  - {name}")
    print("\nResponse-set overlap modes:")
    for name in RSO_MODES:
        print(f"  - {name}")
    print("\nPresets:")
    for name in list_presets():
        print(f"  - {name}")
    return 0


def cmd_visualize(args: argparse.Namespace) -> int:
    """Print the absolute schedule of one trial and optionally plot it."""
    try:
        session = load_session(args.config)
        seed = args.seed if args.seed is not None else session.seed
        plans = generate_session(session, rng=make_rng(seed))

        if not 1 <= args.block <= len(plans):
            print(f"Block {args.block} out of range (1-{len(plans)})", file=sys.stderr)
            return 1
        plan = plans[args.block - 1]
        if not 1 <= args.trial <= len(plan.trials):
            print(f"Trial {args.trial} out of range (1-{len(plan.trials)})", file=sys.stderr)
            return 1
        trial = plan.trials[args.trial - 1]

        print("\n" + "=" * 60)
        print(f"{plan.config.block_id} trial {trial.meta.trial_number}")
        print("=" * 60)
        print(f"  T1={trial.meta.task}  T2={trial.meta.task2}  "
              f"congruency={trial.meta.congruency}  soa={trial.meta.soa}")
        for name, window in absolute_schedule(trial.params).items():
            if window.dur > 0:
                print(f"  {name:6s} {window.start:8.1f} → {window.end:8.1f} ms")

        if args.save:
            from trialforge.core.visualization import save_trial_timeline

            path = save_trial_timeline(
                trial.params,
                args.save,
                title=f"{plan.config.block_id} trial {trial.meta.trial_number}",
            )
            print(f"\nTimeline saved to {path}")
        return 0

    except (TrialForgeError, ValueError, FileNotFoundError) as e:
        print(f"Error visualizing trial: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1


def cmd_preset(args: argparse.Namespace) -> int:
    """Dump a built-in session preset as YAML."""
    try:
        session = get_preset(args.name, seed=args.seed)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    text = session.to_yaml()
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Preset '{args.name}' written to {args.output}")
    else:
        print(text)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="trialforge",
        description="TrialForge: trial sequence generator for task-switching and PRP experiments",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a trial plan from YAML config",
    )
    generate_parser.add_argument("config", help="Path to session or block YAML file")
    generate_parser.add_argument(
        "--seed",
        type=int,
        help="Seed overriding the config seed (default: config seed or unseeded)",
    )
    generate_parser.add_argument(
        "--output",
        help="Output file (.json for the full plan, .csv for trial metadata)",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate YAML config without generating",
    )
    validate_parser.add_argument("config", help="Path to session or block YAML file")

    subparsers.add_parser(
        "list-components",
        help="List distribution types, sequence types, paradigms and labels",
    )

    viz_parser = subparsers.add_parser(
        "visualize",
        help="Show the absolute timeline of one generated trial",
    )
    viz_parser.add_argument("config", help="Path to session or block YAML file")
    viz_parser.add_argument("--block", type=int, default=1, help="Block number (1-based, default: 1)")
    viz_parser.add_argument("--trial", type=int, default=1, help="Trial number (1-based, default: 1)")
    viz_parser.add_argument("--seed", type=int, help="Seed overriding the config seed")
    viz_parser.add_argument("--save", help="Save timeline figure to file (e.g., trial.png)")

    preset_parser = subparsers.add_parser(
        "preset",
        help="Write a built-in session preset as YAML",
    )
    preset_parser.add_argument("name", help=f"Preset name ({', '.join(list_presets())})")
    preset_parser.add_argument("--seed", type=int, help="Seed stored in the preset")
    preset_parser.add_argument("--output", help="Output YAML path (default: stdout)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "generate": cmd_generate,
        "validate": cmd_validate,
        "list-components": cmd_list_components,
        "visualize": cmd_visualize,
        "preset": cmd_preset,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
