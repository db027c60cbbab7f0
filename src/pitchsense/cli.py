"""Command-line interface for pitchsense."""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, default_config, get_default_config_path, load_config
from .config_templates import CONFIG_TEMPLATE
from .errors import PitchSenseError, ProfileFileError, ProfileValidationError
from .field_constants import Vector2
from .profiles.benchmark import compare_profiles
from .profiles.store import ProfileSlot, activate, clear_active, load_active
from .profiles.types import DEFAULT_PROFILE, PhysicsProfile, sample_profile_document
from .profiles.validation import validate
from .simulation.predictor import predict_ball
from .simulation.types import KinematicState


def _read_document(path: Path):
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ProfileFileError(str(path), e.strerror or str(e)) from e
    except json.JSONDecodeError as e:
        raise ProfileFileError(str(path), f"invalid JSON ({e})") from e


def _load_profile_file(path: Path) -> PhysicsProfile:
    document = _read_document(path)
    result = validate(document)
    if not result.valid:
        raise ProfileValidationError(result.errors, source=str(path))
    return PhysicsProfile.from_dict(document)


def _load_settings(args):
    if args.config:
        config = load_config(Path(args.config).expanduser())
    elif get_default_config_path().exists():
        config = load_config(get_default_config_path())
    else:
        config = default_config()
    config.validate()
    return config


def _print_error(e: Exception, as_json: bool) -> None:
    if as_json:
        error_result = {
            "error": {
                "type": type(e).__name__,
                "message": str(e),
                "details": getattr(e, "details", {}),
            },
            "status": "error",
        }
        print(json.dumps(error_result, indent=2))
    else:
        print(f"Error: {e}", file=sys.stderr)
        details = getattr(e, "details", {})
        for error in details.get("errors", []):
            print(f"  - {error}", file=sys.stderr)
        if "suggested_action" in details:
            print(f"Suggestion: {details['suggested_action']}", file=sys.stderr)


def handle_validate_command(args, config) -> int:
    """Validate a profile file without activating it."""
    result = validate(_read_document(Path(args.profile_file)))

    if args.json:
        print(json.dumps({"valid": result.valid, "errors": result.errors}, indent=2))
    elif result.valid:
        print(f"{args.profile_file}: valid")
    else:
        print(f"{args.profile_file}: {len(result.errors)} error(s)")
        for error in result.errors:
            print(f"  - {error}")

    return 0 if result.valid else 1


def handle_activate_command(args, config) -> int:
    """Validate a profile file and store it in the active slot."""
    slot = ProfileSlot(config.profiles.slot_path)
    document = _read_document(Path(args.profile_file))
    result = activate(document, slot)

    if args.json:
        print(
            json.dumps(
                {"activated": result.valid, "errors": result.errors, "slot": str(slot.path)},
                indent=2,
            )
        )
    elif result.valid:
        print(f"Activated '{document['name']}' v{document['version']}")
    else:
        print("Profile not activated:")
        for error in result.errors:
            print(f"  - {error}")

    return 0 if result.valid else 1


def handle_clear_command(args, config) -> int:
    clear_active(ProfileSlot(config.profiles.slot_path))
    print(f"Using {DEFAULT_PROFILE.name}")
    return 0


def handle_show_command(args, config) -> int:
    """Show the identity of the active profile."""
    slot = ProfileSlot(config.profiles.slot_path)
    custom = load_active(slot)
    profile = custom or DEFAULT_PROFILE

    if args.json:
        print(
            json.dumps(
                {
                    "name": profile.name,
                    "version": profile.version,
                    "author": profile.author,
                    "custom": custom is not None,
                    "slot": str(slot.path),
                },
                indent=2,
            )
        )
    else:
        kind = "custom" if custom is not None else "default"
        print(f"{profile.identity} by {profile.author} ({kind})")
        if profile.description:
            print(profile.description)

    return 0


def handle_benchmark_command(args, config) -> int:
    """Compare a candidate (or the active profile) against the default."""
    if args.profile_file:
        candidate = _load_profile_file(Path(args.profile_file))
    else:
        candidate = load_active(ProfileSlot(config.profiles.slot_path))

    reports = compare_profiles(candidate, bounds=config.pitch.bounds)

    if args.json:
        print(json.dumps([report.to_dict() for report in reports], indent=2))
    else:
        print(f"{'Profile':<30} {'Avg error':>10} {'Max error':>10} {'Avg ms':>8} {'Cases':>6}")
        for report in reports:
            print(
                f"{report.profile_name:<30} {report.average_error:>10.2f} "
                f"{report.max_error:>10.2f} {report.average_compute_time:>8.3f} "
                f"{report.total_tests:>6}"
            )

    return 0


def handle_simulate_command(args, config) -> int:
    """Predict a ball trajectory from the command line."""
    if args.profile:
        profile = _load_profile_file(Path(args.profile))
    else:
        profile = load_active(ProfileSlot(config.profiles.slot_path))

    state = KinematicState(Vector2(args.x, args.y), Vector2(args.vx, args.vy))
    trajectory = predict_ball(state, profile, config.pitch.bounds)
    landing = trajectory.landing_position

    if args.json:
        output = {
            "profile": (profile or DEFAULT_PROFILE).name,
            "landing_position": (
                {"x": landing.x, "y": landing.y} if landing is not None else None
            ),
            "time_to_stop": trajectory.time_to_stop,
            "will_exit_field": trajectory.will_exit_field,
            "points": len(trajectory.predicted_path),
        }
        if args.path:
            output["path"] = [
                {"x": p.x, "y": p.y, "t": p.t, "vx": p.velocity.x, "vy": p.velocity.y}
                for p in trajectory.predicted_path
            ]
        print(json.dumps(output, indent=2))
    else:
        if landing is None:
            print("Ball does not move")
        else:
            print(
                f"Landing: ({landing.x:.2f}, {landing.y:.2f}) "
                f"after {trajectory.time_to_stop:.2f}s"
            )
        print(f"Reaches boundary: {'yes' if trajectory.will_exit_field else 'no'}")
        if args.path:
            for p in trajectory.predicted_path:
                print(f"  t={p.t:.2f} ({p.x:.2f}, {p.y:.2f}) v=({p.velocity.x:.3f}, {p.velocity.y:.3f})")

    return 0


def handle_sample_command(args, config) -> int:
    """Print or write the sample profile document."""
    text = json.dumps(sample_profile_document(), indent=2)
    if args.output:
        path = Path(args.output).expanduser()
        path.write_text(text + "\n", encoding="utf-8")
        print(str(path))
    else:
        print(text)
    return 0


def handle_init_config_command(args) -> int:
    """Write the configuration template."""
    path = Path(args.path).expanduser() if args.path else get_default_config_path()
    if path.exists() and not args.force:
        print(f"Error: {path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    print(str(path))
    return 0


HANDLERS = {
    "validate": handle_validate_command,
    "activate": handle_activate_command,
    "clear": handle_clear_command,
    "show": handle_show_command,
    "benchmark": handle_benchmark_command,
    "simulate": handle_simulate_command,
    "sample": handle_sample_command,
}


def _add_json_flag(subparser) -> None:
    subparser.add_argument(
        "--json",
        action="store_true",
        help="Output results in machine-readable JSON format",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pitchsense",
        description="Trajectory prediction and tactical decision support",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"pitchsense {__version__}",
    )
    parser.add_argument(
        "--config", type=str, help="Path to config.toml (default: ~/.pitchsense/config.toml)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a physics profile file"
    )
    validate_parser.add_argument("profile_file", type=str, help="Path to profile JSON")
    _add_json_flag(validate_parser)

    activate_parser = subparsers.add_parser(
        "activate", help="Validate a physics profile and make it active"
    )
    activate_parser.add_argument("profile_file", type=str, help="Path to profile JSON")
    _add_json_flag(activate_parser)

    subparsers.add_parser("clear", help="Return to the default physics profile")

    show_parser = subparsers.add_parser("show", help="Show the active physics profile")
    _add_json_flag(show_parser)

    benchmark_parser = subparsers.add_parser(
        "benchmark", help="Compare a profile against the default on reference cases"
    )
    benchmark_parser.add_argument(
        "profile_file",
        type=str,
        nargs="?",
        help="Profile JSON to benchmark (default: the active profile)",
    )
    _add_json_flag(benchmark_parser)

    simulate_parser = subparsers.add_parser(
        "simulate", help="Predict where a ball will stop"
    )
    simulate_parser.add_argument("x", type=float, help="Ball x position")
    simulate_parser.add_argument("y", type=float, help="Ball y position")
    simulate_parser.add_argument("vx", type=float, help="Ball x velocity (units per step)")
    simulate_parser.add_argument("vy", type=float, help="Ball y velocity (units per step)")
    simulate_parser.add_argument(
        "--profile", type=str, help="Profile JSON to use (default: the active profile)"
    )
    simulate_parser.add_argument(
        "--path", action="store_true", help="Include every trajectory point"
    )
    _add_json_flag(simulate_parser)

    sample_parser = subparsers.add_parser(
        "sample", help="Print a sample physics profile to start from"
    )
    sample_parser.add_argument(
        "--output", "-o", type=str, help="Write to this file instead of stdout"
    )

    init_parser = subparsers.add_parser(
        "init-config", help="Write a configuration template"
    )
    init_parser.add_argument(
        "--path", type=str, help="Where to write (default: ~/.pitchsense/config.toml)"
    )
    init_parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        # No subcommand provided, show help
        parser.print_help()
        return 0

    if args.command == "init-config":
        return handle_init_config_command(args)

    as_json = getattr(args, "json", False)
    try:
        config = _load_settings(args)
        return HANDLERS[args.command](args, config)
    except (PitchSenseError, ConfigError) as e:
        _print_error(e, as_json)
        return 1
    except Exception as e:
        if as_json:
            error_result = {
                "error": {
                    "type": "UnexpectedError",
                    "message": f"Unexpected error: {str(e)}",
                    "details": {},
                },
                "status": "error",
            }
            print(json.dumps(error_result, indent=2))
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
