"""CLI tool for evaluating a robot description's kinematics."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

import numpy as np
from dotenv import find_dotenv, load_dotenv

from dhchain.config.kinematics_config import get_kinematics_config
from dhchain.config.robot_description import load_chain
from dhchain.kinematics.chain import ManipulatorChain
from dhchain.messages.chain_state import ChainStateMessage
from dhchain.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _print_matrix(label: str, M: np.ndarray, precision: int = 6) -> None:
    print(f"{label}:")
    print(np.array2string(np.asarray(M), precision=precision, suppress_small=True))


def _load(args: argparse.Namespace) -> ManipulatorChain:
    chain = load_chain(args.robot)
    if args.q is not None:
        chain.update_joint_states(args.q)
    return chain


def cmd_fk(args: argparse.Namespace) -> None:
    chain = _load(args)
    T = chain.world_tool_transform() if args.world else chain.tool_transform()
    _print_matrix("Tool transform (world)" if args.world else "Tool transform (base)", T)


def cmd_joints(args: argparse.Namespace) -> None:
    chain = _load(args)
    _print_matrix("Joint positions (3 x N, base frame)", chain.joint_positions())


def cmd_jacobian(args: argparse.Namespace) -> None:
    chain = _load(args)
    _print_matrix(f"Jacobian (6 x N, {args.axis_frame or 'default'} axes)",
                  chain.jacobian(axis_frame=args.axis_frame))


def cmd_dh(args: argparse.Namespace) -> None:
    chain = _load(args)
    _print_matrix("DH table [theta, d, a, alpha]", chain.dh_table)


def cmd_state(args: argparse.Namespace) -> None:
    chain = _load(args)
    msg = ChainStateMessage.from_chain(chain, axis_frame=args.axis_frame)
    print(msg.model_dump_json(indent=2))


def _parse_setting(text: str):
    """Read a config value as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def cmd_config_show(args: argparse.Namespace) -> None:
    cfg = get_kinematics_config()
    data = cfg.get_defaults() if args.defaults else cfg.get_all()
    if args.section:
        if args.section not in data:
            raise ValueError(f"Unknown config section '{args.section}'")
        data = data[args.section]
    print(json.dumps(data, indent=2))


def cmd_config_diff(args: argparse.Namespace) -> None:
    print(json.dumps(get_kinematics_config().diff(), indent=2))


def cmd_config_set(args: argparse.Namespace) -> None:
    cfg = get_kinematics_config()
    cfg.set(args.section, args.key, _parse_setting(args.value))
    if args.save is not None:
        path = cfg.save(args.save or None)
        print(f"Saved {args.section}.{args.key} to {path}")
    else:
        print(json.dumps({args.section: {args.key: cfg.get(args.section, args.key)}}, indent=2))


def cmd_config_reset(args: argparse.Namespace) -> None:
    cfg = get_kinematics_config()
    cfg.reset()
    path = cfg.save(args.path)
    print(f"Reset kinematics config in {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dhchain", description="Serial DH manipulator kinematics")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    def _add(name: str, func, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("robot", help="Robot description JSON file")
        p.add_argument("--q", type=float, nargs="+", default=None,
                       help="Joint variables, one per link (rad or length)")
        p.set_defaults(func=func)
        return p

    p_fk = _add("fk", cmd_fk, "Print the end-effector transform")
    p_fk.add_argument("--world", action="store_true", help="Apply the base pose")
    _add("joints", cmd_joints, "Print joint positions")
    _add("dh", cmd_dh, "Print the current DH table")
    for name, func, help_text in (
        ("jacobian", cmd_jacobian, "Print the geometric Jacobian"),
        ("state", cmd_state, "Print a JSON state snapshot"),
    ):
        p = _add(name, func, help_text)
        p.add_argument("--axis-frame", choices=("local", "base"), default=None,
                       help="Frame the joint axes are taken from")

    p_cfg = sub.add_parser("config", help="Inspect or change kinematics settings")
    cfg_sub = p_cfg.add_subparsers(dest="config_command", required=True)
    p_show = cfg_sub.add_parser("show", help="Print the active settings")
    p_show.add_argument("section", nargs="?", default=None, help="Only print this section")
    p_show.add_argument("--defaults", action="store_true", help="Print built-in defaults instead")
    p_show.set_defaults(func=cmd_config_show)
    cfg_sub.add_parser("diff", help="Print settings that differ from the defaults").set_defaults(
        func=cmd_config_diff
    )
    p_set = cfg_sub.add_parser("set", help="Change one setting (value is parsed as JSON)")
    p_set.add_argument("section")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.add_argument("--save", nargs="?", const="", default=None, metavar="PATH",
                       help="Write the settings to PATH (default: the DHCHAIN_CONFIG file)")
    p_set.set_defaults(func=cmd_config_set)
    p_reset = cfg_sub.add_parser("reset", help="Write the defaults back to the config file")
    p_reset.add_argument("--path", default=None,
                         help="File to write (default: the DHCHAIN_CONFIG file)")
    p_reset.set_defaults(func=cmd_config_reset)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    # .env is read before anything touches the config or logging settings
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(level=logging.DEBUG if args.verbose else None, log_file=args.log_file)
    except ValueError as e:
        parser.error(str(e))
    if dotenv_path:
        logger.debug("Loaded environment from %s", dotenv_path)
    try:
        args.func(args)
    except (FileNotFoundError, KeyError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
