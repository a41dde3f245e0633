"""
Command-line interface for simulating Schieber games and evaluating policies.

Usage examples:

    schieber simulate --hands 100 --bot heuristic --seed 1
    schieber match --bot random --points-to-win 1000
    schieber init-policy --checkpoint-dir checkpoints/random   # needs the ``rl`` extra
    schieber eval --checkpoint-dir checkpoints/random --matches 5
"""
from __future__ import annotations

import argparse
import logging
import random
from dataclasses import replace
from typing import List, Optional

from .bots import Bot, HeuristicBot, RandomBot
from .config import EngineConfig, FollowRule, MultiplierScope, load_config
from .game import run_match, simulate_hands

log = logging.getLogger(__name__)

BOT_TYPES = ("random", "heuristic")


def _make_bots(kind: str, rng: random.Random) -> List[Bot]:
    if kind == "random":
        return [RandomBot(seed=rng.randrange(2**32)) for _ in range(4)]
    return [HeuristicBot(seed=rng.randrange(2**32)) for _ in range(4)]


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with engine settings; flags below override it.",
    )
    parser.add_argument(
        "--points-to-win",
        type=int,
        default=None,
        help="Target score that ends a match (default 1000).",
    )
    parser.add_argument(
        "--multiplier-scope",
        choices=[s.value for s in MultiplierScope],
        default=None,
        help="Multiply only the declaring team's hand total, or both teams'.",
    )
    parser.add_argument(
        "--follow-rule",
        choices=[r.value for r in FollowRule],
        default=None,
        help="Whether a player holding the lead suit may trump instead.",
    )


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    cfg = load_config(args.config) if args.config else EngineConfig()
    overrides = {}
    if args.points_to_win is not None:
        overrides["points_to_win"] = args.points_to_win
    if args.multiplier_scope is not None:
        overrides["multiplier_scope"] = MultiplierScope(args.multiplier_scope)
    if args.follow_rule is not None:
        overrides["follow_rule"] = FollowRule(args.follow_rule)
    if overrides:
        cfg = replace(cfg, **overrides)
    log.debug("Engine config: %s", cfg)
    return cfg


# ---- simulate ----


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Play hands with bots and report points per hand.",
    )
    parser.add_argument(
        "--hands",
        type=int,
        default=10,
        help="Number of hands to play.",
    )
    parser.add_argument(
        "--bot",
        choices=BOT_TYPES,
        default="heuristic",
        help="Strategy used by all four seats.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for dealing and bots.",
    )
    _add_config_arguments(parser)
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    cfg = _config_from_args(args)
    results = simulate_hands(args.hands, _make_bots(args.bot, rng), config=cfg, rng=rng)

    totals = [0, 0]
    for r in results:
        totals[0] += r.scores[0]
        totals[1] += r.scores[1]
        print(
            f"[hand {r.hand_number}] dealer={r.dealer} declarer={r.declarer} "
            f"contract={r.contract.value} x{r.multiplier} "
            f"raw={r.trick_points[0]}/{r.trick_points[1]} "
            f"weis={r.weis_points[0]}/{r.weis_points[1]} "
            f"scores={r.scores[0]}/{r.scores[1]}"
        )
    print(f"Simulated {len(results)} hands: team totals {totals[0]}/{totals[1]}")


# ---- match ----


def _add_match_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "match",
        help="Play one full match with bots until a team reaches the target.",
    )
    parser.add_argument(
        "--bot",
        choices=BOT_TYPES,
        default="heuristic",
        help="Strategy used by all four seats.",
    )
    parser.add_argument(
        "--max-hands",
        type=int,
        default=None,
        help="Stop after this many hands even if nobody has won.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for dealing and bots.",
    )
    _add_config_arguments(parser)
    parser.set_defaults(func=_cmd_match)


def _cmd_match(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    cfg = _config_from_args(args)
    state = run_match(_make_bots(args.bot, rng), config=cfg, rng=rng, max_hands=args.max_hands)
    for r in state.history:
        print(f"[hand {r.hand_number}] contract={r.contract.value} hand={r.scores[0]}/{r.scores[1]}")
    winner = "none" if state.winner is None else f"team {state.winner}"
    print(f"Final scores {state.scores[0]}/{state.scores[1]} after {state.hand_number} hands, winner: {winner}")


# ---- policies (rl extra) ----


def _add_init_policy_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "init-policy",
        help="Write a randomly initialised policy checkpoint (requires torch).",
    )
    parser.add_argument(
        "--checkpoint-dir",
        type=str,
        required=True,
        help="Directory to write policy.pt and config.json to.",
    )
    parser.add_argument(
        "--hidden-dim",
        type=int,
        default=128,
        help="Hidden layer width of the MLP.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Torch seed for weight initialisation.",
    )
    parser.set_defaults(func=_cmd_init_policy)


def _cmd_init_policy(args: argparse.Namespace) -> None:
    from .models import PolicyConfig
    from .policies import init_model, save_policy_checkpoint

    policy_cfg = PolicyConfig(hidden_dim=args.hidden_dim)
    model = init_model(policy_cfg, seed=args.seed)
    out = save_policy_checkpoint(model, policy_cfg, args.checkpoint_dir)
    print(f"Wrote policy checkpoint to {out}")


def _add_eval_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "eval",
        help="Evaluate a policy checkpoint in seat 0 against bots (requires torch).",
    )
    parser.add_argument(
        "--checkpoint-dir",
        type=str,
        required=True,
        help="Directory containing policy.pt and config.json.",
    )
    parser.add_argument(
        "--matches",
        type=int,
        default=5,
        help="Number of evaluation episodes.",
    )
    parser.add_argument(
        "--hands",
        type=int,
        default=None,
        help="Hands per episode; default plays full matches.",
    )
    parser.add_argument(
        "--bot",
        choices=BOT_TYPES,
        default="random",
        help="Strategy of the other three seats.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for dealing and bots.",
    )
    parser.add_argument(
        "--device",
        type=str,
        default="cpu",
        help='Torch device string, e.g. "cpu" or "cuda".',
    )
    _add_config_arguments(parser)
    parser.set_defaults(func=_cmd_eval)


def _cmd_eval(args: argparse.Namespace) -> None:
    import torch

    from .env_game import JassEnv
    from .policies import load_policy_from_checkpoint

    rng = random.Random(args.seed)
    env = JassEnv(
        learning_seat=0,
        num_hands=args.hands,
        config=_config_from_args(args),
        rng=rng,
        others=_make_bots(args.bot, rng)[:3],
    )
    policy = load_policy_from_checkpoint(args.checkpoint_dir, device=torch.device(args.device))

    total_return = 0.0
    for match in range(1, args.matches + 1):
        step = env.reset()
        ep_return = 0.0
        while not step.done:
            action = policy.act(step.obs, step.legal_actions_mask)
            step = env.step(action)
            ep_return += step.reward
        total_return += ep_return
        print(f"[match {match}/{args.matches}] return={ep_return:.1f}")

    avg_return = total_return / float(args.matches)
    print(f"Average return over {args.matches} matches: {avg_return:.2f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schieber", description="Schieber (Swiss Jass) engine CLI.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for engine messages.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_simulate_parser(subparsers)
    _add_match_parser(subparsers)
    _add_init_policy_parser(subparsers)
    _add_eval_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
