"""
Shard Duel CLI - Command-line interface for the engine.

Usage:
    shardduel play [--seed N]                  Play a match in the terminal
    shardduel simulate [--seed N] [--matches M]  Let a scripted bot play
    shardduel cards [--level L]                List the card catalog
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Shard Duel - Deterministic card duel engine",
        prog="shardduel",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a match in the terminal")
    play_parser.add_argument("--seed", type=int, help="Match seed")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Let a scripted bot play")
    simulate_parser.add_argument("--seed", type=int, default=1, help="Seed of the first match")
    simulate_parser.add_argument("--matches", type=int, default=1, help="Number of matches")

    # Cards command
    cards_parser = subparsers.add_parser("cards", help="List the card catalog")
    cards_parser.add_argument("--level", type=int, help="Only cards available at this level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "cards":
        cmd_cards(args)
    else:
        parser.print_help()
        sys.exit(1)


def _describe_action(action) -> str:
    if action.index is not None:
        return f"{action.action_type.value} {action.index}"
    return action.action_type.value


def _print_status(state):
    from .engine_core.effect_resolver import fmt_score

    print()
    print(f"Level {state.level}/{state.config.total_levels} | phase: {state.phase.value}")
    for p in state.players:
        held = p.hold_slot.name if p.hold_slot else "-"
        print(
            f"  {p.label:<6} score {fmt_score(p.score):>5}  draws {p.draws_used}/{p.draw_budget}"
            f"  wins {p.wins}  shards {p.victory_shards}  shields {p.shields}  hold {held}"
        )
        if p.backpack:
            print(f"         backpack: {', '.join(c.name for c in p.backpack)}")
        if p.buffs:
            buffs = ", ".join(f"{b.name} x{fmt_score(b.stacks)}" for b in p.buffs)
            print(f"         buffs: {buffs}")
    info = state.deck.public_info
    print(
        f"  deck {len(state.deck.draw_pile)} left"
        f" (rare {info.remaining_rare}, shards {info.remaining_shards})"
    )
    if state.active_card:
        print(f"  active: {state.active_card.name} - {state.active_card.description}")
    for i, offer in enumerate(state.merchant_offers):
        print(f"  offer {i}: {offer.card.name} - {offer.cost.description}")


def cmd_play(args):
    """Play a match in the terminal."""
    from .config import MatchConfig
    from .engine_core import create_initial_state, apply_action, legal_actions

    state = create_initial_state(seed=args.seed, config=MatchConfig.from_env())
    for line in state.log:
        print(line)

    while not state.is_over:
        _print_status(state)
        actions = legal_actions(state)
        for i, action in enumerate(actions):
            print(f"  [{i}] {_describe_action(action)}")

        try:
            choice = input("> ").strip()
        except EOFError:
            print()
            return
        if choice in ("q", "quit"):
            return
        if not choice.isdigit() or int(choice) >= len(actions):
            print("Pick one of the numbers above, or q to quit.")
            continue

        result = apply_action(state, actions[int(choice)])
        if not result.success:
            print(f"Rejected: {result.error.message}")
            continue
        state = result.new_state
        for line in result.messages:
            print(line)

    print(f"\nWinner: {state.winner or 'none (draw-out)'}")


def cmd_simulate(args):
    """Play matches with the scripted policy on the human side."""
    from .bots import ScriptedPolicy
    from .session import SessionManager, GameLoop, LoopState

    manager = SessionManager()
    tally = {}
    for offset in range(args.matches):
        seed = args.seed + offset
        session = manager.create_session(seed=seed)
        loop = GameLoop(session, ScriptedPolicy())
        loop.run()

        state = session.game_state
        winner = state.winner or "draw"
        tally[winner] = tally.get(winner, 0) + 1
        print(
            f"seed {seed}: winner {winner} at level {state.level}"
            f" (wins {state.player.wins}-{state.ai.wins},"
            f" shards {state.player.victory_shards}-{state.ai.victory_shards},"
            f" {session.actions_applied} actions)"
        )
        if loop.state == LoopState.STALLED:
            print("  stalled: the bot's action was rejected")
        manager.end_session(session.session_id)

    if args.matches > 1:
        print("\nTotals: " + ", ".join(f"{k} {v}" for k, v in sorted(tally.items())))


def cmd_cards(args):
    """List the card catalog."""
    from .games.duel.cards import CARD_LIBRARY, MERCHANT_EXCLUSIVE, MERCHANT_ONLY_TAG

    definitions = CARD_LIBRARY + MERCHANT_EXCLUSIVE
    if args.level is not None:
        definitions = [d for d in definitions if d.available_at(args.level)]

    for d in definitions:
        low, high = d.level_range
        where = "merchant" if MERCHANT_ONLY_TAG in d.tags else f"L{low}-{high} w{d.base_weight:g}"
        print(f"{d.id:<18} {d.rarity.value:<10} {where:<14} {d.description}")


if __name__ == "__main__":
    main()
