"""
Duelsim CLI - Command-line interface for the simulator.

Usage:
    duelsim simulate --deck1 mage --deck2 knight --seed s1    Run one game
    duelsim replay-check --deck1 mage --deck2 knight --seed s1 Run twice, compare logs
    duelsim cards [--faction mage]                            List card templates
    duelsim decks                                             List sample decks
    duelsim serve [--host 0.0.0.0] [--port 8000]              Start the HTTP API
"""

import argparse
import json
import sys

from .config import configure_logging, get_settings
from .engine_core.cards import TacticsType

TACTICS_CHOICES = [t.value for t in TacticsType]


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Duelsim - Deterministic card battle simulator",
        prog="duelsim",
    )
    parser.add_argument(
        "--log-level",
        default=get_settings().log_level,
        help="Logging level (default from DUELSIM_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Run one full game")
    _add_game_arguments(simulate_parser)
    simulate_parser.add_argument("--log", action="store_true", help="Print every action record")

    # Replay check command
    replay_parser = subparsers.add_parser("replay-check", help="Run a game twice and compare logs")
    _add_game_arguments(replay_parser)

    # Cards command
    cards_parser = subparsers.add_parser("cards", help="List card templates")
    cards_parser.add_argument("--faction", help="Only cards of this faction")

    # Decks command
    subparsers.add_parser("decks", help="List sample decks")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "replay-check":
        cmd_replay_check(args)
    elif args.command == "cards":
        cmd_cards(args)
    elif args.command == "decks":
        cmd_decks(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_game_arguments(parser):
    parser.add_argument("--deck1", required=True, help="Sample deck id or faction for player1")
    parser.add_argument("--deck2", required=True, help="Sample deck id or faction for player2")
    parser.add_argument("--tactics1", default="balanced", choices=TACTICS_CHOICES)
    parser.add_argument("--tactics2", default="balanced", choices=TACTICS_CHOICES)
    parser.add_argument("--seed", required=True, help="Game seed")


def _run_game(args, game_id="cli"):
    """Play one game from parsed arguments; exits on a bad deck."""
    from .catalog import get_sample_deck, resolve_templates
    from .engine_core.engine import GameEngine, execute_full_game

    try:
        deck1 = get_sample_deck(args.deck1)
        deck2 = get_sample_deck(args.deck2)
        templates1 = resolve_templates(deck1.card_ids)
        templates2 = resolve_templates(deck2.card_ids)
    except (KeyError, ValueError) as e:
        print(f"Error: {e.args[0] if e.args else e}")
        sys.exit(1)

    return execute_full_game(
        game_id,
        templates1,
        templates2,
        deck1.faction,
        deck2.faction,
        TacticsType(args.tactics1),
        TacticsType(args.tactics2),
        args.seed,
        engine=GameEngine(),
    )


def cmd_simulate(args):
    """Run one game and print the result."""
    state = _run_game(args)

    if args.log:
        for action in state.action_log:
            print(json.dumps(action.to_dict(), sort_keys=True, default=str))

    result = state.result
    print(f"Winner: {result.winner or 'draw'} ({result.reason.value})")
    print(f"Turns: {result.total_turns}")
    for player_id in ("player1", "player2"):
        player = state.players[player_id]
        print(
            f"  {player_id} [{player.faction.value}/{player.tactics.value}]: "
            f"life {player.life}, field {len(player.field)}, "
            f"graveyard {len(player.graveyard)}, deck {len(player.deck)}"
        )
    print(f"Actions: {len(state.action_log)}")


def cmd_replay_check(args):
    """Run the same game twice and compare everything but timestamps."""
    first = _run_game(args, game_id="replay")
    second = _run_game(args, game_id="replay")

    keys1 = first.action_log.replay_keys()
    keys2 = second.action_log.replay_keys()
    if keys1 != keys2:
        mismatch = next(
            (i for i, (a, b) in enumerate(zip(keys1, keys2)) if a != b),
            min(len(keys1), len(keys2)),
        )
        print(f"Error: logs diverge at record {mismatch} ({len(keys1)} vs {len(keys2)} records)")
        sys.exit(1)

    print(f"OK: {len(keys1)} records identical (winner: {first.result.winner or 'draw'})")


def cmd_cards(args):
    """List card templates."""
    from .catalog import CardRegistry

    registry = CardRegistry.default()
    try:
        templates = registry.by_faction(args.faction) if args.faction else registry.all()
    except ValueError:
        print(f"Error: Unknown faction: {args.faction}")
        sys.exit(1)

    for t in templates:
        keywords = ", ".join(sorted(k.value for k in t.keywords))
        stats = f"{t.attack}/{t.health}" if t.is_creature else "spell"
        line = f"{t.template_id:<28} {t.cost}  {stats:<6} {t.name}"
        if keywords:
            line += f" [{keywords}]"
        print(line)
    print(f"{len(templates)} cards")


def cmd_decks(args):
    """List sample decks."""
    from .catalog.decks import list_sample_decks

    for deck in list_sample_decks():
        print(f"{deck.deck_id:<32} {deck.faction.value:<12} {deck.name} ({len(deck.card_ids)} cards)")


def cmd_serve(args):
    """Start the HTTP API."""
    import uvicorn
    from .api import create_app

    print(f"Serving on http://{args.host}:{args.port}")
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
