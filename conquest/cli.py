"""
Conquest CLI - Command-line interface for the engine.

Usage:
    conquest serve [--host H] [--port P]      Run the REST API
    conquest map                              Print the classic map
    conquest new-game NAME NAME... [--seed N] Deal a game and print it
"""

import argparse
import logging
import os
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Conquest - Territory Conquest Game Engine",
        prog="conquest",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("CONQUEST_LOG_LEVEL", "INFO"),
        help="Logging level (default: $CONQUEST_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload on changes")

    # Map command
    subparsers.add_parser("map", help="Print the classic map")

    # New game command
    new_game_parser = subparsers.add_parser("new-game", help="Deal a new game and print it")
    new_game_parser.add_argument("names", nargs="+", help="Player names, in turn order")
    new_game_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "map":
        cmd_map(args)
    elif args.command == "new-game":
        cmd_new_game(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "conquest.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


def cmd_map(args):
    """Print continents, bonuses and adjacency."""
    from .games.classic import build_classic_board

    board = build_classic_board()
    for continent in board.continents:
        print(f"{continent.name} (+{continent.bonus_troops})")
        for territory in continent.territories:
            print(f"  {territory.name}: {', '.join(sorted(territory.neighbors))}")
    print(f"\n{len(board.territory_names)} territories, {len(board.continents)} continents")


def cmd_new_game(args):
    """Deal a new game and print the resulting board."""
    from .engine_core import GameEngine, Player, PlayerColor

    colors = list(PlayerColor)
    if not 2 <= len(args.names) <= len(colors):
        print(f"Error: need between 2 and {len(colors)} players")
        sys.exit(1)

    players = [
        Player(id=str(i + 1), name=name, color=colors[i])
        for i, name in enumerate(args.names)
    ]
    engine = GameEngine.new_game(players, seed=args.seed)
    state = engine.get_game_state()

    print(f"Phase: {state.phase.value}")
    print(f"Current player: {state.current_player.name}")
    for player in players:
        ps = state.player_state(player.id)
        owned = state.board.territories_owned_by(player.id)
        print(f"\n{player.name} [{player.color.value}] - {len(owned)} territories, "
              f"{ps.bonus_troops} troops to place")
        print(f"  Objective: {ps.objective.description if ps.objective else '-'}")
        for territory in owned:
            print(f"  {territory.name}: {territory.troops}")


if __name__ == "__main__":
    main()
