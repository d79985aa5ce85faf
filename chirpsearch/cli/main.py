"""
Main CLI entry point.
"""

import sys
from typing import Optional

COMMANDS = {
    "detect": "Search a strain file for an inspiral signal",
    "inject": "Write synthetic strain with an injected chirp",
    "catalog": "List confirmed gravitational-wave events",
    "monitor": "Run the streaming strain monitor",
}


def _usage():
    print("Usage: chirpsearch <command> [options]")
    print("Commands:")
    for name, summary in COMMANDS.items():
        print(f"  {name:<9} - {summary}")
    print()
    print("For help on a specific command:")
    print("  chirpsearch <command> --help")


def main(argv: Optional[list] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Optional command line arguments, program name first (for testing)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if argv is None:
        argv = sys.argv

    if len(argv) < 2:
        _usage()
        return 1

    command = argv[1]

    from .commands import catalog_cmd, detect_cmd, inject_cmd, monitor_cmd

    routes = {
        "detect": detect_cmd,
        "inject": inject_cmd,
        "catalog": catalog_cmd,
        "monitor": monitor_cmd,
    }
    if command not in routes:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS)}")
        return 1

    return routes[command](argv[2:]) or 0


if __name__ == "__main__":
    sys.exit(main())
