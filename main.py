"""
Ticket desk entry point.

Runs the booking conversation offline against the in-memory inventory.
A messaging transport would call ``BookingOrchestrator.handle_turn``
directly; this launcher only covers the console modes.

Usage:
    Console mode:  python main.py console
    Scenario:      python main.py scenario booking
"""

import logging
import sys

from ticketdesk.config import settings

logger = logging.getLogger(__name__)

USAGE = "Usage: python main.py [console | scenario <name>]"


def _run_console_mode() -> None:
    """Start the interactive console session."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    session.run()


def _run_scenario_mode(name: str) -> None:
    """Auto-play one of the scripted console scenarios."""
    from console_demo import ConsoleSession

    ConsoleSession.for_scenario(name).run_scenario(name)


def main(argv: list[str]) -> int:
    logger.info("Starting %s for '%s'", settings.agent_name, settings.business.name)
    if not argv or argv[0] == "console":
        _run_console_mode()
        return 0
    if argv[0] == "scenario" and len(argv) == 2:
        _run_scenario_mode(argv[1])
        return 0
    print(USAGE, file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
