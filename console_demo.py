"""
Offline console demo: runs booking conversations without any network access.

Drives the real orchestrator, dialog engine, booking engine, and keyword
extractor from the terminal. Voice notes are not available here; the
notifier only logs the confirmation email.

Usage:
    python console_demo.py
    python console_demo.py --scenario quantity
    python console_demo.py --scenario sold_out
"""

import argparse
import asyncio
from dataclasses import replace
from typing import Optional

from ticketdesk.config import AppConfig, settings
from ticketdesk.inventory.catalog import InventoryCatalog
from ticketdesk.orchestrator import BookingOrchestrator, build_orchestrator

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CONSOLE_SENDER = "console:fan"


def offline_config(config: AppConfig = settings) -> AppConfig:
    """The given config with the OpenAI collaborators switched off."""
    return replace(config, collaborators=replace(config.collaborators, openai_api_key=None))


# A single nearly sold-out listing, so the reservation step can fail.
SOLD_OUT_EVENTS = [
    {
        "name": "Chelsea vs Arsenal",
        "date": "2025-02-15",
        "venue": "Stamford Bridge",
        "kickoff_time": "15:00",
        "category": "Premier League",
        "ticket_prices": {"Standard": "60.00", "Premium": "120.00"},
        "seat_numbers": ["A1", "A2"],
        "aliases": ["chelsea vs arsenal"],
    },
]


class ConsoleSession:
    """Plays a conversation with the ticket desk in the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "Hi, I'd like 2 tickets for Chelsea vs Arsenal on 15th February, "
            "my name is Sam Lee, sam.lee@example.com",
            "confirm",
        ],
        "quantity": [
            "Premium tickets for the north london derby please",
            "12",
            "3",
            "not an email",
            "fan@example.com",
            "confirm",
        ],
        "sold_out": [
            "3 tickets for Chelsea v Arsenal, fan@example.com",
            "confirm",
        ],
        "cancel": [
            "4 tickets for Man City vs Chelsea on 22/03/2025, fan@example.com",
            "maybe",
            "cancel",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, orchestrator: Optional[BookingOrchestrator] = None) -> None:
        self.orchestrator = orchestrator or build_orchestrator(offline_config())

    @classmethod
    def for_scenario(cls, scenario: str) -> "ConsoleSession":
        if scenario == "sold_out":
            return cls(build_orchestrator(
                offline_config(), catalog=InventoryCatalog.from_dicts(SOLD_OUT_EVENTS)
            ))
        return cls()

    def desk_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.agent_name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str, *lines: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  TICKET DESK - {title}{RESET}")
        print(f"{BOLD}  Service: {settings.business.name}{RESET}")
        for line in lines:
            print(f"{BOLD}  {line}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self, title: str) -> None:
        state = self.orchestrator.store.get(CONSOLE_SENDER)
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        if state is not None:
            print(f"{DIM}  State trace: {' -> '.join(state.machine.get_state_trace())}{RESET}")
            print(f"{DIM}  Turns: {state.turn_count}{RESET}")
        for listing in self.orchestrator.engine.catalog:
            print(f"{DIM}  {listing.name}: {listing.available_seats} seat(s) left{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def _send(self, text: str) -> None:
        reply = await self.orchestrator.handle_turn(CONSOLE_SENDER, text)
        for line in reply.splitlines() or [""]:
            self.desk_say(line)
        state = self.orchestrator.store.get(CONSOLE_SENDER)
        if state is not None:
            self.system_log(f"State: {state.dialog_state.value}")

    async def _play(self, steps: list[str]) -> None:
        for step in steps:
            print(f"\n{BLUE}[Fan] {RESET}{step}")
            await self._send(step)

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        asyncio.run(self._play(steps))
        self._summary(f"Scenario '{scenario}' complete.")

    def run(self) -> None:
        self._banner("Console Demo", "Type 'quit' to exit")
        asyncio.run(self._interactive())
        self._summary("Session ended.")

    async def _interactive(self) -> None:
        while True:
            try:
                user_input = input(f"\n{BLUE}[Fan] {RESET}").strip()
            except EOFError:
                return
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                return
            if len(user_input) > self.MAX_INPUT_LENGTH:
                print(f"{YELLOW}Message too long, please keep it under "
                      f"{self.MAX_INPUT_LENGTH} characters.{RESET}")
                continue
            await self._send(user_input)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Offline ticket desk console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args(argv)

    if args.scenario:
        ConsoleSession.for_scenario(args.scenario).run_scenario(args.scenario)
    else:
        ConsoleSession().run()


if __name__ == "__main__":
    main()
