"""
Console booking session: browse the catalog and book a service from the terminal.

Drives the same catalog and booking wizard screens the web pages use,
against the backend configured by BACKEND_URL / BACKEND_ANON_KEY.

Usage:
    python console_demo.py
    python console_demo.py --email jo@example.com --password secret
    python console_demo.py --scenario booking
"""

import argparse
import asyncio
from datetime import date, timedelta
from typing import Iterator, Optional

from marketplace.backend import BackendClient, BackendError
from marketplace.config import settings
from marketplace.logging_context import set_session_id
from marketplace.schemas.catalog_schema import ServiceCategory
from marketplace.utils import format_currency
from marketplace.views.booking_screen import BookingWizardScreen
from marketplace.views.catalog import CatalogScreen
from marketplace.wizard.booking_wizard import BookingWizard

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """One visitor walking through catalog -> schedule -> details -> confirmation."""

    # Pre-scripted answers for --scenario. "+N" means N days from today.
    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "plumbing",
            "1",
            "+1",
            "10:00",
            "42 Wallaby Way, Sydney",
            "0412345678",
            "jo@example.com",
            "Leaking kitchen tap",
            "yes",
        ],
        "browse": [
            "all",
            "99",
        ],
    }

    def __init__(
        self,
        backend: Optional[BackendClient] = None,
        today: Optional[date] = None,
        script: Optional[list[str]] = None,
    ) -> None:
        self.backend = backend or BackendClient()
        self.today = today or date.today()
        self.catalog = CatalogScreen(self.backend)
        self.booking = BookingWizardScreen(self.backend, today=self.today)
        self._script: Optional[Iterator[str]] = iter(script) if script is not None else None

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def warn(self, text: str) -> None:
        print(f"{RED}{text}{RESET}")

    def ask(self, prompt: str) -> Optional[str]:
        """Next answer from the script or the keyboard. None ends the session."""
        if self._script is not None:
            answer = next(self._script, None)
            if answer is not None:
                print(f"{BLUE}{prompt}{RESET}{answer}")
            return answer
        answer = input(f"{BLUE}{prompt}{RESET}").strip()
        if answer.lower() in ("quit", "exit", "q"):
            return None
        return answer

    def _resolve_date(self, text: str) -> str:
        if text.startswith("+") and text[1:].isdigit():
            return (self.today + timedelta(days=int(text[1:]))).isoformat()
        return text

    # ------------------------------------------------------------------ #
    # Flow
    # ------------------------------------------------------------------ #

    async def run(self) -> Optional[str]:
        """Run the session. Returns the booking id when a booking was made."""
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.app_name.upper()} - Console Booking{RESET}")
        print(f"{BOLD}  Type 'quit' to exit{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

        if not await self.catalog.load():
            self.warn(self.catalog.message.text)
            return None

        wizard = await self._choose_service()
        if wizard is None:
            return None
        if not await self._choose_schedule(wizard):
            return None
        if not self._enter_details(wizard):
            return None
        booking_id = await self._confirm(wizard)

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  State trace: {' -> '.join(wizard.get_state_trace())}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        return booking_id

    async def _choose_service(self) -> Optional[BookingWizard]:
        categories = ", ".join(c.value for c in self.catalog.categories)
        answer = self.ask(f"Category ({categories} or all): ")
        if answer is None:
            return None
        if answer in {c.value for c in ServiceCategory}:
            self.catalog.set_filter(category=answer)
        elif answer and answer != "all":
            self.system_log(f"Unknown category '{answer}', showing everything")

        for service in self.catalog.visible:
            print(
                f"  {BOLD}{service.id:>3}{RESET}  {service.name:<32} "
                f"{format_currency(service.price):>9}  {service.duration}h"
            )
        if not self.catalog.visible:
            self.say("No services match these filters.")
            return None

        answer = self.ask("Service number: ")
        if answer is None:
            return None
        wizard = await self.booking.open(answer)
        if wizard is None:
            self.warn(self.booking.message.text)
            return None
        if wizard.is_not_found:
            self.warn("Service not found.")
            self.system_log(f"Back to {self.booking.recovery_path}")
            return None
        self.say(f"Booking {wizard.service.name}.")
        return wizard

    async def _choose_schedule(self, wizard: BookingWizard) -> bool:
        open_days = [day for day, selectable in wizard.available_dates() if selectable]
        self.system_log("Open dates: " + ", ".join(d.strftime("%a %d %b") for d in open_days))
        while True:
            answer = self.ask("Date (YYYY-MM-DD): ")
            if answer is None:
                return False
            ok, msg = wizard.select_date(self._resolve_date(answer))
            if ok:
                break
            self.warn(msg)

        self.system_log("Times: " + " ".join(wizard.time_slots))
        while True:
            answer = self.ask("Time: ")
            if answer is None:
                return False
            ok, msg = wizard.select_time(answer)
            if ok:
                break
            self.warn(msg)

        errors = wizard.continue_to_details()
        for message in errors.values():
            self.warn(message)
        return not errors

    def _enter_details(self, wizard: BookingWizard) -> bool:
        values: dict[str, str] = {}
        pending = ["address", "phone", "email", "notes"]
        while pending:
            for name in pending:
                answer = self.ask(f"{name.capitalize()}: ")
                if answer is None:
                    return False
                values[name] = answer
            errors = wizard.enter_details(**values)
            for message in errors.values():
                self.warn(message)
            pending = [name for name in pending if name in errors]
        return True

    async def _confirm(self, wizard: BookingWizard) -> Optional[str]:
        draft = wizard.draft
        self.say(
            f"{wizard.service.name} on {draft.date} at {draft.time_slot}, "
            f"{draft.address}. Total {format_currency(draft.total)}."
        )
        answer = self.ask("Confirm booking? (yes/no): ")
        if answer is None or answer.lower() not in ("y", "yes"):
            self.booking.close()
            self.say("Booking discarded.")
            return None

        if not await self.booking.submit():
            self.warn(self.booking.message.text if self.booking.message else "Booking failed.")
            return None
        self.say(f"{BOLD}Booking confirmed!{RESET}{GREEN} Reference: {wizard.booking_id}")
        return wizard.booking_id


async def _main(args: argparse.Namespace) -> None:
    backend = BackendClient()
    set_session_id(f"console-{date.today().isoformat()}")
    if args.email:
        try:
            session = await backend.sign_in(args.email, args.password or "")
        except BackendError as exc:
            print(f"{RED}Sign-in failed: {exc}{RESET}")
            return
        print(f"{YELLOW}Signed in as {session.name} ({session.role.value}){RESET}")

    script = ConsoleSession.SCENARIOS[args.scenario] if args.scenario else None
    console = ConsoleSession(backend=backend, script=script)
    console.booking.session = backend.session
    try:
        await console.run()
    finally:
        if backend.session is not None:
            await backend.sign_out()


def main() -> None:
    parser = argparse.ArgumentParser(description="Console booking session")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted session instead of interactive mode",
    )
    parser.add_argument("--email", default=None, help="Sign in before booking")
    parser.add_argument("--password", default=None)
    asyncio.run(_main(parser.parse_args()))


if __name__ == "__main__":
    main()
