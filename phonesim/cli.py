"""Interactive console menu for the phone simulator.

Usage::

    python -m phonesim --phones 5
    phonesim --log-level DEBUG --export-dir registers/

The main menu manages the phone directory; selecting a phone opens a
submenu to place calls, display its registers and save them to a file.
"""

from __future__ import annotations

import argparse
import logging
from typing import Callable, Optional

from phonesim.config import configure_logging, settings
from phonesim.directory import PhoneDirectory
from phonesim.errors import DuplicatePhoneNumber, InvalidFilename, InvalidPhoneNumber, PhoneNotFound
from phonesim.export import render_history, save_register
from phonesim.phone import Phone

log = logging.getLogger("phonesim.cli")

MAIN_MENU = (
    "1 - Generate phones",
    "2 - Add phone",
    "3 - Remove phone",
    "4 - Select phone",
    "5 - Display phones",
    "0 - Exit",
)

PHONE_MENU = (
    "1 - Call",
    "2 - Display register",
    "3 - Save register to file",
    "4 - Go back",
)


class PhoneSimulatorShell:
    """Menu loop over a ``PhoneDirectory``.

    ``input_fn`` and ``output`` default to the console and are swapped out
    in tests.  End of input leaves every menu.
    """

    def __init__(
        self,
        directory: PhoneDirectory,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
        export_dir: Optional[str] = None,
    ) -> None:
        self.directory = directory
        self._input = input_fn or input
        self._out = output or print
        self._export_dir = export_dir

    # ── Input helpers ────────────────────────────────────────

    def _read(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _read_int(self, prompt: str) -> int:
        return int(self._read(prompt))

    # ── Main menu ────────────────────────────────────────────

    def run(self) -> None:
        self._out("Phone Simulator")
        try:
            while True:
                for line in MAIN_MENU:
                    self._out(line)
                try:
                    choice = self._read_int("Select option: ")
                except ValueError:
                    self._out("Invalid input. Try again ...")
                    continue
                if choice == 0:
                    break
                self._dispatch_main(choice)
        except EOFError:
            self._out("")
        log.info("Simulator shell exited")

    def _dispatch_main(self, choice: int) -> None:
        if choice == 1:
            try:
                amount = self._read_int("Amount of phones to generate: ")
                self.directory.generate(amount)
            except ValueError:
                self._out("Invalid amount. Try again ...")
        elif choice == 2:
            try:
                self.directory.add(self._read("Phone number: "))
            except InvalidPhoneNumber:
                self._out("Invalid input. Try again ...")
            except DuplicatePhoneNumber:
                self._out("Phone with given number already exists. Try again ...")
        elif choice == 3:
            try:
                self.directory.remove(self._read_int("Phone ID: "))
            except PhoneNotFound:
                self._out("Phone with given ID doesn't exist. Try again ...")
            except ValueError:
                self._out("Invalid input. Try again ...")
        elif choice == 4:
            try:
                phone_id = self._read_int("Phone ID: ")
                self.directory.get(phone_id)
            except PhoneNotFound:
                self._out("Phone with given ID doesn't exist. Try again ...")
            except ValueError:
                self._out("Invalid input. Try again ...")
            else:
                self.handle_phone(phone_id)
        elif choice == 5:
            self.display_phones()
        else:
            self._out("Given option doesn't exist. Try again ...")

    def display_phones(self) -> None:
        self._out("")
        self._out("Phones:")
        entries = self.directory.list()
        if not entries:
            self._out("(Empty)")
            return
        for idx, phone in entries:
            self._out(f"ID:{idx} {phone}")

    # ── Phone submenu ────────────────────────────────────────

    def handle_phone(self, phone_id: int) -> None:
        phone = self.directory.get(phone_id)
        while True:
            for line in PHONE_MENU:
                self._out(line)
            try:
                choice = self._read_int(f"(ID:{phone_id} {phone}) select option: ")
            except ValueError:
                self._out("Invalid input. Try again ...")
                continue
            if choice == 4:
                return
            if choice == 1:
                self._call_from(phone)
            elif choice == 2:
                self._out(render_history("Outbound register", phone.outbound_history()))
                self._out(render_history("Inbound register", phone.inbound_history()))
            elif choice == 3:
                try:
                    path = save_register(phone, self._read("File name: "), self._export_dir)
                except InvalidFilename:
                    self._out("Given filename is invalid. Try again ...")
                except OSError as e:
                    log.error("Failed to save register: %s", e)
                    self._out(f"Could not save register: {e}")
                else:
                    self._out(f"Register saved to {path}")
            else:
                self._out("Given option doesn't exist. Try again ...")

    def _call_from(self, phone: Phone) -> None:
        try:
            destination = self.directory.get(self._read_int("Phone ID: "))
        except PhoneNotFound:
            self._out("Phone with given ID doesn't exist. Try again ...")
            return
        except ValueError:
            self._out("Invalid input. Try again ...")
            return

        answer = self._read("Should call be accepted by destination? (Y/N): ")
        if answer == "Y":
            try:
                seconds = self._read_int("Conversation duration in seconds: ")
            except ValueError:
                self._out("Invalid input. Try again ...")
                return
            if seconds < 0 or seconds > settings.max_conversation_seconds:
                self._out("Invalid duration. Try again ...")
                return
            result = phone.call(destination, True, seconds)
        elif answer == "N":
            result = phone.call(destination, False, 0)
        else:
            self._out("Given input doesn't match Y or N. Try again ...")
            return
        self._out(result.message)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Simulate phones calling each other",
        prog="python -m phonesim",
    )
    parser.add_argument(
        "--phones",
        type=int,
        default=None,
        help=f"Number of random phones to generate at start (default: {settings.default_phone_count})",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: PHONESIM_LOG_LEVEL)")
    parser.add_argument("--export-dir", default=None, help="Directory for saved registers")

    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    for warning in settings.validate_startup():
        log.warning(warning)

    directory = PhoneDirectory()
    amount = args.phones if args.phones is not None else settings.default_phone_count
    if amount > 0:
        directory.generate(amount)

    PhoneSimulatorShell(directory, export_dir=args.export_dir).run()


if __name__ == "__main__":
    main()
