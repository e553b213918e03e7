# gatekeeper/console.py
"""
Interactive console menu for the gate operator.

Main menu: scan a plate at the gate, or open management to list, add and
remove plates. Every database action goes through VisitorRegistry.
Input, output and the clock are injectable so the menu can be driven by tests.
"""

import time
from datetime import datetime

from gatekeeper.exceptions import GatekeeperError
from gatekeeper.schemas.visitor import VisitorIn
from gatekeeper.services.visitor_service import VisitorRegistry
from gatekeeper.utils.logger import get_logger

logger = get_logger(__name__)

PAUSE_SECONDS = 3


def greeting_for_hour(hour: int):
    """Welcome line for the given hour, or None when the car park is closed."""
    if 7 <= hour < 12:
        return "Good morning!"
    if 12 <= hour < 18:
        return "Good afternoon!"
    if 18 <= hour < 23:
        return "Good evening!"
    return None


class ConsoleMenu:
    def __init__(self, registry: VisitorRegistry, site_name: str = "Gatekeeper", debug: bool = False,
                 input_func=input, print_func=print, clock=datetime.now, pause=PAUSE_SECONDS):
        self.registry = registry
        self.site_name = site_name
        self.debug = debug
        self.input = input_func
        self.print = print_func
        self.clock = clock
        self.pause = pause

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _banner(self, subtitle: str = None):
        self.print("-" * 22)
        self.print(self.site_name.center(22).rstrip())
        if subtitle:
            self.print(subtitle.center(22).rstrip())
        self.print("-" * 22)
        self.print("")

    def _choose(self, options) -> str:
        self.print("Options:")
        for i, label in enumerate(options, start=1):
            self.print(f"{i}. {label}")
        self.print("")
        return self.input("Choose an option: ").strip()

    def _confirm(self, prompt: str) -> bool:
        return self.input(f"{prompt} (y/N): ").strip().lower() == "y"

    def _wait(self):
        if self.pause:
            time.sleep(self.pause)

    # ── Menus ────────────────────────────────────────────────────────────────

    def run(self):
        """Main menu loop. Returns when the operator quits."""
        if self.debug:
            self.print("!! Debug mode is enabled !!")
        while True:
            self._banner()
            option = self._choose(["Scan plate", "Management", "Quit"])
            if option == "1":
                self.scan_plate()
            elif option == "2":
                self.management()
            elif option == "3":
                return

    def management(self):
        while True:
            self._banner("MANAGEMENT")
            option = self._choose(["List plates", "Add plate", "Remove plate", "Back"])
            try:
                if option == "1":
                    self.show_all_plates()
                elif option == "2":
                    self.add_plate()
                elif option == "3":
                    self.remove_plate()
                elif option == "4":
                    return
            except GatekeeperError as e:
                logger.error(f"Management action failed: {e.detail}")
                self.print(f"Error: {e.detail}")

    # ── Actions ──────────────────────────────────────────────────────────────

    def scan_plate(self) -> bool:
        """Check a plate at the gate. Returns True when it is let through."""
        plate = self.input("Enter your plate: ").strip()
        try:
            allowed = bool(plate) and self.registry.exists_by_plate(plate)
        except GatekeeperError as e:
            logger.error(f"Cannot check plate {plate}: {e.detail}")
            self.print("Plate check unavailable, please contact the reception")
            return False

        if not allowed:
            self.print("Plate not allowed")
            logger.info(f"Plate {plate} was refused")
            return False

        logger.info(f"Plate {plate} was let through")
        greeting = greeting_for_hour(self.clock().hour)
        if greeting:
            self.print(f"{greeting} Welcome to {self.site_name}")
        else:
            self.print("Sorry, the car park is closed at night")
        return True

    def show_all_plates(self):
        self.print("Plates:")
        for visitor in self.registry.list_visitors():
            self.print(f"{visitor.name} {visitor.plate}")
        self.input("Press enter to continue...")

    def add_plate(self) -> bool:
        name = self.input("Name: ").strip()
        plate = self.input("Plate: ").strip()
        self.print(f"Entered name: {name}")
        self.print(f"Entered plate: {plate}")
        if not self._confirm("Is this correct?"):
            return False
        if not name or not plate:
            self.print("Name and plate are required")
            return False

        linked = self.registry.get_linked_name(plate)
        if linked is not None:
            if not self._confirm(f"Plate {plate} already exists and belongs to {linked}, overwrite it?"):
                self.print(f"Plate {plate} not overwritten")
                self._wait()
                return False

        self.registry.upsert_on_conflict(VisitorIn(name=name, plate=plate))
        self.print(f"Plate {plate} registered to {name}")
        self._wait()
        return True

    def remove_plate(self) -> bool:
        plate = self.input("Plate: ").strip()
        self.print(f"Entered plate: {plate}")
        linked = self.registry.get_linked_name(plate)
        if linked is None:
            self.print("Plate is not found in the database")
            return False
        self.print(f"This plate belongs to: {linked}")
        if not self._confirm("Is this correct?"):
            return False

        self.registry.delete_by_plate(plate)
        self.print(f"Plate {plate} removed")
        self._wait()
        return True
