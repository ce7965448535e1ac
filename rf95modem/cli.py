"""
CLI REPL (Read-Eval-Print Loop) for rf95modem.

Provides an interactive AT command terminal similar to minicom.
"""

import sys
import logging
from typing import Optional

from .modem import RF95Modem
from .version import __version__
from .exceptions import RF95Error


class RF95CLI:
    """Interactive AT command REPL."""

    def __init__(self, port: str, baudrate: int = 115200, log_urcs: bool = True):
        """
        Initialize CLI.

        Args:
            port: Serial port path
            baudrate: Baud rate
            log_urcs: Display received frames in real-time
        """
        self.port = port
        self.baudrate = baudrate
        self.log_urcs = log_urcs
        self.modem: Optional[RF95Modem] = None
        self.urc_count = 0

    def _setup_urc_display(self):
        """Set up received frame display callback."""
        def display_urc(line: str):
            self.urc_count += 1
            print(f"\n[URC {self.urc_count}] {line}")
            print("> ", end="", flush=True)

        if self.log_urcs:
            self.modem.register_urc_callback("+RX", display_urc)

    def run(self) -> int:
        """Run the REPL."""
        print(f"rf95modem CLI v{__version__}")
        print(f"Connecting to {self.port} at {self.baudrate} baud...")
        print("Type 'help' for commands, 'quit' to exit\n")

        try:
            self.modem = RF95Modem(
                port=self.port,
                baudrate=self.baudrate,
                log_urcs=False  # We handle URC display ourselves
            )
            self.modem.start()
            self._setup_urc_display()

            print("Connected! Ready for AT commands.\n")

            while True:
                try:
                    cmd = input("> ").strip()

                    if not cmd:
                        continue

                    builtin = cmd.lower()
                    if builtin in ("quit", "exit", "q"):
                        break
                    elif builtin == "help":
                        self._print_help()
                    elif builtin == "status":
                        self._show_status()
                    elif builtin == "mtu":
                        self._show_mtu()
                    elif builtin == "urcs":
                        self._show_urc_status()
                    elif builtin == "clear":
                        print("\033[2J\033[H", end="")  # Clear screen
                    else:
                        self._send_command(cmd)

                except KeyboardInterrupt:
                    print("\nUse 'quit' to exit")
                    continue
                except EOFError:
                    break

        except RF95Error as e:
            print(f"\nError: {e}")
            return 1
        finally:
            if self.modem:
                print("\nClosing connection...")
                self.modem.close()
                print("Goodbye!")

        return 0

    def _send_command(self, cmd: str):
        """Send AT command and display response."""
        try:
            for line in self.modem.send_raw_at(cmd):
                print(line)
        except RF95Error as e:
            print(f"Error: {e}")

    def _show_status(self):
        """Fetch and display the modem status."""
        try:
            status = self.modem.fetch_status()
        except RF95Error as e:
            print(f"Error fetching status: {e}")
            return

        print(f"\nFirmware:  {status.firmware}")
        print(f"Features:  {' '.join(status.features)}")
        print(f"Mode:      {int(status.mode)} ({status.mode.name})")
        print(f"Frequency: {status.frequency:.2f} MHz")
        print(f"MTU:       {status.mtu} bytes")
        print(f"BFB:       {status.bfb}")
        print(f"RX good:   {status.rx_good}  RX bad: {status.rx_bad}")
        print(f"TX good:   {status.tx_good}")

    def _show_mtu(self):
        try:
            print(f"MTU: {self.modem.mtu()} bytes")
        except RF95Error as e:
            print(f"Error fetching MTU: {e}")

    def _print_help(self):
        """Print help message."""
        print("""
Available commands:
  <AT command>  - Send AT command to modem (e.g., AT+INFO)
  help          - Show this help message
  status        - Show decoded modem status
  mtu           - Show maximum packet size
  urcs          - Show received frame monitoring status
  clear         - Clear screen
  quit/exit/q   - Exit CLI

Common AT commands:
  AT+INFO       - Raw status block
  AT+HELP       - Firmware command overview

For full AT command reference, consult the rf95modem documentation.
        """)

    def _show_urc_status(self):
        """Show URC monitoring status."""
        handler = self.modem._core.urc_handler

        print(f"\nURCs received this session: {self.urc_count}")
        print(f"URC display: {'Enabled' if self.log_urcs else 'Disabled'}")
        print(f"URCs in queue: {handler.queue_size()}")

        callbacks = handler.get_callbacks()
        print(f"\nRegistered callbacks: {len(callbacks)}")
        for prefix in callbacks:
            print(f"  - {prefix}")


def main():
    """Main entry point for CLI."""
    import argparse

    parser = argparse.ArgumentParser(
        description="rf95modem CLI - Interactive AT command terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rf95-cli /dev/ttyUSB0
  rf95-cli /dev/ttyUSB0 --baudrate 9600
  rf95-cli /dev/ttyUSB0 --no-urcs
        """
    )

    parser.add_argument(
        "port",
        help="Serial port (e.g., /dev/ttyUSB0, COM3)"
    )
    parser.add_argument(
        "-b", "--baudrate",
        type=int,
        default=115200,
        help="Baud rate (default: 115200)"
    )
    parser.add_argument(
        "--no-urcs",
        action="store_true",
        help="Disable received frame display"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        logging.basicConfig(
            level=logging.WARNING,
            format='%(levelname)s: %(message)s'
        )

    cli = RF95CLI(
        port=args.port,
        baudrate=args.baudrate,
        log_urcs=not args.no_urcs
    )

    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
