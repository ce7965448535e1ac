"""
Received frame example.

Demonstrates registering a callback for "+RX" lines, which the modem
sends for every LoRa frame it receives.
"""

import time
from rf95modem import RF95Modem

# Replace with your serial port
PORT = "/dev/ttyUSB0"


def on_frame(line: str):
    """Handle a received frame notification."""
    print(f"\n[RX] {line}")


def main():
    """Main function."""
    print("rf95modem - Received Frame Example\n")

    with RF95Modem(port=PORT, log_urcs=True) as modem:
        modem.register_urc_callback("+RX", on_frame)

        print(f"Listening on {modem.fetch_status().frequency:.2f} MHz")
        print("Waiting for frames (Ctrl+C to stop)...\n")

        try:
            while True:
                time.sleep(1)

        except KeyboardInterrupt:
            print("\nStopping...")


if __name__ == "__main__":
    main()
