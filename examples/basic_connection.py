"""
Basic connection example.

Demonstrates connecting to an rf95modem and reading its status.
"""

from rf95modem import RF95Modem, RF95Error

# Replace with your serial port
PORT = "/dev/ttyUSB0"


def main():
    """Main function."""
    print("rf95modem - Basic Connection Example\n")

    # Connect to modem using context manager
    # This automatically starts and closes the modem
    with RF95Modem(port=PORT) as modem:
        print("Connected to modem!\n")

        print("=== Status ===")
        try:
            status = modem.fetch_status()
        except RF95Error as e:
            print(f"Status Error: {e}")
            return

        print(f"Firmware: {status.firmware}")
        print(f"Features: {', '.join(status.features)}")
        print(f"Mode: {status.mode.name}")
        print(f"Frequency: {status.frequency:.2f} MHz")
        print(f"Packets: {status.rx_good} received, {status.tx_good} sent")

        # Served from cache after the first call
        print(f"\nMTU: {modem.mtu()} bytes")

    print("\nConnection closed.")


if __name__ == "__main__":
    main()
