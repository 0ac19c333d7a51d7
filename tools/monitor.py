#!/usr/bin/env python3
"""
Gateway telegram monitor

Prints every telegram read from the gateway together with its decode
outcome. Use it to look at the traffic the bridge skips.
"""

import sys
import argparse
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from evohome_core.connection import SerialConnection, ConnectionConfig
from evohome_core.errors import LineOverflow, SerialIoFailure, SerialTimeout, TelegramError
from evohome_core.telegram import TelegramParser


class TelegramMonitor:
    """Reads and decodes telegrams without forwarding anything."""

    def __init__(self, port: str = "/dev/ttyUSB0", timeout: float = 2.0):
        self.config = ConnectionConfig(port=port, timeout=timeout)
        self.connection = SerialConnection(self.config)
        self.parser = TelegramParser()
        self.by_command = Counter()

    def connect(self) -> bool:
        return self.connection.connect()

    def disconnect(self) -> None:
        self.connection.disconnect()

    def monitor(self, count: int = 0, errors_only: bool = False) -> None:
        """Print telegrams until count lines were read (0 = forever)."""
        seen = 0
        while count == 0 or seen < count:
            try:
                line = self.connection.read_line()
            except SerialTimeout:
                continue
            except LineOverflow as e:
                print(f"⚠️ {e}")
                continue

            seen += 1
            stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            try:
                packet = self.parser.parse(line)
            except TelegramError as e:
                print(f"{stamp} ✗ {type(e).__name__}: {e}")
                print(f"           {line.strip()!r}")
                continue

            self.by_command[packet.command.name] += 1
            if not errors_only:
                print(f"{stamp} ✓ {packet}")

    def print_stats(self) -> None:
        print("-" * 40)
        for name, value in self.parser.get_stats().items():
            print(f"  {name}: {value}")
        for name, value in self.by_command.most_common():
            print(f"    {name}: {value}")
        print("-" * 40)


def main():
    parser = argparse.ArgumentParser(
        description="evohome gateway telegram monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -p /dev/ttyUSB0              # Monitor forever
  %(prog)s -p /dev/ttyUSB0 -c 100 -e    # Show decode errors in 100 lines
        """
    )

    parser.add_argument(
        "-p", "--port",
        default="/dev/ttyUSB0",
        help="Serial port (default: /dev/ttyUSB0)"
    )
    parser.add_argument(
        "-t", "--timeout",
        type=float,
        default=2.0,
        help="Read timeout in seconds (default: 2.0)"
    )
    parser.add_argument(
        "-c", "--count",
        type=int,
        default=0,
        help="Number of lines to read, 0 for no limit (default: 0)"
    )
    parser.add_argument(
        "-e", "--errors-only",
        action="store_true",
        help="Only show lines that failed to decode"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    monitor = TelegramMonitor(port=args.port, timeout=args.timeout)

    if not monitor.connect():
        print(f"❌ Failed to connect to {args.port}")
        sys.exit(1)

    try:
        monitor.monitor(args.count, errors_only=args.errors_only)
    except KeyboardInterrupt:
        pass
    except SerialIoFailure as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        monitor.print_stats()
        monitor.disconnect()


if __name__ == "__main__":
    main()
