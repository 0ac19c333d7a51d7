#!/usr/bin/env python3
"""
evohome zone temperature bridge - Main Entry Point

Reads telegrams from an HGI80 compatible gateway and posts zone
temperatures to an HTTP collector.
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import httpx

from evohome_core.connection import SerialConnection
from evohome_core.errors import SerialIoFailure
from zone_bridge.config import BridgeConfig, load_config
from zone_bridge.controller import BridgeHandle, start
from zone_bridge.forwarder import HttpForwarder


class ZoneBridgeApplication:
    """Main application class."""

    def __init__(self, config: BridgeConfig):
        self.config = config
        self._setup_logging()

        self.logger = logging.getLogger(self.__class__.__name__)
        self.handle: Optional[BridgeHandle] = None

    def _setup_logging(self) -> None:
        """Configure logging."""
        log_config = self.config.logging
        level = getattr(logging, log_config.level, logging.INFO)

        logging.basicConfig(level=level, format=log_config.format)

        # File handler if specified
        if log_config.file:
            Path(log_config.file).parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_config.file)
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(log_config.format))
            logging.getLogger().addHandler(fh)

    def _log_stats(self) -> None:
        stats = self.handle.get_stats()
        errors = stats["total"] - stats["parsed"]
        self.logger.info(
            f"Stats: telegrams={stats['total']}, ok={stats['parsed']}, "
            f"errors={errors}, timeouts={stats['timeouts']}, "
            f"low_signal={stats['discarded_low_signal']}, "
            f"forwarded={stats['forwarded']}, failed_posts={stats['forward_failures']}"
        )

    def stop(self) -> None:
        """Ask the ingestion thread to stop; run() does the join."""
        if self.handle:
            self.logger.info("Stopping...")
            self.handle.stop_event.set()

    def run(self) -> int:
        """Run until stopped or the serial port fails. Returns the exit code."""
        try:
            forwarder = HttpForwarder(self.config.endpoint, timeout=self.config.forward_timeout)
        except (httpx.InvalidURL, ValueError) as e:
            self.logger.error(f"Invalid endpoint: {e}")
            return 2

        connection = SerialConnection(self.config.connection)
        if not connection.connect():
            self.logger.error(f"Could not open serial port {self.config.connection.port}")
            forwarder.close()
            return 1

        self.logger.info(
            f"Starting bridge {self.config.connection.port} -> {self.config.endpoint}"
        )
        self.handle = start(
            connection,
            forwarder,
            signal_quality_threshold=self.config.signal_quality_threshold,
        )

        try:
            while not self.handle.wait(self.config.stats_interval):
                self._log_stats()
            self.handle.stop()
        except SerialIoFailure as e:
            self.logger.error(f"Bridge stopped: {e}")
            return 1
        finally:
            forwarder.close()

        self._log_stats()
        self.logger.info("Stopped")
        return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Forward evohome zone temperatures from an HGI80 gateway to an HTTP endpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -u /dev/ttyUSB0 -e http://collector.local/api/temperatures
  %(prog)s -c config/config.yaml
        """
    )

    parser.add_argument(
        "-e", "--endpoint",
        help="Full URL of the endpoint to send the data to (e.g. https://www.foo.bar/baz)"
    )
    parser.add_argument(
        "-u", "--usb",
        help="Serial device of the gateway (e.g. COM7 or /dev/ttyUSB0)"
    )
    parser.add_argument(
        "-c", "--config",
        help="YAML configuration file (default: config/config.yaml if present)"
    )
    parser.add_argument(
        "-t", "--timeout",
        type=float,
        help="Serial read timeout in seconds (default: 0.5)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config = load_config(
        args.config,
        overrides={"port": args.usb, "endpoint": args.endpoint, "timeout": args.timeout},
    )
    if args.verbose:
        config.logging.level = "DEBUG"
    if not config.endpoint:
        print("An endpoint is required (--endpoint or forwarder.endpoint)", file=sys.stderr)
        return 2

    app = ZoneBridgeApplication(config)

    # Handle signals
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda signum, frame: app.stop())

    return app.run()


if __name__ == "__main__":
    sys.exit(main())
