#!/usr/bin/env python3
"""AIS-CAESAR transmitter.

Usage:
    python main.py --level 3

    # Passphrase-derived seed, custom modem endpoint, verbose logging
    python main.py --level 5 --seed-source passphrase --passphrase s3cret \\
        --host 127.0.0.1 --port 52001 --log-level DEBUG
"""
import argparse
import logging
import sys
from dataclasses import replace

import caesar_config
from tesla.session import run_session

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = caesar_config.CaesarConfig()
    parser = argparse.ArgumentParser(description='Send an AIS-CAESAR authenticated transmission')
    parser.add_argument('--level', type=int, default=defaults.security_level,
                        help=f'Security level 0-6 (default: {defaults.security_level})')
    parser.add_argument('--seed-source', default=defaults.seed_source,
                        choices=['fixed', 'passphrase'],
                        help=f'Where the key chain seed comes from (default: {defaults.seed_source})')
    parser.add_argument('--passphrase', default=defaults.passphrase,
                        help='Passphrase for --seed-source=passphrase')
    parser.add_argument('--host', default=defaults.host,
                        help=f'Modem host (default: {defaults.host})')
    parser.add_argument('--port', type=int, default=defaults.port,
                        help=f'Modem port (default: {defaults.port})')
    parser.add_argument('--mmsi', type=int, default=defaults.mmsi,
                        help=f'Station MMSI (default: {defaults.mmsi})')
    parser.add_argument('--write-timings', action='store_true',
                        help='Append timings to timings_sec_lvl_<level>.csv')
    parser.add_argument('--timings-dir', default=defaults.timings_dir,
                        help='Directory for timing logs (default: current directory)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(levelname)-8s %(name)s: %(message)s'
    )

    config = replace(
        caesar_config.get_config(),
        security_level=args.level,
        seed_source=args.seed_source,
        passphrase=args.passphrase,
        host=args.host,
        port=args.port,
        mmsi=args.mmsi,
        write_timings=args.write_timings,
        timings_dir=args.timings_dir
    )
    caesar_config.set_config(config)

    log.info(f"main: starting AIS-CAESAR transmitter at security level {args.level}")
    result = run_session(config)

    if not result.ok:
        log.error(f"main: session failed: {result.error}")
        return 1

    log.info(
        f"main: done, {len(result.carrier_frames)} carrier + {len(result.auth_frames)} "
        f"authenticated frames, K0={result.commitment.value.hex()}"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
