#!/usr/bin/env python3
"""
sp3kit - command line entry point

    sp3kit info FILE
    sp3kit read FILE [--sat G01]
    sp3kit interpolate FILE [--sat G01] [--window 1801] [--step 30] [--velocity]
"""

import argparse
import logging
import sys
import time

import numpy as np

from sp3kit import GNSSTime, InterpolationError, Sp3Error, Sp3Reader, SvInterpolator
from sp3kit.global_config import get_interpolation_settings

logger = logging.getLogger("sp3kit")


def _select_satellite(sp3: Sp3Reader, requested):
    """The requested satellite; files holding one satellite need no choice."""
    if sp3.num_sats == 1:
        sat = sp3.satellite_list()[0]
        if requested is None or requested != sat:
            print(f"Sp3 file only includes one satellite; using {sat}")
        return sat
    if requested is None:
        logger.error(f"{sp3.filename} holds {sp3.num_sats} satellites, use --sat to pick one")
        return None
    if not sp3.has_satellite(requested):
        logger.error(f"Satellite {requested} not included in {sp3.filename}")
        return None
    return requested


def cmd_info(args) -> int:
    with Sp3Reader(args.file) as sp3:
        print(sp3.header.summary())
        if args.comments:
            for c in sp3.header.comments:
                print(f"/* {c}")
    return 0


def cmd_read(args) -> int:
    with Sp3Reader(args.file) as sp3:
        sat = _select_satellite(sp3, args.sat)
        if sat is None:
            return 1
        tic = time.perf_counter()
        count = 0
        for block in sp3.data_blocks(sat):
            count += 1
            if not args.quiet:
                x, y, z = block.position
                print(f"{GNSSTime.format(block.t)} {x:15.6f} {y:15.6f} {z:15.6f} "
                      f"{block.clock:13.6f} {block.flag!r}")
        toc = time.perf_counter()
        print(f"Read {count} data blocks ({sp3.num_epochs} declared) in {toc - tic:.3f} sec")
    return 0


def cmd_interpolate(args) -> int:
    with Sp3Reader(args.file) as sp3:
        sat = _select_satellite(sp3, args.sat)
        if sat is None:
            return 1
        tic = time.perf_counter()
        intrp = SvInterpolator(sat, sp3, max_lookaround=args.window)
        print(f"Fed interpolator with {intrp.num_data_points} data points")
        if intrp.num_data_points == 0:
            return 1

        t = intrp.first_block_date
        stop = intrp.last_block_date
        step = GNSSTime.to_timedelta(args.step)
        count = 0
        failed = 0
        while t <= stop:
            try:
                res = intrp.interpolate_at(t, velocity=args.velocity)
            except InterpolationError as e:
                logger.debug(f"No solution at {GNSSTime.format(t)}: {e}")
                failed += 1
                t = t + step
                continue
            x, y, z = res.position
            line = f"{GNSSTime.format(t)} {x:15.6f} {y:15.6f} {z:15.6f} {np.max(np.abs(res.position_error)):.3e}"
            if res.velocity is not None:
                vx, vy, vz = res.velocity
                line += f" {vx:15.6f} {vy:15.6f} {vz:15.6f}"
            if not args.quiet:
                print(line)
            count += 1
            t = t + step
        toc = time.perf_counter()
        print(f"Interpolated {count} epochs ({failed} without a solution) in {toc - tic:.3f} sec")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sp3kit", description="Read and interpolate SP3-c/d orbit files")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_info = sub.add_parser("info", help="print the header of an SP3 file")
    p_info.add_argument("file")
    p_info.add_argument("--comments", action="store_true", help="also print header comments")
    p_info.set_defaults(func=cmd_info)

    p_read = sub.add_parser("read", help="read every data block of one satellite")
    p_read.add_argument("file")
    p_read.add_argument("--sat", default=None, help="satellite id, e.g. G01")
    p_read.add_argument("-q", "--quiet", action="store_true", help="only print the timing report")
    p_read.set_defaults(func=cmd_read)

    p_intrp = sub.add_parser("interpolate", help="interpolate one satellite over the file span")
    p_intrp.add_argument("file")
    p_intrp.add_argument("--sat", default=None, help="satellite id, e.g. G01")
    p_intrp.add_argument("--window", type=float, default=get_interpolation_settings().max_lookaround_seconds,
                         help="one-sided look-around [sec]; must span at least min_points_per_side "
                              "epoch intervals, e.g. 1801 for a 900 s file")
    p_intrp.add_argument("--step", type=float, default=30.0, help="output interval [sec]")
    p_intrp.add_argument("--velocity", action="store_true", help="also interpolate velocity")
    p_intrp.add_argument("-q", "--quiet", action="store_true", help="only print the timing report")
    p_intrp.set_defaults(func=cmd_interpolate)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except (OSError, Sp3Error) as e:
        logger.error(f"{args.file}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
