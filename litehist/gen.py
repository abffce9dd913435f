#!/usr/bin/env python3

#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

"""LiteHist standalone core generator.

Generates a Verilog LiteHistogram core with a Wishbone slave interface that can be integrated
in any design:

    litehist_gen --navgs=4096 --aw=8 --output=litehist.v
"""

import sys
import logging
import argparse

from migen.fhdl.verilog import convert

from litehist import LiteHistogram
from litehist.common import LiteHistogramError

# IOs ----------------------------------------------------------------------------------------------

def get_ios(core):
    bus = core.bus
    return {
        # Ingestion.
        core.sink.valid,
        core.sink.ready,
        core.sink.data,

        # Control/Status.
        core.reset,
        core.epoch_done,
        core.stall,

        # Wishbone.
        bus.adr,
        bus.dat_w,
        bus.dat_r,
        bus.sel,
        bus.cyc,
        bus.stb,
        bus.ack,
        bus.we,
    }

def generate(navgs, aw, data_width=32, name="litehist"):
    core = LiteHistogram(navgs, aw, data_width=data_width, with_irq=False)
    return convert(core, ios=get_ios(core), name=name)

# Build --------------------------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="LiteHist standalone core generator.")
    parser.add_argument("--navgs",      default=4096, type=int, help="Number of samples per epoch.")
    parser.add_argument("--aw",         default=8,    type=int, help="Bin address width (2**aw bins).")
    parser.add_argument("--data-width", default=32,   type=int, help="Wishbone data width.")
    parser.add_argument("--name",       default="litehist",     help="Verilog module name.")
    parser.add_argument("--output",     default=None,           help="Output file (default: <name>.v).")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    try:
        output = generate(args.navgs, args.aw, data_width=args.data_width, name=args.name)
    except LiteHistogramError:
        sys.exit(1)
    output.write(args.output or (args.name + ".v"))

if __name__ == "__main__":
    main()
