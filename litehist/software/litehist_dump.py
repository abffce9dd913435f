#!/usr/bin/env python3

#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

import sys
import csv
import logging
import argparse

from litex.tools.litex_client import RemoteClient

from litehist.common import LiteHistogramError
from litehist.software.driver import LiteHistogramDriver

# Dump ---------------------------------------------------------------------------------------------

def dump_histograms(driver, epochs, writer, timeout=None, reset=False):
    if reset:
        driver.reset()
        driver.clear_pending()
    for epoch in range(epochs):
        datas = driver.histogram(timeout=timeout)
        writer.writerow([epoch] + datas)

# Run ----------------------------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="LiteHist histogram dump utility.")
    parser.add_argument("--host",    default="localhost",    help="Host ip address.")
    parser.add_argument("--port",    default="1234",         help="Host bind port.")
    parser.add_argument("--csr-csv", default="csr.csv",      help="SoC CSV file.")
    parser.add_argument("--name",    default="histogram",    help="Histogram name in the SoC.")
    parser.add_argument("--aw",      default=None, type=int, help="Bin address width (default: from region size).")
    parser.add_argument("--epochs",  default=1,    type=int, help="Number of epochs to dump.")
    parser.add_argument("--timeout", default=None, type=float, help="Epoch timeout (in seconds).")
    parser.add_argument("--reset",   action="store_true",    help="Restart accumulation before dumping.")
    parser.add_argument("--output",  default=None,           help="Output CSV file (default: stdout).")
    parser.add_argument("--debug",   action="store_true",    help="Enable debug traces.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    bus = RemoteClient(host=args.host, port=int(args.port, 0), csr_csv=args.csr_csv)
    bus.open()
    try:
        driver = LiteHistogramDriver(bus, name=args.name, aw=args.aw, debug=args.debug)
        f      = sys.stdout if args.output is None else open(args.output, "w", newline="")
        try:
            dump_histograms(driver, args.epochs, csv.writer(f), timeout=args.timeout, reset=args.reset)
        finally:
            if f is not sys.stdout:
                f.close()
    except LiteHistogramError:
        sys.exit(1)
    finally:
        bus.close()

if __name__ == "__main__":
    main()
