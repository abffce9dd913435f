#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

import logging

from migen import *

from litex.gen import *

# Errors -------------------------------------------------------------------------------------------

class LiteHistogramError(Exception):
    pass

class LiteHistogramTimeout(LiteHistogramError):
    pass

# Helpers ------------------------------------------------------------------------------------------

def counter_width(navgs):
    """Width of a bin counter able to hold ``0..navgs``."""
    return bits_for(navgs)

def check_parameters(navgs, aw, data_width=None, logger=None):
    if logger is None:
        logger = logging.getLogger("LiteHistogram")
    if navgs < 1:
        logger.error("Invalid {} {}, must be >= 1.".format(
            colorer("Epoch length", color="red"),
            colorer(navgs)))
        raise LiteHistogramError()
    if aw < 1:
        logger.error("Invalid {} {}, must be >= 1.".format(
            colorer("Bin address width", color="red"),
            colorer(aw)))
        raise LiteHistogramError()
    if (data_width is not None) and (counter_width(navgs) > data_width):
        logger.error("{}-bit counters do not fit in {}-bit {}.".format(
            colorer(counter_width(navgs)),
            colorer(data_width),
            colorer("Bus Data Width", color="red")))
        raise LiteHistogramError()
