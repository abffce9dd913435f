#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

import time
import logging

from migen.fhdl.bitcontainer import log2_int

from litex.gen.common import colorer

from litehist.common import LiteHistogramTimeout

# LiteHistogram Driver -----------------------------------------------------------------------------

class LiteHistogramDriver:
    """Host driver of a LiteHistogram integrated in a LiteX SoC.

    ``bus`` is a LiteX ``RemoteClient`` (or any object providing ``read(addr, length)``,
    ``write(addr, data)``, ``regs`` and ``mems``). The histogram region and its ``done`` event are
    looked up by ``name`` (``mems.<name>``, ``regs.<name>_ev_pending``).
    """
    def __init__(self, bus, name="histogram", aw=None, debug=False):
        self.bus    = bus
        self.name   = name
        self.debug  = debug
        self.logger = logging.getLogger("LiteHistogramDriver")

        region    = getattr(bus.mems, name)
        self.base = region.base
        if aw is None:
            aw = log2_int(region.size//4)
        self.aw         = aw
        self.nbins      = 2**aw
        self.ev_pending = getattr(bus.regs, name + "_ev_pending")

    def reset(self):
        """Discard the active bank accumulation and restart it."""
        self.bus.write(self.base, 0)

    def clear_pending(self):
        self.ev_pending.write(1)

    def wait_epoch(self, timeout=None, poll_period=1e-3):
        """Wait for a newly frozen bank and acknowledge it."""
        start = time.time()
        while not (self.ev_pending.read() & 0b1):
            if (timeout is not None) and (time.time() - start) > timeout:
                self.logger.error("No epoch completed in {}s.".format(
                    colorer(timeout, color="red")))
                raise LiteHistogramTimeout()
            time.sleep(poll_period)
        self.clear_pending()

    def read(self):
        """Read the bins of the frozen bank."""
        datas = self.bus.read(self.base, self.nbins)
        if self.debug:
            self.logger.info("Read {} bins, {} samples.".format(
                colorer(len(datas)),
                colorer(sum(datas))))
        return datas

    def histogram(self, timeout=None):
        self.wait_epoch(timeout=timeout)
        return self.read()

