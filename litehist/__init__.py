#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

from migen import *

from litex.gen import *

from litex.soc.interconnect.csr_eventmanager import *

from litehist.common import *
from litehist.core import LiteHistogramCore
from litehist.frontend.wishbone import LiteHistogramWishbone

# LiteHistogram ------------------------------------------------------------------------------------

class LiteHistogram(LiteXModule):
    """LiteHistogram.

    Streaming histogram with double-buffered banks, exposed as a MMAPed peripheral:

                                          32-bit
                                   ┌─────────────────┐
                          Base + 0 │ Frozen bin 0    │
                                   ├─────────────────┤
                          Base + 4 │ Frozen bin 1    │
                                   └─────────────────┘
                             ...          ...

    Any write to the region restarts the accumulation of the active bank. ``epoch_done`` (and the
    ``done`` event when ``with_irq`` is set) signals a newly frozen bank: it must be read before
    the next epoch completes.

    It can be simply integrated in a LiteX SoC with:
        self.histogram = LiteHistogram(navgs=4096, aw=8)
        self.comb += [
            self.histogram.sink.valid.eq(adc.valid),
            self.histogram.sink.data.eq(adc.data[-8:]),
        ]
        self.bus.add_slave(name="histogram", slave=self.histogram.bus, region=SoCRegion(
            origin = 0x3000_0000,
            size   = 4*2**8,
        ))
        self.irq.add("histogram")
    """
    def __init__(self, navgs, aw, data_width=32, with_irq=True):
        check_parameters(navgs, aw, data_width)
        self.core     = core = LiteHistogramCore(navgs, aw)
        self.wishbone = LiteHistogramWishbone(core, data_width=data_width)

        self.sink       = core.sink
        self.reset      = core.reset
        self.epoch_done = core.epoch_done
        self.bus        = self.wishbone.bus
        self.stall      = self.wishbone.stall

        # # #

        if with_irq:
            self.ev = EventManager()
            self.ev.done = EventSourcePulse(description="Epoch completed, frozen bank readable.")
            self.ev.finalize()
            self.comb += self.ev.done.trigger.eq(core.epoch_done)
