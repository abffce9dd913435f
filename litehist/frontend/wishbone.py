#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

from migen import *

from litex.gen import *

from litex.soc.interconnect import wishbone

# LiteHistogram Wishbone ---------------------------------------------------------------------------

class LiteHistogramWishbone(LiteXModule):
    """Wishbone Slave of the LiteHistogram core.

    - Reads return the counter of the frozen bank at bin ``adr`` (word addressing, upper bits
      ignored), zero-extended to the bus data width. A read is only accepted when the core does not
      ``stall`` (ingestion has priority on the memory read port); the master is simply held until
      then.
    - Writes (any address, any data) (re-)start the clearing of the active bank.

    Accepted accesses are acknowledged on the next cycle.
    """
    def __init__(self, core, data_width=32):
        self.bus   = bus = wishbone.Interface(data_width=data_width, address_width=32, addressing="word")
        self.stall = Signal()

        # # #

        read  = Signal()
        write = Signal()
        self.comb += [
            read.eq( bus.cyc & bus.stb & ~bus.we & ~bus.ack),
            write.eq(bus.cyc & bus.stb &  bus.we & ~bus.ack),
            self.stall.eq(core.stall),
            core.host_index.eq(bus.adr[:core.aw]),
            core.command.eq(write),
            bus.dat_r.eq(core.host_data),
        ]
        self.sync += [
            bus.ack.eq(0),
            If((read & ~self.stall) | write,
                bus.ack.eq(1)
            )
        ]
