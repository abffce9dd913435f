#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

from migen import *

from litex.gen import *

# Dual Bank Memory ---------------------------------------------------------------------------------

class LiteHistogramMemory(LiteXModule):
    """Dual Bank Histogram Memory.

    Two banks of ``2**aw`` counters stored in a single memory, the bank selector being the MSB of
    the address (``adr = Cat(index, bank)``).

    The memory has one write port and one read port. Reads are registered (result available the
    cycle after the address is presented) and return the content preceding a write issued on the
    same cycle (READ_FIRST).

    The read port is shared between the ingestion path and the host. Ingestion has strict priority:
    the host only gets the port (``host_ready``) on cycles where ``ingest_valid`` is low.
    """
    def __init__(self, aw, width):
        self.aw    = aw
        self.width = width

        # Ingestion read request.
        self.ingest_valid = Signal()
        self.ingest_adr   = Signal(aw + 1)

        # Host read request.
        self.host_adr   = Signal(aw + 1)
        self.host_ready = Signal()

        # Read data (shared).
        self.rd_data = Signal(width)

        # Write port.
        self.wr_en   = Signal()
        self.wr_adr  = Signal(aw + 1)
        self.wr_data = Signal(width)

        # # #

        self.mem = mem = Memory(width, 2*2**aw, name="histogram")
        rdport = mem.get_port(mode=READ_FIRST)
        wrport = mem.get_port(write_capable=True)
        self.specials += rdport, wrport

        # Read Arbitration.
        self.comb += [
            If(self.ingest_valid,
                rdport.adr.eq(self.ingest_adr)
            ).Else(
                rdport.adr.eq(self.host_adr),
                self.host_ready.eq(1)
            ),
            self.rd_data.eq(rdport.dat_r),
        ]

        # Write.
        self.comb += [
            wrport.we.eq(self.wr_en),
            wrport.adr.eq(self.wr_adr),
            wrport.dat_w.eq(self.wr_data),
        ]
