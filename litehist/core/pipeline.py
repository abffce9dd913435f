#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

from migen import *

from litex.gen import *

# Layouts ------------------------------------------------------------------------------------------

def entry_layout(aw, width=None):
    layout = [
        ("valid", 1),
        ("zero",  1),
        ("adr",   aw + 1),
    ]
    if width is not None:
        layout += [("value", width)]
    return layout

# Accumulator Pipeline -----------------------------------------------------------------------------

class LiteHistogramPipeline(LiteXModule):
    """Accumulator Pipeline.

    3-stage Read/Compute/Write pipeline incrementing one bin counter per cycle.

    - Read:    The bin address of the incoming entry is presented to the memory read port.
    - Compute: The read data is available; the new value is ``read + 1``.
    - Write:   The new value is written back to the memory.

    Since the read data returns one cycle after the address, back-to-back entries targeting the
    same bin would read stale values. The Compute stage resolves this by forwarding, the most
    recent value taking precedence:

    - Entry in the Write stage (computed, not yet written) at the same address: ``value + 1``.
    - Entry written on the previous cycle (not yet visible on the read port), held in a bypass
      register: ``value + 1``.

    Entries with ``zero`` set (clearing sweep) do not read the memory and write ``0``; they go
    through the same stages so the memory has a single writer.
    """
    def __init__(self, memory):
        aw, width = memory.aw, memory.width
        self.sink = sink = Record(entry_layout(aw))

        # Status.
        self.compute = compute = Record(entry_layout(aw))
        self.write   = write   = Record(entry_layout(aw, width))
        self.bypass  = bypass  = Record(entry_layout(aw, width))

        # # #

        # Read Stage.
        self.comb += [
            memory.ingest_valid.eq(sink.valid & ~sink.zero),
            memory.ingest_adr.eq(sink.adr),
        ]
        self.sync += [
            compute.valid.eq(sink.valid),
            compute.zero.eq(sink.zero),
            compute.adr.eq(sink.adr),
        ]

        # Compute Stage.
        value = Signal(width)
        self.comb += [
            If(compute.zero,
                value.eq(0)
            ).Elif(write.valid & (write.adr == compute.adr),
                value.eq(write.value + 1)
            ).Elif(bypass.valid & (bypass.adr == compute.adr),
                value.eq(bypass.value + 1)
            ).Else(
                value.eq(memory.rd_data + 1)
            )
        ]
        self.sync += [
            write.valid.eq(compute.valid),
            write.zero.eq(compute.zero),
            write.adr.eq(compute.adr),
            write.value.eq(value),
        ]

        # Write Stage.
        self.comb += [
            memory.wr_en.eq(write.valid),
            memory.wr_adr.eq(write.adr),
            memory.wr_data.eq(write.value),
        ]
        self.sync += [
            bypass.valid.eq(write.valid),
            bypass.zero.eq(write.zero),
            bypass.adr.eq(write.adr),
            bypass.value.eq(write.value),
        ]

    def pending(self, bank):
        """Entries targeting ``bank`` not yet committed to the memory."""
        return ((self.compute.valid & (self.compute.adr[-1] == bank)) |
                (self.write.valid   & (self.write.adr[-1]   == bank)))
