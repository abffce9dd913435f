#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

import logging

from migen import *

from litex.gen import *

from litex.soc.interconnect import stream

from litehist.common import *
from litehist.core.memory import LiteHistogramMemory
from litehist.core.pipeline import LiteHistogramPipeline
from litehist.core.epoch import EpochController

# LiteHistogram Core -------------------------------------------------------------------------------

class LiteHistogramCore(LiteXModule):
    """Double-buffered histogram core.

    Samples presented on ``sink`` are counted in the bins of the active bank. After ``navgs``
    accepted samples the banks are swapped: the bank that was accumulating is frozen and readable
    through the host port while the other one is cleared and starts accumulating.

    ``sink.ready`` is always asserted: samples presented while the core is not accumulating (bank
    clearing) are dropped.

    Host port: ``host_index`` selects the bin of the frozen bank to read; when ``stall`` is low on
    the cycle the index is presented, ``host_data`` holds the value on the next cycle. ``command``
    (re-)starts the clearing of the active bank, discarding its content.
    """
    def __init__(self, navgs, aw):
        self.logger = logging.getLogger("LiteHistogram")
        check_parameters(navgs, aw, logger=self.logger)
        self.navgs = navgs
        self.aw    = aw
        self.width = width = counter_width(navgs)

        # Ingestion.
        self.sink = sink = stream.Endpoint([("data", aw)])

        # Control.
        self.reset   = Signal()
        self.command = Signal()

        # Host.
        self.host_index = Signal(aw)
        self.host_data  = Signal(width)
        self.stall      = Signal()

        # Status.
        self.epoch_done   = Signal()
        self.accept       = Signal()
        self.accumulating = Signal()
        self.clearing     = Signal()
        self.active       = Signal()
        self.count        = Signal(max=max(navgs, 2))

        # # #

        self.logger.info("{} bins of {}-bit counters, {} samples per epoch.".format(
            colorer(2**aw),
            colorer(width),
            colorer(navgs)))

        self.memory     = memory     = LiteHistogramMemory(aw, width)
        self.pipeline   = pipeline   = LiteHistogramPipeline(memory)
        self.controller = controller = EpochController(navgs, aw)

        # Control/Status.
        self.comb += [
            sink.ready.eq(1),
            controller.valid.eq(sink.valid),
            controller.reset.eq(self.reset),
            controller.command.eq(self.command),
            self.epoch_done.eq(controller.epoch_done),
            self.accept.eq(controller.accept),
            self.accumulating.eq(controller.accumulating),
            self.clearing.eq(controller.clearing),
            self.active.eq(controller.active),
            self.count.eq(controller.count),
        ]

        # Samples / Sweep -> Pipeline.
        self.comb += [
            If(controller.sweep,
                pipeline.sink.valid.eq(1),
                pipeline.sink.zero.eq(1),
                pipeline.sink.adr.eq(Cat(controller.index, controller.active))
            ).Else(
                pipeline.sink.valid.eq(controller.accept),
                pipeline.sink.adr.eq(Cat(sink.data, controller.active))
            )
        ]

        # Host -> Memory (Frozen Bank).
        frozen = Signal()
        self.comb += [
            frozen.eq(~controller.active),
            memory.host_adr.eq(Cat(self.host_index, frozen)),
            self.host_data.eq(memory.rd_data),
            self.stall.eq(~memory.host_ready | pipeline.pending(frozen)),
        ]
