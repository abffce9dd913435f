#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

from migen import *

from litex.gen import *

# Sample Counter -----------------------------------------------------------------------------------

class SampleCounter(LiteXModule):
    """Counts accepted samples of the current epoch, ``done`` on the last one."""
    def __init__(self, navgs):
        self.ce    = Signal()
        self.clear = Signal()
        self.count = Signal(max=max(navgs, 2))
        self.done  = Signal()

        # # #

        self.comb += self.done.eq(self.ce & (self.count == (navgs - 1)))
        self.sync += [
            If(self.clear,
                self.count.eq(0)
            ).Elif(self.ce,
                If(self.done,
                    self.count.eq(0)
                ).Else(
                    self.count.eq(self.count + 1)
                )
            )
        ]

# Clear Sequencer ----------------------------------------------------------------------------------

class ClearSequencer(LiteXModule):
    """Walks the bin indexes of a bank, one per cycle."""
    def __init__(self, aw):
        self.start = Signal()
        self.ce    = Signal()
        self.index = Signal(aw)
        self.last  = Signal()

        # # #

        self.comb += self.last.eq(self.index == (2**aw - 1))
        self.sync += [
            If(self.start,
                self.index.eq(0)
            ).Elif(self.ce,
                self.index.eq(self.index + 1)
            )
        ]

# Epoch Controller ---------------------------------------------------------------------------------

class EpochController(LiteXModule):
    """Epoch Controller.

    Coordinates the accumulation and clearing of the banks:

    - ACCUMULATING:    Samples are accepted and counted. On the last sample of the epoch, the
                       active bank is flipped and ``epoch_done`` is pulsed on the next cycle. A
                       ``reset`` or ``command`` discards the current accumulation.
    - RESET-REQUESTED: Single cycle, (re-)starts the sweep at bin 0.
    - CLEARING:        One bin of the active bank is zeroed per cycle (``2**aw`` cycles). Samples
                       are dropped. A ``reset`` or ``command`` restarts the sweep.

    ``reset`` has precedence over an epoch completion; a ``command`` coinciding with an epoch
    completion does not prevent the flip.
    """
    def __init__(self, navgs, aw):
        # Control.
        self.valid   = Signal()
        self.reset   = Signal()
        self.command = Signal()

        # Status.
        self.accept       = Signal()
        self.accumulating = Signal()
        self.clearing     = Signal()
        self.sweep        = Signal()
        self.active       = Signal()
        self.epoch_done   = Signal()

        # # #

        self.counter   = counter   = SampleCounter(navgs)
        self.sequencer = sequencer = ClearSequencer(aw)
        self.count     = counter.count
        self.index     = sequencer.index

        flip = Signal()
        self.sync += [
            self.epoch_done.eq(flip),
            If(flip, self.active.eq(~self.active))
        ]
        self.comb += [
            self.accept.eq(self.valid & self.accumulating),
            counter.ce.eq(self.accept),
        ]

        self.fsm = fsm = FSM(reset_state="RESET-REQUESTED")
        fsm.act("ACCUMULATING",
            self.accumulating.eq(1),
            counter.clear.eq(self.reset | self.command),
            If(self.reset,
                NextState("RESET-REQUESTED")
            ).Elif(counter.done,
                flip.eq(1),
                NextState("RESET-REQUESTED")
            ).Elif(self.command,
                NextState("RESET-REQUESTED")
            )
        )
        fsm.act("RESET-REQUESTED",
            counter.clear.eq(1),
            sequencer.start.eq(1),
            NextState("CLEARING")
        )
        fsm.act("CLEARING",
            self.clearing.eq(1),
            counter.clear.eq(1),
            If(self.reset | self.command,
                NextState("RESET-REQUESTED")
            ).Else(
                self.sweep.eq(1),
                sequencer.ce.eq(1),
                If(sequencer.last,
                    NextState("ACCUMULATING")
                )
            )
        )
