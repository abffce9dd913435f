#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

"""Tick-accurate reference model of the LiteHistogram core.

Each call to ``LiteHistogramModel.tick`` evaluates one clock cycle: the combinatorial outputs are
computed from the current state and the inputs, then the state is updated as on the clock edge.
"""

from collections import namedtuple

from litehist.common import *

ACCUMULATING    = "ACCUMULATING"
RESET_REQUESTED = "RESET-REQUESTED"
CLEARING        = "CLEARING"

ModelTick = namedtuple("ModelTick", "accepted epoch_done stall active count clearing")

# Dual Bank Memory ---------------------------------------------------------------------------------

class DualBankMemory:
    """Two banks of counters behind a registered read port and a write port.

    ``read`` latches the addressed counter in ``rd_data``, which the pipeline consumes on the next
    tick, as the registered port of the gateware memory.
    """
    def __init__(self, aw):
        self.aw      = aw
        self.banks   = [[0]*2**aw, [0]*2**aw]
        self.rd_data = 0

    def arbitrate(self, ingest):
        """Return True when the host gets the read port.

        The grant only depends on the ingestion request of the cycle: ingestion has strict
        priority, the memory holds no arbitration state.
        """
        return not ingest

    def read(self, bank, index):
        self.rd_data = self.banks[bank][index]
        return self.rd_data

    def write(self, bank, index, value):
        self.banks[bank][index] = value

# Accumulator Pipeline -----------------------------------------------------------------------------

class PipelineEntry:
    __slots__ = ("bank", "index", "zero", "value", "age")

    def __init__(self, bank, index, zero=False):
        self.bank  = bank
        self.index = index
        self.zero  = zero
        self.value = None
        self.age   = 0

    @property
    def address(self):
        return (self.bank, self.index)

    def __repr__(self):
        return "PipelineEntry(bank={}, index={}, zero={}, value={}, age={})".format(
            self.bank, self.index, self.zero, self.value, self.age)


class AccumulatorPipeline:
    """Read/Compute/Write pipeline; entry age 1 is Compute, 2 is Write, 3 is the bypass."""
    def __init__(self):
        self.entries = []

    def stage(self, age):
        for entry in self.entries:
            if entry.age == age:
                return entry
        return None

    def pending(self, bank):
        return any(e.bank == bank for e in self.entries if e.age in (1, 2))

    def forward(self, entry, rd_data):
        if entry.zero:
            return 0
        for age in (2, 3):
            previous = self.stage(age)
            if (previous is not None) and (previous.address == entry.address):
                return previous.value + 1
        return rd_data + 1

    def tick(self, entry, memory, host_address):
        compute = self.stage(1)
        write   = self.stage(2)
        if compute is not None:
            compute.value = self.forward(compute, memory.rd_data)

        # Read port sees the memory before this cycle's write.
        if (entry is not None) and not entry.zero:
            memory.read(*entry.address)
        else:
            memory.read(*host_address)
        if write is not None:
            memory.write(write.bank, write.index, write.value)

        for e in self.entries:
            e.age += 1
        if entry is not None:
            entry.age = 1
            self.entries.insert(0, entry)
        self.entries = [e for e in self.entries if e.age <= 3]

# Epoch Control ------------------------------------------------------------------------------------

class SampleCounter:
    def __init__(self, navgs):
        self.navgs = navgs
        self.count = 0

    def done(self, accepted):
        return accepted and (self.count == self.navgs - 1)

    def advance(self, accepted, clear):
        if clear:
            self.count = 0
        elif accepted:
            self.count = 0 if self.done(accepted) else self.count + 1


class ClearSequencer:
    def __init__(self, aw):
        self.aw    = aw
        self.index = 0

    @property
    def last(self):
        return self.index == 2**self.aw - 1

    def advance(self, start, ce):
        if start:
            self.index = 0
        elif ce:
            self.index = (self.index + 1) % 2**self.aw


class EpochController:
    def __init__(self, navgs, aw):
        self.state      = RESET_REQUESTED
        self.active     = 0
        self.epoch_done = False
        self.counter    = SampleCounter(navgs)
        self.sequencer  = ClearSequencer(aw)

    def evaluate(self, accepted, reset, command):
        """Return (next_state, flip, clear, start, sweep) for the current cycle."""
        flip  = False
        start = False
        sweep = False
        if self.state == ACCUMULATING:
            clear = reset or command
            if reset:
                next_state = RESET_REQUESTED
            elif self.counter.done(accepted):
                flip       = True
                next_state = RESET_REQUESTED
            elif command:
                next_state = RESET_REQUESTED
            else:
                next_state = ACCUMULATING
        elif self.state == RESET_REQUESTED:
            clear      = True
            start      = True
            next_state = CLEARING
        else:
            clear = True
            if reset or command:
                next_state = RESET_REQUESTED
            else:
                sweep      = True
                next_state = ACCUMULATING if self.sequencer.last else CLEARING
        return next_state, flip, clear, start, sweep

# Model --------------------------------------------------------------------------------------------

class LiteHistogramModel:
    def __init__(self, navgs, aw):
        check_parameters(navgs, aw)
        self.navgs      = navgs
        self.aw         = aw
        self.memory     = DualBankMemory(aw)
        self.pipeline   = AccumulatorPipeline()
        self.controller = EpochController(navgs, aw)

    @property
    def active(self):
        return self.controller.active

    @property
    def frozen(self):
        return 1 - self.controller.active

    @property
    def state(self):
        return self.controller.state

    @property
    def count(self):
        return self.controller.counter.count

    def bank(self, n):
        return list(self.memory.banks[n])

    def tick(self, valid=False, sample=0, reset=False, command=False, host_index=0):
        controller = self.controller
        active     = controller.active
        accepted   = bool(valid) and (controller.state == ACCUMULATING)
        next_state, flip, clear, start, sweep = controller.evaluate(accepted, reset, command)

        if sweep:
            entry = PipelineEntry(active, controller.sequencer.index, zero=True)
        elif accepted:
            entry = PipelineEntry(active, sample % 2**self.aw)
        else:
            entry = None

        granted = self.memory.arbitrate((entry is not None) and not entry.zero)
        stall   = (not granted) or self.pipeline.pending(1 - active)

        result = ModelTick(
            accepted   = accepted,
            epoch_done = controller.epoch_done,
            stall      = stall,
            active     = active,
            count      = controller.counter.count,
            clearing   = controller.state == CLEARING)

        # Clock edge.
        self.pipeline.tick(entry, self.memory, (1 - active, host_index % 2**self.aw))
        controller.counter.advance(accepted, clear)
        controller.sequencer.advance(start, sweep)
        controller.epoch_done = flip
        if flip:
            controller.active = 1 - active
        controller.state = next_state
        return result

# Bus Port -----------------------------------------------------------------------------------------

class BusPort:
    """Host side of the model with an idle ingestion, one access at a time."""
    def __init__(self, model):
        self.model = model

    def read(self, index, max_ticks=None):
        ticks = 0
        while True:
            ticks += 1
            if self.model.tick(host_index=index).stall:
                if (max_ticks is not None) and (ticks >= max_ticks):
                    raise LiteHistogramTimeout()
                continue
            break
        value = self.model.memory.rd_data
        self.model.tick(host_index=index)
        return value

    def command(self):
        self.model.tick(command=True)
        self.model.tick()
