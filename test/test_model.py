#
# This file is part of LiteHist.
#
# SPDX-License-Identifier: BSD-2-Clause

import random
import unittest
from collections import Counter

from litehist.common import LiteHistogramError, LiteHistogramTimeout
from litehist.model import *

# Helpers ------------------------------------------------------------------------------------------

def wait_accumulating(model):
    ticks = []
    while model.state != ACCUMULATING:
        ticks.append(model.tick())
    return ticks

def feed(model, samples):
    """One sample per tick, ``None`` is an idle tick."""
    return [model.tick(valid=s is not None, sample=s or 0) for s in samples]

def idle(model, n):
    return [model.tick() for _ in range(n)]

def pad(samples, nidle):
    return samples + [None]*nidle

class NaivePipeline(AccumulatorPipeline):
    def forward(self, entry, rd_data):
        return 0 if entry.zero else rd_data + 1

# TestModel ----------------------------------------------------------------------------------------

class TestModel(unittest.TestCase):
    def test_parameters(self):
        with self.assertRaises(LiteHistogramError):
            LiteHistogramModel(navgs=0, aw=4)
        with self.assertRaises(LiteHistogramError):
            LiteHistogramModel(navgs=16, aw=0)

    def test_power_up_clearing(self):
        model = LiteHistogramModel(navgs=16, aw=4)
        ticks = wait_accumulating(model)
        self.assertEqual(len(ticks), 1 + 16)
        self.assertEqual(sum(t.clearing for t in ticks), 16)

    def test_bank_swap(self):
        model = LiteHistogramModel(navgs=16, aw=4)
        wait_accumulating(model)
        ticks  = feed(model, [3]*16)
        ticks += wait_accumulating(model)
        self.assertEqual(sum(t.epoch_done for t in ticks), 1)
        self.assertTrue(ticks[16].epoch_done)
        self.assertEqual(sum(t.clearing for t in ticks), 16)
        self.assertEqual(model.active, 1)
        idle(model, 3)
        self.assertEqual(model.bank(0), [16 if i == 3 else 0 for i in range(16)])
        self.assertEqual(model.bank(1), [0]*16)

    def test_bank_reuse(self):
        model = LiteHistogramModel(navgs=16, aw=4)
        for epoch in range(3):
            wait_accumulating(model)
            feed(model, [3]*16)
        wait_accumulating(model)
        idle(model, 3)
        # Third epoch reused bank 0: cleared in between, not accumulated on top.
        self.assertEqual(model.active, 1)
        self.assertEqual(model.bank(0)[3], 16)
        self.assertEqual(model.bank(1), [0]*16)

    def test_host_command(self):
        model = LiteHistogramModel(navgs=16, aw=4)
        wait_accumulating(model)
        feed(model, pad([7]*5, 3))
        self.assertEqual(model.count, 5)
        self.assertEqual(model.bank(0)[7], 5)
        ticks  = [model.tick(command=True)]
        ticks += wait_accumulating(model)
        self.assertEqual(model.count, 0)
        self.assertEqual(model.active, 0)
        self.assertFalse(any(t.epoch_done for t in ticks))
        self.assertEqual(sum(t.clearing for t in ticks), 16)
        idle(model, 3)
        self.assertEqual(model.bank(0), [0]*16)

    def test_reset_restarts_clearing(self):
        model = LiteHistogramModel(navgs=16, aw=4)
        idle(model, 6)
        self.assertEqual(model.state, CLEARING)
        self.assertEqual(model.controller.sequencer.index, 5)
        model.tick(reset=True)
        self.assertEqual(model.state, RESET_REQUESTED)
        ticks = wait_accumulating(model)
        self.assertEqual(sum(t.clearing for t in ticks), 16)

    def test_reset_has_precedence_over_completion(self):
        model = LiteHistogramModel(navgs=4, aw=2)
        wait_accumulating(model)
        feed(model, [1]*3)
        model.tick(valid=True, sample=1, reset=True)
        ticks = wait_accumulating(model)
        self.assertEqual(model.active, 0)
        self.assertFalse(any(t.epoch_done for t in ticks))

    def test_command_does_not_cancel_completion(self):
        model = LiteHistogramModel(navgs=4, aw=2)
        wait_accumulating(model)
        feed(model, [1]*3)
        model.tick(valid=True, sample=1, command=True)
        self.assertTrue(model.tick().epoch_done)
        self.assertEqual(model.active, 1)

    def test_samples_dropped_while_clearing(self):
        model = LiteHistogramModel(navgs=8, aw=3)
        wait_accumulating(model)
        ticks = feed(model, [2]*8 + [5]*15)
        accepted = [t.accepted for t in ticks]
        # 8 accepted, 1 reset-requested tick and 8 clearing ticks dropped, then accepted again.
        self.assertEqual(accepted, [True]*8 + [False]*9 + [True]*6)
        idle(model, 3)
        self.assertEqual(model.bank(1)[5], 6)

    def test_forwarding_back_to_back(self):
        for navgs in [1, 2, 3, 16, 33]:
            model = LiteHistogramModel(navgs=navgs, aw=3)
            wait_accumulating(model)
            feed(model, pad([6]*navgs, 3))
            self.assertEqual(model.bank(0)[6], navgs)

    def test_naive_pipeline_undercounts(self):
        model = LiteHistogramModel(navgs=16, aw=4)
        model.pipeline = NaivePipeline()
        wait_accumulating(model)
        feed(model, pad([9]*16, 3))
        self.assertLess(model.bank(0)[9], 16)

    def test_forwarding_patterns(self):
        patterns = [
            [1, 2]*8,
            [1, None]*16,
            [1, 2, 1, None, 1, 1, 2, None, None, 2]*4,
            [3, 3, None, 3, 4, 3, 4, 4, None]*4,
        ]
        for pattern in patterns:
            model = LiteHistogramModel(navgs=64, aw=3)
            wait_accumulating(model)
            feed(model, pad(pattern, 3))
            expected = Counter(s for s in pattern if s is not None)
            self.assertEqual(model.bank(0), [expected[i] for i in range(8)])

    def test_exactness_and_conservation(self):
        prng  = random.Random(0)
        navgs = 40
        model = LiteHistogramModel(navgs=navgs, aw=3)
        bus   = BusPort(model)
        for epoch in range(8):
            wait_accumulating(model)
            samples = []
            while sum(s is not None for s in samples) < navgs:
                samples.append(prng.randrange(8) if prng.random() < 0.7 else None)
            ticks = feed(model, samples)
            self.assertTrue(all(t.accepted == (s is not None) for t, s in zip(ticks, samples)))
            self.assertTrue(model.tick().epoch_done)
            # Read the frozen bank as soon as it is notified.
            histogram = [bus.read(i) for i in range(8)]
            expected  = Counter(s for s in samples if s is not None)
            self.assertEqual(histogram, [expected[i] for i in range(8)])
            self.assertEqual(sum(histogram), navgs)

    def test_counter_bounds(self):
        prng  = random.Random(1)
        navgs = 10
        model = LiteHistogramModel(navgs=navgs, aw=2)
        for i in range(5000):
            t = model.tick(
                valid   = prng.random() < 0.9,
                sample  = prng.randrange(4),
                command = prng.random() < 0.002,
                reset   = prng.random() < 0.001)
            self.assertLess(t.count, navgs)
            for bank in range(2):
                for value in model.bank(bank):
                    self.assertTrue(0 <= value <= navgs)

    def test_memory_read_port(self):
        memory = DualBankMemory(aw=2)
        memory.write(1, 2, 7)
        self.assertEqual(memory.read(1, 2), 7)
        self.assertEqual(memory.rd_data, 7)
        memory.write(1, 2, 8)
        self.assertEqual(memory.rd_data, 7)
        self.assertEqual(memory.read(0, 2), 0)
        self.assertTrue(memory.arbitrate(ingest=False))
        self.assertFalse(memory.arbitrate(ingest=True))

    def test_bus_port(self):
        model = LiteHistogramModel(navgs=4, aw=2)
        bus   = BusPort(model)
        wait_accumulating(model)
        # Ingestion has priority on the read port.
        self.assertTrue(model.tick(valid=True, sample=0).stall)
        self.assertFalse(model.tick().stall)
        feed(model, [0]*3)
        self.assertTrue(model.tick().epoch_done)
        # Last write to the frozen bank still pending.
        with self.assertRaises(LiteHistogramTimeout):
            bus.read(0, max_ticks=1)
        self.assertEqual(bus.read(0), 4)
        bus.command()
        self.assertEqual(model.state, CLEARING)
        self.assertEqual(model.controller.sequencer.index, 0)

if __name__ == "__main__":
    unittest.main()
