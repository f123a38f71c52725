import tempfile
import unittest

import sp3_samples as samples
from sp3kit.errors import Sp3RecordError, Sp3SeekError
from sp3kit.sp3 import Sp3Reader
from sp3kit.sp3_flag import Sp3Event
from sp3kit.sp3_iterator import Sp3Iterator


class TestSp3Iterator(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        path = samples.write_sp3(self._tmp.name, samples.orbit_lines(("G01", "G02"), count=5))
        self.sp3 = Sp3Reader(path)
        self.addCleanup(self.sp3.close)
        self.it = Sp3Iterator(self.sp3, "G02")

    def test_begin_and_advance(self):
        self.assertEqual(self.it.current_time(), samples.START_EPOCH)
        self.assertTrue(self.it.data_block.has_position())
        block = self.it.advance()
        self.assertEqual(block.t, samples.seconds_after_start(900))
        self.assertIs(self.it.data_block, block)

    def test_advance_past_end_keeps_last_block(self):
        while self.it.advance() is not None:
            pass
        self.assertEqual(self.it.current_time(), samples.seconds_after_start(3600))
        self.assertIsNone(self.it.advance())
        self.assertEqual(self.it.current_time(), samples.seconds_after_start(3600))

    def test_iteration(self):
        times = [b.t for b in self.it]
        self.assertEqual(times, [samples.seconds_after_start(s) for s in (900, 1800, 2700, 3600)])

    def test_goto_exact_epoch(self):
        block = self.it.goto_time(samples.seconds_after_start(1800))
        self.assertEqual(block.t, samples.seconds_after_start(1800))
        self.assertEqual(self.it.current_time(), samples.seconds_after_start(1800))
        self.assertEqual(self.it.peek_next_epoch(), samples.seconds_after_start(2700))

    def test_goto_between_epochs(self):
        t = samples.seconds_after_start(2000)
        block = self.it.goto_time(t)
        self.assertLessEqual(block.t, t)
        self.assertGreaterEqual(self.it.peek_next_epoch(), t)
        self.assertEqual(block.t, samples.seconds_after_start(1800))

    def test_goto_current_time_is_noop(self):
        self.it.goto_time(samples.seconds_after_start(900))
        self.assertEqual(self.it.goto_time(samples.seconds_after_start(900)).t,
                         samples.seconds_after_start(900))

    def test_goto_backwards(self):
        self.it.goto_time(samples.seconds_after_start(3000))
        block = self.it.goto_time(samples.seconds_after_start(1000))
        self.assertEqual(block.t, samples.seconds_after_start(900))

    def test_goto_before_first_epoch(self):
        with self.assertRaises(Sp3SeekError):
            self.it.goto_time(samples.seconds_after_start(-1))

    def test_goto_last_and_beyond(self):
        self.assertEqual(self.it.goto_time(samples.seconds_after_start(3600)).t,
                         samples.seconds_after_start(3600))
        self.assertIsNone(self.it.goto_time(samples.seconds_after_start(3601)))

    def test_undeclared_satellite_sees_only_absent_values(self):
        it = Sp3Iterator(self.sp3, "X99")
        blocks = [it.data_block] + list(it)
        self.assertEqual(len(blocks), 5)
        for block in blocks:
            self.assertTrue(block.flag.is_set(Sp3Event.ABSENT_POSITION))
            self.assertTrue(block.flag.is_set(Sp3Event.ABSENT_CLOCK))
            self.assertFalse(block.state.any())

    def test_file_without_data(self):
        lines = samples.header(("G01",), num_epochs=1) + ["EOF"]
        sp3 = Sp3Reader(samples.write_sp3(self._tmp.name, lines, "empty.sp3"))
        self.addCleanup(sp3.close)
        with self.assertRaises(Sp3RecordError):
            Sp3Iterator(sp3, "G01")


if __name__ == "__main__":
    unittest.main()
