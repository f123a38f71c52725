import tempfile
import unittest

import numpy as np

import sp3_samples as samples
from sp3kit.errors import (CoincidentAbscissaeError, InterpolationWindowError, SatelliteNotFoundError,
                           Sp3RecordError, TooFewPointsLeftError, TooFewPointsRightError)
from sp3kit.global_config import get_global_config, update_interpolation_settings
from sp3kit.sp3 import Sp3Reader
from sp3kit.sv_interpolate import SvInterpolator

WINDOW = 1801.0


class SvInterpolatorTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.addCleanup(get_global_config().reset)

    def open_sp3(self, lines, name="test.sp3"):
        sp3 = Sp3Reader(samples.write_sp3(self._tmp.name, lines, name))
        self.addCleanup(sp3.close)
        return sp3


class TestSvInterpolator(SvInterpolatorTestCase):
    def test_five_epoch_file(self):
        sp3 = self.open_sp3(samples.orbit_lines(("G01",), count=5))
        intrp = SvInterpolator("G01", sp3, WINDOW)
        self.assertEqual(intrp.num_data_points, 5)
        self.assertEqual(intrp.workspace_size, 7)
        self.assertEqual(intrp.first_block_date, samples.START_EPOCH)
        self.assertEqual(intrp.last_block_date, samples.seconds_after_start(3600))

        res = intrp.interpolate_at(samples.seconds_after_start(1800))
        np.testing.assert_allclose(res.position, samples.position_at(0.5), atol=1e-8)
        self.assertLess(np.max(np.abs(res.position_error)), 1e-6)
        self.assertEqual(res.num_points, 5)
        self.assertIsNone(res.velocity)

    def test_between_epochs(self):
        sp3 = self.open_sp3(samples.orbit_lines(("G01", "G02"), count=5))
        intrp = SvInterpolator("G02", sp3, WINDOW)
        res = intrp.interpolate_at(samples.seconds_after_start(2000))
        np.testing.assert_allclose(res.position, samples.position_at(2000 / 3600e0, 1), atol=1e-6)
        self.assertEqual(intrp.last_index, 2)

    def test_too_few_points(self):
        sp3 = self.open_sp3(samples.orbit_lines(count=5))
        intrp = SvInterpolator("G01", sp3, WINDOW)
        with self.assertRaises(TooFewPointsLeftError):
            intrp.interpolate_at(samples.START_EPOCH)
        with self.assertRaises(TooFewPointsLeftError):
            intrp.interpolate_at(samples.seconds_after_start(-7200))
        with self.assertRaises(TooFewPointsRightError):
            intrp.interpolate_at(samples.seconds_after_start(3600))
        # far beyond the last record
        with self.assertRaises(InterpolationWindowError):
            intrp.interpolate_at(samples.seconds_after_start(10800))

    def test_min_points_per_side(self):
        sp3 = self.open_sp3(samples.orbit_lines(count=5))
        intrp = SvInterpolator("G01", sp3, WINDOW, min_points_per_side=1)
        res = intrp.interpolate_at(samples.seconds_after_start(1000))
        np.testing.assert_allclose(res.position, samples.position_at(1000 / 3600e0), atol=1e-6)

    def test_cache_invariance(self):
        sp3 = self.open_sp3(samples.orbit_lines(count=12))
        intrp = SvInterpolator("G01", sp3, WINDOW)
        seconds = np.arange(1800.0, 8100.0, 137.0)
        ascending = [intrp.interpolate_at(samples.seconds_after_start(s)) for s in seconds]
        order = np.random.default_rng(42).permutation(len(seconds))
        for k in order:
            res = intrp.interpolate_at(samples.seconds_after_start(seconds[k]))
            self.assertTrue(np.array_equal(res.position, ascending[k].position))
            self.assertTrue(np.array_equal(res.position_error, ascending[k].position_error))

    def test_velocity(self):
        sp3 = self.open_sp3(samples.orbit_lines(count=5, velocity=True))
        intrp = SvInterpolator("G01", sp3, WINDOW)
        self.assertTrue(intrp.has_velocity)
        res = intrp.interpolate_at(samples.seconds_after_start(2000), velocity=True)
        np.testing.assert_allclose(res.velocity, samples.velocity_at(2000 / 3600e0), atol=1e-6)
        np.testing.assert_allclose(res.position, samples.position_at(2000 / 3600e0), atol=1e-6)
        self.assertEqual(res.velocity_error.shape, (3,))

    def test_satellite_not_found(self):
        sp3 = self.open_sp3(samples.orbit_lines(count=5))
        with self.assertRaises(SatelliteNotFoundError):
            SvInterpolator("G09", sp3, WINDOW)
        with self.assertRaises(SatelliteNotFoundError):
            SvInterpolator("G01X", sp3, WINDOW)

    def test_blocks_without_position_and_clock_are_dropped(self):
        lines = samples.orbit_lines(("G01", "G02"), count=5)
        # drop the G01 record of the second epoch
        lines.remove(samples.p_line("G01", samples.position_at(0.25), samples.clock_at(0.25)))
        sp3 = self.open_sp3(lines)
        with self.assertLogs("sp3kit.sv_interpolate", level="INFO"):
            intrp = SvInterpolator("G01", sp3, WINDOW)
        self.assertEqual(intrp.num_data_points, 4)
        self.assertNotIn(samples.seconds_after_start(900), [b.t for b in intrp.data_blocks])

    def test_default_lookaround_from_config(self):
        update_interpolation_settings({"max_lookaround_seconds": WINDOW})
        sp3 = self.open_sp3(samples.orbit_lines(count=5))
        intrp = SvInterpolator("G01", sp3)
        self.assertEqual(intrp.max_lookaround, np.timedelta64(1801, "s"))
        intrp = SvInterpolator("G01", sp3, np.timedelta64(30, "m"))
        self.assertEqual(intrp.workspace_size, 5)

    def test_coincident_epochs(self):
        lines = samples.header(("G01",), num_epochs=6)
        for s in (0, 900, 1800, 1800, 2700, 3600):
            hours = s / 3600e0
            lines += [samples.epoch_line(samples.seconds_after_start(s)),
                      samples.p_line("G01", samples.position_at(hours), samples.clock_at(hours))]
        lines.append("EOF")
        intrp = SvInterpolator("G01", self.open_sp3(lines), WINDOW)
        self.assertEqual(intrp.num_data_points, 6)
        with self.assertRaises(CoincidentAbscissaeError):
            intrp.interpolate_at(samples.seconds_after_start(2000))

    def test_epochs_out_of_order(self):
        lines = samples.header(("G01",), num_epochs=3)
        for s in (0, 1800, 900):
            hours = s / 3600e0
            lines += [samples.epoch_line(samples.seconds_after_start(s)),
                      samples.p_line("G01", samples.position_at(hours), samples.clock_at(hours))]
        lines.append("EOF")
        with self.assertRaises(Sp3RecordError):
            SvInterpolator("G01", self.open_sp3(lines), WINDOW)

    def test_more_epochs_than_declared(self):
        lines = samples.orbit_lines(count=5)
        lines[samples.LINE1] = samples.first_line(num_epochs=4)
        with self.assertLogs("sp3kit.sv_interpolate", level="WARNING"):
            intrp = SvInterpolator("G01", self.open_sp3(lines), WINDOW)
        self.assertEqual(intrp.num_data_points, 5)


if __name__ == "__main__":
    unittest.main()
