import os
import tempfile
import unittest

import numpy as np
import pandas as pd

import heaps
from heap_ import Orientation


class DriverTestCase(unittest.TestCase):
    def setUp(self):
        self._cwd = os.getcwd()
        self._tmp = tempfile.TemporaryDirectory()
        os.chdir(self._tmp.name)
        self.addCleanup(self._tmp.cleanup)
        self.addCleanup(os.chdir, self._cwd)

    def write_input(self, lines, filename=heaps.INPUT_FILENAME):
        with open(filename, "w") as input_file:
            input_file.write("\n".join(lines) + "\n")


class TestReadInput(DriverTestCase):
    def test_defaults(self):
        params = heaps.HeapParams()
        self.assertEqual(params.orientation, Orientation.MIN)
        self.assertEqual(params.dtype, "list")
        self.assertEqual(params.elements_from_file, 0)

    def test_read_input(self):
        self.write_input([
            "n_elements=50",
            "initial_capacity=2",
            "orientation=max",
            "dtype=float64",
            "# comment",
            "seed=3",
            "log_level=DEBUG",
        ])
        params = heaps.HeapParams()
        heaps.read_input(params)
        self.assertEqual(params.n_elements, 50)
        self.assertEqual(params.initial_capacity, 2)
        self.assertEqual(params.orientation, Orientation.MAX)
        self.assertEqual(params.dtype, "float64")
        self.assertEqual(params.seed, 3)
        self.assertEqual(params.log_level, "DEBUG")

    def test_unknown_parameter_raises(self):
        self.write_input(["colour=blue"])
        with self.assertRaises(ValueError):
            heaps.read_input(heaps.HeapParams())

    def test_negative_element_count_raises(self):
        self.write_input(["n_elements=-5"])
        with self.assertRaises(ValueError):
            heaps.read_input(heaps.HeapParams())

    def test_bad_orientation_raises(self):
        self.write_input(["orientation=sideways"])
        with self.assertRaises(ValueError):
            heaps.read_input(heaps.HeapParams())


class TestElements(DriverTestCase):
    def test_generated_elements_round_trip_through_csv(self):
        params = heaps.HeapParams()
        params.n_elements = 25
        params.dtype = "int64"
        values = heaps.initialize_elements(params, np.random.default_rng(0))
        self.assertEqual(len(values), 25)
        self.assertEqual(values.dtype, np.int64)
        np.testing.assert_array_equal(pd.read_csv(heaps.ELEMENTS_FILENAME)["value"].to_numpy(), values)

    def test_zero_elements_generates_header_only_file(self):
        params = heaps.HeapParams()
        params.n_elements = 0
        values = heaps.initialize_elements(params, np.random.default_rng(0))
        self.assertEqual(len(values), 0)

    def test_missing_elements_file_raises(self):
        params = heaps.HeapParams()
        params.elements_from_file = 1
        params.elements_filename = "missing.csv"
        with self.assertRaises(RuntimeError):
            heaps.read_elements(params)


class TestMain(DriverTestCase):
    def test_requires_output_directory(self):
        self.assertEqual(heaps.main(["heaps.py"]), -1)

    def test_missing_input_file(self):
        self.assertEqual(heaps.main(["heaps.py", "out"]), -1)

    def test_full_run_writes_ordered_output(self):
        os.mkdir("out")
        with open("values.csv", "w") as values_file:
            values_file.write("value\n5\n3\n8\n1\n9\n2\n")
        self.write_input([
            "initial_capacity=1",
            "orientation=max",
            "dtype=list",
            "elements_from_file=true",
            "elements_filename=values.csv",
        ])
        self.assertEqual(heaps.main(["heaps.py", "out"]), 0)
        pop_order = pd.read_csv(os.path.join("out", "pop_order_output.csv"))
        sorted_output = pd.read_csv(os.path.join("out", "sorted_output.csv"))
        timings = pd.read_csv(os.path.join("out", "timings_output.csv"))
        self.assertEqual(pop_order["value"].tolist(), [9, 8, 5, 3, 2, 1])
        self.assertEqual(sorted_output["value"].tolist(), [9, 8, 5, 3, 2, 1])
        self.assertEqual(timings["phase"].tolist(), ["push_pop", "build_pop", "heap_sort"])

    def test_empty_run(self):
        os.mkdir("out")
        self.write_input(["n_elements=0", "dtype=int64"])
        self.assertEqual(heaps.main(["heaps.py", "out"]), 0)
        sorted_output = pd.read_csv(os.path.join("out", "sorted_output.csv"))
        self.assertEqual(len(sorted_output), 0)

    def test_random_numpy_run(self):
        os.mkdir("out")
        self.write_input(["n_elements=300", "dtype=float64", "seed=11", "initial_capacity=0"])
        self.assertEqual(heaps.main(["heaps.py", "out"]), 0)
        sorted_output = pd.read_csv(os.path.join("out", "sorted_output.csv"))
        values = sorted_output["value"].to_numpy()
        self.assertEqual(len(values), 300)
        self.assertTrue(np.all(values[:-1] <= values[1:]))


if __name__ == "__main__":
    unittest.main()
