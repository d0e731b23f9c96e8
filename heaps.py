import os
import csv
import sys
import time
from typing import List

import numpy as np
import pandas as pd

from heap_ import Heap, Orientation, build_heap, heap_sort
from logger import init_logger, print_, set_log_level
from utils import cmp_int, cmp_float

logger = init_logger("heaps.driver")

INPUT_FILENAME = "heaps_input.txt"
ELEMENTS_FILENAME = "elements.csv"
DTYPES = ("list", "int64", "float64")


class HeapParams:
    def __init__(self):
        initialize_input_parameters(self)


def initialize_input_parameters(params):
    params.n_elements = 1000
    params.initial_capacity = 16
    params.orientation = Orientation.MIN
    params.dtype = "list"
    params.elements_from_file = 0
    params.elements_filename = ""
    params.seed = None
    params.log_level = "INFO"


def read_input(params, input_filename=INPUT_FILENAME):
    initialize_input_parameters(params)

    with open(input_filename, "r") as input_file:
        for line in input_file:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parameter, value = line.split("=")
            parameter = parameter.strip()
            value = value.strip()

            if parameter == "n_elements":
                params.n_elements = int(value)
                if params.n_elements < 0:
                    raise ValueError(f"n_elements must be non-negative, got {value}")
            elif parameter == "initial_capacity":
                params.initial_capacity = int(value)
            elif parameter == "orientation":
                if value not in ("max", "min"):
                    raise ValueError(f"orientation must be max or min, got {value}")
                params.orientation = Orientation.MAX if value == "max" else Orientation.MIN
            elif parameter == "dtype":
                if value not in DTYPES:
                    raise ValueError(f"dtype must be one of {', '.join(DTYPES)}, got {value}")
                params.dtype = value
            elif parameter == "elements_from_file":
                params.elements_from_file = 1 if value == "true" else 0
            elif parameter == "elements_filename":
                params.elements_filename = value
            elif parameter == "seed":
                params.seed = int(value)
            elif parameter == "log_level":
                params.log_level = value
            else:
                raise ValueError(f"Unknown parameter {parameter}")


def generate_random_elements(params, random_generator: np.random.Generator) -> None:
    try:
        with open(ELEMENTS_FILENAME, "w", newline='') as elements_file:
            writer = csv.writer(elements_file)
            writer.writerow(["value"])
            if params.n_elements == 0:
                values = []
            elif params.dtype == "float64":
                values = random_generator.normal(0, 1000, size=params.n_elements)
            else:
                values = random_generator.integers(-params.n_elements, params.n_elements, size=params.n_elements)
            for value in values:
                writer.writerow([value])
    except OSError as e:
        raise RuntimeError(f"Error generating random elements: {e}")


def read_elements(params) -> np.ndarray:
    """Reads the `value` column of the elements CSV file."""
    elements_filename = ELEMENTS_FILENAME if not params.elements_from_file else params.elements_filename
    dtype = "int64" if params.dtype == "list" else params.dtype

    try:
        elements_df = pd.read_csv(elements_filename)
        return elements_df["value"].to_numpy(dtype=dtype)
    except FileNotFoundError:
        raise RuntimeError(f"File '{elements_filename}' not found. Please ensure it exists or generate elements first.")
    except KeyError:
        raise RuntimeError(f"File '{elements_filename}' has no 'value' column.")
    except ValueError as ve:
        raise RuntimeError(f"Error parsing elements file '{elements_filename}': {ve}")


def initialize_elements(params, random_generator: np.random.Generator) -> np.ndarray:
    if not params.elements_from_file:
        generate_random_elements(params, random_generator)
    return read_elements(params)


def make_buffer(values: np.ndarray, dtype: str):
    if dtype == "list":
        return values.tolist()
    return np.array(values, dtype=dtype)


def comparator_for(dtype: str):
    return cmp_float if dtype == "float64" else cmp_int


def run_push_pop(values: np.ndarray, params) -> List:
    compare = comparator_for(params.dtype)
    heap_dtype = None if params.dtype == "list" else params.dtype
    heap = Heap(params.initial_capacity, compare, params.orientation, dtype=heap_dtype)
    for value in make_buffer(values, params.dtype):
        heap.push(value)
    print_("Heap capacity after pushes:", heap.capacity())
    popped = []
    while not heap.is_empty():
        popped.append(heap.pop())
    heap.dispose()
    return popped


def run_build_pop(values: np.ndarray, params) -> List:
    heap = build_heap(make_buffer(values, params.dtype), comparator_for(params.dtype), params.orientation)
    popped = []
    while not heap.is_empty():
        popped.append(heap.pop())
    heap.dispose()
    return popped


def run_heap_sort(values: np.ndarray, params):
    buffer = make_buffer(values, params.dtype)
    heap_sort(buffer, comparator_for(params.dtype), ascending=params.orientation == Orientation.MIN)
    return buffer


def is_ordered(values, orientation: Orientation) -> bool:
    values = np.asarray(values)
    if len(values) < 2:
        return True
    if orientation == Orientation.MIN:
        return bool(np.all(values[:-1] <= values[1:]))
    return bool(np.all(values[:-1] >= values[1:]))


def write_output(pop_order, sorted_values, timings, output_dir_name):
    if not os.path.exists(output_dir_name):
        logger.warning("Cannot find the output directory. The output will be stored in the current directory.")
        output_dir_name = "./"

    with open(os.path.join(output_dir_name, "pop_order_output.csv"), "w", newline='') as csv_pop_output:
        writer = csv.writer(csv_pop_output)
        writer.writerow(["position", "value"])
        for position, value in enumerate(pop_order):
            writer.writerow([position, value])

    with open(os.path.join(output_dir_name, "sorted_output.csv"), "w", newline='') as csv_sorted_output:
        writer = csv.writer(csv_sorted_output)
        writer.writerow(["position", "value"])
        for position, value in enumerate(sorted_values):
            writer.writerow([position, value])

    with open(os.path.join(output_dir_name, "timings_output.csv"), "w", newline='') as csv_timings_output:
        writer = csv.writer(csv_timings_output)
        writer.writerow(["phase", "seconds"])
        for phase, seconds in timings.items():
            writer.writerow([phase, f"{seconds:.6f}"])


def main(argv, input_filename=INPUT_FILENAME):
    if len(argv) != 2:
        print("ERROR heaps.py: please specify the output directory", file=sys.stderr)
        return -1

    output_dir_name = argv[1]
    params = HeapParams()
    try:
        read_input(params, input_filename)
    except FileNotFoundError:
        print(f"ERROR: cannot open file <{input_filename}> in current directory.", file=sys.stderr)
        return -1
    set_log_level(params.log_level)

    logger.info("ELEMENTS INITIALIZATION")
    values = initialize_elements(params, np.random.default_rng(params.seed))
    timings = {}

    logger.info("PUSH/POP EXECUTION")
    start = time.time()
    pop_order = run_push_pop(values, params)
    timings["push_pop"] = time.time() - start

    logger.info("BUILD/POP EXECUTION")
    start = time.time()
    build_order = run_build_pop(values, params)
    timings["build_pop"] = time.time() - start

    logger.info("HEAP SORT EXECUTION")
    start = time.time()
    sorted_values = run_heap_sort(values, params)
    timings["heap_sort"] = time.time() - start

    for phase, seconds in timings.items():
        logger.info(f"Time consumed by {phase}: {seconds:.2f} s")

    for name, result in (("push_pop", pop_order), ("build_pop", build_order), ("heap_sort", sorted_values)):
        if len(result) != len(values) or not is_ordered(result, params.orientation):
            logger.error(f"{name} produced an out-of-order result")
            return -1

    write_output(pop_order, sorted_values, timings, output_dir_name)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
