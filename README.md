# snnref

Reference computations and support code for a spiking neural network (SNN)
accelerator simulator. The code is plain Python and has no third-party
dependencies.

## Modules

- `snnref.reference`: CPU reference models of integrate-and-fire layers. These
  are `conv_compute`, `conv_and_pooling_compute`, `matrix_multiply`,
  `matrix_multiply_rows`, `sequential_layer`, `pooling_compute` and `pool2x2`.
  All data is passed as flat integer lists. The functions never modify their
  arguments.
  - Layers that integrate and fire return a tuple `(spikes, neuron_state)`
    that holds the updated membrane potentials.
  - A neuron fires (outputs `1`) once its accumulated potential reaches
    `v_th`. Its potential then resets to `0`.
  - `pooling_compute` and `pool2x2` return only the pooled list.
- `snnref.layouts`: convolution, and convolution followed by 2x2 stride-2
  pooling, for three memory layouts:
  - CHW: `conv_compute_chw` and `conv_and_pooling_compute_chw`. Inputs are
    (C, X, Y), filters (K, C, R, S) and outputs (K, outX, outY).
  - HWC: `conv_compute_hwc` and `conv_and_pooling_compute_hwc`. Inputs are
    (X, Y, C), filters (K, R, S, C) and outputs (outX, outY, K).
  - HCW: `conv_compute_hcw` and `conv_and_pooling_compute_hcw`. Inputs are
    (X, C, Y), filters (K, R, C, S) and outputs (outX, K, outY).
- `snnref.topology`: reads a network description file.
  - `read_layers` skips the header line and blank lines, and returns one
    `LayerTopology` per remaining line.
  - `parse_layer_line` parses a single line. A line holds the layer type
    followed by thirteen integers: R, S, C, K, X, Y, P, stride, pooling size,
    pooling stride, input neurons, output neurons and batch. A malformed line
    raises `ValueError`.
  - `model_name` returns the file name without its directory and extension.
- `snnref.tile`: the `Tile` dataclass. It records how many elements of each
  layer dimension are mapped at once, and computes `vn_size` and `num_vns`.
  - With `folding` set, `vn_size` includes one extra multiplier.
  - `Tile.fully_connected` builds a tile for a fully connected layer.
  - `Tile.format_configuration` returns a JSON-like dump of the tile, and
    `Tile.print_configuration` writes that dump to a text stream.
- `snnref.sparse`: helpers for flat row-major matrices:
  - Pruning: `generate_pruned_matrix`.
  - Random dense generation: `generate_dense_matrix`, which takes an optional
    `random.Random`.
  - Bitmap compression: `bitmap_from_dense` and `sparse_from_dense`.
  - CSR/CSC-style compression: `sparse_from_dense_no_bitmap`,
    `minor_ids_from_dense` and `major_pointer_from_dense`.
  - Text rendering: `format_dense_matrix`, `format_bitmap` and
    `format_sparse_matrix`.
  - Greedy line ordering for packing into a number of multipliers:
    `calculate_ordering`, with `organize_matrix` and `organize_matrix_back`
    to apply and undo it.
- `snnref.utility`: small helpers:
  - Text and number checks: `is_num`, `first_number`, `is_power_of_2`,
    `next_power_of_2`, `to_lower` and `ind`.
  - The enumerations `AdderConfig`, `FwLinkDirection`, `Dataflow`,
    `PoolingType` and `GenerationType`.
  - Name lookups: `adder_config_name`, `fwlink_direction_name`,
    `dataflow_from_name`, `dataflow_name` and `pooling_type_from_name`.
    Unknown names raise `ValueError`.

## Example

```python
from snnref.reference import conv_compute

# 3x3 single-channel input, one 2x2 filter, no padding, stride 1
inputs = [1, 0, 1,
          0, 1, 0,
          1, 0, 1]
filters = [1, 1,
           1, 1]
state = [0] * 4
spikes, state = conv_compute(2, 2, 1, 1, 0, 1, 3, 3, inputs, filters, state, 2)
# spikes == [1, 1, 1, 1]; state == [0, 0, 0, 0]
```

Reading a topology file:

```python
from snnref.topology import read_layers, model_name

layers = read_layers("lenet.csv")
print(model_name("lenet.csv"), [layer.type for layer in layers])
```

## What this package does not do

- It does not run a cycle-level simulation of the accelerator. There are no
  memories, networks, controllers or DRAM model, and no cycle or memory-access
  counts.
- It provides no command-line program. The topology reader and the reference
  models are library functions to call from your own code.

## Running the tests

```
pip install -e .[test]
pytest
```