# pcstream

Building blocks for adaptive point cloud streaming over DASH. A client
chooses a quality version for each object in a scene from three inputs:
the available bandwidth, how much of the screen each object covers, and
per-segment cost/value metadata. The package also writes the DASH
manifest that describes the segment files on the server side.

## Installation

```
pip install .
```

HTTP/2 support comes through the `http2` extra of `httpx`, which is
installed with the package.

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `pcstream.bandwidth`: `HarmonicBandwidthEstimator.post(speeds)` takes a
  batch of measured download speeds and stores their harmonic mean as an
  integer; negative speeds are ignored, and a zero speed makes the
  estimate zero. `get()` returns the latest estimate.
  `BandwidthEstimationError` is raised when the batch is empty, holds no
  valid speed, or no estimate is available yet.
- `pcstream.algorithm`: `parse_metadata(metadata, n_mod, n_ver, weights)`
  reads the `cost value` table that follows a one-line header, scaling
  each object's values by its weight. `dp_based_solution(n_mod, n_ver,
  metadata, screen_ratio, bandwidth, number_labels, rng)` runs a pulse
  search with dominance, feasibility and bound pruning. It picks one
  version per object, keeping the total cost within `bandwidth` and
  making the weighted value as large as it can; when nothing feasible is
  found every object gets version 0. `rng` is a `random.Random` used to
  replace dominance labels and can be seeded for repeatable results.
- `pcstream.lod_selector`: `LodSelector(kind)` wraps the strategies named
  in `LodSelectorType` (`DP_BASED`, `LM_BASED`, `EQUAL`, `HYBRID`; an
  unknown kind falls back to `LM_BASED`). Call `post(n_mod, n_ver,
  metadata, screen_ratio, bandwidth)` and then `get()` for the chosen
  versions. Only `DP_BASED` is implemented; the other strategies, and
  `get()` before any `post()`, raise `LodSelectionError`.
- `pcstream.mesh`: `Mesh` holds vertex positions and triangle indices.
  `Mesh.from_bytes(data)` and `Mesh.to_bytes()` read and write the
  compact little-endian form: a `uint32` vertex count, three `float32`
  coordinates per vertex, a `uint32` index count and the `uint32`
  indices. `MeshFormatError` is raised for truncated or empty data.
  `Mesh.screen_ratio_from_ndc(ndcs)` takes the vertices already projected
  to normalised device coordinates and returns the share of the screen
  covered by front-facing triangles whose depths lie in `[0, 1]`, each
  clipped to the view square. The helpers `polygon_area`, `clip_polygon`
  and `clipped_triangle_area` can also be used on their own.
- `pcstream.http`: `get_to_buffer(url, version)` downloads a resource
  over HTTP/1.1 or HTTP/2 (see `HttpVersion`), following up to 50
  redirects without verifying certificates. It returns a `Download` with
  the body, the status code and the average speed in bytes per second.
  Error statuses are returned, not raised; `HttpFetchError` is raised
  when the transfer itself fails.
- `pcstream.mpd`: generates a DASH manifest. `MpdOptions` holds the
  settings, `build_mpd(options)` returns the manifest as an
  `xml.etree.ElementTree.Element`, and `write_mpd(options)` writes it to
  `options.output_file`. Each representation's bandwidth is estimated
  from the sizes of its segment files already on disk
  (`calculate_total_bytes`, `file_size`, `substitute_placeholders`).

## Example

```python
import random

from pcstream.bandwidth import HarmonicBandwidthEstimator
from pcstream.lod_selector import LodSelector

estimator = HarmonicBandwidthEstimator()
estimator.post([1000, 2000, 4000])
bandwidth = estimator.get()

metadata = "cost value\n100 1\n300 2\n100 1\n300 2\n"
selector = LodSelector()
selector.rng = random.Random(0)
selector.post(2, 2, metadata, [1.0, 0.5], bandwidth)
print(selector.get())
```

## Generating a manifest

The `genmpd` command writes an MPD manifest describing the segment files
in the current directory:

```
genmpd --seq-count 10 --rep-count 5 --fps 30 --duration 10000 \
       --segment-duration 30 --output output.mpd
```

| Option                     | Default                                                     |
|----------------------------|-------------------------------------------------------------|
| `-d`, `--duration`         | `10000` (total duration, ms)                                |
| `-r`, `--rep-count`        | `5` (representations per adaptation set)                    |
| `-s`, `--seq-count`        | `10` (adaptation sets)                                      |
| `-p`, `--profile`          | `urn:mpeg:dash:profile:full:2011`                           |
| `--min-buffer-time`        | `1000` (ms)                                                 |
| `--mime-type`              | `video/mp5`                                                 |
| `-f`, `--fps`              | `30` (also used as the timescale)                           |
| `-t`, `--segment-duration` | `30` (timescale units, at least one second of frames)       |
| `-c`, `--codec`            | `vpcc`                                                      |
| `-o`, `--output`           | `output.mpd`                                                |
| `-m`, `--media-template`   | `$AdaptationSetID$.seg$Number%05d$.r$RepresentationID$.bin` |
| `-i`, `--init-template`    | `$AdaptationSetID$.init.r$RepresentationID$.bin`            |

Run `genmpd --help` for the full list.

## What the package does not do

- It has no streaming client command: the pieces above are a library,
  and nothing here runs a session that requests segments, decodes them
  or renders them.
- It does not decode point cloud video; there is no codec.
- It does not read or write PLY files; meshes are handled only in their
  compact binary form.
- It does not estimate the viewport or build projection matrices:
  `Mesh.screen_ratio_from_ndc` expects vertices that are already
  projected.