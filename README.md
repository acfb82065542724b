# raycaster

A compact ray tracer built on NumPy. Vectors are plain NumPy arrays.

## What is in it

- `raycaster.vecmath`: `vec3`, `normalize`, `random_tangents`, and
  `transform_point` / `transform_vector` for 4x4 affine matrices.
- `raycaster.ray`: the `Ray` dataclass (`org`, `dir`, `ndc`, `counter`, `t`,
  `hit`, `b1`, `b2`) with `hit_point`, `reflected`, `refracted` (None on
  total internal reflection) and `retrace`.
- `raycaster.bounding_box`: `BoundingBox` with `extend`, `extend_box`,
  `split`, `overlaps`, `clip` and `center`.
- Primitives, all derived from `raycaster.prim.Prim`: `Sphere`
  (`raycaster.sphere`), `Plane` (`raycaster.plane`), `Disc`
  (`raycaster.disc`, an annulus when given an inner radius) and `Triangle`
  (`raycaster.triangle`, with optional per-vertex texture coordinates and
  normals). Each provides `intersect`, `if_intersect`, `texture_coords`,
  `dp`, `bounding_box`, `normal`, `shading_normal`, `flip_normal`,
  `transform`, `wcs2ocs` and `ocs2wcs`.
- `raycaster.bsp`: `BSPTree` and `BSPNode` for faster intersection tests.
- `raycaster.boolean`: `BooleanPrim` combines two sets of primitives with
  `BoolOp.UNION`, `BoolOp.INTERSECTION` or `BoolOp.SUBTRACTION`.
- `raycaster.cameras`: `PerspectiveCamera`, `OrthographicCamera`,
  `EnvironmentCamera` (360-degree panoramas, optional stereo offset) and
  `ThinLensCamera` (depth of field around another camera). `init_ray(x, y,
  sample)` returns the primary ray through a pixel.
- `raycaster.lights`: `OmniLight`, `SpotLight`, `AreaLight` and `SkyLight`.
  `illuminate(ray)` turns a ray starting at a shaded point into a shadow ray
  and returns the incoming light, or None.
- `raycaster.sampler`: `RandomSampler` and `StratifiedSampler`, plus
  `naive_sample_disk`, `uniform_sample_disk`, `concentric_sample_disk`,
  `uniform_sample_hemisphere`, `cosine_sample_hemisphere`,
  `uniform_sample_regular_ngon` and `transform_sample_to_wcs`.
- `raycaster.perlin`: seeded `PerlinNoise` with `eval` and `eval_fbm`.
- `raycaster.gradient`: `Gradient` colour ramps with `add_color` and
  `color_at`.
- `raycaster.scene`: `Scene`, which holds primitives, lights and cameras and
  renders images.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Usage

A primitive's shader is any object with a `shade(ray)` method returning an
RGB colour in [0, 1]:

```python
import numpy as np

from raycaster.cameras import PerspectiveCamera
from raycaster.sampler import StratifiedSampler
from raycaster.scene import Scene
from raycaster.sphere import Sphere


class FlatShader:
    def __init__(self, color):
        self.color = np.array(color, dtype=float)

    def shade(self, ray):
        return self.color


scene = Scene(bg_color=(0.1, 0.1, 0.1))
scene.add(Sphere(FlatShader((1, 0, 0)), (0, 0, 5), 1.0))
scene.add(PerspectiveCamera((64, 48), pos=(0, 0, 0), dir=(0, 0, 1), up=(0, 1, 0), angle=60))

image = scene.render(StratifiedSampler(2))  # (48, 64, 3) uint8 array
depth = scene.render_depth()                # (48, 64) floats, inf where nothing is hit
```

`Scene.add` takes a primitive, a light, a camera (which becomes the active
one), or an iterable of primitives. For larger scenes call
`Scene.build_accel_structure()` after adding the geometry; from then on
intersection tests go through a BSP tree. A `bg_map` callable given to
`Scene` supplies the colour of rays that hit nothing.

## What it does not do

- It ships no shaders or materials: shading, and therefore the use of the
  lights, is up to the `shade(ray)` objects you attach to primitives.
- It has no textures beyond the `bg_map` callable, and no mesh or solid
  builders; solids are passed as plain iterables of primitives.
- It does not read or write image or scene files; `render` returns a NumPy
  array for you to save as you like.
- It has no command-line program.