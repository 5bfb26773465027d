# sbtrace

`sbtrace` is a recursive ray tracer for scenes written in the
SBT-raytracer scene description language (version 1.1 and below).

It renders:

- spheres, boxes, squares, cylinders, cones and triangle meshes
  (`sbtrace.shapes`, `sbtrace.trimesh`),
- nested transforms (`translate`, `rotate`, `scale` and `transform`),
- point lights with constant, linear and quadratic attenuation,
  directional lights, ambient light and hard shadows (`sbtrace.light`),
- Phong shading with emissive, ambient, diffuse and specular terms,
  with optional bilinearly sampled texture maps (`sbtrace.material`),
- mirror reflection and refraction up to a chosen recursion depth.

Intersection tests can be sped up with a BSP tree (`sbtrace.bsp`) over
all objects that have a bounding box.

## Scene files

A scene file starts with a version header, followed by a camera,
lights and geometry. `//` and `/* ... */` comments are allowed.

```
SBT-raytracer 1.0

camera {
    position = (0, 0, 4);
    viewdir = (0, 0, -1);
    updir = (0, 1, 0);
    fov = 45;
}

point_light {
    position = (3, 3, 3);
    color = (1, 1, 1);
}

ambient_light {
    color = (0.2, 0.2, 0.2);
}

translate(0, 0, -1,
    sphere {
        material = {
            name = "red";
            diffuse = (0.8, 0.2, 0.2);
            specular = (0.5, 0.5, 0.5);
            shininess = 32;
        }
    })

translate(1.5, 0, -1,
    box { material = red; })
```

A material given a name (`name = "red";`) can be used again later by
that name. A `specular` colour also serves as the reflective colour
unless `reflective` is given. A camera may use `look_at` instead of
`viewdir`, or be oriented with a `quaternian`.

## Rendering

`RayTracer` takes the maximum recursion depth for reflected and
refracted rays (default 0: no secondary rays), and whether to use the
BSP tree:

```python
from sbtrace.raytracer import RayTracer
from sbtrace.imageio import save_image

tracer = RayTracer(depth=3, bsp_enabled=True)
tracer.load_scene("scene.ray")

width, height = 200, 200
tracer.trace_setup(width, height)
for j in range(height):
    for i in range(width):
        tracer.trace_pixel(i, j)

# tracer.buffer holds rows bottom to top, three bytes (R, G, B) per pixel.
save_image("scene.png", tracer.buffer, width, height, ".png", 95)
```

`trace(x, y)` takes normalised window coordinates in `[0, 1]` and returns
the colour seen along that ray, clamped to `[0, 1]` in each channel;
`trace_pixel(i, j)` does the same for one pixel and stores it in the
buffer. `save_image` writes `.png` or `.jpg` files (the quality argument
applies to JPEG output); `load_image` reads any image Pillow can open
into the same bottom-up layout.

## Errors

`load_scene` lets errors propagate. Mistakes in a scene file raise
`ParserException` or its subclasses from `sbtrace.exceptions`; a
`SyntaxErrorException` has a `formatted_message` that shows the
offending line, a caret under the column where the problem was found,
and the line number. A texture that cannot be loaded raises
`TextureMapException` from `sbtrace.material`, and a missing scene file
raises `OSError`.

## What it does not do

`sbtrace` is a library only. It installs no command-line program and
has no interactive window or live preview; rendering is driven from
Python as shown above.