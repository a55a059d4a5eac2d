"""
HEX Grid Mesher

A single-file Python CLI tool that computes the gridline lattice of a
hexagonal tiling over a square region, walks it into a zigzag vertex strip
for wireframe rendering, and rasterises that wireframe to a PNG via Pillow.
It can also snap arbitrary points to the grid's staggered hexagon lattice.

Usage:
    python hexmesh.py --debug
    python hexmesh.py --divisions 5 --centered false --antialias off
    python hexmesh.py --snap 0.3,0.1 --snap -0.4,0.25
    python hexmesh.py --import_settings settings.json
    python hexmesh.py --export_settings settings.json
"""

import argparse
import json
import math
import os
import re
import sys
from typing import Dict, List, NamedTuple, Tuple

from PIL import Image, ImageColor, ImageDraw


SIN60: float = math.sqrt(3) / 2.0


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class HexMeshError(ValueError):
    """Base class for grid and mesh generation errors."""


class InvalidArgumentError(HexMeshError):
    """Raised when grid generation parameters are out of range."""


class DegenerateInputError(HexMeshError):
    """Raised when rounding against a grid with zero spacing."""


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------
class GridPair(NamedTuple):
    """A (major, minor) pair of grid-space values."""

    major: float
    minor: float


class Vec3(NamedTuple):
    """A 3-D vertex. z is always 0 for meshes generated here."""

    x: float
    y: float
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        """Return the vertex as a plain (x, y, z) tuple."""
        return (self.x, self.y, self.z)


class Face(NamedTuple):
    """A triangle referencing three vertex indices."""

    a: int
    b: int
    c: int


def _round_half_away(value: float) -> float:
    """Round to the nearest integer, with halves going away from zero.

    Infinities and NaN are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


# ---------------------------------------------------------------------------
# HexGrid
# ---------------------------------------------------------------------------
class HexGrid:
    """Gridline lattice of a regular hexagonal tiling.

    The major axis is the direction along which adjacent hexagons share an
    edge; the minor axis is the one along which they share only a vertex.
    A grid is empty until :meth:`generate` is called, and each call replaces
    the previous lattice entirely.

    Attributes:
        major_axis: Major-axis gridline positions, strictly increasing.
        minor_axis: Minor-axis gridline positions, strictly increasing.
        origin: The caller-supplied (major, minor) origin.
        offset: Hexagon centre-to-centre spacing along each axis.
    """

    def __init__(self) -> None:
        """Initialise an empty grid."""
        self.major_axis: Tuple[float, ...] = ()
        self.minor_axis: Tuple[float, ...] = ()
        self.origin: GridPair = GridPair(0.0, 0.0)
        self.offset: GridPair = GridPair(0.0, 0.0)
        self.grid_size: float = 0.0
        self.divisions: int = 0
        self.centered: bool = False
        self.circumradius: float = 0.0

    def generate(
        self,
        origin_major: float,
        origin_minor: float,
        grid_size: float,
        n: int,
        centered: bool,
    ) -> Tuple[Tuple[float, ...], Tuple[float, ...], GridPair, GridPair]:
        """Generate the major and minor gridlines of the hexagonal lattice.

        In centered mode the lattice is symmetric about the origin and the
        minor hexagon count is forced odd, which outlines a "super-hexagon".
        In corner mode the lattice starts at the origin and fits as many
        hexagon columns as a square of side ``grid_size`` allows; a single
        division is a special case whose one hexagon spills past the square
        along the minor edge.

        Args:
            origin_major: Origin offset along the major axis.
            origin_minor: Origin offset along the minor axis.
            grid_size: Extent of the grid along the major axis. Must be > 0.
            n: Number of hexagons along the major axis. Must be >= 1.
            centered: Centre the grid on the origin instead of anchoring
                its corner there.

        Returns:
            A (major_axis, minor_axis, origin, offset) tuple.

        Raises:
            InvalidArgumentError: If ``n`` or ``grid_size`` is out of range,
                or an origin component is not finite.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise InvalidArgumentError(f"Division count must be an integer >= 1, got {n!r}")
        if not math.isfinite(grid_size) or grid_size <= 0:
            raise InvalidArgumentError(f"Grid size must be a finite value > 0, got {grid_size!r}")
        if not (math.isfinite(origin_major) and math.isfinite(origin_minor)):
            raise InvalidArgumentError(
                f"Grid origin must be finite, got ({origin_major!r}, {origin_minor!r})"
            )

        maj_step = grid_size / (n * 2)
        r = maj_step / SIN60
        min_step = r / 2.0

        self.origin = GridPair(float(origin_major), float(origin_minor))
        self.offset = GridPair(grid_size / n, 1.5 * r)
        self.grid_size = float(grid_size)
        self.divisions = n
        self.centered = bool(centered)
        self.circumradius = r

        # Shift to the lower corner of the lattice
        if centered:
            origin_major -= grid_size / 2.0
            origin_minor -= (r * (2 + 3 * (n // 2))) / 2.0

        # Three major graduations for the first hexagon, two for each after
        major = tuple(origin_major + maj_step * i for i in range((n * 2) + 1))

        if centered:
            # Odd counts give a super-hexagon, even ones a parallelogram
            m = n | 1
        elif n == 1:
            m = 1
        else:
            m = int(n / SIN60)

        # Every third raw graduation is a hexagon centre, not a vertex line
        minor = tuple(
            origin_minor + min_step * i
            for i in range((m * 3) + 2)
            if (i + 1) % 3 != 0
        )

        self.major_axis = major
        self.minor_axis = minor
        return self.major_axis, self.minor_axis, self.origin, self.offset

    def round(self, major: float, minor: float) -> Tuple[float, float]:
        """Snap a point to the nearest hexagon centre of the lattice.

        Each axis is rounded independently. Odd rows are staggered by half
        a major pitch, so their major coordinate is pushed half a unit away
        from the origin before rounding and pulled back afterwards. Near a
        hexagon boundary this can pick a centre that is not the Euclidean
        nearest one. Non-finite input, or input so large that scaling it
        overflows, comes back as inf or NaN rather than raising.

        Args:
            major: Major coordinate of the point.
            minor: Minor coordinate of the point.

        Returns:
            The snapped (major, minor) coordinates.

        Raises:
            DegenerateInputError: If the grid has zero spacing, i.e. it has
                not been generated.
        """
        if self.offset.major == 0 or self.offset.minor == 0:
            raise DegenerateInputError("Cannot round against a grid with zero offset")

        minor_index = _round_half_away((minor - self.origin.minor) / self.offset.minor)
        is_odd = math.isfinite(minor_index) and int(minor_index) % 2 != 0
        snapped_minor = minor_index * self.offset.minor + self.origin.minor

        scaled = (major - self.origin.major) / self.offset.major

        if is_odd:
            scaled += 0.5 if scaled > 0 else -0.5

        scaled = _round_half_away(scaled)

        if is_odd:
            scaled -= 0.5 if scaled > 0 else -0.5

        snapped_major = scaled * self.offset.major + self.origin.major
        return (snapped_major, snapped_minor)

    def bounds(self) -> Tuple[float, float, float, float]:
        """Return the nominal bounding square of the grid.

        Returns:
            A (major_min, minor_min, major_max, minor_max) tuple.
        """
        if self.centered:
            half = self.grid_size / 2.0
            return (
                self.origin.major - half, self.origin.minor - half,
                self.origin.major + half, self.origin.minor + half,
            )
        return (
            self.origin.major, self.origin.minor,
            self.origin.major + self.grid_size, self.origin.minor + self.grid_size,
        )


# ---------------------------------------------------------------------------
# HexMesh
# ---------------------------------------------------------------------------
class HexMesh:
    """Zigzag vertex strip built from a generated :class:`HexGrid`.

    Each run of ``major_size`` consecutive vertices is one strip along the
    major axis, alternating between two neighbouring minor gridlines.
    Vertices ``major_size`` apart lie on the same major gridline and form the
    cross lines along the minor axis.

    Attributes:
        grid: The grid the mesh reads its axes from.
        x_major: If True the major axis maps to x, otherwise to y.
        vertices: The generated vertex list.
        faces: Triangle list; not populated by any generation path.
        major_size: Number of major gridlines used by the last generate().
        minor_size: Number of minor gridlines used by the last generate().
    """

    def __init__(self, grid: HexGrid, x_major: bool = False) -> None:
        """Initialise an empty mesh over a grid.

        Args:
            grid: The grid to mesh. It is read, never modified.
            x_major: Place the major axis on x instead of y.
        """
        self.grid: HexGrid = grid
        self.x_major: bool = x_major
        self.vertices: List[Vec3] = []
        self.faces: List[Face] = []
        self.major_size: int = 0
        self.minor_size: int = 0

    @property
    def strip_count(self) -> int:
        """Return the number of major-axis strips in the vertex list."""
        return self.minor_size // 2

    def generate(self) -> List[Vec3]:
        """Walk the grid's axes into a zigzag vertex list.

        Returns:
            The vertex list, also stored on :attr:`vertices`.
        """
        major_axis = self.grid.major_axis
        minor_axis = self.grid.minor_axis
        major_size = len(major_axis)
        minor_size = len(minor_axis)

        vertices: List[Vec3] = []
        zig = False
        for j in range(0, minor_size - 1, 2):
            for i in range(major_size):
                minor = minor_axis[j] if zig else minor_axis[j + 1]
                major = major_axis[i]
                if self.x_major:
                    vertices.append(Vec3(major, minor, 0.0))
                else:
                    vertices.append(Vec3(minor, major, 0.0))
                zig = not zig

        self.vertices = vertices
        self.faces = []
        self.major_size = major_size
        self.minor_size = minor_size
        return self.vertices

    def tesselate(self, x: float, y: float, r: int) -> List[Vec3]:
        """Tesselate only the hexagons within ``r`` of the hexagon at (x, y).

        Not implemented.
        """
        raise NotImplementedError("Radius-bounded tesselation is not implemented")


# ---------------------------------------------------------------------------
# ColorParser
# ---------------------------------------------------------------------------
class ColorParser:
    """Resolves the wireframe colour options into RGB triples.

    Anything ``PIL.ImageColor`` understands is accepted (CSS names, #RGB,
    #RRGGBB, ``rgb(...)``, ``hsl(...)``), as is a bare 'R,G,B' triple such
    as '255,128,0'. Alpha channels are dropped; the canvas is RGB.
    """

    _TRIPLE = re.compile(r"(\d+)\s*,\s*(\d+)\s*,\s*(\d+)")

    def parse(self, color_str: str) -> Tuple[int, int, int]:
        """Parse a color string into an (R, G, B) tuple.

        Args:
            color_str: The color specification string.

        Returns:
            An (R, G, B) tuple of integers in [0, 255].

        Raises:
            ValueError: If the color string cannot be parsed.
        """
        text = color_str.strip()

        if "," in text and "(" not in text:
            match = self._TRIPLE.fullmatch(text)
            if match is None:
                raise ValueError(f"Expected 'R,G,B' with integer components, got '{color_str}'")
            rgb = tuple(int(c) for c in match.groups())
            if max(rgb) > 255:
                raise ValueError(f"RGB values must be in [0, 255]: '{color_str}'")
            return (rgb[0], rgb[1], rgb[2])

        try:
            rgb = ImageColor.getrgb(text)
        except ValueError:
            raise ValueError(f"Invalid color specification: '{color_str}'")
        return (rgb[0], rgb[1], rgb[2])

    def parse_options(self, args: argparse.Namespace, names: List[str]) -> Dict[str, Tuple[int, int, int]]:
        """Parse several colour options, naming the offending one on error.

        Args:
            args: Namespace holding the colour strings.
            names: Attribute names to parse, e.g. ``["color_line"]``.

        Returns:
            A mapping of option name to (R, G, B).

        Raises:
            ValueError: If any colour cannot be parsed.
        """
        colors = {}
        for name in names:
            try:
                colors[name] = self.parse(getattr(args, name))
            except ValueError as e:
                raise ValueError(f"--{name}: {e}")
        return colors


# ---------------------------------------------------------------------------
# WireframeRenderer
# ---------------------------------------------------------------------------
class WireframeRenderer:
    """Rasterises a :class:`HexMesh` wireframe onto a Pillow image.

    The mesh is drawn as points, major-axis line strips sliced out of the
    vertex list, and cross segments taken at a stride of ``major_size``.
    Geometry is drawn on a supersampled canvas and downsampled for
    anti-aliasing.
    """

    # Anti-alias scale factors.
    _AA_SCALES: Dict[str, int] = {
        "off": 1,
        "low": 2,
        "medium": 4,
        "high": 8,
    }

    # Canvas padding as a fraction of the smaller image dimension.
    _PADDING: float = 0.05

    def strip_ranges(self, mesh: HexMesh) -> List[Tuple[int, int]]:
        """Compute the (start, count) vertex slices drawn as line strips.

        When the strip count is odd the last strip drops its first and last
        vertex, which would otherwise dangle outside the outline.

        Args:
            mesh: A generated mesh.

        Returns:
            A list of (start index, vertex count) tuples.
        """
        major_size = mesh.major_size
        count = mesh.strip_count
        if count == 0:
            return []

        ranges = [(major_size * i, major_size) for i in range(count - 1)]
        if count % 2:
            ranges.append((major_size * (count - 1) + 1, major_size - 2))
        else:
            ranges.append((major_size * (count - 1), major_size))
        return ranges

    def cross_segments(self, mesh: HexMesh) -> List[Tuple[int, int]]:
        """Compute the vertex index pairs drawn as minor-axis cross lines.

        Args:
            mesh: A generated mesh.

        Returns:
            A list of (index, index) pairs into ``mesh.vertices``.
        """
        major_size = mesh.major_size
        total = len(mesh.vertices)
        count = mesh.strip_count
        segments: List[Tuple[int, int]] = []

        def pairs(column: int, first: int, n: int) -> None:
            for k in range(first, first + n - 1, 2):
                a = column + major_size * k
                b = column + major_size * (k + 1)
                if b < total:
                    segments.append((a, b))

        for j in range(0, major_size, 2):
            pairs(j, 0, count)

        count += count % 2
        for j in range(1, major_size, 2):
            pairs(j, 1, count - 2)

        return segments

    def render(
        self,
        mesh: HexMesh,
        width: int,
        height: int,
        line_width: int,
        point_size: int,
        color_line: Tuple[int, int, int],
        color_point: Tuple[int, int, int],
        color_reference: Tuple[int, int, int],
        color_background: Tuple[int, int, int],
        antialias: str,
        reference: bool,
    ) -> Tuple[Image.Image, int]:
        """Render the mesh wireframe to an image.

        Args:
            mesh: A generated mesh.
            width: Target image width in pixels.
            height: Target image height in pixels.
            line_width: Stroke width in pixels (0 = no lines).
            point_size: Vertex dot diameter in pixels (0 = no dots).
            color_line: Wireframe colour as (R, G, B).
            color_point: Vertex dot colour as (R, G, B).
            color_reference: Reference square colour as (R, G, B).
            color_background: Background colour as (R, G, B).
            antialias: Anti-alias level ('off', 'low', 'medium', 'high').
            reference: Whether to draw the grid's nominal bounding square
                and its diagonals.

        Returns:
            A tuple of (PIL Image at target resolution, line segment count).
        """
        k = self._AA_SCALES.get(antialias, 1)
        sw = width * k
        sh = height * k
        s_lw = line_width * k
        s_ps = point_size * k

        square: List[Tuple[float, float]] = []
        if reference:
            a_min, b_min, a_max, b_max = mesh.grid.bounds()
            corners = [(a_min, b_min), (a_min, b_max), (a_max, b_max), (a_max, b_min)]
            for major, minor in corners:
                square.append((major, minor) if mesh.x_major else (minor, major))

        to_pixel = self._viewport(
            [(v.x, v.y) for v in mesh.vertices] + square, sw, sh
        )
        pixels = [to_pixel(v.x, v.y) for v in mesh.vertices]

        img = Image.new("RGB", (sw, sh), color_background)
        draw = ImageDraw.Draw(img)

        if square:
            outline = [to_pixel(x, y) for x, y in square]
            draw.line(outline + [outline[0]], fill=color_reference, width=max(k, 1))
            # Diagonals mark the square's centre
            draw.line([outline[0], outline[2]], fill=color_reference, width=max(k, 1))
            draw.line([outline[1], outline[3]], fill=color_reference, width=max(k, 1))

        segment_count = 0
        if s_lw > 0:
            for start, count in self.strip_ranges(mesh):
                strip = pixels[start:start + count]
                if len(strip) > 1:
                    draw.line(strip, fill=color_line, width=s_lw)
                    segment_count += len(strip) - 1

            for a, b in self.cross_segments(mesh):
                draw.line([pixels[a], pixels[b]], fill=color_line, width=s_lw)
                segment_count += 1

        if s_ps > 0:
            radius = s_ps / 2.0
            for px, py in pixels:
                draw.ellipse(
                    [px - radius, py - radius, px + radius, py + radius],
                    fill=color_point,
                )

        if k > 1:
            img = img.resize((width, height), Image.LANCZOS)

        return img, segment_count

    def _viewport(self, points: List[Tuple[float, float]], w: int, h: int):
        """Build a grid-to-pixel transform fitting ``points`` into the canvas.

        Grid y points up, so image rows are flipped.
        """
        if not points:
            return lambda x, y: (w / 2.0, h / 2.0)

        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        x_min, x_max = min(xs), max(xs)
        y_min, y_max = min(ys), max(ys)
        pad = min(w, h) * self._PADDING

        span = max(x_max - x_min, y_max - y_min)
        scale = min(w - 2 * pad, h - 2 * pad) / span if span > 0 else 1.0
        cx = (x_min + x_max) / 2.0
        cy = (y_min + y_max) / 2.0

        def to_pixel(x: float, y: float) -> Tuple[float, float]:
            return (w / 2.0 + (x - cx) * scale, h / 2.0 - (y - cy) * scale)

        return to_pixel


# ---------------------------------------------------------------------------
# SettingsManager
# ---------------------------------------------------------------------------
class SettingsManager:
    """Saves and restores a mesher run's parameters as JSON.

    Imported values override argparse defaults but never a flag passed
    explicitly on the command line. JSON carries no argparse typing, so
    every imported value is checked against the option's type first: a
    string such as ``"false"`` must not slip through as a truthy value.
    """

    # Persisted option name -> expected type.
    _SETTING_TYPES: Dict[str, type] = {
        "origin_major": float,
        "origin_minor": float,
        "grid_size": float,
        "divisions": int,
        "centered": bool,
        "x_major": bool,
        "width": int,
        "height": int,
        "line_width": int,
        "point_size": int,
        "color_line": str,
        "color_point": str,
        "color_reference": str,
        "color_background": str,
        "reference": bool,
        "antialias": str,
        "file": str,
        "debug": bool,
    }

    def export_settings(self, params: argparse.Namespace, path: str) -> None:
        """Write the persisted options of ``params`` to a JSON file.

        Raises:
            IOError: If the file cannot be written.
        """
        data = {key: getattr(params, key, None) for key in self._SETTING_TYPES}
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    def import_settings(self, path: str) -> Dict:
        """Load a settings object from a JSON file.

        Args:
            path: Path to the JSON settings file.

        Returns:
            The decoded settings dictionary.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            ValueError: If the top-level JSON value is not an object.
        """
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must hold a JSON object, got {type(data).__name__}")
        return data

    def merge_settings(
        self,
        defaults: argparse.Namespace,
        json_settings: Dict,
        explicit_keys: set,
    ) -> argparse.Namespace:
        """Apply imported settings that were not given explicitly on the CLI.

        Unknown keys are ignored.

        Args:
            defaults: The argparse Namespace with default/CLI values.
            json_settings: Dictionary loaded from JSON.
            explicit_keys: Set of parameter names explicitly provided on CLI.

        Returns:
            The updated Namespace.

        Raises:
            ValueError: If an imported value does not fit its option's type.
        """
        for key in self._SETTING_TYPES:
            if key in json_settings and key not in explicit_keys:
                setattr(defaults, key, self._coerce(key, json_settings[key]))
        return defaults

    def _coerce(self, key: str, value):
        """Convert one imported value to its option's type."""
        kind = self._SETTING_TYPES[key]

        if kind is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in ("true", "false"):
                return value.strip().lower() == "true"
        elif kind is str:
            if isinstance(value, str):
                return value
        elif not isinstance(value, bool):
            # Numbers may arrive as JSON numbers or as numeric strings
            try:
                number = float(value)
            except (TypeError, ValueError):
                number = None
            if number is not None:
                if kind is float:
                    return number
                if number.is_integer():
                    return int(number)

        raise ValueError(f"Setting '{key}' expects {kind.__name__}, got {value!r}")


# ---------------------------------------------------------------------------
# Version helper
# ---------------------------------------------------------------------------
def _changelog_version(fallback: str = "0.0.0") -> str:
    """Read the highest version from CHANGELOG.md next to this script.

    Returns *fallback* when the file is missing or has no versioned headings.
    """
    changelog = os.path.join(os.path.dirname(os.path.abspath(__file__)), "CHANGELOG.md")
    try:
        with open(changelog, "r", encoding="utf-8") as fh:
            for line in fh:
                m = re.match(r"^##\s+\[(\d+\.\d+\.\d+)\]", line)
                if m:
                    return m.group(1)
    except OSError:
        pass
    return fallback


def _with_extension(path: str, ext: str) -> str:
    if not path.lower().endswith(ext):
        path += ext
    return path


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
class Application:
    """Top-level entry point for the HEX Grid Mesher.

    Owns the grid, mesh and renderer for one run and passes them explicitly
    between pipeline stages.
    """

    VERSION:      str = _changelog_version("1.2.0")
    BUILD_DATE:   str = "2026-10-19"
    TITLE:        str = "HEX Grid Mesher"
    AUTHOR:       str = "Allen Babb, Rohin Gosling"
    BANNER_WIDTH: int = 60

    def run(self) -> None:
        """Execute the full application pipeline.

        Parses CLI arguments, loads/exports settings, generates the grid and
        mesh, renders and saves the PNG, snaps any requested points, and
        prints debug information if enabled.

        Returns:
            None
        """
        args, explicit_keys = self._parse_args()

        if args.import_settings:
            args.import_settings = _with_extension(args.import_settings, ".json")
            try:
                manager = SettingsManager()
                json_data = manager.import_settings(args.import_settings)
                args = manager.merge_settings(args, json_data, explicit_keys)
            except FileNotFoundError:
                self._fail(f"Settings file not found: '{args.import_settings}'")
            except json.JSONDecodeError as e:
                self._fail(f"Malformed JSON in settings file: {e}")
            except ValueError as e:
                self._fail(f"Invalid settings file '{args.import_settings}': {e}")

        try:
            colors = ColorParser().parse_options(
                args, ["color_line", "color_point", "color_reference", "color_background"]
            )
        except ValueError as e:
            self._fail(str(e))

        valid_aa = {"off", "low", "medium", "high"}
        if args.antialias not in valid_aa:
            self._fail(f"Invalid antialias level '{args.antialias}'. "
                       f"Must be one of: {', '.join(sorted(valid_aa))}")

        grid = HexGrid()
        try:
            grid.generate(
                origin_major=args.origin_major,
                origin_minor=args.origin_minor,
                grid_size=args.grid_size,
                n=args.divisions,
                centered=args.centered,
            )
        except InvalidArgumentError as e:
            self._fail(str(e))

        # Only a validated parameter set is written out
        export_path = None
        if args.export_settings:
            export_path = _with_extension(args.export_settings, ".json")
            try:
                SettingsManager().export_settings(args, export_path)
            except IOError as e:
                self._fail(f"Cannot write settings file: {e}")

        mesh = HexMesh(grid, x_major=args.x_major)
        mesh.generate()

        renderer = WireframeRenderer()
        img, segment_count = renderer.render(
            mesh=mesh,
            width=args.width,
            height=args.height,
            line_width=args.line_width,
            point_size=args.point_size,
            color_line=colors["color_line"],
            color_point=colors["color_point"],
            color_reference=colors["color_reference"],
            color_background=colors["color_background"],
            antialias=args.antialias,
            reference=args.reference,
        )

        out_file = _with_extension(args.file, ".png")
        img.save(out_file, "PNG")
        file_size = os.path.getsize(out_file)

        self._print_banner()

        print(f"  Saved: {out_file} ({self._format_file_size(file_size)})")
        if export_path:
            print(f"  Saved: {export_path} ({self._format_file_size(os.path.getsize(export_path))})")

        for point in args.snap or []:
            major, minor = grid.round(*point)
            print(f"  Snap:  ({point[0]:g}, {point[1]:g}) -> ({major:.6f}, {minor:.6f})")

        if args.debug:
            self._print_debug(args, grid, mesh, renderer, segment_count)
        print()

    def _fail(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(1)

    def _parse_args(self) -> Tuple[argparse.Namespace, set]:
        """Parse CLI arguments and detect which were explicitly provided.

        Returns:
            A tuple of (parsed Namespace, set of explicitly-provided key names).
        """
        parser = self._build_parser()
        args = parser.parse_args()

        # Second parse with SUPPRESS defaults to detect explicit keys
        suppress_parser = self._build_parser(suppress_defaults=True)
        explicit_args = suppress_parser.parse_args()
        explicit_keys = set(vars(explicit_args).keys())

        return args, explicit_keys

    def _build_parser(self, suppress_defaults: bool = False) -> argparse.ArgumentParser:
        """Build the argparse ArgumentParser.

        Args:
            suppress_defaults: If True, set all defaults to SUPPRESS to
                detect explicitly-provided CLI args.

        Returns:
            A configured ArgumentParser.
        """
        banner = self._banner_text()

        class _BannerParser(argparse.ArgumentParser):
            """ArgumentParser that prints the banner before help text."""

            def print_help(self, file=None):
                if file is None:
                    file = sys.stdout
                file.write(banner + "\n\n")
                super().print_help(file)

        parser = _BannerParser(
            description="HEX Grid Mesher: generate and render hexagonal grid wireframes.",
        )

        def default(value):
            return argparse.SUPPRESS if suppress_defaults else value

        parser.add_argument("--origin_major", type=float, default=default(0.0),
                            help="Grid origin along the major axis (default: 0)")
        parser.add_argument("--origin_minor", type=float, default=default(0.0),
                            help="Grid origin along the minor axis (default: 0)")
        parser.add_argument("--grid_size", type=float, default=default(2.0),
                            help="Grid extent along the major axis (default: 2)")
        parser.add_argument("--divisions", type=int, default=default(9),
                            help="Hexagons along the major axis (default: 9)")
        parser.add_argument("--centered", nargs="?", const=True, default=default(True),
                            type=self._parse_bool_flag,
                            help="Centre the grid on the origin (default: true)")
        parser.add_argument("--x_major", nargs="?", const=True, default=default(False),
                            type=self._parse_bool_flag,
                            help="Draw the major axis horizontally (default: false)")
        parser.add_argument("--width", type=int, default=default(640),
                            help="Image width in pixels (default: 640)")
        parser.add_argument("--height", type=int, default=default(480),
                            help="Image height in pixels (default: 480)")
        parser.add_argument("--line_width", type=int, default=default(2),
                            help="Stroke width in pixels, 0 = no lines (default: 2)")
        parser.add_argument("--point_size", type=int, default=default(4),
                            help="Vertex dot diameter in pixels, 0 = no dots (default: 4)")
        parser.add_argument("--color_line", type=str, default=default("lime"),
                            help="Wireframe colour (default: lime)")
        parser.add_argument("--color_point", type=str, default=default("white"),
                            help="Vertex dot colour (default: white)")
        parser.add_argument("--color_reference", type=str, default=default("grey"),
                            help="Reference square colour (default: grey)")
        parser.add_argument("--color_background", type=str, default=default("black"),
                            help="Background colour (default: black)")
        parser.add_argument("--reference", nargs="?", const=True, default=default(True),
                            type=self._parse_bool_flag,
                            help="Draw the grid's bounding square (default: true)")
        parser.add_argument("--antialias", type=str, default=default("high"),
                            help="Anti-alias level: off, low, medium, high (default: high)")
        parser.add_argument("--file", type=str, default=default("hexmesh.png"),
                            help="Output PNG filename (default: hexmesh.png)")
        parser.add_argument("--snap", type=self._parse_point, action="append",
                            default=default(None), metavar="MAJOR,MINOR",
                            help="Snap a point to the grid and print it (repeatable)")
        parser.add_argument("--debug", nargs="?", const=True, default=default(False),
                            type=self._parse_bool_flag,
                            help="Enable debug output")
        parser.add_argument("--export_settings", type=str, default=default(None),
                            help="Export parameters to a JSON file")
        parser.add_argument("--import_settings", type=str, default=default(None),
                            help="Import parameters from a JSON file")

        return parser

    def _parse_bool_flag(self, value: str) -> bool:
        """Parse 'true'/'false' after a switch; a bare switch means true."""
        if isinstance(value, bool):
            return value
        if value.lower() not in ("true", "false"):
            raise argparse.ArgumentTypeError(f"Expected 'true' or 'false', got '{value}'")
        return value.lower() == "true"

    def _parse_point(self, value: str) -> Tuple[float, float]:
        """Parse a 'MAJOR,MINOR' pair of floats."""
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != 2:
            raise argparse.ArgumentTypeError(f"Point must be MAJOR,MINOR, got '{value}'")
        try:
            return (float(parts[0]), float(parts[1]))
        except ValueError:
            raise argparse.ArgumentTypeError(f"Point components must be numbers: '{value}'")

    def _banner_text(self) -> str:
        """Build the application banner as a string.

        Returns:
            The formatted banner string.
        """
        w = self.BANNER_WIDTH
        inner = w - 2  # space between │ and │
        lines = [
            "┌" + "─" * inner + "┐",
            f"│{'  Program:    ' + self.TITLE:<{inner}}│",
            f"│{'  Version:    ' + self.VERSION:<{inner}}│",
            f"│{'  Build Date: ' + self.BUILD_DATE:<{inner}}│",
            f"│{'  Author:     ' + self.AUTHOR:<{inner}}│",
            "└" + "─" * inner + "┘",
        ]
        return "\n".join(lines)

    def _print_banner(self) -> None:
        """Print the application banner to stdout."""
        print(self._banner_text())

    def _print_debug(
        self,
        args: argparse.Namespace,
        grid: HexGrid,
        mesh: HexMesh,
        renderer: WireframeRenderer,
        segment_count: int,
    ) -> None:
        """Print grid and mesh diagnostics to stdout.

        Args:
            args: The resolved parameters.
            grid: The generated grid.
            mesh: The generated mesh.
            renderer: The renderer used, for draw slice counts.
            segment_count: Number of line segments drawn.

        Returns:
            None
        """
        mode = "centered" if grid.centered else "corner"
        print(f"\n  Image size:       {args.width} x {args.height}")
        print(f"  Grid size:        {grid.grid_size}")
        print(f"  Divisions:        {grid.divisions} ({mode})")
        print(f"  Origin:           ({grid.origin.major:g}, {grid.origin.minor:g})")
        print(f"  Offset:           ({grid.offset.major:.6f}, {grid.offset.minor:.6f})")
        print(f"  Circumradius:     {grid.circumradius:.6f}")
        print(f"  Major axis:       {len(grid.major_axis)} lines "
              f"[{grid.major_axis[0]:.6f} .. {grid.major_axis[-1]:.6f}]")
        print(f"  Minor axis:       {len(grid.minor_axis)} lines "
              f"[{grid.minor_axis[0]:.6f} .. {grid.minor_axis[-1]:.6f}]")
        print(f"  Major on:         {'x' if mesh.x_major else 'y'}")
        print(f"  Vertices:         {len(mesh.vertices)}")
        print(f"  Strips:           {len(renderer.strip_ranges(mesh))}")
        print(f"  Cross segments:   {len(renderer.cross_segments(mesh))}")
        print(f"  Segments drawn:   {segment_count}")
        print(f"  Anti-alias:       {args.antialias}")

    def _format_file_size(self, size_bytes: int) -> str:
        """Format a file size in human-readable form (e.g. '1.23 MB')."""
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.2f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.2f} MB"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    """Main entry point for the HEX Grid Mesher."""
    if sys.stdout and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    app = Application()
    app.run()


if __name__ == "__main__":
    main()
