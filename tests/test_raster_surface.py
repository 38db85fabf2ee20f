from __future__ import annotations

import math
import unittest

import numpy as np

from pillbadge_raster.canvas import composite, new_canvas, parse_color, shift_mask
from pillbadge_raster.surface import RasterSurface
from pillbadge_ui.geometry import Point, Rect, Size
from pillbadge_ui.renderer import BadgeRenderer
from pillbadge_ui.style import BadgeStyle, FontSpec
from pillbadge_ui.surface import TextMeasurer


class _FixedMeasurer(TextMeasurer):
    def measure_text(self, text: str, font: FontSpec) -> Size:
        return Size(8.0 * len(text), 16.0)


# invisible text keeps pixel assertions independent of installed fonts
_NO_TEXT = {"text_color": "#FFFFFF00", "alignment": "center"}


class CanvasTests(unittest.TestCase):
    def test_parse_color_variants(self) -> None:
        self.assertEqual(parse_color("#FF0000"), (255, 0, 0, 255))
        self.assertEqual(parse_color("#00000080"), (0, 0, 0, 128))
        self.assertEqual(parse_color((1, 2, 3, 4)), (1, 2, 3, 4))
        self.assertEqual(parse_color((1.0, 1.0, 1.0, 0.5)), (255, 255, 255, 128))
        with self.assertRaises(ValueError):
            parse_color("red")
        with self.assertRaises(ValueError):
            parse_color((300, 0, 0, 255))

    def test_composite_over_transparent_takes_source(self) -> None:
        dst = new_canvas(2, 1)
        coverage = np.array([[1.0, 0.0]], dtype=np.float32)
        composite(dst, coverage, (10, 20, 30, 255))
        self.assertEqual(tuple(dst[0, 0]), (10, 20, 30, 255))
        self.assertEqual(tuple(dst[0, 1]), (0, 0, 0, 0))

    def test_shift_mask_moves_and_zero_fills(self) -> None:
        mask = np.zeros((4, 4), dtype=np.float32)
        mask[0, 0] = 1.0
        moved = shift_mask(mask, 2, 3)
        self.assertEqual(moved[3, 2], 1.0)
        self.assertEqual(float(moved.sum()), 1.0)
        self.assertEqual(float(shift_mask(mask, 5, 0).sum()), 0.0)


class RasterPathTests(unittest.TestCase):
    def test_path_bounding_box_is_exact_for_arcs(self) -> None:
        surface = RasterSurface(10, 10)
        path = surface.new_path()
        path.move_to(5.0, 0.0)
        path.add_arc(5.0, 5.0, 5.0, 3 * math.pi / 2, math.pi / 2, True)
        box = path.bounding_box()
        self.assertAlmostEqual(box.x, 0.0)
        self.assertAlmostEqual(box.height, 10.0)
        self.assertAlmostEqual(box.width, 5.0)
        path.release()

    def test_released_paths_are_tracked_and_unusable(self) -> None:
        surface = RasterSurface(10, 10)
        path = surface.new_path()
        self.assertEqual(surface.live_path_count, 1)
        path.release()
        self.assertEqual(surface.live_path_count, 0)
        with self.assertRaisesRegex(RuntimeError, "after release"):
            path.line_to(1.0, 1.0)

    def test_released_gradients_are_tracked_and_unusable(self) -> None:
        surface = RasterSurface(4, 4)
        gradient = surface.new_linear_gradient(((0.0, (1.0, 1.0, 1.0, 1.0)), (1.0, (0.0, 0.0, 0.0, 1.0))))
        self.assertEqual(surface.live_gradient_count, 1)
        gradient.release()
        gradient.release()
        self.assertEqual(surface.live_gradient_count, 0)
        with self.assertRaisesRegex(RuntimeError, "after release"):
            surface.draw_linear_gradient(gradient, Point(0.0, 0.0), Point(0.0, 4.0))


class RasterSurfaceTests(unittest.TestCase):
    def _draw(self, surface: RasterSurface, **style_kwargs) -> None:
        style = BadgeStyle(**{**_NO_TEXT, **style_kwargs})
        BadgeRenderer(measurer=_FixedMeasurer()).draw(
            surface, Rect(0.0, 0.0, float(surface.width), float(surface.height)), 5, style
        )

    def test_capsule_interior_is_filled_and_outside_is_clear(self) -> None:
        surface = RasterSurface(40, 30)
        self._draw(surface, fill_color="#FF0000FF")
        # badge 18x18 centred at offset (11, 6)
        self.assertEqual(tuple(surface.pixels[15, 20]), (255, 0, 0, 255))
        self.assertEqual(tuple(surface.pixels[15, 13]), (255, 0, 0, 255))
        self.assertEqual(tuple(surface.pixels[2, 2]), (0, 0, 0, 0))
        self.assertEqual(tuple(surface.pixels[6, 11]), (0, 0, 0, 0))
        self.assertEqual(surface.state_depth, 0)
        self.assertEqual(surface.live_path_count, 0)

    def test_shine_brightens_top_but_not_bottom(self) -> None:
        surface = RasterSurface(40, 30)
        self._draw(surface, fill_color="#FF0000FF", shine_enabled=True)
        top = surface.pixels[9, 20]
        bottom = surface.pixels[21, 20]
        self.assertGreater(int(top[1]), 50)
        self.assertEqual(tuple(bottom), (255, 0, 0, 255))
        self.assertIsNone(surface.state.clip)
        self.assertEqual(surface.live_gradient_count, 0)

    def test_shadow_darkens_below_badge(self) -> None:
        plain = RasterSurface(40, 34)
        self._draw(plain, fill_color="#FF0000FF")
        shadowed = RasterSurface(40, 34)
        self._draw(
            shadowed,
            fill_color="#FF0000FF",
            shadow_enabled=True,
            shadow_offset=(0.0, 3.0),
            shadow_color="#000000FF",
        )
        # badge spans rows 8..25; row 27 is below it
        self.assertEqual(int(plain.pixels[27, 20][3]), 0)
        self.assertGreater(int(shadowed.pixels[27, 20][3]), 0)
        self.assertIsNone(shadowed.state.shadow)

    def test_stroke_paints_outline_color(self) -> None:
        surface = RasterSurface(40, 30)
        self._draw(surface, fill_color="#FF0000FF", stroke_color="#0000FFFF", stroke_width=2.0)
        # inflated 19x19 at offset (10, 6); capsule spans x 10..28 at row 15
        edge = surface.pixels[15, 10]
        self.assertGreater(int(edge[2]), 100)
        self.assertEqual(tuple(surface.pixels[15, 19]), (255, 0, 0, 255))

    def test_restore_without_save_raises(self) -> None:
        surface = RasterSurface(4, 4)
        with self.assertRaisesRegex(RuntimeError, "without matching save_state"):
            surface.restore_state()

    def test_gradient_draws_before_start_only_when_asked(self) -> None:
        stops = ((0.0, (1.0, 1.0, 1.0, 1.0)), (1.0, (1.0, 1.0, 1.0, 0.0)))
        clipped = RasterSurface(1, 10)
        gradient = clipped.new_linear_gradient(stops)
        clipped.draw_linear_gradient(gradient, Point(0.5, 5.0), Point(0.5, 10.0))
        self.assertEqual(int(clipped.pixels[0, 0][3]), 0)
        extended = RasterSurface(1, 10)
        extended.draw_linear_gradient(gradient, Point(0.5, 5.0), Point(0.5, 10.0), draws_before_start=True)
        self.assertEqual(int(extended.pixels[0, 0][3]), 255)
        self.assertGreater(int(extended.pixels[6, 0][3]), int(extended.pixels[9, 0][3]))

    def test_real_font_measurement_grows_with_digits(self) -> None:
        surface = RasterSurface(1, 1)
        renderer = BadgeRenderer(measurer=surface)
        style = BadgeStyle()
        nine = renderer.measure(9, style)
        ten = renderer.measure(10, style)
        self.assertGreaterEqual(ten.width, nine.width)
        self.assertEqual(nine.height % 2, 0)
        self.assertEqual(renderer.measure(9, style), nine)

    def test_text_is_drawn_in_text_color(self) -> None:
        surface = RasterSurface(60, 40)
        style = BadgeStyle(fill_color="#00000000", text_color="#00FF00FF", alignment="center")
        BadgeRenderer(measurer=surface).draw(surface, Rect(0.0, 0.0, 60.0, 40.0), 88, style)
        green = surface.pixels[:, :, 1]
        self.assertGreater(int(green.max()), 0)
        self.assertEqual(int(surface.pixels[:, :, 0].max()), 0)


if __name__ == "__main__":
    unittest.main()
