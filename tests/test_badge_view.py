from __future__ import annotations

from dataclasses import FrozenInstanceError
import unittest

from pillbadge_ui.geometry import Rect, Size
from pillbadge_ui.renderer import BadgeRenderer
from pillbadge_ui.style import BadgeStyle, FontSpec
from pillbadge_ui.surface import TextMeasurer
from pillbadge_ui.view import BadgeState, BadgeView


class _CountingMeasurer(TextMeasurer):
    def __init__(self) -> None:
        self.measured: list[str] = []

    def measure_text(self, text: str, font: FontSpec) -> Size:
        self.measured.append(text)
        return Size(8.0 * len(text), 16.0)


class _NullSurface:
    """Accepts any drawing call and ignores it."""

    def __init__(self, measurer: _CountingMeasurer) -> None:
        self._measurer = measurer
        self.released = 0

    def measure_text(self, text: str, font: FontSpec) -> Size:
        return self._measurer.measure_text(text, font)

    def new_path(self):
        surface = self

        class _Path:
            def __getattr__(self, name):
                return lambda *args, **kwargs: None

            def release(self) -> None:
                surface.released += 1

        return _Path()

    def __getattr__(self, name):
        return lambda *args, **kwargs: None


class BadgeStateTests(unittest.TestCase):
    def test_hidden_only_at_zero_when_flag_set(self) -> None:
        self.assertTrue(BadgeState(value=0, style=BadgeStyle(hide_when_zero=True)).hidden)
        self.assertFalse(BadgeState(value=1, style=BadgeStyle(hide_when_zero=True)).hidden)
        self.assertFalse(BadgeState(value=0, style=BadgeStyle(hide_when_zero=False)).hidden)

    def test_state_is_an_immutable_snapshot(self) -> None:
        state = BadgeState(value=3)
        with self.assertRaises(FrozenInstanceError):
            state.value = 123  # type: ignore[misc]


class BadgeViewTests(unittest.TestCase):
    def _view(self, **style_kwargs) -> tuple[BadgeView, _CountingMeasurer]:
        measurer = _CountingMeasurer()
        view = BadgeView(
            renderer=BadgeRenderer(measurer=measurer),
            frame=Rect(5.0, 7.0, 100.0, 100.0),
            initial_state=BadgeState(style=BadgeStyle(**style_kwargs)),
        )
        return view, measurer

    def test_initial_measure_sizes_frame_and_hides_zero(self) -> None:
        view, _ = self._view()
        self.assertTrue(view.hidden)
        self.assertEqual(view.display_size, Size(18.0, 18.0))
        self.assertEqual(view.frame, Rect(5.0, 7.0, 18.0, 18.0))

    def test_set_value_remeasures_and_requests_redraw(self) -> None:
        view, _ = self._view()
        view.needs_display = False
        self.assertTrue(view.set_value(123))
        self.assertFalse(view.hidden)
        self.assertTrue(view.needs_display)
        self.assertEqual(view.display_size, Size(34.0, 18.0))
        self.assertEqual(view.frame, Rect(5.0, 7.0, 34.0, 18.0))
        self.assertEqual(view.size_that_fits(Size(500.0, 500.0)), Size(34.0, 18.0))

    def test_initial_state_is_measured(self) -> None:
        view = BadgeView(
            renderer=BadgeRenderer(measurer=_CountingMeasurer()),
            initial_state=BadgeState(value=123),
        )
        self.assertFalse(view.hidden)
        self.assertEqual(view.display_size, Size(34.0, 18.0))
        self.assertEqual(view.frame, Rect(0.0, 0.0, 34.0, 18.0))

    def test_display_size_tracks_every_state_change(self) -> None:
        view, _ = self._view()
        for value in (7, 123, 0, 10000, 5):
            view.set_value(value)
            self.assertEqual(view.display_size, view.renderer.measure(value, view.style), msg=value)
        view.set_style(view.style.with_overrides(text_format="05d"))
        self.assertEqual(view.display_size, view.renderer.measure(5, view.style))
        self.assertEqual(view.display_size, Size(50.0, 18.0))

    def test_state_can_only_change_through_setters(self) -> None:
        view, _ = self._view()
        before = view.state
        with self.assertRaises(FrozenInstanceError):
            view.state.value = 123  # type: ignore[misc]
        with self.assertRaises(AttributeError):
            view.state = BadgeState(value=123)  # type: ignore[misc]
        self.assertIs(view.state, before)
        self.assertEqual(view.display_size, Size(18.0, 18.0))
        view.set_value(123)
        self.assertEqual(before.value, 0)
        self.assertEqual(view.state.value, 123)
        self.assertEqual(view.display_size, Size(34.0, 18.0))

    def test_setting_same_value_is_a_no_op(self) -> None:
        view, measurer = self._view()
        view.set_value(3)
        calls = len(measurer.measured)
        view.needs_display = False
        self.assertFalse(view.set_value(3))
        self.assertFalse(view.needs_display)
        self.assertEqual(len(measurer.measured), calls)

    def test_color_change_redraws_without_remeasure(self) -> None:
        view, measurer = self._view()
        calls = len(measurer.measured)
        self.assertTrue(view.set_style(view.style.with_overrides(fill_color="#00FF00FF")))
        self.assertTrue(view.needs_display)
        self.assertEqual(len(measurer.measured), calls)

    def test_pad_change_remeasures(self) -> None:
        view, measurer = self._view()
        calls = len(measurer.measured)
        view.set_style(view.style.with_overrides(pad=6))
        self.assertEqual(len(measurer.measured), calls + 1)
        self.assertEqual(view.display_size, Size(22.0, 22.0))

    def test_hide_when_zero_toggle_updates_hidden(self) -> None:
        view, _ = self._view()
        self.assertTrue(view.hidden)
        view.set_style(view.style.with_overrides(hide_when_zero=False))
        self.assertFalse(view.hidden)

    def test_hidden_view_draws_nothing(self) -> None:
        view, measurer = self._view()
        surface = _NullSurface(measurer)
        self.assertIsNone(view.draw(surface))
        self.assertFalse(view.needs_display)
        self.assertEqual(surface.released, 0)

    def test_visible_view_draws_into_own_bounds(self) -> None:
        view, measurer = self._view()
        view.set_value(42)
        surface = _NullSurface(measurer)
        plan = view.draw(surface)
        self.assertIsNotNone(plan)
        assert plan is not None
        self.assertEqual(plan.text, "42")
        self.assertEqual(plan.offset.x, 0.0)
        self.assertEqual(surface.released, 1)


if __name__ == "__main__":
    unittest.main()
