import sys
from io import BytesIO
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, override_settings
from PIL import Image

from avatars.colors import BLACK, WHITE, Color, avatar_background_color, avatar_colors, avatar_palette, mix_palette
from avatars.exceptions import AvatarRenderingError
from avatars.rendering import avatar_text, render_raster_png, render_svg, render_vector_png


class AvatarTextTests(SimpleTestCase):
    def test_initials(self) -> None:
        cases = {
            "Alice Liddell": "AL",
            "alice": "A",
            "Alice Pleasance Liddell": "AP",
            "émile zola": "ÉZ",
            "  bob  ": "B",
            "": "?",
            "   ": "?",
        }
        for display_name, expected in cases.items():
            with self.subTest(display_name=display_name):
                self.assertEqual(avatar_text(display_name), expected)


class AvatarColorTests(SimpleTestCase):
    def test_palette_mixes_three_ramps(self) -> None:
        palette = avatar_palette()

        self.assertEqual(len(palette), 18)
        self.assertEqual(palette[0], Color(182, 70, 157))
        self.assertEqual(palette[6], Color(221, 203, 85))
        self.assertEqual(palette[12], Color(0, 130, 201))

    def test_mix_palette_steps_towards_end_color(self) -> None:
        ramp = mix_palette(6, Color(182, 70, 157), Color(221, 203, 85))

        self.assertEqual(len(ramp), 6)
        self.assertEqual(ramp[1], Color(188, 92, 145))
        self.assertNotIn(Color(221, 203, 85), ramp)

    def test_md5_like_values_are_not_rehashed(self) -> None:
        self.assertEqual(avatar_background_color("0" * 32), avatar_palette()[0])
        self.assertEqual(avatar_background_color("F" * 32), avatar_palette()[12])

    def test_background_color_is_deterministic(self) -> None:
        color = avatar_background_color("Alice Liddell")

        self.assertEqual(color, avatar_background_color("Alice Liddell"))
        self.assertEqual(color, avatar_background_color("alice liddell"))
        self.assertIn(color, avatar_palette())

    def test_theme_blends_background(self) -> None:
        base = Color(182, 70, 157)

        self.assertEqual(base.alpha_blending(0.1, WHITE), Color(247, 236, 245))
        self.assertEqual(base.alpha_blending(0.1, BLACK), Color(18, 7, 15))
        self.assertEqual(base.hex, "b6469d")

        text_light, background_light = avatar_colors("Alice Liddell", False)
        text_dark, background_dark = avatar_colors("Alice Liddell", True)
        self.assertEqual(text_light, text_dark)
        self.assertNotEqual(background_light, background_dark)


class SvgRenderingTests(SimpleTestCase):
    def test_svg_is_sized_and_colored(self) -> None:
        text_color, background = avatar_colors("Alice Liddell", False)

        svg = render_svg("Alice Liddell", 64, False)

        self.assertIn('width="64" height="64"', svg)
        self.assertIn('viewBox="0 0 500 500"', svg)
        self.assertIn(f'fill="#{background.hex}"', svg)
        self.assertIn(f"fill:#{text_color.hex}", svg)
        self.assertIn(">AL</text>", svg)

    def test_svg_escapes_text(self) -> None:
        svg = render_svg("<b> x", 32, True)

        self.assertIn("&lt;X</text>", svg)
        self.assertNotIn("<b>", svg)

    def test_vector_png_uses_cairosvg(self) -> None:
        svg2png = MagicMock(return_value=b"\x89PNG fake")

        with patch.dict(sys.modules, {"cairosvg": SimpleNamespace(svg2png=svg2png)}):
            data = render_vector_png("Alice Liddell", 48, False)

        self.assertEqual(data, b"\x89PNG fake")
        kwargs = svg2png.call_args.kwargs
        self.assertEqual(kwargs["output_width"], 48)
        self.assertEqual(kwargs["output_height"], 48)
        self.assertIn(b"<svg", kwargs["bytestring"])

    def test_vector_png_is_none_when_cairosvg_is_unavailable(self) -> None:
        with patch.dict(sys.modules, {"cairosvg": None}):
            self.assertIsNone(render_vector_png("Alice Liddell", 48, False))

    def test_vector_png_is_none_when_conversion_fails(self) -> None:
        svg2png = MagicMock(side_effect=ValueError("bad svg"))

        with (
            patch.dict(sys.modules, {"cairosvg": SimpleNamespace(svg2png=svg2png)}),
            patch("avatars.rendering.logger.warning") as warning_mock,
        ):
            self.assertIsNone(render_vector_png("Alice Liddell", 48, False))

        warning_mock.assert_called_once()
        extra = warning_mock.call_args.kwargs.get("extra") or {}
        self.assertEqual(extra.get("event"), "avatars.placeholder.vector_failed")
        self.assertEqual(extra.get("outcome"), "fallback")


class RasterRenderingTests(SimpleTestCase):
    def test_raster_png_has_requested_size_and_background(self) -> None:
        for dark_theme in (False, True):
            with self.subTest(dark_theme=dark_theme):
                _text_color, background = avatar_colors("Alice Liddell", dark_theme)

                data = render_raster_png("Alice Liddell", 64, dark_theme)

                image = Image.open(BytesIO(data))
                self.assertEqual(image.format, "PNG")
                self.assertEqual(image.size, (64, 64))
                self.assertEqual(image.convert("RGB").getpixel((0, 0)), background.rgb)

    def test_raster_png_is_deterministic(self) -> None:
        self.assertEqual(
            render_raster_png("Alice Liddell", 32, False),
            render_raster_png("Alice Liddell", 32, False),
        )

    def test_raster_png_draws_text(self) -> None:
        _text_color, background = avatar_colors("Alice Liddell", False)

        image = Image.open(BytesIO(render_raster_png("Alice Liddell", 128, False))).convert("RGB")

        colors = {color for _count, color in image.getcolors(maxcolors=128 * 128)}
        self.assertGreater(len(colors - {background.rgb}), 0)

    @override_settings(AVATAR_PLACEHOLDER_FONT_PATH="/nonexistent/avatar-font.ttf")
    def test_unreadable_font_is_a_rendering_error(self) -> None:
        with self.assertRaises(AvatarRenderingError):
            render_raster_png("Alice Liddell", 32, False)
