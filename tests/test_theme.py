"""Tests for yrepeat/theme.py: background colors."""

import pytest
import yaml

from yrepeat import theme


def test_parse_hex():
    assert theme.parse_hex("#FF0000") == (1.0, 0.0, 0.0, 1.0)
    assert theme.parse_hex("00ff00") == (0.0, 1.0, 0.0, 1.0)
    r, g, b, a = theme.parse_hex("#00000080")
    assert (r, g, b) == (0.0, 0.0, 0.0)
    assert a == 128 / 255


@pytest.mark.parametrize(
    "value",
    ["#12345", "#GGGGGG", "", "#1234567", "#0x0D0D", "#FF_FFF", "#+FFFFF", "#-00001", "12#3456", "##123456"],
)
def test_parse_hex_rejects_malformed(value):
    with pytest.raises(ValueError):
        theme.parse_hex(value)


def test_to_hex_only_writes_alpha_when_translucent():
    assert theme.to_hex((1.0, 0.0, 0.0, 1.0)) == "#FF0000"
    assert theme.to_hex((0.0, 0.0, 0.0, 0.5)) == "#00000080"


def test_single_color_background():
    t = theme.ThemeSettings(use_single_color=True, single_color="#646464")
    assert theme.background_colors(t) == ["#505050", "#646464", "#6E6E6E"]


def test_lighter_shade_is_clamped():
    t = theme.ThemeSettings(use_single_color=True, single_color="#F0F0F0")
    assert theme.background_colors(t)[-1] == "#FFFFFF"


def test_gradient_background_is_default(workspace):
    t = theme.load_theme(workspace)
    assert t.use_single_color is False
    assert theme.background_colors(t) == ["#0D0D26", "#1A264D"]


def test_setters_persist_in_settings(workspace):
    theme.set_single_color("#abcdef", workspace)
    theme.set_gradient_colors("#000000", "#ffffff", workspace)
    theme.set_use_single_color(True, workspace)

    t = theme.load_theme(workspace)
    assert t.single_color == "#ABCDEF"
    assert (t.gradient_start, t.gradient_end) == ("#000000", "#FFFFFF")
    assert t.use_single_color is True

    stored = yaml.safe_load((workspace / "settings.yaml").read_text(encoding="utf-8"))
    assert stored["timezone"] == "UTC"
    assert stored["theme"]["singleColor"] == "#ABCDEF"


def test_set_invalid_color_raises(workspace):
    with pytest.raises(ValueError):
        theme.set_single_color("blue", workspace)


def test_invalid_stored_color_falls_back(workspace):
    (workspace / "settings.yaml").write_text(
        yaml.dump({"theme": {"useSingleColor": True, "singleColor": "nope"}}), encoding="utf-8"
    )
    t = theme.load_theme(workspace)
    assert t.use_single_color is True
    assert t.single_color == theme.DEFAULT_SINGLE_COLOR
