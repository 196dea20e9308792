import os

import pytest

from ase_palette import AseDecodeError, ColorRecord, ColorSpace, ColorType, UnsupportedColorSpaceError, decode
from colors_export import (
    COLORS_TEMPLATE,
    format_component,
    import_ase,
    output_path_for,
    quote_name,
    render,
    write_colors_file,
)
from conftest import ase_file, color_block


def gray(name, value=0.5):
    return ColorRecord(name, ColorSpace.GRAY, (value,), ColorType.NORMAL)


def test_render_empty_is_template():
    assert render([]) == COLORS_TEMPLATE


def test_template_keeps_empty_name_fields():
    assert "\n  m_Name: \n  m_EditorClassIdentifier: \n  m_Presets:\n" in COLORS_TEMPLATE


def test_render_whole_numbers_without_exponent():
    k = 1 - 200 / 255
    cmyk = ColorRecord("c", ColorSpace.CMYK, (0.0, 0.0, 0.0, k), ColorType.NORMAL)
    text = render([cmyk])
    assert "e+" not in text
    assert "m_Color: {r: 200, g: 200, b: 200, a: 1}" in text


def test_render_overflow_as_infinity():
    cmyk = ColorRecord("huge", ColorSpace.CMYK, (-3.4e38, 0.0, 0.0, -3.4e38), ColorType.NORMAL)
    assert "m_Color: {r: .inf, g: .inf, b: .inf, a: 1}" in render([cmyk])


def test_render_entries(sample_palette):
    text = render(decode(sample_palette))
    assert text.startswith("%YAML 1.1\n")
    body = text[len(COLORS_TEMPLATE):]
    assert body == (
        "  - m_Name: 'Ink Black'\n"
        "    m_Color: {r: 0, g: 0, b: 0, a: 1}\n"
        "  - m_Name: 'Sky'\n"
        "    m_Color: {r: 10, g: 20, b: 30, a: 1}\n"
        "  - m_Name: 'Mid Gray'\n"
        "    m_Color: {r: 0.5, g: 0.5, b: 0.5, a: 1}\n"
    )


@pytest.mark.parametrize("value, text", [
    (255.0, "255"),
    (0.5, "0.5"),
    (1.0, "1"),
    (0.0, "0"),
    (-0.0, "0"),
    (0.20000000298023224, "0.2"),
    (127.5, "127.5"),
    (10.0, "10"),
    (200.0, "200"),
    (1000.0, "1000"),
    (1e-07, "0.0000001"),
    (float("inf"), ".inf"),
    (float("-inf"), "-.inf"),
    (float("nan"), ".nan"),
    (1e40, ".inf"),
])
def test_format_component(value, text):
    assert format_component(value) == text


def test_quote_name_escapes_quotes_and_line_breaks():
    assert quote_name("Bob's Blue") == "'Bob''s Blue'"
    assert quote_name("two\nlines") == "'two lines'"
    assert quote_name("") == "''"


def test_render_propagates_lab_error():
    lab = ColorRecord("lab", ColorSpace.LAB, (1.0, 2.0, 3.0), ColorType.NORMAL)
    with pytest.raises(UnsupportedColorSpaceError):
        render([gray("ok"), lab])


def test_output_path_defaults_to_editor_folder(tmp_path):
    src = tmp_path / "art" / "brand.ase"
    assert output_path_for(str(src)) == os.path.join(str(tmp_path / "art"), "Editor", "brand.colors")
    assert output_path_for(str(src), str(tmp_path / "out")) == os.path.join(str(tmp_path / "out"), "brand.colors")


def test_write_colors_file_creates_directory(tmp_path):
    out = tmp_path / "Editor" / "p.colors"
    write_colors_file([gray("a")], str(out))
    assert out.read_text(encoding="utf-8").endswith("  - m_Name: 'a'\n    m_Color: {r: 0.5, g: 0.5, b: 0.5, a: 1}\n")
    assert os.listdir(tmp_path / "Editor") == ["p.colors"]


def test_write_colors_file_leaves_nothing_on_failure(tmp_path):
    lab = ColorRecord("lab", ColorSpace.LAB, (1.0, 2.0, 3.0), ColorType.NORMAL)
    out = tmp_path / "p.colors"
    with pytest.raises(UnsupportedColorSpaceError):
        write_colors_file([lab], str(out))
    assert os.listdir(tmp_path) == []


def test_import_ase_writes_library(ase_path, tmp_path):
    out_path, records = import_ase(str(ase_path))
    assert out_path == str(tmp_path / "Editor" / "brand.colors")
    assert len(records) == 3
    assert "m_Name: 'Sky'" in open(out_path, encoding="utf-8").read()


def test_import_ase_writes_nothing_on_decode_error(tmp_path):
    src = tmp_path / "bad.ase"
    src.write_bytes(ase_file(color_block("a", b"GRAY", (0.1,)), b"\x99\x99\x00\x00\x00\x00"))
    with pytest.raises(AseDecodeError):
        import_ase(str(src))
    assert not (tmp_path / "Editor").exists()
