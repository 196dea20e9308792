"""Render decoded swatches as a Unity color preset library (.colors)."""

import logging
import math
import os
import struct
import tempfile
from decimal import Decimal

from ase_palette import load_ase

logger = logging.getLogger(__name__)

COLORS_EXTENSION = ".colors"
DEFAULT_OUTPUT_FOLDER = "Editor"

COLORS_TEMPLATE = """%YAML 1.1
%TAG !u! tag:unity3d.com,2011:
--- !u!114 &1
MonoBehaviour:
  m_ObjectHideFlags: 52
  m_CorrespondingSourceObject: {fileID: 0}
  m_PrefabInstance: {fileID: 0}
  m_PrefabAsset: {fileID: 0}
  m_GameObject: {fileID: 0}
  m_Enabled: 1
  m_EditorHideFlags: 0
  m_Script: {fileID: 12323, guid: 0000000000000000e000000000000000, type: 0}
  m_Name: 
  m_EditorClassIdentifier: 
  m_Presets:
"""


def format_component(value):
    """Shortest plain decimal that reads back as the same 32-bit float."""
    try:
        single = struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError:
        single = math.copysign(math.inf, value)
    if math.isnan(single):
        return ".nan"
    if math.isinf(single):
        return ".inf" if single > 0 else "-.inf"

    for precision in range(1, 10):
        text = f"{single:.{precision}g}"
        if struct.unpack(">f", struct.pack(">f", float(text)))[0] == single:
            break
    # YAML 1.1 floats need plain notation, not 2e+02
    text = format(Decimal(text), "f")
    if text == "-0":
        text = "0"
    return text


def quote_name(name):
    name = name.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return "'" + name.replace("'", "''") + "'"


def render(records):
    lines = [COLORS_TEMPLATE]
    for record in records:
        r, g, b, a = (format_component(c) for c in record.rgba)
        lines.append(f"  - m_Name: {quote_name(record.name)}\n")
        lines.append(f"    m_Color: {{r: {r}, g: {g}, b: {b}, a: {a}}}\n")
    return "".join(lines)


def output_path_for(input_path, output_dir=None):
    stem = os.path.splitext(os.path.basename(input_path))[0]
    if not output_dir:
        output_dir = os.path.join(os.path.dirname(os.path.abspath(input_path)), DEFAULT_OUTPUT_FOLDER)
    return os.path.join(output_dir, stem + COLORS_EXTENSION)


def write_colors_file(records, out_path):
    """Write the rendered library; the target only appears once fully written."""
    text = render(records)
    out_dir = os.path.dirname(os.path.abspath(out_path))
    os.makedirs(out_dir, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(suffix=".tmp", dir=out_dir)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_path, out_path)
    except Exception:
        os.unlink(tmp_path)
        raise
    logger.info("Wrote %d presets to %s", len(records), out_path)
    return out_path


def import_ase(input_path, output_dir=None):
    records = load_ase(input_path)
    out_path = output_path_for(input_path, output_dir)
    write_colors_file(records, out_path)
    return out_path, records
