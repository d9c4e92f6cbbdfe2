import os
import xml.etree.ElementTree as ET

import pytest

from laser_optimizer import calculate_cut_length, main, optimize_document, optimize_paths
from path_parser import ParseError
from segment_store import ARC, Position, Segment
from svg_document import SVG_NS, DocumentError
from tour_optimizer import Shape

FLATTENED_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="100mm" height="100mm" viewBox="0 0 100 100">
  <g id="drawing">
    <path d="M 20 0 L 30 0 L 30 10 L 20 10 Z"/>
    <path d="M 30 0 L 20 0 L 20 -10 L 30 -10 Z"/>
    <path d="M 0 0 L 5 0"/>
    <path d="M 5 0 L 5 5"/>
    <circle cx="50" cy="50" r="3"/>
    <rect x="60" y="60" width="5" height="5"/>
  </g>
</svg>
"""


@pytest.fixture
def svg_file(tmp_path):
    path = tmp_path / "drawing.svg"
    path.write_text(FLATTENED_SVG, encoding="utf-8")
    return str(path)


def children(svg_path):
    group = ET.parse(svg_path).getroot().find(f"{{{SVG_NS}}}g")
    return list(group)


def test_optimize_document(svg_file, tmp_path):
    stats = optimize_document(svg_file, verbose=False)

    assert stats['output_file'] == str(tmp_path / "drawingnew.svg")
    assert os.path.exists(stats['output_file'])
    assert stats['path_elements'] == 4
    assert stats['segments_parsed'] == 10
    assert stats['duplicates_removed'] == 1
    assert stats['segments_unique'] == 9
    assert stats['chains'] == 2
    assert stats['shapes'] == 4
    assert stats['cut_length'] == pytest.approx(10 + 70)
    assert stats['travel_after'] <= stats['travel_before']

    elements = children(stats['output_file'])
    tags = [e.tag.split("}")[1] for e in elements]
    # The rectangle has no entry point and goes first
    assert tags == ["rect", "path", "path", "circle"]
    assert elements[1].get("d") == "M 0 0 L 5 0 L 5 5"


def test_input_file_untouched(svg_file):
    optimize_document(svg_file, verbose=False)
    with open(svg_file, encoding="utf-8") as f:
        assert f.read() == FLATTENED_SVG


def test_explicit_output_and_config(svg_file, tmp_path):
    output = str(tmp_path / "cut.svg")
    config = {"stroke": "#ff0000", "show_progress": False}
    stats = optimize_document(svg_file, output, config=config, group_id="drawing", verbose=False)
    assert stats['output_file'] == output
    paths = [e for e in children(output) if e.tag.endswith("path")]
    assert all(p.get("stroke") == "#ff0000" for p in paths)


def test_no_output_written_on_parse_error(tmp_path):
    bad = tmp_path / "bad.svg"
    bad.write_text(FLATTENED_SVG.replace("L 5 5", "L 5 5.5.5"), encoding="utf-8")
    with pytest.raises(ParseError):
        optimize_document(str(bad), verbose=False)
    assert not os.path.exists(tmp_path / "badnew.svg")


def test_missing_circle_coordinate(tmp_path):
    bad = tmp_path / "bad.svg"
    bad.write_text(FLATTENED_SVG.replace('cy="50" ', ''), encoding="utf-8")
    with pytest.raises(DocumentError):
        optimize_document(str(bad), verbose=False)
    assert not os.path.exists(tmp_path / "badnew.svg")


def test_missing_input_file(tmp_path):
    with pytest.raises(OSError):
        optimize_document(str(tmp_path / "missing.svg"), verbose=False)


def test_optimize_paths_without_document():
    circle = Shape("circle", begin=(100, 100))
    result = optimize_paths(["M 0 0 L 1 0", "M 1 0 L 1 1", "M 1 1 L 0 0"], [Shape("text"), circle])
    assert [s.element for s in result] == ["text", "M 0 0 L 1 0 L 1 1 L 0 0", "circle"]
    assert result[1].begin == Position(0, 0)
    assert result[1].chain is not None


def test_three_disjoint_segments_ordered_from_corner():
    result = optimize_paths(["M 5 5 L 6 5", "M 20 0 L 21 0", "M 0 1 L 0 2"])
    assert [s.element for s in result] == ["M 0 1 L 0 2", "M 5 5 L 6 5", "M 20 0 L 21 0"]


def test_cut_length_includes_arcs():
    chain = [Segment(ARC, Position(0, 0), Position(2, 0), '1', '1', '0', '0', '1')]
    assert calculate_cut_length([chain]) == pytest.approx(3.14159265, rel=1e-4)


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 0
    out = capsys.readouterr()
    assert "SVG optimizer for laser cutting" in out.out
    assert "usage:" in out.out + out.err


def test_main_converts_file(svg_file, tmp_path, capsys):
    assert main([svg_file, "--no-progress", "--config", str(tmp_path / "none.yaml")]) == 0
    assert os.path.exists(tmp_path / "drawingnew.svg")
    assert "OPTIMIZATION COMPLETE" in capsys.readouterr().out


def test_main_reports_errors(tmp_path, capsys):
    assert main([str(tmp_path / "missing.svg"), "--no-wait"]) == 1
    assert "Error:" in capsys.readouterr().out
