"""
svg_document.py - Read and write the flattened SVG drawing.

The drawing is expected to hold its geometry as the children of one
top-level group. Path children are broken into segments; every other
child is kept as-is and becomes a Shape of its own.
"""

import os
import xml.etree.ElementTree as ET

from path_parser import parse_number, parse_path
from path_serializer import serialize_chain
from tour_optimizer import Shape

SVG_NS = "http://www.w3.org/2000/svg"

# Register the SVG namespace
ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", "http://www.w3.org/1999/xlink")

# Primitives whose geometry defines an entry point: tag -> (begin attrs, end attrs)
SEED_ATTRIBUTES = {
    "circle": (("cx", "cy"), None),
    "ellipse": (("cx", "cy"), None),
    "line": (("x1", "y1"), ("x2", "y2")),
}


class DocumentError(Exception):
    """Raised when the drawing does not have the expected structure."""


def local_name(tag):
    """Strip the '{namespace}' prefix from an element tag."""
    if isinstance(tag, str) and tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def register_document_namespaces(svg_file):
    """Register every namespace prefix declared in `svg_file`.

    Without this ElementTree writes unknown namespaces back as ns0, ns1, ...
    The registry is process-wide: prefixes registered here stay in effect
    for every later ElementTree write in the same process.
    """
    for _, (prefix, uri) in ET.iterparse(svg_file, events=("start-ns",)):
        # The 'ns<digits>' prefixes are reserved by ElementTree
        if prefix.startswith("ns") and prefix[2:].isdigit():
            continue
        ET.register_namespace(prefix, uri)


def load_document(svg_file):
    """Parse `svg_file`; OSError and ET.ParseError propagate unchanged."""
    register_document_namespaces(svg_file)
    return ET.parse(svg_file)


def find_group(tree, group_id=None):
    """Return the top-level group holding the drawing.

    Args:
        tree: ElementTree of the drawing
        group_id: Optional id of the group; the first group is used if None

    Raises:
        DocumentError: If no matching group exists
    """
    root = tree.getroot()
    for group in root.findall(f"{{{SVG_NS}}}g"):
        if group_id is None or group.get("id") == group_id:
            return group
    if group_id is None:
        raise DocumentError("SVG file has no top-level <g> element")
    raise DocumentError(f"SVG file has no top-level <g> element with id '{group_id}'")


def _read_position(element, names, precision):
    values = []
    for name in names:
        value = element.get(name)
        if value is None:
            raise DocumentError(
                f"<{local_name(element.tag)}> element is missing the '{name}' attribute"
            )
        values.append(parse_number(value.strip(), precision))
    return tuple(values)


def element_to_shape(element, precision=4):
    """Wrap a non-path element into a Shape, seeding its entry point if known."""
    seed = SEED_ATTRIBUTES.get(local_name(element.tag))
    if seed is None:
        return Shape(element)
    begin_attrs, end_attrs = seed
    begin = _read_position(element, begin_attrs, precision)
    end = _read_position(element, end_attrs, precision) if end_attrs else None
    return Shape(element, begin=begin, end=end)


def collect_shapes(group, store, precision=4):
    """Split the children of `group` into segments and kept shapes.

    Path data is fed into `store`; the path elements themselves are not
    returned since they are rebuilt from the joined segments.

    Returns:
        Tuple (shapes, path_count, segments_offered)
    """
    shapes = []
    path_count = 0
    offered = 0
    for element in list(group):
        if not isinstance(element.tag, str):
            # Comments and processing instructions
            continue
        if local_name(element.tag) == "path":
            path_count += 1
            d = element.get("d")
            if d:
                offered += parse_path(d, store, precision)
            continue
        shapes.append(element_to_shape(element, precision))
    return shapes, path_count, offered


def make_path_element(chain, config):
    """Create the <path> element for a joined chain."""
    return ET.Element(f"{{{SVG_NS}}}path", {
        "d": serialize_chain(chain, config["precision"]),
        "stroke": config["stroke"],
        "stroke-width": config["stroke_width"],
        "style": config["style"],
    })


def replace_children(group, shapes):
    """Replace the content of `group` by the elements of `shapes`, in order."""
    for child in list(group):
        group.remove(child)
    group.text = None
    for shape in shapes:
        shape.element.tail = None
        group.append(shape.element)


def write_document(tree, output_file):
    ET.indent(tree)
    tree.write(output_file, encoding="utf-8", xml_declaration=True)


def default_output_path(svg_file, suffix="new"):
    """drawing.svg -> drawingnew.svg"""
    base_name, ext = os.path.splitext(svg_file)
    return f"{base_name}{suffix}{ext or '.svg'}"
