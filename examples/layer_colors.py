import dxfread
from dxfread.colors import resolve_color, to_hex

doc = dxfread.read("examples/data/line_2000.dxf")

for name, layer in doc.layers.items():
    state = "hidden" if layer.hidden else "visible"
    print(f"{name}: {to_hex(layer.color or 0)} {state} line_type={layer.line_type}")

for entity in doc.query("LINE LWPOLYLINE POLYLINE"):
    points = entity.to_points()
    print(entity.dxftype, entity.layer, to_hex(resolve_color(entity, doc)), len(points), "points")
