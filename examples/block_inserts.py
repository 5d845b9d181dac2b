import dxfread

path = "examples/data/blocks.dxf"

doc = dxfread.read(path)
print("version:", doc.version)
print("blocks:", len(doc.blocks))

for insert in doc.query("INSERT"):
    position = insert.dxf.get("position")
    block = doc.get_block(insert.dxf.get("name", ""))
    print(
        "INSERT",
        f"name={insert.dxf.get('name')}",
        f"pos=({position.x:.3f}, {position.y:.3f})" if position else "pos=?",
        f"scale=({insert.dxf.get('x_scale', 1.0):.3f}, {insert.dxf.get('y_scale', 1.0):.3f})",
        f"rotation={insert.dxf.get('rotation', 0.0):.3f}deg",
        f"entities={len(block) if block is not None else 0}",
    )
