import dxfread

DIMENSION_STYLES = {
    0: "rotated",
    1: "aligned",
    2: "angular",
    3: "diameter",
    4: "radius",
    5: "angular 3-point",
    6: "ordinate",
}


def main() -> None:
    doc = dxfread.read("examples/data/mechanical_example-imperial.dxf")

    dims = list(doc.query("DIMENSION"))
    print(f"DIMENSION count: {len(dims)}")
    for dim in dims:
        style = DIMENSION_STYLES.get(dim.dimension_style, "unknown")
        print(dim.handle, style, dim.dxf.get("text"), dim.dxf.get("actual_measurement"))


if __name__ == "__main__":
    main()
