#!/usr/bin/env python3
"""
Demo script sculpting a small terrain with each brush.
"""

from terrain_sculpt.config import SessionConfig
from terrain_sculpt.core import BRUSHES, SculptSession


def main():
    """Stamp every brush onto its own flat terrain and report the result."""
    print("Terrain Sculpt Demo")
    print("=" * 40)

    for brush in BRUSHES:
        session = SculptSession(SessionConfig(divisions=10, resolution_multiplier=4, strength=0.5))
        session.select_brush(brush.id)

        session.click((5, 5))
        session.rotate()
        session.click((5, 5), alternate=True)
        session.click((0, 9))

        stats = session.heightmap.stats()
        print(f"\n{brush.name} ({brush.footprint_cells}x{brush.footprint_cells} cells):")
        print(f"  Height range: {stats['min']:.3f} to {stats['max']:.3f}")
        print(f"  Mean height:  {stats['mean']:.4f}")

        preview = session.hover((3, 3))
        print(f"  Ghost at {tuple(round(p, 2) for p in preview.position)}, color {preview.color}")


if __name__ == "__main__":
    main()
