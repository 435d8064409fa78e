# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.

import time

from minigsg.core.types import Pose
from minigsg.scene_graph.planar_contact import PlanarContact
from minigsg.scene_graph.relations import ShapeContact
from minigsg.scene_graph.shapes import Box
from minigsg.world.contact_graph import ContactGraph


def build_chain_graph(num_objects: int = 50) -> ContactGraph:
    """
    Simple chain of stacked boxes:
        box0 --top/bottom--> box1 --top/bottom--> ... --> box_{N-1}
    Pose on box0, small offsets and turns on every contact.
    """
    g = ContactGraph()
    for i in range(num_objects):
        g.add_object(i, Box(0.4, 0.4, 0.1))
    g.set_pose(0, Pose.identity())
    for i in range(num_objects - 1):
        g.set_contact(i, i + 1, ShapeContact("top", (), "bottom", (), PlanarContact(0.01, 0.0, 0.05)))
    return g


def run_benchmark(num_objects: int = 50):
    print("=== Contact graph compilation benchmark ===")
    print(f"num_objects = {num_objects}")

    g = build_chain_graph(num_objects)

    t0 = time.perf_counter()
    batch = g.floating_poses()
    t1 = time.perf_counter()
    print(f"floating_poses (one forest scan):   {t1 - t0:.3f} s")

    t0 = time.perf_counter()
    single = {name: g.get_absolute_pose(name) for name in g.vertex_names()}
    t1 = time.perf_counter()
    print(f"get_absolute_pose per object:       {t1 - t0:.3f} s")

    worst = max(float(abs(batch[n].pos - single[n].pos).max()) for n in batch)
    print(f"max position disagreement: {worst:.3e}")


if __name__ == "__main__":
    run_benchmark()
