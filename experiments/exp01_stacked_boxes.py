from __future__ import annotations

from minigsg.core.types import Pose
from minigsg.scene_graph.planar_contact import PlanarContact
from minigsg.scene_graph.relations import ShapeContact
from minigsg.scene_graph.shapes import Box
from minigsg.world.contact_graph import ContactGraph


def setup_tower(num_boxes: int = 4) -> ContactGraph:
    """
    Build a tower of boxes, each resting on the top face of the one below:

      - box0 is fixed at the origin
      - box{i} sits on box{i-1}, shifted by 5cm in x and turned by 0.2 rad

    Each box is 0.5 x 0.5 x 0.3, so box{i} ends up 0.3m above box{i-1}.
    """
    g = ContactGraph()
    for i in range(num_boxes):
        g.add_object(f"box{i}", Box(0.5, 0.5, 0.3))

    g.set_pose("box0", Pose.identity())
    for i in range(1, num_boxes):
        g.set_contact(
            f"box{i - 1}",
            f"box{i}",
            ShapeContact("top", (), "bottom", (), PlanarContact(0.05, 0.0, 0.2)),
        )
    return g


def print_poses(poses, label: str):
    print(f"\n=== {label} ===")
    for name, pose in poses.items():
        x, y, z = (float(c) for c in pose.pos)
        w, qx, qy, qz = pose.quat_wxyz
        print(f"{name}: t=({x:.3f}, {y:.3f}, {z:.3f}), q=({w:.3f}, {qx:.3f}, {qy:.3f}, {qz:.3f})")


def main():
    g = setup_tower()
    print_poses(g.floating_poses(), label="COMPILED TOWER")


if __name__ == "__main__":
    main()
