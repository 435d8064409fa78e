from __future__ import annotations

from minigsg.core.types import Pose
from minigsg.scene_graph.planar_contact import PlanarContact, closest_approximating_contact
from minigsg.scene_graph.relations import ShapeContact, get_relative_pose_from_contact
from minigsg.scene_graph.shapes import Box, BoxContainer
from minigsg.world.contact_graph import ContactGraph, to_floating_in_place


def setup_container_chain() -> ContactGraph:
    """
    A box, a tray resting on it, and a second box inside the tray:

      obj_1.top          -> container_1.outer_bottom
      container_1.inner_bottom -> obj_2.bottom
    """
    g = ContactGraph()
    g.add_object("obj_1", Box(0.1, 0.3, 0.4))
    g.add_object("container_1", BoxContainer(0.2, 0.4, 0.1))
    g.add_object("obj_2", Box(0.3, 1.0, 0.6))

    g.set_pose("obj_1", Pose.identity())
    g.set_contact("obj_1", "container_1",
                  ShapeContact("top", (), "outer_bottom", (), PlanarContact(0.0, 0.0, 0.0)))
    g.set_contact("container_1", "obj_2",
                  ShapeContact("inner_bottom", (), "bottom", (), PlanarContact(0.0, 0.0, 0.0)))
    return g


def main():
    g = setup_container_chain()

    # Recover the planar contact of each edge from the relative pose it implies
    for parent, child in g.named_edges():
        rel = get_relative_pose_from_contact(g.get_shape(parent), g.get_shape(child),
                                             g.get_contact(parent, child))
        c = g.get_contact(parent, child)
        parent_plane = g.get_shape(parent).get_contact_plane(c.parent_family_id)
        child_plane = g.get_shape(child).get_contact_plane(c.child_family_id)
        fit = closest_approximating_contact(parent_plane.ldiv(rel * child_plane))
        print(f"{parent} -> {child}: x={fit.x:.3f} y={fit.y:.3f} angle={fit.angle:.3f}")

    to_floating_in_place(g)
    print("\n=== FLOATING SCENE ===")
    for name in g.vertex_names():
        print(f"{name}: {g.get_absolute_pose(name)}")
    print(f"remaining contacts: {g.named_edges()}")


if __name__ == "__main__":
    main()
