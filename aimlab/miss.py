"""
Miss Projector for the aim-lab shot-resolution engine.

Turns a 3D near-miss into a 2D signed offset the player can read:

1. Build the plane through the intended target's centre whose normal is the
   camera's forward vector (the depth plane the player was aiming into).
2. Intersect the fire ray with that plane.
3. Express ``intersection - centre`` in the camera's local right/up axes.

The plane is oriented by the camera forward, not by the eye-to-target line,
so offsets for targets far off-axis carry some distortion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import DegenerateGeometryError
from .physics import EPSILON, Ray, Vector3D
from .targets import Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissOffset:
    """
    Where a missed shot landed relative to the intended target.

    Attributes:
        relative_x: Signed offset along camera right (positive = right of centre).
        relative_y: Signed offset along camera up (positive = above centre).
        distance_from_center: Length of the 3D offset in the projection plane.
        target_velocity_x: Intended target's horizontal velocity at firing.
    """
    relative_x: float
    relative_y: float
    distance_from_center: float
    target_velocity_x: float


def intersect_ray_plane(ray: Ray, plane_normal: Vector3D, plane_point: Vector3D) -> Vector3D:
    """
    Intersect a ray with the plane through ``plane_point`` with ``plane_normal``.

    Args:
        ray: The fire ray.
        plane_normal: Plane normal (need not be unit length).
        plane_point: Any point on the plane.

    Returns:
        The intersection point.

    Raises:
        DegenerateGeometryError: If the ray is parallel to the plane and not
            lying in it, or the plane is behind the ray origin.
    """
    denominator = plane_normal.dot(ray.direction)
    offset = (plane_point - ray.origin).dot(plane_normal)

    if abs(denominator) < EPSILON:
        # Ray lies in the plane: its origin is the intersection
        if abs(offset) < EPSILON:
            return ray.origin.copy()
        raise DegenerateGeometryError("Ray is parallel to the projection plane")

    t = offset / denominator
    if t < 0:
        raise DegenerateGeometryError("Projection plane is behind the ray origin")

    return ray.point_at(t)


def project_miss(
    ray: Ray,
    camera_position: Vector3D,
    camera_forward: Vector3D,
    camera_right: Vector3D,
    camera_up: Vector3D,
    intended_target: Target
) -> Optional[MissOffset]:
    """
    Compute the miss offset for a shot against its intended target.

    Args:
        ray: The fire ray.
        camera_position: Eye position at firing.
        camera_forward: Camera forward axis (plane normal).
        camera_right: Camera-local right axis at firing.
        camera_up: Camera-local up axis at firing.
        intended_target: Target the shot is measured against.

    Returns:
        MissOffset, or None when the projection is degenerate. Callers then
        record a miss without an offset.
    """
    center = intended_target.position

    try:
        intersection = intersect_ray_plane(ray, camera_forward, center)
    except DegenerateGeometryError as exc:
        logger.debug(
            "No miss offset for %s from %s: %s",
            intended_target.id, camera_position, exc
        )
        return None

    diff = intersection - center
    return MissOffset(
        relative_x=diff.dot(camera_right),
        relative_y=diff.dot(camera_up),
        distance_from_center=diff.magnitude,
        target_velocity_x=intended_target.velocity.x,
    )
