"""
Raycast Resolver for the aim-lab shot-resolution engine.

Decides, for one fired shot, which live target (if any) was hit and which
target the player most likely meant to shoot.

Hit test: infinite-ray vs sphere. The target centre is projected onto the ray
(no clamp, so geometry behind the eye also counts) and the shot hits when the
closest point is strictly inside the sphere radius.

Intended target: the target whose centre direction makes the smallest angle
with the fire direction. Both checks run in one pass in store order, and ties
go to the first target encountered in both cases. That order is not sorted by
distance, so overlapping spheres are not resolved nearest-first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from .physics import Ray, Vector3D
from .targets import Target


@dataclass(frozen=True)
class ResolveResult:
    """
    Outcome of resolving one shot against the live targets.

    Attributes:
        hit: Id of the target struck, or None on a miss.
        intended: Id of the angularly closest target; None only when there
                  were no live targets.
        angular_error_rad: Angle between the fire ray and the intended
                           target's centre (inf when there is no target).
    """
    hit: Optional[str] = None
    intended: Optional[str] = None
    angular_error_rad: float = math.inf

    @property
    def is_hit(self) -> bool:
        return self.hit is not None


def sphere_hit_distance(ray: Ray, center: Vector3D) -> float:
    """
    Distance from a sphere centre to the closest point on the infinite ray.

    Args:
        ray: Fire ray with unit (or zero) direction.
        center: Sphere centre.

    Returns:
        Perpendicular distance from ``center`` to the ray's line.
    """
    to_target = center - ray.origin
    projection_length = to_target.dot(ray.direction)
    closest_point = ray.point_at(projection_length)
    return closest_point.distance_to(center)


def resolve(
    ray_origin: Vector3D,
    ray_direction: Vector3D,
    targets: Iterable[Target]
) -> ResolveResult:
    """
    Resolve a shot against every live target.

    Args:
        ray_origin: Eye position at firing.
        ray_direction: Fire direction; normalized here, a zero vector is
                       accepted and yields a well-defined result.
        targets: Live targets in store order.

    Returns:
        ResolveResult with the hit id (first in order wins) and intended id.
    """
    ray = Ray(ray_origin, ray_direction)

    hit_id: Optional[str] = None
    intended_id: Optional[str] = None
    min_angle = math.inf

    for target in targets:
        if hit_id is None and sphere_hit_distance(ray, target.position) < target.radius:
            hit_id = target.id

        to_target = (target.position - ray.origin).normalized()
        angle = ray.direction.angle_to(to_target)
        if angle < min_angle:
            min_angle = angle
            intended_id = target.id

    return ResolveResult(hit=hit_id, intended=intended_id, angular_error_rad=min_angle)
