"""
Geometry primitives for the aim-lab shot-resolution engine.

Implements:
- 3D vector operations
- Fire rays (origin + unit direction)
- Camera frames (position plus forward/right/up basis) built from yaw/pitch

World axes follow the renderer's convention:
- X: right
- Y: up
- Z: out of the screen (targets live at negative Z, "into the scene")

All distances are in world units; the default eye sits at the origin.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field


# =============================================================================
# CONSTANTS
# =============================================================================

# Tolerance used for vector equality and parallel checks
EPSILON = 1e-10

# Pitch is kept just short of straight up/down so right/up stay defined
MAX_PITCH_RAD = math.radians(89.9)


# =============================================================================
# VECTOR3D CLASS
# =============================================================================

@dataclass
class Vector3D:
    """
    3D vector for positions, velocities, and directions in world space.

    Uses a right-handed, Y-up coordinate system where:
    - X: right
    - Y: up
    - Z: toward the viewer (forward is -Z)
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3D) -> Vector3D:
        """Vector addition."""
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        """Vector subtraction."""
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        """Scalar multiplication."""
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3D:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3D:
        """Scalar division."""
        if scalar == 0:
            raise ValueError("Cannot divide vector by zero")
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        """Equality check with tolerance."""
        if not isinstance(other, Vector3D):
            return False
        return (abs(self.x - other.x) < EPSILON and
                abs(self.y - other.y) < EPSILON and
                abs(self.z - other.z) < EPSILON)

    def dot(self, other: Vector3D) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Cross product."""
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    @property
    def magnitude(self) -> float:
        """Vector magnitude (length)."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalized(self) -> Vector3D:
        """Return unit vector in same direction (zero stays zero)."""
        mag = self.magnitude
        if mag == 0:
            return Vector3D(0, 0, 0)
        return self / mag

    def distance_to(self, other: Vector3D) -> float:
        """Distance to another point."""
        return (self - other).magnitude

    def angle_to(self, other: Vector3D) -> float:
        """
        Angle between vectors in radians.

        Returns 0.0 when either vector has zero length.
        """
        mags = self.magnitude * other.magnitude
        if mags == 0:
            return 0.0
        # Clamp to avoid floating point errors with acos
        cos_angle = max(-1.0, min(1.0, self.dot(other) / mags))
        return math.acos(cos_angle)

    def copy(self) -> Vector3D:
        return Vector3D(self.x, self.y, self.z)

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert to tuple."""
        return (self.x, self.y, self.z)

    @classmethod
    def from_tuple(cls, t: tuple[float, float, float]) -> Vector3D:
        """Create from any 3-element sequence."""
        return cls(float(t[0]), float(t[1]), float(t[2]))

    @classmethod
    def zero(cls) -> Vector3D:
        """Zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit_x(cls) -> Vector3D:
        """Unit vector in X direction (right)."""
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> Vector3D:
        """Unit vector in Y direction (up)."""
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def forward(cls) -> Vector3D:
        """Default view direction (into the scene)."""
        return cls(0.0, 0.0, -1.0)

    def __repr__(self) -> str:
        return f"Vector3D({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"


# =============================================================================
# RAY
# =============================================================================

@dataclass
class Ray:
    """
    Infinite fire ray.

    The direction is normalized on construction; a zero-length direction stays
    zero, which the resolver treats as a well-defined degenerate shot.

    Attributes:
        origin: Ray start point in world coordinates.
        direction: Unit direction vector.
    """
    origin: Vector3D
    direction: Vector3D

    def __post_init__(self) -> None:
        self.direction = self.direction.normalized()

    def point_at(self, t: float) -> Vector3D:
        """Point at parameter t along the ray."""
        return self.origin + self.direction * t


# =============================================================================
# CAMERA FRAME
# =============================================================================

@dataclass
class CameraFrame:
    """
    Camera pose at the moment of firing.

    The renderer owns the real camera; this is the snapshot of it the core
    needs: where the eye is and its local forward/right/up axes. The fire ray
    leaves the eye along ``forward`` (crosshair at screen centre).

    Attributes:
        position: Eye position in world coordinates.
        forward: Unit view direction.
        right: Unit camera-local right axis.
        up: Unit camera-local up axis.
    """
    position: Vector3D = field(default_factory=Vector3D.zero)
    forward: Vector3D = field(default_factory=Vector3D.forward)
    right: Vector3D = field(default_factory=Vector3D.unit_x)
    up: Vector3D = field(default_factory=Vector3D.unit_y)

    @classmethod
    def from_yaw_pitch(
        cls,
        position: Vector3D,
        yaw_rad: float,
        pitch_rad: float
    ) -> CameraFrame:
        """
        Build a frame from yaw (about +Y, positive turns left) and pitch
        (about the camera right axis, positive looks up).

        Args:
            position: Eye position.
            yaw_rad: Yaw angle in radians.
            pitch_rad: Pitch angle in radians (clamped short of +/-90 degrees).

        Returns:
            CameraFrame with an orthonormal basis.
        """
        pitch_rad = max(-MAX_PITCH_RAD, min(MAX_PITCH_RAD, pitch_rad))
        cos_p = math.cos(pitch_rad)

        forward = Vector3D(
            -math.sin(yaw_rad) * cos_p,
            math.sin(pitch_rad),
            -math.cos(yaw_rad) * cos_p
        )
        right = Vector3D(math.cos(yaw_rad), 0.0, -math.sin(yaw_rad))
        up = right.cross(forward)

        return cls(position=position.copy(), forward=forward, right=right, up=up)

    @classmethod
    def look_at(cls, position: Vector3D, point: Vector3D) -> CameraFrame:
        """
        Build a frame at ``position`` aimed at ``point``.

        A zero-length view direction keeps the default orientation.
        """
        direction = (point - position).normalized()
        if direction.magnitude == 0:
            return cls(position=position.copy())

        yaw = math.atan2(-direction.x, -direction.z)
        pitch = math.asin(max(-1.0, min(1.0, direction.y)))
        return cls.from_yaw_pitch(position, yaw, pitch)

    def ray(self) -> Ray:
        """Fire ray through the crosshair."""
        return Ray(self.position.copy(), self.forward)
