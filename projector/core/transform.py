"""Geometry transform: local structure space to world space.

Composition order is fixed everywhere: mirror about the local X axis
(x -> -x), then quarter turns about the vertical axis ((x, z) -> (z, -x)
per step), then translation by the origin. Orientation attributes of
tokens go through the same mirror and rotation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from projector.models import ORIGIN, BlockPos, ContentToken, Direction, Rotation


def rotate_xz(x: int, z: int, steps: int) -> tuple[int, int]:
    for _ in range(steps % 4):
        x, z = z, -x
    return x, z


class Transform(BaseModel):
    model_config = ConfigDict(frozen=True)

    rotation: Rotation = Rotation.NONE
    mirror: bool = False
    origin: BlockPos = ORIGIN

    def apply_local(self, local: BlockPos) -> BlockPos:
        """Mirror and rotate about the local origin, without translation."""
        x = -local.x if self.mirror else local.x
        x, z = rotate_xz(x, local.z, self.rotation.value)
        return BlockPos(x=x, y=local.y, z=z)

    def apply(self, local: BlockPos) -> BlockPos:
        return self.apply_local(local).offset(self.origin)

    def apply_direction(self, direction: Direction) -> Direction:
        if not direction.is_horizontal:
            return direction
        dx, dy, dz = direction.vector
        if self.mirror:
            dx = -dx
        dx, dz = rotate_xz(dx, dz, self.rotation.value)
        return Direction.from_vector(dx, dy, dz)

    def apply_token(self, token: ContentToken) -> ContentToken:
        if token.facing is None:
            return token
        return token.with_orientation(self.apply_direction(token.facing))

    @property
    def is_identity(self) -> bool:
        return self.rotation is Rotation.NONE and not self.mirror and self.origin == ORIGIN
