"""Orbit camera driven by mouse wheel, mouse drag and gamepad input."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Iterable, Union

from .mesh import Vec3

logger = logging.getLogger(__name__)

Quat = tuple[float, float, float, float]
"""A rotation quaternion stored as ``(x, y, z, w)``."""

IDENTITY: Quat = (0.0, 0.0, 0.0, 1.0)

_GAMEPAD_AXIS_SPEED = 1000.0
_GAMEPAD_ZOOM_SPEED = 40.0
_ROTATION_SETTLE_RATE = 10.0
_SLERP_DOT_THRESHOLD = 1.0 - 1.1920929e-07

_AXIS_FIELDS = {
    "LeftStickX": "left_stick_x",
    "LeftStickY": "left_stick_y",
    "RightStickX": "right_stick_x",
    "RightStickY": "right_stick_y",
}
_BUTTON_FIELDS = {
    "LeftTrigger": "left_trigger",
    "LeftTrigger2": "left_trigger",
    "RightTrigger": "right_trigger",
    "RightTrigger2": "right_trigger",
}


@dataclass(frozen=True)
class Zoom:
    """Scroll by ``amount`` notches; positive moves the camera closer."""

    amount: float


@dataclass(frozen=True)
class Rotate:
    """Turn the camera around its target by a screen-space delta."""

    dx: float
    dy: float


@dataclass(frozen=True)
class Pan:
    """Move the camera target across the ground plane by a screen-space delta."""

    dx: float
    dy: float


CameraEvent = Union[Zoom, Rotate, Pan]


@dataclass
class GamepadState:
    """Latest stick and trigger values seen from any gamepad."""

    left_stick_x: float = 0.0
    right_stick_x: float = 0.0
    left_stick_y: float = 0.0
    right_stick_y: float = 0.0
    left_trigger: float = 0.0
    right_trigger: float = 0.0

    def set_axis(self, axis: str, value: float) -> None:
        """Record a stick axis value; axes the camera does not use are ignored."""
        name = _AXIS_FIELDS.get(axis)
        if name is not None:
            setattr(self, name, value)

    def set_button(self, button: str, value: float) -> None:
        """Record a trigger value; other buttons are ignored."""
        name = _BUTTON_FIELDS.get(button)
        if name is not None:
            setattr(self, name, value)

    def disconnect(self) -> None:
        """Zero every value so a lost gamepad does not keep moving the camera."""
        for item in fields(self):
            setattr(self, item.name, 0.0)

    def events(self, delta_secs: float) -> list[CameraEvent]:
        """Return the camera events the held sticks and triggers produce this frame."""
        axis_multiplier = delta_secs * _GAMEPAD_AXIS_SPEED
        zoom_multiplier = delta_secs * _GAMEPAD_ZOOM_SPEED
        events: list[CameraEvent] = []

        if self.right_stick_x != 0.0 or self.right_stick_y != 0.0:
            events.append(
                Rotate(
                    -(self.right_stick_x**3) * axis_multiplier,
                    self.right_stick_y**3 * axis_multiplier,
                )
            )
        if self.left_stick_x != 0.0 or self.left_stick_y != 0.0:
            events.append(
                Pan(
                    -(self.left_stick_x**3) * axis_multiplier,
                    self.left_stick_y**3 * axis_multiplier,
                )
            )
        if self.right_trigger - self.left_trigger != 0.0:
            events.append(
                Zoom((self.right_trigger**3 - self.left_trigger**3) * zoom_multiplier)
            )
        return events


def collect_events(
    scroll: Iterable[float],
    motion: Iterable[tuple[float, float]],
    left_pressed: bool,
    right_pressed: bool,
    gamepad: GamepadState,
    delta_secs: float,
) -> list[CameraEvent]:
    """Turn one frame of input into camera events.

    Mouse motion rotates while the left button is held and pans while only the
    right button is held; otherwise it is ignored.
    """
    events: list[CameraEvent] = [Zoom(y) for y in scroll]
    if left_pressed:
        events.extend(Rotate(dx, dy) for dx, dy in motion)
    elif right_pressed:
        events.extend(Pan(dx, dy) for dx, dy in motion)
    events.extend(gamepad.events(delta_secs))
    return events


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _quat_mul(p: Quat, q: Quat) -> Quat:
    px, py, pz, pw = p
    qx, qy, qz, qw = q
    return (
        pw * qx + px * qw + py * qz - pz * qy,
        pw * qy - px * qz + py * qw + pz * qx,
        pw * qz + px * qy - py * qx + pz * qw,
        pw * qw - px * qx - py * qy - pz * qz,
    )


def _quat_rotate(q: Quat, v: Vec3) -> Vec3:
    x, y, z, w = q
    conjugate = (-x, -y, -z, w)
    rx, ry, rz, _ = _quat_mul(_quat_mul(q, (v[0], v[1], v[2], 0.0)), conjugate)
    return rx, ry, rz


def _quat_normalize(q: Quat) -> Quat:
    length = math.sqrt(sum(c * c for c in q))
    return q[0] / length, q[1] / length, q[2] / length, q[3] / length


def _slerp(start: Quat, end: Quat, s: float) -> Quat:
    dot = sum(a * b for a, b in zip(start, end))
    if dot < 0.0:
        end = (-end[0], -end[1], -end[2], -end[3])
        dot = -dot
    if dot > _SLERP_DOT_THRESHOLD:
        return _quat_normalize(tuple(a + (b - a) * s for a, b in zip(start, end)))
    theta = math.acos(dot)
    scale_start = math.sin(theta * (1.0 - s))
    scale_end = math.sin(theta * s)
    inv_sin = 1.0 / math.sin(theta)
    return tuple((a * scale_start + b * scale_end) * inv_sin for a, b in zip(start, end))


def _rotation_y(angle: float) -> Quat:
    return 0.0, math.sin(angle / 2.0), 0.0, math.cos(angle / 2.0)


def _rotation_x(angle: float) -> Quat:
    return math.sin(angle / 2.0), 0.0, 0.0, math.cos(angle / 2.0)


def _sub(p: Vec3, q: Vec3) -> Vec3:
    return p[0] - q[0], p[1] - q[1], p[2] - q[2]


def _cross(u: Vec3, v: Vec3) -> Vec3:
    return (
        u[1] * v[2] - u[2] * v[1],
        u[2] * v[0] - u[0] * v[2],
        u[0] * v[1] - u[1] * v[0],
    )


def _try_normalize(v: Vec3) -> Vec3 | None:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0.0 or not math.isfinite(length):
        return None
    return v[0] / length, v[1] / length, v[2] / length


def _any_orthonormal(v: Vec3) -> Vec3:
    sign = math.copysign(1.0, v[2])
    a = -1.0 / (sign + v[2])
    b = v[0] * v[1] * a
    return b, sign + v[1] * v[1] * a, -v[1]


def _quat_from_axes(x_axis: Vec3, y_axis: Vec3, z_axis: Vec3) -> Quat:
    m00, m01, m02 = x_axis
    m10, m11, m12 = y_axis
    m20, m21, m22 = z_axis
    if m22 <= 0.0:
        dif10 = m11 - m00
        omm22 = 1.0 - m22
        if dif10 <= 0.0:
            four_xsq = omm22 - dif10
            inv = 0.5 / math.sqrt(four_xsq)
            return four_xsq * inv, (m01 + m10) * inv, (m02 + m20) * inv, (m12 - m21) * inv
        four_ysq = omm22 + dif10
        inv = 0.5 / math.sqrt(four_ysq)
        return (m01 + m10) * inv, four_ysq * inv, (m12 + m21) * inv, (m20 - m02) * inv
    sum10 = m11 + m00
    opm22 = 1.0 + m22
    if sum10 <= 0.0:
        four_zsq = opm22 - sum10
        inv = 0.5 / math.sqrt(four_zsq)
        return (m02 + m20) * inv, (m12 + m21) * inv, four_zsq * inv, (m01 - m10) * inv
    four_wsq = opm22 + sum10
    inv = 0.5 / math.sqrt(four_wsq)
    return (m12 - m21) * inv, (m20 - m02) * inv, (m01 - m10) * inv, four_wsq * inv


def _look_at(eye: Vec3, target: Vec3, up: Vec3) -> Quat:
    direction = _try_normalize(_sub(target, eye)) or (0.0, 0.0, -1.0)
    back = (-direction[0], -direction[1], -direction[2])
    up = _try_normalize(up) or (0.0, 1.0, 0.0)
    right = _try_normalize(_cross(up, back)) or _any_orthonormal(up)
    up = _cross(back, right)
    return _quat_from_axes(right, up, back)


@dataclass
class OrbitCamera:
    """A camera circling a target point at a given distance."""

    zoom_sensitivity: float = 0.1
    rotate_sensitivity: float = 0.003
    pan_sensitivity: float = 0.001
    gimbal_x: float = math.radians(60.0)
    gimbal_y: float = math.radians(20.0)
    distance: float = 3.0
    min_distance: float = 0.0
    max_distance: float = math.inf
    min_y_angle: float = 0.02
    max_y_angle: float = math.pi / 2.2
    target: Vec3 = (0.0, 0.0, 0.0)
    active: bool = True
    last_rotation: Quat = field(default=IDENTITY)

    def apply(self, event: CameraEvent) -> None:
        """Change distance, angles or target according to one event."""
        if isinstance(event, Zoom):
            scaled = self.distance * (1.0 + self.zoom_sensitivity) ** (-event.amount)
            self.distance = _clamp(scaled, self.min_distance, self.max_distance)
        elif isinstance(event, Rotate):
            self.gimbal_x += event.dx * self.rotate_sensitivity
            self.gimbal_y = _clamp(
                self.gimbal_y + event.dy * self.rotate_sensitivity,
                self.min_y_angle,
                self.max_y_angle,
            )
        elif isinstance(event, Pan):
            cos_x, sin_x = math.cos(self.gimbal_x), math.sin(self.gimbal_x)
            vx = -cos_x * event.dx + sin_x * event.dy
            vz = -sin_x * event.dx - cos_x * event.dy
            scale = self.pan_sensitivity * self.distance
            x, y, z = self.target
            self.target = (x + vx * scale, y, z + vz * scale)
        else:
            raise TypeError(f"unknown camera event {event!r}")

    def update(self, delta_secs: float) -> tuple[Vec3, Quat] | None:
        """Advance one frame and return the camera's (translation, rotation).

        Returns None for an inactive camera.
        """
        if not self.active:
            return None
        self.last_rotation = _slerp(
            IDENTITY, self.last_rotation, 1.0 - delta_secs * _ROTATION_SETTLE_RATE
        )
        orbit = _quat_mul(_rotation_y(-self.gimbal_x), _rotation_x(-self.gimbal_y))
        offset = _quat_rotate(_quat_mul(self.last_rotation, orbit), (0.0, 0.0, 1.0))
        translation = (
            self.target[0] + offset[0] * self.distance,
            self.target[1] + offset[1] * self.distance,
            self.target[2] + offset[2] * self.distance,
        )
        up = _quat_rotate(self.last_rotation, (0.0, 1.0, 0.0))
        return translation, _look_at(translation, self.target, up)


def apply_camera_controls(
    cameras: Iterable[OrbitCamera], events: Iterable[CameraEvent]
) -> int:
    """Apply events to each camera in turn and return how many were moved.

    Processing stops at the first inactive camera.
    """
    events = list(events)
    if not events:
        return 0

    count = 0
    for camera in cameras:
        if not camera.active:
            return count
        count += 1
        for event in events:
            camera.apply(event)

    if count > 1:
        logger.warning("found %d active orbit cameras, only 1 expected", count)
    return count