"""Example plugin registering settings backed by its own state."""

import enum


class Projection(enum.Enum):
    PERSPECTIVE = "perspective"
    ORTHOGRAPHIC = "orthographic"


_state = {"fov": 70.0, "projection": Projection.PERSPECTIVE}


def register(registry):
    module = registry.register_module("Camera Tools", "com.example.cameratools", version="0.9.2")
    registry.add_setting(
        module, "View", "Field of view",
        getter=lambda: _state["fov"],
        setter=lambda value: _state.__setitem__("fov", float(value)),
        default=70.0,
        description="Horizontal field of view in degrees.",
        order=10,
    )
    registry.add_setting(
        module, "View", "Projection",
        getter=lambda: _state["projection"],
        setter=lambda value: _state.__setitem__("projection", value),
        setting_type=Projection,
        default=Projection.PERSPECTIVE,
    )
    registry.add_setting(module, "Debug", "Show frustum", False, default=False, browsable=False)
    registry.register_module("Camera Presets", "com.example.camerapresets", version="0.1.0")
