"""Static device identifier to marketing specification tables."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field

from specmatrix.logging import get_logger

IDENTIFIER_ENV = "SPECMATRIX_MODEL_IDENTIFIER"

logger = get_logger("catalog")


def model_identifier() -> str:
    """Return the hardware identifier, honouring the override variable."""

    if override := os.getenv(IDENTIFIER_ENV):
        return override.strip()
    try:
        machine = platform.machine()
    except OSError:
        machine = ""
    return machine or "unknown"


@dataclass(frozen=True, slots=True)
class GPUSpec:
    name: str
    cores: int
    metal_supported: bool = True
    metal_version: str = "Metal 3"


@dataclass(frozen=True, slots=True)
class ChipSpec:
    name: str | None
    cpu: str | None
    gpu_cores: int | None
    neural_engine_cores: int | None

    def describe(self, total_cores: int, active_cores: int) -> list[str]:
        if self.name is None:
            return [
                "Processor Information",
                f"Total Cores: {total_cores}",
                f"Active Cores: {active_cores}",
            ]
        return [
            f"{self.name} chip",
            self.cpu or "",
            f"{self.gpu_cores}-core GPU",
            f"{self.neural_engine_cores}-core Neural Engine",
            f"Total Cores: {total_cores} (Active: {active_cores})",
        ]


@dataclass(frozen=True, slots=True)
class Camera:
    position: str
    resolution: tuple[str, ...]
    aperture: str
    has_flash: bool
    has_night_mode: bool
    has_portrait_mode: bool

    @property
    def features(self) -> list[str]:
        features = []
        if self.has_flash:
            features.append("Flash")
        if self.has_night_mode:
            features.append("Night Mode")
        if self.has_portrait_mode:
            features.append("Portrait Mode")
        return features


@dataclass(frozen=True, slots=True)
class CameraSystem:
    back: Camera
    front: Camera


@dataclass(frozen=True, slots=True)
class ScreenSpec:
    ppi: int
    physical_size: str


@dataclass(frozen=True, slots=True)
class DeviceSpec:
    identifier: str
    model_name: str
    chip: ChipSpec
    gpu: GPUSpec
    camera: CameraSystem
    screen: ScreenSpec
    is_generic: bool = field(default=False)


_SIX_CORE_CPU = "6-core CPU with 2 performance and 4 efficiency cores"

MODEL_NAMES: dict[str, str] = {
    "iPhone17,3": "iPhone 16",
    "iPhone17,4": "iPhone 16 Plus",
    "iPhone17,1": "iPhone 16 Pro",
    "iPhone17,2": "iPhone 16 Pro Max",
    "iPhone16,1": "iPhone 15 Pro",
    "iPhone16,2": "iPhone 15 Plus",
    "iPhone16,3": "iPhone 15 Pro",
    "iPhone16,4": "iPhone 15 Pro Max",
    "iPhone15,4": "iPhone 15 Pro",
    "iPhone15,5": "iPhone 15 Pro Max",
    "iPhone15,2": "iPhone 15",
    "iPhone15,3": "iPhone 15 Plus",
    "iPhone14,7": "iPhone 14",
    "iPhone14,8": "iPhone 14 Plus",
    "iPhone14,4": "iPhone 14 Pro",
    "iPhone14,5": "iPhone 14 Pro Max",
    "iPhone13,1": "iPhone 13 mini",
    "iPhone13,2": "iPhone 13",
    "iPhone13,3": "iPhone 13 Pro",
    "iPhone13,4": "iPhone 13 Pro Max",
}

_A18_PRO = ChipSpec("A18 Pro", _SIX_CORE_CPU, 6, 18)
_A18 = ChipSpec("A18 Bionic", _SIX_CORE_CPU, 5, 16)
_A17_PRO = ChipSpec("A17 Pro", _SIX_CORE_CPU, 6, 16)
_A16 = ChipSpec("A16 Bionic", _SIX_CORE_CPU, 5, 16)

CHIPS: dict[str, ChipSpec] = {
    "iPhone17,1": _A18_PRO,
    "iPhone17,2": _A18_PRO,
    "iPhone17,3": _A18,
    "iPhone17,4": _A18,
    "iPhone16,1": _A17_PRO,
    "iPhone16,3": _A17_PRO,
    "iPhone16,4": _A17_PRO,
    "iPhone16,2": _A16,
}

_A18_PRO_GPU = GPUSpec("Apple A18 Pro GPU", 6)
_A18_GPU = GPUSpec("Apple A18 GPU", 6)
_A17_PRO_GPU = GPUSpec("Apple A17 Pro GPU", 6)
_A16_GPU = GPUSpec("Apple A16 GPU", 5)

GPUS: dict[str, GPUSpec] = {
    "iPhone17,1": _A18_PRO_GPU,
    "iPhone17,2": _A18_PRO_GPU,
    "iPhone17,3": _A18_GPU,
    "iPhone17,4": _A18_GPU,
    "iPhone16,1": _A17_PRO_GPU,
    "iPhone16,2": _A16_GPU,
    "iPhone16,3": _A17_PRO_GPU,
    "iPhone16,4": _A17_PRO_GPU,
    "iPhone15,4": _A17_PRO_GPU,
    "iPhone15,5": _A17_PRO_GPU,
    "iPhone15,2": _A16_GPU,
    "iPhone15,3": _A16_GPU,
    "iPhone14,7": GPUSpec("Apple A15 GPU", 5),
    "iPhone14,8": GPUSpec("Apple A15 GPU", 5),
    "iPhone14,4": _A16_GPU,
    "iPhone14,5": _A16_GPU,
    "iPhone13,1": GPUSpec("Apple A15 GPU", 4),
    "iPhone13,2": GPUSpec("Apple A15 GPU", 4),
    "iPhone13,3": GPUSpec("Apple A15 GPU", 5),
    "iPhone13,4": GPUSpec("Apple A15 GPU", 5),
}

_TRUEDEPTH = Camera(
    position="Front",
    resolution=("12 MP TrueDepth",),
    aperture="ƒ/1.9",
    has_flash=False,
    has_night_mode=True,
    has_portrait_mode=True,
)


def _pro_back(telephoto: str) -> Camera:
    return Camera(
        position="Back",
        resolution=("48 MP Main (f/1.78)", "12 MP Ultra Wide (f/2.2)", f"12 MP {telephoto} Telephoto"),
        aperture="ƒ/1.78, ƒ/2.2, ƒ/2.8",
        has_flash=True,
        has_night_mode=True,
        has_portrait_mode=True,
    )


_PRO_3X = CameraSystem(back=_pro_back("3x"), front=_TRUEDEPTH)
_DUAL_48 = CameraSystem(
    back=Camera(
        position="Back",
        resolution=("48 MP Main (f/1.6)", "12 MP Ultra Wide (f/2.4)"),
        aperture="ƒ/1.6, ƒ/2.4",
        has_flash=True,
        has_night_mode=True,
        has_portrait_mode=True,
    ),
    front=_TRUEDEPTH,
)

CAMERAS: dict[str, CameraSystem] = {
    "iPhone17,1": _PRO_3X,
    "iPhone17,2": CameraSystem(back=_pro_back("5x"), front=_TRUEDEPTH),
    "iPhone17,3": _DUAL_48,
    "iPhone17,4": _DUAL_48,
    "iPhone16,1": _PRO_3X,
    "iPhone16,3": _PRO_3X,
}

SCREENS: dict[str, ScreenSpec] = {
    "iPhone17,1": ScreenSpec(460, '6.1"'),
    "iPhone17,2": ScreenSpec(460, '6.7"'),
    "iPhone17,3": ScreenSpec(458, '6.1"'),
    "iPhone17,4": ScreenSpec(458, '6.7"'),
    "iPhone16,1": ScreenSpec(460, '6.1"'),
    "iPhone16,2": ScreenSpec(458, '6.7"'),
    "iPhone16,3": ScreenSpec(460, '6.1"'),
    "iPhone16,4": ScreenSpec(460, '6.7"'),
}

GENERIC_MODEL_NAME = "iPhone"
GENERIC_CHIP = ChipSpec(None, None, None, None)
GENERIC_GPU = GPUSpec("Apple GPU", 4)
GENERIC_CAMERA = CameraSystem(
    back=Camera(
        position="Back",
        resolution=("12 MP Main",),
        aperture="ƒ/1.8",
        has_flash=True,
        has_night_mode=True,
        has_portrait_mode=True,
    ),
    front=Camera(
        position="Front",
        resolution=("12 MP TrueDepth",),
        aperture="ƒ/2.2",
        has_flash=False,
        has_night_mode=False,
        has_portrait_mode=True,
    ),
)
GENERIC_SCREEN = ScreenSpec(458, '6.1"')


def lookup(identifier: object) -> DeviceSpec:
    """Resolve ``identifier`` against every table, falling back per table."""

    key = identifier if isinstance(identifier, str) else ""
    known = key in MODEL_NAMES
    if not known:
        logger.debug("Unrecognized device identifier: {!r}", identifier)
    return DeviceSpec(
        identifier=key or "unknown",
        model_name=MODEL_NAMES.get(key, GENERIC_MODEL_NAME),
        chip=CHIPS.get(key, GENERIC_CHIP),
        gpu=GPUS.get(key, GENERIC_GPU),
        camera=CAMERAS.get(key, GENERIC_CAMERA),
        screen=SCREENS.get(key, GENERIC_SCREEN),
        is_generic=not known,
    )
