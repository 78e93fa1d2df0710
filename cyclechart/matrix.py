from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import TypeAlias

import torch


LOGGER = logging.getLogger(__name__)
# Pixels with out-of-range channels are replaced with this marker color.
INVALID_PIXEL = torch.tensor([255, 0, 255, 255], dtype=torch.uint8)

TensorLike: TypeAlias = torch.Tensor


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: TensorLike


@dataclass(frozen=True)
class ReplaceRect:
    x: int
    y: int
    width: int
    height: int
    rect_h_w_4: TensorLike


WriteOp: TypeAlias = FullRewrite | ReplaceRect


@dataclass(frozen=True)
class WriteBatch:
    operations: list[WriteOp]


@dataclass(frozen=True)
class FrameCommit:
    revision: int
    width: int
    height: int
    ts_ns: int


class FrameMatrix:
    """Physical RGBA255 chart surface; each write batch is committed atomically."""

    def __init__(self, height: int, width: int, background: tuple[int, int, int, int] = (255, 255, 255, 255)) -> None:
        if height <= 0 or width <= 0:
            raise ValueError("height and width must be > 0")
        self._lock = threading.Lock()
        self._background = background
        self._revision = 0
        self._matrix = _filled(height, width, background)

    @property
    def height(self) -> int:
        return int(self._matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self._matrix.shape[1])

    @property
    def revision(self) -> int:
        return self._revision

    def read_snapshot(self) -> torch.Tensor:
        with self._lock:
            return self._matrix.clone()

    def resize(self, height: int, width: int) -> bool:
        """Reallocate to a new physical size, cleared to the background. Returns False when unchanged."""
        if height <= 0 or width <= 0:
            raise ValueError("height and width must be > 0")
        with self._lock:
            if (height, width) == tuple(self._matrix.shape[:2]):
                return False
            LOGGER.debug("FrameMatrix resized %dx%d -> %dx%d", self.width, self.height, width, height)
            self._matrix = _filled(height, width, self._background)
            return True

    def submit_write_batch(self, batch: WriteBatch) -> FrameCommit:
        if not batch.operations:
            raise ValueError("write batch must include at least one operation")

        with self._lock:
            staged = self._matrix.clone()
            offending_pixels = 0
            for op in batch.operations:
                staged, op_offending = self._apply_operation(staged, op)
                offending_pixels += op_offending

            if offending_pixels > 0:
                LOGGER.warning(
                    "FrameMatrix write batch sanitized invalid RGBA channels; offending_pixels=%d",
                    offending_pixels,
                )

            self._matrix = staged
            self._revision += 1
            return FrameCommit(
                revision=self._revision,
                width=int(staged.shape[1]),
                height=int(staged.shape[0]),
                ts_ns=time.time_ns(),
            )

    def _apply_operation(self, matrix: torch.Tensor, op: WriteOp) -> tuple[torch.Tensor, int]:
        height, width = int(matrix.shape[0]), int(matrix.shape[1])
        if isinstance(op, FullRewrite):
            return _sanitize_rgba(op.tensor_h_w_4, (height, width, 4))
        if isinstance(op, ReplaceRect):
            if op.width <= 0 or op.height <= 0:
                raise ValueError("rect width/height must be > 0")
            if op.x < 0 or op.y < 0:
                raise ValueError("rect x/y must be >= 0")
            if op.x + op.width > width or op.y + op.height > height:
                raise ValueError("rect exceeds matrix bounds")
            patch, offending = _sanitize_rgba(op.rect_h_w_4, (op.height, op.width, 4))
            matrix[op.y : op.y + op.height, op.x : op.x + op.width, :] = patch
            return matrix, offending
        raise TypeError(f"Unsupported write op: {type(op)!r}")


def _filled(height: int, width: int, color: tuple[int, int, int, int]) -> torch.Tensor:
    return torch.tensor(color, dtype=torch.uint8).view(1, 1, 4).expand(height, width, 4).clone()


def _sanitize_rgba(value: torch.Tensor, expected_shape: tuple[int, ...]) -> tuple[torch.Tensor, int]:
    if not torch.is_tensor(value):
        raise ValueError("rgba payload must be a torch.Tensor")
    if tuple(value.shape) != expected_shape:
        raise ValueError(f"rgba payload has invalid shape: {tuple(value.shape)} expected {expected_shape}")
    if value.dtype == torch.uint8:
        return value.clone(), 0
    if value.dtype == torch.bool or value.is_complex():
        raise ValueError(f"rgba payload must be numeric, got {value.dtype}")
    raw = value.to(torch.float32)
    invalid = torch.any(~torch.isfinite(raw) | (raw < 0) | (raw > 255), dim=-1)
    clamped = torch.clamp(torch.nan_to_num(raw, nan=0.0), 0, 255).to(torch.uint8)
    count = int(invalid.sum().item())
    if count > 0:
        clamped[invalid] = INVALID_PIXEL
    return clamped, count
