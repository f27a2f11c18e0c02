"""
Inference backends for yolox_kit.

Kept apart from the decoder so post-processing can be used without an
inference runtime installed.
"""

from __future__ import annotations

__all__ = []
