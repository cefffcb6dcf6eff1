"""Render Bundle module."""

from bundle_api.render_bundle.request import (
    RenderSearchBundleRequest,
    RenderTransactionBundleRequest,
    RequestValidationError,
)

__all__ = [
    "RenderSearchBundleRequest",
    "RenderTransactionBundleRequest",
    "RequestValidationError",
]
