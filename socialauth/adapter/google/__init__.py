"""Google OpenID Connect adapter."""

from .client import GoogleAdapter, MockGoogleAdapter, RealGoogleAdapter

__all__ = ["GoogleAdapter", "RealGoogleAdapter", "MockGoogleAdapter"]
