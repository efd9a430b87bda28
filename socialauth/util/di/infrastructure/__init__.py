"""Infrastructure providers."""

# Import bases
from .github import GitHubProvider
from .google import GoogleProvider
from .oauth import ProviderRegistryProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .github import ProdGitHubProvider  # noqa: F401
from .google import ProdGoogleProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "GitHubProvider",
    "GoogleProvider",
    "PersistenceProvider",
    "ProdGitHubProvider",
    "ProdGoogleProvider",
    "ProdPersistenceProvider",
    "ProviderRegistryProvider",
]
