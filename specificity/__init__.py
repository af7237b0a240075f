"""
specificity - Pseudo-Random Test Objects for Python Unit Tests
"""

__version__ = "2.0.0"

# =============================================================================
# CORE TYPES
# =============================================================================
from .types import (
    GenerationFunction,
    Handled,
    NOT_HANDLED,
    ConstructorShape,
    ParameterShape,
    ObjectFactoryError,
    UnconstructibleTypeError,
    NoPublicConstructorError,
    UnsupportedCollectionError,
    ResolutionDepthError,
)

# =============================================================================
# DISTRIBUTIONS
# =============================================================================
from .distributions import (
    Distribution,
    DistributionRegistry,
    DistributionInfo,
    DISTRIBUTIONS,
)

# =============================================================================
# REGISTRY
# =============================================================================
from .registry import (
    ObjectFactoryRegistry,
    object_factory_registrar,
    create_default_registry,
    default_registry,
    reset_default_registry,
)

# =============================================================================
# CUSTOMIZATIONS
# =============================================================================
from .customizations import (
    Customization,
    FunctionCustomization,
)

# =============================================================================
# FACTORY
# =============================================================================
from .factory import (
    ObjectFactory,
    DEFAULT_SEED,
    DEFAULT_MAX_DEPTH,
)

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    "__version__",
    "GenerationFunction",
    "Handled",
    "NOT_HANDLED",
    "ConstructorShape",
    "ParameterShape",
    "ObjectFactoryError",
    "UnconstructibleTypeError",
    "NoPublicConstructorError",
    "UnsupportedCollectionError",
    "ResolutionDepthError",
    "Distribution",
    "DistributionRegistry",
    "DistributionInfo",
    "DISTRIBUTIONS",
    "ObjectFactoryRegistry",
    "object_factory_registrar",
    "create_default_registry",
    "default_registry",
    "reset_default_registry",
    "Customization",
    "FunctionCustomization",
    "ObjectFactory",
    "DEFAULT_SEED",
    "DEFAULT_MAX_DEPTH",
]
